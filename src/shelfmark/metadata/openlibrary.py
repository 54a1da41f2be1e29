# ABOUTME: Open Library source implementation.
# ABOUTME: Looks an ISBN up through the Books API, falling back to the edition endpoint.

import logging

from shelfmark.metadata.http import HttpClient, MetadataFetchError
from shelfmark.metadata.openlibrary_parser import (
    SOURCE_ID,
    edition_author_keys,
    parse_author_name,
    parse_books_api_response,
    parse_edition_response,
)
from shelfmark.metadata.provider import clean_isbn
from shelfmark.metadata.types import SourceRecord

logger = logging.getLogger(__name__)

_OL_BASE = "https://openlibrary.org"


class OpenLibrarySource:
    """Candidate source backed by the Open Library API.

    Uses dependency-injected HttpClient for testability.
    """

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return SOURCE_ID

    @property
    def reports_authors(self) -> bool:
        return True

    def fetch(self, isbn: str) -> SourceRecord | None:
        """Look up one ISBN; None when Open Library has nothing or fails."""
        isbn = clean_isbn(isbn)
        params = {"bibkeys": f"ISBN:{isbn}", "format": "json", "jscmd": "data"}
        try:
            data = self._http.get(f"{_OL_BASE}/api/books", params=params)
        except MetadataFetchError as exc:
            logger.warning("Open Library lookup failed for %s: %s", isbn, exc)
            return None

        record = parse_books_api_response(data or {}, isbn)
        if record is not None:
            return record
        return self._fetch_edition(isbn)

    def _fetch_edition(self, isbn: str) -> SourceRecord | None:
        try:
            data = self._http.get(f"{_OL_BASE}/isbn/{isbn}.json")
        except MetadataFetchError as exc:
            logger.debug("Open Library edition lookup failed for %s: %s", isbn, exc)
            return None

        names: list[str] = []
        for author_key in edition_author_keys(data):
            try:
                name = parse_author_name(self._http.get(f"{_OL_BASE}{author_key}.json"))
            except MetadataFetchError:
                continue
            if name:
                names.append(name)
        return parse_edition_response(data, names)
