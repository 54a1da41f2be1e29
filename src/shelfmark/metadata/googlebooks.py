# ABOUTME: Google Books source: titles and authors, never a classification code.
# ABOUTME: Queries the volumes API by ISBN and parses the volumeInfo payload.

import logging
from typing import Any

from shelfmark.metadata.http import HttpClient, MetadataFetchError
from shelfmark.metadata.provider import clean_isbn
from shelfmark.metadata.types import SourceRecord

logger = logging.getLogger(__name__)

SOURCE_ID = "googlebooks"
_VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"


def parse_volumes_response(data: dict[str, Any]) -> SourceRecord | None:
    """Parse a volumes search response; uses the first volume only."""
    items = data.get("items") or []
    if not items:
        return None
    info = items[0].get("volumeInfo", {})
    record = SourceRecord(
        source_id=SOURCE_ID,
        title=info.get("title"),
        authors=tuple(a for a in info.get("authors", []) if a),
    )
    return None if record.is_empty else record


class GoogleBooksSource:
    """Candidate source backed by the Google Books volumes API."""

    def __init__(self, http_client: HttpClient, api_key: str | None = None) -> None:
        self._http = http_client
        self._api_key = api_key

    @property
    def name(self) -> str:
        return SOURCE_ID

    @property
    def reports_authors(self) -> bool:
        return True

    def fetch(self, isbn: str) -> SourceRecord | None:
        params = {"q": f"isbn:{clean_isbn(isbn)}"}
        if self._api_key:
            params["key"] = self._api_key
        try:
            data = self._http.get(_VOLUMES_URL, params=params)
        except MetadataFetchError as exc:
            logger.warning("Google Books lookup failed for %s: %s", isbn, exc)
            return None
        return parse_volumes_response(data or {})
