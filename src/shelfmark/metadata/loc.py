# ABOUTME: Library of Congress source: the authoritative call number for a book.
# ABOUTME: Queries the loc.gov JSON search API and parses its result shape.

import logging
from typing import Any

from shelfmark.metadata.http import HttpClient, MetadataFetchError
from shelfmark.metadata.provider import clean_isbn
from shelfmark.metadata.types import SourceRecord

logger = logging.getLogger(__name__)

SOURCE_ID = "loc"
_LOC_SEARCH_URL = "https://www.loc.gov/books/"


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _first_text(*values: Any) -> str | None:
    for value in values:
        for item in _as_list(value):
            if item and str(item).strip():
                return str(item).strip()
    return None


def _matches_isbn(result: dict[str, Any], isbn: str) -> bool:
    numbers = _as_list(result.get("number")) + _as_list(result.get("number_isbn"))
    return any(clean_isbn(str(n)) == isbn for n in numbers)


def parse_loc_response(data: dict[str, Any], isbn: str) -> SourceRecord | None:
    """Parse a loc.gov search response into a SourceRecord.

    Prefers the result whose ISBN list contains the queried ISBN, else the
    first result. Catalog records keep names as "Last, First, dates" and
    titles with their statement of responsibility; cleanup happens during
    reconciliation.
    """
    results = [r for r in _as_list(data.get("results")) if isinstance(r, dict)]
    if not results:
        return None
    result = next((r for r in results if _matches_isbn(r, isbn)), results[0])
    item = result.get("item") if isinstance(result.get("item"), dict) else {}

    authors = _as_list(item.get("contributors")) or _as_list(result.get("contributor"))
    record = SourceRecord(
        source_id=SOURCE_ID,
        title=_first_text(item.get("title"), result.get("title")),
        authors=tuple(str(a).strip() for a in authors if a and str(a).strip()),
        raw_code=_first_text(item.get("call_number"), result.get("shelf_id")),
    )
    return None if record.is_empty else record


class LibraryOfCongressSource:
    """Candidate source backed by the loc.gov search API."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return SOURCE_ID

    @property
    def reports_authors(self) -> bool:
        return True

    def fetch(self, isbn: str) -> SourceRecord | None:
        isbn = clean_isbn(isbn)
        try:
            data = self._http.get(_LOC_SEARCH_URL, params={"q": isbn, "fo": "json"})
        except MetadataFetchError as exc:
            logger.warning("Library of Congress lookup failed for %s: %s", isbn, exc)
            return None
        return parse_loc_response(data or {}, isbn)
