# ABOUTME: Parsing functions for Open Library API JSON responses.
# ABOUTME: Converts the Books API and edition payloads into SourceRecord instances.

from typing import Any

from shelfmark.metadata.types import SourceRecord

SOURCE_ID = "openlibrary"


def _first(values: Any) -> str | None:
    if isinstance(values, list) and values:
        value = values[0]
        return str(value).strip() if value else None
    return None


def parse_books_api_response(data: dict[str, Any], isbn: str) -> SourceRecord | None:
    """Parse a Books API (``jscmd=data``) response into a SourceRecord.

    The payload is keyed by bibkey (``"ISBN:<isbn>"``); an empty object
    means Open Library has no edition for the ISBN.
    """
    entry = data.get(f"ISBN:{isbn}")
    if not entry and data:
        entry = next(iter(data.values()))
    if not isinstance(entry, dict):
        return None

    authors = tuple(
        str(author["name"]).strip()
        for author in entry.get("authors", [])
        if isinstance(author, dict) and author.get("name")
    )
    classifications = entry.get("classifications", {})
    raw_code = _first(classifications.get("lc_classifications"))

    record = SourceRecord(
        source_id=SOURCE_ID,
        title=entry.get("title"),
        authors=authors,
        raw_code=raw_code,
    )
    return None if record.is_empty else record


def parse_edition_response(data: dict[str, Any], author_names: list[str]) -> SourceRecord | None:
    """Parse an ``/isbn/<isbn>.json`` edition response.

    Edition payloads only reference authors by key, so the caller passes
    the names it resolved from the author endpoint.
    """
    record = SourceRecord(
        source_id=SOURCE_ID,
        title=data.get("title"),
        authors=tuple(author_names),
        raw_code=_first(data.get("lc_classifications")),
    )
    return None if record.is_empty else record


def edition_author_keys(data: dict[str, Any]) -> list[str]:
    """Author keys (``/authors/OL123A``) referenced by an edition response."""
    return [entry["key"] for entry in data.get("authors", []) if entry.get("key")]


def parse_author_name(data: dict[str, Any]) -> str | None:
    """Extract the author name from an Open Library Author response."""
    name = data.get("name")
    return str(name).strip() if name else None
