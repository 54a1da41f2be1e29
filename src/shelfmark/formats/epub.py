# ABOUTME: EPUB metadata reading and writing using ebooklib.
# ABOUTME: Reads the ISBN and embedded title/authors; writes resolved title, authors, and subject.

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ebooklib import epub

from shelfmark.metadata.types import ReconciledRecord, SourceRecord

logger = logging.getLogger(__name__)

EMBEDDED_SOURCE_ID = "embedded"

_DC_NS = "http://purl.org/dc/elements/1.1/"


class EpubReadError(Exception):
    """Raised when an EPUB file cannot be read or parsed."""


class EpubWriteError(Exception):
    """Raised when metadata cannot be written into an EPUB file."""


@dataclass
class EpubMetadata:
    """The fields shelfmark needs from a document's embedded metadata."""

    title: str | None
    authors: list[str] = field(default_factory=list)
    subjects: list[str] = field(default_factory=list)
    isbn: str | None = None
    source_path: Path | None = None

    def as_source_record(self) -> SourceRecord:
        """The embedded metadata as one more voting source."""
        return SourceRecord(
            source_id=EMBEDDED_SOURCE_ID,
            title=self.title,
            authors=tuple(self.authors),
        )


def _get_values(book: epub.EpubBook, name: str) -> list[str]:
    entries = book.get_metadata("DC", name)
    return [str(value).strip() for value, _attrs in entries if value and str(value).strip()]


def _detect_isbn(book: epub.EpubBook) -> str | None:
    """Find an ISBN among the dc:identifier entries."""
    values: list[str] = []
    for value, attrs in book.get_metadata("DC", "identifier"):
        if not value:
            continue
        scheme = attrs.get("opf:scheme", attrs.get("scheme", "")).lower()
        text = str(value).strip()
        if scheme.startswith("isbn"):
            return text
        values.append(text)

    for text in values:
        cleaned = text.lower().removeprefix("urn:isbn:").removeprefix("isbn:")
        cleaned = cleaned.replace("-", "").replace(" ", "").upper()
        if len(cleaned) in (10, 13) and cleaned.replace("X", "").isdigit():
            return cleaned
    return None


def read_epub_metadata(path: Path) -> EpubMetadata:
    """Extract embedded metadata from an EPUB file.

    Raises:
        EpubReadError: If the file cannot be read or parsed.
    """
    if not path.exists():
        raise EpubReadError(f"File not found: {path}")

    try:
        book = epub.read_epub(str(path), options={"ignore_ncx": True})
    except Exception as exc:
        raise EpubReadError(f"Failed to read EPUB: {path}: {exc}") from exc

    titles = _get_values(book, "title")
    return EpubMetadata(
        title=titles[0] if titles else None,
        authors=_get_values(book, "creator"),
        subjects=_get_values(book, "subject"),
        isbn=_detect_isbn(book),
        source_path=path,
    )


def _fix_toc_uids(book: epub.EpubBook) -> None:
    """Assign uids to TOC Link items that are missing them.

    ebooklib sometimes reads TOC entries without preserving the uid attribute,
    which causes lxml to fail when writing the NCX.
    """
    for i, item in enumerate(book.toc):
        if isinstance(item, epub.Link) and not item.uid:
            item.uid = f"navpoint-{i}"
        elif isinstance(item, tuple) and len(item) == 2:
            section, children = item
            if isinstance(section, epub.Link) and not section.uid:
                section.uid = f"navpoint-section-{i}"
            for j, child in enumerate(children):
                if isinstance(child, epub.Link) and not child.uid:
                    child.uid = f"navpoint-{i}-{j}"


def _set_dc_metadata(book: epub.EpubBook, name: str, values: list[str]) -> None:
    """Replace every Dublin Core entry for a field with the given values."""
    book.metadata.setdefault(_DC_NS, {})
    book.metadata[_DC_NS].pop(name, None)
    for value in values:
        book.add_metadata("DC", name, value)


def write_epub_metadata(path: Path, record: ReconciledRecord) -> None:
    """Write a reconciled record into an existing EPUB, in place.

    Only fields the record resolved are written; the subject replaces any
    existing dc:subject entries.

    Raises:
        EpubReadError: If the file cannot be read.
        EpubWriteError: If the updated file cannot be written.
    """
    if not path.exists():
        raise EpubReadError(f"File not found: {path}")

    try:
        book = epub.read_epub(str(path))
    except Exception as exc:
        raise EpubReadError(f"Failed to read EPUB: {path}: {exc}") from exc

    if record.title:
        _set_dc_metadata(book, "title", [record.title])
    if record.authors:
        _set_dc_metadata(book, "creator", list(record.authors))
    if record.subject:
        _set_dc_metadata(book, "subject", [record.subject])

    _fix_toc_uids(book)

    try:
        epub.write_epub(str(path), book)
    except Exception as exc:
        raise EpubWriteError(f"Failed to write EPUB: {path}: {exc}") from exc
    logger.debug("Wrote metadata to %s", path)
