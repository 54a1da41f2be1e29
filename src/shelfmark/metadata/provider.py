# ABOUTME: CandidateSource protocol defining the contract for bibliographic sources.
# ABOUTME: Any lookup service (Library of Congress, Open Library, Google Books) implements this.

import re
from typing import Protocol, runtime_checkable

from shelfmark.metadata.types import SourceRecord

_ISBN_STRIP_RE = re.compile(r"[\s-]")


def clean_isbn(isbn: str) -> str:
    """Strip hyphens and spaces from an ISBN."""
    return _ISBN_STRIP_RE.sub("", isbn).upper()


@runtime_checkable
class CandidateSource(Protocol):
    """Protocol for sources queried by ISBN during resolution.

    ``fetch`` returns None when the source has nothing for the ISBN or
    failed; it never raises for network trouble. ``reports_authors`` marks
    sources whose records normally carry author names.
    """

    @property
    def name(self) -> str: ...

    @property
    def reports_authors(self) -> bool: ...

    def fetch(self, isbn: str) -> SourceRecord | None: ...
