# ABOUTME: Core metadata data structures for bibliographic reconciliation.
# ABOUTME: SourceRecord (raw per-source), SourceCandidate (code resolved), and ReconciledRecord (final).

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceRecord:
    """What one source returned for a lookup, after source-specific parsing.

    ``raw_code`` is the call number exactly as the source reported it; it
    has not been normalized or checked against the schedule yet.
    """

    source_id: str
    title: str | None = None
    authors: tuple[str, ...] = ()
    raw_code: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.authors or self.raw_code)


@dataclass(frozen=True)
class SourceCandidate:
    """A source's contribution to reconciliation.

    ``subject`` is a resolved schedule subject line, never a raw code.
    ``subject_from_range`` marks subjects matched through a collapsed range
    entry, which are less specific than exact matches.
    """

    source_id: str
    title: str | None = None
    subject: str | None = None
    authors: tuple[str, ...] = ()
    code: str | None = None
    subject_from_range: bool = False

    @property
    def has_data(self) -> bool:
        return bool(self.title or self.subject or self.authors)


@dataclass(frozen=True, eq=False)
class ReconciledRecord:
    """The final record handed to a metadata writer.

    Authors keep a display order, but equality treats them as a set.
    """

    title: str | None = None
    subject: str | None = None
    authors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def authors_joined(self) -> str:
        """Semicolon-joined authors for writers that take a single field."""
        return "; ".join(self.authors)

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.subject or self.authors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReconciledRecord):
            return NotImplemented
        return (
            self.title == other.title
            and self.subject == other.subject
            and set(self.authors) == set(other.authors)
        )

    def __hash__(self) -> int:
        return hash((self.title, self.subject, frozenset(self.authors)))


@dataclass
class AuthorVariantGroup:
    """Raw author strings judged to name the same person."""

    variants: list[str] = field(default_factory=list)

    @property
    def representative(self) -> str:
        """The longest raw variant; the first seen wins a length tie."""
        return max(self.variants, key=len)

    @property
    def is_singleton(self) -> bool:
        return len(self.variants) == 1
