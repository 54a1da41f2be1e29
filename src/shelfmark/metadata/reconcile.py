# ABOUTME: Reconciliation engine merging per-source records into one final record.
# ABOUTME: Votes on title, subject, and authors; asks the Arbiter only on genuine ties.

import logging
from collections import Counter
from collections.abc import Callable, Mapping, Sequence

from shelfmark.classification.codes import is_well_formed, normalize_code
from shelfmark.classification.schedule import MissingScheduleError, ScheduleIndex
from shelfmark.metadata.arbitration import CUSTOM, Arbiter, FirstCandidateArbiter
from shelfmark.metadata.authors import group_variants
from shelfmark.metadata.normalizer import is_unknown_author, normalize_author, normalize_title
from shelfmark.metadata.types import ReconciledRecord, SourceCandidate, SourceRecord

logger = logging.getLogger(__name__)

DEFAULT_AUTHORITATIVE_SOURCE = "loc"


class UnresolvedMetadataError(Exception):
    """Raised when no source returned a usable title, subject, or author."""


def _ranked(values: Sequence[str]) -> list[tuple[str, int]]:
    """Distinct values by descending count, first appearance breaking ties."""
    return Counter(values).most_common()


def _plurality(values: Sequence[str]) -> str | None:
    """The most frequent value if it strictly beats the runner-up."""
    ranked = _ranked(values)
    if not ranked:
        return None
    if len(ranked) == 1 or ranked[0][1] > ranked[1][1]:
        return ranked[0][0]
    return None


def _arbitrate(
    arbiter: Arbiter,
    field: str,
    candidates: list[str],
    on_custom: Callable[[str], str] | None = None,
) -> str | None:
    if candidates:
        choice = arbiter.choose(field, candidates)
        if choice != CUSTOM:
            return choice
    entered = arbiter.enter(field)
    if entered is None or not entered.strip():
        return None
    entered = entered.strip()
    return on_custom(entered) if on_custom else entered


def resolve_title(titles: Sequence[str | None], arbiter: Arbiter) -> str | None:
    """Pick the final title.

    A title repeated by at least two sources among the longest titles wins
    first; otherwise a strict plurality; otherwise the arbiter decides
    (free text when there is no candidate at all).
    """
    present = [t for t in titles if t]
    if present:
        longest = max(len(t) for t in present)
        repeated = [
            title
            for title, count in _ranked([t for t in present if len(t) == longest])
            if count >= 2
        ]
        if repeated:
            return repeated[0]

    winner = _plurality(present)
    if winner is not None:
        return winner

    logger.debug("No title consensus among %s", present)
    return _arbitrate(arbiter, "title", [t for t, _ in _ranked(present)])


def resolve_subject(
    candidates: Sequence[SourceCandidate],
    arbiter: Arbiter,
    *,
    authoritative_source: str = DEFAULT_AUTHORITATIVE_SOURCE,
    lookup: Callable[[str], str | None] | None = None,
) -> str | None:
    """Pick the final subject.

    The authoritative source's subject wins unconditionally. Otherwise
    subjects matched through range entries are dropped when exact ones
    exist, and the rest are put to a plurality vote. A free-text answer is
    looked up as a classification code when ``lookup`` is given.
    """
    for candidate in candidates:
        if candidate.source_id == authoritative_source and candidate.subject:
            return candidate.subject

    pool = [
        c for c in candidates if c.subject and c.source_id != authoritative_source
    ]
    specific = [c for c in pool if not c.subject_from_range]
    if specific:
        pool = specific
    subjects = [c.subject for c in pool if c.subject]

    winner = _plurality(subjects)
    if winner is not None:
        return winner

    def from_code(text: str) -> str:
        if lookup is None:
            return text
        code = normalize_code(text)
        return (lookup(code) if is_well_formed(code) else None) or text

    return _arbitrate(arbiter, "subject", [s for s, _ in _ranked(subjects)], from_code)


def _enter_authors(arbiter: Arbiter) -> tuple[str, ...]:
    """Collect free-text authors until a blank (or repeated) entry."""
    entered: list[str] = []
    while True:
        value = arbiter.enter("authors")
        if value is None or not value.strip():
            break
        name = normalize_author(value)
        if name in entered:
            break
        entered.append(name)
    return tuple(entered)


def resolve_authors(
    candidates: Sequence[SourceCandidate],
    arbiter: Arbiter,
    *,
    author_capable_sources: int = 0,
) -> tuple[str, ...]:
    """Pick the final authors.

    Variants of one person collapse to their longest spelling. When enough
    author-capable sources answered, a name only one source reported (and
    with no variants elsewhere) needs the arbiter's confirmation.
    """
    reporters: dict[str, set[str]] = {}
    for candidate in candidates:
        for author in candidate.authors:
            reporters.setdefault(author, set()).add(candidate.source_id)
    all_authors = list(reporters)

    if not all_authors:
        return _enter_authors(arbiter)
    if len(all_authors) == 1:
        return (all_authors[0],)

    groups = group_variants(all_authors)
    if len(groups) == 1:
        return (groups[0].representative,)

    answered = sum(1 for c in candidates if c.authors)
    selective = answered >= author_capable_sources / 2

    kept: list[str] = []
    for group in groups:
        representative = group.representative
        if selective and group.is_singleton and len(reporters[representative]) == 1:
            context = [g.representative for g in groups if g is not group]
            if not arbiter.confirm("authors", representative, context):
                logger.debug("Dropped minority author %r", representative)
                continue
        kept.append(representative)
    return tuple(kept)


class ReconciliationEngine:
    """Merges the records gathered for one book into a ReconciledRecord.

    Raw call numbers are normalized and resolved through the schedule index
    here, so voting only ever sees subject lines.
    """

    def __init__(
        self,
        index: ScheduleIndex,
        arbiter: Arbiter | None = None,
        *,
        authoritative_source: str = DEFAULT_AUTHORITATIVE_SOURCE,
        author_capable_sources: frozenset[str] = frozenset(),
    ) -> None:
        self._index = index
        self._arbiter = arbiter or FirstCandidateArbiter()
        self.authoritative_source = authoritative_source
        self.author_capable_sources = author_capable_sources

    def _lookup(self, code: str) -> str | None:
        try:
            return self._index.lookup(code)
        except MissingScheduleError as exc:
            logger.warning("Schedule lookup failed for %s: %s", code, exc)
            return None

    def candidate_from_record(self, source_id: str, record: SourceRecord) -> SourceCandidate:
        """Normalize one source's record and resolve its call number."""
        title = normalize_title(record.title) if record.title else None

        authors: list[str] = []
        for raw in record.authors:
            name = normalize_author(raw)
            if name and not is_unknown_author(name) and name not in authors:
                authors.append(name)

        code = normalize_code(record.raw_code) if record.raw_code else None
        subject = None
        from_range = False
        if code and is_well_formed(code):
            try:
                match = self._index.resolve(code)
            except MissingScheduleError as exc:
                logger.warning("Schedule lookup failed for %s from %s: %s", code, source_id, exc)
                match = None
            if match is not None:
                subject = match.subject
                from_range = match.from_range
            else:
                logger.debug("Code %s from %s has no schedule match", code, source_id)
        elif code:
            logger.debug("Ignoring malformed code %r from %s", record.raw_code, source_id)

        return SourceCandidate(
            source_id=source_id,
            title=title or None,
            subject=subject,
            authors=tuple(authors),
            code=code or None,
            subject_from_range=from_range,
        )

    def reconcile(
        self, records: Mapping[str, SourceRecord | None], isbn: str | None = None
    ) -> ReconciledRecord:
        """Merge per-source records (None for sources that failed).

        Raises:
            UnresolvedMetadataError: If no source produced any usable field.
        """
        candidates = [
            self.candidate_from_record(source_id, record)
            for source_id, record in records.items()
            if record is not None
        ]
        for candidate in candidates:
            logger.debug(
                "%s from %s: code=%s subject=%r",
                isbn,
                candidate.source_id,
                candidate.code,
                candidate.subject,
            )
        if not any(c.has_data for c in candidates):
            raise UnresolvedMetadataError(
                f"Could not resolve metadata for {isbn or 'book'}: no source returned usable data"
            )

        title = resolve_title([c.title for c in candidates], self._arbiter)
        subject = resolve_subject(
            candidates,
            self._arbiter,
            authoritative_source=self.authoritative_source,
            lookup=self._lookup,
        )
        authors = resolve_authors(
            candidates,
            self._arbiter,
            author_capable_sources=len(self.author_capable_sources),
        )
        logger.debug("Reconciled %s: title=%r subject=%r authors=%r", isbn, title, subject, authors)
        return ReconciledRecord(title=title, subject=subject, authors=authors)
