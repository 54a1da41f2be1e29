# ABOUTME: Per-book resolution: query every source, then reconcile their records.
# ABOUTME: ResolutionContext carries the schedule index and source configuration explicitly.

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from shelfmark.classification.schedule import ScheduleIndex
from shelfmark.metadata.arbitration import Arbiter
from shelfmark.metadata.googlebooks import GoogleBooksSource
from shelfmark.metadata.http import HttpClient, ShelfmarkHttpClient
from shelfmark.metadata.loc import LibraryOfCongressSource
from shelfmark.metadata.normalizer import normalize_embedded
from shelfmark.metadata.openlibrary import OpenLibrarySource
from shelfmark.metadata.provider import CandidateSource
from shelfmark.metadata.reconcile import DEFAULT_AUTHORITATIVE_SOURCE, ReconciliationEngine
from shelfmark.metadata.types import ReconciledRecord, SourceRecord

logger = logging.getLogger(__name__)


def default_sources(http_client: HttpClient | None = None) -> list[CandidateSource]:
    """The standard source line-up, sharing one HTTP client."""
    http = http_client or ShelfmarkHttpClient()
    return [
        LibraryOfCongressSource(http),
        OpenLibrarySource(http),
        GoogleBooksSource(http),
    ]


@dataclass
class ResolutionContext:
    """Reference data and configuration shared by every lookup in a run.

    Built once and passed down instead of living in module globals.
    """

    index: ScheduleIndex
    sources: list[CandidateSource] = field(default_factory=list)
    authoritative_source: str = DEFAULT_AUTHORITATIVE_SOURCE

    @classmethod
    def create(
        cls,
        schedule_dir: Path | None = None,
        sources: Sequence[CandidateSource] | None = None,
    ) -> "ResolutionContext":
        return cls(
            index=ScheduleIndex(schedule_dir),
            sources=list(sources) if sources is not None else default_sources(),
        )

    @property
    def author_capable_sources(self) -> frozenset[str]:
        return frozenset(s.name for s in self.sources if s.reports_authors)

    def engine(self, arbiter: Arbiter | None = None) -> ReconciliationEngine:
        return ReconciliationEngine(
            self.index,
            arbiter,
            authoritative_source=self.authoritative_source,
            author_capable_sources=self.author_capable_sources,
        )


def gather_records(isbn: str, sources: Sequence[CandidateSource]) -> dict[str, SourceRecord | None]:
    """Query each source in turn; a source that fails contributes None."""
    records: dict[str, SourceRecord | None] = {}
    for source in sources:
        record = source.fetch(isbn)
        if record is None:
            logger.info("%s returned nothing for %s", source.name, isbn)
        records[source.name] = record
    return records


def resolve_isbn(
    isbn: str,
    context: ResolutionContext,
    arbiter: Arbiter | None = None,
    *,
    embedded: SourceRecord | None = None,
) -> ReconciledRecord:
    """Resolve the final metadata for one ISBN.

    ``embedded`` adds the document's own metadata as one more vote, after
    the mangled-title cleanup.

    Raises:
        UnresolvedMetadataError: If no source produced any usable field.
    """
    records = gather_records(isbn, context.sources)
    if embedded is not None:
        records[embedded.source_id] = normalize_embedded(embedded)
    return context.engine(arbiter).reconcile(records, isbn)
