# ABOUTME: Metadata package: source records, normalization, arbitration, and reconciliation.
# ABOUTME: Exports the data types and the ReconciliationEngine used throughout shelfmark.

from shelfmark.metadata.arbitration import CUSTOM, Arbiter, FirstCandidateArbiter
from shelfmark.metadata.provider import CandidateSource
from shelfmark.metadata.reconcile import ReconciliationEngine, UnresolvedMetadataError
from shelfmark.metadata.types import (
    AuthorVariantGroup,
    ReconciledRecord,
    SourceCandidate,
    SourceRecord,
)

__all__ = [
    "CUSTOM",
    "Arbiter",
    "AuthorVariantGroup",
    "CandidateSource",
    "FirstCandidateArbiter",
    "ReconciledRecord",
    "ReconciliationEngine",
    "SourceCandidate",
    "SourceRecord",
    "UnresolvedMetadataError",
]
