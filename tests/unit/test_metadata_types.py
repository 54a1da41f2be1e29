# ABOUTME: Unit tests for the reconciliation data structures.
# ABOUTME: Validates SourceRecord, SourceCandidate, ReconciledRecord, and AuthorVariantGroup.

import dataclasses

import pytest

from shelfmark.metadata.types import (
    AuthorVariantGroup,
    ReconciledRecord,
    SourceCandidate,
    SourceRecord,
)


class TestSourceRecord:
    """Tests for SourceRecord."""

    def test_minimal_construction(self) -> None:
        """Only the source id is required."""
        record = SourceRecord("loc")
        assert record.title is None
        assert record.authors == ()
        assert record.raw_code is None
        assert record.is_empty

    def test_not_empty_with_code_only(self) -> None:
        """A raw code alone makes a record non-empty."""
        assert not SourceRecord("loc", raw_code="QA76.73.P98").is_empty

    def test_is_immutable(self) -> None:
        """Records cannot be modified."""
        record = SourceRecord("loc", title="Dune")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.title = "Emma"  # type: ignore[misc]


class TestSourceCandidate:
    """Tests for SourceCandidate."""

    def test_code_alone_is_not_data(self) -> None:
        """An unmatched code contributes nothing to the vote."""
        candidate = SourceCandidate("openlibrary", code="ZZ999")
        assert not candidate.has_data

    def test_any_field_is_data(self) -> None:
        """An author or subject counts as data."""
        assert SourceCandidate("loc", authors=("Mark Lutz",)).has_data
        assert SourceCandidate("loc", subject="Q - Science").has_data


class TestReconciledRecord:
    """Tests for ReconciledRecord."""

    def test_equality_ignores_author_order(self) -> None:
        """Author order does not affect equality or hash."""
        a = ReconciledRecord(title="Good Omens", authors=("Terry Pratchett", "Neil Gaiman"))
        b = ReconciledRecord(title="Good Omens", authors=("Neil Gaiman", "Terry Pratchett"))
        assert a == b
        assert hash(a) == hash(b)

    def test_inequality_on_subject(self) -> None:
        """Records differing in subject are unequal."""
        assert ReconciledRecord(subject="Q - Science") != ReconciledRecord(subject=None)

    def test_authors_joined(self) -> None:
        """Authors are joined with '; '."""
        record = ReconciledRecord(authors=("Terry Pratchett", "Neil Gaiman"))
        assert record.authors_joined == "Terry Pratchett; Neil Gaiman"

    def test_empty(self) -> None:
        """A record with no fields is empty."""
        assert ReconciledRecord().is_empty
        assert ReconciledRecord().authors_joined == ""


class TestAuthorVariantGroup:
    """Tests for AuthorVariantGroup."""

    def test_longest_variant_represents(self) -> None:
        """The longest variant represents the group."""
        group = AuthorVariantGroup(["J. Smith", "John Smith"])
        assert group.representative == "John Smith"
        assert not group.is_singleton

    def test_first_seen_wins_length_tie(self) -> None:
        """On a length tie the first variant wins."""
        group = AuthorVariantGroup(["Lutz, M.", "M. Lutz."])
        assert group.representative == "Lutz, M."

    def test_singleton(self) -> None:
        """A one-name group is a singleton."""
        assert AuthorVariantGroup(["Umberto Eco"]).is_singleton
