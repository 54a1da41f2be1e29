# ABOUTME: Unit tests for title and author normalization pipelines.
# ABOUTME: Also covers splitting of mangled embedded titles and author detection.

import pytest

from shelfmark.metadata.normalizer import (
    _detect_author_in_title,
    _is_likely_person_name,
    _needs_splitting,
    _split_camel_case,
    drop_trailing_period,
    is_unknown_author,
    normalize_author,
    normalize_embedded,
    normalize_title,
    split_concatenated,
    strip_diacritics,
)
from shelfmark.metadata.types import SourceRecord

TITLE_SAMPLES = [
    "Learning Python / Mark Lutz.",
    "The name of the rose [electronic resource] :",
    "  Dune.  ",
    "Wait...",
    "A:.",
    "Catch-22",
]

AUTHOR_SAMPLES = [
    "Eco, Umberto, 1932-2016",
    "Lutz, Mark, 1960-",
    "Tolkien, J. R. R. (John Ronald Reuel), 1892-1973",
    "Smith, John, editor.",
    "Jane Doe (Editor)",
    "mark lutz",
    "Doe, John,",
    "King, Martin Luther, Jr., 1929-1968",
]


class TestNormalizeTitle:
    """Tests for the title pipeline."""

    def test_statement_of_responsibility_removed(self) -> None:
        """Text after ' / ' is cut off."""
        assert normalize_title("Learning Python / Mark Lutz.") == "Learning Python"

    def test_bracketed_medium_and_separator_removed(self) -> None:
        """Bracketed medium and a dangling separator are removed."""
        assert (
            normalize_title("The name of the rose [electronic resource] :")
            == "The name of the rose"
        )

    def test_trailing_period_and_whitespace_removed(self) -> None:
        """Surrounding whitespace and a final period are removed."""
        assert normalize_title("  Dune.  ") == "Dune"

    def test_ellipsis_kept(self) -> None:
        """An ellipsis is not treated as a final period."""
        assert normalize_title("Wait...") == "Wait..."

    def test_hyphenated_title_untouched(self) -> None:
        """Hyphenated titles pass through unchanged."""
        assert normalize_title("Catch-22") == "Catch-22"

    @pytest.mark.parametrize("title", TITLE_SAMPLES)
    def test_idempotent(self, title: str) -> None:
        """Normalizing a title twice changes nothing."""
        once = normalize_title(title)
        assert normalize_title(once) == once


class TestNormalizeAuthor:
    """Tests for the author pipeline."""

    def test_life_dates_removed(self) -> None:
        """Closed life dates are removed."""
        assert normalize_author("Eco, Umberto, 1932-2016") == "Eco, Umberto"

    def test_open_life_dates_removed(self) -> None:
        """Open life dates are removed."""
        assert normalize_author("Lutz, Mark, 1960-") == "Lutz, Mark"

    def test_parenthesized_fuller_form_removed_initial_kept(self) -> None:
        """The fuller form goes; the period of the last initial stays."""
        assert (
            normalize_author("Tolkien, J. R. R. (John Ronald Reuel), 1892-1973")
            == "Tolkien, J. R. R."
        )

    def test_relator_term_removed(self) -> None:
        """A relator term such as 'editor' is removed."""
        assert normalize_author("Smith, John, editor.") == "Smith, John"

    def test_parenthesized_role_removed(self) -> None:
        """A parenthesized role is removed."""
        assert normalize_author("Jane Doe (Editor)") == "Jane Doe"

    def test_lowercase_name_capitalized(self) -> None:
        """An all-lowercase name is capitalized."""
        assert normalize_author("mark lutz") == "Mark Lutz"

    def test_trailing_comma_removed(self) -> None:
        """A dangling comma is removed."""
        assert normalize_author("Doe, John,") == "Doe, John"

    def test_generational_suffix_keeps_period(self) -> None:
        """The period of 'Jr.' is part of the name."""
        assert normalize_author("King, Martin Luther, Jr.") == "King, Martin Luther, Jr."

    def test_suffix_kept_when_life_dates_removed(self) -> None:
        """Life dates after a suffix go; the suffix stays whole."""
        assert (
            normalize_author("King, Martin Luther, Jr., 1929-1968")
            == "King, Martin Luther, Jr."
        )

    @pytest.mark.parametrize("name", AUTHOR_SAMPLES)
    def test_idempotent(self, name: str) -> None:
        """Normalizing a name twice changes nothing."""
        once = normalize_author(name)
        assert normalize_author(once) == once


class TestSmallSteps:
    """Tests for individual text steps."""

    def test_trailing_period_after_initial_kept(self) -> None:
        """The period after an initial is kept."""
        assert drop_trailing_period("Doe, J.") == "Doe, J."

    def test_trailing_period_of_abbreviation_kept(self) -> None:
        """The period of a known abbreviation is kept."""
        assert drop_trailing_period("Smith Jr.") == "Smith Jr."
        assert drop_trailing_period("Acme Inc.") == "Acme Inc."

    def test_trailing_period_after_word_dropped(self) -> None:
        """A full stop after a word is dropped."""
        assert drop_trailing_period("Dune.") == "Dune"

    def test_strip_diacritics(self) -> None:
        """Accented letters lose their accents."""
        assert strip_diacritics("Gabriel García Márquez") == "Gabriel Garcia Marquez"

    @pytest.mark.parametrize("name", ["Unknown", "various", " Anonymous ", "", "N/A"])
    def test_unknown_authors(self, name: str) -> None:
        """Placeholder names count as unknown."""
        assert is_unknown_author(name)

    def test_real_author_is_known(self) -> None:
        """A real name is not a placeholder."""
        assert not is_unknown_author("Umberto Eco")


class TestNeedsSplitting:
    """Tests for detecting mangled titles."""

    def test_clean_title(self) -> None:
        """A spaced title needs no splitting."""
        assert _needs_splitting("The Name of the Rose") is False

    def test_camel_case(self) -> None:
        """CamelCase needs splitting."""
        assert _needs_splitting("TheTemplarLegacy") is True

    def test_long_spaceless_string(self) -> None:
        """A long lowercase run needs splitting."""
        assert _needs_splitting("thetemplarlegacy") is True

    def test_short_words(self) -> None:
        """Short single words are left alone."""
        assert _needs_splitting("Dune") is False
        assert _needs_splitting("1984") is False

    def test_legitimate_hyphen(self) -> None:
        """A hyphenated title is left alone."""
        assert _needs_splitting("Catch-22") is False

    def test_underscores(self) -> None:
        """Underscore-separated words need splitting."""
        assert _needs_splitting("The_Templar_Legacy") is True

    def test_blank(self) -> None:
        """Blank text needs no splitting."""
        assert _needs_splitting("   ") is False


class TestSplitConcatenated:
    """Tests for splitting concatenated words."""

    def test_camel_case_parts(self) -> None:
        """CamelCase splits at case and digit boundaries."""
        assert _split_camel_case("HTMLParser") == ["HTML", "Parser"]
        assert _split_camel_case("Fahrenheit451") == ["Fahrenheit", "451"]

    def test_camel_case_title(self) -> None:
        """A CamelCase title is spaced out."""
        assert split_concatenated("TheTemplarLegacy") == "The Templar Legacy"

    def test_hyphen_separated_segments(self) -> None:
        """Each hyphen-separated segment is split."""
        assert split_concatenated("SteveBerry-TheTemplarLegacy") == (
            "Steve Berry The Templar Legacy"
        )

    def test_underscore_separated(self) -> None:
        """Underscores become spaces."""
        assert split_concatenated("The_Templar_Legacy") == "The Templar Legacy"

    def test_already_clean(self) -> None:
        """A clean title is unchanged."""
        assert split_concatenated("The Templar Legacy") == "The Templar Legacy"

    def test_lowercase_run_uses_wordninja(self) -> None:
        """A lowercase run is split by word frequency."""
        result = split_concatenated("thetemplarlegacy")
        assert " " in result
        assert "templar" in result.lower()


class TestAuthorInTitle:
    """Tests for finding an author name inside a title."""

    def test_person_name(self) -> None:
        """Capitalized two- and three-word names look like people."""
        assert _is_likely_person_name("Steve Berry") is True
        assert _is_likely_person_name("Mary Higgins Clark") is True

    def test_not_a_person_name(self) -> None:
        """Titles and lowercase or single-word text do not."""
        assert _is_likely_person_name("The Great Gatsby") is False
        assert _is_likely_person_name("steve berry") is False
        assert _is_likely_person_name("Steve") is False

    def test_leading_name_split_off(self) -> None:
        """A leading person name is split from the title."""
        title, author = _detect_author_in_title("Steve Berry The Templar Legacy")
        assert author == "Steve Berry"
        assert title == "The Templar Legacy"

    def test_title_without_name(self) -> None:
        """A title without a name is returned whole."""
        title, author = _detect_author_in_title("The Great Gatsby")
        assert author is None
        assert title == "The Great Gatsby"


class TestNormalizeEmbedded:
    """Tests for cleaning embedded ebook metadata."""

    def test_clean_record_unchanged(self) -> None:
        """A clean record passes through unchanged."""
        record = SourceRecord("embedded", title="The Name of the Rose", authors=("Umberto Eco",))
        assert normalize_embedded(record) == record

    def test_unknown_author_dropped(self) -> None:
        """Placeholder authors are dropped."""
        record = SourceRecord("embedded", title="Dune", authors=("Unknown",))
        assert normalize_embedded(record).authors == ()

    def test_mangled_title_split_and_author_detected(self) -> None:
        """A mangled title is split and its author pulled out."""
        record = SourceRecord("embedded", title="SteveBerry-TheTemplarLegacy")
        result = normalize_embedded(record)
        assert result.title == "The Templar Legacy"
        assert result.authors == ("Steve Berry",)
        assert result.source_id == "embedded"

    def test_existing_author_not_replaced(self) -> None:
        """An existing author keeps the title whole."""
        record = SourceRecord(
            "embedded", title="SteveBerry-TheTemplarLegacy", authors=("Steve Berry",)
        )
        result = normalize_embedded(record)
        assert result.title == "Steve Berry The Templar Legacy"
        assert result.authors == ("Steve Berry",)
