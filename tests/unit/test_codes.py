# ABOUTME: Unit tests for classification code ordering, ranges, and normalization.
# ABOUTME: Covers compare(), range parsing, well-formedness, and normalize_code().

import itertools

import pytest

from shelfmark.classification.codes import (
    CodeRange,
    code_sort_key,
    compare,
    is_in_range,
    is_proper_subrange,
    is_range_code,
    is_well_formed,
    normalize_code,
    parse_range,
    reconstitute,
)

SAMPLE_CODES = [
    "QA76",
    "QA76.73",
    "QA76.73.P98",
    "QA76.73.P98.L877",
    "QA76.9",
    "QA9",
    "QB1",
    "PL8453",
    "PL8453.8",
    "PL8453.85",
    "PL8455",
    "KBR15.A",
    "KBR15.5",
    "P-PZ20.18",
    "P-PZ20.176.5",
]


class TestCompare:
    """Tests for token-wise code comparison."""

    def test_equal_codes(self) -> None:
        """Identical codes compare equal."""
        assert compare("QA76.73.P98", "QA76.73.P98") == 0

    def test_numbers_compare_by_value(self) -> None:
        """QA9 sorts before QA76 even though "7" < "9" as text."""
        assert compare("QA9", "QA76") == -1
        assert compare("QA76", "QA9") == 1

    def test_decimal_parts_compare_numerically(self) -> None:
        """Fractional class numbers compare as decimals."""
        assert compare("PL8453.8", "PL8453.85") == -1
        assert compare("PL8453.895", "PL8453.85") == 1

    def test_letters_compare_lexicographically(self) -> None:
        """Letter runs compare as text."""
        assert compare("QA1", "QB1") == -1
        assert compare("QB1", "QA1") == 1

    def test_shorter_code_sorts_first_on_shared_prefix(self) -> None:
        """A code sorts before its extensions."""
        assert compare("QA76.73", "QA76.73.P98") == -1
        assert compare("QA76.73.P98", "QA76.73") == 1

    def test_number_sorts_before_letter_at_same_position(self) -> None:
        """A year sorts before a further cutter."""
        assert compare("QA76.73.P98 2013", "QA76.73.P98.L877") == -1
        assert compare("QA76.73.P98.L877", "QA76.73.P98 2013") == 1

    def test_table_number_is_its_own_token(self) -> None:
        """Under a table prefix the class number is not read as a decimal of the table."""
        assert compare("P-PZ20.18", "P-PZ20.176.5") == -1

    def test_case_insensitive(self) -> None:
        """Case does not affect ordering."""
        assert compare("qa76", "QA76") == 0

    def test_antisymmetric(self) -> None:
        """Swapping the arguments negates the result."""
        for a, b in itertools.product(SAMPLE_CODES, repeat=2):
            assert compare(a, b) == -compare(b, a)

    def test_transitive(self) -> None:
        """Ordering is transitive across the sample codes."""
        for a, b, c in itertools.product(SAMPLE_CODES, repeat=3):
            if compare(a, b) < 0 and compare(b, c) < 0:
                assert compare(a, c) < 0

    def test_sort_key_orders_codes(self) -> None:
        """code_sort_key plugs compare into sorted()."""
        ordered = sorted(["QA76.9", "QA9", "QA76.73.P98", "QA76"], key=code_sort_key)
        assert ordered == ["QA9", "QA76", "QA76.73.P98", "QA76.9"]


class TestRanges:
    """Tests for range reconstitution, membership, and parsing."""

    def test_reconstitute_bare_numeric_end(self) -> None:
        """A bare numeric end takes the start's class letters."""
        assert reconstitute("PG7157.P47", "7157.P472") == "PG7157.P472"

    def test_reconstitute_leaves_full_end(self) -> None:
        """A complete end code is returned unchanged."""
        assert reconstitute("PL8453", "PL8455") == "PL8455"

    def test_in_range(self) -> None:
        """A code strictly inside the bounds is in range."""
        assert is_in_range("PL8454", "PL8453", "8455")

    def test_range_is_exclusive(self) -> None:
        """Both range ends are excluded."""
        assert not is_in_range("PL8453", "PL8453", "8455")
        assert not is_in_range("PL8455", "PL8453", "8455")

    def test_outside_range(self) -> None:
        """A code past the end is out of range."""
        assert not is_in_range("PL8460", "PL8453", "8455")

    def test_proper_subrange(self) -> None:
        """A narrower range inside another is a proper subrange."""
        assert is_proper_subrange(("PL8453.8", "8453.895"), ("PL8453", "8455"))
        assert not is_proper_subrange(("PL8453", "8455"), ("PL8453.8", "8453.895"))

    def test_shared_start_is_not_proper(self) -> None:
        """Sharing an endpoint is not a proper subrange."""
        assert not is_proper_subrange(("PL8453", "8454"), ("PL8453", "8455"))

    def test_parse_numeric_range(self) -> None:
        """A numeric range parses with its end reconstituted."""
        assert parse_range("PL8453.8-8453.895") == CodeRange(
            start="PL8453.8", end="PL8453.895"
        )

    def test_parse_alphabetic_range(self) -> None:
        """An A-Z range parses as alphabetic with its prefix."""
        parsed = parse_range("KBR15.A-Z")
        assert parsed is not None
        assert parsed.alphabetic
        assert parsed.prefix == "KBR15"

    def test_parse_continuation_alphabetic_range(self) -> None:
        """An A-Z range under a continuation keeps the full prefix."""
        parsed = parse_range("G6.70.A4-Z")
        assert parsed is not None
        assert parsed.alphabetic
        assert parsed.prefix == "G6.70"
        assert parsed.start == "G6.70.A4"

    def test_plain_code_is_not_a_range(self) -> None:
        """A plain code is not a range."""
        assert parse_range("QA76.73.P98") is None
        assert not is_range_code("QA76.73.P98")

    def test_continuation_prefix_is_not_a_range(self) -> None:
        """A bare continuation prefix is not a range."""
        assert not is_range_code("P-PZ20")

    def test_reconstitute_under_continuation_prefix(self) -> None:
        """A bare end under a table prefix keeps the prefix and table number."""
        assert reconstitute("P-PZ20.176.5", "176.9") == "P-PZ20.176.9"

    def test_parse_continuation_numeric_range(self) -> None:
        """A numeric range under a table prefix parses as a range."""
        assert parse_range("P-PZ20.176.5-176.9") == CodeRange(
            start="P-PZ20.176.5", end="P-PZ20.176.9"
        )

    def test_in_continuation_range(self) -> None:
        """Membership works for codes under a table prefix."""
        assert is_in_range("P-PZ20.176.7", "P-PZ20.176.5", "176.9")
        assert not is_in_range("P-PZ20.18", "P-PZ20.176.5", "176.9")


class TestWellFormed:
    """Tests for the call number grammar check."""

    @pytest.mark.parametrize(
        "code",
        [
            "QA76",
            "QA76.73.P98",
            "QA76.73.P98 L877 2013",
            "QA76.73 .P98",
            "PL8453.85",
            "BX7.X8",
            "HF5548.4.M523 2013",
            "P-PZ20",
            "P-PZ20.176.5.H57",
        ],
    )
    def test_valid_codes(self, code: str) -> None:
        """Well-formed LC codes pass the grammar."""
        assert is_well_formed(code)

    @pytest.mark.parametrize(
        "code",
        ["", "   ", "76.73", "QABC76", "QA", "Fiction", "QA76.73.P98-Z", "005.133"],
    )
    def test_invalid_codes(self, code: str) -> None:
        """Dewey numbers, words and fragments fail the grammar."""
        assert not is_well_formed(code)


class TestNormalizeCode:
    """Tests for reducing reported call numbers to the primary code."""

    def test_keeps_primary_token(self) -> None:
        """Cutters after a space and years are dropped."""
        assert normalize_code("QA76.73.P98 L877 2013") == "QA76.73.P98"

    def test_uppercases_and_joins_class_number(self) -> None:
        """Lowercase input is uppercased and rejoined."""
        assert normalize_code("qa 76.73 .p98 l877 2013") == "QA76.73.P98"

    def test_cutter_with_space_before_period(self) -> None:
        """A space before a cutter period is removed."""
        assert normalize_code("PS3557.R489 .S9") == "PS3557.R489.S9"

    def test_continuation_prefix_keeps_hyphen(self) -> None:
        """Continuation prefixes keep their hyphen."""
        assert normalize_code("P-PZ20 176.5.H57") == "P-PZ20.176.5.H57"

    def test_trailing_period_removed(self) -> None:
        """A trailing period is dropped."""
        assert normalize_code("QA76.73.") == "QA76.73"

    def test_blank_input(self) -> None:
        """Blank input normalizes to an empty string."""
        assert normalize_code("   ") == ""

    @pytest.mark.parametrize(
        "raw",
        [
            "qa 76.73 .P98 L877 2013",
            "P-PZ20 176.5.H57",
            "QA76.73.",
            "PL8453.85",
            "BX7 .X8",
        ],
    )
    def test_idempotent(self, raw: str) -> None:
        """Normalizing twice changes nothing."""
        once = normalize_code(raw)
        assert normalize_code(once) == once
