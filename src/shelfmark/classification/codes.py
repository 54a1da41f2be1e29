# ABOUTME: Ordering, range algebra, and normalization for LC classification codes.
# ABOUTME: Pure functions with no schedule access; ScheduleIndex builds lookups on top of them.

import re
from dataclasses import dataclass
from functools import cmp_to_key

# Table continuation prefixes that keep their literal hyphen (e.g. "P-PZ20").
CONTINUATION_PREFIXES = ("P-PZ", "K-KZ")

_TOKEN_RE = re.compile(r"[A-Z]+|\d+(?:\.\d+)?")
_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_LETTERS_RE = re.compile(r"^[A-Z]+")
# "P-PZ20." in "P-PZ20.176.5": the table prefix and its number.
_CONTINUATION_HEAD_RE = re.compile(
    r"^(?:" + "|".join(re.escape(p) for p in CONTINUATION_PREFIXES) + r")\d+\."
)
_CLASS_SPACE_RE = re.compile(r"^([A-Z]{1,3}) (\d)")
_CUTTER_SPACE_RE = re.compile(r" \.(?=[A-Z])")

# LETTERS(1-3) NUMBER(1-4) [.NUMBER]? ([.LETTER NUMBER[LETTERS/DIGITS]])* [YEAR]?
_WELL_FORMED_RE = re.compile(
    r"^[A-Z]{1,3}\d{1,4}(?:\.\d+)?"
    r"(?:(?:\.| \.?)[A-Z]\d+[A-Z0-9]*)*"
    r"(?: \d{4}[A-Z]?)?$"
)
_CONTINUATION_RE = re.compile(
    r"^(?:" + "|".join(re.escape(p) for p in CONTINUATION_PREFIXES) + r")\d+(?:\.[A-Z0-9.]+)?$"
)

# "KBR39.2-39.22", "PL8453-8455" or "P-PZ20.176.5-176.9"
_NUMERIC_RANGE_RE = re.compile(
    r"^(?P<start>(?:(?:P-PZ|K-KZ)\d+\.|[A-Z]{1,3})\d[A-Z0-9.]*)-(?P<end>[A-Z]{0,3}\d[A-Z0-9.]*)$"
)
# "QK584.6.A-Z" or "G6.70.A4-Z"
_ALPHA_RANGE_RE = re.compile(r"^(?P<prefix>[A-Z][A-Z0-9.-]*?)\.(?P<start>[A-Z]\d*)-Z$")


@dataclass(frozen=True)
class CodeRange:
    """A collapsed range notation found in a schedule entry's code.

    Numeric ranges carry both ends (the end reconstituted to a full code).
    Alphabetic ranges ("PREFIX.A-Z") cover every cutter under ``prefix``.
    """

    start: str
    end: str
    alphabetic: bool = False
    prefix: str | None = None


def _tokenize(code: str) -> list[str]:
    code = code.upper()
    head = _CONTINUATION_HEAD_RE.match(code)
    if head:
        # The table number stays a whole token, apart from the class number.
        return _TOKEN_RE.findall(head.group(0)) + _TOKEN_RE.findall(code[head.end() :])
    return _TOKEN_RE.findall(code)


def _compare_tokens(a: str, b: str) -> int:
    a_num = a[0].isdigit()
    b_num = b[0].isdigit()
    if a_num and b_num:
        x, y = float(a), float(b)
    elif a_num != b_num:
        # Numbers sort before letters so mixed positions stay ordered.
        return -1 if a_num else 1
    else:
        x, y = a, b
    if x < y:
        return -1
    if x > y:
        return 1
    return 0


def compare(a: str, b: str) -> int:
    """Compare two classification codes token by token.

    Numeric runs compare by value, letter runs lexicographically. When
    every shared token is equal, the code with fewer tokens sorts first.
    Returns -1, 0, or 1.
    """
    tokens_a = _tokenize(a)
    tokens_b = _tokenize(b)
    for ta, tb in zip(tokens_a, tokens_b):
        result = _compare_tokens(ta, tb)
        if result:
            return result
    if len(tokens_a) < len(tokens_b):
        return -1
    if len(tokens_a) > len(tokens_b):
        return 1
    return 0


code_sort_key = cmp_to_key(compare)


def reconstitute(start: str, end: str) -> str:
    """Expand a range end given as a bare numeric suffix to a full code.

    "PG7157.P47" with end "7157.P472" gives "PG7157.P472"; under a table
    prefix "P-PZ20.176.5" with end "176.9" gives "P-PZ20.176.9".
    """
    if end and end[0].isdigit():
        head = _CONTINUATION_HEAD_RE.match(start.upper())
        if head:
            return head.group(0) + end
        match = _LEADING_LETTERS_RE.match(start.upper())
        if match:
            return match.group(0) + end
    return end


def is_in_range(code: str, start: str, end: str) -> bool:
    """Whether code lies strictly between start and end."""
    end = reconstitute(start, end)
    return compare(code, start) > 0 and compare(code, end) < 0


def is_proper_subrange(inner: tuple[str, str], outer: tuple[str, str]) -> bool:
    """Whether inner is strictly narrower than outer on both ends."""
    inner_start, inner_end = inner[0], reconstitute(inner[0], inner[1])
    outer_start, outer_end = outer[0], reconstitute(outer[0], outer[1])
    return compare(inner_start, outer_start) > 0 and compare(inner_end, outer_end) < 0


def parse_range(code: str) -> CodeRange | None:
    """Recognise a collapsed range code, or None for a plain code."""
    match = _ALPHA_RANGE_RE.match(code)
    if match:
        prefix = match.group("prefix")
        return CodeRange(
            start=f"{prefix}.{match.group('start')}",
            end="Z",
            alphabetic=True,
            prefix=prefix,
        )
    match = _NUMERIC_RANGE_RE.match(code)
    if match:
        start = match.group("start")
        return CodeRange(start=start, end=reconstitute(start, match.group("end")))
    return None


def is_range_code(code: str) -> bool:
    return parse_range(code) is not None


def _normalize_whitespace(code: str) -> str:
    return _WHITESPACE_RE.sub(" ", code.strip().upper())


def is_well_formed(code: str) -> bool:
    """Validate a code against the LC call number grammar.

    This only checks shape; whether the schedule knows the code is
    ScheduleIndex's concern.
    """
    code = _normalize_whitespace(code)
    if not code:
        return False
    return bool(_WELL_FORMED_RE.match(code) or _CONTINUATION_RE.match(code))


def normalize_code(raw: str) -> str:
    """Reduce a source-reported call number to its primary code token.

    "qa 76.73 .P98 L877 2013" gives "QA76.73.P98"; a continuation-table
    code "P-PZ20 176.5.H57" keeps its hyphen and becomes "P-PZ20.176.5.H57".
    Idempotent.
    """
    code = _normalize_whitespace(raw)
    if not code:
        return ""

    code = _CLASS_SPACE_RE.sub(r"\1\2", code)
    code = _CUTTER_SPACE_RE.sub(".", code)

    if code.startswith(CONTINUATION_PREFIXES):
        head, _, rest = code.partition(" ")
        if rest[:1].isdigit():
            code = f"{head}.{rest}"

    code = code.split(" ", 1)[0]
    return code.rstrip(".")
