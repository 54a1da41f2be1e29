# ABOUTME: Ordered pipelines of small text transforms for titles and author names.
# ABOUTME: Also splits mangled embedded titles ("SteveBerry-TheTemplarLegacy") before they vote.

import re
import unicodedata
from collections.abc import Callable, Sequence
from dataclasses import replace

import wordninja

from shelfmark.metadata.types import SourceRecord

TextStep = Callable[[str], str]

_WHITESPACE_RE = re.compile(r"\s+")
_BRACKETED_MEDIUM_RE = re.compile(r"\s*\[[^\]]*\]")
_TRAILING_SEPARATOR_RE = re.compile(r"\s*[/:;,=]+\s*$")
# A trailing period after a word of two or more characters (not an initial
# such as "J." and not an ellipsis).
_TRAILING_PERIOD_RE = re.compile(r"(?<=[^\s.]{2})(?<!\.\.)\.$")
# Abbreviations whose period belongs to the word.
_ABBREVIATION_RE = re.compile(r"\b(?:Jr|Sr|Dr|Mr|Mrs|Ms|St|Esq|Inc|Ltd|Co|etc)\.$", re.IGNORECASE)
_PARENTHESIZED_RE = re.compile(r"\s*\([^)]*\)")
_LIFE_DATES_RE = re.compile(r",?\s*(?:b\.\s*|d\.\s*|ca\.\s*)?\d{3,4}\??-?(?:\d{3,4}\??)?\.?$")
_RELATOR_RE = re.compile(
    r",\s*(?:editor|author|translator|illustrator|compiler|contributor|ed\.|eds\.|trans\.)\.?$",
    re.IGNORECASE,
)
_TRAILING_AUTHOR_PUNCT_RE = re.compile(r"[\s,;:/]+$")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def drop_bracketed_medium(text: str) -> str:
    """Remove bracketed designators such as "[electronic resource]"."""
    return _BRACKETED_MEDIUM_RE.sub("", text).strip()


def drop_trailing_period(text: str) -> str:
    if _ABBREVIATION_RE.search(text):
        return text
    return _TRAILING_PERIOD_RE.sub("", text)


def drop_trailing_separator(text: str) -> str:
    """Remove dangling " /" or " :" cataloging punctuation and a final period."""
    previous = None
    while text != previous:
        previous = text
        text = drop_trailing_period(_TRAILING_SEPARATOR_RE.sub("", text))
    return text


def drop_statement_of_responsibility(text: str) -> str:
    """Cut a cataloged title at " / ", where the statement of responsibility starts."""
    return text.split(" / ", 1)[0]


def drop_parenthesized(text: str) -> str:
    """Remove parenthesized qualifiers such as "(Editor)"."""
    return _PARENTHESIZED_RE.sub("", text).strip()


def drop_life_dates(text: str) -> str:
    """Remove trailing life dates: "Eco, Umberto, 1932-2016" gives "Eco, Umberto"."""
    return _LIFE_DATES_RE.sub("", text)


def drop_relator_terms(text: str) -> str:
    return _RELATOR_RE.sub("", text)


def drop_trailing_author_punctuation(text: str) -> str:
    """Strip trailing commas and full stops, keeping the period of an initial."""
    previous = None
    while text != previous:
        previous = text
        text = drop_trailing_period(_TRAILING_AUTHOR_PUNCT_RE.sub("", text))
    return text


def title_case_lowercase_name(text: str) -> str:
    """Capitalize names a source reported entirely in lowercase."""
    if text and text == text.lower() and any(c.isalpha() for c in text):
        return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))
    return text


TITLE_STEPS: tuple[TextStep, ...] = (
    collapse_whitespace,
    drop_bracketed_medium,
    drop_statement_of_responsibility,
    drop_trailing_separator,
    collapse_whitespace,
)

AUTHOR_STEPS: tuple[TextStep, ...] = (
    collapse_whitespace,
    drop_parenthesized,
    drop_relator_terms,
    drop_life_dates,
    drop_relator_terms,
    drop_trailing_author_punctuation,
    title_case_lowercase_name,
    collapse_whitespace,
)


def apply_steps(text: str, steps: Sequence[TextStep]) -> str:
    for step in steps:
        text = step(text)
    return text


def normalize_title(title: str) -> str:
    return apply_steps(title, TITLE_STEPS)


def normalize_author(name: str) -> str:
    return apply_steps(name, AUTHOR_STEPS)


def strip_diacritics(text: str) -> str:
    """Remove combining marks: "Gabriel García Márquez" gives "Gabriel Garcia Marquez"."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


# Author values that indicate missing/unknown authorship.
_UNKNOWN_AUTHORS = frozenset({"unknown", "various", "anonymous", "n/a", ""})


def is_unknown_author(name: str) -> bool:
    return name.strip().lower() in _UNKNOWN_AUTHORS


# Minimum length for a spaceless string to be considered "concatenated" and worth splitting.
# Shorter strings (e.g. "Dune", "1984") are left alone.
_MIN_CONCAT_LENGTH = 8

_CAMEL_CASE_RE = re.compile(r"[a-z][A-Z]")
_CAMEL_LOWER_UPPER_RE = re.compile(r"([a-z\d])([A-Z])")
_CAMEL_UPPER_SEQUENCE_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LETTER_DIGIT_RE = re.compile(r"([a-zA-Z])(\d)")
_DIGIT_LETTER_RE = re.compile(r"(\d)([a-zA-Z])")
_SEPARATOR_RE = re.compile(r"[-_]")

_TITLE_STOP_WORDS = frozenset(
    {"the", "a", "an", "of", "and", "in", "on", "at", "to", "for", "by", "with", "from", "is"}
)


def _needs_splitting(text: str) -> bool:
    """Whether a title looks like joined words rather than a real title."""
    text = text.strip()
    if not text:
        return False
    if "_" in text or _CAMEL_CASE_RE.search(text):
        return True
    segments = text.split("-") if "-" in text else [text]
    return any(" " not in seg and len(seg) >= _MIN_CONCAT_LENGTH for seg in segments)


def _split_camel_case(text: str) -> list[str]:
    """Split "HTMLParser" into ["HTML", "Parser"] and "Fahrenheit451" into two words."""
    result = _CAMEL_LOWER_UPPER_RE.sub(r"\1_SPLIT_\2", text)
    result = _CAMEL_UPPER_SEQUENCE_RE.sub(r"\1_SPLIT_\2", result)
    result = _LETTER_DIGIT_RE.sub(r"\1_SPLIT_\2", result)
    result = _DIGIT_LETTER_RE.sub(r"\1_SPLIT_\2", result)
    parts = [p for p in result.split("_SPLIT_") if p]
    return parts if parts else [text]


def split_concatenated(text: str) -> str:
    """Split a mangled title into space-separated words.

    Hyphens and underscores separate segments, CamelCase boundaries split
    each segment, and long all-lowercase runs go through wordninja.
    """
    if not _needs_splitting(text):
        return text

    words: list[str] = []
    for segment in _SEPARATOR_RE.split(text):
        segment = segment.strip()
        if not segment:
            continue
        for part in _split_camel_case(segment):
            if part.islower() and len(part) >= _MIN_CONCAT_LENGTH:
                words.append(" ".join(wordninja.split(part)) or part)
            else:
                words.append(part)
    return " ".join(words)


def _is_likely_person_name(text: str) -> bool:
    words = text.split()
    if len(words) < 2 or len(words) > 3:
        return False
    if not all(word[0].isupper() for word in words):
        return False
    return not any(w.lower() in _TITLE_STOP_WORDS for w in words)


def _detect_author_in_title(title: str) -> tuple[str, str | None]:
    """Split a leading 2-3 word person name off a title, if there is one."""
    words = title.split()
    for name_len in (3, 2):
        if len(words) <= name_len:
            continue
        candidate = " ".join(words[:name_len])
        if _is_likely_person_name(candidate):
            return " ".join(words[name_len:]), candidate
    return title, None


def normalize_embedded(record: SourceRecord) -> SourceRecord:
    """Clean up the metadata embedded in a document before it votes.

    Placeholder authors are dropped; a mangled title is split into words
    and, when no author is left, a leading person name is moved from the
    title into the authors.
    """
    authors = tuple(a for a in record.authors if not is_unknown_author(a))
    title = record.title

    if title and _needs_splitting(title):
        title = split_concatenated(title)
        if not authors:
            title, detected = _detect_author_in_title(title)
            if detected:
                authors = (detected,)

    return replace(record, title=title, authors=authors)
