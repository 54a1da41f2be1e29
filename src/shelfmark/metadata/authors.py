# ABOUTME: Author name equivalence and variant grouping for reconciliation.
# ABOUTME: Clusters "Doe, John", "John Doe" and "J. Doe" style variants of one person.

import re
from collections.abc import Iterable

from shelfmark.metadata.normalizer import strip_diacritics
from shelfmark.metadata.types import AuthorVariantGroup

_WHITESPACE_RE = re.compile(r"\s+")


def comparable_name(name: str) -> str:
    """Reduce a name to a comparison form.

    Diacritics are removed, case is folded, and "Last, First" is turned
    into "First Last".
    """
    name = strip_diacritics(name).casefold().strip()
    if "," in name:
        last, first = (part.strip() for part in name.split(",", 1))
        name = f"{first} {last}" if first else last
    return _WHITESPACE_RE.sub(" ", name).strip()


def _tokens(name: str) -> list[str]:
    return [token.strip(",") for token in name.split(" ") if token.strip(",")]


def _initial_matches(token: str, other: str) -> bool:
    if not token.endswith("."):
        return False
    stem = token[:-1]
    return bool(stem) and other[: len(stem)] == stem


def _first_tokens_match(a: str, b: str) -> bool:
    return a == b or _initial_matches(a, b) or _initial_matches(b, a)


def same_person(a: str, b: str) -> bool:
    """Whether two raw author strings plausibly name the same person.

    True when the comparison forms are identical, or when the last name
    tokens match exactly and the first tokens match, an initial ("J.")
    matching any first name starting with those letters.
    """
    left = comparable_name(a)
    right = comparable_name(b)
    if left == right:
        return True

    left_tokens = _tokens(left)
    right_tokens = _tokens(right)
    if not left_tokens or not right_tokens:
        return False
    if left_tokens[-1] != right_tokens[-1]:
        return False
    return _first_tokens_match(left_tokens[0], right_tokens[0])


def group_variants(names: Iterable[str]) -> list[AuthorVariantGroup]:
    """Cluster names into variant groups, in order of first appearance.

    A name joins a group only when it matches every member. A name that
    fits no group, or fits several groups that are different people
    ("J. Smith" next to "John Smith" and "Jane Smith"), starts its own.
    """
    groups: list[AuthorVariantGroup] = []
    for name in names:
        matching = [g for g in groups if all(same_person(name, v) for v in g.variants)]
        if len(matching) == 1:
            matching[0].variants.append(name)
        else:
            groups.append(AuthorVariantGroup(variants=[name]))
    return groups
