# ABOUTME: Arbitration protocol for ties the reconciliation engine cannot break on its own.
# ABOUTME: FirstCandidateArbiter is the deterministic policy for batch runs and tests.

from typing import Final, Protocol, runtime_checkable

# Returned by Arbiter.choose to ask for a free-text value instead.
CUSTOM: Final = "\x00custom"


@runtime_checkable
class Arbiter(Protocol):
    """Resolves ties and doubtful values during reconciliation.

    ``choose`` picks one of the candidates or returns CUSTOM, after which
    the engine calls ``enter`` for free text. ``enter`` returning None or a
    blank string means "no value". ``confirm`` decides whether a minority
    value (an author only one source reported) is kept.
    """

    def choose(self, field: str, candidates: list[str]) -> str: ...

    def enter(self, field: str) -> str | None: ...

    def confirm(self, field: str, value: str, context: list[str]) -> bool: ...


class FirstCandidateArbiter:
    """Non-interactive arbiter: first candidate, no free text, keep everything."""

    def choose(self, field: str, candidates: list[str]) -> str:
        return candidates[0] if candidates else CUSTOM

    def enter(self, field: str) -> str | None:
        return None

    def confirm(self, field: str, value: str, context: list[str]) -> bool:
        return True
