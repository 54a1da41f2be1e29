# ABOUTME: Per-subject schedule storage and the lookup engine over it.
# ABOUTME: Loads "<LETTER>.txt" files lazily and resolves codes by exact match or narrowest range.

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from shelfmark.classification.codes import (
    CodeRange,
    compare,
    is_in_range,
    is_proper_subrange,
    parse_range,
)
from shelfmark.classification.subjects import subject_letter

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_DIR = Path.home() / ".shelfmark" / "schedules"

SEPARATOR = " - "


class MissingScheduleError(FileNotFoundError):
    """Raised when the schedule file for a subject letter does not exist."""


@dataclass(frozen=True)
class ScheduleEntry:
    """One schedule row: a code (or collapsed range) and its subject path."""

    code: str
    subject_path: str
    subject_letter: str

    @property
    def line(self) -> str:
        """The durable ``code - subjectPath`` form."""
        return f"{self.code}{SEPARATOR}{self.subject_path}"

    @classmethod
    def from_line(cls, line: str, subject_letter: str) -> "ScheduleEntry":
        code, _, subject_path = line.partition(SEPARATOR)
        return cls(code=code, subject_path=subject_path, subject_letter=subject_letter)


@dataclass(frozen=True)
class ScheduleMatch:
    """Result of resolving a code against the schedule."""

    code: str
    entry: ScheduleEntry
    from_range: bool

    @property
    def subject(self) -> str:
        """Subject line for the requested code: ``code - subjectPath``."""
        return f"{self.code}{SEPARATOR}{self.entry.subject_path}"


@dataclass
class _LetterSchedule:
    exact: dict[str, ScheduleEntry] = field(default_factory=dict)
    ranges: list[tuple[CodeRange, ScheduleEntry]] = field(default_factory=list)


def schedule_path(schedule_dir: Path, letter: str) -> Path:
    return schedule_dir / f"{letter.upper()}.txt"


def read_schedule(path: Path, letter: str) -> list[ScheduleEntry]:
    """Read every entry from one schedule file."""
    entries = []
    with path.open(encoding="utf-8") as handle:
        for raw in handle:
            line = raw.rstrip("\n")
            if line:
                entries.append(ScheduleEntry.from_line(line, letter))
    return entries


class ScheduleIndex:
    """Read-only lookup over the per-subject schedule files.

    Each letter is loaded on first use and cached for the lifetime of the
    index. A lock serializes loading and ``clear()`` so a regeneration never
    interleaves with a half-loaded letter.
    """

    def __init__(self, schedule_dir: Path | None = None) -> None:
        self.schedule_dir = schedule_dir or DEFAULT_SCHEDULE_DIR
        self._loaded: dict[str, _LetterSchedule] = {}
        self._lock = threading.Lock()

    def clear(self) -> None:
        """Drop every cached letter; the next lookup reloads from disk."""
        with self._lock:
            self._loaded.clear()

    def is_loaded(self, letter: str) -> bool:
        return letter.upper() in self._loaded

    def _schedule(self, letter: str) -> _LetterSchedule:
        cached = self._loaded.get(letter)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._loaded.get(letter)
            if cached is not None:
                return cached

            path = schedule_path(self.schedule_dir, letter)
            if not path.exists():
                raise MissingScheduleError(f"No schedule for subject {letter}: {path}")

            schedule = _LetterSchedule()
            for entry in read_schedule(path, letter):
                code_range = parse_range(entry.code)
                if code_range is None:
                    schedule.exact[entry.code] = entry
                else:
                    schedule.ranges.append((code_range, entry))
            logger.debug(
                "Loaded schedule %s: %d codes, %d ranges",
                letter,
                len(schedule.exact),
                len(schedule.ranges),
            )
            self._loaded[letter] = schedule
            return schedule

    def resolve(self, code: str) -> ScheduleMatch | None:
        """Find the schedule entry a code belongs to.

        Exact matches win outright. Otherwise a collapsed alphabetic range
        sharing the code's prefix is preferred (longest prefix first), then
        the narrowest numeric range containing the code.

        Raises:
            MissingScheduleError: If the subject's schedule file is absent.
        """
        letter = subject_letter(code[:1])
        if letter is None:
            return None
        schedule = self._schedule(letter)

        exact = schedule.exact.get(code)
        if exact is not None:
            return ScheduleMatch(code=code, entry=exact, from_range=False)

        alpha_match: ScheduleEntry | None = None
        alpha_prefix_len = -1
        best_range: tuple[str, str] | None = None
        range_match: ScheduleEntry | None = None

        for code_range, entry in schedule.ranges:
            if code_range.alphabetic:
                assert code_range.prefix is not None
                rest = code[len(code_range.prefix) + 1 :]
                if (
                    code.startswith(code_range.prefix + ".")
                    and rest[:1].isalpha()
                    and compare(code, code_range.start) >= 0
                    and len(code_range.prefix) >= alpha_prefix_len
                ):
                    alpha_match = entry
                    alpha_prefix_len = len(code_range.prefix)
            elif is_in_range(code, code_range.start, code_range.end):
                bounds = (code_range.start, code_range.end)
                if best_range is None or is_proper_subrange(bounds, best_range):
                    best_range = bounds
                    range_match = entry

        if alpha_match is not None:
            return ScheduleMatch(code=code, entry=alpha_match, from_range=True)
        if range_match is not None:
            return ScheduleMatch(code=code, entry=range_match, from_range=True)
        return None

    def lookup(self, code: str) -> str | None:
        """Subject line for a code, or None if the schedule has no match."""
        match = self.resolve(code)
        return match.subject if match else None
