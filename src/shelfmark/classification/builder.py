# ABOUTME: Builds per-subject schedule indexes from the LC classification MARCXML dataset.
# ABOUTME: Streams 153 datafields, turns each into a ScheduleEntry, dedups, and writes one file per letter.

import logging
import os
import re
import tempfile
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from lxml import etree

from shelfmark.classification.schedule import ScheduleEntry, schedule_path
from shelfmark.classification.subjects import LOC_SUBJECTS, subject_letter, subject_name

logger = logging.getLogger(__name__)

CLASSIFICATION_TAG = "153"

_DIGIT_RE = re.compile(r"\d")


class ScheduleBuildError(Exception):
    """Raised when the classification dataset cannot be read."""


@dataclass(frozen=True)
class Subfield:
    code: str
    text: str


@dataclass(frozen=True)
class ClassificationRecord:
    """One classification datafield, subfields kept in document order.

    Subfield codes: z continuation prefix, a primary code, c range
    terminator, h heading, j caption.
    """

    subfields: tuple[Subfield, ...]

    def _first(self, code: str) -> str | None:
        for sub in self.subfields:
            if sub.code == code:
                return sub.text
        return None

    @property
    def prefix(self) -> str | None:
        return self._first("z")

    @property
    def primary_code(self) -> str | None:
        return self._first("a")

    @property
    def terminator(self) -> str | None:
        return self._first("c")

    @property
    def headings(self) -> list[str]:
        return [sub.text for sub in self.subfields if sub.code == "h"]

    @property
    def caption(self) -> str | None:
        return self._first("j")


def record_from_pairs(pairs: Iterable[tuple[str, str]]) -> ClassificationRecord:
    """Build a ClassificationRecord from (code, text) pairs."""
    return ClassificationRecord(tuple(Subfield(code, text) for code, text in pairs))


def _local_name(tag: object) -> str:
    return etree.QName(tag).localname if isinstance(tag, str) else ""


def iter_classification_records(path: Path) -> Iterator[ClassificationRecord]:
    """Stream classification datafields out of a MARCXML file.

    Only datafields tagged 153 are yielded. Finished datafields and records
    are cleared and detached from their parents as the stream advances, so
    the tree never holds more than the record being read.

    Raises:
        ScheduleBuildError: If the file is missing or is not well-formed XML.
    """
    if not path.exists():
        raise ScheduleBuildError(f"Classification file not found: {path}")

    try:
        for _event, elem in etree.iterparse(
            str(path),
            events=("end",),
            tag=("{*}datafield", "{*}record"),
            resolve_entities=False,
        ):
            if _local_name(elem.tag) == "datafield" and elem.get("tag") == CLASSIFICATION_TAG:
                pairs = [
                    (child.get("code", ""), (child.text or "").strip())
                    for child in elem
                    if _local_name(child.tag) == "subfield"
                ]
                yield record_from_pairs(pairs)
            elem.clear()
            parent = elem.getparent()
            if parent is not None:
                while elem.getprevious() is not None:
                    del parent[0]
    except etree.XMLSyntaxError as exc:
        raise ScheduleBuildError(f"Malformed classification file: {path}: {exc}") from exc


class ScheduleBuilder:
    """Turns classification records into schedule entries.

    Each record is consumed subfield by subfield, tracking the pending
    continuation prefix, the last primary code, and the line buffer.
    Entries accumulate per subject letter; ``entries()`` returns them
    deduplicated so the last entry for each code wins.
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[ScheduleEntry]] = {letter: [] for letter in LOC_SUBJECTS}
        self.emitted = 0
        self.skipped = 0

    def add_records(self, records: Iterable[ClassificationRecord]) -> None:
        for record in records:
            self.add_record(record)

    def add_record(self, record: ClassificationRecord) -> ScheduleEntry | None:
        """Process one record; returns the entry emitted, if any."""
        entry = build_entry(record)
        if entry is None:
            self.skipped += 1
            return None
        self._entries[entry.subject_letter].append(entry)
        self.emitted += 1
        return entry

    def entries(self) -> dict[str, list[ScheduleEntry]]:
        return {letter: deduplicate(items) for letter, items in self._entries.items()}


def build_entry(record: ClassificationRecord) -> ScheduleEntry | None:
    """Run the subfield state machine over one record.

    Returns None when the record resolves no subject letter, has no
    primary code, or carries a numeric terminator with no digit.
    """
    pending_prefix: str | None = None
    last_primary: str | None = None
    letter: str | None = None
    code: str | None = None
    path_parts: list[str] = []

    for sub in record.subfields:
        if sub.code == "z":
            pending_prefix = sub.text
            letter = subject_letter(sub.text)
            code = sub.text
            path_parts = []
        elif sub.code == "a":
            if pending_prefix is not None:
                if sub.text.startswith("."):
                    code = f"{pending_prefix}{sub.text}"
                else:
                    code = f"{pending_prefix}.{sub.text}"
                pending_prefix = None
            else:
                letter = subject_letter(sub.text)
                code = sub.text
            last_primary = code
            path_parts = []
        elif sub.code == "c":
            path_parts = []
            if last_primary is None or letter is None:
                logger.debug("Range terminator %r without primary code, skipping", sub.text)
                return None
            if sub.text.endswith("Z"):
                code = f"{last_primary}-{sub.text[sub.text.rfind('.') + 1:]}"
            else:
                match = _DIGIT_RE.search(sub.text)
                if match is None:
                    logger.debug("Numeric range %r has no digits, skipping", sub.text)
                    return None
                code = f"{last_primary}-{sub.text[match.start():]}"
        elif sub.code in ("h", "j"):
            path_parts.append(sub.text)

    if letter is None or last_primary is None or code is None:
        return None

    subject_path = "/".join([subject_name(letter), *path_parts])
    return ScheduleEntry(code=code, subject_path=subject_path, subject_letter=letter)


def deduplicate(entries: list[ScheduleEntry]) -> list[ScheduleEntry]:
    """Keep only the last entry per code, preserving relative order."""
    seen: set[str] = set()
    kept: list[ScheduleEntry] = []
    for entry in reversed(entries):
        if entry.code in seen:
            continue
        seen.add(entry.code)
        kept.append(entry)
    kept.reverse()
    return kept


def write_schedules(entries: dict[str, list[ScheduleEntry]], schedule_dir: Path) -> None:
    """Write one schedule file per subject letter.

    Each file is written to a temporary sibling and swapped in with
    os.replace, so readers never see a half-written schedule.
    """
    schedule_dir.mkdir(parents=True, exist_ok=True)
    for letter in LOC_SUBJECTS:
        target = schedule_path(schedule_dir, letter)
        fd, tmp_name = tempfile.mkstemp(dir=schedule_dir, prefix=f".{letter}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                for entry in entries.get(letter, []):
                    handle.write(entry.line + "\n")
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


@dataclass
class BuildReport:
    """Summary of a schedule build."""

    records: int = 0
    emitted: int = 0
    skipped: int = 0
    per_letter: dict[str, int] = field(default_factory=dict)

    @property
    def total_entries(self) -> int:
        return sum(self.per_letter.values())


def build_schedules(xml_path: Path, schedule_dir: Path) -> BuildReport:
    """Build the durable per-subject schedules from a MARCXML dataset.

    Args:
        xml_path: The classification dataset (MARCXML, 153 datafields).
        schedule_dir: Directory receiving one ``<LETTER>.txt`` per main class.

    Returns:
        A BuildReport with record counts and entries kept per letter.
    """
    builder = ScheduleBuilder()
    records = 0
    for record in iter_classification_records(xml_path):
        records += 1
        builder.add_record(record)

    entries = builder.entries()
    write_schedules(entries, schedule_dir)

    report = BuildReport(
        records=records,
        emitted=builder.emitted,
        skipped=builder.skipped,
        per_letter={letter: len(items) for letter, items in entries.items()},
    )
    logger.info(
        "Built schedules from %s: %d records, %d entries kept, %d skipped",
        xml_path,
        records,
        report.total_entries,
        builder.skipped,
    )
    return report
