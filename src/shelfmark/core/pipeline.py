# ABOUTME: Non-destructive metadata write pipeline implementing the metadata writer contract.
# ABOUTME: Copies the EPUB, writes the reconciled record into the copy, then verifies it.

import enum
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from shelfmark.formats.epub import (
    EpubReadError,
    EpubWriteError,
    read_epub_metadata,
    write_epub_metadata,
)
from shelfmark.metadata.types import ReconciledRecord

# A written copy smaller than this fraction of the source is treated as damaged.
DEFAULT_MIN_SIZE_RATIO = 0.5

_MAX_COLLISION_ATTEMPTS = 10_000


class WriteFailure(enum.Enum):
    CORRUPT_SOURCE = "corrupt source"
    WRITE_FAILED = "write failed"
    SUSPICIOUS_OUTPUT = "suspiciously small output"


@dataclass
class FieldVerification:
    """Result of verifying a single metadata field after write-back."""

    field: str
    expected: str | None
    actual: str | None
    passed: bool


@dataclass
class WriteResult:
    """Result of a metadata write with verification status."""

    path: Path | None
    success: bool
    verified_fields: list[FieldVerification] = field(default_factory=list)
    failure: WriteFailure | None = None
    error: str | None = None


def _resolve_collision(output_path: Path) -> Path:
    """Find a non-colliding filename by appending _1, _2, etc."""
    stem = output_path.stem
    suffix = output_path.suffix
    parent = output_path.parent
    for counter in range(1, _MAX_COLLISION_ATTEMPTS + 1):
        candidate = parent / f"{stem}_{counter}{suffix}"
        if not candidate.exists():
            return candidate
    raise OSError(
        f"Could not find a non-colliding filename after "
        f"{_MAX_COLLISION_ATTEMPTS} attempts: {output_path}"
    )


def _verify_write(dest: Path, record: ReconciledRecord) -> list[FieldVerification]:
    """Read the copy back and compare the fields the record resolved.

    Authors are compared as sorted lists.
    """
    read_back = read_epub_metadata(dest)
    verifications: list[FieldVerification] = []

    if record.title:
        verifications.append(FieldVerification(
            field="title",
            expected=record.title,
            actual=read_back.title,
            passed=record.title == read_back.title,
        ))

    if record.authors:
        expected_sorted = "; ".join(sorted(record.authors))
        actual_sorted = "; ".join(sorted(read_back.authors))
        verifications.append(FieldVerification(
            field="authors",
            expected=expected_sorted,
            actual=actual_sorted,
            passed=expected_sorted == actual_sorted,
        ))

    if record.subject:
        actual_subject = read_back.subjects[0] if read_back.subjects else None
        verifications.append(FieldVerification(
            field="subject",
            expected=record.subject,
            actual=actual_subject,
            passed=record.subject == actual_subject,
        ))

    return verifications


def _cleanup_dest(dest: Path) -> None:
    dest.unlink(missing_ok=True)


def _failed(
    dest: Path,
    failure: WriteFailure,
    error: str,
    verified_fields: list[FieldVerification] | None = None,
) -> WriteResult:
    _cleanup_dest(dest)
    return WriteResult(
        path=None,
        success=False,
        verified_fields=verified_fields or [],
        failure=failure,
        error=error,
    )


def apply_metadata_safely(
    source: Path,
    record: ReconciledRecord,
    output_dir: Path,
    *,
    min_size_ratio: float = DEFAULT_MIN_SIZE_RATIO,
) -> WriteResult:
    """Copy an EPUB to output_dir and write the reconciled record to the copy.

    The original file is never modified. Name collisions in output_dir get
    a numeric suffix (_1, _2, ...). Failures are reported as a corrupt
    source, a failed write or verification, or a copy that came out
    suspiciously small; any failed copy is deleted.
    """
    try:
        read_epub_metadata(source)
    except EpubReadError as exc:
        return WriteResult(
            path=None, success=False, failure=WriteFailure.CORRUPT_SOURCE, error=str(exc)
        )

    output_dir.mkdir(parents=True, exist_ok=True)
    dest = output_dir / source.name
    if dest.exists():
        dest = _resolve_collision(dest)

    shutil.copy2(source, dest)

    try:
        write_epub_metadata(dest, record)
    except (OSError, EpubReadError, EpubWriteError) as exc:
        return _failed(dest, WriteFailure.WRITE_FAILED, str(exc))

    source_size = source.stat().st_size
    written_size = dest.stat().st_size if dest.exists() else 0
    if written_size < source_size * min_size_ratio:
        return _failed(
            dest,
            WriteFailure.SUSPICIOUS_OUTPUT,
            f"Output is {written_size} bytes, source is {source_size} bytes",
        )

    try:
        verifications = _verify_write(dest, record)
    except (OSError, EpubReadError) as exc:
        return _failed(dest, WriteFailure.WRITE_FAILED, str(exc))

    if not all(v.passed for v in verifications):
        failed = [v.field for v in verifications if not v.passed]
        return _failed(
            dest,
            WriteFailure.WRITE_FAILED,
            f"Verification failed for: {', '.join(failed)}",
            verified_fields=verifications,
        )

    return WriteResult(path=dest, success=True, verified_fields=verifications)
