# ABOUTME: Classification package: LC code algebra, schedule building, and schedule lookup.
# ABOUTME: Exports the ScheduleIndex used by reconciliation and the builder entry point.

from shelfmark.classification.builder import BuildReport, ScheduleBuildError, build_schedules
from shelfmark.classification.codes import compare, is_in_range, is_well_formed, normalize_code
from shelfmark.classification.schedule import (
    DEFAULT_SCHEDULE_DIR,
    MissingScheduleError,
    ScheduleEntry,
    ScheduleIndex,
    ScheduleMatch,
)

__all__ = [
    "DEFAULT_SCHEDULE_DIR",
    "BuildReport",
    "MissingScheduleError",
    "ScheduleBuildError",
    "ScheduleEntry",
    "ScheduleIndex",
    "ScheduleMatch",
    "build_schedules",
    "compare",
    "is_in_range",
    "is_well_formed",
    "normalize_code",
]
