"""Per-faculty teaching load statistics."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Union

from .data.models import FacultyProfile, ScheduleRecord
from .indexes import ScheduleIndex, ensure_index, normalize_key
from .timeblocks import normalize_term, time_key

logger = logging.getLogger(__name__)

DEFAULT_LOAD_BASELINE = 24.0


@dataclass(frozen=True)
class FacultyLoadStats:
    """Deduplicated teaching load of one faculty member."""
    load: float = 0.0
    release: float = 0.0
    overload: float = 0.0
    course_count: int = 0

    def load_ratio(self, baseline: float = DEFAULT_LOAD_BASELINE) -> float:
        return self.load / baseline if baseline > 0 else 1.0


EMPTY_STATS = FacultyLoadStats()


def offering_key(record: ScheduleRecord) -> tuple[str, str, str, str]:
    """
    Identity of one logical offering.

    The same course, section, term and time listed twice counts once.
    """
    return (
        normalize_key(record.course_code),
        normalize_key(record.section),
        normalize_term(record.term) or "n/a",
        time_key(record.time),
    )


def compute_faculty_load(
    faculty: FacultyProfile,
    index: ScheduleIndex,
    baseline: float = DEFAULT_LOAD_BASELINE,
) -> FacultyLoadStats:
    """Load stats for a single faculty member."""
    seen: set[tuple[str, str, str, str]] = set()
    units: list[float] = []
    for record in index.records_for_faculty(faculty.id, faculty.name):
        if not normalize_key(record.course_code) or not normalize_key(record.section):
            continue
        key = offering_key(record)
        if key in seen:
            continue
        seen.add(key)
        units.append(record.unit)

    load = math.fsum(units)
    return FacultyLoadStats(
        load=load,
        release=faculty.load_release_units,
        overload=max(0.0, load - baseline),
        course_count=len(units),
    )


def compute_load_stats(
    faculties: Iterable[FacultyProfile],
    records: Union[ScheduleIndex, Iterable[ScheduleRecord]],
    baseline: float = DEFAULT_LOAD_BASELINE,
) -> dict[str, FacultyLoadStats]:
    """
    Compute load, release, overload and course count per faculty id.

    Args:
        faculties: Faculty catalog
        records: Schedule records or a prebuilt ScheduleIndex
        baseline: Nominal full load in units

    Returns:
        Mapping of faculty id to FacultyLoadStats
    """
    index = ensure_index(records)
    stats = {f.id: compute_faculty_load(f, index, baseline) for f in faculties}
    overloaded = sum(1 for s in stats.values() if s.overload > 0)
    logger.debug("Computed load stats for %d faculty (%d overloaded)", len(stats), overloaded)
    return stats
