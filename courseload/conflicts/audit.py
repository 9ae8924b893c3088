"""
Corpus-wide conflict audit.

Scans an existing schedule and reports every group of records that clash.
Each record is expanded once per meeting day before grouping, so a "MWF"
class can clash on Monday alone. Rows without a usable faculty, term, time
or day are left out.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable

from ..data.models import ScheduleRecord
from ..indexes import normalize_key
from ..timeblocks import is_placeholder, normalize_term, sorted_days, time_key, times_collide

logger = logging.getLogger(__name__)

SAME_COURSE_DIFFERENT_SECTIONS = "Double-booked: same time, different sections of same course"
DIFFERENT_COURSES = "Double-booked: same time, different courses"
EXACT_DUPLICATE = "Exact duplicate entry"
SELF_CLASH = "Self-clash: same section overlapping times"
TRIPLE_BOOKED = "Triple-booked: >2 classes at the same time"
SECTION_CODE_MISMATCH = "Data-quality: same section, same time, different course codes"
TERM_MISMATCH = "Term-mismatch duplicate across terms"
SECTION_TIME_OVERLAP = "Time overlap (any faculty)"

# Report order
REASONS = (
    SAME_COURSE_DIFFERENT_SECTIONS,
    DIFFERENT_COURSES,
    EXACT_DUPLICATE,
    SELF_CLASH,
    TRIPLE_BOOKED,
    SECTION_CODE_MISMATCH,
    TERM_MISMATCH,
    SECTION_TIME_OVERLAP,
)

_NO_FACULTY = re.compile(
    r"^(unknown|unassigned|n/?a|none|no\s*faculty|not\s*assigned|tba|tbd|-)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ConflictGroup:
    """Records that clash with each other for one reason."""
    reason: str
    key: str
    items: tuple[ScheduleRecord, ...]

    @property
    def size(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class _DayRow:
    record: ScheduleRecord
    day: str
    faculty: str
    term: str
    time: str
    code: str
    section: str


def _record_sort_key(record: ScheduleRecord) -> tuple[str, str]:
    return (record.id or "", record.model_dump_json())


def has_valid_faculty(record: ScheduleRecord) -> bool:
    name = (record.faculty_name or "").strip()
    if name:
        return not _NO_FACULTY.match(name)
    return bool(record.faculty_id)


def expand_by_day(records: Iterable[ScheduleRecord]) -> list[_DayRow]:
    """One row per meeting day for every auditable record."""
    rows = []
    for record in sorted(records, key=_record_sort_key):
        if not has_valid_faculty(record) or not record.term or is_placeholder(record.time):
            continue
        days = sorted_days(record.days)
        if not days:
            continue
        base = dict(
            record=record,
            faculty=normalize_key(record.faculty_name) or f"id{record.faculty_id}",
            term=normalize_term(record.term),
            time=time_key(record.time),
            code=normalize_key(record.course_code),
            section=normalize_key(record.section),
        )
        rows.extend(_DayRow(day=day, **base) for day in days)
    return rows


def _group(rows: list[_DayRow], key_fn: Callable[[_DayRow], tuple]) -> dict[tuple, list[_DayRow]]:
    groups: dict[tuple, list[_DayRow]] = {}
    for row in rows:
        groups.setdefault(key_fn(row), []).append(row)
    return groups


def _make(reason: str, tag: str, key: Hashable, rows: list[_DayRow]) -> ConflictGroup:
    parts = key if isinstance(key, tuple) else (key,)
    items = tuple(sorted({id(r.record): r.record for r in rows}.values(), key=_record_sort_key))
    return ConflictGroup(reason=reason, key=f"{tag}:" + "|".join(str(p) for p in parts), items=items)


def _distinct(rows: list[_DayRow], attr: str) -> set[str]:
    return {getattr(r, attr) for r in rows if getattr(r, attr)}


# =============================================================================
# Group Builders
# =============================================================================

def _faculty_slot_groups(rows: list[_DayRow]) -> list[ConflictGroup]:
    out = []

    by_course = _group(rows, lambda r: (r.faculty, r.term, r.day, r.time, r.code))
    for key, arr in by_course.items():
        if len(arr) > 1 and len(_distinct(arr, "section")) > 1:
            out.append(_make(SAME_COURSE_DIFFERENT_SECTIONS, "A", key, arr))

    by_slot = _group(rows, lambda r: (r.faculty, r.term, r.day, r.time))
    for key, arr in by_slot.items():
        if len(arr) > 1 and len(_distinct(arr, "code")) > 1:
            out.append(_make(DIFFERENT_COURSES, "B", key, arr))
        if len(arr) >= 3:
            out.append(_make(TRIPLE_BOOKED, "E", key, arr))

    by_entry = _group(rows, lambda r: (r.faculty, r.term, r.day, r.time, r.code, r.section))
    for key, arr in by_entry.items():
        if len(arr) > 1:
            out.append(_make(EXACT_DUPLICATE, "C", key, arr))

    by_offering = _group(rows, lambda r: (r.faculty, r.term, r.day, r.code, r.section))
    for key, arr in by_offering.items():
        if len(arr) < 2:
            continue
        clash = any(
            times_collide(a.record.time, b.record.time)
            for i, a in enumerate(arr)
            for b in arr[i + 1:]
        )
        if clash:
            out.append(_make(SELF_CLASH, "D", key, arr))

    by_section_slot = _group(rows, lambda r: (r.faculty, r.term, r.day, r.time, r.section))
    for key, arr in by_section_slot.items():
        if len(arr) > 1 and len(_distinct(arr, "code")) > 1:
            out.append(_make(SECTION_CODE_MISMATCH, "G", key, arr))

    return out


def _term_mismatch_groups(rows: list[_DayRow]) -> list[ConflictGroup]:
    out = []
    by_entry = _group(rows, lambda r: (r.faculty, r.day, r.time, r.code, r.section))
    for key, arr in by_entry.items():
        if len({r.term for r in arr}) > 1:
            out.append(_make(TERM_MISMATCH, "H", key, arr))
    return out


def _section_overlap_groups(rows: list[_DayRow]) -> list[ConflictGroup]:
    """Connected components of overlapping rows per term, day and section."""
    out = []
    for key, arr in _group(rows, lambda r: (r.term, r.day, r.section)).items():
        n = len(arr)
        if n < 2:
            continue
        adjacency: list[list[int]] = [[] for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                if times_collide(arr[i].record.time, arr[j].record.time):
                    adjacency[i].append(j)
                    adjacency[j].append(i)

        seen = [False] * n
        for start in range(n):
            if seen[start]:
                continue
            component = []
            stack = [start]
            seen[start] = True
            while stack:
                v = stack.pop()
                component.append(v)
                for w in adjacency[v]:
                    if not seen[w]:
                        seen[w] = True
                        stack.append(w)
            if len(component) >= 2:
                component.sort()
                members = [arr[i] for i in component]
                tag_key = key + (",".join(str(i) for i in component),)
                out.append(_make(SECTION_TIME_OVERLAP, "X", tag_key, members))
    return out


# =============================================================================
# Public API
# =============================================================================

def audit_schedule(records: Iterable[ScheduleRecord]) -> list[ConflictGroup]:
    """
    Report every conflict group in a schedule.

    Args:
        records: Existing schedule records (one school year)

    Returns:
        Conflict groups ordered by reason, then key
    """
    rows = expand_by_day(records)
    groups = _faculty_slot_groups(rows) + _term_mismatch_groups(rows) + _section_overlap_groups(rows)
    order = {reason: i for i, reason in enumerate(REASONS)}
    groups.sort(key=lambda g: (order[g.reason], g.key))
    logger.debug("Audited %d day-rows: %d conflict groups", len(rows), len(groups))
    return groups


def summarize_groups(groups: Iterable[ConflictGroup]) -> dict[str, int]:
    """Count of groups per reason, in report order."""
    counts = {reason: 0 for reason in REASONS}
    for group in groups:
        counts[group.reason] += 1
    return {reason: n for reason, n in counts.items() if n}
