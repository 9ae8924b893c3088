"""
Load schedule snapshots from JSON and map raw rows onto canonical models.

Schedule rows arrive with camelCase keys and a zoo of legacy field names
(`courseName`/`code`, `sem`/`semester`, `scheduleKey`/`schedule`,
`f2fSched`, `instructor`, `sy`, `programcode`, `hours` ...). This module is
the only place that knows about them; everything downstream consumes
`ScheduleRecord`, `FacultyProfile` and `CandidateAssignment`.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .models import (
    AttendanceSummary,
    CandidateAssignment,
    FacultyProfile,
    ScheduleRecord,
    ScheduleSnapshot,
)

logger = logging.getLogger(__name__)


class DataValidationError(ValueError):
    """Raised when snapshot data fails structural validation."""
    pass


# =============================================================================
# Field Aliases (snake_case alias -> canonical field)
# =============================================================================

RECORD_ALIASES = {
    "course_name": "course_code",
    "code": "course_code",
    "title": "course_title",
    "sem": "term",
    "semester": "term",
    "schedule_key": "time",
    "schedule": "time",
    "f2f_sched": "day",
    "f2fsched": "day",
    "f2f_days": "day",
    "faculty": "faculty_name",
    "instructor": "faculty_name",
    "sy": "school_year",
    "schoolyear": "school_year",
    "programcode": "program",
    "program_code": "program",
    "hours": "unit",
    "units": "unit",
    "block": "section",
    "dept": "department",
    "lock": "locked",
    "is_locked": "locked",
    "course_topics": "topics",
    "tags": "topics",
    "subject_tags": "topics",
}

FACULTY_ALIASES = {
    "faculty_id": "id",
    "faculty": "name",
    "full_name": "name",
    "dept": "department",
    "employment": "employment_type",
    "degrees": "degree",
    "qualification": "qualifications",
    "load_release": "load_release_units",
}

SNAPSHOT_ALIASES = {
    "courses": "records",
    "schedules": "records",
    "faculty": "faculties",
    "faculty_list": "faculties",
    "schedule": "candidate",
    "assignment": "candidate",
    "sy": "school_year",
    "schoolyear": "school_year",
    "term": "semester",
    "sem": "semester",
    "attendance_stats": "attendance",
}


def to_snake_case(name: str) -> str:
    """Convert a camelCase key to snake_case: 'f2fSched' -> 'f2f_sched'."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.lower()


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip()) or value == []


def canonicalize_keys(
    row: Mapping[str, Any],
    aliases: Mapping[str, str],
    allowed: Optional[set[str]] = None,
) -> dict[str, Any]:
    """
    Rename the keys of one raw row to canonical field names.

    A canonical key beats its aliases; among aliases the first non-empty
    value wins. Keys outside `allowed` are dropped.
    """
    out: dict[str, Any] = {}
    direct: set[str] = set()
    dropped = []
    for raw_key, value in row.items():
        key = to_snake_case(str(raw_key))
        canonical = aliases.get(key, key)
        if allowed is not None and canonical not in allowed:
            dropped.append(raw_key)
            continue
        is_direct = key == canonical
        if canonical in out:
            if _is_empty(value):
                continue
            if not _is_empty(out[canonical]) and (canonical in direct or not is_direct):
                continue
        out[canonical] = value
        if is_direct:
            direct.add(canonical)
    if dropped:
        logger.debug("Ignored unknown fields: %s", ", ".join(sorted(map(str, dropped))))
    return out


def _join_days(row: dict[str, Any]) -> dict[str, Any]:
    if isinstance(row.get("day"), (list, tuple)):
        row["day"] = ",".join(str(d) for d in row["day"] if d)
    return row


_RECORD_FIELDS = set(ScheduleRecord.model_fields)
_FACULTY_FIELDS = set(FacultyProfile.model_fields)
_CANDIDATE_FIELDS = set(CandidateAssignment.model_fields)


# =============================================================================
# Row Adapters
# =============================================================================

def adapt_record(row: Mapping[str, Any]) -> ScheduleRecord:
    """Map one raw schedule row onto a ScheduleRecord."""
    return ScheduleRecord.model_validate(_join_days(canonicalize_keys(row, RECORD_ALIASES, _RECORD_FIELDS)))


def adapt_faculty(row: Mapping[str, Any]) -> FacultyProfile:
    """Map one raw faculty directory row onto a FacultyProfile."""
    return FacultyProfile.model_validate(canonicalize_keys(row, FACULTY_ALIASES, _FACULTY_FIELDS))


def adapt_candidate(row: Mapping[str, Any]) -> CandidateAssignment:
    """Map a raw proposed assignment onto a CandidateAssignment."""
    return CandidateAssignment.model_validate(
        _join_days(canonicalize_keys(row, RECORD_ALIASES, _CANDIDATE_FIELDS))
    )


def adapt_attendance(data: Mapping[str, Any]) -> dict[str, AttendanceSummary]:
    """Attendance aggregates keyed by faculty id."""
    out = {}
    for faculty_id, summary in data.items():
        if not isinstance(summary, Mapping):
            raise DataValidationError(f"Attendance for faculty {faculty_id} is not an object")
        fields = canonicalize_keys(summary, {}, {"total", "by_status"})
        out[str(faculty_id)] = AttendanceSummary.model_validate(fields)
    return out


def adapt_grades(data: Mapping[str, Any]) -> dict[str, tuple[str, ...]]:
    """Grade submission statuses keyed by faculty id."""
    out = {}
    for faculty_id, statuses in data.items():
        if isinstance(statuses, str) or not isinstance(statuses, (list, tuple)):
            raise DataValidationError(f"Grades for faculty {faculty_id} must be a list of statuses")
        out[str(faculty_id)] = tuple(str(s) for s in statuses if s is not None)
    return out


# =============================================================================
# Snapshot
# =============================================================================

def validate_snapshot_data(data: Any) -> dict[str, Any]:
    """
    Check the structure of a raw snapshot document.

    Args:
        data: Parsed JSON document

    Returns:
        The document with top-level keys canonicalized

    Raises:
        DataValidationError: If validation fails
    """
    if not isinstance(data, Mapping):
        raise DataValidationError("Snapshot must be a JSON object")

    doc = canonicalize_keys(data, SNAPSHOT_ALIASES)
    errors = []

    for field in ("records", "faculties"):
        if field not in doc:
            errors.append(f"Missing required field: {field}")
        elif not isinstance(doc[field], list):
            errors.append(f"Field '{field}' must be a list")
    if errors:
        raise DataValidationError("; ".join(errors))

    for i, row in enumerate(doc["records"]):
        if not isinstance(row, Mapping):
            errors.append(f"Record {i} is not an object")
    for i, row in enumerate(doc["faculties"]):
        if not isinstance(row, Mapping):
            errors.append(f"Faculty {i} is not an object")

    for field in ("attendance", "grades"):
        if doc.get(field) is not None and not isinstance(doc[field], Mapping):
            errors.append(f"Field '{field}' must be an object keyed by faculty id")
    if doc.get("candidate") is not None and not isinstance(doc["candidate"], Mapping):
        errors.append("Field 'candidate' must be an object")

    if errors:
        raise DataValidationError("; ".join(errors))
    return doc


def build_snapshot(data: Any) -> ScheduleSnapshot:
    """
    Build a canonical snapshot from a raw document.

    Faculty rows without an id are skipped with a warning. Field-level
    problems surface as pydantic ValidationError.

    Raises:
        DataValidationError: On structural problems or duplicate faculty ids
    """
    doc = validate_snapshot_data(data)

    faculties = []
    seen: set[str] = set()
    duplicates = []
    for i, row in enumerate(doc["faculties"]):
        fields = canonicalize_keys(row, FACULTY_ALIASES, _FACULTY_FIELDS)
        if _is_empty(fields.get("id")):
            logger.warning("Skipping faculty row %d without an id (%s)", i, fields.get("name") or "unnamed")
            continue
        faculty = FacultyProfile.model_validate(fields)
        if faculty.id in seen:
            duplicates.append(f"Duplicate faculty ID: {faculty.id}")
            continue
        seen.add(faculty.id)
        faculties.append(faculty)
    if duplicates:
        raise DataValidationError("; ".join(duplicates))

    records = [adapt_record(row) for row in doc["records"]]
    candidate = adapt_candidate(doc["candidate"]) if doc.get("candidate") else None

    snapshot = ScheduleSnapshot(
        school_year=str(doc.get("school_year") or ""),
        semester=str(doc.get("semester") or ""),
        records=tuple(records),
        faculties=tuple(faculties),
        attendance=adapt_attendance(doc.get("attendance") or {}),
        grades=adapt_grades(doc.get("grades") or {}),
        candidate=candidate,
    )
    logger.debug("Loaded snapshot: %d records, %d faculty", len(records), len(faculties))
    return snapshot


def load_json(path: Union[str, Path]) -> Any:
    """
    Read a JSON document.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
    """
    with open(Path(path), encoding="utf-8") as f:
        return json.load(f)


def load_snapshot(path: Union[str, Path]) -> ScheduleSnapshot:
    """
    Load a schedule snapshot from a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        Canonical ScheduleSnapshot

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
        DataValidationError: If the data fails validation
    """
    return build_snapshot(load_json(path))


def save_snapshot(snapshot: ScheduleSnapshot, path: Union[str, Path]) -> None:
    """Write a snapshot as canonical snake_case JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(snapshot.model_dump_json(indent=2))
