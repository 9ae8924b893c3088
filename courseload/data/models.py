"""
Pydantic models for the course-loading engine.

These are the canonical shapes the engine consumes. Raw rows from the
schedule repository and faculty directory are mapped onto them by
`courseload.data.loader` at the system boundary.

Conventions:
- Ids are strings (numeric ids are coerced)
- Time-specs stay raw strings ("8-9AM", "13:00-14:30", "TBA") and are parsed
  on demand by `courseload.timeblocks`
- Terms are raw labels ("1st", "2nd", "Sem"); compare via `normalize_term`
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from ..timeblocks import TimeRange, normalize_term, parse_days, parse_time_block


# =============================================================================
# Helpers
# =============================================================================

def _coerce_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _coerce_tags(value: Any) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(v).strip().lower() for v in value if str(v).strip())


# =============================================================================
# Core Entity Models
# =============================================================================

class ScheduleRecord(BaseModel):
    """An existing course assignment in the schedule snapshot."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: Optional[str] = Field(default=None, description="Record identifier")
    faculty_id: Optional[str] = Field(default=None, description="Assigned faculty id")
    faculty_name: Optional[str] = Field(default=None, description="Assigned faculty display name")
    course_code: str = Field(default="", description="Catalog code, e.g. 'IT 101'")
    course_title: str = Field(default="", description="Course title")
    section: str = Field(default="", description="Block/section code")
    term: str = Field(default="", description="Term label ('1st', '2nd', 'Sem')")
    day: str = Field(default="", description="Day-spec ('MWF', 'TTH', 'MON-FRI')")
    time: str = Field(default="", description="Raw time-spec ('8-9AM')")
    school_year: str = Field(default="", description="School year ('2024-2025')")
    unit: float = Field(default=0.0, ge=0, description="Unit count")
    program: str = Field(default="", description="Program code")
    department: str = Field(default="", description="Department code")
    grades_status: Optional[str] = Field(default=None, description="Grade submission status")
    locked: bool = Field(default=False, description="Record locked against edits")
    session: Optional[str] = Field(default=None, description="Session label (AM/PM/EVE)")
    topics: tuple[str, ...] = Field(default=(), description="Explicit topic tags")

    @field_validator("id", "faculty_id", mode="before")
    @classmethod
    def coerce_ids(cls, value: Any) -> Optional[str]:
        return _coerce_id(value)

    @field_validator(
        "course_code", "course_title", "section", "term", "day", "time",
        "school_year", "program", "department",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("faculty_name", mode="before")
    @classmethod
    def coerce_name(cls, value: Any) -> Optional[str]:
        text = _coerce_text(value)
        return text or None

    @field_validator("unit", mode="before")
    @classmethod
    def coerce_unit(cls, value: Any) -> float:
        if value is None or value == "":
            return 0.0
        try:
            return max(0.0, float(value))
        except (TypeError, ValueError):
            return 0.0

    @field_validator("topics", mode="before")
    @classmethod
    def coerce_topics(cls, value: Any) -> tuple[str, ...]:
        return _coerce_tags(value)

    @property
    def time_range(self) -> Optional[TimeRange]:
        """Parsed time block, or None for placeholders/unparseable text."""
        return parse_time_block(self.time)

    @property
    def days(self) -> frozenset[str]:
        """Expanded day codes; empty means any day."""
        return parse_days(self.day)

    @property
    def normalized_term(self) -> str:
        return normalize_term(self.term)

    @property
    def has_faculty(self) -> bool:
        return bool(self.faculty_id or self.faculty_name)

    def __str__(self) -> str:
        who = self.faculty_name or self.faculty_id or "unassigned"
        return f"{self.course_code} [{self.section}] {self.day} {self.time} ({who})"


class FacultyProfile(BaseModel):
    """A faculty member from the directory."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(default="", description="Display name ('Last, First M.')")
    department: str = Field(default="", description="Home department")
    employment_type: str = Field(default="", description="Full-time, Part-time, KNP ...")
    credentials: str = Field(default="", description="Free-text credentials")
    degree: str = Field(default="", description="Highest degree (free text)")
    qualifications: str = Field(default="", description="Other qualifications (free text)")
    designation: str = Field(default="", description="Designation/position")
    rank: str = Field(default="", description="Academic rank")
    load_release_units: float = Field(default=0.0, ge=0, description="Units released from teaching load")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _coerce_id(value) or value

    @field_validator(
        "name", "department", "employment_type", "credentials", "degree",
        "qualifications", "designation", "rank",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            return ", ".join(_coerce_text(v) for v in value if _coerce_text(v))
        return _coerce_text(value)

    @field_validator("load_release_units", mode="before")
    @classmethod
    def coerce_release(cls, value: Any) -> float:
        if value is None or value == "":
            return 0.0
        try:
            return max(0.0, float(value))
        except (TypeError, ValueError):
            return 0.0

    @property
    def credential_text(self) -> list[str]:
        """Free-text fields mined for credential tokens."""
        return [self.credentials, self.degree, self.qualifications]

    def __str__(self) -> str:
        return f"{self.name or self.id} ({self.id})"


class CandidateAssignment(BaseModel):
    """A proposed faculty/time/section assignment under evaluation."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    faculty_id: Optional[str] = Field(default=None, description="Proposed faculty id")
    faculty_name: Optional[str] = Field(default=None, description="Proposed faculty name")
    term: str = Field(default="", description="Term label")
    day: str = Field(default="", description="Day-spec")
    time: str = Field(default="", description="Raw time-spec")
    section: str = Field(default="", description="Block/section code")
    course_code: str = Field(default="", description="Catalog code")
    course_title: str = Field(default="", description="Course title")
    program: str = Field(default="", description="Program code")
    department: str = Field(default="", description="Department code")
    session: Optional[str] = Field(default=None, description="Session label (AM/PM/EVE)")
    school_year: str = Field(default="", description="School year of the offering")
    unit: float = Field(default=0.0, ge=0, description="Unit count")
    topics: tuple[str, ...] = Field(default=(), description="Explicit topic tags")

    @field_validator("faculty_id", mode="before")
    @classmethod
    def coerce_faculty_id(cls, value: Any) -> Optional[str]:
        return _coerce_id(value)

    @field_validator("faculty_name", mode="before")
    @classmethod
    def coerce_name(cls, value: Any) -> Optional[str]:
        text = _coerce_text(value)
        return text or None

    @field_validator(
        "term", "day", "time", "section", "course_code", "course_title",
        "program", "department", "school_year",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("topics", mode="before")
    @classmethod
    def coerce_topics(cls, value: Any) -> tuple[str, ...]:
        return _coerce_tags(value)

    @property
    def time_range(self) -> Optional[TimeRange]:
        return parse_time_block(self.time)

    @property
    def days(self) -> frozenset[str]:
        return parse_days(self.day)

    @property
    def normalized_term(self) -> str:
        return normalize_term(self.term)

    @property
    def has_faculty(self) -> bool:
        return bool(self.faculty_id or self.faculty_name)

    def with_faculty(self, faculty: FacultyProfile) -> CandidateAssignment:
        """Copy of this candidate proposed for another faculty member."""
        return self.model_copy(update={"faculty_id": faculty.id, "faculty_name": faculty.name or None})

    def as_record(self, record_id: Optional[str] = None) -> ScheduleRecord:
        """The schedule record this candidate would become once committed."""
        return ScheduleRecord(
            id=record_id,
            faculty_id=self.faculty_id,
            faculty_name=self.faculty_name,
            course_code=self.course_code,
            course_title=self.course_title,
            section=self.section,
            term=self.term,
            day=self.day,
            time=self.time,
            school_year=self.school_year,
            unit=self.unit,
            program=self.program,
            department=self.department,
            session=self.session,
            topics=self.topics,
        )

    def __str__(self) -> str:
        who = self.faculty_name or self.faculty_id or "unassigned"
        return f"{self.course_code} [{self.section}] {self.term} {self.day} {self.time} -> {who}"


class AttendanceSummary(BaseModel):
    """Aggregated attendance records for one faculty member."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    total: int = Field(default=0, ge=0, description="Total attendance entries")
    by_status: dict[str, int] = Field(default_factory=dict, description="Counts by status")

    @field_validator("by_status", mode="before")
    @classmethod
    def lower_status_keys(cls, value: Any) -> dict[str, int]:
        if not value:
            return {}
        counts: dict[str, int] = {}
        for key, count in dict(value).items():
            try:
                n = int(count or 0)
            except (TypeError, ValueError):
                n = 0
            k = str(key).strip().lower()
            counts[k] = counts.get(k, 0) + n
        return counts

    @model_validator(mode="after")
    def default_total(self) -> "AttendanceSummary":
        """Total falls back to the sum of status counts."""
        if not self.total and self.by_status:
            object.__setattr__(self, "total", sum(self.by_status.values()))
        return self

    def proportion(self, status: str) -> float:
        if self.total <= 0:
            return 0.0
        return self.by_status.get(status, 0) / self.total


# =============================================================================
# Snapshot
# =============================================================================

class ScheduleSnapshot(BaseModel):
    """
    A complete request snapshot: existing records, the faculty catalog and
    optional aggregates. This is the document the CLI reads.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    school_year: str = Field(default="", description="School year the records belong to")
    semester: str = Field(default="", description="Semester the records belong to")
    records: tuple[ScheduleRecord, ...] = Field(default=(), description="Existing assignments")
    faculties: tuple[FacultyProfile, ...] = Field(default=(), description="Faculty catalog")
    attendance: dict[str, AttendanceSummary] = Field(default_factory=dict, description="Attendance by faculty id")
    grades: dict[str, tuple[str, ...]] = Field(default_factory=dict, description="Grade submission statuses by faculty id")
    candidate: Optional[CandidateAssignment] = Field(default=None, description="Assignment under evaluation")

    @model_validator(mode="after")
    def validate_no_duplicate_faculty(self) -> "ScheduleSnapshot":
        """Ensure faculty ids are unique."""
        seen: set[str] = set()
        errors: list[str] = []
        for faculty in self.faculties:
            if faculty.id in seen:
                errors.append(f"Duplicate faculty ID: '{faculty.id}'")
            seen.add(faculty.id)
        if errors:
            raise ValueError("Duplicate ID validation failed:\n" + "\n".join(f"  - {e}" for e in errors))
        return self

    def get_faculty(self, faculty_id: str) -> Optional[FacultyProfile]:
        """Get faculty by ID."""
        for faculty in self.faculties:
            if faculty.id == faculty_id:
                return faculty
        return None

    def records_for_period(self, school_year: Optional[str] = None, semester: Optional[str] = None) -> list[ScheduleRecord]:
        """
        Records scoped to one school year (and, when given, one term).

        Records without a school year or term are kept.
        """
        sy = (school_year if school_year is not None else self.school_year).strip().lower()
        term = normalize_term(semester if semester is not None else self.semester)
        out = []
        for record in self.records:
            have_sy = record.school_year.strip().lower()
            if sy and have_sy and have_sy != sy:
                continue
            if term and record.normalized_term and record.normalized_term != term:
                continue
            out.append(record)
        return out

    def summary(self) -> dict[str, Any]:
        """Get a summary of the snapshot."""
        faculty_with_records = {r.faculty_id for r in self.records if r.faculty_id}
        return {
            "school_year": self.school_year,
            "semester": self.semester,
            "records": len(self.records),
            "faculties": len(self.faculties),
            "assigned_faculty": len(faculty_with_records),
            "unassigned_records": sum(1 for r in self.records if not r.has_faculty),
            "unparseable_times": sum(1 for r in self.records if r.time_range is None),
            "has_candidate": self.candidate is not None,
        }
