"""
Output schema for engine results.

JSON-serializable, camelCase views of conflict verdicts, faculty rankings,
load statistics and audit reports, as consumed by the course-loading UI.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, Field

from ..conflicts.audit import ConflictGroup, summarize_groups
from ..conflicts.detector import ConflictDetail, ConflictVerdict
from ..data.models import CandidateAssignment, FacultyProfile, ScheduleRecord
from ..scoring.scorer import FacultyScore
from ..stats import EMPTY_STATS, FacultyLoadStats


# =============================================================================
# Records
# =============================================================================

class RecordOutput(BaseModel):
    """A schedule record as shown alongside a conflict."""
    id: Optional[str] = None
    faculty_id: Optional[str] = Field(default=None, alias="facultyId")
    faculty_name: Optional[str] = Field(default=None, alias="facultyName")
    course_code: str = Field(alias="courseCode")
    course_title: str = Field(alias="courseTitle")
    section: str
    term: str
    day: str
    time: str
    school_year: str = Field(default="", alias="schoolYear")
    unit: float = 0.0

    model_config = {"populate_by_name": True}

    @classmethod
    def from_record(cls, record: ScheduleRecord) -> RecordOutput:
        """Create from a ScheduleRecord."""
        return cls(
            id=record.id,
            facultyId=record.faculty_id,
            facultyName=record.faculty_name,
            courseCode=record.course_code,
            courseTitle=record.course_title,
            section=record.section,
            term=record.term,
            day=record.day,
            time=record.time,
            schoolYear=record.school_year,
            unit=record.unit,
        )


# =============================================================================
# Conflict Verdicts
# =============================================================================

class ConflictDetailOutput(BaseModel):
    """One conflicting record and the reason."""
    reason: str
    item: RecordOutput

    @classmethod
    def from_detail(cls, detail: ConflictDetail) -> ConflictDetailOutput:
        return cls(reason=detail.reason, item=RecordOutput.from_record(detail.item))


class ConflictVerdictOutput(BaseModel):
    """Conflict check result for one candidate."""
    conflict: bool
    reason: Optional[str] = None
    details: list[ConflictDetailOutput] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_verdict(cls, verdict: ConflictVerdict) -> ConflictVerdictOutput:
        return cls(
            conflict=verdict.conflict,
            reason=verdict.reason,
            details=[ConflictDetailOutput.from_detail(d) for d in verdict.details],
            warnings=list(verdict.warnings),
        )

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(by_alias=True, indent=indent)


# =============================================================================
# Rankings
# =============================================================================

class FactorParts(BaseModel):
    """Named sub-scores behind a faculty score."""
    dept: float
    employment: float
    degree: float
    time: float
    load: float
    overload: float
    term_exp: float = Field(alias="termExp")
    match: float
    attendance: float = 1.0
    grades: float = 1.0

    model_config = {"populate_by_name": True}


class FacultyScoreOutput(BaseModel):
    """One ranked faculty member."""
    rank: int
    faculty_id: str = Field(alias="facultyId")
    name: str
    score: float
    parts: FactorParts

    model_config = {"populate_by_name": True}

    @classmethod
    def from_score(cls, rank: int, entry: FacultyScore) -> FacultyScoreOutput:
        return cls(
            rank=rank,
            facultyId=entry.faculty_id,
            name=entry.name,
            score=entry.rounded,
            parts=FactorParts.model_validate({k: round(v, 4) for k, v in entry.parts.items()}),
        )


class RankingOutput(BaseModel):
    """Ranked faculty for one candidate offering."""
    course_code: str = Field(alias="courseCode")
    course_title: str = Field(alias="courseTitle")
    section: str
    term: str
    time: str
    scores: list[FacultyScoreOutput]

    model_config = {"populate_by_name": True}

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(by_alias=True, indent=indent)


def create_ranking_output(candidate: CandidateAssignment, ranked: Iterable[FacultyScore]) -> RankingOutput:
    """Create a RankingOutput from scorer results (already ordered)."""
    return RankingOutput(
        courseCode=candidate.course_code,
        courseTitle=candidate.course_title,
        section=candidate.section,
        term=candidate.term,
        time=candidate.time,
        scores=[FacultyScoreOutput.from_score(i, entry) for i, entry in enumerate(ranked, start=1)],
    )


# =============================================================================
# Load Stats
# =============================================================================

class LoadStatsOutput(BaseModel):
    """Teaching load of one faculty member."""
    faculty_id: str = Field(alias="facultyId")
    name: str
    load: float
    release: float
    overload: float
    course_count: int = Field(alias="courseCount")

    model_config = {"populate_by_name": True}


class LoadReportOutput(BaseModel):
    """Load stats for the whole faculty catalog."""
    baseline: float
    faculty: list[LoadStatsOutput]

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(by_alias=True, indent=indent)


def create_load_report(
    faculties: Iterable[FacultyProfile],
    stats: Mapping[str, FacultyLoadStats],
    baseline: float,
) -> LoadReportOutput:
    """Create a LoadReportOutput ordered by load (heaviest first), then name."""
    rows = []
    for faculty in faculties:
        s = stats.get(faculty.id, EMPTY_STATS)
        rows.append(LoadStatsOutput(
            facultyId=faculty.id,
            name=faculty.name,
            load=s.load,
            release=s.release,
            overload=s.overload,
            courseCount=s.course_count,
        ))
    rows.sort(key=lambda r: (-r.load, r.name.casefold(), r.faculty_id))
    return LoadReportOutput(baseline=baseline, faculty=rows)


# =============================================================================
# Audit
# =============================================================================

class ConflictGroupOutput(BaseModel):
    """A group of clashing records."""
    reason: str
    key: str
    items: list[RecordOutput]


class AuditReportOutput(BaseModel):
    """All conflict groups found in a schedule."""
    total_groups: int = Field(alias="totalGroups")
    by_reason: dict[str, int] = Field(default_factory=dict, alias="byReason")
    groups: list[ConflictGroupOutput] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(by_alias=True, indent=indent)


def create_audit_report(groups: list[ConflictGroup]) -> AuditReportOutput:
    """Create an AuditReportOutput from audit groups."""
    return AuditReportOutput(
        totalGroups=len(groups),
        byReason=summarize_groups(groups),
        groups=[
            ConflictGroupOutput(
                reason=g.reason,
                key=g.key,
                items=[RecordOutput.from_record(r) for r in g.items],
            )
            for g in groups
        ],
    )
