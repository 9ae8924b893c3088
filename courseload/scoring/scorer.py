"""
Faculty suitability scoring.

Combines eight weighted factors and two multiplicative modifiers into a
score in [1, 10] per faculty member for one proposed course offering.

Usage:
    scorer = FacultySuitabilityScorer(faculties, records)
    for entry in scorer.rank(candidate):
        print(entry.name, entry.score)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..conflicts.detector import ConflictDetector
from ..data.models import AttendanceSummary, CandidateAssignment, FacultyProfile, ScheduleRecord
from ..indexes import ScheduleIndex, ensure_index
from ..stats import EMPTY_STATS, FacultyLoadStats, compute_load_stats
from ..timeblocks import term_order
from .config import DEFAULT_CONFIG, ScoringConfig
from .credentials import collect_credential_tokens, degree_score
from .factors import (
    attendance_factor,
    cross_listing_boost,
    department_alignment,
    dept_score,
    employment_score,
    grades_factor,
    is_future,
    load_score,
    match_score,
    overload_score,
    program_frequency,
    term_experience_score,
)
from .time_fit import time_score

logger = logging.getLogger(__name__)

FACTOR_NAMES = ("dept", "employment", "degree", "time", "load", "overload", "term_exp", "match")


@dataclass(frozen=True)
class FacultyScore:
    """Suitability of one faculty member for a candidate offering."""
    faculty_id: str
    name: str
    score: float
    parts: dict[str, float] = field(default_factory=dict)

    @property
    def rounded(self) -> float:
        return round(self.score, 2)

    def rank_key(self) -> tuple[float, str, str]:
        """Higher score first, then display name (case-insensitive), then id."""
        return (-self.rounded, self.name.casefold(), self.faculty_id)


class FacultySuitabilityScorer:
    """
    Score faculty for candidate offerings against one schedule snapshot.

    The index and load stats are built once and reused for every candidate
    and every faculty member scored through this instance.
    """

    def __init__(
        self,
        faculties: Iterable[FacultyProfile],
        records: Union[ScheduleIndex, Iterable[ScheduleRecord]],
        stats: Optional[Mapping[str, FacultyLoadStats]] = None,
        config: Optional[ScoringConfig] = None,
    ):
        self.faculties = tuple(faculties)
        self.config = config or DEFAULT_CONFIG
        self.index = ensure_index(records)
        if stats is None:
            stats = compute_load_stats(self.faculties, self.index, self.config.constants.load_baseline)
        self.stats = dict(stats)

    def score_faculty(
        self,
        faculty: FacultyProfile,
        candidate: CandidateAssignment,
        attendance: Optional[AttendanceSummary] = None,
        grade_statuses: Optional[Sequence[str]] = None,
    ) -> FacultyScore:
        """
        Score a single faculty member.

        Args:
            faculty: Faculty being scored
            candidate: Proposed offering
            attendance: Attendance aggregate for this faculty, if any
            grade_statuses: Externally supplied grade submission statuses;
                defaults to the statuses on same-term records

        Returns:
            FacultyScore with the blended score and every sub-score
        """
        c = self.config.constants
        weights = self.config.weights

        history = self.index.records_for_faculty(faculty.id, faculty.name)
        cand_order = term_order(candidate.term, candidate.school_year)
        cand_term = candidate.normalized_term
        same_term = [r for r in history if not cand_term or r.normalized_term == cand_term]
        past = [r for r in history if not is_future(r, cand_order)]

        stat = self.stats.get(faculty.id, EMPTY_STATS)
        ratio = stat.load_ratio(c.load_baseline)

        prog_freq = program_frequency(candidate, history, cand_order, c)
        tokens = collect_credential_tokens(
            [faculty.name] + [r.faculty_name for r in history],
            faculty.credential_text,
        )

        parts = {
            "dept": dept_score(prog_freq, department_alignment(candidate, faculty, c)),
            "employment": employment_score(faculty, ratio, c),
            "degree": degree_score(tokens, c),
            "time": time_score(candidate, past, same_term, c),
            "load": load_score(ratio, c),
            "overload": overload_score(stat.overload, c),
            "term_exp": term_experience_score(same_term, cand_order, c),
            "match": match_score(candidate, history, c),
        }
        parts["dept"] = cross_listing_boost(parts["dept"], prog_freq, parts["degree"], parts["match"], c)

        if grade_statuses is None:
            grade_statuses = [r.grades_status for r in same_term]
        att_factor, att_part = attendance_factor(attendance, self.config.penalties)
        gr_factor, gr_part = grades_factor(grade_statuses, self.config.penalties)

        blended = math.fsum(getattr(weights, name) * parts[name] for name in FACTOR_NAMES)
        score = max(1.0, min(10.0, 10.0 * blended * att_factor * gr_factor))

        parts["attendance"] = att_part
        parts["grades"] = gr_part
        return FacultyScore(faculty_id=faculty.id, name=faculty.name, score=score, parts=parts)

    def score(
        self,
        candidate: CandidateAssignment,
        attendance: Optional[Mapping[str, AttendanceSummary]] = None,
        grades: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> dict[str, FacultyScore]:
        """Score every faculty member in the catalog, keyed by faculty id."""
        attendance = attendance or {}
        grades = grades or {}
        scores = {
            f.id: self.score_faculty(f, candidate, attendance.get(f.id), grades.get(f.id))
            for f in self.faculties
        }
        logger.debug("Scored %d faculty for %s", len(scores), candidate.course_code or candidate.course_title)
        return scores

    def rank(
        self,
        candidate: CandidateAssignment,
        attendance: Optional[Mapping[str, AttendanceSummary]] = None,
        grades: Optional[Mapping[str, Sequence[str]]] = None,
        limit: Optional[int] = None,
        eligible_only: bool = False,
        conflict_records: Optional[Union[ScheduleIndex, Iterable[ScheduleRecord]]] = None,
    ) -> list[FacultyScore]:
        """
        Faculty ordered best first.

        Ties on the score rounded to two decimals fall back to display name,
        then id, so the order does not depend on catalog order.

        With ``eligible_only`` the candidate is re-proposed for each faculty
        member and anyone whose proposal conflicts is left out. Conflicts are
        checked against ``conflict_records`` when given (usually the records
        of the candidate's own school year), else against the scored history.
        """
        scores = self.score(candidate, attendance, grades)
        if eligible_only:
            busy = self.conflicting_faculty(candidate, conflict_records)
            scores = {fid: entry for fid, entry in scores.items() if fid not in busy}
        ranked = sorted(scores.values(), key=FacultyScore.rank_key)
        return ranked[:limit] if limit is not None else ranked

    def conflicting_faculty(
        self,
        candidate: CandidateAssignment,
        records: Optional[Union[ScheduleIndex, Iterable[ScheduleRecord]]] = None,
    ) -> set[str]:
        """Ids of faculty who cannot take the candidate without a conflict."""
        detector = ConflictDetector(self.index if records is None else records)
        busy = set()
        for faculty in self.faculties:
            verdict = detector.evaluate(candidate.with_faculty(faculty))
            if verdict.conflict:
                logger.debug("Faculty %s not eligible: %s", faculty.id, verdict.reason)
                busy.add(faculty.id)
        return busy


def rank_faculty(
    candidate: CandidateAssignment,
    faculties: Iterable[FacultyProfile],
    records: Union[ScheduleIndex, Iterable[ScheduleRecord]],
    attendance: Optional[Mapping[str, AttendanceSummary]] = None,
    grades: Optional[Mapping[str, Sequence[str]]] = None,
    config: Optional[ScoringConfig] = None,
    limit: Optional[int] = None,
    eligible_only: bool = False,
) -> list[FacultyScore]:
    """One-shot ranking for a single candidate."""
    scorer = FacultySuitabilityScorer(faculties, records, config=config)
    return scorer.rank(candidate, attendance=attendance, grades=grades, limit=limit, eligible_only=eligible_only)
