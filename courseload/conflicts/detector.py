"""
Conflict detection for a proposed assignment.

Rules, first match wins:

1. Double-booking: another record of the same faculty identity in the same
   term whose days intersect and whose time overlaps the candidate's.
2. Duplicate course in block: another record in the same section and term
   carrying the same course code (or, failing that, the same course title).

Lab, PE, NSTP and Defense-Tactics-like offerings whose day or time is still a
placeholder skip rule 1, since they are routinely left unscheduled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Union

from ..course_rules import (
    SESSION_BANDS,
    allowed_sessions_for_course,
    is_pe_or_nstp,
    is_unscheduled_course,
)
from ..data.models import CandidateAssignment, ScheduleRecord
from ..indexes import ScheduleIndex, build_indexes, ensure_index, normalize_key
from ..timeblocks import days_overlap, is_placeholder, session_of, times_collide

logger = logging.getLogger(__name__)

REASON_DOUBLE_BOOKED = "Double-booked: same faculty"
REASON_DUPLICATE_COURSE = "duplicate course in block"

_BAND_SESSIONS = {band: key for key, band in SESSION_BANDS.items()}


class InvalidCandidateError(ValueError):
    """Raised when a candidate lacks the fields a conflict check needs."""
    pass


@dataclass(frozen=True)
class ConflictDetail:
    """One conflicting record and why it conflicts."""
    reason: str
    item: ScheduleRecord

    def sort_key(self) -> tuple[str, str, str]:
        return (self.reason, self.item.id or "", self.item.model_dump_json())


@dataclass(frozen=True)
class ConflictVerdict:
    """Outcome of checking one candidate."""
    conflict: bool = False
    details: tuple[ConflictDetail, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def reason(self) -> Optional[str]:
        return self.details[0].reason if self.details else None

    @property
    def reasons(self) -> list[str]:
        return sorted({d.reason for d in self.details})


def _verdict(details: list[ConflictDetail], warnings: list[str]) -> ConflictVerdict:
    details.sort(key=ConflictDetail.sort_key)
    return ConflictVerdict(conflict=bool(details), details=tuple(details), warnings=tuple(warnings))


def validate_candidate(candidate: CandidateAssignment) -> None:
    """
    Raise InvalidCandidateError unless term, time and a faculty id or name
    are present. Placeholder times like "TBA" are allowed.
    """
    missing = []
    if not candidate.term:
        missing.append("term")
    if not candidate.time:
        missing.append("time")
    if not candidate.has_faculty:
        missing.append("faculty id or name")
    if missing:
        raise InvalidCandidateError(f"Candidate is missing {', '.join(missing)}: {candidate}")


def session_warnings(candidate: CandidateAssignment) -> list[str]:
    """Advisories for PE/NSTP offerings placed inside the block's own session."""
    if not candidate.session or not is_pe_or_nstp(candidate.course_code, candidate.course_title):
        return []
    tr = candidate.time_range
    if tr is None:
        return []
    allowed = allowed_sessions_for_course(candidate.course_code, candidate.course_title, candidate.session)
    actual = _BAND_SESSIONS[session_of(tr.midpoint)]
    if actual in allowed:
        return []
    label = candidate.course_code or candidate.course_title
    return [f"{label} runs in the {actual} but should be scheduled in: {', '.join(allowed)}"]


class ConflictDetector:
    """
    Check candidate assignments against a snapshot of existing records.

    Usage:
        detector = ConflictDetector(records)
        verdict = detector.evaluate(candidate)
        if verdict.conflict:
            print(verdict.reason)
    """

    def __init__(self, records: Union[ScheduleIndex, Iterable[ScheduleRecord]]):
        self.index = ensure_index(records)

    def evaluate(self, candidate: CandidateAssignment, exclude_id: Optional[str] = None) -> ConflictVerdict:
        """
        Check one candidate.

        Args:
            candidate: Proposed assignment
            exclude_id: Id of the record being edited, ignored during the check

        Returns:
            ConflictVerdict; "no conflict" is an ordinary verdict

        Raises:
            InvalidCandidateError: If term, time or faculty identity is missing
        """
        validate_candidate(candidate)
        verdict = self._evaluate(candidate, self.index, exclude_id=exclude_id)
        logger.debug("Checked %s: %s", candidate, verdict.reason or "no conflict")
        return verdict

    def evaluate_batch(self, candidates: Sequence[CandidateAssignment]) -> list[ConflictVerdict]:
        """
        Check pending candidates against the snapshot and against each other.

        Each candidate sees every other pending candidate as if it were
        already committed. Verdicts come back in input order.
        """
        for candidate in candidates:
            validate_candidate(candidate)

        pending = [c.as_record() for c in candidates]
        combined = build_indexes(list(self.index.records) + pending)
        verdicts = [
            self._evaluate(candidate, combined, own=record)
            for candidate, record in zip(candidates, pending)
        ]
        logger.debug(
            "Checked batch of %d candidates: %d conflicting",
            len(verdicts), sum(1 for v in verdicts if v.conflict),
        )
        return verdicts

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _evaluate(
        self,
        candidate: CandidateAssignment,
        index: ScheduleIndex,
        exclude_id: Optional[str] = None,
        own: Optional[ScheduleRecord] = None,
    ) -> ConflictVerdict:
        warnings = session_warnings(candidate)

        def skipped(record: ScheduleRecord) -> bool:
            if own is not None and record is own:
                return True
            return exclude_id is not None and record.id is not None and record.id == exclude_id

        if not self._placeholder_exempt(candidate):
            details = [
                ConflictDetail(REASON_DOUBLE_BOOKED, r)
                for r in self._double_bookings(candidate, index)
                if not skipped(r)
            ]
            if details:
                return _verdict(details, warnings)

        details = [
            ConflictDetail(REASON_DUPLICATE_COURSE, r)
            for r in self._duplicates_in_block(candidate, index, skipped)
        ]
        return _verdict(details, warnings)

    @staticmethod
    def _placeholder_exempt(candidate: CandidateAssignment) -> bool:
        if not is_unscheduled_course(candidate.course_code, candidate.course_title):
            return False
        return is_placeholder(candidate.day) or is_placeholder(candidate.time)

    @staticmethod
    def _double_bookings(candidate: CandidateAssignment, index: ScheduleIndex) -> list[ScheduleRecord]:
        term = candidate.normalized_term
        days = candidate.days
        out = []
        for record in index.records_for_faculty(candidate.faculty_id, candidate.faculty_name):
            if record.normalized_term != term:
                continue
            if not days_overlap(days, record.days):
                continue
            if times_collide(candidate.time, record.time):
                out.append(record)
        return out

    @staticmethod
    def _duplicates_in_block(candidate: CandidateAssignment, index: ScheduleIndex, skipped) -> list[ScheduleRecord]:
        if not normalize_key(candidate.section):
            return []
        block = [r for r in index.records_for_section(candidate.section, candidate.term) if not skipped(r)]

        code = normalize_key(candidate.course_code)
        if code:
            same_code = [r for r in block if normalize_key(r.course_code) == code]
            if same_code:
                return same_code

        title = normalize_key(candidate.course_title)
        if title:
            return [r for r in block if normalize_key(r.course_title) == title]
        return []


def check_conflict(
    candidate: CandidateAssignment,
    records: Union[ScheduleIndex, Iterable[ScheduleRecord]],
    exclude_id: Optional[str] = None,
) -> ConflictVerdict:
    """One-shot conflict check."""
    return ConflictDetector(records).evaluate(candidate, exclude_id=exclude_id)
