"""Conflict detection for candidate assignments and whole schedules."""

from .detector import (
    REASON_DOUBLE_BOOKED,
    REASON_DUPLICATE_COURSE,
    ConflictDetail,
    ConflictDetector,
    ConflictVerdict,
    InvalidCandidateError,
    check_conflict,
    validate_candidate,
)
from .audit import (
    REASONS,
    ConflictGroup,
    audit_schedule,
    summarize_groups,
)

__all__ = [
    # Detector
    "REASON_DOUBLE_BOOKED",
    "REASON_DUPLICATE_COURSE",
    "ConflictDetail",
    "ConflictDetector",
    "ConflictVerdict",
    "InvalidCandidateError",
    "check_conflict",
    "validate_candidate",
    # Audit
    "REASONS",
    "ConflictGroup",
    "audit_schedule",
    "summarize_groups",
]
