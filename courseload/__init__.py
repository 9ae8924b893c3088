"""Courseload - faculty course-loading conflict detection and suitability ranking."""

from .conflicts import ConflictDetector, ConflictVerdict, audit_schedule, check_conflict
from .data import (
    CandidateAssignment,
    FacultyProfile,
    ScheduleRecord,
    ScheduleSnapshot,
    load_snapshot,
)
from .indexes import ScheduleIndex, build_indexes
from .scoring import FacultyScore, FacultySuitabilityScorer, ScoringConfig, rank_faculty
from .stats import FacultyLoadStats, compute_load_stats
from .cli import app as cli_app

__all__ = [
    # Models
    "CandidateAssignment",
    "FacultyProfile",
    "ScheduleRecord",
    "ScheduleSnapshot",
    "load_snapshot",
    # Conflicts
    "ConflictDetector",
    "ConflictVerdict",
    "audit_schedule",
    "check_conflict",
    # Scoring
    "FacultyScore",
    "FacultySuitabilityScorer",
    "ScoringConfig",
    "rank_faculty",
    # Indexes and load
    "ScheduleIndex",
    "build_indexes",
    "FacultyLoadStats",
    "compute_load_stats",
    # CLI
    "cli_app",
]
