"""Multi-factor faculty suitability scoring."""

from .config import (
    DEFAULT_CONFIG,
    FactorWeights,
    PenaltyConfig,
    ScoringConfig,
    ScoringConstants,
)
from .credentials import CredentialCounts, collect_credential_tokens, degree_score
from .factors import (
    attendance_factor,
    employment_score,
    grades_factor,
    load_score,
    match_score,
    overload_score,
    term_experience_score,
)
from .scorer import FACTOR_NAMES, FacultyScore, FacultySuitabilityScorer, rank_faculty
from .time_fit import time_score

__all__ = [
    # Config
    "DEFAULT_CONFIG",
    "FactorWeights",
    "PenaltyConfig",
    "ScoringConfig",
    "ScoringConstants",
    # Factors
    "CredentialCounts",
    "collect_credential_tokens",
    "degree_score",
    "attendance_factor",
    "employment_score",
    "grades_factor",
    "load_score",
    "match_score",
    "overload_score",
    "term_experience_score",
    "time_score",
    # Scorer
    "FACTOR_NAMES",
    "FacultyScore",
    "FacultySuitabilityScorer",
    "rank_faculty",
]
