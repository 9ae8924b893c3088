"""
Scoring configuration.

Every empirically chosen constant of the suitability score lives here as a
named, overridable value. Defaults reproduce the production weighting.

Override from a mapping (e.g. a JSON file passed to `rank --config`):

    config = ScoringConfig.from_dict({
        "weights": {"degree": 0.3, "match": 0.1},
        "constants": {"load_baseline": 21},
        "penalties": {"attendance_absent": 0.8},
    })
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class FactorWeights:
    """Weight of each sub-score in the final blend (sum to 1.0 by default)."""
    dept: float = 0.15
    employment: float = 0.05
    degree: float = 0.22
    time: float = 0.18
    load: float = 0.10
    overload: float = 0.04
    term_exp: float = 0.08
    match: float = 0.18

    def as_dict(self) -> dict[str, float]:
        return asdict(self)

    @property
    def total(self) -> float:
        return math.fsum(self.as_dict().values())


@dataclass(frozen=True)
class ScoringConstants:
    """Shape parameters of the individual factors."""
    # Load
    load_baseline: float = 24.0  # Nominal full load in units
    logistic_center: float = 0.8  # Load ratio at which loadScore is 0.5
    logistic_slope: float = 8.0
    overload_span: float = 6.0  # Overload units that drive overloadScore to 0

    # History weighting
    unit_weight_floor: float = 0.5  # Minimum unit weight of a historical record

    # Program/department
    dept_recency_decay: float = 0.75  # Per term step back
    dept_recency_floor: float = 0.25
    dept_align_contains: float = 1.0
    dept_align_literal: float = 0.85
    dept_align_baseline: float = 0.6

    # Cross-listing tolerance
    cross_listing_strength: float = 0.8  # Mean of degree and match needed
    cross_listing_prog_ceiling: float = 0.6
    cross_listing_boost: float = 0.12

    # Employment
    employment_full_time: float = 1.0
    employment_knp: float = 0.85
    employment_part_time: float = 0.7
    employment_other: float = 0.6
    employment_throttle_rate: float = 0.2  # Per unit of load ratio above 1
    employment_throttle_cap: float = 0.3

    # Degree
    degree_doctoral: float = 1.1
    degree_masters: float = 0.35
    degree_license: float = 0.12
    degree_attorney: float = 0.6
    degree_cpa: float = 0.5
    degree_engineer: float = 0.2
    degree_architect: float = 0.2
    degree_bachelor_only: float = 0.2

    # Time
    kde_bandwidth: float = 60.0  # Minutes
    sigma_floor: float = 45.0  # Minutes
    nearest_decay: float = 240.0  # Minutes
    early_cutoff: int = 9 * 60  # Midpoints before 09:00 are early
    late_cutoff: int = 18 * 60  # Midpoints after 18:00 are late
    top_day_bonus: float = 0.05
    fatigue_step: float = 0.05
    fatigue_cap: float = 0.15
    fatigue_min_slots: int = 2
    time_neutral: float = 0.7

    # Term experience
    term_exp_discount: float = 0.8  # Per year back
    term_exp_saturation: float = 6.0
    term_exp_breadth_saturation: float = 6.0
    term_exp_depth_weight: float = 0.85

    # Course match
    weak_match_threshold: float = 0.5
    near_code_threshold: float = 0.94
    code_weight_with_digits: float = 0.88
    code_weight_without_digits: float = 0.82
    token_blend: float = 0.75
    code_dice_weight: float = 0.8
    topic_blend: float = 0.4
    repeat_penalty_start: int = 3  # Exact-code repeats before the penalty applies
    repeat_penalty_step: float = 0.03
    repeat_penalty_floor: float = 0.85


@dataclass(frozen=True)
class PenaltyConfig:
    """Weights and clamps of the attendance and grade-submission modifiers."""
    attendance_absent: float = 0.6
    attendance_late: float = 0.3
    attendance_excused: float = 0.0
    attendance_min: float = 0.7
    attendance_max: float = 1.0

    grades_late: float = 0.5
    grades_on_time_bonus: float = 0.02
    grades_early_bonus: float = 0.05
    grades_min: float = 0.7
    grades_max: float = 1.05


def _override(obj: Any, values: Optional[Mapping[str, Any]], section: str) -> Any:
    if not values:
        return obj
    known = {f.name: f for f in fields(obj)}
    unknown = sorted(set(values) - set(known))
    if unknown:
        raise ValueError(f"Unknown {section} setting(s): {', '.join(unknown)}")
    coerced = {}
    for name, value in values.items():
        current = getattr(obj, name)
        try:
            coerced[name] = type(current)(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid {section}.{name}: {value!r}") from e
    return replace(obj, **coerced)


@dataclass(frozen=True)
class ScoringConfig:
    """Bundle of weights, factor constants and penalty modifiers."""
    weights: FactorWeights = field(default_factory=FactorWeights)
    constants: ScoringConstants = field(default_factory=ScoringConstants)
    penalties: PenaltyConfig = field(default_factory=PenaltyConfig)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]] = None) -> ScoringConfig:
        """
        Build a config from a nested override mapping.

        Raises:
            ValueError: On unknown sections or settings, or uncoercible values
        """
        data = dict(data or {})
        unknown = sorted(set(data) - {"weights", "constants", "penalties"})
        if unknown:
            raise ValueError(f"Unknown config section(s): {', '.join(unknown)}")
        base = cls()
        return cls(
            weights=_override(base.weights, data.get("weights"), "weights"),
            constants=_override(base.constants, data.get("constants"), "constants"),
            penalties=_override(base.penalties, data.get("penalties"), "penalties"),
        )

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return asdict(self)


DEFAULT_CONFIG = ScoringConfig()
