"""
Individual suitability factors.

Each factor maps to [0, 1] before weighting, except the attendance and
grades modifiers, which are multiplicative and clamped by PenaltyConfig.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from ..data.models import AttendanceSummary, CandidateAssignment, FacultyProfile, ScheduleRecord
from ..indexes import normalize_key
from ..timeblocks import term_order
from .config import PenaltyConfig, ScoringConstants
from .similarity import (
    cosine,
    dice_bigram,
    normalize_tight,
    sim_ratio,
    token_fuzzy_best_ratio,
    tokenize,
    topic_tokens,
    topic_vector,
)
from .time_fit import record_weight


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def record_order(record: ScheduleRecord) -> Optional[int]:
    return term_order(record.term, record.school_year)


def is_future(record: ScheduleRecord, candidate_order: Optional[int]) -> bool:
    """Whether a record belongs to a term after the candidate's."""
    order = record_order(record)
    return candidate_order is not None and order is not None and order > candidate_order


# =============================================================================
# Program / Department
# =============================================================================

def program_frequency(
    candidate: CandidateAssignment,
    history: Iterable[ScheduleRecord],
    candidate_order: Optional[int],
    constants: Optional[ScoringConstants] = None,
) -> float:
    """
    Recency and unit weighted share of past assignments to the candidate's
    program, smoothed as (wProg + 0.5) / (wTotal + 1). Future terms are
    ignored; 0.5 when there is no history.
    """
    c = constants or ScoringConstants()
    program = normalize_tight(candidate.program)
    total: list[float] = []
    matched: list[float] = []
    for record in history:
        order = record_order(record)
        if candidate_order is not None and order is not None and order > candidate_order:
            continue
        recency = 1.0
        if candidate_order is not None and order is not None:
            recency = max(c.dept_recency_floor, c.dept_recency_decay ** max(0, candidate_order - order))
        weight = recency * record_weight(record, c.unit_weight_floor)
        total.append(weight)
        if program and normalize_tight(record.program) == program:
            matched.append(weight)

    w_total = math.fsum(total)
    if w_total <= 0:
        return 0.5
    return (math.fsum(matched) + 0.5) / (w_total + 1.0)


def department_alignment(
    candidate: CandidateAssignment,
    faculty: FacultyProfile,
    constants: Optional[ScoringConstants] = None,
) -> float:
    """1.0 when the faculty department contains the program code, 0.85 on a literal department match."""
    c = constants or ScoringConstants()
    dept = faculty.department.lower()
    program = candidate.program.lower()
    if program and program in dept:
        return c.dept_align_contains
    cand_dept = candidate.department.lower()
    if cand_dept and dept == cand_dept:
        return c.dept_align_literal
    return c.dept_align_baseline


def dept_score(program_freq: float, alignment: float) -> float:
    return 0.75 * program_freq + 0.25 * alignment


def cross_listing_boost(
    dept: float,
    program_freq: float,
    degree: float,
    match: float,
    constants: Optional[ScoringConstants] = None,
) -> float:
    """
    Raise the department score of faculty outside the program whose degree
    and course match are both strong.
    """
    c = constants or ScoringConstants()
    strength = (degree + match) / 2
    if strength < c.cross_listing_strength or program_freq >= c.cross_listing_prog_ceiling:
        return dept
    tolerance = min(1.0, (strength - 0.7) / 0.3)
    return min(1.0, dept + c.cross_listing_boost * tolerance * (1 - program_freq))


# =============================================================================
# Employment / Load
# =============================================================================

def employment_score(
    faculty: FacultyProfile,
    load_ratio: float,
    constants: Optional[ScoringConstants] = None,
) -> float:
    """Employment type score, throttled when the faculty is already over a full load."""
    c = constants or ScoringConstants()
    kind = faculty.employment_type.lower()
    if "full" in kind:
        score = c.employment_full_time
    elif "knp" in kind:
        score = c.employment_knp
    elif "part" in kind:
        score = c.employment_part_time
    else:
        score = c.employment_other
    if load_ratio > 1:
        score *= 1 - min(c.employment_throttle_cap, c.employment_throttle_rate * (load_ratio - 1))
    return max(0.0, score)


def load_score(load_ratio: float, constants: Optional[ScoringConstants] = None) -> float:
    """Logistic of the load ratio: 0.5 at the center, falling as load grows."""
    c = constants or ScoringConstants()
    return 1.0 / (1.0 + math.exp(c.logistic_slope * (load_ratio - c.logistic_center)))


def overload_score(overload_units: float, constants: Optional[ScoringConstants] = None) -> float:
    c = constants or ScoringConstants()
    return max(0.0, 1.0 - overload_units / c.overload_span)


# =============================================================================
# Term Experience
# =============================================================================

def term_experience_score(
    same_term: Sequence[ScheduleRecord],
    candidate_order: Optional[int],
    constants: Optional[ScoringConstants] = None,
) -> float:
    """
    How often, and how broadly, the faculty has taught in this term label.

    Depth discounts each record by `discount ** yearsBack`; breadth counts
    distinct course codes. Both saturate.
    """
    c = constants or ScoringConstants()
    recency: list[float] = []
    codes: set[str] = set()
    for record in same_term:
        order = record_order(record)
        years_back = 0
        if candidate_order is not None and order is not None:
            years_back = max(0, (candidate_order - order) // 3)
        recency.append(c.term_exp_discount ** years_back)
        code = (record.course_code or record.course_title).strip().lower()
        if code:
            codes.add(code)

    depth = min(1.0, math.fsum(recency) / c.term_exp_saturation)
    breadth = min(1.0, len(codes) / c.term_exp_breadth_saturation)
    w = c.term_exp_depth_weight
    return min(1.0, w * depth + (1 - w) * breadth)


# =============================================================================
# Course Match
# =============================================================================

def course_tags(code: str, title: str, topics: Sequence[str] = ()) -> list[str]:
    """Explicit topics when present, else distinct words of code and title."""
    if topics:
        return [t.lower() for t in topics]
    return list(dict.fromkeys(topic_tokens(code) + topic_tokens(title)))


def _pair_similarity(
    candidate: CandidateAssignment,
    record: ScheduleRecord,
    constants: ScoringConstants,
) -> Optional[float]:
    code_tokens = tokenize(candidate.course_code)
    title_tokens = tokenize(candidate.course_title)
    r_code_tokens = tokenize(record.course_code)
    r_title_tokens = tokenize(record.course_title)
    r_all = list(dict.fromkeys(r_code_tokens + r_title_tokens))
    if not r_all:
        return None

    cand_code = normalize_tight(candidate.course_code)
    r_code = normalize_tight(record.course_code)

    code_match = token_fuzzy_best_ratio(code_tokens, r_code_tokens or r_all)
    title_match = token_fuzzy_best_ratio(title_tokens, r_title_tokens or r_all)
    code_w = (
        constants.code_weight_with_digits
        if any(ch.isdigit() for ch in cand_code)
        else constants.code_weight_without_digits
    )
    token_match = code_w * code_match + (1 - code_w) * title_match

    code_dice = dice_bigram(cand_code, r_code)
    title_dice = dice_bigram(candidate.course_title, record.course_title)
    char_match = constants.code_dice_weight * code_dice + (1 - constants.code_dice_weight) * title_dice

    combo = constants.token_blend * token_match + (1 - constants.token_blend) * char_match
    if max(sim_ratio(cand_code, r_code), code_dice) >= constants.near_code_threshold:
        combo = 1.0
    return combo


def repeat_penalty(
    candidate: CandidateAssignment,
    history: Iterable[ScheduleRecord],
    constants: Optional[ScoringConstants] = None,
) -> float:
    """Multiplier below 1 once a faculty has repeated the exact course code often."""
    c = constants or ScoringConstants()
    code = normalize_key(candidate.course_code)
    if not code:
        return 1.0
    repeats = sum(1 for r in history if normalize_key(r.course_code) == code)
    if repeats < c.repeat_penalty_start:
        return 1.0
    return max(c.repeat_penalty_floor, 1 - c.repeat_penalty_step * (repeats - 2))


def match_score(
    candidate: CandidateAssignment,
    history: Sequence[ScheduleRecord],
    constants: Optional[ScoringConstants] = None,
) -> float:
    """
    Course match between the candidate and the faculty's teaching history.

    An exact normalized course-code match scores 1.0 outright (before the
    repeat penalty). Otherwise the best fuzzy similarity is floored at the
    weak threshold, rescaled into [0.5, 1] and blended with topic cosine.
    """
    c = constants or ScoringConstants()
    cand_code = normalize_tight(candidate.course_code)
    penalty = repeat_penalty(candidate, history, c)

    if cand_code and any(normalize_tight(r.course_code) == cand_code for r in history):
        return penalty

    score = 0.5
    if tokenize(candidate.course_code) or tokenize(candidate.course_title):
        best = 0.0
        for record in history:
            sim = _pair_similarity(candidate, record, c)
            if sim is not None and sim > best:
                best = sim
        threshold = c.weak_match_threshold
        if best > threshold:
            scaled = (best - threshold) / (1 - threshold)
            score = 0.5 + 0.5 * _clamp(scaled, 0.0, 1.0)

    cand_vec = topic_vector(course_tags(candidate.course_code, candidate.course_title, candidate.topics))
    fac_tags: list[str] = []
    for record in history:
        fac_tags.extend(course_tags(record.course_code, record.course_title, record.topics))
    similarity = cosine(cand_vec, topic_vector(fac_tags))
    score = min(1.0, (1 - c.topic_blend) * score + c.topic_blend * similarity)

    return max(0.0, score * penalty)


# =============================================================================
# Modifiers
# =============================================================================

def attendance_factor(
    summary: Optional[AttendanceSummary],
    penalties: Optional[PenaltyConfig] = None,
) -> tuple[float, float]:
    """
    Attendance modifier and the raw value clamped to [0, 1].

    Returns:
        (factor clamped to [attendance_min, attendance_max], part in [0, 1]);
        (1.0, 1.0) without data
    """
    p = penalties or PenaltyConfig()
    if summary is None or summary.total <= 0:
        return 1.0, 1.0
    raw = 1.0 - math.fsum([
        p.attendance_absent * summary.proportion("absent"),
        p.attendance_late * summary.proportion("late"),
        p.attendance_excused * summary.proportion("excused"),
    ])
    return _clamp(raw, p.attendance_min, p.attendance_max), _clamp(raw, 0.0, 1.0)


def grades_factor(
    statuses: Iterable[Optional[str]],
    penalties: Optional[PenaltyConfig] = None,
) -> tuple[float, float]:
    """
    Grade-submission modifier from late/on-time/early statuses.

    Blank statuses are ignored; unrecognized ones count toward the total
    without moving the score.
    """
    p = penalties or PenaltyConfig()
    late = on_time = early = total = 0
    for status in statuses:
        key = normalize_key(status)
        if not key:
            continue
        total += 1
        if key == "late":
            late += 1
        elif key == "ontime":
            on_time += 1
        elif key == "early":
            early += 1
    if total == 0:
        return 1.0, 1.0
    raw = 1.0 - p.grades_late * late / total + p.grades_on_time_bonus * on_time / total + p.grades_early_bonus * early / total
    return _clamp(raw, p.grades_min, p.grades_max), _clamp(raw, 0.0, 1.0)
