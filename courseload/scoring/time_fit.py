"""
Time-of-day fit factor.

Compares a candidate's time block against where a faculty member has
historically taught, blending:

- a Gaussian kernel density over historical midpoints (same day/band first)
- a Gaussian probability from the day+band, day or global mean and sigma
- the distance to the nearest same-term historical slot
- the share of historical load in the candidate's session (AM/PM/EVE)

then adjusting for the faculty's favourite day and for piling up early or
late classes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..course_rules import session_band
from ..data.models import CandidateAssignment, ScheduleRecord
from ..timeblocks import DAY_ORDER, band_of, session_of, sorted_days
from .config import ScoringConstants

ANY_DAY = "ANY"
_DAY_RANK = {day: i for i, day in enumerate(DAY_ORDER + (ANY_DAY,))}


@dataclass(frozen=True)
class TimePoint:
    """One historical meeting: day, half-day band, session and midpoint."""
    day: str
    band: str
    session: str
    midpoint: float
    weight: float


@dataclass(frozen=True)
class _Moments:
    mean: float
    sigma: float


def record_weight(record: ScheduleRecord, floor: float = 0.5) -> float:
    """Unit weight of a historical record; records without units count as 1."""
    return max(floor, record.unit or 1.0)


def time_points(records: Iterable[ScheduleRecord], unit_floor: float = 0.5) -> list[TimePoint]:
    """Expand records with a parseable time into one point per meeting day."""
    points = []
    for record in records:
        tr = record.time_range
        if tr is None:
            continue
        mid = tr.midpoint
        weight = record_weight(record, unit_floor)
        days = sorted_days(record.days) or [ANY_DAY]
        points.extend(
            TimePoint(day=day, band=band_of(mid), session=session_of(mid), midpoint=mid, weight=weight)
            for day in days
        )
    return points


def _moments(points: Sequence[TimePoint]) -> Optional[_Moments]:
    total = math.fsum(p.weight for p in points)
    if total <= 0:
        return None
    mean = math.fsum(p.midpoint * p.weight for p in points) / total
    var = math.fsum(p.weight * (p.midpoint - mean) ** 2 for p in points) / total
    return _Moments(mean=mean, sigma=math.sqrt(var))


def _kde(points: Sequence[TimePoint], at: float, bandwidth: float) -> float:
    den = math.fsum(p.weight for p in points)
    if den <= 0:
        return 0.0
    num = math.fsum(p.weight * math.exp(-0.5 * ((at - p.midpoint) / bandwidth) ** 2) for p in points)
    return num / den


def candidate_session(candidate: CandidateAssignment, midpoint: Optional[float]) -> str:
    """Explicit session label when recognized, otherwise derived from the time."""
    return session_band(candidate.session) or session_of(midpoint)


def top_day(points: Sequence[TimePoint]) -> Optional[str]:
    """Day carrying the most historical weight; ties go to the earlier day."""
    weights: dict[str, list[float]] = {}
    for p in points:
        weights.setdefault(p.day, []).append(p.weight)
    if not weights:
        return None
    totals = {day: math.fsum(ws) for day, ws in weights.items()}
    return min(totals, key=lambda d: (-totals[d], _DAY_RANK.get(d, len(_DAY_RANK))))


def time_score(
    candidate: CandidateAssignment,
    history: Sequence[ScheduleRecord],
    same_term: Sequence[ScheduleRecord],
    constants: Optional[ScoringConstants] = None,
) -> float:
    """
    Time-of-day fit in [0, 1].

    Args:
        candidate: Proposed assignment
        history: Faculty records up to and including the candidate's term
        same_term: Faculty records in the candidate's term label
        constants: Shape parameters

    Returns:
        Blend of density, probability, nearest-slot and session fit; the
        neutral value when the candidate time or the history is unknown
    """
    c = constants or ScoringConstants()
    tr = candidate.time_range
    points = time_points(history, c.unit_weight_floor)
    if tr is None or not points:
        return c.time_neutral

    mid = tr.midpoint
    cand_days = sorted_days(candidate.days) or [ANY_DAY]
    cand_band = band_of(mid)

    by_day_band: dict[tuple[str, str], list[TimePoint]] = {}
    by_day: dict[str, list[TimePoint]] = {}
    for p in points:
        by_day_band.setdefault((p.day, p.band), []).append(p)
        by_day.setdefault(p.day, []).append(p)

    overall = _moments(points)
    global_sigma = max(c.sigma_floor, overall.sigma if overall else c.sigma_floor)

    def stat_for(day: str) -> Optional[_Moments]:
        for group in (by_day_band.get((day, cand_band)), by_day.get(day)):
            if group:
                m = _moments(group)
                if m is not None:
                    sigma = m.sigma if m.sigma >= c.sigma_floor else global_sigma
                    return _Moments(m.mean, sigma)
        if overall is None:
            return None
        return _Moments(overall.mean, global_sigma)

    prob = 0.0
    for day in cand_days:
        st = stat_for(day)
        if st is None:
            continue
        z = abs(mid - st.mean) / (st.sigma or c.sigma_floor)
        prob = max(prob, math.exp(-0.5 * z * z))

    density = 0.0
    for day in cand_days:
        for group in (by_day_band.get((day, cand_band)), by_day.get(day)):
            if group:
                density = max(density, _kde(group, mid, c.kde_bandwidth))
    if density == 0.0:
        density = _kde(points, mid, c.kde_bandwidth)

    session = candidate_session(candidate, mid)
    session_total = math.fsum(p.weight for p in points)
    session_hits = math.fsum(p.weight for p in points if p.session == session)
    session_match = session_hits / session_total if session_total > 0 else 0.5

    same_term_mids = [r.time_range.midpoint for r in same_term if r.time_range is not None]
    nearest = 0.0
    if same_term_mids:
        closest = min(abs(mid - m) for m in same_term_mids)
        nearest = max(0.0, 1.0 - closest / c.nearest_decay)

    score = math.fsum([0.4 * density, 0.25 * prob, 0.2 * nearest, 0.15 * session_match])

    favourite = top_day(points)
    if favourite is not None and favourite in cand_days:
        score = min(1.0, score + c.top_day_bonus)

    if mid < c.early_cutoff or mid > c.late_cutoff:
        off_hours = sum(1 for m in same_term_mids if m < c.early_cutoff or m > c.late_cutoff)
        if off_hours >= c.fatigue_min_slots:
            penalty = min(c.fatigue_cap, c.fatigue_step * (off_hours - 1))
            score = max(0.0, score * (1.0 - penalty))

    return max(0.0, min(1.0, score))
