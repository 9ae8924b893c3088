"""
Time-block, day-spec and term parsing.

Time conventions:
- Time is represented as minutes from midnight (0-1439)
- Day-specs expand to a frozenset of day codes ("MON" .. "SUN")
- An empty day set means "any day" and overlaps every other day set

Supported time-block forms:
- "h[:mm]-h[:mm]AM|PM|NN" (one suffix applies to both bounds; NN ends at noon)
- "HH:MM-HH:MM" (24-hour)

Example:
    >>> parse_time_block("8-9:30AM").key
    '08:00-09:30'
    >>> parse_time_block("08:00-09:30").key
    '08:00-09:30'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional


# =============================================================================
# Constants
# =============================================================================

MINUTES_PER_HOUR = 60
NOON = 12 * MINUTES_PER_HOUR
HALF_DAY = 12 * MINUTES_PER_HOUR
EARLIEST_START = 6 * MINUTES_PER_HOUR

PLACEHOLDERS = frozenset({"", "TBA", "TBD", "NA", "N/A", "NONE", "-"})

DAY_ORDER = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")

_FULL_DAY_NAMES = {
    "MONDAY": "MON",
    "TUESDAY": "TUE",
    "WEDNESDAY": "WED",
    "THURSDAY": "THU",
    "FRIDAY": "FRI",
    "SATURDAY": "SAT",
    "SUNDAY": "SUN",
}

# Whole-token day-spec aliases
DAY_ALIASES: dict[str, tuple[str, ...]] = {
    "M-F": DAY_ORDER[:5],
    "M-S": DAY_ORDER[:6],
    "WEEKDAYS": DAY_ORDER[:5],
    "DAILY": DAY_ORDER[:5],
}

# Single/double letter codes used in compact specs like "MWF", "TTH"
_COMPACT_CODES = (
    ("TH", "THU"),
    ("SU", "SUN"),
    ("M", "MON"),
    ("T", "TUE"),
    ("W", "WED"),
    ("R", "THU"),
    ("F", "FRI"),
    ("S", "SAT"),
)

_SUFFIX_PATTERN = re.compile(r"^(\d{1,2})(?::(\d{2}))?-(\d{1,2})(?::(\d{2}))?(AM|PM|NN)$")
_24H_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})-(\d{1,2}):(\d{2})$")
_DASHES = re.compile(r"[–—]|\s+TO\s+")


# =============================================================================
# Time Helpers
# =============================================================================

def minutes_to_time(minutes: int) -> str:
    """Convert minutes from midnight to HH:MM format."""
    h, m = divmod(int(minutes), MINUTES_PER_HOUR)
    return f"{h:02d}:{m:02d}"


def time_to_minutes(time_str: str) -> int:
    """Convert HH:MM format to minutes from midnight."""
    h, m = map(int, time_str.split(":"))
    return h * MINUTES_PER_HOUR + m


def canonical_key(start: int, end: int) -> str:
    """Format a zero-padded 'HH:MM-HH:MM' key for a minute range."""
    return f"{minutes_to_time(start)}-{minutes_to_time(end)}"


def is_placeholder(text: Optional[str]) -> bool:
    """Whether a day or time value is an intentional 'not scheduled yet' marker."""
    return str(text or "").strip().upper() in PLACEHOLDERS


# =============================================================================
# Time Ranges
# =============================================================================

@dataclass(frozen=True)
class TimeRange:
    """A parsed time block, in minutes from midnight."""
    start: int
    end: int

    @property
    def key(self) -> str:
        """Canonical 'HH:MM-HH:MM' key."""
        return canonical_key(self.start, self.end)

    @property
    def midpoint(self) -> float:
        return (self.start + self.end) / 2

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: TimeRange) -> bool:
        """Half-open overlap: touching ranges (8-9, 9-10) do not overlap."""
        return max(self.start, other.start) < min(self.end, other.end)

    def __str__(self) -> str:
        return self.key


def _to_minutes(hour: int, minute: int, suffix: str) -> int:
    if suffix == "AM" and hour == 12:
        hour = 0
    elif suffix == "PM" and hour != 12:
        hour += 12
    return hour * MINUTES_PER_HOUR + minute


def parse_time_block(text: Optional[str]) -> Optional[TimeRange]:
    """
    Parse a human time-range string.

    Args:
        text: Raw time string such as "8-9AM", "1:30-3PM", "10-12NN" or "13:00-14:30"

    Returns:
        TimeRange with start <= end, or None for placeholders and unparseable text
    """
    raw = str(text or "").strip().upper()
    if raw in PLACEHOLDERS:
        return None
    compact = re.sub(r"\s+", "", _DASHES.sub("-", raw)).replace(".", "")

    match = _SUFFIX_PATTERN.match(compact)
    if match:
        h1, m1, h2, m2, suffix = match.groups()
        h1, h2 = int(h1), int(h2)
        m1, m2 = int(m1 or 0), int(m2 or 0)
        if not (1 <= h1 <= 12 and 1 <= h2 <= 12 and m1 < 60 and m2 < 60):
            return None

        if suffix == "NN":
            start = _to_minutes(h1, m1, "AM")
            end = NOON
        else:
            start = _to_minutes(h1, m1, suffix)
            end = _to_minutes(h2, m2, suffix)
            # One suffix for both bounds: "11-1PM" starts in the morning,
            # "11-12AM" ends at noon. A start before 6 AM is never assumed.
            if start > end and suffix == "PM" and EARLIEST_START <= start - HALF_DAY <= end:
                start -= HALF_DAY
            elif start > end and suffix == "AM" and end + HALF_DAY >= start:
                end += HALF_DAY

        if start > end:
            return None
        return TimeRange(start, end)

    match = _24H_PATTERN.match(compact)
    if match:
        sh, sm, eh, em = (int(g) for g in match.groups())
        if sh > 23 or eh > 24 or sm >= 60 or em >= 60 or (eh == 24 and em):
            return None
        start = sh * MINUTES_PER_HOUR + sm
        end = eh * MINUTES_PER_HOUR + em
        if start > end:
            return None
        return TimeRange(start, end)

    return None


def time_key(text: Optional[str]) -> str:
    """
    Comparison key for a raw time string.

    Parseable blocks use the canonical key; other non-placeholder text falls
    back to its whitespace-free upper-case form; placeholders give "".
    """
    parsed = parse_time_block(text)
    if parsed is not None:
        return parsed.key
    if is_placeholder(text):
        return ""
    return re.sub(r"\s+", "", str(text).upper())


def times_collide(a: Optional[str], b: Optional[str]) -> bool:
    """
    Whether two raw time strings overlap.

    Numeric overlap when both parse; otherwise equality of their time keys.
    Placeholders never collide.
    """
    ra, rb = parse_time_block(a), parse_time_block(b)
    if ra is not None and rb is not None:
        return ra.overlaps(rb)
    ka, kb = time_key(a), time_key(b)
    return bool(ka) and ka == kb


# =============================================================================
# Day Specs
# =============================================================================

def _expand_range(first: str, last: str) -> tuple[str, ...]:
    i, j = DAY_ORDER.index(first), DAY_ORDER.index(last)
    if i <= j:
        return DAY_ORDER[i:j + 1]
    return DAY_ORDER[i:] + DAY_ORDER[:j + 1]


def _day_name(token: str) -> Optional[str]:
    """Day code for a spelled-out day ("MON", "TUES", "WEDS", "THURSDAY"), else None."""
    candidates = [token]
    if token.endswith("S") and len(token) > 3:
        candidates.append(token[:-1])
    for text in candidates:
        if len(text) < 3:
            continue
        for full, code in _FULL_DAY_NAMES.items():
            if full.startswith(text):
                return code
    return None


def _compact_days(token: str) -> list[str]:
    """Letter codes like "MWF"; a token with any unreadable letter gives []."""
    days: list[str] = []
    i = 0
    while i < len(token):
        for letters, code in _COMPACT_CODES:
            if token.startswith(letters, i):
                days.append(code)
                i += len(letters)
                break
        else:
            return []
    return days


def parse_days(spec: Optional[str | Iterable[str]]) -> frozenset[str]:
    """
    Expand a day-spec into day codes.

    Examples:
        "MON-FRI" -> {MON, TUE, WED, THU, FRI}
        "MWF"     -> {MON, WED, FRI}
        "TTH"     -> {TUE, THU}
        "Mon,Wed" -> {MON, WED}
        "ANY", "TBA", "" -> empty set (any day)
    """
    if spec is not None and not isinstance(spec, str):
        found: set[str] = set()
        for part in spec:
            found |= parse_days(part)
        return frozenset(found)

    value = str(spec or "").strip().upper()
    if value in PLACEHOLDERS or value == "ANY":
        return frozenset()
    if value in DAY_ALIASES:
        return frozenset(DAY_ALIASES[value])

    found = set()
    for token in re.split(r"[\s,/;&.]+", value):
        if not token:
            continue
        if token in DAY_ALIASES:
            found.update(DAY_ALIASES[token])
            continue
        if "-" in token:
            first, _, last = token.partition("-")
            a = [_day_name(first)] if _day_name(first) else _compact_days(first)
            b = [_day_name(last)] if _day_name(last) else _compact_days(last)
            if len(a) == 1 and len(b) == 1:
                found.update(_expand_range(a[0], b[0]))
            else:
                found.update(a)
                found.update(b)
            continue
        name = _day_name(token)
        if name:
            found.add(name)
        else:
            found.update(_compact_days(token))
    return frozenset(found)


def days_overlap(a: frozenset[str], b: frozenset[str]) -> bool:
    """Day sets intersect; an empty set on either side matches every day."""
    if not a or not b:
        return True
    return bool(a & b)


def sorted_days(days: Iterable[str]) -> list[str]:
    """Days in calendar order."""
    present = set(days)
    return [d for d in DAY_ORDER if d in present]


# =============================================================================
# Terms and Sessions
# =============================================================================

def normalize_term(label: Optional[str]) -> str:
    """
    Normalize a term label to "1st", "2nd" or "Sem".

    Unrecognized labels come back lowercased and stripped; empty input
    gives "".
    """
    v = str(label or "").strip().lower()
    if not v:
        return ""
    if v.startswith("1") or v.startswith("first"):
        return "1st"
    if v.startswith("2") or v.startswith("second"):
        return "2nd"
    if v.startswith("s"):
        return "Sem"
    return v


def _term_index(term: str) -> int:
    s = term.lower()
    if re.search(r"summer|mid\s*year", s):
        return 3
    if re.search(r"(^|[^a-z0-9])2(nd)?([^a-z0-9]|$)|second|\bsem\s*2\b|\bterm\s*2\b", s):
        return 2
    if re.search(r"(^|[^a-z0-9])3(rd)?([^a-z0-9]|$)", s):
        return 3
    return 1


def _first_year(text: str) -> Optional[int]:
    years = [int(y) for y in re.findall(r"(20\d{2})", text)]
    if years:
        return min(years)
    short = re.search(r"\b(\d{2})\s*[-/]\s*(\d{2})\b", text)
    if short:
        return 2000 + int(short.group(1))
    return None


def term_order(term: Optional[str], school_year: Optional[str] = None) -> Optional[int]:
    """
    Sequential position of a term, consecutive terms differing by 1.

    The year comes from `school_year` (falling back to digits in the term
    label itself); without a year the order is unknown and None is returned.

    Example:
        >>> term_order("2nd", "2024-2025") - term_order("1st", "2024-2025")
        1
    """
    term_s = str(term or "")
    year = _first_year(str(school_year or "")) or _first_year(term_s)
    if year is None:
        return None
    return year * 3 + _term_index(term_s) - 1


def band_of(midpoint: Optional[float]) -> str:
    """Half-day band: AM before noon, PM otherwise (and for unknown times)."""
    if midpoint is not None and midpoint < NOON:
        return "AM"
    return "PM"


def session_of(midpoint: Optional[float]) -> str:
    """Teaching session for a midpoint: AM, PM (from 13:00) or EVE (from 17:00)."""
    if midpoint is None:
        return "AM"
    if midpoint >= 17 * MINUTES_PER_HOUR:
        return "EVE"
    if midpoint >= 13 * MINUTES_PER_HOUR:
        return "PM"
    return "AM"
