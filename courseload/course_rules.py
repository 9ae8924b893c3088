"""Course-based scheduling rules (lab, PE/NSTP and session eligibility)."""

from __future__ import annotations

import re
from typing import Optional


# Offerings that are routinely left without a fixed day/time
UNSCHEDULED_COURSE_PATTERNS = (
    r"\bLAB\b",
    r"\bLABORATORY\b",
    r"\bLEC\s*/\s*LAB\b",
    r"\bPE\b",
    r"\bPATHFIT\b",
    r"PHYSICAL\s+EDUCATION",
    r"\bNSTP\b",
    r"\bCWTS\b",
    r"\bROTC\b",
    r"\bLTS\b",
    r"DEFENSE\s+TACTICS",
    r"DEFENSIVE\s+TACTICS",
)

_UNSCHEDULED_RE = re.compile("|".join(UNSCHEDULED_COURSE_PATTERNS))
_PE_NSTP_RE = re.compile(r"\bPE\b|\bPATHFIT\b|PHYSICAL\s+EDUCATION|\bNSTP\b")

SESSIONS = ("morning", "afternoon", "evening")

# Session key -> short band used by the time factor
SESSION_BANDS = {"morning": "AM", "afternoon": "PM", "evening": "EVE"}


def _course_text(code: Optional[str], title: Optional[str]) -> str:
    return " ".join(str(v) for v in (code, title) if v).upper()


def is_unscheduled_course(code: Optional[str], title: Optional[str]) -> bool:
    """
    Whether an offering is lab/PE/NSTP/Defense-Tactics-like.

    Such offerings are intentionally left with a TBA day or time and are
    exempt from faculty double-booking checks while unscheduled.
    """
    text = _course_text(code, title)
    # "PE101", "NSTP2": keyword glued to a catalog number
    spaced = re.sub(r"(?<=[A-Z])(?=\d)", " ", text)
    return bool(_UNSCHEDULED_RE.search(spaced))


def is_pe_or_nstp(code: Optional[str], title: Optional[str]) -> bool:
    """Whether an offering is a PE or NSTP course."""
    text = re.sub(r"(?<=[A-Z])(?=\d)", " ", _course_text(code, title))
    return bool(_PE_NSTP_RE.search(text))


def normalize_session_key(value: Optional[str]) -> str:
    """
    Normalize a block/session label to 'morning', 'afternoon' or 'evening'.

    Returns "" when the label is not recognized.
    """
    txt = str(value or "").strip().lower()
    if not txt:
        return ""
    if re.search(r"evening|night|\beve\b", txt):
        return "evening"
    if re.search(r"afternoon|\bpm\b|p\.m", txt):
        return "afternoon"
    if re.search(r"morning|\bam\b|a\.m", txt):
        return "morning"
    return ""


def session_band(value: Optional[str]) -> str:
    """Session label as AM/PM/EVE, or "" when unknown."""
    return SESSION_BANDS.get(normalize_session_key(value), "")


def allowed_sessions_for_course(
    code: Optional[str],
    title: Optional[str],
    block_session: Optional[str],
) -> list[str]:
    """
    Sessions in which an offering may be scheduled for a block.

    Regular courses follow the block's own session. PE and NSTP run outside
    the block's regular session so they do not collide with its lectures.
    """
    base = normalize_session_key(block_session)
    if not is_pe_or_nstp(code, title):
        return [base] if base else list(SESSIONS)
    if base == "morning":
        return ["afternoon"]
    if base == "afternoon":
        return ["morning"]
    if base == "evening":
        return ["morning", "afternoon"]
    return ["morning", "afternoon"]
