"""
Lookup indexes over a schedule snapshot.

Indexes are plain values built once per request and handed to the conflict
detector, load-stats calculator and scorer, so none of them scans the whole
corpus per faculty or per section.

Key formats:
- by_faculty_identity: "id:<facultyId>" and "nm:<normalizedName>"
- by_section_term:     "<normalizedSection>|<normalizedTerm>"
- by_section:          "<normalizedSection>"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from .data.models import ScheduleRecord
from .timeblocks import normalize_term

logger = logging.getLogger(__name__)


def normalize_key(value: Optional[str]) -> str:
    """Lowercase and strip everything but letters and digits."""
    return re.sub(r"[^a-z0-9]", "", str(value or "").lower())


def identity_keys(faculty_id: Optional[str], name: Optional[str]) -> list[str]:
    """Identity index keys for a faculty id and/or display name."""
    keys = []
    if faculty_id:
        keys.append(f"id:{faculty_id}")
    nm = normalize_key(name)
    if nm:
        keys.append(f"nm:{nm}")
    return keys


def section_term_key(section: Optional[str], term: Optional[str]) -> str:
    return f"{normalize_key(section)}|{normalize_term(term)}"


@dataclass(frozen=True)
class ScheduleIndex:
    """Caller-owned lookup tables over one snapshot of schedule records."""
    records: tuple[ScheduleRecord, ...] = ()
    by_faculty_identity: dict[str, tuple[ScheduleRecord, ...]] = field(default_factory=dict)
    by_section_term: dict[str, tuple[ScheduleRecord, ...]] = field(default_factory=dict)
    by_section: dict[str, tuple[ScheduleRecord, ...]] = field(default_factory=dict)

    def records_for_faculty(
        self,
        faculty_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> list[ScheduleRecord]:
        """
        Records of one faculty member, looked up by id and by name.

        A record reachable through both keys is listed once.
        """
        seen: set[int] = set()
        out: list[ScheduleRecord] = []
        for key in identity_keys(faculty_id, name):
            for record in self.by_faculty_identity.get(key, ()):
                if id(record) in seen:
                    continue
                seen.add(id(record))
                out.append(record)
        return out

    def records_for_section(self, section: Optional[str], term: Optional[str] = None) -> list[ScheduleRecord]:
        """Records of a section, optionally restricted to one term."""
        if term is None:
            return list(self.by_section.get(normalize_key(section), ()))
        return list(self.by_section_term.get(section_term_key(section, term), ()))

    def __len__(self) -> int:
        return len(self.records)


def build_indexes(records: Iterable[ScheduleRecord]) -> ScheduleIndex:
    """
    Build identity and section lookups for a batch of records.

    Records lacking both a faculty id and a name are left out of the
    identity index but still appear in the section indexes.
    """
    by_identity: dict[str, list[ScheduleRecord]] = {}
    by_section_term: dict[str, list[ScheduleRecord]] = {}
    by_section: dict[str, list[ScheduleRecord]] = {}

    kept = tuple(records)
    for record in kept:
        for key in identity_keys(record.faculty_id, record.faculty_name):
            by_identity.setdefault(key, []).append(record)
        by_section_term.setdefault(section_term_key(record.section, record.term), []).append(record)
        by_section.setdefault(normalize_key(record.section), []).append(record)

    logger.debug(
        "Indexed %d records: %d identity keys, %d section/term keys",
        len(kept), len(by_identity), len(by_section_term),
    )
    return ScheduleIndex(
        records=kept,
        by_faculty_identity={k: tuple(v) for k, v in by_identity.items()},
        by_section_term={k: tuple(v) for k, v in by_section_term.items()},
        by_section={k: tuple(v) for k, v in by_section.items()},
    )


def ensure_index(source: Union[ScheduleIndex, Iterable[ScheduleRecord]]) -> ScheduleIndex:
    """Accept either a prebuilt index or raw records."""
    if isinstance(source, ScheduleIndex):
        return source
    return build_indexes(source)
