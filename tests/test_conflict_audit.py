"""Tests for the schedule-wide conflict audit."""

from __future__ import annotations

import random

from courseload.conflicts.audit import (
    DIFFERENT_COURSES,
    EXACT_DUPLICATE,
    REASONS,
    SAME_COURSE_DIFFERENT_SECTIONS,
    SECTION_CODE_MISMATCH,
    SECTION_TIME_OVERLAP,
    SELF_CLASH,
    TERM_MISMATCH,
    TRIPLE_BOOKED,
    audit_schedule,
    expand_by_day,
    has_valid_faculty,
    summarize_groups,
)
from courseload.data.models import ScheduleRecord


def make_record(**kwargs) -> ScheduleRecord:
    defaults = dict(
        faculty_name="Santos, Ana", course_code="IT 101", section="BSIT 1A",
        term="1st", day="M", time="8-9AM",
    )
    defaults.update(kwargs)
    return ScheduleRecord(**defaults)


def reasons_of(groups) -> set[str]:
    return {g.reason for g in groups}


class TestExpandByDay:
    """Tests for per-day expansion and row filtering."""

    def test_one_row_per_day(self):
        rows = expand_by_day([make_record(day="MWF")])
        assert [r.day for r in rows] == ["MON", "WED", "FRI"]

    def test_rows_without_faculty_skipped(self):
        records = [
            make_record(faculty_name="TBA"),
            make_record(faculty_name="Unassigned"),
            make_record(faculty_name=None),
        ]
        assert expand_by_day(records) == []

    def test_rows_without_term_time_or_day_skipped(self):
        records = [make_record(term=""), make_record(time="TBA"), make_record(day="TBA")]
        assert expand_by_day(records) == []

    def test_has_valid_faculty(self):
        assert has_valid_faculty(make_record())
        assert has_valid_faculty(make_record(faculty_name=None, faculty_id="7"))
        assert not has_valid_faculty(make_record(faculty_name="N/A"))


class TestFacultyGroups:
    """Tests for same-faculty clash groups."""

    def test_same_course_different_sections(self):
        groups = audit_schedule([
            make_record(id="1", section="BSIT 1A"),
            make_record(id="2", section="BSIT 1B"),
        ])
        assert SAME_COURSE_DIFFERENT_SECTIONS in reasons_of(groups)
        assert DIFFERENT_COURSES not in reasons_of(groups)

    def test_different_courses(self):
        groups = audit_schedule([
            make_record(id="1", course_code="IT 101", section="BSIT 1A"),
            make_record(id="2", course_code="IT 102", section="BSIT 2A"),
        ])
        assert reasons_of(groups) == {DIFFERENT_COURSES}

    def test_exact_duplicate(self):
        groups = audit_schedule([make_record(id="1"), make_record(id="2")])
        assert EXACT_DUPLICATE in reasons_of(groups)
        group = next(g for g in groups if g.reason == EXACT_DUPLICATE)
        assert [r.id for r in group.items] == ["1", "2"]

    def test_self_clash(self):
        groups = audit_schedule([
            make_record(id="1", time="8-9AM"),
            make_record(id="2", time="8:30-9:30AM"),
        ])
        assert SELF_CLASH in reasons_of(groups)

    def test_triple_booked(self):
        groups = audit_schedule([
            make_record(id="1", course_code="IT 101", section="BSIT 1A"),
            make_record(id="2", course_code="IT 102", section="BSIT 2A"),
            make_record(id="3", course_code="IT 103", section="BSIT 3A"),
        ])
        triple = [g for g in groups if g.reason == TRIPLE_BOOKED]
        assert len(triple) == 1
        assert triple[0].size == 3

    def test_section_code_mismatch(self):
        groups = audit_schedule([
            make_record(id="1", course_code="IT 101"),
            make_record(id="2", course_code="IT 101A"),
        ])
        assert SECTION_CODE_MISMATCH in reasons_of(groups)

    def test_term_mismatch(self):
        groups = audit_schedule([
            make_record(id="1", term="1st"),
            make_record(id="2", term="2nd"),
        ])
        assert reasons_of(groups) == {TERM_MISMATCH}

    def test_different_faculty_no_faculty_groups(self):
        groups = audit_schedule([
            make_record(id="1", section="BSIT 1A"),
            make_record(id="2", section="BSIT 1B", faculty_name="Reyes, Jose"),
        ])
        assert groups == []

    def test_multi_day_clash_on_one_day(self):
        groups = audit_schedule([
            make_record(id="1", day="MWF", course_code="IT 101", section="BSIT 1A"),
            make_record(id="2", day="M", course_code="IT 102", section="BSIT 2A"),
        ])
        different = [g for g in groups if g.reason == DIFFERENT_COURSES]
        assert len(different) == 1
        assert "MON" in different[0].key


class TestSectionOverlap:
    """Tests for section time-overlap components."""

    def test_connected_component(self):
        groups = audit_schedule([
            make_record(id="1", faculty_name="A", course_code="IT 101", time="8-9AM"),
            make_record(id="2", faculty_name="B", course_code="IT 102", time="8:30-9:30AM"),
            make_record(id="3", faculty_name="C", course_code="IT 103", time="9:15-10AM"),
            make_record(id="4", faculty_name="D", course_code="IT 104", time="1-2PM"),
        ])
        overlap = [g for g in groups if g.reason == SECTION_TIME_OVERLAP]
        assert len(overlap) == 1
        assert [r.id for r in overlap[0].items] == ["1", "2", "3"]

    def test_touching_slots_do_not_overlap(self):
        groups = audit_schedule([
            make_record(id="1", faculty_name="A", course_code="IT 101", time="8-9AM"),
            make_record(id="2", faculty_name="B", course_code="IT 102", time="9-10AM"),
        ])
        assert groups == []


class TestOrdering:
    """Tests for deterministic output."""

    def test_groups_follow_reason_order(self):
        groups = audit_schedule([
            make_record(id="1"),
            make_record(id="2"),
            make_record(id="3", term="2nd"),
        ])
        order = [REASONS.index(g.reason) for g in groups]
        assert order == sorted(order)

    def test_invariant_under_shuffle(self):
        records = [
            make_record(id="1"),
            make_record(id="2", section="BSIT 1B"),
            make_record(id="3", course_code="IT 102", time="8:30-9:30AM"),
            make_record(id="4", term="2nd"),
        ]
        expected = audit_schedule(records)
        shuffled = list(records)
        random.Random(3).shuffle(shuffled)
        assert audit_schedule(shuffled) == expected

    def test_summarize_groups(self):
        groups = audit_schedule([make_record(id="1"), make_record(id="2")])
        summary = summarize_groups(groups)
        assert summary[EXACT_DUPLICATE] == 1
        assert list(summary) == [r for r in REASONS if r in summary]
