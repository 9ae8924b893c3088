"""Tests for time-block, day-spec and term parsing."""

from __future__ import annotations

import pytest

from courseload.timeblocks import (
    TimeRange,
    band_of,
    canonical_key,
    days_overlap,
    is_placeholder,
    minutes_to_time,
    normalize_term,
    parse_days,
    parse_time_block,
    session_of,
    sorted_days,
    term_order,
    time_key,
    time_to_minutes,
    times_collide,
)


class TestTimeHelpers:
    """Tests for time conversion helpers."""

    def test_minutes_to_time(self):
        assert minutes_to_time(0) == "00:00"
        assert minutes_to_time(480) == "08:00"
        assert minutes_to_time(750) == "12:30"
        assert minutes_to_time(1439) == "23:59"

    def test_time_to_minutes(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("08:00") == 480
        assert time_to_minutes("13:30") == 810

    def test_canonical_key(self):
        assert canonical_key(480, 570) == "08:00-09:30"


class TestParseTimeBlock:
    """Tests for parse_time_block."""

    @pytest.mark.parametrize("text,start,end", [
        ("8-9AM", 480, 540),
        ("8:30-9:30AM", 510, 570),
        ("1-2:30PM", 780, 870),
        ("10-12NN", 600, 720),
        ("10:30-12NN", 630, 720),
        ("11-1PM", 660, 780),
        ("11-12AM", 660, 720),
        ("10-12PM", 600, 720),
        ("6-7PM", 1080, 1140),
        ("13:00-14:30", 780, 870),
        ("8 - 9 AM", 480, 540),
        ("8–9AM", 480, 540),
        ("8-9am", 480, 540),
    ])
    def test_parses_supported_forms(self, text, start, end):
        tr = parse_time_block(text)
        assert tr == TimeRange(start, end)

    def test_start_never_after_end(self):
        for text in ("7-8AM", "12-1PM", "5:30-7PM", "9-10:30AM", "11-1PM"):
            tr = parse_time_block(text)
            assert tr is not None
            assert tr.start <= tr.end

    def test_equivalent_forms_share_key(self):
        assert parse_time_block("8-9AM").key == parse_time_block("08:00-09:00").key == "08:00-09:00"

    @pytest.mark.parametrize("text", ["", None, "TBA", "tba", "NA", "N/A", "TBD"])
    def test_placeholders_are_none(self, text):
        assert parse_time_block(text) is None

    @pytest.mark.parametrize("text", ["morning", "8AM", "25:00-26:00", "13-14PM", "9:75-10AM", "1-12PM", "3-12PM"])
    def test_unparseable_is_none(self, text):
        assert parse_time_block(text) is None

    def test_midpoint_and_duration(self):
        tr = parse_time_block("8-9:30AM")
        assert tr.midpoint == 525
        assert tr.duration == 90


class TestOverlap:
    """Tests for time overlap and collisions."""

    def test_overlapping_ranges(self):
        a = parse_time_block("8-9AM")
        b = parse_time_block("8:30-9:30AM")
        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_touching_ranges_do_not_overlap(self):
        assert not parse_time_block("8-9AM").overlaps(parse_time_block("9-10AM"))

    def test_times_collide_numeric(self):
        assert times_collide("8-9AM", "08:30-09:30")
        assert not times_collide("8-9AM", "1-2PM")

    def test_unparseable_collide_on_equal_key(self):
        assert times_collide("Morning Block", "morning  block")
        assert not times_collide("Morning Block", "Evening Block")
        assert not times_collide("Morning Block", "8-9AM")

    def test_placeholders_never_collide(self):
        assert not times_collide("TBA", "TBA")
        assert not times_collide("", "")

    def test_time_key(self):
        assert time_key("8-9AM") == "08:00-09:00"
        assert time_key("TBA") == ""
        assert time_key("by arrangement") == "BYARRANGEMENT"


class TestParseDays:
    """Tests for day-spec expansion."""

    @pytest.mark.parametrize("spec,expected", [
        ("MWF", {"MON", "WED", "FRI"}),
        ("TTH", {"TUE", "THU"}),
        ("MTWTHF", {"MON", "TUE", "WED", "THU", "FRI"}),
        ("MON-FRI", {"MON", "TUE", "WED", "THU", "FRI"}),
        ("M-F", {"MON", "TUE", "WED", "THU", "FRI"}),
        ("Mon,Wed", {"MON", "WED"}),
        ("Monday/Thursday", {"MON", "THU"}),
        ("SAT", {"SAT"}),
        ("S", {"SAT"}),
        ("TH", {"THU"}),
        ("WEDS", {"WED"}),
        ("Weds", {"WED"}),
        ("Tues/Thurs", {"TUE", "THU"}),
        ("M.W.F", {"MON", "WED", "FRI"}),
        ("Weekdays", {"MON", "TUE", "WED", "THU", "FRI"}),
    ])
    def test_expands_specs(self, spec, expected):
        assert parse_days(spec) == frozenset(expected)

    @pytest.mark.parametrize("spec", ["", None, "TBA", "ANY", "any"])
    def test_any_day(self, spec):
        assert parse_days(spec) == frozenset()

    @pytest.mark.parametrize("spec", ["WXZ", "MWQ", "Wedz"])
    def test_unreadable_letters_reject_token(self, spec):
        assert parse_days(spec) == frozenset()

    def test_list_input(self):
        assert parse_days(["Mon", "Wed"]) == frozenset({"MON", "WED"})

    def test_days_overlap(self):
        assert days_overlap(parse_days("MWF"), parse_days("M"))
        assert not days_overlap(parse_days("MWF"), parse_days("TTH"))
        assert days_overlap(frozenset(), parse_days("TTH"))
        assert days_overlap(parse_days("SAT"), frozenset())

    def test_sorted_days(self):
        assert sorted_days({"FRI", "MON", "WED"}) == ["MON", "WED", "FRI"]


class TestTerms:
    """Tests for term normalization and ordering."""

    @pytest.mark.parametrize("label,expected", [
        ("1st", "1st"),
        ("First Semester", "1st"),
        ("2nd", "2nd"),
        ("second", "2nd"),
        ("Sem", "Sem"),
        ("Summer", "Sem"),
        ("", ""),
        (None, ""),
    ])
    def test_normalize_term(self, label, expected):
        assert normalize_term(label) == expected

    def test_consecutive_terms_differ_by_one(self):
        first = term_order("1st", "2024-2025")
        second = term_order("2nd", "2024-2025")
        assert second - first == 1

    def test_year_steps_by_three(self):
        assert term_order("1st", "2024-2025") - term_order("1st", "2023-2024") == 3

    def test_unknown_year(self):
        assert term_order("1st", "") is None

    def test_year_from_term_label(self):
        assert term_order("1st Sem 2024-2025") == term_order("1st", "2024-2025")


class TestSessions:
    """Tests for band and session classification."""

    def test_band_of(self):
        assert band_of(500) == "AM"
        assert band_of(780) == "PM"
        assert band_of(None) == "PM"

    def test_session_of(self):
        assert session_of(500) == "AM"
        assert session_of(12 * 60 + 30) == "AM"
        assert session_of(14 * 60) == "PM"
        assert session_of(18 * 60) == "EVE"


def test_is_placeholder():
    assert is_placeholder("TBA")
    assert is_placeholder(" n/a ")
    assert is_placeholder(None)
    assert not is_placeholder("8-9AM")
