"""Tests for snapshot loading and field adaptation."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from courseload.data.loader import (
    DataValidationError,
    adapt_attendance,
    adapt_candidate,
    adapt_faculty,
    adapt_grades,
    adapt_record,
    build_snapshot,
    canonicalize_keys,
    load_snapshot,
    save_snapshot,
    to_snake_case,
    validate_snapshot_data,
    RECORD_ALIASES,
)


@pytest.fixture
def valid_data() -> dict:
    """Minimal valid snapshot document using repository field names."""
    return {
        "schoolYear": "2024-2025",
        "semester": "1st",
        "faculties": [{"id": 1, "faculty": "Santos, Ana", "dept": "BSIT", "employment": "Full-time"}],
        "records": [
            {
                "id": 10,
                "facultyId": 1,
                "courseName": "IT 101",
                "courseTitle": "Introduction to Computing",
                "section": "BSIT 1A",
                "sem": "1st",
                "scheduleKey": "8-9AM",
                "f2fSched": "MWF",
                "sy": "2024-2025",
                "programcode": "BSIT",
                "unit": "3",
            },
        ],
    }


class TestFieldNames:
    """Tests for key canonicalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("courseName", "course_name"),
        ("f2fSched", "f2f_sched"),
        ("facultyID", "faculty_id"),
        ("school_year", "school_year"),
    ])
    def test_to_snake_case(self, raw, expected):
        assert to_snake_case(raw) == expected

    def test_aliases_mapped(self):
        row = canonicalize_keys({"courseName": "IT 101", "sem": "1st", "instructor": "Reyes"}, RECORD_ALIASES)
        assert row == {"course_code": "IT 101", "term": "1st", "faculty_name": "Reyes"}

    def test_canonical_key_beats_alias(self):
        row = canonicalize_keys({"code": "OLD", "courseCode": "IT 101"}, RECORD_ALIASES)
        assert row["course_code"] == "IT 101"
        row = canonicalize_keys({"courseCode": "IT 101", "code": "OLD"}, RECORD_ALIASES)
        assert row["course_code"] == "IT 101"

    def test_empty_value_never_overwrites(self):
        row = canonicalize_keys({"schedule": "8-9AM", "time": ""}, RECORD_ALIASES)
        assert row["time"] == "8-9AM"

    def test_first_alias_wins(self):
        row = canonicalize_keys({"courseName": "IT 101", "code": "IT 999"}, RECORD_ALIASES)
        assert row["course_code"] == "IT 101"

    def test_unknown_keys_dropped(self):
        row = canonicalize_keys({"courseName": "IT 101", "roomId": "R1"}, RECORD_ALIASES, {"course_code"})
        assert row == {"course_code": "IT 101"}


class TestAdapters:
    """Tests for row adapters."""

    def test_adapt_record(self, valid_data):
        record = adapt_record(valid_data["records"][0])
        assert record.id == "10"
        assert record.faculty_id == "1"
        assert record.course_code == "IT 101"
        assert record.term == "1st"
        assert record.time == "8-9AM"
        assert record.day == "MWF"
        assert record.school_year == "2024-2025"
        assert record.program == "BSIT"
        assert record.unit == 3.0

    def test_adapt_record_day_list(self):
        record = adapt_record({"courseName": "IT 101", "day": ["Mon", "Wed"]})
        assert record.days == frozenset({"MON", "WED"})

    def test_adapt_faculty(self, valid_data):
        faculty = adapt_faculty(valid_data["faculties"][0])
        assert faculty.id == "1"
        assert faculty.name == "Santos, Ana"
        assert faculty.department == "BSIT"
        assert faculty.employment_type == "Full-time"

    def test_adapt_candidate_ignores_record_only_fields(self):
        candidate = adapt_candidate({"facultyId": 1, "term": "1st", "schedule": "8-9AM", "gradesStatus": "late"})
        assert candidate.faculty_id == "1"
        assert candidate.time == "8-9AM"

    def test_adapt_attendance(self):
        out = adapt_attendance({"1": {"byStatus": {"Absent": 2, "present": 8}}})
        assert out["1"].total == 10
        assert out["1"].by_status["absent"] == 2

    def test_adapt_attendance_rejects_non_object(self):
        with pytest.raises(DataValidationError):
            adapt_attendance({"1": 5})

    def test_adapt_grades(self):
        assert adapt_grades({1: ["late", None, "ontime"]}) == {"1": ("late", "ontime")}

    def test_adapt_grades_rejects_string(self):
        with pytest.raises(DataValidationError):
            adapt_grades({"1": "late"})


class TestValidation:
    """Tests for snapshot structure validation."""

    def test_valid_data_passes(self, valid_data):
        doc = validate_snapshot_data(valid_data)
        assert doc["school_year"] == "2024-2025"

    def test_not_an_object(self):
        with pytest.raises(DataValidationError, match="JSON object"):
            validate_snapshot_data([])

    def test_missing_required_field(self, valid_data):
        del valid_data["faculties"]
        with pytest.raises(DataValidationError, match="Missing required field: faculties"):
            validate_snapshot_data(valid_data)

    def test_section_must_be_list(self, valid_data):
        valid_data["records"] = {"id": 1}
        with pytest.raises(DataValidationError, match="must be a list"):
            validate_snapshot_data(valid_data)

    def test_rows_must_be_objects(self, valid_data):
        valid_data["records"].append("IT 101")
        with pytest.raises(DataValidationError, match="Record 1 is not an object"):
            validate_snapshot_data(valid_data)

    def test_candidate_must_be_object(self, valid_data):
        valid_data["candidate"] = "IT 101"
        with pytest.raises(DataValidationError, match="candidate"):
            validate_snapshot_data(valid_data)

    def test_legacy_section_names(self, valid_data):
        valid_data["courses"] = valid_data.pop("records")
        valid_data["faculty"] = valid_data.pop("faculties")
        doc = validate_snapshot_data(valid_data)
        assert len(doc["records"]) == 1
        assert len(doc["faculties"]) == 1


class TestBuildSnapshot:
    """Tests for build_snapshot."""

    def test_builds_models(self, valid_data):
        snapshot = build_snapshot(valid_data)
        assert snapshot.school_year == "2024-2025"
        assert snapshot.semester == "1st"
        assert len(snapshot.records) == 1
        assert snapshot.faculties[0].id == "1"
        assert snapshot.candidate is None

    def test_candidate_loaded(self, valid_data):
        valid_data["candidate"] = {"facultyId": 1, "term": "1st", "time": "1-2PM", "courseCode": "IT 102"}
        snapshot = build_snapshot(valid_data)
        assert snapshot.candidate.course_code == "IT 102"

    def test_faculty_without_id_skipped(self, valid_data, caplog):
        valid_data["faculties"].append({"faculty": "No Id"})
        with caplog.at_level("WARNING"):
            snapshot = build_snapshot(valid_data)
        assert len(snapshot.faculties) == 1
        assert "without an id" in caplog.text

    def test_duplicate_faculty_ids(self, valid_data):
        valid_data["faculties"].append({"id": "1", "faculty": "Someone Else"})
        with pytest.raises(DataValidationError, match="Duplicate faculty ID: 1"):
            build_snapshot(valid_data)

    def test_field_errors_surface_as_validation_error(self, valid_data):
        valid_data["records"][0]["locked"] = "maybe"
        with pytest.raises(ValidationError):
            build_snapshot(valid_data)


class TestFileLoading:
    """Tests for loading snapshots from files."""

    def test_load_valid_file(self, valid_data, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(valid_data))
        snapshot = load_snapshot(path)
        assert snapshot.records[0].course_code == "IT 101"

    def test_load_nonexistent_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_snapshot(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not valid json {")
        with pytest.raises(json.JSONDecodeError):
            load_snapshot(path)

    def test_save_and_reload(self, valid_data, tmp_path):
        snapshot = build_snapshot(valid_data)
        path = tmp_path / "out" / "snapshot.json"
        save_snapshot(snapshot, path)
        assert load_snapshot(path) == snapshot
