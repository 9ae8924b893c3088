"""Tests for CLI module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from courseload.cli import app


runner = CliRunner()


@pytest.fixture
def snapshot_data() -> dict:
    """Two faculty, one booked slot each, and a candidate that clashes with F1."""
    return {
        "schoolYear": "2024-2025",
        "semester": "1st",
        "faculties": [
            {"id": "F1", "faculty": "Santos, Ana, MSIT", "dept": "BSIT", "employment": "Full-time"},
            {"id": "F2", "faculty": "Reyes, Jose", "dept": "BSED", "employment": "Part-time"},
        ],
        "records": [
            {
                "id": "R1", "facultyId": "F1", "facultyName": "Santos, Ana, MSIT",
                "courseName": "IT 101", "courseTitle": "Introduction to Computing",
                "section": "BSIT 1A", "term": "1st", "day": "MWF", "schedule": "8-9AM",
                "sy": "2024-2025", "unit": 3, "programcode": "BSIT",
            },
            {
                "id": "R2", "facultyId": "F2", "facultyName": "Reyes, Jose",
                "courseName": "EDUC 101", "courseTitle": "The Child and Adolescent Learner",
                "section": "BSED 1A", "term": "1st", "day": "TTH", "schedule": "1-2:30PM",
                "sy": "2024-2025", "unit": 3, "programcode": "BSED",
            },
        ],
        "candidate": {
            "facultyId": "F1", "term": "1st", "day": "MWF", "time": "8:30-9:30AM",
            "section": "BSIT 2A", "courseCode": "IT 201", "courseTitle": "Data Structures",
            "sy": "2024-2025", "programcode": "BSIT",
        },
    }


def _write(data: dict, path: Path) -> Path:
    with open(path, "w") as f:
        json.dump(data, f)
    return path


@pytest.fixture
def input_file(snapshot_data, tmp_path) -> Path:
    """Create a temporary snapshot file."""
    return _write(snapshot_data, tmp_path / "snapshot.json")


class TestHelpCommand:
    """Tests for help command."""

    def test_main_help(self):
        """Main help shows all commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("check", "rank", "stats", "audit", "validate", "generate"):
            assert command in result.output

    def test_check_help(self):
        """Check help shows options."""
        result = runner.invoke(app, ["check", "--help"])
        assert result.exit_code == 0
        assert "--faculty" in result.output
        assert "--exclude" in result.output


class TestCheckCommand:
    """Tests for check command."""

    def test_conflict_exits_nonzero(self, input_file):
        """A clashing candidate is reported and exits 1."""
        result = runner.invoke(app, ["check", str(input_file)])
        assert result.exit_code == 1
        assert "CONFLICT" in result.output

    def test_other_faculty_is_clear(self, input_file):
        """Re-proposing the candidate for a free faculty clears it."""
        result = runner.invoke(app, ["check", str(input_file), "--faculty", "F2"])
        assert result.exit_code == 0
        assert "NO CONFLICT" in result.output

    def test_excluded_record_ignored(self, input_file):
        """The record being edited does not clash with itself."""
        result = runner.invoke(app, ["check", str(input_file), "--exclude", "R1"])
        assert result.exit_code == 0
        assert "NO CONFLICT" in result.output

    def test_json_output(self, input_file):
        """JSON verdict lists the clashing record."""
        result = runner.invoke(app, ["check", str(input_file), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["conflict"] is True
        assert data["reason"] == "Double-booked: same faculty"
        assert [d["item"]["id"] for d in data["details"]] == ["R1"]

    def test_unknown_faculty(self, input_file):
        """Check fails on a faculty ID missing from the catalog."""
        result = runner.invoke(app, ["check", str(input_file), "--faculty", "F9"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_missing_candidate(self, snapshot_data, tmp_path):
        """Check fails when the snapshot carries no candidate."""
        del snapshot_data["candidate"]
        path = _write(snapshot_data, tmp_path / "no_candidate.json")
        result = runner.invoke(app, ["check", str(path)])
        assert result.exit_code == 1
        assert "candidate" in result.output

    def test_missing_input(self, tmp_path):
        """Check fails on a missing snapshot file."""
        result = runner.invoke(app, ["check", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestRankCommand:
    """Tests for rank command."""

    def test_rank_table(self, input_file):
        """Rank prints a table for the candidate course."""
        result = runner.invoke(app, ["rank", str(input_file)])
        assert result.exit_code == 0
        assert "Faculty ranking" in result.output

    def test_rank_json(self, input_file):
        """JSON ranking covers every faculty member, best first."""
        result = runner.invoke(app, ["rank", str(input_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["courseCode"] == "IT 201"
        assert [s["rank"] for s in data["scores"]] == [1, 2]
        assert {s["facultyId"] for s in data["scores"]} == {"F1", "F2"}
        scores = [s["score"] for s in data["scores"]]
        assert scores == sorted(scores, reverse=True)
        assert all(1.0 <= s <= 10.0 for s in scores)

    def test_rank_top(self, input_file):
        """--top limits the ranking."""
        result = runner.invoke(app, ["rank", str(input_file), "--json", "--top", "1"])
        assert result.exit_code == 0
        assert len(json.loads(result.output)["scores"]) == 1

    def test_rank_eligible_leaves_out_busy_faculty(self, input_file):
        """--eligible drops faculty the candidate would double-book."""
        result = runner.invoke(app, ["rank", str(input_file), "--json", "--eligible"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [s["facultyId"] for s in data["scores"]] == ["F2"]
        assert data["scores"][0]["rank"] == 1

    def test_rank_eligible_ignores_other_school_years(self, snapshot_data, tmp_path):
        """Last year's booking does not make a faculty member ineligible."""
        snapshot_data["records"][0]["sy"] = "2023-2024"
        path = _write(snapshot_data, tmp_path / "last_year.json")
        result = runner.invoke(app, ["rank", str(path), "--json", "--eligible"])
        assert result.exit_code == 0
        assert {s["facultyId"] for s in json.loads(result.output)["scores"]} == {"F1", "F2"}

    def test_rank_with_config(self, input_file, tmp_path):
        """Scoring overrides are accepted from a JSON file."""
        config = _write({"weights": {"dept": 0.5}}, tmp_path / "config.json")
        result = runner.invoke(app, ["rank", str(input_file), "--config", str(config), "--json"])
        assert result.exit_code == 0

    def test_rank_bad_config(self, input_file, tmp_path):
        """Unknown config settings are rejected."""
        config = _write({"weights": {"bogus": 1}}, tmp_path / "config.json")
        result = runner.invoke(app, ["rank", str(input_file), "--config", str(config)])
        assert result.exit_code == 1
        assert "Error loading config" in result.output


class TestStatsCommand:
    """Tests for stats command."""

    def test_stats_table(self, input_file):
        """Stats prints the load table."""
        result = runner.invoke(app, ["stats", str(input_file)])
        assert result.exit_code == 0
        assert "Teaching load" in result.output

    def test_stats_json(self, input_file):
        """JSON stats count each faculty member's units."""
        result = runner.invoke(app, ["stats", str(input_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["baseline"] == 24.0
        assert {row["facultyId"]: row["load"] for row in data["faculty"]} == {"F1": 3.0, "F2": 3.0}

    def test_stats_other_term(self, input_file):
        """Records of other terms are not counted."""
        result = runner.invoke(app, ["stats", str(input_file), "--semester", "2nd", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert all(row["load"] == 0.0 for row in data["faculty"])


class TestAuditCommand:
    """Tests for audit command."""

    def test_clean_schedule(self, input_file):
        """A schedule without clashes reports none."""
        result = runner.invoke(app, ["audit", str(input_file)])
        assert result.exit_code == 0
        assert "No conflicts found" in result.output

    def test_double_booking_reported(self, snapshot_data, tmp_path):
        """A faculty member teaching two courses in one slot is grouped per day."""
        clash = dict(snapshot_data["records"][0], id="R3", courseName="IT 102", section="BSIT 1B")
        snapshot_data["records"].append(clash)
        path = _write(snapshot_data, tmp_path / "clash.json")

        result = runner.invoke(app, ["audit", str(path), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["totalGroups"] == 3
        assert data["byReason"] == {"Double-booked: same time, different courses": 3}

        result = runner.invoke(app, ["audit", str(path)])
        assert result.exit_code == 0
        assert "Schedule Audit" in result.output


class TestValidateCommand:
    """Tests for validate command."""

    def test_validate_valid_input(self, input_file):
        """Validate accepts valid input."""
        result = runner.invoke(app, ["validate", str(input_file)])
        assert result.exit_code == 0
        assert "Validation complete" in result.output

    def test_validate_shows_summary(self, input_file):
        """Validate shows snapshot counts."""
        result = runner.invoke(app, ["validate", str(input_file)])
        assert "School year" in result.output
        assert "Records" in result.output

    def test_validate_nonexistent_file(self, tmp_path):
        """Validate fails on missing file."""
        result = runner.invoke(app, ["validate", str(tmp_path / "nonexistent.json")])
        assert result.exit_code == 1
        assert "not found" in result.output.lower()

    def test_validate_invalid_json(self, tmp_path):
        """Validate fails on invalid JSON."""
        filepath = tmp_path / "invalid.json"
        filepath.write_text("not valid json {")
        result = runner.invoke(app, ["validate", str(filepath)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_validate_bad_structure(self, tmp_path):
        """Validate fails when required sections are missing."""
        filepath = _write({"records": []}, tmp_path / "partial.json")
        result = runner.invoke(app, ["validate", str(filepath)])
        assert result.exit_code == 1
        assert "Schema validation failed" in result.output

    def test_validate_reports_unknown_faculty(self, snapshot_data, tmp_path):
        """Records pointing at missing faculty are flagged as warnings."""
        snapshot_data["records"][1]["facultyId"] = "F7"
        path = _write(snapshot_data, tmp_path / "orphan.json")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 0
        assert "unknown faculty" in result.output

    def test_validate_placeholder_time_not_flagged(self, snapshot_data, tmp_path):
        """Any placeholder time passes; free text does not."""
        snapshot_data["records"][0]["schedule"] = "N/A"
        snapshot_data["records"][1]["schedule"] = "Morning"
        path = _write(snapshot_data, tmp_path / "placeholder.json")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 0
        assert "Record R1 has an unparseable time" not in result.output
        assert "Record R2 has an unparseable time" in result.output


class TestGenerateCommand:
    """Tests for generate command."""

    def test_generate_small(self, tmp_path):
        """Generate writes a loadable snapshot."""
        output = tmp_path / "sample.json"
        result = runner.invoke(app, ["generate", str(output), "--size", "small", "--seed", "5"])
        assert result.exit_code == 0
        assert "Generated:" in result.output
        assert output.exists()

        result = runner.invoke(app, ["validate", str(output)])
        assert result.exit_code == 0
        assert "Validation complete" in result.output

    def test_generate_unknown_size(self, tmp_path):
        """Generate rejects unknown sizes."""
        result = runner.invoke(app, ["generate", str(tmp_path / "x.json"), "--size", "huge"])
        assert result.exit_code == 1
        assert "Unknown size" in result.output
