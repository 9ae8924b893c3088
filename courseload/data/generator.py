"""
Sample snapshot generator for tests and demos.

Produces a realistic course-loading snapshot: a faculty directory with
credential-bearing names, several programs with year-level sections, and
conflict-free historical assignments across a few school years.

Usage:
    from courseload.data.generator import generate_sample_snapshot, generate_small_snapshot

    # Generate with custom config
    snapshot = generate_sample_snapshot(GeneratorConfig(faculty_per_program=6, seed=7))

    # Quick test data
    small = generate_small_snapshot(seed=1)
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .models import (
    AttendanceSummary,
    CandidateAssignment,
    FacultyProfile,
    ScheduleRecord,
    ScheduleSnapshot,
)


# =============================================================================
# Name Data
# =============================================================================

FIRST_NAMES = [
    "Juan", "Maria", "Jose", "Ana", "Mark", "Kristine", "Paolo", "Angelica",
    "Ramon", "Liza", "Carlo", "Jasmine", "Miguel", "Patricia", "Rafael", "Grace",
    "Antonio", "Camille", "Daniel", "Rhea", "Victor", "Joy", "Noel", "Aileen",
]

LAST_NAMES = [
    "Dela Cruz", "Santos", "Reyes", "Bautista", "Garcia", "Mendoza", "Torres",
    "Villanueva", "Ramos", "Aquino", "Castillo", "Navarro", "Flores", "Gonzales",
    "Domingo", "Salazar", "Rivera", "Soriano", "Manalo", "Pascual",
]

CREDENTIAL_SUFFIXES = ["", "", "PhD", "MAEd", "MSIT", "MBA, CPA", "EdD, LPT", "LPT", "MIT"]

EMPLOYMENT_TYPES = ["Full-time", "Full-time", "Part-time", "KNP"]


# =============================================================================
# Program Definitions
# =============================================================================

PROGRAMS: dict[str, list[dict[str, Any]]] = {
    "BSIT": [
        {"code": "IT 101", "title": "Introduction to Computing", "unit": 3, "year": 1},
        {"code": "IT 102", "title": "Computer Programming 1", "unit": 3, "year": 1},
        {"code": "IT 201", "title": "Data Structures and Algorithms", "unit": 3, "year": 2},
        {"code": "IT 202", "title": "Information Management", "unit": 3, "year": 2},
        {"code": "IT 301", "title": "Systems Integration and Architecture", "unit": 3, "year": 3},
    ],
    "BSED": [
        {"code": "EDUC 101", "title": "The Child and Adolescent Learner", "unit": 3, "year": 1},
        {"code": "EDUC 102", "title": "The Teaching Profession", "unit": 3, "year": 1},
        {"code": "EDUC 201", "title": "Assessment in Learning", "unit": 3, "year": 2},
        {"code": "EDUC 202", "title": "Technology for Teaching and Learning", "unit": 3, "year": 2},
    ],
    "BSBA": [
        {"code": "BA 101", "title": "Basic Microeconomics", "unit": 3, "year": 1},
        {"code": "BA 102", "title": "Business Law and Taxation", "unit": 3, "year": 1},
        {"code": "BA 201", "title": "Financial Management", "unit": 3, "year": 2},
        {"code": "BA 202", "title": "Operations Management", "unit": 3, "year": 2},
    ],
}

GENERAL_COURSES = [
    {"code": "PE 1", "title": "Physical Education 1", "unit": 2, "year": 1},
    {"code": "NSTP 1", "title": "National Service Training Program 1", "unit": 3, "year": 1},
]

TIME_BLOCKS = ["7:30-9AM", "9-10:30AM", "10:30-12NN", "1-2:30PM", "2:30-4PM", "4-5:30PM", "5:30-7PM"]
DAY_PATTERNS = ["MWF", "TTH", "SAT"]
GRADE_STATUSES = ["ontime", "ontime", "early", "late", ""]


# =============================================================================
# Generator Configuration
# =============================================================================

@dataclass
class GeneratorConfig:
    """Configuration for snapshot generation."""
    # Entity counts
    faculty_per_program: int = 4
    sections_per_year: int = 2
    programs: list[str] = field(default_factory=lambda: list(PROGRAMS))

    # Periods
    school_years: list[str] = field(default_factory=lambda: ["2023-2024", "2024-2025"])
    terms: list[str] = field(default_factory=lambda: ["1st", "2nd"])

    # Extras
    include_general_courses: bool = True
    include_attendance: bool = True
    include_candidate: bool = True

    # Randomization
    seed: Optional[int] = None


# =============================================================================
# Generator Functions
# =============================================================================

def generate_sample_snapshot(config: GeneratorConfig | None = None) -> ScheduleSnapshot:
    """
    Generate a sample schedule snapshot.

    Args:
        config: Generator configuration (uses defaults if None)

    Returns:
        ScheduleSnapshot whose historical records contain no double-bookings
    """
    if config is None:
        config = GeneratorConfig()
    rng = random.Random(config.seed)

    faculties = _generate_faculties(config, rng)
    records = _generate_records(config, faculties, rng)
    attendance = _generate_attendance(faculties, rng) if config.include_attendance else {}
    candidate = _generate_candidate(config, faculties, rng) if config.include_candidate else None

    return ScheduleSnapshot(
        school_year=config.school_years[-1],
        semester=config.terms[-1],
        records=tuple(records),
        faculties=tuple(faculties),
        attendance=attendance,
        candidate=candidate,
    )


def generate_small_snapshot(seed: int | None = None) -> ScheduleSnapshot:
    """Two programs, two faculty each, one school year."""
    config = GeneratorConfig(
        faculty_per_program=2,
        sections_per_year=1,
        programs=["BSIT", "BSED"],
        school_years=["2024-2025"],
        seed=seed,
    )
    return generate_sample_snapshot(config)


def generate_large_snapshot(seed: int | None = None) -> ScheduleSnapshot:
    """Every program, many sections, four school years."""
    config = GeneratorConfig(
        faculty_per_program=8,
        sections_per_year=4,
        school_years=["2021-2022", "2022-2023", "2023-2024", "2024-2025"],
        seed=seed,
    )
    return generate_sample_snapshot(config)


# =============================================================================
# Private Generator Helpers
# =============================================================================

def _faculty_name(rng: random.Random) -> str:
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    middle = rng.choice("ABCDEGLMPRST")
    suffix = rng.choice(CREDENTIAL_SUFFIXES)
    name = f"{last}, {first} {middle}."
    return f"{name}, {suffix}" if suffix else name


def _generate_faculties(config: GeneratorConfig, rng: random.Random) -> list[FacultyProfile]:
    faculties = []
    used_names: set[str] = set()
    for program in config.programs:
        for i in range(config.faculty_per_program):
            name = _faculty_name(rng)
            while name in used_names:
                name = _faculty_name(rng)
            used_names.add(name)
            faculties.append(FacultyProfile(
                id=f"F{len(faculties) + 1:03d}",
                name=name,
                department=program,
                employment_type=rng.choice(EMPLOYMENT_TYPES),
                degree=rng.choice(["", "Master of Arts in Education", "MSIT", "PhD", "BS"]),
                load_release_units=rng.choice([0, 0, 0, 3, 6]),
            ))
    return faculties


def _sections(config: GeneratorConfig, program: str, year: int) -> list[str]:
    return [f"{program} {year}{chr(ord('A') + i)}" for i in range(config.sections_per_year)]


def _program_courses(config: GeneratorConfig, program: str) -> list[dict[str, Any]]:
    courses = list(PROGRAMS[program])
    if config.include_general_courses:
        courses += GENERAL_COURSES
    return courses


def _generate_records(
    config: GeneratorConfig,
    faculties: list[FacultyProfile],
    rng: random.Random,
) -> list[ScheduleRecord]:
    """Assign every section's courses to free faculty and free slots."""
    records = []
    for school_year in config.school_years:
        for term in config.terms:
            busy_faculty: set[tuple[str, str, str]] = set()
            busy_section: set[tuple[str, str, str]] = set()
            for program in config.programs:
                pool = [f for f in faculties if f.department == program]
                for course in _program_courses(config, program):
                    for section in _sections(config, program, course["year"]):
                        placed = _place(
                            course, section, program, term, school_year,
                            pool, busy_faculty, busy_section, rng,
                        )
                        if placed is not None:
                            placed = placed.model_copy(update={"id": f"R{len(records) + 1:04d}"})
                            records.append(placed)
    return records


def _place(
    course: dict[str, Any],
    section: str,
    program: str,
    term: str,
    school_year: str,
    pool: list[FacultyProfile],
    busy_faculty: set[tuple[str, str, str]],
    busy_section: set[tuple[str, str, str]],
    rng: random.Random,
) -> Optional[ScheduleRecord]:
    slots = [(d, t) for d in DAY_PATTERNS for t in TIME_BLOCKS]
    rng.shuffle(slots)
    staff = list(pool)
    rng.shuffle(staff)
    for day, time in slots:
        if (section, day, time) in busy_section:
            continue
        for faculty in staff:
            if (faculty.id, day, time) in busy_faculty:
                continue
            busy_section.add((section, day, time))
            busy_faculty.add((faculty.id, day, time))
            return ScheduleRecord(
                faculty_id=faculty.id,
                faculty_name=faculty.name,
                course_code=course["code"],
                course_title=course["title"],
                section=section,
                term=term,
                day=day,
                time=time,
                school_year=school_year,
                unit=course["unit"],
                program=program,
                department=program,
                grades_status=rng.choice(GRADE_STATUSES) or None,
            )
    return None


def _generate_attendance(faculties: list[FacultyProfile], rng: random.Random) -> dict[str, AttendanceSummary]:
    out = {}
    for faculty in faculties:
        absent, late, excused = rng.randint(0, 4), rng.randint(0, 6), rng.randint(0, 3)
        present = rng.randint(30, 60)
        out[faculty.id] = AttendanceSummary(
            total=absent + late + excused + present,
            by_status={"absent": absent, "late": late, "excused": excused, "present": present},
        )
    return out


def _generate_candidate(
    config: GeneratorConfig,
    faculties: list[FacultyProfile],
    rng: random.Random,
) -> CandidateAssignment:
    program = rng.choice(config.programs)
    course = rng.choice(PROGRAMS[program])
    faculty = rng.choice([f for f in faculties if f.department == program])
    return CandidateAssignment(
        faculty_id=faculty.id,
        faculty_name=faculty.name,
        term=config.terms[-1],
        school_year=config.school_years[-1],
        day=rng.choice(DAY_PATTERNS),
        time=rng.choice(TIME_BLOCKS),
        section=f"{program} {course['year']}Z",
        course_code=course["code"],
        course_title=course["title"],
        program=program,
        department=program,
        unit=course["unit"],
    )


# =============================================================================
# Utility Functions
# =============================================================================

def snapshot_to_dict(snapshot: ScheduleSnapshot) -> dict[str, Any]:
    """
    Convert a snapshot to the camelCase document shape served by the
    schedule repository, legacy field names included.
    """
    return {
        "schoolYear": snapshot.school_year,
        "semester": snapshot.semester,
        "faculties": [
            {
                "id": f.id,
                "faculty": f.name,
                "dept": f.department,
                "employment": f.employment_type,
                "degree": f.degree,
                "loadReleaseUnits": f.load_release_units,
            }
            for f in snapshot.faculties
        ],
        "records": [
            {
                "id": r.id,
                "facultyId": r.faculty_id,
                "facultyName": r.faculty_name,
                "courseName": r.course_code,
                "courseTitle": r.course_title,
                "section": r.section,
                "term": r.term,
                "day": r.day,
                "schedule": r.time,
                "sy": r.school_year,
                "unit": r.unit,
                "programcode": r.program,
                "dept": r.department,
                "gradesStatus": r.grades_status,
            }
            for r in snapshot.records
        ],
        "attendance": {
            fid: {"total": a.total, "byStatus": dict(a.by_status)}
            for fid, a in snapshot.attendance.items()
        },
        "candidate": (
            snapshot.candidate.model_dump(mode="json", exclude_defaults=True)
            if snapshot.candidate is not None else None
        ),
    }


def save_generated_snapshot(snapshot: ScheduleSnapshot, filepath: Union[str, Path]) -> None:
    """
    Save a generated snapshot to a JSON file.

    Args:
        snapshot: Generated snapshot
        filepath: Path to save JSON file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot_to_dict(snapshot), f, indent=2)


def get_generation_stats(snapshot: ScheduleSnapshot) -> dict[str, Any]:
    """
    Get statistics about a generated snapshot.

    Args:
        snapshot: Generated snapshot

    Returns:
        Dictionary with statistics
    """
    per_faculty: dict[str, float] = {}
    for record in snapshot.records:
        if record.faculty_id:
            per_faculty[record.faculty_id] = per_faculty.get(record.faculty_id, 0) + record.unit

    return {
        "faculties": len(snapshot.faculties),
        "records": len(snapshot.records),
        "sections": len({r.section for r in snapshot.records}),
        "courses": len({r.course_code for r in snapshot.records}),
        "school_years": sorted({r.school_year for r in snapshot.records}),
        "max_faculty_units": max(per_faculty.values()) if per_faculty else 0,
        "has_candidate": snapshot.candidate is not None,
    }
