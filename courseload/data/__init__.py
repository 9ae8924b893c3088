"""Data models, loading and sample generation."""

from .models import (
    AttendanceSummary,
    CandidateAssignment,
    FacultyProfile,
    ScheduleRecord,
    ScheduleSnapshot,
)
from .loader import (
    DataValidationError,
    adapt_attendance,
    adapt_candidate,
    adapt_faculty,
    adapt_grades,
    adapt_record,
    build_snapshot,
    canonicalize_keys,
    load_json,
    load_snapshot,
    save_snapshot,
    validate_snapshot_data,
)
from .generator import (
    GeneratorConfig,
    generate_sample_snapshot,
    generate_small_snapshot,
    generate_large_snapshot,
    save_generated_snapshot,
    snapshot_to_dict,
    get_generation_stats,
)

__all__ = [
    # Models
    "AttendanceSummary",
    "CandidateAssignment",
    "FacultyProfile",
    "ScheduleRecord",
    "ScheduleSnapshot",
    # Loader
    "DataValidationError",
    "adapt_attendance",
    "adapt_candidate",
    "adapt_faculty",
    "adapt_grades",
    "adapt_record",
    "build_snapshot",
    "canonicalize_keys",
    "load_json",
    "load_snapshot",
    "save_snapshot",
    "validate_snapshot_data",
    # Generator
    "GeneratorConfig",
    "generate_sample_snapshot",
    "generate_small_snapshot",
    "generate_large_snapshot",
    "save_generated_snapshot",
    "snapshot_to_dict",
    "get_generation_stats",
]
