"""Result serialization."""

from .schema import (
    AuditReportOutput,
    ConflictDetailOutput,
    ConflictGroupOutput,
    ConflictVerdictOutput,
    FacultyScoreOutput,
    FactorParts,
    LoadReportOutput,
    LoadStatsOutput,
    RankingOutput,
    RecordOutput,
    create_audit_report,
    create_load_report,
    create_ranking_output,
)

__all__ = [
    # Schema models
    "AuditReportOutput",
    "ConflictDetailOutput",
    "ConflictGroupOutput",
    "ConflictVerdictOutput",
    "FacultyScoreOutput",
    "FactorParts",
    "LoadReportOutput",
    "LoadStatsOutput",
    "RankingOutput",
    "RecordOutput",
    # Conversion functions
    "create_audit_report",
    "create_load_report",
    "create_ranking_output",
]
