"""ISO 14064-1 compliance rubric for emissions aggregates."""

from .scorer import (
    RUBRIC,
    CheckStatus,
    ComplianceCheck,
    ComplianceResult,
    CriticalIssue,
    OverallStatus,
    RubricCheck,
    find_critical_issues,
    overall_status,
    score,
)

__all__ = [
    "RUBRIC",
    "CheckStatus",
    "ComplianceCheck",
    "ComplianceResult",
    "CriticalIssue",
    "OverallStatus",
    "RubricCheck",
    "find_critical_issues",
    "overall_status",
    "score",
]
