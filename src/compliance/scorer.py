"""Score an emissions aggregate against the ISO 14064-1 / GHG Protocol rubric.

Five checks are run, each a pure function of the aggregate:

1. Data Quality: share of records extracted with high confidence.
2. Methodology: whether a standard factor table was applied (placeholder).
3. Scope Coverage: number of distinct emission sources identified.
4. Documentation: constant score (placeholder).
5. Uncertainty: mean extraction confidence.

The overall score is the plain mean of the check scores. Empty aggregates
score 0 on the confidence-based checks instead of producing NaN.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence

import numpy as np

from calc_emissions import EmissionsAggregate

from .constants import (
    COMPLIANT_SCORE,
    DOCUMENTATION_SCORE,
    GHG_PROTOCOL,
    HIGH_CONFIDENCE,
    HIGH_EMISSIONS_KG,
    ISO_14064,
    LOW_CONFIDENCE,
    METHODOLOGY_FALLBACK_SCORE,
    METHODOLOGY_MIN_FACTORS,
    METHODOLOGY_STANDARD_SCORE,
    PARTIAL_SCORE,
    RECOMMENDATIONS,
    SCOPE_POINTS_PER_SOURCE,
    STANDARDS,
)

LOGGER = logging.getLogger("compliance")


class CheckStatus(str, Enum):
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"

    def __str__(self) -> str:
        return self.value


class OverallStatus(str, Enum):
    COMPLIANT = "compliant"
    PARTIAL = "partial"
    NON_COMPLIANT = "non_compliant"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ComplianceCheck:
    category: str
    standard: str
    requirement: str
    status: CheckStatus
    score: float
    details: str
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "standard": self.standard,
            "requirement": self.requirement,
            "status": str(self.status),
            "score": self.score,
            "details": self.details,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class CriticalIssue:
    type: str
    message: str
    severity: str = "warning"
    count: int | None = None

    def to_dict(self) -> dict:
        data = {"type": self.type, "message": self.message, "severity": self.severity}
        if self.count is not None:
            data["count"] = self.count
        return data


@dataclass(frozen=True)
class ComplianceResult:
    """Rubric outcome for one emissions aggregate."""

    overall_score: float
    overall_status: OverallStatus
    checks: tuple[ComplianceCheck, ...]
    critical_issues: tuple[CriticalIssue, ...] = ()
    standards: tuple[str, ...] = field(default=STANDARDS)

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "overall_status": str(self.overall_status),
            "checks": [check.to_dict() for check in self.checks],
            "critical_issues": [issue.to_dict() for issue in self.critical_issues],
            "standards": list(self.standards),
        }

    def check(self, category: str) -> ComplianceCheck:
        for item in self.checks:
            if item.category == category:
                return item
        raise KeyError(f"No compliance check named '{category}'")


def _confidences(data: EmissionsAggregate) -> np.ndarray:
    return np.array([detail.confidence for detail in data.calculation_details], dtype=float)


def check_data_quality(data: EmissionsAggregate) -> float:
    confidences = _confidences(data)
    if confidences.size == 0:
        return 0.0
    return float(np.count_nonzero(confidences >= HIGH_CONFIDENCE) / confidences.size * 100.0)


def check_methodology(data: EmissionsAggregate) -> float:
    # Placeholder: only checks that a full standard factor table was applied.
    if len(data.factors_used) >= METHODOLOGY_MIN_FACTORS:
        return METHODOLOGY_STANDARD_SCORE
    return METHODOLOGY_FALLBACK_SCORE


def check_scope_coverage(data: EmissionsAggregate) -> float:
    return min(len(data.emissions_by_type) * SCOPE_POINTS_PER_SOURCE, 100.0)


def check_documentation(data: EmissionsAggregate) -> float:
    # Placeholder: documentation completeness is not measured yet.
    return DOCUMENTATION_SCORE


def check_uncertainty(data: EmissionsAggregate) -> float:
    confidences = _confidences(data)
    if confidences.size == 0:
        return 0.0
    return float(confidences.mean() * 100.0)


def _tiered(pass_at: float, warn_at: float | None = None) -> Callable[[float], CheckStatus]:
    def status(score: float) -> CheckStatus:
        if score >= pass_at:
            return CheckStatus.PASS
        if warn_at is None or score >= warn_at:
            return CheckStatus.WARNING
        return CheckStatus.FAIL

    return status


@dataclass(frozen=True)
class RubricCheck:
    category: str
    standard: str
    requirement: str
    measure: Callable[[EmissionsAggregate], float]
    pass_threshold: float
    warning_threshold: float | None
    describe: Callable[[EmissionsAggregate, float], str]

    def run(self, data: EmissionsAggregate) -> ComplianceCheck:
        score = self.measure(data)
        status = _tiered(self.pass_threshold, self.warning_threshold)(score)
        recommendations = RECOMMENDATIONS[self.category] if score < self.pass_threshold else ()
        return ComplianceCheck(
            category=self.category,
            standard=self.standard,
            requirement=self.requirement,
            status=status,
            score=score,
            details=self.describe(data, score),
            recommendations=tuple(recommendations),
        )


RUBRIC: tuple[RubricCheck, ...] = (
    RubricCheck(
        "Data Quality",
        ISO_14064,
        "Data completeness and accuracy",
        check_data_quality,
        80.0,
        60.0,
        lambda data, score: f"{score:.1f}% of data meets quality thresholds",
    ),
    RubricCheck(
        "Methodology",
        GHG_PROTOCOL,
        "Use of appropriate emission factors",
        check_methodology,
        90.0,
        None,
        lambda data, score: "Standard emission factors applied consistently",
    ),
    RubricCheck(
        "Scope Coverage",
        ISO_14064,
        "Comprehensive scope identification",
        check_scope_coverage,
        70.0,
        None,
        lambda data, score: f"{len(data.emissions_by_type)} emission sources identified",
    ),
    RubricCheck(
        "Documentation",
        ISO_14064,
        "Adequate documentation and evidence",
        check_documentation,
        85.0,
        None,
        lambda data, score: "Calculation methods and sources documented",
    ),
    RubricCheck(
        "Uncertainty",
        ISO_14064,
        "Uncertainty assessment",
        check_uncertainty,
        75.0,
        None,
        lambda data, score: "Confidence levels tracked for data sources",
    ),
)


def overall_status(score: float) -> OverallStatus:
    if score >= COMPLIANT_SCORE:
        return OverallStatus.COMPLIANT
    if score >= PARTIAL_SCORE:
        return OverallStatus.PARTIAL
    return OverallStatus.NON_COMPLIANT


def find_critical_issues(data: EmissionsAggregate) -> list[CriticalIssue]:
    issues: list[CriticalIssue] = []
    if data.total_emissions > HIGH_EMISSIONS_KG:
        issues.append(
            CriticalIssue(
                type="high_emissions",
                message="High emissions detected - requires enhanced monitoring",
            )
        )
    low = sum(1 for detail in data.calculation_details if detail.confidence < LOW_CONFIDENCE)
    if low:
        issues.append(
            CriticalIssue(
                type="low_confidence",
                message=f"{low} data points have low confidence (<80%)",
                count=low,
            )
        )
    return issues


def score(data: EmissionsAggregate, rubric: Sequence[RubricCheck] = RUBRIC) -> ComplianceResult:
    """Run every rubric check against ``data`` and combine the verdict."""
    checks = tuple(item.run(data) for item in rubric)
    overall = sum(check.score for check in checks) / len(checks) if checks else 0.0
    status = overall_status(overall)
    issues = tuple(find_critical_issues(data))
    LOGGER.info("Compliance score %.1f (%s), %d critical issue(s)", overall, status, len(issues))
    return ComplianceResult(
        overall_score=overall,
        overall_status=status,
        checks=checks,
        critical_issues=issues,
    )
