"""Assemble the audit report payload handed to renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from calc_emissions import EmissionsAggregate, format_emissions
from calc_emissions.constants import METHODOLOGY
from compliance import ComplianceResult

REPORT_TITLE = "Carbon Emissions Audit Report"

# Annual verification cycle.
REVIEW_INTERVAL = timedelta(days=365)

GENERAL_RECOMMENDATIONS: tuple[str, ...] = (
    "Implement continuous monitoring for real-time emissions tracking",
    "Expand scope to include additional emission sources",
    "Enhance data quality through improved collection processes",
)


@dataclass(frozen=True)
class AuditReport:
    title: str
    generated_at: str
    next_review_date: str
    reporting_period: str
    methodology: str
    compliance_standards: tuple[str, ...]
    executive_summary: dict
    emissions: EmissionsAggregate
    compliance: ComplianceResult
    recommendations: tuple[str, ...] = field(default_factory=tuple)
    document_names: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "report_title": self.title,
            "generated_at": self.generated_at,
            "next_review_date": self.next_review_date,
            "reporting_period": self.reporting_period,
            "methodology": self.methodology,
            "compliance_standards": list(self.compliance_standards),
            "executive_summary": dict(self.executive_summary),
            "document_names": dict(self.document_names),
            "emissions_data": self.emissions.to_dict(),
            "compliance_status": self.compliance.to_dict(),
            "recommendations": list(self.recommendations),
        }


def key_findings(emissions: EmissionsAggregate, compliance: ComplianceResult) -> list[str]:
    findings = [
        f"{len(emissions.calculation_details)} data points from "
        f"{len(emissions.emissions_by_document)} document(s) across "
        f"{len(emissions.emissions_by_type)} emission source type(s)",
        f"Total emissions of {format_emissions(emissions.total_emissions)}",
    ]
    if emissions.emissions_by_type:
        largest, totals = max(emissions.emissions_by_type.items(), key=lambda item: item[1].total)
        findings.append(
            f"Largest source: {largest} ({format_emissions(totals.total)})"
        )
    findings.append(
        f"Compliance score {compliance.overall_score:.1f} ({compliance.overall_status})"
    )
    return findings


def consolidate_recommendations(compliance: ComplianceResult) -> tuple[str, ...]:
    merged: list[str] = []
    for check in compliance.checks:
        merged.extend(check.recommendations)
    merged.extend(GENERAL_RECOMMENDATIONS)
    return tuple(dict.fromkeys(merged))


def build_report(
    emissions: EmissionsAggregate,
    compliance: ComplianceResult,
    *,
    reporting_period: str = "",
    generated_at: datetime | None = None,
    document_names: dict[str, str] | None = None,
) -> AuditReport:
    """Combine emissions and compliance results into an :class:`AuditReport`."""
    generated = generated_at or datetime.now(timezone.utc)
    summary = {
        "total_emissions": emissions.total_emissions,
        "total_emissions_formatted": format_emissions(emissions.total_emissions),
        "compliance_score": compliance.overall_score,
        "compliance_status": str(compliance.overall_status),
        "critical_issues": len(compliance.critical_issues),
        "key_findings": key_findings(emissions, compliance),
    }
    return AuditReport(
        title=REPORT_TITLE,
        generated_at=generated.isoformat(),
        next_review_date=(generated + REVIEW_INTERVAL).isoformat(),
        reporting_period=reporting_period,
        methodology=METHODOLOGY,
        compliance_standards=tuple(compliance.standards),
        executive_summary=summary,
        emissions=emissions,
        compliance=compliance,
        recommendations=consolidate_recommendations(compliance),
        document_names=dict(document_names or {}),
    )
