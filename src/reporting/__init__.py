"""Audit report assembly and file renderers."""

from .renderers import (
    RENDERERS,
    CsvReportRenderer,
    JsonReportRenderer,
    ReportRenderer,
    get_renderer,
)
from .report import AuditReport, build_report, consolidate_recommendations, key_findings

__all__ = [
    "RENDERERS",
    "AuditReport",
    "CsvReportRenderer",
    "JsonReportRenderer",
    "ReportRenderer",
    "build_report",
    "consolidate_recommendations",
    "get_renderer",
    "key_findings",
]
