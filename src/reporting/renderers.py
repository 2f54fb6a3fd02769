from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

import pandas as pd

from calc_emissions.writers import write_emissions_tables

from .report import AuditReport

LOGGER = logging.getLogger("reporting")

REPORT_BASENAME = "carbon-emissions-audit-report"


class ReportRenderer(Protocol):
    """Serialises an :class:`AuditReport` into files under ``destination``."""

    def render(self, report: AuditReport, destination: Path) -> list[Path]:
        ...


class JsonReportRenderer:
    def render(self, report: AuditReport, destination: Path) -> list[Path]:
        dest_dir = Path(destination)
        dest_dir.mkdir(parents=True, exist_ok=True)
        path = dest_dir / f"{REPORT_BASENAME}.json"
        payload = json.dumps(report.to_dict(), indent=2, ensure_ascii=False, allow_nan=False)
        path.write_text(payload + "\n", encoding="utf-8")
        LOGGER.info("Wrote %s", path)
        return [path]


class CsvReportRenderer:
    """Spreadsheet-friendly tables: emissions breakdowns plus the compliance checks."""

    def render(self, report: AuditReport, destination: Path) -> list[Path]:
        dest_dir = Path(destination)
        written = write_emissions_tables(report.emissions, dest_dir)

        rows = []
        for check in report.compliance.checks:
            row = check.to_dict()
            row["recommendations"] = "; ".join(check.recommendations)
            rows.append(row)
        checks_df = pd.DataFrame(
            rows,
            columns=["category", "standard", "requirement", "status", "score", "details", "recommendations"],
        )
        checks_path = dest_dir / "compliance_checks.csv"
        checks_df.to_csv(checks_path, index=False)
        written.append(checks_path)
        for path in written:
            LOGGER.info("Wrote %s", path)
        return written


RENDERERS: dict[str, type] = {
    "json": JsonReportRenderer,
    "csv": CsvReportRenderer,
}


def get_renderer(fmt: str) -> ReportRenderer:
    key = str(fmt).strip().lower()
    if key not in RENDERERS:
        raise ValueError(f"Unknown report format '{fmt}'. Supported: {sorted(RENDERERS)}")
    return RENDERERS[key]()
