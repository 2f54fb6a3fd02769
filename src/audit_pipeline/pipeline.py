"""Stage-by-stage carbon audit: upload → extraction → calculation → compliance → reporting.

:class:`AuditState` is immutable. Every transition returns a new state whose
``stage`` names the step to run next; re-running an earlier step drops the
outputs of every later one, so a state never mixes results from different
runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from calc_emissions import (
    EmissionsAggregate,
    QuantityRecord,
    aggregate,
    format_emissions,
    resolve_emission_factors,
)
from compliance import ComplianceResult, score
from config_paths import (
    apply_results_run_directory,
    get_config_path,
    get_results_run_directory,
    load_config,
)
from extraction import (
    Document,
    DocumentExtraction,
    Recognizer,
    extract_documents,
    load_documents,
)
from reporting import AuditReport, ReportRenderer, build_report, get_renderer

LOGGER = logging.getLogger("audit_pipeline")

DEFAULT_OUTPUT_DIRECTORY = "results/reports"
DEFAULT_FORMATS = ("json", "csv")


class PipelineStage(str, Enum):
    UPLOAD = "upload"
    EXTRACTION = "extraction"
    CALCULATION = "calculation"
    COMPLIANCE = "compliance"
    REPORTING = "reporting"

    def __str__(self) -> str:
        return self.value


class StageOrderError(RuntimeError):
    """Raised when a stage runs before the stage that feeds it."""


def _require(value, stage: PipelineStage, missing: str):
    if value is None:
        raise StageOrderError(f"Cannot run {stage} before {missing} has completed.")
    return value


@dataclass(frozen=True)
class AuditState:
    documents: tuple[Document, ...] | None = None
    extractions: tuple[DocumentExtraction, ...] | None = None
    aggregate: EmissionsAggregate | None = None
    compliance: ComplianceResult | None = None
    audit_report: AuditReport | None = None
    stage: PipelineStage = PipelineStage.UPLOAD

    @property
    def records(self) -> list[QuantityRecord]:
        if self.extractions is None:
            return []
        return [record for extraction in self.extractions for record in extraction.records]

    def with_documents(self, documents: Iterable[Document]) -> AuditState:
        return AuditState(documents=tuple(documents), stage=PipelineStage.EXTRACTION)

    def extract(self, recognizer: Recognizer | None = None) -> AuditState:
        documents = _require(self.documents, PipelineStage.EXTRACTION, PipelineStage.UPLOAD)
        extractions = extract_documents(documents, recognizer)
        return replace(
            self,
            extractions=tuple(extractions),
            aggregate=None,
            compliance=None,
            audit_report=None,
            stage=PipelineStage.CALCULATION,
        )

    def calculate(self, factors: Mapping[str, float] | None = None) -> AuditState:
        extractions = _require(
            self.extractions, PipelineStage.CALCULATION, PipelineStage.EXTRACTION
        )
        result = aggregate(
            self.records,
            factors,
            document_ids=[extraction.document_id for extraction in extractions],
        )
        LOGGER.info("Total emissions: %s", format_emissions(result.total_emissions))
        return replace(
            self,
            aggregate=result,
            compliance=None,
            audit_report=None,
            stage=PipelineStage.COMPLIANCE,
        )

    def check_compliance(self) -> AuditState:
        data = _require(self.aggregate, PipelineStage.COMPLIANCE, PipelineStage.CALCULATION)
        return replace(
            self, compliance=score(data), audit_report=None, stage=PipelineStage.REPORTING
        )

    def build_report(
        self,
        *,
        reporting_period: str = "",
        generated_at: datetime | None = None,
    ) -> AuditState:
        data = _require(self.aggregate, PipelineStage.REPORTING, PipelineStage.CALCULATION)
        result = _require(self.compliance, PipelineStage.REPORTING, PipelineStage.COMPLIANCE)
        names = {doc.document_id: doc.name for doc in self.documents or ()}
        report = build_report(
            data,
            result,
            reporting_period=reporting_period,
            generated_at=generated_at,
            document_names=names,
        )
        return replace(self, audit_report=report)

    def render(self, renderer: ReportRenderer, destination: Path | str) -> list[Path]:
        report = _require(self.audit_report, PipelineStage.REPORTING, "report assembly")
        return renderer.render(report, Path(destination))


def run_audit(
    documents: Sequence[Document],
    *,
    recognizer: Recognizer | None = None,
    factors: Mapping[str, float] | None = None,
) -> AuditState:
    """Run extraction, calculation and compliance for ``documents``."""
    return (
        AuditState()
        .with_documents(documents)
        .extract(recognizer)
        .calculate(factors)
        .check_compliance()
    )


def run_from_config(
    config_path: Path | str | None = None,
    document_paths: Iterable[Path | str] = (),
    *,
    output_directory: Path | str | None = None,
    formats: Sequence[str] | None = None,
    generated_at: datetime | None = None,
) -> tuple[AuditState, list[Path]]:
    """Run the full audit for ``document_paths`` using settings from ``config.yaml``."""
    config_path = Path(config_path) if config_path is not None else get_config_path()
    config = load_config(config_path)
    config_root = config_path.resolve().parent

    factors = resolve_emission_factors(config, config_root)

    reporting_cfg = config.get("reporting") or {}
    if not isinstance(reporting_cfg, Mapping):
        raise ValueError("'reporting' section must be a mapping.")
    output_dir = Path(
        output_directory or reporting_cfg.get("output_directory", DEFAULT_OUTPUT_DIRECTORY)
    )
    if not output_dir.is_absolute():
        output_dir = (config_root / output_dir).resolve()
    output_dir = apply_results_run_directory(
        output_dir,
        get_results_run_directory(config),
        config_root=config_root,
    )
    selected = list(formats or reporting_cfg.get("formats") or DEFAULT_FORMATS)
    renderers = [get_renderer(fmt) for fmt in selected]

    documents = load_documents(document_paths)
    state = run_audit(documents, factors=factors).build_report(
        reporting_period=str(reporting_cfg.get("reporting_period", "") or ""),
        generated_at=generated_at,
    )

    written: list[Path] = []
    for renderer in renderers:
        written.extend(state.render(renderer, output_dir))
    LOGGER.info("Audit reports written under %s", output_dir)
    return state, written
