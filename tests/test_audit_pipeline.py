import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from audit_pipeline import (
    AuditState,
    PipelineStage,
    StageOrderError,
    run_audit,
    run_from_config,
)
from compliance import OverallStatus
from extraction import Document, load_documents
from reporting import JsonReportRenderer

SAMPLE_TOTAL = 2450 * 0.45 + 1200 * 0.0053 + 500 * 10.15 + 200 * 8.89 + 15600 * 0.45 + 45 * 0.45


def test_run_audit_over_sample_documents(sample_paths):
    state = run_audit(load_documents(sample_paths))

    assert state.stage is PipelineStage.REPORTING
    assert state.aggregate.total_emissions == pytest.approx(SAMPLE_TOTAL)
    assert list(state.aggregate.emissions_by_type) == [
        "electricity",
        "natural_gas",
        "diesel",
        "gasoline",
        "peak_demand",
    ]
    assert [d.document_id for d in state.aggregate.emissions_by_document] == [
        "doc_0",
        "doc_1",
        "doc_2",
    ]
    assert state.compliance.check("Scope Coverage").score == 100.0
    assert state.compliance.overall_status is OverallStatus.COMPLIANT
    assert state.compliance.critical_issues == ()


def test_empty_run_is_non_compliant():
    state = run_audit([])

    assert state.aggregate.total_emissions == 0.0
    assert state.compliance.overall_status is OverallStatus.NON_COMPLIANT


def test_document_without_matches_is_still_listed():
    documents = [Document("doc_0", "memo.txt", "No readings this month")]

    state = run_audit(documents)

    assert [d.document_id for d in state.aggregate.emissions_by_document] == ["doc_0"]
    assert state.aggregate.emissions_by_document[0].emissions == 0.0


@pytest.mark.parametrize(
    "action",
    [
        lambda s: s.extract(),
        lambda s: s.calculate(),
        lambda s: s.check_compliance(),
        lambda s: s.build_report(),
        lambda s: s.render(JsonReportRenderer(), "unused"),
    ],
)
def test_stages_require_their_inputs(action):
    with pytest.raises(StageOrderError):
        action(AuditState())


def test_transitions_return_new_states_and_reset_later_stages(sample_paths):
    uploaded = AuditState().with_documents(load_documents(sample_paths[:1]))
    extracted = uploaded.extract()
    scored = extracted.calculate().check_compliance()

    recalculated = scored.calculate({"electricity": 1.0, "natural_gas": 1.0})

    assert uploaded.extractions is None
    assert uploaded.stage is PipelineStage.EXTRACTION
    assert extracted.stage is PipelineStage.CALCULATION
    assert scored.compliance is not None
    assert recalculated.compliance is None
    assert recalculated.stage is PipelineStage.COMPLIANCE
    assert recalculated.aggregate.total_emissions == pytest.approx(2450 + 1200)
    with pytest.raises(StageOrderError):
        recalculated.build_report()


def test_render_writes_report_with_document_names(sample_paths, tmp_path: Path):
    state = run_audit(load_documents(sample_paths)).build_report(
        reporting_period="2024 Q1",
        generated_at=datetime(2024, 4, 1, tzinfo=timezone.utc),
    )

    written = state.render(JsonReportRenderer(), tmp_path)

    payload = json.loads(written[0].read_text(encoding="utf-8"))
    assert payload["document_names"] == {
        "doc_0": "energy_bill.txt",
        "doc_1": "fuel_invoice.txt",
        "doc_2": "utility_statement.txt",
    }
    assert payload["reporting_period"] == "2024 Q1"


def test_run_from_config_writes_configured_reports(sample_paths, tmp_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        json.dumps(
            {
                "calc_emissions": {"emission_factors": {"electricity": 0.5}},
                "reporting": {
                    "output_directory": "results/reports",
                    "formats": ["json"],
                    "reporting_period": "2024 Q2",
                },
                "results": {"run_directory": "run1"},
            }
        )
    )

    state, written = run_from_config(config_path, sample_paths[:1])

    assert written == [
        tmp_path.resolve() / "results" / "run1" / "reports" / "carbon-emissions-audit-report.json"
    ]
    assert written[0].exists()
    assert state.aggregate.total_emissions == pytest.approx(2450 * 0.5 + 1200 * 0.0053)
    assert state.audit_report.reporting_period == "2024 Q2"


def test_run_from_config_uses_repository_factor_file(sample_paths, tmp_path: Path):
    root = Path(__file__).resolve().parents[1]

    state, written = run_from_config(
        root / "config.yaml",
        sample_paths,
        output_directory=tmp_path,
        formats=["csv"],
    )

    assert state.aggregate.total_emissions == pytest.approx(SAMPLE_TOTAL)
    assert {p.name for p in written} >= {"calculation_details.csv", "compliance_checks.csv"}
    assert all(p.parent == tmp_path for p in written)


def test_run_from_config_rejects_unknown_format(sample_paths, tmp_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("reporting:\n  formats: [pdf]\n")

    with pytest.raises(ValueError, match="Unknown report format"):
        run_from_config(config_path, sample_paths)
    assert not (tmp_path / "results").exists()
