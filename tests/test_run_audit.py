import json
import sys
from pathlib import Path

import pytest
from scripts import run_audit


def test_main_writes_requested_report(sample_paths, tmp_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("calc_emissions:\n  emission_factors: {}\n")
    output_dir = tmp_path / "reports"

    exit_code = run_audit.main(
        [*map(str, sample_paths), "--config", str(config_path), "--output-dir", str(output_dir), "--format", "json"]
    )

    assert exit_code == 0
    report_path = output_dir / "carbon-emissions-audit-report.json"
    payload = json.loads(report_path.read_text(encoding="utf-8"))
    assert list(payload["emissions_data"]["emissions_by_type"]) == [
        "electricity",
        "natural_gas",
        "diesel",
        "gasoline",
        "peak_demand",
    ]
    assert not (output_dir / "calculation_details.csv").exists()


def test_main_rejects_unknown_format(sample_paths, capsys):
    with pytest.raises(SystemExit):
        run_audit.main([str(sample_paths[0]), "--format", "pdf"])

    assert "invalid choice" in capsys.readouterr().err


def test_main_fails_on_missing_document(tmp_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("{}\n")

    with pytest.raises(FileNotFoundError):
        run_audit.main([str(tmp_path / "missing.txt"), "--config", str(config_path)])


def test_path_setup_exposes_src():
    from scripts import _path_setup

    assert _path_setup.ROOT == Path(run_audit.__file__).resolve().parents[1]
    assert str(_path_setup.SRC_PATH) in sys.path
