"""Helpers to load the audit configuration and resolve run-specific results directories."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]

CONFIG_ENV_VAR = "CARBON_AUDIT_CONFIG_PATH"


def get_config_path(default: Path | None = None) -> Path:
    """Return the configuration path, honouring CARBON_AUDIT_CONFIG_PATH when set."""

    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    if default is not None:
        return default.resolve()
    return (REPO_ROOT / "config.yaml").resolve()


def load_config(config_path: Path | str) -> dict:
    """Read a YAML config file; an empty file yields an empty mapping."""

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with config_path.open() as handle:
        config = yaml.safe_load(handle) or {}
    if not isinstance(config, Mapping):
        raise ValueError(f"Config file {config_path} must contain a mapping at the top level.")
    return dict(config)


def sanitize_run_directory(value: str | None) -> str | None:
    """Reduce ``results.run_directory`` to a relative label such as ``2024-q1/site-a``.

    Empty labels yield ``None``. ``.`` and ``..`` components are discarded so an
    audit run can never write outside ``results/``.
    """

    if value is None or not value.strip():
        return None
    label = Path(value.strip())
    if label.is_absolute():
        raise ValueError(
            f"results.run_directory must be relative to results/, got {value!r}"
        )
    kept = [part for part in label.parts if part not in ("", ".", "..")]
    return "/".join(kept) or None


def get_results_run_directory(config: Mapping[str, object] | None) -> str | None:
    """Return the sanitised audit run label from ``results.run_directory``, if set."""

    results_cfg = config.get("results") if isinstance(config, Mapping) else None
    if not isinstance(results_cfg, Mapping):
        return None
    label = results_cfg.get("run_directory")
    return None if label is None else sanitize_run_directory(str(label))


def apply_results_run_directory(
    path: Path,
    run_directory: str | None,
    *,
    config_root: Path | None = None,
) -> Path:
    """Nest report output for one audit run: ``results/reports`` -> ``results/<run>/reports``.

    Paths outside ``<config_root>/results`` are returned unchanged.
    """

    root = config_root or REPO_ROOT
    target = path if path.is_absolute() else root / path
    if not run_directory:
        return target
    try:
        head, *rest = target.relative_to(root).parts
    except ValueError:
        return target
    if head != "results":
        return target
    return (root / "results" / run_directory / Path(*rest)).resolve()
