"""Run the carbon emissions audit over digitised utility bills and fuel invoices.

Each DOCUMENT is a UTF-8 text file (OCR output). Emission factors, report
formats and the output directory come from ``config.yaml`` unless overridden
on the command line. All logging is routed through the standard logging
module so output integrates with larger pipelines.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from scripts._path_setup import ROOT  # noqa: E402
from audit_pipeline import run_from_config  # noqa: E402
from calc_emissions import format_emissions  # noqa: E402
from config_paths import get_config_path  # noqa: E402
from reporting import RENDERERS  # noqa: E402

LOGGER = logging.getLogger("audit_pipeline.run")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract activity data, calculate emissions and score ISO 14064-1 compliance"
    )
    parser.add_argument("documents", nargs="+", help="Text files holding OCR output")
    parser.add_argument("--config", help="Explicit path to the audit config file")
    parser.add_argument("--output-dir", help="Directory for the rendered reports")
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=sorted(RENDERERS),
        help="Report format (repeatable). Defaults to reporting.formats from the config.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    config_path = Path(args.config) if args.config else get_config_path(ROOT / "config.yaml")
    output_dir = Path(args.output_dir).resolve() if args.output_dir else None
    LOGGER.info("Running carbon audit with %s", config_path)

    state, written = run_from_config(
        config_path,
        args.documents,
        output_directory=output_dir,
        formats=args.formats,
    )

    emissions = state.aggregate
    result = state.compliance
    for name, totals in emissions.emissions_by_type.items():
        LOGGER.info(
            "%s: %s from %d data point(s)", name, format_emissions(totals.total), totals.count
        )
    LOGGER.info("Total emissions: %s", format_emissions(emissions.total_emissions))
    LOGGER.info(
        "Compliance: %.1f/100 (%s)", result.overall_score, result.overall_status
    )
    for issue in result.critical_issues:
        LOGGER.warning("%s: %s", issue.type, issue.message)
    for path in written:
        LOGGER.info("Report file: %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
