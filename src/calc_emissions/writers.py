from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from .constants import EMISSIONS_UNIT

if TYPE_CHECKING:  # pragma: no cover
    from .calculator import EmissionsAggregate


def _write_table(df: pd.DataFrame, path: Path, unit: str | None = EMISSIONS_UNIT) -> Path:
    with path.open("w", encoding="utf-8", newline="") as fh:
        if unit:
            fh.write(f"# unit: {unit}\n")
        df.to_csv(fh, index=False)
    return path


def _build_document_dataframe(aggregate: EmissionsAggregate) -> pd.DataFrame:
    data = {
        "document_id": [doc.document_id for doc in aggregate.emissions_by_document],
        "emissions": [doc.emissions for doc in aggregate.emissions_by_document],
        "records": [len(doc.calculations) for doc in aggregate.emissions_by_document],
    }
    return pd.DataFrame(data, columns=["document_id", "emissions", "records"])


def write_emissions_tables(aggregate: EmissionsAggregate, destination: Path) -> list[Path]:
    """Write calculation details and per-type/per-document totals as CSV files."""
    dest_dir = Path(destination)
    dest_dir.mkdir(parents=True, exist_ok=True)
    return [
        _write_table(aggregate.to_frame(), dest_dir / "calculation_details.csv"),
        _write_table(aggregate.type_frame(), dest_dir / "emissions_by_type.csv"),
        _write_table(_build_document_dataframe(aggregate), dest_dir / "emissions_by_document.csv"),
    ]
