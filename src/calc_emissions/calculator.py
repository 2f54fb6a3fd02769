"""Convert extracted activity quantities into greenhouse-gas emissions.

Each :class:`QuantityRecord` is multiplied by the emission factor of its
source type (kg CO₂e per unit). Results are accumulated three ways: the
overall total, per source type, and per document. Unknown source types are
kept in the audit trail with a zero factor so a single odd record never
aborts a calculation run.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

import pandas as pd

from .constants import (
    DEFAULT_EMISSION_FACTORS,
    DEFAULT_UNITS,
    EMISSIONS_UNIT,
    EmissionFactorTable,
    FACTOR_COLUMN_ALIASES,
    METHODOLOGY,
)
from .records import QuantityRecord, coerce_source_type

LOGGER = logging.getLogger("calc_emissions")
if not LOGGER.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    LOGGER.addHandler(handler)
LOGGER.setLevel(logging.INFO)
LOGGER.propagate = False

DETAIL_COLUMNS = [
    "document_id",
    "source",
    "type",
    "value",
    "unit",
    "emission_factor",
    "emissions",
    "confidence",
]


@dataclass(frozen=True)
class CalculationDetail:
    """Audit-trail entry for one quantity record."""

    document_id: str
    source: str
    type: str
    value: float
    unit: str
    emission_factor: float
    emissions: float
    confidence: float

    def to_dict(self) -> dict:
        return {column: getattr(self, column) for column in DETAIL_COLUMNS}


@dataclass(frozen=True)
class TypeTotal:
    total: float
    count: int
    unit: str

    def to_dict(self) -> dict:
        return {"total": self.total, "count": self.count, "unit": self.unit}


@dataclass(frozen=True)
class DocumentEmissions:
    document_id: str
    emissions: float
    calculations: tuple[CalculationDetail, ...] = ()

    def to_dict(self) -> dict:
        return {
            "document_id": self.document_id,
            "emissions": self.emissions,
            "calculations": [detail.to_dict() for detail in self.calculations],
        }


@dataclass(frozen=True)
class EmissionsAggregate:
    """Result container for one calculation run."""

    total_emissions: float
    emissions_by_type: Mapping[str, TypeTotal]
    emissions_by_document: tuple[DocumentEmissions, ...]
    calculation_details: tuple[CalculationDetail, ...]
    factors_used: EmissionFactorTable
    methodology: str = field(default=METHODOLOGY)
    unit: str = field(default=EMISSIONS_UNIT)

    def to_dict(self) -> dict:
        return {
            "total_emissions": self.total_emissions,
            "unit": self.unit,
            "methodology": self.methodology,
            "emissions_by_type": {
                name: total.to_dict() for name, total in self.emissions_by_type.items()
            },
            "emissions_by_document": [doc.to_dict() for doc in self.emissions_by_document],
            "calculation_details": [detail.to_dict() for detail in self.calculation_details],
            "factors_used": dict(self.factors_used),
        }

    def to_frame(self) -> pd.DataFrame:
        """Return the calculation details as a DataFrame (one row per record)."""
        rows = [detail.to_dict() for detail in self.calculation_details]
        return pd.DataFrame(rows, columns=DETAIL_COLUMNS)

    def type_frame(self) -> pd.DataFrame:
        rows = [
            {"type": name, "total": total.total, "count": total.count, "unit": total.unit}
            for name, total in self.emissions_by_type.items()
        ]
        return pd.DataFrame(rows, columns=["type", "total", "count", "unit"])


def aggregate(
    records: Iterable[QuantityRecord],
    factors: EmissionFactorTable | None = None,
    *,
    document_ids: Sequence[str] | None = None,
) -> EmissionsAggregate:
    """Calculate emissions for ``records`` using ``factors``.

    Parameters
    ----------
    records:
        Quantity records in presentation order.
    factors:
        Emission factor table keyed by source type. Defaults to
        :data:`DEFAULT_EMISSION_FACTORS`.
    document_ids:
        Optional document order. Listed documents appear even when they have
        no records; documents only seen in ``records`` are appended.
    """
    snapshot = MappingProxyType(
        validate_factor_table(DEFAULT_EMISSION_FACTORS if factors is None else factors)
    )

    total = 0.0
    details: list[CalculationDetail] = []
    type_totals: dict[str, list] = {}
    doc_totals: dict[str, float] = {}
    doc_details: dict[str, list[CalculationDetail]] = {}
    warned: set[str] = set()

    for doc_id in document_ids or ():
        doc_totals.setdefault(doc_id, 0.0)
        doc_details.setdefault(doc_id, [])

    for record in records:
        type_key = str(coerce_source_type(record.type))
        factor = snapshot.get(type_key)
        if factor is None:
            if type_key not in warned:
                LOGGER.warning(
                    "No emission factor for source type '%s'; counting its records as zero",
                    type_key,
                )
                warned.add(type_key)
            factor = 0.0
        emissions = float(record.value) * float(factor)
        if not math.isfinite(emissions) or not math.isfinite(total + emissions):
            LOGGER.warning(
                "Dropping %s record from %s: %r x %r overflows",
                type_key,
                record.document_id,
                record.value,
                factor,
            )
            doc_totals.setdefault(record.document_id, 0.0)
            doc_details.setdefault(record.document_id, [])
            continue
        unit = record.unit or DEFAULT_UNITS.get(type_key, "")

        detail = CalculationDetail(
            document_id=record.document_id,
            source=record.source,
            type=type_key,
            value=float(record.value),
            unit=unit,
            emission_factor=float(factor),
            emissions=emissions,
            confidence=float(record.confidence),
        )
        details.append(detail)
        total += emissions

        bucket = type_totals.setdefault(type_key, [0.0, 0, unit])
        bucket[0] += emissions
        bucket[1] += 1

        doc_totals[record.document_id] = doc_totals.get(record.document_id, 0.0) + emissions
        doc_details.setdefault(record.document_id, []).append(detail)

    by_type = MappingProxyType(
        {
            name: TypeTotal(total=bucket[0], count=bucket[1], unit=bucket[2])
            for name, bucket in type_totals.items()
        }
    )
    by_document = tuple(
        DocumentEmissions(
            document_id=doc_id,
            emissions=doc_totals[doc_id],
            calculations=tuple(doc_details[doc_id]),
        )
        for doc_id in doc_totals
    )
    return EmissionsAggregate(
        total_emissions=total,
        emissions_by_type=by_type,
        emissions_by_document=by_document,
        calculation_details=tuple(details),
        factors_used=snapshot,
    )


def format_emissions(value_kg: float) -> str:
    """Render kilograms of CO₂e for humans (tonnes from 1000 kg)."""
    if not value_kg:
        return "0 kg CO₂e"
    if value_kg >= 1000:
        return f"{value_kg / 1000:.2f} tonnes CO₂e"
    return f"{value_kg:.2f} kg CO₂e"


def validate_factor_table(factors: Mapping[str, float | int | str]) -> dict[str, float]:
    """Return a cleaned copy of ``factors`` or raise ``ValueError``."""
    if not isinstance(factors, Mapping):
        raise ValueError("Emission factors must be a mapping of source type to factor.")
    cleaned: dict[str, float] = {}
    for key, raw in factors.items():
        name = str(coerce_source_type(key))
        try:
            value = float(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Emission factor for '{name}' is not numeric: {raw!r}") from exc
        if not math.isfinite(value) or value < 0:
            raise ValueError(
                f"Emission factor for '{name}' must be a finite non-negative number, got {raw!r}"
            )
        cleaned[name] = value
    return cleaned


def load_emission_factors(path: Path | str) -> dict[str, float]:
    """Load an emission-factor CSV with a ``source_type`` column."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Emission factors file not found: {path}")
    df = pd.read_csv(path, comment="#")
    if "source_type" not in df.columns:
        raise ValueError("Emission factors CSV must contain a 'source_type' column.")

    selected = None
    scale = None
    for column, conversion in FACTOR_COLUMN_ALIASES.items():
        if column in df.columns:
            selected = column
            scale = conversion
            break
    if selected is None:
        available = ", ".join(df.columns)
        raise ValueError(
            "Emission factors must provide a factor column. "
            f"Supported aliases include: {list(FACTOR_COLUMN_ALIASES)}. "
            f"Available columns: {available}"
        )

    df["source_type"] = df["source_type"].astype(str).str.strip().str.lower()
    series = pd.to_numeric(df.set_index("source_type")[selected], errors="coerce") * scale
    return validate_factor_table(series.to_dict())


def resolve_emission_factors(
    config: Mapping[str, object] | None,
    config_root: Path | None = None,
) -> dict[str, float]:
    """Merge defaults, the configured factor file, and inline overrides."""
    factors = dict(DEFAULT_EMISSION_FACTORS)
    module_cfg = (config or {}).get("calc_emissions") or {}
    if not isinstance(module_cfg, Mapping):
        raise ValueError("'calc_emissions' section must be a mapping.")

    ef_setting = module_cfg.get("emission_factors_file")
    if ef_setting:
        ef_path = Path(str(ef_setting))
        if not ef_path.is_absolute():
            ef_path = ((config_root or Path.cwd()) / ef_path).resolve()
        LOGGER.info("Loading emission factors from %s", ef_path)
        factors.update(load_emission_factors(ef_path))

    inline = module_cfg.get("emission_factors")
    if inline:
        factors.update(validate_factor_table(inline))
    return factors
