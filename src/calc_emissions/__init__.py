from .calculator import (
    CalculationDetail,
    DocumentEmissions,
    EmissionsAggregate,
    TypeTotal,
    aggregate,
    format_emissions,
    load_emission_factors,
    resolve_emission_factors,
    validate_factor_table,
)
from .constants import DEFAULT_EMISSION_FACTORS, DEFAULT_UNITS, EmissionFactorTable, SourceType
from .records import QuantityRecord, coerce_source_type

__all__ = [
    "DEFAULT_EMISSION_FACTORS",
    "DEFAULT_UNITS",
    "EmissionFactorTable",
    "CalculationDetail",
    "DocumentEmissions",
    "EmissionsAggregate",
    "QuantityRecord",
    "SourceType",
    "TypeTotal",
    "aggregate",
    "coerce_source_type",
    "format_emissions",
    "load_emission_factors",
    "resolve_emission_factors",
    "validate_factor_table",
]
