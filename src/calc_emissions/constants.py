from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class SourceType(str, Enum):
    """Activity categories recognised on utility bills and fuel invoices."""

    ELECTRICITY = "electricity"
    NATURAL_GAS = "natural_gas"
    DIESEL = "diesel"
    GASOLINE = "gasoline"
    PEAK_DEMAND = "peak_demand"

    def __str__(self) -> str:
        return self.value


# kg CO2e per stated unit (GHG Protocol / US averages).
# source type -> kg CO2e per unit
EmissionFactorTable = Mapping[str, float]

DEFAULT_EMISSION_FACTORS: EmissionFactorTable = MappingProxyType(
    {
        SourceType.ELECTRICITY.value: 0.45,  # per kWh
        SourceType.NATURAL_GAS.value: 0.0053,  # per cubic foot
        SourceType.DIESEL.value: 10.15,  # per gallon
        SourceType.GASOLINE.value: 8.89,  # per gallon
        SourceType.PEAK_DEMAND.value: 0.45,  # per kW, same as electricity
    }
)

DEFAULT_UNITS: Mapping[str, str] = MappingProxyType(
    {
        SourceType.ELECTRICITY.value: "kWh",
        SourceType.NATURAL_GAS.value: "cubic feet",
        SourceType.DIESEL.value: "gallons",
        SourceType.GASOLINE.value: "gallons",
        SourceType.PEAK_DEMAND.value: "kW",
    }
)

FACTOR_COLUMN_ALIASES: dict[str, float] = {
    "kg_co2e_per_unit": 1.0,
    "g_co2e_per_unit": 1e-3,
    "t_co2e_per_unit": 1e3,
}

METHODOLOGY = "GHG Protocol Corporate Standard"
EMISSIONS_UNIT = "kg CO2e"
