"""Recognizers locate activity quantities in digitised document text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from calc_emissions.constants import SourceType

from .normalizer import RawHit

_NUMBER = r"(\d[\d,]*(?:\.\d+)?)"


class Recognizer(Protocol):
    """Anything that can turn document text into raw quantity hits."""

    def recognize(self, text: str) -> list[RawHit]:
        ...


@dataclass(frozen=True)
class QuantityPattern:
    type: SourceType | str
    pattern: str
    unit: str
    confidence: float
    source: str

    def compile(self) -> re.Pattern[str]:
        return re.compile(self.pattern, re.IGNORECASE)


DEFAULT_PATTERNS: tuple[QuantityPattern, ...] = (
    QuantityPattern(
        SourceType.ELECTRICITY, _NUMBER + r"\s*kWh", "kWh", 0.92, "Electricity consumption"
    ),
    QuantityPattern(
        SourceType.NATURAL_GAS,
        _NUMBER + r"\s*cubic\s+feet",
        "cubic feet",
        0.88,
        "Natural gas usage",
    ),
    QuantityPattern(
        SourceType.DIESEL,
        r"Diesel.*?" + _NUMBER + r"\s*gallons",
        "gallons",
        0.95,
        "Diesel fuel consumption",
    ),
    QuantityPattern(
        SourceType.GASOLINE,
        r"Gasoline.*?" + _NUMBER + r"\s*gallons",
        "gallons",
        0.93,
        "Gasoline consumption",
    ),
    # \b keeps "kWh" readings out of the demand figure.
    QuantityPattern(
        SourceType.PEAK_DEMAND, _NUMBER + r"\s*kW\b", "kW", 0.85, "Peak electricity demand"
    ),
)


class RegexRecognizer:
    """Pattern-based recognizer; the first match of each pattern is reported."""

    def __init__(self, patterns: Iterable[QuantityPattern] = DEFAULT_PATTERNS) -> None:
        self.patterns: Sequence[QuantityPattern] = tuple(patterns)
        self._compiled = [(spec, spec.compile()) for spec in self.patterns]

    def recognize(self, text: str) -> list[RawHit]:
        hits: list[RawHit] = []
        for spec, regex in self._compiled:
            match = regex.search(text or "")
            if match is None:
                continue
            hits.append(RawHit(spec.type, match.group(1), spec.unit, spec.confidence, spec.source))
        return hits
