"""Typed quantity records shared between extraction and aggregation."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from .constants import SourceType


def coerce_source_type(label: str | SourceType) -> SourceType | str:
    """Return the matching :class:`SourceType`, or the cleaned label when unknown."""
    if isinstance(label, SourceType):
        return label
    cleaned = str(label).strip().lower().replace(" ", "_").replace("-", "_")
    try:
        return SourceType(cleaned)
    except ValueError:
        return cleaned


@dataclass(frozen=True)
class QuantityRecord:
    """A single physical quantity read from a document.

    ``value`` must be a finite non-negative number and ``confidence`` must lie
    in ``[0, 1]``; anything else raises ``ValueError`` on construction.
    """

    type: SourceType | str
    value: float
    unit: str
    confidence: float
    source: str
    document_id: str

    def __post_init__(self) -> None:
        try:
            value = float(self.value)
            confidence = float(self.confidence)
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Quantity for '{self.type}' in {self.document_id} must be numeric"
            ) from exc
        if not math.isfinite(value) or value < 0:
            raise ValueError(
                f"Quantity for '{self.type}' in {self.document_id} must be a finite "
                f"non-negative number, got {self.value!r}"
            )
        if not math.isfinite(confidence) or not 0.0 <= confidence <= 1.0:
            raise ValueError(
                f"Confidence for '{self.type}' in {self.document_id} must lie in [0, 1], "
                f"got {self.confidence!r}"
            )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["type"] = str(self.type)
        return data
