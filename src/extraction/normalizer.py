"""Shape raw recognizer hits into typed :class:`QuantityRecord` objects.

Recognizers report values as they appear in the document text (``"2,450"``).
The normalizer parses those values, checks the confidence range, and drops
anything that cannot be trusted as a non-negative finite quantity. Dropped
hits are logged as data-quality losses rather than raised.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, NamedTuple

from calc_emissions.constants import SourceType
from calc_emissions.records import QuantityRecord, coerce_source_type

LOGGER = logging.getLogger("extraction")


class RawHit(NamedTuple):
    """One unparsed quantity as reported by a recognizer."""

    type: SourceType | str
    raw_value: str | float | int
    unit: str
    confidence: float | str
    source: str


def parse_quantity(raw_value: str | float | int | None) -> float | None:
    """Parse ``raw_value`` as a non-negative finite decimal, or return ``None``."""
    if raw_value is None or isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, str):
        cleaned = raw_value.replace(",", "").replace(" ", "").strip()
        if not cleaned:
            return None
    else:
        cleaned = raw_value
    try:
        value = float(cleaned)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def parse_confidence(raw_confidence: float | str | None) -> float | None:
    if raw_confidence is None or isinstance(raw_confidence, bool):
        return None
    try:
        confidence = float(raw_confidence)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(confidence) or not 0.0 <= confidence <= 1.0:
        return None
    return confidence


def normalize(document_id: str, hits: Iterable[RawHit | tuple]) -> list[QuantityRecord]:
    """Convert recognizer hits for ``document_id`` into quantity records.

    Order is preserved and nothing is merged: two hits of the same type yield
    two records.
    """
    records: list[QuantityRecord] = []
    dropped = 0
    for hit in hits:
        hit = RawHit(*hit)
        value = parse_quantity(hit.raw_value)
        if value is None:
            LOGGER.warning(
                "Dropping %s hit in %s: value %r is not a non-negative number",
                hit.type,
                document_id,
                hit.raw_value,
            )
            dropped += 1
            continue
        confidence = parse_confidence(hit.confidence)
        if confidence is None:
            LOGGER.warning(
                "Dropping %s hit in %s: confidence %r outside [0, 1]",
                hit.type,
                document_id,
                hit.confidence,
            )
            dropped += 1
            continue
        source_type = coerce_source_type(hit.type)
        if not isinstance(source_type, SourceType):
            LOGGER.debug("Unrecognised source type '%s' in %s", source_type, document_id)
        records.append(
            QuantityRecord(
                type=source_type,
                value=value,
                unit=str(hit.unit),
                confidence=confidence,
                source=str(hit.source),
                document_id=document_id,
            )
        )
    if dropped:
        LOGGER.info("%s: kept %d record(s), dropped %d", document_id, len(records), dropped)
    return records
