"""Ensure the project packages are importable during tests without installation."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

root_path = str(ROOT)
if root_path not in sys.path:
    sys.path.insert(0, root_path)

src_path = str(SRC)
if src_path not in sys.path:
    sys.path.insert(0, src_path)

SAMPLES = ROOT / "data" / "samples"


@pytest.fixture
def sample_paths() -> list[Path]:
    return [
        SAMPLES / "energy_bill.txt",
        SAMPLES / "fuel_invoice.txt",
        SAMPLES / "utility_statement.txt",
    ]


@pytest.fixture
def make_record():
    from calc_emissions import QuantityRecord

    def _make(type_, value, confidence=0.9, document_id="doc_0", unit="unit", source="test"):
        return QuantityRecord(
            type=type_,
            value=value,
            unit=unit,
            confidence=confidence,
            source=source,
            document_id=document_id,
        )

    return _make
