import logging
from pathlib import Path

import pytest

from calc_emissions import SourceType
from extraction import (
    Document,
    RawHit,
    RegexRecognizer,
    extract_documents,
    load_documents,
    normalize,
    parse_quantity,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2,450", 2450.0),
        ("  12.5 ", 12.5),
        ("15,600", 15600.0),
        (7, 7.0),
        ("0", 0.0),
    ],
)
def test_parse_quantity_accepts_decimal_text(raw, expected):
    assert parse_quantity(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["-3", "abc", "", "nan", "inf", None, float("nan"), True])
def test_parse_quantity_rejects_malformed_values(raw):
    assert parse_quantity(raw) is None


def test_normalize_keeps_order_and_duplicates():
    hits = [
        RawHit("electricity", "2,450", "kWh", 0.92, "Electricity consumption"),
        ("electricity", "100", "kWh", 0.9, "Second meter"),
        RawHit("diesel", "500", "gallons", 0.95, "Diesel fuel consumption"),
    ]

    records = normalize("doc_7", hits)

    assert [r.type for r in records] == [
        SourceType.ELECTRICITY,
        SourceType.ELECTRICITY,
        SourceType.DIESEL,
    ]
    assert [r.value for r in records] == [2450.0, 100.0, 500.0]
    assert {r.document_id for r in records} == {"doc_7"}
    assert records[1].source == "Second meter"


def test_normalize_drops_malformed_hits_and_logs(caplog):
    hits = [
        RawHit("electricity", "n/a", "kWh", 0.92, "Electricity consumption"),
        RawHit("diesel", "-5", "gallons", 0.95, "Diesel fuel consumption"),
        RawHit("gasoline", "200", "gallons", 1.5, "Gasoline consumption"),
        RawHit("natural_gas", "1,200", "cubic feet", 0.88, "Natural gas usage"),
    ]

    with caplog.at_level(logging.WARNING, logger="extraction"):
        records = normalize("doc_0", hits)

    assert len(records) == 1
    assert records[0].type is SourceType.NATURAL_GAS
    assert records[0].value == 1200.0
    assert sum("Dropping" in message for message in caplog.messages) == 3


def test_normalize_keeps_unknown_source_types():
    records = normalize("doc_0", [RawHit("District Steam", "40", "MMBtu", 0.9, "Steam")])

    assert records[0].type == "district_steam"
    assert not isinstance(records[0].type, SourceType)


def test_regex_recognizer_reads_energy_bill(sample_paths):
    text = sample_paths[0].read_text(encoding="utf-8")

    hits = RegexRecognizer().recognize(text)

    assert [(h.type, h.raw_value, h.unit) for h in hits] == [
        (SourceType.ELECTRICITY, "2,450", "kWh"),
        (SourceType.NATURAL_GAS, "1,200", "cubic feet"),
    ]
    assert hits[0].confidence == pytest.approx(0.92)


def test_regex_recognizer_separates_demand_from_consumption(sample_paths):
    text = sample_paths[2].read_text(encoding="utf-8")

    hits = {hit.type: hit for hit in RegexRecognizer().recognize(text)}

    assert hits[SourceType.ELECTRICITY].raw_value == "15,600"
    assert hits[SourceType.PEAK_DEMAND].raw_value == "45"
    assert hits[SourceType.PEAK_DEMAND].confidence == pytest.approx(0.85)


def test_regex_recognizer_reads_fuel_invoice(sample_paths):
    text = sample_paths[1].read_text(encoding="utf-8")

    hits = RegexRecognizer().recognize(text)

    assert [(h.type, h.raw_value) for h in hits] == [
        (SourceType.DIESEL, "500"),
        (SourceType.GASOLINE, "200"),
    ]


def test_load_documents_numbers_files_in_order(tmp_path: Path):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("Electricity Usage: 10 kWh", encoding="utf-8")
    second.write_text("nothing here", encoding="utf-8")

    documents = load_documents([first, second])

    assert [(d.document_id, d.name) for d in documents] == [("doc_0", "a.txt"), ("doc_1", "b.txt")]
    assert documents[0].text.startswith("Electricity")


def test_load_documents_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_documents([tmp_path / "missing.txt"])


def test_extract_documents_accepts_custom_recognizer():
    class FixedRecognizer:
        def recognize(self, text):
            return [RawHit("gasoline", text, "gallons", 0.7, "Fleet log")]

    documents = [Document("doc_0", "fleet.txt", "12"), Document("doc_1", "bad.txt", "oops")]

    extractions = extract_documents(documents, FixedRecognizer())

    assert [len(e.records) for e in extractions] == [1, 0]
    assert extractions[0].records[0].value == 12.0
    assert extractions[0].to_dict()["items"][0]["type"] == "gasoline"
