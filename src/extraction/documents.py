from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from calc_emissions.records import QuantityRecord

from .normalizer import normalize
from .recognizer import Recognizer, RegexRecognizer

LOGGER = logging.getLogger("extraction")


@dataclass(frozen=True)
class Document:
    """Digitised document text handed over by the OCR collaborator."""

    document_id: str
    name: str
    text: str


@dataclass(frozen=True)
class DocumentExtraction:
    """Normalised records for one document."""

    document_id: str
    document_name: str
    records: tuple[QuantityRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "document_id": self.document_id,
            "document_name": self.document_name,
            "items": [record.to_dict() for record in self.records],
        }


def make_document_id(index: int) -> str:
    return f"doc_{index}"


def load_documents(paths: Iterable[Path | str]) -> list[Document]:
    """Read UTF-8 text files as documents numbered in the order given."""
    documents: list[Document] = []
    for index, raw_path in enumerate(paths):
        path = Path(raw_path)
        if not path.exists():
            raise FileNotFoundError(f"Document not found: {path}")
        documents.append(
            Document(
                document_id=make_document_id(index),
                name=path.name,
                text=path.read_text(encoding="utf-8"),
            )
        )
    LOGGER.info("Loaded %d document(s)", len(documents))
    return documents


def extract_documents(
    documents: Sequence[Document],
    recognizer: Recognizer | None = None,
) -> list[DocumentExtraction]:
    """Run ``recognizer`` over every document and normalise its hits."""
    recognizer = recognizer or RegexRecognizer()
    extractions: list[DocumentExtraction] = []
    for document in documents:
        hits = recognizer.recognize(document.text)
        records = normalize(document.document_id, hits)
        LOGGER.info("%s (%s): %d record(s)", document.document_id, document.name, len(records))
        extractions.append(
            DocumentExtraction(
                document_id=document.document_id,
                document_name=document.name,
                records=tuple(records),
            )
        )
    return extractions
