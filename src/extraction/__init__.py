"""Document extraction: recognizers plus record normalisation."""

from .documents import (
    Document,
    DocumentExtraction,
    extract_documents,
    load_documents,
    make_document_id,
)
from .normalizer import RawHit, normalize, parse_confidence, parse_quantity
from .recognizer import DEFAULT_PATTERNS, QuantityPattern, Recognizer, RegexRecognizer

__all__ = [
    "DEFAULT_PATTERNS",
    "Document",
    "DocumentExtraction",
    "QuantityPattern",
    "RawHit",
    "Recognizer",
    "RegexRecognizer",
    "extract_documents",
    "load_documents",
    "make_document_id",
    "normalize",
    "parse_confidence",
    "parse_quantity",
]
