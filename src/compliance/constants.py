from __future__ import annotations

ISO_14064 = "ISO 14064-1"
GHG_PROTOCOL = "GHG Protocol"
STANDARDS: tuple[str, ...] = (ISO_14064, "GHG Protocol Corporate Standard")

HIGH_CONFIDENCE = 0.85
LOW_CONFIDENCE = 0.8
HIGH_EMISSIONS_KG = 50000.0

COMPLIANT_SCORE = 80.0
PARTIAL_SCORE = 60.0

METHODOLOGY_MIN_FACTORS = 4
METHODOLOGY_STANDARD_SCORE = 95.0
METHODOLOGY_FALLBACK_SCORE = 80.0
SCOPE_POINTS_PER_SOURCE = 25.0
# Placeholder until documentation completeness can be measured.
DOCUMENTATION_SCORE = 88.0

RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "Data Quality": ("Improve data collection processes", "Validate emission factors"),
    "Methodology": ("Update to latest emission factors", "Document methodology changes"),
    "Scope Coverage": ("Expand scope coverage", "Include additional emission sources"),
    "Documentation": ("Improve documentation quality", "Add supporting evidence"),
    "Uncertainty": (
        "Improve uncertainty quantification",
        "Use higher quality data sources",
    ),
}
