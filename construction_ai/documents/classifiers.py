"""Keyword and content-type tagging for document chunks."""

import re

CONSTRUCTION_TERMS = (
    "concrete", "steel", "rebar", "reinforcement", "aggregate", "cement",
    "foundation", "footing", "slab", "beam", "column", "wall",
    "specification", "requirement", "standard", "code", "regulation",
    "schedule", "milestone", "deadline", "duration", "critical path",
    "material", "equipment", "labor", "cost", "quantity",
    "inspection", "testing", "quality", "safety", "compliance",
    "drainage", "grading", "excavation", "backfill", "compaction",
    "asphalt", "pavement", "curb", "gutter", "sidewalk",
    "electrical", "plumbing", "mechanical", "hvac", "fire protection",
    "psi", "ksi", "mpa", "strength", "load", "capacity",
)

# Checked in order; first match wins
CHUNK_TYPE_PATTERNS = (
    ("schedule", re.compile(r"schedule|milestone|duration|start date|end date|critical path", re.IGNORECASE)),
    ("specification", re.compile(r"specification|requirement|shall|must|minimum|maximum", re.IGNORECASE)),
    ("measurement", re.compile(r"\d+\s*(psi|ksi|mpa|lbs?|kg|tons?|cf|cy|sf|sy|lf)", re.IGNORECASE)),
    ("section_header", re.compile(r"section\s+\d|article\s+\d|part\s+\d", re.IGNORECASE)),
    ("reference", re.compile(r"table|figure|drawing|plan|detail", re.IGNORECASE)),
)


def extract_keywords(text: str) -> list[str]:
    """Return the construction terms that appear in ``text``."""
    lowered = text.lower()
    return [term for term in CONSTRUCTION_TERMS if term in lowered]


def detect_chunk_type(text: str) -> str:
    """Classify a chunk's dominant content."""
    for chunk_type, pattern in CHUNK_TYPE_PATTERNS:
        if pattern.search(text):
            return chunk_type
    return "general"
