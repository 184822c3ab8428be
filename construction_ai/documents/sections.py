"""Structural header detection and page estimation for construction documents."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass

# Spec-book style headers: "SECTION 03300 - Cast-in-Place Concrete", "1.2 SUBMITTALS", ...
SECTION_PATTERNS = (
    re.compile(r"^(?:SECTION|Section)\s+(\d+(?:\.\d+)*)\s*[-–—]?\s*(.+?)$", re.MULTILINE),
    re.compile(r"^(?:PART|Part)\s+(\d+(?:\.\d+)*)\s*[-–—]?\s*(.+?)$", re.MULTILINE),
    re.compile(r"^(\d+(?:\.\d+)+)\s+([A-Z][A-Za-z ]+)$", re.MULTILINE),
    re.compile(r"^(?:ARTICLE|Article)\s+(\d+)\s*[-–—]?\s*(.+?)$", re.MULTILINE),
    re.compile(r"^(?:DIVISION|Division)\s+(\d+)\s*[-–—]?\s*(.+?)$", re.MULTILINE),
)


@dataclass(frozen=True)
class Section:
    """A detected section and the text it spans."""

    title: str
    content: str
    start_index: int
    end_index: int

    def contains(self, offset: int) -> bool:
        return self.start_index <= offset < self.end_index


def detect_sections(text: str) -> list[Section]:
    """Find section headers and the span each one covers.

    Each section runs from its header to the next header, or to the end of
    the text for the last one.
    """
    headers: list[tuple[int, str]] = []
    for pattern in SECTION_PATTERNS:
        for match in pattern.finditer(text):
            title = f"{match.group(1)} {match.group(2)}".strip()
            headers.append((match.start(), title))

    headers.sort(key=lambda header: header[0])

    sections: list[Section] = []
    for i, (start, title) in enumerate(headers):
        end = headers[i + 1][0] if i + 1 < len(headers) else len(text)
        sections.append(
            Section(
                title=title,
                content=text[start:end].strip(),
                start_index=start,
                end_index=end,
            )
        )
    return sections


def find_section(sections: Sequence[Section], offset: int) -> Section | None:
    """Return the section whose span contains ``offset``, if any."""
    for section in sections:
        if section.contains(offset):
            return section
    return None


def estimate_page_number(char_offset: int, total_chars: int, total_pages: int | None) -> int:
    """Linearly interpolate a page number from a character offset.

    This is a heuristic; extracted text carries no real page layout.
    """
    if not total_pages or total_chars <= 0:
        return 1
    chars_per_page = total_chars / total_pages
    return max(1, math.ceil(char_offset / chars_per_page))
