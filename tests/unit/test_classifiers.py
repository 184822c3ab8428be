"""Tests for chunk keyword and type tagging."""

import pytest

from construction_ai.documents.classifiers import detect_chunk_type, extract_keywords


class TestExtractKeywords:
    def test_terms_in_list_order(self):
        keywords = extract_keywords("Rebar in the SLAB per Concrete spec")

        assert keywords == ["concrete", "rebar", "slab"]

    def test_no_terms(self):
        assert extract_keywords("Meeting notes from Tuesday") == []


class TestDetectChunkType:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Milestone 3 completes the foundation.", "schedule"),
            ("Concrete shall be placed in lifts.", "specification"),
            ("Compressive strength of 4000 psi at 28 days.", "measurement"),
            ("See Section 3 for an overview.", "section_header"),
            ("Refer to drawing A-101.", "reference"),
            ("Hello world.", "general"),
        ],
    )
    def test_classification(self, text, expected):
        assert detect_chunk_type(text) == expected

    def test_first_match_wins(self):
        """Schedule language outranks specification language."""
        assert detect_chunk_type("The schedule shall include milestones.") == "schedule"
