"""Boundary-aware fixed-window chunker."""

from __future__ import annotations

from dataclasses import dataclass

# Preferred cut points, strongest first
BOUNDARY_MARKERS = ("\n\n", ".\n", ". ", "\n")

DEFAULT_CHUNK_SIZE = 2000
DEFAULT_CHUNK_OVERLAP = 200
DEFAULT_MIN_CHUNK_LENGTH = 50


@dataclass(frozen=True)
class TextSpan:
    """A chunk of text with its offsets in the source document.

    ``content == source[start:end]`` always holds.
    """

    content: str
    start: int
    end: int


class BoundaryAwareChunker:
    """Splits text into overlapping windows that prefer paragraph and sentence breaks."""

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        overlap: int = DEFAULT_CHUNK_OVERLAP,
        min_length: int = DEFAULT_MIN_CHUNK_LENGTH,
    ) -> None:
        """Initialize the chunker.

        Args:
            chunk_size: Window size in characters.
            overlap: Characters shared by consecutive windows.
            min_length: Chunks shorter than this are dropped as noise.

        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= overlap < chunk_size:
            raise ValueError("overlap must be non-negative and smaller than chunk_size")
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.min_length = min_length

    def chunk(self, text: str) -> list[str]:
        """Split text into chunk strings."""
        return [span.content for span in self.chunk_spans(text)]

    def chunk_spans(self, text: str) -> list[TextSpan]:
        """Split text into chunks, keeping each chunk's offsets.

        Args:
            text: Extracted document text.

        Returns:
            Chunks in document order.

        """
        spans: list[TextSpan] = []
        length = len(text)
        start = 0

        while start < length:
            end = start + self.chunk_size
            if end < length:
                end = self._find_boundary(text, start, end)
            else:
                end = length

            span = self._stripped_span(text, start, end)
            if span is not None and len(span.content) >= self.min_length:
                spans.append(span)

            if end >= length:
                break
            start = max(end - self.overlap, start + 1)

        return spans

    def _find_boundary(self, text: str, start: int, end: int) -> int:
        """Move the window end to just after the best marker in its trailing half.

        A marker may start exactly at the window end.
        """
        midpoint = start + self.chunk_size / 2
        for marker in BOUNDARY_MARKERS:
            position = text.rfind(marker, start, end + len(marker))
            if position > midpoint:
                return position + len(marker)
        return end

    @staticmethod
    def _stripped_span(text: str, start: int, end: int) -> TextSpan | None:
        raw = text[start:end]
        content = raw.strip()
        if not content:
            return None
        leading = len(raw) - len(raw.lstrip())
        span_start = start + leading
        return TextSpan(content=content, start=span_start, end=span_start + len(content))


def split_into_chunks(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """Split text into overlapping, boundary-aware chunks."""
    return BoundaryAwareChunker(chunk_size=chunk_size, overlap=overlap).chunk(text)
