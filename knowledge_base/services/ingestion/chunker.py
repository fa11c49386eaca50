"""Character-window text chunking with sentence-boundary snapping.

Splits text into overlapping windows of ``chunk_size`` characters.  When a
window ends inside the text, its end is moved to the first sentence
terminator (``.``, ``!`` or ``?`` followed by whitespace) found within
±100 characters of the proposed boundary, so chunks rarely stop
mid-sentence.  Consecutive chunks share up to ``chunk_overlap`` characters.

Two rules keep the loop well-behaved on any input:

1. Whitespace-only windows are dropped without consuming a chunk index, so
   emitted indices are always ``0..n-1``.
2. The next window starts at ``end - overlap`` only if that moves forward;
   otherwise it starts at ``end``.  Chunking therefore terminates even
   when ``overlap >= chunk_size`` or the overlap exceeds the text length.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_CHUNK_SIZE = 2000
DEFAULT_CHUNK_OVERLAP = 200

# Half-width of the window searched for a sentence terminator.
_SNAP_RADIUS = 100
_SENTENCE_END = re.compile(r"[.!?]\s")


@dataclass(frozen=True)
class TextChunk:
    """One emitted chunk: trimmed text plus the raw span it was cut from."""

    text: str
    index: int
    start_char: int
    end_char: int


class TextChunker:
    """Splits text into overlapping, sentence-aware character windows.

    Parameters
    ----------
    chunk_size:
        Proposed window length in characters (default 2000).
    chunk_overlap:
        Characters shared by consecutive windows (default 200).
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    ) -> None:
        if chunk_size <= 0:
            msg = f"chunk_size must be positive, got {chunk_size}"
            raise ValueError(msg)
        if chunk_overlap < 0:
            msg = f"chunk_overlap must not be negative, got {chunk_overlap}"
            raise ValueError(msg)
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    def chunk(self, text: str) -> list[TextChunk]:
        """Split *text* into :class:`TextChunk` objects.

        Returns
        -------
        list[TextChunk]
            Chunks in text order.  Empty or whitespace-only input returns
            an empty list.
        """
        chunks: list[TextChunk] = []
        length = len(text)
        start = 0

        while start < length:
            end = min(start + self._chunk_size, length)
            if end < length:
                end = self._snap_to_sentence(text, start, end)

            chunk_text = text[start:end].strip()
            if chunk_text:
                chunks.append(
                    TextChunk(text=chunk_text, index=len(chunks), start_char=start, end_char=end)
                )

            next_start = end - self._chunk_overlap
            start = next_start if next_start > start else end

        return chunks

    @staticmethod
    def _snap_to_sentence(text: str, start: int, end: int) -> int:
        """Return *end* moved to just after the first nearby sentence terminator."""
        search_start = max(end - _SNAP_RADIUS, start)
        search_end = min(end + _SNAP_RADIUS, len(text))
        match = _SENTENCE_END.search(text, search_start, search_end)
        if match is None:
            return end
        return match.start() + 2
