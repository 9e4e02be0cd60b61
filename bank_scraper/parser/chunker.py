"""Word-bounded chunking of normalized text."""
from __future__ import annotations

from typing import List


def chunk_text(text: str, max_words: int, min_chars: int) -> List[str]:
    """Split *text* into runs of at most *max_words* words.

    Chunks shorter than *min_chars* are dropped. If that leaves nothing,
    the whole text is returned as the only chunk so short documents are
    still emitted.
    """
    if max_words < 1:
        raise ValueError(f"max_words must be >= 1, got {max_words}")
    words = text.split()
    chunks = [
        " ".join(words[start:start + max_words])
        for start in range(0, len(words), max_words)
    ]
    kept = [chunk for chunk in chunks if len(chunk) >= min_chars]
    return kept or [text]


class Chunker:
    def __init__(self, max_words: int = 500, min_chars: int = 50) -> None:
        if max_words < 1:
            raise ValueError(f"max_words must be >= 1, got {max_words}")
        self.max_words = max_words
        self.min_chars = min_chars

    def chunk(self, text: str) -> List[str]:
        return chunk_text(text, self.max_words, self.min_chars)
