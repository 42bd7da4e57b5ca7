from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)

__all__ = ["TextChunk", "chunk_text", "split_into_sentences", "pack_words"]

DEFAULT_MAX_CHUNK_CHARS = 200
SENTENCE_SPLIT_PATTERN = re.compile(r"(?<=[.!?])\s+")


@dataclass(frozen=True)
class TextChunk:
    index: int
    text: str

    def __len__(self) -> int:
        return len(self.text)


def chunk_text(text: str, max_chars: int = DEFAULT_MAX_CHUNK_CHARS) -> List[TextChunk]:
    """
    Split text into ordered chunks no longer than ``max_chars``.

    Sentences are packed greedily into a running chunk. Sentences longer than the
    limit are broken on whitespace, never inside a word, so a single word longer
    than ``max_chars`` still ends up as its own oversized chunk. Once the running
    chunk reaches the limit it is closed immediately, even if the next sentence
    might have fitted after it.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive.")

    if not text or len(text) <= max_chars:
        return [TextChunk(index=0, text=text)]

    pieces: List[str] = []
    current = ""

    for sentence in split_into_sentences(text):
        if current and len(current) + 1 + len(sentence) > max_chars:
            pieces.append(current)
            current = ""

        if len(sentence) > max_chars:
            word_groups = pack_words(sentence, max_chars)
            pieces.extend(word_groups[:-1])
            tail = word_groups[-1]
            if current and len(current) + 1 + len(tail) > max_chars:
                pieces.append(current)
                current = tail
            else:
                current = _join(current, tail)
        else:
            current = _join(current, sentence)

        if len(current) >= max_chars:
            pieces.append(current)
            current = ""

    if current.strip():
        pieces.append(current.strip())

    logger.debug("Split %d characters into %d chunks (max %d).", len(text), len(pieces), max_chars)
    return [TextChunk(index=i, text=piece) for i, piece in enumerate(pieces)]


def split_into_sentences(text: str) -> List[str]:
    """Split on ``.``, ``!`` or ``?`` followed by whitespace, dropping blank pieces."""
    sentences: List[str] = []
    for part in SENTENCE_SPLIT_PATTERN.split(text or ""):
        part = part.strip()
        if part:
            sentences.append(part)
    return sentences


def pack_words(sentence: str, max_chars: int) -> List[str]:
    """
    Greedily pack whitespace separated words into groups of at most ``max_chars``.

    A word longer than the limit is kept whole in a group of its own.
    """
    groups: List[str] = []
    current = ""
    for word in sentence.split():
        if current and len(current) + 1 + len(word) > max_chars:
            groups.append(current)
            current = word
        else:
            current = _join(current, word)
    if current:
        groups.append(current)
    return groups


def _join(head: str, tail: str) -> str:
    return f"{head} {tail}" if head else tail
