"""Frequency-based key phrase extraction for a single comment."""
from __future__ import annotations

from collections import Counter
from typing import List

from src.analysis.lexicon import KEY_PHRASE_STOP_WORDS
from src.analysis.text import alpha_words

MAX_KEY_PHRASES = 8
MIN_KEY_PHRASE_LENGTH = 4


def extract_key_phrases(text: str, *, limit: int = MAX_KEY_PHRASES) -> List[str]:
    """Return up to *limit* salient words from *text*, most frequent first.

    Words tied on frequency keep the order in which they first appear.
    """

    # Counter preserves insertion order and sorted() is stable, so ties
    # resolve by first occurrence.
    counts = Counter(
        word
        for word in alpha_words(text, MIN_KEY_PHRASE_LENGTH)
        if word not in KEY_PHRASE_STOP_WORDS
    )
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [word for word, _ in ranked[:limit]]
