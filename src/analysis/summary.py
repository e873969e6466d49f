"""Extractive summarization of a single comment."""
from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict

from src.analysis.lexicon import SUMMARY_STOP_WORDS
from src.analysis.text import round_half_up, split_sentences, words

_logger = logging.getLogger(__name__)

# Texts below either limit are returned untouched.
MIN_SENTENCES = 3
MIN_WORDS = 30
SUMMARY_RATIO = 0.4
MIN_SUMMARY_SENTENCES = 2


@dataclass(frozen=True)
class SummaryResult:
    """Summary text plus how much of the original it keeps."""

    text: str
    compression_ratio: int  # percent of original words kept
    word_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "compressionRatio": self.compression_ratio,
            "wordCount": self.word_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SummaryResult":
        return cls(
            text=data["text"],
            compression_ratio=int(data["compressionRatio"]),
            word_count=int(data["wordCount"]),
        )


def summary_length(sentence_count: int) -> int:
    """Return how many sentences a summary of *sentence_count* keeps."""
    return max(MIN_SUMMARY_SENTENCES, math.ceil(sentence_count * SUMMARY_RATIO))


def summarize_text(text: str) -> SummaryResult:
    """Select the most informative sentences of *text*.

    Sentences are scored by the mean corpus frequency of their words, so a
    long sentence is not favoured for its length alone. The chosen sentences
    are joined with single spaces in their original order.
    """

    sentences = split_sentences(text)
    all_words = words(text)

    if len(sentences) < MIN_SENTENCES or len(all_words) < MIN_WORDS:
        return SummaryResult(
            text=text, compression_ratio=100, word_count=len(all_words)
        )

    frequency: Counter[str] = Counter()
    for word in all_words:
        lower = word.lower()
        if lower not in SUMMARY_STOP_WORDS and len(lower) > 3:
            frequency[lower] += 1

    scored = []
    for position, sentence in enumerate(sentences):
        sentence_words = [w.lower() for w in words(sentence)]
        total = sum(frequency.get(w, 0) for w in sentence_words)
        scored.append((total / max(len(sentence_words), 1), position, sentence))

    # Stable sort: equal scores keep their original order.
    ranked = sorted(scored, key=lambda item: -item[0])
    chosen = sorted(ranked[: summary_length(len(sentences))], key=lambda item: item[1])

    summary = " ".join(sentence for _, _, sentence in chosen)
    summary_words = len(words(summary))
    _logger.debug(
        "Summarized %d sentences into %d (%d/%d words)",
        len(sentences),
        len(chosen),
        summary_words,
        len(all_words),
    )
    return SummaryResult(
        text=summary,
        compression_ratio=int(round_half_up(summary_words / len(all_words) * 100)),
        word_count=summary_words,
    )
