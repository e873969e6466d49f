"""Lexicon-based sentiment scoring.

This module provides a single public helper ``score_sentiment`` which counts
positive and negative lexicon hits in a comment and returns a structured
result.

The score is normalised by ``max(hits, tokens * 0.1)`` so that a short comment
with a single sentiment word does not read as strongly as a dense one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from src.analysis.lexicon import NEGATIVE_WORDS, POSITIVE_WORDS
from src.analysis.text import words

_logger = logging.getLogger(__name__)

LABEL_THRESHOLD = 0.1
MAX_CONFIDENCE = 0.95


class SentimentLabel(str, Enum):
    """Enumeration of supported sentiment classes."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class SentimentResult:
    """Structured sentiment analysis output."""

    label: SentimentLabel
    score: float  # range ‑1.0 .. 1.0
    confidence: float = 0.0  # range 0.0 .. 0.95

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label.value,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SentimentResult":
        return cls(
            label=SentimentLabel(data["label"]),
            score=float(data["score"]),
            confidence=float(data.get("confidence", 0.0)),
        )


def label_for_score(score: float) -> SentimentLabel:
    """Map a score onto a label using the ±0.1 dead zone."""
    if score > LABEL_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score < -LABEL_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def score_sentiment(text: str) -> SentimentResult:
    """Classify *text* as positive/neutral/negative from lexicon hits.

    Parameters
    ----------
    text
        The comment to classify. Blank input is rejected by the caller, but
        text without any word tokens still yields a neutral, zero-confidence
        result instead of raising.
    """

    tokens = [t.lower() for t in words(text)]
    positive = sum(1 for t in tokens if t in POSITIVE_WORDS)
    negative = sum(1 for t in tokens if t in NEGATIVE_WORDS)
    hits = positive + negative
    total = len(tokens)

    if hits == 0:
        raw = 0.0
    else:
        raw = (positive - negative) / max(hits, total * 0.1)

    # clamp score for safety
    score = max(-1.0, min(1.0, float(raw)))
    density = hits / total if total else 0.0
    confidence = min(MAX_CONFIDENCE, abs(score) * 0.7 + density * 0.3)

    _logger.debug(
        "Sentiment hits positive=%d negative=%d tokens=%d score=%.3f",
        positive,
        negative,
        total,
        score,
    )
    return SentimentResult(
        label=label_for_score(score), score=score, confidence=confidence
    )
