"""Data structures for the reporting pipeline."""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from src.analysis.analyzer import AnalysisResult
from src.analysis.sentiment import SentimentLabel, SentimentResult

SOURCE_USER = "user"
SOURCE_API = "api"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True, slots=True)
class CommentAnalysis:
    """An analyzed comment together with where and when it came from."""

    original_text: str
    result: AnalysisResult
    source: str = SOURCE_USER
    api_url: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime.datetime = field(default_factory=_utcnow)

    @property
    def sentiment(self) -> SentimentResult:
        return self.result.sentiment

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "originalText": self.original_text,
            "source": self.source,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.api_url:
            data["apiUrl"] = self.api_url
        data.update(self.result.to_dict())
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommentAnalysis":
        """Rebuild a stored entry; raises ``KeyError``/``ValueError`` on bad data."""
        timestamp = datetime.datetime.fromisoformat(data["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=datetime.timezone.utc)
        return cls(
            id=str(data["id"]),
            original_text=data["originalText"],
            source=data.get("source", SOURCE_USER),
            api_url=data.get("apiUrl"),
            timestamp=timestamp,
            result=AnalysisResult.from_dict(data),
        )


@dataclass(frozen=True, slots=True)
class WordFrequency:
    """How often a word occurs across a set of comments."""

    word: str
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"word": self.word, "count": self.count, "percentage": self.percentage}


@dataclass(frozen=True, slots=True)
class KeywordSentiment:
    """Per-label document counts for a word seen in several comments."""

    word: str
    positive: int
    negative: int
    neutral: int
    dominant_sentiment: SentimentLabel

    @property
    def total_occurrences(self) -> int:
        return self.positive + self.negative + self.neutral

    @property
    def sentiment_score(self) -> float:
        """Return (positive - negative) / total, in -1..1."""
        return (self.positive - self.negative) / (self.total_occurrences or 1)

    @property
    def influence(self) -> float:
        return abs(self.sentiment_score) * self.total_occurrences

    @property
    def sentiments(self) -> Dict[str, int]:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "sentiments": self.sentiments,
            "totalOccurrences": self.total_occurrences,
            "dominantSentiment": self.dominant_sentiment.value,
            "sentimentScore": self.sentiment_score,
        }


@dataclass(slots=True)
class CorpusInsights:
    """Corpus-level tables rendered by the insights command."""

    document_count: int
    word_frequencies: list[WordFrequency] = field(default_factory=list)
    keyword_sentiments: list[KeywordSentiment] = field(default_factory=list)
