"""Single-comment analysis combining all text analyzers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from src.analysis.keywords import extract_key_phrases
from src.analysis.sentiment import SentimentResult, score_sentiment
from src.analysis.statistics import TextStatistics, calculate_statistics
from src.analysis.summary import SummaryResult, summarize_text
from src.exceptions import EmptyInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Everything derived from one comment."""

    sentiment: SentimentResult
    summary: SummaryResult
    statistics: TextStatistics
    key_phrases: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sentiment": self.sentiment.to_dict(),
            "summary": self.summary.to_dict(),
            "statistics": self.statistics.to_dict(),
            "keyPhrases": list(self.key_phrases),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        return cls(
            sentiment=SentimentResult.from_dict(data["sentiment"]),
            summary=SummaryResult.from_dict(data["summary"]),
            statistics=TextStatistics.from_dict(data["statistics"]),
            key_phrases=tuple(data.get("keyPhrases", ())),
        )


def analyze_comment(text: str) -> AnalysisResult:
    """Run sentiment, summary, statistics and key phrase analysis on *text*.

    Raises
    ------
    EmptyInputError
        If *text* is empty or whitespace-only.
    """

    if not text or not text.strip():
        raise EmptyInputError()

    result = AnalysisResult(
        sentiment=score_sentiment(text),
        summary=summarize_text(text),
        statistics=calculate_statistics(text),
        key_phrases=tuple(extract_key_phrases(text)),
    )
    logger.debug(
        "Analyzed comment: label=%s words=%d",
        result.sentiment.label.value,
        result.statistics.original_word_count,
    )
    return result
