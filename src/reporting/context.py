"""Context dataclasses for rendering comment analysis reports.

This module defines `ReportContext`, a typed container that holds all
values expected by the plain-text Jinja2 template located in
`src/reporting/templates/report.txt.j2`.

Numbers are formatted here rather than in the template so that the text
layout stays easy to read and the formatting rules are unit-testable.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from src.analysis.sentiment import SentimentLabel, label_for_score
from src.reporting import config
from src.reporting.models import CommentAnalysis

__all__ = [
    "CommentDetail",
    "emoji_bar",
    "ReportContext",
    "build_report_context",
    "sentiment_counts",
]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CommentDetail:
    """Per-comment block of the detailed analysis section."""

    index: int
    original: str
    summary: str
    label: str
    score: str
    confidence: str
    key_phrases: str
    words: int
    sentences: int
    readability: int


@dataclass(slots=True)
class ReportContext:
    """Container with all fields used by the report template."""

    # Header & meta
    generated: str
    source: str

    # Overview
    total: int
    overall_sentiment: str
    avg_score: str
    avg_confidence: str
    emoji_bar: str

    # label -> (count, percentage string)
    breakdown: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    comments: List[CommentDetail] = field(default_factory=list)
    omitted: int = 0

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` (recursively) for Jinja rendering."""
        return asdict(self)

    # Alias for convenience (e.g. template kwargs)
    __call__ = to_dict


def sentiment_counts(analyses: Sequence[CommentAnalysis]) -> Dict[str, int]:
    """Return label→count with every label present."""
    counts = {label.value: 0 for label in SentimentLabel}
    for analysis in analyses:
        counts[analysis.sentiment.label.value] += 1
    return counts


def emoji_bar(counts: dict[str, int], max_emoji: int = 20) -> str:
    """Return a string bar of emojis based on *counts*.

    Positive → 😊, Neutral → 😐, Negative → 🙁.  Limit total length to
    *max_emoji*.
    """

    pos = counts.get("positive", 0)
    neu = counts.get("neutral", 0)
    neg = counts.get("negative", 0)
    total = pos + neu + neg or 1

    scale = max_emoji / total
    pos_e = "😊" * max(1 if pos else 0, round(pos * scale))
    neu_e = "😐" * max(1 if neu else 0, round(neu * scale))
    neg_e = "🙁" * max(1 if neg else 0, round(neg * scale))
    return pos_e + neu_e + neg_e


def _percent(part: float, whole: float) -> str:
    return f"{(part / whole if whole else 0.0) * 100:.1f}%"


def _detail(index: int, analysis: CommentAnalysis) -> CommentDetail:
    result = analysis.result
    return CommentDetail(
        index=index,
        original=analysis.original_text,
        summary=result.summary.text,
        label=result.sentiment.label.value.upper(),
        score=f"{result.sentiment.score:.2f}",
        confidence=_percent(result.sentiment.confidence, 1),
        key_phrases=", ".join(result.key_phrases),
        words=result.statistics.original_word_count,
        sentences=result.statistics.sentence_count,
        readability=result.statistics.readability_score,
    )


def build_report_context(
    analyses: Sequence[CommentAnalysis],
    *,
    api_url: Optional[str] = None,
    generated_at: Optional[datetime.datetime] = None,
    max_comments: int = config.MAX_COMMENTS,
) -> ReportContext:
    """Convert analyzed comments into a :class:`ReportContext`.

    The function is *pure*: passing the same *analyses* and *generated_at*
    always produces the same context.
    """

    total = len(analyses)
    counts = sentiment_counts(analyses)
    avg_score = sum(a.sentiment.score for a in analyses) / (total or 1)
    avg_confidence = sum(a.sentiment.confidence for a in analyses) / (total or 1)

    generated_at = generated_at or datetime.datetime.now(datetime.timezone.utc)
    details = [_detail(i, a) for i, a in enumerate(analyses[:max_comments], start=1)]
    omitted = max(0, total - max_comments)
    if omitted:
        logger.debug("Report truncated to %d of %d comments", max_comments, total)

    return ReportContext(
        generated=generated_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
        source=api_url or "User Input",
        total=total,
        overall_sentiment=label_for_score(avg_score).value.upper(),
        avg_score=f"{avg_score:.2f}",
        avg_confidence=_percent(avg_confidence, 1),
        emoji_bar=emoji_bar(counts, config.MAX_EMOJI_BAR),
        breakdown={
            label: {"count": count, "percentage": _percent(count, total)}
            for label, count in counts.items()
        },
        comments=details,
        omitted=omitted,
    )
