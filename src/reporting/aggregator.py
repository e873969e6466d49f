"""Batch analysis and corpus-level word statistics.

``analyze_batch`` turns raw comments into :class:`CommentAnalysis` records;
the remaining helpers aggregate a collection of such records into word
frequency and keyword-sentiment tables.
"""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import Executor
from typing import Dict, Iterable, List, Optional, Sequence

from src.analysis.analyzer import analyze_comment
from src.analysis.lexicon import CORPUS_STOP_WORDS
from src.analysis.sentiment import SentimentLabel
from src.analysis.text import alpha_words
from src.reporting.models import (
    SOURCE_USER,
    CommentAnalysis,
    CorpusInsights,
    KeywordSentiment,
    WordFrequency,
)

logger = logging.getLogger(__name__)

# Aggregation over fewer documents is not meaningful.
MIN_CORPUS_SIZE = 2
MIN_CORPUS_WORD_LENGTH = 3


def _corpus_words(text: str) -> List[str]:
    return [
        w for w in alpha_words(text, MIN_CORPUS_WORD_LENGTH) if w not in CORPUS_STOP_WORDS
    ]


def _analyze_one(
    text: str, source: str, api_url: Optional[str]
) -> Optional[CommentAnalysis]:
    try:
        result = analyze_comment(text)
    except Exception as exc:  # noqa: BLE001 – keep going on failures
        logger.warning("Analysis failed for comment %.40r: %s", text, exc)
        return None
    return CommentAnalysis(
        original_text=text, result=result, source=source, api_url=api_url
    )


def analyze_batch(
    texts: Iterable[str],
    *,
    source: str = SOURCE_USER,
    api_url: Optional[str] = None,
    executor: Optional[Executor] = None,
) -> List[CommentAnalysis]:
    """Analyze every comment in *texts*, skipping the ones that fail.

    When *executor* is given the comments are analyzed on it in parallel;
    results keep the input order either way.
    """

    items = list(texts)
    if executor is None:
        analyzed = [_analyze_one(t, source, api_url) for t in items]
    else:
        analyzed = list(
            executor.map(
                _analyze_one,
                items,
                [source] * len(items),
                [api_url] * len(items),
            )
        )

    results = [a for a in analyzed if a is not None]
    if len(results) != len(items):
        logger.info(
            "Batch analysis skipped %d of %d comment(s)",
            len(items) - len(results),
            len(items),
        )
    return results


def analyze_word_frequency(analyses: Sequence[CommentAnalysis]) -> List[WordFrequency]:
    """Return corpus word counts sorted by count, most frequent first."""

    counts: Counter[str] = Counter()
    for analysis in analyses:
        counts.update(_corpus_words(analysis.original_text))

    total = sum(counts.values())
    frequencies = [
        WordFrequency(word=word, count=count, percentage=count / total * 100)
        for word, count in counts.items()
    ]
    return sorted(frequencies, key=lambda f: -f.count)


def _dominant(positive: int, negative: int, neutral: int) -> SentimentLabel:
    # Order matters: neutral wins a three-way tie, positive beats negative.
    dominant, best = SentimentLabel.NEUTRAL, neutral
    if positive > best:
        dominant, best = SentimentLabel.POSITIVE, positive
    if negative > best:
        dominant = SentimentLabel.NEGATIVE
    return dominant


def analyze_keyword_sentiment(
    analyses: Sequence[CommentAnalysis],
) -> List[KeywordSentiment]:
    """Count, per word, how many comments of each label contain it.

    A word repeated inside one comment counts once for that comment. Words
    found in fewer than two comments are dropped.
    """

    buckets: Dict[str, Counter[str]] = {}
    for analysis in analyses:
        label = analysis.sentiment.label.value
        for word in dict.fromkeys(_corpus_words(analysis.original_text)):
            buckets.setdefault(word, Counter())[label] += 1

    keywords = []
    for word, counts in buckets.items():
        positive = counts[SentimentLabel.POSITIVE.value]
        negative = counts[SentimentLabel.NEGATIVE.value]
        neutral = counts[SentimentLabel.NEUTRAL.value]
        if positive + negative + neutral < 2:
            continue
        keywords.append(
            KeywordSentiment(
                word=word,
                positive=positive,
                negative=negative,
                neutral=neutral,
                dominant_sentiment=_dominant(positive, negative, neutral),
            )
        )
    return sorted(keywords, key=lambda k: -k.total_occurrences)


def get_top_keywords_by_sentiment(
    keywords: Sequence[KeywordSentiment],
    sentiment: SentimentLabel | str,
    limit: int = 10,
) -> List[KeywordSentiment]:
    """Return the first *limit* keywords whose dominant sentiment is *sentiment*."""
    label = SentimentLabel(sentiment)
    return [k for k in keywords if k.dominant_sentiment == label][:limit]


def get_most_influential_keywords(
    keywords: Sequence[KeywordSentiment], limit: int = 20
) -> List[KeywordSentiment]:
    """Return keywords ranked by ``|sentiment_score| * total_occurrences``."""
    return sorted(keywords, key=lambda k: -k.influence)[:limit]


def build_corpus_insights(
    analyses: Sequence[CommentAnalysis],
) -> Optional[CorpusInsights]:
    """Aggregate *analyses*, or return ``None`` when there are too few of them."""

    if len(analyses) < MIN_CORPUS_SIZE:
        logger.debug(
            "Skipping corpus aggregation: %d analysis(es) < %d",
            len(analyses),
            MIN_CORPUS_SIZE,
        )
        return None
    return CorpusInsights(
        document_count=len(analyses),
        word_frequencies=analyze_word_frequency(analyses),
        keyword_sentiments=analyze_keyword_sentiment(analyses),
    )
