import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from slack_sdk.models.blocks import (
    ActionsBlock,
    ButtonElement,
    ContextBlock,
    DividerBlock,
    HeaderBlock,
    MarkdownTextObject,
    SectionBlock,
)

from src.analysis.sentiment import SentimentLabel
from src.reporting import config
from src.reporting.aggregator import (
    get_most_influential_keywords,
    get_top_keywords_by_sentiment,
)
from src.reporting.context import emoji_bar, sentiment_counts
from src.reporting.models import SOURCE_API, CommentAnalysis, CorpusInsights

logger = logging.getLogger(__name__)

DELETE_ACTION_ID = "delete_history_entry"

_LABEL_EMOJI = {
    SentimentLabel.POSITIVE: "😊",
    SentimentLabel.NEUTRAL: "😐",
    SentimentLabel.NEGATIVE: "🙁",
}


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1].rstrip() + "…"


def _md(text: str) -> Dict[str, str]:
    return {"type": "mrkdwn", "text": text}


def build_analysis_blocks(analysis: CommentAnalysis) -> List[dict]:
    """Return Block Kit blocks describing one analyzed comment.

    The card shows the sentiment with its confidence, the summary, the key
    phrases and the readability statistics.
    """
    result = analysis.result
    sentiment = result.sentiment
    stats = result.statistics
    summary = result.summary

    headline = (
        f"{_LABEL_EMOJI[sentiment.label]} *{sentiment.label.value.capitalize()}* "
        f"(score {sentiment.score:.2f}, confidence {sentiment.confidence * 100:.0f}%)"
    )
    phrases = ", ".join(f"`{p}`" for p in result.key_phrases) or "_none_"
    stats_line = (
        f"Words: {stats.original_word_count} • Sentences: {stats.sentence_count} • "
        f"Avg word length: {stats.avg_word_length} • "
        f"Readability: {stats.readability_score}/100"
    )
    blocks = [
        SectionBlock(text=MarkdownTextObject(text=headline)),
        SectionBlock(
            text=MarkdownTextObject(
                text=(
                    f"*Summary* ({summary.compression_ratio}% of original, "
                    f"{summary.word_count} words)\n>{_truncate(summary.text, 2800)}"
                )
            )
        ),
        SectionBlock(text=MarkdownTextObject(text=f"*Key phrases:* {phrases}")),
        ContextBlock(elements=[MarkdownTextObject(text=stats_line)]),
        ContextBlock(elements=[MarkdownTextObject(text=f"ID: `{analysis.id}`")]),
    ]
    return [block.to_dict() for block in blocks]


def build_batch_overview_blocks(
    analyses: Sequence[CommentAnalysis], *, api_url: Optional[str] = None
) -> List[dict]:
    """Return a short overview card for a batch of analyzed comments."""
    counts = sentiment_counts(analyses)
    total = len(analyses) or 1
    breakdown = " • ".join(
        f"{label.capitalize()}: {count} ({count / total * 100:.1f}%)"
        for label, count in counts.items()
    )
    source = f"<{api_url}>" if api_url else "user input"
    blocks = [
        HeaderBlock(text=f"Analyzed {len(analyses)} comment(s)"),
        SectionBlock(text=MarkdownTextObject(text=f"Source: {source}\n{breakdown}")),
        ContextBlock(
            elements=[
                MarkdownTextObject(text=emoji_bar(counts, config.MAX_EMOJI_BAR) or "—")
            ]
        ),
    ]
    return [block.to_dict() for block in blocks]


def _keyword_line(keyword) -> str:
    return (
        f"`{keyword.word}` ×{keyword.total_occurrences} "
        f"(+{keyword.positive} / ={keyword.neutral} / −{keyword.negative}, "
        f"score {keyword.sentiment_score:+.2f})"
    )


def build_insights_blocks(
    insights: CorpusInsights,
    *,
    sentiment: Optional[SentimentLabel] = None,
    max_words: int = config.MAX_WORDS,
    max_keywords: int = config.MAX_KEYWORDS,
) -> List[Dict[str, Any]]:
    """Return Block Kit blocks with corpus word and keyword statistics.

    When *sentiment* is given only keywords dominated by that label are listed.
    """
    words = insights.word_frequencies[:max_words]
    word_lines = "\n".join(
        f"{i}. `{w.word}` — {w.count} ({w.percentage:.1f}%)"
        for i, w in enumerate(words, start=1)
    )
    blocks: List[Dict[str, Any]] = [
        {
            "type": "header",
            "text": {
                "type": "plain_text",
                "text": f"Insights across {insights.document_count} comments",
            },
        },
        {"type": "section", "text": _md(f"*Top words*\n{word_lines or '_none_'}")},
        DividerBlock().to_dict(),
    ]

    if sentiment is None:
        influential = get_most_influential_keywords(
            insights.keyword_sentiments, max_keywords
        )
        lines = "\n".join(_keyword_line(k) for k in influential)
        blocks.append(
            {"type": "section", "text": _md(f"*Most influential keywords*\n{lines or '_none_'}")}
        )
        labels = list(SentimentLabel)
    else:
        labels = [sentiment]

    for label in labels:
        top = get_top_keywords_by_sentiment(
            insights.keyword_sentiments, label, max_keywords
        )
        lines = "\n".join(_keyword_line(k) for k in top)
        blocks.append(
            {
                "type": "section",
                "text": _md(
                    f"{_LABEL_EMOJI[label]} *{label.value.capitalize()} keywords*\n"
                    f"{lines or '_none_'}"
                ),
            }
        )
    return blocks


def build_history_blocks(
    analyses: Sequence[CommentAnalysis], *, total: Optional[int] = None
) -> List[dict]:
    """Return a list of recent analyses, each with a delete button."""
    total = len(analyses) if total is None else total
    if not analyses:
        return [SectionBlock(text=MarkdownTextObject(text="No analyses stored yet.")).to_dict()]

    blocks: List[Any] = [
        SectionBlock(
            text=MarkdownTextObject(
                text=f"*Analysis history* (showing {len(analyses)} of {total})"
            )
        )
    ]
    for analysis in analyses:
        sentiment = analysis.sentiment
        origin = f"API <{analysis.api_url}>" if analysis.source == SOURCE_API else "user"
        text = (
            f"{_LABEL_EMOJI[sentiment.label]} {_truncate(analysis.original_text, 150)}\n"
            f"_{analysis.timestamp.strftime('%Y-%m-%d %H:%M')} • {origin}_"
        )
        button = ButtonElement(
            text="Delete",
            action_id=DELETE_ACTION_ID,
            value=json.dumps({"analysis_id": analysis.id}),
            style="danger",
        )
        blocks.append(SectionBlock(text=MarkdownTextObject(text=text), accessory=button))
    return [block.to_dict() for block in blocks]


def build_delete_actions(analysis_id: str) -> List[dict]:  # noqa: D401 – simple helper
    """Return a single-button actions block deleting *analysis_id*."""
    button = ButtonElement(
        text="Delete from history",
        action_id=DELETE_ACTION_ID,
        value=json.dumps({"analysis_id": analysis_id}),
    )
    return [ActionsBlock(elements=[button]).to_dict()]
