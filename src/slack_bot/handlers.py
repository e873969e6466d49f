import json
import logging
from concurrent.futures import Executor
from typing import Any, Dict, Optional

from slack_bolt import Ack, Respond
from slack_sdk.errors import SlackApiError
from slack_sdk.web import WebClient

from src.analysis.analyzer import analyze_comment
from src.analysis.sentiment import SentimentLabel
from src.comment_fetcher import fetch_comments
from src.exceptions import EmptyInputError, FetchError, NoEligibleCommentsError
from src.history_store import ThreadSafeHistoryStore
from src.reporting.aggregator import (
    MIN_CORPUS_SIZE,
    analyze_batch,
    build_corpus_insights,
)
from src.reporting.models import SOURCE_API, SOURCE_USER, CommentAnalysis
from src.reporting.render import post_report_to_slack
from src.slack_bot.utils import slack_link_target
from src.slack_bot.views import (
    build_analysis_blocks,
    build_batch_overview_blocks,
    build_delete_actions,
    build_history_blocks,
    build_insights_blocks,
)

logger = logging.getLogger(__name__)

HISTORY_PAGE_SIZE = 10


# ------------------------------------------------------------------
# Slash command processing (run on the background executor)
# ------------------------------------------------------------------


def process_analyze_request(
    command: Dict[str, Any],
    respond: Respond,
    logger: logging.Logger,
    history_store: ThreadSafeHistoryStore,
) -> Optional[CommentAnalysis]:
    """Analyze the comment typed after the slash command and reply with a card."""
    text = command.get("text", "")
    try:
        result = analyze_comment(text)
    except EmptyInputError:
        respond(
            "Please type a comment to analyze, e.g. "
            f"`{command.get('command', '/analyze-comment')} The support team was great!`"
        )
        return None

    analysis = CommentAnalysis(original_text=text, result=result, source=SOURCE_USER)
    history_store.add(analysis)
    logger.info(
        "Analyzed comment %s for user '%s': label=%s score=%.2f",
        analysis.id,
        command.get("user_id"),
        result.sentiment.label.value,
        result.sentiment.score,
    )
    respond(
        text=f"Sentiment: {result.sentiment.label.value}",
        blocks=build_analysis_blocks(analysis) + build_delete_actions(analysis.id),
    )
    return analysis


def process_analyze_url_request(
    command: Dict[str, Any],
    client: WebClient,
    respond: Respond,
    logger: logging.Logger,
    history_store: ThreadSafeHistoryStore,
    executor: Optional[Executor] = None,
) -> None:
    """Fetch comments from the URL after the command, analyze and report them."""
    api_url = slack_link_target(command.get("text", ""))
    if not api_url:
        respond(
            f"Please provide an API URL, e.g. `{command.get('command', '/analyze-url')} "
            "https://jsonplaceholder.typicode.com/comments?postId=1`"
        )
        return

    try:
        comments = fetch_comments(api_url)
    except (FetchError, NoEligibleCommentsError) as exc:
        logger.warning("Could not load comments from %s: %s", api_url, exc)
        respond(f"Sorry, I couldn't load comments from {api_url}: {exc}")
        return

    analyses = analyze_batch(
        comments, source=SOURCE_API, api_url=api_url, executor=executor
    )
    if not analyses:
        respond(f"None of the {len(comments)} comment(s) from {api_url} could be analyzed.")
        return

    history_store.add_many(analyses)
    logger.info(
        "Analyzed %d of %d comment(s) from %s", len(analyses), len(comments), api_url
    )
    respond(
        text=f"Analyzed {len(analyses)} comment(s) from {api_url}",
        blocks=build_batch_overview_blocks(analyses, api_url=api_url),
    )

    channel = command.get("channel_id")
    if not channel:
        return
    try:
        post_report_to_slack(
            analyses=analyses, client=client, channel=channel, api_url=api_url
        )
    except SlackApiError as exc:
        logger.warning(
            "Failed to post report to %s: %s", channel, exc.response.get("error")
        )
        respond("The analysis finished but I couldn't post the report in this channel.")


def process_insights_request(
    command: Dict[str, Any],
    respond: Respond,
    logger: logging.Logger,
    history_store: ThreadSafeHistoryStore,
) -> None:
    """Reply with word-frequency and keyword-sentiment tables for the history."""
    arg = command.get("text", "").strip().lower()
    sentiment: Optional[SentimentLabel] = None
    if arg:
        try:
            sentiment = SentimentLabel(arg)
        except ValueError:
            respond("Usage: `/comment-insights [positive|negative|neutral]`")
            return

    insights = build_corpus_insights(history_store.list())
    if insights is None:
        respond(
            f"Insights need at least {MIN_CORPUS_SIZE} analyzed comments; "
            f"I have {history_store.count()}."
        )
        return

    logger.info(
        "Built insights over %d comments (%d words, %d keywords)",
        insights.document_count,
        len(insights.word_frequencies),
        len(insights.keyword_sentiments),
    )
    respond(
        text=f"Insights across {insights.document_count} comments",
        blocks=build_insights_blocks(insights, sentiment=sentiment),
    )


def process_history_request(
    command: Dict[str, Any],
    client: WebClient,
    respond: Respond,
    logger: logging.Logger,
    history_store: ThreadSafeHistoryStore,
) -> None:
    """List, delete from, clear or report on the stored history."""
    parts = command.get("text", "").strip().split()
    action = parts[0].lower() if parts else "list"

    if action == "list":
        entries = history_store.list(limit=HISTORY_PAGE_SIZE)
        respond(
            text=f"{history_store.count()} stored analyses",
            blocks=build_history_blocks(entries, total=history_store.count()),
        )
    elif action == "delete" and len(parts) == 2:
        removed = history_store.remove(parts[1])
        if removed is None:
            respond(f"No analysis with ID `{parts[1]}` found.")
        else:
            logger.info("Deleted analysis %s from history", parts[1])
            respond(f"Deleted analysis `{parts[1]}`.")
    elif action == "clear":
        removed_count = history_store.clear()
        logger.info("Cleared %d analyses from history", removed_count)
        respond(f"Cleared {removed_count} analyses from history.")
    elif action == "report":
        entries = history_store.list()
        if not entries:
            respond("No analyses stored yet.")
            return
        channel = command.get("channel_id")
        if not channel:
            respond("Reports can only be posted from a channel.")
            return
        post_report_to_slack(analyses=entries, client=client, channel=channel)
        logger.info("Posted history report of %d analyses to %s", len(entries), channel)
    else:
        respond("Usage: `/comment-history [delete <id> | clear | report]`")


# ------------------------------------------------------------------
# Interaction handler: "Delete" button click
# ------------------------------------------------------------------


def handle_delete_history_click(  # noqa: WPS211 – acceptable arg count for handler
    ack: Ack,
    body: Dict[str, Any],
    client: WebClient,
    logger: logging.Logger,
    history_store: ThreadSafeHistoryStore,
) -> None:
    """Handle the `Delete` button attached to analysis and history cards."""

    ack()  # acknowledge action early to avoid client timeouts

    try:
        user_id = body["user"]["id"]
        channel_id = body.get("channel", {}).get("id")

        action = body.get("actions", [{}])[0]
        try:
            analysis_id = json.loads(action.get("value", "{}")).get("analysis_id")
        except (TypeError, ValueError, AttributeError):
            analysis_id = None

        if not analysis_id:
            logger.warning("Delete click missing analysis_id payload – body=%s", body)
            return

        removed = history_store.remove(analysis_id)
        text = (
            "Analysis removed from history."
            if removed is not None
            else "That analysis was already removed."
        )
        if channel_id:
            client.chat_postEphemeral(channel=channel_id, user=user_id, text=text)

    except Exception as exc:  # pragma: no cover – catch-all to protect app thread
        logger.error("Error handling delete click: %s", exc, exc_info=True)
