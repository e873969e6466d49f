import atexit
import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict

from dotenv import load_dotenv
from slack_bolt import Ack, App, Respond
from slack_sdk import WebClient

from src.history_store import ThreadSafeHistoryStore
from src.slack_bot.handlers import (
    handle_delete_history_click,
    process_analyze_request,
    process_analyze_url_request,
    process_history_request,
    process_insights_request,
)
from src.slack_bot.utils import command_usage, positive_int_from_env
from src.slack_bot.views import DELETE_ACTION_ID

# Load environment variables from .env file
load_dotenv()

ANALYZE_COMMAND = os.getenv("ANALYZE_COMMAND", "/analyze-comment")
ANALYZE_URL_COMMAND = os.getenv("ANALYZE_URL_COMMAND", "/analyze-url")
INSIGHTS_COMMAND = os.getenv("INSIGHTS_COMMAND", "/comment-insights")
HISTORY_COMMAND = os.getenv("HISTORY_COMMAND", "/comment-history")

# Set up logging
logging_level = os.environ.get("SLACK_LOG_LEVEL", "INFO")
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging_level
)
logger = logging.getLogger(__name__)

# Determine if token verification should be disabled (useful for CI/test mode)
_token_verification_enabled_env = os.getenv(
    "SLACK_BOLT_TOKEN_VERIFICATION_ENABLED", "true"
).lower()
# Treat any value other than explicit "false" (case-insensitive) as truthy
_token_verification_enabled = _token_verification_enabled_env != "false"

app = App(
    token=os.environ.get("SLACK_BOT_TOKEN"),
    process_before_response=True,
    token_verification_enabled=_token_verification_enabled,
)

# Empty HISTORY_PATH keeps the history in memory only
history_store = ThreadSafeHistoryStore(
    path=os.getenv("HISTORY_PATH", "comment_history.json") or None,
    max_entries=positive_int_from_env("MAX_HISTORY_ENTRIES", logger),
)
history_store.load()

# Initialize a single thread pool for command workers
executor = ThreadPoolExecutor(max_workers=10)

# Separate pool for per-comment batch analysis so workers never wait on their own pool
batch_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="batch")


def shutdown_executor():
    """Gracefully shut down the thread pools and flush the history."""
    logger.info("Shutting down thread pool executors...")
    executor.shutdown(wait=True)
    batch_executor.shutdown(wait=True)
    history_store.save()
    logger.info("Thread pool executors shut down gracefully.")


# Register the shutdown function to be called on exit
atexit.register(shutdown_executor)


# Log all incoming messages to help with debugging
@app.middleware
def log_request(logger, body, next):
    logger.debug(f"Received event: {body}")
    return next()


def _help_text() -> str:
    """Return a rich help message describing bot purpose and usage."""

    return (
        "*Comment Insights Bot – Sentiment, Summaries & Keywords*\n\n"
        "Paste a comment or point me at a JSON API of comments and I'll score the "
        "sentiment, summarize it, pull out key phrases and track word statistics "
        "across everything analyzed so far.\n\n"
        "*Core commands*\n"
        + "\n".join(
            [
                command_usage(ANALYZE_COMMAND, "<comment text>")
                + " — analyze a single comment.",
                command_usage(ANALYZE_URL_COMMAND, "<api url>")
                + " — fetch comments from a JSON API, analyze them and post a report.",
                command_usage(INSIGHTS_COMMAND, "[positive|negative|neutral]")
                + " — word frequency and keyword sentiment across the history.",
                command_usage(HISTORY_COMMAND, "[delete <id> | clear | report]")
                + " — list, prune or report on stored analyses.",
            ]
        )
        + "\n\n*Example:*\n"
        f"• `{ANALYZE_URL_COMMAND} https://jsonplaceholder.typicode.com/comments?postId=1`\n"
    )


@app.event("app_mention")
def handle_app_mention(event, say, logger: logging.Logger):
    """Respond to `@bot help`; other mentions are ignored."""
    text = event.get("text", "").lower()
    if "help" in text:
        say(_help_text())
    else:
        logger.debug("Ignoring mention without help: %s", text)


# ------------------------------------------------------------------
# Thread helper utilities
# ------------------------------------------------------------------


def _log_future_exception(fut: Future) -> None:  # noqa: WPS430 – small util
    """Logs any exception raised by a completed *Future*."""
    exc = fut.exception()
    if exc is not None:
        logger.exception("Background task raised an exception: %s", exc, exc_info=exc)


def submit_background(func, /, *args, **kwargs) -> Future:  # noqa: WPS110
    """Submit *func* to the shared thread pool with automatic error logging."""

    fut = executor.submit(func, *args, **kwargs)
    fut.add_done_callback(_log_future_exception)
    return fut


def _run_safely(func, *, respond: Respond, logger: logging.Logger, **kwargs) -> None:
    """Run a command worker, turning unexpected errors into a user-visible reply."""
    try:
        func(respond=respond, logger=logger, **kwargs)
    except Exception as e:
        logger.error(
            f"Error processing {func.__name__} request: {e}",
            exc_info=True,
        )
        respond(
            "Sorry, an unexpected error occurred while processing your request. Please try again."
        )


def _submit_command(func, command: Dict[str, Any], respond: Respond, **kwargs) -> None:
    try:
        submit_background(
            _run_safely,
            func,
            command=command,
            respond=respond,
            **kwargs,
        )
        logger.info(
            f"Submitted {command.get('command', func.__name__)} request for user "
            f"'{command.get('user_id')}' to thread pool."
        )
    except Exception as e:
        logger.error(
            f"Error submitting {func.__name__} for user '{command.get('user_id')}' to thread pool: {e}",
            exc_info=True,
        )
        respond("Sorry, there was an issue submitting your request. Please try again.")


@app.command(ANALYZE_COMMAND)
def handle_analyze_command(
    ack: Ack, command: Dict[str, Any], logger: logging.Logger, respond: Respond
):
    """Handles the analyze slash command for a single comment."""
    ack()
    _submit_command(
        process_analyze_request,
        command,
        respond,
        logger=logger,
        history_store=history_store,
    )


@app.command(ANALYZE_URL_COMMAND)
def handle_analyze_url_command(
    ack: Ack,
    command: Dict[str, Any],
    client: WebClient,
    logger: logging.Logger,
    respond: Respond,
):
    """Handles the analyze-url slash command (fetch, batch-analyze, report)."""
    ack()
    _submit_command(
        process_analyze_url_request,
        command,
        respond,
        client=client,
        logger=logger,
        history_store=history_store,
        executor=batch_executor,
    )


@app.command(INSIGHTS_COMMAND)
def handle_insights_command(
    ack: Ack, command: Dict[str, Any], logger: logging.Logger, respond: Respond
):
    """Handles the insights slash command."""
    ack()
    _submit_command(
        process_insights_request,
        command,
        respond,
        logger=logger,
        history_store=history_store,
    )


@app.command(HISTORY_COMMAND)
def handle_history_command(
    ack: Ack,
    command: Dict[str, Any],
    client: WebClient,
    logger: logging.Logger,
    respond: Respond,
):
    """Handles the history slash command."""
    ack()
    _submit_command(
        process_history_request,
        command,
        respond,
        client=client,
        logger=logger,
        history_store=history_store,
    )


# Error handler
@app.error
def custom_error_handler(error, body, logger):
    logger.exception(f"Error handling request: {error}")
    logger.debug(f"Request body: {body}")


# Register action handler for "Delete" buttons
@app.action(DELETE_ACTION_ID)
def delete_button_click_wrapper(
    ack, body, client, logger
):  # noqa: WPS110 – slack signature
    handle_delete_history_click(
        ack=ack,
        body=body,
        client=client,
        logger=logger,
        history_store=history_store,
    )


# NOTE: Runtime startup lives in src/main.py to keep this module import-safe and testable.
