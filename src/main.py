"""Entry point for the Comment Insights bot.

Run with ``python -m src.main``. The Bolt app, history store and thread pools
are configured on import of ``src.app``; this module only connects them to
Slack over Socket Mode, so tests can import ``src.app`` without opening a
connection.
"""
from __future__ import annotations

import os
import sys
from contextlib import suppress

from slack_bolt.adapter.socket_mode import SocketModeHandler

from src.app import app, history_store, logger, shutdown_executor

_REQUIRED_ENV = ("SLACK_BOT_TOKEN", "SLACK_APP_TOKEN")


def main() -> None:  # pragma: no cover – manual run path
    """Connect to Slack and block until interrupted, then flush and exit."""

    missing = [name for name in _REQUIRED_ENV if not os.getenv(name)]
    if missing:
        logger.error("Missing required environment variable(s): %s", ", ".join(missing))
        sys.exit(1)

    logger.info("Starting with %d stored analyses.", history_store.count())
    handler = SocketModeHandler(app, os.environ["SLACK_APP_TOKEN"])

    try:
        handler.start()  # Blocking call
    except KeyboardInterrupt:  # pragma: no cover
        logger.info("Shutdown requested (KeyboardInterrupt). Exiting…")
    finally:
        with suppress(Exception):
            shutdown_executor()
        logger.info("Goodbye.")


if __name__ == "__main__":  # pragma: no cover
    main()
