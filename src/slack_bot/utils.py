"""Utility helpers for the Slack app."""
from __future__ import annotations

import logging
import os


def positive_int_from_env(name: str, logger: logging.Logger) -> int | None:
    """Return env var *name* as a positive int, or ``None`` if unset/invalid.

    Args:
        name: Environment variable to read.
        logger: Logger instance for warning output.

    Returns:
        The parsed value, or ``None`` when the variable is missing, not an
        integer, or not positive.
    """
    raw_val = os.getenv(name)
    if not raw_val:
        return None
    try:
        parsed = int(raw_val)
    except ValueError:
        logger.warning("Invalid %s value '%s'; must be integer.", name, raw_val)
        return None
    if parsed <= 0:
        logger.warning("Ignoring %s=%s (must be positive int)", name, raw_val)
        return None
    return parsed


def command_usage(command: str, example: str) -> str:  # noqa: D401 – simple helper
    """Return a one-line usage hint for *command*."""
    return f"• `{command} {example}`".rstrip()


def slack_link_target(text: str) -> str:
    """Return the URL of a Slack-formatted link such as ``<url|label>``.

    Plain text is returned stripped and otherwise unchanged.
    """
    target = text.strip().strip("<>")
    return target.split("|", 1)[0].strip()
