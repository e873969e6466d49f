"""Render comment analysis reports using Jinja2 templates."""
from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from src.reporting import config
from src.reporting.context import build_report_context
from src.reporting.models import CommentAnalysis

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Plain-text template: HTML escaping would mangle apostrophes in comments.
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def render_report(
    analyses: Sequence[CommentAnalysis],
    *,
    api_url: Optional[str] = None,
    generated_at: Optional[datetime.datetime] = None,
) -> str:
    """Render a plain-text report for *analyses*."""

    context = build_report_context(analyses, api_url=api_url, generated_at=generated_at)

    template = _env.get_template("report.txt.j2")
    return template.render(**context.to_dict())


def report_filename(generated_at: datetime.datetime) -> str:
    return f"comment-analysis-report-{int(generated_at.timestamp() * 1000)}.txt"


def post_report_to_slack(
    *,
    analyses: Sequence[CommentAnalysis],
    client,
    channel: str,
    api_url: Optional[str] = None,
):
    """Send the report for *analyses* to Slack *channel* using *client* (WebClient)."""

    # ------------------------------------------------------------------
    # 1. Post parent message
    # ------------------------------------------------------------------

    source = api_url or "user input"
    parent_resp = client.chat_postMessage(
        channel=channel,
        text=f"*Comment Analysis Report* ({len(analyses)} comment(s) from {source})",
    )

    parent_ts = parent_resp["ts"]
    generated_at = datetime.datetime.now(datetime.timezone.utc)
    report_text = render_report(analyses, api_url=api_url, generated_at=generated_at)
    report_len = len(report_text)
    logger.debug(
        "Report generated for channel=%s comments=%d len=%d",
        channel,
        len(analyses),
        report_len,
    )

    # ------------------------------------------------------------------
    # 2. Post threaded report (message or file)
    # ------------------------------------------------------------------

    if report_len < config.INLINE_LIMIT:
        logger.debug(
            "Posting report as chat message (len=%d < %d)", report_len, config.INLINE_LIMIT
        )
        client.chat_postMessage(
            channel=channel,
            text=f"```{report_text}```",
            thread_ts=parent_ts,
        )
    else:
        logger.debug(
            "Uploading report as file (len=%d >= %d) via files_upload_v2",
            report_len,
            config.INLINE_LIMIT,
        )
        client.files_upload_v2(
            channel=channel,
            title="Comment Analysis Report",
            content=report_text,
            filename=report_filename(generated_at),
            thread_ts=parent_ts,
        )
