"""Fetch comments from a third-party JSON API and flatten them into strings.

Accepted payload shapes:

* an array of strings;
* an array of objects carrying the comment under one of ``TEXT_FIELDS``
  (other objects are kept as their compact JSON serialization);
* an object wrapping such an array under ``comments`` or ``data``, whose
  objects are searched in ``WRAPPED_TEXT_FIELDS`` order instead.

Candidates of ``MIN_COMMENT_LENGTH`` characters or fewer are discarded.
"""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Sequence

import httpx

from src.exceptions import FetchError, NoEligibleCommentsError
from src.slack_bot.utils import positive_int_from_env

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("body", "comment", "text", "content", "message")
WRAPPED_TEXT_FIELDS = ("body", "text", "comment", "content", "message")
WRAPPER_FIELDS = ("comments", "data")

MIN_COMMENT_LENGTH: int = positive_int_from_env("MIN_COMMENT_LENGTH", logger) or 10
FETCH_TIMEOUT_SECONDS: float = float(
    positive_int_from_env("FETCH_TIMEOUT_SECONDS", logger) or 10
)


def _text_field(item: dict, fields: Sequence[str]) -> Optional[str]:
    for name in fields:
        value = item.get(name)
        if value:
            return value if isinstance(value, str) else None
    return None


def _serialize(item: Any) -> str:
    # compact and unescaped, so the length filter sees what a JS client would
    return json.dumps(item, separators=(",", ":"), ensure_ascii=False)


def _from_array_item(item: Any) -> Optional[str]:
    if isinstance(item, str):
        return item
    if isinstance(item, dict) and any(item.get(name) for name in TEXT_FIELDS):
        return _text_field(item, TEXT_FIELDS)
    return _serialize(item)


def _from_wrapped_item(item: Any) -> Optional[str]:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        return _text_field(item, WRAPPED_TEXT_FIELDS)
    return None


def _eligible(candidates: List[Optional[str]]) -> List[str]:
    return [c for c in candidates if c and len(c) > MIN_COMMENT_LENGTH]


def normalize_comments(payload: Any) -> List[str]:
    """Return the usable comment strings found in a decoded JSON *payload*.

    Raises
    ------
    NoEligibleCommentsError
        If no candidate survives shape matching and length filtering.
    """

    comments: List[str] = []
    if isinstance(payload, list):
        comments = _eligible([_from_array_item(item) for item in payload])
    elif isinstance(payload, dict):
        for wrapper in WRAPPER_FIELDS:
            items = payload.get(wrapper)
            if isinstance(items, list):
                comments = _eligible([_from_wrapped_item(item) for item in items])
                break

    if not comments:
        raise NoEligibleCommentsError(
            "No valid comments found in the API response. Expected an array of "
            "comments or objects with text fields."
        )
    return comments


def fetch_comments(
    url: str,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = FETCH_TIMEOUT_SECONDS,
) -> List[str]:
    """GET *url* and return the comments found in its JSON body.

    Raises
    ------
    FetchError
        On transport failures, non-2xx responses or a body that is not JSON.
    NoEligibleCommentsError
        If the body holds no usable comments.
    """

    if not url or not url.strip():
        raise FetchError("Please enter an API URL", url=url)
    url = url.strip()

    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        response = http.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Fetching comments from %s failed: %s", url, exc)
        raise FetchError(f"Failed to fetch comments: {exc}", url=url) from exc
    finally:
        if owns_client:
            http.close()

    if not response.is_success:
        logger.warning("Comment API %s answered HTTP %d", url, response.status_code)
        raise FetchError(
            f"HTTP error! status: {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise FetchError("Response body is not valid JSON", url=url) from exc

    comments = normalize_comments(payload)
    logger.info("Fetched %d comment(s) from %s", len(comments), url)
    return comments
