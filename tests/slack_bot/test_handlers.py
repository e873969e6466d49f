import json
import logging
import unittest
from unittest.mock import MagicMock, patch

from slack_sdk.errors import SlackApiError

from src.analysis.analyzer import analyze_comment
from src.exceptions import FetchError, NoEligibleCommentsError
from src.history_store import ThreadSafeHistoryStore
from src.reporting.models import SOURCE_API, CommentAnalysis
from src.slack_bot.handlers import (
    handle_delete_history_click,
    process_analyze_request,
    process_analyze_url_request,
    process_history_request,
    process_insights_request,
)

API_URL = "https://api.test/comments"
FETCHED = [
    "The onboarding flow was excellent and quick.",
    "Billing page is broken and support never answers.",
    "Shipping took four days to arrive.",
]


def _store_with(*texts) -> ThreadSafeHistoryStore:
    store = ThreadSafeHistoryStore()
    store.add_many(
        CommentAnalysis(original_text=t, result=analyze_comment(t)) for t in texts
    )
    return store


class TestAnalyzeRequest(unittest.TestCase):
    def setUp(self):
        self.respond = MagicMock()
        self.logger = MagicMock(spec=logging.Logger)
        self.store = ThreadSafeHistoryStore()

    def test_analyze_stores_and_replies(self):
        command = {"text": "The support team was great!", "user_id": "U1"}
        analysis = process_analyze_request(
            command=command, respond=self.respond, logger=self.logger, history_store=self.store
        )

        self.assertIsNotNone(analysis)
        self.assertEqual(self.store.list(), [analysis])
        kwargs = self.respond.call_args.kwargs
        self.assertEqual(kwargs["text"], "Sentiment: positive")
        self.assertEqual(kwargs["blocks"][-1]["type"], "actions")
        self.logger.info.assert_called_once()

    def test_blank_text_replies_with_usage(self):
        command = {"text": "   ", "command": "/analyze-comment"}
        result = process_analyze_request(
            command=command, respond=self.respond, logger=self.logger, history_store=self.store
        )

        self.assertIsNone(result)
        self.assertEqual(self.store.count(), 0)
        self.assertIn("/analyze-comment", self.respond.call_args.args[0])


class TestAnalyzeUrlRequest(unittest.TestCase):
    def setUp(self):
        self.respond = MagicMock()
        self.client = MagicMock()
        self.logger = MagicMock(spec=logging.Logger)
        self.store = ThreadSafeHistoryStore()

    def _run(self, text, channel_id="C1"):
        command = {"text": text, "user_id": "U1", "channel_id": channel_id}
        process_analyze_url_request(
            command=command,
            client=self.client,
            respond=self.respond,
            logger=self.logger,
            history_store=self.store,
        )

    @patch("src.slack_bot.handlers.post_report_to_slack")
    @patch("src.slack_bot.handlers.fetch_comments", return_value=FETCHED)
    def test_success_stores_batch_and_posts_report(self, mock_fetch, mock_post):
        self._run(f"<{API_URL}>")

        mock_fetch.assert_called_once_with(API_URL)
        entries = self.store.list()
        self.assertEqual([e.original_text for e in entries], FETCHED)
        self.assertTrue(all(e.source == SOURCE_API and e.api_url == API_URL for e in entries))
        self.assertEqual(
            self.respond.call_args.kwargs["text"], f"Analyzed 3 comment(s) from {API_URL}"
        )
        mock_post.assert_called_once()
        self.assertEqual(mock_post.call_args.kwargs["channel"], "C1")
        self.assertEqual(mock_post.call_args.kwargs["api_url"], API_URL)

    @patch("src.slack_bot.handlers.post_report_to_slack")
    @patch("src.slack_bot.handlers.fetch_comments", return_value=FETCHED)
    def test_no_channel_skips_report(self, mock_fetch, mock_post):
        self._run(API_URL, channel_id=None)
        mock_post.assert_not_called()
        self.assertEqual(self.store.count(), 3)

    @patch("src.slack_bot.handlers.post_report_to_slack")
    @patch("src.slack_bot.handlers.fetch_comments", return_value=FETCHED)
    def test_labelled_slack_link_uses_url_only(self, mock_fetch, _mock_post):
        self._run(f"<{API_URL}|api.test/comments>")

        mock_fetch.assert_called_once_with(API_URL)
        self.assertEqual(self.store.list()[0].api_url, API_URL)

    @patch("src.slack_bot.handlers.fetch_comments")
    def test_missing_url_replies_with_usage(self, mock_fetch):
        self._run("  ")
        mock_fetch.assert_not_called()
        self.assertIn("Please provide an API URL", self.respond.call_args.args[0])

    @patch(
        "src.slack_bot.handlers.fetch_comments",
        side_effect=FetchError("HTTP error! status: 500", url=API_URL, status_code=500),
    )
    def test_fetch_error_reported(self, _mock_fetch):
        self._run(API_URL)
        self.assertIn("HTTP error! status: 500", self.respond.call_args.args[0])
        self.assertEqual(self.store.count(), 0)

    @patch(
        "src.slack_bot.handlers.fetch_comments",
        side_effect=NoEligibleCommentsError("No valid comments found"),
    )
    def test_no_eligible_comments_reported(self, _mock_fetch):
        self._run(API_URL)
        self.assertIn("No valid comments found", self.respond.call_args.args[0])

    @patch(
        "src.slack_bot.handlers.post_report_to_slack",
        side_effect=SlackApiError(message="fail", response={"error": "not_in_channel"}),
    )
    @patch("src.slack_bot.handlers.fetch_comments", return_value=FETCHED)
    def test_report_post_failure_is_reported(self, _mock_fetch, _mock_post):
        self._run(API_URL)
        self.assertEqual(self.store.count(), 3)
        self.assertIn("couldn't post the report", self.respond.call_args.args[0])


class TestInsightsRequest(unittest.TestCase):
    def setUp(self):
        self.respond = MagicMock()
        self.logger = MagicMock(spec=logging.Logger)

    def _run(self, text, store):
        process_insights_request(
            command={"text": text}, respond=self.respond, logger=self.logger, history_store=store
        )

    def test_requires_two_comments(self):
        self._run("", _store_with(FETCHED[0]))
        self.assertEqual(
            self.respond.call_args.args[0],
            "Insights need at least 2 analyzed comments; I have 1.",
        )

    def test_replies_with_insight_blocks(self):
        self._run("", _store_with(*FETCHED))
        kwargs = self.respond.call_args.kwargs
        self.assertEqual(kwargs["text"], "Insights across 3 comments")
        self.assertEqual(kwargs["blocks"][0]["type"], "header")

    def test_label_filter(self):
        self._run("Negative", _store_with(*FETCHED))
        blocks = self.respond.call_args.kwargs["blocks"]
        self.assertIn("*Negative keywords*", blocks[-1]["text"]["text"])
        self.assertEqual(len(blocks), 4)

    def test_unknown_label(self):
        self._run("angry", _store_with(*FETCHED))
        self.assertIn("Usage:", self.respond.call_args.args[0])


class TestHistoryRequest(unittest.TestCase):
    def setUp(self):
        self.respond = MagicMock()
        self.client = MagicMock()
        self.logger = MagicMock(spec=logging.Logger)
        self.store = _store_with(*FETCHED)

    def _run(self, text, channel_id="C1"):
        process_history_request(
            command={"text": text, "channel_id": channel_id},
            client=self.client,
            respond=self.respond,
            logger=self.logger,
            history_store=self.store,
        )

    def test_list(self):
        self._run("")
        kwargs = self.respond.call_args.kwargs
        self.assertEqual(kwargs["text"], "3 stored analyses")
        self.assertEqual(len(kwargs["blocks"]), 4)

    def test_delete_existing(self):
        target = self.store.list()[1]
        self._run(f"delete {target.id}")
        self.assertIsNone(self.store.get(target.id))
        self.assertEqual(self.respond.call_args.args[0], f"Deleted analysis `{target.id}`.")

    def test_delete_unknown(self):
        self._run("delete nope")
        self.assertEqual(self.store.count(), 3)
        self.assertIn("No analysis with ID `nope`", self.respond.call_args.args[0])

    def test_clear(self):
        self._run("clear")
        self.assertEqual(self.store.count(), 0)
        self.assertEqual(self.respond.call_args.args[0], "Cleared 3 analyses from history.")

    @patch("src.slack_bot.handlers.post_report_to_slack")
    def test_report(self, mock_post):
        self._run("report")
        mock_post.assert_called_once_with(
            analyses=self.store.list(), client=self.client, channel="C1"
        )

    @patch("src.slack_bot.handlers.post_report_to_slack")
    def test_report_empty_history(self, mock_post):
        self.store.clear()
        self._run("report")
        mock_post.assert_not_called()
        self.assertEqual(self.respond.call_args.args[0], "No analyses stored yet.")

    def test_unknown_action(self):
        self._run("delete")
        self.assertIn("Usage:", self.respond.call_args.args[0])


class TestDeleteClick(unittest.TestCase):
    def setUp(self):
        self.ack = MagicMock()
        self.client = MagicMock()
        self.logger = MagicMock(spec=logging.Logger)
        self.store = _store_with(FETCHED[0])
        self.target = self.store.list()[0]

    def _body(self, value):
        return {
            "user": {"id": "U1"},
            "channel": {"id": "C1"},
            "actions": [{"value": value}],
        }

    def _click(self, body):
        handle_delete_history_click(
            ack=self.ack,
            body=body,
            client=self.client,
            logger=self.logger,
            history_store=self.store,
        )

    def test_click_removes_entry(self):
        self._click(self._body(json.dumps({"analysis_id": self.target.id})))

        self.ack.assert_called_once()
        self.assertEqual(self.store.count(), 0)
        self.client.chat_postEphemeral.assert_called_once_with(
            channel="C1", user="U1", text="Analysis removed from history."
        )

    def test_click_on_already_removed_entry(self):
        self.store.clear()
        self._click(self._body(json.dumps({"analysis_id": self.target.id})))
        self.client.chat_postEphemeral.assert_called_once_with(
            channel="C1", user="U1", text="That analysis was already removed."
        )

    def test_click_with_bad_payload(self):
        self._click(self._body("not-json"))

        self.ack.assert_called_once()
        self.assertEqual(self.store.count(), 1)
        self.logger.warning.assert_called_once()
        self.client.chat_postEphemeral.assert_not_called()


if __name__ == "__main__":
    unittest.main()
