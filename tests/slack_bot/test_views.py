import json
import unittest

from src.analysis.sentiment import SentimentLabel
from src.reporting.aggregator import analyze_batch, build_corpus_insights
from src.reporting.models import SOURCE_API
from src.slack_bot.views import (
    DELETE_ACTION_ID,
    build_analysis_blocks,
    build_batch_overview_blocks,
    build_delete_actions,
    build_history_blocks,
    build_insights_blocks,
)

COMMENTS = [
    "Support team was great and helpful.",
    "Support was great today, really excellent.",
    "Support line was terrible and slow.",
]
API_URL = "https://api.test/comments"


class TestViews(unittest.TestCase):
    def setUp(self):
        self.analyses = analyze_batch(COMMENTS, source=SOURCE_API, api_url=API_URL)

    def test_analysis_blocks_structure(self):
        analysis = self.analyses[0]
        blocks = build_analysis_blocks(analysis)

        self.assertEqual(
            [b["type"] for b in blocks],
            ["section", "section", "section", "context", "context"],
        )
        self.assertTrue(blocks[0]["text"]["text"].startswith("😊 *Positive*"))
        self.assertIn(analysis.result.summary.text, blocks[1]["text"]["text"])
        for phrase in analysis.result.key_phrases:
            self.assertIn(f"`{phrase}`", blocks[2]["text"]["text"])
        self.assertIn("Readability:", blocks[3]["elements"][0]["text"])
        self.assertEqual(blocks[4]["elements"][0]["text"], f"ID: `{analysis.id}`")

    def test_batch_overview_blocks(self):
        blocks = build_batch_overview_blocks(self.analyses, api_url=API_URL)

        self.assertEqual(blocks[0]["type"], "header")
        self.assertEqual(blocks[0]["text"]["text"], "Analyzed 3 comment(s)")
        body = blocks[1]["text"]["text"]
        self.assertIn(f"Source: <{API_URL}>", body)
        self.assertIn(
            "Positive: 2 (66.7%) • Neutral: 0 (0.0%) • Negative: 1 (33.3%)", body
        )
        self.assertEqual(blocks[2]["type"], "context")

    def test_batch_overview_without_url(self):
        blocks = build_batch_overview_blocks(self.analyses[:1])
        self.assertIn("Source: user input", blocks[1]["text"]["text"])

    def test_insights_blocks_all_labels(self):
        insights = build_corpus_insights(self.analyses)
        blocks = build_insights_blocks(insights)

        self.assertEqual(len(blocks), 7)
        self.assertEqual(blocks[0]["text"]["text"], "Insights across 3 comments")
        top_words = blocks[1]["text"]["text"]
        self.assertTrue(top_words.startswith("*Top words*\n1. `support` — 3"))
        self.assertIn("*Most influential keywords*", blocks[3]["text"]["text"])
        self.assertIn("`great` ×2", blocks[4]["text"]["text"])
        self.assertIn("`support` ×3", blocks[4]["text"]["text"])
        self.assertTrue(blocks[5]["text"]["text"].endswith("_none_"))
        self.assertTrue(blocks[6]["text"]["text"].endswith("_none_"))

    def test_insights_blocks_single_label(self):
        insights = build_corpus_insights(self.analyses)
        blocks = build_insights_blocks(insights, sentiment=SentimentLabel.NEGATIVE)

        self.assertEqual(len(blocks), 4)
        self.assertEqual(
            blocks[3]["text"]["text"], "🙁 *Negative keywords*\n_none_"
        )

    def test_insights_blocks_respects_word_limit(self):
        insights = build_corpus_insights(self.analyses)
        blocks = build_insights_blocks(insights, max_words=2)
        self.assertEqual(blocks[1]["text"]["text"].count("\n"), 2)

    def test_history_blocks_have_delete_buttons(self):
        blocks = build_history_blocks(self.analyses[:2], total=5)

        self.assertEqual(len(blocks), 3)
        self.assertIn("(showing 2 of 5)", blocks[0]["text"]["text"])
        for block, analysis in zip(blocks[1:], self.analyses[:2]):
            accessory = block["accessory"]
            self.assertEqual(accessory["action_id"], DELETE_ACTION_ID)
            self.assertEqual(
                json.loads(accessory["value"]), {"analysis_id": analysis.id}
            )
            self.assertIn(f"API <{API_URL}>", block["text"]["text"])

    def test_history_blocks_empty(self):
        blocks = build_history_blocks([])
        self.assertEqual(blocks[0]["text"]["text"], "No analyses stored yet.")

    def test_delete_actions(self):
        blocks = build_delete_actions("abc-123")
        self.assertEqual(blocks[0]["type"], "actions")
        button = blocks[0]["elements"][0]
        self.assertEqual(button["action_id"], DELETE_ACTION_ID)
        self.assertEqual(json.loads(button["value"]), {"analysis_id": "abc-123"})


if __name__ == "__main__":
    unittest.main()
