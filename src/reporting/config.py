"""Configuration constants for the reporting pipeline."""
from __future__ import annotations

import os

# Maximum number of emojis displayed in the sentiment bar
MAX_EMOJI_BAR: int = int(os.getenv("REPORT_MAX_EMOJI_BAR", "20"))

# Maximum comments included in the detailed section of a report
MAX_COMMENTS: int = int(os.getenv("REPORT_MAX_COMMENTS", "50"))

# Maximum keywords listed per insights section
MAX_KEYWORDS: int = int(os.getenv("REPORT_MAX_KEYWORDS", "10"))

# Maximum entries in the word-frequency table
MAX_WORDS: int = int(os.getenv("REPORT_MAX_WORDS", "15"))

# Reports at or above this length are uploaded as a file instead of a message
INLINE_LIMIT: int = int(os.getenv("REPORT_INLINE_LIMIT", "2800"))
