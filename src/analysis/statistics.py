"""Word, sentence and readability statistics for a single comment."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from src.analysis.text import mean_length, round_half_up, sentence_matches, words


@dataclass(frozen=True)
class TextStatistics:
    """Basic size and readability figures for one comment."""

    original_word_count: int
    sentence_count: int
    avg_word_length: float
    readability_score: int  # 0..100, higher reads easier

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            "originalWordCount": data["original_word_count"],
            "sentenceCount": data["sentence_count"],
            "avgWordLength": data["avg_word_length"],
            "readabilityScore": data["readability_score"],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextStatistics":
        return cls(
            original_word_count=int(data["originalWordCount"]),
            sentence_count=int(data["sentenceCount"]),
            avg_word_length=float(data["avgWordLength"]),
            readability_score=int(data["readabilityScore"]),
        )


def readability(words_per_sentence: float, avg_word_length: float) -> float:
    """Flesch reading-ease variant with word length standing in for syllables."""
    score = 206.835 - 1.015 * words_per_sentence - 84.6 * (avg_word_length / 5)
    return max(0.0, min(100.0, score))


def calculate_statistics(text: str) -> TextStatistics:
    tokens = words(text)
    word_count = len(tokens)
    sentence_count = len(sentence_matches(text)) or 1
    avg_length = mean_length(tokens)

    return TextStatistics(
        original_word_count=word_count,
        sentence_count=sentence_count,
        avg_word_length=round_half_up(avg_length, 1),
        readability_score=int(
            round_half_up(readability(word_count / sentence_count, avg_length))
        ),
    )
