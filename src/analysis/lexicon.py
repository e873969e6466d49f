"""Static word lists used by the analyzers.

All sets are immutable and shared read-only across threads.
"""
from __future__ import annotations

POSITIVE_WORDS: frozenset[str] = frozenset(
    {
        "good", "great", "excellent", "amazing", "wonderful", "fantastic",
        "love", "best", "perfect", "beautiful", "awesome", "brilliant",
        "outstanding", "superb", "nice", "happy", "joy", "pleased", "delighted",
        "satisfied", "impressive", "remarkable", "exceptional", "fabulous",
        "terrific", "magnificent", "marvelous", "splendid", "recommend",
        "helpful", "quality", "enjoyed", "thank", "thanks", "appreciate",
    }
)

NEGATIVE_WORDS: frozenset[str] = frozenset(
    {
        "bad", "terrible", "horrible", "awful", "poor", "worst", "hate",
        "disappointing", "sad", "angry", "upset", "frustrated", "annoyed",
        "inferior", "inadequate", "unsatisfactory", "deficient", "lacking",
        "subpar", "mediocre", "dreadful", "atrocious", "abysmal", "pathetic",
        "useless", "worthless", "waste", "broken", "failed", "issue", "problem",
        "difficult", "never", "unfortunately",
    }
)

# Smallest list: filler words dropped when weighting sentences for a summary.
SUMMARY_STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has",
        "he", "in", "is", "it", "its", "of", "on", "that", "the", "to", "was",
        "will", "with",
    }
)

KEY_PHRASE_STOP_WORDS: frozenset[str] = SUMMARY_STOP_WORDS | frozenset(
    {
        "i", "you", "we", "they", "this", "but", "or", "not", "have", "had",
        "do", "does",
    }
)

CORPUS_STOP_WORDS: frozenset[str] = KEY_PHRASE_STOP_WORDS | frozenset(
    {
        "been", "being", "were", "can", "could", "would", "should", "may",
        "might", "must", "his", "her", "their", "our", "your", "my", "me",
        "him", "them", "us", "she", "who", "which", "what", "where", "when",
        "why", "how", "all", "each", "every", "some", "any", "few", "more",
        "most", "other", "such", "than", "too", "very", "just", "about",
        "into", "through", "during", "before", "after", "above", "below", "up",
        "down", "out", "off", "over", "under", "again", "further", "then",
        "once",
    }
)
