"""Unit tests for extract_key_phrases."""
from src.analysis.keywords import MAX_KEY_PHRASES, extract_key_phrases


def test_ranked_by_frequency():
    text = "Battery battery life life life screen"
    assert extract_key_phrases(text) == ["life", "battery", "screen"]


def test_ties_keep_first_occurrence_order():
    assert extract_key_phrases("zebra apple zebra apple mango") == [
        "zebra",
        "apple",
        "mango",
    ]


def test_stop_words_and_short_words_dropped():
    assert extract_key_phrases("this that with from have does the cat ran") == []


def test_alphabetic_runs_only():
    # "abcd1" is glued to a digit, "snake_case" to an underscore
    assert extract_key_phrases("abcd1 snake_case well-known") == ["well", "known"]


def test_limit_and_lowercase():
    words = [
        "Alpha", "Bravo", "Charlie", "Delta", "Echo", "Foxtrot",
        "Golf", "Hotel", "India", "Juliet",
    ]
    phrases = extract_key_phrases(" ".join(words))
    assert len(phrases) == MAX_KEY_PHRASES
    assert phrases[0] == "alpha"
    assert all(p == p.lower() for p in phrases)
    assert len(set(phrases)) == len(phrases)
