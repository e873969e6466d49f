"""Tokenizers and sentence splitting shared by the analyzers."""
from __future__ import annotations

import math
import re
from typing import Iterable, List

# ASCII word characters only; "café" splits into "caf".
_WORD_RE = re.compile(r"\b\w+\b", re.ASCII)
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


def words(text: str) -> List[str]:
    """Return word tokens (runs of letters, digits or underscores) in *text*."""
    return _WORD_RE.findall(text)


def alpha_words(text: str, min_length: int) -> List[str]:
    """Return lowercase alphabetic tokens of at least *min_length* letters.

    A run glued to digits or underscores (``abc1``) is not a token.
    """
    pattern = re.compile(r"\b[a-z]{%d,}\b" % min_length, re.ASCII)
    return pattern.findall(text.lower())


def sentence_matches(text: str) -> List[str]:
    """Return the terminated sentences of *text* (possibly none)."""
    return [match.strip() for match in _SENTENCE_RE.findall(text)]


def split_sentences(text: str) -> List[str]:
    """Return sentences of *text*; unterminated text is a single sentence."""
    return sentence_matches(text) or [text]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like JavaScript's ``Math.round`` (halves go towards +inf)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def mean_length(tokens: Iterable[str]) -> float:
    tokens = list(tokens)
    return sum(len(t) for t in tokens) / (len(tokens) or 1)
