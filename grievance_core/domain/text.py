# SPDX-License-Identifier: Apache-2.0

"""
Text normalization shared by the sentiment, priority and duplicate engines.

Tokens are lowercase ASCII words: every character outside ``[a-z\\s]`` becomes
a space after lower-casing, and the result is split on runs of whitespace.
"""

import math
import re
from collections import Counter
from typing import Any, Callable, Dict, Iterable, Iterator, Optional


STOP_WORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "her", "was", "one",
    "our", "had", "has", "his", "him", "its", "may", "now", "new", "own", "see", "two",
    "who", "did", "get", "let", "put", "too", "use", "way", "say", "she", "how", "any",
    "from", "they", "this", "that", "with", "have", "will", "your", "said", "been",
    "when", "more", "than", "then", "into", "also", "what", "about", "some", "would",
    "there", "their", "were", "which", "them", "other", "these", "those", "very",
    "just", "over", "such", "here", "well", "even", "only", "much", "many", "each",
    "most", "made", "both", "time", "come", "came", "same", "last", "long", "back",
    "down", "after", "before", "through", "during", "under", "again", "while",
    "where", "should", "could", "might",
})

MIN_TOKEN_LENGTH = 3

_NON_ALPHA = re.compile(r"[^a-z\s]")
_WORD = re.compile(r"\S+")


def normalize(text: Any) -> str:
    """
    Lower-case ``text`` and blank out everything that is not a letter or whitespace.

    Args:
        text: Raw input; anything that is not a string normalizes to ""

    Returns:
        Normalized string
    """
    if not isinstance(text, str):
        return ""
    return _NON_ALPHA.sub(" ", text.lower())


class TokenSequence:
    """
    Restartable, lazily evaluated sequence of word tokens from one text.

    Iterating twice yields the same tokens; nothing is cached between passes.
    """

    __slots__ = ("_normalized", "_keep")

    def __init__(self, normalized: str, keep: Optional[Callable[[str], bool]] = None):
        self._normalized = normalized
        self._keep = keep

    def __iter__(self) -> Iterator[str]:
        for match in _WORD.finditer(self._normalized):
            token = match.group()
            if self._keep is None or self._keep(token):
                yield token

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return next(iter(self), None) is not None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TokenSequence):
            return list(self) == list(other)
        if isinstance(other, (list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"TokenSequence({list(self)!r})"


def _is_content_word(token: str) -> bool:
    return len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS


def tokenize(text: Any) -> TokenSequence:
    """Split ``text`` into lowercase word tokens."""
    return TokenSequence(normalize(text))


def preprocess(text: Any) -> TokenSequence:
    """Tokenize ``text`` and drop stop words and tokens shorter than three letters."""
    return TokenSequence(normalize(text), _is_content_word)


def build_tf_vector(tokens: Iterable[str]) -> Dict[str, float]:
    """
    Build an L2-normalized term-frequency vector.

    Tokens shorter than three characters are ignored. The Euclidean norm of
    the returned weights is 1, or the mapping is empty when no token qualified.

    Args:
        tokens: Word tokens, usually from ``preprocess``

    Returns:
        Mapping of term to normalized weight
    """
    counts = Counter(token for token in tokens if len(token) >= MIN_TOKEN_LENGTH)
    if not counts:
        return {}

    norm = math.sqrt(sum(count * count for count in counts.values()))
    if norm == 0:
        return {}

    return {term: count / norm for term, count in counts.items()}


def cosine_similarity(first: Dict[str, float], second: Dict[str, float]) -> float:
    """
    Cosine similarity of two vectors built by ``build_tf_vector``.

    Both inputs are already unit length, so the dot product is the cosine.
    """
    small, big = (first, second) if len(first) <= len(second) else (second, first)

    dot = 0.0
    for term, weight in small.items():
        other = big.get(term)
        if other:
            dot += weight * other
    return dot
