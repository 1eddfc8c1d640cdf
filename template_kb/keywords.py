"""
Keyword extraction shared by the loader and the retriever.
"""

import re
from typing import FrozenSet, Iterable, List, Optional

TOKEN_RE = re.compile(r"[a-z0-9]+")

STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "a", "about", "after", "all", "also", "an", "and", "any", "are", "as",
        "at", "be", "been", "before", "being", "but", "by", "can", "could",
        "did", "do", "does", "each", "for", "from", "had", "has", "have",
        "how", "i", "if", "in", "into", "is", "it", "its", "just", "me", "my",
        "no", "not", "of", "on", "one", "only", "or", "other", "our", "out",
        "over", "own", "same", "should", "so", "some", "such", "than", "that",
        "the", "their", "them", "then", "there", "these", "they", "this",
        "those", "through", "to", "too", "under", "up", "us", "very", "was",
        "we", "were", "what", "when", "where", "which", "while", "who", "why",
        "will", "with", "would", "you", "your",
    }
)


def tokenize(text: str, extra_stop_words: Optional[Iterable[str]] = None) -> List[str]:
    """
    Split text into lowercase keyword tokens.

    Punctuation and underscores act as separators, so identifiers such as
    ``test_bug_342`` contribute ``test``, ``bug`` and ``342``.

    :param text: Text to tokenize
    :param extra_stop_words: Additional words to drop besides STOP_WORDS
    :return: Tokens in order of appearance, duplicates preserved
    """
    stop_words = STOP_WORDS
    if extra_stop_words:
        stop_words = stop_words | {w.lower() for w in extra_stop_words}
    return [t for t in TOKEN_RE.findall(text.lower()) if t not in stop_words]


def keyword_set(
    text: str, extra_stop_words: Optional[Iterable[str]] = None
) -> FrozenSet[str]:
    """Distinct keyword tokens of a text."""
    return frozenset(tokenize(text, extra_stop_words))
