"""Fuzzy matching bonus for typo-tolerant property search.

A corpus word counts as a fuzzy match for a query term when it is at most
one character shorter than the term and contains the term with its last
character dropped.

Examples:
    "garden" matches "garde", "gardens" and "gardener"
    "pool" matches "poo", "pools" and "spool"
"""

from __future__ import annotations

from collections.abc import Sequence


def split_words(text: str) -> list[str]:
    """Split a corpus on single spaces.

    Consecutive spaces yield empty words, which still count for one-letter
    terms. Scores depend on this, so do not switch to ``str.split()``.
    """
    return text.split(" ")


def count_fuzzy_matches(term: str, words: Sequence[str]) -> int:
    """Count words that fuzzily match ``term``.

    Args:
        term: Lowercase query term.
        words: Lowercase corpus words (see ``split_words``).

    Returns:
        Number of words with ``len(word) >= len(term) - 1`` that contain
        ``term[:-1]``.

    Examples:
        >>> count_fuzzy_matches("pool", ["pool", "pools", "spa"])
        2
        >>> count_fuzzy_matches("loft", [])
        0
    """
    if not term:
        return 0

    stem = term[:-1]
    min_length = len(term) - 1
    return sum(1 for word in words if len(word) >= min_length and stem in word)
