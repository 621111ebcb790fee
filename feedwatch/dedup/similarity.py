"""Title similarity for fuzzy duplicate detection."""

import string
from typing import Set


def tokenize(text: str) -> Set[str]:
    """
    Split text into a set of lowercase word tokens.

    Tokens are separated by whitespace; leading and trailing punctuation is
    stripped from each token and empty tokens are dropped, so "today!!" and
    "today" are the same token.
    """
    tokens = set()
    for word in text.lower().split():
        word = word.strip(string.punctuation)
        if word:
            tokens.add(word)
    return tokens


def jaccard_similarity(text1: str, text2: str) -> float:
    """Jaccard index of the token sets of two strings (0.0 when both are empty)."""
    words1 = tokenize(text1)
    words2 = tokenize(text2)
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)
