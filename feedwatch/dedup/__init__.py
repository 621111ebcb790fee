"""Duplicate detection against stored articles."""

from .checks import ContentSimilarityCheck, DuplicateCheck, TitleSourceCheck, URLCheck
from .resolver import DuplicateResolver, ResolutionResult
from .similarity import jaccard_similarity, tokenize

__all__ = [
    "ContentSimilarityCheck",
    "DuplicateCheck",
    "DuplicateResolver",
    "ResolutionResult",
    "TitleSourceCheck",
    "URLCheck",
    "jaccard_similarity",
    "tokenize",
]
