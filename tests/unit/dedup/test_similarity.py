"""Tests for feedwatch.dedup.similarity module."""

import pytest

from feedwatch.dedup.similarity import jaccard_similarity, tokenize


class TestTokenize:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert tokenize("Breaking: News, TODAY!!") == {"breaking", "news", "today"}

    def test_drops_punctuation_only_tokens(self) -> None:
        assert tokenize("a -- b") == {"a", "b"}

    def test_keeps_inner_punctuation(self) -> None:
        assert tokenize("U.S. e-mail") == {"u.s", "e-mail"}


class TestJaccardSimilarity:
    def test_identical_after_normalisation(self) -> None:
        assert jaccard_similarity("breaking news today", "breaking news today!!") == 1.0

    def test_disjoint(self) -> None:
        assert jaccard_similarity("a b c", "d e f") == 0.0

    def test_partial_overlap(self) -> None:
        assert jaccard_similarity("a b c", "a b d") == pytest.approx(0.5)

    def test_both_empty(self) -> None:
        assert jaccard_similarity("", "  ") == 0.0
