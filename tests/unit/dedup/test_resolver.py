"""Tests for feedwatch.dedup.resolver and checks modules."""

from unittest.mock import Mock, call

from feedwatch.db import SQLiteArticleStore
from feedwatch.db.base import ArticleStore
from feedwatch.dedup.checks import ContentSimilarityCheck
from feedwatch.dedup.resolver import DuplicateResolver
from feedwatch.errors import StorageError
from feedwatch.models import Article

LONG_BODY = (
    "Rescue teams worked through the night as flood waters kept rising across the "
    "northern province, officials said on Tuesday morning after heavy rain."
)


def _store(by_url=None, query_results=None) -> Mock:
    store = Mock(spec=ArticleStore)
    store.find_by_url.return_value = by_url
    store.query.return_value = query_results or []
    return store


def _article(title: str, source: str = "BBC News", url: str = "https://example.com/stored") -> Article:
    return Article(id=1, title=title, canonical_url=url, source_name=source, category="international")


class TestDuplicateResolver:
    def test_url_match_is_duplicate(self, make_item) -> None:
        item = make_item("Storm", url="https://example.com/storm")
        store = _store(by_url=_article("Something else", url="https://example.com/storm"))

        result = DuplicateResolver(store).resolve([item])

        assert result.new == []
        assert result.duplicates == 1
        assert result.matched_by == {"url": 1}
        store.query.assert_not_called()

    def test_same_title_and_source_is_duplicate(self, make_item) -> None:
        item = make_item("Storm Hits Coast", url="https://example.com/new-url")
        store = _store(query_results=[_article("storm hits coast")])

        result = DuplicateResolver(store).resolve([item])

        assert result.duplicates == 1
        assert result.matched_by == {"title": 1}

    def test_same_title_other_source_is_new(self, make_item) -> None:
        item = make_item("Storm Hits Coast", source="Al Jazeera")
        store = _store(query_results=[_article("Storm Hits Coast", source="BBC News")])

        result = DuplicateResolver(store).resolve([item])

        assert result.new == [item]
        assert result.duplicates == 0

    def test_similar_title_with_matching_body_is_duplicate(self, make_item) -> None:
        item = make_item("Flood waters rise across the northern province", content=LONG_BODY)
        store = _store(query_results=[_article("Flood waters rise across northern province")])

        result = DuplicateResolver(store).resolve([item])

        assert result.matched_by == {"content": 1}
        phrase = " ".join(LONG_BODY.lower().split()[:20])
        assert store.query.call_args_list[-1] == call(phrase, 20)

    def test_short_body_skips_content_check(self, make_item) -> None:
        item = make_item("Flood waters rise across the northern province", content="Short body.")
        store = _store(query_results=[_article("Flood waters rise across northern province")])

        assert DuplicateResolver(store).resolve([item]).new == [item]
        assert store.query.call_count == 1

    def test_storage_error_counts_as_new(self, make_item) -> None:
        item = make_item("Storm")
        store = _store()
        store.find_by_url.side_effect = StorageError("database is locked")

        result = DuplicateResolver(store).resolve([item])

        assert result.new == [item]
        assert result.check_errors == 1

    def test_exists_never_raises(self, make_item) -> None:
        store = _store()
        store.find_by_url.side_effect = RuntimeError("connection reset")

        assert DuplicateResolver(store).exists(make_item("Storm")) is False

    def test_custom_check_order(self, make_item) -> None:
        store = _store(by_url=_article("Storm"))
        resolver = DuplicateResolver(store, checks=[ContentSimilarityCheck()])

        assert resolver.exists(make_item("Storm")) is False
        store.find_by_url.assert_not_called()


class TestContentSimilarityCheck:
    def test_phrase_uses_leading_words(self) -> None:
        check = ContentSimilarityCheck(phrase_words=3)
        assert check.phrase("One Two  three four") == "one two three"

    def test_below_threshold_is_not_duplicate(self, make_item) -> None:
        item = make_item("Flood waters rise in the north", content=LONG_BODY)
        store = _store(query_results=[_article("Parliament passes budget bill")])

        assert ContentSimilarityCheck().matches(item, store) is False


class TestResolverOnSQLite:
    def test_title_match_folds_non_ascii_case(self, make_item) -> None:
        store = SQLiteArticleStore(":memory:")
        store.initialize()
        store.insert_many([make_item("Élection Results", url="https://example.com/first")])

        result = DuplicateResolver(store).resolve([make_item("ÉLECTION RESULTS", url="https://example.com/second")])
        store.close()

        assert result.duplicates == 1
        assert result.matched_by == {"title": 1}
