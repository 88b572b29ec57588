"""Tests for ourjournal.journal.store."""

import asyncio
import json
import os
import time
from datetime import date, datetime

import pytest
import yaml

from ourjournal.core.exceptions import ConfigurationError, RetrievalError
from ourjournal.journal.models import (
    RECENCY_SORT,
    RELEVANCE_SORT,
    Author,
    DateFilter,
    JournalEntry,
    RetrievalPlan,
    RetrievalTier,
    SearchResult,
)
from ourjournal.journal.store import (
    EntryStore,
    InMemoryEntryStore,
    MarkdownDirectoryStore,
    load_entries,
    open_store,
    sort_results,
)

BOTH = (Author.SHIVAM, Author.SHREYA)


def _plan(**kwargs):
    defaults = {"tier": RetrievalTier.RECAP, "authors": BOTH, "sort": RECENCY_SORT, "limit": 50}
    defaults.update(kwargs)
    return RetrievalPlan(**defaults)


class TestSortResults:
    def test_date_then_created_at(self):
        a = JournalEntry(Author.SHIVAM, date(2024, 1, 2), "a", datetime(2024, 1, 2, 8))
        b = JournalEntry(Author.SHIVAM, date(2024, 1, 2), "b", datetime(2024, 1, 2, 9))
        c = JournalEntry(Author.SHIVAM, date(2024, 1, 1), "c", datetime(2024, 1, 5))
        ordered = sort_results([SearchResult(c), SearchResult(a), SearchResult(b)], RECENCY_SORT)
        assert [r.entry.text for r in ordered] == ["b", "a", "c"]

    def test_relevance_then_date(self):
        a = JournalEntry(Author.SHIVAM, date(2024, 1, 1), "a")
        b = JournalEntry(Author.SHIVAM, date(2024, 1, 3), "b")
        c = JournalEntry(Author.SHIVAM, date(2024, 1, 2), "c")
        results = [SearchResult(a, 0.5), SearchResult(b, 0.2), SearchResult(c, 0.5)]
        ordered = sort_results(results, RELEVANCE_SORT)
        assert [r.entry.text for r in ordered] == ["c", "a", "b"]


class TestInMemoryEntryStore:
    def test_satisfies_protocol(self, store):
        assert isinstance(store, EntryStore)

    def test_author_filter(self, store):
        results = asyncio.run(store.search(_plan(authors=(Author.SHREYA,))))
        assert results
        assert all(r.entry.author is Author.SHREYA for r in results)

    def test_exact_date(self, store):
        plan = _plan(tier=RetrievalTier.DATE, date_filter=DateFilter.exact(date(2024, 3, 4)))
        results = asyncio.run(store.search(plan))
        assert [r.entry.text for r in results] == [
            "Evening: cooked pasta and watched a movie.",
            "Long day at work, finished the quarterly report.",
        ]
        assert all(r.score is None for r in results)

    def test_date_range(self, store):
        plan = _plan(tier=RetrievalTier.DATE, date_filter=DateFilter(date(2024, 3, 1), date(2024, 3, 3)))
        days = [r.entry.date for r in asyncio.run(store.search(plan))]
        assert days == [date(2024, 3, 3), date(2024, 3, 1)]

    def test_limit(self, store):
        assert len(asyncio.run(store.search(_plan(limit=1)))) == 1

    def test_keyword_projects_scores(self, store):
        plan = _plan(
            tier=RetrievalTier.KEYWORD, keywords=("mountains",), sort=RELEVANCE_SORT, project_relevance=True
        )
        results = asyncio.run(store.search(plan))
        assert len(results) == 2
        assert all(r.score is not None and r.score > 0 for r in results)

    def test_keyword_without_projection(self, store):
        plan = _plan(tier=RetrievalTier.KEYWORD, keywords=("mountains",), sort=RELEVANCE_SORT)
        results = asyncio.run(store.search(plan))
        assert results
        assert all(r.score is None for r in results)

    def test_keyword_respects_authors(self, store):
        plan = _plan(
            tier=RetrievalTier.KEYWORD,
            authors=(Author.SHIVAM,),
            keywords=("mountains",),
            sort=RELEVANCE_SORT,
            project_relevance=True,
        )
        results = asyncio.run(store.search(plan))
        assert [r.entry.author for r in results] == [Author.SHIVAM]


class TestLoadEntries:
    def test_yaml_list(self, tmp_path):
        path = tmp_path / "entries.yaml"
        path.write_text(yaml.dump([{"user": "Shivam", "date": "2024-03-01", "text": "Hello"}]))
        entries = load_entries(path)
        assert entries[0].author is Author.SHIVAM
        assert entries[0].date == date(2024, 3, 1)

    def test_json_wrapped(self, tmp_path):
        path = tmp_path / "entries.json"
        path.write_text(json.dumps({"entries": [{"user": "Shreya", "date": "2024-03-02", "text": "Hi"}]}))
        assert len(InMemoryEntryStore.from_file(path)) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_entries(tmp_path / "nope.yaml")

    def test_invalid_entry(self, tmp_path):
        path = tmp_path / "entries.yaml"
        path.write_text(yaml.dump([{"user": "Bob", "date": "2024-03-01", "text": "x"}]))
        with pytest.raises(ConfigurationError, match="#0"):
            load_entries(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "entries.yaml"
        path.write_text("just a string")
        with pytest.raises(ConfigurationError):
            load_entries(path)


@pytest.fixture
def journal_dir(tmp_path):
    (tmp_path / "Shivam").mkdir()
    (tmp_path / "shreya").mkdir()
    (tmp_path / "notes").mkdir()
    (tmp_path / "Shivam" / "2024-03-01.md").write_text("Went hiking in the mountains.")
    (tmp_path / "Shivam" / "2024-03-04-evening.md").write_text("Cooked pasta.")
    (tmp_path / "Shivam" / "2024-03-02.md").write_text("   ")
    (tmp_path / "Shivam" / "readme.md").write_text("not an entry")
    (tmp_path / "shreya" / "2024-03-03.md").write_text("Painted the lake.")
    (tmp_path / "notes" / "2024-03-03.md").write_text("ignored")
    return tmp_path


class TestMarkdownDirectoryStore:
    def test_satisfies_protocol(self, journal_dir):
        assert isinstance(MarkdownDirectoryStore(journal_dir), EntryStore)

    def test_list_entries(self, journal_dir):
        found = MarkdownDirectoryStore(journal_dir).list_entries()
        assert [(a, d) for a, d, _ in found] == [
            (Author.SHIVAM, date(2024, 3, 1)),
            (Author.SHIVAM, date(2024, 3, 2)),
            (Author.SHREYA, date(2024, 3, 3)),
            (Author.SHIVAM, date(2024, 3, 4)),
        ]

    def test_list_entries_range_and_authors(self, journal_dir):
        found = MarkdownDirectoryStore(journal_dir).list_entries(
            start=date(2024, 3, 2), end=date(2024, 3, 4), authors=[Author.SHREYA]
        )
        assert [(a, d) for a, d, _ in found] == [(Author.SHREYA, date(2024, 3, 3))]

    def test_search_skips_blank_files(self, journal_dir):
        store = MarkdownDirectoryStore(journal_dir)
        results = asyncio.run(store.search(_plan(authors=(Author.SHIVAM,))))
        assert [r.entry.text for r in results] == ["Cooked pasta.", "Went hiking in the mountains."]

    def test_created_at_from_mtime(self, journal_dir):
        path = journal_dir / "shreya" / "2024-03-03.md"
        os.utime(path, (1_700_000_000, 1_700_000_000))
        results = asyncio.run(MarkdownDirectoryStore(journal_dir).search(_plan(authors=(Author.SHREYA,))))
        assert results[0].entry.created_at == datetime.fromtimestamp(1_700_000_000)

    def test_keyword_search(self, journal_dir):
        plan = _plan(tier=RetrievalTier.KEYWORD, keywords=("hiking",), sort=RELEVANCE_SORT, project_relevance=True)
        results = asyncio.run(MarkdownDirectoryStore(journal_dir).search(plan))
        assert [r.entry.date for r in results] == [date(2024, 3, 1)]

    def test_undecodable_file_is_skipped(self, journal_dir):
        (journal_dir / "Shivam" / "2024-03-05.md").write_bytes(b"caf\xe9 visit")
        plan = _plan(tier=RetrievalTier.KEYWORD, keywords=("hiking",), sort=RELEVANCE_SORT, project_relevance=True)
        results = asyncio.run(MarkdownDirectoryStore(journal_dir).search(plan))
        assert [r.entry.date for r in results] == [date(2024, 3, 1)]

    def test_slow_listing_does_not_block_the_loop(self, journal_dir):
        class SlowStore(MarkdownDirectoryStore):
            def list_entries(self, *args, **kwargs):
                time.sleep(0.5)
                return super().list_entries(*args, **kwargs)

        async def run():
            return await asyncio.wait_for(SlowStore(journal_dir).search(_plan()), timeout=0.05)

        with pytest.raises(asyncio.TimeoutError):
            asyncio.run(run())

    def test_missing_root_raises(self, tmp_path):
        store = MarkdownDirectoryStore(tmp_path / "missing")
        with pytest.raises(RetrievalError):
            asyncio.run(store.search(_plan()))


class TestOpenStore:
    def test_directory(self, journal_dir):
        assert isinstance(open_store(journal_dir), MarkdownDirectoryStore)

    def test_file(self, tmp_path):
        path = tmp_path / "entries.yaml"
        path.write_text(yaml.dump([{"user": "Shivam", "date": "2024-03-01", "text": "Hello"}]))
        assert isinstance(open_store(path), InMemoryEntryStore)

    def test_missing(self, tmp_path):
        with pytest.raises(ConfigurationError):
            open_store(tmp_path / "missing")
