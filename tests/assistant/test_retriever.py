"""Tests for ourjournal.assistant.retriever."""

import asyncio
from datetime import date

import pytest

from ourjournal.assistant.intent import interpret
from ourjournal.assistant.retriever import ContextRetriever, build_plan
from ourjournal.journal.config import RetrievalConfig
from ourjournal.journal.models import (
    RECENCY_SORT,
    RELEVANCE_SORT,
    Author,
    DateFilter,
    RetrievalTier,
)

TODAY = date(2024, 3, 5)


class TestBuildPlan:
    def test_date_tier(self):
        plan = build_plan(interpret("What did I write on 2024-03-01?", "Shivam", today=TODAY))
        assert plan.tier is RetrievalTier.DATE
        assert plan.date_filter == DateFilter.exact(date(2024, 3, 1))
        assert plan.sort == RECENCY_SORT
        assert plan.limit == 15
        assert not plan.project_relevance
        assert plan.keywords is None

    def test_keyword_tier(self):
        plan = build_plan(interpret("Tell me about hiking", "Shivam", today=TODAY))
        assert plan.tier is RetrievalTier.KEYWORD
        assert plan.keywords == ("hiking",)
        assert plan.sort == RELEVANCE_SORT
        assert plan.limit == 10
        assert plan.project_relevance

    def test_recap_tier_scales_with_authors(self):
        single = build_plan(interpret("How was it?", "Shivam", today=TODAY))
        both = build_plan(interpret("How was it for both of us?", "Shivam", today=TODAY))
        assert single.tier is RetrievalTier.RECAP
        assert single.limit == 5
        assert both.tier is RetrievalTier.RECAP
        assert both.limit == 10

    @pytest.mark.parametrize("question", ["Hi!", "How are you?", "Hey, you there?"])
    def test_latest_tier(self, question):
        plan = build_plan(interpret(question, "Shreya", today=TODAY))
        assert plan.tier is RetrievalTier.LATEST
        assert plan.limit == 1
        assert plan.sort == RECENCY_SORT

    def test_week_question_never_latest(self):
        intent = interpret("How was Shreya's week?", "Shivam", today=TODAY)
        plan = build_plan(intent)
        assert Author.SHREYA in plan.authors
        assert plan.tier in (RetrievalTier.DATE, RetrievalTier.RECAP)
        assert plan.limit > 1

    def test_custom_limits(self):
        config = RetrievalConfig(date_limit=3, latest_limit=2, recap_phrases=("how are",))
        assert build_plan(interpret("today", "Shivam", today=TODAY), config).limit == 3
        assert build_plan(interpret("How was it?", "Shivam", today=TODAY), config).tier is RetrievalTier.LATEST
        assert build_plan(interpret("How are you?", "Shivam", today=TODAY), config).limit == 5


class TestContextRetriever:
    def test_retrieves_date(self, store):
        retriever = ContextRetriever(store)
        retrieval = asyncio.run(retriever.retrieve(interpret("What did I write on 2024-03-01?", "Shivam", today=TODAY)))
        assert not retrieval.failed
        assert [e.date for e in retrieval.entries] == [date(2024, 3, 1)]

    def test_retrieves_latest_only(self, store):
        retriever = ContextRetriever(store)
        retrieval = asyncio.run(retriever.retrieve(interpret("Hi!", "Shivam", today=TODAY)))
        assert [e.text for e in retrieval.entries] == ["Evening: cooked pasta and watched a movie."]

    def test_keyword_results_scored(self, store):
        retriever = ContextRetriever(store)
        retrieval = asyncio.run(retriever.retrieve(interpret("Anything about mountains?", "Shreya", today=TODAY)))
        assert [r.entry.author for r in retrieval.results] == [Author.SHREYA]
        assert retrieval.results[0].score > 0

    def test_store_failure_is_recorded(self, failing_store):
        retriever = ContextRetriever(failing_store)
        retrieval = asyncio.run(retriever.retrieve(interpret("Hi!", "Shivam", today=TODAY)))
        assert retrieval.failed
        assert "connection refused" in retrieval.error
        assert retrieval.entries == []
        assert failing_store.calls == 1

    def test_store_timeout_is_failure(self):
        class SlowStore:
            async def search(self, plan):
                await asyncio.sleep(5)
                return []

        retriever = ContextRetriever(SlowStore(), RetrievalConfig(store_timeout=0.01))
        retrieval = asyncio.run(retriever.retrieve(interpret("Hi!", "Shivam", today=TODAY)))
        assert retrieval.failed
        assert retrieval.error == "timed out"

    def test_over_limit_store_is_trimmed(self, sample_entries):
        from ourjournal.journal.models import SearchResult

        class GreedyStore:
            async def search(self, plan):
                return [SearchResult(e) for e in sample_entries]

        retrieval = asyncio.run(ContextRetriever(GreedyStore()).retrieve(interpret("Hi!", "Shivam", today=TODAY)))
        assert len(retrieval.results) == 1
