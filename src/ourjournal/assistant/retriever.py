"""Context retrieval. Turns an Intent into an entry store query.

Policy, by precedence: date filter, keyword relevance, then fallback tiers
(recent entries for a recap question, otherwise just the latest entry).
Store failures never escape ``retrieve``; they are recorded on the result
so the formatter can tell the model retrieval failed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from loguru import logger

from ourjournal.journal.config import RetrievalConfig
from ourjournal.journal.models import (
    RECENCY_SORT,
    RELEVANCE_SORT,
    JournalEntry,
    RetrievalPlan,
    RetrievalTier,
    SearchResult,
)
from ourjournal.journal.store import EntryStore

from .intent import Detector, Intent, phrase_detector


@dataclass
class Retrieval:
    """Outcome of one store query.

    Attributes:
        plan: The plan that was executed.
        results: Retrieved entries, in store order.
        error: Description of a store failure, if one happened.
    """

    plan: RetrievalPlan
    results: list[SearchResult] = field(default_factory=list)
    error: str | None = None

    @property
    def entries(self) -> list[JournalEntry]:
        return [r.entry for r in self.results]

    @property
    def failed(self) -> bool:
        return self.error is not None


def is_recap_question(intent: Intent, recap_signal: Detector) -> bool:
    return recap_signal.matches(intent.normalized)


def build_plan(intent: Intent, config: RetrievalConfig | None = None) -> RetrievalPlan:
    """Choose the retrieval tier for an intent. Pure; no I/O."""
    config = config or RetrievalConfig()
    authors = intent.target_authors

    if intent.date_filter is not None:
        return RetrievalPlan(
            tier=RetrievalTier.DATE,
            authors=authors,
            date_filter=intent.date_filter,
            sort=RECENCY_SORT,
            limit=config.date_limit,
        )

    if intent.keywords:
        return RetrievalPlan(
            tier=RetrievalTier.KEYWORD,
            authors=authors,
            keywords=intent.keywords,
            sort=RELEVANCE_SORT,
            limit=config.keyword_limit,
            project_relevance=True,
        )

    if is_recap_question(intent, phrase_detector("recap", config.recap_phrases)):
        return RetrievalPlan(
            tier=RetrievalTier.RECAP,
            authors=authors,
            sort=RECENCY_SORT,
            limit=config.recap_limit_per_author * len(authors),
        )

    return RetrievalPlan(
        tier=RetrievalTier.LATEST,
        authors=authors,
        sort=RECENCY_SORT,
        limit=config.latest_limit,
    )


class ContextRetriever:
    """Executes retrieval plans against an entry store."""

    def __init__(self, store: EntryStore, config: RetrievalConfig | None = None):
        self.store = store
        self.config = config or RetrievalConfig()

    def plan(self, intent: Intent) -> RetrievalPlan:
        return build_plan(intent, self.config)

    async def retrieve(self, intent: Intent) -> Retrieval:
        """Fetch entries for an intent. Never raises for store failures."""
        plan = self.plan(intent)
        logger.debug(
            f"Retrieval plan: tier={plan.tier.value} authors={[a.value for a in plan.authors]} limit={plan.limit}"
        )

        try:
            if self.config.store_timeout:
                results = await asyncio.wait_for(self.store.search(plan), timeout=self.config.store_timeout)
            else:
                results = await self.store.search(plan)
        except asyncio.TimeoutError:
            logger.warning(f"Entry store query timed out after {self.config.store_timeout}s")
            return Retrieval(plan=plan, error="timed out")
        except Exception as e:
            logger.warning(f"Entry store query failed ({type(e).__name__}): {e}")
            return Retrieval(plan=plan, error=str(e) or type(e).__name__)

        results = list(results)[: plan.limit]
        logger.info(f"Fetched {len(results)} journal entries ({plan.tier.value})")
        return Retrieval(plan=plan, results=results)
