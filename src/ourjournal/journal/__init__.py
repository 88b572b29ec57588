"""Journal entries, entry stores and relevance search.

Provides the entry and plan models, an EntryStore protocol for pluggable
backends, TF-IDF relevance scoring, and configuration dataclasses.
"""

from .config import KeywordConfig, RetrievalConfig, SearchConfig
from .models import (
    Author,
    ConversationTurn,
    DateFilter,
    JournalEntry,
    RetrievalPlan,
    RetrievalTier,
    SearchResult,
    SortField,
    SortKey,
    Speaker,
)
from .store import EntryStore, InMemoryEntryStore, MarkdownDirectoryStore, open_store

__all__ = [
    "Author",
    "ConversationTurn",
    "DateFilter",
    "EntryStore",
    "InMemoryEntryStore",
    "JournalEntry",
    "KeywordConfig",
    "MarkdownDirectoryStore",
    "RetrievalConfig",
    "RetrievalPlan",
    "RetrievalTier",
    "SearchConfig",
    "SearchResult",
    "SortField",
    "SortKey",
    "Speaker",
    "open_store",
]
