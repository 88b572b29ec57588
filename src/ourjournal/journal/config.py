"""Configuration dataclasses for intent parsing, retrieval and search.

These are pure data containers with sensible defaults.
Override them from YAML config, env vars, or constructor args.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_STOP_WORDS: frozenset[str] = frozenset(
    {
        # question scaffolding
        "what", "how", "did", "does", "do", "was", "were", "is", "are", "am",
        "a", "an", "the", "for", "on", "in", "at", "to", "of", "about", "tell",
        "me", "when", "where", "which", "who", "why", "that", "this", "these",
        "those", "there", "then", "than", "with", "from", "into", "have", "has",
        "had", "been", "being", "can", "could", "would", "should", "will",
        "shall", "please", "just", "really", "some", "any", "anything",
        "something", "much", "many", "very", "also",
        # pronouns
        "i", "my", "mine", "you", "your", "yours", "we", "us", "our", "ours", "they",
        "them", "their", "theirs", "he", "him", "his", "she", "her", "hers",
        "both", "everyone", "everybody",
        # journal vocabulary that says nothing about content
        "write", "wrote", "written", "writing", "journal", "journals", "entry",
        "entries", "say", "said", "mention", "mentioned", "feel", "felt",
        "happen", "happened", "doing", "going", "lately", "recently",
        "today", "yesterday", "week",
    }
)

DEFAULT_RECAP_PHRASES: tuple[str, ...] = ("how was", "what did", "how did", "what happened", "lately", "recently")

DEFAULT_ALL_AUTHORS_SIGNALS: tuple[str, ...] = ("both", "everyone")


@dataclass
class KeywordConfig:
    """Settings for best-effort keyword extraction.

    Attributes:
        stop_words: Words removed before tokens are considered keywords.
        min_length: Tokens must be strictly longer than this to count.
    """

    stop_words: frozenset[str] = DEFAULT_STOP_WORDS
    min_length: int = 3


@dataclass
class RetrievalConfig:
    """Settings for retrieval tiers.

    Attributes:
        date_limit: Max entries for a date-filtered query.
        keyword_limit: Max entries for a keyword (relevance) query.
        recap_limit_per_author: Per-author entries for a recap question.
        latest_limit: Entries returned when nothing can be inferred.
        recap_phrases: Phrases that mark a question as a recap request.
        all_authors_signals: Words that pull both authors into scope.
        store_timeout: Seconds before a store query counts as failed.
    """

    date_limit: int = 15
    keyword_limit: int = 10
    recap_limit_per_author: int = 5
    latest_limit: int = 1
    recap_phrases: tuple[str, ...] = DEFAULT_RECAP_PHRASES
    all_authors_signals: tuple[str, ...] = DEFAULT_ALL_AUTHORS_SIGNALS
    store_timeout: float | None = 10.0


@dataclass
class SearchConfig:
    """Settings for TF-IDF relevance scoring.

    Attributes:
        tfidf_ngram_range: N-gram range (min, max) for TF-IDF.
        tfidf_min_df: Minimum document frequency for TF-IDF terms.
        tfidf_max_df: Maximum document frequency ratio for TF-IDF terms.
        min_score: Results scoring at or below this are dropped.
        stop_words: Vectorizer stop-word setting.
    """

    tfidf_ngram_range: tuple[int, int] = (1, 2)
    tfidf_min_df: int = 1
    tfidf_max_df: float = 1.0
    min_score: float = 0.0
    stop_words: str | None = "english"
