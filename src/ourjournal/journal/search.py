"""TF-IDF relevance scoring over journal entries.

Provides the "relevance search" half of an entry store query: entries that
already passed the author/date filter are indexed and scored against the
keyword set, highest score first.

Requires scikit-learn.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from loguru import logger

from .config import SearchConfig
from .models import JournalEntry, SearchResult


def _require_sklearn():
    """Lazy import with clear error message."""
    try:
        from sklearn.feature_extraction.text import TfidfVectorizer
        from sklearn.metrics.pairwise import cosine_similarity

        return TfidfVectorizer, cosine_similarity
    except ImportError:
        raise ImportError("scikit-learn is required for keyword search. Install with: pip install scikit-learn") from None


class TextSearcher:
    """TF-IDF keyword search over a set of journal entries.

    Build the index once with ``build_index()``, then search with ``search()``.

    Example::

        searcher = TextSearcher()
        searcher.build_index(entries)
        results = searcher.search(["hiking", "mountains"])
    """

    def __init__(self, config: SearchConfig | None = None):
        self.config = config or SearchConfig()
        self._vectorizer = None
        self._tfidf_matrix = None
        self._entries: list[JournalEntry] = []

    @property
    def is_built(self) -> bool:
        """Whether the index has been built."""
        return self._tfidf_matrix is not None

    @property
    def entry_count(self) -> int:
        """Number of entries in the index."""
        return len(self._entries) if self.is_built else 0

    def build_index(self, entries: Sequence[JournalEntry]) -> None:
        """Build TF-IDF index from entries.

        An empty list, or entries made only of stop words, leave the index
        unbuilt so every search returns nothing.
        """
        self._vectorizer = None
        self._tfidf_matrix = None
        self._entries = []
        if not entries:
            return

        TfidfVectorizer, _ = _require_sklearn()

        vectorizer = TfidfVectorizer(
            stop_words=self.config.stop_words,
            ngram_range=self.config.tfidf_ngram_range,
            min_df=self.config.tfidf_min_df,
            max_df=self.config.tfidf_max_df,
        )
        try:
            matrix = vectorizer.fit_transform([entry.text for entry in entries])
        except ValueError as e:
            # sklearn raises on an empty vocabulary
            logger.debug(f"TF-IDF index not built: {e}")
            return

        self._vectorizer = vectorizer
        self._tfidf_matrix = matrix
        self._entries = list(entries)

    def search(self, keywords: Iterable[str], top_k: int | None = None) -> list[SearchResult]:
        """Score indexed entries against the keywords.

        Args:
            keywords: Search terms; joined into a single query.
            top_k: Max results to return. None = all positive matches.

        Returns:
            SearchResults sorted by score descending, scores above
            ``config.min_score`` only.
        """
        query = " ".join(keywords).strip()
        if not self.is_built or not query:
            return []

        _, cosine_similarity = _require_sklearn()

        query_vec = self._vectorizer.transform([query])
        scores = cosine_similarity(query_vec, self._tfidf_matrix).flatten()

        ranked_indices = scores.argsort(kind="stable")[::-1]

        results = []
        for idx in ranked_indices:
            score = float(scores[idx])
            if score <= self.config.min_score:
                continue
            results.append(SearchResult(entry=self._entries[idx], score=score))
            if top_k is not None and len(results) >= top_k:
                break

        return results
