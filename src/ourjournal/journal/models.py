"""Core data models for the two-author journal.

Entries are owned by an entry store and are read-only here. Retrieval
plans describe a store query without binding it to any backend.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

from ourjournal.core.exceptions import InputError


class Author(Enum):
    """The two journal authors. The set is closed."""

    SHIVAM = "Shivam"
    SHREYA = "Shreya"

    @property
    def other(self) -> Author:
        return Author.SHREYA if self is Author.SHIVAM else Author.SHIVAM

    @classmethod
    def all(cls) -> tuple[Author, ...]:
        return tuple(cls)

    @classmethod
    def parse(cls, value: Author | str) -> Author:
        """Resolve a member or a case-insensitive name.

        Raises:
            InputError: If the value names no known author.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for author in cls:
                if author.value.lower() == wanted:
                    return author
        raise InputError(f"Unknown author: {value!r}")

    def __str__(self) -> str:
        return self.value


class Speaker(Enum):
    """Who said a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


def parse_day(value: date | str) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a date through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


@dataclass(frozen=True)
class JournalEntry:
    """One journal entry.

    ``date`` is the logical day the entry is about; ``created_at`` is when it
    was written. Several entries may share a date.
    """

    author: Author
    date: date
    text: str
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not isinstance(self.author, Author):
            raise ValueError("author must be an Author")
        if not self.text or not isinstance(self.text, str):
            raise ValueError("text must be a non-empty string")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JournalEntry:
        """Build an entry from its persisted shape.

        Accepts ``user`` or ``author`` for the author and ``createdAt`` or
        ``created_at`` for the creation time.
        """
        author = Author.parse(data.get("author") or data.get("user") or "")
        created = data.get("created_at") or data.get("createdAt")
        if isinstance(created, str):
            created = datetime.fromisoformat(created.replace("Z", "+00:00"))
        if isinstance(created, datetime) and created.tzinfo is not None:
            # Stored as naive local time so entries stay mutually comparable
            created = created.astimezone().replace(tzinfo=None)
        return cls(
            author=author,
            date=parse_day(data["date"]),
            text=str(data.get("text", "")).strip(),
            created_at=created or datetime.now(),
        )

    def __repr__(self) -> str:
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"JournalEntry(author={self.author.value}, date={self.date.isoformat()}, text='{preview}')"


@dataclass(frozen=True)
class ConversationTurn:
    """One prior message in the assistant conversation."""

    speaker: Speaker
    text: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationTurn:
        """Accept ``{"speaker"|"sender": "user"|"assistant", "text": ...}``.

        Raises:
            InputError: On an unknown speaker or a missing text field.
        """
        raw = data.get("speaker") or data.get("sender")
        try:
            speaker = Speaker(str(raw).lower())
        except ValueError:
            raise InputError(f"Unknown conversation speaker: {raw!r}") from None
        text = data.get("text")
        if not isinstance(text, str):
            raise InputError("Conversation turn is missing its text")
        return cls(speaker=speaker, text=text)


@dataclass(frozen=True)
class DateFilter:
    """Inclusive date range; an exact day has ``start == end``."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError("DateFilter start must not be after end")

    @classmethod
    def exact(cls, day: date) -> DateFilter:
        return cls(day, day)

    @classmethod
    def days_back(cls, today: date, days: int) -> DateFilter:
        return cls(today - timedelta(days=days), today)

    @property
    def is_exact(self) -> bool:
        return self.start == self.end

    def matches(self, day: date) -> bool:
        return self.start <= day <= self.end

    def describe(self) -> str:
        if self.is_exact:
            return self.start.isoformat()
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


class RetrievalTier(Enum):
    """Which retrieval policy produced a plan."""

    DATE = "date"
    KEYWORD = "keyword"
    RECAP = "recap"  # Recent entries for a "how was / what did" question
    LATEST = "latest"  # Single most recent entry, minimal grounding


class SortField(Enum):
    DATE = "date"
    CREATED_AT = "created_at"
    RELEVANCE = "relevance"


@dataclass(frozen=True)
class SortKey:
    field: SortField
    descending: bool = True


RECENCY_SORT: tuple[SortKey, ...] = (SortKey(SortField.DATE), SortKey(SortField.CREATED_AT))
RELEVANCE_SORT: tuple[SortKey, ...] = (SortKey(SortField.RELEVANCE), SortKey(SortField.DATE))


@dataclass(frozen=True)
class RetrievalPlan:
    """A backend-agnostic entry store query.

    Attributes:
        tier: Policy that produced the plan.
        authors: Entries must belong to one of these authors.
        date_filter: Optional date constraint.
        keywords: Optional relevance-search terms.
        sort: Sort keys applied in order.
        limit: Maximum number of entries.
        project_relevance: Whether each result carries a relevance score.
    """

    tier: RetrievalTier
    authors: tuple[Author, ...]
    sort: tuple[SortKey, ...] = RECENCY_SORT
    limit: int = 1
    date_filter: DateFilter | None = None
    keywords: tuple[str, ...] | None = None
    project_relevance: bool = False

    def __post_init__(self):
        if not self.authors:
            raise ValueError("RetrievalPlan needs at least one author")
        if self.limit < 1:
            raise ValueError("RetrievalPlan limit must be positive")


@dataclass
class SearchResult:
    """A retrieved entry, with a relevance score when one was projected.

    Attributes:
        entry: The matched entry.
        score: Relevance score (higher = more relevant), or None.
    """

    entry: JournalEntry
    score: float | None = None

    def __repr__(self) -> str:
        score = "-" if self.score is None else f"{self.score:.3f}"
        return f"SearchResult(date={self.entry.date.isoformat()}, author={self.entry.author.value}, score={score})"
