"""Intent interpretation: who and what time range a question is about.

The rules are an ordered list of named detectors over the lowercased
question. Each detector is a plain regex with word boundaries so its
false-positive surface can be tested on its own ("both" does not fire on
"bother").

Date detectors run first and the first match wins. Keywords are only
extracted when no date signal was found.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from loguru import logger

from ourjournal.core.exceptions import InputError
from ourjournal.core.utils.text import extract_keywords
from ourjournal.journal.config import DEFAULT_ALL_AUTHORS_SIGNALS, KeywordConfig
from ourjournal.journal.models import Author, DateFilter


@dataclass(frozen=True)
class Detector:
    """A named yes/no signal over normalized question text."""

    name: str
    pattern: re.Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def phrase_detector(name: str, phrases: Iterable[str]) -> Detector:
    """Detector that fires when any phrase appears as whole words."""
    alternatives = "|".join(re.escape(p.strip().lower()) for p in phrases if p.strip())
    if not alternatives:
        # Never matches
        return Detector(name, re.compile(r"(?!x)x"))
    return Detector(name, re.compile(rf"\b(?:{alternatives})\b"))


@dataclass(frozen=True)
class DateDetector:
    """A named date signal that resolves to a filter relative to ``today``."""

    name: str
    pattern: re.Pattern[str]
    resolve: Callable[[re.Match[str], date], DateFilter | None]

    def detect(self, text: str, today: date) -> DateFilter | None:
        for match in self.pattern.finditer(text):
            date_filter = self.resolve(match, today)
            if date_filter is not None:
                return date_filter
        return None


def _iso_literal(match: re.Match[str], today: date) -> DateFilter | None:
    try:
        return DateFilter.exact(date.fromisoformat(match.group(1)))
    except ValueError:
        # e.g. 2024-02-30
        return None


DATE_DETECTORS: tuple[DateDetector, ...] = (
    DateDetector("iso_date", re.compile(r"(?<!\d)(\d{4}-\d{2}-\d{2})(?!\d)"), _iso_literal),
    DateDetector("today", re.compile(r"\btoday\b"), lambda m, today: DateFilter.exact(today)),
    DateDetector(
        "yesterday",
        re.compile(r"\byesterday\b"),
        lambda m, today: DateFilter.exact(today - timedelta(days=1)),
    ),
    DateDetector("week", re.compile(r"\bweek\b"), lambda m, today: DateFilter.days_back(today, 7)),
)

ALL_AUTHORS_SIGNAL = phrase_detector("all_authors", DEFAULT_ALL_AUTHORS_SIGNALS)


def author_detector(author: Author) -> Detector:
    return phrase_detector(f"mentions_{author.value.lower()}", [author.value])


def detect_date(text: str, today: date, detectors: Iterable[DateDetector] = DATE_DETECTORS) -> DateFilter | None:
    """Return the filter from the first date detector that fires."""
    for detector in detectors:
        date_filter = detector.detect(text, today)
        if date_filter is not None:
            logger.debug(f"Date detector '{detector.name}' matched: {date_filter.describe()}")
            return date_filter
    return None


def resolve_target_authors(
    text: str,
    asking_user: Author,
    all_authors_signal: Detector = ALL_AUTHORS_SIGNAL,
) -> tuple[Author, ...]:
    """The asker, plus the other author when named; both on an all-authors signal."""
    if all_authors_signal.matches(text):
        return Author.all()
    targets = [asking_user]
    if author_detector(asking_user.other).matches(text):
        targets.append(asking_user.other)
    # Stable order so formatting and plans are deterministic
    return tuple(a for a in Author if a in targets)


@dataclass(frozen=True)
class Intent:
    """What a question is about.

    Attributes:
        question: The original question text, used verbatim in the prompt.
        normalized: Lowercased question used for matching.
        asking_user: Who asked.
        target_authors: Whose entries to search (never empty).
        date_filter: Date constraint, if the question names one.
        keywords: Relevance terms, only when there is no date filter.
    """

    question: str
    normalized: str
    asking_user: Author
    target_authors: tuple[Author, ...]
    date_filter: DateFilter | None = None
    keywords: tuple[str, ...] | None = None

    def __post_init__(self):
        if not self.target_authors:
            raise ValueError("Intent needs at least one target author")
        if self.date_filter is not None and self.keywords is not None:
            raise ValueError("Intent carries either a date filter or keywords, not both")
        if self.keywords is not None and not self.keywords:
            raise ValueError("Intent keywords must be non-empty when set")


class IntentInterpreter:
    """Derives an ``Intent`` from raw question text."""

    def __init__(
        self,
        keyword_config: KeywordConfig | None = None,
        all_authors_signals: Iterable[str] = DEFAULT_ALL_AUTHORS_SIGNALS,
        date_detectors: Iterable[DateDetector] = DATE_DETECTORS,
    ):
        self.keyword_config = keyword_config or KeywordConfig()
        self.all_authors_signal = phrase_detector("all_authors", all_authors_signals)
        self.date_detectors = tuple(date_detectors)
        self._keyword_stop_words = self.keyword_config.stop_words | {a.value.lower() for a in Author}

    def interpret(self, question: str, asking_user: Author | str, today: date | None = None) -> Intent:
        """Interpret a question.

        Args:
            question: Raw question text.
            asking_user: The author asking.
            today: Reference date for relative signals. Defaults to the
                local system date.

        Raises:
            InputError: On an empty question or an unknown author.
        """
        if not isinstance(question, str) or not question.strip():
            raise InputError("Question must be a non-empty string")
        asker = Author.parse(asking_user)
        normalized = question.strip().lower()
        today = today or date.today()

        targets = resolve_target_authors(normalized, asker, self.all_authors_signal)
        date_filter = detect_date(normalized, today, self.date_detectors)

        keywords = None
        if date_filter is None:
            words = extract_keywords(normalized, self._keyword_stop_words, self.keyword_config.min_length)
            keywords = tuple(words) or None

        intent = Intent(
            question=question.strip(),
            normalized=normalized,
            asking_user=asker,
            target_authors=targets,
            date_filter=date_filter,
            keywords=keywords,
        )
        logger.debug(
            f"Intent: authors={[a.value for a in targets]} "
            f"date={date_filter.describe() if date_filter else None} keywords={keywords}"
        )
        return intent


def interpret(
    question: str,
    asking_user: Author | str,
    today: date | None = None,
    keyword_config: KeywordConfig | None = None,
) -> Intent:
    """Interpret a question with default detectors."""
    return IntentInterpreter(keyword_config).interpret(question, asking_user, today)
