"""Shared test fixtures for ourjournal."""

from datetime import date, datetime

import pytest

from ourjournal.core.llm import GenerationResult
from ourjournal.journal.models import Author, JournalEntry
from ourjournal.journal.store import InMemoryEntryStore

TODAY = date(2024, 3, 5)


class FakeBackend:
    """Generation backend that records prompts and replays a fixed result."""

    def __init__(self, result=None, error=None):
        self.result = result or GenerationResult(text="Here is what I found.")
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> GenerationResult:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.result


class FailingStore:
    """Entry store whose every query fails."""

    def __init__(self, error=None):
        self.error = error or ConnectionError("connection refused")
        self.calls = 0

    async def search(self, plan):
        self.calls += 1
        raise self.error


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def sample_entries():
    return [
        JournalEntry(
            Author.SHIVAM,
            date(2024, 3, 1),
            "Went hiking in the mountains with friends, the view was amazing.",
            datetime(2024, 3, 1, 20, 0),
        ),
        JournalEntry(
            Author.SHIVAM,
            date(2024, 3, 4),
            "Long day at work, finished the quarterly report.",
            datetime(2024, 3, 4, 21, 0),
        ),
        JournalEntry(
            Author.SHIVAM,
            date(2024, 3, 4),
            "Evening: cooked pasta and watched a movie.",
            datetime(2024, 3, 4, 23, 0),
        ),
        JournalEntry(
            Author.SHREYA,
            date(2024, 2, 20),
            "Visited grandma, we baked cookies together.",
            datetime(2024, 2, 20, 18, 0),
        ),
        JournalEntry(
            Author.SHREYA,
            date(2024, 3, 3),
            "Painted a landscape of the lake, feeling calm.",
            datetime(2024, 3, 3, 19, 30),
        ),
        JournalEntry(
            Author.SHREYA,
            date(2024, 3, 5),
            "Started reading a novel about mountains and climbers.",
            datetime(2024, 3, 5, 22, 15),
        ),
    ]


@pytest.fixture
def store(sample_entries):
    return InMemoryEntryStore(sample_entries)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def make_backend():
    """Factory for FakeBackend with a custom result or error."""
    return FakeBackend


@pytest.fixture
def failing_store():
    return FailingStore()
