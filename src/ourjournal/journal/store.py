"""Entry stores: the query contract the assistant reads journal entries through.

Any system that holds dated, authored entries can implement ``EntryStore``.
Two implementations ship here: an in-memory store (optionally loaded from a
YAML/JSON file) and a directory of markdown files laid out as
``<root>/<Author>/YYYY-MM-DD.md``.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

import aiofiles
import aiofiles.os
import yaml
from loguru import logger

from ourjournal.core.exceptions import ConfigurationError, InputError, RetrievalError

from .config import SearchConfig
from .models import Author, JournalEntry, RetrievalPlan, SearchResult, SortField, SortKey
from .search import TextSearcher

_FILENAME_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[-_ ].*)?$")


@runtime_checkable
class EntryStore(Protocol):
    """Protocol for querying journal entries.

    Implementations must support author-set membership, exact/range date
    matching, relevance search on entry text, and the sort keys in
    ``RetrievalPlan.sort``.
    """

    async def search(self, plan: RetrievalPlan) -> list[SearchResult]:
        """Execute a retrieval plan.

        Returns:
            At most ``plan.limit`` results in plan order. Scores are set
            only when ``plan.project_relevance`` is true.

        Raises:
            RetrievalError: If the store cannot be queried.
        """
        ...


def _sort_value(result: SearchResult, key: SortKey):
    if key.field is SortField.DATE:
        return result.entry.date
    if key.field is SortField.CREATED_AT:
        return result.entry.created_at
    return result.score or 0.0


def sort_results(results: Iterable[SearchResult], keys: Sequence[SortKey]) -> list[SearchResult]:
    """Sort results by several keys, first key most significant."""
    ordered = list(results)
    for key in reversed(keys):
        ordered.sort(key=lambda r, k=key: _sort_value(r, k), reverse=key.descending)
    return ordered


def execute_plan(
    entries: Iterable[JournalEntry],
    plan: RetrievalPlan,
    search_config: SearchConfig | None = None,
) -> list[SearchResult]:
    """Run a plan against an in-memory collection of entries."""
    candidates = [
        entry
        for entry in entries
        if entry.author in plan.authors and (plan.date_filter is None or plan.date_filter.matches(entry.date))
    ]

    if plan.keywords:
        searcher = TextSearcher(search_config)
        searcher.build_index(candidates)
        results = searcher.search(plan.keywords)
        if not plan.project_relevance:
            results = [SearchResult(entry=r.entry) for r in results]
    else:
        results = [SearchResult(entry=entry) for entry in candidates]

    return sort_results(results, plan.sort)[: plan.limit]


def load_entries(path: str | Path) -> list[JournalEntry]:
    """Load entries from a YAML or JSON file.

    The file holds either a list of entries or ``{"entries": [...]}``.

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"Entries file not found: {path}")
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or []
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse entries file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("entries", [])
    if not isinstance(data, list):
        raise ConfigurationError(f"Entries file {path} must contain a list of entries")

    entries = []
    for i, raw in enumerate(data):
        try:
            entries.append(JournalEntry.from_dict(raw))
        except (InputError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid entry #{i} in {path}: {e}") from e
    logger.debug(f"Loaded {len(entries)} entries from {path}")
    return entries


class InMemoryEntryStore:
    """Entry store over a fixed list of entries."""

    def __init__(self, entries: Iterable[JournalEntry] = (), search_config: SearchConfig | None = None):
        self._entries: tuple[JournalEntry, ...] = tuple(entries)
        self.search_config = search_config or SearchConfig()

    @classmethod
    def from_file(cls, path: str | Path, search_config: SearchConfig | None = None) -> InMemoryEntryStore:
        return cls(load_entries(path), search_config=search_config)

    def __len__(self) -> int:
        return len(self._entries)

    async def search(self, plan: RetrievalPlan) -> list[SearchResult]:
        return execute_plan(self._entries, plan, self.search_config)


class MarkdownDirectoryStore:
    """Entry store over ``<root>/<Author>/YYYY-MM-DD[-suffix].md`` files.

    Files are re-read on every query so entries written by other processes
    show up immediately. ``created_at`` comes from the file's mtime.
    """

    def __init__(
        self,
        root: str | Path,
        extensions: Sequence[str] = (".md", ".txt"),
        search_config: SearchConfig | None = None,
    ):
        self.root = Path(root).expanduser()
        self.extensions = tuple(extensions)
        self.search_config = search_config or SearchConfig()

    def list_entries(
        self,
        start: date | None = None,
        end: date | None = None,
        authors: Iterable[Author] | None = None,
    ) -> list[tuple[Author, date, Path]]:
        """Return ``(author, day, path)`` for files in the date range.

        Args:
            start: Earliest date (inclusive). None = no lower bound.
            end: Latest date (inclusive). None = no upper bound.
            authors: Restrict to these authors. None = both.

        Returns:
            Matches sorted chronologically.

        Raises:
            RetrievalError: If the root directory does not exist.
        """
        if not self.root.is_dir():
            raise RetrievalError(f"Journal directory not found: {self.root}")

        wanted = set(authors) if authors is not None else set(Author)
        found: list[tuple[Author, date, Path]] = []
        for author_dir in sorted(self.root.iterdir()):
            if not author_dir.is_dir():
                continue
            try:
                author = Author.parse(author_dir.name)
            except InputError:
                logger.debug(f"Skipping non-author directory: {author_dir}")
                continue
            if author not in wanted:
                continue
            for path in author_dir.iterdir():
                if path.suffix.lower() not in self.extensions:
                    continue
                day = self._date_from_name(path)
                if day is None:
                    continue
                if (start and day < start) or (end and day > end):
                    continue
                found.append((author, day, path))

        found.sort(key=lambda item: (item[1], item[2].name))
        return found

    async def read_entry(self, author: Author, day: date, path: Path) -> JournalEntry | None:
        """Read one file into an entry.

        Blank files and files that are not valid UTF-8 yield None.
        """
        try:
            async with aiofiles.open(path, encoding="utf-8") as f:
                text = (await f.read()).strip()
            stat = await aiofiles.os.stat(path)
        except UnicodeDecodeError as e:
            logger.warning(f"Skipping journal file that is not valid UTF-8: {path} ({e.reason})")
            return None
        except OSError as e:
            raise RetrievalError(f"Cannot read journal file {path}: {e}") from e
        if not text:
            return None
        created_at = datetime.fromtimestamp(stat.st_mtime)
        return JournalEntry(author=author, date=day, text=text, created_at=created_at)

    async def search(self, plan: RetrievalPlan) -> list[SearchResult]:
        start = plan.date_filter.start if plan.date_filter else None
        end = plan.date_filter.end if plan.date_filter else None
        entries = []
        found = await asyncio.to_thread(self.list_entries, start, end, plan.authors)
        for author, day, path in found:
            entry = await self.read_entry(author, day, path)
            if entry is not None:
                entries.append(entry)
        return execute_plan(entries, plan, self.search_config)

    @staticmethod
    def _date_from_name(path: Path) -> date | None:
        match = _FILENAME_DATE_RE.match(path.stem)
        if not match:
            return None
        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            return None


def open_store(path: str | Path, search_config: SearchConfig | None = None) -> EntryStore:
    """Open a directory as a markdown store, a file as an in-memory store.

    Raises:
        ConfigurationError: If the path does not exist.
    """
    path = Path(path).expanduser()
    if path.is_dir():
        return MarkdownDirectoryStore(path, search_config=search_config)
    if path.is_file():
        return InMemoryEntryStore.from_file(path, search_config=search_config)
    raise ConfigurationError(f"Journal entries path not found: {path}")
