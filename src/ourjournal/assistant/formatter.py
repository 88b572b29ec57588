"""Grounding-context formatting for retrieved entries and conversation turns.

Output is plain text and fully deterministic: the same retrieval and turns
always render to the same bytes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ourjournal.journal.models import Author, ConversationTurn, JournalEntry, RetrievalTier, Speaker

from .retriever import Retrieval

ASSISTANT_LABEL = "Assistant"
ENTRIES_HEADER = "Relevant Journal Entries (newest first):"
HISTORY_HEADER = "Recent Conversation History:"
RETRIEVAL_ERROR_SENTENCE = "Context: There was an issue retrieving journal entries due to a database error."


@dataclass(frozen=True)
class GroundingContext:
    """The two context blocks handed to the prompt assembler."""

    history: str
    entries: str

    @property
    def text(self) -> str:
        return "\n".join(block for block in (self.history, self.entries) if block)


def _authors_phrase(authors: Sequence[Author]) -> str:
    return " or ".join(a.value for a in authors)


def no_entries_sentence(retrieval: Retrieval) -> str:
    """Say plainly that nothing matched, naming the filter that was tried."""
    plan = retrieval.plan
    who = _authors_phrase(plan.authors)
    if plan.tier is RetrievalTier.DATE and plan.date_filter is not None:
        if plan.date_filter.is_exact:
            return f"Context: No journal entries by {who} were found for {plan.date_filter.describe()}."
        start, end = plan.date_filter.start.isoformat(), plan.date_filter.end.isoformat()
        return f"Context: No journal entries by {who} were found between {start} and {end}."
    if plan.tier is RetrievalTier.KEYWORD and plan.keywords:
        terms = ", ".join(plan.keywords)
        return f'Context: No journal entries by {who} were found matching "{terms}".'
    return f"Context: No journal entries by {who} have been written yet."


def format_entry(entry: JournalEntry, show_author: bool) -> str:
    author = f"{entry.author.value} " if show_author else ""
    return f'- On {entry.date.isoformat()}, {author}wrote: "{entry.text}"'


def format_entries(retrieval: Retrieval, target_authors: Sequence[Author]) -> str:
    """Render the journal-excerpts block.

    A store error takes precedence over the "no entries" sentence. The
    author is only named when more than one author is in scope.
    """
    if retrieval.failed:
        return RETRIEVAL_ERROR_SENTENCE + "\n"
    if not retrieval.results:
        return no_entries_sentence(retrieval) + "\n"

    show_author = len(set(target_authors)) > 1
    entries = sorted(retrieval.entries, key=lambda e: (e.date, e.created_at), reverse=True)
    lines = [ENTRIES_HEADER]
    lines.extend(format_entry(entry, show_author) for entry in entries)
    return "\n".join(lines) + "\n"


def format_history(turns: Sequence[ConversationTurn], asking_user: Author) -> str:
    """Render prior turns oldest-first; empty string when there are none."""
    if not turns:
        return ""
    lines = [HISTORY_HEADER]
    for turn in turns:
        speaker = asking_user.value if turn.speaker is Speaker.USER else ASSISTANT_LABEL
        lines.append(f"{speaker}: {turn.text}")
    return "\n".join(lines) + "\n"


def build_grounding_context(
    retrieval: Retrieval,
    target_authors: Sequence[Author],
    turns: Sequence[ConversationTurn],
    asking_user: Author,
) -> GroundingContext:
    return GroundingContext(
        history=format_history(turns, asking_user),
        entries=format_entries(retrieval, target_authors),
    )
