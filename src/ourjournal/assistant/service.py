"""The journal assistant pipeline.

question + asker + recent turns -> intent -> retrieval -> grounding context
-> prompt -> generation -> outcome.

Every call builds its own request-scoped values; the only shared resource
is the read-only entry store. Retrieval and generation run one after the
other because the prompt depends on what was retrieved.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from ourjournal.core.config_schema import AssistantConfig
from ourjournal.core.exceptions import InputError
from ourjournal.core.llm import GenerationResult
from ourjournal.core.utils.text import truncate_text
from ourjournal.journal.models import Author, ConversationTurn
from ourjournal.journal.store import EntryStore

from .formatter import build_grounding_context
from .intent import IntentInterpreter
from .outcome import AssistantOutcome, Failed, normalize_response
from .prompt import assemble_prompt
from .retriever import ContextRetriever


@runtime_checkable
class GenerationBackend(Protocol):
    """Anything that turns one prompt into a ``GenerationResult``."""

    async def generate(self, prompt: str) -> GenerationResult: ...


def coerce_turns(turns: Iterable[ConversationTurn | Mapping[str, Any]] | None) -> list[ConversationTurn]:
    """Accept turn objects or ``{"sender"|"speaker", "text"}`` dicts.

    Raises:
        InputError: On a malformed turn.
    """
    if turns is None:
        return []
    coerced = []
    for turn in turns:
        if isinstance(turn, ConversationTurn):
            coerced.append(turn)
        elif isinstance(turn, Mapping):
            coerced.append(ConversationTurn.from_dict(dict(turn)))
        else:
            raise InputError(f"Unsupported conversation turn: {turn!r}")
    return coerced


class JournalAssistant:
    """Answers questions about the journal, grounded in retrieved entries.

    Example::

        assistant = JournalAssistant(InMemoryEntryStore(entries), LLMClient())
        outcome = await assistant.ask("What did I write yesterday?", "Shivam")
    """

    def __init__(
        self,
        store: EntryStore,
        backend: GenerationBackend,
        settings: AssistantConfig | None = None,
    ):
        self.settings = settings or AssistantConfig()
        self.backend = backend
        retrieval_config = self.settings.to_retrieval_config()
        self.interpreter = IntentInterpreter(self.settings.to_keyword_config(), retrieval_config.all_authors_signals)
        self.retriever = ContextRetriever(store, retrieval_config)

    async def build_prompt(
        self,
        question: str,
        asking_user: Author | str,
        history: Iterable[ConversationTurn | Mapping[str, Any]] | None = None,
        today: date | None = None,
    ) -> str:
        """Run everything up to (not including) generation.

        Raises:
            InputError: On an invalid question, author or turn.
        """
        intent = self.interpreter.interpret(question, asking_user, today)
        turns = coerce_turns(history)
        window = self.settings.history_window
        turns = turns[-window:] if window else []

        retrieval = await self.retriever.retrieve(intent)
        context = build_grounding_context(retrieval, intent.target_authors, turns, intent.asking_user)
        return assemble_prompt(intent.asking_user, context, intent.question)

    async def ask(
        self,
        question: str,
        asking_user: Author | str,
        history: Iterable[ConversationTurn | Mapping[str, Any]] | None = None,
        today: date | None = None,
    ) -> AssistantOutcome:
        """Answer one question.

        Args:
            question: Free-text question.
            asking_user: The author asking.
            history: Prior turns, oldest first.
            today: Reference date for "today"/"yesterday"/"week".

        Returns:
            Exactly one outcome. Store failures never fail the request.

        Raises:
            InputError: Before any retrieval, on invalid input.
        """
        prompt = await self.build_prompt(question, asking_user, history, today)

        try:
            if self.settings.generation_timeout:
                result = await asyncio.wait_for(self.backend.generate(prompt), timeout=self.settings.generation_timeout)
            else:
                result = await self.backend.generate(prompt)
            return normalize_response(result)
        except asyncio.TimeoutError:
            logger.error(f"Generation timed out after {self.settings.generation_timeout}s")
            return Failed("generation timed out")
        except Exception as e:
            logger.error(f"Generation failed ({type(e).__name__}): {e}")
            logger.debug(f"Prompt that failed (first 500 chars): {truncate_text(prompt, 500)}")
            return Failed(str(e) or type(e).__name__)
