"""The journal assistant: intent, retrieval, context, prompt and outcome."""

from .formatter import GroundingContext, build_grounding_context, format_entries, format_history
from .intent import Intent, IntentInterpreter, interpret
from .outcome import AssistantOutcome, Answered, Blocked, Failed, PartialAnswer, normalize_response
from .prompt import assemble_prompt
from .retriever import ContextRetriever, Retrieval, build_plan
from .service import GenerationBackend, JournalAssistant

__all__ = [
    "Answered",
    "AssistantOutcome",
    "Blocked",
    "ContextRetriever",
    "Failed",
    "GenerationBackend",
    "GroundingContext",
    "Intent",
    "IntentInterpreter",
    "JournalAssistant",
    "PartialAnswer",
    "Retrieval",
    "assemble_prompt",
    "build_grounding_context",
    "build_plan",
    "format_entries",
    "format_history",
    "interpret",
    "normalize_response",
]
