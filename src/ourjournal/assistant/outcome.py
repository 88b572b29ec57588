"""Assistant outcomes and the response normalizer.

Every generation result maps to exactly one outcome:

    finished text          -> Answered
    prompt block reason    -> Blocked (stage "prompt")
    non-"stop" finish      -> Blocked (stage "finish")
    partial fragment only  -> PartialAnswer
    nothing at all         -> Failed("empty response")

Exceptions from the generation call become ``Failed`` in the service.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from loguru import logger

from ourjournal.core.exceptions import GenerationBlockedError, GenerationFailedError
from ourjournal.core.llm import GenerationResult, is_stop_reason

EMPTY_RESPONSE = "empty response"


@dataclass(frozen=True)
class Answered:
    text: str

    status_code = 200
    ok = True

    def to_payload(self) -> dict[str, Any]:
        return {"response": self.text}

    def raise_for_outcome(self) -> None:
        return None


@dataclass(frozen=True)
class PartialAnswer:
    """Usable output returned despite an abnormal termination."""

    text: str

    status_code = 200
    ok = True

    def to_payload(self) -> dict[str, Any]:
        return {"response": self.text, "partial": True}

    def raise_for_outcome(self) -> None:
        return None


@dataclass(frozen=True)
class Blocked:
    """The backend refused the prompt or stopped the answer early."""

    reason: str
    stage: Literal["prompt", "finish"] = "prompt"

    status_code = 400
    ok = False

    @property
    def message(self) -> str:
        if self.stage == "finish":
            return f"Response generation stopped due to: {self.reason}"
        return f"Response blocked due to: {self.reason}"

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message}

    def raise_for_outcome(self) -> None:
        raise GenerationBlockedError(self.message)


@dataclass(frozen=True)
class Failed:
    """Generation failed or produced nothing usable."""

    error: str

    status_code = 500
    ok = False

    @property
    def message(self) -> str:
        if self.error == EMPTY_RESPONSE:
            return "AI returned an empty response."
        return "Failed to get AI response"

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message}
        if self.error != EMPTY_RESPONSE:
            payload["error"] = self.error
        return payload

    def raise_for_outcome(self) -> None:
        raise GenerationFailedError(f"{self.message}: {self.error}")


AssistantOutcome = Answered | PartialAnswer | Blocked | Failed


def normalize_response(result: GenerationResult) -> AssistantOutcome:
    """Interpret a generation result. Total over every field combination."""
    if result.text and result.text.strip():
        return Answered(result.text)

    if result.block_reason:
        logger.warning(f"Generation blocked: {result.block_reason}")
        return Blocked(result.block_reason, stage="prompt")

    if not is_stop_reason(result.finish_reason):
        logger.warning(f"Generation finish reason: {result.finish_reason}")
        return Blocked(str(result.finish_reason), stage="finish")

    if result.partial_text and result.partial_text.strip():
        logger.info("Returning partial response from generation backend")
        return PartialAnswer(result.partial_text)

    logger.error("Generation backend returned an empty response")
    return Failed(EMPTY_RESPONSE)
