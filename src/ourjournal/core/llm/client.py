"""
LLM Client — generation backend for the journal assistant via LiteLLM.

Sends one assembled prompt to a model (Gemini by default, any litellm
provider works) and reduces the provider response to a ``GenerationResult``
the assistant's response normalizer can interpret.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from .config import DEFAULT_MODEL, get_default_model, get_model_max_tokens, infer_provider
from .utils import extract_text_from_response, read_field

STOP_REASON = "stop"
CONTENT_POLICY_REASON = "content policy violation"


def is_stop_reason(reason: str | None) -> bool:
    """A missing or blank finish reason counts as a normal stop."""
    if reason is None or not str(reason).strip():
        return True
    return str(reason).strip().lower() == STOP_REASON


@dataclass(frozen=True)
class GenerationResult:
    """What the generation backend produced for one prompt.

    Attributes:
        text: Finished answer text, if the model completed normally.
        block_reason: Why the prompt itself was blocked (safety/policy).
        finish_reason: Per-candidate termination reason; "stop" is normal.
        partial_text: A candidate fragment returned without finished text.
    """

    text: str | None = None
    block_reason: str | None = None
    finish_reason: str | None = None
    partial_text: str | None = None


class LLMClient:
    """
    Single-prompt LLM client backed by LiteLLM.

    Model names follow litellm conventions:
      - Gemini:    ``"gemini/gemini-1.5-flash"``
      - OpenAI:    ``"gpt-4o-mini"``
      - Anthropic: ``"anthropic/claude-sonnet-4-20250514"``
      - Local:     ``"ollama/llama3.1"``
    """

    def __init__(
        self,
        model: str | None = None,
        provider: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        timeout: int = 60,
        num_retries: int = 2,
        fallback_model: str | None = None,
        fallback_provider: str | None = None,
    ):
        # Resolve model ─ accept either (model=) or (provider=) style
        if model:
            self.model = model
            self.provider = provider or infer_provider(model)
        elif provider:
            self.provider = provider
            self.model = get_default_model(provider)
        else:
            self.model = DEFAULT_MODEL
            self.provider = infer_provider(DEFAULT_MODEL)

        self.temperature = temperature
        self.timeout = timeout
        self.num_retries = num_retries

        self.fallback_model = fallback_model
        self.fallback_provider = fallback_provider or (infer_provider(fallback_model) if fallback_model else None)

        model_limit = get_model_max_tokens(self.model, self.provider)
        if max_tokens is not None and max_tokens > model_limit:
            logger.warning(f"max_tokens ({max_tokens}) exceeds model limit ({model_limit}). Capping.")
            self.max_tokens = model_limit
        else:
            self.max_tokens = max_tokens or model_limit

        logger.debug(f"LLMClient: model={self.model}  max_tokens={self.max_tokens}")
        if self.fallback_model:
            logger.debug(f"LLMClient: fallback={self.fallback_model}")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate(self, prompt: str) -> GenerationResult:
        """Send ``prompt`` as a single user message and classify the reply.

        A provider content-policy refusal comes back as a blocked result
        rather than an exception.

        Raises:
            Exception: Transport and provider errors propagate; the caller
                turns them into a failed outcome.
        """
        import litellm

        try:
            response = await self.acompletion([{"role": "user", "content": prompt}])
        except litellm.ContentPolicyViolationError as e:
            logger.warning(f"{self.model} refused the prompt: {e}")
            return GenerationResult(block_reason=CONTENT_POLICY_REASON)
        return self.to_generation_result(response)

    async def acompletion(self, messages: list[dict[str, Any]]) -> Any:
        """Call litellm.acompletion, retrying once on the fallback model.

        Only rate-limit, API and connection errors trigger the fallback.
        """
        try:
            import litellm
        except ImportError:
            raise ImportError("Install LLM support with: pip install litellm") from None

        kwargs = self._build_completion_kwargs(messages)
        try:
            return await litellm.acompletion(**kwargs)
        except (litellm.RateLimitError, litellm.APIError, litellm.APIConnectionError) as e:
            if not self.fallback_model:
                raise
            logger.warning(
                f"Primary model {self.model} failed ({type(e).__name__}), falling back to {self.fallback_model}"
            )
            fallback_limit = get_model_max_tokens(self.fallback_model, self.fallback_provider)
            kwargs["model"] = self.fallback_model
            kwargs["max_tokens"] = min(kwargs["max_tokens"], fallback_limit)
            return await litellm.acompletion(**kwargs)

    @staticmethod
    def to_generation_result(response: Any) -> GenerationResult:
        """Reduce a litellm (OpenAI-shaped) response to a GenerationResult.

        String content with a normal stop becomes finished text. Content
        that arrives with another finish reason, or only as content blocks,
        is kept as a partial fragment.
        """
        block_reason = read_field(read_field(response, "prompt_feedback"), "block_reason")
        block_reason = str(block_reason) if block_reason else None

        choices = read_field(response, "choices") or []
        if not choices:
            return GenerationResult(block_reason=block_reason)

        choice = choices[0]
        finish_reason = read_field(choice, "finish_reason")
        finish_reason = str(finish_reason) if finish_reason else None
        content = read_field(read_field(choice, "message"), "content")

        text = partial = None
        if isinstance(content, str):
            if content.strip() and is_stop_reason(finish_reason):
                text = content
            elif content.strip():
                partial = content
        else:
            partial = extract_text_from_response(content).strip() or None

        return GenerationResult(
            text=text,
            block_reason=block_reason,
            finish_reason=finish_reason,
            partial_text=partial,
        )

    def get_config_info(self) -> dict:
        info = {
            "provider": self.provider,
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "timeout": self.timeout,
        }
        if self.fallback_model:
            info["fallback_model"] = self.fallback_model
            info["fallback_provider"] = self.fallback_provider
        return info

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _build_completion_kwargs(self, messages: list[dict[str, Any]]) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "num_retries": self.num_retries,
        }
