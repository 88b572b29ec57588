"""
LLM client and utilities — powered by LiteLLM.
"""

from .client import CONTENT_POLICY_REASON, STOP_REASON, GenerationResult, LLMClient, is_stop_reason
from .config import (
    DEFAULT_MODEL,
    MODEL_OUTPUT_TOKEN_LIMITS,
    PROVIDER_ENV_MAP,
    get_default_model,
    get_model_max_tokens,
    infer_provider,
    require_api_key,
)
from .utils import extract_text_from_response

__all__ = [
    "CONTENT_POLICY_REASON",
    "DEFAULT_MODEL",
    "MODEL_OUTPUT_TOKEN_LIMITS",
    "PROVIDER_ENV_MAP",
    "STOP_REASON",
    "GenerationResult",
    "LLMClient",
    "extract_text_from_response",
    "get_default_model",
    "get_model_max_tokens",
    "infer_provider",
    "is_stop_reason",
    "require_api_key",
]
