"""
LLM Configuration — model constants and token limits.

Central configuration for the generation backend. Change defaults here
to affect every module that uses ourjournal's LLM client.
"""

import os

from ourjournal.core.exceptions import ConfigurationError

# --- Default model names per provider ---

LOCAL_MODEL = "ollama/llama3.1"
GOOGLE_MODEL = "gemini/gemini-1.5-flash"
OPENAI_MODEL = "gpt-4o-mini"
ANTHROPIC_MODEL = "anthropic/claude-sonnet-4-20250514"

DEFAULT_MODEL = GOOGLE_MODEL

# --- Output token limits ---
# These are OUTPUT token limits (how many tokens the model can generate).
# Keys are matched with partial string matching, so "gpt-4o" matches "gpt-4o-mini".

MODEL_OUTPUT_TOKEN_LIMITS: dict[str, int] = {
    # OpenAI
    "gpt-4o": 16_384,
    "gpt-4": 4_096,
    # Anthropic
    "claude-sonnet-4": 8_192,
    "claude-haiku": 4_096,
    # Google Gemini
    "gemini-2.5": 65_536,
    "gemini-2.0": 8_192,
    "gemini-1.5": 8_192,
}

PROVIDER_ENV_MAP: dict[str, str] = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

PROVIDER_DEFAULT_LIMITS: dict[str, int] = {
    "openai": 4_096,
    "anthropic": 4_096,
    "gemini": 8_192,
    "local": 8_192,
}


def get_default_model(provider: str) -> str:
    """Get the default litellm model string for a provider."""
    model_map = {
        "anthropic": ANTHROPIC_MODEL,
        "openai": OPENAI_MODEL,
        "gemini": GOOGLE_MODEL,
        "local": LOCAL_MODEL,
    }
    return model_map.get(provider, DEFAULT_MODEL)


def get_model_max_tokens(model_name: str, provider: str | None = None) -> int:
    """Get the max output tokens for a model using partial string matching."""
    if model_name in MODEL_OUTPUT_TOKEN_LIMITS:
        return MODEL_OUTPUT_TOKEN_LIMITS[model_name]

    for model_key, limit in MODEL_OUTPUT_TOKEN_LIMITS.items():
        if model_key in model_name:
            return limit

    if provider and provider in PROVIDER_DEFAULT_LIMITS:
        return PROVIDER_DEFAULT_LIMITS[provider]

    return 4096


def infer_provider(model_name: str) -> str:
    """Infer provider from a litellm model string."""
    # Prefix-based (most reliable)
    if model_name.startswith("anthropic/"):
        return "anthropic"
    if model_name.startswith("gemini/"):
        return "gemini"
    if model_name.startswith("ollama/"):
        return "local"
    # Substring-based fallbacks
    if "claude" in model_name:
        return "anthropic"
    if "gemini" in model_name:
        return "gemini"
    return "openai"


def require_api_key(model_name: str) -> None:
    """Fail fast when the provider's API key env var is missing.

    Local models need no key.

    Raises:
        ConfigurationError: If the key is not set.
    """
    env_var = PROVIDER_ENV_MAP.get(infer_provider(model_name))
    if env_var and not os.environ.get(env_var):
        raise ConfigurationError(f"{env_var} environment variable is not defined (needed for {model_name})")
