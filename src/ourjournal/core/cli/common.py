"""Shared setup logic for CLI commands."""

from __future__ import annotations

from pathlib import Path

import yaml

from ourjournal.core.config import Config
from ourjournal.core.config_schema import LLMConfig
from ourjournal.core.exceptions import ConfigurationError
from ourjournal.core.llm import LLMClient, require_api_key

OURJOURNAL_DIR = Path.home() / ".ourjournal"
CONFIG_PATH = OURJOURNAL_DIR / "config.yaml"


def load_config(config_file: str | None = None) -> Config:
    """Load an explicit config file, else ~/.ourjournal/config.yaml if present."""
    if config_file:
        return Config(config_file=config_file)
    if CONFIG_PATH.exists():
        return Config(config_file=str(CONFIG_PATH))
    return Config()


def create_backend(llm: LLMConfig) -> LLMClient:
    """Build the LLM client, failing fast when its API key is missing."""
    require_api_key(llm.model)
    return LLMClient(
        model=llm.model,
        temperature=llm.temperature,
        max_tokens=llm.max_tokens,
        timeout=llm.timeout,
        num_retries=llm.num_retries,
        fallback_model=llm.fallback_model,
    )


def load_history(path: str | None) -> list[dict]:
    """Read prior turns from a YAML or JSON list of ``{sender, text}``."""
    if not path:
        return []
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or []
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse history file {path}: {e}") from e
    if not isinstance(data, list):
        raise ConfigurationError(f"History file {path} must contain a list of turns")
    return data
