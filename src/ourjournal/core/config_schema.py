"""Pydantic models for config validation.

Call ``Config.validated()`` to obtain a typed, validated ``AppConfig``
instance. Dict-based ``Config.get`` access keeps working unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ourjournal.core.llm.config import DEFAULT_MODEL
from ourjournal.journal.config import (
    DEFAULT_ALL_AUTHORS_SIGNALS,
    DEFAULT_RECAP_PHRASES,
    DEFAULT_STOP_WORDS,
    KeywordConfig,
    RetrievalConfig,
)


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    entries: Path | None = None
    log_dir: Path | None = None

    @field_validator("data_dir", "entries", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class LLMConfig(BaseModel):
    """Generation backend settings."""

    model: str = DEFAULT_MODEL
    fallback_model: str | None = None
    temperature: float = 0.7
    max_tokens: int | None = None
    timeout: int = 60
    num_retries: int = 2

    @field_validator("fallback_model", "max_tokens", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        return None if v == "" else v


class AssistantConfig(BaseModel):
    """Retrieval, keyword and timeout knobs for the journal assistant."""

    history_window: int = Field(default=6, ge=0)
    store_timeout: float | None = 10.0
    generation_timeout: float | None = 90.0
    date_limit: int = Field(default=15, ge=1)
    keyword_limit: int = Field(default=10, ge=1)
    recap_limit_per_author: int = Field(default=5, ge=1)
    latest_limit: int = Field(default=1, ge=1)
    min_keyword_length: int = Field(default=3, ge=0)
    stop_words: list[str] | None = None
    extra_stop_words: list[str] = []
    recap_phrases: list[str] = list(DEFAULT_RECAP_PHRASES)
    all_authors_signals: list[str] = list(DEFAULT_ALL_AUTHORS_SIGNALS)

    @field_validator("stop_words", "extra_stop_words", "recap_phrases", "all_authors_signals", mode="before")
    @classmethod
    def _split_csv(cls, v: Any) -> Any:
        # Env var overrides arrive as comma-separated strings
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    def to_keyword_config(self) -> KeywordConfig:
        base = set(self.stop_words) if self.stop_words is not None else set(DEFAULT_STOP_WORDS)
        words = frozenset(w.lower() for w in base | set(self.extra_stop_words))
        return KeywordConfig(stop_words=words, min_length=self.min_keyword_length)

    def to_retrieval_config(self) -> RetrievalConfig:
        return RetrievalConfig(
            date_limit=self.date_limit,
            keyword_limit=self.keyword_limit,
            recap_limit_per_author=self.recap_limit_per_author,
            latest_limit=self.latest_limit,
            recap_phrases=tuple(p.lower() for p in self.recap_phrases),
            all_authors_signals=tuple(s.lower() for s in self.all_authors_signals),
            store_timeout=self.store_timeout,
        )


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    file: str | None = None


class AppConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so consumers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.ourjournal-data"))
    llm: LLMConfig = LLMConfig()
    assistant: AssistantConfig = AssistantConfig()
    logging: LoggingConfig = LoggingConfig()
