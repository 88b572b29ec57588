"""Text processing utilities: possessives, punctuation, keyword tokens."""

import re

_POSSESSIVE_RE = re.compile(r"(\w)['’]s\b")
_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def strip_possessives(text: str) -> str:
    """Turn ``shreya's`` into ``shreya`` so names survive punctuation stripping."""
    if not text:
        return ""
    return _POSSESSIVE_RE.sub(r"\1", text)


def extract_keywords(
    text: str,
    stop_words: frozenset[str] | set[str] = frozenset(),
    min_length: int = 3,
) -> list[str]:
    """Extract keyword tokens strictly longer than ``min_length``.

    Lowercases, drops possessives and punctuation, removes stop words, and
    deduplicates while keeping first-seen order.
    """
    if not text or not isinstance(text, str):
        return []
    cleaned = _PUNCTUATION_RE.sub(" ", strip_possessives(text.lower()))
    seen: dict[str, None] = {}
    for word in cleaned.split():
        if len(word) > min_length and word not in stop_words:
            seen.setdefault(word, None)
    return list(seen)


def truncate_text(text: str, max_length: int = 100, ellipsis: str = "...") -> str:
    """Truncate text to max_length, appending ellipsis if truncated."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ellipsis)] + ellipsis
