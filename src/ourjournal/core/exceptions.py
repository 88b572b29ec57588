"""
ourjournal exception hierarchy.

All ourjournal exceptions inherit from OurJournalError, making it easy for
consumers to catch library-level errors while still distinguishing specific
failure modes.
"""


class OurJournalError(Exception):
    """Base exception class for all ourjournal errors."""


class ConfigurationError(OurJournalError):
    """Raised for configuration errors (missing keys, invalid values)."""


class InputError(OurJournalError):
    """Raised for invalid assistant requests (empty question, unknown author)."""


class RetrievalError(OurJournalError):
    """Raised by entry stores when a query cannot be executed."""


class APIError(OurJournalError):
    """Raised for API communication errors."""


class LLMError(APIError):
    """Raised for LLM API errors."""


class GenerationBlockedError(LLMError):
    """Raised when the generation backend blocked or stopped the response."""


class GenerationFailedError(LLMError):
    """Raised when generation failed or produced no usable text."""
