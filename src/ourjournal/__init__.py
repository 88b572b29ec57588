"""A two-author journal with a context-grounded assistant."""

__version__ = "0.1.0"
