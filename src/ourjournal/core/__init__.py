"""Shared infrastructure: configuration, exceptions, logging, LLM client."""
