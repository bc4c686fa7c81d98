"""Relay code-generation prompts to hosted LLMs and stream the output back as server-sent events."""

__version__ = "0.1.0"
