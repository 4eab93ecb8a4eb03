"""CLI commands for roocode-generator."""

from . import config, llm

__all__ = ["config", "llm"]
