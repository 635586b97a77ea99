"""AI clients for drafting squashed commit messages."""

from .interface import AIClient
from .claude import ClaudeClient
from .mock import MockAIClient

__all__ = ["AIClient", "ClaudeClient", "MockAIClient"]
