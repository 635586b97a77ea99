"""Abstract interface for AI clients."""

from abc import ABC, abstractmethod
from typing import Sequence
from ..core.types import CommitRecord


class AIClient(ABC):
    """Abstract interface for AI providers that draft squashed commit messages."""

    @abstractmethod
    async def suggest_message(self, commits: Sequence[CommitRecord]) -> str:
        """Suggest a message for the commit that replaces ``commits``.

        Args:
            commits: The commits being folded, newest first

        Returns:
            Commit message following Git conventions
        """
        pass
