"""Abstract interfaces for the host that drives the squash pipeline."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from ..core.types import CommitRecord

logger = logging.getLogger(__name__)


class ProgressReporter(ABC):
    """Receives approximate progress of long-running steps."""

    @abstractmethod
    def report(self, percent: int, message: str) -> None:
        """Report progress.

        Args:
            percent: Approximate completion, 0-100
            message: Short description of the current step
        """
        pass


class LoggingProgress(ProgressReporter):
    """Progress reporter that only logs."""

    def report(self, percent: int, message: str) -> None:
        logger.info("[%3d%%] %s", percent, message)


class UserInterface(ABC):
    """Interactive surface: pickers, prompts and notifications.

    Selectors and prompts return None when the user cancels.
    """

    @abstractmethod
    def select_commits(self, commits: Sequence[CommitRecord]) -> Optional[List[CommitRecord]]:
        """Let the user pick several commits to squash."""
        pass

    @abstractmethod
    def select_boundary(self, commits: Sequence[CommitRecord]) -> Optional[CommitRecord]:
        """Let the user pick the oldest commit to include."""
        pass

    @abstractmethod
    def prompt_message(self, default: str) -> Optional[str]:
        """Ask for the squashed commit message.

        Returns:
            The message, an empty string to accept ``default``, or None to cancel
        """
        pass

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask for explicit confirmation of a destructive action."""
        pass

    @abstractmethod
    def offer_push(self, message: str) -> bool:
        """Offer to push after a successful local squash."""
        pass

    @abstractmethod
    def info(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass
