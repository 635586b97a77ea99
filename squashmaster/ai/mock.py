"""Mock AI client for testing."""

import logging
from typing import Sequence
from .interface import AIClient
from ..core.types import CommitRecord
from ..core.config import SquashConfig

logger = logging.getLogger(__name__)


class MockAIClient(AIClient):
    """Mock AI client that combines the folded commit subjects."""

    def __init__(self, config: SquashConfig = None):
        self.config = config or SquashConfig()

    async def suggest_message(self, commits: Sequence[CommitRecord]) -> str:
        """Newest subject, then one bullet per older commit."""
        logger.debug("Generating mock message for %d commits", len(commits))
        if not commits:
            return ""

        subject = commits[0].subject
        if len(subject) > self.config.subject_line_limit:
            subject = subject[:self.config.subject_line_limit - 3] + "..."

        body = [f"- {commit.subject}" for commit in commits[1:]]
        if not body:
            return subject
        return subject + "\n\n" + "\n".join(body)
