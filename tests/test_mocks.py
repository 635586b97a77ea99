"""Test the mock AI client."""
import pytest

from squashmaster.ai.mock import MockAIClient
from squashmaster.core.config import SquashConfig
from squashmaster.core.types import CommitRecord


class TestMockAIClient:
    """Test deterministic message suggestions."""

    def setup_method(self):
        self.client = MockAIClient(SquashConfig(subject_line_limit=20))

    @pytest.mark.asyncio
    async def test_combines_subjects(self):
        commits = [
            CommitRecord("a1", "Ann", "Add eviction"),
            CommitRecord("b2", "Bob", "Add cache\n\nwith a body"),
        ]

        message = await self.client.suggest_message(commits)

        assert message == "Add eviction\n\n- Add cache"

    @pytest.mark.asyncio
    async def test_long_subject_is_truncated(self):
        commits = [CommitRecord("a1", "Ann", "Implement a very long subject line here")]

        message = await self.client.suggest_message(commits)

        assert message == "Implement a very ..."
        assert len(message) == 20

    @pytest.mark.asyncio
    async def test_empty(self):
        assert await self.client.suggest_message([]) == ""
