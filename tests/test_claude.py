"""Tests for the Claude AI client using the anthropic library."""
import httpx
import pytest
import anthropic
from unittest.mock import Mock, patch, AsyncMock

from squashmaster.ai.claude import ClaudeClient
from squashmaster.core.config import SquashConfig
from squashmaster.core.types import CommitRecord


def make_response(text: str):
    """Build an object shaped like an anthropic Message."""
    return Mock(
        content=[Mock(type="text", text=text)],
        usage=Mock(input_tokens=100, output_tokens=50),
    )


class TestClaudeClientInitialization:
    """Test Claude client initialization and configuration."""

    @patch.dict('os.environ', {'ANTHROPIC_API_KEY': 'test-key'})
    @patch('squashmaster.ai.claude.AsyncAnthropic')
    def test_init_with_env_api_key(self, mock_anthropic_class):
        client = ClaudeClient()

        assert client.api_key == 'test-key'
        mock_anthropic_class.assert_called_once_with(
            api_key='test-key',
            max_retries=3,
            timeout=30.0
        )

    @patch('squashmaster.ai.claude.AsyncAnthropic')
    def test_init_with_provided_api_key(self, mock_anthropic_class):
        client = ClaudeClient(api_key='provided-key')

        assert client.api_key == 'provided-key'

    @patch.dict('os.environ', {}, clear=True)
    def test_init_without_api_key_raises(self):
        with pytest.raises(ValueError, match="ANTHROPIC_API_KEY must be set"):
            ClaudeClient()


class TestClaudeClientSuggestions:
    """Test message suggestions."""

    def setup_method(self):
        self.config = SquashConfig()
        self.commits = [
            CommitRecord("aaa1111", "Ann Lee", "Add cache eviction"),
            CommitRecord("bbb2222", "Bob Stone", "Fix memory leak in cache cleanup"),
            CommitRecord("ccc3333", "Ann Lee", "Add cache layer"),
        ]

    def make_client(self, mock_anthropic_class, **create_kwargs):
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(**create_kwargs)
        mock_anthropic_class.return_value = mock_client
        return ClaudeClient(api_key='test-key', config=self.config), mock_client

    @patch('squashmaster.ai.claude.AsyncAnthropic')
    @pytest.mark.asyncio
    async def test_suggest_message_success(self, mock_anthropic_class):
        client, mock_client = self.make_client(
            mock_anthropic_class,
            return_value=make_response(
                "Sure.\n<commit-message>\nAdd cache layer with eviction\n\n"
                "- fix memory leak in cleanup\n</commit-message>"))

        message = await client.suggest_message(self.commits)

        assert message == "Add cache layer with eviction\n\n- fix memory leak in cleanup"
        call_args = mock_client.messages.create.call_args
        assert call_args.kwargs['model'] == self.config.model
        assert call_args.kwargs['max_tokens'] == self.config.max_tokens
        prompt = call_args.kwargs['messages'][0]['content']
        assert "Fix memory leak in cache cleanup (Bob Stone)" in prompt
        assert client.get_usage_stats() == {'requests': 1, 'total_tokens': 150}

    @patch('squashmaster.ai.claude.AsyncAnthropic')
    @pytest.mark.asyncio
    async def test_untagged_response_falls_back(self, mock_anthropic_class):
        client, _ = self.make_client(
            mock_anthropic_class, return_value=make_response("Add cache layer"))

        assert await client.suggest_message(self.commits) == "Add cache eviction"

    @patch('squashmaster.ai.claude.AsyncAnthropic')
    @pytest.mark.asyncio
    async def test_connection_error_falls_back(self, mock_anthropic_class):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        client, _ = self.make_client(
            mock_anthropic_class,
            side_effect=anthropic.APIConnectionError(request=request))

        assert await client.suggest_message(self.commits) == "Add cache eviction"
        assert client.get_usage_stats()['requests'] == 0

    @patch('squashmaster.ai.claude.AsyncAnthropic')
    @pytest.mark.asyncio
    async def test_no_commits(self, mock_anthropic_class):
        client, mock_client = self.make_client(mock_anthropic_class)

        assert await client.suggest_message([]) == ""
        mock_client.messages.create.assert_not_called()
