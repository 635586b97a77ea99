"""Claude AI client implementation."""
import os
import re
import logging
from typing import Optional, Sequence

import anthropic
from anthropic import AsyncAnthropic

from .interface import AIClient
from ..core.types import CommitRecord
from ..core.config import SquashConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = ("You are an AI assistant that writes focused, high-quality git commit "
                 "messages following the 50/72 rule.")

MESSAGE_PATTERN = re.compile(r'<commit-message>\s*(.*?)\s*</commit-message>', re.DOTALL)


class ClaudeClient(AIClient):
    """Claude AI client for drafting squashed commit messages."""

    def __init__(self, api_key: Optional[str] = None, config: Optional[SquashConfig] = None):
        self.api_key = api_key or os.environ.get('ANTHROPIC_API_KEY')
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY must be set")

        self.config = config or SquashConfig()
        self.client = AsyncAnthropic(
            api_key=self.api_key,
            max_retries=3,
            timeout=30.0
        )
        self._request_count = 0
        self._total_tokens_used = 0

    async def suggest_message(self, commits: Sequence[CommitRecord]) -> str:
        """Ask Claude for a message; fall back to the newest commit message."""
        if not commits:
            return ""
        fallback = commits[0].message
        logger.debug("Requesting message suggestion for %d commits", len(commits))

        prompt = f"""These {len(commits)} git commits (newest first) are being squashed into one:

{self._build_context(commits)}

Write one commit message for the combined change:
1. Subject line (max {self.config.subject_line_limit} chars), imperative mood, no period
2. Blank line
3. Short bullet list of the notable changes, only if there is more than one

Format your response exactly as:
<commit-message>
Your subject line here

- your body here
</commit-message>"""

        try:
            response = await self.client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=0.3,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}]
            )
        except anthropic.APIConnectionError as e:
            logger.error("Cannot connect to Claude: %s", e)
            return fallback
        except anthropic.RateLimitError as e:
            logger.error("Claude rate limit reached: %s", e)
            return fallback
        except anthropic.APIStatusError as e:
            logger.error("Claude API error %s: %s", e.status_code, e)
            return fallback
        except anthropic.APIError as e:
            logger.error("Claude API error: %s", e)
            return fallback

        self._request_count += 1
        usage = getattr(response, 'usage', None)
        if usage is not None:
            self._total_tokens_used += (usage.input_tokens or 0) + (usage.output_tokens or 0)

        text = ' '.join(
            block.text for block in response.content
            if getattr(block, 'type', None) == 'text'
        ).strip()

        match = MESSAGE_PATTERN.search(text)
        if not match or not match.group(1).strip():
            logger.warning("No valid commit message in Claude response")
            return fallback

        message = match.group(1).strip()
        logger.debug("Suggested message (%d chars)", len(message))
        return message

    def get_usage_stats(self) -> dict:
        """Request and token counters for this client."""
        return {
            'requests': self._request_count,
            'total_tokens': self._total_tokens_used,
        }

    def _build_context(self, commits: Sequence[CommitRecord]) -> str:
        """Build context string for the prompt."""
        lines = []
        # limit to prevent huge context
        for commit in commits[:30]:
            lines.append(f"- {commit.subject} ({commit.author})")
        if len(commits) > 30:
            lines.append(f"... and {len(commits) - 30} more")
        return '\n'.join(lines)
