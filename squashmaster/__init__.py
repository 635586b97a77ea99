"""
SquashMaster

Collapse a run of git commits into one, optionally renaming the result and
pushing the rewritten history.
"""

__version__ = "1.0.0"

from .core.config import SquashConfig
from .core.types import CommitRecord, SquashPlan, RemoteState, SelectionMode, PushOutcome
from .git.operations import GitOperations
from .git.rewrite import RewriteExecutor
from .git.remote import RemoteSyncGuard
from .ai.interface import AIClient
from .ai.claude import ClaudeClient
from .ai.mock import MockAIClient
from .ui.console import ConsoleUI
from .tool import SquashTool

__all__ = [
    "SquashConfig",
    "CommitRecord",
    "SquashPlan",
    "RemoteState",
    "SelectionMode",
    "PushOutcome",
    "GitOperations",
    "RewriteExecutor",
    "RemoteSyncGuard",
    "AIClient",
    "ClaudeClient",
    "MockAIClient",
    "ConsoleUI",
    "SquashTool"
]
