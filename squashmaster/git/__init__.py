"""Git backend: history reading, rewriting and pushing."""

from .operations import GitOperations
from .rewrite import RewriteExecutor, build_rebase_instructions, render_todo
from .remote import RemoteSyncGuard, GuardState

__all__ = [
    "GitOperations", "RewriteExecutor", "build_rebase_instructions", "render_todo",
    "RemoteSyncGuard", "GuardState"
]
