"""Core functionality for the squash tool."""

from .config import SquashConfig
from .resolver import SelectionResolver
from .types import (
    CommitRecord, SquashPlan, RemoteState, RebaseInstruction, RewriteResult,
    SelectionMode, PushOutcome,
    SquashError, NoWorkspaceError, GitOperationError, BackendUnavailableError,
    EmptyHistoryError, InsufficientSelectionError, NonContiguousSelectionError,
    UnknownCommitError, RewriteRefusedError, RewriteFailedError,
    BranchUnresolvedError, PushFailedError, SquashInProgressError
)

__all__ = [
    "SquashConfig", "SelectionResolver",
    "CommitRecord", "SquashPlan", "RemoteState", "RebaseInstruction", "RewriteResult",
    "SelectionMode", "PushOutcome",
    "SquashError", "NoWorkspaceError", "GitOperationError", "BackendUnavailableError",
    "EmptyHistoryError", "InsufficientSelectionError", "NonContiguousSelectionError",
    "UnknownCommitError", "RewriteRefusedError", "RewriteFailedError",
    "BranchUnresolvedError", "PushFailedError", "SquashInProgressError"
]
