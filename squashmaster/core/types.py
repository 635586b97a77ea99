"""Type definitions for the squash tool."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class SelectionMode(Enum):
    """How the user chose the commits to squash."""
    EXPLICIT = "explicit"
    BOUNDARY = "boundary"


class PushOutcome(Enum):
    """Result of a remote sync attempt."""
    PUBLISHED = "published"
    FORCE_PUSHED = "force-pushed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class CommitRecord:
    """A single entry of the commit log."""
    id: str  # short hash
    author: str
    message: str

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split('\n', 1)[0]

    def __str__(self) -> str:
        return f"{self.id} {self.author} {self.subject}"


@dataclass(frozen=True)
class SquashPlan:
    """Commits to fold into one, newest first."""
    ordered_commits: Tuple[CommitRecord, ...]
    reset_target: Optional[CommitRecord]
    result_message: str
    mode: SelectionMode
    # newer commits above the selection that are replayed unchanged
    preserved_commits: Tuple[CommitRecord, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        """Number of commits folded into the result."""
        return len(self.ordered_commits)

    @property
    def newest(self) -> CommitRecord:
        return self.ordered_commits[0]

    @property
    def oldest(self) -> CommitRecord:
        return self.ordered_commits[-1]

    @property
    def includes_head(self) -> bool:
        """Whether the selection starts at the branch tip."""
        return not self.preserved_commits

    def summary_stats(self) -> str:
        """Get summary statistics as string."""
        target = self.reset_target.id if self.reset_target else "root"
        return f"{self.count} commits → 1 commit on top of {target}"


@dataclass(frozen=True)
class RemoteState:
    """Remote tracking state of the current branch."""
    branch_name: str
    has_upstream: bool
    remote_name: str = "origin"
    upstream: Optional[str] = None


@dataclass(frozen=True)
class RebaseInstruction:
    """One line of an interactive rebase script."""
    action: str
    commit_id: str
    message: str

    def __str__(self) -> str:
        # todo lines cannot span lines
        subject = self.message.split('\n', 1)[0]
        return f"{self.action} {self.commit_id} {subject}"


@dataclass(frozen=True)
class RewriteResult:
    """Outcome of a successful rewrite."""
    plan: SquashPlan
    strategy: str
    new_head: str


class SquashError(Exception):
    """Base exception for squash operations."""
    pass


class NoWorkspaceError(SquashError):
    """Raised when no repository directory is available."""
    pass


class GitOperationError(SquashError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(self, message: str, output: str = "", returncode: Optional[int] = None):
        super().__init__(message)
        self.output = output
        self.returncode = returncode


class BackendUnavailableError(SquashError):
    """Raised when git cannot run or the path is not a repository."""
    pass


class EmptyHistoryError(SquashError):
    """Raised when the repository has no commits."""
    pass


class InsufficientSelectionError(SquashError):
    """Raised when a selection leaves fewer than two commits to squash."""
    pass


class NonContiguousSelectionError(InsufficientSelectionError):
    """Raised when selected commits are not a consecutive run of the log."""
    pass


class UnknownCommitError(SquashError):
    """Raised when a selected commit is not part of the log."""
    pass


class RewriteRefusedError(SquashError):
    """Raised when a rewrite cannot start; the repository is untouched."""
    pass


class RewriteFailedError(SquashError):
    """Raised when git fails during a rewrite."""

    def __init__(self, output: str, strategy: str = ""):
        self.output = output
        self.strategy = strategy
        super().__init__(
            f"Squash failed{f' ({strategy})' if strategy else ''}: {output.strip() or 'no output'}\n"
            "The repository may be left in the middle of a rewrite. Inspect it manually "
            "with 'git status' (and 'git rebase --abort' if a rebase is in progress)."
        )


class BranchUnresolvedError(SquashError):
    """Raised when the current branch name cannot be determined."""
    pass


class PushFailedError(SquashError):
    """Raised when pushing to the remote fails."""

    def __init__(self, output: str, branch_name: str = ""):
        self.output = output
        self.branch_name = branch_name
        super().__init__(
            f"Push of '{branch_name}' failed: {output.strip() or 'no output'}\n"
            "The local squash is kept."
        )


class SquashInProgressError(SquashError):
    """Raised when a second rewrite starts while one is in flight."""
    pass
