"""Publishing and force-pushing rewritten history."""

import logging
from enum import Enum
from typing import Callable, List, Optional
from ..core.config import SquashConfig
from ..core.types import (
    RemoteState, PushOutcome, GitOperationError,
    BranchUnresolvedError, PushFailedError
)
from ..ui.interface import ProgressReporter, LoggingProgress
from .operations import GitOperations

logger = logging.getLogger(__name__)


class GuardState(Enum):
    """States of a single push attempt."""
    START = "start"
    NO_BRANCH = "no-branch"
    UNPUBLISHED = "unpublished"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    CONFIRM_PENDING = "confirm-pending"
    FORCE_PUSHING = "force-pushing"
    DONE = "done"
    ABORTED = "aborted"


def overwrite_warning(branch_name: str) -> str:
    return (
        "Be advised - This action will overwrite the commit history of your remote "
        f"repository, which might impact other developers who depend on the '{branch_name}' branch"
    )


class RemoteSyncGuard:
    """Pushes the current branch, asking before rewriting published history."""

    def __init__(self, git_ops: GitOperations,
                 config: Optional[SquashConfig] = None,
                 progress: Optional[ProgressReporter] = None):
        self.git_ops = git_ops
        self.config = config or git_ops.config
        self.progress = progress or LoggingProgress()
        self.state = GuardState.START
        self.transitions: List[GuardState] = []

    def _transition(self, state: GuardState) -> None:
        logger.debug("Remote sync: %s -> %s", self.state.value, state.value)
        self.state = state
        self.transitions.append(state)

    def inspect(self) -> RemoteState:
        """Read the live tracking state of the current branch."""
        branch = self.git_ops.get_current_branch()
        if not branch:
            raise BranchUnresolvedError(
                "Unable to retrieve current branch; HEAD may be detached")

        remote = self.config.remote_name
        upstream = self.git_ops.get_upstream()
        # tracking config can be missing while the remote branch exists
        has_upstream = bool(upstream) or \
            f"refs/remotes/{remote}/{branch}" in self.git_ops.list_remote_refs()

        state = RemoteState(branch_name=branch, has_upstream=has_upstream,
                            remote_name=remote, upstream=upstream)
        logger.debug("Remote state: %s", state)
        return state

    def sync(self, confirm: Callable[[str], bool]) -> PushOutcome:
        """Publish or force-push the current branch.

        Args:
            confirm: Called with the overwrite warning; only True proceeds

        Returns:
            What happened on the remote
        """
        self.state = GuardState.START
        self.transitions = []

        try:
            remote_state = self.inspect()
        except BranchUnresolvedError:
            self._transition(GuardState.NO_BRANCH)
            raise

        if not remote_state.has_upstream:
            self._transition(GuardState.UNPUBLISHED)
            self._publish(remote_state)
            self._transition(GuardState.DONE)
            return PushOutcome.PUBLISHED

        self._transition(GuardState.PUBLISHED)
        self._transition(GuardState.CONFIRM_PENDING)
        if confirm(overwrite_warning(remote_state.branch_name)) is not True:
            logger.info("Force push of %s declined", remote_state.branch_name)
            self._transition(GuardState.ABORTED)
            return PushOutcome.ABORTED

        self._force_push(remote_state)
        self._transition(GuardState.DONE)
        return PushOutcome.FORCE_PUSHED

    def _publish(self, remote_state: RemoteState) -> None:
        self._transition(GuardState.PUBLISHING)
        self.progress.report(0, "Publishing branch in remote and pushing changes...")
        try:
            self.git_ops.push(remote_state.remote_name, remote_state.branch_name,
                              set_upstream=True)
        except GitOperationError as e:
            raise PushFailedError(e.output or str(e), remote_state.branch_name) from e
        self.progress.report(100, f"Branch '{remote_state.branch_name}' has been published and pushed")

    def _force_push(self, remote_state: RemoteState) -> None:
        self._transition(GuardState.FORCE_PUSHING)
        self.progress.report(0, "Pushing to remote branch...")
        try:
            self.git_ops.push(remote_state.remote_name, remote_state.branch_name,
                              force=True)
        except GitOperationError as e:
            raise PushFailedError(e.output or str(e), remote_state.branch_name) from e
        self.progress.report(100, f"Changes have been pushed to '{remote_state.branch_name}' branch")
