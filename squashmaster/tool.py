"""Main squash pipeline implementation."""

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Optional
from .core.config import SquashConfig
from .core.resolver import SelectionResolver
from .core.types import (
    CommitRecord, SquashPlan, SelectionMode, RewriteResult, PushOutcome,
    SquashInProgressError
)
from .git.operations import GitOperations
from .git.remote import RemoteSyncGuard
from .git.rewrite import RewriteExecutor
from .ai.interface import AIClient
from .ui.interface import ProgressReporter, UserInterface, LoggingProgress

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """What a full pipeline run did."""
    cancelled: bool = False
    plan: Optional[SquashPlan] = None
    rewrite: Optional[RewriteResult] = None
    push: Optional[PushOutcome] = None


class SquashTool:
    """Runs history read, selection, rewrite and remote sync in order."""

    def __init__(self,
                 git_ops: GitOperations,
                 config: Optional[SquashConfig] = None,
                 progress: Optional[ProgressReporter] = None,
                 ai_client: Optional[AIClient] = None):
        self.git_ops = git_ops
        self.config = config or git_ops.config
        self.progress = progress or LoggingProgress()
        self.ai_client = ai_client
        self.executor = RewriteExecutor(git_ops, self.config, self.progress)
        self.guard = RemoteSyncGuard(git_ops, self.config, self.progress)
        self._busy = False

    @contextmanager
    def _exclusive(self):
        # two rewrites against one working copy corrupt it
        if self._busy:
            raise SquashInProgressError("A squash is already running for this repository")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    async def load_history(self) -> List[CommitRecord]:
        """Read the commit log, newest first."""
        return await asyncio.to_thread(self.git_ops.list_commits)

    def plan_from_selection(self, history: List[CommitRecord],
                            selected: Iterable[CommitRecord],
                            message: Optional[str] = None) -> SquashPlan:
        return SelectionResolver(history).from_selection(selected, message)

    def plan_from_boundary(self, history: List[CommitRecord],
                           boundary: CommitRecord,
                           message: Optional[str] = None) -> SquashPlan:
        return SelectionResolver(history).from_boundary(boundary, message)

    async def suggest_message(self, commits: List[CommitRecord]) -> str:
        """Default message for the squashed commit."""
        if self.ai_client is None:
            return commits[0].message
        suggestion = await self.ai_client.suggest_message(commits)
        return suggestion or commits[0].message

    async def execute(self, plan: SquashPlan, strategy: Optional[str] = None) -> RewriteResult:
        """Rewrite history for a resolved plan."""
        with self._exclusive():
            return await self._execute(plan, strategy)

    async def sync_remote(self, confirm: Callable[[str], bool]) -> PushOutcome:
        """Publish or force-push the current branch."""
        with self._exclusive():
            return await asyncio.to_thread(self.guard.sync, confirm)

    async def _execute(self, plan: SquashPlan, strategy: Optional[str]) -> RewriteResult:
        logger.info("Executing squash plan: %s", plan.summary_stats())
        return await asyncio.to_thread(self.executor.execute, plan, strategy)

    async def run(self, ui: UserInterface,
                  mode: SelectionMode = SelectionMode.BOUNDARY,
                  message: Optional[str] = None,
                  strategy: Optional[str] = None) -> PipelineResult:
        """Drive the interactive pipeline; declining any prompt stops it."""
        with self._exclusive():
            history = await self.load_history()

            if mode is SelectionMode.EXPLICIT:
                selected = ui.select_commits(history)
                if not selected:
                    return PipelineResult(cancelled=True)
                plan = self.plan_from_selection(history, selected, message)
            else:
                boundary = ui.select_boundary(history)
                if boundary is None:
                    return PipelineResult(cancelled=True)
                plan = self.plan_from_boundary(history, boundary, message)

            if message is None:
                default = await self.suggest_message(list(plan.ordered_commits))
                entered = ui.prompt_message(default)
                if entered is None:
                    return PipelineResult(cancelled=True, plan=plan)
                plan = replace(plan, result_message=entered or default)

            rewrite = await self._execute(plan, strategy)
            subject = plan.result_message.split('\n', 1)[0]
            ui.info(f"All {plan.count} commits squashed into '{subject}'")

            if not ui.offer_push(f"Squashed into {rewrite.new_head}."):
                return PipelineResult(plan=plan, rewrite=rewrite)

            outcome = await asyncio.to_thread(self.guard.sync, ui.confirm)
            if outcome is PushOutcome.ABORTED:
                ui.info("Push cancelled; the remote was not changed")
            else:
                ui.info(f"Pushed to {self.config.remote_name} ({outcome.value})")
            return PipelineResult(plan=plan, rewrite=rewrite, push=outcome)
