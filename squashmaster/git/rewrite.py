"""Rewrite strategies that fold a squash plan into one commit."""

import logging
import shlex
from pathlib import Path
from typing import List, Optional
from ..core.config import SquashConfig
from ..core.types import (
    SquashPlan, SelectionMode, RebaseInstruction, RewriteResult,
    GitOperationError, RewriteFailedError, RewriteRefusedError
)
from ..ui.interface import ProgressReporter, LoggingProgress
from .operations import GitOperations

logger = logging.getLogger(__name__)

REBASE = "rebase"
SOFT_RESET = "soft-reset"


def build_rebase_instructions(plan: SquashPlan) -> List[RebaseInstruction]:
    """Pick the newest selected commit and squash every older one into it.

    The picked line carries the resolved message, the others keep their own.
    """
    instructions = []
    for index, commit in enumerate(plan.ordered_commits):
        if index == 0:
            instructions.append(RebaseInstruction("pick", commit.id, plan.result_message))
        else:
            instructions.append(RebaseInstruction("squash", commit.id, commit.message))
    return instructions


def render_todo(plan: SquashPlan, instructions: List[RebaseInstruction]) -> str:
    """Render instructions as a git-rebase-todo file.

    git replays the todo top to bottom, oldest first: the oldest selected
    commit is picked, newer selected commits are squashed into it, then
    commits above the selection are picked unchanged.
    """
    lines = []
    for position, instruction in enumerate(reversed(instructions)):
        action = "pick" if position == 0 else "squash"
        lines.append(str(RebaseInstruction(action, instruction.commit_id, instruction.message)))
    for commit in reversed(plan.preserved_commits):
        lines.append(str(RebaseInstruction("pick", commit.id, commit.message)))
    return "\n".join(lines) + "\n"


class RewriteExecutor:
    """Performs the destructive part of a squash."""

    def __init__(self, git_ops: GitOperations,
                 config: Optional[SquashConfig] = None,
                 progress: Optional[ProgressReporter] = None):
        self.git_ops = git_ops
        self.config = config or git_ops.config
        self.progress = progress or LoggingProgress()

    def choose_strategy(self, plan: SquashPlan, requested: Optional[str] = None) -> str:
        """Resolve 'auto' and check the plan fits the strategy."""
        strategy = requested or self.config.strategy
        if strategy == "auto":
            if plan.mode is SelectionMode.BOUNDARY and plan.reset_target and plan.includes_head:
                strategy = SOFT_RESET
            else:
                strategy = REBASE

        if strategy == SOFT_RESET:
            if plan.reset_target is None:
                raise RewriteRefusedError(
                    "Soft reset needs an older commit to reset to; the selection reaches the root commit")
            if not plan.includes_head:
                raise RewriteRefusedError(
                    f"Soft reset would also fold {len(plan.preserved_commits)} newer commit(s); "
                    "use the rebase strategy for a selection below HEAD")
        elif strategy != REBASE:
            raise RewriteRefusedError(f"Unknown rewrite strategy: {strategy}")

        logger.debug("Using %s strategy for %d commits", strategy, plan.count)
        return strategy

    def execute(self, plan: SquashPlan, strategy: Optional[str] = None) -> RewriteResult:
        """Rewrite history according to the plan."""
        strategy = self.choose_strategy(plan, strategy)

        if self.git_ops.has_staged_changes():
            raise RewriteRefusedError(
                "The index has staged changes; commit or unstage them before squashing")

        logger.info("Uniting all %d commits into one (%s)", plan.count, strategy)
        if strategy == SOFT_RESET:
            self._soft_reset(plan)
        else:
            self._scripted_rebase(plan)

        try:
            new_head = self.git_ops.get_head()
        except GitOperationError as e:
            raise RewriteFailedError(e.output or str(e), strategy) from e
        logger.info("Squash complete, HEAD is now %s", new_head)
        return RewriteResult(plan=plan, strategy=strategy, new_head=new_head)

    def _soft_reset(self, plan: SquashPlan) -> None:
        self.progress.report(20, f"Uniting all {plan.count} commits into one...")
        try:
            self.git_ops.reset_to_commit(plan.reset_target.id)
            self.progress.report(60, "Creating squashed commit...")
            self.git_ops.commit(plan.result_message, allow_empty=True)
        except GitOperationError as e:
            raise RewriteFailedError(e.output or str(e), SOFT_RESET) from e
        self.progress.report(100, "Squash complete")

    def _scripted_rebase(self, plan: SquashPlan) -> None:
        workdir = Path(self.git_ops.repo_path)
        todo_path = workdir / self.config.scratch_filename
        message_path = workdir / self.config.message_filename

        instructions = build_rebase_instructions(plan)
        logger.debug("Rebase script:\n%s", "\n".join(str(i) for i in instructions))

        self.progress.report(20, "Writing rebase script...")
        try:
            todo_path.write_text(render_todo(plan, instructions), encoding="utf-8")
            message_path.write_text(plan.result_message + "\n", encoding="utf-8")

            self.progress.report(40, f"Rebasing {plan.count} commits...")
            upstream = plan.reset_target.id if plan.reset_target else None
            self.git_ops.rebase_interactive(
                upstream,
                sequence_editor=f"cp {shlex.quote(str(todo_path))}",
                editor=f"cp {shlex.quote(str(message_path))}",
            )
        except GitOperationError as e:
            raise RewriteFailedError(e.output or str(e), REBASE) from e
        except OSError as e:
            raise RewriteFailedError(f"Could not write rebase script: {e}", REBASE) from e
        finally:
            for path in (todo_path, message_path):
                try:
                    path.unlink()
                except FileNotFoundError:
                    pass
        self.progress.report(100, "Squash process completed")
