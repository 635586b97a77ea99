"""Turns a user selection into a squash plan."""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .types import (
    CommitRecord, SquashPlan, SelectionMode,
    InsufficientSelectionError, NonContiguousSelectionError, UnknownCommitError
)

logger = logging.getLogger(__name__)

MIN_COMMITS_FOR_SQUASH = 2


class SelectionResolver:
    """Resolves selections against one log fetch.

    The history must be newest-first, as returned by
    ``GitOperations.list_commits``: index ``i + 1`` is the parent of index ``i``.
    """

    def __init__(self, history: Sequence[CommitRecord]):
        self.history = list(history)
        self._positions: Dict[str, int] = {
            commit.id: index for index, commit in enumerate(self.history)
        }

    def position_of(self, commit: CommitRecord) -> int:
        """Index of a commit in the log, newest is 0."""
        try:
            return self._positions[commit.id]
        except KeyError:
            raise UnknownCommitError(
                f"Commit {commit.id} is not part of the current history") from None

    def find(self, ref: str) -> CommitRecord:
        """Look up a commit by full or abbreviated hash."""
        ref = ref.strip().lower()
        matches = [commit for commit in self.history
                   if ref and (commit.id.startswith(ref) or ref.startswith(commit.id))]
        if len(matches) != 1:
            reason = "is ambiguous" if matches else "is not part of the current history"
            raise UnknownCommitError(f"Commit {ref} {reason}")
        return matches[0]

    def from_selection(self, selected: Iterable[CommitRecord],
                       message: Optional[str] = None) -> SquashPlan:
        """Build a plan from an explicit multi-select, in any order."""
        positions = sorted({self.position_of(commit) for commit in selected})

        if len(positions) < MIN_COMMITS_FOR_SQUASH:
            raise InsufficientSelectionError(
                "Please select two or more commits to squash")

        first, last = positions[0], positions[-1]
        if last - first + 1 != len(positions):
            gaps = [self.history[i].id for i in range(first, last + 1)
                    if i not in positions]
            raise NonContiguousSelectionError(
                "Selected commits must be consecutive; also select or leave out "
                f"{', '.join(gaps)}")

        ordered = [self.history[i] for i in positions]
        logger.debug("Explicit selection spans log indices %d..%d", first, last)
        return self._build(ordered, last, SelectionMode.EXPLICIT, message,
                           preserved=self.history[:first])

    def from_boundary(self, boundary: CommitRecord,
                      message: Optional[str] = None) -> SquashPlan:
        """Build a plan folding everything from HEAD down to ``boundary``."""
        index = self.position_of(boundary)

        if index == 0:
            raise InsufficientSelectionError(
                "The newest commit was selected; there is nothing to squash it into")
        if index + 1 >= len(self.history):
            raise InsufficientSelectionError(
                f"Commit {boundary.id} is the first commit of the repository; "
                "choose a newer commit so an older one remains to squash onto")

        logger.debug("Boundary %s at log index %d", boundary.id, index)
        return self._build(self.history[:index + 1], index,
                           SelectionMode.BOUNDARY, message)

    def _build(self, ordered: List[CommitRecord], last_index: int,
               mode: SelectionMode, message: Optional[str],
               preserved: Sequence[CommitRecord] = ()) -> SquashPlan:
        reset_index = last_index + 1
        reset_target = self.history[reset_index] if reset_index < len(self.history) else None
        result_message = message if message and message.strip() else ordered[0].message

        plan = SquashPlan(
            ordered_commits=tuple(ordered),
            reset_target=reset_target,
            result_message=result_message,
            mode=mode,
            preserved_commits=tuple(preserved),
        )
        logger.info("Squash plan: %s", plan.summary_stats())
        return plan
