"""Terminal implementation of the user interface."""

import logging
import sys
from typing import List, Optional, Sequence
from ..core.types import CommitRecord
from .interface import ProgressReporter, UserInterface

logger = logging.getLogger(__name__)

CANCEL_WORDS = ('q', 'quit', 'cancel')


def parse_index_list(text: str, upper: int) -> List[int]:
    """Parse '1,3-5' into zero-based indices; raises ValueError when invalid."""
    indices = []
    for part in text.replace(' ', '').split(','):
        if not part:
            continue
        if '-' in part:
            start_str, end_str = part.split('-', 1)
            start, end = int(start_str), int(end_str)
            if start > end:
                start, end = end, start
            numbers = range(start, end + 1)
        else:
            numbers = [int(part)]
        for number in numbers:
            if not 1 <= number <= upper:
                raise ValueError(f"{number} is out of range 1-{upper}")
            if number - 1 not in indices:
                indices.append(number - 1)
    return indices


class ConsoleUI(UserInterface, ProgressReporter):
    """Line-based prompts on stdin/stdout."""

    def display_commits(self, commits: Sequence[CommitRecord]) -> None:
        """Print the log as a numbered list, newest first."""
        width = len(str(len(commits)))
        for number, commit in enumerate(commits, 1):
            print(f"  {number:>{width}}. {commit.id}  {commit.subject}  ({commit.author})")

    def select_commits(self, commits: Sequence[CommitRecord]) -> Optional[List[CommitRecord]]:
        self.display_commits(commits)
        while True:
            try:
                response = input("\nSelect the commits that need to be squashed (e.g. 1-3, q to cancel): ").strip()
            except EOFError:
                return None
            if not response or response.lower() in CANCEL_WORDS:
                return None
            try:
                return [commits[i] for i in parse_index_list(response, len(commits))]
            except ValueError as e:
                print(f"Invalid selection: {e}")

    def select_boundary(self, commits: Sequence[CommitRecord]) -> Optional[CommitRecord]:
        self.display_commits(commits)
        while True:
            try:
                response = input("\nSquash everything down to and including commit number (q to cancel): ").strip()
            except EOFError:
                return None
            if not response or response.lower() in CANCEL_WORDS:
                return None
            try:
                indices = parse_index_list(response, len(commits))
            except ValueError as e:
                print(f"Invalid selection: {e}")
                continue
            if len(indices) != 1:
                print("Please enter a single commit number")
                continue
            return commits[indices[0]]

    def prompt_message(self, default: str) -> Optional[str]:
        print(f"\nThe latest commit message is used as default:\n  {default}")
        try:
            return input("Enter squashed commit message (empty for default): ").strip()
        except EOFError:
            return None

    def confirm(self, message: str) -> bool:
        print(f"\n{message}")
        while True:
            try:
                response = input("Proceed? (y/n): ").lower().strip()
            except EOFError:
                return False
            if response in ('y', 'yes'):
                return True
            elif response in ('n', 'no', ''):
                return False
            else:
                print("Please enter 'y' or 'n'")

    def offer_push(self, message: str) -> bool:
        print(f"\n{message}")
        try:
            response = input("Push to remote? (y/n): ").lower().strip()
        except EOFError:
            return False
        return response in ('y', 'yes')

    def info(self, message: str) -> None:
        print(message)

    def error(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)

    def report(self, percent: int, message: str) -> None:
        logger.debug("Progress %d%%: %s", percent, message)
        print(f"[{percent:>3}%] {message}")
