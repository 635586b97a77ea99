"""Git operations for the squash tool."""

import os
import subprocess
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union
from ..core.types import (
    CommitRecord, GitOperationError, BackendUnavailableError, EmptyHistoryError
)
from ..core.config import SquashConfig

logger = logging.getLogger(__name__)

# Unit + record separator pair, will not occur in author names or subjects
FIELD_SEPARATOR = "\x1f\x1e"


class GitOperations:
    """Handles all git operations for the squash tool."""

    def __init__(self, repo_path: Union[str, Path, None] = None,
                 config: Optional[SquashConfig] = None):
        self.repo_path = Path(repo_path) if repo_path else Path.cwd()
        self.config = config or SquashConfig()
        self._validate_git_repository()

    def _run_git_command(self, cmd: List[str], check: bool = True,
                         env: Optional[Dict[str, str]] = None) -> subprocess.CompletedProcess:
        """Run a git command and return the result."""
        full_cmd = ["git"] + cmd
        logger.debug("Running git command: %s", " ".join(full_cmd))

        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                env=env,
                check=check
            )
            return result
        except FileNotFoundError as e:
            raise BackendUnavailableError(f"git executable not found: {e}") from e
        except subprocess.CalledProcessError as e:
            logger.error("Git command failed: %s\nStderr: %s", " ".join(full_cmd), e.stderr)
            output = (e.stderr or "") + (e.stdout or "")
            raise GitOperationError(f"Git command failed: {e.stderr}",
                                    output=output, returncode=e.returncode)

    def _validate_git_repository(self) -> None:
        """Validate that the path is inside a git work tree."""
        try:
            result = self._run_git_command(["rev-parse", "--is-inside-work-tree"], check=True)
            logger.debug("Git work tree found at: %s", self.repo_path)
        except (GitOperationError, NotADirectoryError) as e:
            raise BackendUnavailableError(
                f"{self.repo_path} is not a git repository. "
                "Please run this command from within a git repository."
            ) from e
        if result.stdout.strip() != "true":
            raise BackendUnavailableError(
                f"{self.repo_path} is not inside a git work tree")

    def has_commits(self) -> bool:
        """Check whether HEAD points at a commit."""
        result = self._run_git_command(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.returncode == 0

    def list_commits(self) -> List[CommitRecord]:
        """Read the commit log of HEAD, newest first."""
        if not self.has_commits():
            raise EmptyHistoryError("The repository has no commits yet")

        sep = FIELD_SEPARATOR
        cmd = ["log", f"--format=%h{sep}%an{sep}%s"]
        if self.config.max_log_entries:
            cmd.append(f"--max-count={self.config.max_log_entries}")
        cmd.append("HEAD")

        result = self._run_git_command(cmd)

        commits = []
        for line in result.stdout.split('\n'):
            if not line:
                continue
            parts = line.split(sep)
            if len(parts) != 3:
                logger.warning("Skipping malformed commit line: %s", repr(line))
                continue
            commit_id, author, message = parts
            commits.append(CommitRecord(id=commit_id, author=author, message=message))

        if not commits:
            raise EmptyHistoryError("No commits found in the log")

        logger.info("Found %d commits", len(commits))
        return commits

    def get_current_branch(self) -> Optional[str]:
        """Get the name of the current branch, None when detached."""
        result = self._run_git_command(["rev-parse", "--abbrev-ref", "HEAD"], check=False)
        name = result.stdout.strip()
        if result.returncode != 0 or not name or name == "HEAD":
            return None
        return name

    def get_upstream(self) -> Optional[str]:
        """Get the upstream tracking ref of the current branch."""
        result = self._run_git_command(
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"], check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def list_remote_refs(self) -> List[str]:
        """List remote-tracking refs, e.g. refs/remotes/origin/main."""
        result = self._run_git_command(["for-each-ref", "--format=%(refname)", "refs/remotes/"])
        return [line.strip() for line in result.stdout.split('\n') if line.strip()]

    def get_head(self) -> str:
        """Short hash of HEAD."""
        result = self._run_git_command(["rev-parse", "--short", "HEAD"])
        return result.stdout.strip()

    def has_staged_changes(self) -> bool:
        """Check whether the index differs from HEAD."""
        result = self._run_git_command(["diff", "--cached", "--quiet"], check=False)
        return result.returncode != 0

    def reset_to_commit(self, commit_id: str) -> None:
        """Soft-reset the current branch to a commit, keeping the index."""
        logger.info("Resetting to commit %s (--soft)", commit_id)
        self._run_git_command(["reset", "--soft", commit_id])

    def commit(self, message: str, allow_empty: bool = False) -> None:
        """Commit the index with a literal message."""
        logger.info("Creating commit: %s", message.split('\n', 1)[0])
        # argument list, never a shell string: quotes in messages stay intact
        cmd = ["commit", "-m", message]
        if allow_empty:
            cmd.append("--allow-empty")
        self._run_git_command(cmd)

    def rebase_interactive(self, upstream: Optional[str], sequence_editor: str,
                           editor: str) -> None:
        """Run ``git rebase -i`` with scripted editors."""
        env = os.environ.copy()
        env["GIT_SEQUENCE_EDITOR"] = sequence_editor
        env["GIT_EDITOR"] = editor

        # the default strip cleanup would drop message lines starting with '#'
        cmd = ["-c", "commit.cleanup=whitespace", "rebase", "-i"]
        cmd.append(upstream if upstream else "--root")
        logger.info("Rebasing interactively onto %s", upstream or "root")
        self._run_git_command(cmd, env=env)

    def push(self, remote: str, branch: str, force: bool = False,
             set_upstream: bool = False) -> str:
        """Push a branch and return git's output."""
        cmd = ["push"]
        if force:
            cmd.append("--force")
        if set_upstream:
            cmd.append("--set-upstream")
        cmd.extend([remote, branch])
        logger.info("Pushing %s to %s (force=%s)", branch, remote, force)
        result = self._run_git_command(cmd)
        return (result.stderr or "") + (result.stdout or "")
