"""Thin wrapper around the git command line."""

import logging
import os
import posixpath
import subprocess
from typing import Callable, List, Optional, Sequence

from commit_buddy.errors import GitError
from commit_buddy.settings import commit_buddy_logger

RunProcess = Callable[[Sequence[str]], subprocess.CompletedProcess]


def _top(path: str) -> str:
    """Pathspec naming *path* relative to the repository root, without globbing."""

    return f":(top,literal){path}"


class GitRepository:
    """Query and mutate the repository containing the working directory.

    Paths accepted and returned by this class are relative to the repository
    root, whatever subdirectory the process runs from. Use :meth:`resolve` to
    turn a user-supplied path into that form.
    """

    def __init__(
        self,
        run_process: Optional[RunProcess] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._run_process = run_process or self._default_run_process
        self._logger = logger or commit_buddy_logger(__name__)

    # --- Queries ---
    def is_repository(self) -> bool:
        try:
            output = self._run_git("rev-parse", "--is-inside-work-tree")
        except GitError:
            return False
        return output.strip() == "true"

    def repo_root(self) -> str:
        return self._run_git("rev-parse", "--show-toplevel").strip()

    def resolve(self, path: str) -> str:
        """Return *path*, given relative to the working directory, relative to the root."""

        if os.path.isabs(path):
            relative = os.path.relpath(path, self.repo_root())
            return posixpath.normpath(relative.replace(os.sep, "/"))

        prefix = self._run_git("rev-parse", "--show-prefix").strip()
        return posixpath.normpath(prefix + path.replace(os.sep, "/"))

    def staged_files(self) -> List[str]:
        """Return staged paths relative to the repository root, in git's order."""

        output = self._run_git("diff", "--cached", "--name-only", "-z")
        files = [name for name in output.split("\0") if name.strip()]
        self._logger.debug("Staged files: %s", files)
        return files

    def is_staged(self, path: str) -> bool:
        return posixpath.normpath(path) in self.staged_files()

    def has_unstaged_changes(self, path: str) -> bool:
        return bool(self._run_git("diff", "--name-only", "--", _top(path)).strip())

    def diff(self, path: str) -> str:
        """Return the staged diff of *path* against HEAD, or "" when unchanged."""

        return self._run_git("diff", "--cached", "--", _top(path))

    # --- Mutations ---
    def stage(self, path: str) -> None:
        self._run_git("add", "--", _top(path))

    def stage_all(self) -> None:
        self._run_git("add", "--all")

    def commit(self, message: str) -> str:
        """Commit the index with *message* exactly as given."""

        return self._run_git("commit", "-m", message).strip()

    def commit_path(self, message: str, path: str) -> str:
        """Commit only *path*, leaving the rest of the index staged.

        git takes a path-limited commit from the working tree, so the path
        must not carry changes beyond what is staged.

        Raises:
            GitError: If *path* has unstaged changes or the commit fails.
        """
        if self.has_unstaged_changes(path):
            raise GitError(f"{path} has unstaged changes")

        return self._run_git("commit", "-m", message, "--", _top(path)).strip()

    # --- Private helpers ---
    def _run_git(self, *args: str) -> str:
        command = ["git", *args]
        self._logger.debug("Running git command: %s", " ".join(command[:3]))

        try:
            result = self._run_process(command)
        except (OSError, UnicodeDecodeError) as exc:
            raise GitError(f"Unable to run git {args[0]}: {exc}") from exc

        if result.returncode != 0:
            stderr = result.stderr.strip() if result.stderr else ""
            stdout = result.stdout.strip() if result.stdout else ""
            detail = stderr or stdout or f"exit code {result.returncode}"
            self._logger.debug("git %s failed: %s", args[0], detail)
            raise GitError(f"git {args[0]} failed: {detail}")

        stdout = result.stdout or ""
        self._logger.debug("Git output length: %d", len(stdout))
        return stdout

    # --- Static helpers ---
    @staticmethod
    def _default_run_process(
        args: Sequence[str],
    ) -> subprocess.CompletedProcess:
        # Diffs of non-UTF-8 files still have to reach the model as text.
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
