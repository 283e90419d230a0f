import logging
from typing import Callable, List, Optional

import click
import pyperclip

from commit_buddy.config import SELECTION_PROMPT
from commit_buddy.console import Console
from commit_buddy.errors import (
    CommitBuddyError,
    GitError,
    MissingTargetError,
    NoChangesError,
    StagingDeclinedError,
)
from commit_buddy.schemas import CommitResult
from commit_buddy.settings import commit_buddy_logger
from commit_buddy.utils import parse_selection

from .service import CommitBuddyService


class CommitBuddyController:
    """Main controller orchestrating the CLI workflow."""

    def __init__(
        self,
        commit_buddy_service: CommitBuddyService,
        console: Console,
        logger: Optional[logging.Logger] = None,
        clipboard_copy: Callable[[str], None] = pyperclip.copy,
        echo: Callable[..., None] = click.echo,
        echo_err: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._logger = logger or commit_buddy_logger(__name__)
        self._console = console
        self._clipboard_copy = clipboard_copy
        self._echo = echo
        self._echo_err = echo_err or (lambda message: self._echo(message, err=True))
        self.commit_buddy_service = commit_buddy_service

    # --- Public API ---
    def run(
        self, path: Optional[str] = None, recursive: bool = False, copy: bool = False
    ) -> int:
        self._logger.debug("Starting CLI controller run")

        try:
            if not path and not recursive:
                raise MissingTargetError("No file provided and recursive flag is not set")

            self.commit_buddy_service.ensure_repository()

            if recursive:
                if path:
                    self._logger.debug("Ignoring %s in recursive mode", path)
                return self._run_recursive()

            return self._run_single(path, copy=copy)
        except CommitBuddyError as e:
            self._logger.debug("Run aborted: %s", type(e).__name__)
            self._echo_err(f"❌ {e}")
            return 1

    # --- Single-file mode ---
    def _run_single(self, path: str, *, copy: bool) -> int:
        git = self.commit_buddy_service.git
        path = git.resolve(path)

        if not git.is_staged(path):
            if not self._console.confirm(f"{path} is not staged. Do you want to stage it?"):
                raise StagingDeclinedError(f"{path} is not staged")
            git.stage(path)

        self._echo("🤖 Generating commit message...")
        commit_message = self.commit_buddy_service.generate_for_file(path)
        self._echo(f"Commit message: {commit_message}")

        if copy:
            self._logger.debug("Copying commit message to clipboard")
            self._clipboard_copy(commit_message)
            self._echo("📋 Commit message copied to clipboard.")

        if not self._console.confirm("Do you want to commit the message?"):
            self._echo("Sure, I won't commit the message.")
            return 0

        git.commit(commit_message)
        self._echo("✅ Commit created successfully.")
        return 0

    # --- Recursive mode ---
    def _run_recursive(self) -> int:
        git = self.commit_buddy_service.git

        files = git.staged_files()
        if not files:
            if not self._console.confirm("No staged files found. Do you want to stage all files?"):
                raise StagingDeclinedError("No staged files found")
            git.stage_all()
            files = git.staged_files()
            if not files:
                raise NoChangesError("No changes detected. Add or modify files first.")

        self._echo(f"🤖 Generating commit messages for {len(files)} staged files...")
        results = self.commit_buddy_service.generate_all(files)
        self._display_results(results)

        self._echo(SELECTION_PROMPT)
        selection = parse_selection(self._console.read_line())
        self._logger.debug("Selected indices: %s", selection)

        for index in selection:
            if not 1 <= index <= len(results):
                self._logger.debug("Skipping out-of-range selection %d", index)
                continue

            result = results[index - 1]
            if result.is_err():
                self._echo(f"⏭️ Skipping {result.filename}: no commit message was generated")
                continue

            self._commit_result(result)

        return 0

    # --- Private helpers ---
    def _display_results(self, results: List[CommitResult]) -> None:
        for number, result in enumerate(results, start=1):
            if result.is_err():
                self._echo(f"{number}. {result.filename}: Error - {result.error}")
                continue
            self._echo(f"{number}. {result.filename}: {result.message}")

    def _commit_result(self, result: CommitResult) -> None:
        try:
            self.commit_buddy_service.git.commit_path(result.message, result.filename)
        except GitError as e:
            self._echo_err(f"❌ Failed to commit {result.filename}: {e}")
            return

        self._echo(f"✅ Successfully committed {result.filename}")
