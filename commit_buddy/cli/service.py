import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Protocol, Sequence

from commit_buddy.errors import CommitBuddyError, NoChangesError, NotARepositoryError
from commit_buddy.git import GitRepository
from commit_buddy.schemas import CommitResult
from commit_buddy.settings import commit_buddy_logger


class CommitMessageGenerator(Protocol):
    def generate(self, diff: str) -> str: ...


class CommitBuddyService:
    def __init__(
        self,
        generator: CommitMessageGenerator,
        git: Optional[GitRepository] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._logger = logger or commit_buddy_logger(__name__)
        self.generator = generator
        self.git = git or GitRepository()

    # --- Public API ---
    def ensure_repository(self) -> str:
        if not self.git.is_repository():
            raise NotARepositoryError("Current directory is not a git repository")

        root = self.git.repo_root()
        self._logger.debug("Repository root: %s", root)
        return root

    def generate_for_file(self, path: str) -> str:
        """Generate a commit message from the staged diff of *path*."""

        diff = self.git.diff(path)
        if not diff.strip():
            raise NoChangesError(f"No staged changes found for {path}")

        self._logger.debug("⛓️ Generating commit message for %s", path)
        message = self.generator.generate(diff)
        self._logger.debug("⛓️ Generated commit message for %s", path)
        return message

    def generate_all(self, paths: Sequence[str]) -> List[CommitResult]:
        """Generate messages for every path concurrently, preserving order.

        Failures are captured in the corresponding result instead of raised.
        """
        results: List[Optional[CommitResult]] = [None] * len(paths)
        if not paths:
            return []

        self._logger.debug("Dispatching %d generation tasks", len(paths))
        with ThreadPoolExecutor(max_workers=len(paths)) as executor:
            futures: Dict[Future, int] = {
                executor.submit(self._generate_result, path): index
                for index, path in enumerate(paths)
            }
            wait(futures)

        for future, index in futures.items():
            results[index] = future.result()

        return [result for result in results if result is not None]

    # --- Private helpers ---
    def _generate_result(self, path: str) -> CommitResult:
        try:
            return CommitResult.ok(path, self.generate_for_file(path))
        except CommitBuddyError as error:
            self._logger.debug("Generation failed for %s: %s", path, error)
            return CommitResult.err(path, error)
