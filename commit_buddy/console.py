import logging
import sys
from typing import Callable, Optional, TextIO

import click

from commit_buddy.settings import commit_buddy_logger


class Console:
    """Single reader of interactive input for the whole process."""

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        echo: Callable[..., None] = click.echo,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._echo = echo
        self._logger = logger or commit_buddy_logger(__name__)

    def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question. Anything but "y"/"yes" declines."""

        self._echo(f"{prompt} (y/n): ", nl=False)
        answer = self.read_line().lower()
        self._logger.debug("Confirmation answer: %r", answer)
        return answer in ("y", "yes")

    def read_line(self) -> str:
        """Read one trimmed line, or "" when input is closed or unreadable."""

        try:
            line = self._stdin.readline()
        except (OSError, ValueError) as exc:
            self._logger.debug("Failed to read from stdin: %s", exc)
            return ""
        return line.strip()
