import sys
from typing import Optional

import click

from commit_buddy.config import API_KEY_ENV_VAR, DEFAULT_MODEL, OptionHelp
from commit_buddy.console import Console
from commit_buddy.git import GitRepository
from commit_buddy.llm import ChatCommitBuddy
from commit_buddy.settings import commit_buddy_logger, set_commit_buddy_log_level

from .service import CommitBuddyService
from .controller import CommitBuddyController

logger = commit_buddy_logger(__name__)


def build_command(help_text: OptionHelp = OptionHelp()) -> click.Command:
    """Create the commit-buddy command with the given option descriptions."""

    @click.command(context_settings={"help_option_names": ["-h", "--help"]})
    @click.option("--api-key", envvar=API_KEY_ENV_VAR, show_envvar=True, help=help_text.api_key)
    @click.option("--model", default=DEFAULT_MODEL, show_default=True, help=help_text.model)
    @click.option("-r", "--recursive", is_flag=True, help=help_text.recursive)
    @click.option("--copy", "-c", is_flag=True, help=help_text.copy)
    @click.option("--debug", is_flag=True, help=help_text.debug)
    @click.argument("path", required=False)
    def run_commit_buddy(
        api_key: Optional[str],
        model: str,
        recursive: bool,
        copy: bool,
        debug: bool,
        path: Optional[str],
    ) -> None:
        """Generate a commit message for a staged file and optionally commit it.

        \b
        Usage:
          commit-buddy [--api-key KEY] PATH      describe and commit one file
          commit-buddy [--api-key KEY] -r        describe every staged file
                                                 and pick which to commit
        """
        if debug:
            set_commit_buddy_log_level("DEBUG")
            logger.debug("Debug logging enabled via --debug flag")

        if not api_key:
            raise click.UsageError(f"--api-key is required (or set {API_KEY_ENV_VAR}).")

        generator = ChatCommitBuddy(api_key=api_key, model=model)
        service = CommitBuddyService(generator=generator, git=GitRepository())
        controller = CommitBuddyController(service, Console())

        sys.exit(controller.run(path, recursive=recursive, copy=copy))

    return run_commit_buddy


main = build_command()


if __name__ == "__main__":
    main()
