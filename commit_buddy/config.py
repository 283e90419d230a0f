from dataclasses import dataclass

MAX_TOKENS = 100000
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.2
API_KEY_ENV_VAR = "OPENAI_API_KEY"

SELECTION_PROMPT = (
    "\nEnter the numbers of commits you want to keep (comma-separated, e.g., '1,2,3'):"
)

SYSTEM_PROMPT = """
You are a helpful assistant that generates commit messages for git commits.
The commit messages should be in the active voice and no more than 50 characters.
The commit message should be detailed enough to understand the changes made to the code.
The commit messages should be in the format of a conventional commit message.
If there are several additions and are all not related to the same thing, make sure you add
a separate commit message for each addition in the description section.
"""


@dataclass(frozen=True)
class OptionHelp:
    """Help text for every command-line option."""

    api_key: str = (
        "Your OpenAI API key (required). Falls back to the "
        f"{API_KEY_ENV_VAR} environment variable."
    )
    model: str = f"The chat model used to write commit messages (default: {DEFAULT_MODEL})."
    recursive: str = "Generate a commit message for every staged file and pick which to commit."
    copy: str = "Copy the generated commit message to the clipboard."
    debug: str = "Enable debug logging"
