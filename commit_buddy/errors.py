class CommitBuddyError(Exception):
    """Base exception for Commit Buddy errors."""


class PreconditionError(CommitBuddyError):
    """Raised when the workflow cannot start."""


class ApiKeyMissingError(PreconditionError):
    """Raised when OPENAI_API_KEY is not found."""


class NotARepositoryError(PreconditionError):
    """Raised when the current directory is not inside a git work tree."""


class MissingTargetError(PreconditionError):
    """Raised when neither a file nor the recursive flag was given."""


class StagingDeclinedError(PreconditionError):
    """Raised when the user refuses to stage the changes to describe."""


class NoChangesError(PreconditionError):
    """Raised when there is no staged diff to describe."""


class GitError(CommitBuddyError):
    """Raised when a git command fails."""


class GenerationError(CommitBuddyError):
    """Raised when the language model cannot produce a commit message."""


class TokenLimitExceededError(GenerationError):
    """Raised when diff exceeds maximum token limit."""
