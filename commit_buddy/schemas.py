from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field


class CommitMessage(BaseModel):
    commit_message: str = Field(description="The commit message")


@dataclass(frozen=True)
class CommitResult:
    """Outcome of generating a commit message for one staged file."""

    filename: str
    message: str = ""
    error: Optional[Exception] = None

    @staticmethod
    def ok(filename: str, message: str) -> "CommitResult":
        return CommitResult(filename=filename, message=message)

    @staticmethod
    def err(filename: str, error: Exception) -> "CommitResult":
        return CommitResult(filename=filename, error=error)

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return not self.is_ok()
