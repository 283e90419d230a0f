"""Commit workflows against a throwaway git repository; the LLM is faked."""

import io
import shutil
import subprocess
from pathlib import Path
from typing import List

import pytest

from commit_buddy.cli.controller import CommitBuddyController
from commit_buddy.cli.service import CommitBuddyService
from commit_buddy.console import Console
from commit_buddy.git import GitRepository

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _git(*args: str) -> str:
    result = subprocess.run(["git", *args], capture_output=True, check=True)
    return result.stdout.decode("utf-8", errors="replace")


def _commit_count() -> int:
    return int(_git("rev-list", "--count", "HEAD").strip())


class EchoGenerator:
    def __init__(self) -> None:
        self.diffs: List[str] = []

    def generate(self, diff: str) -> str:
        self.diffs.append(diff)
        return f"chore: update {len(self.diffs)}"


class Session:
    def __init__(self, stdin: str = "") -> None:
        self.generator = EchoGenerator()
        self.echoes: List[str] = []
        self.errors: List[str] = []
        echo = lambda message="", **_: self.echoes.append(message)  # noqa: E731
        self.controller = CommitBuddyController(
            CommitBuddyService(self.generator, git=GitRepository()),  # type: ignore[arg-type]
            Console(stdin=io.StringIO(stdin), echo=echo),
            clipboard_copy=lambda _: None,
            echo=echo,
            echo_err=self.errors.append,
        )


@pytest.fixture
def repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("GIT_WORK_TREE", raising=False)

    root = tmp_path / "repo"
    root.mkdir()
    monkeypatch.chdir(root)

    _git("init", "--quiet")
    _git("config", "user.name", "Test User")
    _git("config", "user.email", "test@example.com")
    _git("config", "commit.gpgsign", "false")
    (root / "README.md").write_text("readme\n")
    _git("add", "README.md")
    _git("commit", "--quiet", "-m", "initial")
    return root


def test_repository_is_detected(repo: Path):
    git = GitRepository()

    assert git.is_repository() is True
    assert Path(git.repo_root()).resolve() == repo.resolve()


def test_single_file_commit_keeps_message_verbatim(repo: Path):
    (repo / "a.txt").write_text("one\n")
    session = Session(stdin="y\ny\n")

    assert session.controller.run("a.txt") == 0
    assert _git("log", "-1", "--format=%B").rstrip("\n") == "chore: update 1"
    assert _git("show", "HEAD:a.txt") == "one\n"


def test_recursive_mode_handles_non_utf8_diff(repo: Path):
    (repo / "latin.txt").write_bytes(b"caf\xe9\n")
    (repo / "ok.txt").write_text("fine\n")
    _git("add", "latin.txt", "ok.txt")
    session = Session(stdin="1,2\n")

    assert session.controller.run(recursive=True) == 0

    assert any(line.startswith("1. latin.txt: chore: update") for line in session.echoes)
    assert any(line.startswith("2. ok.txt: chore: update") for line in session.echoes)
    assert any("�" in diff for diff in session.generator.diffs)
    assert session.errors == []
    assert _commit_count() == 3


def test_single_file_commit_leaves_unstaged_hunks_out(repo: Path):
    path = repo / "a.txt"
    path.write_text("one\nstaged\n")
    _git("add", "a.txt")
    path.write_text("one\nstaged\nnot staged\n")
    session = Session(stdin="y\n")

    assert session.controller.run("a.txt") == 0
    assert _git("show", "HEAD:a.txt") == "one\nstaged\n"
    assert path.read_text() == "one\nstaged\nnot staged\n"


def test_recursive_mode_refuses_file_with_unstaged_changes(repo: Path):
    path = repo / "a.txt"
    path.write_text("one\nstaged\n")
    (repo / "b.txt").write_text("b\n")
    _git("add", "a.txt", "b.txt")
    path.write_text("one\nstaged\nnot staged\n")
    session = Session(stdin="1,2\n")

    assert session.controller.run(recursive=True) == 0
    assert session.errors == ["❌ Failed to commit a.txt: a.txt has unstaged changes"]
    assert _commit_count() == 2
    assert _git("show", "--name-only", "--format=", "HEAD").split() == ["b.txt"]
    assert _git("diff", "--cached", "--name-only").split() == ["a.txt"]


def test_recursive_mode_from_subdirectory(repo: Path, monkeypatch: pytest.MonkeyPatch):
    (repo / "src").mkdir()
    (repo / "src" / "a.py").write_text("print('a')\n")
    _git("add", "src/a.py")
    monkeypatch.chdir(repo / "src")
    session = Session(stdin="1\n")

    assert session.controller.run(recursive=True) == 0
    assert "1. src/a.py: chore: update 1" in session.echoes
    assert "print('a')" in session.generator.diffs[0]
    assert "✅ Successfully committed src/a.py" in session.echoes
    assert _git("show", "--name-only", "--format=", "HEAD").split() == ["src/a.py"]


def test_single_file_from_subdirectory_uses_staged_path(
    repo: Path, monkeypatch: pytest.MonkeyPatch
):
    (repo / "src").mkdir()
    (repo / "src" / "a.py").write_text("print('a')\n")
    _git("add", "src/a.py")
    monkeypatch.chdir(repo / "src")
    session = Session(stdin="y\n")

    assert session.controller.run("a.py") == 0
    assert not any("is not staged" in line for line in session.echoes)
    assert _git("show", "HEAD:src/a.py") == "print('a')\n"
