"""Pytest configuration and fixtures."""

import os
import subprocess
import tempfile
import time
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from PySide6.QtCore import QCoreApplication

# Git environment for tests - preserve PATH so git can be found
GIT_ENV = os.environ.copy()
GIT_ENV.update({
    "GIT_AUTHOR_NAME": "Test User",
    "GIT_AUTHOR_EMAIL": "test@test.com",
    "GIT_COMMITTER_NAME": "Test User",
    "GIT_COMMITTER_EMAIL": "test@test.com",
})


def run_git(repo_path: Path, *args: str) -> str:
    """Run a git command in a test repository and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo_path,
        check=True,
        capture_output=True,
        text=True,
        env=GIT_ENV,
    )
    return result.stdout


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Process Qt events until ``predicate`` holds or ``timeout`` expires."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        QCoreApplication.processEvents()
        time.sleep(0.01)
    return True


@pytest.fixture
def qapp():
    """Create a QCoreApplication for Qt tests."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def empty_git_repo(temp_dir: Path) -> Generator[Path]:
    """Create a git repository without any commits."""
    repo_path = temp_dir / "test-repo"
    repo_path.mkdir()

    run_git(repo_path, "init")
    run_git(repo_path, "config", "user.email", "test@test.com")
    run_git(repo_path, "config", "user.name", "Test User")
    # Disable GPG signing for test commits
    run_git(repo_path, "config", "commit.gpgsign", "false")

    yield repo_path


@pytest.fixture
def git_repo(empty_git_repo: Path) -> Generator[Path]:
    """Create a temporary git repository with an initial commit."""
    (empty_git_repo / "README.md").write_text("# Test Repo\n")
    run_git(empty_git_repo, "add", ".")
    run_git(empty_git_repo, "commit", "-m", "Initial commit")

    yield empty_git_repo
