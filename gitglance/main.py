#!/usr/bin/env python3
"""Main entry point for the gitglance command line tool."""

import argparse
import logging
import sys
import traceback
from pathlib import Path

import logbook
from PySide6.QtCore import QCoreApplication

from gitglance.core import (
    GitClient,
    GitError,
    GitOperations,
    ProcessRunner,
    RepositoryLocator,
    StatusSession,
)
from gitglance.models import AppConfig, FileChange, Repository

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str) -> logbook.Handler:
    """Configure stdlib logging and return the logbook handler for the git runner.

    The caller binds the handler for the duration of a command.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return logbook.StderrHandler(level=level, bubble=False)


def setup_exception_hook() -> None:
    """Log uncaught exceptions before the default hook prints them."""
    original_hook = sys.excepthook

    def exception_hook(exc_type, exc_value, exc_tb):
        tb_str = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        logger.error(f"Uncaught exception:\n{tb_str}")
        original_hook(exc_type, exc_value, exc_tb)

    sys.excepthook = exception_hook


def add_repository_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=None,
        help="Path inside a Git repository (overrides -C)",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="gitglance",
        description="Inspect and update the working-tree status of a Git repository",
    )
    parser.add_argument(
        "-C",
        "--repo",
        type=Path,
        default=Path.cwd(),
        help="Path inside a Git repository (defaults to current directory)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")
    status = subparsers.add_parser("status", help="Show changed files")
    add_repository_argument(status)
    info = subparsers.add_parser("info", help="Show repository details")
    add_repository_argument(info)
    subparsers.add_parser("discover", help="List repositories in the search paths")

    stage = subparsers.add_parser("stage", help="Stage changed files")
    stage.add_argument("paths", nargs="+", help="Repository-relative paths")

    unstage = subparsers.add_parser("unstage", help="Unstage files")
    unstage.add_argument("paths", nargs="+", help="Repository-relative paths")

    commit = subparsers.add_parser("commit", help="Commit staged files")
    commit.add_argument("-m", "--message", required=True, help="Commit message")
    add_repository_argument(commit)

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "status"
    return args


def printable(path: str) -> str:
    """Return ``path`` with undecodable bytes shown as replacement characters."""
    return path.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def format_change(change: FileChange) -> str:
    """Format a file change as a single status line."""
    staged = change.staged_status.value if change.staged_status else " "
    unstaged = change.unstaged_status.value if change.unstaged_status else " "
    line = f"{staged}{unstaged} {printable(change.display_path)}"
    if change.original_path:
        line = f"{line} (from {printable(change.original_path)})"
    return line


def print_repository(repo: Repository) -> None:
    print(f"Repository: {repo.path}")
    print(f"Branch:     {repo.branch or '(detached)'}")
    print(f"Remote:     {repo.remote_url or '(none)'}")
    print(f"Provider:   {repo.provider.value}")
    if repo.browse_url:
        print(f"Browse:     {repo.browse_url}")


def print_status(session: StatusSession) -> None:
    files = session.files
    if not files:
        print("Working tree clean")
        return
    print(f"{len(files)} change(s):")
    for change in files:
        print(f"  {format_change(change)}")


def wait_for_refresh(session: StatusSession, timeout_ms: int) -> None:
    """Wait for the session to publish its latest refresh.

    Raises:
        GitError: if the refresh failed or did not finish in time.
    """
    session.wait_until_idle(timeout_ms)
    if session.published_generation == session.generation:
        return
    error = session.last_error
    if isinstance(error, GitError):
        raise error
    if error is not None:
        raise GitError(str(error))
    session.shutdown()
    raise GitError("Timed out waiting for git status")


def select_files(session: StatusSession, paths: list[str]) -> list[FileChange]:
    """Map repository-relative paths onto published file changes."""
    by_path = {f.display_path: f for f in session.files}
    selected = []
    for path in paths:
        change = by_path.get(path.replace("\\", "/").removeprefix("./"))
        if change is None:
            raise GitError(f"No change for path: {path}")
        selected.append(change)
    return selected


def run_command(args: argparse.Namespace, config: AppConfig) -> int:
    """Run the selected subcommand."""
    client = GitClient(
        git_command=config.git_command,
        runner=ProcessRunner(timeout=config.status_timeout),
    )
    locator = RepositoryLocator(client)
    timeout_ms = int(config.status_timeout * 1000)

    if args.command == "discover":
        repos = locator.discover_repositories(config.search_paths, config.discovery_depth)
        for repo in repos:
            suffix = f"  {repo.browse_url}" if repo.browse_url else ""
            print(f"{repo.path}{suffix}")
        return 0

    repo = locator.get_repository(getattr(args, "path", None) or args.repo)
    if args.command == "info":
        print_repository(repo)
        return 0

    session = StatusSession(repo, client=client, untracked_files=config.untracked_files)
    operations = GitOperations(session)

    session.refresh()
    wait_for_refresh(session, timeout_ms)

    if args.command == "stage":
        operations.stage_files(select_files(session, args.paths))
        wait_for_refresh(session, timeout_ms)
    elif args.command == "unstage":
        operations.unstage_files(select_files(session, args.paths))
        wait_for_refresh(session, timeout_ms)
    elif args.command == "commit":
        operations.commit(args.message)
        wait_for_refresh(session, timeout_ms)

    print_status(session)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    config = AppConfig.load()
    handler = setup_logging("DEBUG" if args.verbose else config.log_level)
    setup_exception_hook()

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("gitglance")

    with handler.applicationbound():
        try:
            return run_command(args, config)
        except (GitError, ValueError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
