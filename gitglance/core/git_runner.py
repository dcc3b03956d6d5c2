"""Git command runner used by the status pipeline."""

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import logbook

log = logbook.Logger(__name__)


class GitError(Exception):
    """Exception raised for Git operation errors."""

    pass


class ExternalToolFailure(GitError):
    """A git command exited with a nonzero status."""

    def __init__(self, command_args: Sequence[str], exit_code: int, stderr: str) -> None:
        self.command_args = list(command_args)
        self.exit_code = exit_code
        self.stderr = stderr
        detail = stderr or "Unknown error"
        super().__init__(
            f"git {' '.join(self.command_args)} failed with exit code {exit_code}: {detail}"
        )


@dataclass(frozen=True)
class ProcessResult:
    """Captured output of a finished process."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """Runs external commands from an argument vector, never through a shell."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def run(self, command: str, args: Sequence[str], cwd: Path) -> ProcessResult:
        cmd = [command, *args]
        log.debug("Running {} in {}", cmd, cwd)
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="surrogateescape",
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise GitError(f"{command} is not installed or {cwd} does not exist")
        except subprocess.TimeoutExpired:
            raise GitError(f"{command} timed out after {self.timeout}s")

        log.debug("{} exited with {}", cmd, result.returncode)
        return ProcessResult(
            stdout=result.stdout,
            stderr=result.stderr.strip() if result.stderr else "",
            exit_code=result.returncode,
        )


class GitClient:
    """Issues the git subcommands the service needs."""

    def __init__(
        self,
        git_command: str = "git",
        runner: ProcessRunner | None = None,
    ) -> None:
        self.git_command = git_command
        self._runner = runner or ProcessRunner()

    def run(self, args: list[str], cwd: Path, check: bool = True) -> ProcessResult:
        """Run a git command and return the result.

        Raises:
            ExternalToolFailure: if ``check`` is set and git exits nonzero.
        """
        result = self._runner.run(self.git_command, args, cwd)
        if check and not result.ok:
            log.error("git {} failed in {}: {}", " ".join(args), cwd, result.stderr)
            raise ExternalToolFailure(args, result.exit_code, result.stderr)
        return result

    def status(self, repo_path: Path, untracked: str = "all") -> str:
        """Return raw ``git status --porcelain=v1`` output."""
        result = self.run(
            ["status", "--porcelain=v1", f"--untracked-files={untracked}"],
            cwd=repo_path,
        )
        return result.stdout

    def remote_url(self, repo_path: Path, remote: str = "origin") -> str | None:
        """Return the configured URL of ``remote``, or None."""
        result = self.run(["remote", "get-url", remote], cwd=repo_path, check=False)
        url = result.stdout.strip()
        if not result.ok or not url:
            return None
        return url

    def current_branch(self, repo_path: Path) -> str | None:
        """Return the checked out branch; None when HEAD is detached."""
        result = self.run(["branch", "--show-current"], cwd=repo_path, check=False)
        branch = result.stdout.strip()
        if not result.ok or not branch:
            return None
        return branch

    def has_head(self, repo_path: Path) -> bool:
        """Check whether HEAD points at a commit."""
        result = self.run(
            ["rev-parse", "--verify", "--quiet", "HEAD"], cwd=repo_path, check=False
        )
        return result.ok

    def add(self, repo_path: Path, paths: list[str]) -> None:
        """Stage paths."""
        self.run(["add", "--", *paths], cwd=repo_path)

    def reset_paths(self, repo_path: Path, paths: list[str]) -> None:
        """Remove paths from the index, keeping the working tree."""
        if self.has_head(repo_path):
            self.run(["reset", "--quiet", "HEAD", "--", *paths], cwd=repo_path)
        else:
            # Unborn branch: there is no HEAD to reset to
            self.run(
                ["rm", "--cached", "--force", "--quiet", "--", *paths], cwd=repo_path
            )

    def commit(self, repo_path: Path, message: str) -> None:
        """Commit the staged content."""
        self.run(["commit", "--message", message], cwd=repo_path)
