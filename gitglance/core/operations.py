"""Stage, unstage and commit operations."""

import logging
from collections.abc import Iterable

from gitglance.models.file_change import FileChange

from .git_runner import GitClient, GitError
from .status_session import StatusSession

logger = logging.getLogger(__name__)


class NothingToCommit(GitError):
    """Raised when a commit is requested without staged changes."""

    def __init__(self) -> None:
        super().__init__("Nothing to commit: no staged changes")


class GitOperations:
    """Mutating git operations bound to a status session.

    Every operation runs its git command and then starts a refresh of the
    session. The new state is only known once that refresh is published;
    nothing is patched into the file list locally. When git fails the
    error propagates and no refresh is started.
    """

    def __init__(self, session: StatusSession, client: GitClient | None = None) -> None:
        self._session = session
        self._client = client or session.client

    @property
    def session(self) -> StatusSession:
        return self._session

    def stage(self, file: FileChange) -> int:
        """Stage a file and return the generation of the follow-up refresh."""
        return self.stage_files([file])

    def stage_files(self, files: Iterable[FileChange]) -> int:
        """Stage several files with a single ``git add``."""
        paths = [f.path for f in files]
        if not paths:
            return self._session.refresh()

        self._client.add(self._session.repository.path, paths)
        logger.info("Staged %s", ", ".join(paths))
        return self._session.refresh()

    def unstage(self, file: FileChange) -> int:
        """Unstage a file and return the generation of the follow-up refresh."""
        return self.unstage_files([file])

    def unstage_files(self, files: Iterable[FileChange]) -> int:
        """Remove several files from the index."""
        paths: list[str] = []
        for f in files:
            # A staged rename also removed the old path from the index
            if f.original_path and f.original_path not in paths:
                paths.append(f.original_path)
            if f.path not in paths:
                paths.append(f.path)
        if not paths:
            return self._session.refresh()

        self._client.reset_paths(self._session.repository.path, paths)
        logger.info("Unstaged %s", ", ".join(paths))
        return self._session.refresh()

    def commit(self, message: str, files: Iterable[FileChange] | None = None) -> int:
        """Commit the index, staging ``files`` first.

        The commit covers everything staged once ``files`` has been added,
        not only the selection.

        Args:
            message: Commit message
            files: Files to stage before committing. Without a selection the
                session's published list must hold at least one staged file.

        Returns:
            Generation of the follow-up refresh.

        Raises:
            NothingToCommit: if nothing is selected and nothing is staged. No
                git command is run in that case.
            ValueError: if the message is empty.
        """
        selected = [] if files is None else list(files)
        staged = [f for f in self._session.files if f.is_staged]
        if not selected and not staged:
            raise NothingToCommit()

        message = message.strip()
        if not message:
            raise ValueError("Commit message cannot be empty")

        repo_path = self._session.repository.path
        if selected:
            self._client.add(repo_path, [f.path for f in selected])
        self._client.commit(repo_path, message)
        logger.info(
            "Committed %d selected and %d staged file(s) in %s",
            len(selected),
            len(staged),
            self._session.repository.name,
        )
        return self._session.refresh()
