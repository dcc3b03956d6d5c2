"""Repository discovery from filesystem paths."""

import logging
from collections.abc import Iterable
from pathlib import Path

from gitglance.models.repository import Repository

from .git_runner import GitClient, GitError
from .remote import classify_remote

logger = logging.getLogger(__name__)

GIT_DIR_NAME = ".git"


class RepositoryNotFound(GitError):
    """Raised when no enclosing repository exists for a path."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Not a Git repository: {path}")


class RepositoryLocator:
    """Finds the repository enclosing a path and reads its metadata."""

    def __init__(self, client: GitClient | None = None) -> None:
        self._client = client or GitClient()

    def find_root(self, path: Path | str) -> Path | None:
        """Walk up from ``path`` to the first directory holding ``.git``.

        ``.git`` may be a directory or the file used by worktrees and
        submodules. Returns None when the filesystem root is reached.
        """
        current = Path(path).expanduser().resolve()
        if current.is_file():
            current = current.parent

        for candidate in (current, *current.parents):
            if (candidate / GIT_DIR_NAME).exists():
                return candidate
        return None

    def find_repository(self, path: Path | str) -> Repository | None:
        """Locate the repository containing ``path``, or None."""
        root = self.find_root(path)
        if root is None:
            logger.debug("No repository found above %s", path)
            return None
        return self._load_repository(root)

    def get_repository(self, path: Path | str) -> Repository:
        """Locate the repository containing ``path``.

        Raises:
            RepositoryNotFound: if no ancestor is a repository.
        """
        repo = self.find_repository(path)
        if repo is None:
            raise RepositoryNotFound(Path(path))
        return repo

    def discover_repositories(
        self, search_paths: Iterable[Path | str], max_depth: int = 2
    ) -> list[Repository]:
        """Find repositories below the given directories.

        Each search path is scanned ``max_depth`` levels deep; hidden
        directories are skipped and repositories are not searched further.
        """
        roots: set[Path] = set()
        for search_path in search_paths:
            directory = Path(search_path).expanduser()
            if not directory.is_dir():
                continue
            roots.update(self._scan(directory.resolve(), max_depth))

        return [self._load_repository(root) for root in sorted(roots)]

    def _scan(self, directory: Path, depth: int) -> list[Path]:
        if depth <= 0:
            return []
        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            logger.warning("Cannot scan %s: %s", directory, e)
            return []

        found = []
        for child in children:
            if child.name.startswith(".") or not child.is_dir():
                continue
            if (child / GIT_DIR_NAME).exists():
                found.append(child)
            else:
                found.extend(self._scan(child, depth - 1))
        return found

    def _load_repository(self, root: Path) -> Repository:
        """Read branch and origin remote for a repository root."""
        try:
            remote_url = self._client.remote_url(root)
            branch = self._client.current_branch(root)
        except GitError as e:
            logger.warning("Could not read repository metadata for %s: %s", root, e)
            remote_url = None
            branch = None

        info = classify_remote(remote_url)
        return Repository(
            path=root,
            branch=branch,
            remote_url=remote_url,
            provider=info.provider,
            browse_url=info.browse_url,
        )
