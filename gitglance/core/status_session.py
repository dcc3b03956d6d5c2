"""Observable git status model for one repository."""

import logging
from pathlib import Path

from PySide6.QtCore import QEventLoop, QObject, Qt, QThread, QTimer, Signal

from gitglance.models.file_change import FileChange
from gitglance.models.repository import Repository

from .git_runner import GitClient, GitError
from .status_parser import parse_status
from .utils import safe_slot

logger = logging.getLogger(__name__)


class StatusRefreshWorker(QThread):
    """Worker thread that runs ``git status`` and parses the output."""

    completed = Signal(int, object, object)  # generation, files, error

    def __init__(
        self,
        client: GitClient,
        repo_path: Path,
        generation: int,
        untracked_files: str = "all",
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._client = client
        self._repo_path = repo_path
        self._generation = generation
        self._untracked_files = untracked_files

    @property
    def generation(self) -> int:
        return self._generation

    def run(self) -> None:
        """Run the status query in background thread."""
        try:
            output = self._client.status(self._repo_path, untracked=self._untracked_files)
            files = parse_status(output)
        except Exception as e:
            self.completed.emit(self._generation, None, e)
            return
        self.completed.emit(self._generation, files, None)


class StatusSession(QObject):
    """Owns the published list of file changes for a repository.

    Each refresh gets a generation number when it is issued. A finished
    refresh is published only if no newer refresh was issued meanwhile,
    so a slow, older result can never replace a newer one. Results are
    published on the thread that owns the session.
    """

    # Signals
    files_changed = Signal(object)  # list[FileChange]
    loading_changed = Signal(bool)
    refresh_failed = Signal(object)  # GitError
    refresh_finished = Signal(int, bool)  # generation, published

    def __init__(
        self,
        repository: Repository,
        client: GitClient | None = None,
        untracked_files: str = "all",
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._repository = repository
        self._client = client or GitClient()
        self._untracked_files = untracked_files
        self._files: list[FileChange] = []
        self._generation = 0
        self._published_generation = 0
        self._workers: dict[int, StatusRefreshWorker] = {}
        self._last_error: Exception | None = None

    @property
    def repository(self) -> Repository:
        return self._repository

    @property
    def client(self) -> GitClient:
        return self._client

    @property
    def files(self) -> list[FileChange]:
        """Snapshot of the published file changes."""
        return list(self._files)

    @property
    def staged_files(self) -> list[FileChange]:
        return [f for f in self._files if f.is_staged]

    @property
    def generation(self) -> int:
        """Generation of the most recently issued refresh."""
        return self._generation

    @property
    def published_generation(self) -> int:
        """Generation of the refresh whose result is currently published."""
        return self._published_generation

    @property
    def is_refreshing(self) -> bool:
        return bool(self._workers)

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    def refresh(self) -> int:
        """Start an asynchronous refresh and return its generation.

        Connect to ``files_changed`` for the result and ``refresh_failed``
        for errors.
        """
        self._generation += 1
        generation = self._generation

        worker = StatusRefreshWorker(
            client=self._client,
            repo_path=self._repository.path,
            generation=generation,
            untracked_files=self._untracked_files,
            parent=self,
        )
        worker.completed.connect(
            self._on_worker_completed, Qt.ConnectionType.QueuedConnection
        )
        worker.finished.connect(worker.deleteLater)

        was_idle = not self._workers
        self._workers[generation] = worker
        if was_idle:
            self.loading_changed.emit(True)

        logger.debug("Refresh %d started for %s", generation, self._repository.path)
        worker.start()
        return generation

    def refresh_now(self) -> list[FileChange]:
        """Refresh synchronously in the calling thread.

        In-flight asynchronous refreshes are superseded.

        Raises:
            GitError: if git fails; the published list is left unchanged.
        """
        self._generation += 1
        generation = self._generation
        try:
            output = self._client.status(
                self._repository.path, untracked=self._untracked_files
            )
        except GitError as e:
            self._last_error = e
            raise
        self._publish(generation, parse_status(output))
        return self.files

    def wait_until_idle(self, timeout_ms: int = 10000) -> bool:
        """Process events until no refresh is running.

        Returns False if refreshes are still running after ``timeout_ms``.
        """
        if not self._workers:
            return True

        loop = QEventLoop()
        timer = QTimer()
        timer.setSingleShot(True)
        timer.timeout.connect(loop.quit)

        def on_loading_changed(loading: bool) -> None:
            if not loading:
                loop.quit()

        self.loading_changed.connect(on_loading_changed)
        timer.start(timeout_ms)
        loop.exec()
        timer.stop()
        self.loading_changed.disconnect(on_loading_changed)
        return not self._workers

    def shutdown(self) -> None:
        """Block until running worker threads exit.

        Workers whose result was already handled may still be finishing
        ``run()``, so every worker child is waited on.
        """
        for worker in self.findChildren(StatusRefreshWorker):
            worker.wait()

    @safe_slot
    def _on_worker_completed(
        self, generation: int, files: list[FileChange] | None, error: Exception | None
    ) -> None:
        """Handle a finished refresh worker."""
        self._workers.pop(generation, None)

        published = False
        if generation != self._generation:
            logger.debug(
                "Discarding refresh %d, superseded by %d", generation, self._generation
            )
        elif error is not None:
            self._last_error = error
            logger.error("Refresh %d failed: %s", generation, error)
            self.refresh_failed.emit(error)
        else:
            published = self._publish(generation, files or [])

        self.refresh_finished.emit(generation, published)
        if not self._workers:
            self.loading_changed.emit(False)

    def _publish(self, generation: int, files: list[FileChange]) -> bool:
        """Replace the published list if ``generation`` is still the latest."""
        if generation != self._generation:
            return False
        self._files = list(files)
        self._published_generation = generation
        self._last_error = None
        logger.debug("Published %d changes from refresh %d", len(self._files), generation)
        self.files_changed.emit(self.files)
        return True
