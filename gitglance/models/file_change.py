"""File change records produced by a status refresh."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID, uuid4


class FileChangeStatus(Enum):
    """Status of a changed file, keyed by its porcelain letter."""

    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    UNTRACKED = "?"
    STAGED = "S"

    @property
    def display_name(self) -> str:
        """Return the human readable label."""
        return self.name.capitalize()

    @property
    def symbol_name(self) -> str:
        """Return the icon tag used when rendering this status."""
        return _SYMBOL_NAMES[self]


_SYMBOL_NAMES = {
    FileChangeStatus.MODIFIED: "pencil",
    FileChangeStatus.ADDED: "plus.circle",
    FileChangeStatus.DELETED: "minus.circle",
    FileChangeStatus.RENAMED: "arrow.right",
    FileChangeStatus.UNTRACKED: "questionmark.circle",
    FileChangeStatus.STAGED: "checkmark.circle",
}


@dataclass(frozen=True)
class FileChange:
    """A changed path in the working tree or index.

    Records compare by ``id`` only, so two records built from the same
    status line are distinct.
    """

    path: str
    unstaged_status: FileChangeStatus | None = None
    staged_status: FileChangeStatus | None = None
    original_path: str | None = None  # Source path of a rename or copy
    id: UUID = field(default_factory=uuid4)

    @property
    def display_path(self) -> str:
        """Return the path with forward slashes only."""
        return self.path.replace("\\", "/")

    @property
    def is_staged(self) -> bool:
        return self.staged_status is not None

    @property
    def has_unstaged_changes(self) -> bool:
        return self.unstaged_status is not None

    @property
    def status(self) -> FileChangeStatus:
        """Return the status shown for the file in a single-column list."""
        return self.unstaged_status or self.staged_status or FileChangeStatus.MODIFIED

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileChange):
            return False
        return self.id == other.id
