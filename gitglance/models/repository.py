"""Repository data model."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ProviderKind(Enum):
    """Hosting provider of a repository's origin remote."""

    GITHUB = "github"
    OTHER = "other"
    NONE = "none"


@dataclass(frozen=True)
class Repository:
    """Represents a located Git repository.

    Instances are rebuilt on every lookup and never mutated.
    """

    path: Path
    branch: str | None = None
    remote_url: str | None = None
    provider: ProviderKind = ProviderKind.NONE
    browse_url: str | None = None

    @property
    def name(self) -> str:
        """Return display name for the repository."""
        return self.path.name

    @property
    def is_github(self) -> bool:
        return self.provider is ProviderKind.GITHUB
