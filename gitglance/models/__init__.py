"""Data models for gitglance."""

from .repository import ProviderKind, Repository
from .file_change import FileChange, FileChangeStatus
from .config import AppConfig

__all__ = [
    "ProviderKind",
    "Repository",
    "FileChange",
    "FileChangeStatus",
    "AppConfig",
]
