"""Core services for gitglance."""

from .git_runner import ExternalToolFailure, GitClient, GitError, ProcessRunner
from .locator import RepositoryLocator, RepositoryNotFound
from .operations import GitOperations, NothingToCommit
from .remote import classify_remote
from .status_parser import ParseAnomaly, parse_status
from .status_session import StatusSession

__all__ = [
    "ExternalToolFailure",
    "GitClient",
    "GitError",
    "ProcessRunner",
    "RepositoryLocator",
    "RepositoryNotFound",
    "GitOperations",
    "NothingToCommit",
    "classify_remote",
    "ParseAnomaly",
    "parse_status",
    "StatusSession",
]
