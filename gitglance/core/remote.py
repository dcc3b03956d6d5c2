"""Remote URL parsing and hosting provider classification."""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from gitglance.models.repository import ProviderKind

GITHUB_HOST = "github.com"

# scp-like syntax: git@github.com:owner/repo.git
_SCP_PATTERN = re.compile(r"^(?P<user>[^@/\s]+)@(?P<host>[^:/\s]+):(?P<path>[^/\s][^\s]*)$")

_URL_SCHEMES = ("https", "http", "ssh", "git")


@dataclass(frozen=True)
class RemoteLocation:
    """Host and project coordinates parsed from a remote URL."""

    host: str
    owner: str
    repo: str


@dataclass(frozen=True)
class RemoteInfo:
    """Classification result for a remote URL."""

    provider: ProviderKind
    browse_url: str | None = None

    @property
    def is_github(self) -> bool:
        return self.provider is ProviderKind.GITHUB


def _split_project(path: str) -> tuple[str, str] | None:
    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]
    parts = path.split("/")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def parse_remote_url(remote: str | None) -> RemoteLocation | None:
    """Parse an SSH or URL style remote into host, owner and repo.

    Returns None for anything that is not ``<host>/<owner>/<repo>`` shaped.
    """
    if not remote:
        return None
    remote = remote.strip()

    match = _SCP_PATTERN.match(remote)
    if match and "://" not in remote:
        host, path = match.group("host"), match.group("path")
    else:
        try:
            parts = urlsplit(remote)
            host = parts.hostname
        except ValueError:
            return None
        if parts.scheme not in _URL_SCHEMES or not host:
            return None
        path = parts.path

    project = _split_project(path)
    if project is None:
        return None
    return RemoteLocation(host=host.lower(), owner=project[0], repo=project[1])


def classify_remote(remote: str | None) -> RemoteInfo:
    """Classify a remote URL and derive a browsable URL for GitHub remotes.

    Never raises; a missing remote yields ``ProviderKind.NONE`` and a remote
    that cannot be parsed yields ``ProviderKind.OTHER`` without a URL.
    """
    if not remote or not remote.strip():
        return RemoteInfo(provider=ProviderKind.NONE)

    location = parse_remote_url(remote)
    if location is None or location.host != GITHUB_HOST:
        return RemoteInfo(provider=ProviderKind.OTHER)

    return RemoteInfo(
        provider=ProviderKind.GITHUB,
        browse_url=f"https://{GITHUB_HOST}/{location.owner}/{location.repo}",
    )
