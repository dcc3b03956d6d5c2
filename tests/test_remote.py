"""Tests for remote URL classification."""

import pytest

from gitglance.core.remote import RemoteLocation, classify_remote, parse_remote_url
from gitglance.models import ProviderKind


class TestParseRemoteUrl:
    """Tests for parse_remote_url()."""

    @pytest.mark.parametrize(
        "remote",
        [
            "git@github.com:user/repo.git",
            "git@github.com:user/repo",
            "https://github.com/user/repo.git",
            "https://github.com/user/repo",
            "https://github.com/user/repo/",
            "https://token@github.com/user/repo.git",
            "ssh://git@github.com/user/repo.git",
            "ssh://git@github.com:22/user/repo.git",
        ],
    )
    def test_github_forms(self, remote: str) -> None:
        """Test the supported SSH and HTTPS shapes."""
        assert parse_remote_url(remote) == RemoteLocation(
            host="github.com", owner="user", repo="repo"
        )

    def test_host_is_lowercased(self) -> None:
        """Test that host matching can ignore case."""
        location = parse_remote_url("git@GitHub.COM:User/Repo.git")

        assert location is not None
        assert location.host == "github.com"
        assert location.owner == "User"
        assert location.repo == "Repo"

    @pytest.mark.parametrize(
        "remote",
        [
            None,
            "",
            "not a url",
            "/srv/git/repo.git",
            "file:///srv/git/repo.git",
            "https://github.com/user",
            "https://github.com/",
            "git@github.com:",
        ],
    )
    def test_malformed(self, remote: str | None) -> None:
        """Test that malformed remotes are rejected without raising."""
        assert parse_remote_url(remote) is None


class TestClassifyRemote:
    """Tests for classify_remote()."""

    def test_github_ssh(self) -> None:
        """Test classification of a GitHub SSH remote."""
        info = classify_remote("git@github.com:user/repo.git")

        assert info.is_github is True
        assert info.provider is ProviderKind.GITHUB
        assert info.browse_url == "https://github.com/user/repo"

    def test_github_https(self) -> None:
        """Test classification of a GitHub HTTPS remote."""
        info = classify_remote("https://github.com/user/repo.git")

        assert info.is_github is True
        assert info.browse_url == "https://github.com/user/repo"

    def test_github_uppercase_host(self) -> None:
        """Test that the host comparison ignores case."""
        info = classify_remote("https://GITHUB.com/user/repo")

        assert info.is_github is True
        assert info.browse_url == "https://github.com/user/repo"

    def test_gitlab(self) -> None:
        """Test that other hosts get no browse URL."""
        info = classify_remote("git@gitlab.com:user/repo.git")

        assert info.is_github is False
        assert info.provider is ProviderKind.OTHER
        assert info.browse_url is None

    def test_lookalike_host(self) -> None:
        """Test that only github.com itself counts as GitHub."""
        assert classify_remote("https://github.com.evil.example/user/repo").is_github is False
        assert classify_remote("git@notgithub.com:user/repo.git").is_github is False

    @pytest.mark.parametrize("remote", [None, "", "   "])
    def test_absent(self, remote: str | None) -> None:
        """Test that a missing remote has no provider."""
        info = classify_remote(remote)

        assert info.provider is ProviderKind.NONE
        assert info.is_github is False
        assert info.browse_url is None

    def test_malformed(self) -> None:
        """Test that garbage input is classified without raising."""
        info = classify_remote("::garbage::")

        assert info.is_github is False
        assert info.provider is ProviderKind.OTHER
        assert info.browse_url is None
