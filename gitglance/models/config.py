"""Application configuration management."""

import json
from dataclasses import dataclass, field
from pathlib import Path


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_dir = Path.home() / ".config" / "gitglance"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get the main configuration file path."""
    return get_config_dir() / "config.json"


def default_search_paths() -> list[str]:
    """Directories scanned for repositories when none are configured."""
    home = Path.home()
    return [
        str(home / "Development"),
        str(home / "Projects"),
        str(home / "Documents" / "GitHub"),
        str(home / "Documents" / "Projects"),
    ]


@dataclass
class AppConfig:
    """Application configuration."""

    # Git settings
    git_command: str = "git"
    status_timeout: float = 30.0
    untracked_files: str = "all"  # no | normal | all

    # Repository discovery
    search_paths: list[str] = field(default_factory=default_search_paths)
    discovery_depth: int = 2

    # Logging
    log_level: str = "INFO"

    def save(self) -> None:
        """Save configuration to file."""
        config_file = get_config_file()
        with open(config_file, "w") as f:
            json.dump(self._to_dict(), f, indent=2)

    def _to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "git": {
                "command": self.git_command,
                "status_timeout": self.status_timeout,
                "untracked_files": self.untracked_files,
            },
            "discovery": {
                "search_paths": self.search_paths,
                "depth": self.discovery_depth,
            },
            "logging": {
                "level": self.log_level,
            },
        }

    @classmethod
    def load(cls) -> "AppConfig":
        """Load configuration from file."""
        config_file = get_config_file()
        if not config_file.exists():
            return cls()

        try:
            with open(config_file) as f:
                data = json.load(f)
            return cls._from_dict(data)
        except (json.JSONDecodeError, KeyError, AttributeError):
            return cls()

    @classmethod
    def _from_dict(cls, data: dict) -> "AppConfig":
        """Create from dictionary."""
        git = data.get("git", {})
        discovery = data.get("discovery", {})
        logging_ = data.get("logging", {})

        return cls(
            git_command=git.get("command", "git"),
            status_timeout=git.get("status_timeout", 30.0),
            untracked_files=git.get("untracked_files", "all"),
            search_paths=discovery.get("search_paths", default_search_paths()),
            discovery_depth=discovery.get("depth", 2),
            log_level=logging_.get("level", "INFO"),
        )

    def add_search_path(self, path: str) -> None:
        """Add a repository search path."""
        if path not in self.search_paths:
            self.search_paths.append(path)
            self.save()

    def remove_search_path(self, path: str) -> None:
        """Remove a repository search path."""
        if path in self.search_paths:
            self.search_paths.remove(path)
            self.save()
