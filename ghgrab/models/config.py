"""
Configuration models for GHGrab downloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


def _default_destination() -> Path:
    return Path.home() / "Downloads"


@dataclass
class DownloadConfig:
    """
    Unified configuration for a download invocation.

    Covers where content lands, how many remote calls may be outstanding
    and how the transport talks to GitHub.
    """

    # Destination settings
    destination: Path = field(default_factory=_default_destination)

    # Concurrency settings (1 keeps listing order strictly sequential)
    max_concurrent_downloads: int = 1

    # Transport settings
    timeout: int = 30
    max_retries: int = 3
    api_base: str = "https://api.github.com"
    user_agent: str = "ghgrab"
    gh_executable: str = "gh"

    def __post_init__(self) -> None:
        self.destination = Path(self.destination).expanduser()
        if self.max_concurrent_downloads <= 0:
            raise ValueError("max_concurrent_downloads must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries cannot be negative")


__all__ = [
    "DownloadConfig",
]
