"""
GitHub domain models for GHGrab.

This module contains strongly typed data classes and enums describing what
to download (a resolved ``Target``) and what a remote directory contains
(``RemoteEntry``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class HostFamily(Enum):
    """URL families understood by the resolver."""

    RAW = "raw.githubusercontent.com"       # Raw content host, files only
    BROWSER = "github.com"                  # Repository browser host
    UNRECOGNIZED = ""

    @classmethod
    def from_hostname(cls, hostname: Optional[str]) -> "HostFamily":
        host = (hostname or "").lower()
        for family in (cls.RAW, cls.BROWSER):
            if host == family.value:
                return family
        return cls.UNRECOGNIZED


class TargetKind(Enum):
    """What a resolved URL points at."""

    FILE = "file"
    DIRECTORY = "dir"


class EntryKind(Enum):
    """Kind of one item in a remote directory listing."""

    FILE = "file"
    DIRECTORY = "dir"
    OTHER = "other"     # symlinks, submodules and anything unknown

    @classmethod
    def from_api(cls, value: Optional[str]) -> "EntryKind":
        if value == "file":
            return cls.FILE
        if value == "dir":
            return cls.DIRECTORY
        return cls.OTHER


@dataclass(frozen=True)
class Target:
    """Immutable, canonical description of what to download."""

    owner: str
    repo: str
    ref: str
    path: str
    display_name: str
    kind: TargetKind
    host: HostFamily = HostFamily.BROWSER

    def __post_init__(self) -> None:
        if not self.owner or not self.repo or not self.ref:
            raise ValueError("Target owner, repo and ref are required")

        if self.path.startswith('/') or self.path.endswith('/'):
            raise ValueError(f"Target path must not start or end with '/': {self.path!r}")

        if not self.display_name:
            raise ValueError("Target display name cannot be empty")

    @property
    def is_directory(self) -> bool:
        return self.kind is TargetKind.DIRECTORY

    @property
    def display_path(self) -> str:
        return f'{self.owner}/{self.repo}@{self.ref}:{self.path or "/"}'


@dataclass(frozen=True)
class RemoteEntry:
    """One child item returned by a directory listing."""

    name: str
    path: str
    kind: EntryKind
    download_url: Optional[str] = None
    size: int = 0

    @classmethod
    def from_api(cls, item: Mapping[str, Any]) -> "RemoteEntry":
        """Build an entry from one item of the GitHub contents API."""

        name = item.get("name") or ""
        return cls(
            name=name,
            path=item.get("path") or name,
            kind=EntryKind.from_api(item.get("type")),
            download_url=item.get("download_url"),
            size=item.get("size") or 0,
        )


__all__ = [
    "HostFamily",
    "TargetKind",
    "EntryKind",
    "Target",
    "RemoteEntry",
]
