"""
Download domain models for GHGrab.

This module contains data classes and enums representing the outcome of one
download invocation and the events emitted while it runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from .github import TargetKind


class DownloadStatus(Enum):
    """End state of a download operation."""

    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"
    CANCELLED = "cancelled"


class EventKind(Enum):
    """Events reported while a download runs."""

    FILE_WRITTEN = "file_written"
    FILE_FAILED = "file_failed"
    DIRECTORY_CREATED = "directory_created"
    DIRECTORY_FAILED = "directory_failed"
    COMPLETED = "completed"


@dataclass(frozen=True)
class DownloadFailure:
    """A recovered per-item failure inside a directory download."""

    remote_path: str
    reason: str


@dataclass
class DownloadOutcome:
    """Aggregate result of one top-level invocation."""

    kind: TargetKind
    files_written: int = 0
    destination_root: Path = field(default_factory=Path)
    failures: List[DownloadFailure] = field(default_factory=list)
    cancelled: bool = False

    def __post_init__(self) -> None:
        if self.files_written < 0:
            raise ValueError("files_written cannot be negative")
        if self.kind is TargetKind.FILE and self.files_written > 1:
            raise ValueError("A file download writes at most one file")

    def merge(self, other: "DownloadOutcome") -> None:
        """Fold a child outcome into this one, keeping failure order."""

        self.files_written += other.files_written
        self.failures.extend(other.failures)
        self.cancelled = self.cancelled or other.cancelled

    def record_failure(self, remote_path: str, reason: str) -> DownloadFailure:
        failure = DownloadFailure(remote_path=remote_path, reason=reason)
        self.failures.append(failure)
        return failure

    @property
    def status(self) -> DownloadStatus:
        if self.cancelled:
            return DownloadStatus.CANCELLED
        if not self.failures:
            return DownloadStatus.COMPLETED
        if self.files_written > 0:
            return DownloadStatus.PARTIAL
        return DownloadStatus.FAILED

    @property
    def is_successful(self) -> bool:
        return self.status == DownloadStatus.COMPLETED

    @property
    def success_rate(self) -> float:
        total = self.files_written + len(self.failures)
        if total == 0:
            return 0.0
        return (self.files_written / total) * 100.0


@dataclass(frozen=True)
class DownloadEvent:
    """A single progress notification."""

    kind: EventKind
    remote_path: str
    local_path: Optional[Path] = None
    reason: Optional[str] = None
    outcome: Optional[DownloadOutcome] = None


EventCallback = Callable[[DownloadEvent], None]


__all__ = [
    "DownloadStatus",
    "EventKind",
    "DownloadFailure",
    "DownloadOutcome",
    "DownloadEvent",
    "EventCallback",
]
