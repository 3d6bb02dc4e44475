"""
Core data models API surface for GHGrab.

This file re-exports model classes from domain-specific modules so callers
can write `from ghgrab.models import X`.
"""

from .github import (
    HostFamily,
    TargetKind,
    EntryKind,
    Target,
    RemoteEntry,
)
from .download import (
    DownloadStatus,
    EventKind,
    DownloadFailure,
    DownloadOutcome,
    DownloadEvent,
    EventCallback,
)
from .config import DownloadConfig

__all__ = [
    # GitHub models
    "HostFamily",
    "TargetKind",
    "EntryKind",
    "Target",
    "RemoteEntry",
    # Download models
    "DownloadStatus",
    "EventKind",
    "DownloadFailure",
    "DownloadOutcome",
    "DownloadEvent",
    "EventCallback",
    # Config models
    "DownloadConfig",
]
