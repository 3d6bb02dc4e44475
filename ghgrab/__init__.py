"""
GHGrab - download a single file or a folder from a GitHub URL.
"""

__version__ = "0.1.0"

from .core import DownloadOrchestrator, TargetResolver, TreeDownloader, resolve_target
from .interfaces.api import GitHubGrabber
from .models import DownloadConfig, DownloadOutcome, Target, TargetKind

__all__ = [
    "__version__",
    "DownloadOrchestrator",
    "TargetResolver",
    "TreeDownloader",
    "resolve_target",
    "GitHubGrabber",
    "DownloadConfig",
    "DownloadOutcome",
    "Target",
    "TargetKind",
]
