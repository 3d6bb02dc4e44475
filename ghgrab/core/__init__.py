from .resolver import TargetResolver, resolve_target
from .tree import TreeDownloader
from .orchestrator import DownloadOrchestrator

__all__ = [
    "TargetResolver",
    "resolve_target",
    "TreeDownloader",
    "DownloadOrchestrator",
]
