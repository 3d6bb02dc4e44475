from .base import ContentFetcher
from .download import DownloadService
from .github_api import GitHubAPIService
from .gh_cli import GhCliService

__all__ = [
    "ContentFetcher",
    "DownloadService",
    "GitHubAPIService",
    "GhCliService",
]
