"""
High-level Python API for GHGrab.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..core import DownloadOrchestrator, TargetResolver
from ..infrastructure.logger import logger
from ..infrastructure.rate_limiter import RateLimiter
from ..infrastructure.retry_manager import RetryConfig, RetryManager
from ..models import DownloadConfig, DownloadOutcome, EventCallback, Target
from ..services import ContentFetcher, DownloadService, GhCliService, GitHubAPIService


class GitHubGrabber:
    """
    Download a file or folder from a GitHub URL.

    Example::

        async with GitHubGrabber(auth_token="...") as grabber:
            outcome = await grabber.download(
                "https://github.com/owner/repo/tree/main/docs"
            )
    """

    def __init__(
        self,
        auth_token: Optional[str] = None,
        config: Optional[DownloadConfig] = None,
        verbose: bool = False,
        use_gh_cli: bool = False,
    ):
        self.auth_token = auth_token
        self.config = config or DownloadConfig()
        self.verbose = verbose
        self.use_gh_cli = use_gh_cli
        self.set_verbose(verbose)

        self.resolver = TargetResolver()
        self.fetcher = self._create_fetcher()
        self.download_service = DownloadService()
        self.orchestrator = DownloadOrchestrator(
            self.fetcher,
            self.download_service,
            max_concurrent_downloads=self.config.max_concurrent_downloads,
            resolver=self.resolver,
        )

    def _create_fetcher(self) -> ContentFetcher:
        if self.use_gh_cli:
            return GhCliService(executable=self.config.gh_executable)

        return GitHubAPIService(
            RateLimiter(),
            RetryManager.from_config(RetryConfig(max_retries=self.config.max_retries)),
            auth_token=self.auth_token,
            api_base=self.config.api_base,
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
        )

    def set_verbose(self, verbose: bool) -> None:
        """Switch the package logger between DEBUG and INFO."""

        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def resolve(self, url: str) -> Target:
        return self.resolver.resolve(url)

    async def download(
        self,
        url: str,
        destination: Optional[Union[str, Path]] = None,
        on_event: Optional[EventCallback] = None,
    ) -> DownloadOutcome:
        """
        Download the file or folder ``url`` points at.

        Args:
            url: GitHub file or folder URL
            destination: Directory receiving the download (defaults to
                ``config.destination``)
            on_event: Optional progress callback

        Returns:
            DownloadOutcome describing what was written and what failed
        """
        root = Path(destination).expanduser() if destination else self.config.destination
        return await self.orchestrator.run(url, root, on_event=on_event)

    def cancel_current_download(self) -> bool:
        """Stop the running download at the next entry boundary."""
        return self.orchestrator.cancel()

    async def close(self) -> None:
        if isinstance(self.fetcher, GitHubAPIService):
            await self.fetcher.close()

    async def __aenter__(self) -> "GitHubGrabber":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


__all__ = [
    "GitHubGrabber",
    "DownloadConfig",
]
