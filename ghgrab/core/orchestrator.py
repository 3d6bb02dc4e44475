"""
Orchestrator for one download invocation: resolve the URL, download the
file or the directory tree, report the outcome.
"""

import asyncio
from pathlib import Path
from typing import Optional

from ..models import (
    DownloadEvent, DownloadOutcome, EventCallback, EventKind, Target, TargetKind
)
from ..services import ContentFetcher, DownloadService
from .resolver import TargetResolver
from .tree import TreeDownloader

from ghgrab.infrastructure.error_handler import GrabError
from ghgrab.infrastructure.logger import logger


####
##      DOWNLOAD ORCHESTRATOR
#####
class DownloadOrchestrator:
    """
    Runs the whole pipeline for one URL.

    ``Resolving -> Fetching/Listing -> Writing -> Done | Failed``. The only
    branch is file vs. directory; nothing is retried at this layer.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        download_service: DownloadService,
        max_concurrent_downloads: int = 1,
        resolver: Optional[TargetResolver] = None,
        on_event: Optional[EventCallback] = None,
    ):
        self.fetcher = fetcher
        self.download_service = download_service
        self.max_concurrent_downloads = max_concurrent_downloads
        self.resolver = resolver or TargetResolver()
        self.on_event = on_event

        self._current_target: Optional[Target] = None
        self._cancellation_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._current_target is not None

    async def run(
        self,
        raw_url: str,
        destination_root: Path,
        on_event: Optional[EventCallback] = None,
    ) -> DownloadOutcome:
        """
        Download whatever ``raw_url`` points at into ``destination_root``.

        Args:
            raw_url: GitHub file or folder URL
            destination_root: Directory receiving the file or folder
            on_event: Progress callback overriding the orchestrator's own

        Returns:
            DownloadOutcome for the invocation

        Raises:
            InvalidUrlError: If the URL cannot be resolved
            RemoteError: If the file, or the root directory listing, cannot be fetched
            MaterializeError: If the file, or the root directory, cannot be written
        """
        if self.is_running:
            raise RuntimeError("A download is already running on this orchestrator")

        callback = on_event or self.on_event
        target = self.resolver.resolve(raw_url)
        destination_root = Path(destination_root)

        logger.info(f"Downloading {target.kind.value} {target.display_path}")

        self._cancellation_event.clear()
        self._current_target = target
        try:
            if target.kind is TargetKind.FILE:
                outcome = await self._download_file(target, destination_root, callback)
            else:
                outcome = await self._download_directory(target, destination_root, callback)
        except GrabError as e:
            logger.error(f"Download failed: {e}")
            raise
        finally:
            self._current_target = None

        self._log_outcome(outcome)
        if callback is not None:
            callback(DownloadEvent(
                kind=EventKind.COMPLETED,
                remote_path=target.path,
                local_path=outcome.destination_root,
                outcome=outcome,
            ))
        return outcome

    async def _download_file(
        self,
        target: Target,
        destination_root: Path,
        callback: Optional[EventCallback],
    ) -> DownloadOutcome:
        destination = destination_root / target.display_name

        content = await self.fetcher.fetch_file(
            target.owner, target.repo, target.ref, target.path
        )
        if self._cancellation_event.is_set():
            return DownloadOutcome(
                kind=TargetKind.FILE, destination_root=destination, cancelled=True
            )

        bytes_written = await self.download_service.save_content(content, destination)
        logger.debug(f"Downloaded {target.path} ({bytes_written} bytes)")

        if callback is not None:
            callback(DownloadEvent(
                kind=EventKind.FILE_WRITTEN, remote_path=target.path, local_path=destination
            ))

        return DownloadOutcome(
            kind=TargetKind.FILE, files_written=1, destination_root=destination
        )

    async def _download_directory(
        self,
        target: Target,
        destination_root: Path,
        callback: Optional[EventCallback],
    ) -> DownloadOutcome:
        tree = TreeDownloader(
            self.fetcher,
            self.download_service,
            max_concurrent_downloads=self.max_concurrent_downloads,
            cancellation_event=self._cancellation_event,
            on_event=callback,
        )
        return await tree.download_tree(target, destination_root / target.display_name)

    def _log_outcome(self, outcome: DownloadOutcome) -> None:
        if outcome.cancelled:
            logger.info(f"Download cancelled after {outcome.files_written} files")
        elif outcome.failures:
            logger.warning(
                f"Download finished with errors: {outcome.files_written} written, "
                f"{len(outcome.failures)} failed"
            )
        else:
            logger.info(
                f"Download completed: {outcome.files_written} files in "
                f"{outcome.destination_root}"
            )

    def cancel(self) -> bool:
        """
        Ask the running download to stop at the next entry boundary.

        Returns:
            True if a download was running, False otherwise
        """
        if not self.is_running:
            logger.warning("No active download to cancel")
            return False

        self._cancellation_event.set()
        logger.info("Download cancelled by user")
        return True


__all__ = [
    "DownloadOrchestrator",
]
