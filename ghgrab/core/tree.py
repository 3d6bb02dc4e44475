"""
Recursive download of a remote directory subtree.
"""

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

from ..infrastructure.error_handler import MaterializeError, RemoteError
from ..infrastructure.logger import logger
from ..models import (
    DownloadEvent, DownloadOutcome, EntryKind, EventCallback, EventKind,
    RemoteEntry, Target, TargetKind
)
from ..services import ContentFetcher, DownloadService


class _Cancelled(Exception):
    """Raised internally when cancellation is observed at an entry boundary."""


def _local_child(directory: Path, name: str) -> Path:
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise MaterializeError(f"Refusing unsafe entry name {name!r}")
    return directory / name


class TreeDownloader:
    """
    Mirrors a remote directory into a local one.

    Entries are visited depth-first in listing order. A failure to fetch
    or write one file, or to list one subdirectory, is recorded in the
    outcome and traversal moves on; only failures at the root are fatal.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        download_service: DownloadService,
        max_concurrent_downloads: int = 1,
        cancellation_event: Optional[asyncio.Event] = None,
        on_event: Optional[EventCallback] = None,
    ):
        if max_concurrent_downloads <= 0:
            raise ValueError("max_concurrent_downloads must be positive")

        self.fetcher = fetcher
        self.download_service = download_service
        self.max_concurrent_downloads = max_concurrent_downloads
        self._semaphore = asyncio.Semaphore(max_concurrent_downloads)
        self._cancellation_event = cancellation_event or asyncio.Event()
        self._on_event = on_event

    async def download_tree(self, target: Target, destination_root: Path) -> DownloadOutcome:
        """
        Download the directory ``target`` into ``destination_root``.

        Args:
            target: Directory target to mirror
            destination_root: Local directory receiving the target's children

        Returns:
            DownloadOutcome aggregating every file written and every
            recovered failure

        Raises:
            MaterializeError: If ``destination_root`` cannot be created
            RemoteError: If the root directory cannot be listed
        """
        if target.kind is not TargetKind.DIRECTORY:
            raise ValueError(f"Not a directory target: {target.display_path}")

        outcome = DownloadOutcome(kind=TargetKind.DIRECTORY, destination_root=destination_root)

        await self.download_service.ensure_directory(destination_root)

        try:
            entries = await self._list(target, target.path)
        except _Cancelled:
            outcome.cancelled = True
            return outcome

        outcome.merge(await self._download_entries(target, entries, destination_root))
        return outcome

    async def _download_entries(
        self, target: Target, entries: List[RemoteEntry], local_dir: Path
    ) -> DownloadOutcome:
        outcome = DownloadOutcome(kind=TargetKind.DIRECTORY, destination_root=local_dir)

        if self.max_concurrent_downloads == 1:
            results = []
            for entry in entries:
                results.append(await self._download_entry(target, entry, local_dir))
        else:
            tasks = [
                asyncio.ensure_future(self._download_entry(target, entry, local_dir))
                for entry in entries
            ]
            try:
                # gather keeps results in listing order regardless of finish order
                results = await asyncio.gather(*tasks)
            except BaseException:
                # no sibling may keep writing once this subtree has failed
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        for result in results:
            outcome.merge(result)
        return outcome

    async def _download_entry(
        self, target: Target, entry: RemoteEntry, local_dir: Path
    ) -> DownloadOutcome:
        outcome = DownloadOutcome(kind=TargetKind.DIRECTORY, destination_root=local_dir)

        if entry.kind is EntryKind.OTHER:
            logger.debug(f"Skipping {entry.path} (not a file or directory)")
            return outcome

        if self._cancellation_event.is_set():
            outcome.cancelled = True
            return outcome

        try:
            if entry.kind is EntryKind.FILE:
                await self._download_file(target, entry, local_dir)
                outcome.files_written = 1
            else:
                outcome.merge(await self._download_subdirectory(target, entry, local_dir))
        except _Cancelled:
            outcome.cancelled = True
        except (RemoteError, MaterializeError) as e:
            reason = str(e)
            logger.error(f"Failed to download {entry.path}: {reason}")
            outcome.record_failure(entry.path, reason)
            failed = EventKind.FILE_FAILED if entry.kind is EntryKind.FILE else EventKind.DIRECTORY_FAILED
            self._emit(DownloadEvent(kind=failed, remote_path=entry.path, reason=reason))

        return outcome

    async def _download_file(self, target: Target, entry: RemoteEntry, local_dir: Path) -> None:
        local_path = _local_child(local_dir, entry.name)
        content = await self._remote(
            self.fetcher.fetch_file, target.owner, target.repo, target.ref, entry.path
        )
        await self.download_service.save_content(content, local_path)

        logger.debug(f"Downloaded {entry.path} -> {local_path}")
        self._emit(DownloadEvent(
            kind=EventKind.FILE_WRITTEN, remote_path=entry.path, local_path=local_path
        ))

    async def _download_subdirectory(
        self, target: Target, entry: RemoteEntry, local_dir: Path
    ) -> DownloadOutcome:
        local_path = _local_child(local_dir, entry.name)
        await self.download_service.ensure_directory(local_path)
        self._emit(DownloadEvent(
            kind=EventKind.DIRECTORY_CREATED, remote_path=entry.path, local_path=local_path
        ))

        children = await self._list(target, entry.path)
        return await self._download_entries(target, children, local_path)

    async def _list(self, target: Target, path: str) -> List[RemoteEntry]:
        return await self._remote(
            self.fetcher.list_directory, target.owner, target.repo, target.ref, path
        )

    async def _remote(self, func: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        async with self._semaphore:
            if self._cancellation_event.is_set():
                raise _Cancelled()
            return await func(*args)

    def _emit(self, event: DownloadEvent) -> None:
        if self._on_event is not None:
            self._on_event(event)


__all__ = [
    "TreeDownloader",
]
