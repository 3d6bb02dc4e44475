"""
Local filesystem writes for downloaded content.
"""

import asyncio
from pathlib import Path

from ..infrastructure.error_handler import MaterializeError
from ..infrastructure.logger import logger


class DownloadService:
    """Materializes fetched bytes on disk, overwriting what is there."""

    async def ensure_directory(self, path: Path) -> None:
        """
        Create ``path`` and any missing parents.

        Raises:
            MaterializeError: If the directory cannot be created
        """
        try:
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise MaterializeError(f"Cannot create directory {path}", e) from e

    async def save_content(self, content: bytes, destination: Path) -> int:
        """
        Write ``content`` to ``destination``, creating parent directories.

        Any existing file at ``destination`` is truncated and replaced.

        Returns:
            Number of bytes written

        Raises:
            MaterializeError: On permission or disk failures
        """
        await self.ensure_directory(destination.parent)

        try:
            written = await asyncio.to_thread(destination.write_bytes, content)
        except OSError as e:
            raise MaterializeError(f"Cannot write {destination}", e) from e

        logger.debug(f"Wrote {destination} ({written} bytes)")
        return written


__all__ = [
    "DownloadService",
]
