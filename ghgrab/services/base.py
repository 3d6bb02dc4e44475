"""
Contract between the download core and whatever talks to GitHub.
"""

from typing import List, Protocol, runtime_checkable

from ..models import RemoteEntry


@runtime_checkable
class ContentFetcher(Protocol):
    """
    Source of repository content.

    Implementations own their transport (HTTP, CLI subprocess, ...) and
    raise ``RemoteError`` or a subclass on any failure.
    """

    async def fetch_file(self, owner: str, repo: str, ref: str, path: str) -> bytes:
        """Return the decoded bytes of the file at the given coordinates."""
        ...

    async def list_directory(
        self, owner: str, repo: str, ref: str, path: str
    ) -> List[RemoteEntry]:
        """Return the immediate children of a directory, in listing order."""
        ...


__all__ = [
    "ContentFetcher",
]
