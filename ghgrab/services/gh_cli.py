"""
Content fetcher backed by an already-authenticated GitHub CLI (``gh api``).
"""

import asyncio
import json
from typing import List
from urllib.parse import quote

from ..infrastructure.error_handler import (
    AuthenticationError, ContentNotFoundError, RemoteError
)
from ..infrastructure.logger import logger
from ..models import RemoteEntry


RAW_ACCEPT = "Accept: application/vnd.github.raw"


def _error_for(message: str) -> RemoteError:
    if "HTTP 404" in message:
        return ContentNotFoundError(message)
    if "HTTP 401" in message or "HTTP 403" in message:
        return AuthenticationError(message)
    return RemoteError(message)


class GhCliService:
    """Runs ``gh api`` subprocesses; ``gh`` handles auth and transport."""

    def __init__(self, executable: str = "gh"):
        self.executable = executable

    @staticmethod
    def _api_path(owner: str, repo: str, ref: str, path: str) -> str:
        api_path = f"/repos/{quote(owner)}/{quote(repo)}/contents"
        if path:
            api_path = f"{api_path}/{quote(path, safe='/')}"
        return f"{api_path}?ref={quote(ref, safe='')}"

    async def _run(self, *args: str) -> bytes:
        command = [self.executable, "api", *args]
        logger.debug(f"Running {' '.join(command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RemoteError(f"Cannot run GitHub CLI '{self.executable}'", e) from e

        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            message = stderr.decode(errors="replace").strip()
            raise _error_for(message or f"gh exited with status {process.returncode}")

        return stdout

    async def fetch_file(self, owner: str, repo: str, ref: str, path: str) -> bytes:
        return await self._run("-H", RAW_ACCEPT, self._api_path(owner, repo, ref, path))

    async def list_directory(
        self, owner: str, repo: str, ref: str, path: str
    ) -> List[RemoteEntry]:
        stdout = await self._run(self._api_path(owner, repo, ref, path))

        try:
            payload = json.loads(stdout)
        except ValueError as e:
            raise RemoteError(f"Malformed listing for {owner}/{repo}/{path}", e) from e

        if not isinstance(payload, list):
            raise RemoteError(f"Not a directory: {owner}/{repo}/{path or '/'}@{ref}")

        return [RemoteEntry.from_api(item) for item in payload]


__all__ = [
    "GhCliService",
]
