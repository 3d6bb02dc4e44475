"""
GitHub REST API client implementing the content fetcher contract.
"""

import base64
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..infrastructure.error_handler import RemoteError, handle_api_error
from ..infrastructure.logger import logger
from ..infrastructure.rate_limiter import RateLimiter
from ..infrastructure.retry_manager import RetryManager
from ..models import RemoteEntry


DEFAULT_API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubAPIService:
    """
    Fetches files and directory listings through the contents API.

    Every request is paced by the ``RateLimiter`` and transient transport
    failures are retried by the ``RetryManager``. HTTP errors surface as
    the ``RemoteError`` family.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        retry_manager: RetryManager,
        auth_token: Optional[str] = None,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 30,
        user_agent: str = "ghgrab",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.rate_limiter = rate_limiter
        self.retry_manager = retry_manager
        self.api_base = api_base.rstrip("/")

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": user_agent,
        }
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        if client is None:
            client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        client.headers.update(headers)
        self._client = client

    async def __aenter__(self) -> "GitHubAPIService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def _contents_url(self, owner: str, repo: str, path: str) -> str:
        url = f"{self.api_base}/repos/{quote(owner)}/{quote(repo)}/contents"
        if path:
            url = f"{url}/{quote(path, safe='/')}"
        return url

    async def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        await self.rate_limiter.acquire()
        response = await self._client.get(url, params=params)
        await self.rate_limiter.update_rate_limit_info(response.headers)
        response.raise_for_status()
        return response

    async def _request(self, url: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        return await self.retry_manager.execute(self._get, url, params=params)

    async def _get_contents(self, owner: str, repo: str, ref: str, path: str) -> Any:
        url = self._contents_url(owner, repo, path)
        logger.debug(f"GET {url}?ref={ref}")
        response = await self._request(url, params={"ref": ref})
        return response.json()

    @handle_api_error
    async def fetch_file(self, owner: str, repo: str, ref: str, path: str) -> bytes:
        """
        Return the bytes of one file.

        Small files come back inline as base64. Larger ones are served with
        ``encoding: "none"`` and must be pulled from their ``download_url``.
        """
        payload = await self._get_contents(owner, repo, ref, path)

        if not isinstance(payload, dict) or payload.get("type") != "file":
            raise RemoteError(f"Not a file: {owner}/{repo}/{path}@{ref}")

        content = payload.get("content")
        if payload.get("encoding") == "base64" and content:
            return base64.b64decode(content)

        if not payload.get("size"):
            return b""

        download_url = payload.get("download_url")
        if not download_url:
            raise RemoteError(f"No content or download URL for {owner}/{repo}/{path}@{ref}")

        logger.debug(f"Falling back to download URL for {path}")
        response = await self._request(download_url)
        return response.content

    @handle_api_error
    async def list_directory(
        self, owner: str, repo: str, ref: str, path: str
    ) -> List[RemoteEntry]:
        """Return the immediate children of a directory, in API order."""

        payload = await self._get_contents(owner, repo, ref, path)

        if not isinstance(payload, list):
            raise RemoteError(f"Not a directory: {owner}/{repo}/{path or '/'}@{ref}")

        return [RemoteEntry.from_api(item) for item in payload]


__all__ = [
    "DEFAULT_API_BASE",
    "GitHubAPIService",
]
