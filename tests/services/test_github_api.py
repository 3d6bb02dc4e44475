import base64

import httpx
import pytest

from ghgrab.infrastructure.error_handler import (
    AuthenticationError, ContentNotFoundError, RateLimitError, RemoteError
)
from ghgrab.infrastructure.rate_limiter import RateLimiter
from ghgrab.infrastructure.retry_manager import RetryManager
from ghgrab.models import EntryKind
from ghgrab.services.github_api import GitHubAPIService


pytestmark = pytest.mark.asyncio


def make_service(handler, **kwargs) -> GitHubAPIService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubAPIService(
        RateLimiter(default_delay=0.0),
        RetryManager(max_retries=2, base_delay=0.0, jitter=False),
        client=client,
        **kwargs,
    )


def file_payload(path: str, content: bytes) -> dict:
    return {
        "type": "file",
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "size": len(content),
        "encoding": "base64",
        "content": base64.encodebytes(content).decode(),
        "download_url": f"https://raw.githubusercontent.com/octo/hello/main/{path}",
    }


## Requests
# ----------

async def test_requests_target_contents_api_with_ref_and_token():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=file_payload("docs/my notes.md", b"hi"))

    async with make_service(handler, auth_token="secret") as service:
        await service.fetch_file("octo", "hello", "main", "docs/my notes.md")

    request = seen[0]
    assert request.url.path == "/repos/octo/hello/contents/docs/my notes.md"
    assert request.url.params["ref"] == "main"
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["Accept"] == "application/vnd.github+json"


async def test_root_listing_uses_bare_contents_endpoint():
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(200, json=[])

    async with make_service(handler) as service:
        assert await service.list_directory("octo", "hello", "main", "") == []

    assert seen == ["/repos/octo/hello/contents"]


## fetch_file
# ------------

async def test_fetch_file_decodes_base64_content():
    payload = file_payload("a.bin", bytes(range(256)))

    async with make_service(lambda request: httpx.Response(200, json=payload)) as service:
        content = await service.fetch_file("octo", "hello", "main", "a.bin")

    assert content == bytes(range(256))


async def test_fetch_file_falls_back_to_download_url_for_large_files():
    def handler(request):
        if request.url.host == "raw.githubusercontent.com":
            return httpx.Response(200, content=b"large body")
        return httpx.Response(200, json={
            "type": "file", "name": "big.csv", "path": "big.csv", "size": 5_000_000,
            "encoding": "none", "content": "",
            "download_url": "https://raw.githubusercontent.com/octo/hello/main/big.csv",
        })

    async with make_service(handler) as service:
        assert await service.fetch_file("octo", "hello", "main", "big.csv") == b"large body"


async def test_fetch_file_returns_empty_bytes_for_empty_file():
    payload = {"type": "file", "name": "e", "path": "e", "size": 0, "encoding": "base64", "content": ""}

    async with make_service(lambda request: httpx.Response(200, json=payload)) as service:
        assert await service.fetch_file("octo", "hello", "main", "e") == b""


async def test_fetch_file_rejects_directory_listing():
    async with make_service(lambda request: httpx.Response(200, json=[])) as service:
        with pytest.raises(RemoteError, match="Not a file"):
            await service.fetch_file("octo", "hello", "main", "docs")


## list_directory
# ----------------

async def test_list_directory_maps_entries_in_order():
    items = [
        {"name": "b.txt", "path": "d/b.txt", "type": "file", "size": 3, "download_url": "u"},
        {"name": "a", "path": "d/a", "type": "dir", "size": 0, "download_url": None},
        {"name": "lnk", "path": "d/lnk", "type": "symlink", "size": 4, "download_url": "u"},
        {"name": "mod", "path": "d/mod", "type": "submodule", "size": 0, "download_url": None},
    ]

    async with make_service(lambda request: httpx.Response(200, json=items)) as service:
        entries = await service.list_directory("octo", "hello", "main", "d")

    assert [e.name for e in entries] == ["b.txt", "a", "lnk", "mod"]
    assert [e.kind for e in entries] == [
        EntryKind.FILE, EntryKind.DIRECTORY, EntryKind.OTHER, EntryKind.OTHER
    ]
    assert entries[0].path == "d/b.txt"
    assert entries[0].size == 3


async def test_list_directory_rejects_file_payload():
    payload = file_payload("a.txt", b"x")

    async with make_service(lambda request: httpx.Response(200, json=payload)) as service:
        with pytest.raises(RemoteError, match="Not a directory"):
            await service.list_directory("octo", "hello", "main", "a.txt")


## Error mapping
# ---------------

@pytest.mark.parametrize("status, headers, expected", [
    (404, {}, ContentNotFoundError),
    (401, {}, AuthenticationError),
    (403, {}, AuthenticationError),
    (403, {"x-ratelimit-remaining": "0"}, RateLimitError),
    (429, {}, RateLimitError),
    (500, {}, RemoteError),
])
async def test_http_errors_are_translated(status, headers, expected):
    def handler(request):
        return httpx.Response(status, headers=headers, json={"message": "nope"})

    async with make_service(handler) as service:
        with pytest.raises(expected):
            await service.list_directory("octo", "hello", "main", "d")


async def test_transport_errors_are_retried_then_translated():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    async with make_service(handler) as service:
        with pytest.raises(RemoteError) as excinfo:
            await service.fetch_file("octo", "hello", "main", "a.txt")

    assert len(calls) == 3
    assert isinstance(excinfo.value.original_error, httpx.ConnectError)


async def test_transient_transport_error_recovers():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, json=file_payload("a.txt", b"ok"))

    async with make_service(handler) as service:
        assert await service.fetch_file("octo", "hello", "main", "a.txt") == b"ok"

    assert len(calls) == 2


async def test_rate_limit_headers_update_limiter():
    headers = {"x-ratelimit-limit": "60", "x-ratelimit-remaining": "42", "x-ratelimit-used": "18"}

    service = make_service(lambda request: httpx.Response(200, headers=headers, json=[]))
    await service.list_directory("octo", "hello", "main", "d")
    await service.close()

    info = service.rate_limiter.rate_limit_info
    assert (info.limit, info.remaining, info.used) == (60, 42, 18)
