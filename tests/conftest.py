import asyncio
from typing import Dict, Iterable, List, Optional

import pytest

from ghgrab.infrastructure.error_handler import RemoteError
from ghgrab.models import EntryKind, RemoteEntry
from ghgrab.services import DownloadService


class FakeFetcher:
    """In-memory ContentFetcher driven by dictionaries."""

    def __init__(
        self,
        listings: Dict[str, List[RemoteEntry]],
        files: Dict[str, bytes],
        failing_files: Iterable[str] = (),
        failing_dirs: Iterable[str] = (),
        delays: Optional[Dict[str, float]] = None,
    ):
        self.listings = listings
        self.files = files
        self.failing_files = set(failing_files)
        self.failing_dirs = set(failing_dirs)
        self.delays = delays or {}
        self.calls: List[tuple] = []

    async def fetch_file(self, owner, repo, ref, path):
        self.calls.append(("fetch", path))
        if path in self.delays:
            await asyncio.sleep(self.delays[path])
        if path in self.failing_files:
            raise RemoteError(f"cannot fetch {path}")
        return self.files[path]

    async def list_directory(self, owner, repo, ref, path):
        self.calls.append(("list", path))
        if path in self.failing_dirs:
            raise RemoteError(f"cannot list {path}")
        return list(self.listings[path])


@pytest.fixture
def sample_listings():
    """``d`` holds ``a.txt`` and ``sub``; ``d/sub`` holds ``b.txt``."""
    return {
        "d": [
            RemoteEntry(name="a.txt", path="d/a.txt", kind=EntryKind.FILE),
            RemoteEntry(name="sub", path="d/sub", kind=EntryKind.DIRECTORY),
        ],
        "d/sub": [
            RemoteEntry(name="b.txt", path="d/sub/b.txt", kind=EntryKind.FILE),
        ],
    }


@pytest.fixture
def sample_files():
    return {
        "d/a.txt": b"alpha",
        "d/sub/b.txt": b"bravo",
    }


@pytest.fixture
def make_fetcher(sample_listings, sample_files):
    """Build a FakeFetcher over the sample tree unless told otherwise."""

    def _make(listings=None, files=None, **kwargs):
        return FakeFetcher(
            listings if listings is not None else sample_listings,
            files if files is not None else sample_files,
            **kwargs,
        )

    return _make


@pytest.fixture
def download_service():
    return DownloadService()
