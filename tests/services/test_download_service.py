import pytest

from ghgrab.infrastructure.error_handler import MaterializeError
from ghgrab.services.download import DownloadService


pytestmark = pytest.mark.asyncio


async def test_save_content_creates_missing_parents(tmp_path):
    destination = tmp_path / "a" / "b" / "c.txt"

    written = await DownloadService().save_content(b"hello", destination)

    assert written == 5
    assert destination.read_bytes() == b"hello"


async def test_save_content_truncates_existing_file(tmp_path):
    destination = tmp_path / "c.txt"
    destination.write_bytes(b"a much longer previous body")

    await DownloadService().save_content(b"new", destination)

    assert destination.read_bytes() == b"new"


async def test_save_content_onto_directory_raises_materialize_error(tmp_path):
    (tmp_path / "taken").mkdir()

    with pytest.raises(MaterializeError) as excinfo:
        await DownloadService().save_content(b"x", tmp_path / "taken")

    assert isinstance(excinfo.value.original_error, OSError)


async def test_ensure_directory_is_idempotent(tmp_path):
    service = DownloadService()
    target = tmp_path / "x" / "y"

    await service.ensure_directory(target)
    await service.ensure_directory(target)

    assert target.is_dir()


async def test_ensure_directory_below_a_file_fails(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")

    with pytest.raises(MaterializeError):
        await DownloadService().ensure_directory(blocker / "sub")
