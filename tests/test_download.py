import aiohttp
import pytest

from ficsitfetch.download import DownloadManager, manager as download_manager
from ficsitfetch.exceptions import DownloadError, DownloadNetworkError


class FakeContent:
    def __init__(self, chunks):
        self.chunks = chunks

    async def iter_chunked(self, size):
        for chunk in self.chunks:
            yield chunk


class FakeGetResponse:
    def __init__(self, status, chunks=()):
        self.status = status
        self.content = FakeContent(list(chunks))

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeGetSession:
    closed = False

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.urls = []

    def get(self, url):
        self.urls.append(url)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(download_manager.asyncio, "sleep", fake_sleep)
    return delays


@pytest.mark.asyncio
async def test_download_writes_chunks(tmp_path, no_sleep):
    session = FakeGetSession([FakeGetResponse(200, [b"ab", b"cd"])])
    downloads = DownloadManager(session=session)
    target = tmp_path / "nested" / "file.dll"

    await downloads.download_file("https://example.com/file.dll", str(target))

    assert target.read_bytes() == b"abcd"
    assert downloads.stats.completed == 1
    assert downloads.stats.bytes_downloaded == 4
    assert no_sleep == []


@pytest.mark.asyncio
async def test_download_retries_with_backoff(tmp_path, no_sleep):
    session = FakeGetSession(
        [
            aiohttp.ClientConnectionError("reset"),
            FakeGetResponse(503),
            FakeGetResponse(200, [b"ok"]),
        ]
    )
    downloads = DownloadManager(max_retries=2, retry_delay=0.5, session=session)
    target = tmp_path / "file.dll"

    await downloads.download_file("https://example.com/file.dll", str(target))

    assert target.read_bytes() == b"ok"
    assert no_sleep == [0.5, 1.0]


@pytest.mark.asyncio
async def test_download_gives_up(tmp_path, no_sleep):
    session = FakeGetSession([FakeGetResponse(404), FakeGetResponse(404)])
    downloads = DownloadManager(max_retries=1, session=session)
    target = tmp_path / "file.dll"

    with pytest.raises(DownloadNetworkError):
        await downloads.download_file("https://example.com/file.dll", str(target))

    assert not target.exists()
    assert downloads.stats.failed == 1


@pytest.mark.asyncio
async def test_download_wraps_transport_errors(tmp_path, no_sleep):
    session = FakeGetSession([aiohttp.ClientConnectionError("down")])
    downloads = DownloadManager(max_retries=0, session=session)

    with pytest.raises(DownloadError) as excinfo:
        await downloads.download_file("https://example.com/x", str(tmp_path / "x"))
    assert not isinstance(excinfo.value, DownloadNetworkError)
