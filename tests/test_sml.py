import os

import pytest

from ficsitfetch.exceptions import DownloadFileError, SMLVersionNotFoundError
from ficsitfetch.sml import SMLHandler


class RecordingDownloads:
    def __init__(self):
        self.downloads = []

    async def download_file(self, url, file_path):
        self.downloads.append((url, file_path))
        os.makedirs(os.path.dirname(file_path), exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(b"dll")

    def remove_file(self, file_path):
        from ficsitfetch.download import DownloadManager

        DownloadManager.remove_file(file_path)


@pytest.fixture
def sml_client(make_client, payloads):
    return make_client(
        {"getSMLVersions": {"getSMLVersions": {"sml_versions": [payloads.sml("2.2.0")]}}}
    )


def test_paths_and_links():
    assert SMLHandler.get_sml_relative_path() == os.path.join(
        "FactoryGame", "Binaries", "Win64", "xinput1_3.dll"
    )
    assert SMLHandler.get_sml_download_link("2.2.0") == (
        "https://github.com/satisfactorymodding/SatisfactoryModLoader"
        "/releases/download/2.2.0/xinput1_3.dll"
    )


@pytest.mark.asyncio
async def test_install_then_uninstall(tmp_path, sml_client):
    downloads = RecordingDownloads()
    handler = SMLHandler(str(tmp_path), sml_client, downloads=downloads)

    assert await handler.install_sml("2.2.0")
    assert handler.is_installed()
    assert downloads.downloads == [
        (SMLHandler.get_sml_download_link("2.2.0"), handler.sml_path)
    ]

    assert not await handler.install_sml("2.2.0")
    assert len(downloads.downloads) == 1

    await handler.uninstall_sml()
    assert not handler.is_installed()


@pytest.mark.asyncio
async def test_install_unknown_version(tmp_path, sml_client):
    handler = SMLHandler(str(tmp_path), sml_client, downloads=RecordingDownloads())

    with pytest.raises(SMLVersionNotFoundError):
        await handler.install_sml("1.0.0")
    assert not handler.is_installed()


@pytest.mark.asyncio
async def test_uninstall_when_missing(tmp_path, sml_client):
    handler = SMLHandler(str(tmp_path), sml_client, downloads=RecordingDownloads())

    with pytest.raises(DownloadFileError):
        await handler.uninstall_sml()
