"""
SML 安装

把指定版本的 SML 安装到游戏目录，或从游戏目录中卸载。
"""

import os
from typing import Optional

from loguru import logger

from ficsitfetch.download import DownloadManager
from ficsitfetch.exceptions import SMLVersionNotFoundError
from ficsitfetch.services import FicsitClient


SML_RELEASE_URL = (
    "https://github.com/satisfactorymodding/SatisfactoryModLoader/releases/download"
)


class SMLHandler:
    """SML 安装器"""

    def __init__(
        self,
        game_path: str,
        client: FicsitClient,
        downloads: Optional[DownloadManager] = None,
    ):
        self.game_path = game_path
        self.client = client
        self.downloads = downloads or DownloadManager()

    @staticmethod
    def get_sml_relative_path() -> str:
        return os.path.join("FactoryGame", "Binaries", "Win64", "xinput1_3.dll")

    @staticmethod
    def get_sml_download_link(version: str) -> str:
        return f"{SML_RELEASE_URL}/{version}/xinput1_3.dll"

    @property
    def sml_path(self) -> str:
        return os.path.join(self.game_path, self.get_sml_relative_path())

    def is_installed(self) -> bool:
        return os.path.isfile(self.sml_path)

    async def install_sml(self, version: str) -> bool:
        """
        安装 SML

        Args:
            version: SML 版本号

        Returns:
            True 表示进行了下载，False 表示已安装而跳过

        Raises:
            SMLVersionNotFoundError: 注册表中没有该版本
        """
        if await self.client.get_sml_version_info(version) is None:
            raise SMLVersionNotFoundError(
                f"SML {version} 不存在", context={"version": version}
            )

        if self.is_installed():
            logger.info(f"[跳过] SML 已安装: {self.sml_path}")
            return False

        await self.downloads.download_file(
            self.get_sml_download_link(version), self.sml_path
        )
        return True

    async def uninstall_sml(self) -> None:
        """卸载 SML"""
        self.downloads.remove_file(self.sml_path)
