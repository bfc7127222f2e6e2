"""
下载管理器

负责把单个文件下载到指定路径以及删除已安装的文件。
"""

import asyncio
import os
from dataclasses import dataclass
from typing import Optional

import aiofiles
import aiohttp
from loguru import logger

from ficsitfetch.exceptions import (
    DownloadError,
    DownloadFileError,
    DownloadNetworkError,
)


@dataclass
class DownloadStats:
    """下载统计"""

    completed: int = 0
    failed: int = 0
    bytes_downloaded: int = 0


class DownloadManager:
    """下载管理器"""

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.stats = DownloadStats()
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def download_file(self, url: str, file_path: str) -> None:
        """
        下载单个文件

        失败时按指数退避重试，最终失败会删除不完整的文件并抛出异常。

        Args:
            url: 下载地址
            file_path: 保存路径，父目录不存在时自动创建

        Raises:
            DownloadNetworkError: HTTP 状态码异常
            DownloadError: 其他下载错误
        """
        filename = os.path.basename(file_path)
        os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)

        logger.info(f"[开始] 下载: {filename}")

        for attempt in range(self.max_retries + 1):
            try:
                async with self.session.get(url) as response:
                    if response.status != 200:
                        raise DownloadNetworkError(
                            f"HTTP {response.status}",
                            context={"url": url, "status": response.status},
                        )

                    async with aiofiles.open(file_path, "wb") as f:
                        async for chunk in response.content.iter_chunked(8192):
                            await f.write(chunk)
                            self.stats.bytes_downloaded += len(chunk)

                self.stats.completed += 1
                logger.success(f"[完成] '{filename}' 下载完成")
                return

            except (aiohttp.ClientError, asyncio.TimeoutError, OSError, DownloadError) as e:
                # 清理不完整的文件
                if os.path.exists(file_path):
                    try:
                        os.remove(file_path)
                    except OSError:
                        pass

                if attempt < self.max_retries:
                    delay = self.retry_delay * (2**attempt)
                    logger.warning(
                        f"[重试] 下载 '{filename}' 失败 (第 {attempt + 1} 次): {e}. "
                        f"{delay:.1f}s 后重试..."
                    )
                    await asyncio.sleep(delay)
                    continue

                self.stats.failed += 1
                logger.error(f"[错误] 下载 '{filename}' 最终失败: {e}")
                if isinstance(e, DownloadError):
                    raise
                raise DownloadError(
                    f"下载失败: {filename}", context={"url": url, "error": str(e)}
                ) from e

    @staticmethod
    def remove_file(file_path: str) -> None:
        """
        删除文件

        Raises:
            DownloadFileError: 文件不存在或无法删除
        """
        try:
            os.remove(file_path)
        except OSError as e:
            raise DownloadFileError(
                f"删除文件失败: {file_path}", context={"error": str(e)}
            ) from e
        logger.info(f"[删除] {file_path}")

    async def close(self):
        """关闭 session"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
