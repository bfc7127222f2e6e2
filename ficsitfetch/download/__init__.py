"""
ficsitfetch 下载层

负责 SML 等文件的下载与删除。
"""

from ficsitfetch.download.manager import DownloadManager, DownloadStats

__all__ = [
    "DownloadManager",
    "DownloadStats",
]
