"""
请求缓存

按请求标识保存带时间戳的查询结果，超过有效期的条目在读取时视为不存在。
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from loguru import logger

from ficsitfetch.models.config import FETCH_COOLDOWN


class Operation(Enum):
    """注册表查询操作"""

    GET_AVAILABLE_MODS = "getAvailableMods"
    GET_MOD = "getMod"
    GET_MOD_VERSIONS = "getModVersions"
    GET_MOD_DOWNLOAD_LINK = "getModDownloadLink"
    GET_SML_VERSIONS = "getSMLVersions"
    GET_BOOTSTRAPPER_VERSIONS = "getBootstrapperVersions"


@dataclass(frozen=True)
class RequestKey:
    """
    缓存键

    由操作类型和参数组成，不同操作的键不会互相冲突。
    """

    operation: Operation
    args: Tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.operation.value
        return f"{self.operation.value}({', '.join(self.args)})"


@dataclass
class CacheEntry:
    """缓存条目"""

    timestamp: float
    payload: Any


@dataclass
class ResponseCache:
    """带有效期的内存缓存"""

    ttl: float = FETCH_COOLDOWN
    clock: Callable[[], float] = time.time
    _entries: Dict[RequestKey, CacheEntry] = field(
        default_factory=dict, init=False, repr=False
    )

    def is_fresh(self, key: RequestKey) -> bool:
        """条目存在且未过期"""
        entry = self._entries.get(key)
        return entry is not None and self.clock() - entry.timestamp < self.ttl

    def get(self, key: RequestKey) -> Optional[Any]:
        """
        读取缓存

        过期条目不会被删除，只是不再返回，等待下一次 set 覆盖。
        """
        if not self.is_fresh(key):
            logger.debug(f"[缓存] 未命中: {key}")
            return None
        logger.debug(f"[缓存] 命中: {key}")
        return self._entries[key].payload

    def set(self, key: RequestKey, payload: Any) -> None:
        """写入缓存，整体替换同一键下的旧结果"""
        self._entries[key] = CacheEntry(timestamp=self.clock(), payload=payload)

    def clear(self) -> None:
        """清空缓存"""
        self._entries.clear()

    def __contains__(self, key: RequestKey) -> bool:
        return self.is_fresh(key)

    def __len__(self) -> int:
        return len(self._entries)
