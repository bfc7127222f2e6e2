"""
ficsitfetch 服务层

包含业务逻辑服务：查询执行、请求缓存、临时模组、版本匹配和注册表客户端。
"""

from ficsitfetch.services.cache import Operation, RequestKey, ResponseCache
from ficsitfetch.services.query import QueryExecutor, QueryResult
from ficsitfetch.services.overlay import TemporaryModOverlay
from ficsitfetch.services.version_matcher import VersionMatcher
from ficsitfetch.services.registry import FicsitClient

__all__ = [
    "Operation",
    "RequestKey",
    "ResponseCache",
    "QueryExecutor",
    "QueryResult",
    "TemporaryModOverlay",
    "VersionMatcher",
    "FicsitClient",
]
