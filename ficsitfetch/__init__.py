"""
ficsitfetch - ficsit.app 模组注册表客户端

查询 Satisfactory 模组、SML 与 Bootstrapper 版本，带请求缓存、
调试用临时模组以及语义化版本匹配。
"""

__version__ = "0.1.0"

from ficsitfetch.services import (
    FicsitClient,
    QueryExecutor,
    ResponseCache,
    TemporaryModOverlay,
)

__all__ = [
    "__version__",
    "FicsitClient",
    "QueryExecutor",
    "ResponseCache",
    "TemporaryModOverlay",
]
