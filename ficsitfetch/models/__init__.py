"""
ficsitfetch 数据模型包

包含配置模型和 API 模型定义。
"""

from ficsitfetch.models.config import (
    API_URL,
    GRAPHQL_API_URL,
    FETCH_COOLDOWN,
    PAGE_LIMIT,
    MIN_SML_VERSION,
    SML_MOD_ID,
    BOOTSTRAPPER_MOD_ID,
    FicsitFetchConfig,
    graphql_url,
)
from ficsitfetch.models.api import (
    Stability,
    User,
    Author,
    ModVersion,
    Mod,
    SMLVersion,
    BootstrapperVersion,
)

__all__ = [
    # 配置模型
    "API_URL",
    "GRAPHQL_API_URL",
    "FETCH_COOLDOWN",
    "PAGE_LIMIT",
    "MIN_SML_VERSION",
    "SML_MOD_ID",
    "BOOTSTRAPPER_MOD_ID",
    "FicsitFetchConfig",
    "graphql_url",
    # API 模型
    "Stability",
    "User",
    "Author",
    "ModVersion",
    "Mod",
    "SMLVersion",
    "BootstrapperVersion",
]
