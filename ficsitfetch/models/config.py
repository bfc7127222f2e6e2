"""
配置模型

ficsit.app 的固定参数以及命令行使用的配置对象。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ficsitfetch.exceptions import ConfigValidationError


API_URL = "https://api.ficsit.app"


def graphql_url(api_url: str) -> str:
    """由 API 根地址得到 GraphQL 端点"""
    return f"{api_url.rstrip('/')}/v2/query"


GRAPHQL_API_URL = graphql_url(API_URL)

# 缓存有效期（秒）
FETCH_COOLDOWN = 5 * 60
# 列表查询的分页上限
PAGE_LIMIT = 100
# 支持的最低 SML 版本
MIN_SML_VERSION = "2.0.0"

SML_MOD_ID = "SML"
BOOTSTRAPPER_MOD_ID = "bootstrapper"


@dataclass
class FicsitFetchConfig:
    """ficsitfetch 配置"""

    api_url: str = API_URL
    use_temp_mods: bool = False
    temp_mods: List[Dict[str, Any]] = field(default_factory=list)
    game_path: Optional[str] = None

    @property
    def graphql_url(self) -> str:
        return graphql_url(self.api_url)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FicsitFetchConfig":
        """
        从字典创建配置

        Args:
            data: 配置文件解析后的字典

        Returns:
            FicsitFetchConfig 实例

        Raises:
            ConfigValidationError: 字段类型不正确
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("配置必须是一个字典")

        api_url = data.get("api_url", API_URL)
        if not isinstance(api_url, str) or not api_url:
            raise ConfigValidationError(
                "api_url 必须是非空字符串", context={"api_url": api_url}
            )

        use_temp_mods = data.get("use_temp_mods", False)
        if not isinstance(use_temp_mods, bool):
            raise ConfigValidationError(
                "use_temp_mods 必须是布尔值", context={"use_temp_mods": use_temp_mods}
            )

        temp_mods = data.get("temp_mods", [])
        if not isinstance(temp_mods, list) or not all(
            isinstance(mod, dict) and mod.get("id") for mod in temp_mods
        ):
            raise ConfigValidationError("temp_mods 必须是带 id 的模组列表")

        game_path = data.get("game_path")
        if game_path is not None and not isinstance(game_path, str):
            raise ConfigValidationError(
                "game_path 必须是字符串", context={"game_path": game_path}
            )

        return cls(
            api_url=api_url,
            use_temp_mods=use_temp_mods,
            temp_mods=temp_mods,
            game_path=game_path,
        )
