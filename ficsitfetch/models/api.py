"""
API 数据模型

定义 ficsit.app 返回的模组、版本、SML 与 Bootstrapper 数据类。
所有响应都通过 from_api 转换，日期字段只在这里解析一次。
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Stability(Enum):
    """版本稳定性"""

    ALPHA = "alpha"
    BETA = "beta"
    RELEASE = "release"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Stability":
        if not value:
            return cls.RELEASE
        return cls(value.lower())


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """解析 ISO-8601 日期，空值返回 None"""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    # Python 3.11 之前 fromisoformat 不接受 Z 后缀
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass
class User:
    """用户信息"""

    username: str
    avatar: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "User":
        return cls(
            username=data.get("username", ""),
            avatar=data.get("avatar") or "",
        )


@dataclass
class Author:
    """模组作者"""

    mod_id: str
    user: User
    role: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Author":
        return cls(
            mod_id=data.get("mod_id", ""),
            user=User.from_api(data.get("user") or {}),
            role=data.get("role") or "",
        )


@dataclass(frozen=True)
class ModVersion:
    """
    模组版本信息。
    """

    mod_id: str
    version: str
    sml_version: str = ""
    changelog: str = ""
    downloads: int = 0
    stability: Stability = Stability.RELEASE
    link: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ModVersion":
        """
        将 ficsit.app 返回的版本信息转换为 ModVersion 对象。
        """
        return cls(
            mod_id=data.get("mod_id", ""),
            version=data["version"],
            sml_version=data.get("sml_version") or "",
            changelog=data.get("changelog") or "",
            downloads=int(data.get("downloads") or 0),
            stability=Stability.parse(data.get("stability")),
            link=data.get("link") or "",
        )


@dataclass
class Mod:
    """
    模组信息。

    versions 按服务器返回的顺序保存，需要“最新版本”时必须自行排序。
    """

    id: str
    name: str = ""
    short_description: str = ""
    full_description: str = ""
    logo: str = ""
    source_url: str = ""
    views: int = 0
    downloads: int = 0
    hotness: int = 0
    popularity: int = 0
    last_version_date: Optional[datetime] = None
    authors: List[Author] = field(default_factory=list)
    versions: List[ModVersion] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Mod":
        """
        将 ficsit.app 返回的模组信息转换为 Mod 对象。
        """
        mod_id = data["id"]
        versions = []
        for version in data.get("versions") or []:
            version = dict(version)
            version.setdefault("mod_id", mod_id)
            versions.append(ModVersion.from_api(version))

        return cls(
            id=mod_id,
            name=data.get("name") or "",
            short_description=data.get("short_description") or "",
            full_description=data.get("full_description") or "",
            logo=data.get("logo") or "",
            source_url=data.get("source_url") or "",
            views=int(data.get("views") or 0),
            downloads=int(data.get("downloads") or 0),
            hotness=int(data.get("hotness") or 0),
            popularity=int(data.get("popularity") or 0),
            last_version_date=parse_date(data.get("last_version_date")),
            authors=[Author.from_api(a) for a in data.get("authors") or []],
            versions=versions,
        )


@dataclass(frozen=True)
class SMLVersion:
    """SML（模组加载器）版本信息"""

    id: str
    version: str
    satisfactory_version: int = 0
    stability: Stability = Stability.RELEASE
    link: str = ""
    changelog: str = ""
    date: Optional[datetime] = None
    bootstrap_version: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SMLVersion":
        return cls(
            id=data.get("id", ""),
            version=data["version"],
            satisfactory_version=int(data.get("satisfactory_version") or 0),
            stability=Stability.parse(data.get("stability")),
            link=data.get("link") or "",
            changelog=data.get("changelog") or "",
            date=parse_date(data.get("date")),
            bootstrap_version=data.get("bootstrap_version") or "",
        )


@dataclass(frozen=True)
class BootstrapperVersion:
    """Bootstrapper 版本信息"""

    id: str
    version: str
    satisfactory_version: int = 0
    stability: Stability = Stability.RELEASE
    link: str = ""
    changelog: str = ""
    date: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "BootstrapperVersion":
        return cls(
            id=data.get("id", ""),
            version=data["version"],
            satisfactory_version=int(data.get("satisfactory_version") or 0),
            stability=Stability.parse(data.get("stability")),
            link=data.get("link") or "",
            changelog=data.get("changelog") or "",
            date=parse_date(data.get("date")),
        )
