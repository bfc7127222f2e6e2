"""
ficsit.app 注册表客户端

组合查询执行器、请求缓存和临时模组，提供模组、SML 与 Bootstrapper 查询，
以及供依赖解析使用的版本选择功能。
"""

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from loguru import logger

from ficsitfetch.exceptions import (
    BootstrapperVersionNotFoundError,
    ModNotFoundError,
    ModVersionNotFoundError,
    NetworkError,
    SMLVersionNotFoundError,
    TemporaryModError,
)
from ficsitfetch.models import (
    API_URL,
    BOOTSTRAPPER_MOD_ID,
    MIN_SML_VERSION,
    SML_MOD_ID,
    BootstrapperVersion,
    Mod,
    ModVersion,
    SMLVersion,
    graphql_url,
)
from ficsitfetch.services import queries
from ficsitfetch.services.cache import Operation, RequestKey, ResponseCache
from ficsitfetch.services.overlay import TemporaryModOverlay
from ficsitfetch.services.query import QueryExecutor
from ficsitfetch.services.version_matcher import VersionMatcher


@contextmanager
def _decoding(key: RequestKey):
    """响应结构不符合预期时按网络错误处理"""
    try:
        yield
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.debug(f"[网络] 无法解析 {key} 的响应: {e!r}")
        raise NetworkError(context={"request": str(key)}, cause=e) from e


class FicsitClient:
    """ficsit.app 注册表客户端"""

    def __init__(
        self,
        executor: Optional[QueryExecutor] = None,
        cache: Optional[ResponseCache] = None,
        overlay: Optional[TemporaryModOverlay] = None,
        api_url: str = API_URL,
        min_sml_version: str = MIN_SML_VERSION,
    ):
        self.api_url = api_url.rstrip("/")
        self.executor = executor or QueryExecutor(graphql_url(self.api_url))
        self.cache = cache if cache is not None else ResponseCache()
        self.overlay = overlay if overlay is not None else TemporaryModOverlay()
        self.min_sml_version = min_sml_version
        self.matcher = VersionMatcher()

    async def _query(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """执行查询，失败时抛出结果中的异常"""
        result = await self.executor.execute(query, variables)
        if result.errors is not None:
            raise result.errors
        return result.data or {}

    async def get_available_mods(self) -> List[Mod]:
        """
        获取模组列表

        最多返回 100 个模组。启用临时模组时会追加在列表末尾，不做去重。
        """
        key = RequestKey(Operation.GET_AVAILABLE_MODS)
        mods = self.cache.get(key)
        if mods is None:
            data = await self._query(queries.GET_AVAILABLE_MODS)
            with _decoding(key):
                raw_mods = (data.get("getMods") or {}).get("mods") or []
                mods = [Mod.from_api(raw) for raw in raw_mods]
            self.cache.set(key, mods)
        return mods + self.overlay.mods

    async def get_mod(self, mod_id: str) -> Mod:
        """
        获取单个模组

        Raises:
            ModNotFoundError: 注册表和临时模组中都不存在
        """
        key = RequestKey(Operation.GET_MOD, (mod_id,))
        mod = self.cache.get(key)
        if mod is not None:
            return mod

        data = await self._query(queries.GET_MOD, {"modID": mod_id})
        raw = data.get("getMod")
        if raw is None:
            temp_mod = self.overlay.find_mod(mod_id)
            if temp_mod is not None:
                logger.debug(f"[临时模组] 使用临时模组 {mod_id}")
                return temp_mod
            raise ModNotFoundError(f"模组 {mod_id} 不存在", context={"mod_id": mod_id})

        with _decoding(key):
            mod = Mod.from_api(raw)
        self.cache.set(key, mod)
        return mod

    async def get_mod_versions(self, mod_id: str) -> List[ModVersion]:
        """
        获取模组的版本列表（最多 100 个）

        Raises:
            ModNotFoundError: 注册表和临时模组中都不存在
        """
        key = RequestKey(Operation.GET_MOD_VERSIONS, (mod_id,))
        versions = self.cache.get(key)
        if versions is not None:
            return list(versions)

        data = await self._query(queries.GET_MOD_VERSIONS, {"modID": mod_id})
        raw = data.get("getMod")
        if raw is None:
            temp_mod = self.overlay.find_mod(mod_id)
            if temp_mod is not None:
                return list(temp_mod.versions)
            raise ModNotFoundError(f"模组 {mod_id} 不存在", context={"mod_id": mod_id})

        versions = []
        with _decoding(key):
            for version in raw.get("versions") or []:
                version = dict(version)
                version.setdefault("mod_id", raw.get("id", mod_id))
                versions.append(ModVersion.from_api(version))
        self.cache.set(key, versions)
        return list(versions)

    async def get_mod_latest_version(self, mod_id: str) -> ModVersion:
        """
        获取模组的最新版本（按语义化版本排序）

        Raises:
            ModVersionNotFoundError: 模组没有任何版本
        """
        versions = await self.get_mod_versions(mod_id)
        if not versions:
            raise ModVersionNotFoundError(
                f"模组 {mod_id} 没有任何版本", context={"mod_id": mod_id}
            )
        return self.matcher.latest(versions)

    async def get_mod_download_link(self, mod_id: str, version: str) -> str:
        """
        获取指定模组版本的下载地址

        Raises:
            TemporaryModError: 临时模组没有下载地址
            ModVersionNotFoundError: 版本不存在
        """
        key = RequestKey(Operation.GET_MOD_DOWNLOAD_LINK, (mod_id, version))
        link = self.cache.get(key)
        if link is not None:
            return link

        data = await self._query(
            queries.GET_MOD_DOWNLOAD_LINK, {"modID": mod_id, "version": version}
        )
        with _decoding(key):
            raw = data.get("getMod") or {}
            raw_link = (raw.get("version") or {}).get("link")
        if raw_link:
            link = self.api_url + raw_link
            self.cache.set(key, link)
            return link

        context = {"mod_id": mod_id, "version": version}
        if self.overlay.has_mod(mod_id):
            raise TemporaryModError(
                f"{mod_id}@{version} 是临时模组，没有下载地址", context=context
            )
        raise ModVersionNotFoundError(f"{mod_id}@{version} 不存在", context=context)

    async def find_version_matching_all(
        self, mod_id: str, constraints: List[str]
    ) -> Optional[str]:
        """
        按服务器返回的顺序查找第一个满足所有版本范围的版本

        Returns:
            版本号，没有匹配时返回 None
        """
        mod = await self.get_mod(mod_id)
        match = self.matcher.first_matching_all(mod.versions, constraints)
        return match.version if match else None

    async def find_all_versions_matching_all(
        self, mod_id: str, constraints: List[str]
    ) -> List[str]:
        """
        查找所有满足版本范围的版本

        SML 只返回不低于最低支持版本的结果，Bootstrapper 没有此限制。
        """
        if mod_id == SML_MOD_ID:
            candidates = self.matcher.at_least(
                await self.get_available_sml_versions(), self.min_sml_version
            )
        elif mod_id == BOOTSTRAPPER_MOD_ID:
            candidates = await self.get_available_bootstrapper_versions()
        else:
            candidates = (await self.get_mod(mod_id)).versions
        return [
            item.version
            for item in self.matcher.filter_matching_all(candidates, constraints)
        ]

    async def get_available_sml_versions(self) -> List[SMLVersion]:
        """获取 SML 版本列表，缓存前已过滤掉低于最低支持版本的结果"""
        key = RequestKey(Operation.GET_SML_VERSIONS)
        versions = self.cache.get(key)
        if versions is None:
            data = await self._query(queries.GET_SML_VERSIONS)
            with _decoding(key):
                raw_versions = (data.get("getSMLVersions") or {}).get("sml_versions") or []
                versions = self.matcher.at_least(
                    [SMLVersion.from_api(raw) for raw in raw_versions],
                    self.min_sml_version,
                )
            self.cache.set(key, versions)
        return list(versions)

    async def get_available_bootstrapper_versions(self) -> List[BootstrapperVersion]:
        """获取 Bootstrapper 版本列表"""
        key = RequestKey(Operation.GET_BOOTSTRAPPER_VERSIONS)
        versions = self.cache.get(key)
        if versions is None:
            data = await self._query(queries.GET_BOOTSTRAPPER_VERSIONS)
            with _decoding(key):
                raw_versions = (data.get("getBootstrapVersions") or {}).get(
                    "bootstrap_versions"
                ) or []
                versions = [BootstrapperVersion.from_api(raw) for raw in raw_versions]
            self.cache.set(key, versions)
        return list(versions)

    async def get_sml_version_info(self, version: str) -> Optional[SMLVersion]:
        versions = await self.get_available_sml_versions()
        return next((v for v in versions if v.version == version), None)

    async def get_latest_sml_version(self) -> SMLVersion:
        versions = await self.get_available_sml_versions()
        if not versions:
            raise SMLVersionNotFoundError("没有可用的 SML 版本")
        return self.matcher.latest(versions)

    async def get_bootstrapper_version_info(
        self, version: str
    ) -> Optional[BootstrapperVersion]:
        versions = await self.get_available_bootstrapper_versions()
        return next((v for v in versions if v.version == version), None)

    async def get_latest_bootstrapper_version(self) -> BootstrapperVersion:
        versions = await self.get_available_bootstrapper_versions()
        if not versions:
            raise BootstrapperVersionNotFoundError("没有可用的 Bootstrapper 版本")
        return self.matcher.latest(versions)

    async def close(self):
        """关闭客户端"""
        await self.executor.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
