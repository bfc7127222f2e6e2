"""
临时模组

仅用于调试：把尚未发布的模组和版本叠加到注册表查询结果中。
未启用时所有修改操作都会被拒绝（记录警告），查询也不会读取其中内容。
"""

from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from ficsitfetch.models import Mod, ModVersion


class TemporaryModOverlay:
    """临时模组集合"""

    def __init__(self, enabled: bool = False):
        self._enabled = False
        self._mods: List[Mod] = []
        self.set_enabled(enabled)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enable: bool) -> None:
        """启用或关闭临时模组，仅供调试使用"""
        self._enabled = enable
        if enable:
            logger.warning("已启用临时模组，此功能仅应用于调试！")

    def _check_enabled(self) -> bool:
        if not self._enabled:
            logger.warning("临时模组仅在调试模式下可用")
        return self._enabled

    @property
    def mods(self) -> List[Mod]:
        """当前所有临时模组，未启用时为空"""
        if not self._enabled:
            return []
        return list(self._mods)

    def find_mod(self, mod_id: str) -> Optional[Mod]:
        if not self._enabled:
            return None
        return next((mod for mod in self._mods if mod.id == mod_id), None)

    def has_mod(self, mod_id: str) -> bool:
        return self.find_mod(mod_id) is not None

    def add_mod(self, mod: Mod) -> None:
        if not self._check_enabled():
            return
        if any(existing.id == mod.id for existing in self._mods):
            logger.warning(f"[临时模组] {mod.id} 已存在，忽略")
            return
        self._mods.append(mod)
        logger.debug(f"[临时模组] 添加 {mod.id}")

    def add_version(self, version: ModVersion) -> None:
        """把版本加入对应的临时模组，模组不存在时不做任何事"""
        if not self._check_enabled():
            return
        mod = self.find_mod(version.mod_id)
        if mod is None:
            return
        if any(existing.version == version.version for existing in mod.versions):
            logger.warning(
                f"[临时模组] {version.mod_id}@{version.version} 已存在，忽略"
            )
            return
        mod.versions.append(version)
        logger.debug(f"[临时模组] 添加 {version.mod_id}@{version.version}")

    def remove_mod(self, mod_id: str) -> None:
        if not self._check_enabled():
            return
        self._mods = [mod for mod in self._mods if mod.id != mod_id]
        logger.debug(f"[临时模组] 移除 {mod_id}")

    def remove_version(self, mod_id: str, version: str) -> None:
        if not self._check_enabled():
            return
        mod = self.find_mod(mod_id)
        if mod is None:
            return
        mod.versions[:] = [v for v in mod.versions if v.version != version]
        logger.debug(f"[临时模组] 移除 {mod_id}@{version}")

    def load(self, raw_mods: Iterable[Dict[str, Any]]) -> None:
        """从配置文件中的原始数据批量添加临时模组"""
        for raw in raw_mods:
            self.add_mod(Mod.from_api(raw))
