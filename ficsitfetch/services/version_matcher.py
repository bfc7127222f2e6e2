"""
版本匹配服务

实现最新版本选择、多条件版本范围匹配和最低版本过滤。
"""

from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from ficsitfetch.semver import SemVer, parse_range, parse_version, satisfies, satisfies_all


T = TypeVar("T")


def _version_of(item) -> str:
    return item.version


class VersionMatcher:
    """版本匹配器"""

    def __init__(self, key: Callable[[T], str] = _version_of):
        self.key = key

    def _semver(self, item: T) -> SemVer:
        return parse_version(self.key(item))

    def sort_desc(self, items: Iterable[T]) -> List[T]:
        """按语义化版本从高到低排序，返回新列表"""
        return sorted(items, key=self._semver, reverse=True)

    def latest(self, items: Sequence[T]) -> T:
        """
        获取最高版本

        Raises:
            ValueError: 列表为空
        """
        if not items:
            raise ValueError("版本列表为空")
        return max(items, key=self._semver)

    def filter_matching_all(self, items: Iterable[T], constraints: List[str]) -> List[T]:
        """
        筛选同时满足所有版本范围的条目

        Args:
            items: 候选版本
            constraints: 版本范围列表，需全部满足

        Returns:
            满足条件的条目，保持原有顺序
        """
        return [item for item in items if satisfies_all(self.key(item), constraints)]

    def first_matching_all(
        self, items: Iterable[T], constraints: List[str]
    ) -> Optional[T]:
        """按原有顺序返回第一个满足所有版本范围的条目"""
        for item in items:
            if satisfies_all(self.key(item), constraints):
                return item
        return None

    def at_least(self, items: Iterable[T], floor: str) -> List[T]:
        """
        筛选满足 >=floor 的版本

        按版本范围判断，预发布版本不会通过。
        """
        minimum = parse_range(f">={floor}")
        return [item for item in items if satisfies(self.key(item), minimum)]
