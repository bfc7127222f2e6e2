"""
语义化版本

实现版本解析、版本排序和 npm 风格的版本范围匹配，
所有版本比较都必须走这里，不能按字符串比较。

支持的范围写法：
    ">=2.1.0 <3.0.0"    空格分隔的比较器同时成立
    ">=1.0.0 || ^3.0.0" || 分隔的任一组成立
    "^1.2.3" "~1.2.3"   脱字符 / 波浪号
    "1.2.3 - 2.0.0"     连字符范围
    "1.x" "1.2" "*"     通配符与不完整版本
"""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable, List, Optional, Tuple, Union

from ficsitfetch.exceptions import SemVerError


_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

VERSION_RE = re.compile(
    r"^[v=]?\s*(?P<major>0|[1-9]\d*)"
    r"\.(?P<minor>0|[1-9]\d*)"
    r"\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<prerelease>{_IDENT}))?"
    rf"(?:\+(?P<build>{_IDENT}))?$"
)

PARTIAL_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*|[xX*])"
    r"(?:\.(?P<minor>0|[1-9]\d*|[xX*])"
    r"(?:\.(?P<patch>0|[1-9]\d*|[xX*])"
    rf"(?:-(?P<prerelease>{_IDENT}))?"
    rf"(?:\+(?P<build>{_IDENT}))?"
    r")?)?$"
)

HYPHEN_RE = re.compile(r"^(?P<lower>\S+)\s+-\s+(?P<upper>\S+)$")
OPERATOR_RE = re.compile(r"^(?P<op><=|>=|<|>|=|\^|~>|~)?(?P<version>.*)$")


@total_ordering
@dataclass(frozen=True)
class SemVer:
    """语义化版本号"""

    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def _prerelease_key(self) -> tuple:
        # 数字标识符优先级低于字母数字标识符
        return tuple(
            (0, int(ident), "") if ident.isdigit() else (1, 0, ident)
            for ident in self.prerelease
        )

    def _cmp_key(self) -> tuple:
        # 构建元数据不参与排序，正式版高于任何预发布版
        return (
            self.major,
            self.minor,
            self.patch,
            0 if self.prerelease else 1,
            self._prerelease_key(),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._cmp_key() == other._cmp_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._cmp_key() < other._cmp_key()

    def __hash__(self) -> int:
        return hash(self._cmp_key())

    @property
    def core(self) -> Tuple[int, int, int]:
        return self.major, self.minor, self.patch


def _split(value: Optional[str]) -> Tuple[str, ...]:
    return tuple(value.split(".")) if value else ()


def parse_version(raw: Union[str, SemVer]) -> SemVer:
    """
    解析版本号

    Args:
        raw: 版本字符串，例如 "1.2.3"、"v2.0.0-beta.1"

    Returns:
        SemVer 实例

    Raises:
        SemVerError: 不是合法的语义化版本
    """
    if isinstance(raw, SemVer):
        return raw
    if not isinstance(raw, str):
        raise SemVerError(f"版本号必须是字符串: {raw!r}")

    match = VERSION_RE.match(raw.strip())
    if not match:
        raise SemVerError(f"无效的版本号: {raw!r}", context={"version": raw})

    return SemVer(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        prerelease=_split(match.group("prerelease")),
        build=_split(match.group("build")),
    )


def is_valid(raw: str) -> bool:
    """判断字符串是否为合法版本号"""
    try:
        parse_version(raw)
    except SemVerError:
        return False
    return True


def compare(a: Union[str, SemVer], b: Union[str, SemVer]) -> int:
    """比较两个版本，返回 -1 / 0 / 1"""
    va, vb = parse_version(a), parse_version(b)
    if va < vb:
        return -1
    if va > vb:
        return 1
    return 0


@dataclass(frozen=True)
class Comparator:
    """单个比较器，例如 >=2.0.0"""

    operator: str
    version: SemVer

    def test(self, version: SemVer) -> bool:
        if self.operator == "=":
            return version == self.version
        if self.operator == ">":
            return version > self.version
        if self.operator == ">=":
            return version >= self.version
        if self.operator == "<":
            return version < self.version
        if self.operator == "<=":
            return version <= self.version
        raise SemVerError(f"未知的比较运算符: {self.operator!r}")

    def __str__(self) -> str:
        return f"{self.operator}{self.version}"


# 不可能被满足的比较器
_NOTHING = Comparator("<", SemVer(0, 0, 0, ("0",)))

_Partial = Tuple[Optional[int], Optional[int], Optional[int], Tuple[str, ...]]


def _parse_partial(raw: str, range_text: str) -> _Partial:
    match = PARTIAL_RE.match(raw)
    if not match:
        raise SemVerError(
            f"无效的版本范围: {range_text!r}", context={"range": range_text}
        )

    parts: List[Optional[int]] = []
    for name in ("major", "minor", "patch"):
        value = match.group(name)
        # 通配符之后的部分一律视为通配符
        if value is None or value in ("x", "X", "*") or (parts and parts[-1] is None):
            parts.append(None)
        else:
            parts.append(int(value))
    return parts[0], parts[1], parts[2], _split(match.group("prerelease"))


def _expand_caret(major, minor, patch, pre) -> List[Comparator]:
    if major is None:
        return []
    if minor is None:
        return [
            Comparator(">=", SemVer(major, 0, 0)),
            Comparator("<", SemVer(major + 1, 0, 0)),
        ]
    if patch is None:
        upper = SemVer(major + 1, 0, 0) if major else SemVer(0, minor + 1, 0)
        return [Comparator(">=", SemVer(major, minor, 0)), Comparator("<", upper)]
    if major:
        upper = SemVer(major + 1, 0, 0)
    elif minor:
        upper = SemVer(0, minor + 1, 0)
    else:
        upper = SemVer(0, 0, patch + 1)
    return [
        Comparator(">=", SemVer(major, minor, patch, pre)),
        Comparator("<", upper),
    ]


def _expand_tilde(major, minor, patch, pre) -> List[Comparator]:
    if major is None:
        return []
    if minor is None:
        return [
            Comparator(">=", SemVer(major, 0, 0)),
            Comparator("<", SemVer(major + 1, 0, 0)),
        ]
    lower = SemVer(major, minor, 0 if patch is None else patch, pre)
    return [Comparator(">=", lower), Comparator("<", SemVer(major, minor + 1, 0))]


def _expand_primitive(op, major, minor, patch, pre) -> List[Comparator]:
    if op in ("", "="):
        if major is None:
            return []
        if minor is None:
            return [
                Comparator(">=", SemVer(major, 0, 0)),
                Comparator("<", SemVer(major + 1, 0, 0)),
            ]
        if patch is None:
            return [
                Comparator(">=", SemVer(major, minor, 0)),
                Comparator("<", SemVer(major, minor + 1, 0)),
            ]
        return [Comparator("=", SemVer(major, minor, patch, pre))]

    if major is None:
        return [_NOTHING] if op in ("<", ">") else []

    if minor is not None and patch is not None:
        return [Comparator(op, SemVer(major, minor, patch, pre))]

    # 不完整版本与比较运算符组合
    if op == ">":
        bound = SemVer(major + 1, 0, 0) if minor is None else SemVer(major, minor + 1, 0)
        return [Comparator(">=", bound)]
    if op == "<=":
        bound = SemVer(major + 1, 0, 0) if minor is None else SemVer(major, minor + 1, 0)
        return [Comparator("<", bound)]
    return [Comparator(op, SemVer(major, minor or 0, 0))]


def _parse_hyphen(lower: str, upper: str, range_text: str) -> List[Comparator]:
    comparators: List[Comparator] = []

    major, minor, patch, pre = _parse_partial(lower, range_text)
    if major is not None:
        comparators.append(Comparator(">=", SemVer(major, minor or 0, patch or 0, pre)))

    major, minor, patch, pre = _parse_partial(upper, range_text)
    if major is None:
        pass
    elif minor is None:
        comparators.append(Comparator("<", SemVer(major + 1, 0, 0)))
    elif patch is None:
        comparators.append(Comparator("<", SemVer(major, minor + 1, 0)))
    else:
        comparators.append(Comparator("<=", SemVer(major, minor, patch, pre)))
    return comparators


def _parse_set(text: str, range_text: str) -> Tuple[Comparator, ...]:
    text = text.strip()
    hyphen = HYPHEN_RE.match(text)
    if hyphen:
        return tuple(_parse_hyphen(hyphen.group("lower"), hyphen.group("upper"), range_text))

    # ">= 1.2.3" 与 ">=1.2.3" 等价
    text = re.sub(r"(<=|>=|<|>|=|\^|~>|~)\s+", r"\1", text)

    comparators: List[Comparator] = []
    for token in text.split():
        match = OPERATOR_RE.match(token)
        op = match.group("op") or ""
        major, minor, patch, pre = _parse_partial(match.group("version"), range_text)
        if op == "^":
            comparators.extend(_expand_caret(major, minor, patch, pre))
        elif op in ("~", "~>"):
            comparators.extend(_expand_tilde(major, minor, patch, pre))
        else:
            comparators.extend(_expand_primitive(op, major, minor, patch, pre))
    return tuple(comparators)


@dataclass(frozen=True)
class Range:
    """
    版本范围

    sets 中任意一组满足即可，组内所有比较器必须同时满足。
    空组表示任意版本。
    """

    raw: str
    sets: Tuple[Tuple[Comparator, ...], ...]

    def test(self, version: Union[str, SemVer]) -> bool:
        parsed = parse_version(version)
        return any(_test_set(comparators, parsed) for comparators in self.sets)

    def __str__(self) -> str:
        return " || ".join(
            " ".join(str(c) for c in comparators) or "*" for comparators in self.sets
        )


def _test_set(comparators: Tuple[Comparator, ...], version: SemVer) -> bool:
    if not all(c.test(version) for c in comparators):
        return False

    if version.prerelease:
        # 预发布版本只匹配在同一 major.minor.patch 上显式写了预发布号的范围
        return any(
            c.version.prerelease and c.version.core == version.core
            for c in comparators
        )
    return True


def parse_range(raw: Union[str, Range, None]) -> Range:
    """
    解析版本范围

    Args:
        raw: 范围字符串，None 或空字符串表示任意版本

    Returns:
        Range 实例

    Raises:
        SemVerError: 范围无法解析
    """
    if isinstance(raw, Range):
        return raw
    if raw is None:
        raw = ""
    if not isinstance(raw, str):
        raise SemVerError(f"版本范围必须是字符串: {raw!r}")

    sets = tuple(_parse_set(part, raw) for part in raw.split("||"))
    return Range(raw=raw, sets=sets)


def satisfies(version: Union[str, SemVer], constraint: Union[str, Range]) -> bool:
    """检查版本是否满足范围"""
    return parse_range(constraint).test(version)


def satisfies_all(
    version: Union[str, SemVer], constraints: Iterable[Union[str, Range]]
) -> bool:
    """检查版本是否同时满足所有范围，空列表视为满足"""
    parsed = parse_version(version)
    return all(parse_range(constraint).test(parsed) for constraint in constraints)


__all__ = [
    "SemVer",
    "Comparator",
    "Range",
    "parse_version",
    "parse_range",
    "is_valid",
    "compare",
    "satisfies",
    "satisfies_all",
]
