"""依赖与包数据模型

纯数据类型与解析函数，不做任何 IO:
- VersionDemand: 版本约束（LessThan / AtLeast / MoreThan / MustBe / Anything）
- Dep / parse_dep: 单个依赖及其解析
- Package / InstallType / Buildable: 待安装的包与安装方式
- ParsedVersion: epoch:pkgver-pkgrel 结构化版本
- SimplePkg / PackagePath: 缓存中的产物文件
- BuildResult / Failure: 单个构建单元的结果
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Union

# =========================================================================
# 版本约束
# =========================================================================


@dataclass(frozen=True)
class LessThan:
    version: str

    def __str__(self) -> str:
        return f"<{self.version}"


@dataclass(frozen=True)
class AtLeast:
    version: str

    def __str__(self) -> str:
        return f">={self.version}"


@dataclass(frozen=True)
class MoreThan:
    version: str

    def __str__(self) -> str:
        return f">{self.version}"


@dataclass(frozen=True)
class MustBe:
    version: str

    def __str__(self) -> str:
        return f"={self.version}"


@dataclass(frozen=True)
class Anything:
    def __str__(self) -> str:
        return ""


VersionDemand = Union[LessThan, AtLeast, MoreThan, MustBe, Anything]

# 交替顺序决定同一位置上 ">=" 优先于 ">"
_DEMAND_RE = re.compile(r"<|>=|>|=")
_DEMANDS: dict[str, type] = {"<": LessThan, ">=": AtLeast, ">": MoreThan, "=": MustBe}


@dataclass(frozen=True)
class Dep:
    """对另一个包的依赖"""

    name: str
    demand: VersionDemand = field(default_factory=Anything)

    def __str__(self) -> str:
        return f"{self.name}{self.demand}"


def parse_dep(token: str) -> Dep:
    """在第一个比较运算符处切分依赖串

    全函数: 不含运算符时整串作为包名，约束为 Anything。

    >>> parse_dep("foo>=1.2")
    Dep(name='foo', demand=AtLeast(version='1.2'))
    """
    m = _DEMAND_RE.search(token)
    if m is None:
        return Dep(token, Anything())
    demand = _DEMANDS[m.group(0)](token[m.end():])
    return Dep(token[:m.start()], demand)


# =========================================================================
# 结构化版本
# =========================================================================

_VERSION_RE = re.compile(
    r"^(?:(?P<epoch>\d+):)?(?P<pkgver>[A-Za-z0-9._+~]+?)(?:-(?P<pkgrel>[0-9][0-9.]*))?$"
)
_SEGMENT_RE = re.compile(r"\d+|[A-Za-z]+")


@total_ordering
@dataclass(frozen=True)
class ParsedVersion:
    """epoch:pkgver-pkgrel

    比较规则近似 vercmp: 先比 epoch，再逐段比较 pkgver（数字段按数值，
    数字段大于字母段，段多者更新），最后比较 pkgrel。
    """

    epoch: int
    pkgver: str
    pkgrel: str = ""

    def __str__(self) -> str:
        text = f"{self.epoch}:{self.pkgver}" if self.epoch else self.pkgver
        return f"{text}-{self.pkgrel}" if self.pkgrel else text

    def _key(self) -> tuple:
        return (self.epoch, _segments_key(self.pkgver), _segments_key(self.pkgrel))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ParsedVersion):
            return NotImplemented
        return self._key() < other._key()


def _segments_key(text: str) -> tuple:
    # (1, n) 数字段 / (0, s) 字母段
    return tuple(
        (1, int(seg)) if seg.isdigit() else (0, seg)
        for seg in _SEGMENT_RE.findall(text)
    )


def parse_version(text: str) -> ParsedVersion | None:
    """尽力解析版本串，失败返回 None 而不是抛异常"""
    m = _VERSION_RE.match(text.strip()) if text else None
    if m is None:
        return None
    return ParsedVersion(
        epoch=int(m.group("epoch") or 0),
        pkgver=m.group("pkgver"),
        pkgrel=m.group("pkgrel") or "",
    )


# =========================================================================
# 包与安装方式
# =========================================================================


@dataclass
class Buildable:
    """需要从源码构建的包

    base_name 用于拉取和构建（拆分包共享同一个 base），
    name 与 provides 用于匹配用户请求的包名。
    namespace 是从构建脚本提取的变量表，对本模块不透明。
    """

    name: str
    base_name: str
    pkgbuild: str
    provides: list[str] = field(default_factory=list)
    deps: list[Dep] = field(default_factory=list)
    version: ParsedVersion | None = None
    explicit: bool = False
    namespace: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class Pacman:
    """由宿主包管理器直接安装"""

    repo: str


@dataclass(frozen=True)
class Build:
    """必须从源码构建"""

    buildable: Buildable


InstallType = Union[Pacman, Build]


@dataclass
class Package:
    """待安装的包"""

    name: str
    version: str
    deps: list[Dep] = field(default_factory=list)
    install_type: InstallType = field(default_factory=lambda: Pacman(""))


def package_from_buildable(b: Buildable) -> Package:
    """将 Buildable 包装为 Build 安装方式的 Package"""
    return Package(
        name=b.name,
        version=str(b.version) if b.version else "",
        deps=list(b.deps),
        install_type=Build(b),
    )


def partition_pkgs(pkgs: list[Package]) -> tuple[list[str], list[Buildable]]:
    """按安装方式稳定切分: (宿主仓库包名, 待构建单元)"""
    repo_names: list[str] = []
    buildables: list[Buildable] = []
    for p in pkgs:
        if isinstance(p.install_type, Build):
            buildables.append(p.install_type.buildable)
        else:
            repo_names.append(p.name)
    return repo_names, buildables


DEVEL_SUFFIXES = ("-git", "-hg", "-svn", "-darcs", "-cvs", "-bzr")


def is_devel_pkg(name: str) -> bool:
    """是否为跟踪版本库实时源码的包（按名称后缀判断）"""
    return name.endswith(DEVEL_SUFFIXES)


# =========================================================================
# 缓存条目
# =========================================================================


@dataclass(frozen=True)
class SimplePkg:
    """缓存索引键"""

    name: str
    version: str
    release: str
    arch: str

    @property
    def parsed_version(self) -> ParsedVersion | None:
        return parse_version(f"{self.version}-{self.release}")


@dataclass(frozen=True)
class PackagePath:
    """产物文件路径"""

    path: str

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    def __str__(self) -> str:
        return self.path


_PKGFILE_RE = re.compile(
    r"^(?P<name>.+)-(?P<version>[^-/]+)-(?P<release>[^-/]+)-(?P<arch>[^-./]+)"
    r"\.pkg\.tar(?:\.[A-Za-z0-9]+)?$"
)


def simple_pkg(path: PackagePath) -> SimplePkg | None:
    """从文件名 name-version-release-arch.pkg.tar[.ext] 解析索引键"""
    m = _PKGFILE_RE.match(path.filename)
    if m is None:
        return None
    return SimplePkg(m.group("name"), m.group("version"), m.group("release"), m.group("arch"))


# =========================================================================
# 构建结果与失败
# =========================================================================


@dataclass(frozen=True)
class AllSourced:
    """只生成了源码包，没有可安装产物"""


@dataclass(frozen=True)
class Built:
    """一次构建可能产出多个产物（拆分包）"""

    paths: tuple[PackagePath, ...]

    def __post_init__(self) -> None:
        if not self.paths:
            raise ValueError("Built 至少需要一个产物")


BuildResult = Union[AllSourced, Built]


def built_paths(result: BuildResult) -> tuple[PackagePath, ...] | None:
    return result.paths if isinstance(result, Built) else None


@dataclass(frozen=True)
class Failure:
    """构建失败: message 为 None 表示已提示过用户（Silent）"""

    message: str | None = None

    @classmethod
    def silent(cls) -> Failure:
        return cls(None)

    @classmethod
    def msg(cls, text: str) -> Failure:
        return cls(text)

    @property
    def is_silent(self) -> bool:
        return self.message is None
