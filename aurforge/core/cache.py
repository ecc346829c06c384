"""包缓存索引

职责:
- 将缓存目录的文件名列表解析为 {SimplePkg: PackagePath}
- 按包名查询是否存在缓存（不区分版本）
- 按子串搜索缓存文件

索引每次查询时从目录列表重新构建，不落盘。
不符合 name-version-release-arch.pkg.tar* 的文件静默丢弃：
缓存目录里可能混有签名文件、下载残留等任意杂物。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from aurforge.core.models import PackagePath, SimplePkg, simple_pkg

if TYPE_CHECKING:
    from aurforge.core.config import Config

logger = logging.getLogger(__name__)


@dataclass
class Cache:
    """缓存中的全部包，保留目录列表顺序"""

    entries: dict[SimplePkg, PackagePath] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def names(self) -> set[str]:
        return {k.name for k in self.entries}

    def versions_of(self, name: str) -> list[PackagePath]:
        """某个包在缓存中的全部文件，按版本从旧到新"""
        hits = [(k.parsed_version, v) for k, v in self.entries.items() if k.name == name]
        # 无法解析版本的排在最前
        unparsed = [v for ver, v in hits if ver is None]
        parsed = sorted(((ver, v) for ver, v in hits if ver is not None), key=lambda h: h[0])
        return unparsed + [v for _, v in parsed]


def build_index(filenames: Iterable[str]) -> Cache:
    """解析文件名列表，解析失败的静默跳过"""
    entries: dict[SimplePkg, PackagePath] = {}
    for name in filenames:
        path = PackagePath(name)
        key = simple_pkg(path)
        if key is None:
            continue
        entries[key] = path
    return Cache(entries)


def lookup_cache(cache: Cache, names: set[str]) -> set[str]:
    """请求的包名中在缓存里存在的部分"""
    return cache.names() & set(names)


def search_cache(cache: Cache, substring: str) -> list[PackagePath]:
    """原始文件名包含子串的全部条目"""
    return [p for p in cache.entries.values() if substring in p.path]


# =========================================================================
# 目录读取
# =========================================================================

def cache_contents(path: str | Path) -> Cache:
    """读取缓存目录并建索引，目录不存在时返回空缓存"""
    p = Path(path)
    if not p.is_dir():
        logger.warning("缓存目录不存在: %s", p)
        return Cache()
    cache = build_index(sorted(child.name for child in p.iterdir()))
    logger.debug("缓存索引: %s (%d 个包)", p, len(cache))
    return cache


def pkgs_in_cache(config: Config, names: set[str]) -> set[str]:
    """请求的包中在配置的缓存目录里有副本的"""
    return lookup_cache(cache_contents(config.cache_dir), names)


def cache_matches(config: Config, substring: str) -> list[Path]:
    """配置的缓存目录中文件名匹配子串的完整路径"""
    base = Path(config.cache_dir)
    return [base / p.path for p in search_cache(cache_contents(base), substring)]
