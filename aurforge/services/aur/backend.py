"""AUR 解析后端

职责:
- 实现 Repository 协议: 一次元数据查询覆盖整批名字
- 将元数据记录转换为 Buildable（按 base 名获取构建脚本）
- 搜索 / 详情查询结果排序
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aurforge.core.models import (
    Buildable,
    Package,
    package_from_buildable,
    parse_dep,
    parse_version,
)
from aurforge.core.pkgbuild import parse_namespace
from aurforge.core.repository import LookupResult

if TYPE_CHECKING:
    from aurforge.services.aur.rpc import AurInfo
    from aurforge.services.context import Context

logger = logging.getLogger(__name__)


class AurRepository:
    """远程归档后端

    构建脚本按 base 名获取并在单次查询内复用，拆分包的兄弟包只拉取一次。
    构建脚本获取失败的记录视为未找到，与真正不存在的包一起报告。
    """

    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx

    def lookup(self, names: set[str]) -> LookupResult:
        if not names:
            return LookupResult()
        buildables, failed = aur_lookup(self.ctx, names)
        resolved = {b.name for b in buildables}
        not_found = (set(names) - resolved) | failed
        found: list[Package] = [package_from_buildable(b) for b in buildables]
        logger.info("AUR: 找到 %d, 未找到 %d", len(found), len(not_found))
        return LookupResult(not_found, found)

    def __repr__(self) -> str:
        return f"AurRepository({self.ctx.config.rpc_url})"


def aur_lookup(ctx: Context, names: set[str]) -> tuple[list[Buildable], set[str]]:
    """查询并转换，返回 (Buildable 列表, 构建脚本获取失败的名字)"""
    infos = ctx.rpc.info(sorted(names))
    scripts: dict[str, str | None] = {}
    buildables: list[Buildable] = []
    failed: set[str] = set()
    for info in infos:
        if info.base_name not in scripts:
            scripts[info.base_name] = ctx.rpc.pkgbuild(info.base_name)
        script = scripts[info.base_name]
        if script is None:
            failed.add(info.name)
            continue
        buildables.append(to_buildable(info, script))
    return buildables, failed


def to_buildable(info: AurInfo, script: str) -> Buildable:
    """元数据 + 构建脚本 → Buildable"""
    return Buildable(
        name=info.name,
        base_name=info.base_name,
        pkgbuild=script,
        provides=list(info.provides) or [info.name],
        deps=[parse_dep(d) for d in info.depends + info.make_depends],
        version=parse_version(info.version),
        explicit=False,
        namespace=parse_namespace(script),
    )


# =========================================================================
# 搜索 / 详情
# =========================================================================

def sort_aur_info(infos: list[AurInfo], alphabetical: bool) -> list[AurInfo]:
    """按名称字母序，或按票数降序；sorted 稳定，票数相同保持响应顺序"""
    if alphabetical:
        return sorted(infos, key=lambda i: i.name)
    return sorted(infos, key=lambda i: i.votes, reverse=True)


def aur_search(ctx: Context, term: str) -> list[AurInfo]:
    return sort_aur_info(ctx.rpc.search(term), ctx.config.sort_alphabetically)


def aur_info(ctx: Context, names: list[str]) -> list[AurInfo]:
    return sort_aur_info(ctx.rpc.info(names), alphabetical=True)


def pkg_url(ctx: Context, name: str) -> str:
    return f"{ctx.config.aur_url.rstrip('/')}/packages/{name}"


def is_aur_package(ctx: Context, name: str) -> bool:
    return ctx.rpc.pkgbuild(name) is not None
