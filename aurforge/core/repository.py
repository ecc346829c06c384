"""包解析后端组合

compose(a, b) 构造左偏的回退链:
  1. a 先处理整批名字
  2. a 全部找到时 b 不会被调用（后端可能是网络请求）
  3. 否则 b 只处理 a 剩下的名字，结果按 a、b 顺序合并

EMPTY_REPOSITORY 是单位元: 什么都不查，所有名字都报告为未找到。
compose 满足结合律，任意长度的链（本地数据库 → 远程归档 → 其他叠加源）
都可以通过反复组合得到。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from aurforge.core.models import Package
    from aurforge.core.protocols import Repository

logger = logging.getLogger(__name__)


@dataclass
class LookupResult:
    """一次批量查询的结果"""

    not_found: set[str] = field(default_factory=set)
    found: list[Package] = field(default_factory=list)


class EmptyRepository:
    """单位元后端"""

    def lookup(self, names: set[str]) -> LookupResult:
        return LookupResult(set(names), [])

    def __repr__(self) -> str:
        return "EmptyRepository()"


EMPTY_REPOSITORY = EmptyRepository()


class ComposedRepository:
    """先查 first，剩余的交给 second"""

    def __init__(self, first: Repository, second: Repository) -> None:
        self.first = first
        self.second = second

    def lookup(self, names: set[str]) -> LookupResult:
        if not names:
            return LookupResult()
        a = self.first.lookup(set(names))
        if not a.not_found:
            return LookupResult(set(), list(a.found))
        b = self.second.lookup(set(a.not_found))
        return LookupResult(set(b.not_found), list(a.found) + list(b.found))

    def __repr__(self) -> str:
        return f"compose({self.first!r}, {self.second!r})"


def compose(first: Repository, second: Repository) -> Repository:
    """左偏组合两个后端"""
    if first is EMPTY_REPOSITORY:
        return second
    if second is EMPTY_REPOSITORY:
        return first
    return ComposedRepository(first, second)


def compose_all(*repos: Repository) -> Repository:
    """从左到右依次组合，空参数返回单位元"""
    result: Repository = EMPTY_REPOSITORY
    for repo in repos:
        result = compose(result, repo)
    return result


class FunctionRepository:
    """将普通函数适配为后端"""

    def __init__(self, fn: Callable[[set[str]], LookupResult], label: str = "") -> None:
        self._fn = fn
        self.label = label or getattr(fn, "__name__", "fn")

    def lookup(self, names: set[str]) -> LookupResult:
        result = self._fn(set(names))
        logger.debug(
            "%s: 查询 %d, 命中 %d, 未找到 %d",
            self.label, len(names), len(result.found), len(result.not_found),
        )
        return result

    def __repr__(self) -> str:
        return f"FunctionRepository({self.label})"
