"""领域协议定义

集中定义核心与外部协作方之间的接口契约（Protocol），
核心只依赖这些抽象；真实实现在 services / utils 中，测试注入假实现。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from aurforge.core.repository import LookupResult


# =========================================================================
# 包解析后端
# =========================================================================

class Repository(Protocol):
    """包解析后端

    一次调用处理整批名字，便于远程后端一次往返查询多个包。
    实现只持有回答查询所需的配置，不保存会话状态。
    """

    def lookup(self, names: set[str]) -> LookupResult:
        """返回 (未找到的名字, 找到的包)"""
        ...


# =========================================================================
# 交互协议
# =========================================================================

class Prompter(Protocol):
    """是/否确认"""

    def confirm(self, message: str, *, default: bool = True) -> bool:
        ...


class FileEditor(Protocol):
    """在外部编辑器中打开文件"""

    def edit(self, path: Path) -> None:
        ...


# =========================================================================
# 远程元数据服务
# =========================================================================

class MetadataClient(Protocol):
    """远程元数据服务: 批量按名查询、全文搜索、获取构建脚本"""

    def info(self, names: list[str]) -> list[Any]:
        ...

    def search(self, term: str) -> list[Any]:
        ...

    def pkgbuild(self, base_name: str) -> str | None:
        """获取构建脚本文本，失败返回 None"""
        ...
