"""构建前手动编辑

依次询问是否编辑: 构建脚本（总是询问）、安装钩子（存在时询问）、
每个补丁文件（逐个询问）。拒绝则文件保持原样，这里不解析编辑结果。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aurforge.core.models import Buildable
    from aurforge.services.context import Context

logger = logging.getLogger(__name__)


def hotedit(ctx: Context, b: Buildable, src_dir: Path) -> list[Path]:
    """返回被编辑过的文件"""
    logger.debug("hotedit: %s", src_dir)
    edited: list[Path] = []

    def offer(path: Path, message: str) -> None:
        if ctx.prompter.confirm(message, default=False):
            ctx.editor.edit(path)
            edited.append(path)

    offer(src_dir / "PKGBUILD", f"是否编辑 {b.name} 的 PKGBUILD？")
    hooks = sorted(src_dir.glob("*.install"))
    if hooks:
        offer(hooks[0], f"是否编辑安装钩子 {hooks[0].name}？")
    for patch in sorted(src_dir.glob("*.patch")):
        offer(patch, f"是否编辑补丁 {patch.name}？")
    return edited
