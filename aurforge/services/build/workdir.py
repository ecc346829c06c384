"""构建目录管理

目录规则:
  - VCS 包（-git 等后缀）: {vcs_dir}/{name}，只由包名决定，多次调用复用同一目录，
    避免大型仓库每次重新克隆
  - 其他包: {build_dir}/{name}-{hash}，hash 取自 包名 + 版本 + 当前时间，
    单次构建独占，用完可删
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from aurforge.core.config import DEFAULT_BUILD_DIR, DEFAULT_VCS_DIR
from aurforge.core.models import is_devel_pkg

if TYPE_CHECKING:
    from aurforge.core.models import Buildable
    from aurforge.services.context import Context

logger = logging.getLogger(__name__)

# 已存在时需要修正权限的目录（旧版本可能以错误权限创建）
_MIGRATE_MODES = {
    DEFAULT_VCS_DIR: "755",
    DEFAULT_BUILD_DIR: "1777",
}


def parent_dir(ctx: Context, b: Buildable) -> Path:
    """构建目录的上级目录"""
    if is_devel_pkg(b.name):
        return Path(ctx.config.vcs_dir)
    return Path(ctx.config.build_dir)


def select_build_dir(ctx: Context, b: Buildable) -> Path:
    """为 Buildable 选择构建目录"""
    if is_devel_pkg(b.name):
        return parent_dir(ctx, b) / b.name
    return parent_dir(ctx, b) / random_dir_name(b, ctx.clock())


def random_dir_name(b: Buildable, now: float) -> str:
    """包名 + 截断哈希，碰撞概率极低但不保证唯一"""
    seed = f"{b.name}\0{b.version or ''}\0{now!r}"
    digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()[:16]
    return f"{b.name}-{digest}"


def create_writable_if_missing(ctx: Context, path: Path) -> bool:
    """以固定权限 755 创建目录，不受调用方 umask 影响；返回是否可用

    已存在时幂等，仅对已知目录做一次权限修正。
    """
    if path.is_dir():
        mode = _MIGRATE_MODES.get(str(path))
        if mode is not None:
            ctx.executor.execute(["chmod", mode, str(path)])
        return True
    r = ctx.executor.execute(["mkdir", "-p", "-m755", str(path)])
    if not r.success:
        logger.error("创建目录失败 %s: %s", path, r.stderr[:200])
    return r.success
