"""构建脚本源码获取 — Git clone / pull

clone 对 {aur_url}/{base_name}.git 做单版本浅克隆；
pull 先丢弃本地修改，再以构建用户身份拉取最新版本。
失败一律返回值，不抛异常。
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from aurforge.core.models import Failure
from aurforge.utils.shell import chown

if TYPE_CHECKING:
    from aurforge.core.models import Buildable
    from aurforge.services.context import Context
    from aurforge.utils.shell import BuildUser

logger = logging.getLogger(__name__)


def clone_url(ctx: Context, base_name: str) -> str:
    return f"{ctx.config.aur_url.rstrip('/')}/{base_name}.git"


def clone(ctx: Context, buildable: Buildable, parent: Path) -> Path | None:
    """在 parent 下浅克隆，成功返回检出目录"""
    url = clone_url(ctx, buildable.base_name)
    try:
        r = ctx.executor.execute(
            ["git", "clone", "--depth", "1", url, buildable.base_name],
            cwd=str(parent),
        )
    except (subprocess.SubprocessError, OSError) as e:
        logger.error("git clone 异常 %s: %s", url, e)
        return None
    if not r.success:
        logger.error("git clone 失败 (rc=%d): %s", r.returncode, url)
        return None
    logger.debug("git: 克隆完成 %s", url)
    return parent / buildable.base_name


def pull(ctx: Context, directory: Path, user: BuildUser) -> Failure | None:
    """重置工作区并以 user 身份拉取，成功返回 None"""
    try:
        logger.debug("git: 清理工作区 %s", directory)
        ctx.executor.execute(["git", "reset", "--hard", "HEAD"], cwd=str(directory))
        logger.debug("git: 以 %s 身份拉取", user.name)
        r = ctx.executor.execute(
            ["git", "pull"], cwd=str(directory), env=user.env(),
            user=user.uid, group=user.gid,
        )
    except (subprocess.SubprocessError, OSError) as e:
        return Failure.msg(f"git pull 异常: {e}")
    if not r.success:
        return Failure.msg(f"git pull 失败: {directory}")
    chown(ctx.executor, user.name, str(directory), recursive=True)
    return None
