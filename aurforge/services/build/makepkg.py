"""构建工具边界 — makepkg

以构建用户身份在源码目录中执行 makepkg；只以退出码判定成败，
产物路径来自 makepkg --packagelist 的输出。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from aurforge.core.models import Failure

if TYPE_CHECKING:
    from aurforge.services.context import Context
    from aurforge.utils.shell import BuildUser, CommandResult

logger = logging.getLogger(__name__)


def makepkg(ctx: Context, src_dir: Path, user: BuildUser) -> list[Path] | Failure:
    """构建二进制包，返回实际生成的产物文件"""
    args = ["makepkg", "-f", "--noconfirm", *ctx.config.makepkg_flags]
    r = _run(ctx, args, src_dir, user)
    if not r.success:
        return Failure.msg(f"makepkg 失败 (rc={r.returncode}): {src_dir.name}")

    listing = _run(ctx, ["makepkg", "--packagelist"], src_dir, user)
    if not listing.success:
        return Failure.msg(f"无法获取产物列表: {src_dir.name}")
    paths = [Path(line.strip()) for line in listing.stdout.splitlines() if line.strip()]
    built = [p if p.is_absolute() else src_dir / p for p in paths]
    built = [p for p in built if p.is_file()]
    if not built:
        return Failure.msg(f"makepkg 未生成任何产物: {src_dir.name}")
    return built


def makepkg_source(ctx: Context, src_dir: Path, user: BuildUser) -> list[Path] | Failure:
    """只生成包含全部源码的 .src.tar.gz"""
    r = _run(ctx, ["makepkg", "--allsource", "-f", *ctx.config.makepkg_flags], src_dir, user)
    if not r.success:
        return Failure.msg(f"makepkg --allsource 失败 (rc={r.returncode}): {src_dir.name}")
    return sorted(src_dir.glob("*.src.tar.*"))


def _run(ctx: Context, args: list[str], src_dir: Path, user: BuildUser) -> CommandResult:
    logger.debug("makepkg: %s (user=%s)", " ".join(args), user.name)
    return ctx.executor.execute(
        args, cwd=str(src_dir), env=user.env(),
        user=user.uid, group=user.gid,
    )
