"""宿主包管理器边界

职责:
- pacman 调用封装（非零退出即失败）
- 本地同步数据库后端 PacmanRepository
- 产物安装 (-U) / 仓库包安装 (-S)
- 数据库锁检查
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from aurforge.core.exceptions import DatabaseLockError
from aurforge.core.models import Package, Pacman, parse_dep
from aurforge.core.repository import LookupResult
from aurforge.utils.shell import run_cmd

if TYPE_CHECKING:
    from aurforge.core.models import PackagePath
    from aurforge.services.context import Context
    from aurforge.utils.shell import CommandResult

logger = logging.getLogger(__name__)

_FIELD_RE = re.compile(r"^(?P<key>[A-Za-z][A-Za-z ]*?)\s*:\s(?P<value>.*)$")


def pacman(ctx: Context, args: list[str], *, label: str = "pacman") -> CommandResult:
    """执行 pacman，非零退出抛 ExecutionError"""
    return run_cmd(ctx.executor, ["pacman", *args], label=label)


def check_db_lock(ctx: Context, wait: Callable[[], str] = input) -> None:
    """锁文件存在时阻塞等待用户确认后重新检查，没有超时

    Raises:
        DatabaseLockError: 等待输入时遇到 EOF
    """
    lock = Path(ctx.config.lock_file)
    while lock.exists():
        logger.warning("包数据库已被锁定 (%s)，解锁后按回车继续。", lock)
        try:
            wait()
        except EOFError as e:
            raise DatabaseLockError(f"等待数据库锁时输入已关闭: {lock}") from e


def install_pkg_files(ctx: Context, files: list[PackagePath]) -> None:
    """pacman -U 安装本地产物文件"""
    if not files:
        return
    check_db_lock(ctx)
    pacman(ctx, ["-U", *(str(f) for f in files), *ctx.config.pacman_flags], label="pacman -U")


def install_repo_pkgs(ctx: Context, names: list[str]) -> None:
    """pacman -S 安装同步仓库中的包"""
    if not names:
        return
    check_db_lock(ctx)
    pacman(ctx, ["-S", *names, *ctx.config.pacman_flags], label="pacman -S")


def is_installed(ctx: Context, name: str) -> bool:
    return ctx.executor.execute(["pacman", "-Qq", name]).success


# =========================================================================
# 同步数据库后端
# =========================================================================

class PacmanRepository:
    """通过 pacman -Si 查询同步数据库

    pacman 对未知的名字输出错误但仍打印已知包的信息，
    因此按输出中的 Name 字段判定命中，不依赖退出码。
    """

    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx

    def lookup(self, names: set[str]) -> LookupResult:
        if not names:
            return LookupResult()
        r = self.ctx.executor.execute(["pacman", "-Si", "--", *sorted(names)])
        found = [p for p in parse_si_output(r.stdout) if p.name in names]
        hit = {p.name for p in found}
        return LookupResult(set(names) - hit, found)

    def __repr__(self) -> str:
        return "PacmanRepository()"


def parse_si_output(text: str) -> list[Package]:
    """解析 pacman -Si 输出，记录之间以空行分隔"""
    pkgs: list[Package] = []
    for block in re.split(r"\n\s*\n", text.strip()):
        fields: dict[str, str] = {}
        last = ""
        for line in block.splitlines():
            m = _FIELD_RE.match(line)
            if m:
                last = m.group("key").strip()
                fields[last] = m.group("value").strip()
            elif last and line.startswith(" "):
                fields[last] += " " + line.strip()
        if "Name" not in fields:
            continue
        deps_field = fields.get("Depends On", "None")
        deps = [] if deps_field == "None" else [parse_dep(d) for d in deps_field.split()]
        pkgs.append(Package(
            name=fields["Name"],
            version=fields.get("Version", ""),
            deps=deps,
            install_type=Pacman(fields.get("Repository", "")),
        ))
    return pkgs
