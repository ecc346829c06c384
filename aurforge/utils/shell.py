"""Shell 命令执行工具 — 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，方便测试替换。
构建步骤需要以非特权用户运行，因此执行器支持 user/group 参数。
"""

from __future__ import annotations

import logging
import os
import pwd
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

from aurforge.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议 — 抽象子进程调用

    测试时注入记录型实现，无需 patch subprocess。
    """

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        user: str | int | None = None,
        group: str | int | None = None,
    ) -> CommandResult:
        """执行命令并返回结果"""
        ...


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalExecutor:
    """本地命令执行器（默认实现）"""

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        user: str | int | None = None,
        group: str | int | None = None,
    ) -> CommandResult:
        args = shlex.split(cmd) if isinstance(cmd, str) else cmd
        logger.debug("exec: %s (cwd=%s, user=%s)", shlex.join(args), cwd, user)
        r = subprocess.run(
            args, capture_output=True, text=True,
            cwd=cwd, env=env, check=False, timeout=timeout,
            user=user, group=group,
        )
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout,
            stderr=r.stderr,
        )


# =========================================================================
# 便捷函数
# =========================================================================

def run_cmd(
    executor: CommandExecutor,
    cmd: str | list[str], *, cwd: str = ".",
    env: dict[str, str] | None = None,
    label: str = "cmd",
) -> CommandResult:
    """执行命令，失败抛 ExecutionError

    Args:
        executor: 命令执行器
        cmd: 命令字符串或参数列表
        cwd: 工作目录
        env: 环境变量（不传则继承当前进程）
        label: 日志标签
    """
    logger.info("  %s: %s (cwd=%s)", label, cmd, cwd)
    r = executor.execute(cmd, cwd=cwd, env=env)
    if not r.success:
        raise ExecutionError(f"{label}失败 (rc={r.returncode}): {r.stderr[:500]}")
    return r


def chown(
    executor: CommandExecutor, user: str, path: str, *, recursive: bool = False,
) -> bool:
    """将路径所有权转交给指定用户，返回是否成功"""
    args = ["chown"]
    if recursive:
        args.append("-R")
    # "user:" 取该用户的登录组
    args += [f"{user}:", path]
    r = executor.execute(args)
    if not r.success:
        logger.warning("chown 失败 %s -> %s: %s", path, user, r.stderr[:200])
    return r.success


# =========================================================================
# 降权执行
# =========================================================================

@dataclass
class BuildUser:
    """构建用户身份"""

    name: str
    uid: int
    gid: int
    home: str

    def env(self, base: dict[str, str] | None = None) -> dict[str, str]:
        """以该用户身份运行时的环境变量"""
        env = dict(os.environ if base is None else base)
        env.update(HOME=self.home, USER=self.name, LOGNAME=self.name)
        return env


def lookup_user(name: str) -> BuildUser | None:
    """按用户名查询 uid/gid，不存在返回 None"""
    try:
        entry = pwd.getpwnam(name)
    except KeyError:
        return None
    return BuildUser(name=entry.pw_name, uid=entry.pw_uid, gid=entry.pw_gid, home=entry.pw_dir)
