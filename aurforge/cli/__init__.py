"""aurforge 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import functools
import os
from typing import Any, Callable

import click

from aurforge import __version__
from aurforge.core.config import DEFAULT_CONFIG_PATH, get_config, init_config
from aurforge.core.exceptions import AurForgeError
from aurforge.services.context import Context
from aurforge.utils.logger import setup_logging


def _context(**overrides: Any) -> Context:
    """以当前配置装配上下文，CLI 参数覆盖配置文件"""
    return Context.default(get_config().override(**overrides))


def handle_errors(fn: Callable[..., Any]) -> Callable[..., Any]:
    """业务异常转为 click 错误输出，退出码 1"""
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except AurForgeError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e
    return wrapper


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path",
    default=lambda: os.getenv("AURFORGE_CONFIG", DEFAULT_CONFIG_PATH),
    help="配置文件路径",
)
def main(config_path: str) -> None:
    """aurforge - AUR 包解析与构建工具"""
    setup_logging(
        level=os.getenv("AURFORGE_LOG_LEVEL", "INFO"),
        json_output=os.getenv("AURFORGE_LOG_JSON", "") == "1",
    )
    try:
        init_config(config_path)
    except AurForgeError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e


# 注册各领域子命令
from aurforge.cli.cmd_install import register as _reg_install  # noqa: E402
from aurforge.cli.cmd_search import register as _reg_search  # noqa: E402
from aurforge.cli.cmd_cache import register as _reg_cache  # noqa: E402

_reg_install(main)
_reg_search(main)
_reg_cache(main)
