"""CLI — 包缓存查询"""

from __future__ import annotations

import click

from aurforge.cli import handle_errors
from aurforge.core.cache import cache_contents, cache_matches, pkgs_in_cache
from aurforge.core.config import get_config


def register(group: click.Group) -> None:
    group.add_command(cache)


@click.group()
def cache() -> None:
    """包缓存查询"""


@cache.command(name="search")
@click.argument("substring")
@handle_errors
def cache_search(substring: str) -> None:
    """列出文件名包含子串的缓存文件"""
    for p in cache_matches(get_config(), substring):
        click.echo(str(p))


@cache.command(name="has")
@click.argument("names", nargs=-1, required=True)
@handle_errors
def cache_has(names: tuple[str, ...]) -> None:
    """检查包是否在缓存中，缺失时退出码为 1"""
    present = pkgs_in_cache(get_config(), set(names))
    for n in names:
        mark = click.style("有", fg="green") if n in present else click.style("无", fg="red")
        click.echo(f"  [{mark}] {n}")
    if len(present) < len(set(names)):
        raise SystemExit(1)


@cache.command(name="versions")
@click.argument("name")
@handle_errors
def cache_versions(name: str) -> None:
    """列出某个包在缓存中的全部版本"""
    paths = cache_contents(get_config().cache_dir).versions_of(name)
    if not paths:
        click.echo(f"缓存中没有: {name}")
        return
    for p in paths:
        click.echo(f"  {p.filename}")
