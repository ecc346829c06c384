"""CLI — AUR 搜索、详情、构建脚本"""

from __future__ import annotations

import click

from aurforge.cli import _context, handle_errors
from aurforge.services.aur.backend import aur_info, aur_search, pkg_url


def register(group: click.Group) -> None:
    group.add_command(search)
    group.add_command(info)
    group.add_command(pkgbuild)


@click.command()
@click.argument("term")
@click.option("--abc", "alphabetical", is_flag=True, help="按名称排序（默认按票数）")
@click.option("--limit", type=int, default=0, help="最多显示条数，0 为不限")
@handle_errors
def search(term: str, alphabetical: bool, limit: int) -> None:
    """搜索 AUR"""
    ctx = _context(sort_alphabetically=alphabetical or None)
    results = aur_search(ctx, term)
    if limit > 0:
        results = results[:limit]
    if not results:
        click.echo("没有匹配的包。")
        return
    for r in results:
        flag = click.style(" [过期]", fg="red") if r.out_of_date else ""
        click.echo(f"aur/{r.name} {r.version} ({r.votes}){flag}")
        if r.description:
            click.echo(f"    {r.description}")


@click.command()
@click.argument("names", nargs=-1, required=True)
@handle_errors
def info(names: tuple[str, ...]) -> None:
    """显示包详情"""
    ctx = _context()
    results = aur_info(ctx, list(names))
    if not results:
        click.echo("没有找到任何包。")
        return
    for r in results:
        click.echo(f"名称      : {r.name}")
        click.echo(f"基础包    : {r.base_name}")
        click.echo(f"版本      : {r.version}")
        click.echo(f"AUR 地址  : {pkg_url(ctx, r.name)}")
        click.echo(f"维护者    : {r.maintainer or '-'}")
        click.echo(f"票数      : {r.votes}")
        click.echo(f"依赖      : {' '.join(r.depends) or '-'}")
        click.echo(f"构建依赖  : {' '.join(r.make_depends) or '-'}")
        click.echo(f"描述      : {r.description}")
        click.echo("")


@click.command()
@click.argument("name")
@handle_errors
def pkgbuild(name: str) -> None:
    """输出远程 PKGBUILD"""
    ctx = _context()
    text = ctx.rpc.pkgbuild(name)
    if text is None:
        raise click.ClickException(f"无法获取 PKGBUILD: {name}")
    click.echo(text, nl=False)
