"""CLI — 安装命令"""

from __future__ import annotations

import click

from aurforge.cli import _context, handle_errors
from aurforge.services.install_service import InstallService


def register(group: click.Group) -> None:
    group.add_command(install)


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--hotedit", is_flag=True, help="构建前询问是否编辑 PKGBUILD 等文件")
@click.option("--allsource", is_flag=True, help="只生成源码包，不安装")
@click.option("--delete-build-dir", is_flag=True, help="构建后删除构建目录")
@click.option("--build-user", default=None, help="执行构建的非特权用户")
@click.option("--noconfirm", "no_confirm", is_flag=True, help="所有提示使用默认答案")
@click.option("--dry-run", is_flag=True, help="只解析，不构建也不安装")
@handle_errors
def install(
    names: tuple[str, ...], hotedit: bool, allsource: bool,
    delete_build_dir: bool, build_user: str | None,
    no_confirm: bool, dry_run: bool,
) -> None:
    """解析、构建并安装包"""
    # 未指定的开关沿用配置文件
    ctx = _context(
        hotedit=hotedit or None, allsource=allsource or None,
        delete_build_dir=delete_build_dir or None,
        build_user=build_user, no_confirm=no_confirm or None,
    )
    report = InstallService(ctx).install(list(names), dry_run=dry_run)

    if report.not_found:
        click.secho(f"未找到: {', '.join(report.not_found)}", fg="yellow")
    if report.repo_pkgs:
        click.echo(f"仓库包: {', '.join(report.repo_pkgs)}")
    for p in report.built:
        click.echo(f"已构建: {p}")
