"""安装服务 — 名字 → 解析 → 切分 → 构建 → 安装

默认解析链: 本地同步数据库 → AUR。
同步仓库中的包交给 pacman -S，其余构建后以 pacman -U 安装。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from aurforge.core.exceptions import AurForgeError
from aurforge.core.models import PackagePath, partition_pkgs
from aurforge.core.repository import compose
from aurforge.services.aur.backend import AurRepository
from aurforge.services.build.orchestrator import BuildOrchestrator
from aurforge.services.pacman import PacmanRepository, install_pkg_files, install_repo_pkgs

if TYPE_CHECKING:
    from aurforge.core.protocols import Repository
    from aurforge.services.context import Context

logger = logging.getLogger(__name__)


@dataclass
class InstallReport:
    """一次安装的汇总"""

    not_found: list[str] = field(default_factory=list)
    repo_pkgs: list[str] = field(default_factory=list)
    built: list[PackagePath] = field(default_factory=list)


class InstallService:
    """安装流程协调"""

    def __init__(self, ctx: Context, repository: Repository | None = None) -> None:
        self.ctx = ctx
        self.repository = repository or compose(PacmanRepository(ctx), AurRepository(ctx))
        self.builder = BuildOrchestrator(ctx)

    def install(self, names: list[str], *, dry_run: bool = False) -> InstallReport:
        """解析并安装

        Raises:
            AurForgeError: 一个包都没找到
            BuildAbortedError: 构建阶段中止
        """
        result = self.repository.lookup(set(names))
        report = InstallReport(not_found=sorted(result.not_found))
        if report.not_found:
            logger.warning("以下包未找到: %s", ", ".join(report.not_found))
        if not result.found:
            raise AurForgeError("没有可安装的包")

        repo_names, buildables = partition_pkgs(result.found)
        for b in buildables:
            b.explicit = b.name in names
        report.repo_pkgs = repo_names
        if dry_run:
            logger.info("仓库包: %s", ", ".join(repo_names) or "-")
            logger.info("待构建: %s", ", ".join(b.name for b in buildables) or "-")
            return report

        install_repo_pkgs(self.ctx, repo_names)
        if buildables:
            report.built = self.builder.build_packages(buildables)
            install_pkg_files(self.ctx, report.built)
        return report
