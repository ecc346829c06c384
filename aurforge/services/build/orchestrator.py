"""构建编排器 — 将 Buildable 变为缓存中的产物

每个 Buildable 顺序走完状态机:
  1. SelectBuildDirectory  VCS 包用固定目录，其余用一次性目录
  2. EnsureDirectory       以固定权限创建（失败为致命错误）
  3. AcquireSource         已有检出则复用（VCS 包 pull），否则 clone
  4. Hotedit               可选，逐个询问是否编辑
  5. Build                 makepkg，或 --allsource 只生成源码包
  6. MoveToCache / MoveToSourceStore  cp --reflink=auto 到目标目录
  7. Cleanup               可选，无论成败都删除构建目录
  8. Done / Failed

整批策略: 逐个构建，失败时提示并询问是否继续；全部失败则中止。
状态机内部的失败一律以 Failure 值返回，不向外抛底层异常。
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from aurforge.core.exceptions import AurForgeError, BuildAbortedError
from aurforge.core.models import AllSourced, Built, Failure, PackagePath, is_devel_pkg
from aurforge.services.aur.git import clone, pull
from aurforge.services.build.hotedit import hotedit
from aurforge.services.build.makepkg import makepkg, makepkg_source
from aurforge.services.build.models import BuildOutcome
from aurforge.services.build.workdir import (
    create_writable_if_missing,
    parent_dir,
    select_build_dir,
)
from aurforge.utils.shell import chown, lookup_user

if TYPE_CHECKING:
    from aurforge.core.models import Buildable, BuildResult
    from aurforge.services.context import Context
    from aurforge.utils.shell import BuildUser

logger = logging.getLogger(__name__)


class _Fatal(Exception):
    """状态机内部: 整批无法继续"""

    def __init__(self, failure: Failure) -> None:
        super().__init__(failure.message or "")
        self.failure = failure


class BuildOrchestrator:
    """构建状态机 + 整批策略"""

    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx

    # ---- 整批 ----

    def build_packages(self, buildables: list[Buildable]) -> list[PackagePath]:
        """顺序构建，返回全部产物路径

        Raises:
            BuildAbortedError: 致命错误、用户拒绝继续，或没有任何一个构建成功
        """
        outcomes = self.build_all(buildables)
        paths: list[PackagePath] = []
        for p in (p for o in outcomes for p in o.paths):
            if p not in paths:
                paths.append(p)
        return paths

    def build_all(self, buildables: list[Buildable]) -> list[BuildOutcome]:
        """顺序构建，返回成功的结果（可能是部分成功）

        同一 base 的拆分包只构建一次，按首次出现的顺序。
        """
        succeeded: list[BuildOutcome] = []
        for b in unique_bases(buildables):
            outcome = self.build_one(b)
            if outcome.success:
                succeeded.append(outcome)
                continue
            failure = outcome.failure or Failure.silent()
            if outcome.fatal:
                raise BuildAbortedError(failure.message or "构建中止", failure)
            self._report(outcome.name, failure)
            if not self.ctx.prompter.confirm("构建失败。是否继续？", default=True):
                raise BuildAbortedError("构建失败，用户取消", failure)
        if not succeeded:
            raise BuildAbortedError("没有任何包构建成功")
        return succeeded

    # ---- 单个 ----

    def build_one(self, b: Buildable) -> BuildOutcome:
        """单个 Buildable 的完整状态机，不抛底层异常"""
        logger.info("开始构建", extra={"package": b.name})
        outcome = BuildOutcome(name=b.name)
        try:
            user = self._build_user()
            outcome.build_dir = self._ensure_dirs(b)
            try:
                result = self._acquire_and_build(b, outcome.build_dir, user)
            finally:
                self._cleanup(outcome.build_dir)
        except _Fatal as e:
            outcome.failure = e.failure
            outcome.fatal = True
            return outcome
        except (OSError, subprocess.SubprocessError, AurForgeError) as e:
            logger.debug("构建异常", exc_info=True, extra={"package": b.name})
            result = Failure.msg(f"{b.name}: {e}")

        if isinstance(result, Failure):
            outcome.failure = result
        else:
            outcome.result = result
        return outcome

    def _build_user(self) -> BuildUser:
        name = self.ctx.config.build_user or os.environ.get("SUDO_USER", "")
        if not name:
            raise _Fatal(Failure.msg("未配置构建用户（build_user），且无法从 SUDO_USER 推断"))
        user = lookup_user(name)
        if user is None:
            raise _Fatal(Failure.msg(f"构建用户不存在: {name}"))
        return user

    def _ensure_dirs(self, b: Buildable) -> Path:
        parent = parent_dir(self.ctx, b)
        if not create_writable_if_missing(self.ctx, parent):
            raise _Fatal(Failure.msg(f"无法创建构建目录: {parent}"))
        build_dir = select_build_dir(self.ctx, b)
        if not create_writable_if_missing(self.ctx, build_dir):
            raise _Fatal(Failure.msg(f"无法创建构建目录: {build_dir}"))
        logger.debug("构建目录: %s", build_dir)
        return build_dir

    def _acquire_and_build(
        self, b: Buildable, build_dir: Path, user: BuildUser,
    ) -> BuildResult | Failure:
        src = self._acquire_source(b, build_dir, user)
        if isinstance(src, Failure):
            return src
        if self.ctx.config.hotedit:
            hotedit(self.ctx, b, src)
        if self.ctx.config.allsource:
            return self._build_source(src, user)
        return self._build_binary(src, user)

    def _acquire_source(self, b: Buildable, build_dir: Path, user: BuildUser) -> Path | Failure:
        src = build_dir / b.base_name
        if src.is_dir():
            logger.debug("复用已有检出: %s", src)
            if is_devel_pkg(b.name):
                failure = pull(self.ctx, src, user)
                if failure is not None:
                    return failure
            return src
        chown(self.ctx.executor, user.name, str(build_dir))
        cloned = clone(self.ctx, b, build_dir)
        if cloned is None:
            return Failure.msg(f"源码获取失败: {b.base_name}")
        chown(self.ctx.executor, user.name, str(cloned), recursive=True)
        return cloned

    def _build_binary(self, src: Path, user: BuildUser) -> BuildResult | Failure:
        built = makepkg(self.ctx, src, user)
        if isinstance(built, Failure):
            return built
        dest = Path(self.ctx.config.cache_dir)
        moved: list[PackagePath] = []
        for p in built:
            copied = self._copy(p, dest)
            if isinstance(copied, Failure):
                return copied
            moved.append(PackagePath(str(copied)))
        return Built(tuple(moved))

    def _build_source(self, src: Path, user: BuildUser) -> BuildResult | Failure:
        archives = makepkg_source(self.ctx, src, user)
        if isinstance(archives, Failure):
            return archives
        dest = Path(self.ctx.config.allsource_dir)
        for p in archives:
            copied = self._copy(p, dest)
            if isinstance(copied, Failure):
                return copied
        return AllSourced()

    def _copy(self, src: Path, dest_dir: Path) -> Path | Failure:
        """优先 reflink 复制，目标目录不存在时创建"""
        dest_dir.mkdir(parents=True, exist_ok=True)
        target = dest_dir / src.name
        r = self.ctx.executor.execute(["cp", "--reflink=auto", str(src), str(target)])
        if not r.success:
            return Failure.msg(f"复制产物失败: {src.name} -> {dest_dir}")
        logger.debug("已复制: %s", target)
        return target

    def _cleanup(self, build_dir: Path) -> None:
        if not self.ctx.config.delete_build_dir:
            return
        logger.debug("删除构建目录: %s", build_dir)
        shutil.rmtree(build_dir, ignore_errors=True)

    def _report(self, name: str, failure: Failure) -> None:
        if failure.is_silent:
            return
        logger.error("%s", failure.message, extra={"package": name})


def unique_bases(buildables: list[Buildable]) -> list[Buildable]:
    """按 base_name 去重，保留首次出现的 Buildable"""
    seen: set[str] = set()
    result: list[Buildable] = []
    for b in buildables:
        if b.base_name in seen:
            logger.debug("与同 base 的包一起构建: %s", b.base_name, extra={"package": b.name})
            continue
        seen.add(b.base_name)
        result.append(b)
    return result
