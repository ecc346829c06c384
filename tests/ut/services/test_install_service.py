"""安装服务测试 - 解析 / 切分 / 安装顺序"""

from __future__ import annotations

import pytest

from aurforge.core.exceptions import AurForgeError
from aurforge.core.models import Buildable, Package, Pacman, package_from_buildable
from aurforge.core.repository import FunctionRepository, LookupResult
from aurforge.services.install_service import InstallService
from aurforge.utils.shell import CommandResult
from tests.fakes import fake_clone, fake_makepkg

SI_BASH = "Repository      : core\nName            : bash\nVersion         : 5.2-1\nDepends On      : None\n"


def _repo(found: list[Package], not_found: set[str] | None = None) -> FunctionRepository:
    return FunctionRepository(lambda names: LookupResult(set(not_found or ()), list(found)), "stub")


class TestInstall:

    def test_nothing_found(self, ctx) -> None:
        with pytest.raises(AurForgeError):
            InstallService(ctx, _repo([], {"ghost"})).install(["ghost"])

    def test_dry_run_resolves_only(self, ctx, executor) -> None:
        b = Buildable(name="yay", base_name="yay", pkgbuild="")
        repo = _repo([Package("bash", "5", install_type=Pacman("core")), package_from_buildable(b)], {"ghost"})
        report = InstallService(ctx, repo).install(["bash", "yay", "ghost"], dry_run=True)
        assert report.not_found == ["ghost"]
        assert report.repo_pkgs == ["bash"]
        assert report.built == []
        assert b.explicit is True
        assert executor.calls == []

    def test_repo_only(self, ctx, executor) -> None:
        repo = _repo([Package("bash", "5", install_type=Pacman("core"))])
        InstallService(ctx, repo).install(["bash"])
        assert executor.commands("pacman") == [["pacman", "-S", "bash"]]

    def test_default_chain_end_to_end(self, ctx, executor, rpc, build_user) -> None:
        """pacman 找到 bash，AUR 找到 yay: 先 -S 再构建后 -U"""
        executor.on(["pacman", "-Si"], lambda args, cwd: _si(args))
        executor.on(["git", "clone"], fake_clone)
        build, listing = fake_makepkg()
        executor.on(["makepkg"], build)
        executor.on(["makepkg", "--packagelist"], listing)
        rpc.add("yay")

        report = InstallService(ctx).install(["bash", "yay"])

        assert report.repo_pkgs == ["bash"]
        assert [p.filename for p in report.built] == ["yay-1.0-1-x86_64.pkg.tar.zst"]
        assert rpc.info_calls == [["yay"]]
        pacman = [c for c in executor.commands("pacman") if c[1] != "-Si"]
        assert pacman == [
            ["pacman", "-S", "bash"],
            ["pacman", "-U", str(report.built[0])],
        ]


def _si(args: list[str]) -> CommandResult:
    out = SI_BASH if "bash" in args else ""
    return CommandResult(0 if out else 1, out, "")


class TestSplitPackages:

    def test_siblings_installed_once(self, ctx, executor, rpc, build_user) -> None:
        """请求同一 base 的两个兄弟包: 克隆、构建一次，-U 不含重复路径"""
        executor.on(["git", "clone"], fake_clone)
        build, listing = fake_makepkg(split={"split": ["split-a", "split-b"]})
        executor.on(["makepkg"], build)
        executor.on(["makepkg", "--packagelist"], listing)
        rpc.add("split-a", base="split")
        rpc.add("split-b", base="split")

        report = InstallService(ctx).install(["split-a", "split-b"])

        assert [p.filename for p in report.built] == [
            "split-a-1.0-1-x86_64.pkg.tar.zst",
            "split-b-1.0-1-x86_64.pkg.tar.zst",
        ]
        assert len([c for c in executor.commands("git") if c[1] == "clone"]) == 1
        assert len([c for c in executor.commands("makepkg") if c[1] == "-f"]) == 1
        [install] = [c for c in executor.commands("pacman") if c[1] == "-U"]
        assert install[2:] == [str(p) for p in report.built]
