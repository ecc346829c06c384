"""CLI 测试 - CliRunner 驱动，协作方替换为测试替身"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml
from click.testing import CliRunner

from aurforge import __version__
from aurforge.cli import main
from aurforge.core import config as config_mod
from aurforge.core.config import get_config
from aurforge.services.context import Context
from aurforge.utils.logger import reset_logging
from tests.fakes import FakeExecutor, StubEditor, StubPrompter, StubRpc


@pytest.fixture()
def rpc() -> StubRpc:
    return StubRpc()


@pytest.fixture()
def cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, rpc: StubRpc):
    """返回 invoke(args) -> Result，配置指向 tmp_path"""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    cfg = tmp_path / "aurforge.yml"
    cfg.write_text(yaml.dump({"cache_dir": str(cache_dir), "build_user": "builder"}))

    def fake_context(**overrides: Any) -> Context:
        return Context(
            config=get_config().override(**overrides), executor=FakeExecutor(),
            prompter=StubPrompter(), editor=StubEditor(), rpc=rpc,
        )

    for mod in ("aurforge.cli.cmd_install", "aurforge.cli.cmd_search"):
        monkeypatch.setattr(f"{mod}._context", fake_context)
    monkeypatch.setattr(config_mod, "_current", None)

    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(main, ["-c", str(cfg), *args])

    yield invoke
    reset_logging()


class TestMain:

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_bad_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.yml"
        cfg.write_text(yaml.dump({"rpc_url": "ftp://nope"}))
        result = CliRunner().invoke(main, ["-c", str(cfg), "cache", "search", "x"])
        reset_logging()
        assert result.exit_code == 1
        assert "CONFIG_ERROR" in result.output


class TestSearchCommands:

    def test_search_by_votes(self, cli, rpc: StubRpc) -> None:
        rpc.search_results = [
            rpc.add("low", votes=1), rpc.add("high", votes=50),
        ]
        result = cli("search", "x")
        assert result.exit_code == 0
        assert result.output.index("aur/high") < result.output.index("aur/low")

    def test_search_limit(self, cli, rpc: StubRpc) -> None:
        rpc.search_results = [rpc.add("a", votes=2), rpc.add("b", votes=1)]
        result = cli("search", "x", "--limit", "1")
        assert "aur/a" in result.output
        assert "aur/b" not in result.output

    def test_info(self, cli, rpc: StubRpc) -> None:
        rpc.add("yay", version="12.0-1", depends=["git"])
        result = cli("info", "yay")
        assert result.exit_code == 0
        assert "12.0-1" in result.output
        assert "https://aur.archlinux.org/packages/yay" in result.output

    def test_pkgbuild_missing(self, cli) -> None:
        result = cli("pkgbuild", "ghost")
        assert result.exit_code == 1


class TestCacheCommands:

    def _fill(self, tmp_path: Path) -> None:
        for name in ("foo-1.0-1-any.pkg.tar.zst", "foo-1.10-1-any.pkg.tar.zst", "bar-2-1-any.pkg.tar.zst"):
            (tmp_path / "cache" / name).write_bytes(b"")

    def test_has(self, cli, tmp_path: Path) -> None:
        self._fill(tmp_path)
        assert cli("cache", "has", "foo", "bar").exit_code == 0
        assert cli("cache", "has", "foo", "ghost").exit_code == 1

    def test_versions_ordered(self, cli, tmp_path: Path) -> None:
        self._fill(tmp_path)
        out = cli("cache", "versions", "foo").output
        assert out.index("foo-1.0-1") < out.index("foo-1.10-1")

    def test_search(self, cli, tmp_path: Path) -> None:
        self._fill(tmp_path)
        out = cli("cache", "search", "bar").output
        assert str(tmp_path / "cache" / "bar-2-1-any.pkg.tar.zst") in out


class TestInstallCommand:

    def test_dry_run(self, cli, rpc: StubRpc) -> None:
        rpc.add("yay")
        result = cli("install", "--dry-run", "yay", "ghost")
        assert result.exit_code == 0
        assert "未找到: ghost" in result.output

    def test_nothing_found(self, cli) -> None:
        result = cli("install", "ghost")
        assert result.exit_code == 1
        assert "没有可安装的包" in result.output
