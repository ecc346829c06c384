"""共享 fixture"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from aurforge.core.config import Config
from aurforge.services.context import Context
from aurforge.utils.shell import BuildUser
from tests.fakes import Clock, FakeExecutor, StubEditor, StubPrompter, StubRpc


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    return Config(
        cache_dir=str(tmp_path / "cache"),
        allsource_dir=str(tmp_path / "src"),
        vcs_dir=str(tmp_path / "vcs"),
        build_dir=str(tmp_path / "build"),
        lock_file=str(tmp_path / "db.lck"),
        build_user="builder",
    )


@pytest.fixture()
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture()
def prompter() -> StubPrompter:
    return StubPrompter()


@pytest.fixture()
def editor() -> StubEditor:
    return StubEditor()


@pytest.fixture()
def rpc() -> StubRpc:
    return StubRpc()


@pytest.fixture()
def ctx(config: Config, executor: FakeExecutor, prompter: StubPrompter,
        editor: StubEditor, rpc: StubRpc) -> Context:
    return Context(
        config=config, executor=executor, prompter=prompter,
        editor=editor, rpc=rpc, clock=Clock(),
    )


@pytest.fixture()
def build_user(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> BuildUser:
    """构建用户固定为当前进程身份"""
    user = BuildUser(name="builder", uid=os.getuid(), gid=os.getgid(), home=str(tmp_path))
    monkeypatch.setattr(
        "aurforge.services.build.orchestrator.lookup_user",
        lambda name: user if name == "builder" else None,
    )
    return user
