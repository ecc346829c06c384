"""集中配置管理

默认路径与宿主包管理器的惯例一致，可由 YAML 文件或 CLI 参数覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, replace
from typing import Any

from aurforge.core.exceptions import ConfigError, ValidationError
from aurforge.utils.net import validate_url_scheme
from aurforge.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/aurforge.yml"

# 旧版本创建的目录在首次使用时修正权限
DEFAULT_VCS_DIR = "/var/cache/aura/vcs"
DEFAULT_BUILD_DIR = "/tmp"


@dataclass
class Config:
    """全局配置"""

    # 目录
    cache_dir: str = "/var/cache/pacman/pkg"
    allsource_dir: str = "/var/cache/aura/src"
    vcs_dir: str = DEFAULT_VCS_DIR
    build_dir: str = DEFAULT_BUILD_DIR
    lock_file: str = "/var/lib/pacman/db.lck"

    # 构建
    build_user: str = ""
    hotedit: bool = False
    delete_build_dir: bool = False
    allsource: bool = False
    editor: str = ""
    makepkg_flags: list[str] = field(default_factory=list)
    pacman_flags: list[str] = field(default_factory=list)

    # 交互
    no_confirm: bool = False
    sort_alphabetically: bool = False

    # 远程
    rpc_url: str = "https://aur.archlinux.org/rpc"
    aur_url: str = "https://aur.archlinux.org"
    rpc_timeout: int = 30

    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_PATH) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置项无效 {path}: {e}") from e
        cfg.extra = extra
        cfg.validate()
        return cfg

    def validate(self) -> None:
        """校验 URL 与数值项"""
        for name in ("rpc_url", "aur_url"):
            try:
                validate_url_scheme(getattr(self, name), context=name)
            except ValidationError as e:
                raise ConfigError(str(e)) from e
        if not isinstance(self.rpc_timeout, int) or self.rpc_timeout <= 0:
            raise ConfigError(f"rpc_timeout 必须为正整数: {self.rpc_timeout!r}")
        for name in ("makepkg_flags", "pacman_flags"):
            if not isinstance(getattr(self, name), list):
                raise ConfigError(f"{name} 必须为列表")

    def override(self, **changes: Any) -> Config:
        """返回覆盖部分字段后的副本，值为 None 的项忽略"""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# 仅 CLI 入口使用；核心操作一律接收显式的 Context
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
