"""YAML 配置文件读取

统一 encoding="utf-8"、大小上限和空值保护。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from aurforge.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# 配置文件大小上限 (1MB)
MAX_YAML_SIZE = 1024 * 1024


def load_yaml(path: str | Path) -> dict[str, Any]:
    """安全读取 YAML 文件

    返回:
        dict: 解析后的字典。文件不存在或为空时返回空字典

    异常:
        ConfigError: 文件过大、格式错误或顶层不是映射
        OSError: 读取失败
    """
    p = Path(path)
    if not p.exists():
        return {}

    size = p.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ConfigError(f"YAML 文件过大: {p} ({size} 字节), 上限 {MAX_YAML_SIZE} 字节")

    try:
        with open(p, encoding="utf-8") as f:
            result = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("解析 YAML 文件失败: %s, 错误: %s", p, e)
        raise ConfigError(f"YAML 格式错误: {p}: {e}") from e

    if result is None:
        return {}
    if not isinstance(result, dict):
        raise ConfigError(
            f"{p} 顶层必须是映射 (实际类型: {type(result).__name__})"
        )
    return result
