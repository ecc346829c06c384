"""构建编排数据模型"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from aurforge.core.models import BuildResult, Failure, PackagePath, built_paths


@dataclass
class BuildOutcome:
    """单个 Buildable 走完状态机后的结果

    result 与 failure 恰有一个非空。
    fatal 表示无法继续整批构建（构建目录无法创建、构建用户缺失）。
    """

    name: str
    result: BuildResult | None = None
    failure: Failure | None = None
    build_dir: Path | None = None
    fatal: bool = False

    @property
    def success(self) -> bool:
        return self.result is not None

    @property
    def paths(self) -> list[PackagePath]:
        if self.result is None:
            return []
        return list(built_paths(self.result) or ())
