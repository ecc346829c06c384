"""构建编排模块

拆分说明:
- workdir.py: 构建目录选择与创建
- hotedit.py: 构建前手动编辑
- makepkg.py: 构建工具调用
- models.py: 单个构建结果
- orchestrator.py: 状态机与整批策略
"""

from aurforge.services.build.models import BuildOutcome
from aurforge.services.build.orchestrator import BuildOrchestrator, unique_bases
from aurforge.services.build.workdir import create_writable_if_missing, select_build_dir

__all__ = [
    "BuildOrchestrator",
    "BuildOutcome",
    "create_writable_if_missing",
    "select_build_dir",
    "unique_bases",
]
