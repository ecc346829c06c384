"""统一异常体系

所有业务异常继承 AurForgeError。构建状态机内部的预期失败（拉取失败、构建失败）
不走异常，而是以 Failure 值返回；这里只放会中止整个操作的错误。
CLI 层据此输出友好提示并以非零状态退出。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aurforge.core.models import Failure


class AurForgeError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(AurForgeError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(AurForgeError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ExecutionError(AurForgeError):
    """必须成功的外部命令返回非零"""

    code = "EXECUTION_ERROR"


class RpcError(AurForgeError):
    """远程元数据服务不可达或返回错误"""

    code = "RPC_ERROR"


class DatabaseLockError(AurForgeError):
    """等待包数据库锁时输入被关闭"""

    code = "DB_LOCKED"


class EditorError(AurForgeError):
    """外部编辑器启动失败或非零退出"""

    code = "EDITOR_ERROR"


class BuildAbortedError(AurForgeError):
    """整批构建中止：全部失败，或用户拒绝继续"""

    code = "BUILD_ABORTED"

    def __init__(self, message: str, failure: Failure | None = None) -> None:
        super().__init__(message)
        self.failure = failure
