"""运行上下文 — 显式传递配置与外部协作方句柄

所有需要配置或 IO 能力的操作都接收一个 Context，不读取全局状态。
测试时替换其中任意协作方（执行器、提示、编辑器、远程客户端、时钟）即可。

用法:
    ctx = Context.default(Config.from_file("/etc/aurforge.yml"))
    repo = AurRepository(ctx)
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from aurforge.core.config import Config
    from aurforge.core.protocols import FileEditor, MetadataClient, Prompter
    from aurforge.utils.shell import CommandExecutor


@dataclass
class Context:
    """配置 + 协作方句柄"""

    config: Config
    executor: CommandExecutor
    prompter: Prompter
    editor: FileEditor
    rpc: MetadataClient
    clock: Callable[[], float] = field(default=time.time)

    @classmethod
    def default(cls, config: Config) -> Context:
        """使用真实实现装配上下文"""
        from aurforge.services.aur.rpc import AurRpcClient
        from aurforge.utils.prompt import ClickEditor, ClickPrompter
        from aurforge.utils.shell import LocalExecutor

        return cls(
            config=config,
            executor=LocalExecutor(),
            prompter=ClickPrompter(no_confirm=config.no_confirm),
            editor=ClickEditor(config.editor),
            rpc=AurRpcClient(
                config.rpc_url, aur_url=config.aur_url, timeout=config.rpc_timeout,
            ),
        )

    def with_config(self, **changes: Any) -> Context:
        """返回覆盖部分配置后的副本"""
        return replace(self, config=self.config.override(**changes))
