"""终端交互 — 确认提示与外部编辑器

基于 click 实现 Prompter / FileEditor 协议。
no_confirm 模式下所有提示直接返回默认值。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from aurforge.core.exceptions import EditorError

logger = logging.getLogger(__name__)


class ClickPrompter:
    """click.confirm 实现的是/否确认"""

    def __init__(self, no_confirm: bool = False) -> None:
        self.no_confirm = no_confirm

    def confirm(self, message: str, *, default: bool = True) -> bool:
        if self.no_confirm:
            logger.info("%s [自动: %s]", message, "是" if default else "否")
            return default
        return click.confirm(message, default=default)


class ClickEditor:
    """click.edit 打开外部编辑器，原地修改文件"""

    def __init__(self, editor: str = "") -> None:
        self.editor = editor or os.environ.get("EDITOR", "") or "vi"

    def edit(self, path: Path) -> None:
        logger.debug("编辑: %s (%s)", path, self.editor)
        try:
            click.edit(filename=str(path), editor=self.editor)
        except click.ClickException as e:
            raise EditorError(f"编辑 {path.name} 失败: {e.format_message()}") from e
