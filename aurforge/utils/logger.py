"""aurforge 日志配置

终端输出沿用 makepkg 的提示风格（"==>" 为步骤，"  ->" 为细节），
JSON 输出用于 CI 或包装脚本消费。
构建相关的记录通过 extra={"package": name} 携带包名。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

_MARKERS = {
    logging.DEBUG: "  ->",
    logging.INFO: "==>",
    logging.WARNING: "==> 警告:",
    logging.ERROR: "==> 错误:",
    logging.CRITICAL: "==> 错误:",
}


class ConsoleFormatter(logging.Formatter):
    """makepkg 风格的单行输出

    verbose 时附带 logger 名，便于定位状态机中的具体步骤。
    """

    def __init__(self, verbose: bool = False) -> None:
        super().__init__()
        self.verbose = verbose

    def format(self, record: logging.LogRecord) -> str:
        marker = _MARKERS.get(record.levelno, "==>")
        pkg = getattr(record, "package", None)
        text = f"{marker} [{pkg}] {record.getMessage()}" if pkg else f"{marker} {record.getMessage()}"
        if self.verbose:
            text = f"{text}  ({record.name})"
        if record.exc_info and record.exc_info[1]:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


class JSONFormatter(logging.Formatter):
    """每条日志输出为一行 JSON

    字段: timestamp, level, logger, message, module, function, line；
    记录带包名时追加 package，有异常时追加 exception。
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        pkg = getattr(record, "package", None)
        if pkg:
            entry["package"] = pkg
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器，输出到 stderr

    level 无法识别时退回 INFO；DEBUG 级别下终端输出附带 logger 名。
    重复调用不会重复输出。
    """
    reset_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    stream = logging.StreamHandler(sys.stderr)
    if json_output:
        stream.setFormatter(JSONFormatter())
    else:
        stream.setFormatter(ConsoleFormatter(verbose=root.level <= logging.DEBUG))
    root.addHandler(stream)


def reset_logging() -> None:
    """移除根日志器上的全部 handlers"""
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
