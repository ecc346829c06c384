"""构建脚本变量提取

只识别顶层的 key=value 与 key=(a b c) 赋值（数组可跨行），
函数体、条件分支等一律跳过。结果存入 Buildable.namespace，
供上层工具查看或覆盖变量而无需重新解析脚本文本。
"""

from __future__ import annotations

import logging
import re
import shlex

logger = logging.getLogger(__name__)

_ASSIGN_RE = re.compile(r"^(?P<key>[A-Za-z_][A-Za-z0-9_]*)=(?P<rest>.*)$")
# 数组结尾: ")" 后可跟行尾注释
_ARRAY_END_RE = re.compile(r"\)\s*(?:#[^\n]*)?\s*$")


def parse_namespace(text: str) -> dict[str, list[str]]:
    """提取顶层变量赋值，无法解析的行静默跳过"""
    ns: dict[str, list[str]] = {}
    lines = iter(text.splitlines())
    depth = 0
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        # 跳过函数体
        if depth or line.endswith("{"):
            depth = max(depth + line.count("{") - line.count("}"), 0)
            continue
        m = _ASSIGN_RE.match(line)
        if m is None:
            continue
        key, rest = m.group("key"), m.group("rest")
        if rest.startswith("("):
            body = rest[1:]
            while _ARRAY_END_RE.search(body) is None:
                nxt = next(lines, None)
                if nxt is None:
                    break
                body += "\n" + nxt
            values = _split(_ARRAY_END_RE.sub("", body))
        elif rest == "":
            values = [""]
        else:
            values = _split(rest)
            if values is not None:
                values = values[:1]
        if values is not None:
            ns[key] = values
    return ns


def _split(text: str) -> list[str] | None:
    try:
        return shlex.split(text, comments=True)
    except ValueError:
        logger.debug("无法解析的赋值: %s", text[:80])
        return None


def namespace_value(ns: dict[str, list[str]], key: str, default: str = "") -> str:
    """取标量变量值"""
    values = ns.get(key)
    return values[0] if values else default
