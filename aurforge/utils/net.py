"""网络工具 — URL 协议校验与查询串拼接"""

from __future__ import annotations

from urllib.parse import urlencode, urlparse

from aurforge.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def build_query_url(base: str, params: list[tuple[str, str]]) -> str:
    """拼接带查询参数的 URL，保留重复键（如 arg[]）的顺序"""
    if not params:
        return base
    sep = "&" if "?" in base else "?"
    return f"{base}{sep}{urlencode(params)}"
