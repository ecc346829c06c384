"""AUR RPC 客户端

职责:
- 批量按名查询元数据（一次请求覆盖全部名字）
- 全文搜索
- 按 base 名获取构建脚本

所有调用同步阻塞；网络错误与服务端 error 载荷统一抛 RpcError，
获取构建脚本失败则返回 None（由调用方视为未找到）。
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from aurforge import __version__
from aurforge.core.exceptions import RpcError
from aurforge.utils.net import build_query_url, validate_url_scheme

logger = logging.getLogger(__name__)

RPC_VERSION = "5"
# 单次 info 请求的名字上限，避免 URL 过长
MAX_INFO_ARGS = 150


@dataclass
class AurInfo:
    """一条远程元数据记录"""

    name: str
    base_name: str
    version: str
    votes: int = 0
    popularity: float = 0.0
    provides: list[str] = field(default_factory=list)
    depends: list[str] = field(default_factory=list)
    make_depends: list[str] = field(default_factory=list)
    description: str = ""
    url: str = ""
    maintainer: str | None = None
    out_of_date: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> AurInfo:
        name = data.get("Name", "")
        return cls(
            name=name,
            base_name=data.get("PackageBase") or name,
            version=data.get("Version", ""),
            votes=int(data.get("NumVotes") or 0),
            popularity=float(data.get("Popularity") or 0.0),
            provides=list(data.get("Provides") or []),
            depends=list(data.get("Depends") or []),
            make_depends=list(data.get("MakeDepends") or []),
            description=data.get("Description") or "",
            url=data.get("URL") or "",
            maintainer=data.get("Maintainer"),
            out_of_date=data.get("OutOfDate"),
        )


class AurRpcClient:
    """基于 urllib 的 RPC v5 客户端"""

    def __init__(self, rpc_url: str, *, aur_url: str, timeout: int = 30) -> None:
        validate_url_scheme(rpc_url, context="rpc_url")
        validate_url_scheme(aur_url, context="aur_url")
        self.rpc_url = rpc_url.rstrip("/")
        self.aur_url = aur_url.rstrip("/")
        self.timeout = timeout

    def info(self, names: list[str]) -> list[AurInfo]:
        """批量查询，返回服务端认识的记录（顺序同响应）"""
        results: list[AurInfo] = []
        for i in range(0, len(names), MAX_INFO_ARGS):
            chunk = names[i:i + MAX_INFO_ARGS]
            params = [("v", RPC_VERSION), ("type", "info")]
            params += [("arg[]", n) for n in chunk]
            results += [AurInfo.from_json(r) for r in self._call(params)]
        return results

    def search(self, term: str) -> list[AurInfo]:
        """按名称与描述搜索"""
        params = [("v", RPC_VERSION), ("type", "search"), ("arg", term)]
        return [AurInfo.from_json(r) for r in self._call(params)]

    def pkgbuild(self, base_name: str) -> str | None:
        """获取构建脚本文本，任何失败都返回 None"""
        url = f"{self.aur_url}/cgit/aur.git/plain/PKGBUILD?h={quote(base_name)}"
        try:
            with urllib.request.urlopen(self._request(url), timeout=self.timeout) as resp:  # nosec B310
                text = resp.read().decode("utf-8", errors="replace")
        except (urllib.error.HTTPError, urllib.error.URLError, OSError) as e:
            logger.warning("构建脚本获取失败 %s: %s", base_name, e)
            return None
        # cgit 对不存在的分支返回 200 + 错误页
        if not text.strip() or text.lstrip().startswith("<!DOCTYPE"):
            logger.warning("构建脚本不存在: %s", base_name)
            return None
        return text

    # ---- 内部 ----

    def _request(self, url: str) -> urllib.request.Request:
        return urllib.request.Request(
            url, headers={"User-Agent": f"aurforge/{__version__}"},
        )

    def _call(self, params: list[tuple[str, str]]) -> list[dict[str, Any]]:
        url = build_query_url(self.rpc_url, params)
        logger.debug("RPC: %s", url)
        try:
            with urllib.request.urlopen(self._request(url), timeout=self.timeout) as resp:  # nosec B310
                payload = json.loads(resp.read().decode("utf-8"))
        except (urllib.error.HTTPError, urllib.error.URLError, OSError) as e:
            raise RpcError(f"RPC 请求失败: {e}") from e
        except ValueError as e:
            raise RpcError(f"RPC 响应不是合法 JSON: {e}") from e
        return parse_rpc_payload(payload)


def parse_rpc_payload(payload: Any) -> list[dict[str, Any]]:
    """校验 RPC 响应并取出 results"""
    if not isinstance(payload, dict):
        raise RpcError("RPC 响应格式错误")
    if payload.get("type") == "error":
        raise RpcError(f"RPC 错误: {payload.get('error', '未知')}")
    results = payload.get("results") or []
    if not isinstance(results, list):
        raise RpcError("RPC results 不是列表")
    return [r for r in results if isinstance(r, dict)]
