"""AUR 远程后端模块

拆分说明:
- rpc.py: 元数据 RPC 客户端与构建脚本获取
- backend.py: Repository 实现、Buildable 转换、搜索排序
- git.py: 源码 clone / pull
"""

from aurforge.services.aur.backend import (
    AurRepository,
    aur_info,
    aur_search,
    is_aur_package,
    pkg_url,
    sort_aur_info,
)
from aurforge.services.aur.git import clone, pull
from aurforge.services.aur.rpc import AurInfo, AurRpcClient

__all__ = [
    "AurInfo",
    "AurRpcClient",
    "AurRepository",
    "aur_info",
    "aur_search",
    "clone",
    "is_aur_package",
    "pkg_url",
    "pull",
    "sort_aur_info",
]
