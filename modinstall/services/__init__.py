"""
ModInstall 服务层

包含业务逻辑服务：API 客户端、依赖安装、孤立依赖分析。
"""

from modinstall.services.api_client import ModrinthClient
from modinstall.services.dependency_resolver import (
    DependencyResolver,
    InstallResult,
    InstallStatus,
)
from modinstall.services.orphan_analyzer import (
    OrphanAnalyzer,
    RemovalResult,
    is_likely_library,
)

__all__ = [
    "ModrinthClient",
    "DependencyResolver",
    "InstallResult",
    "InstallStatus",
    "OrphanAnalyzer",
    "RemovalResult",
    "is_likely_library",
]
