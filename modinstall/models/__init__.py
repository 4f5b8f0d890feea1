"""
ModInstall 数据模型包

包含配置模型、API 模型和本地文件模型定义。
"""

from modinstall.models.config import (
    ModLoader,
    ProjectConfig,
)
from modinstall.models.api import (
    ProjectType,
    SearchHit,
    SearchResult,
    ProjectInfo,
    FileInfo,
    DependencyInfo,
    VersionInfo,
)
from modinstall.models.artifact import InstalledArtifact

__all__ = [
    # 配置模型
    "ModLoader",
    "ProjectConfig",
    # API 模型
    "ProjectType",
    "SearchHit",
    "SearchResult",
    "ProjectInfo",
    "FileInfo",
    "DependencyInfo",
    "VersionInfo",
    # 本地文件模型
    "InstalledArtifact",
]
