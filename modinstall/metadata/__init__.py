"""
ModInstall 清单层

读取模组 jar 中的清单，提取模组 ID 与必需依赖。
"""

from modinstall.metadata.base import (
    PLATFORM_IDS,
    ManifestMetadata,
    ManifestSchema,
    is_platform_id,
)
from modinstall.metadata.fabric import FabricManifest
from modinstall.metadata.forge import ForgeManifest
from modinstall.metadata.extractor import MetadataExtractor, default_schemas

__all__ = [
    "PLATFORM_IDS",
    "ManifestMetadata",
    "ManifestSchema",
    "is_platform_id",
    "FabricManifest",
    "ForgeManifest",
    "MetadataExtractor",
    "default_schemas",
]
