"""
元数据提取器

打开模组 jar，按顺序匹配已知的清单格式并返回模组 ID 与必需依赖。
"""

import zipfile
from pathlib import Path
from typing import Optional, Sequence, Union

from loguru import logger

from modinstall.metadata.base import ManifestMetadata, ManifestSchema
from modinstall.metadata.fabric import FabricManifest
from modinstall.metadata.forge import ForgeManifest


def default_schemas() -> Sequence[ManifestSchema]:
    """默认清单格式（先匹配到的格式生效）"""
    return (FabricManifest(), ForgeManifest())


class MetadataExtractor:
    """元数据提取器"""

    def __init__(self, schemas: Optional[Sequence[ManifestSchema]] = None):
        self.schemas = tuple(schemas) if schemas is not None else default_schemas()

    def extract(self, archive_path: Union[str, Path]) -> ManifestMetadata:
        """
        提取模组 ID 与必需依赖

        任何读取或解析失败都会返回 ManifestMetadata.unknown()，不会抛出异常。
        调用方需要能安全处理未知格式或第三方打包的文件。

        Args:
            archive_path: 模组文件路径

        Returns:
            ManifestMetadata
        """
        path = Path(archive_path)
        try:
            with zipfile.ZipFile(path) as archive:
                names = set(archive.namelist())
                for schema in self.schemas:
                    entry = schema.find_entry(names)
                    if entry is None:
                        continue

                    text = archive.read(entry).decode("utf-8-sig")
                    metadata = schema.parse(text)
                    logger.debug(
                        f"[清单] {path.name}: {schema.name} "
                        f"id={metadata.mod_id} 依赖={sorted(metadata.dependencies)}"
                    )
                    return metadata
        except Exception as e:
            logger.debug(f"[清单] 无法读取 {path.name}: {e}")
            return ManifestMetadata.unknown()

        logger.debug(f"[清单] {path.name} 中没有可识别的清单文件")
        return ManifestMetadata.unknown()
