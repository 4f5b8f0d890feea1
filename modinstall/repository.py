"""
本地模组目录

所有受管理的文件都放在同一个扁平目录下，文件名是唯一标识。
"""

import os
from pathlib import Path
from typing import List, Union

from loguru import logger

from modinstall.models import InstalledArtifact


class ModsFolder:
    """本地模组目录"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def ensure(self) -> Path:
        """确保目录存在"""
        os.makedirs(self.path, exist_ok=True)
        return self.path

    def exists(self) -> bool:
        return self.path.is_dir()

    def path_of(self, filename: str) -> Path:
        return self.path / filename

    def contains(self, filename: str) -> bool:
        """检查文件是否已存在"""
        return self.path_of(filename).exists()

    def list_files(self) -> List[InstalledArtifact]:
        """列出目录中的全部文件（按文件名排序）"""
        if not self.exists():
            return []
        return [
            InstalledArtifact.from_path(entry)
            for entry in sorted(self.path.iterdir())
            if entry.is_file()
        ]

    def list_jars(self) -> List[InstalledArtifact]:
        """列出目录中的 jar 文件"""
        return [artifact for artifact in self.list_files() if artifact.is_jar]

    def find(self, fragment: str) -> List[InstalledArtifact]:
        """按文件名查找（不区分大小写的子串匹配）"""
        needle = fragment.lower()
        return [
            artifact
            for artifact in self.list_files()
            if needle in artifact.filename.lower()
        ]

    def delete(self, artifact: InstalledArtifact):
        logger.debug(f"[删除] {artifact.path}")
        os.remove(artifact.path)
