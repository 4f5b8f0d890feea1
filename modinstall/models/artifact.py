"""
本地文件模型
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class InstalledArtifact:
    """模组目录中的一个文件，以文件名作为唯一标识"""

    path: Path
    size: int

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def is_jar(self) -> bool:
        return self.path.suffix.lower() == ".jar"

    @classmethod
    def from_path(cls, path: Path) -> "InstalledArtifact":
        return cls(path=path, size=path.stat().st_size)
