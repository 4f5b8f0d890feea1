"""
API 数据模型

定义 API 相关的数据类，包括搜索结果、项目信息、版本信息等。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict


class ProjectType(Enum):
    """项目类型"""

    MOD = "mod"
    MODPACK = "modpack"
    RESOURCE_PACK = "resourcepack"
    SHADER = "shader"
    DATAPACK = "datapack"
    PLUGIN = "plugin"


@dataclass
class SearchHit:
    """搜索结果中的单个项目"""

    project_id: str
    slug: str
    title: str
    description: str = ""
    downloads: int = 0

    @classmethod
    def from_modrinth(cls, data: dict) -> "SearchHit":
        return cls(
            project_id=data.get("project_id", ""),
            slug=data.get("slug", ""),
            title=data.get("title", ""),
            description=data.get("description") or "",
            downloads=int(data.get("downloads", 0) or 0),
        )


@dataclass
class SearchResult:
    """搜索结果"""

    hits: List[SearchHit] = field(default_factory=list)
    total_hits: int = 0

    @classmethod
    def from_modrinth(cls, data: dict) -> "SearchResult":
        hits = [SearchHit.from_modrinth(hit) for hit in data.get("hits", [])]
        return cls(hits=hits, total_hits=int(data.get("total_hits", len(hits))))


@dataclass
class ProjectInfo:
    """
    模组项目信息。
    """

    id: str
    slug: str
    title: str
    description: str
    project_type: str

    @classmethod
    def from_modrinth(cls, data: dict) -> "ProjectInfo":
        return cls(
            id=data["id"],
            slug=data["slug"],
            title=data.get("title", data["slug"]),
            description=data.get("description") or "",
            project_type=data.get("project_type", ProjectType.MOD.value),
        )


@dataclass
class FileInfo:
    """文件信息"""

    url: str
    filename: str
    size: int
    primary: bool = False
    hashes: Optional[Dict[str, str]] = None


@dataclass
class DependencyInfo:
    """依赖信息"""

    project_id: Optional[str]
    dependency_type: str  # required, optional, incompatible, embedded

    @property
    def required(self) -> bool:
        return self.dependency_type == "required"


@dataclass
class VersionInfo:
    """
    模组版本信息。
    """

    id: str
    name: str
    version: str
    loaders: List[str]
    game_versions: List[str]
    files: List[FileInfo]
    dependencies: List[DependencyInfo]

    @classmethod
    def from_modrinth(cls, data: dict) -> "VersionInfo":
        """
        将 Modrinth API 返回的版本信息转换为 VersionInfo 对象。
        """
        files = [
            FileInfo(
                url=file["url"],
                filename=file["filename"],
                size=file.get("size", 0),
                primary=bool(file.get("primary", False)),
                hashes=file.get("hashes"),
            )
            for file in data.get("files", [])
        ]

        dependencies = [
            DependencyInfo(
                project_id=dep.get("project_id"),
                dependency_type=dep.get("dependency_type", "required"),
            )
            for dep in data.get("dependencies", [])
        ]

        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            version=data.get("version_number", ""),
            files=files,
            loaders=list(data.get("loaders", [])),
            game_versions=data.get("game_versions", []),
            dependencies=dependencies,
        )

    def primary_file(self) -> Optional[FileInfo]:
        """获取主文件：优先 primary 标记的文件，否则第一个文件"""
        if not self.files:
            return None

        for file in self.files:
            if file.primary:
                return file

        return self.files[0]

    def required_dependencies(self) -> List[DependencyInfo]:
        return [dep for dep in self.dependencies if dep.required and dep.project_id]
