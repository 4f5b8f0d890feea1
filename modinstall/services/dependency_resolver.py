"""
依赖安装服务

按名称搜索模组，先递归安装必需依赖，再下载模组本身。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Set

from loguru import logger

from modinstall.download import DownloadManager
from modinstall.exceptions import (
    IncompatibleVersionError,
    ModInstallError,
    ModNotFoundError,
    NoDownloadableFileError,
)
from modinstall.models import FileInfo, ProjectConfig, SearchHit, VersionInfo
from modinstall.repository import ModsFolder
from modinstall.services.api_client import ModrinthClient

SEARCH_LIMIT = 5


class InstallStatus(Enum):
    """安装结果状态"""

    INSTALLED = "installed"
    ALREADY_INSTALLED = "already_installed"


@dataclass
class InstallResult:
    """单个模组的安装结果（包含其依赖的安装结果）"""

    query: str
    status: InstallStatus
    project: SearchHit
    version: str
    filename: str
    dependencies: List["InstallResult"] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def installed(self) -> bool:
        return self.status == InstallStatus.INSTALLED

    def downloaded_files(self) -> List[str]:
        """本次实际下载的全部文件（依赖在前）"""
        files = []
        for dep in self.dependencies:
            files.extend(dep.downloaded_files())
        if self.installed:
            files.append(self.filename)
        return files


class DependencyResolver:
    """依赖解析与安装器"""

    def __init__(
        self,
        client: ModrinthClient,
        download_manager: DownloadManager,
        mods_folder: ModsFolder,
        config: ProjectConfig,
    ):
        self.client = client
        self.download_manager = download_manager
        self.mods_folder = mods_folder
        self.config = config

    async def install(self, name: str) -> InstallResult:
        """
        安装模组及其必需依赖

        已访问的项目 ID 会在整个递归过程中共享，循环依赖也能正常结束。

        Args:
            name: 模组名称或 slug

        Returns:
            InstallResult

        Raises:
            ModNotFoundError: 没有搜索结果
            IncompatibleVersionError: 没有兼容当前加载器/版本的模组版本
            NoDownloadableFileError: 版本中没有可下载的文件
            APIError / DownloadError: 网络错误
        """
        return await self._install(name, visited=set())

    async def _install(self, name: str, visited: Set[str]) -> InstallResult:
        loader = self.config.mod_loader
        mc_version = self.config.minecraft_version

        logger.info(f"-> 正在搜索 {name}...")
        result = await self.client.search(
            name, loader, mc_version, limit=SEARCH_LIMIT
        )
        if not result.hits:
            raise ModNotFoundError(
                f"在 {loader.value} {mc_version} 上找不到模组 '{name}'",
                context={"query": name},
            )

        # 相关度排序以注册中心为准
        hit = result.hits[0]
        visited.add(hit.project_id)
        logger.info(f"找到: {hit.title} ({hit.slug})")

        version = await self._pick_version(hit)
        file = self._pick_file(hit, version)

        if self.mods_folder.contains(file.filename):
            logger.warning(f"已安装: {file.filename}")
            return InstallResult(
                query=name,
                status=InstallStatus.ALREADY_INSTALLED,
                project=hit,
                version=version.version,
                filename=file.filename,
            )

        install_result = InstallResult(
            query=name,
            status=InstallStatus.INSTALLED,
            project=hit,
            version=version.version,
            filename=file.filename,
        )

        await self._install_dependencies(version, visited, install_result)

        logger.info(f"-> 正在下载 {file.filename} ({file.size} 字节)")
        await self.download_manager.download_file(
            url=file.url,
            filename=file.filename,
            download_dir=str(self.mods_folder.path),
            expected_size=file.size,
            expected_hashes=file.hashes,
        )
        logger.success(f"{hit.title} v{version.version} 安装完成!")
        return install_result

    async def _pick_version(self, hit: SearchHit) -> VersionInfo:
        versions = await self.client.get_versions(
            hit.project_id, self.config.mod_loader, self.config.minecraft_version
        )
        if not versions:
            raise IncompatibleVersionError(
                f"{hit.title} 没有适用于 {self.config.mod_loader.value} "
                f"{self.config.minecraft_version} 的版本",
                context={"project_id": hit.project_id},
            )
        # 第一个即最新版本
        return versions[0]

    @staticmethod
    def _pick_file(hit: SearchHit, version: VersionInfo) -> FileInfo:
        file = version.primary_file()
        if file is None:
            raise NoDownloadableFileError(
                f"{hit.title} {version.version} 没有可下载的文件",
                context={"project_id": hit.project_id, "version": version.version},
            )
        return file

    async def _install_dependencies(
        self,
        version: VersionInfo,
        visited: Set[str],
        install_result: InstallResult,
    ):
        """递归安装必需依赖，单个依赖失败只记录警告"""
        pending = [
            dep.project_id
            for dep in version.required_dependencies()
            if dep.project_id not in visited
        ]
        if not pending:
            return

        logger.info("正在安装必需依赖...")
        for project_id in pending:
            if project_id in visited:
                logger.debug(f"依赖 {project_id} 已处理，跳过")
                continue
            visited.add(project_id)

            try:
                child = await self._install_dependency(project_id, visited)
            except ModInstallError as e:
                message = f"无法安装依赖 {project_id}: {e}"
                logger.warning(message)
                install_result.warnings.append(message)
                continue

            install_result.dependencies.append(child)

        logger.info(f"继续安装 {install_result.project.title}...")

    async def _install_dependency(
        self, project_id: str, visited: Set[str]
    ) -> InstallResult:
        project = await self.client.get_project(project_id)
        if project is None:
            raise ModNotFoundError(
                f"找不到依赖项目 {project_id}", context={"project_id": project_id}
            )
        return await self._install(project.slug, visited)
