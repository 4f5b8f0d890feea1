"""
主协调器

整合所有服务层组件，实现各个命令的执行流程。
"""

from typing import Callable, List, Optional, Tuple

from loguru import logger

from modinstall.download import DownloadManager
from modinstall.exceptions import ModInstallError
from modinstall.models import InstalledArtifact, ProjectConfig, SearchResult
from modinstall.repository import ModsFolder
from modinstall.services import (
    DependencyResolver,
    InstallResult,
    ModrinthClient,
    OrphanAnalyzer,
    RemovalResult,
)

SEARCH_RESULT_LIMIT = 10


class ModInstallOrchestrator:
    """ModInstall 主协调器"""

    def __init__(
        self,
        config: ProjectConfig,
        client: Optional[ModrinthClient] = None,
        download_manager: Optional[DownloadManager] = None,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ):
        self.config = config
        self.mods_folder = ModsFolder(config.mods_dir)
        self.client = client or ModrinthClient()
        self.download_manager = download_manager or DownloadManager(
            progress_callback=progress_callback
        )
        self.resolver = DependencyResolver(
            self.client, self.download_manager, self.mods_folder, config
        )
        self.analyzer = OrphanAnalyzer(self.mods_folder)

        self._installed: List[InstallResult] = []
        self._failed: List[Tuple[str, ModInstallError]] = []

    async def install(self, names: List[str]) -> List[InstallResult]:
        """
        依次安装多个模组

        单个模组安装失败会被记录，不影响后续模组。
        """
        self.mods_folder.ensure()
        results = []
        for name in names:
            try:
                result = await self.resolver.install(name)
            except ModInstallError as e:
                logger.error(f"安装 '{name}' 失败: {e}")
                self._failed.append((name, e))
                continue
            results.append(result)
            self._installed.append(result)
        return results

    async def search(self, query: str, limit: int = SEARCH_RESULT_LIMIT) -> SearchResult:
        """搜索模组"""
        logger.info(f"-> 正在搜索 \"{query}\"...")
        return await self.client.search(
            query, self.config.mod_loader, self.config.minecraft_version, limit=limit
        )

    def list_installed(self) -> List[InstalledArtifact]:
        """列出已安装的模组"""
        return self.mods_folder.list_jars()

    def remove(self, name: str) -> RemovalResult:
        """删除模组及其孤立依赖"""
        return self.analyzer.remove(name)

    def clean(self, dry_run: bool = False) -> List[InstalledArtifact]:
        """清理未使用的依赖库"""
        return self.analyzer.clean(dry_run=dry_run)

    def info(self) -> dict:
        """获取项目信息"""
        info = self.config.to_dict()
        info["installed_mods"] = len(self.list_installed())
        return info

    def get_stats(self) -> dict:
        """获取统计信息"""
        downloaded = [f for result in self._installed for f in result.downloaded_files()]
        return {
            "downloaded": downloaded,
            "failed": [name for name, _ in self._failed],
            "bytes_downloaded": self.download_manager.get_stats().bytes_downloaded,
        }

    async def close(self):
        await self.client.close()
        await self.download_manager.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
