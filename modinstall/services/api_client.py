"""
API 客户端

Modrinth API 客户端：搜索、版本列表、项目详情。
"""

import asyncio
import json
from typing import List, Optional, Union

import aiohttp

from modinstall import __version__
from modinstall.models import ModLoader, ProjectInfo, ProjectType, SearchResult, VersionInfo
from modinstall.exceptions import APIError, APIRateLimitError, APIServerError


MODRINTH_BASE_URL = "https://api.modrinth.com/v2"
USER_AGENT = f"ModInstall/{__version__} (github.com/modinstall)"


class ModrinthClient:
    """Modrinth API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = MODRINTH_BASE_URL,
    ):
        self.base_url = base_url
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"}
            )
        return self._session

    async def _request(
        self, endpoint: str, params: Optional[dict] = None
    ) -> Optional[Union[dict, list]]:
        """发送 API 请求，404 返回 None"""
        url = f"{self.base_url}{endpoint}"
        try:
            async with self.session.get(url, params=params) as response:
                if response.status == 200:
                    return await response.json()
                elif response.status == 404:
                    return None
                elif response.status == 429:
                    raise APIRateLimitError(
                        "Modrinth API 请求过于频繁，请稍后再试", response=response
                    )
                elif response.status >= 500:
                    raise APIServerError(
                        f"Modrinth 服务器错误 (状态码: {response.status})",
                        response=response,
                    )
                else:
                    raise APIError(
                        f"API 请求失败 (状态码: {response.status})",
                        response=response,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise APIError(
                f"无法连接 Modrinth: {e}", context={"url": url, "error": str(e)}
            ) from e
        except ValueError as e:
            # 响应体不是合法的 JSON
            raise APIError(
                f"Modrinth 返回了无效的响应: {e}", context={"url": url, "error": str(e)}
            ) from e

    async def search(
        self,
        query: str,
        mod_loader: ModLoader,
        mc_version: str,
        project_type: ProjectType = ProjectType.MOD,
        limit: int = 5,
    ) -> SearchResult:
        """
        搜索项目

        Args:
            query: 搜索关键字
            mod_loader: 模组加载器
            mc_version: Minecraft 版本
            project_type: 项目类型
            limit: 返回结果数量

        Returns:
            SearchResult（按注册中心的相关度排序）
        """
        facets = [
            [f"categories:{mod_loader.value}"],
            [f"versions:{mc_version}"],
            [f"project_type:{project_type.value}"],
        ]
        params = {"query": query, "facets": json.dumps(facets), "limit": str(limit)}

        response = await self._request("/search", params)
        if not response:
            return SearchResult()
        return SearchResult.from_modrinth(response)

    async def get_project(self, idx: str) -> Optional[ProjectInfo]:
        """通过 slug 或 id 获取项目信息"""
        response = await self._request(f"/project/{idx}")
        if response is None:
            return None
        return ProjectInfo.from_modrinth(response)

    async def get_versions(
        self,
        idx: str,
        mod_loader: ModLoader,
        mc_version: str,
    ) -> List[VersionInfo]:
        """
        获取兼容的版本列表

        Returns:
            版本列表（保持注册中心返回的顺序，最新的在前）
        """
        params = {
            "loaders": json.dumps([mod_loader.value]),
            "game_versions": json.dumps([mc_version]),
        }

        response = await self._request(f"/project/{idx}/version", params)
        if not response:
            return []
        return [VersionInfo.from_modrinth(version) for version in response]

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
