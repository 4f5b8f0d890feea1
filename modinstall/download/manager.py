"""
下载管理器

流式下载单个文件，实现进度报告、失败重试、哈希校验和下载统计。
"""

import asyncio
import os
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import aiofiles
import aiohttp
from loguru import logger

from modinstall.download.verifier import FileVerifier
from modinstall.exceptions import (
    DownloadError,
    DownloadNetworkError,
    DownloadChecksumError,
)

# 每下载 5% 报告一次进度
PROGRESS_STEP = 5
CHUNK_SIZE = 8192


@dataclass
class DownloadStats:
    """下载统计"""

    completed: int = 0
    failed: int = 0
    bytes_downloaded: int = 0


class DownloadManager:
    """下载管理器"""

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        session: Optional[aiohttp.ClientSession] = None,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ):
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.verifier = FileVerifier()
        self.stats = DownloadStats()
        self._session = session
        self._owned_session = session is None
        self._progress_callback = progress_callback

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def download_file(
        self,
        url: str,
        filename: str,
        download_dir: str,
        expected_size: int = 0,
        expected_hashes: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        下载单个文件

        Args:
            url: 下载地址
            filename: 保存的文件名
            download_dir: 保存目录
            expected_size: 注册中心给出的文件大小（响应没有 Content-Length 时使用）
            expected_hashes: 注册中心给出的哈希表（sha512 / sha1）

        Returns:
            下载后的文件路径

        Raises:
            DownloadError: 重试后仍然失败
        """
        file_path = os.path.join(download_dir, filename)

        # 确保目录存在
        os.makedirs(download_dir, exist_ok=True)

        for attempt in range(self.max_retries + 1):
            try:
                await self._stream_to_file(url, filename, file_path, expected_size)

                # 校验文件
                if not await self.verifier.verify(file_path, expected_hashes):
                    raise DownloadChecksumError(
                        f"哈希校验失败: {filename}",
                        context={"file": filename, "expected": expected_hashes},
                    )

                self.stats.completed += 1
                logger.debug(f"[完成] '{filename}' 下载完成")
                return file_path

            except Exception as e:
                # 清理不完整的文件
                if os.path.exists(file_path):
                    try:
                        os.remove(file_path)
                    except OSError:
                        pass

                if attempt < self.max_retries:
                    delay = self.retry_delay * (2**attempt)
                    logger.warning(
                        f"[重试] 下载 '{filename}' 失败 (第 {attempt + 1} 次): {e}. "
                        f"{delay:.1f}s 后重试..."
                    )
                    await asyncio.sleep(delay)
                else:
                    self.stats.failed += 1
                    logger.error(f"[错误] 下载 '{filename}' 最终失败: {e}")

                    if isinstance(e, DownloadError):
                        raise
                    raise DownloadNetworkError(
                        f"下载失败: {filename}", context={"url": url, "error": str(e)}
                    ) from e

        raise DownloadError(f"下载失败: {filename}", context={"url": url})

    async def _stream_to_file(
        self, url: str, filename: str, file_path: str, expected_size: int
    ):
        async with self.session.get(url) as response:
            if response.status != 200:
                raise DownloadNetworkError(
                    f"HTTP {response.status}",
                    context={"url": url, "status": response.status},
                )

            total_size = int(response.headers.get("Content-Length", 0)) or expected_size

            async with aiofiles.open(file_path, "wb") as f:
                downloaded = 0
                last_percent = 0.0

                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    await f.write(chunk)
                    downloaded += len(chunk)
                    self.stats.bytes_downloaded += len(chunk)

                    if total_size > 0:
                        percent = min(downloaded / total_size * 100, 100.0)
                        if percent - last_percent >= PROGRESS_STEP:
                            self._report(filename, percent)
                            last_percent = percent

            if total_size > 0 and last_percent < 100:
                self._report(filename, 100.0)

    def _report(self, filename: str, percent: float):
        """进度回调"""
        if self._progress_callback:
            self._progress_callback(filename, percent)
        logger.debug(f"[进度] {filename}: {percent:.1f}%")

    def get_stats(self) -> DownloadStats:
        """获取下载统计"""
        return self.stats

    async def close(self):
        """关闭 session"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
