"""
ModInstall 下载层

包含下载管理与文件校验。
"""

from modinstall.download.manager import DownloadManager, DownloadStats
from modinstall.download.verifier import FileVerifier

__all__ = [
    "DownloadManager",
    "DownloadStats",
    "FileVerifier",
]
