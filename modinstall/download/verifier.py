"""
文件校验器

按注册中心给出的哈希表校验下载结果，优先使用更强的算法。
"""

import hashlib
import os
from typing import Dict, Optional, Tuple

import aiofiles

# 按优先级排列
SUPPORTED_ALGORITHMS = ("sha512", "sha1")
READ_SIZE = 65536


class FileVerifier:
    """文件校验器"""

    @staticmethod
    def pick_algorithm(hashes: Optional[Dict[str, str]]) -> Optional[Tuple[str, str]]:
        """返回 (算法, 预期值)，没有可用的哈希时返回 None"""
        for algorithm in SUPPORTED_ALGORITHMS:
            expected = (hashes or {}).get(algorithm)
            if expected:
                return algorithm, expected
        return None

    @staticmethod
    async def digest(file_path: str, algorithm: str) -> Optional[str]:
        """计算文件摘要，文件不存在或不可读时返回 None"""
        if not os.path.exists(file_path):
            return None

        hasher = hashlib.new(algorithm)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                while True:
                    data = await f.read(READ_SIZE)
                    if not data:
                        break
                    hasher.update(data)
        except OSError:
            return None
        return hasher.hexdigest()

    @classmethod
    async def verify(cls, file_path: str, hashes: Optional[Dict[str, str]]) -> bool:
        """校验文件（没有可用的哈希时视为通过）"""
        picked = cls.pick_algorithm(hashes)
        if picked is None:
            return True

        algorithm, expected = picked
        actual = await cls.digest(file_path, algorithm)
        return actual is not None and actual.lower() == expected.lower()
