"""
ModInstall 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

from typing import Any, Dict, List, Optional
import aiohttp


class ModInstallError(Exception):
    """ModInstall 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(ModInstallError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class ProjectNotFoundError(ConfigError):
    """找不到模组开发项目（gradle.properties）"""

    def _get_default_code(self) -> str:
        return "E101"


class APIError(ModInstallError):
    """API 相关错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, code, context)
        self.response = response
        if response is not None:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)

    def _get_default_code(self) -> str:
        return "E200"


class APIRateLimitError(APIError):
    """API 速率限制"""

    def _get_default_code(self) -> str:
        return "E429"


class APIServerError(APIError):
    """API 服务器错误"""

    def _get_default_code(self) -> str:
        return "E500"


class DownloadError(ModInstallError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadNetworkError(DownloadError):
    """下载网络错误"""

    def _get_default_code(self) -> str:
        return "E301"


class DownloadChecksumError(DownloadError):
    """下载校验错误"""

    def _get_default_code(self) -> str:
        return "E302"


class ResolveError(ModInstallError):
    """模组解析相关错误"""

    def _get_default_code(self) -> str:
        return "E400"


class ModNotFoundError(ResolveError):
    """注册中心无匹配结果，或本地没有匹配的文件"""

    def _get_default_code(self) -> str:
        return "E404"


class AmbiguousMatchError(ResolveError):
    """本地有多个文件匹配同一名称"""

    def __init__(
        self,
        message: str,
        matches: Optional[List[str]] = None,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code, context)
        self.matches = list(matches or [])
        self.context["matches"] = self.matches

    def _get_default_code(self) -> str:
        return "E409"


class IncompatibleVersionError(ResolveError):
    """没有适用于当前加载器/游戏版本的模组版本"""

    def _get_default_code(self) -> str:
        return "E410"


class NoDownloadableFileError(ResolveError):
    """版本中没有可下载的文件"""

    def _get_default_code(self) -> str:
        return "E411"


class ManifestParseError(ModInstallError):
    """模组清单解析错误（只在元数据提取器内部使用）"""

    def _get_default_code(self) -> str:
        return "E600"


__all__ = [
    # 基础异常
    "ModInstallError",
    # 配置异常
    "ConfigError",
    "ProjectNotFoundError",
    # API 异常
    "APIError",
    "APIRateLimitError",
    "APIServerError",
    # 下载异常
    "DownloadError",
    "DownloadNetworkError",
    "DownloadChecksumError",
    # 解析异常
    "ResolveError",
    "ModNotFoundError",
    "AmbiguousMatchError",
    "IncompatibleVersionError",
    "NoDownloadableFileError",
    # 清单异常
    "ManifestParseError",
]
