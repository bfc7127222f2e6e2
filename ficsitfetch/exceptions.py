"""
ficsitfetch 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

from typing import Any, Dict, List, Optional


class FicsitFetchError(Exception):
    """ficsitfetch 基础异常类"""

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


class ConfigError(FicsitFetchError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class ConfigParseError(ConfigError):
    """配置解析错误"""

    def _get_default_code(self) -> str:
        return "E101"


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def _get_default_code(self) -> str:
        return "E102"


class APIError(FicsitFetchError):
    """API 相关错误"""

    def _get_default_code(self) -> str:
        return "E200"


class NetworkError(APIError):
    """
    传输层错误

    连接失败、超时以及无法解析的响应都归为此类，原始异常保存在 cause 中。
    """

    def __init__(
        self,
        message: str = "网络错误，请稍后重试",
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, code, context)
        self.cause = cause
        if cause is not None:
            self.context.setdefault("cause", repr(cause))

    def _get_default_code(self) -> str:
        return "E201"


class RegistryError(APIError):
    """ficsit.app 对合法请求返回的结构化错误列表"""

    def __init__(
        self,
        errors: List[Dict[str, Any]],
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        messages = [
            str(err.get("message", err)) if isinstance(err, dict) else str(err)
            for err in errors
        ]
        super().__init__("; ".join(messages) or "注册表返回错误", code, context)
        self.errors = errors

    def _get_default_code(self) -> str:
        return "E202"


class NotFoundError(FicsitFetchError):
    """请求的资源不存在"""

    def _get_default_code(self) -> str:
        return "E404"


class ModNotFoundError(NotFoundError):
    """模组不存在"""

    def _get_default_code(self) -> str:
        return "E404"


class ModVersionNotFoundError(NotFoundError):
    """模组版本不存在"""

    def _get_default_code(self) -> str:
        return "E405"


class TemporaryModError(NotFoundError):
    """临时模组没有可用的下载链接"""

    def _get_default_code(self) -> str:
        return "E406"


class SMLVersionNotFoundError(NotFoundError):
    """SML 版本不存在"""

    def _get_default_code(self) -> str:
        return "E407"


class BootstrapperVersionNotFoundError(NotFoundError):
    """Bootstrapper 版本不存在"""

    def _get_default_code(self) -> str:
        return "E408"


class DownloadError(FicsitFetchError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadNetworkError(DownloadError):
    """下载网络错误"""

    def _get_default_code(self) -> str:
        return "E301"


class DownloadFileError(DownloadError):
    """下载文件操作错误"""

    def _get_default_code(self) -> str:
        return "E303"


class SemVerError(FicsitFetchError, ValueError):
    """版本号或版本范围无效"""

    def _get_default_code(self) -> str:
        return "E500"


__all__ = [
    # 基础异常
    "FicsitFetchError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # API 异常
    "APIError",
    "NetworkError",
    "RegistryError",
    # 资源不存在
    "NotFoundError",
    "ModNotFoundError",
    "ModVersionNotFoundError",
    "TemporaryModError",
    "SMLVersionNotFoundError",
    "BootstrapperVersionNotFoundError",
    # 下载异常
    "DownloadError",
    "DownloadNetworkError",
    "DownloadFileError",
    # 版本异常
    "SemVerError",
]
