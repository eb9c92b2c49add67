"""
ModScout 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

import asyncio
from typing import Any, Dict, Optional, Type

import aiohttp


class ModScoutError(Exception):
    """ModScout 基础异常类"""

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


class ConfigError(ModScoutError):
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


class APIError(ModScoutError):
    """API 相关错误（目录返回了非成功状态码）"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message, code, context)
        self.status = status
        if status is not None:
            self.context["status_code"] = status
        if url:
            self.context["url"] = url

    def _get_default_code(self) -> str:
        return "E200"


# 上游目录的非成功响应统称 UpstreamError
UpstreamError = APIError


class APINotFoundError(APIError):
    """API 资源不存在"""

    def _get_default_code(self) -> str:
        return "E404"


class APIRateLimitError(APIError):
    """API 速率限制"""

    def _get_default_code(self) -> str:
        return "E429"


class APIServerError(APIError):
    """API 服务器错误"""

    def _get_default_code(self) -> str:
        return "E500"


class ParseError(ModScoutError):
    """模组列表文件解析错误"""

    def _get_default_code(self) -> str:
        return "E400"


class ValidationError(ModScoutError):
    """数据模型校验错误"""

    def _get_default_code(self) -> str:
        return "E600"


def api_error_for_status(
    status: int, message: str, url: Optional[str] = None
) -> APIError:
    """根据 HTTP 状态码选择最具体的 APIError 子类"""
    error_cls: Type[APIError] = APIError
    if status == 404:
        error_cls = APINotFoundError
    elif status == 429:
        error_cls = APIRateLimitError
    elif status >= 500:
        error_cls = APIServerError
    return error_cls(message, status=status, url=url)


# 单个请求失败时可被局部捕获的异常（非 2xx 响应、连接错误、超时）
TRANSPORT_ERRORS = (APIError, aiohttp.ClientError, asyncio.TimeoutError)


__all__ = [
    # 基础异常
    "ModScoutError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # API 异常
    "APIError",
    "UpstreamError",
    "APINotFoundError",
    "APIRateLimitError",
    "APIServerError",
    "api_error_for_status",
    "TRANSPORT_ERRORS",
    # 解析异常
    "ParseError",
    # 验证异常
    "ValidationError",
]
