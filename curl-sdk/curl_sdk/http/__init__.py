"""
Curl SDK - HTTP 模块

负责请求构建、响应解析、字符集解析和错误类型。
"""

from .builder import build_request, build_command, make_options
from .charset import resolve_charset, DEFAULT_CHARSET
from .parser import parse_response
from .curl_errors import CURL_ERRORS, curl_error_message
from .errors import (
    CurlSDKError,
    InvalidRequest,
    ProcessSpawnFailure,
    CurlExitError,
    MalformedResponse
)

__all__ = [
    "build_request",
    "build_command",
    "make_options",
    "resolve_charset",
    "DEFAULT_CHARSET",
    "parse_response",
    "CURL_ERRORS",
    "curl_error_message",
    "CurlSDKError",
    "InvalidRequest",
    "ProcessSpawnFailure",
    "CurlExitError",
    "MalformedResponse",
]
