"""
Curl SDK - 主入口包

Curl SDK 通过外部 curl 进程完成 HTTP 传输，包括：
- 异步请求（asyncio，立即返回句柄）
- 同步请求（阻塞直到完成）
- 可选的结果形态：raw / text / structured / custom

主要组件：
- CurlClient: 主客户端类
- RequestHandle: 异步请求句柄
- RequestQueue: 并发受限的请求队列
- ProcessManager: curl 子进程管理
- CompletionHandler: 请求完成状态机
"""

from .client import CurlClient, RequestHandle
from .config import SDKConfig, CurlConfig, QueueConfig, DEFAULT_CURL_ARGS
from .process.manager import ProcessManager, ProcessHandle
from .dispatcher.completion import CompletionHandler
from .dispatcher.result_dispatcher import dispatch_result
from .pool.request_queue import RequestQueue
from .http.builder import build_request, build_command
from .http.charset import resolve_charset
from .http.parser import parse_response
from .http.errors import (
    CurlSDKError,
    InvalidRequest,
    ProcessSpawnFailure,
    CurlExitError,
    MalformedResponse
)

__version__ = "0.1.0"

__all__ = [
    # 主客户端
    "CurlClient",
    "RequestHandle",

    # 配置
    "SDKConfig",
    "CurlConfig",
    "QueueConfig",
    "DEFAULT_CURL_ARGS",

    # 进程管理
    "ProcessManager",
    "ProcessHandle",

    # 分发
    "CompletionHandler",
    "dispatch_result",

    # 请求队列
    "RequestQueue",

    # HTTP
    "build_request",
    "build_command",
    "resolve_charset",
    "parse_response",

    # 错误
    "CurlSDKError",
    "InvalidRequest",
    "ProcessSpawnFailure",
    "CurlExitError",
    "MalformedResponse",
]
