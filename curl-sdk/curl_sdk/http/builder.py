"""
Curl SDK - 请求构建

将请求选项校验为 RequestDescriptor，再生成子进程参数列表。
参数始终是独立的 token，从不拼接成 shell 字符串。
"""

import logging
from typing import Optional, List, Any

from pydantic import ValidationError

from shared.models import (
    HTTPMethod, ResultShape, RequestOptions, RequestDescriptor
)

from ..config import CurlConfig
from .errors import InvalidRequest

logger = logging.getLogger(__name__)

# 允许携带请求体的方法
BODY_METHODS = {HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH, HTTPMethod.DELETE}

# 头部名称和值中禁止出现的字符
_FORBIDDEN_CHARS = frozenset("\r\n\x00")


def make_options(options: Optional[RequestOptions] = None, **overrides: Any) -> RequestOptions:
    """合并选项对象与关键字参数

    Raises:
        InvalidRequest: 出现未知字段或类型错误
    """
    try:
        if options is None:
            return RequestOptions(**overrides)
        if overrides:
            return RequestOptions(**{**dict(options), **overrides})
        return options
    except ValidationError as e:
        raise InvalidRequest(f"Invalid request options: {e}") from e


def build_request(
    method: str,
    url: str,
    options: RequestOptions,
    config: CurlConfig
) -> RequestDescriptor:
    """校验请求并生成描述符

    Args:
        method: HTTP 方法
        url: 请求 URL
        options: 请求选项
        config: 全局 curl 配置（只读）

    Returns:
        不可变的请求描述符

    Raises:
        InvalidRequest: 请求不合法
    """
    try:
        http_method = HTTPMethod(method.upper() if isinstance(method, str) else method)
    except ValueError:
        raise InvalidRequest(f"Unsupported HTTP method: {method!r}") from None

    if not url:
        raise InvalidRequest("URL must not be empty")
    if url.startswith("-"):
        raise InvalidRequest(f"URL must not start with '-': {url!r}")
    if "\x00" in url:
        raise InvalidRequest(f"URL must not contain NUL bytes: {url!r}")

    try:
        shape = ResultShape(options.result_shape)
    except ValueError:
        raise InvalidRequest(f"Unknown result shape: {options.result_shape!r}") from None
    if shape is ResultShape.CUSTOM and options.transform is None:
        raise InvalidRequest("Result shape 'custom' requires a transform")

    headers = _normalize_headers(options.headers)

    connect_timeout = _pick(options.connect_timeout, config.connect_timeout)
    max_time = _pick(options.max_time, config.max_time)
    for name, value in (("connect_timeout", connect_timeout), ("max_time", max_time)):
        if value is not None and value < 0:
            raise InvalidRequest(f"{name} must not be negative: {value}")

    body = options.body
    if isinstance(body, str):
        body = body.encode("utf-8")
    if body is not None and http_method not in BODY_METHODS:
        raise InvalidRequest(f"{http_method.value} requests cannot carry a body")

    return RequestDescriptor(
        method=http_method,
        url=url,
        headers=tuple(headers),
        body=body,
        connect_timeout=connect_timeout,
        max_time=max_time,
        result_shape=shape,
        decode=options.decode,
        transform=options.transform,
        on_success=options.on_success,
        on_error=options.on_error,
        on_finally=options.on_finally,
        binary=options.curl_binary or config.binary,
        default_args=tuple(
            options.curl_args if options.curl_args is not None else config.default_args
        ),
    )


def build_command(request: RequestDescriptor) -> List[str]:
    """生成 curl 参数列表

    [binary, 默认参数..., 方法, 请求体, --header "Name: Value"..., 超时..., url]
    """
    argv = [request.binary, *request.default_args]

    if request.method is HTTPMethod.HEAD:
        argv.append("--head")
    elif request.method is not HTTPMethod.GET:
        argv.extend(["--request", request.method.value])

    if request.body is not None:
        # 请求体经 stdin 传入
        argv.extend(["--data-binary", "@-"])

    for name, value in request.headers:
        argv.extend(["--header", f"{name}: {value}"])

    if request.connect_timeout is not None:
        argv.extend(["--connect-timeout", _format_seconds(request.connect_timeout)])
    if request.max_time is not None:
        argv.extend(["--max-time", _format_seconds(request.max_time)])

    argv.append(request.url)
    return argv


def _normalize_headers(headers) -> List[tuple]:
    pairs = list(headers.items()) if isinstance(headers, dict) else list(headers)

    for name, value in pairs:
        if not name or ":" in name or _FORBIDDEN_CHARS.intersection(name):
            raise InvalidRequest(f"Invalid header name: {name!r}")
        if _FORBIDDEN_CHARS.intersection(value):
            raise InvalidRequest(f"Invalid value for header {name!r}: line breaks and NUL are not allowed")

    return [(name, value) for name, value in pairs]


def _pick(value, default):
    return default if value is None else value


def _format_seconds(seconds: float) -> str:
    return format(seconds, "g")
