"""
Curl SDK - 结果分发

同步与异步路径共用的唯一分发函数，按 ResultShape 生成回调参数。
"""

import logging
from typing import Any, Callable, Dict, Union

from shared.models import ResultShape, RequestDescriptor, ParsedResponse, Response

from ..http.charset import resolve_charset
from ..process.manager import ProcessHandle

logger = logging.getLogger(__name__)


def dispatch_result(
    request: RequestDescriptor,
    parsed: ParsedResponse,
    handle: ProcessHandle
) -> Any:
    """按请求的结果形态生成回调值

    注意：raw 形态返回的是缓冲区的实时视图，custom 形态在未解码时传给
    transform 的也是视图。回调返回后缓冲区即被释放，视图随之失效，
    需要保留的数据必须在回调内复制出来。
    """
    handler = _HANDLERS[request.result_shape]
    return handler(request, parsed, handle)


def read_body(
    request: RequestDescriptor,
    parsed: ParsedResponse,
    handle: ProcessHandle
) -> Union[str, bytes]:
    """读取响应体，需要时按 charset 解码"""
    body = bytes(handle.buffer[parsed.body_start:])
    if not request.decode:
        return body
    return body.decode(resolve_charset(parsed.headers), errors="replace")


def _dispatch_raw(request, parsed, handle) -> memoryview:
    return handle.view()


def _dispatch_text(request, parsed, handle) -> Union[str, bytes]:
    return read_body(request, parsed, handle)


def _dispatch_structured(request, parsed, handle) -> Response:
    return Response(
        version=parsed.version,
        status=parsed.status,
        headers=list(parsed.headers),
        body=read_body(request, parsed, handle)
    )


def _dispatch_custom(request, parsed, handle) -> Any:
    if request.decode:
        body = read_body(request, parsed, handle)
    else:
        body = handle.view(parsed.body_start)
    return request.transform(body)


_HANDLERS: Dict[ResultShape, Callable[..., Any]] = {
    ResultShape.RAW: _dispatch_raw,
    ResultShape.TEXT: _dispatch_text,
    ResultShape.STRUCTURED: _dispatch_structured,
    ResultShape.CUSTOM: _dispatch_custom,
}
