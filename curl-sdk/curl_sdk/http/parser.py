"""
Curl SDK - 响应解析

解析 curl --dump-header - 输出的字节流：状态行、有序头部列表、响应体起始偏移。
"""

import logging
import re
from typing import List, Tuple

from shared.models import ParsedResponse

from .errors import MalformedResponse

logger = logging.getLogger(__name__)

_STATUS_LINE_RE = re.compile(rb"HTTP/(\d+(?:\.\d+)*) +(\d+)(?: ([^\r\n]*))?\r?\n")
_HEADER_LINE_RE = re.compile(rb"([^:]+): (.*)")

# 出现在最终响应之前的头部块（代理隧道）
_CONNECTION_ESTABLISHED = b"connection established"


def parse_response(buffer: bytes) -> ParsedResponse:
    """解析完整的 curl 输出

    跟随重定向或经过代理时 curl 会输出多个头部块，只返回最后一个。

    Args:
        buffer: 捕获的输出（bytes / bytearray）

    Returns:
        解析结果

    Raises:
        MalformedResponse: 缺少状态行或头部结束符
    """
    pos = 0
    while True:
        version, status, reason, headers, body_start = _parse_block(buffer, pos)

        if _is_intermediate(status, reason) and _STATUS_LINE_RE.match(buffer, body_start):
            logger.debug(f"Skipping intermediate {status} header block")
            pos = body_start
            continue

        return ParsedResponse(
            version=version,
            status=status,
            headers=headers,
            body_start=body_start
        )


def _parse_block(buffer: bytes, pos: int):
    match = _STATUS_LINE_RE.match(buffer, pos)
    if not match:
        raise MalformedResponse(
            "Response does not start with an HTTP status line",
            bytes(buffer)
        )

    version = float(match.group(1).decode("ascii"))
    status = int(match.group(2))
    reason = match.group(3) or b""

    headers: List[Tuple[str, str]] = []
    line_start = match.end()

    while True:
        line_end = buffer.find(b"\n", line_start)
        if line_end == -1:
            raise MalformedResponse(
                "Header terminator not found",
                bytes(buffer)
            )

        line = bytes(buffer[line_start:line_end])
        if line.endswith(b"\r"):
            line = line[:-1]
        line_start = line_end + 1

        if not line:
            return version, status, reason, headers, line_start

        header = _HEADER_LINE_RE.fullmatch(line)
        if header is None:
            # 宽松策略：跳过格式错误的头部行
            logger.warning(f"Skipping malformed header line: {line!r}")
            continue

        headers.append((
            header.group(1).decode("latin-1"),
            header.group(2).decode("latin-1")
        ))


def _is_intermediate(status: int, reason: bytes) -> bool:
    if 100 <= status < 200 or 300 <= status < 400:
        return True
    return status == 200 and reason.lower().startswith(_CONNECTION_ESTABLISHED)
