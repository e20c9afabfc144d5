"""
Curl SDK - 字符集解析
"""

import logging
import re
from typing import List, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"

_CHARSET_RE = re.compile(r"charset\s*=\s*\"?([^\s;\"]+)\"?", re.IGNORECASE)


def resolve_charset(headers: List[Tuple[str, str]]) -> str:
    """根据 Content-Type 头部确定解码字符集

    只识别名称完全为 Content-Type 的头部，重复时取第一个。
    没有该头部、没有 charset 参数或字符集无法识别时返回 utf-8。
    """
    content_type = next((value for name, value in headers if name == "Content-Type"), None)
    if content_type is None:
        return DEFAULT_CHARSET

    match = _CHARSET_RE.search(content_type)
    if not match:
        return DEFAULT_CHARSET

    charset = match.group(1).lower()
    try:
        # base64、zlib 等编解码器不是文本编码，不能用于 bytes.decode
        b"".decode(charset)
    except LookupError:
        logger.debug(f"Unknown charset {charset!r}, falling back to {DEFAULT_CHARSET}")
        return DEFAULT_CHARSET

    return charset
