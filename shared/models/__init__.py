"""
共享数据模型包
"""

from .common import (
    HTTPMethod,
    ResultShape,
    RequestState,
    generate_id,
)

from .request import (
    Header,
    RequestOptions,
    RequestDescriptor,
)

from .response import (
    ParsedResponse,
    Response,
    ErrorDescriptor,
)

__all__ = [
    # Common
    "HTTPMethod",
    "ResultShape",
    "RequestState",
    "generate_id",

    # Request
    "Header",
    "RequestOptions",
    "RequestDescriptor",

    # Response
    "ParsedResponse",
    "Response",
    "ErrorDescriptor",
]
