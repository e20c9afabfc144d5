"""
共享数据模型 - 通用类型
"""

from enum import Enum
import uuid


def generate_id(prefix: str = "") -> str:
    """生成唯一 ID"""
    uid = uuid.uuid4().hex[:12]
    return f"{prefix}_{uid}" if prefix else uid


class HTTPMethod(str, Enum):
    """HTTP 方法"""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class ResultShape(str, Enum):
    """结果形态

    调用方选择以何种形式接收响应数据
    """
    RAW = "raw"  # 原始缓冲区视图，仅在回调期间有效
    TEXT = "text"
    STRUCTURED = "structured"
    CUSTOM = "custom"


class RequestState(str, Enum):
    """请求状态"""
    RUNNING = "running"
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"
