"""
共享数据模型 - 响应相关
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Tuple, Union


Header = Tuple[str, str]


def _first_header(headers: List[Header], name: str) -> Optional[str]:
    for header_name, value in headers:
        if header_name == name:
            return value
    return None


class ParsedResponse(BaseModel):
    """解析后的响应

    头部按出现顺序保存，名称按原样区分大小写，不去重。
    body_start 是响应体在缓冲区中的起始偏移，响应体一直延续到缓冲区末尾。
    """
    version: float = Field(..., description="协议版本")
    status: int = Field(..., description="HTTP 状态码")
    headers: List[Header] = Field(default_factory=list)
    body_start: int = Field(..., description="响应体起始偏移")

    def header(self, name: str) -> Optional[str]:
        """按名称获取第一个匹配的头部"""
        return _first_header(self.headers, name)


class Response(BaseModel):
    """structured 形态的响应"""
    version: float
    status: int
    headers: List[Header] = Field(default_factory=list)
    body: Union[str, bytes] = b""

    def header(self, name: str) -> Optional[str]:
        """按名称获取第一个匹配的头部"""
        return _first_header(self.headers, name)

    @property
    def ok(self) -> bool:
        """状态码是否为 2xx"""
        return 200 <= self.status < 300


class ErrorDescriptor(BaseModel):
    """传输层错误描述

    code 为 curl 退出码，message 来自固定的错误码表，output 为捕获的原始输出。
    """
    code: int
    message: str
    output: bytes = b""
