"""
共享数据模型 - 请求相关
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Tuple, Dict, Union, Callable, Any

from .common import HTTPMethod, ResultShape, generate_id


Header = Tuple[str, str]


class RequestOptions(BaseModel):
    """请求选项

    调用方传入的选项，未经校验。由 build_request() 校验并生成 RequestDescriptor。
    """
    # 请求内容
    headers: Union[List[Header], Dict[str, str]] = Field(
        default_factory=list, description="请求头（有序，允许重复）"
    )
    body: Optional[Union[bytes, str]] = Field(None, description="请求体，通过 stdin 传给 curl")

    # 结果形态
    result_shape: Union[ResultShape, str] = Field(ResultShape.TEXT, description="结果形态")
    decode: bool = Field(True, description="是否按 charset 解码响应体")
    transform: Optional[Callable[[Any], Any]] = Field(None, description="custom 形态的转换函数")

    # 回调
    on_success: Optional[Callable[[Any], Any]] = None
    on_error: Optional[Callable[[Exception], Any]] = None
    on_finally: Optional[Callable[[], Any]] = None

    # 超时（秒）
    connect_timeout: Optional[float] = Field(None, description="连接超时（秒）")
    max_time: Optional[float] = Field(None, description="整体传输超时（秒）")

    # 覆盖全局配置，仅对本次请求生效
    curl_binary: Optional[str] = Field(None, description="curl 可执行文件")
    curl_args: Optional[List[str]] = Field(None, description="默认参数集")

    class Config:
        arbitrary_types_allowed = True
        extra = "forbid"


class RequestDescriptor(BaseModel):
    """请求描述符

    构建后不可变，仅由正在进行的请求持有。回调也随描述符传递，
    不存放在任何共享状态中。
    """
    request_id: str = Field(default_factory=lambda: generate_id("req"))
    method: HTTPMethod = Field(HTTPMethod.GET)
    url: str
    headers: Tuple[Header, ...] = Field(default_factory=tuple)
    body: Optional[bytes] = None

    connect_timeout: Optional[float] = None
    max_time: Optional[float] = None

    result_shape: ResultShape = Field(ResultShape.TEXT)
    decode: bool = True
    transform: Optional[Callable[[Any], Any]] = None

    on_success: Optional[Callable[[Any], Any]] = None
    on_error: Optional[Callable[[Exception], Any]] = None
    on_finally: Optional[Callable[[], Any]] = None

    binary: str = "curl"
    default_args: Tuple[str, ...] = Field(default_factory=tuple)

    class Config:
        arbitrary_types_allowed = True
        frozen = True
