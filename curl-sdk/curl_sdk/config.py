"""
Curl SDK - 配置管理
"""

from pydantic import BaseModel, Field
from typing import Optional, List


DEFAULT_CURL_ARGS = ["--silent", "--compressed", "--location", "--dump-header", "-"]


class CurlConfig(BaseModel):
    """curl 配置

    进程级只读默认值，单个请求可以在 RequestOptions 中覆盖。
    """
    binary: str = Field("curl", description="curl 可执行文件路径")
    default_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CURL_ARGS),
        description="默认参数集"
    )
    connect_timeout: Optional[float] = Field(None, description="默认连接超时（秒）")
    max_time: Optional[float] = Field(None, description="默认整体超时（秒）")

    class Config:
        frozen = True


class QueueConfig(BaseModel):
    """请求队列配置"""
    limit: int = Field(4, description="最大并发请求数")

    class Config:
        frozen = True


class SDKConfig(BaseModel):
    """Curl SDK 总配置"""
    service_name: str = Field("curl-sdk", description="服务名称")

    curl: CurlConfig = Field(default_factory=CurlConfig)
    queue: QueueConfig = Field(default_factory=QueueConfig)

    class Config:
        frozen = True

    @classmethod
    def from_env(cls) -> "SDKConfig":
        """从环境变量加载配置"""
        import os

        return cls(
            service_name=os.getenv("CURL_SDK_SERVICE_NAME", "curl-sdk"),
            curl=CurlConfig(
                binary=os.getenv("CURL_SDK_BINARY", "curl"),
                connect_timeout=os.getenv("CURL_SDK_CONNECT_TIMEOUT") or None,
                max_time=os.getenv("CURL_SDK_MAX_TIME") or None,
            ),
            queue=QueueConfig(
                limit=os.getenv("CURL_SDK_QUEUE_LIMIT", "4"),
            ),
        )
