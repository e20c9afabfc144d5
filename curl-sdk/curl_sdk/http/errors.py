"""
Curl SDK - 错误类型
"""

from typing import List

from shared.models import ErrorDescriptor

from .curl_errors import curl_error_message


class CurlSDKError(Exception):
    """Curl SDK 错误基类"""
    pass


class InvalidRequest(CurlSDKError, ValueError):
    """请求描述非法（构建时抛出）"""
    pass


class ProcessSpawnFailure(CurlSDKError):
    """子进程无法启动"""

    def __init__(self, command: List[str], reason: OSError):
        super().__init__(f"Failed to start {command[0]!r}: {reason}")
        self.command = command
        self.reason = reason


class CurlExitError(CurlSDKError):
    """curl 以非零退出码结束"""

    def __init__(self, error: ErrorDescriptor):
        super().__init__(f"curl exited with code {error.code}: {error.message}")
        self.error = error

    @classmethod
    def from_exit(cls, code: int, output: bytes = b"") -> "CurlExitError":
        return cls(ErrorDescriptor(
            code=code,
            message=curl_error_message(code),
            output=output
        ))

    @property
    def code(self) -> int:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def output(self) -> bytes:
        return self.error.output


class MalformedResponse(CurlSDKError):
    """curl 成功退出但输出无法解析"""

    def __init__(self, message: str, output: bytes = b""):
        super().__init__(message)
        self.output = output
