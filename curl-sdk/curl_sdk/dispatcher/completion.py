"""
Curl SDK - 完成处理器
"""

import logging
from typing import Any, Optional

from shared.models import RequestState, RequestDescriptor

from ..http.errors import CurlExitError
from ..http.parser import parse_response
from ..process.manager import ProcessHandle
from .result_dispatcher import dispatch_result

logger = logging.getLogger(__name__)


class CompletionHandler:
    """请求完成处理器（状态机）

    running → success | failure | cancelled，三个结束状态都是终态。

    - success: 解析 → 分发 → on_success(value)
    - failure: on_error(error)
    - 之后调用 on_finally()；cancelled 不触发任何回调

    缓冲区在 finally 中释放，回调抛出异常时也只释放一次。
    """

    def __init__(self, request: RequestDescriptor, handle: ProcessHandle):
        self.request = request
        self.handle = handle
        self.state = RequestState.RUNNING

        self.value: Any = None
        self.error: Optional[Exception] = None

    def complete(self, returncode: int) -> Any:
        """子进程退出后调用

        Args:
            returncode: curl 退出码

        Returns:
            分发后的值，或失败时的错误对象
        """
        try:
            if returncode != 0:
                return self._fail(CurlExitError.from_exit(returncode, self.handle.output()))

            try:
                parsed = parse_response(self.handle.buffer)
                value = dispatch_result(self.request, parsed, self.handle)
            except Exception as e:
                return self._fail(e)

            return self._succeed(value)
        finally:
            self.handle.release()

    def fail(self, error: Exception) -> Exception:
        """没有退出码时直接进入 failure（如进程无法启动）"""
        try:
            return self._fail(error)
        finally:
            self.handle.release()

    def cancel(self) -> bool:
        """进入 cancelled，不触发回调

        Returns:
            是否成功取消（已结束的请求返回 False）
        """
        if self.state is not RequestState.RUNNING:
            return False

        self.state = RequestState.CANCELLED
        self.handle.release()
        return True

    def _transition(self, state: RequestState):
        if self.state is not RequestState.RUNNING:
            raise RuntimeError(
                f"Request {self.request.request_id} already finished ({self.state.value})"
            )
        self.state = state

    def _succeed(self, value: Any) -> Any:
        self._transition(RequestState.SUCCESS)
        self.value = value

        try:
            if self.request.on_success is not None:
                self.request.on_success(value)
        finally:
            self._run_finally()

        return value

    def _fail(self, error: Exception) -> Exception:
        self._transition(RequestState.FAILURE)
        self.error = error
        logger.debug(f"Request {self.request.request_id} failed: {error}")

        try:
            if self.request.on_error is not None:
                self.request.on_error(error)
        finally:
            self._run_finally()

        return error

    def _run_finally(self):
        if self.request.on_finally is not None:
            self.request.on_finally()
