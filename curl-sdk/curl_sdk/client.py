"""
Curl SDK - 客户端入口
"""

import asyncio
import contextlib
import logging
from typing import Any, AsyncContextManager, Optional

from shared.models import RequestState, RequestOptions, RequestDescriptor

from .config import SDKConfig
from .dispatcher.completion import CompletionHandler
from .http.builder import build_command, build_request, make_options
from .process.manager import ProcessHandle, ProcessManager

logger = logging.getLogger(__name__)


class CurlClient:
    """Curl HTTP 客户端

    通过外部 curl 进程完成传输，提供异步与同步两套接口。

    Usage:
        client = CurlClient()

        # 异步：立即返回句柄，回调在子进程退出后执行
        handle = client.get(url, on_success=print, on_error=print)
        text = await handle

        # 同步：阻塞直到完成，返回分发后的值
        response = client.get_sync(url, result_shape="structured")
    """

    def __init__(self, config: Optional[SDKConfig] = None):
        self.config = config or SDKConfig.from_env()
        self.process_manager = ProcessManager()

    def build(
        self,
        method: str,
        url: str,
        options: Optional[RequestOptions] = None,
        **kwargs: Any
    ) -> RequestDescriptor:
        """构建请求描述符（校验失败抛出 InvalidRequest）"""
        return build_request(method, url, make_options(options, **kwargs), self.config.curl)

    # ==================== 异步接口 ====================

    def request(
        self,
        method: str,
        url: str,
        options: Optional[RequestOptions] = None,
        **kwargs: Any
    ) -> "RequestHandle":
        """发送异步请求

        必须在运行中的事件循环内调用。

        Args:
            method: HTTP 方法
            url: 请求 URL
            options: 请求选项，也可以用关键字参数传入

        Returns:
            请求句柄
        """
        return self.start(self.build(method, url, options, **kwargs))

    def start(
        self,
        request: RequestDescriptor,
        gate: Optional[AsyncContextManager] = None
    ) -> "RequestHandle":
        """启动已构建的请求

        gate 在启动子进程前进入，用于限制并发。
        """
        handle = RequestHandle(request, self.process_manager)
        handle.start(gate)
        return handle

    def get(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> "RequestHandle":
        """GET 请求"""
        return self.request("GET", url, options, **kwargs)

    def head(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> "RequestHandle":
        """HEAD 请求"""
        return self.request("HEAD", url, options, **kwargs)

    def post(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> "RequestHandle":
        """POST 请求"""
        return self.request("POST", url, options, **kwargs)

    def put(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> "RequestHandle":
        """PUT 请求"""
        return self.request("PUT", url, options, **kwargs)

    def patch(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> "RequestHandle":
        """PATCH 请求"""
        return self.request("PATCH", url, options, **kwargs)

    def delete(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> "RequestHandle":
        """DELETE 请求"""
        return self.request("DELETE", url, options, **kwargs)

    # ==================== 同步接口 ====================

    def request_sync(
        self,
        method: str,
        url: str,
        options: Optional[RequestOptions] = None,
        **kwargs: Any
    ) -> Any:
        """发送同步请求，阻塞直到 curl 退出

        回调在返回前内联执行。

        Returns:
            分发后的值

        Raises:
            InvalidRequest: 请求不合法
            ProcessSpawnFailure / CurlExitError / MalformedResponse: 请求失败
        """
        request = self.build(method, url, options, **kwargs)
        process = ProcessHandle(request.request_id, build_command(request))
        completion = CompletionHandler(request, process)

        try:
            returncode = self.process_manager.run_sync(process, request.body)
        except Exception as e:
            completion.fail(e)
            raise

        completion.complete(returncode)
        if completion.error is not None:
            raise completion.error
        return completion.value

    def get_sync(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> Any:
        """同步 GET 请求"""
        return self.request_sync("GET", url, options, **kwargs)

    def head_sync(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> Any:
        """同步 HEAD 请求"""
        return self.request_sync("HEAD", url, options, **kwargs)

    def post_sync(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> Any:
        """同步 POST 请求"""
        return self.request_sync("POST", url, options, **kwargs)

    def put_sync(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> Any:
        """同步 PUT 请求"""
        return self.request_sync("PUT", url, options, **kwargs)

    def patch_sync(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> Any:
        """同步 PATCH 请求"""
        return self.request_sync("PATCH", url, options, **kwargs)

    def delete_sync(self, url: str, options: Optional[RequestOptions] = None, **kwargs) -> Any:
        """同步 DELETE 请求"""
        return self.request_sync("DELETE", url, options, **kwargs)


class RequestHandle:
    """异步请求句柄

    请求在事件循环中以 Task 运行，句柄可用于等待结果或取消请求。
    """

    def __init__(self, request: RequestDescriptor, process_manager: ProcessManager):
        self.request = request
        self.process_manager = process_manager

        self.process = ProcessHandle(request.request_id, build_command(request))
        self.completion = CompletionHandler(request, self.process)

        self._task: Optional[asyncio.Task] = None
        self._callback_error: Optional[BaseException] = None

    @property
    def request_id(self) -> str:
        return self.request.request_id

    @property
    def state(self) -> RequestState:
        return self.completion.state

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def start(self, gate: Optional[AsyncContextManager] = None):
        """在当前事件循环中启动请求"""
        if self._task is not None:
            raise RuntimeError(f"Request {self.request_id} already started")

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(gate or contextlib.nullcontext()))

    def cancel(self) -> bool:
        """终止子进程并取消尚未触发的回调

        Returns:
            是否取消成功（已完成的请求返回 False）
        """
        self.process.kill()
        if not self.completion.cancel():
            return False

        if self._task is not None:
            self._task.cancel()
        logger.warning(f"Request {self.request_id} cancelled")
        return True

    async def wait(self) -> Any:
        """等待请求结束

        Returns:
            分发后的值

        Raises:
            asyncio.CancelledError: 请求已取消
            请求失败时的错误，或回调抛出的异常
        """
        if self._task is None:
            raise RuntimeError(f"Request {self.request_id} not started")

        await asyncio.shield(self._task)

        if self._callback_error is not None:
            raise self._callback_error
        if self.completion.error is not None:
            raise self.completion.error
        return self.completion.value

    def __await__(self):
        return self.wait().__await__()

    async def _run(self, gate: AsyncContextManager):
        try:
            async with gate:
                returncode = await self.process_manager.run_async(
                    self.process, self.request.body
                )
        except asyncio.CancelledError:
            self.process.kill()
            self.completion.cancel()
            raise
        except Exception as e:
            self._finish(self.completion.fail, e)
        else:
            self._finish(self.completion.complete, returncode)

        if self.completion.state is RequestState.FAILURE and self.request.on_error is None:
            logger.error(f"Request {self.request_id} failed: {self.completion.error}")

    def _finish(self, step, arg):
        try:
            step(arg)
        except Exception as e:
            logger.exception(f"Callback of request {self.request_id} raised")
            self._callback_error = e
