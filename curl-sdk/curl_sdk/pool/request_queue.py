"""
Curl SDK - 请求队列
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from shared.models import RequestState, RequestOptions

logger = logging.getLogger(__name__)


class RequestQueue:
    """请求队列

    负责：
    - 限制同时运行的 curl 子进程数量
    - 跟踪已提交的请求
    - 批量等待与取消

    Usage:
        queue = RequestQueue(client, limit=2)
        for url in urls:
            queue.submit("GET", url, on_success=handle_page)
        await queue.join()
    """

    def __init__(self, client: "CurlClient", limit: Optional[int] = None):
        self.client = client
        self.limit = limit or client.config.queue.limit
        if self.limit < 1:
            raise ValueError(f"Queue limit must be positive: {self.limit}")

        self._semaphore = asyncio.Semaphore(self.limit)
        self._handles: List["RequestHandle"] = []

        # 统计
        self._submitted = 0
        self._finished = {state.value: 0 for state in RequestState}
        self._active = 0
        self._peak_active = 0

    def submit(
        self,
        method: str,
        url: str,
        options: Optional[RequestOptions] = None,
        **kwargs: Any
    ) -> "RequestHandle":
        """提交请求

        请求立即校验（InvalidRequest 同步抛出），子进程在取得名额后启动。

        Returns:
            请求句柄
        """
        request = self.client.build(method, url, options, **kwargs)
        handle = self.client.start(request, gate=_QueueSlot(self))
        self._handles.append(handle)
        self._submitted += 1

        logger.debug(f"Queued request {handle.request_id}: {request.method.value} {url}")
        return handle

    async def join(self) -> List[Any]:
        """等待所有已提交的请求结束

        结束的句柄随后被移出队列，只保留统计计数。

        Returns:
            每个请求的结果（失败或取消时为异常对象），顺序与提交顺序一致
        """
        handles = list(self._handles)
        results = await asyncio.gather(
            *(handle.wait() for handle in handles),
            return_exceptions=True
        )
        self._prune()
        return results

    @property
    def pending(self) -> int:
        """仍在跟踪（尚未被 join 回收）的请求数"""
        return len(self._handles)

    def cancel_all(self) -> int:
        """取消所有未结束的请求

        Returns:
            取消的数量
        """
        cancelled = sum(1 for handle in self._handles if handle.cancel())
        if cancelled:
            logger.info(f"Cancelled {cancelled} queued requests")
        return cancelled

    def stats(self) -> Dict[str, int]:
        """队列统计信息"""
        by_state = dict(self._finished)
        for handle in self._handles:
            by_state[handle.state.value] += 1

        return {
            "limit": self.limit,
            "submitted": self._submitted,
            "active": self._active,
            "peak_active": self._peak_active,
            **by_state,
        }

    def _prune(self):
        """移除已结束的句柄，只保留各状态的计数"""
        remaining = []
        for handle in self._handles:
            if handle.done:
                self._finished[handle.state.value] += 1
            else:
                remaining.append(handle)
        self._handles = remaining


class _QueueSlot:
    """队列名额（异步上下文管理器）"""

    def __init__(self, queue: RequestQueue):
        self._queue = queue

    async def __aenter__(self):
        await self._queue._semaphore.acquire()
        self._queue._active += 1
        self._queue._peak_active = max(self._queue._peak_active, self._queue._active)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self._queue._active -= 1
        self._queue._semaphore.release()
