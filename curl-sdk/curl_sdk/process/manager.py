"""
Curl SDK - 子进程管理器
"""

import asyncio
import logging
import shlex
import subprocess
from typing import Optional, List

from ..http.errors import ProcessSpawnFailure

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


class ProcessHandle:
    """单个请求的进程句柄

    持有一个私有输出缓冲区，接收 curl 合并后的 stdout/stderr（按字节原样保存）。
    缓冲区不会在请求之间共享，并且只释放一次。
    """

    def __init__(self, request_id: str, command: List[str]):
        self.request_id = request_id
        self.command = command
        self.buffer: Optional[bytearray] = bytearray()
        self.process: Optional[asyncio.subprocess.Process] = None
        self.returncode: Optional[int] = None

        self._views: List[memoryview] = []
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def view(self, start: int = 0) -> memoryview:
        """返回缓冲区的只读视图（从 start 开始）

        视图在 release() 时失效，调用方需要在此之前读完。
        """
        if self._released:
            raise RuntimeError(f"Buffer of request {self.request_id} already released")

        view = memoryview(self.buffer).toreadonly()
        self._views.append(view)
        if start:
            view = view[start:]
            self._views.append(view)
        return view

    def output(self) -> bytes:
        """缓冲区内容的副本"""
        if self._released:
            return b""
        return bytes(self.buffer)

    def kill(self):
        """终止仍在运行的子进程"""
        if self.process is None or self.process.returncode is not None:
            return
        try:
            self.process.kill()
        except ProcessLookupError:
            pass
        else:
            logger.debug(f"Killed curl process {self.process.pid} ({self.request_id})")

    def release(self):
        """释放缓冲区"""
        if self._released:
            return
        self._released = True

        for view in reversed(self._views):
            view.release()
        self._views.clear()

        self.buffer = None
        self.process = None
        logger.debug(f"Released buffer of request {self.request_id}")


class ProcessManager:
    """子进程管理器

    负责：
    - 异步启动 curl（不阻塞事件循环）
    - 同步运行 curl（阻塞调用线程）
    - 将输出写入请求私有的缓冲区
    """

    async def run_async(self, handle: ProcessHandle, stdin_data: Optional[bytes] = None) -> int:
        """异步运行，子进程退出后返回退出码

        Args:
            handle: 进程句柄
            stdin_data: 写入 stdin 的请求体

        Returns:
            退出码

        Raises:
            ProcessSpawnFailure: 无法启动子进程
        """
        logger.debug(f"Spawning {shlex.join(handle.command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *handle.command,
                stdin=asyncio.subprocess.PIPE if stdin_data is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT
            )
        except OSError as e:
            raise ProcessSpawnFailure(handle.command, e) from e

        handle.process = process

        try:
            await asyncio.gather(
                self._feed(process, stdin_data),
                self._pump(process, handle)
            )
            returncode = await process.wait()
        except asyncio.CancelledError:
            await self._reap(process, handle.request_id)
            raise

        handle.returncode = returncode
        logger.debug(
            f"curl exited with {returncode} ({handle.request_id}, {len(handle.buffer)} bytes)"
        )
        return returncode

    def run_sync(self, handle: ProcessHandle, stdin_data: Optional[bytes] = None) -> int:
        """同步运行，阻塞直到子进程退出

        Raises:
            ProcessSpawnFailure: 无法启动子进程
        """
        logger.debug(f"Running {shlex.join(handle.command)}")

        if stdin_data is not None:
            stdin_kwargs = {"input": stdin_data}
        else:
            stdin_kwargs = {"stdin": subprocess.DEVNULL}

        try:
            completed = subprocess.run(
                handle.command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
                **stdin_kwargs
            )
        except OSError as e:
            raise ProcessSpawnFailure(handle.command, e) from e

        handle.buffer.extend(completed.stdout or b"")
        handle.returncode = completed.returncode
        logger.debug(
            f"curl exited with {completed.returncode} ({handle.request_id}, {len(handle.buffer)} bytes)"
        )
        return completed.returncode

    async def _feed(self, process: asyncio.subprocess.Process, data: Optional[bytes]):
        if data is None or process.stdin is None:
            return
        try:
            process.stdin.write(data)
            await process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError):
            # curl 提前退出，退出码会说明原因
            logger.debug("curl closed stdin before the request body was written")
        finally:
            process.stdin.close()

    async def _reap(self, process: asyncio.subprocess.Process, request_id: str):
        """终止被取消的子进程并等待其退出"""
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
        # 句柄此时可能已释放，直接使用本地的 process 引用
        returncode = await asyncio.shield(process.wait())
        logger.debug(f"Reaped curl process {process.pid} ({request_id}, exit {returncode})")

    async def _pump(self, process: asyncio.subprocess.Process, handle: ProcessHandle):
        while True:
            chunk = await process.stdout.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            handle.buffer.extend(chunk)
