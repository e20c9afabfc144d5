"""
Curl SDK - 进程模块

负责 curl 子进程的启动、输出捕获和终止。
"""

from .manager import ProcessHandle, ProcessManager

__all__ = ["ProcessHandle", "ProcessManager"]
