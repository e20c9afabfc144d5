"""
Curl SDK - 请求队列模块

负责限制并发请求数量。
"""

from .request_queue import RequestQueue

__all__ = ["RequestQueue"]
