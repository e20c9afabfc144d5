"""
Curl SDK - 分发模块
"""

from .result_dispatcher import dispatch_result, read_body
from .completion import CompletionHandler

__all__ = ["dispatch_result", "read_body", "CompletionHandler"]
