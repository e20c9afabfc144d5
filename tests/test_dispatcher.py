"""
结果分发与完成处理器单元测试

运行方式: pytest tests/test_dispatcher.py -v
"""

import pytest
from unittest.mock import MagicMock

from curl_sdk import (
    CompletionHandler,
    CurlConfig,
    CurlExitError,
    MalformedResponse,
    ProcessHandle,
    build_request,
    dispatch_result,
    parse_response,
)
from curl_sdk.http.builder import make_options
from shared.models import RequestState, Response


HELLO = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: text/plain; charset=utf-8\r\n"
    b"\r\n"
    b"hello"
)


def _request(**kwargs):
    return build_request("GET", "https://example.com", make_options(**kwargs), CurlConfig())


def _handle(data: bytes) -> ProcessHandle:
    handle = ProcessHandle("req_test", ["curl", "https://example.com"])
    handle.buffer.extend(data)
    handle.release = MagicMock(wraps=handle.release)
    return handle


def _dispatch(data: bytes, **kwargs):
    handle = _handle(data)
    return dispatch_result(_request(**kwargs), parse_response(handle.buffer), handle)


class TestDispatchResult:
    """结果分发测试"""

    def test_text_decoded(self):
        assert _dispatch(HELLO, result_shape="text", decode=True) == "hello"

    def test_text_not_decoded(self):
        assert _dispatch(HELLO, result_shape="text", decode=False) == b"hello"

    def test_text_uses_charset(self):
        """测试按 Content-Type 的 charset 解码"""
        data = b"HTTP/1.1 200 OK\r\nContent-Type: text/plain; charset=iso-8859-1\r\n\r\ncaf\xe9"
        assert _dispatch(data, result_shape="text") == "café"

    def test_text_defaults_to_utf8(self):
        data = b"HTTP/1.1 200 OK\r\n\r\n\xe4\xbd\xa0\xe5\xa5\xbd"
        assert _dispatch(data, result_shape="text") == "你好"

    def test_structured(self):
        """测试 structured 形态"""
        response = _dispatch(HELLO, result_shape="structured")

        assert isinstance(response, Response)
        assert response.version == 1.1
        assert response.status == 200
        assert response.headers == [("Content-Type", "text/plain; charset=utf-8")]
        assert response.header("Content-Type") == "text/plain; charset=utf-8"
        assert response.body == "hello"
        assert response.ok is True

    def test_structured_raw_body(self):
        response = _dispatch(HELLO, result_shape="structured", decode=False)
        assert response.body == b"hello"

    def test_raw_is_live_view(self):
        """测试 raw 形态返回整个缓冲区的视图，释放后失效"""
        handle = _handle(HELLO)
        view = dispatch_result(_request(result_shape="raw"), parse_response(handle.buffer), handle)

        assert isinstance(view, memoryview)
        assert bytes(view) == HELLO

        handle.release()
        with pytest.raises(ValueError):
            bytes(view)

    def test_custom_decoded(self):
        """测试 custom 形态接收解码后的响应体"""
        assert _dispatch(HELLO, result_shape="custom", transform=str.upper) == "HELLO"

    def test_custom_narrowed_view(self):
        """测试 custom 形态未解码时接收限定在响应体范围内的视图"""
        received = []

        def transform(body):
            received.append(type(body))
            return bytes(body)[::-1]

        result = _dispatch(HELLO, result_shape="custom", decode=False, transform=transform)

        assert result == b"olleh"
        assert received == [memoryview]


class TestCompletionHandler:
    """完成处理器状态机测试"""

    def _completion(self, data: bytes, **kwargs):
        callbacks = {
            "on_success": MagicMock(),
            "on_error": MagicMock(),
            "on_finally": MagicMock(),
        }
        callbacks.update(kwargs)
        handle = _handle(data)
        return CompletionHandler(_request(**callbacks), handle), handle, callbacks

    def test_success(self):
        """测试成功时只触发 on_success"""
        completion, handle, callbacks = self._completion(HELLO)

        value = completion.complete(0)

        assert value == "hello"
        assert completion.state is RequestState.SUCCESS
        callbacks["on_success"].assert_called_once_with("hello")
        callbacks["on_error"].assert_not_called()
        callbacks["on_finally"].assert_called_once_with()
        assert handle.release.call_count == 1
        assert handle.released is True

    def test_curl_exit_error(self):
        """测试退出码 6 映射为 CurlExitError"""
        completion, handle, callbacks = self._completion(b"")

        completion.complete(6)

        callbacks["on_success"].assert_not_called()
        callbacks["on_error"].assert_called_once()
        error = callbacks["on_error"].call_args[0][0]
        assert isinstance(error, CurlExitError)
        assert error.code == 6
        assert error.message == "Couldn't resolve host. The given remote host was not resolved."
        assert completion.state is RequestState.FAILURE
        assert completion.error is error
        assert handle.release.call_count == 1

    def test_curl_exit_error_keeps_output(self):
        completion, _, callbacks = self._completion(b"curl: (28) timed out")

        completion.complete(28)

        error = callbacks["on_error"].call_args[0][0]
        assert error.output == b"curl: (28) timed out"
        assert error.error.code == 28

    def test_unknown_exit_code(self):
        completion, _, callbacks = self._completion(b"")

        completion.complete(250)

        assert callbacks["on_error"].call_args[0][0].message == "unknown curl error 250"

    def test_malformed_response(self):
        """测试退出码为 0 但输出无法解析"""
        completion, handle, callbacks = self._completion(b"garbage")

        completion.complete(0)

        callbacks["on_success"].assert_not_called()
        error = callbacks["on_error"].call_args[0][0]
        assert isinstance(error, MalformedResponse)
        assert not isinstance(error, CurlExitError)
        assert handle.release.call_count == 1

    def test_transform_error_goes_to_on_error(self):
        def transform(body):
            raise KeyError("missing")

        completion, _, callbacks = self._completion(
            HELLO, result_shape="custom", transform=transform
        )

        completion.complete(0)

        callbacks["on_success"].assert_not_called()
        assert isinstance(callbacks["on_error"].call_args[0][0], KeyError)

    def test_success_callback_raises(self):
        """测试 on_success 抛出异常时缓冲区仍只释放一次，且不触发 on_error"""
        completion, handle, callbacks = self._completion(
            HELLO, on_success=MagicMock(side_effect=RuntimeError("boom"))
        )

        with pytest.raises(RuntimeError, match="boom"):
            completion.complete(0)

        callbacks["on_error"].assert_not_called()
        callbacks["on_finally"].assert_called_once_with()
        assert completion.state is RequestState.SUCCESS
        assert handle.release.call_count == 1

    def test_error_callback_raises(self):
        completion, handle, callbacks = self._completion(
            b"", on_error=MagicMock(side_effect=ValueError("bad handler"))
        )

        with pytest.raises(ValueError):
            completion.complete(7)

        callbacks["on_success"].assert_not_called()
        assert completion.state is RequestState.FAILURE
        assert handle.release.call_count == 1

    def test_raw_view_valid_during_callback(self):
        """测试 raw 视图在回调期间有效"""
        seen = []
        completion, handle, _ = self._completion(
            HELLO, result_shape="raw", on_success=lambda view: seen.append(bytes(view))
        )

        view = completion.complete(0)

        assert seen == [HELLO]
        with pytest.raises(ValueError):
            bytes(view)

    def test_fail_without_exit_code(self):
        completion, handle, callbacks = self._completion(b"")
        error = OSError("no such file")

        completion.fail(error)

        callbacks["on_error"].assert_called_once_with(error)
        assert handle.release.call_count == 1

    def test_cancel(self):
        """测试取消后不触发任何回调"""
        completion, handle, callbacks = self._completion(HELLO)

        assert completion.cancel() is True
        assert completion.cancel() is False

        assert completion.state is RequestState.CANCELLED
        for callback in callbacks.values():
            callback.assert_not_called()
        assert handle.release.call_count == 1

    def test_complete_twice(self):
        """测试终态不能再次转换"""
        completion, _, callbacks = self._completion(HELLO)
        completion.complete(0)

        with pytest.raises(RuntimeError):
            completion.complete(0)

        callbacks["on_success"].assert_called_once()
