"""
测试公共夹具

fake_curl 生成一个可执行脚本代替 curl：记录参数和 stdin，输出预设内容并以指定退出码结束。
"""

import json
import os
import sys
import textwrap

import pytest

# 添加项目路径
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)
sys.path.insert(0, os.path.join(ROOT, "curl-sdk"))


class FakeCurl:
    """测试用 curl 替身"""

    def __init__(self, directory, name: str, output: bytes, exit_code: int, delay: float):
        self.path = directory / name
        self._argv_path = directory / f"{name}.argv.json"
        self._stdin_path = directory / f"{name}.stdin"
        output_path = directory / f"{name}.out"
        output_path.write_bytes(output)

        self.path.write_text(textwrap.dedent(f"""\
            #!{sys.executable}
            import json, sys, time
            with open({str(self._argv_path)!r}, "w") as f:
                json.dump(sys.argv[1:], f)
            data = sys.stdin.buffer.read() if "@-" in sys.argv else b""
            with open({str(self._stdin_path)!r}, "wb") as f:
                f.write(data)
            time.sleep({delay!r})
            with open({str(output_path)!r}, "rb") as f:
                sys.stdout.buffer.write(f.read())
            sys.stdout.flush()
            sys.exit({exit_code!r})
        """))
        self.path.chmod(0o755)

    @property
    def binary(self) -> str:
        return str(self.path)

    def argv(self) -> list:
        with open(self._argv_path) as f:
            return json.load(f)

    def stdin(self) -> bytes:
        return self._stdin_path.read_bytes()


@pytest.fixture
def fake_curl(tmp_path):
    """创建 curl 替身的工厂"""
    counter = {"n": 0}

    def _make(output: bytes = b"", exit_code: int = 0, delay: float = 0.0) -> FakeCurl:
        counter["n"] += 1
        return FakeCurl(tmp_path, f"curl{counter['n']}", output, exit_code, delay)

    return _make


@pytest.fixture
def ok_response() -> bytes:
    """一个最简单的 200 响应"""
    return (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/plain; charset=utf-8\r\n"
        b"\r\n"
        b"hello"
    )
