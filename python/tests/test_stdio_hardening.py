"""
Tests for stdio hardening - keeping the MCP stdio stream intact.

MCP uses JSON-RPC over stdio. These tests verify that:

1. UTF-8 encoding is enforced on stdout/stderr
2. BrokenPipeError turns into a clean exit
3. harden_stdio sets the UTF-8 environment defaults
"""

import io
import sys

import pytest

from rehome.stdio_hardening import ensure_utf8_encoding, handle_broken_pipe, harden_stdio


def _latin1_stream():
    return io.TextIOWrapper(io.BytesIO(), encoding="latin-1")


class TestUtf8Enforcement:
    """Test that UTF-8 encoding is enforced on streams."""

    def test_wraps_non_utf8_stdout_and_stderr(self, monkeypatch):
        monkeypatch.setattr(sys, "stdout", _latin1_stream())
        monkeypatch.setattr(sys, "stderr", _latin1_stream())

        ensure_utf8_encoding()

        assert sys.stdout.encoding.lower() == "utf-8"
        assert sys.stderr.encoding.lower() == "utf-8"

    def test_leaves_utf8_stream_alone(self, monkeypatch):
        stream = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
        monkeypatch.setattr(sys, "stdout", stream)

        ensure_utf8_encoding()

        assert sys.stdout is stream

    def test_non_ascii_identifiers_survive(self, monkeypatch):
        buffer = io.BytesIO()
        ascii_stream = io.TextIOWrapper(buffer, encoding="ascii")
        monkeypatch.setattr(sys, "stdout", ascii_stream)

        ensure_utf8_encoding()
        sys.stdout.write("class Größe → Größenordnung ✅")
        sys.stdout.flush()

        assert buffer.getvalue().decode("utf-8") == "class Größe → Größenordnung ✅"

    def test_stream_without_buffer_is_kept(self, monkeypatch):
        stream = io.StringIO()
        monkeypatch.setattr(sys, "stdout", stream)

        ensure_utf8_encoding()

        assert sys.stdout is stream


class TestBrokenPipeHandling:
    """Test that a client hang-up exits cleanly."""

    def test_broken_pipe_exits_zero(self, capsys):
        @handle_broken_pipe
        def serve():
            raise BrokenPipeError()

        with pytest.raises(SystemExit) as exc_info:
            serve()

        assert exc_info.value.code == 0
        assert "Client disconnected" in capsys.readouterr().err

    def test_return_value_passes_through(self):
        @handle_broken_pipe
        def serve(x):
            return x * 2

        assert serve(21) == 42

    def test_other_errors_propagate(self):
        @handle_broken_pipe
        def serve():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            serve()

    def test_preserves_function_name(self):
        @handle_broken_pipe
        def main():
            """Entry point."""

        assert main.__name__ == "main"
        assert main.__doc__ == "Entry point."


class TestHardenStdio:
    def test_sets_environment_defaults(self, monkeypatch):
        monkeypatch.delenv("PYTHONIOENCODING", raising=False)
        monkeypatch.delenv("PYTHONUTF8", raising=False)
        monkeypatch.setattr(sys, "stdout", _latin1_stream())
        monkeypatch.setattr(sys, "stderr", _latin1_stream())

        harden_stdio()

        import os

        assert os.environ["PYTHONIOENCODING"] == "utf-8"
        assert os.environ["PYTHONUTF8"] == "1"
        assert sys.stdout.encoding.lower() == "utf-8"

    def test_keeps_existing_environment(self, monkeypatch):
        monkeypatch.setenv("PYTHONIOENCODING", "utf-8:strict")
        monkeypatch.setattr(sys, "stdout", _latin1_stream())
        monkeypatch.setattr(sys, "stderr", _latin1_stream())

        harden_stdio()

        import os

        assert os.environ["PYTHONIOENCODING"] == "utf-8:strict"
