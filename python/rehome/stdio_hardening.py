"""
Stdio hardening for the MCP server.

MCP uses JSON-RPC over stdio, so ANY stray text on stdout breaks the client.
This module forces UTF-8 on both streams (Java sources routinely carry
non-ASCII identifiers and comments) and turns a client hang-up into a clean
exit.
"""

import functools
import io
import os
import sys
from typing import Callable, TypeVar

F = TypeVar("F", bound=Callable)


def _wrap_utf8(stream):
    if hasattr(stream, "buffer") and (stream.encoding or "").lower() != "utf-8":
        return io.TextIOWrapper(
            stream.buffer,
            encoding="utf-8",
            errors="backslashreplace",
            line_buffering=stream.line_buffering,
        )
    return stream


def ensure_utf8_encoding() -> None:
    """Re-wrap stdout and stderr as UTF-8 if they are not already."""
    sys.stdout = _wrap_utf8(sys.stdout)
    sys.stderr = _wrap_utf8(sys.stderr)


def handle_broken_pipe(func: F) -> F:
    """
    Exit with status 0 when the client disconnects mid-write.

    Usage:
        @handle_broken_pipe
        def main():
            mcp.run()
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BrokenPipeError:
            try:
                sys.stderr.write("Client disconnected. Shutting down.\n")
                sys.stderr.flush()
            except OSError:
                # stderr went away with the client
                pass
            sys.exit(0)

    return wrapper  # type: ignore


def harden_stdio() -> None:
    """Apply all stdio hardening. Call first thing in main()."""
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")
    os.environ.setdefault("PYTHONUTF8", "1")
    ensure_utf8_encoding()
