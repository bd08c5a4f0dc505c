"""Error replies sent back to the browser over stdout.

A host that fails to handle a request, or crashes, still
owes the extension a framed reply so the failure shows up
on the browser side instead of a silently closed port.
"""
from __future__ import annotations

import traceback
from typing import TYPE_CHECKING

from native_messaging.io_ops import write_stdout_message
from native_messaging.types import DEFAULT_CONFIG, CodecConfig

if TYPE_CHECKING:
    from returns.io import IOResult

    from native_messaging.errors import CodecError
    from native_messaging.types import JsonValue


def error_response(error: object) -> dict[str, JsonValue]:
    """Build the {"error": text} reply for a failed request."""
    return {"error": str(error)}


def panic_response(exc: BaseException) -> dict[str, JsonValue]:
    """Build the panic reply for an unhandled exception.

    File and line come from the innermost traceback frame,
    or are None when the exception was never raised.
    """
    payload = str(exc) or type(exc).__name__
    frames = traceback.extract_tb(exc.__traceback__)
    if frames:
        last = frames[-1]
        file: str | None = last.filename
        line: int | None = last.lineno
    else:
        file = None
        line = None
    return {
        "status": "panic",
        "payload": payload,
        "file": file,
        "line": line,
    }


def send_error(
    error: object,
    config: CodecConfig = DEFAULT_CONFIG,
) -> IOResult[None, CodecError]:
    """Write an error reply to stdout."""
    return write_stdout_message(error_response(error), config)


def send_panic(
    exc: BaseException,
    config: CodecConfig = DEFAULT_CONFIG,
) -> IOResult[None, CodecError]:
    """Write a panic reply to stdout before the host exits."""
    return write_stdout_message(panic_response(exc), config)
