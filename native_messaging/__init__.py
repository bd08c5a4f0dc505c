"""Browser native messaging framing over stdin/stdout.

Each frame is a 4-byte little-endian payload length followed
by that many bytes of UTF-8 JSON.
"""
from __future__ import annotations

from native_messaging.debug_log import setup_debug_logging
from native_messaging.errors import CodecError, ErrorKind
from native_messaging.io_ops import (
    read_input,
    read_stdin_message,
    send_message,
    write_output,
    write_stdout_message,
)
from native_messaging.protocol import decode_message, encode_message
from native_messaging.reporting import send_error, send_panic
from native_messaging.types import (
    CHROME_CONFIG,
    DEFAULT_CONFIG,
    CodecConfig,
    JsonValue,
)

__all__ = [
    "CHROME_CONFIG",
    "DEFAULT_CONFIG",
    "CodecConfig",
    "CodecError",
    "ErrorKind",
    "JsonValue",
    "decode_message",
    "encode_message",
    "read_input",
    "read_stdin_message",
    "send_error",
    "send_message",
    "send_panic",
    "setup_debug_logging",
    "write_output",
    "write_stdout_message",
]
