"""I/O boundary for native messaging framing.

All stream access (caller streams, stdin, stdout) goes
through here. Tests mock the stdin/stdout seams at this
boundary.
"""
from __future__ import annotations

import logging
import sys
from typing import IO, Any

from returns.io import IOFailure, IOResult, IOSuccess
from returns.result import Failure

from native_messaging.errors import IO_ERROR, CodecError
from native_messaging.protocol import (
    check_inbound_size,
    decode_header,
    encode_message,
    end_of_input_error,
    parse_payload,
    truncated_error,
)
from native_messaging.types import (
    DEFAULT_CONFIG,
    HEADER_SIZE,
    CodecConfig,
    JsonValue,
)

_logger = logging.getLogger(__name__)

# Upper bound on a single read() so a bogus length prefix
# cannot force one huge allocation before EOF is seen.
_READ_CHUNK_SIZE = 64 * 1024


def _get_stdin_buffer() -> IO[bytes]:
    """Return stdin binary buffer. Mockable seam."""
    return sys.stdin.buffer


def _get_stdout_buffer() -> IO[bytes]:
    """Return stdout binary buffer. Mockable seam."""
    return sys.stdout.buffer


def _read_exact(stream: IO[bytes], size: int) -> bytes:
    """Read up to size bytes, looping over short reads.

    Returns fewer than size bytes only when the stream
    reached EOF first.
    """
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(remaining, _READ_CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _io_error(operation: str, exc: OSError) -> CodecError:
    return CodecError(
        operation=operation,
        error_type=IO_ERROR,
        message=f"Stream error: {exc}",
        context={
            "exception": type(exc).__name__,
            "errno": exc.errno,
        },
    )


def _fail(error: CodecError) -> IOResult[Any, CodecError]:
    """Log a codec failure and wrap it as IOFailure."""
    if error.is_end_of_input:
        _logger.debug("Input stream closed")
    else:
        _logger.warning("%s", error)
    return IOFailure(error)


def read_input(
    stream: IO[bytes],
    config: CodecConfig = DEFAULT_CONFIG,
) -> IOResult[JsonValue, CodecError]:
    """Read one length-prefixed message from a binary stream.

    Reads the 4-byte LE header, then exactly that many bytes
    of body, and parses the body as UTF-8 JSON. Returns
    IOSuccess(value) or IOFailure(CodecError); never raises.
    A clean close before the header is EndOfInput, which
    callers use to leave their read loop. Bytes consumed
    before a failure are not pushed back.
    """
    operation = "io_ops.read_input"
    try:
        header = _read_exact(stream, HEADER_SIZE)
        if not header:
            return _fail(end_of_input_error(operation))
        if len(header) < HEADER_SIZE:
            return _fail(
                truncated_error(
                    operation, "Length prefix", HEADER_SIZE, len(header),
                ),
            )
        length = decode_header(header)
        size_result = check_inbound_size(length, config)
        if isinstance(size_result, Failure):
            return _fail(size_result.failure())
        body = _read_exact(stream, length)
    except OSError as exc:
        return _fail(_io_error(operation, exc))

    if len(body) < length:
        return _fail(truncated_error(operation, "Payload", length, len(body)))

    parsed = parse_payload(body)
    if isinstance(parsed, Failure):
        return _fail(parsed.failure())
    _logger.debug("Read frame: %d payload bytes", length)
    return IOResult.from_result(parsed)


def write_output(
    stream: IO[bytes],
    value: JsonValue,
    config: CodecConfig = DEFAULT_CONFIG,
) -> IOResult[None, CodecError]:
    """Write one length-prefixed JSON message to a binary stream.

    Serialization and size checks happen before anything is
    written, so a failed encode leaves the stream untouched.
    The stream is flushed after the frame so the browser
    sees it immediately.
    """
    encoded = encode_message(value, config)
    if isinstance(encoded, Failure):
        return _fail(encoded.failure())
    frame = encoded.unwrap()
    try:
        stream.write(frame)
        stream.flush()
    except OSError as exc:
        return _fail(_io_error("io_ops.write_output", exc))
    _logger.debug("Wrote frame: %d payload bytes", len(frame) - HEADER_SIZE)
    return IOSuccess(None)


send_message = write_output


def read_stdin_message(
    config: CodecConfig = DEFAULT_CONFIG,
) -> IOResult[JsonValue, CodecError]:
    """Read one native message from stdin."""
    return read_input(_get_stdin_buffer(), config)


def write_stdout_message(
    value: JsonValue,
    config: CodecConfig = DEFAULT_CONFIG,
) -> IOResult[None, CodecError]:
    """Write one native message to stdout."""
    return write_output(_get_stdout_buffer(), value, config)
