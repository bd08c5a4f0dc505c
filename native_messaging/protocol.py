"""Native messaging protocol framing.

Implements the 4-byte little-endian length-prefix protocol
used by browser native messaging hosts for stdin/stdout
communication. Everything here works on in-memory bytes;
stream handling lives in io_ops.
"""
from __future__ import annotations

import json
import struct

from returns.result import Failure, Result, Success

from native_messaging.errors import (
    END_OF_INPUT,
    MALFORMED_PAYLOAD,
    MESSAGE_TOO_LARGE,
    SERIALIZATION_ERROR,
    TRUNCATED_MESSAGE,
    CodecError,
)
from native_messaging.types import (
    DEFAULT_CONFIG,
    HEADER_FORMAT,
    HEADER_SIZE,
    CodecConfig,
    JsonValue,
)


def end_of_input_error(operation: str) -> CodecError:
    """Build the clean-close error reported before any prefix byte."""
    return CodecError(
        operation=operation,
        error_type=END_OF_INPUT,
        message="the input stream reached the end",
    )


def truncated_error(
    operation: str,
    part: str,
    declared: int,
    received: int,
) -> CodecError:
    """Build the error for a stream that closed mid-frame."""
    return CodecError(
        operation=operation,
        error_type=TRUNCATED_MESSAGE,
        message=f"{part} truncated: got {received} of {declared} bytes",
        context={"part": part, "declared": declared, "received": received},
    )


def encode_header(length: int) -> bytes:
    """Pack a payload length as the 4-byte LE prefix."""
    return struct.pack(HEADER_FORMAT, length)


def decode_header(header: bytes) -> int:
    """Unpack the declared payload length from a 4-byte prefix."""
    length: int = struct.unpack(HEADER_FORMAT, header)[0]
    return length


def serialize_payload(
    value: JsonValue,
) -> Result[bytes, CodecError]:
    """Serialize a message to compact UTF-8 JSON bytes.

    NaN and Infinity are rejected since browsers cannot
    parse them. Nesting past the interpreter recursion
    limit is a SerializationError too.
    """
    try:
        text = json.dumps(
            value,
            allow_nan=False,
            ensure_ascii=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError, RecursionError) as exc:
        return Failure(
            CodecError(
                operation="protocol.serialize_payload",
                error_type=SERIALIZATION_ERROR,
                message=f"Cannot serialize message as JSON: {exc}",
                context={
                    "exception": type(exc).__name__,
                    "value_type": type(value).__name__,
                },
            ),
        )
    return Success(text.encode("utf-8"))


def parse_payload(body: bytes) -> Result[JsonValue, CodecError]:
    """Parse payload bytes as UTF-8 JSON text.

    Syntax errors, over-long integer literals and nesting
    past the recursion limit all come back as
    MALFORMED_PAYLOAD.
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        return Failure(
            CodecError(
                operation="protocol.parse_payload",
                error_type=MALFORMED_PAYLOAD,
                message=f"Payload is not valid UTF-8: {exc.reason}",
                context={
                    "diagnostic": str(exc),
                    "position": exc.start,
                },
            ),
        )
    try:
        value: JsonValue = json.loads(text)
    except json.JSONDecodeError as exc:
        return Failure(
            CodecError(
                operation="protocol.parse_payload",
                error_type=MALFORMED_PAYLOAD,
                message=f"Invalid JSON in native message: {exc}",
                context={
                    "diagnostic": exc.msg,
                    "line": exc.lineno,
                    "column": exc.colno,
                    "position": exc.pos,
                },
            ),
        )
    except (ValueError, RecursionError) as exc:
        return Failure(
            CodecError(
                operation="protocol.parse_payload",
                error_type=MALFORMED_PAYLOAD,
                message=f"Cannot decode JSON in native message: {exc}",
                context={
                    "diagnostic": str(exc),
                    "exception": type(exc).__name__,
                },
            ),
        )
    return Success(value)


def check_outbound_size(
    body: bytes,
    config: CodecConfig = DEFAULT_CONFIG,
) -> Result[bytes, CodecError]:
    """Reject a serialized payload the prefix or config cannot carry."""
    limit = config.outbound_limit()
    if len(body) > limit:
        return Failure(
            CodecError(
                operation="protocol.check_outbound_size",
                error_type=MESSAGE_TOO_LARGE,
                message=f"message too large: {len(body)} bytes",
                context={"size": len(body), "limit": limit},
            ),
        )
    return Success(body)


def check_inbound_size(
    length: int,
    config: CodecConfig = DEFAULT_CONFIG,
) -> Result[int, CodecError]:
    """Reject a declared payload length above the inbound limit."""
    limit = config.max_inbound_size
    if limit is not None and length > limit:
        return Failure(
            CodecError(
                operation="protocol.check_inbound_size",
                error_type=MESSAGE_TOO_LARGE,
                message=f"message too large: {length} bytes",
                context={"size": length, "limit": limit},
            ),
        )
    return Success(length)


def encode_message(
    value: JsonValue,
    config: CodecConfig = DEFAULT_CONFIG,
) -> Result[bytes, CodecError]:
    """Encode a message as one length-prefixed frame.

    Returns 4-byte LE length prefix + UTF-8 JSON body.
    """
    return (
        serialize_payload(value)
        .bind(lambda body: check_outbound_size(body, config))
        .map(lambda body: encode_header(len(body)) + body)
    )


def decode_message(
    raw: bytes,
    config: CodecConfig = DEFAULT_CONFIG,
) -> Result[JsonValue, CodecError]:
    """Decode the first frame held in a byte buffer.

    Empty input is END_OF_INPUT. A short prefix or a body
    shorter than declared is TRUNCATED_MESSAGE; the partial
    body is never parsed. Bytes past the declared length
    are ignored.
    """
    if not raw:
        return Failure(end_of_input_error("protocol.decode_message"))
    if len(raw) < HEADER_SIZE:
        return Failure(
            truncated_error(
                "protocol.decode_message",
                "Length prefix",
                HEADER_SIZE,
                len(raw),
            ),
        )
    length = decode_header(raw[:HEADER_SIZE])
    size_result = check_inbound_size(length, config)
    if isinstance(size_result, Failure):
        return Failure(size_result.failure())
    body = raw[HEADER_SIZE:HEADER_SIZE + length]
    if len(body) < length:
        return Failure(
            truncated_error(
                "protocol.decode_message",
                "Payload",
                length,
                len(body),
            ),
        )
    return parse_payload(body)
