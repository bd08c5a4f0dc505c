"""Tests for error and panic replies to the browser."""
from __future__ import annotations

import json
import struct
from typing import TYPE_CHECKING

from returns.io import IOSuccess

from native_messaging.errors import TRUNCATED_MESSAGE, CodecError
from native_messaging.reporting import (
    error_response,
    panic_response,
    send_error,
    send_panic,
)
from native_messaging.types import CodecConfig

if TYPE_CHECKING:
    from io import BytesIO


def _decode_single(written: bytes) -> object:
    length = struct.unpack("<I", written[:4])[0]
    assert len(written) == 4 + length
    return json.loads(written[4:])


def _raise_value_error() -> None:
    msg = "boom"
    raise ValueError(msg)


class TestErrorResponse:
    """Tests for the {"error": text} reply."""

    def test_wraps_plain_message(self) -> None:
        """Strings are used as the error text."""
        assert error_response("bad input") == {"error": "bad input"}

    def test_uses_codec_error_text(self) -> None:
        """Codec errors are rendered with their string form."""
        error = CodecError(
            operation="io_ops.read_input",
            error_type=TRUNCATED_MESSAGE,
            message="Payload truncated: got 2 of 5 bytes",
        )
        response = error_response(error)
        assert response == {"error": str(error)}
        assert "TruncatedMessage" in str(response["error"])

    def test_send_error_writes_frame(self, stdout_buffer: BytesIO) -> None:
        """send_error writes one framed reply to stdout."""
        result = send_error(KeyError("action"))
        assert result == IOSuccess(None)
        assert _decode_single(stdout_buffer.getvalue()) == {
            "error": "'action'",
        }


class TestPanicResponse:
    """Tests for the crash reply."""

    def test_reports_raise_location(self) -> None:
        """File and line point at the innermost raising frame."""
        try:
            _raise_value_error()
        except ValueError as exc:
            response = panic_response(exc)
        assert response["status"] == "panic"
        assert response["payload"] == "boom"
        assert str(response["file"]).endswith("test_reporting.py")
        assert isinstance(response["line"], int)

    def test_unraised_exception_has_no_location(self) -> None:
        """Exceptions without a traceback report null location."""
        response = panic_response(RuntimeError())
        assert response == {
            "status": "panic",
            "payload": "RuntimeError",
            "file": None,
            "line": None,
        }

    def test_send_panic_writes_frame(self, stdout_buffer: BytesIO) -> None:
        """send_panic writes the crash reply to stdout."""
        send_panic(RuntimeError("handler crashed"))
        reply = _decode_single(stdout_buffer.getvalue())
        assert isinstance(reply, dict)
        assert reply["status"] == "panic"
        assert reply["payload"] == "handler crashed"

    def test_send_panic_honors_outbound_limit(
        self, stdout_buffer: BytesIO,
    ) -> None:
        """A reply too large for the config is not written."""
        config = CodecConfig(max_outbound_size=16)
        result = send_panic(RuntimeError("x" * 100), config)
        assert not isinstance(result, IOSuccess)
        assert stdout_buffer.getvalue() == b""
