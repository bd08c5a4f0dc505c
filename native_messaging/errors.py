"""Codec error types for native messaging framing."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ErrorKind = Literal[
    "EndOfInput",
    "TruncatedMessage",
    "MalformedPayload",
    "SerializationError",
    "MessageTooLarge",
    "IOError",
]

END_OF_INPUT: ErrorKind = "EndOfInput"
TRUNCATED_MESSAGE: ErrorKind = "TruncatedMessage"
MALFORMED_PAYLOAD: ErrorKind = "MalformedPayload"
SERIALIZATION_ERROR: ErrorKind = "SerializationError"
MESSAGE_TOO_LARGE: ErrorKind = "MessageTooLarge"
IO_ERROR: ErrorKind = "IOError"


@dataclass(frozen=True)
class CodecError:
    """Structured error for a failed read or write of one frame.

    Only END_OF_INPUT is a normal outcome: the peer closed the
    channel between frames. Every other kind means the session
    should end.
    """

    operation: str
    error_type: ErrorKind
    message: str
    context: dict[str, object] = field(default_factory=dict)

    @property
    def is_end_of_input(self) -> bool:
        """True when the stream closed cleanly before a frame."""
        return self.error_type == END_OF_INPUT

    def __str__(self) -> str:
        """Human-readable error representation for logging."""
        max_len = 500
        base = f"CodecError[{self.operation}] {self.error_type}: {self.message}"
        if self.context:
            ctx_str = str(self.context)
            if len(ctx_str) > max_len:
                ctx_str = ctx_str[: max_len - 3] + "..."
            base += f" | context={ctx_str}"
        return base
