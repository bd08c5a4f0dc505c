"""Shared type definitions for native messaging framing."""
from __future__ import annotations

from typing import Annotated, TypeAlias, Union

from pydantic import BaseModel, ConfigDict, Field

HEADER_SIZE = 4
HEADER_FORMAT = "<I"

# Largest payload the 4-byte length prefix can declare.
MAX_FRAME_SIZE = 0xFFFFFFFF

# Chrome rejects messages from the native host larger than 1 MiB.
CHROME_MAX_OUTBOUND_SIZE = 1024 * 1024

JsonValue: TypeAlias = Union[
    dict[str, "JsonValue"],
    list["JsonValue"],
    str,
    int,
    float,
    bool,
    None,
]

PayloadLimit = Annotated[int, Field(gt=0, le=MAX_FRAME_SIZE)]


class CodecConfig(BaseModel):
    """Payload size limits applied by the reader and writer.

    None means only the length prefix range bounds the payload.
    The authoritative limits depend on the browser, so callers
    pick them instead of the codec hard-coding one.
    """

    model_config = ConfigDict(frozen=True)

    max_inbound_size: PayloadLimit | None = None
    max_outbound_size: PayloadLimit | None = None

    def outbound_limit(self) -> int:
        """Return the effective upper bound for written payloads."""
        if self.max_outbound_size is None:
            return MAX_FRAME_SIZE
        return self.max_outbound_size


DEFAULT_CONFIG = CodecConfig()

CHROME_CONFIG = CodecConfig(max_outbound_size=CHROME_MAX_OUTBOUND_SIZE)
