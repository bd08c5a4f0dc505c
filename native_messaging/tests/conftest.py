"""Shared test fixtures for the native messaging test suite."""
from __future__ import annotations

import logging
import struct
from io import BytesIO
from typing import TYPE_CHECKING

import pytest

from native_messaging.debug_log import LOGGER_NAME

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from pytest_mock import MockerFixture


@pytest.fixture
def make_frame() -> Callable[[bytes], bytes]:
    """Return a helper that prefixes a body with its LE length."""

    def _make(body: bytes) -> bytes:
        return struct.pack("<I", len(body)) + body

    return _make


@pytest.fixture
def stdout_buffer(mocker: MockerFixture) -> BytesIO:
    """Patch the stdout seam with an in-memory buffer."""
    buf = BytesIO()
    mocker.patch(
        "native_messaging.io_ops._get_stdout_buffer",
        return_value=buf,
    )
    return buf


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    """Yield the package logger with no handlers, restored afterwards."""
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)
