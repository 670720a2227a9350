"""Shared test fixtures for pyOpticalEye tests."""

from __future__ import annotations

import os
import pty
import select
import threading
import time
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from opticaleye.log import configure_structlog
from opticaleye.protocol.crc import crc16
from opticaleye.protocol.response import UNKNOWN_VARIABLE_RESPONSE
from opticaleye.protocol.stuffing import destuff, stuff

# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def structlog_to_stdlib() -> None:
    """Route library log events to standard logging so caplog sees them."""
    configure_structlog()


# =============================================================================
# Frame builders
# =============================================================================


def build_response(variable_id: int, unit_code: int, payload: bytes = b"", crc: int | None = None) -> bytes:
    """Build a plain (de-stuffed) read variable response with a valid checksum."""
    body = bytes([0x3F, 0x10, variable_id >> 8, variable_id & 0xFF, unit_code]) + payload
    if crc is None:
        crc = crc16(body)
    return bytes([0x40]) + body + bytes([crc >> 8, crc & 0xFF, 0x0D])


@pytest.fixture
def response_frame() -> Callable[..., bytes]:
    """Builder for plain response frames: response_frame(variable_id, unit_code, payload)."""
    return build_response


# =============================================================================
# Mocked connections
# =============================================================================


@pytest.fixture
def mock_serial_connection() -> tuple[AsyncMock, AsyncMock]:
    """Create mock reader and writer for serial connections."""
    mock_reader = AsyncMock()
    mock_writer = AsyncMock()

    mock_writer.write = MagicMock()
    mock_writer.drain = AsyncMock()
    mock_writer.close = MagicMock()
    mock_writer.wait_closed = AsyncMock()
    mock_writer.transport = MagicMock()

    mock_reader.readexactly = AsyncMock()

    return mock_reader, mock_writer


@pytest.fixture
def mock_open_serial_connection(mock_serial_connection: tuple[AsyncMock, AsyncMock]) -> Any:
    """Mock serial_asyncio_fast.open_serial_connection."""
    mock_reader, mock_writer = mock_serial_connection

    async def mock_open(*_args: Any, **_kwargs: Any) -> tuple[AsyncMock, AsyncMock]:
        return mock_reader, mock_writer

    return mock_open


class FakeChannel:
    """In-memory byte channel standing in for OpticalEyeTransport.

    Bytes queued with feed() are handed out by read(); an empty queue reads as
    a timeout (empty bytes).
    """

    def __init__(self, data: bytes = b"") -> None:
        self.incoming = bytearray(data)
        self.written: list[bytes] = []
        self.read_timeouts: list[float] = []
        self.discard_count = 0

    def feed(self, data: bytes) -> None:
        self.incoming.extend(data)

    async def write(self, data: bytes) -> None:
        self.written.append(bytes(data))

    async def read(self, size: int, timeout: float = 0.0) -> bytes:
        self.read_timeouts.append(timeout)
        data = bytes(self.incoming[:size])
        del self.incoming[:size]
        return data

    def discard_output(self) -> None:
        self.discard_count += 1


@pytest.fixture
def fake_channel() -> FakeChannel:
    return FakeChannel()


# =============================================================================
# Virtual meter on a pty
# =============================================================================


class VirtualMeter:
    """Virtual meter answering read variable requests on a pty.

    Variables are plain response frames keyed by id; requests for other ids
    are answered with the unknown variable response. The IEC 1107 sign-on is
    answered with identification.
    """

    def __init__(self) -> None:
        self.master_fd: int = -1
        self.slave_fd: int = -1
        self.slave_name: str = ""
        self.server_thread: threading.Thread | None = None
        self.running = False
        self.variables: dict[int, bytes] = {}
        self.identification = b"/KAM5 382Lx7\r\n"
        self.response_delay = 0.0
        self.silent = False
        self.requests: list[bytes] = []

    def start(self) -> None:
        """Start the virtual meter."""
        if os.name == "nt":
            pytest.skip("pty not available on Windows")

        self.master_fd, self.slave_fd = pty.openpty()
        self.slave_name = os.ttyname(self.slave_fd)
        self.running = True

        self.server_thread = threading.Thread(target=self._server_loop, daemon=True)
        self.server_thread.start()

    def stop(self) -> None:
        """Stop the virtual meter."""
        self.running = False
        if self.server_thread:
            self.server_thread.join(timeout=1.0)

        if self.master_fd >= 0:
            os.close(self.master_fd)
        if self.slave_fd >= 0:
            os.close(self.slave_fd)

    def _server_loop(self) -> None:
        buffer = bytearray()

        while self.running:
            ready, _, _ = select.select([self.master_fd], [], [], 0.1)
            if not ready:
                continue

            try:
                data = os.read(self.master_fd, 1024)
            except OSError:
                if self.running:
                    time.sleep(0.01)
                continue

            buffer.extend(data)

            # Requests end with CR (binary) or CR LF (sign-on)
            while 0x0D in buffer:
                end = buffer.index(0x0D) + 1
                if buffer[:1] == b"/" and len(buffer) > end and buffer[end] == 0x0A:
                    end += 1
                elif buffer[:1] == b"/":
                    break

                request = bytes(buffer[:end])
                del buffer[:end]

                self.requests.append(request)

                response = self._generate_response(request)
                if response and self.running and not self.silent:
                    if self.response_delay > 0:
                        time.sleep(self.response_delay)
                    os.write(self.master_fd, response)

    def _generate_response(self, request: bytes) -> bytes:
        if request.startswith(b"/?!"):
            return self.identification

        plain = destuff(request)
        if len(plain) != 9 or plain[0] != 0x80:
            return b""

        variable_id = plain[4] << 8 | plain[5]
        frame = self.variables.get(variable_id)
        if frame is None:
            return UNKNOWN_VARIABLE_RESPONSE

        return stuff(frame)


@pytest.fixture
def virtual_meter() -> Generator[VirtualMeter]:
    """Create a virtual meter on a pty."""
    meter = VirtualMeter()
    meter.start()
    yield meter
    meter.stop()


# Test markers for different test types
def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test (fast, uses mocks)")
    config.addinivalue_line("markers", "integration: mark test as an integration test (slower, uses real I/O)")
    config.addinivalue_line("markers", "serial: mark test as requiring serial port simulation")
