"""Optical eye transport layer for handling connections and raw I/O."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any

import serial_asyncio_fast

from .exceptions import OpticalEyeConnectionError
from .log import get_logger

logger = get_logger(__name__)

# Baud rates accepted by name, as offered by the optical eye heads
BAUDRATES: dict[str, int] = {
    name: int(name)
    for name in (
        "50", "75", "110", "134", "150", "200", "300", "600",
        "1200", "1800", "2400", "4800", "9600", "19200", "38400",
    )
}  # fmt: skip


def baudrate_of(name: str) -> int:
    """Return the baud rate for its name.

    Raises:
        ValueError: If the name is not a supported baud rate
    """
    try:
        return BAUDRATES[name.strip()]
    except KeyError:
        raise ValueError(f"Unknown baudrate '{name}'") from None


class SerialMode(Enum):
    """Character framing of the optical eye link.

    - MODE_8N2: Binary read variable protocol (8 data bits, no parity, 2 stop bits)
    - MODE_7E1: IEC 1107 text mode (7 data bits, even parity, 1 stop bit)
    """

    MODE_8N2 = (8, "N", 2)
    MODE_7E1 = (7, "E", 1)

    @property
    def bytesize(self) -> int:
        return self.value[0]

    @property
    def parity(self) -> str:
        return self.value[1]

    @property
    def stopbits(self) -> float:
        return self.value[2]


class OpticalEyeTransport:
    """Handles connection and raw byte I/O for an optical eye head.

    Supports multiple connection types:
    - Serial ports: /dev/ttyUSB0, COM3
    - TCP sockets: socket://192.168.1.100:10001
    - RFC2217: rfc2217://192.168.1.100:10001

    All connection types are handled transparently by pyserial-asyncio-fast.

    The binary protocol runs at 8N2, the IEC 1107 sign-on at 7E1 (see SerialMode).
    """

    # Public attributes
    url: str
    mode: SerialMode
    transmission_multiplier: float
    serial_kwargs: dict[str, Any]

    # Private attributes
    _reader: asyncio.StreamReader | None
    _writer: asyncio.StreamWriter | None
    _connected: bool

    def __init__(
        self,
        url: str,
        baudrate: int = 9600,
        mode: SerialMode = SerialMode.MODE_8N2,
        transmission_multiplier: float = 1.2,
        **kwargs: Any,
    ) -> None:
        """Initialize transport (does not open connection).

        Args:
            url: Connection URL (serial port or socket://host:port or rfc2217://host:port)
            baudrate: Baud rate for serial connections (default 9600 bps)
            mode: Character framing (default 8N2 for the binary protocol)
            transmission_multiplier: Multiplier for transmission time calculation
                                   for slow/problematic devices (default 1.2 = 20% extra time)
            **kwargs: Additional serial parameters (xonxoff, rtscts, dsrdtr, etc.)
        """
        self.url = url
        self.mode = mode
        self.transmission_multiplier = transmission_multiplier

        self.serial_kwargs = {
            "baudrate": baudrate,
            "bytesize": mode.bytesize,
            "parity": mode.parity,
            "stopbits": mode.stopbits,
            **kwargs,
        }

        self._reader = None
        self._writer = None
        self._connected = False

    def _calculate_timeout(self, size: int, timeout: float = 0.0) -> float:
        """Calculate total timeout for reading data.

        Args:
            size: Number of bytes to read
            timeout: Base timeout from the caller (time left until its deadline)

        Returns:
            Total timeout in seconds including the transmission time of size bytes
        """
        bits_per_byte = (
            1 +  # start bit
            int(self.serial_kwargs["bytesize"]) +  # data bits
            (1 if self.serial_kwargs["parity"] != "N" else 0) +  # parity bit
            float(self.serial_kwargs["stopbits"])  # stop bits
        )  # fmt: skip

        base_transmission_time = (size * bits_per_byte) / int(self.serial_kwargs["baudrate"])

        return timeout + base_transmission_time * self.transmission_multiplier

    async def open(self) -> None:
        """Open connection to the optical eye.

        Raises:
            OpticalEyeConnectionError: If connection fails
        """
        if self._connected:
            return

        try:
            (
                self._reader,
                self._writer,
            ) = await serial_asyncio_fast.open_serial_connection(url=self.url, **self.serial_kwargs)
            self._connected = True
        except Exception as e:
            raise OpticalEyeConnectionError(f"Failed to open connection to {self.url}: {e}") from e

        logger.debug("transport_opened", url=self.url, mode=self.mode.name, baudrate=self.serial_kwargs["baudrate"])

    async def close(self) -> None:
        """Close connection (idempotent - safe to call multiple times)."""
        if not self._connected:
            return

        if self._writer:
            try:
                self._writer.close()
                await self._writer.wait_closed()
            except Exception as e:
                logger.debug("transport_close_failed", url=self.url, error=str(e))

        self._reader = None
        self._writer = None
        self._connected = False

    def is_connected(self) -> bool:
        """Check if transport is connected."""
        return self._connected

    async def write(self, data: bytes) -> None:
        """Write raw bytes to transport.

        Raises:
            OpticalEyeConnectionError: If not connected or the write fails
        """
        if not self._connected or not self._writer:
            raise OpticalEyeConnectionError("Transport is not connected")

        try:
            self._writer.write(data)
            await self._writer.drain()
        except Exception as e:
            self._connected = False
            raise OpticalEyeConnectionError(f"Failed to write data: {e}") from e

    async def read(self, size: int, timeout: float = 0.0) -> bytes:
        """Read exactly size bytes within timeout plus their transmission time.

        Args:
            size: Number of bytes to read
            timeout: Base timeout in seconds

        Returns:
            Exactly size bytes, or empty bytes on timeout. If the connection
            closes midway the bytes received so far are returned.

        Raises:
            OpticalEyeConnectionError: If not connected or the read fails
        """
        if not self._connected or not self._reader:
            raise OpticalEyeConnectionError("Transport is not connected")

        try:
            return await asyncio.wait_for(
                self._reader.readexactly(size),
                timeout=self._calculate_timeout(size, timeout),
            )
        except TimeoutError:
            return b""
        except asyncio.IncompleteReadError as e:
            return e.partial
        except Exception as e:
            self._connected = False
            raise OpticalEyeConnectionError(f"Failed to read data: {e}") from e

    def discard_output(self) -> None:
        """Drop bytes queued for transmission but not yet sent.

        Only serial connections have an output buffer to reset; for other
        connection types this does nothing.
        """
        if not self._connected or not self._writer:
            return

        serial = getattr(self._writer.transport, "serial", None)
        if serial is None:
            return

        try:
            serial.reset_output_buffer()
        except Exception as e:
            logger.debug("discard_output_failed", url=self.url, error=str(e))

    async def __aenter__(self) -> OpticalEyeTransport:
        """Async context manager entry."""
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
