"""Response reading under a wall-clock deadline.

The meter answers a request with a single frame delimited by the start token
0x40 and the end token 0x0D. Reading happens in two phases, each with its own
deadline:

    1. Synchronise: discard bytes until the start token arrives
    2. Collect: append bytes until the end token arrives

Both phases read one byte at a time so the deadline is re-checked after every
byte. The returned frame is still stuffed.
"""

from __future__ import annotations

import time
from typing import Protocol

from ..exceptions import OpticalEyeTimeoutError
from ..log import get_logger
from .common import FRAME_END, CommunicationDirection

logger = get_logger(__name__)

DEFAULT_RESPONSE_TIMEOUT = 3.0  # Seconds per phase

DEFAULT_MAX_LENGTH = 8192  # Upper bound on a collected frame


class ByteChannel(Protocol):
    """The part of the transport the reader depends on."""

    async def read(self, size: int, timeout: float = 0.0) -> bytes: ...

    def discard_output(self) -> None: ...


async def _read_byte(transport: ByteChannel, deadline: float) -> int | None:
    """Read one byte before the deadline, None if the deadline passed."""
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        return None

    data = await transport.read(1, remaining)
    transport.discard_output()

    if not data:
        return None
    return data[0]


async def read_response(
    transport: ByteChannel,
    timeout: float = DEFAULT_RESPONSE_TIMEOUT,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> bytes:
    """Read one stuffed response frame.

    Args:
        transport: Open byte channel
        timeout: Deadline in seconds for each phase
        max_length: Maximum number of bytes collected, start token included

    Returns:
        The stuffed frame from the start token up to and including the end
        token. If the collect phase runs out of time or space the partial
        frame is returned.

    Raises:
        OpticalEyeTimeoutError: If no start token arrived within the deadline
    """
    start_token = CommunicationDirection.SLAVE_TO_MASTER.start_token

    # Phase 1: synchronise on the start token
    deadline = time.monotonic() + timeout
    skipped = 0

    while True:
        byte_val = await _read_byte(transport, deadline)

        if byte_val is None:
            logger.debug("response_timeout", phase="synchronise", skipped=skipped, timeout=timeout)
            raise OpticalEyeTimeoutError(f"No response within {timeout:.1f} s")

        if byte_val == start_token:
            break

        skipped += 1

    if skipped:
        logger.debug("bytes_skipped_before_start", count=skipped)

    # Phase 2: collect until the end token
    frame = bytearray([start_token])
    deadline = time.monotonic() + timeout

    while len(frame) < max_length:
        byte_val = await _read_byte(transport, deadline)

        if byte_val is None:
            logger.warning("response_timeout", phase="collect", length=len(frame), timeout=timeout)
            return bytes(frame)

        frame.append(byte_val)

        if byte_val == FRAME_END:
            return bytes(frame)

    logger.warning("response_too_long", length=len(frame), max_length=max_length)
    return bytes(frame)
