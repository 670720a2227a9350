"""Byte-stuffing codec for frame bodies.

The bytes 0x06, 0x0D, 0x1B, 0x40 and 0x80 are used as control and frame
boundary tokens on the wire, so they never appear inside a frame body. Each of
them is sent as the escape marker 0x1B followed by the byte complemented:

    0x06 -> 1B F9
    0x0D -> 1B F2
    0x1B -> 1B E4
    0x40 -> 1B BF
    0x80 -> 1B 7F

The first and last byte of a frame (start and end tokens) are never escaped.
"""

from __future__ import annotations

from ..log import get_logger
from .common import ESCAPE

logger = get_logger(__name__)

# =============================================================================
# Escape Table
# =============================================================================

RESERVED_BYTES = frozenset((0x06, 0x0D, 0x1B, 0x40, 0x80))

ESCAPE_SENTINELS = {byte_val: byte_val ^ 0xFF for byte_val in RESERVED_BYTES}  # 0x06 -> 0xF9, ...

_KNOWN_SENTINELS = frozenset(ESCAPE_SENTINELS.values())


def stuff(frame: bytes) -> bytes:
    """Escape reserved bytes in the interior of a plain frame.

    Args:
        frame: Plain frame including start and end tokens

    Returns:
        Wire form of the frame. Frames shorter than two bytes are returned unchanged.
    """
    if len(frame) < 2:
        return bytes(frame)

    stuffed = bytearray(frame[:1])  # Start token

    for byte_val in frame[1:-1]:
        if byte_val in RESERVED_BYTES:
            stuffed.append(ESCAPE)
            stuffed.append(ESCAPE_SENTINELS[byte_val])
        else:
            stuffed.append(byte_val)

    stuffed.append(frame[-1])  # End token

    return bytes(stuffed)


def destuff(frame: bytes) -> bytes:
    """Reverse the escaping of a stuffed frame.

    Every escape marker is dropped and the byte following it is complemented.
    Unknown sentinels are complemented as well, which is the best recovery
    available; an escape marker at the very end of the buffer is dropped.

    Args:
        frame: Stuffed frame as received from the wire

    Returns:
        Plain frame; its length is the de-stuffed length
    """
    plain = bytearray()

    index = 0
    while index < len(frame):
        byte_val = frame[index]

        if byte_val == ESCAPE:
            index += 1

            if index >= len(frame):
                logger.debug("dangling_escape_marker", length=len(frame))
                break

            sentinel = frame[index]

            if sentinel not in _KNOWN_SENTINELS:
                logger.debug("unknown_escape_sentinel", sentinel=f"0x{sentinel:02X}", offset=index)

            plain.append(sentinel ^ 0xFF)
        else:
            plain.append(byte_val)

        index += 1

    return bytes(plain)
