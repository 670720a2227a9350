"""Read variable request frames.

A request is always 9 bytes in plain form:

    80 3F 10 01 <VarIdHi> <VarIdLo> <CrcHi> <CrcLo> 0D

The checksum covers the 5 bytes from the address through the low byte of the
variable id. The frame is stuffed before transmission.
"""

from __future__ import annotations

from .common import FRAME_END, METER_ADDRESS, READ_VARIABLE_COMMAND, CommunicationDirection
from .crc import crc16
from .stuffing import stuff

REQUEST_LENGTH = 9  # Plain request length, including start and end token

VARIABLE_ID_MAXIMUM = 0xFFFF  # Variable ids are unsigned 16-bit


def build_request(variable_id: int) -> bytes:
    """Build the plain read variable request for a variable id.

    Args:
        variable_id: Unsigned 16-bit variable identifier

    Returns:
        The 9-byte plain request frame

    Raises:
        ValueError: If variable_id does not fit in 16 bits
    """
    if not 0 <= variable_id <= VARIABLE_ID_MAXIMUM:
        raise ValueError(f"Variable id out of range: {variable_id} (expected 0-{VARIABLE_ID_MAXIMUM})")

    frame = bytearray(
        [
            CommunicationDirection.MASTER_TO_SLAVE.start_token,
            METER_ADDRESS,
            *READ_VARIABLE_COMMAND,
            variable_id >> 8,
            variable_id & 0xFF,
        ]
    )

    crc = crc16(frame, 1, 5)

    frame.extend((crc >> 8, crc & 0xFF, FRAME_END))

    return bytes(frame)


def encode_request(variable_id: int) -> bytes:
    """Build the read variable request in its stuffed wire form."""
    return stuff(build_request(variable_id))
