"""Frame checksum.

The meter protects every frame body (everything between the start token and
the checksum itself) with a 16-bit CRC. The byte-wise shift/xor recurrence used
here yields the same values as the table-driven CRC-16/XMODEM (polynomial
0x1021, initial value 0).

Known values:
    - 3F 10 -> 0x079A (unknown variable response)
    - 3F 10 01 03 E9 -> 0x7CD4 (read variable 1001)
    - 3F 10 01 04 06 -> 0xE982 (read variable 1030)
"""

from __future__ import annotations


def crc16(data: bytes, offset: int = 0, length: int | None = None) -> int:
    """Compute the 16-bit frame checksum.

    Args:
        data: Buffer holding the bytes to check
        offset: Index of the first byte to include
        length: Number of bytes to include (default: up to the end of data)

    Returns:
        Checksum in the range 0x0000-0xFFFF

    Raises:
        ValueError: If offset/length address bytes outside data
    """
    if length is None:
        length = len(data) - offset

    if offset < 0 or length < 0 or offset + length > len(data):
        raise ValueError(f"Checksum range [{offset}, {offset + length}) outside buffer of {len(data)} bytes")

    crc = 0x0000

    for byte_val in data[offset : offset + length]:
        x = ((crc >> 8) ^ byte_val) & 0xFF
        x ^= x >> 4
        crc = ((crc << 8) ^ (x << 12) ^ (x << 5) ^ x) & 0xFFFF

    return crc
