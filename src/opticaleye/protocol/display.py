"""Human-readable rendering of raw protocol bytes.

Control characters are shown by their ASCII mnemonic in brackets, printable
ASCII as itself, and bytes above 0x7F as '#' followed by two hex digits.
"""

from __future__ import annotations

CONTROL_CHARACTER_NAMES: tuple[str, ...] = (
    "NUL", "SOH", "STX", "ETX", "EOT", "ENQ", "ACK", "BEL",
    "BS", "TAB", "LF", "VT", "FF", "CR", "SO", "SI",
    "DLE", "DC1", "DC2", "DC3", "DC4", "NAK", "SYN", "ETB",
    "CAN", "EM", "SUB", "ESC", "FS", "GS", "RS", "US",
)  # fmt: skip


def render_char(byte_val: int) -> str:
    """Render one byte: '[CR]', 'A' or '#e4'."""
    if byte_val < 0x20:
        return f"[{CONTROL_CHARACTER_NAMES[byte_val]}]"

    if byte_val == 0x7F:
        return "[DEL]"

    if byte_val < 0x7F:
        return chr(byte_val)

    return f"#{byte_val:02x}"


def render_ascii(data: bytes) -> str:
    """Render a byte sequence with control-char rendering."""
    return "".join(render_char(byte_val) for byte_val in data)


def render_named(data: bytes) -> str:
    """Render a byte sequence with control-char rendering, breaking lines after each CR."""
    return "".join(render_char(byte_val) + ("\n" if byte_val == 0x0D else "") for byte_val in data)


def render_hex(data: bytes) -> str:
    """Render bytes as space-prefixed lowercase hex pairs: ' 40 3f 10'."""
    return "".join(f" {byte_val:02x}" for byte_val in data)
