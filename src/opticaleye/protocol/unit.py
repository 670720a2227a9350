"""Unit table and representation kinds.

Every response frame carries a unit code (offset 5). The code selects both the
display unit and the representation kind, which determines how the payload
bytes are parsed.

The table has 65 entries (codes 0-64). Code 0 was empty in the source
documentation. Code 51 was undocumented as well; it is taken to be a variable
length integer used for counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Representation(Enum):
    """Data representation kinds of the unit table."""

    UNKNOWN = auto()  # No known representation, shown as raw data
    INT = auto()  # Integer (not yet supported)
    FLOAT = auto()  # Decimal floating point: length, sign/exponent, mantissa
    BYTE = auto()  # Byte-sized time values (not yet supported)
    TIME = auto()  # hh:mm:ss as a decimal coded 32-bit integer
    DATE2 = auto()  # mm,dd (not yet supported)
    DATE3 = auto()  # yy,mm,dd as a decimal coded 32-bit integer
    DATE4 = auto()  # yyyy,mm,dd (not yet supported)
    ASCII = auto()  # Text with an embedded length
    BITS = auto()  # Bitfield (not yet supported)
    RTC = auto()  # Real time clock (not yet supported)
    RTCQ = auto()  # Real time clock with quality (not yet supported)
    DATETIME = auto()  # Date and time (not yet supported)
    VARINT = auto()  # Variable length unsigned big-endian integer


@dataclass(frozen=True, kw_only=True)
class UnitDescriptor:
    """One entry of the unit table."""

    code: int  # Unit code as found in the response frame

    unit: str  # Display unit

    representation: Representation


_R = Representation

_UNIT_DEFINITIONS: tuple[tuple[str, Representation], ...] = (
    ("Unit0", _R.UNKNOWN),  # 0 (was empty)
    # 1-4 Power
    ("Wh", _R.FLOAT),
    ("kWh", _R.FLOAT),
    ("MWh", _R.FLOAT),
    ("GWh", _R.FLOAT),
    # 5-8 Energy
    ("j", _R.FLOAT),
    ("kj", _R.FLOAT),
    ("Mj", _R.FLOAT),
    ("Gj", _R.FLOAT),
    # 9-12 Heat energy
    ("Cal", _R.FLOAT),
    ("kCal", _R.FLOAT),
    ("Mcal", _R.FLOAT),
    ("Gcal", _R.FLOAT),
    # 13-16 Reactive energy
    ("varh", _R.FLOAT),
    ("kvarh", _R.FLOAT),
    ("Mvarh", _R.FLOAT),
    ("Gvarh", _R.FLOAT),
    # 17-20 Apparent energy
    ("VAh", _R.FLOAT),
    ("kVAh", _R.FLOAT),
    ("MVAh", _R.FLOAT),
    ("GVAh", _R.FLOAT),
    # 21-24 Power
    ("kW", _R.FLOAT),
    ("kW", _R.FLOAT),
    ("MW", _R.FLOAT),
    ("GW", _R.FLOAT),
    # 25-28 Reactive power
    ("kvar", _R.FLOAT),
    ("kvar", _R.FLOAT),
    ("Mvar", _R.FLOAT),
    ("Gvar", _R.FLOAT),
    # 29-32 Apparent power
    ("VA", _R.FLOAT),
    ("kVA", _R.FLOAT),
    ("MVA", _R.FLOAT),
    ("GVA", _R.FLOAT),
    # 33-36 Voltage/Current
    ("V", _R.FLOAT),
    ("A", _R.FLOAT),
    ("kV", _R.FLOAT),
    ("kA", _R.FLOAT),
    # 37-38 Temperature
    ("C", _R.FLOAT),
    ("K", _R.FLOAT),
    # 39-40 Volume
    ("l", _R.FLOAT),
    ("m3", _R.FLOAT),
    # 41-42 Flow of volume
    ("l/h", _R.FLOAT),
    ("m3/h", _R.FLOAT),
    ("m3xC", _R.FLOAT),  # 43
    ("ton", _R.FLOAT),  # 44 Mass
    ("ton/h", _R.FLOAT),  # 45 Flow of mass
    ("h", _R.BYTE),  # 46 Time
    # 47-50 Composite time
    ("hh,mm,ss", _R.TIME),
    ("yy,mm,dd", _R.DATE3),
    ("yyyy,mm,dd", _R.DATE4),
    ("mm,dd", _R.DATE2),
    ("[int]", _R.VARINT),  # 51 Counts
    ("bar", _R.FLOAT),  # 52 Pressure
    ("RTC", _R.RTC),  # 53 Composite time
    ("ASCII", _R.ASCII),  # 54 Textual data
    # 55-57 Units times ten
    ("m3 x 10", _R.FLOAT),
    ("ton x 10", _R.FLOAT),
    ("GJ x 10", _R.FLOAT),
    ("minutes", _R.BYTE),  # 58 Time
    ("Bitfield", _R.BITS),  # 59 Binary data
    # 60-62 Time
    ("s", _R.BYTE),
    ("ms", _R.INT),
    ("days", _R.INT),
    # 63-64 Composite time
    ("RTC-Q", _R.RTCQ),
    ("Datetime", _R.DATETIME),
)

UNITS: tuple[UnitDescriptor, ...] = tuple(
    UnitDescriptor(code=code, unit=unit, representation=representation)
    for code, (unit, representation) in enumerate(_UNIT_DEFINITIONS)
)


def unit_of(code: int) -> UnitDescriptor | None:
    """Return the unit table entry for a unit code, or None if outside the table."""
    if 0 <= code < len(UNITS):
        return UNITS[code]
    return None
