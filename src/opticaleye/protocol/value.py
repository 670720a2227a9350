"""Decoded value representation.

Every decoded response yields exactly one Value. The family is closed: each
subclass carries a ValueKind tag, the unit string from the unit table and the
fields of its representation. str() gives the display form used by the
command line.

Classes:
    - NoValue: The meter answered that the variable is unknown
    - FloatValue: Decimal floating point with unit and display precision
    - TimeValue: Time of day (hh:mm:ss)
    - DateValue: Date (yy, month, dd)
    - TextValue: ASCII text with declared and actual length
    - IntegerValue: Variable length unsigned integer
    - RawValue: Data not interpreted (unsupported, malformed or unknown)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import ClassVar

from .display import render_ascii, render_hex

MONTH_NAMES: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)  # fmt: skip

EXPECTED_COMPOSITE_LENGTH = 4  # Declared length of TIME and DATE3 payloads


class ValueKind(StrEnum):
    NONE = "none"
    FLOAT = "float"
    TIME = "time"
    DATE = "date"
    TEXT = "text"
    INTEGER = "integer"
    RAW = "raw"


class RawReason(StrEnum):
    """Why a value was left as raw bytes."""

    UNSUPPORTED = "unsupported"  # Known representation without a decoder
    UNSUPPORTED_LENGTH = "unsupported length"  # Frame length not valid for the representation
    MALFORMED = "malformed"  # Declared length exceeds the received data
    UNKNOWN = "unknown"  # Unit without a representation


class Value(ABC):
    kind: ClassVar[ValueKind]

    unit: str

    @abstractmethod
    def __init__(self, unit: str) -> None:
        self.unit = unit

    @abstractmethod
    def __str__(self) -> str: ...


class NoValue(Value):
    kind = ValueKind.NONE

    def __init__(self) -> None:
        super().__init__("")

    def __str__(self) -> str:
        return "No value returned."

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NoValue)

    def __hash__(self) -> int:
        return hash(NoValue)


class FloatValue(float, Value):
    kind = ValueKind.FLOAT

    precision: int

    def __new__(cls, numeric_value: float, unit: str = "", precision: int = 3) -> FloatValue:
        # Create float object with the numeric value
        instance = super().__new__(cls, numeric_value)
        return instance

    def __init__(self, numeric_value: float, unit: str = "", precision: int = 3) -> None:
        # Don't call float.__init__, call Value.__init__ directly
        Value.__init__(self, unit)
        self.precision = precision

    def __str__(self) -> str:
        return f"{float(self):.{self.precision}f} {self.unit}"

    def __repr__(self) -> str:
        return f"FloatValue({float(self)!r}, unit={self.unit!r}, precision={self.precision})"


class IntegerValue(int, Value):
    """Variable length unsigned integer.

    complete is False when the declared length is shorter than the payload; the
    value then covers only the declared bytes and is left out of the display.
    """

    kind = ValueKind.INTEGER

    declared_length: int
    complete: bool

    def __new__(cls, numeric_value: int, unit: str = "", declared_length: int = 0, complete: bool = True) -> IntegerValue:
        instance = super().__new__(cls, numeric_value)
        return instance

    def __init__(self, numeric_value: int, unit: str = "", declared_length: int = 0, complete: bool = True) -> None:
        Value.__init__(self, unit)
        self.declared_length = declared_length
        self.complete = complete

    def __str__(self) -> str:
        if self.complete:
            return f"{int(self)} [{self.unit}, length {self.declared_length}]"
        return f"[{self.unit}, length {self.declared_length}]"

    def __repr__(self) -> str:
        return f"IntegerValue({int(self)!r}, unit={self.unit!r}, declared_length={self.declared_length}, complete={self.complete})"


class TextValue(str, Value):
    """ASCII text.

    The text is stored with control-char rendering applied. The length is
    encoded twice by the meter: once in the frame length and once in the data
    area itself. Both are kept so a mismatch stays visible.
    """

    kind = ValueKind.TEXT

    raw: bytes
    declared_length: int

    def __new__(cls, raw: bytes, unit: str = "", declared_length: int = 0) -> TextValue:
        instance = super().__new__(cls, render_ascii(raw))
        return instance

    def __init__(self, raw: bytes, unit: str = "", declared_length: int = 0) -> None:
        Value.__init__(self, unit)
        self.raw = bytes(raw)
        self.declared_length = declared_length

    @property
    def actual_length(self) -> int:
        """Number of text bytes received."""
        return len(self.raw)

    @property
    def length_matches(self) -> bool:
        return self.declared_length == self.actual_length

    def __str__(self) -> str:
        text = str.__str__(self)

        if self.length_matches:
            return f'"{text}" [{self.unit}, length {self.declared_length}]'
        return f'"{text}" [{self.unit}, length {self.actual_length}, declared length {self.declared_length}]'

    def __repr__(self) -> str:
        return f"TextValue({self.raw!r}, unit={self.unit!r}, declared_length={self.declared_length})"


class _CompositeValue(Value):
    """Decimal coded composite (time or date) with a declared payload length."""

    declared_length: int

    def __init__(self, unit: str, declared_length: int) -> None:
        super().__init__(unit)
        self.declared_length = declared_length

    @property
    def length_matches(self) -> bool:
        return self.declared_length == EXPECTED_COMPOSITE_LENGTH

    def _suffix(self) -> str:
        if self.length_matches:
            return f"[{self.unit}]"
        return f"[{self.unit}, unexpected data length: {self.declared_length}]"


class TimeValue(_CompositeValue):
    kind = ValueKind.TIME

    def __init__(self, hour: int, minute: int, second: int, unit: str = "", declared_length: int = 4) -> None:
        super().__init__(unit, declared_length)
        self.hour = hour
        self.minute = minute
        self.second = second

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d} {self._suffix()}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeValue):
            return NotImplemented
        return (self.hour, self.minute, self.second) == (other.hour, other.minute, other.second)

    def __hash__(self) -> int:
        return hash((self.hour, self.minute, self.second))


class DateValue(_CompositeValue):
    """Date with a two digit year, as sent by the meter."""

    kind = ValueKind.DATE

    def __init__(self, year: int, month: int, day: int, unit: str = "", declared_length: int = 4) -> None:
        super().__init__(unit, declared_length)
        self.year = year
        self.month = month
        self.day = day

    @property
    def month_name(self) -> str:
        if 1 <= self.month <= len(MONTH_NAMES):
            return MONTH_NAMES[self.month - 1]
        if self.month == 0:
            return "(Undefined month: zero)"
        return f"(Undefined month: {self.month})"

    def __str__(self) -> str:
        return f"{self.year:02d}, {self.month_name}, {self.day:02d} {self._suffix()}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return (self.year, self.month, self.day) == (other.year, other.month, other.day)

    def __hash__(self) -> int:
        return hash((self.year, self.month, self.day))


class RawValue(Value):
    """Bytes the decoder declined to interpret.

    Attributes:
        reason: Why the bytes were not interpreted
        tag: Representation name shown to the user (e.g. "INT", "DATE2")
        data: The payload, or the whole frame for UNSUPPORTED_LENGTH
        unit_code: Unit code from the frame
    """

    kind = ValueKind.RAW

    def __init__(self, reason: RawReason, data: bytes, unit: str = "", tag: str = "", unit_code: int = 0) -> None:
        super().__init__(unit)
        self.reason = reason
        self.data = bytes(data)
        self.tag = tag
        self.unit_code = unit_code

    def __str__(self) -> str:
        match self.reason:
            case RawReason.UNSUPPORTED:
                return f"{self.tag} not yet supported, {render_hex(self.data)} [{self.unit}]"
            case RawReason.MALFORMED:
                return f"Malformed {self.tag} not yet supported, {render_hex(self.data)} [{self.unit}]"
            case RawReason.UNKNOWN:
                return f"Raw data:{render_hex(self.data)} [no unit: {self.unit_code}]"
            case RawReason.UNSUPPORTED_LENGTH:
                return render_hex(self.data).lstrip()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawValue):
            return NotImplemented
        return (self.reason, self.data, self.tag) == (other.reason, other.data, other.tag)

    def __hash__(self) -> int:
        return hash((self.reason, self.data, self.tag))
