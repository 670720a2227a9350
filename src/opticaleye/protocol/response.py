"""Read variable response decoding.

A de-stuffed response frame has the layout:

    40 3F 10 <VarIdHi> <VarIdLo> <UnitCode> <payload...> <CrcHi> <CrcLo> 0D

The Response class validates the frame and decodes the payload according to
the representation kind of the unit code. Decoding follows fixed gates:

    1. The unknown variable response yields NoValue
    2. Checksum mismatch is logged and recorded, decoding continues
    3. Address, response type and variable id must match (FrameStructureError)
    4. The unit code must be in the unit table (UnknownUnitError)
    5. The payload is parsed according to the unit's representation

Representations without a decoder, and payloads whose lengths do not add up,
yield a RawValue so the bytes remain visible.
"""

from __future__ import annotations

from typing import assert_never

from ..exceptions import FrameStructureError, UnknownUnitError
from ..log import get_logger
from .common import FRAME_END, METER_ADDRESS, READ_VARIABLE_RESPONSE, CommunicationDirection
from .crc import crc16
from .unit import UNITS, Representation, UnitDescriptor, unit_of
from .value import (
    DateValue,
    FloatValue,
    IntegerValue,
    NoValue,
    RawReason,
    RawValue,
    TextValue,
    TimeValue,
    Value,
)

logger = get_logger(__name__)

# =============================================================================
# Response Constants
# =============================================================================

UNKNOWN_VARIABLE_RESPONSE = bytes(
    [
        CommunicationDirection.SLAVE_TO_MASTER.start_token,
        METER_ADDRESS,
        READ_VARIABLE_RESPONSE,
        0x07,  # CRC
        0x9A,
        FRAME_END,
    ]
)

RESPONSE_HEADER_LENGTH = 6  # Start, address, response type, variable id (2), unit code
RESPONSE_TRAILER_LENGTH = 3  # CRC (2), end token
RESPONSE_MINIMUM_LENGTH = RESPONSE_HEADER_LENGTH + RESPONSE_TRAILER_LENGTH

# Float frame lengths and their display precision (mantissa of 2 or 4 bytes)
FLOAT_FRAME_PRECISION = {13: 3, 15: 4}

FLOAT_EXPONENT_MASK = 0b00111111  # Bits 0-5: exponent magnitude
FLOAT_EXPONENT_SIGN_MASK = 0b01000000  # Bit 6: exponent is negative
FLOAT_VALUE_SIGN_MASK = 0b10000000  # Bit 7: value is negative

# =============================================================================
# Payload Decoders
# =============================================================================


def _declared_length(payload: bytes) -> int:
    """Length embedded in the first two payload bytes (little-endian)."""
    return payload[0] + 256 * payload[1]


def _decimal_fields(payload: bytes) -> tuple[int, int, int]:
    """Split a decimal coded 32-bit big-endian integer into three digit pairs.

    Returns:
        Tuple (high, middle, low), e.g. (hh, mm, ss) for 123456
    """
    packed = int.from_bytes(payload[2:6], byteorder="big")

    low = packed % 100
    rest = packed // 100
    middle = rest % 100
    high = rest // 100

    return high, middle, low


def decode_float(length: int, representation: bytes) -> float:
    """Decode a decimal floating point number.

    Args:
        length: Number of mantissa bytes
        representation: Sign/exponent byte followed by the mantissa bytes

    Returns:
        mantissa * 10^exponent, negated if the value sign bit is set
    """
    sign_exponent = representation[0]

    exponent = sign_exponent & FLOAT_EXPONENT_MASK
    if sign_exponent & FLOAT_EXPONENT_SIGN_MASK:
        exponent = -exponent

    mantissa = int.from_bytes(representation[1 : 1 + length], byteorder="big")

    value = mantissa * 10.0**exponent
    if sign_exponent & FLOAT_VALUE_SIGN_MASK:
        value = -value

    return value


def _decode_time(payload: bytes, unit: UnitDescriptor) -> Value:
    if len(payload) < 6:
        return RawValue(RawReason.MALFORMED, payload, unit.unit, "TIME", unit.code)

    hour, minute, second = _decimal_fields(payload)
    return TimeValue(hour, minute, second, unit.unit, _declared_length(payload))


def _decode_date3(payload: bytes, unit: UnitDescriptor) -> Value:
    if len(payload) < 6:
        return RawValue(RawReason.MALFORMED, payload, unit.unit, "DATE3", unit.code)

    year, month, day = _decimal_fields(payload)
    return DateValue(year, month, day, unit.unit, _declared_length(payload))


def _decode_ascii(payload: bytes, unit: UnitDescriptor) -> Value:
    if len(payload) < 2:
        return RawValue(RawReason.MALFORMED, payload, unit.unit, "ASCII", unit.code)

    return TextValue(payload[2:], unit.unit, _declared_length(payload))


def _decode_varint(payload: bytes, unit: UnitDescriptor) -> Value:
    if len(payload) < 2:
        return RawValue(RawReason.MALFORMED, payload, unit.unit, "INT", unit.code)

    declared_length = _declared_length(payload)
    available = len(payload) - 2

    if declared_length > available:
        # Cannot interpret data beyond what was received
        return RawValue(RawReason.MALFORMED, payload, unit.unit, "INT", unit.code)

    value = int.from_bytes(payload[2 : 2 + declared_length], byteorder="big")

    return IntegerValue(value, unit.unit, declared_length, complete=declared_length == available)


# =============================================================================
# Response
# =============================================================================


class Response:
    """Decoded read variable response.

    Attributes:
        frame: The de-stuffed response frame
        variable_id: The variable id that was requested
        value: The decoded value
        checksum_expected: Checksum computed over the frame body (None for the unknown variable response)
        checksum_found: Checksum carried by the frame (None for the unknown variable response)
    """

    frame: bytes
    variable_id: int
    value: Value
    checksum_expected: int | None
    checksum_found: int | None

    def __init__(self, frame: bytes, variable_id: int) -> None:
        """Validate and decode a de-stuffed response frame.

        Args:
            frame: De-stuffed response frame including start and end token
            variable_id: Variable id of the request this frame answers

        Raises:
            FrameStructureError: If length, address, response type or variable id are wrong
            UnknownUnitError: If the unit code is outside the unit table
        """
        self.frame = bytes(frame)
        self.variable_id = variable_id
        self.checksum_expected = None
        self.checksum_found = None

        if self.frame == UNKNOWN_VARIABLE_RESPONSE:
            self.value = NoValue()
            return

        length = len(self.frame)

        if length < RESPONSE_MINIMUM_LENGTH:
            raise FrameStructureError("length", length, RESPONSE_MINIMUM_LENGTH, self.frame)

        self.checksum_expected = crc16(self.frame, 1, length - 4)
        self.checksum_found = int.from_bytes(self.frame[length - 3 : length - 1], byteorder="big")

        if not self.checksum_valid:
            logger.warning(
                "checksum_mismatch",
                variable_id=variable_id,
                found=f"0x{self.checksum_found:04X}",
                expected=f"0x{self.checksum_expected:04X}",
            )

        if self.frame[1] != METER_ADDRESS:
            raise FrameStructureError("meter unit address", self.frame[1], METER_ADDRESS, self.frame)

        if self.frame[2] != READ_VARIABLE_RESPONSE:
            raise FrameStructureError("type of response", self.frame[2], READ_VARIABLE_RESPONSE, self.frame)

        frame_variable_id = self.frame[3] << 8 | self.frame[4]
        if frame_variable_id != variable_id:
            raise FrameStructureError("variable id", frame_variable_id, variable_id, self.frame)

        unit = unit_of(self.frame[5])
        if unit is None:
            raise UnknownUnitError(self.frame[5], len(UNITS), self.frame)

        self.value = self._decode(unit)

    @property
    def checksum_valid(self) -> bool:
        """True unless the frame checksum disagrees with the computed one."""
        return self.checksum_expected == self.checksum_found

    @property
    def unit(self) -> UnitDescriptor | None:
        """Unit table entry of the response, None for the unknown variable response."""
        if isinstance(self.value, NoValue):
            return None
        return unit_of(self.frame[5])

    def _decode(self, unit: UnitDescriptor) -> Value:
        length = len(self.frame)
        payload = self.frame[RESPONSE_HEADER_LENGTH : length - RESPONSE_TRAILER_LENGTH]

        representation = unit.representation

        match representation:
            case Representation.FLOAT:
                precision = FLOAT_FRAME_PRECISION.get(length)
                if precision is None:
                    return RawValue(RawReason.UNSUPPORTED_LENGTH, self.frame, unit.unit, "FLOAT", unit.code)

                value = decode_float(self.frame[6], self.frame[7:])
                return FloatValue(value, unit.unit, precision)

            case Representation.TIME:
                return _decode_time(payload, unit)

            case Representation.DATE3:
                return _decode_date3(payload, unit)

            case Representation.ASCII:
                return _decode_ascii(payload, unit)

            case Representation.VARINT:
                return _decode_varint(payload, unit)

            case (
                Representation.INT
                | Representation.BYTE
                | Representation.DATE2
                | Representation.DATE4
                | Representation.BITS
                | Representation.RTC
                | Representation.RTCQ
                | Representation.DATETIME
            ):
                return RawValue(RawReason.UNSUPPORTED, payload, unit.unit, representation.name, unit.code)

            case Representation.UNKNOWN:
                return RawValue(RawReason.UNKNOWN, payload, unit.unit, "UNKNOWN", unit.code)

            case _:
                assert_never(representation)

    def __repr__(self) -> str:
        return f"Response(variable_id={self.variable_id}, value={self.value!r}, checksum_valid={self.checksum_valid})"


def decode(frame: bytes, variable_id: int) -> Value:
    """Decode a de-stuffed response frame into its value.

    Raises:
        FrameStructureError: If length, address, response type or variable id are wrong
        UnknownUnitError: If the unit code is outside the unit table
    """
    return Response(frame, variable_id).value
