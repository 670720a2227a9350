"""Unit tests for read variable response decoding."""

from __future__ import annotations

import logging
from collections.abc import Callable

import pytest

from opticaleye.exceptions import FrameStructureError, OpticalEyeProtocolError, UnknownUnitError
from opticaleye.protocol.response import UNKNOWN_VARIABLE_RESPONSE, Response, decode, decode_float
from opticaleye.protocol.unit import UNITS
from opticaleye.protocol.value import (
    DateValue,
    FloatValue,
    IntegerValue,
    NoValue,
    RawReason,
    RawValue,
    TextValue,
    TimeValue,
)

FrameBuilder = Callable[..., bytes]

UNIT_KWH = 2
UNIT_TIME = 47
UNIT_DATE3 = 48
UNIT_DATE4 = 49
UNIT_VARINT = 51
UNIT_ASCII = 54
UNIT_MS = 61


# =============================================================================
# Float decoding
# =============================================================================


@pytest.mark.unit
class TestDecodeFloat:
    @pytest.mark.parametrize(
        ("length", "representation", "expected"),
        [
            (2, b"\x00\x00\x0a", 10.0),
            (2, b"\x42\x04\xd2", 12.34),  # 1234 * 10^-2
            (2, b"\x01\x00\x05", 50.0),  # 5 * 10^1
            (2, b"\xc1\x00\x05", -0.5),  # -(5 * 10^-1)
            (4, b"\x43\x00\x01\xe2\x40", 123.456),
            (2, b"\x80\x00\x00", -0.0),
        ],
        ids=["ten", "negative_exponent", "positive_exponent", "negative_value", "four_byte_mantissa", "zero"],
    )
    def test_values(self, length: int, representation: bytes, expected: float) -> None:
        assert decode_float(length, representation) == pytest.approx(expected)


# =============================================================================
# Response decoding
# =============================================================================


@pytest.mark.unit
class TestUnknownVariable:
    def test_sentinel(self) -> None:
        assert UNKNOWN_VARIABLE_RESPONSE == bytes([0x40, 0x3F, 0x10, 0x07, 0x9A, 0x0D])

    def test_decodes_to_no_value(self) -> None:
        response = Response(UNKNOWN_VARIABLE_RESPONSE, 1045)

        assert response.value == NoValue()
        assert response.unit is None
        assert response.checksum_valid
        assert str(response.value) == "No value returned."

    def test_decode_function(self) -> None:
        assert isinstance(decode(UNKNOWN_VARIABLE_RESPONSE, 1084), NoValue)


@pytest.mark.unit
class TestFloatResponse:
    def test_two_byte_mantissa(self, response_frame: FrameBuilder) -> None:
        frame = response_frame(1, UNIT_KWH, b"\x02\x00\x00\x0a")
        assert len(frame) == 13

        value = decode(frame, 1)

        assert isinstance(value, FloatValue)
        assert value == 10.0
        assert str(value) == "10.000 kWh"

    def test_four_byte_mantissa(self, response_frame: FrameBuilder) -> None:
        frame = response_frame(1, UNIT_KWH, b"\x04\x43\x00\x01\xe2\x40")
        assert len(frame) == 15

        value = decode(frame, 1)

        assert value == pytest.approx(123.456)
        assert str(value) == "123.4560 kWh"

    def test_unsupported_frame_length(self, response_frame: FrameBuilder) -> None:
        frame = response_frame(1, UNIT_KWH, b"\x01\x00\x05")

        value = decode(frame, 1)

        assert isinstance(value, RawValue)
        assert value.reason is RawReason.UNSUPPORTED_LENGTH
        assert value.data == frame
        assert str(value) == frame.hex(" ")


@pytest.mark.unit
class TestTimeResponse:
    def test_time(self, response_frame: FrameBuilder) -> None:
        # 123456 = 0x0001E240
        frame = response_frame(1002, UNIT_TIME, b"\x04\x00\x00\x01\xe2\x40")

        value = decode(frame, 1002)

        assert value == TimeValue(12, 34, 56)
        assert str(value) == "12:34:56 [hh,mm,ss]"

    def test_unexpected_declared_length(self, response_frame: FrameBuilder) -> None:
        frame = response_frame(1002, UNIT_TIME, b"\x05\x00\x00\x01\xe2\x40")

        value = decode(frame, 1002)

        assert isinstance(value, TimeValue)
        assert value.declared_length == 5
        assert str(value) == "12:34:56 [hh,mm,ss, unexpected data length: 5]"

    def test_short_payload(self, response_frame: FrameBuilder) -> None:
        value = decode(response_frame(1002, UNIT_TIME, b"\x04\x00\x01"), 1002)

        assert isinstance(value, RawValue)
        assert value.reason is RawReason.MALFORMED
        assert value.tag == "TIME"


@pytest.mark.unit
class TestDateResponse:
    def test_date(self, response_frame: FrameBuilder) -> None:
        # 150307 = 0x00024B23
        frame = response_frame(1003, UNIT_DATE3, b"\x04\x00\x00\x02\x4b\x23")

        value = decode(frame, 1003)

        assert value == DateValue(15, 3, 7)
        assert str(value) == "15, Mar, 07 [yy,mm,dd]"

    def test_undefined_month(self, response_frame: FrameBuilder) -> None:
        # 150007 = 0x000249F7
        frame = response_frame(1003, UNIT_DATE3, b"\x04\x00\x00\x02\x49\xf7")

        assert str(decode(frame, 1003)) == "15, (Undefined month: zero), 07 [yy,mm,dd]"


@pytest.mark.unit
class TestAsciiResponse:
    def test_declared_length_matches(self, response_frame: FrameBuilder) -> None:
        frame = response_frame(1058, UNIT_ASCII, b"\x05\x00HELLO")

        value = decode(frame, 1058)

        assert isinstance(value, TextValue)
        assert value == "HELLO"
        assert value.actual_length == 5
        assert value.declared_length == 5
        assert str(value) == '"HELLO" [ASCII, length 5]'

    def test_declared_length_differs(self, response_frame: FrameBuilder) -> None:
        value = decode(response_frame(1058, UNIT_ASCII, b"\x07\x00ABC"), 1058)

        assert isinstance(value, TextValue)
        assert str(value) == '"ABC" [ASCII, length 3, declared length 7]'

    def test_control_characters(self, response_frame: FrameBuilder) -> None:
        value = decode(response_frame(1058, UNIT_ASCII, b"\x02\x00A\x00"), 1058)

        assert value == "A[NUL]"


@pytest.mark.unit
class TestVarintResponse:
    def test_exact_length(self, response_frame: FrameBuilder) -> None:
        value = decode(response_frame(1004, UNIT_VARINT, b"\x02\x00\x04\xd2"), 1004)

        assert isinstance(value, IntegerValue)
        assert value == 1234
        assert value.complete
        assert str(value) == "1234 [[int], length 2]"

    def test_declared_shorter_than_payload(self, response_frame: FrameBuilder) -> None:
        value = decode(response_frame(1004, UNIT_VARINT, b"\x01\x00\x04\xd2"), 1004)

        assert isinstance(value, IntegerValue)
        assert value == 4
        assert not value.complete
        assert str(value) == "[[int], length 1]"

    def test_declared_longer_than_payload(self, response_frame: FrameBuilder) -> None:
        value = decode(response_frame(1004, UNIT_VARINT, b"\x09\x00\x04\xd2"), 1004)

        assert isinstance(value, RawValue)
        assert value.reason is RawReason.MALFORMED
        assert value.tag == "INT"


@pytest.mark.unit
class TestRawResponses:
    def test_unsupported_representation(self, response_frame: FrameBuilder) -> None:
        value = decode(response_frame(1, UNIT_MS, b"\x01\x02"), 1)

        assert isinstance(value, RawValue)
        assert value.reason is RawReason.UNSUPPORTED
        assert value.tag == "INT"
        assert str(value) == "INT not yet supported,  01 02 [ms]"

    def test_date4_unsupported(self, response_frame: FrameBuilder) -> None:
        value = decode(response_frame(1, UNIT_DATE4, b"\x01"), 1)

        assert isinstance(value, RawValue)
        assert value.tag == "DATE4"

    def test_unknown_representation(self, response_frame: FrameBuilder) -> None:
        value = decode(response_frame(1, 0, b"\xab\xcd"), 1)

        assert isinstance(value, RawValue)
        assert value.reason is RawReason.UNKNOWN
        assert str(value) == "Raw data: ab cd [no unit: 0]"

    def test_every_unit_code_decodes(self, response_frame: FrameBuilder) -> None:
        """No unit code in the table reaches the unreachable branch."""
        for unit in UNITS:
            frame = response_frame(7, unit.code, b"\x02\x00\x00\x0a")
            assert decode(frame, 7) is not None


# =============================================================================
# Validation
# =============================================================================


@pytest.mark.unit
class TestValidation:
    def test_checksum_mismatch_logged(self, response_frame: FrameBuilder, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="opticaleye.protocol.response")
        frame = response_frame(1, UNIT_KWH, b"\x02\x00\x00\x0a", crc=0x1234)

        response = Response(frame, 1)

        assert not response.checksum_valid
        assert response.checksum_found == 0x1234
        assert response.value == 10.0
        assert "checksum_mismatch" in caplog.text

    def test_checksum_fields(self, response_frame: FrameBuilder) -> None:
        frame = response_frame(1, UNIT_KWH, b"\x02\x00\x00\x0a")

        response = Response(frame, 1)

        assert response.checksum_valid
        assert response.checksum_expected == response.checksum_found
        assert response.unit == UNITS[UNIT_KWH]

    @pytest.mark.parametrize("length", [0, 1, 5, 8])
    def test_too_short(self, length: int) -> None:
        frame = bytes([0x40, 0x3F, 0x10, 0x00, 0x01, 0x02, 0x00, 0x00, 0x0D])[:length]

        with pytest.raises(FrameStructureError) as exc_info:
            Response(frame, 1)

        assert exc_info.value.field == "length"

    def test_wrong_address(self, response_frame: FrameBuilder) -> None:
        frame = bytearray(response_frame(1, UNIT_KWH, b"\x02\x00\x00\x0a"))
        frame[1] = 0x3E

        with pytest.raises(FrameStructureError) as exc_info:
            Response(bytes(frame), 1)

        error = exc_info.value
        assert error.field == "meter unit address"
        assert error.found == 0x3E
        assert error.expected == 0x3F
        assert error.frame == bytes(frame)
        assert str(error) == "Unexpected meter unit address: found 0x3E, expected 0x3F"

    def test_wrong_response_type(self, response_frame: FrameBuilder) -> None:
        frame = bytearray(response_frame(1, UNIT_KWH, b"\x02\x00\x00\x0a"))
        frame[2] = 0x11

        with pytest.raises(FrameStructureError, match="type of response"):
            Response(bytes(frame), 1)

    def test_wrong_variable_id(self, response_frame: FrameBuilder) -> None:
        frame = response_frame(1002, UNIT_KWH, b"\x02\x00\x00\x0a")

        with pytest.raises(FrameStructureError) as exc_info:
            Response(frame, 1001)

        assert str(exc_info.value) == "Unexpected variable id: found 0x03EA, expected 0x03E9"

    def test_unknown_unit(self, response_frame: FrameBuilder) -> None:
        frame = response_frame(1, 0x41, b"\x00")

        with pytest.raises(UnknownUnitError) as exc_info:
            Response(frame, 1)

        assert exc_info.value.unit_code == 0x41
        assert str(exc_info.value) == "Unexpected unit: found 0x41, expected 0x00..0x40"
        assert isinstance(exc_info.value, OpticalEyeProtocolError)
