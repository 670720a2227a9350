"""Unit tests for the unit table."""

from __future__ import annotations

import pytest

from opticaleye.protocol.unit import UNITS, Representation, UnitDescriptor, unit_of


@pytest.mark.unit
class TestUnitTable:
    def test_table_size(self) -> None:
        assert len(UNITS) == 65

    def test_codes_match_positions(self) -> None:
        assert all(unit.code == code for code, unit in enumerate(UNITS))

    @pytest.mark.parametrize(
        ("code", "unit", "representation"),
        [
            (0, "Unit0", Representation.UNKNOWN),
            (2, "kWh", Representation.FLOAT),
            (21, "kW", Representation.FLOAT),
            (33, "V", Representation.FLOAT),
            (46, "h", Representation.BYTE),
            (47, "hh,mm,ss", Representation.TIME),
            (48, "yy,mm,dd", Representation.DATE3),
            (49, "yyyy,mm,dd", Representation.DATE4),
            (50, "mm,dd", Representation.DATE2),
            (51, "[int]", Representation.VARINT),
            (53, "RTC", Representation.RTC),
            (54, "ASCII", Representation.ASCII),
            (59, "Bitfield", Representation.BITS),
            (61, "ms", Representation.INT),
            (63, "RTC-Q", Representation.RTCQ),
            (64, "Datetime", Representation.DATETIME),
        ],
    )
    def test_entries(self, code: int, unit: str, representation: Representation) -> None:
        assert UNITS[code] == UnitDescriptor(code=code, unit=unit, representation=representation)

    def test_every_representation_used(self) -> None:
        assert {unit.representation for unit in UNITS} == set(Representation)

    def test_descriptors_are_frozen(self) -> None:
        with pytest.raises(AttributeError):
            UNITS[2].unit = "Wh"  # type: ignore[misc]


@pytest.mark.unit
class TestUnitOf:
    def test_in_range(self) -> None:
        assert unit_of(2) is UNITS[2]
        assert unit_of(64) is UNITS[64]

    @pytest.mark.parametrize("code", [-1, 65, 0xFF])
    def test_out_of_range(self, code: int) -> None:
        assert unit_of(code) is None
