"""Optical eye exception classes."""

from __future__ import annotations


class OpticalEyeError(Exception):
    """Base exception for all optical eye errors."""


class OpticalEyeConnectionError(OpticalEyeError):
    """Connection-related errors (device cannot be opened, read or written)."""


class OpticalEyeTimeoutError(OpticalEyeError):
    """No response observed from the meter within the deadline."""


class UnknownVariableError(OpticalEyeError):
    """A variable name could not be resolved through the registry."""

    def __init__(self, variable: str, message: str | None = None) -> None:
        self.variable = variable
        super().__init__(message or f"Unknown variable: {variable!r}")


class OpticalEyeProtocolError(OpticalEyeError):
    """Protocol-level errors (frame validation, unit codes, etc).

    Attributes:
        frame: The de-stuffed response frame that failed validation
    """

    def __init__(self, message: str, frame: bytes = b"") -> None:
        self.frame = frame
        super().__init__(message)


class FrameStructureError(OpticalEyeProtocolError):
    """Response frame has an unexpected address, response type, variable id or length."""

    def __init__(self, field: str, found: int, expected: int, frame: bytes = b"") -> None:
        self.field = field
        self.found = found
        self.expected = expected

        width = 4 if field in ("variable id", "length") else 2

        super().__init__(
            f"Unexpected {field}: found 0x{found:0{width}X}, expected 0x{expected:0{width}X}",
            frame,
        )


class UnknownUnitError(OpticalEyeProtocolError):
    """Response frame carries a unit code outside the unit table."""

    def __init__(self, unit_code: int, unit_count: int, frame: bytes = b"") -> None:
        self.unit_code = unit_code

        super().__init__(
            f"Unexpected unit: found 0x{unit_code:02X}, expected 0x00..0x{unit_count - 1:02X}",
            frame,
        )
