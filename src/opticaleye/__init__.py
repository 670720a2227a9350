"""
pyOpticalEye: async Python library for reading electricity meters through an
infrared optical eye.

Meter variables are read with the binary read variable protocol (stuffed,
CRC protected frames at 8N2). The IEC 1107 sign-on is available for meter
identification.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .client import OpticalEyeClient
from .exceptions import (
    FrameStructureError,
    OpticalEyeConnectionError,
    OpticalEyeError,
    OpticalEyeProtocolError,
    OpticalEyeTimeoutError,
    UnknownUnitError,
    UnknownVariableError,
)
from .registry import DEFAULT_REGISTRY, RESPONDING_REGISTRY, VariableRegistry, get_registry
from .transport import OpticalEyeTransport, SerialMode, baudrate_of

__all__ = [
    "__version__",
    # Client and transport
    "OpticalEyeClient",
    "OpticalEyeTransport",
    "SerialMode",
    "baudrate_of",
    # Registry
    "DEFAULT_REGISTRY",
    "RESPONDING_REGISTRY",
    "VariableRegistry",
    "get_registry",
    # Exceptions
    "FrameStructureError",
    "OpticalEyeConnectionError",
    "OpticalEyeError",
    "OpticalEyeProtocolError",
    "OpticalEyeTimeoutError",
    "UnknownUnitError",
    "UnknownVariableError",
]
