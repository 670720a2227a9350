"""Protocol layer components for read variable request/response frames.

This package contains the framing, checksum, byte-stuffing and value decoding
of the binary meter protocol carried over the optical eye.
"""

from .common import CommunicationDirection
from .crc import crc16
from .reader import read_response
from .request import build_request, encode_request
from .response import Response, decode
from .stuffing import destuff, stuff
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
    ValueKind,
)

__all__ = [
    # Common types
    "CommunicationDirection",
    # Framing
    "crc16",
    "stuff",
    "destuff",
    "build_request",
    "encode_request",
    "read_response",
    # Decoding
    "Response",
    "decode",
    "UNITS",
    "Representation",
    "UnitDescriptor",
    "unit_of",
    # Values
    "Value",
    "ValueKind",
    "NoValue",
    "FloatValue",
    "TimeValue",
    "DateValue",
    "TextValue",
    "IntegerValue",
    "RawValue",
    "RawReason",
]
