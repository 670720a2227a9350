"""
Configuration for opticaleye.

Settings are read from environment variables with sensible defaults. The
command line uses them as defaults for its options.

Environment variables:
  - OPTICAL_EYE_DEVICE: serial device or pyserial URL (default: /dev/ttyUSB0)
  - OPTICAL_EYE_BAUDRATE: baud rate name (default: 9600)
  - OPTICAL_EYE_TIMEOUT: seconds per response phase (default: 3.0)
  - OPTICAL_EYE_REGISTRY: variable registry, full or responding (default: full)
  - OPTICAL_EYE_LOGLEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: WARNING)
  - OPTICAL_EYE_LOG_FORMAT: TEXT for console logs, JSON for JSON lines (default: TEXT)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .transport import BAUDRATES

DEFAULT_DEVICE = "/dev/ttyUSB0"
DEFAULT_BAUDRATE = 9600
DEFAULT_TIMEOUT = 3.0
DEFAULT_REGISTRY = "full"
DEFAULT_LOGLEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "TEXT"


def _get_float_env(env: Mapping[str, str], name: str, default: float) -> float:
    """Get positive float value from environment variable."""
    value = env.get(name)
    if value is None:
        return default
    try:
        number = float(value)
    except ValueError:
        return default
    return number if number > 0 else default


def _get_baudrate_env(env: Mapping[str, str], name: str, default: int) -> int:
    """Get baud rate from environment variable, by name."""
    value = env.get(name)
    if value is None:
        return default
    return BAUDRATES.get(value.strip(), default)


@dataclass(frozen=True)
class Settings:
    device: str = DEFAULT_DEVICE
    baudrate: int = DEFAULT_BAUDRATE
    timeout: float = DEFAULT_TIMEOUT
    registry: str = DEFAULT_REGISTRY
    loglevel: str = DEFAULT_LOGLEVEL
    log_format: str = DEFAULT_LOG_FORMAT

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from the environment (os.environ unless env is given).

        Malformed numbers and unknown baud rates fall back to the defaults.
        """
        if env is None:
            env = os.environ

        return cls(
            device=env.get("OPTICAL_EYE_DEVICE", DEFAULT_DEVICE),
            baudrate=_get_baudrate_env(env, "OPTICAL_EYE_BAUDRATE", DEFAULT_BAUDRATE),
            timeout=_get_float_env(env, "OPTICAL_EYE_TIMEOUT", DEFAULT_TIMEOUT),
            registry=env.get("OPTICAL_EYE_REGISTRY", DEFAULT_REGISTRY),
            loglevel=env.get("OPTICAL_EYE_LOGLEVEL", DEFAULT_LOGLEVEL).upper(),
            log_format=env.get("OPTICAL_EYE_LOG_FORMAT", DEFAULT_LOG_FORMAT).upper(),
        )
