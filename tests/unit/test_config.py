"""Unit tests for environment configuration."""

from __future__ import annotations

import pytest

from opticaleye.config import Settings


@pytest.mark.unit
class TestSettingsFromEnv:
    def test_defaults(self) -> None:
        settings = Settings.from_env({})

        assert settings == Settings()
        assert settings.device == "/dev/ttyUSB0"
        assert settings.baudrate == 9600
        assert settings.timeout == 3.0
        assert settings.registry == "full"
        assert settings.loglevel == "WARNING"
        assert settings.log_format == "TEXT"

    def test_values(self) -> None:
        settings = Settings.from_env(
            {
                "OPTICAL_EYE_DEVICE": "socket://meter:4001",
                "OPTICAL_EYE_BAUDRATE": "300",
                "OPTICAL_EYE_TIMEOUT": "1.5",
                "OPTICAL_EYE_REGISTRY": "responding",
                "OPTICAL_EYE_LOGLEVEL": "debug",
                "OPTICAL_EYE_LOG_FORMAT": "json",
            }
        )

        assert settings.device == "socket://meter:4001"
        assert settings.baudrate == 300
        assert settings.timeout == 1.5
        assert settings.registry == "responding"
        assert settings.loglevel == "DEBUG"
        assert settings.log_format == "JSON"

    @pytest.mark.parametrize("value", ["fast", "115200", ""])
    def test_unknown_baudrate_falls_back(self, value: str) -> None:
        assert Settings.from_env({"OPTICAL_EYE_BAUDRATE": value}).baudrate == 9600

    @pytest.mark.parametrize("value", ["soon", "0", "-2", ""])
    def test_malformed_timeout_falls_back(self, value: str) -> None:
        assert Settings.from_env({"OPTICAL_EYE_TIMEOUT": value}).timeout == 3.0

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPTICAL_EYE_DEVICE", "/dev/ttyS1")

        assert Settings.from_env().device == "/dev/ttyS1"

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Settings().device = "/dev/ttyS1"  # type: ignore[misc]
