"""Tests for logger configuration."""

import pytest

from formparty.core.logger import LoggerConfig, LogLevel
from formparty.core.settings import settings


class TestLoggerConfig:
    """Tests for LoggerConfig defaults."""

    @pytest.mark.parametrize("level", ["DEBUG", "WARNING"])
    def test_level_follows_settings(self, monkeypatch, level: str) -> None:
        """Verify the log level is read from settings when the config is built."""
        monkeypatch.setattr(settings, "LOG_LEVEL", level)

        assert LoggerConfig().log_level is LogLevel(level)

    def test_explicit_level_wins(self, monkeypatch) -> None:
        """Verify an explicit level is kept regardless of settings."""
        monkeypatch.setattr(settings, "LOG_LEVEL", "DEBUG")

        assert LoggerConfig(log_level=LogLevel.ERROR).log_level is LogLevel.ERROR
