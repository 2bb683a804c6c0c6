"""
Tests for chaoscli.settings.
"""

import tempfile

from chaoscli.settings import ChaosSettings, get_settings, set_settings


class TestChaosSettings:
    """Environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CHAOSCLI_LOG_LEVEL", raising=False)
        monkeypatch.delenv("CHAOSCLI_TEMP_DIR", raising=False)
        monkeypatch.delenv("CHAOSCLI_NO_COLOR", raising=False)

        settings = ChaosSettings()
        assert settings.log_level == "WARNING"
        assert settings.temp_dir == tempfile.gettempdir()
        assert settings.no_color is False

    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CHAOSCLI_LOG_LEVEL", "debug")
        monkeypatch.setenv("CHAOSCLI_TEMP_DIR", str(tmp_path))
        monkeypatch.setenv("CHAOSCLI_NO_COLOR", "1")

        settings = ChaosSettings()
        assert settings.log_level == "DEBUG"
        assert settings.temp_dir == str(tmp_path)
        assert settings.no_color is True

    def test_global_accessors(self, monkeypatch, tmp_path):
        custom = ChaosSettings(log_level="INFO", temp_dir=str(tmp_path), no_color=True)
        set_settings(custom)
        assert get_settings() is custom

        set_settings(None)
        monkeypatch.setenv("CHAOSCLI_TEMP_DIR", "/somewhere")
        assert get_settings().temp_dir == "/somewhere"
