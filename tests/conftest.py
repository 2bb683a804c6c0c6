"""Shared fixtures for chaoscli tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from chaoscli.settings import ChaosSettings, set_settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point generated temp files at a per-test directory."""
    churn_dir = tmp_path / "churn"
    churn_dir.mkdir()
    monkeypatch.setenv("CHAOSCLI_TEMP_DIR", str(churn_dir))
    monkeypatch.setenv("CHAOSCLI_NO_COLOR", "true")
    settings = ChaosSettings()
    set_settings(settings)
    yield settings
    set_settings(None)


@pytest.fixture
def churn_dir(isolated_settings) -> Path:
    """Directory where generated churn files land."""
    return Path(isolated_settings.temp_dir)
