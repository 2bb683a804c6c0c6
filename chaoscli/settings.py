"""Process-wide settings for chaoscli.

Read from the environment once and cached; stressor parameters themselves
are never taken from here, only ambient concerns (logging, temp location,
console colour).
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class ChaosSettings:
    """Ambient configuration for a chaoscli process."""

    log_level: str = field(default_factory=lambda: os.getenv("CHAOSCLI_LOG_LEVEL", "WARNING").upper())
    temp_dir: str = field(default_factory=lambda: os.getenv("CHAOSCLI_TEMP_DIR") or tempfile.gettempdir())
    no_color: bool = field(default_factory=lambda: _env_flag("CHAOSCLI_NO_COLOR"))


# Global settings instance
_settings: ChaosSettings | None = None


def get_settings() -> ChaosSettings:
    """Get the global settings."""
    global _settings
    if _settings is None:
        _settings = ChaosSettings()
    return _settings


def set_settings(settings: ChaosSettings | None) -> None:
    """Set the global settings. ``None`` forces a re-read of the environment."""
    global _settings
    _settings = settings
