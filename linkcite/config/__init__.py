"""
Configuration
=============

Runtime settings loaded from defaults, YAML and ``LINKCITE_*`` variables.
"""

from linkcite.config.settings import (
    DEV_SETTINGS,
    ENV_PREFIX,
    PRESETS,
    TEST_SETTINGS,
    Settings,
    load_settings,
)

__all__ = [
    "ENV_PREFIX",
    "Settings",
    "DEV_SETTINGS",
    "TEST_SETTINGS",
    "PRESETS",
    "load_settings",
]
