"""
Settings
========

Defines runtime settings for linkcite and how they are loaded.

Sources, later ones winning:
1. Dataclass defaults, or the preset named by ``LINKCITE_ENV``
2. YAML config file (``config_file`` argument or ``LINKCITE_CONFIG``)
3. ``LINKCITE_*`` environment variables, after loading ``.env`` with
   python-dotenv

Environment variables:
- LINKCITE_ENV: preset to start from (default, dev, test)
- LINKCITE_PRIORITY: comma-separated default source order
- LINKCITE_STYLES: comma-separated styles (or "all")
- LINKCITE_INFOBOX_LAYOUT: multiline | singleline
- LINKCITE_LOG_LEVEL: DEBUG, INFO, WARNING, ...
- LINKCITE_LOG_JSON: true/false
- LINKCITE_CONFIG: path of a YAML config file

YAML layout:
    priority:
      default: [structured_data, open_graph, html_meta]
      overrides:
        date: [doi_registry, html_meta]
    styles: [infobox, bibliography]
    infobox_layout: singleline
    log_level: DEBUG
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml
from dotenv import dotenv_values, load_dotenv

from linkcite import __version__
from linkcite.attributes import SourceId
from linkcite.citation.styles import CitationStyle, InfoboxLayout, parse_styles
from linkcite.errors import ConfigurationError, LinkciteError, ValidationIssue
from linkcite.resolution.priority import DEFAULT_SOURCE_ORDER, PriorityConfig

ENV_PREFIX = "LINKCITE_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass
class Settings:
    """Runtime configuration."""

    name: str = "default"

    # Resolution
    default_priority: Tuple[SourceId, ...] = DEFAULT_SOURCE_ORDER
    priority_overrides: Dict[str, List[str]] = field(default_factory=dict)

    # Output
    default_styles: Tuple[CitationStyle, ...] = tuple(CitationStyle)
    infobox_layout: InfoboxLayout = InfoboxLayout.MULTILINE

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # API
    app_name: str = "linkcite API"
    version: str = __version__
    cors_origins: Tuple[str, ...] = ("http://localhost:3000", "http://localhost:5173")

    def priority_config(self) -> PriorityConfig:
        """
        Build the validated source priority.

        Raises:
            ConfigurationError: If a source name is unknown or repeated
        """
        return PriorityConfig(default=tuple(self.default_priority), overrides=self.priority_overrides)


DEV_SETTINGS = Settings(
    name="dev",
    log_level="DEBUG",
)

TEST_SETTINGS = Settings(
    name="test",
    log_level="WARNING",
    infobox_layout=InfoboxLayout.MULTILINE,
)

# Named starting points selected with LINKCITE_ENV
PRESETS: Dict[str, Settings] = {
    "default": Settings(),
    "dev": DEV_SETTINGS,
    "test": TEST_SETTINGS,
}


def _split_list(value: Union[str, List[Any], Tuple[Any, ...]]) -> List[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item).strip() for item in value]


def _parse_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigurationError(
        "Invalid settings",
        [ValidationIssue(field_name, f"expected a boolean, got {value!r}")],
    )


def _apply(settings: Settings, values: Mapping[str, Any], origin: str) -> Settings:
    """Overlay raw values onto settings, validating each one."""
    issues: List[ValidationIssue] = []
    changes: Dict[str, Any] = {}

    priority = values.get("priority")
    if priority is not None:
        if isinstance(priority, Mapping):
            default = priority.get("default")
            overrides = priority.get("overrides")
        else:
            default, overrides = priority, None
        if default is not None:
            changes["default_priority"] = tuple(_split_list(default))
        if overrides is not None:
            changes["priority_overrides"] = {
                str(k): _split_list(v) for k, v in dict(overrides).items()
            }

    styles = values.get("styles")
    if styles is not None:
        try:
            changes["default_styles"] = tuple(parse_styles(_split_list(styles)))
        except LinkciteError as e:
            issues.append(ValidationIssue(f"{origin}.styles", str(e)))

    layout = values.get("infobox_layout")
    if layout is not None:
        try:
            changes["infobox_layout"] = InfoboxLayout(str(layout).strip().lower())
        except ValueError:
            issues.append(ValidationIssue(
                f"{origin}.infobox_layout",
                f"expected one of {[option.value for option in InfoboxLayout]}, got {layout!r}",
            ))

    level = values.get("log_level")
    if level is not None:
        level = str(level).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            issues.append(ValidationIssue(f"{origin}.log_level", f"unknown log level {level!r}"))
        else:
            changes["log_level"] = level

    log_json = values.get("log_json")
    if log_json is not None:
        try:
            changes["log_json"] = _parse_bool(log_json, f"{origin}.log_json")
        except ConfigurationError as e:
            issues.extend(e.issues)

    origins = values.get("cors_origins")
    if origins is not None:
        changes["cors_origins"] = tuple(_split_list(origins))

    if issues:
        raise ConfigurationError("Invalid settings", issues)

    updated = replace(settings, **changes)
    # Fail early on unknown or duplicate source names
    priority_config = updated.priority_config()
    return replace(updated, default_priority=priority_config.default)


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(
            "Cannot read config file",
            [ValidationIssue("config_file", f"{path}: {e.strerror or e}")],
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            "Invalid config file",
            [ValidationIssue("config_file", f"{path}: {e}")],
        ) from e

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            "Invalid config file",
            [ValidationIssue("config_file", f"{path}: expected a mapping at top level")],
        )
    return dict(data)


def _read_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    keys = {
        "PRIORITY": "priority",
        "STYLES": "styles",
        "INFOBOX_LAYOUT": "infobox_layout",
        "LOG_LEVEL": "log_level",
        "LOG_JSON": "log_json",
        "CORS_ORIGINS": "cors_origins",
    }
    for suffix, key in keys.items():
        raw = environ.get(f"{ENV_PREFIX}{suffix}")
        if raw is not None and raw.strip():
            values[key] = raw
    return values


def _preset(name: Optional[str]) -> Settings:
    name = (name or "").strip().lower() or "default"
    if name not in PRESETS:
        raise ConfigurationError(
            "Invalid settings",
            [ValidationIssue("env.env", f"unknown preset {name!r}, expected one of {sorted(PRESETS)}")],
        )
    return PRESETS[name]


def load_settings(
    env_file: Optional[Union[str, Path]] = None,
    config_file: Optional[Union[str, Path]] = None,
    base: Optional[Settings] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Load settings from defaults, a YAML file and the environment.

    Args:
        env_file: ``.env`` file to load first (python-dotenv search when omitted)
        config_file: YAML file; falls back to ``LINKCITE_CONFIG``
        base: Starting settings (defaults to the ``LINKCITE_ENV`` preset,
            or ``Settings()`` when unset)
        environ: Environment mapping (defaults to ``os.environ``); when given,
            ``env_file`` values are merged under it instead of into os.environ

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If any value is invalid or the YAML file is unreadable
    """
    if environ is None:
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()
        environ = os.environ
    elif env_file is not None:
        # Explicit environment wins over the file, as with load_dotenv(override=False)
        file_values = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
        environ = {**file_values, **environ}

    settings = base or _preset(environ.get(f"{ENV_PREFIX}ENV"))

    config_path = config_file or environ.get(f"{ENV_PREFIX}CONFIG")
    if config_path:
        settings = _apply(settings, _read_yaml(Path(config_path)), "config")

    return _apply(settings, _read_env(environ), "env")


__all__ = [
    "ENV_PREFIX",
    "Settings",
    "DEV_SETTINGS",
    "TEST_SETTINGS",
    "PRESETS",
    "load_settings",
]
