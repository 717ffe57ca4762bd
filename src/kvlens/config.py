"""Configuration loading and management for kvlens.

Configuration sources are merged in priority order:
    1. Defaults (defined in ExplorerConfig)
    2. Global config (~/.kvlens.toml)
    3. Project config (./kvlens.toml)
    4. Explicit config file
    5. Environment variables (KVLENS_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(key_mode="emacs")
    >>> config.key_mode
    'emacs'
    >>> config.flash_seconds
    2.0
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, get_type_hints

from rich.spinner import Spinner

from .durations import parse_duration
from .exceptions import ConfigFileError, ConfigurationError, InvalidConfigError
from .views.theme import THEMES

KEY_MODES = ("vim", "emacs", "function")

# Fields that accept duration strings ("500ms", "1m30s") as well as seconds.
DURATION_FIELDS = ("flash_seconds", "poll_interval", "done_delay")


@dataclass(frozen=True)
class ExplorerConfig:
    """Settings for the explorer UI and CLI commands.

    Attributes:
        key_mode: Key binding scheme (vim, emacs or function)
        no_color: Render frames without ANSI styling
        theme: Name of the color theme
        max_suggestions: Suggestions shown under the expression bar
        flash_seconds: How long transient action messages stay visible
        poll_interval: Seconds between completion channel polls
        done_delay: Default delay before a finished status screen exits
        spinner: Name of the rich spinner used while waiting
        function_catalog: Optional JSON file with extra completion functions
        log_file: Optional file receiving log records
    """

    key_mode: str = "vim"
    no_color: bool = False
    theme: str = "default"
    max_suggestions: int = 8
    flash_seconds: float = 2.0
    poll_interval: float = 0.05
    done_delay: float = 2.0
    spinner: str = "dots"
    function_catalog: Optional[str] = None
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.key_mode not in KEY_MODES:
            raise ValueError(f"key_mode must be one of {', '.join(KEY_MODES)}")
        if self.theme not in THEMES:
            raise ValueError(f"theme must be one of {', '.join(sorted(THEMES))}")
        if self.max_suggestions < 1:
            raise ValueError("max_suggestions must be at least 1")
        if self.flash_seconds <= 0:
            raise ValueError("flash_seconds must be positive")
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.done_delay < 0:
            raise ValueError("done_delay must be non-negative")
        try:
            Spinner(self.spinner)
        except KeyError:
            raise ValueError(f"unknown spinner '{self.spinner}'")

    @property
    def color(self) -> bool:
        """Whether frames are rendered with ANSI styling."""
        return not self.no_color


def load_config(config_file: Optional[Path] = None, **overrides) -> ExplorerConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower layers.

    Returns:
        Validated ExplorerConfig instance

    Raises:
        ConfigFileError: If a config file is missing or cannot be parsed
        ConfigurationError: If the merged values are invalid
    """
    merged: dict = {}

    global_config = Path.home() / ".kvlens.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "kvlens.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigFileError(config_file, "file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    merged.update({k: v for k, v in overrides.items() if v is not None})

    for name in DURATION_FIELDS:
        value = merged.get(name)
        if isinstance(value, str):
            try:
                merged[name] = parse_duration(value)
            except ValueError as e:
                raise InvalidConfigError(name, value, str(e))

    try:
        return ExplorerConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from KVLENS_* environment variables.

    Supported environment variables:
        KVLENS_KEY_MODE: vim/emacs/function
        KVLENS_NO_COLOR: bool (true/false/1/0)
        KVLENS_THEME: str
        KVLENS_MAX_SUGGESTIONS: int
        KVLENS_FLASH_SECONDS: float or duration
        KVLENS_POLL_INTERVAL: float or duration
        KVLENS_DONE_DELAY: float or duration
        KVLENS_SPINNER: str
        KVLENS_FUNCTION_CATALOG: str
        KVLENS_LOG_FILE: str

    Returns:
        Dict of field_name -> parsed_value for any KVLENS_* vars found.
    """
    type_hints = get_type_hints(ExplorerConfig)

    result: dict[str, Any] = {}

    for field_name in ExplorerConfig.__dataclass_fields__:
        env_key = f"KVLENS_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint, field_name)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any, field_name: str) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        if field_name in DURATION_FIELDS:
            try:
                return float(value)
            except ValueError:
                return parse_duration(value)
        return float(value)

    if type_hint is str:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigFileError: If the file cannot be read or parsed
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        # Fallback to tomli for Python 3.9-3.10
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, str(e))

    # Settings may live at the top level or under a [kvlens] table.
    section = data.get("kvlens")
    if isinstance(section, dict):
        return dict(section)
    return data
