"""
sondeview Application Settings

User-facing settings of the viewer: window layout, which profiles and
background lines are shown, labelling, and logging. Chart geometry and the
curve generation constants live in :mod:`sondeview.config` instead.

Users can modify settings via:
1. Settings file (~/.sondeview/settings.toml or custom path)
2. Environment variables (SONDE_*)
3. Programmatic access via the SettingsManager singleton

Nothing is loaded on import; the command line entry point calls
:meth:`SettingsManager.auto_load`.
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

import tomli_w

from sondeview.utils.logging import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "SONDE_"
SETTINGS_PATH_ENV = "SONDE_SETTINGS_PATH"
LOCAL_SETTINGS_FILE = "sonde_settings.toml"


# =============================================================================
# Settings Data Classes - Organized by Domain
# =============================================================================


@dataclass
class WindowSettings:
    """Main window layout."""

    window_width: int = 850
    window_height: int = 650

    # Fraction of the window width given to the skew-T
    skew_t_fraction: float = 0.6


@dataclass
class ProfileSettings:
    """Which sounding profiles are drawn, and how."""

    show_temperature: bool = True
    temperature_line_width: float = 2.0

    show_dew_point: bool = True
    dew_point_line_width: float = 2.0

    show_wet_bulb: bool = True
    wet_bulb_line_width: float = 1.0

    show_wind_profile: bool = True
    wind_barb_line_width: float = 1.0

    show_omega: bool = True
    omega_line_width: float = 1.0


@dataclass
class LabelSettings:
    """Labels and legend."""

    show_labels: bool = True
    show_legend: bool = True
    font_name: str = "Courier New"
    label_font_size: float = 12.0

    # Pixels
    edge_padding: float = 5.0
    label_padding: float = 3.0


@dataclass
class BackgroundDisplaySettings:
    """Which background line families are drawn."""

    show_isotherms: bool = True
    show_isobars: bool = True
    show_isentrops: bool = True
    show_iso_theta_e: bool = True
    show_iso_mixing_ratio: bool = True
    show_background_bands: bool = True
    background_line_width: float = 1.0


@dataclass
class ChartSettings:
    """Chart configuration source."""

    # JSON file written by ``sondeview config --generate``; empty uses defaults
    config_path: str = ""


@dataclass
class LoggingSettings:
    """Logging output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: str = ""  # empty = console only
    rich_tracebacks: bool = True


@dataclass
class ApplicationSettings:
    """Root settings container with all subsections."""

    window: WindowSettings = field(default_factory=WindowSettings)
    profiles: ProfileSettings = field(default_factory=ProfileSettings)
    labels: LabelSettings = field(default_factory=LabelSettings)
    background: BackgroundDisplaySettings = field(default_factory=BackgroundDisplaySettings)
    chart: ChartSettings = field(default_factory=ChartSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ApplicationSettings":
        """Create from nested dictionary. Missing sections use defaults."""
        return cls(
            window=WindowSettings(**data.get("window", {})),
            profiles=ProfileSettings(**data.get("profiles", {})),
            labels=LabelSettings(**data.get("labels", {})),
            background=BackgroundDisplaySettings(**data.get("background", {})),
            chart=ChartSettings(**data.get("chart", {})),
            logging=LoggingSettings(**data.get("logging", {})),
        )


SECTIONS = tuple(f.name for f in fields(ApplicationSettings))


# =============================================================================
# Settings Manager - Singleton for Global Access
# =============================================================================


class SettingsManager:
    """
    Singleton manager for application settings.

    Usage:
        from sondeview.settings import get_settings, save_settings

        # Access current settings
        s = get_settings()
        print(s.window.window_width)

        # Modify settings
        s.profiles.show_wet_bulb = False

        # Save to file
        save_settings("my_settings.toml")
    """

    _instance: "SettingsManager | None" = None
    _settings: ApplicationSettings
    _settings_path: Path | None = None

    def __new__(cls) -> "SettingsManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._settings = ApplicationSettings()
            cls._instance._settings_path = None
        return cls._instance

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings."""
        return self._settings

    @property
    def path(self) -> Path | None:
        """Get path of loaded settings file."""
        return self._settings_path

    def reset(self) -> None:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self._settings_path = None

    def update(self, **kwargs) -> None:
        """
        Update settings from keyword arguments.

        Nested keys use dots, e.g. ``update(**{"window.window_width": 1024})``.

        Raises:
            AttributeError: If a key does not name an existing setting
        """
        for key, value in kwargs.items():
            parts = key.split(".")
            obj = self._settings
            for part in parts[:-1]:
                obj = getattr(obj, part)
            if not hasattr(obj, parts[-1]):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(obj, parts[-1], value)

    def load_from_file(self, path: Path | str) -> None:
        """Load settings from TOML or JSON file."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with open(path, "rb") as f:
            if path.suffix == ".toml":
                data = tomllib.load(f)
            elif path.suffix == ".json":
                data = json.load(f)
            else:
                raise ValueError(f"Unsupported file format: {path.suffix}")

        self._settings = ApplicationSettings.from_dict(data)
        self._settings_path = path
        logger.info(f"Loaded settings from {path}")

    def save_to_file(self, path: Path | str) -> None:
        """Save settings to TOML or JSON file."""
        path = Path(path)
        if path.suffix not in (".toml", ".json"):
            raise ValueError(f"Unsupported file format: {path.suffix}")
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self._settings.to_dict()

        if path.suffix == ".toml":
            with open(path, "wb") as f:
                tomli_w.dump(data, f)
        else:
            with open(path, "w") as f:
                json.dump(data, f, indent=2)

        self._settings_path = path

    def load_from_env(self) -> int:
        """
        Apply environment variables (SONDE_*) on top of the current settings.

        ``SONDE_WINDOW__WINDOW_WIDTH=1024`` sets ``window.window_width``.
        Unknown names are ignored.

        Returns:
            Number of settings applied
        """
        applied = 0
        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX) or key == SETTINGS_PATH_ENV:
                continue
            setting_key = key[len(ENV_PREFIX):].lower().replace("__", ".")
            try:
                self.update(**{setting_key: _parse_env_value(value)})
            except AttributeError:
                logger.debug(f"Ignoring unknown setting from environment: {key}")
                continue
            applied += 1
        return applied

    def get_default_path(self) -> Path:
        """Get default settings file path."""
        # Check environment variable first
        if SETTINGS_PATH_ENV in os.environ:
            return Path(os.environ[SETTINGS_PATH_ENV])

        # Default to user config directory
        return Path.home() / ".sondeview" / "settings.toml"

    def auto_load(self) -> bool:
        """
        Automatically load settings from default locations.

        Search order:
        1. SONDE_SETTINGS_PATH environment variable
        2. ./sonde_settings.toml (current directory)
        3. ~/.sondeview/settings.toml (user config)

        Environment variables are applied on top in every case.

        Returns:
            True if a settings file was loaded, False if using defaults
        """
        loaded = False
        candidates = []
        if SETTINGS_PATH_ENV in os.environ:
            candidates.append(Path(os.environ[SETTINGS_PATH_ENV]))
        candidates.append(Path(LOCAL_SETTINGS_FILE))
        candidates.append(Path.home() / ".sondeview" / "settings.toml")

        for path in candidates:
            if path.exists():
                self.load_from_file(path)
                loaded = True
                break

        self.load_from_env()
        return loaded


def _parse_env_value(value: str) -> bool | int | float | str:
    """Convert an environment string to bool, int or float where it looks like one."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


# =============================================================================
# Module-Level Convenience Functions and Singleton Access
# =============================================================================


_manager = SettingsManager()


def get_settings() -> ApplicationSettings:
    """Get current application settings."""
    return _manager.settings


def get_settings_manager() -> SettingsManager:
    """Get the settings manager instance."""
    return _manager


def load_settings(path: Path | str) -> ApplicationSettings:
    """Load settings from file."""
    _manager.load_from_file(path)
    return _manager.settings


def save_settings(path: Path | str | None = None) -> Path:
    """
    Save current settings to file.

    Args:
        path: Output path. If None, uses default path.

    Returns:
        Path where settings were saved
    """
    if path is None:
        path = _manager.get_default_path()
    _manager.save_to_file(path)
    return Path(path)


def reset_settings() -> ApplicationSettings:
    """Reset to default settings."""
    _manager.reset()
    return _manager.settings


# =============================================================================
# Settings File Generator
# =============================================================================


def generate_default_settings_file(path: Path | str, format: str = "toml") -> None:
    """Generate a default settings file, with comments when TOML."""
    path = Path(path)

    if format == "toml":
        content = generate_toml_with_comments()
    else:
        content = json.dumps(ApplicationSettings().to_dict(), indent=2)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(content)


def generate_toml_with_comments() -> str:
    """Generate TOML file with descriptive comments."""
    return '''# sondeview Application Settings
# Generated default configuration - modify as needed

# =============================================================================
# Window Settings - Main window layout
# =============================================================================
[window]
window_width = 850
window_height = 650

# Fraction of the window width given to the skew-T
skew_t_fraction = 0.6

# =============================================================================
# Profile Settings - Sounding profiles drawn on the diagrams
# =============================================================================
[profiles]
show_temperature = true
temperature_line_width = 2.0

show_dew_point = true
dew_point_line_width = 2.0

show_wet_bulb = true
wet_bulb_line_width = 1.0

show_wind_profile = true
wind_barb_line_width = 1.0

show_omega = true
omega_line_width = 1.0

# =============================================================================
# Label Settings - Labels and legend
# =============================================================================
[labels]
show_labels = true
show_legend = true
font_name = "Courier New"
label_font_size = 12.0

# Padding (pixels)
edge_padding = 5.0
label_padding = 3.0

# =============================================================================
# Background Settings - Reference lines on the skew-T
# =============================================================================
[background]
show_isotherms = true
show_isobars = true
show_isentrops = true
show_iso_theta_e = true
show_iso_mixing_ratio = true
show_background_bands = true
background_line_width = 1.0

# =============================================================================
# Chart Settings - Chart geometry source
# =============================================================================
[chart]
# JSON file from `sondeview config --generate`; empty uses built-in defaults
config_path = ""

# =============================================================================
# Logging Settings
# =============================================================================
[logging]
level = "INFO"  # Options: DEBUG, INFO, WARNING, ERROR
log_file = ""  # Empty = console only
rich_tracebacks = true
'''
