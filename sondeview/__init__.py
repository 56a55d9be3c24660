"""
sondeview - Skew-T/log-P sounding chart core

Coordinate transforms, view state, thermodynamic formulas and background
curve generation for an interactive atmospheric sounding viewer.
"""

__version__ = "0.1.0"

from sondeview.app import AppState, Diagram
from sondeview.config.models import ChartConfig
from sondeview.data import DataContext, Level, Sounding
from sondeview.settings import (
    ApplicationSettings,
    get_settings,
    load_settings,
    reset_settings,
    save_settings,
)

__all__ = [
    "AppState",
    "ChartConfig",
    "DataContext",
    "Diagram",
    "Level",
    "Sounding",
    "__version__",
    # Settings
    "ApplicationSettings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "save_settings",
]
