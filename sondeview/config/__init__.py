"""Configuration models and validation for sondeview."""

from sondeview.config.models import (
    BackgroundConfig,
    BaseConfig,
    ChartConfig,
    HodographConfig,
    PressureTemperatureBounds,
    RHOmegaConfig,
    RootFinderConfig,
    ZoomConfig,
)

__all__ = [
    "BackgroundConfig",
    "BaseConfig",
    "ChartConfig",
    "HodographConfig",
    "PressureTemperatureBounds",
    "RHOmegaConfig",
    "RootFinderConfig",
    "ZoomConfig",
]
