"""
Pydantic configuration models for sondeview.

These models hold the read-only constants consumed by the coordinate
transforms, the view state and the background curve generator. All models are
validated and serializable to JSON.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# Type Aliases
# =============================================================================

PositiveFloat = Annotated[float, Field(gt=0)]
PositiveInt = Annotated[int, Field(gt=0)]


# =============================================================================
# Base Configuration
# =============================================================================


class BaseConfig(BaseModel):
    """Base configuration with common settings."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


# =============================================================================
# Chart geometry
# =============================================================================


class PressureTemperatureBounds(BaseConfig):
    """Data extents of the skew-T. Temperatures are on the bottom edge (max pressure)."""

    min_pressure: PositiveFloat = Field(default=99.0, description="Pressure at the top edge (hPa)")
    max_pressure: PositiveFloat = Field(default=1050.0, description="Pressure at the bottom edge (hPa)")
    min_temperature: float = Field(default=-46.5, description="Coldest temperature at max pressure (C)")
    max_temperature: float = Field(default=50.5, description="Warmest temperature at max pressure (C)")

    @model_validator(mode="after")
    def validate_ranges(self) -> "PressureTemperatureBounds":
        """Ensure min < max on both axes."""
        if self.min_pressure >= self.max_pressure:
            raise ValueError("min_pressure must be < max_pressure")
        if self.min_temperature >= self.max_temperature:
            raise ValueError("min_temperature must be < max_temperature")
        return self


class HodographConfig(BaseConfig):
    """Hodograph scaling."""

    max_speed: PositiveFloat = Field(
        default=250.0,
        description="Wind speed (knots) at the edge of the hodograph",
    )


class RHOmegaConfig(BaseConfig):
    """RH/omega panel scaling."""

    max_abs_omega: PositiveFloat = Field(
        default=10.0,
        description="Absolute omega at the left and right edges of the panel",
    )


class ZoomConfig(BaseConfig):
    """Interactive zoom limits."""

    min_zoom: PositiveFloat = Field(default=1.0, description="Minimum zoom factor")
    max_zoom: PositiveFloat = Field(default=10.0, description="Maximum zoom factor")
    delta_scale: float = Field(
        default=1.05,
        gt=1.0,
        description="Zoom multiplier applied per scroll step",
    )

    @model_validator(mode="after")
    def validate_zoom_range(self) -> "ZoomConfig":
        """Ensure min_zoom <= max_zoom."""
        if self.min_zoom > self.max_zoom:
            raise ValueError("min_zoom must be <= max_zoom")
        return self


class RootFinderConfig(BaseConfig):
    """Bisection parameters used to trace moist adiabats."""

    tolerance: PositiveFloat = Field(default=1.0e-3, description="Bracket width at which to stop")
    max_iterations: PositiveInt = Field(default=50, description="Maximum number of bisections")


# =============================================================================
# Background lines
# =============================================================================


def _default_isotherms() -> list[float]:
    return [-150.0 + 10.0 * i for i in range(11)] + [-40.0, -30.0] + [
        -25.0 + 5.0 * i for i in range(18)
    ]


class BackgroundConfig(BaseConfig):
    """Constant values traced by the background reference lines."""

    isotherms: list[float] = Field(
        default_factory=_default_isotherms,
        description="Isotherm temperatures (C)",
    )
    isobars: list[float] = Field(
        default_factory=lambda: [1050.0, 1000.0, 925.0, 850.0, 700.0, 500.0, 300.0, 200.0, 100.0],
        description="Isobar pressures (hPa)",
    )
    isentrops: list[float] = Field(
        default_factory=lambda: [230.0 + 10.0 * i for i in range(17)],
        description="Potential temperatures of isentrops (K)",
    )
    iso_theta_e: list[float] = Field(
        default_factory=lambda: [-20.0 + 2.0 * i for i in range(31)],
        description="Moist adiabats, labelled by their temperature (C) at 1000 hPa",
    )
    iso_mixing_ratio: list[float] = Field(
        default_factory=lambda: [
            0.1, 0.2, 0.4, 0.6, 0.8, 1.0, 1.5, 2.0, 2.5, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0,
            10.0, 12.0, 14.0, 16.0, 18.0, 20.0, 24.0, 28.0, 32.0, 36.0, 40.0, 44.0,
            48.0, 52.0, 56.0, 60.0, 68.0, 76.0,
        ],
        description="Mixing ratios (g/kg)",
    )

    isentrops_top_pressure: PositiveFloat = Field(
        default=200.0,
        description="Highest level (hPa) isentrops and moist adiabats are drawn to",
    )
    iso_mixing_ratio_top_pressure: PositiveFloat = Field(
        default=300.0,
        description="Highest level (hPa) mixing ratio lines are drawn to",
    )
    points_per_isentrop: PositiveInt = Field(
        default=30,
        description="Number of pressure steps per curved background line",
    )
    isobar_temperature_range: tuple[float, float] = Field(
        default=(-150.0, 60.0),
        description="Temperature extent (C) of isobar segments",
    )
    theta_e_bracket: tuple[float, float] = Field(
        default=(-150.0, 60.0),
        description="Temperature bracket (C) for moist adiabat root finding",
    )

    @field_validator("isobars")
    @classmethod
    def validate_isobars(cls, v: list[float]) -> list[float]:
        if any(p <= 0 for p in v):
            raise ValueError("isobar pressures must be positive")
        return v

    @field_validator("iso_mixing_ratio")
    @classmethod
    def validate_mixing_ratios(cls, v: list[float]) -> list[float]:
        if any(mw <= 0 for mw in v):
            raise ValueError("mixing ratios must be positive")
        return v


# =============================================================================
# Root configuration
# =============================================================================


class ChartConfig(BaseConfig):
    """Root configuration combining every constant the plotting core consumes."""

    bounds: PressureTemperatureBounds = Field(default_factory=PressureTemperatureBounds)
    background: BackgroundConfig = Field(default_factory=BackgroundConfig)
    hodograph: HodographConfig = Field(default_factory=HodographConfig)
    rh_omega: RHOmegaConfig = Field(default_factory=RHOmegaConfig)
    zoom: ZoomConfig = Field(default_factory=ZoomConfig)
    root_finder: RootFinderConfig = Field(default_factory=RootFinderConfig)

    name: str = Field(default="default", description="Configuration name")

    @model_validator(mode="after")
    def validate_background_within_bounds(self) -> "ChartConfig":
        """Top pressures of curved lines must lie inside the chart."""
        bg = self.background
        for label, p in (
            ("isentrops_top_pressure", bg.isentrops_top_pressure),
            ("iso_mixing_ratio_top_pressure", bg.iso_mixing_ratio_top_pressure),
        ):
            if not self.bounds.min_pressure <= p <= self.bounds.max_pressure:
                raise ValueError(f"{label} must lie between min_pressure and max_pressure")
        return self

    def to_json(self, path: Path | str, indent: int = 2) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=indent))

    @classmethod
    def from_json(cls, path: Path | str) -> "ChartConfig":
        """Load configuration from JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Chart configuration not found: {path}")
        return cls.model_validate_json(path.read_text())

    def cache_key(self) -> str:
        """Stable key identifying the constants that affect background generation."""
        return self.model_dump_json(include={"bounds", "background", "root_finder"})

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of key configuration parameters."""
        b = self.bounds
        bg = self.background
        return {
            "name": self.name,
            "pressure_range_hpa": f"{b.min_pressure:g}-{b.max_pressure:g}",
            "temperature_range_c": f"{b.min_temperature:g}-{b.max_temperature:g}",
            "isotherms": len(bg.isotherms),
            "isobars": len(bg.isobars),
            "isentrops": len(bg.isentrops),
            "iso_theta_e": len(bg.iso_theta_e),
            "iso_mixing_ratio": len(bg.iso_mixing_ratio),
            "zoom_range": f"{self.zoom.min_zoom:g}-{self.zoom.max_zoom:g}",
            "max_speed_kt": self.hodograph.max_speed,
            "max_abs_omega": self.rh_omega.max_abs_omega,
        }
