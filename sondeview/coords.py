"""
Coordinate types for the four coordinate spaces.

Quantity space
    Meteorological values, one pair per diagram: ``TPCoords`` (skew-T),
    ``SDCoords`` (hodograph), ``WPCoords`` (RH/omega), ``PPCoords`` (cloud).
XY
    Dimensionless layout coordinates, nominally 0-1 on each axis for on-chart
    data. Origin lower left.
Screen
    XY after applying the zoom factor and translation of a view. Origin lower
    left.
Device
    Pixel positions, origin upper left, row increasing downward.

All coordinates are immutable value objects.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TPCoords:
    """Temperature (C) and pressure (hPa)."""
    temperature: float
    pressure: float


@dataclass(frozen=True)
class SDCoords:
    """Wind speed (knots) and direction the wind blows from (degrees)."""
    speed: float
    direction: float


@dataclass(frozen=True)
class WPCoords:
    """Omega (vertical velocity) and pressure (hPa)."""
    w: float
    p: float


@dataclass(frozen=True)
class PPCoords:
    """Cloud fraction in percent and pressure (hPa)."""
    pcnt: float
    press: float


@dataclass(frozen=True)
class XYCoords:
    x: float
    y: float

    @classmethod
    def origin(cls) -> "XYCoords":
        return cls(0.0, 0.0)


@dataclass(frozen=True)
class ScreenCoords:
    x: float
    y: float


@dataclass(frozen=True)
class DeviceCoords:
    col: float
    row: float


@dataclass(frozen=True)
class XYRect:
    """Axis aligned rectangle in XY coordinates."""
    lower_left: XYCoords
    upper_right: XYCoords

    @classmethod
    def unit(cls) -> "XYRect":
        return cls(XYCoords(0.0, 0.0), XYCoords(1.0, 1.0))

    @property
    def width(self) -> float:
        return self.upper_right.x - self.lower_left.x

    @property
    def height(self) -> float:
        return self.upper_right.y - self.lower_left.y

    def union(self, point: XYCoords) -> "XYRect":
        """Smallest rectangle containing this one and ``point``."""
        return XYRect(
            XYCoords(min(self.lower_left.x, point.x), min(self.lower_left.y, point.y)),
            XYCoords(max(self.upper_right.x, point.x), max(self.upper_right.y, point.y)),
        )

    def contains(self, point: XYCoords) -> bool:
        return (
            self.lower_left.x <= point.x <= self.upper_right.x
            and self.lower_left.y <= point.y <= self.upper_right.y
        )


@dataclass(frozen=True)
class ScreenRect:
    lower_left: ScreenCoords
    upper_right: ScreenCoords

    @property
    def width(self) -> float:
        return self.upper_right.x - self.lower_left.x

    @property
    def height(self) -> float:
        return self.upper_right.y - self.lower_left.y
