"""
Sounding data model.

A sounding is an ordered sequence of levels, each with optional values. Any
value can be missing (``None``); the plotting helpers skip levels whose
required values are missing instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

from sondeview.config.models import PressureTemperatureBounds
from sondeview.coords import PPCoords, SDCoords, TPCoords, WPCoords


def _clean(value: Any) -> float | None:
    """None and NaN both mean missing."""
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    return value


@dataclass(frozen=True)
class Level:
    """One level of a sounding."""
    pressure: float | None = None  # hPa
    temperature: float | None = None  # C
    dew_point: float | None = None  # C
    height: float | None = None  # m
    wind_speed: float | None = None  # knots
    wind_direction: float | None = None  # degrees, direction the wind blows from
    omega: float | None = None  # vertical velocity
    cloud_fraction: float | None = None  # percent

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


@dataclass(frozen=True)
class Sounding:
    """A single vertical profile of the atmosphere."""
    levels: tuple[Level, ...] = ()
    source_description: str | None = None
    valid_time: datetime | None = None

    @classmethod
    def from_columns(
        cls,
        source_description: str | None = None,
        valid_time: datetime | None = None,
        **columns: Sequence[float | None] | NDArray,
    ) -> "Sounding":
        """
        Build a sounding from parallel columns keyed by :class:`Level` field name.

        Columns must all have the same length. Missing columns are all-missing.

        Example:
            >>> s = Sounding.from_columns(pressure=[1000, 850], temperature=[20, float("nan")])
            >>> s.levels[1].temperature is None
            True
        """
        names = Level.field_names()
        unknown = set(columns) - set(names)
        if unknown:
            raise ValueError(f"Unknown sounding columns: {sorted(unknown)}")

        lengths = {len(col) for col in columns.values()}
        if len(lengths) > 1:
            raise ValueError(f"Sounding columns have different lengths: {sorted(lengths)}")
        n_levels = lengths.pop() if lengths else 0

        levels = tuple(
            Level(**{name: _clean(col[i]) for name, col in columns.items()})
            for i in range(n_levels)
        )
        return cls(levels=levels, source_description=source_description, valid_time=valid_time)

    def __len__(self) -> int:
        return len(self.levels)

    def profile(self, name: str) -> NDArray[np.float64]:
        """One level attribute as a float array, NaN where missing."""
        if name not in Level.field_names():
            raise KeyError(f"Unknown level attribute: {name}")
        return np.array(
            [np.nan if (v := getattr(level, name)) is None else v for level in self.levels],
            dtype=np.float64,
        )

    # -------------------------------------------------------------------------
    # Quantity space points, missing values skipped, levels above MINP dropped
    # -------------------------------------------------------------------------

    def _levels_with(self, *names: str, bounds: PressureTemperatureBounds | None) -> Iterable[Level]:
        min_pressure = (bounds if bounds is not None else PressureTemperatureBounds()).min_pressure
        for level in self.levels:
            if level.pressure is None or level.pressure <= min_pressure:
                continue
            if any(getattr(level, name) is None for name in names):
                continue
            yield level

    def temperature_points(self, bounds: PressureTemperatureBounds | None = None) -> list[TPCoords]:
        return [
            TPCoords(level.temperature, level.pressure)
            for level in self._levels_with("temperature", bounds=bounds)
        ]

    def dew_point_points(self, bounds: PressureTemperatureBounds | None = None) -> list[TPCoords]:
        return [
            TPCoords(level.dew_point, level.pressure)
            for level in self._levels_with("dew_point", bounds=bounds)
        ]

    def wind_points(self, bounds: PressureTemperatureBounds | None = None) -> list[SDCoords]:
        return [
            SDCoords(level.wind_speed, level.wind_direction)
            for level in self._levels_with("wind_speed", "wind_direction", bounds=bounds)
        ]

    def omega_points(self, bounds: PressureTemperatureBounds | None = None) -> list[WPCoords]:
        return [
            WPCoords(level.omega, level.pressure)
            for level in self._levels_with("omega", bounds=bounds)
        ]

    def cloud_points(self, bounds: PressureTemperatureBounds | None = None) -> list[PPCoords]:
        return [
            PPCoords(level.cloud_fraction, level.pressure)
            for level in self._levels_with("cloud_fraction", bounds=bounds)
        ]

    # -------------------------------------------------------------------------
    # Sampling
    # -------------------------------------------------------------------------

    def linear_interpolate(self, pressure: float) -> Level | None:
        """
        Interpolate a level at ``pressure``, linearly in pressure.

        Uses the two adjacent levels that bracket ``pressure``. A value is None
        when either bracketing level is missing it. Wind is interpolated by its
        components so directions wrap through north. Returns None if no pair of
        levels brackets ``pressure``.
        """
        with_pressure = [level for level in self.levels if level.pressure is not None]
        for level in with_pressure:
            if level.pressure == pressure:
                return level

        for below, above in zip(with_pressure, with_pressure[1:]):
            lo, hi = sorted((below.pressure, above.pressure))
            if lo < pressure < hi:
                return _interpolate_levels(below, above, pressure)
        return None

    def describe(self) -> str:
        parts = [self.source_description or "sounding", f"{len(self.levels)} levels"]
        if self.valid_time is not None:
            parts.append(self.valid_time.isoformat())
        return ", ".join(parts)


_SCALAR_FIELDS = ("temperature", "dew_point", "height", "omega", "cloud_fraction")


def _lerp(a: float | None, b: float | None, weight: float) -> float | None:
    if a is None or b is None:
        return None
    return a + weight * (b - a)


def _interpolate_wind(a: Level, b: Level, weight: float) -> tuple[float | None, float | None]:
    if None in (a.wind_speed, a.wind_direction, b.wind_speed, b.wind_direction):
        return None, None

    def components(level: Level) -> tuple[float, float]:
        rad = math.radians(level.wind_direction)
        return -level.wind_speed * math.sin(rad), -level.wind_speed * math.cos(rad)

    ua, va = components(a)
    ub, vb = components(b)
    u = ua + weight * (ub - ua)
    v = va + weight * (vb - va)
    speed = math.hypot(u, v)
    direction = math.degrees(math.atan2(-u, -v)) % 360.0 if speed > 0.0 else 0.0
    return speed, direction


def _interpolate_levels(a: Level, b: Level, pressure: float) -> Level:
    weight = (pressure - a.pressure) / (b.pressure - a.pressure)
    speed, direction = _interpolate_wind(a, b, weight)
    return Level(
        pressure=pressure,
        wind_speed=speed,
        wind_direction=direction,
        **{name: _lerp(getattr(a, name), getattr(b, name), weight) for name in _SCALAR_FIELDS},
    )
