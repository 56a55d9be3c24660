"""
Background reference lines for the skew-T.

Curves are generated in temperature/pressure space from the constants in
:class:`~sondeview.config.models.ChartConfig` and do not depend on loaded
data. They are transformed to screen coordinates at draw time, so one set can
be shared by every redraw for the life of the process.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Literal

import numpy as np

from sondeview.config.models import ChartConfig, RootFinderConfig
from sondeview.coords import TPCoords
from sondeview.formula import (
    find_root,
    temperature_c_from_theta,
    temperature_from_p_and_saturated_mw,
    theta_e_saturated_kelvin,
)
from sondeview.transforms import convert_tp_to_xy
from sondeview.utils.logging import get_logger

logger = get_logger(__name__)

Curve = tuple[TPCoords, ...]


def _pressure_steps(start: float, stop: float, n_steps: int) -> list[float]:
    """``n_steps + 1`` evenly spaced pressures from ``start`` to exactly ``stop``."""
    step = (stop - start) / n_steps
    pressures = [start + i * step for i in range(n_steps)]
    pressures.append(stop)
    return pressures


def _finite(points: list[TPCoords]) -> Curve:
    kept = tuple(p for p in points if math.isfinite(p.temperature) and math.isfinite(p.pressure))
    if len(kept) != len(points):
        logger.debug(f"Skipped {len(points) - len(kept)} non-physical background points")
    return kept


def generate_isotherms(config: ChartConfig) -> tuple[Curve, ...]:
    """Straight lines of constant temperature from the bottom to the top of the chart."""
    b = config.bounds
    return tuple(
        (TPCoords(t, b.max_pressure), TPCoords(t, b.min_pressure))
        for t in config.background.isotherms
    )


def generate_isobars(config: ChartConfig) -> tuple[Curve, ...]:
    """Horizontal lines of constant pressure."""
    t_lo, t_hi = config.background.isobar_temperature_range
    return tuple(
        (TPCoords(t_lo, p), TPCoords(t_hi, p))
        for p in config.background.isobars
    )


def generate_isentrop(theta: float, config: ChartConfig) -> Curve:
    """Temperature/pressure points along a line of constant potential temperature."""
    bg = config.background
    pressures = _pressure_steps(config.bounds.max_pressure, bg.isentrops_top_pressure, bg.points_per_isentrop)
    temperatures = temperature_c_from_theta(theta, np.asarray(pressures))
    return _finite([TPCoords(float(t), p) for t, p in zip(temperatures, pressures)])


def generate_isentrops(config: ChartConfig) -> tuple[Curve, ...]:
    return tuple(generate_isentrop(theta, config) for theta in config.background.isentrops)


def generate_iso_mixing_ratio_line(mw: float, config: ChartConfig) -> Curve:
    """Points of constant saturation mixing ratio (g/kg)."""
    bg = config.background
    pressures = _pressure_steps(
        config.bounds.max_pressure, bg.iso_mixing_ratio_top_pressure, bg.points_per_isentrop
    )
    temperatures = temperature_from_p_and_saturated_mw(np.asarray(pressures), mw)
    return _finite([TPCoords(float(t), p) for t, p in zip(temperatures, pressures)])


def generate_iso_mixing_ratio(config: ChartConfig) -> tuple[Curve, ...]:
    return tuple(generate_iso_mixing_ratio_line(mw, config) for mw in config.background.iso_mixing_ratio)


def generate_iso_theta_e_line(
    theta_e_k: float,
    config: ChartConfig,
    root_finder: RootFinderConfig | None = None,
) -> Curve:
    """
    Trace a moist adiabat of saturated equivalent potential temperature ``theta_e_k``.

    Each pressure level is root-found independently in the configured
    temperature bracket. The sweep starts at the isentrop top pressure and
    steps down the chart until one step past the bottom edge.
    """
    root_finder = root_finder if root_finder is not None else config.root_finder
    bg = config.background
    low, high = bg.theta_e_bracket
    maxp = config.bounds.max_pressure
    dp = (maxp - config.bounds.min_pressure) / bg.points_per_isentrop

    points = []
    i = 0
    p = bg.isentrops_top_pressure
    while p < maxp + 1.0001 * dp:
        t = find_root(
            lambda t, p=p: float(theta_e_saturated_kelvin(p, t)) - theta_e_k,
            low,
            high,
            tolerance=root_finder.tolerance,
            max_iterations=root_finder.max_iterations,
        )
        points.append(TPCoords(t, p))
        i += 1
        p = bg.isentrops_top_pressure + i * dp

    return _finite(points)


def generate_iso_theta_e(
    config: ChartConfig,
    root_finder: RootFinderConfig | None = None,
) -> tuple[Curve, ...]:
    """Moist adiabats for every configured theta-e, labelled by temperature at 1000 hPa."""
    return tuple(
        generate_iso_theta_e_line(float(theta_e_saturated_kelvin(1000.0, theta_c)), config, root_finder)
        for theta_c in config.background.iso_theta_e
    )


@dataclass(frozen=True)
class BackgroundCurves:
    """Immutable set of background curves in temperature/pressure space."""

    isotherms: tuple[Curve, ...]
    isobars: tuple[Curve, ...]
    isentrops: tuple[Curve, ...]
    iso_theta_e: tuple[Curve, ...]
    iso_mixing_ratio: tuple[Curve, ...]

    FAMILIES = ("isotherms", "isobars", "isentrops", "iso_theta_e", "iso_mixing_ratio")

    def counts(self) -> dict[str, int]:
        return {name: len(getattr(self, name)) for name in self.FAMILIES}

    def to_dict(
        self,
        space: Literal["tp", "xy"] = "tp",
        config: ChartConfig | None = None,
    ) -> dict[str, Any]:
        """Plain lists of point pairs, either (T, P) or skew-T (x, y)."""
        bounds = (config if config is not None else ChartConfig()).bounds

        def convert(point: TPCoords) -> list[float]:
            if space == "xy":
                xy = convert_tp_to_xy(point, bounds)
                return [xy.x, xy.y]
            return [point.temperature, point.pressure]

        return {
            "space": space,
            **{
                name: [[convert(pt) for pt in curve] for curve in getattr(self, name)]
                for name in self.FAMILIES
            },
        }


def generate_background(config: ChartConfig | None = None) -> BackgroundCurves:
    """Generate every background curve family."""
    config = config if config is not None else ChartConfig()
    curves = BackgroundCurves(
        isotherms=generate_isotherms(config),
        isobars=generate_isobars(config),
        isentrops=generate_isentrops(config),
        iso_theta_e=generate_iso_theta_e(config),
        iso_mixing_ratio=generate_iso_mixing_ratio(config),
    )
    logger.debug(f"Generated background curves: {curves.counts()}")
    return curves


class BackgroundCache:
    """Generate background curves once per distinct chart configuration."""

    def __init__(self) -> None:
        self._cache: dict[str, BackgroundCurves] = {}

    def get(self, config: ChartConfig) -> BackgroundCurves:
        key = config.cache_key()
        curves = self._cache.get(key)
        if curves is None:
            curves = generate_background(config)
            self._cache[key] = curves
        return curves

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
