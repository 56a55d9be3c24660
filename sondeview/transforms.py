"""
Quantity space to XY conversions for each diagram.

Every function is pure and total. Out-of-range values (negative pressure,
points off the chart) propagate through rather than raising, because they are
expected while panning.
"""

from __future__ import annotations

import math

from sondeview.config.models import HodographConfig, PressureTemperatureBounds, RHOmegaConfig
from sondeview.coords import PPCoords, SDCoords, TPCoords, WPCoords, XYCoords

DEFAULT_BOUNDS = PressureTemperatureBounds()
DEFAULT_HODOGRAPH = HodographConfig()
DEFAULT_RH_OMEGA = RHOmegaConfig()


def _log10(value: float) -> float:
    # math.log10 raises for value <= 0; NaN keeps the chain total
    if value > 0.0:
        return math.log10(value)
    if value == 0.0:
        return -math.inf
    return math.nan


# =============================================================================
# Shared log-pressure axis
# =============================================================================


def pressure_to_y(pressure: float, bounds: PressureTemperatureBounds = DEFAULT_BOUNDS) -> float:
    """Vertical XY coordinate of a pressure level. 0 at max pressure, 1 at min pressure."""
    log_maxp = math.log10(bounds.max_pressure)
    log_minp = math.log10(bounds.min_pressure)
    return (log_maxp - _log10(pressure)) / (log_maxp - log_minp)


def y_to_pressure(y: float, bounds: PressureTemperatureBounds = DEFAULT_BOUNDS) -> float:
    """Inverse of :func:`pressure_to_y`."""
    log_maxp = math.log10(bounds.max_pressure)
    log_minp = math.log10(bounds.min_pressure)
    try:
        return 10.0 ** (log_maxp - y * (log_maxp - log_minp))
    except OverflowError:
        return math.inf


# =============================================================================
# Skew-T
# =============================================================================


def convert_tp_to_xy(coords: TPCoords, bounds: PressureTemperatureBounds = DEFAULT_BOUNDS) -> XYCoords:
    """Temperature/pressure to skewed XY."""
    y = pressure_to_y(coords.pressure, bounds)
    x = (coords.temperature - bounds.min_temperature) / (bounds.max_temperature - bounds.min_temperature)
    # do the skew
    return XYCoords(x + y, y)


def convert_xy_to_tp(coords: XYCoords, bounds: PressureTemperatureBounds = DEFAULT_BOUNDS) -> TPCoords:
    """Skewed XY to temperature/pressure."""
    # undo the skew
    x = coords.x - coords.y
    t = x * (bounds.max_temperature - bounds.min_temperature) + bounds.min_temperature
    return TPCoords(t, y_to_pressure(coords.y, bounds))


# =============================================================================
# Hodograph
# =============================================================================


def convert_sd_to_xy(coords: SDCoords, config: HodographConfig = DEFAULT_HODOGRAPH) -> XYCoords:
    """Speed/direction to XY. The hodograph center is (0.5, 0.5)."""
    radius = coords.speed / 2.0 / config.max_speed
    angle = math.radians(270.0 - coords.direction)
    return XYCoords(radius * math.cos(angle) + 0.5, radius * math.sin(angle) + 0.5)


def convert_xy_to_sd(coords: XYCoords, config: HodographConfig = DEFAULT_HODOGRAPH) -> SDCoords:
    """XY to speed/direction, used when sampling under the cursor."""
    dx = coords.x - 0.5
    dy = coords.y - 0.5
    speed = 2.0 * config.max_speed * math.hypot(dx, dy)
    direction = (270.0 - math.degrees(math.atan2(dy, dx))) % 360.0
    return SDCoords(speed, direction)


# =============================================================================
# RH / omega
# =============================================================================


def convert_wp_to_xy(
    coords: WPCoords,
    config: RHOmegaConfig = DEFAULT_RH_OMEGA,
    bounds: PressureTemperatureBounds = DEFAULT_BOUNDS,
) -> XYCoords:
    """Omega/pressure to XY. Zero omega is centered horizontally."""
    y = pressure_to_y(coords.p, bounds)
    x = (coords.w + config.max_abs_omega) / (2.0 * config.max_abs_omega)
    return XYCoords(x, y)


def convert_xy_to_wp(
    coords: XYCoords,
    config: RHOmegaConfig = DEFAULT_RH_OMEGA,
    bounds: PressureTemperatureBounds = DEFAULT_BOUNDS,
) -> WPCoords:
    w = coords.x * (2.0 * config.max_abs_omega) - config.max_abs_omega
    return WPCoords(w, y_to_pressure(coords.y, bounds))


# =============================================================================
# Cloud
# =============================================================================


def convert_pp_to_xy(coords: PPCoords, bounds: PressureTemperatureBounds = DEFAULT_BOUNDS) -> XYCoords:
    """Cloud percent/pressure to XY, 100% at the right edge."""
    return XYCoords(coords.pcnt / 100.0, pressure_to_y(coords.press, bounds))


def convert_xy_to_pp(coords: XYCoords, bounds: PressureTemperatureBounds = DEFAULT_BOUNDS) -> PPCoords:
    return PPCoords(coords.x * 100.0, y_to_pressure(coords.y, bounds))
