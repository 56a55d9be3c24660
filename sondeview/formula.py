"""
Thermodynamic formulas used by the skew-T background and data overlays.

All functions accept Python floats or numpy arrays and follow numpy
broadcasting. Physically meaningless inputs (pressure at or below the vapor
pressure, non-positive pressure, ...) produce NaN or Inf instead of raising,
callers filter those values out before plotting.

Units
-----
Pressure in hPa, temperature in Celsius unless the name says Kelvin,
mixing ratio in g/kg.
"""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

# ============================================================================
# PHYSICAL CONSTANTS
# ============================================================================

KELVIN_OFFSET = 273.15
REFERENCE_PRESSURE_HPA = 1000.0
POISSON_EXPONENT = 0.286  # Rd / cp
LATENT_HEAT_VAPORIZATION = 2.6897e6  # J/kg, as used in the theta-e approximation
CP_DRY_AIR = 1005.7  # J/kg/K
MW_RATIO_G_PER_KG = 621.97  # 1000 * Mw / Md

# Root finder defaults
ROOT_TOLERANCE = 1.0e-3
ROOT_MAX_ITERATIONS = 50


def theta_kelvin(pressure_hpa: ArrayLike, temperature_c: ArrayLike) -> NDArray[np.float64]:
    """Potential temperature in Kelvin."""
    p = np.asarray(pressure_hpa, dtype=np.float64)
    t = np.asarray(temperature_c, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (t + KELVIN_OFFSET) * np.power(REFERENCE_PRESSURE_HPA / p, POISSON_EXPONENT)


def temperature_c_from_theta(theta_k: ArrayLike, pressure_hpa: ArrayLike) -> NDArray[np.float64]:
    """Temperature in Celsius of air with potential temperature ``theta_k`` at ``pressure_hpa``."""
    theta = np.asarray(theta_k, dtype=np.float64)
    p = np.asarray(pressure_hpa, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        return theta * np.power(p / REFERENCE_PRESSURE_HPA, POISSON_EXPONENT) - KELVIN_OFFSET


def vapor_pressure_water(temperature_c: ArrayLike) -> NDArray[np.float64]:
    """Vapor pressure of water in hPa."""
    t = np.asarray(temperature_c, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return 6.11 * np.power(10.0, 7.5 * t / (237.3 + t))


def mixing_ratio(temperature_c: ArrayLike, pressure_hpa: ArrayLike) -> NDArray[np.float64]:
    """
    Saturation mixing ratio in g/kg.

    When ``pressure_hpa <= vapor_pressure_water(temperature_c)`` there is no
    physical solution and the result is Inf or negative. Use
    :func:`is_physical` to filter.
    """
    vp = vapor_pressure_water(temperature_c)
    p = np.asarray(pressure_hpa, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        return MW_RATIO_G_PER_KG * (vp / (p - vp))


def temperature_from_p_and_saturated_mw(pressure_hpa: ArrayLike, mw_gkg: ArrayLike) -> NDArray[np.float64]:
    """
    Temperature in Celsius given a pressure and mixing ratio, assuming 100% RH.

    Closed form inverse of :func:`mixing_ratio`.
    """
    p = np.asarray(pressure_hpa, dtype=np.float64)
    mw = np.asarray(mw_gkg, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        z = mw * p / 6.11 / MW_RATIO_G_PER_KG / (1.0 + mw / MW_RATIO_G_PER_KG)
        log_z = np.log10(z)
        return 237.5 * log_z / (7.5 - log_z)


def theta_e_saturated_kelvin(pressure_hpa: ArrayLike, temperature_c: ArrayLike) -> NDArray[np.float64]:
    """Saturated equivalent potential temperature in Kelvin."""
    theta = theta_kelvin(pressure_hpa, temperature_c)
    mw = mixing_ratio(temperature_c, pressure_hpa) / 1000.0  # kg/kg
    t_k = np.asarray(temperature_c, dtype=np.float64) + KELVIN_OFFSET
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return theta * np.exp(LATENT_HEAT_VAPORIZATION * mw / CP_DRY_AIR / t_k)


def theta_e_kelvin(
    pressure_hpa: ArrayLike,
    temperature_c: ArrayLike,
    dew_point_c: ArrayLike,
) -> NDArray[np.float64]:
    """
    Equivalent potential temperature in Kelvin.

    Same approximation as :func:`theta_e_saturated_kelvin` with the mixing
    ratio taken at the dew point.
    """
    theta = theta_kelvin(pressure_hpa, temperature_c)
    mw = mixing_ratio(dew_point_c, pressure_hpa) / 1000.0
    t_k = np.asarray(temperature_c, dtype=np.float64) + KELVIN_OFFSET
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return theta * np.exp(LATENT_HEAT_VAPORIZATION * mw / CP_DRY_AIR / t_k)


def relative_humidity(temperature_c: ArrayLike, dew_point_c: ArrayLike) -> NDArray[np.float64]:
    """Relative humidity as a fraction (0-1 for physical input)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return vapor_pressure_water(dew_point_c) / vapor_pressure_water(temperature_c)


def celsius_to_fahrenheit(temperature_c: ArrayLike) -> NDArray[np.float64]:
    """Convert Celsius to Fahrenheit."""
    return 1.8 * np.asarray(temperature_c, dtype=np.float64) + 32.0


def is_physical(value: ArrayLike) -> NDArray[np.bool_]:
    """True where ``value`` is finite and non-negative."""
    v = np.asarray(value, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        return np.isfinite(v) & (v >= 0.0)


def find_root(
    f: Callable[[float], float],
    low: float,
    high: float,
    tolerance: float = ROOT_TOLERANCE,
    max_iterations: int = ROOT_MAX_ITERATIONS,
) -> float:
    """
    Bisection root finder.

    The bounds are swapped if ``low > high``. If ``f(low)`` and ``f(mid)``
    have the same sign the search continues in ``[mid, high]``, otherwise in
    ``[low, mid]``. The midpoint of the final bracket is returned even when
    ``max_iterations`` is reached before the bracket is narrower than
    ``tolerance``; non-convergence is not an error.

    Args:
        f: Scalar function
        low: One end of the bracket
        high: Other end of the bracket
        tolerance: Bracket width at which to stop
        max_iterations: Maximum number of bisections

    Returns:
        Approximate root
    """
    if low > high:
        low, high = high, low

    iterations = 0
    while (high - low) > tolerance and iterations < max_iterations:
        mid = (low + high) / 2.0
        if f(low) * f(mid) > 0.0:
            low = mid
        else:
            high = mid
        iterations += 1

    return (low + high) / 2.0


def wet_bulb_c(
    pressure_hpa: float,
    temperature_c: float,
    dew_point_c: float,
    tolerance: float = ROOT_TOLERANCE,
    max_iterations: int = ROOT_MAX_ITERATIONS,
) -> float:
    """
    Wet bulb temperature in Celsius.

    Found as the temperature on the saturated moist adiabat through the
    parcel's equivalent potential temperature, bracketed by the dew point and
    the temperature. Returns NaN if any input is missing or non-finite.
    """
    values = (pressure_hpa, temperature_c, dew_point_c)
    if any(v is None for v in values) or not all(np.isfinite(v) for v in values):
        return float("nan")

    target = float(theta_e_kelvin(pressure_hpa, temperature_c, dew_point_c))
    if not np.isfinite(target):
        return float("nan")

    def residual(t: float) -> float:
        return float(theta_e_saturated_kelvin(pressure_hpa, t)) - target

    return find_root(residual, dew_point_c, temperature_c, tolerance, max_iterations)
