"""Sounding data model and the loaded-data context."""

from sondeview.data.context import (
    DEFAULT_ENVELOPE,
    DataContext,
    compute_envelope,
    compute_hodograph_envelope,
    compute_rh_omega_envelope,
)
from sondeview.data.sounding import Level, Sounding

__all__ = [
    "DEFAULT_ENVELOPE",
    "DataContext",
    "Level",
    "Sounding",
    "compute_envelope",
    "compute_hodograph_envelope",
    "compute_rh_omega_envelope",
]
