"""
Data context: the loaded soundings, which one is current, and the XY
envelope of everything loaded.
"""

from __future__ import annotations

from typing import Iterable

from sondeview.config.models import ChartConfig
from sondeview.coords import SDCoords, TPCoords, WPCoords, XYCoords, XYRect
from sondeview.data.sounding import Sounding
from sondeview.transforms import convert_sd_to_xy, convert_tp_to_xy, convert_wp_to_xy
from sondeview.utils.logging import get_logger

logger = get_logger(__name__)

# Small non-empty box so a view with no data still has a sane fit target
DEFAULT_ENVELOPE = XYRect(XYCoords(0.45, 0.45), XYCoords(0.55, 0.55))


def compute_envelope(soundings: Iterable[Sounding], config: ChartConfig | None = None) -> XYRect:
    """
    Bounding box in skew-T XY of every temperature and dew point in ``soundings``.

    Levels with missing pressure, or pressure below the chart top, are
    skipped. Missing temperature or dew point skips only that value.
    """
    config = config if config is not None else ChartConfig()
    bounds = config.bounds

    envelope = DEFAULT_ENVELOPE
    for sounding in soundings:
        for level in sounding.levels:
            if level.pressure is None or level.pressure < bounds.min_pressure:
                continue
            for value in (level.temperature, level.dew_point):
                if value is None:
                    continue
                envelope = envelope.union(convert_tp_to_xy(TPCoords(value, level.pressure), bounds))
    return envelope


def compute_rh_omega_envelope(
    soundings: Iterable[Sounding],
    config: ChartConfig | None = None,
    skew_t_envelope: XYRect | None = None,
) -> XYRect:
    """
    Envelope for the RH/omega panel.

    The vertical extent is shared with the skew-T so both panels line up;
    the horizontal extent comes from the omega values.
    """
    config = config if config is not None else ChartConfig()
    soundings = list(soundings)
    if skew_t_envelope is None:
        skew_t_envelope = compute_envelope(soundings, config)

    x_min, x_max = DEFAULT_ENVELOPE.lower_left.x, DEFAULT_ENVELOPE.upper_right.x
    for sounding in soundings:
        for level in sounding.levels:
            if level.pressure is None or level.pressure < config.bounds.min_pressure or level.omega is None:
                continue
            xy = convert_wp_to_xy(WPCoords(level.omega, level.pressure), config.rh_omega, config.bounds)
            x_min = min(x_min, xy.x)
            x_max = max(x_max, xy.x)

    return XYRect(
        XYCoords(x_min, skew_t_envelope.lower_left.y),
        XYCoords(x_max, skew_t_envelope.upper_right.y),
    )


def compute_hodograph_envelope(soundings: Iterable[Sounding], config: ChartConfig | None = None) -> XYRect:
    """Envelope of all wind points on the hodograph."""
    config = config if config is not None else ChartConfig()

    envelope = DEFAULT_ENVELOPE
    for sounding in soundings:
        for level in sounding.levels:
            if level.pressure is None or level.pressure < config.bounds.min_pressure:
                continue
            if level.wind_speed is None or level.wind_direction is None:
                continue
            envelope = envelope.union(
                convert_sd_to_xy(SDCoords(level.wind_speed, level.wind_direction), config.hodograph)
            )
    return envelope


class DataContext:
    """
    Loaded soundings and the current selection.

    ``data_version`` increases whenever the loaded data or the current
    selection changes. Renderers key cached data layers on it.
    """

    def __init__(self, config: ChartConfig | None = None):
        self.config = config if config is not None else ChartConfig()
        self._soundings: list[Sounding] = []
        self._current_index = 0
        self.envelope: XYRect = DEFAULT_ENVELOPE
        self.data_version = 0

    def load_data(self, soundings: Iterable[Sounding]) -> None:
        """Replace the loaded soundings and select the first one."""
        self._soundings = list(soundings)
        self._current_index = 0
        self.envelope = compute_envelope(self._soundings, self.config)
        self.data_version += 1
        logger.info(f"Loaded {len(self._soundings)} soundings")
        logger.debug(
            f"Data envelope: ({self.envelope.lower_left.x:.3f}, {self.envelope.lower_left.y:.3f}) - "
            f"({self.envelope.upper_right.x:.3f}, {self.envelope.upper_right.y:.3f})"
        )

    @property
    def plottable(self) -> tuple[Sounding, ...]:
        return tuple(self._soundings)

    @property
    def current_index(self) -> int:
        return self._current_index

    def __len__(self) -> int:
        return len(self._soundings)

    def current(self) -> Sounding | None:
        if not self._soundings:
            return None
        return self._soundings[self._current_index]

    def select_current(self, index: int) -> None:
        """Select a sounding by index, clamped into range. No-op when empty."""
        if not self._soundings:
            return
        index = min(max(int(index), 0), len(self._soundings) - 1)
        self._set_index(index)

    def advance(self) -> None:
        """Select the next sounding, wrapping to the first."""
        if not self._soundings:
            return
        self._set_index((self._current_index + 1) % len(self._soundings))

    def retreat(self) -> None:
        """Select the previous sounding, wrapping to the last."""
        if not self._soundings:
            return
        self._set_index((self._current_index - 1) % len(self._soundings))

    def _set_index(self, index: int) -> None:
        if index != self._current_index:
            self._current_index = index
            self.data_version += 1

    def rh_omega_envelope(self) -> XYRect:
        return compute_rh_omega_envelope(self._soundings, self.config, self.envelope)

    def hodograph_envelope(self) -> XYRect:
        return compute_hodograph_envelope(self._soundings, self.config)
