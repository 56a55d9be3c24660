"""
Application state.

:class:`AppState` is the one owned object a GUI layer passes to its event
handlers. It owns the chart configuration, the background curve cache, the
loaded data and one plot context per diagram, and exposes the handler entry
points (load, navigation, scroll, press/release/motion, resize).

Every handler mutates only state owned here, bounds the affected view after
any zoom or pan, and leaves dirty flags set for the renderer.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from sondeview.background import BackgroundCache, BackgroundCurves
from sondeview.config.models import ChartConfig
from sondeview.coords import DeviceCoords, SDCoords, XYCoords, XYRect
from sondeview.data.context import DataContext
from sondeview.data.sounding import Level, Sounding
from sondeview.view.contexts import (
    CloudContext,
    CurvePath,
    HodographContext,
    PlotContext,
    RHOmegaContext,
    SkewTContext,
)
from sondeview.utils.logging import get_logger

logger = get_logger(__name__)


class Diagram(str, Enum):
    """The diagrams a sounding is drawn on."""
    SKEW_T = "skew_t"
    HODOGRAPH = "hodograph"
    RH_OMEGA = "rh_omega"
    CLOUD = "cloud"


RenderKey = tuple[tuple[float, float, float, int, int], int]


class AppState:
    """Single owned application state."""

    def __init__(self, config: ChartConfig | None = None):
        self.config = config if config is not None else ChartConfig()
        self.background_cache = BackgroundCache()
        self.data = DataContext(self.config)

        self.skew_t = SkewTContext(self.config)
        self.hodograph = HodographContext(self.config)
        self.rh_omega = RHOmegaContext(self.config)
        self.cloud = CloudContext(self.config)

        # level under the cursor, for the readout and sample overlays
        self.last_sample: Level | None = None

    def context(self, diagram: Diagram | str) -> PlotContext:
        diagram = Diagram(diagram)
        return {
            Diagram.SKEW_T: self.skew_t,
            Diagram.HODOGRAPH: self.hodograph,
            Diagram.RH_OMEGA: self.rh_omega,
            Diagram.CLOUD: self.cloud,
        }[diagram]

    def contexts(self) -> dict[Diagram, PlotContext]:
        return {diagram: self.context(diagram) for diagram in Diagram}

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    def load_data(self, soundings: Iterable[Sounding]) -> None:
        """Load soundings and fit every diagram to its data envelope."""
        self.data.load_data(soundings)

        skew_t_envelope = self.data.envelope
        envelopes = {
            Diagram.SKEW_T: skew_t_envelope,
            Diagram.HODOGRAPH: self.data.hodograph_envelope(),
            Diagram.RH_OMEGA: self.data.rh_omega_envelope(),
            # cloud fraction always spans 0-100%
            Diagram.CLOUD: XYRect(
                XYCoords(0.0, skew_t_envelope.lower_left.y),
                XYCoords(1.0, skew_t_envelope.upper_right.y),
            ),
        }
        for diagram, envelope in envelopes.items():
            view = self.context(diagram).view
            view.set_xy_envelope(envelope)
            view.zoom_to_envelope()
            view.mark_dirty()

    def current(self) -> Sounding | None:
        return self.data.current()

    def display_next(self) -> Sounding | None:
        self.data.advance()
        return self.data.current()

    def display_previous(self) -> Sounding | None:
        self.data.retreat()
        return self.data.current()

    # -------------------------------------------------------------------------
    # Pointer and window events
    # -------------------------------------------------------------------------

    def scroll(self, diagram: Diagram | str, position: DeviceCoords, dy: float) -> bool:
        ctx = self.context(diagram)
        ctx.view.last_cursor_position = position
        return ctx.zoom(dy, position)

    def press(self, diagram: Diagram | str, position: DeviceCoords) -> None:
        self.context(diagram).view.press(position)

    def release(self, diagram: Diagram | str, position: DeviceCoords | None = None) -> None:
        """Button released. A final ``position`` completes the drag before it ends."""
        view = self.context(diagram).view
        if position is not None:
            view.drag_to(position)
        view.release()

    def motion(self, diagram: Diagram | str, position: DeviceCoords) -> bool:
        """Pointer moved. Returns True if the view panned and needs a redraw."""
        return self.context(diagram).view.drag_to(position)

    def leave(self, diagram: Diagram | str) -> None:
        self.context(diagram).view.leave()

    def resize(self, diagram: Diagram | str, width: int, height: int) -> bool:
        ctx = self.context(diagram)
        changed = ctx.view.set_device_size(width, height)
        if changed:
            ctx.bound()
        return changed

    # -------------------------------------------------------------------------
    # Renderer support
    # -------------------------------------------------------------------------

    def render_key(self, diagram: Diagram | str) -> RenderKey:
        """Cache key for a rendered layer: the view snapshot and the data version."""
        return self.context(diagram).view.snapshot(), self.data.data_version

    def background(self) -> BackgroundCurves:
        return self.background_cache.get(self.config)

    def background_paths(self) -> dict[str, list[CurvePath]]:
        """Every background curve family as device coordinate paths on the skew-T."""
        curves = self.background()
        return {
            name: [self.skew_t.curve_to_device(curve) for curve in getattr(curves, name)]
            for name in BackgroundCurves.FAMILIES
        }

    def data_paths(self, diagram: Diagram | str) -> dict[str, CurvePath]:
        """Device coordinate paths of the current sounding on one diagram."""
        sounding = self.data.current()
        if sounding is None:
            return {}

        diagram = Diagram(diagram)
        bounds = self.config.bounds
        if diagram is Diagram.SKEW_T:
            return {
                "temperature": self.skew_t.curve_to_device(sounding.temperature_points(bounds)),
                "dew_point": self.skew_t.curve_to_device(sounding.dew_point_points(bounds)),
            }
        if diagram is Diagram.HODOGRAPH:
            return {"wind": self.hodograph.curve_to_device(sounding.wind_points(bounds))}
        if diagram is Diagram.RH_OMEGA:
            return {"omega": self.rh_omega.curve_to_device(sounding.omega_points(bounds))}
        return {"cloud": self.cloud.curve_to_device(sounding.cloud_points(bounds))}

    # -------------------------------------------------------------------------
    # Cursor sampling
    # -------------------------------------------------------------------------

    def sample(self, diagram: Diagram | str, position: DeviceCoords) -> Level | None:
        """
        Sample the current sounding under the cursor and remember it as ``last_sample``.

        The pressure diagrams interpolate the sounding at the cursor pressure.
        The hodograph has no pressure axis, so it picks the level whose wind
        plots closest to the cursor.
        """
        sounding = self.data.current()
        diagram = Diagram(diagram)
        if sounding is None:
            level = None
        elif diagram is Diagram.HODOGRAPH:
            level = self._nearest_wind_level(sounding, position)
        else:
            if diagram is Diagram.SKEW_T:
                pressure = self.skew_t.convert_device_to_tp(position).pressure
            elif diagram is Diagram.RH_OMEGA:
                pressure = self.rh_omega.convert_device_to_wp(position).p
            else:
                pressure = self.cloud.convert_device_to_pp(position).press
            level = sounding.linear_interpolate(pressure)

        self.last_sample = level
        for ctx in self.contexts().values():
            ctx.view.mark_dirty()
        return level

    def _nearest_wind_level(self, sounding: Sounding, position: DeviceCoords) -> Level | None:
        cursor = self.hodograph.view.convert_device_to_xy(position)
        best, best_distance = None, float("inf")
        for level in sounding.levels:
            if level.wind_speed is None or level.wind_direction is None:
                continue
            xy = self.hodograph.convert_sd_to_xy(SDCoords(level.wind_speed, level.wind_direction))
            distance = (xy.x - cursor.x) ** 2 + (xy.y - cursor.y) ** 2
            if distance < best_distance:
                best, best_distance = level, distance
        return best
