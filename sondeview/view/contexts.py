"""
Per-diagram plot contexts.

Each context owns one :class:`ViewState` and adds the quantity space mapping of
its diagram. The shared interface is ``to_screen``, ``to_xy``, ``zoom``,
``pan`` and ``bound``; everything else is a convenience composition of the
transform chain.
"""

from __future__ import annotations

import math
from typing import Callable, Generic, Iterable, Iterator, TypeVar

from sondeview.config.models import ChartConfig
from sondeview.coords import (
    DeviceCoords,
    PPCoords,
    SDCoords,
    ScreenCoords,
    TPCoords,
    WPCoords,
    XYCoords,
)
from sondeview import transforms
from sondeview.view.state import ViewState

Q = TypeVar("Q")
P = TypeVar("P", ScreenCoords, DeviceCoords)


class CurvePath(Generic[Q, P]):
    """
    Lazy, restartable sequence of converted points.

    Every iteration maps the quantity space points through ``convert`` using
    the view state at that moment, and drops points that do not convert to
    finite coordinates.
    """

    def __init__(self, points: Iterable[Q], convert: Callable[[Q], P]):
        self._points = tuple(points)
        self._convert = convert

    def __iter__(self) -> Iterator[P]:
        for point in self._points:
            converted = self._convert(point)
            a, b = (
                (converted.x, converted.y)
                if isinstance(converted, ScreenCoords)
                else (converted.col, converted.row)
            )
            if math.isfinite(a) and math.isfinite(b):
                yield converted

    def __len__(self) -> int:
        return len(self._points)


class PlotContext(Generic[Q]):
    """Base class for diagram contexts. Holds the view state by composition."""

    def __init__(self, config: ChartConfig | None = None, view: ViewState | None = None):
        self.config = config if config is not None else ChartConfig()
        self.view = view if view is not None else ViewState(zoom_limits=self.config.zoom)

    # quantity <-> XY, provided by each diagram
    def quantity_to_xy(self, coords: Q) -> XYCoords:
        raise NotImplementedError

    def xy_to_quantity(self, coords: XYCoords) -> Q:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Common interface
    # -------------------------------------------------------------------------

    def to_screen(self, coords: XYCoords) -> ScreenCoords:
        return self.view.convert_xy_to_screen(coords)

    def to_xy(self, coords: ScreenCoords) -> XYCoords:
        return self.view.convert_screen_to_xy(coords)

    def zoom(self, dy: float, position: DeviceCoords | None = None) -> bool:
        return self.view.scroll(dy, position)

    def pan(self, delta: XYCoords) -> None:
        self.view.pan(delta)

    def bound(self) -> None:
        self.view.bound_view()

    # -------------------------------------------------------------------------
    # Composed conversions
    # -------------------------------------------------------------------------

    def quantity_to_screen(self, coords: Q) -> ScreenCoords:
        return self.to_screen(self.quantity_to_xy(coords))

    def quantity_to_device(self, coords: Q) -> DeviceCoords:
        return self.view.convert_xy_to_device(self.quantity_to_xy(coords))

    def screen_to_quantity(self, coords: ScreenCoords) -> Q:
        return self.xy_to_quantity(self.to_xy(coords))

    def device_to_quantity(self, coords: DeviceCoords) -> Q:
        return self.xy_to_quantity(self.view.convert_device_to_xy(coords))

    def curve_to_screen(self, points: Iterable[Q]) -> CurvePath[Q, ScreenCoords]:
        return CurvePath(points, self.quantity_to_screen)

    def curve_to_device(self, points: Iterable[Q]) -> CurvePath[Q, DeviceCoords]:
        return CurvePath(points, self.quantity_to_device)


class SkewTContext(PlotContext[TPCoords]):
    """Skew-T/log-P diagram."""

    def quantity_to_xy(self, coords: TPCoords) -> XYCoords:
        return transforms.convert_tp_to_xy(coords, self.config.bounds)

    def xy_to_quantity(self, coords: XYCoords) -> TPCoords:
        return transforms.convert_xy_to_tp(coords, self.config.bounds)

    convert_tp_to_xy = quantity_to_xy
    convert_xy_to_tp = xy_to_quantity
    convert_tp_to_screen = PlotContext.quantity_to_screen
    convert_screen_to_tp = PlotContext.screen_to_quantity
    convert_tp_to_device = PlotContext.quantity_to_device
    convert_device_to_tp = PlotContext.device_to_quantity


class HodographContext(PlotContext[SDCoords]):
    """Hodograph, a polar plot of wind speed and direction."""

    def quantity_to_xy(self, coords: SDCoords) -> XYCoords:
        return transforms.convert_sd_to_xy(coords, self.config.hodograph)

    def xy_to_quantity(self, coords: XYCoords) -> SDCoords:
        return transforms.convert_xy_to_sd(coords, self.config.hodograph)

    convert_sd_to_xy = quantity_to_xy
    convert_xy_to_sd = xy_to_quantity
    convert_sd_to_screen = PlotContext.quantity_to_screen
    convert_sd_to_device = PlotContext.quantity_to_device
    convert_device_to_sd = PlotContext.device_to_quantity


class RHOmegaContext(PlotContext[WPCoords]):
    """Vertical velocity panel beside the skew-T. Pans vertically only."""

    def __init__(self, config: ChartConfig | None = None, view: ViewState | None = None):
        super().__init__(config, view)
        self.view.horizontal_pan = False

    def quantity_to_xy(self, coords: WPCoords) -> XYCoords:
        return transforms.convert_wp_to_xy(coords, self.config.rh_omega, self.config.bounds)

    def xy_to_quantity(self, coords: XYCoords) -> WPCoords:
        return transforms.convert_xy_to_wp(coords, self.config.rh_omega, self.config.bounds)

    convert_wp_to_xy = quantity_to_xy
    convert_xy_to_wp = xy_to_quantity
    convert_wp_to_screen = PlotContext.quantity_to_screen
    convert_wp_to_device = PlotContext.quantity_to_device
    convert_device_to_wp = PlotContext.device_to_quantity


class CloudContext(PlotContext[PPCoords]):
    """Cloud fraction panel. Pans vertically only."""

    def __init__(self, config: ChartConfig | None = None, view: ViewState | None = None):
        super().__init__(config, view)
        self.view.horizontal_pan = False

    def quantity_to_xy(self, coords: PPCoords) -> XYCoords:
        return transforms.convert_pp_to_xy(coords, self.config.bounds)

    def xy_to_quantity(self, coords: XYCoords) -> PPCoords:
        return transforms.convert_xy_to_pp(coords, self.config.bounds)

    convert_pp_to_xy = quantity_to_xy
    convert_xy_to_pp = xy_to_quantity
    convert_pp_to_screen = PlotContext.quantity_to_screen
    convert_pp_to_device = PlotContext.quantity_to_device
    convert_device_to_pp = PlotContext.device_to_quantity
