"""
View state for a single diagram.

Holds zoom, translation, viewport size and drag bookkeeping, and implements the
diagram independent part of the transform chain:

    XY  --(translate, zoom)-->  Screen  --(flip, scale)-->  Device

Zoom and pan mutations are always followed by :meth:`ViewState.bound_view`
inside the interactive handlers (``zoom_about``, ``scroll``, ``pan``,
``drag_to``). Direct setters (``set_zoom``, ``set_translate``) leave bounding
to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sondeview.config.models import ZoomConfig
from sondeview.coords import DeviceCoords, ScreenCoords, ScreenRect, XYCoords, XYRect
from sondeview.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ViewState:
    """Current view state (zoom and pan in XY coordinates)."""

    zoom_factor: float = 1.0
    translate: XYCoords = field(default_factory=XYCoords.origin)

    # device dimensions
    device_width: int = 100
    device_height: int = 100

    # state of input for left button press and panning
    left_button_pressed: bool = False
    last_cursor_position: DeviceCoords | None = None

    # rectangle bounding all data to plot, target of zoom_to_envelope
    xy_envelope: XYRect = field(default_factory=XYRect.unit)

    zoom_limits: ZoomConfig = field(default_factory=ZoomConfig)
    horizontal_pan: bool = True

    # set whenever something a cached rendering depends on changes
    dirty: bool = True

    def copy(self) -> "ViewState":
        return ViewState(
            zoom_factor=self.zoom_factor,
            translate=self.translate,
            device_width=self.device_width,
            device_height=self.device_height,
            left_button_pressed=self.left_button_pressed,
            last_cursor_position=self.last_cursor_position,
            xy_envelope=self.xy_envelope,
            zoom_limits=self.zoom_limits,
            horizontal_pan=self.horizontal_pan,
            dirty=self.dirty,
        )

    def snapshot(self) -> tuple[float, float, float, int, int]:
        """Hashable summary of everything a rendered background depends on."""
        return (
            self.zoom_factor,
            self.translate.x,
            self.translate.y,
            self.device_width,
            self.device_height,
        )

    # -------------------------------------------------------------------------
    # Dirty tracking
    # -------------------------------------------------------------------------

    def mark_dirty(self) -> None:
        self.dirty = True

    def clear_dirty(self) -> None:
        self.dirty = False

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def scale_factor(self) -> float:
        """
        Pixels per screen unit.

        A distance of 1 in XY equals a distance of 1 in screen coordinates when
        the zoom factor is 1, and 1 screen unit spans the shorter side of the
        viewport. Never less than 1 so a collapsed viewport cannot divide by zero.
        """
        return float(max(1, min(self.device_width, self.device_height)))

    def convert_xy_to_screen(self, coords: XYCoords) -> ScreenCoords:
        # Apply translation first, then scaling
        return ScreenCoords(
            self.zoom_factor * (coords.x - self.translate.x),
            self.zoom_factor * (coords.y - self.translate.y),
        )

    def convert_screen_to_xy(self, coords: ScreenCoords) -> XYCoords:
        return XYCoords(
            coords.x / self.zoom_factor + self.translate.x,
            coords.y / self.zoom_factor + self.translate.y,
        )

    def convert_screen_to_device(self, coords: ScreenCoords) -> DeviceCoords:
        scale_factor = self.scale_factor()
        return DeviceCoords(
            coords.x * scale_factor,
            -coords.y * scale_factor + self.device_height,
        )

    def convert_device_to_screen(self, coords: DeviceCoords) -> ScreenCoords:
        scale_factor = self.scale_factor()
        return ScreenCoords(
            coords.col / scale_factor,
            # Flip y coordinate vertically and translate so origin is upper left corner.
            -(coords.row / scale_factor) + self.device_height / scale_factor,
        )

    def convert_device_to_xy(self, coords: DeviceCoords) -> XYCoords:
        return self.convert_screen_to_xy(self.convert_device_to_screen(coords))

    def convert_xy_to_device(self, coords: XYCoords) -> DeviceCoords:
        return self.convert_screen_to_device(self.convert_xy_to_screen(coords))

    def bounding_box_in_screen_coords(self) -> ScreenRect:
        """The viewport in screen coordinates."""
        lower_left = self.convert_device_to_screen(DeviceCoords(0.0, float(self.device_height)))
        upper_right = self.convert_device_to_screen(DeviceCoords(float(self.device_width), 0.0))
        return ScreenRect(lower_left, upper_right)

    def visible_xy_extent(self) -> tuple[float, float]:
        """Width and height of the viewport in XY units."""
        scale = self.scale_factor() * self.zoom_factor
        return self.device_width / scale, self.device_height / scale

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def set_translate(self, new_translate: XYCoords) -> None:
        if new_translate != self.translate:
            self.translate = new_translate
            self.dirty = True

    def set_zoom(self, new_zoom: float) -> float:
        """Set the zoom factor clamped to the configured limits. Returns the value used."""
        clamped = min(max(new_zoom, self.zoom_limits.min_zoom), self.zoom_limits.max_zoom)
        if clamped != self.zoom_factor:
            self.zoom_factor = clamped
            self.dirty = True
        return clamped

    def zoom_about(self, center: XYCoords, new_zoom: float) -> None:
        """
        Zoom keeping ``center`` (in XY) at the same place on screen.

        The zoom is clamped first and the translation recomputed from the
        clamped value, then the view is bounded.
        """
        old_zoom = self.zoom_factor
        new_zoom = self.set_zoom(new_zoom)
        ratio = old_zoom / new_zoom
        x = center.x - ratio * (center.x - self.translate.x) if self.horizontal_pan else 0.0
        self.set_translate(XYCoords(x, center.y - ratio * (center.y - self.translate.y)))
        self.bound_view()

    def scroll(self, dy: float, position: DeviceCoords | None = None) -> bool:
        """
        Mouse wheel handler. Negative ``dy`` zooms in, positive zooms out.

        Zooms about ``position``, or the last known cursor position if none is
        given. Returns False if there is no position to zoom about.
        """
        if position is None:
            position = self.last_cursor_position
        if position is None:
            return False

        center = self.convert_device_to_xy(position)
        new_zoom = self.zoom_factor
        if dy > 0.0:
            new_zoom /= self.zoom_limits.delta_scale
        elif dy < 0.0:
            new_zoom *= self.zoom_limits.delta_scale

        self.zoom_about(center, new_zoom)
        return True

    def pan(self, delta: XYCoords) -> None:
        """Move the view content by ``delta`` (XY units), then bound the view."""
        dx = delta.x if self.horizontal_pan else 0.0
        self.set_translate(XYCoords(self.translate.x - dx, self.translate.y - delta.y))
        self.bound_view()

    def press(self, position: DeviceCoords) -> None:
        self.last_cursor_position = position
        self.left_button_pressed = True

    def release(self) -> None:
        self.last_cursor_position = None
        self.left_button_pressed = False

    def leave(self) -> None:
        self.last_cursor_position = None

    def drag_to(self, position: DeviceCoords) -> bool:
        """
        Pointer motion handler.

        Pans by the XY distance moved when the left button is held, and always
        records ``position`` as the last cursor position. Returns True if the
        view moved.
        """
        moved = False
        if self.left_button_pressed and self.last_cursor_position is not None:
            old_xy = self.convert_device_to_xy(self.last_cursor_position)
            new_xy = self.convert_device_to_xy(position)
            self.pan(XYCoords(new_xy.x - old_xy.x, new_xy.y - old_xy.y))
            moved = True

        self.last_cursor_position = position
        return moved

    def bound_view(self) -> None:
        """
        Center the plot if zoomed out, and if zoomed in don't let the view go
        beyond the edges of the plot.

        Each axis is handled independently: when the visible extent is at least
        one XY unit the translation centers the unit square, otherwise it is
        clamped to ``[0, 1 - extent]``. Views without horizontal panning keep
        the x translation at 0.
        """
        width, height = self.visible_xy_extent()
        x = _bound_axis(self.translate.x, width) if self.horizontal_pan else 0.0
        self.set_translate(XYCoords(x, _bound_axis(self.translate.y, height)))

    def set_device_size(self, width: int, height: int) -> bool:
        """Record a new viewport size. Returns True (and marks dirty) if it changed."""
        width = max(0, int(width))
        height = max(0, int(height))
        if (width, height) == (self.device_width, self.device_height):
            return False
        self.device_width = width
        self.device_height = height
        self.dirty = True
        return True

    def set_xy_envelope(self, envelope: XYRect) -> None:
        self.xy_envelope = envelope

    def zoom_to_envelope(self) -> None:
        """Fit the view to the data envelope."""
        envelope = self.xy_envelope
        x = envelope.lower_left.x if self.horizontal_pan else 0.0
        self.set_translate(XYCoords(x, envelope.lower_left.y))

        width_scale = 1.0 / envelope.width if envelope.width > 0.0 else self.zoom_limits.max_zoom
        height_scale = 1.0 / envelope.height if envelope.height > 0.0 else self.zoom_limits.max_zoom
        self.set_zoom(min(width_scale, height_scale))

        self.bound_view()
        logger.debug(
            f"Zoomed to envelope: zoom={self.zoom_factor:.3f}, "
            f"translate=({self.translate.x:.3f}, {self.translate.y:.3f})"
        )


def _bound_axis(translate: float, extent: float) -> float:
    if extent >= 1.0:
        return -(extent - 1.0) / 2.0
    return min(max(translate, 0.0), 1.0 - extent)
