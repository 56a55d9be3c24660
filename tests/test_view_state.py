"""Tests for view state: zoom, pan, bounding and device conversions."""

import pytest

from sondeview.config.models import ZoomConfig
from sondeview.coords import DeviceCoords, ScreenCoords, XYCoords, XYRect
from sondeview.view.state import ViewState


def make_view(**kwargs) -> ViewState:
    view = ViewState(**kwargs)
    view.clear_dirty()
    return view


class TestConversions:
    def test_identity_at_default(self):
        view = ViewState()
        s = view.convert_xy_to_screen(XYCoords(0.3, 0.7))
        assert s == ScreenCoords(0.3, 0.7)

    def test_xy_screen_round_trip(self):
        view = ViewState(zoom_factor=3.5, translate=XYCoords(0.2, -0.1))
        for x, y in [(0.0, 0.0), (0.5, 0.25), (1.2, -3.0)]:
            back = view.convert_screen_to_xy(view.convert_xy_to_screen(XYCoords(x, y)))
            assert back.x == pytest.approx(x, abs=1e-12)
            assert back.y == pytest.approx(y, abs=1e-12)

    def test_device_origin_is_upper_left(self):
        view = ViewState(device_width=200, device_height=100)
        d = view.convert_screen_to_device(ScreenCoords(0.0, 0.0))
        assert d == DeviceCoords(0.0, 100.0)
        top = view.convert_screen_to_device(ScreenCoords(0.0, 1.0))
        assert top.row == pytest.approx(0.0)

    def test_scale_factor_uses_shorter_side(self):
        assert ViewState(device_width=300, device_height=120).scale_factor() == 120.0
        assert ViewState(device_width=0, device_height=0).scale_factor() == 1.0

    def test_device_screen_round_trip(self):
        view = ViewState(device_width=640, device_height=480)
        for col, row in [(0.0, 0.0), (320.0, 240.0), (639.0, 1.0), (-10.0, 700.0)]:
            back = view.convert_screen_to_device(view.convert_device_to_screen(DeviceCoords(col, row)))
            assert back.col == pytest.approx(col, abs=1e-9)
            assert back.row == pytest.approx(row, abs=1e-9)

    def test_device_xy_round_trip(self):
        view = ViewState(zoom_factor=2.0, translate=XYCoords(0.25, 0.25), device_width=400, device_height=300)
        xy = XYCoords(0.6, 0.4)
        back = view.convert_device_to_xy(view.convert_xy_to_device(xy))
        assert back.x == pytest.approx(xy.x, abs=1e-12)
        assert back.y == pytest.approx(xy.y, abs=1e-12)

    def test_visible_extent(self):
        view = ViewState(zoom_factor=2.0, device_width=200, device_height=100)
        width, height = view.visible_xy_extent()
        assert width == pytest.approx(1.0)
        assert height == pytest.approx(0.5)

    def test_bounding_box(self):
        view = ViewState(device_width=200, device_height=100)
        box = view.bounding_box_in_screen_coords()
        assert box.width == pytest.approx(2.0)
        assert box.height == pytest.approx(1.0)


class TestZoom:
    def test_clamped_to_limits(self):
        view = ViewState()
        assert view.set_zoom(50.0) == 10.0
        assert view.set_zoom(0.1) == 1.0

    def test_custom_limits(self):
        view = ViewState(zoom_limits=ZoomConfig(min_zoom=0.5, max_zoom=4.0))
        assert view.set_zoom(0.6) == 0.6
        assert view.set_zoom(5.0) == 4.0

    def test_zoom_marks_dirty(self):
        view = make_view()
        view.set_zoom(2.0)
        assert view.dirty

    def test_unchanged_zoom_not_dirty(self):
        view = make_view()
        view.set_zoom(1.0)
        assert not view.dirty

    def test_scroll_negative_zooms_in(self):
        view = ViewState()
        assert view.scroll(-1.0, DeviceCoords(50.0, 50.0))
        assert view.zoom_factor == pytest.approx(1.05)

    def test_scroll_positive_zooms_out(self):
        view = ViewState(zoom_factor=2.0)
        view.scroll(1.0, DeviceCoords(50.0, 50.0))
        assert view.zoom_factor == pytest.approx(2.0 / 1.05)

    def test_scroll_without_position_is_ignored(self):
        view = ViewState()
        assert not view.scroll(-1.0)
        assert view.zoom_factor == 1.0

    def test_scroll_uses_last_cursor_position(self):
        view = ViewState()
        view.drag_to(DeviceCoords(10.0, 10.0))
        assert view.scroll(-1.0)

    def test_zoom_about_moves_translation_toward_center(self):
        view = ViewState(zoom_factor=4.0, translate=XYCoords(0.3, 0.3))
        view.zoom_about(XYCoords(0.5, 0.5), 5.0)
        assert view.zoom_factor == 5.0
        # t' = c - (old / new)(c - t)
        assert view.translate.x == pytest.approx(0.5 - 0.8 * 0.2)
        assert view.translate.y == pytest.approx(0.5 - 0.8 * 0.2)

    def test_zoom_about_uses_clamped_zoom(self):
        view = ViewState(zoom_factor=8.0, translate=XYCoords(0.4, 0.4))
        view.zoom_about(XYCoords(0.5, 0.5), 100.0)
        assert view.zoom_factor == 10.0
        assert view.translate.x == pytest.approx(0.5 - 0.8 * 0.1)

    def test_zoom_about_cursor_xy_unchanged(self):
        view = ViewState(zoom_factor=4.0, translate=XYCoords(0.3, 0.3), device_width=100, device_height=100)
        cursor = DeviceCoords(50.0, 50.0)
        before = view.convert_device_to_xy(cursor)
        view.scroll(-1.0, cursor)
        after = view.convert_device_to_xy(cursor)
        assert after.x == pytest.approx(before.x, abs=1e-9)
        assert after.y == pytest.approx(before.y, abs=1e-9)


class TestBoundView:
    def test_zoomed_out_is_centered(self):
        view = ViewState(device_width=200, device_height=100, translate=XYCoords(0.7, -0.4))
        view.bound_view()
        # visible extent 2 x 1
        assert view.translate.x == pytest.approx(-0.5)
        assert view.translate.y == pytest.approx(0.0)

    def test_zoomed_in_clamps_to_edges(self):
        view = ViewState(zoom_factor=4.0, translate=XYCoords(0.9, -0.3))
        view.bound_view()
        assert view.translate.x == pytest.approx(0.75)
        assert view.translate.y == pytest.approx(0.0)

    def test_inside_is_unchanged(self):
        view = ViewState(zoom_factor=4.0, translate=XYCoords(0.3, 0.4))
        view.bound_view()
        assert view.translate == XYCoords(0.3, 0.4)

    def test_vertical_only_view_pins_x(self):
        view = ViewState(zoom_factor=4.0, translate=XYCoords(0.6, 0.4), horizontal_pan=False)
        view.bound_view()
        assert view.translate == XYCoords(0.0, 0.4)

    @pytest.mark.parametrize(
        "zoom,translate,size",
        [
            (1.0, (0.0, 0.0), (100, 100)),
            (3.0, (5.0, -5.0), (100, 100)),
            (7.5, (0.4, 0.1), (640, 480)),
            (1.2, (-2.0, 2.0), (300, 900)),
        ],
    )
    def test_idempotent(self, zoom, translate, size):
        view = ViewState(zoom_factor=zoom, translate=XYCoords(*translate), device_width=size[0], device_height=size[1])
        view.bound_view()
        first = view.translate
        view.bound_view()
        assert view.translate == first


class TestPan:
    def test_drag_pans_and_bounds(self):
        view = ViewState(zoom_factor=2.0, translate=XYCoords(0.25, 0.25))
        view.press(DeviceCoords(50.0, 50.0))
        # drag right by 10 px = 0.05 XY at zoom 2 on a 100 px view
        assert view.drag_to(DeviceCoords(60.0, 50.0))
        assert view.translate.x == pytest.approx(0.2)
        assert view.translate.y == pytest.approx(0.25)

    def test_motion_without_button_only_tracks_cursor(self):
        view = ViewState(zoom_factor=2.0, translate=XYCoords(0.25, 0.25))
        assert not view.drag_to(DeviceCoords(60.0, 50.0))
        assert view.translate == XYCoords(0.25, 0.25)
        assert view.last_cursor_position == DeviceCoords(60.0, 50.0)

    def test_release_stops_drag(self):
        view = ViewState(zoom_factor=2.0, translate=XYCoords(0.25, 0.25))
        view.press(DeviceCoords(50.0, 50.0))
        view.release()
        assert not view.left_button_pressed
        assert view.last_cursor_position is None
        assert not view.drag_to(DeviceCoords(90.0, 10.0))

    def test_vertical_only_pan(self):
        view = ViewState(zoom_factor=2.0, translate=XYCoords(0.0, 0.25), horizontal_pan=False)
        view.pan(XYCoords(0.1, 0.1))
        assert view.translate.x == 0.0
        assert view.translate.y == pytest.approx(0.15)

    def test_pan_cannot_leave_plot(self):
        view = ViewState(zoom_factor=2.0, translate=XYCoords(0.25, 0.25))
        view.pan(XYCoords(-5.0, 5.0))
        assert view.translate.x == pytest.approx(0.5)
        assert view.translate.y == pytest.approx(0.0)


class TestDeviceSizeAndEnvelope:
    def test_resize_marks_dirty(self):
        view = make_view()
        assert view.set_device_size(640, 480)
        assert view.dirty

    def test_same_size_not_dirty(self):
        view = make_view()
        assert not view.set_device_size(100, 100)
        assert not view.dirty

    def test_snapshot_changes_with_view(self):
        view = ViewState()
        before = view.snapshot()
        view.set_zoom(2.0)
        assert view.snapshot() != before

    def test_zoom_to_envelope(self):
        view = ViewState()
        view.set_xy_envelope(XYRect(XYCoords(0.2, 0.1), XYCoords(0.6, 0.6)))
        view.zoom_to_envelope()
        assert view.zoom_factor == pytest.approx(2.0)
        assert view.translate.x == pytest.approx(0.2)
        assert view.translate.y == pytest.approx(0.1)

    def test_zoom_to_envelope_clamps_zoom(self):
        view = ViewState()
        view.set_xy_envelope(XYRect(XYCoords(0.5, 0.5), XYCoords(0.51, 0.51)))
        view.zoom_to_envelope()
        assert view.zoom_factor == 10.0

    def test_zoom_to_unit_envelope(self):
        view = ViewState(zoom_factor=5.0, translate=XYCoords(0.3, 0.3))
        view.set_xy_envelope(XYRect.unit())
        view.zoom_to_envelope()
        assert view.zoom_factor == 1.0
        assert view.translate == XYCoords(0.0, 0.0)

    def test_zoom_to_envelope_vertical_only(self):
        view = ViewState(horizontal_pan=False)
        view.set_xy_envelope(XYRect(XYCoords(0.2, 0.1), XYCoords(0.6, 0.6)))
        view.zoom_to_envelope()
        assert view.zoom_factor == pytest.approx(2.0)
        assert view.translate.x == 0.0
        assert view.translate.y == pytest.approx(0.1)

    def test_scroll_vertical_only_keeps_x(self):
        view = ViewState(horizontal_pan=False)
        for _ in range(5):
            assert view.scroll(-1.0, DeviceCoords(90.0, 50.0))
        assert view.zoom_factor > 1.0
        assert view.translate.x == 0.0

    def test_copy_is_independent(self):
        view = ViewState()
        other = view.copy()
        other.set_zoom(3.0)
        assert view.zoom_factor == 1.0
