"""Tests for the sounding model and the data context."""

import math
from datetime import datetime

import numpy as np
import pytest

from sondeview.config.models import ChartConfig
from sondeview.coords import TPCoords, XYCoords
from sondeview.data import (
    DEFAULT_ENVELOPE,
    DataContext,
    Level,
    Sounding,
    compute_envelope,
    compute_hodograph_envelope,
    compute_rh_omega_envelope,
)
from sondeview.transforms import convert_tp_to_xy
from tests.fixtures.soundings import generate_sounding, generate_sounding_series


class TestSounding:
    def test_from_columns(self):
        s = Sounding.from_columns(pressure=[1000.0, 850.0], temperature=[20.0, 10.0])
        assert len(s) == 2
        assert s.levels[0] == Level(pressure=1000.0, temperature=20.0)

    def test_nan_and_none_are_missing(self):
        s = Sounding.from_columns(
            pressure=[1000.0, 850.0, 700.0],
            temperature=[20.0, float("nan"), None],
        )
        assert s.levels[1].temperature is None
        assert s.levels[2].temperature is None

    def test_numpy_columns(self):
        s = Sounding.from_columns(pressure=np.array([1000.0, 500.0]), omega=np.array([np.nan, -1.5]))
        assert s.levels[0].omega is None
        assert s.levels[1].omega == -1.5

    def test_unknown_column(self):
        with pytest.raises(ValueError, match="Unknown sounding columns"):
            Sounding.from_columns(pressure=[1000.0], humidity=[50.0])

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError, match="different lengths"):
            Sounding.from_columns(pressure=[1000.0, 900.0], temperature=[20.0])

    def test_empty(self):
        assert len(Sounding.from_columns()) == 0

    def test_profile(self):
        s = Sounding.from_columns(pressure=[1000.0, 850.0], temperature=[20.0, None])
        t = s.profile("temperature")
        assert t[0] == 20.0
        assert math.isnan(t[1])

    def test_profile_unknown(self):
        with pytest.raises(KeyError):
            Sounding().profile("nope")

    def test_temperature_points_skip_missing_and_top(self):
        s = Sounding.from_columns(
            pressure=[1000.0, 850.0, None, 99.0, 50.0],
            temperature=[20.0, None, 5.0, -60.0, -60.0],
        )
        assert s.temperature_points() == [TPCoords(20.0, 1000.0)]

    def test_wind_points_need_both_values(self):
        s = Sounding.from_columns(
            pressure=[1000.0, 850.0],
            wind_speed=[10.0, 20.0],
            wind_direction=[None, 270.0],
        )
        points = s.wind_points()
        assert len(points) == 1
        assert points[0].speed == 20.0

    def test_other_points(self):
        s = generate_sounding()
        assert len(s.dew_point_points()) == len(s)
        assert len(s.omega_points()) == len(s)
        assert len(s.cloud_points()) == len(s)

    def test_describe(self):
        s = generate_sounding(valid_time=datetime(2024, 1, 2, 12))
        text = s.describe()
        assert "synthetic" in text
        assert "2024-01-02T12:00:00" in text


class TestLinearInterpolate:
    def test_midpoint(self):
        s = Sounding.from_columns(
            pressure=[1000.0, 900.0],
            temperature=[20.0, 10.0],
            height=[100.0, 1000.0],
            omega=[None, -2.0],
        )
        level = s.linear_interpolate(950.0)
        assert level.pressure == 950.0
        assert level.temperature == pytest.approx(15.0)
        assert level.height == pytest.approx(550.0)
        assert level.omega is None
        assert level.dew_point is None

    def test_exact_level(self):
        s = generate_sounding()
        assert s.linear_interpolate(850.0) is s.levels[2]

    def test_outside_profile(self):
        s = generate_sounding()
        assert s.linear_interpolate(1020.0) is None
        assert s.linear_interpolate(50.0) is None
        assert Sounding().linear_interpolate(500.0) is None

    def test_levels_without_pressure_skipped(self):
        s = Sounding.from_columns(pressure=[1000.0, None, 800.0], temperature=[20.0, 0.0, 10.0])
        assert s.linear_interpolate(900.0).temperature == pytest.approx(15.0)

    def test_wind_wraps_through_north(self):
        s = Sounding.from_columns(
            pressure=[1000.0, 900.0],
            wind_speed=[20.0, 20.0],
            wind_direction=[350.0, 10.0],
        )
        level = s.linear_interpolate(950.0)
        assert min(level.wind_direction, 360.0 - level.wind_direction) == pytest.approx(0.0, abs=1e-9)
        assert level.wind_speed == pytest.approx(20.0 * math.cos(math.radians(10.0)))


class TestEnvelope:
    def test_no_data_is_seed(self):
        assert compute_envelope([]) == DEFAULT_ENVELOPE

    def test_two_soundings(self):
        a = Sounding.from_columns(pressure=[1000.0, 500.0], temperature=[20.0, -10.0])
        b = Sounding.from_columns(pressure=[900.0], temperature=[15.0])
        env = compute_envelope([a, b])

        points = [
            convert_tp_to_xy(TPCoords(20.0, 1000.0)),
            convert_tp_to_xy(TPCoords(-10.0, 500.0)),
            convert_tp_to_xy(TPCoords(15.0, 900.0)),
        ]
        xs = [p.x for p in points] + [0.45, 0.55]
        ys = [p.y for p in points] + [0.45, 0.55]
        assert env.lower_left == XYCoords(min(xs), min(ys))
        assert env.upper_right == XYCoords(max(xs), max(ys))

    def test_missing_values_skipped(self):
        s = Sounding.from_columns(pressure=[None, 1000.0], temperature=[-200.0, None], dew_point=[None, None])
        assert compute_envelope([s]) == DEFAULT_ENVELOPE

    def test_includes_dew_point(self):
        s = Sounding.from_columns(pressure=[1000.0], dew_point=[-40.0])
        env = compute_envelope([s])
        assert env.lower_left.x == pytest.approx(convert_tp_to_xy(TPCoords(-40.0, 1000.0)).x)

    def test_above_chart_top_skipped(self):
        s = Sounding.from_columns(pressure=[50.0], temperature=[-80.0])
        assert compute_envelope([s]) == DEFAULT_ENVELOPE

    def test_min_pressure_included(self):
        s = Sounding.from_columns(pressure=[99.0], temperature=[-40.0])
        env = compute_envelope([s])
        assert env.upper_right.y == pytest.approx(1.0)

    def test_rh_omega_shares_vertical_extent(self):
        soundings = generate_sounding_series(2)
        skew_t = compute_envelope(soundings)
        env = compute_rh_omega_envelope(soundings, ChartConfig(), skew_t)
        assert env.lower_left.y == skew_t.lower_left.y
        assert env.upper_right.y == skew_t.upper_right.y
        assert env.lower_left.x <= 0.45

    def test_hodograph_envelope_contains_winds(self):
        soundings = generate_sounding_series(1)
        env = compute_hodograph_envelope(soundings)
        assert env.width >= DEFAULT_ENVELOPE.width


class TestDataContext:
    def test_empty(self):
        ctx = DataContext()
        assert ctx.current() is None
        assert ctx.plottable == ()
        ctx.advance()
        ctx.retreat()
        ctx.select_current(5)
        assert ctx.current_index == 0
        assert ctx.envelope == DEFAULT_ENVELOPE

    def test_load_selects_first(self):
        ctx = DataContext()
        soundings = generate_sounding_series(3)
        ctx.load_data(soundings)
        assert len(ctx) == 3
        assert ctx.current() is soundings[0]

    def test_advance_wraps(self):
        ctx = DataContext()
        ctx.load_data(generate_sounding_series(3))
        ctx.select_current(2)
        ctx.advance()
        assert ctx.current_index == 0

    def test_retreat_wraps(self):
        ctx = DataContext()
        ctx.load_data(generate_sounding_series(3))
        ctx.retreat()
        assert ctx.current_index == 2

    def test_select_clamps(self):
        ctx = DataContext()
        ctx.load_data(generate_sounding_series(3))
        ctx.select_current(10)
        assert ctx.current_index == 2
        ctx.select_current(-4)
        assert ctx.current_index == 0

    def test_data_version(self):
        ctx = DataContext()
        v0 = ctx.data_version
        ctx.load_data(generate_sounding_series(2))
        v1 = ctx.data_version
        assert v1 > v0
        ctx.advance()
        assert ctx.data_version > v1
        v2 = ctx.data_version
        ctx.select_current(ctx.current_index)
        assert ctx.data_version == v2

    def test_envelope_on_load(self):
        ctx = DataContext()
        soundings = generate_sounding_series(2)
        ctx.load_data(soundings)
        assert ctx.envelope == compute_envelope(soundings)

    def test_missing_data_sounding(self):
        ctx = DataContext()
        ctx.load_data([generate_sounding(missing_fraction=0.5, seed=3)])
        env = ctx.envelope
        assert env.lower_left.x <= 0.45
        assert env.upper_right.y >= 0.55
