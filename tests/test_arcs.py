"""
Unit tests for moulding_preview.geometry.arcs and primitives.

Tests:
- Bulge decoding
- Arc centre resolution
- Sweep helpers and arc sampling
- Quarter-turn rotations
"""

import math

import pytest

from moulding_preview.geometry.arcs import (
    angle_in_sweep,
    arc_sweep,
    bulge_included_angle,
    bulge_is_large_arc,
    bulge_to_radius,
    ccw_sweep_degrees,
    choose_arc_center,
    sample_arc,
)
from moulding_preview.geometry.primitives import Point, Rotation, normalize_angle, rotate_point, round_value
from tests.conftest import assert_point_approx


class TestBulge:
    """Bulge → radius / included angle."""

    def test_semicircle(self):
        assert bulge_included_angle(1.0) == pytest.approx(math.pi)
        assert bulge_to_radius(2.0, 1.0) == pytest.approx(1.0)

    def test_quarter_circle(self):
        bulge = math.tan(math.pi / 8)
        assert bulge_included_angle(bulge) == pytest.approx(math.pi / 2)
        assert bulge_to_radius(math.sqrt(2), bulge) == pytest.approx(1.0)

    def test_sign_does_not_change_radius(self):
        assert bulge_to_radius(2.0, -0.5) == pytest.approx(bulge_to_radius(2.0, 0.5))

    def test_large_arc_flag(self):
        assert bulge_is_large_arc(2.0)
        assert bulge_is_large_arc(-1.5)
        assert not bulge_is_large_arc(1.0)
        assert not bulge_is_large_arc(0.4)


class TestSweeps:
    """Sweep helpers."""

    @pytest.mark.parametrize("start,end,expected", [
        (0, 90, 90),
        (270, 90, 180),
        (90, 0, 270),
        (-90, 0, 90),
        (0, 360, 0),
    ])
    def test_ccw_sweep_degrees(self, start, end, expected):
        assert ccw_sweep_degrees(start, end) == pytest.approx(expected)

    def test_arc_sweep_direction(self):
        center = Point(0, 0)
        ccw = arc_sweep(Point(1, 0), Point(0, 1), center, clockwise=False)
        cw = arc_sweep(Point(1, 0), Point(0, 1), center, clockwise=True)
        assert ccw == pytest.approx(math.pi / 2)
        assert cw == pytest.approx(3 * math.pi / 2)

    def test_angle_in_sweep(self):
        assert angle_in_sweep(math.pi / 2, math.pi, 0, clockwise=True)
        assert not angle_in_sweep(math.pi / 2, math.pi, 0, clockwise=False)
        assert angle_in_sweep(-math.pi / 2, math.pi, 0, clockwise=False)

    def test_normalize_angle(self):
        assert normalize_angle(-math.pi / 2) == pytest.approx(3 * math.pi / 2)
        assert normalize_angle(5 * math.pi) == pytest.approx(math.pi)


class TestChooseArcCenter:
    """Picking the right centre for an endpoint pair."""

    def test_semicircle_centre_is_midpoint(self):
        center = choose_arc_center(Point(0, 0), Point(2, 0), 1.0, clockwise=False, large_arc=False)
        assert_point_approx(center, (1, 0))

    def test_small_ccw_quarter(self):
        center = choose_arc_center(Point(2, 0.5), Point(2.5, 1.0), 0.5, clockwise=False, large_arc=False)
        assert_point_approx(center, (2.0, 1.0))

    def test_small_cw_quarter_uses_other_side(self):
        center = choose_arc_center(Point(2, 0.5), Point(2.5, 1.0), 0.5, clockwise=True, large_arc=False)
        assert_point_approx(center, (2.5, 0.5))

    def test_large_arc_picks_far_centre(self):
        center = choose_arc_center(Point(0, 0), Point(2, 0), 1.25, clockwise=False, large_arc=True)
        assert_point_approx(center, (1.0, -0.75))
        small = choose_arc_center(Point(0, 0), Point(2, 0), 1.25, clockwise=False, large_arc=False)
        assert_point_approx(small, (1.0, 0.75))

    def test_short_radius_falls_back_to_semicircle(self):
        center = choose_arc_center(Point(0, 0), Point(2, 0), 0.5, clockwise=False, large_arc=False)
        assert_point_approx(center, (1, 0))

    def test_coincident_endpoints(self):
        center = choose_arc_center(Point(1, 1), Point(1, 1), 1.0, clockwise=False, large_arc=False)
        assert center == Point(1, 1)


class TestSampleArc:
    """Polyline approximation of arcs."""

    def test_endpoints_exact(self):
        points = sample_arc(Point(1, 0), Point(0, 1), Point(0, 0), clockwise=False)
        assert points[0] == Point(1, 0)
        assert points[-1] == Point(0, 1)
        assert len(points) > 2

    def test_points_on_circle(self):
        points = sample_arc(Point(1, 0), Point(-1, 0), Point(0, 0), clockwise=False, samples_per_turn=16)
        for p in points:
            assert math.hypot(p.x, p.y) == pytest.approx(1.0)
        assert all(p.y >= -1e-9 for p in points)

    def test_clockwise_goes_the_other_way(self):
        points = sample_arc(Point(1, 0), Point(-1, 0), Point(0, 0), clockwise=True, samples_per_turn=16)
        assert all(p.y <= 1e-9 for p in points)


class TestRotation:
    """Quarter-turn selectors."""

    @pytest.mark.parametrize("rotation,expected", [
        (Rotation.NONE, (1, 2)),
        (Rotation.CW90, (2, -1)),
        (Rotation.CCW90, (-2, 1)),
        (Rotation.HALF, (-1, -2)),
    ])
    def test_rotate_point(self, rotation, expected):
        assert rotate_point(Point(1, 2), rotation) == Point(*expected)

    def test_parse(self):
        assert Rotation.parse("CW90") is Rotation.CW90
        assert Rotation.parse("180") is Rotation.HALF
        assert Rotation.parse(None) is Rotation.NONE
        assert Rotation.parse("") is Rotation.NONE
        assert Rotation.parse(Rotation.CCW90) is Rotation.CCW90

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown rotation"):
            Rotation.parse("45")


class TestRoundValue:

    def test_negative_zero_folded(self):
        assert math.copysign(1.0, round_value(-0.00001)) == 1.0

    def test_precision(self):
        assert round_value(1.23456) == 1.2346
