"""
Arc reconstruction helpers.

Contains:
- bulge_to_radius / bulge_included_angle - polyline bulge decoding
- ccw_sweep_degrees   - sweep of a DXF ARC (always counter-clockwise)
- choose_arc_center   - pick one of two candidate centres for an endpoint pair
- sample_arc          - polyline approximation of an arc for previews
- angle_in_sweep      - whether a polar angle lies on an arc

Bulge convention: bulge = tan(included_angle / 4), negative = clockwise.
"""

import math
from typing import List, Tuple

import numpy as np

from moulding_preview.config import ARC_SAMPLES_PER_TURN, LARGE_ARC_EPSILON
from moulding_preview.geometry.primitives import Point, normalize_angle

TWO_PI = 2 * math.pi


def bulge_included_angle(bulge: float) -> float:
    """Included angle (radians) encoded by a bulge value."""
    return 4 * math.atan(abs(bulge))


def bulge_to_radius(chord: float, bulge: float) -> float:
    """Arc radius for a chord length and bulge.

    radius = chord / (2 * sin(included / 2)), included = 4 * atan(|bulge|)
    """
    included = bulge_included_angle(bulge)
    return chord / (2 * math.sin(included / 2))


def bulge_is_large_arc(bulge: float) -> bool:
    """True when the bulge encodes an included angle above 180°."""
    return abs(bulge) > 1


def ccw_sweep_degrees(start_deg: float, end_deg: float) -> float:
    """Counter-clockwise sweep from start to end angle, in [0, 360)."""
    delta = (end_deg % 360.0) - (start_deg % 360.0)
    return delta if delta >= 0 else delta + 360.0


def arc_sweep(start: Point, end: Point, center: Point, clockwise: bool) -> float:
    """Sweep (radians, [0, 2*pi)) travelled from start to end around center."""
    a1 = math.atan2(start.y - center.y, start.x - center.x)
    a2 = math.atan2(end.y - center.y, end.x - center.x)
    raw = a1 - a2 if clockwise else a2 - a1
    return normalize_angle(raw)


def _candidate_centers(a: Point, b: Point, radius: float) -> Tuple[Point, Point]:
    dx = b.x - a.x
    dy = b.y - a.y
    d = math.hypot(dx, dy)
    if d < 1e-12:
        return a, a
    # A radius shorter than half the chord is stretched to a semicircle
    r = max(radius, d / 2)
    mx = (a.x + b.x) / 2
    my = (a.y + b.y) / 2
    h = math.sqrt(max(0.0, r * r - (d / 2) ** 2))
    nx, ny = -dy / d, dx / d
    return Point(mx + nx * h, my + ny * h), Point(mx - nx * h, my - ny * h)


def choose_arc_center(
    start: Point,
    end: Point,
    radius: float,
    clockwise: bool,
    large_arc: bool,
) -> Point:
    """Resolve the centre of an arc from its endpoints.

    Of the two circles of the given radius through both endpoints, the one
    whose sweep in the requested direction matches ``large_arc`` wins.
    When both or neither match (near-180° arcs), the candidate with the
    smaller sweep is returned.

    Args:
        start, end: arc endpoints.
        radius: requested radius.
        clockwise: sweep direction from start to end.
        large_arc: True for sweeps above 180°.

    Returns:
        Centre point.
    """
    c1, c2 = _candidate_centers(start, end, radius)
    sweep1 = arc_sweep(start, end, c1, clockwise)
    sweep2 = arc_sweep(start, end, c2, clockwise)
    fits1 = (sweep1 > math.pi - LARGE_ARC_EPSILON) == large_arc
    fits2 = (sweep2 > math.pi - LARGE_ARC_EPSILON) == large_arc

    if fits1 and not fits2:
        return c1
    if fits2 and not fits1:
        return c2
    return c1 if sweep1 <= sweep2 else c2


def angle_in_sweep(angle: float, start_angle: float, end_angle: float, clockwise: bool) -> bool:
    """Whether polar ``angle`` lies on the arc from start_angle to end_angle."""
    a = normalize_angle(angle)
    s = normalize_angle(start_angle)
    e = normalize_angle(end_angle)
    if clockwise:
        span = (s - e) % TWO_PI
        travelled = (s - a) % TWO_PI
    else:
        span = (e - s) % TWO_PI
        travelled = (a - s) % TWO_PI
    return travelled <= span + 1e-9


def sample_arc(
    start: Point,
    end: Point,
    center: Point,
    clockwise: bool,
    samples_per_turn: int = ARC_SAMPLES_PER_TURN,
) -> List[Point]:
    """Approximate an arc by points, endpoints included exactly.

    Returns:
        Points from ``start`` to ``end`` (at least the two endpoints).
    """
    sweep = arc_sweep(start, end, center, clockwise)
    radius = math.hypot(start.x - center.x, start.y - center.y)
    n = max(2, int(math.ceil(sweep / TWO_PI * samples_per_turn)) + 1)

    a0 = math.atan2(start.y - center.y, start.x - center.x)
    direction = -1.0 if clockwise else 1.0
    angles = a0 + direction * np.linspace(0.0, sweep, n)
    xs = center.x + radius * np.cos(angles)
    ys = center.y + radius * np.sin(angles)

    points = [Point(float(x), float(y)) for x, y in zip(xs, ys)]
    points[0] = start
    points[-1] = end
    return points
