"""Geometry primitives: points, rotations, bulge arcs and arc centres."""

from moulding_preview.geometry.primitives import (
    ORIGIN,
    Point,
    Rotation,
    angle_of,
    distance,
    normalize_angle,
    points_coincide,
    rotate_point,
    round_value,
)
from moulding_preview.geometry.arcs import (
    arc_sweep,
    bulge_included_angle,
    bulge_is_large_arc,
    bulge_to_radius,
    ccw_sweep_degrees,
    choose_arc_center,
    sample_arc,
)

__all__ = [
    "ORIGIN",
    "Point",
    "Rotation",
    "angle_of",
    "distance",
    "normalize_angle",
    "points_coincide",
    "rotate_point",
    "round_value",
    "arc_sweep",
    "bulge_included_angle",
    "bulge_is_large_arc",
    "bulge_to_radius",
    "ccw_sweep_degrees",
    "choose_arc_center",
    "sample_arc",
]
