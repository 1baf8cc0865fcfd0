"""
Profile → engine contour adapter and section-view helpers.

Profile commands carry absolute end points; the frame geometry engine
walks relative displacements. ``to_profile_contour`` converts one into the
other without validating (records are validated on load).
"""

import math
from typing import List

from moulding_preview.drawing.frame_geometry import ArcSegment, ContourSegment, LineSegment, ProfileContour
from moulding_preview.geometry.arcs import angle_in_sweep, choose_arc_center, sample_arc
from moulding_preview.geometry.primitives import Point
from moulding_preview.profiles.model import ArcCommand, LineCommand, ProfileDefinition


def to_profile_contour(definition: ProfileDefinition) -> ProfileContour:
    """Relative-displacement contour for a profile definition."""
    prev = definition.start_point
    segments: List[ContourSegment] = []
    for cmd in definition.contour:
        delta = cmd.to - prev
        if isinstance(cmd, LineCommand):
            segments.append(LineSegment(to=delta))
        elif isinstance(cmd, ArcCommand):
            segments.append(ArcSegment(to=delta, radius=cmd.radius, clockwise=cmd.clockwise))
        else:
            raise TypeError(f"Unsupported contour command: {cmd!r}")
        prev = cmd.to
    return ProfileContour(segments=segments, origin=definition.start_point)


def arc_center(start: Point, cmd: ArcCommand) -> Point:
    """Stored centre of an arc command, or the resolved one."""
    if cmd.center is not None:
        return cmd.center
    return choose_arc_center(start, cmd.to, cmd.radius, cmd.clockwise, cmd.large_arc)


def contour_outline(definition: ProfileDefinition) -> List[Point]:
    """Absolute contour points with arcs sampled into short chords."""
    current = definition.start_point
    points = [current]
    for cmd in definition.contour:
        if isinstance(cmd, ArcCommand):
            center = arc_center(current, cmd)
            points.extend(sample_arc(current, cmd.to, center, cmd.clockwise)[1:])
        else:
            points.append(cmd.to)
        current = cmd.to
    return points


def profile_max_depth(definition: ProfileDefinition) -> float:
    """Largest depth (Y) the contour reaches, arcs' crests included; never below 0."""
    current = definition.start_point
    max_y = current.y
    for cmd in definition.contour:
        max_y = max(max_y, cmd.to.y)
        if isinstance(cmd, ArcCommand):
            center = arc_center(current, cmd)
            s = math.atan2(current.y - center.y, current.x - center.x)
            e = math.atan2(cmd.to.y - center.y, cmd.to.x - center.x)
            if angle_in_sweep(math.pi / 2, s, e, cmd.clockwise):
                max_y = max(max_y, center.y + cmd.radius)
        current = cmd.to
    return max(0.0, max_y)
