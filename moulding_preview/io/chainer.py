"""
Primitive chaining.

A parsed drawing is a bag of line and arc pieces in arbitrary order and
orientation. ``chain_primitives`` walks them into one directed path:

1. start at the piece whose start or end lies closest to the origin,
   oriented so that endpoint comes first;
2. repeatedly append any unused piece touching the current end
   (reversed when needed);
3. stop when nothing touches.

Pieces that never connect are left out without raising; a drawing with a
gap yields a shorter contour.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Union

from moulding_preview.config import BULGE_EPSILON, POINT_TOLERANCE
from moulding_preview.geometry.arcs import (
    bulge_is_large_arc,
    bulge_to_radius,
    ccw_sweep_degrees,
    choose_arc_center,
)
from moulding_preview.geometry.primitives import (
    Point,
    Rotation,
    distance,
    points_coincide,
    rotate_point,
)
from moulding_preview.io.dxf_reader import DxfDocument
from moulding_preview.io.units import inches_scale

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinePrimitive:
    start: Point
    end: Point

    def reversed(self) -> 'LinePrimitive':
        return LinePrimitive(self.end, self.start)


@dataclass(frozen=True)
class ArcPrimitive:
    start: Point
    end: Point
    radius: float
    clockwise: bool
    large_arc: bool
    center: Optional[Point] = None

    def reversed(self) -> 'ArcPrimitive':
        # Same arc travelled backwards: direction flips, sweep size does not
        return replace(self, start=self.end, end=self.start, clockwise=not self.clockwise)


Primitive = Union[LinePrimitive, ArcPrimitive]


def segment_primitive(a: Point, b: Point, bulge: float) -> Primitive:
    """Primitive for one polyline segment from ``a`` to ``b``.

    Args:
        a, b: segment endpoints (already scaled and rotated).
        bulge: bulge stored on the segment's first vertex.
    """
    if abs(bulge) <= BULGE_EPSILON:
        return LinePrimitive(a, b)
    radius = bulge_to_radius(distance(a, b), bulge)
    clockwise = bulge < 0
    large_arc = bulge_is_large_arc(bulge)
    center = choose_arc_center(a, b, radius, clockwise, large_arc)
    return ArcPrimitive(a, b, radius, clockwise, large_arc, center)


def primitives_from_document(
    doc: DxfDocument,
    rotation: Rotation = Rotation.NONE,
) -> List[Primitive]:
    """Scale drawing entities to inches, rotate them, and flatten to primitives.

    Polylines come first (in drawing order), then LINE, then ARC entities.
    Quarter turns never mirror the drawing, so arc sweep directions carry
    over unchanged.
    """
    scale = inches_scale(doc.units)

    def transform(x: float, y: float) -> Point:
        return rotate_point(Point(x * scale, y * scale), rotation)

    prims: List[Primitive] = []

    for polyline in doc.polylines:
        verts = [transform(v.x, v.y) for v in polyline.vertices]
        bulges = [v.bulge for v in polyline.vertices]
        pairs = [(i, i + 1) for i in range(len(verts) - 1)]
        if polyline.closed and len(verts) > 1:
            pairs.append((len(verts) - 1, 0))
        for i, j in pairs:
            if abs(bulges[i]) > BULGE_EPSILON and distance(verts[i], verts[j]) < POINT_TOLERANCE:
                logger.debug("Dropping bulge segment with zero-length chord at vertex %d", i)
                continue
            prims.append(segment_primitive(verts[i], verts[j], bulges[i]))

    for line in doc.lines:
        prims.append(LinePrimitive(transform(line.x1, line.y1), transform(line.x2, line.y2)))

    for arc in doc.arcs:
        if arc.radius <= 0:
            logger.debug("Dropping ARC with non-positive radius %.6g", arc.radius)
            continue
        sa = math.radians(arc.start_angle)
        ea = math.radians(arc.end_angle)
        start = transform(arc.cx + arc.radius * math.cos(sa), arc.cy + arc.radius * math.sin(sa))
        end = transform(arc.cx + arc.radius * math.cos(ea), arc.cy + arc.radius * math.sin(ea))
        large_arc = ccw_sweep_degrees(arc.start_angle, arc.end_angle) > 180
        prims.append(ArcPrimitive(
            start=start,
            end=end,
            radius=arc.radius * scale,
            clockwise=False,
            large_arc=large_arc,
            center=transform(arc.cx, arc.cy),
        ))

    logger.debug("Collected %d primitives (scale=%.6g, rotation=%s)", len(prims), scale, rotation.value)
    return prims


def chain_primitives(
    prims: Sequence[Primitive],
    tolerance: float = POINT_TOLERANCE,
) -> List[Primitive]:
    """Order primitives into a single endpoint-connected path.

    Args:
        prims: unordered primitives.
        tolerance: maximum endpoint distance counted as a connection.

    Returns:
        Connected primitives in path order; empty for empty input.
    """
    if not prims:
        return []

    start_idx = 0
    reverse_first = False
    best = math.inf
    for i, p in enumerate(prims):
        ds = math.hypot(p.start.x, p.start.y)
        de = math.hypot(p.end.x, p.end.y)
        if ds < best:
            best, start_idx, reverse_first = ds, i, False
        if de < best:
            best, start_idx, reverse_first = de, i, True

    used = [False] * len(prims)
    used[start_idx] = True
    current = prims[start_idx].reversed() if reverse_first else prims[start_idx]
    chain: List[Primitive] = [current]

    while True:
        for i, p in enumerate(prims):
            if used[i]:
                continue
            if points_coincide(current.end, p.start, tolerance):
                nxt = p
            elif points_coincide(current.end, p.end, tolerance):
                nxt = p.reversed()
            else:
                continue
            used[i] = True
            chain.append(nxt)
            current = nxt
            break
        else:
            break

    left_out = len(prims) - len(chain)
    if left_out:
        logger.warning("Chaining stopped at a gap: %d of %d primitives not connected",
                       left_out, len(prims))
    return chain
