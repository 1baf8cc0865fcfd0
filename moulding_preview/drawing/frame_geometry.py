"""
Frame geometry engine.

Turns a moulding contour plus painting dimensions into the front view of
the framed painting:

1. walk the contour segments from the origin, tracking absolute end points;
2. classify each pair of neighbouring segments by segment kinds and the
   change in direction;
3. every non-coplanar transition contributes the face offsets on both sides
   of the boundary as events;
4. each distinct event offset becomes a nested rectangle around the painting;
5. the rectangles are rendered to an SVG document centred on the origin.

All returned numbers are rounded to ``PRECISION`` decimals.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from moulding_preview.config import COPLANAR_ANGLE_TOLERANCE, PRECISION
from moulding_preview.drawing.svg_renderer import FrameRenderOptions, render_frame_svg
from moulding_preview.geometry.primitives import ORIGIN, Point, angle_of, round_value

logger = logging.getLogger(__name__)

# Transition reasons
COPLANAR_LINE = 'coplanar-line'
LINE_TO_LINE = 'line-to-line'
LINE_TO_ARC = 'line-to-arc'
ARC_TO_LINE = 'arc-to-line'
ARC_TRANSITION = 'arc-transition'

EVENT_REASONS = (LINE_TO_LINE, LINE_TO_ARC, ARC_TO_LINE, ARC_TRANSITION)

_OFFSET_QUANTUM = 10.0 ** -PRECISION


class InvalidPaintingError(ValueError):
    """Painting width or height is not a positive number."""


@dataclass(frozen=True)
class PaintingDimensions:
    width: float
    height: float


@dataclass(frozen=True)
class LineSegment:
    """Straight segment given as a displacement from the current point.

    ``to`` wins over ``dx``/``dy``; missing components count as 0.
    """
    to: Optional[Point] = None
    dx: Optional[float] = None
    dy: Optional[float] = None

    def displacement(self) -> Point:
        if self.to is not None:
            return self.to
        return Point(self.dx or 0.0, self.dy or 0.0)


@dataclass(frozen=True)
class ArcSegment:
    """Arc given by its end point relative to the current point."""
    to: Point
    radius: float
    clockwise: bool = True

    def displacement(self) -> Point:
        return self.to


ContourSegment = Union[LineSegment, ArcSegment]


@dataclass
class ProfileContour:
    segments: List[ContourSegment] = field(default_factory=list)
    origin: Optional[Point] = None


@dataclass(frozen=True)
class FrameRectangle:
    offset: float
    width: float
    height: float


@dataclass(frozen=True)
class HighlightBand:
    """Ring between the two face offsets around a direction change."""
    from_offset: float
    to_offset: float
    reason: str


@dataclass(frozen=True)
class SegmentComputation:
    start: Point
    end: Point
    vector: Point
    segment: ContourSegment


@dataclass
class FrameGeometry:
    """Everything the presentation layer needs for one preview."""
    svg: str
    view_box: str
    rectangles: List[FrameRectangle]
    events: List[float]
    bands: List[HighlightBand]


def validate_painting(painting: PaintingDimensions) -> None:
    """Reject non-positive painting dimensions.

    Raises:
        InvalidPaintingError: if width or height is not a number > 0.
    """
    for name in ('width', 'height'):
        value = getattr(painting, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
            raise InvalidPaintingError(
                f"Painting dimensions must be positive numbers (got {name}={value!r})."
            )


def compute_segments(contour: ProfileContour) -> List[SegmentComputation]:
    """Absolute start/end points and net displacement of every segment."""
    cursor = contour.origin if contour.origin is not None else ORIGIN
    computed: List[SegmentComputation] = []
    for segment in contour.segments:
        if isinstance(segment, (LineSegment, ArcSegment)):
            vector = segment.displacement()
        else:
            raise TypeError(f"Unsupported contour segment: {segment!r}")
        end = cursor + vector
        computed.append(SegmentComputation(cursor, end, vector, segment))
        cursor = end
    return computed


def classify_transition(prev: SegmentComputation, nxt: SegmentComputation) -> str:
    """Name the kind of boundary between two neighbouring segments."""
    prev_line = isinstance(prev.segment, LineSegment)
    next_line = isinstance(nxt.segment, LineSegment)
    if prev_line and next_line:
        delta = abs(angle_of(prev.vector) - angle_of(nxt.vector))
        if delta < COPLANAR_ANGLE_TOLERANCE:
            return COPLANAR_LINE
        return LINE_TO_LINE
    if prev_line:
        return LINE_TO_ARC
    if next_line:
        return ARC_TO_LINE
    return ARC_TRANSITION


def collect_bands(segments: Sequence[SegmentComputation]) -> List[HighlightBand]:
    """Highlight bands for every transition that is not a straight continuation."""
    bands: List[HighlightBand] = []
    for prev, nxt in zip(segments, segments[1:]):
        reason = classify_transition(prev, nxt)
        if reason not in EVENT_REASONS:
            continue
        inner = round_value(abs(prev.end.x))
        outer = round_value(abs(nxt.end.x))
        if inner == outer:
            continue
        bands.append(HighlightBand(min(inner, outer), max(inner, outer), reason))
    return bands


def dedupe_offsets(values: Sequence[float]) -> List[float]:
    """Sorted distinct offsets; values closer than 1e-PRECISION collapse into one."""
    kept: List[float] = []
    for value in sorted(abs(v) for v in values):
        if kept and value - kept[-1] < _OFFSET_QUANTUM:
            continue
        kept.append(value)

    result: List[float] = []
    for value in kept:
        rounded = round_value(value)
        if rounded > 0 and (not result or rounded > result[-1]):
            result.append(rounded)
    return result


def event_offsets(segments: Sequence[SegmentComputation]) -> List[float]:
    """Distinct non-zero face offsets at which the contour changes direction."""
    raw: List[float] = []
    for prev, nxt in zip(segments, segments[1:]):
        if classify_transition(prev, nxt) in EVENT_REASONS:
            raw.append(prev.end.x)
            raw.append(nxt.end.x)
    return dedupe_offsets(raw)


def build_rectangles(painting: PaintingDimensions, offsets: Sequence[float]) -> List[FrameRectangle]:
    return [
        FrameRectangle(
            offset=offset,
            width=round_value(painting.width + 2 * offset),
            height=round_value(painting.height + 2 * offset),
        )
        for offset in offsets
    ]


def compute_frame_geometry(
    painting: PaintingDimensions,
    contour: ProfileContour,
    options: Optional[FrameRenderOptions] = None,
) -> FrameGeometry:
    """Nested face-offset rectangles, events and SVG for a framed painting.

    Args:
        painting: painting width and height (> 0), in contour units.
        contour: relative-displacement contour.
        options: FrameRenderOptions (defaults when None).

    Returns:
        FrameGeometry with rectangles sorted by offset (offset 0 excluded).

    Raises:
        InvalidPaintingError: for non-positive painting dimensions.
    """
    validate_painting(painting)

    segments = compute_segments(contour)
    events = event_offsets(segments)
    bands = collect_bands(segments)
    rectangles = build_rectangles(painting, events)

    svg, view_box = render_frame_svg(painting, rectangles, options)

    logger.debug(
        "Frame geometry: %d segments, %d events, %d bands",
        len(segments), len(events), len(bands),
        extra={"painting": f"{painting.width}x{painting.height}"},
    )
    return FrameGeometry(svg=svg, view_box=view_box, rectangles=rectangles,
                         events=events, bands=bands)
