"""
SVG rendering of frame previews.

Contains:
- render_frame_svg      - front view: painting plus nested face-offset rings
- render_contour_preview - section view of a profile contour (depth upward)
- save_svg              - write markup to disk

The front view is centred on the origin. The innermost and outermost rings
bound the moulding face and are drawn with the emphasis style; rings in
between use the interior style (see RingStyle in moulding_preview.config).
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import svgwrite

from moulding_preview.config import (
    DEFAULT_EDGE_PAD,
    DEFAULT_MARGIN_RATIO,
    PAINTING_FILL,
    PAINTING_STROKE,
    PRECISION,
    RingStyle,
)
from moulding_preview.geometry.primitives import Point, round_value

logger = logging.getLogger(__name__)


@dataclass
class FrameRenderOptions:
    """Caller-tunable look of the front view."""
    margin_ratio: float = DEFAULT_MARGIN_RATIO
    edge_pad: float = DEFAULT_EDGE_PAD
    painting_fill: str = PAINTING_FILL
    painting_stroke: str = PAINTING_STROKE
    background_color: Optional[str] = None
    emphasis_color: str = RingStyle.EMPHASIS.color
    interior_color: str = RingStyle.INTERIOR.color
    emphasis_stroke_width: float = RingStyle.EMPHASIS.stroke_width
    interior_stroke_width: float = RingStyle.INTERIOR.stroke_width


def _new_drawing(view_box: str, label: str, aspect: str) -> svgwrite.Drawing:
    dwg = svgwrite.Drawing(size=("100%", "100%"), viewBox=view_box, debug=False)
    dwg['preserveAspectRatio'] = aspect
    dwg['role'] = 'img'
    dwg['aria-label'] = label
    return dwg


def _centered_rect(dwg: svgwrite.Drawing, width: float, height: float, **style):
    return dwg.rect(
        insert=(round_value(-width / 2), round_value(-height / 2)),
        size=(round_value(width), round_value(height)),
        **style,
    )


def frame_view_box(
    outer_width: float,
    outer_height: float,
    margin_ratio: float,
    edge_pad: float,
) -> Tuple[float, float, float, float]:
    """(min_x, min_y, width, height) around a centred outer rectangle."""
    margin_x = outer_width * margin_ratio + edge_pad
    margin_y = outer_height * margin_ratio + edge_pad
    return (
        round_value(-outer_width / 2 - margin_x),
        round_value(-outer_height / 2 - margin_y),
        round_value(outer_width + 2 * margin_x),
        round_value(outer_height + 2 * margin_y),
    )


def format_number(value: float) -> str:
    """Fixed-precision number without trailing zeros."""
    text = f"{round_value(value):.{PRECISION}f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _format_view_box(box: Sequence[float]) -> str:
    return " ".join(format_number(v) for v in box)


def render_frame_svg(painting, rectangles: Sequence, options: Optional[FrameRenderOptions] = None) -> Tuple[str, str]:
    """Render the front view.

    Args:
        painting: PaintingDimensions (validated by the caller).
        rectangles: FrameRectangle list, ascending by offset.
        options: render options (defaults when None).

    Returns:
        (svg markup, viewBox string)
    """
    opts = options or FrameRenderOptions()

    if rectangles:
        outer_w, outer_h = rectangles[-1].width, rectangles[-1].height
    else:
        outer_w, outer_h = painting.width, painting.height

    box = frame_view_box(outer_w, outer_h, opts.margin_ratio, opts.edge_pad)
    view_box = _format_view_box(box)
    dwg = _new_drawing(view_box, "Virtual frame preview", "xMidYMid meet")

    if opts.background_color:
        bg = dwg.rect(insert=(box[0], box[1]), size=(box[2], box[3]), fill=opts.background_color)
        bg['aria-hidden'] = 'true'
        dwg.add(bg)

    rings = dwg.g()
    rings['data-role'] = 'rings'
    last = len(rectangles) - 1
    # Outermost first so inner rings paint on top
    for index in range(last, -1, -1):
        rect = rectangles[index]
        emphasized = index in (0, last)
        style = RingStyle.EMPHASIS if emphasized else RingStyle.INTERIOR
        outline = _centered_rect(dwg, rect.width, rect.height, **style.get_svg_style(
            color=opts.emphasis_color if emphasized else opts.interior_color,
            stroke_width=opts.emphasis_stroke_width if emphasized else opts.interior_stroke_width,
        ))
        outline['style'] = "vector-effect: non-scaling-stroke;"
        outline['data-face-offset'] = rect.offset
        outline['data-ring'] = style.role
        rings.add(outline)
    dwg.add(rings)

    painting_rect = _centered_rect(
        dwg, painting.width, painting.height,
        fill=opts.painting_fill, stroke=opts.painting_stroke, stroke_width=1,
    )
    painting_rect['style'] = "vector-effect: non-scaling-stroke;"
    painting_rect['data-role'] = 'painting'
    dwg.add(painting_rect)

    logger.debug("Rendered frame SVG: %d rings, viewBox=%s", len(rectangles), view_box)
    return dwg.tostring(), view_box


def render_contour_preview(
    outline: Sequence[Point],
    max_depth: float,
    outer_width: Optional[float] = None,
    edge_pad: float = DEFAULT_EDGE_PAD,
    label: str = "Contour preview",
    stroke: str = "#000000",
) -> Tuple[str, str]:
    """Render a profile's cross-section with depth drawn upward.

    Args:
        outline: absolute contour points (arcs already sampled).
        max_depth: highest depth reached by the contour (>= 0).
        outer_width: horizontal span to reserve; defaults to the outline's span.
        edge_pad: padding against stroke clipping.
        label: aria-label of the document.
        stroke: contour colour.

    Returns:
        (svg markup, viewBox string)
    """
    xs = [p.x for p in outline] or [0.0]
    min_x = min(xs)
    span = outer_width if outer_width is not None else max(xs) - min_x
    height = max(max_depth, 1e-6)
    pad_top = max(0.1, 0.02 * height)

    box = (
        round_value(min_x - edge_pad),
        round_value(-(height + pad_top + edge_pad)),
        round_value(max(span, 1e-6) + 2 * edge_pad),
        round_value(height + pad_top + 2 * edge_pad),
    )
    view_box = _format_view_box(box)
    dwg = _new_drawing(view_box, label, "xMinYMax meet")

    if outline:
        commands: List[Union[str, float]] = ['M', round_value(outline[0].x), round_value(-outline[0].y)]
        for p in outline[1:]:
            commands.extend(['L', round_value(p.x), round_value(-p.y)])
        path = dwg.path(d=commands, fill='none', stroke=stroke, stroke_width=2)
        path['style'] = "vector-effect: non-scaling-stroke;"
        path['data-role'] = 'contour'
        dwg.add(path)

    return dwg.tostring(), view_box


def save_svg(markup: str, filepath: Union[str, Path]) -> Path:
    """Write SVG markup to a UTF-8 file."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(markup, encoding='utf-8')
    logger.info("SVG saved: %s", path)
    return path
