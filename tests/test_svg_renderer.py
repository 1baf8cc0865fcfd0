"""
Unit tests for moulding_preview.drawing.svg_renderer.

Tests:
- viewBox computation and number formatting
- Ring emphasis and ordering in the front view
- Contour section preview
"""

import xml.etree.ElementTree as ET

import pytest

from moulding_preview.config import RingStyle
from moulding_preview.drawing.frame_geometry import FrameRectangle, PaintingDimensions
from moulding_preview.drawing.svg_renderer import (
    FrameRenderOptions,
    format_number,
    frame_view_box,
    render_contour_preview,
    render_frame_svg,
    save_svg,
)
from moulding_preview.geometry.primitives import Point

SVG_NS = "{http://www.w3.org/2000/svg}"


def _rings(svg: str):
    root = ET.fromstring(svg)
    group = next(g for g in root.iter(f"{SVG_NS}g") if g.get("data-role") == "rings")
    return list(group.iter(f"{SVG_NS}rect"))


def _rectangles(offsets, width=10.0, height=12.0):
    return [FrameRectangle(o, width + 2 * o, height + 2 * o) for o in offsets]


class TestFormatting:
    """Number and viewBox formatting."""

    @pytest.mark.parametrize("value,expected", [
        (1.0, "1"),
        (0.5, "0.5"),
        (-310.02, "-310.02"),
        (1.234567, "1.2346"),
        (-0.0, "0"),
        (-0.00001, "0"),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_view_box_without_margin(self):
        assert frame_view_box(620, 770, 0.0, 0.0) == (-310.0, -385.0, 620.0, 770.0)

    def test_view_box_with_margin_ratio(self):
        assert frame_view_box(620, 770, 0.1, 0.0) == (-372.0, -462.0, 744.0, 924.0)


class TestRenderFrameSvg:
    """Front view markup."""

    def test_returns_markup_and_view_box(self):
        painting = PaintingDimensions(460, 610)
        svg, view_box = render_frame_svg(painting, _rectangles([50, 80], 460, 610))
        root = ET.fromstring(svg)
        assert root.get("viewBox") == view_box == "-310.02 -385.02 620.04 770.04"
        assert root.get("preserveAspectRatio") == "xMidYMid meet"
        assert root.get("role") == "img"

    def test_rings_drawn_outermost_first(self):
        svg, _ = render_frame_svg(PaintingDimensions(10, 12), _rectangles([0.5, 1.25, 1.75]))
        offsets = [float(r.get("data-face-offset")) for r in _rings(svg)]
        assert offsets == [1.75, 1.25, 0.5]

    def test_first_and_last_rings_emphasized(self):
        svg, _ = render_frame_svg(PaintingDimensions(10, 12), _rectangles([0.5, 1.25, 1.75]))
        roles = [r.get("data-ring") for r in _rings(svg)]
        assert roles == ["boundary", "interior", "boundary"]
        strokes = [r.get("stroke") for r in _rings(svg)]
        assert strokes == [RingStyle.EMPHASIS.color, RingStyle.INTERIOR.color, RingStyle.EMPHASIS.color]

    def test_single_ring_is_emphasized(self):
        svg, _ = render_frame_svg(PaintingDimensions(10, 12), _rectangles([1.0]))
        assert [r.get("data-ring") for r in _rings(svg)] == ["boundary"]

    def test_rings_centred_on_origin(self):
        svg, _ = render_frame_svg(PaintingDimensions(10, 12), _rectangles([1.0]))
        ring = _rings(svg)[0]
        assert float(ring.get("x")) == -6.0
        assert float(ring.get("y")) == -7.0
        assert float(ring.get("width")) == 12.0
        assert float(ring.get("height")) == 14.0

    def test_painting_drawn_last(self):
        svg, _ = render_frame_svg(PaintingDimensions(10, 12), _rectangles([1.0]))
        root = ET.fromstring(svg)
        children = list(root)
        assert children[-1].get("data-role") == "painting"
        assert float(children[-1].get("width")) == 10.0

    def test_background_and_colours_from_options(self):
        options = FrameRenderOptions(background_color="#fafafa", emphasis_color="#ff0000", margin_ratio=0.1)
        svg, view_box = render_frame_svg(PaintingDimensions(10, 12), _rectangles([1.0]), options)
        root = ET.fromstring(svg)
        top_rects = [c for c in root if c.tag == f"{SVG_NS}rect"]
        assert top_rects[0].get("fill") == "#fafafa"
        assert _rings(svg)[0].get("stroke") == "#ff0000"
        assert view_box == "-7.22 -8.42 14.44 16.84"


class TestContourPreview:
    """Section view of a profile contour."""

    def test_path_flips_depth_upward(self):
        outline = [Point(0, 0), Point(1, 0), Point(1, 0.5)]
        svg, view_box = render_contour_preview(outline, max_depth=0.5)
        root = ET.fromstring(svg)
        path = next(root.iter(f"{SVG_NS}path"))
        assert path.get("data-role") == "contour"
        assert path.get("d").split() == ["M", "0.0", "0.0", "L", "1.0", "0.0", "L", "1.0", "-0.5"]
        assert root.get("preserveAspectRatio") == "xMinYMax meet"
        assert view_box == "-0.02 -0.62 1.04 0.64"

    def test_empty_outline_has_no_path(self):
        svg, _ = render_contour_preview([], max_depth=0.0)
        assert list(ET.fromstring(svg).iter(f"{SVG_NS}path")) == []

    def test_label(self):
        svg, _ = render_contour_preview([Point(0, 0), Point(1, 0)], 0.0, label="Contour preview for Ogee")
        assert ET.fromstring(svg).get("aria-label") == "Contour preview for Ogee"


class TestSaveSvg:

    def test_writes_file(self, tmp_path):
        svg, _ = render_frame_svg(PaintingDimensions(10, 12), [])
        path = save_svg(svg, tmp_path / "out" / "frame.svg")
        assert path.read_text(encoding="utf-8") == svg
