"""
Design constants for the moulding preview pipeline.

Precision, tolerances and the ring styles used by the front-view renderer
live here so every module rounds and compares the same way.
"""

from enum import Enum
from typing import Dict

# Decimal digits for every numeric output (offsets, widths, viewBox)
PRECISION = 4

# Endpoint coincidence tolerance when chaining primitives (drawing units)
POINT_TOLERANCE = 1e-5

# Bulge magnitudes below this are straight segments
BULGE_EPSILON = 1e-9

# Sweep slack when classifying an arc as large (> 180°)
LARGE_ARC_EPSILON = 1e-6

# Two line segments closer than this in direction are one continuous face
COPLANAR_ANGLE_TOLERANCE = 1e-3

# Fixed padding around the outermost rectangle, in contour units
DEFAULT_EDGE_PAD = 0.02

# Proportional whitespace around the drawing (0 = none)
DEFAULT_MARGIN_RATIO = 0.0

# Segments per full turn when sampling arcs into polylines
ARC_SAMPLES_PER_TURN = 96

DEFAULT_PROFILES_DIR = "data/profiles"

PAINTING_FILL = "#f8fafc"
PAINTING_STROKE = "#111827"


class RingStyle(Enum):
    """Stroke styles of the nested face-offset rectangles.

    Value tuple: (color, stroke_width, role attribute)
    """
    EMPHASIS = ("#111827", 2.0, "boundary")
    INTERIOR = ("#9ca3af", 0.75, "interior")

    @property
    def color(self) -> str:
        return self.value[0]

    @property
    def stroke_width(self) -> float:
        return self.value[1]

    @property
    def role(self) -> str:
        return self.value[2]

    def get_svg_style(self, color: str = None, stroke_width: float = None) -> Dict[str, object]:
        """SVG attributes for an unfilled ring outline."""
        return {
            'fill': 'none',
            'stroke': color or self.color,
            'stroke_width': stroke_width if stroke_width is not None else self.stroke_width,
            'stroke_linejoin': 'round',
        }
