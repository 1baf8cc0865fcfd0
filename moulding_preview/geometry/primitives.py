"""
Canonical 2D point type and the small vector helpers shared by the
reader, the chainer and the frame geometry engine.
"""

import math
from enum import Enum
from typing import NamedTuple, Union

from moulding_preview.config import PRECISION


class Point(NamedTuple):
    """Point or displacement vector in the contour's local frame."""
    x: float
    y: float

    def __add__(self, other: 'Point') -> 'Point':  # type: ignore[override]
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> 'Point':
        return Point(self.x * factor, self.y * factor)

    def to_dict(self) -> dict:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: dict) -> 'Point':
        return cls(float(data['x']), float(data['y']))


ORIGIN = Point(0.0, 0.0)


class Rotation(Enum):
    """Quarter-turn rotations applied to converted drawings."""
    NONE = "none"
    CW90 = "cw90"
    CCW90 = "ccw90"
    HALF = "180"

    @classmethod
    def parse(cls, value: Union[str, 'Rotation', None]) -> 'Rotation':
        """Resolve a selector string; ``None`` or empty means no rotation.

        Raises:
            ValueError: for an unknown selector.
        """
        if isinstance(value, Rotation):
            return value
        if not value:
            return cls.NONE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(r.value for r in cls)
            raise ValueError(f"Unknown rotation {value!r} (expected one of: {choices})") from None


def rotate_point(p: Point, rotation: Rotation) -> Point:
    """Rotate a point about the origin by a quarter-turn selector."""
    if rotation is Rotation.CW90:
        return Point(p.y, -p.x)
    if rotation is Rotation.CCW90:
        return Point(-p.y, p.x)
    if rotation is Rotation.HALF:
        return Point(-p.x, -p.y)
    return p


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def points_coincide(a: Point, b: Point, tolerance: float) -> bool:
    return distance(a, b) <= tolerance


def angle_of(vector: Point) -> float:
    """Direction angle of a vector, radians in (-pi, pi]."""
    return math.atan2(vector.y, vector.x)


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [0, 2*pi)."""
    wrapped = math.fmod(angle, 2 * math.pi)
    if wrapped < 0:
        wrapped += 2 * math.pi
    return wrapped


def round_value(value: float, digits: int = PRECISION) -> float:
    """Round to the output precision, folding -0.0 into 0.0."""
    rounded = round(float(value), digits)
    return rounded + 0.0
