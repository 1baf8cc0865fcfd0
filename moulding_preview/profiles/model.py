"""
Profile record model.

A profile is the cross-section of a moulding: ``start`` plus an ordered
list of line/arc commands whose ``to`` points are absolute in the
profile's local frame (X = face offset from the painting edge, Y = depth).

JSON layout (one file per profile, ``<id>.json``)::

    {
      "id": "ogee-2in", "name": "Ogee 2in", "units": "in",
      "dimensions": {"width": 2.0, "height": 1.25},
      "start": {"x": 0, "y": 0},
      "contour": [
        {"type": "line", "to": {"x": 0.5, "y": 0}},
        {"type": "arc", "to": {"x": 1.0, "y": 0.5}, "radius": 0.5,
         "clockwise": false, "largeArc": false,
         "metadata": {"center": {"x": 0.5, "y": 0.5}}}
      ]
    }
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from moulding_preview.geometry.primitives import ORIGIN, Point


@dataclass(frozen=True)
class LineCommand:
    to: Point
    metadata: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ArcCommand:
    to: Point
    radius: float
    clockwise: bool
    large_arc: bool = False
    center: Optional[Point] = None
    metadata: Optional[Dict[str, Any]] = None


ContourCommand = Union[LineCommand, ArcCommand]


@dataclass(frozen=True)
class Dimensions:
    width: float
    height: float
    depth: Optional[float] = None


@dataclass(frozen=True)
class ProfileDefinition:
    id: str
    name: str
    units: str
    dimensions: Dimensions
    contour: List[ContourCommand]
    start: Optional[Point] = None
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    schema: Optional[str] = field(default=None, compare=False)

    @property
    def start_point(self) -> Point:
        return self.start if self.start is not None else ORIGIN

    def absolute_points(self) -> List[Point]:
        """Start point followed by every command's end point."""
        return [self.start_point] + [cmd.to for cmd in self.contour]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProfileDefinition':
        """Build from an already-validated JSON record."""
        contour: List[ContourCommand] = []
        for entry in data['contour']:
            to = Point.from_dict(entry['to'])
            meta = entry.get('metadata')
            if entry['type'] == 'line':
                contour.append(LineCommand(to=to, metadata=meta))
            else:
                center = meta.get('center') if isinstance(meta, dict) else None
                contour.append(ArcCommand(
                    to=to,
                    radius=float(entry['radius']),
                    clockwise=bool(entry['clockwise']),
                    large_arc=bool(entry.get('largeArc', False)),
                    center=Point.from_dict(center) if center else None,
                    metadata=meta,
                ))

        dims = data['dimensions']
        depth = dims.get('depth')
        start = data.get('start')
        return cls(
            id=data['id'],
            name=data['name'],
            units=data['units'],
            dimensions=Dimensions(
                width=float(dims['width']),
                height=float(dims['height']),
                depth=float(depth) if depth is not None else None,
            ),
            contour=contour,
            start=Point.from_dict(start) if start else None,
            description=data.get('description'),
            metadata=data.get('metadata'),
            schema=data.get('$schema'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON record, omitting optional fields that are unset."""
        record: Dict[str, Any] = {}
        if self.schema:
            record['$schema'] = self.schema
        record['id'] = self.id
        record['name'] = self.name
        if self.description is not None:
            record['description'] = self.description
        record['units'] = self.units
        dims: Dict[str, Any] = {'width': self.dimensions.width, 'height': self.dimensions.height}
        if self.dimensions.depth is not None:
            dims['depth'] = self.dimensions.depth
        record['dimensions'] = dims
        if self.start is not None:
            record['start'] = self.start.to_dict()
        record['contour'] = [_command_to_dict(cmd) for cmd in self.contour]
        if self.metadata is not None:
            record['metadata'] = self.metadata
        return record


def _command_to_dict(cmd: ContourCommand) -> Dict[str, Any]:
    if isinstance(cmd, LineCommand):
        entry: Dict[str, Any] = {'type': 'line', 'to': cmd.to.to_dict()}
        if cmd.metadata is not None:
            entry['metadata'] = cmd.metadata
        return entry

    entry = {
        'type': 'arc',
        'to': cmd.to.to_dict(),
        'radius': cmd.radius,
        'clockwise': cmd.clockwise,
        'largeArc': cmd.large_arc,
    }
    meta = dict(cmd.metadata) if cmd.metadata else {}
    if cmd.center is not None:
        meta['center'] = cmd.center.to_dict()
    if meta:
        entry['metadata'] = meta
    return entry
