"""
Minimal DXF reader.

Reads the ASCII ``code\\nvalue\\n`` pair stream of a DXF file and keeps only
what a moulding profile needs:

- HEADER ``$INSUNITS``          → DxfDocument.units
- ENTITIES ``LWPOLYLINE``       → DxfPolyline (vertices with bulge, closed flag)
- ENTITIES ``LINE``             → DxfLine
- ENTITIES ``ARC``              → DxfArc (angles in degrees, CCW)

Everything else is skipped. Entities with missing or non-numeric
coordinates are dropped without aborting the read. Parsing stops at
``EOF`` or when the input runs out.
"""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Pair = Tuple[Optional[int], str]


class DxfReadError(Exception):
    """DXF file could not be read from disk."""


@dataclass
class DxfVertex:
    x: float
    y: float
    bulge: float = 0.0


@dataclass
class DxfPolyline:
    vertices: List[DxfVertex] = field(default_factory=list)
    closed: bool = False


@dataclass
class DxfLine:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass
class DxfArc:
    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float


@dataclass
class DxfDocument:
    """Entities of a drawing in its native units and frame."""
    units: Optional[int] = None
    polylines: List[DxfPolyline] = field(default_factory=list)
    lines: List[DxfLine] = field(default_factory=list)
    arcs: List[DxfArc] = field(default_factory=list)

    @property
    def entity_count(self) -> int:
        return len(self.polylines) + len(self.lines) + len(self.arcs)


def _to_float(value: str) -> Optional[float]:
    try:
        number = float(value.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _to_int(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except ValueError:
        number = _to_float(value)
        return int(number) if number is not None else None


def iter_pairs(text: str) -> Iterator[Pair]:
    """Yield (group code, value) pairs; unparsable codes come back as None."""
    lines = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    for i in range(0, len(lines) - 1, 2):
        yield _to_int(lines[i]), lines[i + 1]


class _PairCursor:
    """Sequential access to the pair list with one-pair lookahead."""

    def __init__(self, pairs: List[Pair]):
        self._pairs = pairs
        self._pos = 0

    def peek(self) -> Optional[Pair]:
        if self._pos < len(self._pairs):
            return self._pairs[self._pos]
        return None

    def next(self) -> Optional[Pair]:
        pair = self.peek()
        if pair is not None:
            self._pos += 1
        return pair

    def entity_body(self) -> Iterator[Pair]:
        """Consume pairs up to (not including) the next group code 0."""
        while True:
            pair = self.peek()
            if pair is None or pair[0] == 0:
                return
            self._pos += 1
            yield pair


def _read_header_variable(cursor: _PairCursor, name: str, doc: DxfDocument) -> None:
    while True:
        pair = cursor.peek()
        if pair is None or pair[0] in (0, 9):
            return
        cursor.next()
        code, value = pair
        if name == '$INSUNITS' and code in (70, 90):
            units = _to_int(value)
            if units is not None:
                doc.units = units


def _read_lwpolyline(cursor: _PairCursor) -> DxfPolyline:
    polyline = DxfPolyline()
    pending_x: Optional[float] = None
    x_seen = False

    for code, value in cursor.entity_body():
        if code == 10:
            pending_x = _to_float(value)
            x_seen = True
        elif code == 20:
            y = _to_float(value)
            if x_seen and pending_x is not None and y is not None:
                polyline.vertices.append(DxfVertex(pending_x, y))
            else:
                logger.debug("Dropping malformed LWPOLYLINE vertex (x=%r, y=%r)", pending_x, value)
            pending_x = None
            x_seen = False
        elif code == 42:
            bulge = _to_float(value)
            if polyline.vertices and bulge is not None:
                polyline.vertices[-1].bulge = bulge
        elif code == 70:
            flags = _to_int(value)
            polyline.closed = flags is not None and (flags & 1) == 1
    return polyline


def _read_fields(cursor: _PairCursor, wanted: Tuple[int, ...]) -> Optional[List[float]]:
    found = {}
    for code, value in cursor.entity_body():
        if code in wanted:
            found[code] = _to_float(value)
    values = [found.get(code) for code in wanted]
    if any(v is None for v in values):
        return None
    return values  # type: ignore[return-value]


def parse_dxf(text: str) -> DxfDocument:
    """Parse DXF text into a DxfDocument.

    Args:
        text: full content of an ASCII DXF file.

    Returns:
        DxfDocument in the drawing's native units.
    """
    cursor = _PairCursor(list(iter_pairs(text)))
    doc = DxfDocument()
    section: Optional[str] = None
    dropped = 0

    while True:
        pair = cursor.next()
        if pair is None:
            break
        code, value = pair
        value = value.strip()

        if section == 'HEADER' and code == 9:
            _read_header_variable(cursor, value, doc)
            continue

        if code != 0:
            continue

        if value == 'SECTION':
            name = cursor.next()
            if name is not None and name[0] == 2:
                section = name[1].strip()
            continue
        if value == 'ENDSEC':
            section = None
            continue
        if value == 'EOF':
            break
        if section != 'ENTITIES':
            continue

        if value == 'LWPOLYLINE':
            doc.polylines.append(_read_lwpolyline(cursor))
        elif value == 'LINE':
            fields = _read_fields(cursor, (10, 20, 11, 21))
            if fields is None:
                dropped += 1
            else:
                doc.lines.append(DxfLine(*fields))
        elif value == 'ARC':
            fields = _read_fields(cursor, (10, 20, 40, 50, 51))
            if fields is None:
                dropped += 1
            else:
                doc.arcs.append(DxfArc(*fields))

    if dropped:
        logger.debug("Dropped %d incomplete LINE/ARC entities", dropped)
    logger.debug(
        "Parsed DXF: units=%s, %d polylines, %d lines, %d arcs",
        doc.units, len(doc.polylines), len(doc.lines), len(doc.arcs),
    )
    return doc


def decode_payload(payload: Union[bytes, str]) -> str:
    """Decode an uploaded drawing payload to text."""
    if isinstance(payload, bytes):
        return payload.decode('utf-8', errors='replace')
    return payload


def read_dxf(filepath: Union[str, Path]) -> DxfDocument:
    """Read and parse a DXF file from disk.

    Raises:
        DxfReadError: if the file cannot be opened.
    """
    path = Path(filepath)
    try:
        payload = path.read_bytes()
    except FileNotFoundError:
        raise DxfReadError(f"File not found: {str(path)!r}")
    except OSError as exc:
        raise DxfReadError(f"Could not read DXF file {str(path)!r}: {exc}") from exc
    logger.info("Reading DXF: %s (%.1f KB)", path, len(payload) / 1024)
    return parse_dxf(decode_payload(payload))
