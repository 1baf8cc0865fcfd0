"""
DXF → profile conversion.

Pipeline for one upload:
  payload → parse_dxf → primitives (scaled to inches, rotated)
          → chain_primitives → ProfileDefinition → validate → <id>.json

Usage:
    from moulding_preview.io.converter import convert_dxf_file

    result = convert_dxf_file("ogee.dxf", profiles_dir="data/profiles", rotation="cw90")
    print(result.path, len(result.profile.contour))
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from moulding_preview.config import POINT_TOLERANCE
from moulding_preview.geometry.primitives import Rotation
from moulding_preview.io.chainer import ArcPrimitive, Primitive, chain_primitives, primitives_from_document
from moulding_preview.io.dxf_reader import DxfDocument, DxfReadError, decode_payload, parse_dxf
from moulding_preview.logging_config import log_timing
from moulding_preview.profiles.model import (
    ArcCommand,
    ContourCommand,
    Dimensions,
    LineCommand,
    ProfileDefinition,
)
from moulding_preview.profiles.store import profile_path, save_profile
from moulding_preview.profiles.validator import ProfileValidationError, ensure_valid

logger = logging.getLogger(__name__)

IMPORTED_DESCRIPTION = "Imported from DXF"
SCHEMA_REF = "./schema.json"
MAX_ID_LENGTH = 64
FALLBACK_ID = "frame-profile"


class ConversionError(Exception):
    """The drawing could not be turned into a profile record."""


@dataclass
class ConversionResult:
    profile: ProfileDefinition
    path: Path


def slugify(text: str) -> str:
    """Lowercase id made of ``[a-z0-9-]``, at most 64 characters."""
    slug = re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-')[:MAX_ID_LENGTH]
    return slug or FALLBACK_ID


def _to_command(prim: Primitive) -> ContourCommand:
    if isinstance(prim, ArcPrimitive):
        return ArcCommand(
            to=prim.end,
            radius=prim.radius,
            clockwise=prim.clockwise,
            large_arc=prim.large_arc,
            center=prim.center,
        )
    return LineCommand(to=prim.end)


def build_profile(
    doc: DxfDocument,
    name: str,
    profile_id: str,
    rotation: Union[str, Rotation, None] = Rotation.NONE,
    tolerance: float = POINT_TOLERANCE,
) -> ProfileDefinition:
    """Convert a parsed drawing into a profile record (no file I/O).

    Raises:
        ConversionError: unknown rotation, or no LWPOLYLINE/LINE/ARC entities.
    """
    try:
        rot = Rotation.parse(rotation)
    except ValueError as exc:
        raise ConversionError(str(exc)) from exc

    prims = primitives_from_document(doc, rot)
    if not prims:
        raise ConversionError("No convertible entities (LWPOLYLINE/LINE/ARC) found.")

    chain = chain_primitives(prims, tolerance)
    start = chain[0].start
    points = [start] + [p.end for p in chain]
    xs = [p.x for p in points]
    ys = [p.y for p in points]

    contour: List[ContourCommand] = [_to_command(p) for p in chain]
    logger.info("Chained %d of %d primitives into profile %r", len(chain), len(prims), profile_id)

    return ProfileDefinition(
        id=profile_id,
        name=name,
        units='in',
        dimensions=Dimensions(width=max(xs) - min(xs), height=max(ys) - min(ys)),
        contour=contour,
        start=start,
        description=IMPORTED_DESCRIPTION,
        schema=SCHEMA_REF,
    )


def convert_dxf_text(
    payload: Union[bytes, str, None],
    profiles_dir: Union[str, Path],
    name: Optional[str] = None,
    profile_id: Optional[str] = None,
    rotation: Union[str, Rotation, None] = Rotation.NONE,
    source_name: str = "upload.dxf",
    tolerance: float = POINT_TOLERANCE,
) -> ConversionResult:
    """Convert an uploaded DXF payload and store the resulting profile.

    Args:
        payload: raw DXF bytes or text.
        profiles_dir: store directory the record is written to.
        name: display name (defaults to the source file stem).
        profile_id: id override (defaults to ``slugify(name)``).
        rotation: none | cw90 | ccw90 | 180, applied after unit scaling.
        source_name: uploaded file name, used for the default name.
        tolerance: endpoint matching tolerance for chaining.

    Returns:
        ConversionResult with the record and its path.

    Raises:
        ConversionError: missing payload, no convertible geometry, bad rotation,
            or a record that fails schema validation.
    """
    if not payload:
        raise ConversionError("Missing DXF payload")

    display_name = (name or "").strip() or re.sub(r'\.dxf$', '', Path(source_name).name, flags=re.IGNORECASE)
    record_id = (profile_id or "").strip() or slugify(display_name)

    with log_timing(logger, "DXF conversion", source=source_name, profile_id=record_id):
        doc = parse_dxf(decode_payload(payload))
        profile = build_profile(doc, display_name, record_id, rotation, tolerance)
        try:
            ensure_valid(profile.to_dict(), profile_path(record_id, profiles_dir))
        except ProfileValidationError as exc:
            raise ConversionError(str(exc)) from exc
        path = save_profile(profile, profiles_dir)

    return ConversionResult(profile=profile, path=path)


def convert_dxf_file(
    filepath: Union[str, Path],
    profiles_dir: Union[str, Path],
    name: Optional[str] = None,
    profile_id: Optional[str] = None,
    rotation: Union[str, Rotation, None] = Rotation.NONE,
    tolerance: float = POINT_TOLERANCE,
) -> ConversionResult:
    """Read a DXF file from disk and convert it (see convert_dxf_text).

    Raises:
        DxfReadError: if the file cannot be read.
        ConversionError: see convert_dxf_text.
    """
    path = Path(filepath)
    try:
        payload = path.read_bytes()
    except FileNotFoundError:
        raise DxfReadError(f"File not found: {str(path)!r}")
    except OSError as exc:
        raise DxfReadError(f"Could not read DXF file {str(path)!r}: {exc}") from exc
    return convert_dxf_text(payload, profiles_dir, name=name, profile_id=profile_id,
                            rotation=rotation, source_name=path.name, tolerance=tolerance)
