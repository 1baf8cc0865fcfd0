"""
DXF export of profile contours.

Writes a profile back out as a single LWPOLYLINE whose vertex bulges encode
the arc commands, so the file round-trips through the DXF converter.
Uses ezdxf for DXF creation.

Layers:
- PROFILE - the moulding contour

Usage:
    from moulding_preview.drawing.dxf_export import export_profile_dxf

    export_profile_dxf(profile, "ogee.dxf")
"""

import logging
import math
from pathlib import Path
from typing import Dict, List, Tuple, Union

import ezdxf
from ezdxf import units

from moulding_preview.geometry.arcs import arc_sweep
from moulding_preview.profiles.contour import arc_center
from moulding_preview.profiles.model import ArcCommand, ProfileDefinition

logger = logging.getLogger(__name__)

PROFILE_LAYERS: Dict[str, Dict[str, int]] = {
    'PROFILE': {'color': 7, 'lineweight': 50},
}

UNITS_TO_DXF: Dict[str, int] = {
    'in': units.IN,
    'ft': units.FT,
    'mm': units.MM,
    'cm': units.CM,
    'm': units.M,
}


def command_bulges(profile: ProfileDefinition) -> List[Tuple[float, float, float]]:
    """(x, y, bulge) vertices of the profile polyline.

    The bulge on a vertex describes the segment leaving it; the last vertex
    carries 0.
    """
    current = profile.start_point
    vertices: List[Tuple[float, float, float]] = []
    for cmd in profile.contour:
        bulge = 0.0
        if isinstance(cmd, ArcCommand):
            center = arc_center(current, cmd)
            sweep = arc_sweep(current, cmd.to, center, cmd.clockwise)
            bulge = math.tan(sweep / 4)
            if cmd.clockwise:
                bulge = -bulge
        vertices.append((current.x, current.y, bulge))
        current = cmd.to
    vertices.append((current.x, current.y, 0.0))
    return vertices


def build_profile_document(profile: ProfileDefinition, dxf_version: str = 'R2010'):
    """Create an in-memory ezdxf document holding the profile."""
    doc = ezdxf.new(dxf_version, units=UNITS_TO_DXF.get(profile.units, units.IN))
    for name, props in PROFILE_LAYERS.items():
        doc.layers.add(name, color=props['color'], lineweight=props['lineweight'])

    msp = doc.modelspace()
    msp.add_lwpolyline(command_bulges(profile), format='xyb', dxfattribs={'layer': 'PROFILE'})
    return doc


def export_profile_dxf(
    profile: ProfileDefinition,
    filepath: Union[str, Path],
    dxf_version: str = 'R2010',
) -> Path:
    """Save a profile contour as a DXF file.

    Returns:
        Path of the written file.
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    doc = build_profile_document(profile, dxf_version)
    doc.saveas(path)
    logger.info("DXF saved: %s (%d commands)", path, len(profile.contour))
    return path
