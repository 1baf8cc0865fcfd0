"""
Geometry query entry point.

Resolves a contour (stored profile id, loaded ProfileDefinition, or an
inline ProfileContour) and runs the frame geometry engine on it. A painting
size given in other units is converted into the profile record's units
first.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from moulding_preview.drawing.frame_geometry import (
    FrameGeometry,
    PaintingDimensions,
    ProfileContour,
    compute_frame_geometry,
    validate_painting,
)
from moulding_preview.drawing.svg_renderer import FrameRenderOptions
from moulding_preview.io.units import LINEAR_UNIT_TO_MM, convert_length
from moulding_preview.logging_config import log_timing
from moulding_preview.profiles.contour import to_profile_contour
from moulding_preview.profiles.model import ProfileDefinition
from moulding_preview.profiles.store import get_profile

logger = logging.getLogger(__name__)

ContourSource = Union[ProfileDefinition, ProfileContour, str]


def resolve_contour(
    source: ContourSource,
    profiles_dir: Optional[Union[str, Path]] = None,
) -> ProfileContour:
    """Turn a profile id, profile record, or inline contour into an engine contour.

    Raises:
        ValueError: a profile id was given without a store directory.
        ProfileNotFoundError / ProfileValidationError: from the store.
    """
    if isinstance(source, ProfileContour):
        return source
    if isinstance(source, ProfileDefinition):
        return to_profile_contour(source)
    if profiles_dir is None:
        raise ValueError(f"profiles_dir is required to look up profile {source!r}")
    return to_profile_contour(get_profile(source, profiles_dir))


def preview_frame(
    width: float,
    height: float,
    source: ContourSource,
    profiles_dir: Optional[Union[str, Path]] = None,
    options: Optional[FrameRenderOptions] = None,
    painting_units: Optional[str] = None,
) -> FrameGeometry:
    """Rectangles, events and SVG for a painting framed with a profile.

    Args:
        width, height: painting size, in ``painting_units`` when given,
            otherwise already in the profile's units.
        source: profile id, ProfileDefinition or ProfileContour.
        profiles_dir: store directory (needed for a profile id).
        options: render options.
        painting_units: mm | cm | m | in | ft; the painting size is converted
            into the profile record's units before the frame is computed.

    Raises:
        InvalidPaintingError: for non-positive painting dimensions.
        ValueError: unknown ``painting_units``, or ``painting_units`` with an
            inline contour that carries no units.
    """
    if painting_units is None:
        contour = resolve_contour(source, profiles_dir)
    else:
        if painting_units not in LINEAR_UNIT_TO_MM:
            raise ValueError(f"Unknown painting units {painting_units!r}")
        if isinstance(source, ProfileContour):
            raise ValueError("painting_units needs a profile record, not an inline contour")
        if not isinstance(source, ProfileDefinition):
            if profiles_dir is None:
                raise ValueError(f"profiles_dir is required to look up profile {source!r}")
            source = get_profile(source, profiles_dir)
        contour = to_profile_contour(source)
        validate_painting(PaintingDimensions(width, height))
        converted = (
            convert_length(width, painting_units, source.units),
            convert_length(height, painting_units, source.units),
        )
        logger.debug("Painting %gx%g %s -> %.4fx%.4f %s",
                     width, height, painting_units, converted[0], converted[1], source.units)
        width, height = converted

    with log_timing(logger, "Frame preview", width=width, height=height):
        return compute_frame_geometry(PaintingDimensions(width, height), contour, options)
