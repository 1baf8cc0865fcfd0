"""
moulding_preview - picture-frame moulding previews from profile contours.

DXF drawings are converted into profile records; profile contours plus
painting dimensions are turned into nested face-offset rings and an SVG
front view. The command line entry point is main.py.
"""

from moulding_preview.logging_config import (
    configure_default_logging,
    get_logger,
    log_timing,
    setup_logging,
)

__version__ = "0.1.0"

__all__ = [
    "configure_default_logging",
    "get_logger",
    "log_timing",
    "setup_logging",
]
