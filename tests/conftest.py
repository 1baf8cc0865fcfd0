"""
Pytest configuration and fixtures for the moulding preview tests.

Provides:
- Profile store fixtures (temporary directory, sample records)
- DXF fixtures: ezdxf-written drawings and hand-written DXF text
- Assertion helpers
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import ezdxf
import pytest

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() between tests so caplog sees package records."""
    yield
    logger = logging.getLogger("moulding_preview")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ============================================================================
# Profile Fixtures
# ============================================================================

def stepped_profile_data(profile_id: str = "step-profile", name: str = "Step Profile") -> dict:
    """Rabbet step: 0.5 face, 0.25 riser, 0.75 face, then a quarter-round back down."""
    return {
        "id": profile_id,
        "name": name,
        "units": "in",
        "dimensions": {"width": 1.75, "height": 0.75},
        "start": {"x": 0, "y": 0},
        "contour": [
            {"type": "line", "to": {"x": 0.5, "y": 0}},
            {"type": "line", "to": {"x": 0.5, "y": 0.25}},
            {"type": "line", "to": {"x": 1.25, "y": 0.25}},
            {"type": "arc", "to": {"x": 1.75, "y": 0.75}, "radius": 0.5,
             "clockwise": False, "largeArc": False,
             "metadata": {"center": {"x": 1.25, "y": 0.75}}},
        ],
    }


@pytest.fixture
def profiles_dir(tmp_path: Path) -> Path:
    """Empty profile store directory."""
    path = tmp_path / "profiles"
    path.mkdir()
    return path


@pytest.fixture
def profile_data() -> dict:
    return stepped_profile_data()


@pytest.fixture
def stored_profile_path(profiles_dir: Path, profile_data: dict) -> Path:
    """Write the stepped profile into the store and return its path."""
    path = profiles_dir / f"{profile_data['id']}.json"
    path.write_text(json.dumps(profile_data, indent=2), encoding="utf-8")
    return path


# ============================================================================
# DXF Fixtures
# ============================================================================

def make_dxf_text(entities: Iterable[str], insunits: Optional[int] = None, eof: bool = True) -> str:
    """Assemble a minimal DXF from group-code/value lines.

    Args:
        entities: already formatted ``code\\nvalue`` blocks for the ENTITIES section.
        insunits: optional $INSUNITS header value.
        eof: append the EOF marker.
    """
    parts: List[str] = []
    if insunits is not None:
        parts += ["0", "SECTION", "2", "HEADER", "9", "$INSUNITS", "70", str(insunits), "0", "ENDSEC"]
    parts += ["0", "SECTION", "2", "ENTITIES"]
    for block in entities:
        parts += block.strip("\n").split("\n")
    parts += ["0", "ENDSEC"]
    if eof:
        parts += ["0", "EOF"]
    return "\n".join(parts) + "\n"


def dxf_line(x1: float, y1: float, x2: float, y2: float) -> str:
    return f"0\nLINE\n8\n0\n10\n{x1}\n20\n{y1}\n11\n{x2}\n21\n{y2}"


def dxf_arc(cx: float, cy: float, r: float, start: float, end: float) -> str:
    return f"0\nARC\n8\n0\n10\n{cx}\n20\n{cy}\n40\n{r}\n50\n{start}\n51\n{end}"


def dxf_lwpolyline(vertices, closed: bool = False) -> str:
    """vertices: (x, y) or (x, y, bulge) tuples."""
    lines = ["0", "LWPOLYLINE", "8", "0", "90", str(len(vertices)), "70", "1" if closed else "0"]
    for v in vertices:
        lines += ["10", str(v[0]), "20", str(v[1])]
        if len(v) > 2 and v[2]:
            lines += ["42", str(v[2])]
    return "\n".join(lines)


@pytest.fixture
def ezdxf_profile_path(tmp_path: Path) -> Path:
    """Real R2010 drawing in millimetres: stepped profile with a bulged corner.

    Vertices (mm): (0,0) → (25.4,0) → (25.4,12.7) → (50.8,12.7) ⌒ (63.5,25.4)
    The last segment is a quarter circle (bulge tan(22.5°), counter-clockwise).
    """
    doc = ezdxf.new("R2010", units=4)
    msp = doc.modelspace()
    quarter = 0.41421356237309503
    msp.add_lwpolyline(
        [(0, 0, 0), (25.4, 0, 0), (25.4, 12.7, 0), (50.8, 12.7, quarter), (63.5, 25.4, 0)],
        format="xyb",
    )
    path = tmp_path / "step_profile.dxf"
    doc.saveas(path)
    return path


@pytest.fixture
def ezdxf_lines_path(tmp_path: Path) -> Path:
    """Drawing of loose LINE entities in inches, deliberately out of order."""
    doc = ezdxf.new("R2010", units=1)
    msp = doc.modelspace()
    msp.add_line((1, 0.5), (2, 0.5))
    msp.add_line((0, 0), (1, 0))
    msp.add_line((1, 0.5), (1, 0))
    path = tmp_path / "loose_lines.dxf"
    doc.saveas(path)
    return path


# ============================================================================
# Assertion Helpers
# ============================================================================

def assert_point_approx(actual, expected, tol: float = 1e-9) -> None:
    assert abs(actual[0] - expected[0]) <= tol and abs(actual[1] - expected[1]) <= tol, \
        f"expected {expected}, got {tuple(actual)}"
