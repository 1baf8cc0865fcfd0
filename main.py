"""
Command line entry point: DXF profile conversion and frame previews.

Usage:
    python main.py convert <drawing.dxf> [--name NAME] [--id ID] [--rotate {none,cw90,ccw90,180}]
    python main.py render <profile_id> --width W --height H [--units mm] [--output frame.svg] [--section section.svg]
    python main.py list
    python main.py batch <folder> [--parallel]
    python main.py export-dxf <profile_id> <output.dxf>
    python main.py init-config [path]

Examples:
    python main.py convert "ogee.dxf" --rotate cw90
    python main.py render ogee --width 18.11 --height 24.02 --output preview.svg
    python main.py render ogee --width 460 --height 610 --units mm --output preview.svg
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from moulding_preview.batch import batch_convert
from moulding_preview.drawing.dxf_export import export_profile_dxf
from moulding_preview.drawing.frame_geometry import InvalidPaintingError
from moulding_preview.drawing.svg_renderer import render_contour_preview, save_svg
from moulding_preview.geometry.primitives import Rotation
from moulding_preview.io.converter import ConversionError, convert_dxf_file
from moulding_preview.io.dxf_reader import DxfReadError
from moulding_preview.io.units import PROFILE_UNITS
from moulding_preview.logging_config import setup_logging
from moulding_preview.preview import preview_frame
from moulding_preview.profiles.contour import contour_outline, profile_max_depth
from moulding_preview.profiles.store import ProfileNotFoundError, get_profile, list_profiles
from moulding_preview.profiles.validator import ProfileValidationError
from moulding_preview.project_config import ProjectConfig, create_sample_config, load_config

logger = logging.getLogger("moulding_preview.cli")


def _store_dir(args: argparse.Namespace, config: ProjectConfig) -> Path:
    return Path(args.profiles_dir or config.store.profiles_dir)


def cmd_convert(args: argparse.Namespace, config: ProjectConfig) -> int:
    result = convert_dxf_file(
        args.drawing,
        _store_dir(args, config),
        name=args.name,
        profile_id=args.id,
        rotation=args.rotate or config.conversion.rotation,
        tolerance=config.conversion.tolerance,
    )
    print(json.dumps({"profile": result.profile.to_dict(), "path": str(result.path)}, indent=2))
    return 0


def cmd_render(args: argparse.Namespace, config: ProjectConfig) -> int:
    store = _store_dir(args, config)
    profile = get_profile(args.profile_id, store)
    frame = preview_frame(args.width, args.height, profile,
                          options=config.render.to_options(), painting_units=args.units)

    if args.output:
        save_svg(frame.svg, args.output)
    if args.section:
        svg, _ = render_contour_preview(
            contour_outline(profile),
            profile_max_depth(profile),
            label=f"Contour preview for {profile.name}",
        )
        save_svg(svg, args.section)

    print(f"{'Offset':>10}  {'Width':>10}  {'Height':>10}")
    for rect in frame.rectangles:
        print(f"{rect.offset:>10.4f}  {rect.width:>10.4f}  {rect.height:>10.4f}")
    for i, band in enumerate(frame.bands, 1):
        print(f"Ring {i}: {band.from_offset:.2f} -> {band.to_offset:.2f} ({band.reason.replace('-', ' ')})")
    if not args.output:
        print(frame.svg)
    return 0


def cmd_list(args: argparse.Namespace, config: ProjectConfig) -> int:
    for profile in list_profiles(_store_dir(args, config)):
        print(f"{profile.id:<32} {profile.name} ({profile.units}, {len(profile.contour)} commands)")
    return 0


def cmd_batch(args: argparse.Namespace, config: ProjectConfig) -> int:
    result = batch_convert(
        args.folder,
        profiles_dir=_store_dir(args, config),
        recursive=args.recursive,
        config=config,
        parallel=args.parallel,
    )
    print(result.summary())
    return 0 if result.failed == 0 else 1


def cmd_export_dxf(args: argparse.Namespace, config: ProjectConfig) -> int:
    profile = get_profile(args.profile_id, _store_dir(args, config))
    export_profile_dxf(profile, args.output)
    return 0


def cmd_init_config(args: argparse.Namespace, config: ProjectConfig) -> int:
    path = create_sample_config(args.path)
    print(f"Sample configuration written to {path}")
    return 0


def _parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Picture-frame moulding previews from DXF profiles.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", help="Path to a .moulding.json configuration file")
    parser.add_argument("--profiles-dir", help="Profile store directory (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-json", help="Also write JSON-lines logs to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("convert", help="Convert a DXF drawing into a profile record")
    p.add_argument("drawing", help="DXF file")
    p.add_argument("--name", help="Display name (default: file name)")
    p.add_argument("--id", help="Profile id (default: slug of the name)")
    p.add_argument("--rotate", choices=[r.value for r in Rotation], help="Rotation after unit scaling")
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser("render", help="Render the front view of a framed painting")
    p.add_argument("profile_id")
    p.add_argument("--width", type=float, required=True, help="Painting width (profile units unless --units)")
    p.add_argument("--height", type=float, required=True, help="Painting height (profile units unless --units)")
    p.add_argument("--units", choices=PROFILE_UNITS,
                   help="Units of --width/--height (default: the profile's units)")
    p.add_argument("--output", help="SVG output path (default: print markup)")
    p.add_argument("--section", help="Also write the contour section view here")
    p.set_defaults(func=cmd_render)

    p = sub.add_parser("list", help="List stored profiles")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("batch", help="Convert every DXF in a folder")
    p.add_argument("folder")
    p.add_argument("--recursive", action="store_true")
    p.add_argument("--parallel", action="store_true")
    p.set_defaults(func=cmd_batch)

    p = sub.add_parser("export-dxf", help="Write a stored profile as DXF")
    p.add_argument("profile_id")
    p.add_argument("output")
    p.set_defaults(func=cmd_export_dxf)

    p = sub.add_parser("init-config", help="Write a sample .moulding.json")
    p.add_argument("path", nargs="?", default=".moulding.json")
    p.set_defaults(func=cmd_init_config)

    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    args = _parse_args(argv)
    config = load_config(
        input_path=getattr(args, "drawing", None),
        explicit_config=args.config,
    )
    level = logging.DEBUG if args.verbose else config.logging.level_value
    setup_logging(level=level, json_file=args.log_json or config.logging.json_file)

    try:
        return args.func(args, config)
    except (DxfReadError, ConversionError) as exc:
        logger.critical("Conversion failed: %s", exc)
        return 1
    except (ProfileNotFoundError, ProfileValidationError) as exc:
        logger.critical("Profile error: %s", exc)
        return 1
    except InvalidPaintingError as exc:
        logger.critical("Invalid painting: %s", exc)
        return 1
    except Exception as exc:
        logger.critical("Unexpected error: %s", exc, exc_info=True)
        return 2


if __name__ == "__main__":
    sys.exit(main())
