"""
Command line entry point.

    python -m valvemap level.map [--obj level.obj] [--json] [-v]

Loads a Valve 220 .map file, builds every brush and prints a summary with
the validation report.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from valvemap.conversion.obj_writer import ObjWriter
from valvemap.errors import MapError, MapSyntaxError
from valvemap.logging_config import setup_logging
from valvemap.pipeline.map_loader import load_map_file
from valvemap.settings import load_settings

logger = logging.getLogger("valvemap")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="valvemap",
                                 description="Parse a Valve 220 .map file and build brush meshes.")
    ap.add_argument("map", type=Path, help="Path to the .map file")
    ap.add_argument("--settings", type=Path, default=None,
                    help="Settings JSON (default: ~/.config/valvemap/settings.json)")
    ap.add_argument("--epsilon", type=float, default=None, help="Geometry tolerance in map units")
    ap.add_argument("--scale", type=float, default=None, help="Uniform output scale")
    ap.add_argument("--y-up", action="store_true", help="Swizzle output to a Y-up frame")
    ap.add_argument("--workers", type=int, default=None, help="Brushes built in parallel")
    ap.add_argument("--strict", action="store_true", help="Fail on any validation warning")
    ap.add_argument("--obj", type=Path, default=None, help="Write an OBJ (+MTL) export")
    ap.add_argument("--json", action="store_true", help="Print the summary as JSON")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("--log-file", default=None, help="Also write logs to this file")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    settings = load_settings(args.settings)
    overrides = {}
    if args.epsilon is not None:
        overrides["epsilon"] = args.epsilon
    if args.scale is not None:
        overrides["scale"] = args.scale
    if args.y_up:
        overrides["y_up"] = True
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.strict:
        overrides["strict"] = True
    if overrides:
        settings = settings.replace(**overrides)

    try:
        asset = load_map_file(args.map, settings=settings)
    except MapSyntaxError as e:
        print(f"{args.map}:{e.line}:{e.column}: syntax error in {e.rule}: {e.reason}", file=sys.stderr)
        return 1
    except MapError as e:
        print(f"{args.map}: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"{args.map}: {e}", file=sys.stderr)
        return 1

    if args.obj is not None:
        writer = ObjWriter()
        writer.add_asset(asset)
        writer.write(args.obj)

    summary = asset.summary()
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(f"{args.map}: {summary['entities']} entities, {summary['brushes']} brushes, "
              f"{summary['faces']} faces, {summary['triangles']} triangles")
        print(f"textures: {', '.join(summary['textures']) or '-'}")
        print(asset.validation.report())
    return 0


if __name__ == "__main__":
    sys.exit(main())
