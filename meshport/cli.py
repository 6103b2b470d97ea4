# -*- coding: utf-8 -*-
# Meshport/meshport/cli.py

"""
Project: Meshport
Date: 10/19/2026

Purpose
-------
Command line front end over the conversion API.

Usage
-----
    meshport [options] INPUT OUTPUT              single conversion
    meshport [options] --batch DIR -t FMT INPUT...  batch conversion into DIR
    meshport --info INPUT...                     print metadata summaries
    meshport -l                                  list supported formats

Exit codes: 0 success, 1 conversion failure, 2 usage or option error.

Notes
-----
- Option precedence: command-line flags > --config JSON file > built-in defaults.
- Point cleaning is on unless --no-cleaning is given.
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .api import convert_batch, convert_one, inspect_file
from .config import build_options, load_config
from .core.errors import MeshError
from .formats.tags import FormatTag, parse_format_name, supported_format_names
from .stats.export import write_summary_csv, write_summary_json
from .stats.report import summarize

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meshport",
        description="Convert 3-D mesh files between STL, OBJ, PLY, OFF, VTK, Gmsh, SU2 and CGNS.")
    parser.add_argument("paths", nargs="*", metavar="PATH",
                        help="INPUT OUTPUT for a single conversion, or INPUT... with --batch/--info")
    parser.add_argument("-s", "--source-format", default="auto",
                        help="source format name (default: auto-detect)")
    parser.add_argument("-t", "--target-format", default=None,
                        help="target format name (default: from the output extension)")
    parser.add_argument("-l", "--list-formats", action="store_true", help="list supported formats and exit")
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument("-V", "--verbose", action="store_true", help="debug logging")

    proc = parser.add_argument_group("processing")
    proc.add_argument("--no-cleaning", dest="enable_cleaning", action="store_false", default=None,
                      help="keep duplicate points and degenerate cells")
    proc.add_argument("--triangulate", dest="enable_triangulation", action="store_true", default=None)
    proc.add_argument("--decimate", type=float, metavar="F", default=None,
                      help="remove fraction F of the triangles (needs pyvista)")
    proc.add_argument("--smooth", type=int, metavar="N", default=None, help="Laplacian smoothing iterations")
    proc.add_argument("--relaxation", type=float, metavar="R", default=None,
                      help="smoothing relaxation factor in [0, 1]")
    proc.add_argument("--compute-normals", dest="enable_normals", action="store_true", default=None)

    out = parser.add_argument_group("output")
    out.add_argument("--ascii", action="store_true", help="ASCII output where the format has both encodings")
    out.add_argument("--precision", type=int, default=None, help="significant digits for ASCII output")
    out.add_argument("--compress", action="store_true", default=None, help="compress VTU/CGNS output")
    out.add_argument("--surface-only", action="store_true", default=None,
                     help="write the boundary surface of volumetric meshes")
    out.add_argument("--solid-name", default=None, help="STL ASCII solid name")

    run = parser.add_argument_group("run")
    run.add_argument("--batch", metavar="DIR", default=None, help="convert every INPUT into DIR")
    run.add_argument("--workers", type=int, default=None, help="threads per batch wave")
    run.add_argument("--config", metavar="JSON", default=None, help="JSON file with option overrides")
    run.add_argument("--info", action="store_true", help="print a summary of each INPUT")
    run.add_argument("--report", metavar="FILE", default=None,
                     help="with --info: write summaries to FILE (.json or .csv)")
    return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the explicitly given flags into a config-shaped override dict."""
    processing: Dict[str, Any] = {}
    write: Dict[str, Any] = {}
    for key in ("enable_cleaning", "enable_triangulation", "enable_normals"):
        if getattr(args, key) is not None:
            processing[key] = getattr(args, key)
    if args.decimate is not None:
        processing.update(enable_decimation=True, decimation_target=args.decimate)
    if args.smooth is not None:
        processing.update(enable_smoothing=True, smoothing_iterations=args.smooth)
    if args.relaxation is not None:
        processing["smoothing_relaxation"] = args.relaxation
    if args.ascii:
        write["binary"] = False
    if args.precision is not None:
        write["precision"] = args.precision
    if args.compress is not None:
        write["compress"] = args.compress
    if args.surface_only is not None:
        write["surface_only"] = args.surface_only
    if args.solid_name is not None:
        write["solid_name"] = args.solid_name
    return {"processing": processing, "write": write}


def _print_formats() -> None:
    print("Supported formats:")
    for name in supported_format_names():
        print("  " + name)
    print("Format names for -s/-t: stl, stl-ascii, stl-binary, obj, ply, ply-ascii, ply-binary,")
    print("  off, vtk, vtu, cgns, msh, msh2, msh4, su2, openfoam, auto")


def _run_info(paths: List[str], report: Optional[str], src_format: str) -> int:
    summaries = {}
    status = EXIT_OK
    for path in paths:
        outcome = inspect_file(path, src_format)
        if outcome.ok:
            print(outcome.message)
            summaries[path] = summarize(outcome.mesh)
        else:
            print("{}: {} ({})".format(path, outcome.message, outcome.kind.name), file=sys.stderr)
            status = EXIT_FAILED
    if report and summaries:
        if report.lower().endswith(".csv"):
            write_summary_csv(summaries, report)
        else:
            write_summary_json(summaries, report)
        logger.info("[cli] summaries written to %s", report)
    return status


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s:%(name)s:%(message)s")

    if args.list_formats:
        _print_formats()
        return EXIT_OK

    for flag, value in (("-s", args.source_format), ("-t", args.target_format)):
        if value is not None and parse_format_name(value) == FormatTag.UNKNOWN:
            parser.error("unknown format name for {}: {}".format(flag, value))

    try:
        config = load_config(args.config) if args.config else {}
        overrides = dict(config)
        for section, values in _overrides(args).items():
            if values:
                overrides[section] = dict(config.get(section) or {}, **values)
        processing, write = build_options(overrides)
    except MeshError as e:
        print("error: {}".format(e), file=sys.stderr)
        return EXIT_USAGE

    if args.info:
        if not args.paths:
            parser.error("--info needs at least one INPUT")
        return _run_info(args.paths, args.report, args.source_format)

    if args.batch:
        if not args.paths:
            parser.error("--batch needs at least one INPUT")
        if not args.target_format:
            parser.error("--batch needs -t/--target-format")
        count, errors = convert_batch(args.paths, args.batch, args.target_format, write,
                                      processing, max_workers=args.workers)
        for src in sorted(errors):
            kind, message = errors[src]
            print("{}: {} ({})".format(src, message, kind.name), file=sys.stderr)
        print("{} of {} file(s) converted into {}".format(count, len(args.paths), os.path.abspath(args.batch)))
        return EXIT_OK if not errors else EXIT_FAILED

    if len(args.paths) != 2:
        parser.error("expected INPUT and OUTPUT (use --batch DIR for several inputs)")
    src, dst = args.paths
    outcome = convert_one(src, dst, args.source_format, args.target_format, write, processing)
    if not outcome.ok:
        print("error: {} ({})".format(outcome.message, outcome.kind.name), file=sys.stderr)
        return EXIT_FAILED
    print(outcome.message)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
