# -*- coding: utf-8 -*-
# Meshport/meshport/stats/report.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Turn a MeshData (and its derived metadata) into a plain nested dict suitable for
printing or exporting, plus a one-line human summary.

Main Tasks:
-----------
    1. Counts, cell-kind histogram (by name), mesh classification.
    2. Attribute names with their component counts.
    3. Provenance (source format, version, file name) and the bounding box.
"""

from typing import Any, Dict

from ..checks.validate import compute_bounds
from ..core.types import MeshData, MeshMetadata
from ..formats.tags import format_name


def _components(data: Dict[str, Any], n: int) -> Dict[str, int]:
    return {name: (int(arr.size // n) if n and arr.size % n == 0 else 0) for name, arr in data.items()}


def summarize(mesh: MeshData) -> Dict[str, Any]:
    """Nested summary dict; metadata is derived afresh and the stored copy is not consulted."""
    meta = MeshMetadata.from_mesh(mesh)
    bounds = compute_bounds(mesh)
    return {
        "file": {
            "name": meta.file_name,
            "format": format_name(meta.source_format),
            "version": meta.format_version,
        },
        "counts": {
            "points": meta.point_count,
            "cells": meta.cell_count,
        },
        "cell_types": {kind.name.lower(): n for kind, n in sorted(meta.cell_type_count.items())},
        "mesh_type": meta.mesh_type.name.lower(),
        "point_data": _components(mesh.point_data, meta.point_count),
        "cell_data": _components(mesh.cell_data, meta.cell_count),
        "bounds": list(bounds) if bounds is not None else None,
    }


def summary_line(mesh: MeshData) -> str:
    """e.g. 'part.stl [STL Binary]: 36 points, 12 cells (triangle=12), surface_mesh'."""
    s = summarize(mesh)
    kinds = ", ".join("{}={}".format(k, v) for k, v in s["cell_types"].items()) or "none"
    return "{} [{}]: {} points, {} cells ({}), {}".format(
        s["file"]["name"] or "<memory>", s["file"]["format"],
        s["counts"]["points"], s["counts"]["cells"], kinds, s["mesh_type"])
