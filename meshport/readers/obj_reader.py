# -*- coding: utf-8 -*-
# Meshport/meshport/readers/obj_reader.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Parse Wavefront OBJ polygon soups (geometry and connectivity only).

Main Tasks:
-----------
   1) `v x y z [w]` lines accumulate into the flat point buffer.
   2) `f i j k ...` lines become triangle/quad/polygon cells (1-based on disk,
      negative indices are relative to the vertices read so far, `i/t/n` suffixes ignored).
   3) `l i j ...` polylines become consecutive 2-point line cells; `p i ...` vertex cells.
   4) Everything else (vt, vn, g, o, s, usemtl, mtllib, comments) is skipped.

Notes:
------
- Faces with fewer than 3 indices are dropped (logged at DEBUG), not an error.
- A file without a single `v` line is MESH_EMPTY; a point cloud without faces is valid.
"""

import logging

from ..core.errors import ErrorKind, MeshError, guarded
from ..core.types import CellKind, MeshData, face_kind
from ..formats.tags import FormatTag
from ._helpers import require_file, nonblank_lines, floats, finalize, empty_error

logger = logging.getLogger(__name__)


def _resolve(token: str, n_vertices: int, lineno: int) -> int:
    """Convert one OBJ vertex reference (`7`, `7/2/5`, `-1//3`) to a 0-based index."""
    head = token.split("/", 1)[0]
    try:
        ref = int(head)
    except ValueError:
        raise MeshError(ErrorKind.READ_FAILED, "Invalid OBJ vertex reference '{}'".format(token),
                        {"stage": "face-index", "line": lineno})
    if ref > 0:
        return ref - 1
    if ref < 0 and n_vertices + ref >= 0:
        return n_vertices + ref
    raise MeshError(ErrorKind.READ_FAILED, "OBJ vertex reference {} is out of range".format(ref),
                    {"stage": "face-index", "line": lineno})


def load_obj(path: str) -> MeshData:
    coords = []
    mesh = MeshData()
    dropped = 0

    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for lineno, line in nonblank_lines(f):
            if line.startswith("#"):
                continue
            tokens = line.split()
            key = tokens[0]
            n_vertices = len(coords) // 3

            if key == "v":
                if len(tokens) < 4:
                    raise MeshError(ErrorKind.READ_FAILED, "Vertex line needs 3 coordinates",
                                    {"stage": "vertex", "line": lineno})
                coords.extend(floats(tokens[1:4], "vertex", lineno))
            elif key == "f":
                refs = [_resolve(t, n_vertices, lineno) for t in tokens[1:]]
                kind = face_kind(len(refs))
                if kind is None:
                    dropped += 1
                    continue
                mesh.add_cell(kind, refs)
            elif key == "l":
                refs = [_resolve(t, n_vertices, lineno) for t in tokens[1:]]
                for a, b in zip(refs[:-1], refs[1:]):
                    mesh.add_cell(CellKind.LINE, (a, b))
            elif key == "p":
                for t in tokens[1:]:
                    mesh.add_cell(CellKind.VERTEX, (_resolve(t, n_vertices, lineno),))

    if not coords:
        raise empty_error(FormatTag.OBJ, "vertices")
    if dropped:
        logger.debug("[load_obj] dropped %d face(s) with fewer than 3 vertices in %s", dropped, path)

    mesh.set_points(coords)
    return finalize(mesh, path, FormatTag.OBJ)


@guarded(ErrorKind.READ_FAILED)
def read_obj(path: str):
    """Read a Wavefront OBJ file; returns an Outcome carrying the MeshData."""
    require_file(path)
    return load_obj(path)
