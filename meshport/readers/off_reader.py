# -*- coding: utf-8 -*-
# Meshport/meshport/readers/off_reader.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Parse Object File Format (OFF) indexed polyhedra.

Main Tasks:
-----------
   1) Header token must be exactly `OFF` (COFF/NOFF/4OFF and anything else are rejected
      before any vertex is read).
   2) Counts line `nV nF nE` (may share the header line).
   3) nV vertex lines of three floats, then nF face lines `n i0 ... i(n-1)` with 0-based
      indices; trailing tokens (per-face colors) are ignored.

Notes:
------
- Every short read is READ_FAILED with the stage in the message:
  header, counts, vertex, face-count, face-index.
- `#` starts a comment anywhere on a line.
"""

import logging

from ..core.errors import ErrorKind, MeshError, guarded
from ..core.types import MeshData, face_kind
from ..formats.tags import FormatTag
from ._helpers import require_file, floats, to_int, finalize, empty_error

logger = logging.getLogger(__name__)

MAGIC = "OFF"


def _content_lines(handle):
    """Yield (line number, tokens) for lines that still carry tokens once comments are cut."""
    for lineno, raw in enumerate(handle, 1):
        tokens = raw.split("#", 1)[0].split()
        if tokens:
            yield lineno, tokens


def _stage_error(stage: str, detail: str, lineno=None) -> MeshError:
    return MeshError(ErrorKind.READ_FAILED, "OFF {} read failed: {}".format(stage, detail),
                     {"stage": stage, "line": lineno})


def load_off(path: str) -> MeshData:
    mesh = MeshData()
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        lines = _content_lines(f)

        item = next(lines, None)
        if item is None:
            raise _stage_error("header", "file is empty")
        lineno, tokens = item
        if tokens[0] != MAGIC:
            raise MeshError(ErrorKind.FORMAT_UNSUPPORTED,
                            "Invalid OFF header token '{}' (expected '{}')".format(tokens[0], MAGIC))

        counts = tokens[1:]
        if not counts:
            item = next(lines, None)
            if item is None:
                raise _stage_error("counts", "missing vertex/face/edge counts")
            lineno, counts = item
        if len(counts) < 2:
            raise _stage_error("counts", "expected 'nV nF nE', got '{}'".format(" ".join(counts)), lineno)
        n_vertices = to_int(counts[0], "counts", lineno)
        n_faces = to_int(counts[1], "counts", lineno)
        if n_vertices < 0 or n_faces < 0:
            raise _stage_error("counts", "negative count", lineno)
        if n_vertices == 0:
            raise empty_error(FormatTag.OFF, "vertices")

        coords = []
        for i in range(n_vertices):
            item = next(lines, None)
            if item is None:
                raise _stage_error("vertex", "expected {} vertices, got {}".format(n_vertices, i))
            lineno, tokens = item
            if len(tokens) < 3:
                raise _stage_error("vertex", "vertex {} has fewer than 3 coordinates".format(i), lineno)
            coords.extend(floats(tokens[:3], "vertex", lineno))

        dropped = 0
        for i in range(n_faces):
            item = next(lines, None)
            if item is None:
                raise _stage_error("face-count", "expected {} faces, got {}".format(n_faces, i))
            lineno, tokens = item
            n = to_int(tokens[0], "face-count", lineno)
            if n < 0:
                raise _stage_error("face-count", "negative vertex count on face {}".format(i), lineno)
            if len(tokens) < n + 1:
                raise _stage_error("face-index", "face {} lists {} of {} indices".format(
                    i, len(tokens) - 1, n), lineno)
            refs = [to_int(t, "face-index", lineno) for t in tokens[1:n + 1]]
            for r in refs:
                if r < 0 or r >= n_vertices:
                    raise _stage_error("face-index", "index {} out of range on face {}".format(r, i), lineno)
            kind = face_kind(n)
            if kind is None:
                dropped += 1
                continue
            mesh.add_cell(kind, refs)

    if dropped:
        logger.debug("[load_off] dropped %d face(s) with fewer than 3 vertices", dropped)
    mesh.set_points(coords)
    return finalize(mesh, path, FormatTag.OFF)


@guarded(ErrorKind.READ_FAILED)
def read_off(path: str):
    """Read an OFF file; returns an Outcome carrying the MeshData."""
    require_file(path)
    return load_off(path)
