# -*- coding: utf-8 -*-
# Meshport/meshport/readers/stl_reader.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Native STL parser for both encodings. Each facet becomes one triangle cell with three
freshly appended points; vertices are not welded here (cleaning does that later).

Main Tasks:
-----------
   1) Binary: 80-byte header (ignored) → uint32 LE count → count × 50-byte records.
      The count is validated (zero, ceiling, file size) before any allocation.
   2) ASCII: keyword state machine over trimmed, non-blank lines
      (solid / facet normal / outer loop / vertex ×3 / endloop / endfacet / endsolid).
   3) Pick the encoding from the detected tag (binary when undetermined).

Notes:
------
- Facet normals and the 16-bit attribute field are read but not stored.
- Anything after `endsolid` is ignored.
"""

import logging
import os
import struct
from typing import Optional

import numpy as np

from ..core.errors import ErrorKind, MeshError, guarded
from ..core.types import Cell, CellKind, MeshData
from ..formats.detect import detect
from ..formats.tags import FormatTag
from ._helpers import require_file, nonblank_lines, floats, finalize, empty_error

logger = logging.getLogger(__name__)

HEADER_BYTES = 80
COUNT_BYTES = 4
RECORD_BYTES = 50
# Refuse corrupted counts before allocating (50M triangles ≈ 2.5 GB of records).
MAX_TRIANGLES = 50_000_000

RECORD_DTYPE = np.dtype([
    ("normal", "<f4", (3,)),
    ("vertices", "<f4", (3, 3)),
    ("attribute", "<u2"),
])


def _triangles(mesh: MeshData, n_triangles: int) -> None:
    mesh.cells = [Cell(CellKind.TRIANGLE, (3 * i, 3 * i + 1, 3 * i + 2)) for i in range(n_triangles)]


# ---------------------------------------------------------------------------
# Binary
# ---------------------------------------------------------------------------
def load_binary_stl(path: str) -> MeshData:
    """
    Parse a binary STL file (raises MeshError).

    Raises
    ------
    MeshError
        READ_FAILED for a short header, an oversized count or a truncated record block;
        MESH_EMPTY when the header declares zero triangles.
    """
    size = os.path.getsize(path)
    with open(path, "rb") as f:
        head = f.read(HEADER_BYTES + COUNT_BYTES)
        if len(head) < HEADER_BYTES + COUNT_BYTES:
            raise MeshError(ErrorKind.READ_FAILED,
                            "Binary STL header is truncated ({} of 84 bytes)".format(len(head)),
                            {"stage": "header"})
        (count,) = struct.unpack_from("<I", head, HEADER_BYTES)
        if count == 0:
            raise empty_error(FormatTag.STL_BINARY, "triangles")
        if count > MAX_TRIANGLES:
            raise MeshError(ErrorKind.READ_FAILED,
                            "Binary STL declares {} triangles, above the limit of {}".format(
                                count, MAX_TRIANGLES),
                            {"stage": "count"})
        expected = HEADER_BYTES + COUNT_BYTES + RECORD_BYTES * count
        if expected > size:
            raise MeshError(ErrorKind.READ_FAILED,
                            "Binary STL is truncated: {} triangles need {} bytes, file has {}".format(
                                count, expected, size),
                            {"stage": "records"})
        payload = f.read(RECORD_BYTES * count)

    if len(payload) != RECORD_BYTES * count:
        raise MeshError(ErrorKind.READ_FAILED, "Binary STL record block ended early",
                        {"stage": "records", "bytes": len(payload)})

    records = np.frombuffer(payload, dtype=RECORD_DTYPE, count=count)
    mesh = MeshData()
    mesh.set_points(records["vertices"])
    _triangles(mesh, count)
    if size > expected:
        logger.debug("[load_binary_stl] %d trailing bytes ignored in %s", size - expected, path)
    return finalize(mesh, path, FormatTag.STL_BINARY)


# ---------------------------------------------------------------------------
# ASCII
# ---------------------------------------------------------------------------
def _next_line(lines, expected: str):
    item = next(lines, None)
    if item is None:
        raise MeshError(ErrorKind.READ_FAILED,
                        "Unexpected end of file: expected '{}'".format(expected),
                        {"stage": expected})
    return item


def _expect(lines, keywords) -> None:
    expected = " ".join(keywords)
    lineno, line = _next_line(lines, expected)
    tokens = line.lower().split()
    if tokens[:len(keywords)] != list(keywords):
        raise MeshError(ErrorKind.READ_FAILED,
                        "Expected '{}', got '{}'".format(expected, line),
                        {"stage": expected, "line": lineno})


def load_ascii_stl(path: str) -> MeshData:
    """Parse an ASCII STL file (raises MeshError)."""
    coords = []
    n_facets = 0
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        lines = nonblank_lines(f)
        first = next(lines, None)
        if first is None or first[1].split()[0].lower() != "solid":
            raise MeshError(ErrorKind.FORMAT_UNSUPPORTED,
                            "ASCII STL must start with 'solid': {}".format(path))

        while True:
            lineno, line = _next_line(lines, "facet normal' or 'endsolid")
            tokens = line.split()
            head = tokens[0].lower()
            if head == "endsolid":
                break
            if head != "facet" or len(tokens) < 2 or tokens[1].lower() != "normal":
                raise MeshError(ErrorKind.READ_FAILED,
                                "Expected 'facet normal', got '{}'".format(line),
                                {"stage": "facet", "line": lineno})
            _expect(lines, ("outer", "loop"))
            for _ in range(3):
                lineno, line = _next_line(lines, "vertex")
                tokens = line.split()
                if tokens[0].lower() != "vertex" or len(tokens) != 4:
                    raise MeshError(ErrorKind.READ_FAILED,
                                    "Expected 'vertex x y z', got '{}'".format(line),
                                    {"stage": "vertex", "line": lineno})
                coords.extend(floats(tokens[1:], "vertex", lineno))
            _expect(lines, ("endloop",))
            _expect(lines, ("endfacet",))
            n_facets += 1

    if n_facets == 0:
        raise empty_error(FormatTag.STL_ASCII, "facets")

    mesh = MeshData()
    mesh.set_points(coords)
    _triangles(mesh, n_facets)
    return finalize(mesh, path, FormatTag.STL_ASCII)


# ---------------------------------------------------------------------------
# Public entry
# ---------------------------------------------------------------------------
@guarded(ErrorKind.READ_FAILED)
def read_stl(path: str, tag: Optional[FormatTag] = None):
    """
    Read an STL file in either encoding.

    Parameters
    ----------
    path : str
        Source file.
    tag : FormatTag, optional
        STL_ASCII or STL_BINARY to skip detection.

    Returns
    -------
    Outcome
        `.mesh` holds the parsed MeshData on success.
    """
    require_file(path)
    if tag not in (FormatTag.STL_ASCII, FormatTag.STL_BINARY):
        tag = detect(path)
    if tag == FormatTag.STL_ASCII:
        return load_ascii_stl(path)
    return load_binary_stl(path)
