# -*- coding: utf-8 -*-
# Meshport/meshport/readers/_helpers.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Shared helpers for the format readers so every parser checks its input, converts
tokens and finalizes its MeshData the same way.

Main Tasks:
-----------
   1) Existence check raising FILE_NOT_EXIST.
   2) Token conversion that raises READ_FAILED naming the parse stage and line.
   3) Finalization: provenance fields, index bounds check, metadata recompute.
"""

import os
from typing import Iterator, Optional, Sequence, Tuple

from ..core.errors import ErrorKind, MeshError
from ..core.types import MeshData
from ..formats.tags import FormatTag, format_name


def require_file(path: str) -> None:
    """Raise FILE_NOT_EXIST unless `path` is an existing regular file."""
    if not os.path.isfile(path):
        raise MeshError(ErrorKind.FILE_NOT_EXIST, "Source file does not exist: {}".format(path))


def nonblank_lines(handle) -> Iterator[Tuple[int, str]]:
    """Yield (1-based line number, stripped line) for every non-blank line of a text handle."""
    for lineno, raw in enumerate(handle, 1):
        line = raw.strip()
        if line:
            yield lineno, line


def to_float(token: str, stage: str, lineno: Optional[int] = None) -> float:
    try:
        return float(token)
    except (TypeError, ValueError):
        raise MeshError(ErrorKind.READ_FAILED,
                        "Invalid number '{}' while reading {}".format(token, stage),
                        {"stage": stage, "line": lineno})


def to_int(token: str, stage: str, lineno: Optional[int] = None) -> int:
    try:
        return int(token)
    except (TypeError, ValueError):
        raise MeshError(ErrorKind.READ_FAILED,
                        "Invalid integer '{}' while reading {}".format(token, stage),
                        {"stage": stage, "line": lineno})


def floats(tokens: Sequence[str], stage: str, lineno: Optional[int] = None):
    return [to_float(t, stage, lineno) for t in tokens]


def check_indices(mesh: MeshData, stage: str) -> None:
    """Raise READ_FAILED if any cell references a point past the end of `points`."""
    n = mesh.point_count
    for i, cell in enumerate(mesh.cells):
        for idx in cell.indices:
            if idx < 0 or idx >= n:
                raise MeshError(
                    ErrorKind.READ_FAILED,
                    "Cell {} references point {} but only {} points were read".format(i, idx, n),
                    {"stage": stage})


def finalize(mesh: MeshData, path: str, tag: FormatTag, version: str = "") -> MeshData:
    """Record provenance, verify index bounds and recompute metadata."""
    if mesh.points.size % 3 != 0:
        raise MeshError(ErrorKind.READ_FAILED,
                        "Coordinate buffer length {} is not a multiple of 3".format(mesh.points.size))
    check_indices(mesh, "topology")
    mesh.source_format = FormatTag(tag)
    mesh.format_version = version
    mesh.file_name = os.path.basename(path)
    mesh.recompute_metadata()
    return mesh


def empty_error(tag: FormatTag, what: str = "elements") -> MeshError:
    return MeshError(ErrorKind.MESH_EMPTY, "{} file contains no {}".format(format_name(tag), what))
