# -*- coding: utf-8 -*-
# Meshport/meshport/writers/_helpers.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Checks and conversions shared by every writer: refuse empty meshes, validate write
options, create the target directory, reduce volumetric meshes for surface formats,
and flatten faces into triangles.
"""

import logging
import os
from typing import List, Tuple

import numpy as np

from ..core.errors import ErrorKind, MeshError
from ..core.options import WriteOptions
from ..core.types import CellKind, MeshData
from ..formats.tags import FormatTag, format_name, is_surface_format
from ..processing.surface import extract_surface

logger = logging.getLogger(__name__)


def ensure_parent_dir(path: str) -> None:
    """Create the parent directory of `path` if needed (WRITE_FAILED on error)."""
    dirname = os.path.dirname(os.path.abspath(path))
    if os.path.isdir(dirname):
        return
    try:
        os.makedirs(dirname, exist_ok=True)
    except OSError as e:
        raise MeshError(ErrorKind.WRITE_FAILED, "Cannot create target directory: {} ({})".format(dirname, e))


def prepare(mesh: MeshData, path: str, tag: FormatTag, options: WriteOptions) -> MeshData:
    """
    Run the common pre-write checks and return the mesh the writer should serialize.

    Raises
    ------
    MeshError
        MESH_EMPTY, PARAM_INVALID, FORMAT_UNSUPPORTED (volumetric cells for a surface
        format without `surface_only`) or WRITE_FAILED (directory creation).
    """
    if mesh is None or mesh.is_empty() or mesh.point_count == 0:
        raise MeshError(ErrorKind.MESH_EMPTY, "Refusing to write an empty mesh to {}".format(path))
    problems = options.validate()
    if problems:
        raise MeshError(ErrorKind.PARAM_INVALID, "; ".join(problems))

    if is_surface_format(tag) and mesh.has_volume_cells():
        if not options.surface_only:
            raise MeshError(ErrorKind.FORMAT_UNSUPPORTED,
                            "{} cannot store volumetric cells; enable surface-only output".format(
                                format_name(tag)))
        logger.info("[prepare] extracting boundary surface for %s output", format_name(tag))
        mesh = extract_surface(mesh)

    ensure_parent_dir(path)
    return mesh


def fmt(value: float, precision: int) -> str:
    """Format one coordinate with `precision` significant digits."""
    return "{:.{p}g}".format(float(value), p=int(precision))


def triangles(mesh: MeshData) -> np.ndarray:
    """
    (T, 3) triangle connectivity from every face cell: quads and polygons are fanned,
    strips expanded. Lines and vertices contribute nothing.
    """
    tris: List[Tuple[int, int, int]] = []
    skipped = 0
    for cell in mesh.cells:
        idx = cell.indices
        if cell.kind in (CellKind.TRIANGLE, CellKind.QUAD, CellKind.POLYGON):
            tris.extend((idx[0], idx[k], idx[k + 1]) for k in range(1, len(idx) - 1))
        elif cell.kind == CellKind.TRIANGLE_STRIP:
            for k in range(len(idx) - 2):
                a, b, c = idx[k], idx[k + 1], idx[k + 2]
                tris.append((a, b, c) if k % 2 == 0 else (b, a, c))
        else:
            skipped += 1
    if skipped:
        logger.warning("[triangles] %d non-face cell(s) have no triangle representation", skipped)
    return np.asarray(tris, dtype=np.int64).reshape(-1, 3)
