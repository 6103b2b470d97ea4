# -*- coding: utf-8 -*-
# Meshport/meshport/writers/off_writer.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Serialize a MeshData to OFF: header, `nV nF 0` counts, vertex block, face block.
OFF stores faces only; line and vertex cells are skipped with a warning and strips are
expanded into triangles.
"""

import logging
from typing import Optional

from ..core.errors import ErrorKind, guarded
from ..core.options import WriteOptions
from ..core.types import CellKind, MeshData
from ..formats.tags import FormatTag
from ._helpers import prepare, fmt

logger = logging.getLogger(__name__)


def save_off(mesh: MeshData, path: str, options: WriteOptions) -> None:
    faces, skipped = [], 0
    for cell in mesh.cells:
        idx = cell.indices
        if cell.kind in (CellKind.TRIANGLE, CellKind.QUAD, CellKind.POLYGON):
            faces.append(idx)
        elif cell.kind == CellKind.TRIANGLE_STRIP:
            faces.extend((idx[k], idx[k + 1], idx[k + 2]) if k % 2 == 0 else (idx[k + 1], idx[k], idx[k + 2])
                         for k in range(len(idx) - 2))
        else:
            skipped += 1
    if skipped:
        logger.warning("[write_off] %d line/vertex cell(s) cannot be stored in OFF; skipped", skipped)

    p = options.precision
    with open(path, "w", encoding="utf-8") as f:
        f.write("OFF\n")
        f.write("{} {} 0\n".format(mesh.point_count, len(faces)))
        for x, y, z in mesh.xyz():
            f.write("{} {} {}\n".format(fmt(x, p), fmt(y, p), fmt(z, p)))
        for face in faces:
            f.write("{} {}\n".format(len(face), " ".join(str(i) for i in face)))


@guarded(ErrorKind.WRITE_FAILED)
def write_off(mesh: MeshData, path: str, options: Optional[WriteOptions] = None):
    """Write `mesh` as OFF; returns an Outcome."""
    options = options or WriteOptions()
    mesh = prepare(mesh, path, FormatTag.OFF, options)
    save_off(mesh, path, options)
    logger.debug("[write_off] wrote %s", path)
