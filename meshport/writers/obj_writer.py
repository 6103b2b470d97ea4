# -*- coding: utf-8 -*-
# Meshport/meshport/writers/obj_writer.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Serialize a MeshData to Wavefront OBJ: `v` lines, then one `f`/`l`/`p` line per cell
in cell order (1-based indices). Triangle strips are written as their triangles.
"""

import logging
from typing import Optional

from ..core.errors import ErrorKind, guarded
from ..core.options import WriteOptions
from ..core.types import CellKind, MeshData
from ..formats.tags import FormatTag
from ._helpers import prepare, fmt

logger = logging.getLogger(__name__)

_KEYS = {
    CellKind.VERTEX: "p",
    CellKind.LINE: "l",
    CellKind.TRIANGLE: "f",
    CellKind.QUAD: "f",
    CellKind.POLYGON: "f",
}


def save_obj(mesh: MeshData, path: str, options: WriteOptions) -> None:
    p = options.precision
    with open(path, "w", encoding="utf-8") as f:
        f.write("# written by meshport\n")
        for x, y, z in mesh.xyz():
            f.write("v {} {} {}\n".format(fmt(x, p), fmt(y, p), fmt(z, p)))
        for cell in mesh.cells:
            refs = [i + 1 for i in cell.indices]
            if cell.kind == CellKind.TRIANGLE_STRIP:
                for k in range(len(refs) - 2):
                    a, b, c = refs[k], refs[k + 1], refs[k + 2]
                    tri = (a, b, c) if k % 2 == 0 else (b, a, c)
                    f.write("f {} {} {}\n".format(*tri))
                continue
            f.write("{} {}\n".format(_KEYS[cell.kind], " ".join(str(r) for r in refs)))


@guarded(ErrorKind.WRITE_FAILED)
def write_obj(mesh: MeshData, path: str, options: Optional[WriteOptions] = None):
    """Write `mesh` as OBJ; returns an Outcome."""
    options = options or WriteOptions()
    mesh = prepare(mesh, path, FormatTag.OBJ, options)
    save_obj(mesh, path, options)
    logger.debug("[write_obj] wrote %s", path)
