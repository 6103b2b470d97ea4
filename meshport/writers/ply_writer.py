# -*- coding: utf-8 -*-
# Meshport/meshport/writers/ply_writer.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Serialize a MeshData to PLY (binary_little_endian by default, ascii on request).

Main Tasks:
-----------
    1) `vertex` element: x, y, z plus one float property per point-data component
       (`name` for scalars, `name_0`, `name_1`, ... otherwise) when attributes are kept.
    2) `face` element: uchar vertex count (int when a face exceeds 255 vertices) and
       int indices; triangle strips are expanded into triangles.
    3) `edge` element for line cells. Vertex cells have no PLY element and are skipped.
"""

import logging
import struct
from typing import List, Optional, Tuple

import numpy as np

from ..core.errors import ErrorKind, guarded
from ..core.options import WriteOptions
from ..core.types import CellKind, MeshData
from ..formats.tags import FormatTag
from ._helpers import prepare, fmt

logger = logging.getLogger(__name__)


def _vertex_columns(mesh: MeshData, keep_attributes: bool) -> Tuple[List[str], np.ndarray]:
    names = ["x", "y", "z"]
    columns = [mesh.xyz().astype(np.float64)]
    n = mesh.point_count
    if keep_attributes:
        for key, arr in mesh.point_data.items():
            arr = np.asarray(arr)
            if arr.size == 0 or arr.size % n:
                continue
            rows = arr.reshape(n, -1).astype(np.float64)
            base = "_".join(key.split())
            if rows.shape[1] == 1:
                names.append(base)
            else:
                names.extend("{}_{}".format(base, c) for c in range(rows.shape[1]))
            columns.append(rows)
    return names, np.hstack(columns)


def _split_cells(mesh: MeshData):
    faces, edges, skipped = [], [], 0
    for cell in mesh.cells:
        idx = cell.indices
        if cell.kind in (CellKind.TRIANGLE, CellKind.QUAD, CellKind.POLYGON):
            faces.append(idx)
        elif cell.kind == CellKind.TRIANGLE_STRIP:
            for k in range(len(idx) - 2):
                a, b, c = idx[k], idx[k + 1], idx[k + 2]
                faces.append((a, b, c) if k % 2 == 0 else (b, a, c))
        elif cell.kind == CellKind.LINE:
            edges.append(idx)
        else:
            skipped += 1
    if skipped:
        logger.warning("[write_ply] %d vertex cell(s) cannot be stored in PLY; skipped", skipped)
    return faces, edges


def save_ply(mesh: MeshData, path: str, options: WriteOptions, binary: bool) -> None:
    names, table = _vertex_columns(mesh, options.preserve_attributes)
    faces, edges = _split_cells(mesh)
    count_type = "uchar" if all(len(f) <= 255 for f in faces) else "int"

    header = ["ply",
              "format {} 1.0".format("binary_little_endian" if binary else "ascii"),
              "comment written by meshport",
              "element vertex {}".format(len(table))]
    header += ["property float {}".format(name) for name in names]
    if faces:
        header += ["element face {}".format(len(faces)),
                   "property list {} int vertex_indices".format(count_type)]
    if edges:
        header += ["element edge {}".format(len(edges)),
                   "property int vertex1", "property int vertex2"]
    header.append("end_header")
    head = ("\n".join(header) + "\n").encode("ascii")

    if binary:
        count_fmt = "<B" if count_type == "uchar" else "<i"
        with open(path, "wb") as f:
            f.write(head)
            f.write(table.astype("<f4").tobytes())
            for face in faces:
                f.write(struct.pack(count_fmt, len(face)))
                f.write(np.asarray(face, dtype="<i4").tobytes())
            if edges:
                f.write(np.asarray(edges, dtype="<i4").tobytes())
        return

    p = options.precision
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(head.decode("ascii"))
        for row in table:
            f.write(" ".join(fmt(v, p) for v in row) + "\n")
        for face in faces:
            f.write("{} {}\n".format(len(face), " ".join(str(i) for i in face)))
        for a, b in edges:
            f.write("{} {}\n".format(a, b))


@guarded(ErrorKind.WRITE_FAILED)
def write_ply(mesh: MeshData, path: str, options: Optional[WriteOptions] = None,
              tag: Optional[FormatTag] = None):
    """
    Write `mesh` as PLY; PLY_ASCII forces text output, otherwise `options.binary` decides.
    """
    options = options or WriteOptions()
    mesh = prepare(mesh, path, tag or FormatTag.PLY_BINARY, options)
    binary = options.binary and tag != FormatTag.PLY_ASCII
    save_ply(mesh, path, options, binary)
    logger.debug("[write_ply] wrote %s (%s)", path, "binary" if binary else "ascii")
