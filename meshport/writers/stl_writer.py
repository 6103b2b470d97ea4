# -*- coding: utf-8 -*-
# Meshport/meshport/writers/stl_writer.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Serialize a MeshData to STL (binary by default, ASCII when `options.binary` is False
or the ASCII tag is requested).

Notes:
------
- Faces are triangulated on the fly; lines and vertices cannot be stored.
- Facet normals are recomputed from vertex order (zero for degenerate triangles).
- The binary header never starts with "solid" so readers do not mistake it for ASCII.
"""

import logging
from typing import Optional

import numpy as np

from ..core.errors import ErrorKind, MeshError, guarded
from ..core.options import WriteOptions
from ..core.types import MeshData
from ..formats.tags import FormatTag
from ..readers.stl_reader import RECORD_DTYPE, HEADER_BYTES
from ._helpers import prepare, triangles, fmt

logger = logging.getLogger(__name__)

BINARY_HEADER = b"Binary STL written by meshport"


def _facets(mesh: MeshData):
    tris = triangles(mesh)
    if len(tris) == 0:
        raise MeshError(ErrorKind.MESH_EMPTY, "Mesh has no faces to write as STL")
    xyz = mesh.xyz().astype(np.float64)
    v = xyz[tris]                                           # (T, 3, 3)
    n = np.cross(v[:, 1] - v[:, 0], v[:, 2] - v[:, 0])
    norm = np.linalg.norm(n, axis=1, keepdims=True)
    n = np.divide(n, norm, out=np.zeros_like(n), where=norm > 0)
    return v, n


def save_binary_stl(mesh: MeshData, path: str) -> None:
    v, n = _facets(mesh)
    records = np.zeros(len(v), dtype=RECORD_DTYPE)
    records["normal"] = n
    records["vertices"] = v
    with open(path, "wb") as f:
        f.write(BINARY_HEADER.ljust(HEADER_BYTES, b" "))
        f.write(np.uint32(len(v)).astype("<u4").tobytes())
        f.write(records.tobytes())


def save_ascii_stl(mesh: MeshData, path: str, options: WriteOptions) -> None:
    v, n = _facets(mesh)
    p = options.precision
    name = options.solid_name
    with open(path, "w", encoding="utf-8") as f:
        f.write("solid {}\n".format(name))
        for tri, normal in zip(v, n):
            f.write("  facet normal {} {} {}\n".format(*(fmt(c, p) for c in normal)))
            f.write("    outer loop\n")
            for vertex in tri:
                f.write("      vertex {} {} {}\n".format(*(fmt(c, p) for c in vertex)))
            f.write("    endloop\n")
            f.write("  endfacet\n")
        f.write("endsolid {}\n".format(name))


@guarded(ErrorKind.WRITE_FAILED)
def write_stl(mesh: MeshData, path: str, options: Optional[WriteOptions] = None,
              tag: Optional[FormatTag] = None):
    """
    Write `mesh` as STL.

    Parameters
    ----------
    mesh : MeshData
        Mesh to serialize.
    path : str
        Output file; parent directories are created.
    options : WriteOptions, optional
        `binary`, `precision` and `solid_name` are honored.
    tag : FormatTag, optional
        STL_ASCII forces ASCII output; otherwise `options.binary` decides.

    Returns
    -------
    Outcome
    """
    options = options or WriteOptions()
    mesh = prepare(mesh, path, tag or FormatTag.STL_BINARY, options)
    binary = options.binary and tag != FormatTag.STL_ASCII
    if binary:
        save_binary_stl(mesh, path)
    else:
        save_ascii_stl(mesh, path, options)
    logger.debug("[write_stl] wrote %s (%s)", path, "binary" if binary else "ascii")
    return None
