# -*- coding: utf-8 -*-
# Meshport/meshport/readers/external_reader.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Read the volumetric/CFD formats (VTK legacy, VTK XML, Gmsh v2/v4, SU2, CGNS) through
`meshio` and translate the result into the canonical MeshData.

Main Tasks:
-----------
    1) Import `meshio` lazily; report DEPENDENCY_MISSING when it (or a backend such as
       h5py for CGNS) is not installed.
    2) Map meshio cell blocks to CellKind; unknown/high-order blocks → FORMAT_UNSUPPORTED.
    3) Flatten numeric point/cell data into attribute arrays (cell data only when every
       block carries the array with the same component count).
    4) Record the on-disk version where the header exposes one (Gmsh, VTK legacy).

Notes:
------
- 2-D point sets are padded with z = 0.
- OpenFOAM case directories are recognized but not read: FORMAT_VERSION_INVALID.
"""

import logging
import os
import re
from typing import Dict, Optional

import numpy as np

from ..core.errors import ErrorKind, MeshError, guarded
from ..core.types import Cell, CellKind, MeshData
from ..formats.detect import detect, gmsh_version_from_prefix, PROBE_BYTES
from ..formats.tags import FormatTag, format_name
from ._helpers import require_file, finalize, empty_error

logger = logging.getLogger(__name__)

MESHIO_FORMATS: Dict[FormatTag, str] = {
    FormatTag.VTK_LEGACY: "vtk",
    FormatTag.VTK_XML: "vtu",
    FormatTag.GMSH_V2: "gmsh",
    FormatTag.GMSH_V4: "gmsh",
    FormatTag.SU2: "su2",
    FormatTag.CGNS: "cgns",
}

VTK_XML_HEAD_BYTES = 1024
_VTK_XML_TYPE = re.compile(rb'<VTKFile\b[^>]*\btype\s*=\s*"([^"]+)"')

MESHIO_TO_KIND: Dict[str, CellKind] = {
    "vertex": CellKind.VERTEX,
    "line": CellKind.LINE,
    "triangle": CellKind.TRIANGLE,
    "quad": CellKind.QUAD,
    "tetra": CellKind.TETRA,
    "hexahedron": CellKind.HEXAHEDRON,
    "wedge": CellKind.WEDGE,
    "pyramid": CellKind.PYRAMID,
    "polygon": CellKind.POLYGON,
}


def import_meshio():
    """Return the meshio module or raise DEPENDENCY_MISSING."""
    try:
        import meshio
    except ImportError:
        raise MeshError(ErrorKind.DEPENDENCY_MISSING,
                        "meshio is required for this format. Install via: pip install meshio")
    return meshio


def _kind_of(block_type: str) -> CellKind:
    kind = MESHIO_TO_KIND.get(block_type)
    if kind is None and block_type.startswith("polygon"):
        kind = CellKind.POLYGON
    if kind is None:
        raise MeshError(ErrorKind.FORMAT_UNSUPPORTED,
                        "Cell type '{}' cannot be represented".format(block_type))
    return kind


def _header_version(path: str, tag: FormatTag) -> str:
    try:
        with open(path, "rb") as f:
            prefix = f.read(PROBE_BYTES)
    except OSError:
        return ""
    if tag in (FormatTag.GMSH_V2, FormatTag.GMSH_V4):
        return gmsh_version_from_prefix(prefix)
    if tag == FormatTag.VTK_LEGACY:
        first = prefix.decode("latin-1").splitlines()[:1]
        tokens = first[0].split() if first else []
        if "Version" in tokens and tokens.index("Version") + 1 < len(tokens):
            return tokens[tokens.index("Version") + 1]
    return ""


def mesh_from_meshio(m) -> MeshData:
    """Translate a `meshio.Mesh` into a MeshData (provenance left for the caller)."""
    pts = np.asarray(m.points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] not in (2, 3):
        raise MeshError(ErrorKind.READ_FAILED, "Unexpected point array shape {}".format(pts.shape))
    if pts.shape[1] == 2:
        pts = np.column_stack([pts, np.zeros(len(pts))])

    mesh = MeshData()
    mesh.set_points(pts)

    blocks = list(m.cells)
    for block in blocks:
        kind = _kind_of(block.type)
        for row in np.asarray(block.data, dtype=np.int64):
            mesh.cells.append(Cell(kind, tuple(int(i) for i in row)))

    n_points = len(pts)
    for name, arr in (m.point_data or {}).items():
        if name.startswith("gmsh:"):
            continue
        arr = np.asarray(arr)
        if arr.dtype.kind not in "biuf" or n_points == 0 or arr.size % n_points:
            logger.debug("[mesh_from_meshio] skipping point data '%s'", name)
            continue
        mesh.point_data[name] = arr.astype(np.float32).reshape(-1)

    for name, per_block in (m.cell_data or {}).items():
        if name.startswith("gmsh:"):
            continue
        if len(per_block) != len(blocks):
            logger.debug("[mesh_from_meshio] skipping cell data '%s' (block mismatch)", name)
            continue
        parts = [np.asarray(a) for a in per_block]
        if any(p.dtype.kind not in "biuf" for p in parts):
            continue
        widths = {int(np.prod(p.shape[1:])) for p in parts}
        if len(widths) != 1:
            logger.debug("[mesh_from_meshio] skipping cell data '%s' (mixed widths)", name)
            continue
        mesh.cell_data[name] = np.concatenate([p.astype(np.float32).reshape(-1) for p in parts])
    return mesh


def _vtk_xml_dataset(path: str) -> str:
    """Dataset type named by the `<VTKFile type="...">` element, or '' if not found."""
    try:
        with open(path, "rb") as f:
            head = f.read(VTK_XML_HEAD_BYTES)
    except OSError:
        return ""
    match = _VTK_XML_TYPE.search(head)
    return match.group(1).decode("latin-1") if match else ""


def load_external(path: str, tag: FormatTag) -> MeshData:
    if tag == FormatTag.OPENFOAM:
        raise MeshError(ErrorKind.FORMAT_VERSION_INVALID, "OpenFOAM reading is not implemented")
    file_format = MESHIO_FORMATS.get(tag)
    if file_format is None:
        raise MeshError(ErrorKind.FORMAT_UNSUPPORTED,
                        "No delegated reader for {}".format(format_name(tag)))
    if tag == FormatTag.VTK_XML:
        dataset = _vtk_xml_dataset(path)
        if dataset and dataset != "UnstructuredGrid":
            raise MeshError(ErrorKind.FORMAT_UNSUPPORTED,
                            "VTK XML {} files are not supported; only UnstructuredGrid".format(dataset),
                            {"path": path})

    meshio = import_meshio()
    try:
        m = meshio.read(path, file_format=file_format)
    except ImportError as e:
        raise MeshError(ErrorKind.DEPENDENCY_MISSING,
                        "{} backend unavailable: {}".format(format_name(tag), e))
    except meshio.ReadError as e:
        raise MeshError(ErrorKind.READ_FAILED, "meshio could not read {}: {}".format(path, e))

    mesh = mesh_from_meshio(m)
    if mesh.is_empty() or mesh.point_count == 0:
        raise empty_error(tag, "points")
    return finalize(mesh, path, tag, _header_version(path, tag))


@guarded(ErrorKind.READ_FAILED)
def read_external(path: str, tag: Optional[FormatTag] = None):
    """
    Read a meshio-delegated format.

    Parameters
    ----------
    path : str
        Source file, or an OpenFOAM case directory.
    tag : FormatTag, optional
        Skip detection when given.
    """
    if tag is None:
        tag = detect(path)
    if tag == FormatTag.OPENFOAM and os.path.isdir(path):
        return load_external(path, tag)
    require_file(path)
    return load_external(path, tag)
