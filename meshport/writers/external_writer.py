# -*- coding: utf-8 -*-
# Meshport/meshport/writers/external_writer.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Write the volumetric/CFD formats (VTK legacy, VTK XML, Gmsh v2/v4, SU2, CGNS) through
`meshio`.

Main Tasks:
-----------
    1) Group cells into consecutive same-kind blocks (polygons also by size) so block
       order, cell order and cell data stay aligned; triangle strips are expanded first.
    2) Reshape flat attributes into per-point / per-block arrays.
    3) Pass encoding options through (binary flag, VTU zlib compression).
    4) Gmsh: one geometric entity per block (node entities for v4), numeric ASCII data.
    5) CGNS: relabel base/zone groups and the base dimension with h5py after meshio wrote
       the file.

Notes:
------
- OpenFOAM writing is recognized but not implemented: FORMAT_VERSION_INVALID.
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..core.errors import ErrorKind, MeshError, guarded
from ..core.options import WriteOptions
from ..core.types import Cell, CellKind, MeshData
from ..formats.tags import FormatTag, format_name
from ..readers.external_reader import MESHIO_TO_KIND, import_meshio
from ._helpers import prepare

logger = logging.getLogger(__name__)

KIND_TO_MESHIO: Dict[CellKind, str] = {kind: name for name, kind in MESHIO_TO_KIND.items()}

MESHIO_WRITE_FORMATS: Dict[FormatTag, str] = {
    FormatTag.VTK_LEGACY: "vtk",
    FormatTag.VTK_XML: "vtu",
    FormatTag.GMSH_V2: "gmsh22",
    FormatTag.GMSH_V4: "gmsh",
    FormatTag.SU2: "su2",
    FormatTag.CGNS: "cgns",
}

# meshio's CGNS writer uses these group names.
_MESHIO_CGNS_BASE = "Base"
_MESHIO_CGNS_ZONE = "Zone1"

GMSH_CELL_TYPES = frozenset({"vertex", "line", "triangle", "quad", "tetra", "hexahedron",
                             "wedge", "pyramid"})


def _expand_strips(cells: List[Cell]) -> Tuple[List[Cell], List[int]]:
    out, parent = [], []
    for ci, cell in enumerate(cells):
        if cell.kind != CellKind.TRIANGLE_STRIP:
            out.append(cell)
            parent.append(ci)
            continue
        idx = cell.indices
        for k in range(len(idx) - 2):
            tri = (idx[k], idx[k + 1], idx[k + 2]) if k % 2 == 0 else (idx[k + 1], idx[k], idx[k + 2])
            out.append(Cell(CellKind.TRIANGLE, tri))
            parent.append(ci)
    return out, parent


def _blocks(cells: List[Cell]) -> List[Tuple[str, int, int]]:
    """(meshio type, start, stop) for each run of same-kind, same-size cells."""
    runs = []
    start = 0
    for i in range(1, len(cells) + 1):
        if i == len(cells) or cells[i].kind != cells[start].kind \
                or len(cells[i].indices) != len(cells[start].indices):
            runs.append((KIND_TO_MESHIO[cells[start].kind], start, i))
            start = i
    return runs


def mesh_to_meshio(mesh: MeshData, keep_attributes: bool = True):
    """Build a `meshio.Mesh` from a MeshData."""
    meshio = import_meshio()
    cells, parent = _expand_strips(mesh.cells)
    runs = _blocks(cells) if cells else []
    blocks = [(kind, np.asarray([cells[i].indices for i in range(a, b)], dtype=np.int64))
              for kind, a, b in runs]

    point_data, cell_data = {}, {}
    if keep_attributes:
        n = mesh.point_count
        for name, arr in mesh.point_data.items():
            arr = np.asarray(arr)
            if n and arr.size and arr.size % n == 0:
                rows = arr.reshape(n, -1)
                point_data[name] = rows[:, 0] if rows.shape[1] == 1 else rows
        c = mesh.cell_count
        index = np.asarray(parent, dtype=np.int64)
        for name, arr in mesh.cell_data.items():
            arr = np.asarray(arr)
            if not c or not arr.size or arr.size % c:
                continue
            rows = arr.reshape(c, -1)[index]
            parts = [rows[a:b] for _, a, b in runs]
            cell_data[name] = [p[:, 0] if p.shape[1] == 1 else p for p in parts]

    return meshio.Mesh(mesh.xyz().astype(np.float64), blocks,
                       point_data=point_data, cell_data=cell_data)


def _node_entities(m) -> np.ndarray:
    """
    (N, 2) entity dimension and tag per node for Gmsh v4 output.

    Block k lives on entity (dim_k, k + 1) and must own at least one node, so the
    smallest blocks pick a node first. Other nodes follow the first block that
    references them; unreferenced nodes sit on the point entity (0, 0).
    """
    dim_tags = np.zeros((len(m.points), 2), dtype=np.int64)
    members = [np.unique(block.data) for block in m.cells]
    for k in reversed(range(len(m.cells))):
        dim_tags[members[k]] = (m.cells[k].dim, k + 1)

    claimed = set()
    for k in sorted(range(len(m.cells)), key=lambda j: len(members[j])):
        owner = next((int(i) for i in members[k] if int(i) not in claimed), None)
        if owner is None:
            raise MeshError(ErrorKind.FORMAT_UNSUPPORTED,
                            "Gmsh v4 needs one node owned by each cell block; write Gmsh v2 instead",
                            {"block": k, "type": m.cells[k].type})
        claimed.add(owner)
        dim_tags[owner] = (m.cells[k].dim, k + 1)
    return dim_tags


def _gmsh_attributes(data: Dict, binary: bool, per_block: bool) -> None:
    for name in [key for key in data if not key.startswith("gmsh:")]:
        parts = data[name] if per_block else [data[name]]
        if any(int(np.prod(np.shape(p)[1:])) not in (1, 3, 9) for p in parts):
            logger.warning("[_prepare_gmsh] dropping '%s': Gmsh stores 1, 3 or 9 components", name)
            del data[name]
            continue
        if not binary:
            # ASCII data lines are written with repr(); python floats keep them numeric
            parts = [np.asarray(p, dtype=np.float64).astype(object) for p in parts]
            data[name] = parts if per_block else parts[0]


def _prepare_gmsh(m, tag: FormatTag, binary: bool) -> None:
    """Attach the entity tags meshio's Gmsh writers expect and make attributes writable."""
    unsupported = sorted({block.type for block in m.cells} - GMSH_CELL_TYPES)
    if unsupported:
        raise MeshError(ErrorKind.FORMAT_UNSUPPORTED,
                        "{} cannot store {} cells".format(format_name(tag), ", ".join(unsupported)))

    entity = [np.full(len(block.data), k + 1, dtype=np.int32) for k, block in enumerate(m.cells)]
    m.cell_data["gmsh:geometrical"] = entity
    m.cell_data["gmsh:physical"] = [e.copy() for e in entity]
    if tag == FormatTag.GMSH_V4:
        m.point_data["gmsh:dim_tags"] = _node_entities(m)

    _gmsh_attributes(m.point_data, binary, per_block=False)
    _gmsh_attributes(m.cell_data, binary, per_block=True)


def _relabel_cgns(path: str, options: WriteOptions) -> None:
    try:
        import h5py
    except ImportError:
        raise MeshError(ErrorKind.DEPENDENCY_MISSING,
                        "h5py is required for CGNS output. Install via: pip install h5py")
    with h5py.File(path, "r+") as f:
        if _MESHIO_CGNS_BASE not in f:
            logger.debug("[_relabel_cgns] unexpected CGNS layout; labels left as written")
            return
        base = f[_MESHIO_CGNS_BASE]
        if " data" in base:
            del base[" data"]
            base.create_dataset(" data", data=np.array([options.cgns_dimension, 3], dtype=np.int32))
        if _MESHIO_CGNS_ZONE in base and options.cgns_zone_name != _MESHIO_CGNS_ZONE:
            base.move(_MESHIO_CGNS_ZONE, options.cgns_zone_name)
        if options.cgns_base_name != _MESHIO_CGNS_BASE:
            f.move(_MESHIO_CGNS_BASE, options.cgns_base_name)


def save_external(mesh: MeshData, path: str, tag: FormatTag, options: WriteOptions) -> None:
    file_format = MESHIO_WRITE_FORMATS.get(tag)
    if file_format is None:
        raise MeshError(ErrorKind.FORMAT_UNSUPPORTED, "No delegated writer for {}".format(format_name(tag)))

    meshio = import_meshio()
    m = mesh_to_meshio(mesh, options.preserve_attributes)
    if tag in (FormatTag.GMSH_V2, FormatTag.GMSH_V4):
        _prepare_gmsh(m, tag, bool(options.binary))
    kwargs = {}
    if tag in (FormatTag.VTK_LEGACY, FormatTag.VTK_XML, FormatTag.GMSH_V2, FormatTag.GMSH_V4):
        kwargs["binary"] = bool(options.binary)
    if tag == FormatTag.VTK_XML:
        kwargs["compression"] = "zlib" if options.compress else None
    if tag == FormatTag.CGNS and not options.compress:
        kwargs["compression"] = None

    try:
        meshio.write(path, m, file_format=file_format, **kwargs)
    except ImportError as e:
        raise MeshError(ErrorKind.DEPENDENCY_MISSING,
                        "{} backend unavailable: {}".format(format_name(tag), e))
    except meshio.WriteError as e:
        raise MeshError(ErrorKind.WRITE_FAILED, "meshio could not write {}: {}".format(path, e))

    if tag == FormatTag.CGNS:
        _relabel_cgns(path, options)


@guarded(ErrorKind.WRITE_FAILED)
def write_external(mesh: MeshData, path: str, tag: FormatTag, options: Optional[WriteOptions] = None):
    """
    Write `mesh` in a meshio-delegated format.

    Parameters
    ----------
    mesh : MeshData
        Mesh to serialize.
    path : str
        Output file; parent directories are created.
    tag : FormatTag
        Target format (VTK_LEGACY, VTK_XML, GMSH_V2, GMSH_V4, SU2, CGNS or OPENFOAM).
    options : WriteOptions, optional
        `binary`, `compress`, `preserve_attributes` and the CGNS labels are honored.
    """
    options = options or WriteOptions()
    if tag == FormatTag.OPENFOAM:
        raise MeshError(ErrorKind.FORMAT_VERSION_INVALID, "OpenFOAM writing is not implemented")
    mesh = prepare(mesh, path, tag, options)
    save_external(mesh, path, tag, options)
    logger.debug("[write_external] wrote %s as %s", path, format_name(tag))
