# -*- coding: utf-8 -*-
# Meshport/meshport/core/types.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Canonical in-memory mesh representation shared by every reader, writer and processing
pass. Geometry is a flat float32 coordinate array, topology is a list of tagged cells
referencing points by integer index, and attributes are named flat float arrays.

Main Tasks:
-----------
    1) Define the closed `CellKind` tag set (VTK numbering) and the `MeshType` class.
    2) Define `Cell` (kind + point indices) and the `MeshData` container.
    3) Derive `MeshMetadata` as a pure function of a `MeshData` (never hand-edited).

Notes:
------
- Logical point i occupies points[3i:3i+3]; `points.size % 3 == 0` always holds
  after a successful parse or processing pass.
- A MeshData is filled by exactly one owner (a parser or the processing engine) and
  is treated as read-only once `recompute_metadata()` has been called.
"""

import copy
from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..formats.tags import FormatTag


class CellKind(IntEnum):
    """Topological primitive types (values follow the VTK cell type ids)."""
    VERTEX = 1
    LINE = 3
    TRIANGLE = 5
    TRIANGLE_STRIP = 6
    POLYGON = 7
    QUAD = 9
    TETRA = 10
    HEXAHEDRON = 12
    WEDGE = 13
    PYRAMID = 14


class MeshType(IntEnum):
    UNKNOWN = 0
    VOLUME_MESH = 1
    SURFACE_MESH = 2


VOLUME_KINDS = frozenset({CellKind.TETRA, CellKind.HEXAHEDRON, CellKind.WEDGE, CellKind.PYRAMID})

# Exact node count per kind; None means variable length with the given minimum.
FIXED_SIZE: Dict[CellKind, Optional[int]] = {
    CellKind.VERTEX: 1,
    CellKind.LINE: 2,
    CellKind.TRIANGLE: 3,
    CellKind.QUAD: 4,
    CellKind.TETRA: 4,
    CellKind.HEXAHEDRON: 8,
    CellKind.WEDGE: 6,
    CellKind.PYRAMID: 5,
    CellKind.TRIANGLE_STRIP: None,
    CellKind.POLYGON: None,
}

MIN_SIZE: Dict[CellKind, int] = {
    kind: (size if size is not None else 3) for kind, size in FIXED_SIZE.items()
}


def face_kind(n_indices: int) -> Optional[CellKind]:
    """
    Tag a polygonal face by its vertex count: 3 → triangle, 4 → quad, >4 → polygon.
    Faces with fewer than three vertices have no kind (callers drop them).
    """
    if n_indices < 3:
        return None
    if n_indices == 3:
        return CellKind.TRIANGLE
    if n_indices == 4:
        return CellKind.QUAD
    return CellKind.POLYGON


@dataclass(frozen=True)
class Cell:
    """A single cell: kind tag plus 0-based indices into the owning mesh's points."""
    kind: CellKind
    indices: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.indices)


@dataclass
class MeshMetadata:
    """
    Derived, non-authoritative summary of a MeshData.

    Attributes
    ----------
    point_count, cell_count : int
        Sizes of the geometry and topology.
    cell_type_count : dict
        Histogram CellKind → number of cells of that kind.
    mesh_type : MeshType
        VOLUME_MESH if any volumetric kind is present, SURFACE_MESH otherwise,
        UNKNOWN when there are no cells.
    point_data_names, cell_data_names : list of str
        Attribute names in insertion order.
    source_format : FormatTag
        Tag of the format the mesh was parsed from (UNKNOWN if built in memory).
    format_version : str
        Version string reported by the source file, "" when the format has none.
    file_name : str
        Base name of the source file.
    """
    point_count: int = 0
    cell_count: int = 0
    cell_type_count: Dict[CellKind, int] = field(default_factory=dict)
    mesh_type: MeshType = MeshType.UNKNOWN
    point_data_names: List[str] = field(default_factory=list)
    cell_data_names: List[str] = field(default_factory=list)
    source_format: FormatTag = FormatTag.UNKNOWN
    format_version: str = ""
    file_name: str = ""

    @classmethod
    def from_mesh(cls, mesh: "MeshData") -> "MeshMetadata":
        histogram = Counter(cell.kind for cell in mesh.cells)
        if not mesh.cells:
            mesh_type = MeshType.UNKNOWN
        elif any(kind in VOLUME_KINDS for kind in histogram):
            mesh_type = MeshType.VOLUME_MESH
        else:
            mesh_type = MeshType.SURFACE_MESH
        return cls(
            point_count=int(mesh.points.size // 3),
            cell_count=len(mesh.cells),
            cell_type_count=dict(histogram),
            mesh_type=mesh_type,
            point_data_names=list(mesh.point_data.keys()),
            cell_data_names=list(mesh.cell_data.keys()),
            source_format=mesh.source_format,
            format_version=mesh.format_version,
            file_name=mesh.file_name,
        )


def _empty_points() -> np.ndarray:
    return np.zeros(0, dtype=np.float32)


@dataclass
class MeshData:
    """
    Canonical mesh: flat float32 points, tagged cells, named attribute arrays, metadata.

    Attributes
    ----------
    points : np.ndarray
        1-D float32 array of length 3*N (x0, y0, z0, x1, ...).
    cells : list of Cell
        Cells in file order.
    point_data, cell_data : dict[str, np.ndarray]
        Flat float32 arrays whose length is a multiple of the point/cell count.
    source_format, format_version, file_name :
        Provenance recorded by the parser; mirrored into `metadata`.
    metadata : MeshMetadata
        Recomputed wholesale by `recompute_metadata()`.
    """
    points: np.ndarray = field(default_factory=_empty_points)
    cells: List[Cell] = field(default_factory=list)
    point_data: Dict[str, np.ndarray] = field(default_factory=dict)
    cell_data: Dict[str, np.ndarray] = field(default_factory=dict)
    source_format: FormatTag = FormatTag.UNKNOWN
    format_version: str = ""
    file_name: str = ""
    metadata: MeshMetadata = field(default_factory=MeshMetadata)

    # ---- sizes ----
    @property
    def point_count(self) -> int:
        return int(self.points.size // 3)

    @property
    def cell_count(self) -> int:
        return len(self.cells)

    # ---- basic operations ----
    def set_points(self, coords) -> None:
        """Store coordinates given as any (N,3)-shaped or flat array-like as flat float32."""
        self.points = np.ascontiguousarray(np.asarray(coords, dtype=np.float32).reshape(-1))

    def xyz(self) -> np.ndarray:
        """(N,3) view of `points`."""
        return self.points.reshape(-1, 3)

    def add_cell(self, kind: CellKind, indices) -> None:
        self.cells.append(Cell(CellKind(kind), tuple(int(i) for i in indices)))

    def is_empty(self) -> bool:
        return self.points.size == 0 and not self.cells

    def has_volume_cells(self) -> bool:
        return any(cell.kind in VOLUME_KINDS for cell in self.cells)

    def clear(self) -> None:
        self.points = _empty_points()
        self.cells = []
        self.point_data = {}
        self.cell_data = {}
        self.source_format = FormatTag.UNKNOWN
        self.format_version = ""
        self.file_name = ""
        self.metadata = MeshMetadata()

    def recompute_metadata(self) -> MeshMetadata:
        self.metadata = MeshMetadata.from_mesh(self)
        return self.metadata

    def copy(self) -> "MeshData":
        return copy.deepcopy(self)
