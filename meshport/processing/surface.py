# -*- coding: utf-8 -*-
# Meshport/meshport/processing/surface.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Boundary extraction for volumetric meshes: a face of a tetra/hexahedron/wedge/pyramid
is on the boundary when no other volumetric cell shares it.

Main Tasks:
-----------
    1) Enumerate faces of every volumetric cell using VTK local face ordering
       (outward orientation for positively oriented cells).
    2) Count faces by their sorted vertex set and keep those seen exactly once.
    3) Keep existing 2-D/1-D/0-D cells unless they duplicate a boundary face.

Notes:
------
- Points and point data are kept unchanged (indices stay valid); cell data are dropped
  since boundary faces have no one-to-one parent cell array.
"""

import logging
from collections import Counter
from typing import Dict, List, Tuple

from ..core.types import Cell, CellKind, MeshData, VOLUME_KINDS, face_kind

logger = logging.getLogger(__name__)

# Local faces per volumetric kind (VTK numbering).
CELL_FACES: Dict[CellKind, List[Tuple[int, ...]]] = {
    CellKind.TETRA: [(0, 1, 3), (1, 2, 3), (2, 0, 3), (0, 2, 1)],
    CellKind.HEXAHEDRON: [(0, 4, 7, 3), (1, 2, 6, 5), (0, 1, 5, 4),
                          (3, 7, 6, 2), (0, 3, 2, 1), (4, 5, 6, 7)],
    CellKind.WEDGE: [(0, 1, 2), (3, 5, 4), (0, 3, 4, 1), (1, 4, 5, 2), (2, 5, 3, 0)],
    CellKind.PYRAMID: [(0, 3, 2, 1), (0, 1, 4), (1, 2, 4), (2, 3, 4), (3, 0, 4)],
}


def cell_faces(cell: Cell) -> List[Tuple[int, ...]]:
    """Global-index faces of one volumetric cell."""
    return [tuple(cell.indices[i] for i in local) for local in CELL_FACES[cell.kind]]


def extract_surface(mesh: MeshData) -> MeshData:
    """
    Return a copy of `mesh` whose volumetric cells are replaced by their boundary faces.

    Meshes without volumetric cells are returned as a plain copy.
    """
    out = mesh.copy()
    if not mesh.has_volume_cells():
        return out

    faces: List[Tuple[int, ...]] = []
    for cell in mesh.cells:
        if cell.kind in VOLUME_KINDS:
            faces.extend(cell_faces(cell))
    counts = Counter(frozenset(f) for f in faces)
    boundary = [f for f in faces if counts[frozenset(f)] == 1]
    boundary_keys = {frozenset(f) for f in boundary}

    cells: List[Cell] = []
    for cell in mesh.cells:
        if cell.kind in VOLUME_KINDS:
            continue
        if frozenset(cell.indices) in boundary_keys and len(cell.indices) >= 3:
            continue
        cells.append(cell)
    cells.extend(Cell(face_kind(len(f)), f) for f in boundary)

    logger.debug("[extract_surface] %d volumetric faces → %d boundary faces", len(faces), len(boundary))
    out.cells = cells
    out.cell_data = {}
    out.recompute_metadata()
    return out
