# -*- coding: utf-8 -*-
# Meshport/meshport/checks/validate.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
-------
Standalone, read-only validation of a MeshData against the model invariants, plus the
axis-aligned bounding box.

Main Tasks:
----------
   - validate_mesh: first violated invariant as a message, with a pass/fail flag.
   - compute_bounds: [minX, maxX, minY, maxY, minZ, maxZ] in one scan of the points.

Notes:
------
   - Never raises and never mutates its input; malformed objects are reported, not thrown.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..core.types import FIXED_SIZE, MIN_SIZE, MeshData

Bounds = Tuple[float, float, float, float, float, float]


@dataclass
class ValidationReport:
    ok: bool
    message: str = ""
    bounds: Optional[Bounds] = None

    def __bool__(self) -> bool:
        return self.ok


def compute_bounds(mesh: MeshData) -> Optional[Bounds]:
    """Return (minX, maxX, minY, maxY, minZ, maxZ), or None when there are no points."""
    pts = np.asarray(mesh.points)
    if pts.size == 0 or pts.size % 3:
        return None
    xyz = pts.reshape(-1, 3)
    lo, hi = xyz.min(axis=0), xyz.max(axis=0)
    return (float(lo[0]), float(hi[0]), float(lo[1]), float(hi[1]), float(lo[2]), float(hi[2]))


def _first_violation(mesh: MeshData) -> str:
    if mesh.is_empty():
        return "Mesh data is empty"
    if mesh.points.size % 3 != 0:
        return "Point data length is not a multiple of 3"

    n_points = mesh.points.size // 3
    for i, cell in enumerate(mesh.cells):
        size = FIXED_SIZE.get(cell.kind)
        n = len(cell.indices)
        if (size is not None and n != size) or n < MIN_SIZE.get(cell.kind, 1):
            return "Cell {} of kind {} has {} point indices".format(i, cell.kind.name, n)
        for idx in cell.indices:
            if idx < 0 or idx >= n_points:
                return "Cell {} contains invalid point index: {}".format(i, idx)

    for name, data in mesh.point_data.items():
        size = np.asarray(data).size
        if size and (n_points == 0 or size % n_points):
            return "Point attribute '{}' data length does not match point count".format(name)

    n_cells = len(mesh.cells)
    for name, data in mesh.cell_data.items():
        size = np.asarray(data).size
        if size and (n_cells == 0 or size % n_cells):
            return "Cell attribute '{}' data length does not match cell count".format(name)
    return ""


def validate_mesh(mesh: MeshData) -> ValidationReport:
    """
    Re-check the MeshData invariants.

    Parameters
    ----------
    mesh : MeshData
        Mesh to inspect (left untouched).

    Returns
    -------
    ValidationReport
        `ok` False with a descriptive `message` on the first violation; `bounds` is set
        whenever the coordinate buffer is well formed.
    """
    try:
        message = _first_violation(mesh)
        bounds = compute_bounds(mesh)
    except (AttributeError, TypeError, ValueError) as e:
        return ValidationReport(False, "Malformed mesh object: {}".format(e))
    return ValidationReport(not message, message, bounds)
