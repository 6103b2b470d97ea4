# -*- coding: utf-8 -*-
# Meshport/meshport/processing/engine.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Default geometry-processing engine built on numpy, with decimation delegated to pyvista
when that optional extra is installed.

Main Tasks:
-----------
    1) clean:        merge coincident points, drop degenerate cells and unreferenced points.
    2) triangulate:  fan-split quads/polygons, expand triangle strips.
    3) decimate:     pyvista `decimate_pro` on the triangle set.
    4) smooth:       Laplacian relaxation over the cell-edge graph.
    5) normals:      area-weighted point normals and unit cell normals ("Normals").

Notes:
------
- Passes run in the fixed order clean → triangulate → decimate → smooth → normals.
- Meshes with volumetric cells are returned unchanged ("safe mode"): passes that renumber
  points would silently corrupt their connectivity.
- Cell data follow their cells through every pass (replicated on triangulation);
  decimation drops all attribute arrays.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from ..core.errors import ErrorKind, MeshError
from ..core.options import ProcessingOptions
from ..core.types import Cell, CellKind, MeshData, MIN_SIZE, face_kind
from .base import GeometryEngine
from .surface import extract_surface

logger = logging.getLogger(__name__)

FACE_KINDS = (CellKind.TRIANGLE, CellKind.QUAD, CellKind.POLYGON)


# ---------------------------------------------------------------------------
# Attribute helpers
# ---------------------------------------------------------------------------
def _rows(arr: np.ndarray, n: int) -> Optional[np.ndarray]:
    """View a flat attribute as (n, components); None for empty or inconsistent arrays."""
    if n == 0 or arr.size == 0 or arr.size % n:
        return None
    return arr.reshape(n, -1)


def _take(data: dict, n: int, index: np.ndarray) -> dict:
    out = {}
    for name, arr in data.items():
        rows = _rows(np.asarray(arr), n)
        if rows is None:
            continue
        out[name] = np.ascontiguousarray(rows[index]).reshape(-1).astype(np.float32)
    return out


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------
def _dedupe_ring(indices: List[int]) -> List[int]:
    """Remove consecutive repeats (cyclically) from a face's vertex ring."""
    ring = [i for k, i in enumerate(indices) if k == 0 or i != indices[k - 1]]
    while len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    return ring


def _remap_cell(cell: Cell, remap: np.ndarray) -> Optional[Cell]:
    idx = [int(remap[i]) for i in cell.indices]
    if cell.kind in (CellKind.QUAD, CellKind.POLYGON):
        ring = _dedupe_ring(idx)
        kind = face_kind(len(ring)) if len(set(ring)) == len(ring) else None
        return Cell(kind, tuple(ring)) if kind is not None else None
    if cell.kind == CellKind.TRIANGLE_STRIP:
        return Cell(cell.kind, tuple(idx)) if len(set(idx)) >= MIN_SIZE[cell.kind] else None
    if len(set(idx)) != len(idx):
        return None
    return Cell(cell.kind, tuple(idx))


def clean(mesh: MeshData, tolerance: float = 0.0) -> MeshData:
    """
    Merge duplicate points and drop degenerate cells and unreferenced points.

    Points are merged when bit-identical (tolerance 0) or when they fall on the same
    cell of a grid with spacing `tolerance`. The first occurrence of a point is its
    representative, and first-occurrence order is preserved.
    """
    n = mesh.point_count
    if n == 0:
        return mesh.copy()
    xyz = mesh.xyz().astype(np.float64)
    keys = np.round(xyz / tolerance).astype(np.int64) if tolerance > 0 else xyz
    _, first, inverse = np.unique(keys, axis=0, return_index=True, return_inverse=True)
    inverse = inverse.reshape(-1)
    order = np.argsort(first)
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))
    remap = rank[inverse]
    representatives = first[order]

    kept_cells: List[Cell] = []
    kept_ids: List[int] = []
    for ci, cell in enumerate(mesh.cells):
        new = _remap_cell(cell, remap)
        if new is not None:
            kept_cells.append(new)
            kept_ids.append(ci)

    # Compact away points that no surviving cell references (point clouds keep all).
    if mesh.cells:
        used = np.zeros(len(representatives), dtype=bool)
        for cell in kept_cells:
            used[list(cell.indices)] = True
        compact = np.cumsum(used) - 1
        kept_cells = [Cell(c.kind, tuple(int(compact[i]) for i in c.indices)) for c in kept_cells]
        representatives = representatives[used]

    out = MeshData(source_format=mesh.source_format, format_version=mesh.format_version,
                   file_name=mesh.file_name)
    out.set_points(xyz[representatives])
    out.cells = kept_cells
    out.point_data = _take(mesh.point_data, n, representatives)
    out.cell_data = _take(mesh.cell_data, mesh.cell_count, np.asarray(kept_ids, dtype=np.int64))
    logger.debug("[clean] points %d → %d, cells %d → %d",
                 n, out.point_count, mesh.cell_count, out.cell_count)
    return out


def _fan(indices: Tuple[int, ...]) -> List[Tuple[int, int, int]]:
    return [(indices[0], indices[k], indices[k + 1]) for k in range(1, len(indices) - 1)]


def _strip(indices: Tuple[int, ...]) -> List[Tuple[int, int, int]]:
    tris = []
    for k in range(len(indices) - 2):
        a, b, c = indices[k], indices[k + 1], indices[k + 2]
        tri = (a, b, c) if k % 2 == 0 else (b, a, c)
        if len(set(tri)) == 3:
            tris.append(tri)
    return tris


def triangulate(mesh: MeshData) -> MeshData:
    """Split every quad, polygon and triangle strip into triangles; other cells pass through."""
    cells: List[Cell] = []
    parent: List[int] = []
    for ci, cell in enumerate(mesh.cells):
        if cell.kind in (CellKind.QUAD, CellKind.POLYGON):
            tris = _fan(cell.indices)
        elif cell.kind == CellKind.TRIANGLE_STRIP:
            tris = _strip(cell.indices)
        else:
            cells.append(cell)
            parent.append(ci)
            continue
        cells.extend(Cell(CellKind.TRIANGLE, t) for t in tris)
        parent.extend([ci] * len(tris))

    out = mesh.copy()
    out.cells = cells
    out.cell_data = _take(mesh.cell_data, mesh.cell_count, np.asarray(parent, dtype=np.int64))
    return out


def import_pyvista():
    try:
        import pyvista
    except ImportError:
        raise MeshError(ErrorKind.DEPENDENCY_MISSING,
                        "pyvista is required for decimation. Install via: pip install pyvista")
    return pyvista


def decimate(mesh: MeshData, target: float, preserve_topology: bool = True) -> MeshData:
    """
    Remove roughly `target` (fraction) of the triangles with pyvista `decimate_pro`.

    Non-triangle cells must be triangulated first; lines and vertices are discarded.
    """
    pv = import_pyvista()
    tris = [c.indices for c in mesh.cells if c.kind == CellKind.TRIANGLE]
    if not tris:
        logger.warning("[decimate] no triangles to decimate; mesh left unchanged")
        return mesh.copy()
    if len(tris) != mesh.cell_count:
        logger.warning("[decimate] %d non-triangle cell(s) discarded", mesh.cell_count - len(tris))

    faces = np.hstack([np.full((len(tris), 1), 3, dtype=np.int64), np.asarray(tris, dtype=np.int64)])
    poly = pv.PolyData(mesh.xyz().astype(np.float64), faces.reshape(-1))
    reduced = poly.decimate_pro(float(target), preserve_topology=bool(preserve_topology))

    out = MeshData(source_format=mesh.source_format, format_version=mesh.format_version,
                   file_name=mesh.file_name)
    out.set_points(np.asarray(reduced.points))
    conn = np.asarray(reduced.faces, dtype=np.int64).reshape(-1, 4)[:, 1:] if reduced.n_cells else []
    out.cells = [Cell(CellKind.TRIANGLE, tuple(int(i) for i in row)) for row in conn]
    logger.debug("[decimate] triangles %d → %d", len(tris), out.cell_count)
    return out


def _edges(mesh: MeshData) -> np.ndarray:
    """Undirected cell edges, both directions, as an (E, 2) array."""
    pairs = []
    for cell in mesh.cells:
        idx = cell.indices
        if cell.kind == CellKind.LINE:
            pairs.append((idx[0], idx[1]))
        elif cell.kind == CellKind.TRIANGLE_STRIP:
            for t in _strip(idx):
                pairs.extend([(t[0], t[1]), (t[1], t[2]), (t[2], t[0])])
        elif cell.kind in FACE_KINDS:
            pairs.extend(zip(idx, idx[1:] + idx[:1]))
    if not pairs:
        return np.zeros((0, 2), dtype=np.int64)
    e = np.asarray(pairs, dtype=np.int64)
    return np.unique(np.vstack([e, e[:, ::-1]]), axis=0)


def smooth(mesh: MeshData, iterations: int, relaxation: float) -> MeshData:
    """Laplacian smoothing: each point moves `relaxation` of the way to its neighbours' mean."""
    out = mesh.copy()
    edges = _edges(mesh)
    if iterations <= 0 or relaxation == 0.0 or len(edges) == 0:
        return out
    xyz = mesh.xyz().astype(np.float64)
    src, dst = edges[:, 0], edges[:, 1]
    degree = np.bincount(src, minlength=len(xyz)).astype(np.float64)
    moving = degree > 0
    for _ in range(int(iterations)):
        sums = np.zeros_like(xyz)
        np.add.at(sums, src, xyz[dst])
        mean = sums[moving] / degree[moving][:, None]
        xyz[moving] += relaxation * (mean - xyz[moving])
    out.set_points(xyz)
    return out


def compute_normals(mesh: MeshData) -> MeshData:
    """Store unit cell normals and area-weighted unit point normals as 3-component "Normals"."""
    xyz = mesh.xyz().astype(np.float64)
    cell_n = np.zeros((mesh.cell_count, 3))
    point_n = np.zeros_like(xyz)
    for ci, cell in enumerate(mesh.cells):
        if cell.kind in FACE_KINDS:
            tris = _fan(cell.indices)
        elif cell.kind == CellKind.TRIANGLE_STRIP:
            tris = _strip(cell.indices)
        else:
            continue
        if not tris:
            continue
        t = np.asarray(tris)
        area_vec = np.cross(xyz[t[:, 1]] - xyz[t[:, 0]], xyz[t[:, 2]] - xyz[t[:, 0]]).sum(axis=0)
        cell_n[ci] = area_vec
        point_n[list(cell.indices)] += area_vec

    def _unit(v):
        norm = np.linalg.norm(v, axis=1, keepdims=True)
        return np.divide(v, norm, out=np.zeros_like(v), where=norm > 0)

    out = mesh.copy()
    out.point_data["Normals"] = _unit(point_n).astype(np.float32).reshape(-1)
    if mesh.cell_count:
        out.cell_data["Normals"] = _unit(cell_n).astype(np.float32).reshape(-1)
    return out


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class NumpyEngine(GeometryEngine):
    """Built-in engine; see module notes for pass semantics."""

    def process(self, mesh: MeshData, options: ProcessingOptions) -> MeshData:
        problems = options.validate()
        if problems:
            raise MeshError(ErrorKind.PARAM_INVALID, "; ".join(problems))

        if mesh.has_volume_cells():
            logger.info("[NumpyEngine.process] volumetric mesh detected; processing skipped")
            out = mesh.copy()
            out.recompute_metadata()
            return out

        out = mesh
        if options.enable_cleaning:
            out = clean(out, float(options.merge_tolerance))
        if options.enable_triangulation:
            out = triangulate(out)
        if options.enable_decimation:
            out = decimate(out, options.decimation_target, options.preserve_topology)
        if options.enable_smoothing:
            out = smooth(out, options.smoothing_iterations, float(options.smoothing_relaxation))
        if options.enable_normals:
            out = compute_normals(out)

        if out is mesh:
            out = mesh.copy()
        if out.point_count == 0:
            raise MeshError(ErrorKind.MESH_EMPTY, "Processing removed every point")
        out.recompute_metadata()
        return out

    def extract_surface(self, mesh: MeshData) -> MeshData:
        return extract_surface(mesh)
