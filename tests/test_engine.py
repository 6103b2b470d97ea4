# -*- coding: utf-8 -*-
# Meshport/tests/test_engine.py

import numpy as np
import pytest

from meshport.core.errors import ErrorKind, MeshError
from meshport.core.options import ProcessingOptions
from meshport.core.types import CellKind, MeshData
from meshport.processing import (
    NumpyEngine, clean, compute_normals, extract_surface, smooth, triangulate,
)
from meshport.readers import read_stl


def _soup():
    """Two triangles sharing an edge, stored as an unwelded soup (6 points)."""
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [1, 0, 0], [0, 1, 0],
                     [1, 0, 0], [1, 1, 0], [0, 1, 0]])
    mesh.add_cell(CellKind.TRIANGLE, (0, 1, 2))
    mesh.add_cell(CellKind.TRIANGLE, (3, 4, 5))
    mesh.cell_data["id"] = np.array([10, 20], dtype=np.float32)
    return mesh


def test_clean_merges_duplicates_in_first_occurrence_order():
    out = clean(_soup())
    assert out.point_count == 4
    np.testing.assert_allclose(out.xyz(), [[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]])
    assert [c.indices for c in out.cells] == [(0, 1, 2), (1, 3, 2)]
    np.testing.assert_allclose(out.cell_data["id"], [10, 20])


def test_clean_drops_degenerate_cells_and_orphans():
    mesh = _soup()
    mesh.set_points(np.vstack([mesh.xyz(), [[5, 5, 5]]]))
    mesh.add_cell(CellKind.TRIANGLE, (1, 3, 2))  # 1 and 3 coincide
    mesh.cell_data["id"] = np.array([10, 20, 30], dtype=np.float32)
    out = clean(mesh)
    assert out.cell_count == 2
    assert out.point_count == 4
    np.testing.assert_allclose(out.cell_data["id"], [10, 20])


def test_clean_with_tolerance():
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1.0001, 0, 0], [1, 1, 0]])
    mesh.add_cell(CellKind.TRIANGLE, (0, 1, 2))
    mesh.add_cell(CellKind.TRIANGLE, (3, 4, 2))
    assert clean(mesh).point_count == 5
    assert clean(mesh, tolerance=0.01).point_count == 4


def test_clean_keeps_point_clouds():
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [1, 0, 0], [0, 0, 0]])
    assert clean(mesh).point_count == 2


def test_triangulate_quads_polygons_and_strips(square_mesh):
    square_mesh.set_points(np.vstack([square_mesh.xyz(), [[2, 0, 0], [2, 1, 0], [3, 0, 0]]]))
    square_mesh.add_cell(CellKind.POLYGON, (1, 4, 6, 5, 2))
    square_mesh.add_cell(CellKind.TRIANGLE_STRIP, (0, 1, 3, 2))
    square_mesh.add_cell(CellKind.LINE, (0, 4))
    square_mesh.cell_data["tag"] = np.array([1, 2, 3, 4], dtype=np.float32)
    out = triangulate(square_mesh)
    kinds = [c.kind for c in out.cells]
    assert kinds.count(CellKind.TRIANGLE) == 2 + 3 + 2
    assert kinds.count(CellKind.LINE) == 1
    np.testing.assert_allclose(out.cell_data["tag"], [1, 1, 2, 2, 2, 3, 3, 4])
    assert out.cells[5].indices == (0, 1, 3)
    assert out.cells[6].indices == (3, 1, 2)


def test_smooth_moves_interior_point_only_towards_neighbours():
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [2, 0, 0], [1, 2, 0], [1, 0.5, 1]])
    for tri in ((0, 1, 3), (1, 2, 3), (2, 0, 3)):
        mesh.add_cell(CellKind.TRIANGLE, tri)
    out = smooth(mesh, iterations=1, relaxation=0.5)
    # apex neighbours average to (1, 2/3, 0)
    np.testing.assert_allclose(out.xyz()[3], [1, (0.5 + 2 / 3) / 2, 0.5], atol=1e-6)
    assert out.cell_count == 3


def test_smooth_zero_iterations_is_identity(square_mesh):
    out = smooth(square_mesh, iterations=0, relaxation=0.5)
    np.testing.assert_array_equal(out.points, square_mesh.points)


def test_normals(square_mesh):
    out = compute_normals(square_mesh)
    np.testing.assert_allclose(out.cell_data["Normals"], [0, 0, 1])
    np.testing.assert_allclose(out.point_data["Normals"].reshape(-1, 3), np.tile([0, 0, 1], (4, 1)))


def test_extract_surface_of_two_tetras():
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1], [0, 0, -1]])
    mesh.add_cell(CellKind.TETRA, (0, 1, 2, 3))
    mesh.add_cell(CellKind.TETRA, (0, 2, 1, 4))
    out = extract_surface(mesh)
    # the shared face (0, 1, 2) is interior
    assert out.cell_count == 6
    assert all(c.kind == CellKind.TRIANGLE for c in out.cells)
    assert frozenset((0, 1, 2)) not in {frozenset(c.indices) for c in out.cells}


def test_engine_default_options_clean(ascii_stl):
    mesh = read_stl(ascii_stl).mesh
    out = NumpyEngine().process(mesh, ProcessingOptions())
    assert out.point_count == 3
    assert out.metadata.point_count == 3


def test_engine_pipeline_order(square_mesh):
    options = ProcessingOptions(enable_triangulation=True, enable_normals=True)
    out = NumpyEngine().process(square_mesh, options)
    assert out.metadata.cell_type_count == {CellKind.TRIANGLE: 2}
    assert out.cell_data["Normals"].size == 6


def test_engine_volume_safe_mode(tetra_mesh):
    options = ProcessingOptions(enable_smoothing=True, smoothing_iterations=5, smoothing_relaxation=1.0)
    out = NumpyEngine().process(tetra_mesh, options)
    np.testing.assert_array_equal(out.points, tetra_mesh.points)
    assert out is not tetra_mesh


def test_engine_rejects_bad_options(square_mesh):
    with pytest.raises(MeshError) as info:
        NumpyEngine().process(square_mesh, ProcessingOptions(smoothing_relaxation=1.5))
    assert info.value.kind == ErrorKind.PARAM_INVALID


def test_engine_empty_result():
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [0, 0, 0], [0, 0, 0]])
    mesh.add_cell(CellKind.TRIANGLE, (0, 1, 2))
    with pytest.raises(MeshError) as info:
        NumpyEngine().process(mesh, ProcessingOptions())
    assert info.value.kind == ErrorKind.MESH_EMPTY


def test_decimate_needs_pyvista(square_mesh):
    pytest.importorskip("pyvista")
    options = ProcessingOptions(enable_triangulation=True, enable_decimation=True, decimation_target=0.5)
    out = NumpyEngine().process(square_mesh, options)
    assert out.cell_count <= 2
