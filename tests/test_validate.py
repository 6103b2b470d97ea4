# -*- coding: utf-8 -*-
# Meshport/tests/test_validate.py

import numpy as np

from meshport.checks import compute_bounds, validate_mesh
from meshport.core.types import Cell, CellKind, MeshData


def test_valid_mesh_and_bounds(square_mesh):
    report = validate_mesh(square_mesh)
    assert report.ok
    assert report.message == ""
    assert report.bounds == (0.0, 1.0, 0.0, 1.0, 0.0, 0.0)


def test_empty_mesh():
    report = validate_mesh(MeshData())
    assert not report
    assert report.message == "Mesh data is empty"
    assert compute_bounds(MeshData()) is None


def test_bad_coordinate_length():
    mesh = MeshData(points=np.zeros(7, dtype=np.float32))
    report = validate_mesh(mesh)
    assert report.message == "Point data length is not a multiple of 3"
    assert report.bounds is None


def test_index_out_of_range(square_mesh):
    square_mesh.cells.append(Cell(CellKind.TRIANGLE, (0, 1, 9)))
    report = validate_mesh(square_mesh)
    assert not report.ok
    assert report.message == "Cell 1 contains invalid point index: 9"


def test_wrong_arity(square_mesh):
    square_mesh.cells[0] = Cell(CellKind.TRIANGLE, (0, 1, 2, 3))
    assert validate_mesh(square_mesh).message == "Cell 0 of kind TRIANGLE has 4 point indices"


def test_attribute_lengths(square_mesh):
    square_mesh.point_data["bad"] = np.ones(5, dtype=np.float32)
    assert "Point attribute 'bad'" in validate_mesh(square_mesh).message
    del square_mesh.point_data["bad"]
    square_mesh.add_cell(CellKind.TRIANGLE, (0, 1, 2))
    square_mesh.cell_data["c"] = np.ones(3, dtype=np.float32)
    assert validate_mesh(square_mesh).message == "Cell attribute 'c' data length does not match cell count"


def test_validation_does_not_mutate(square_mesh):
    before = square_mesh.points.copy()
    validate_mesh(square_mesh)
    np.testing.assert_array_equal(square_mesh.points, before)


def test_malformed_object_is_reported():
    report = validate_mesh(object())
    assert not report.ok
    assert report.message.startswith("Malformed mesh object")
