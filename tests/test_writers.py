# -*- coding: utf-8 -*-
# Meshport/tests/test_writers.py

import os

import numpy as np
import pytest

from meshport.core.errors import ErrorKind
from meshport.core.options import WriteOptions
from meshport.core.types import CellKind, MeshData
from meshport.formats.detect import detect
from meshport.formats.tags import FormatTag
from meshport.readers import read_mesh
from meshport.writers import validate_output_path, write_mesh


def _histogram(mesh):
    return mesh.recompute_metadata().cell_type_count


@pytest.fixture
def mixed_mesh():
    """Two triangles and a pentagon over seven points."""
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
                     [2, 0, 0], [3, 1, 0], [2, 2, 0]])
    mesh.add_cell(CellKind.TRIANGLE, (0, 1, 2))
    mesh.add_cell(CellKind.TRIANGLE, (0, 2, 3))
    mesh.add_cell(CellKind.POLYGON, (1, 4, 5, 6, 2))
    mesh.recompute_metadata()
    return mesh


@pytest.mark.parametrize("name", ["out.obj", "out.off", "out.ply"])
def test_polygon_formats_round_trip(tmp_path, mixed_mesh, name):
    path = str(tmp_path / name)
    assert write_mesh(mixed_mesh, path).ok
    back = read_mesh(path)
    assert back.ok, back.message
    assert back.mesh.point_count == mixed_mesh.point_count
    assert back.mesh.cell_count == mixed_mesh.cell_count
    assert _histogram(back.mesh) == _histogram(mixed_mesh)
    np.testing.assert_allclose(back.mesh.xyz(), mixed_mesh.xyz(), atol=1e-5)


def test_ply_binary_round_trip_keeps_attributes(tmp_path, mixed_mesh):
    mixed_mesh.point_data["temperature"] = np.arange(7, dtype=np.float32)
    path = str(tmp_path / "bin.ply")
    assert write_mesh(mixed_mesh, path, FormatTag.PLY_BINARY).ok
    assert detect(path) == FormatTag.PLY_BINARY
    back = read_mesh(path).mesh
    np.testing.assert_allclose(back.point_data["temperature"], np.arange(7))
    assert _histogram(back) == _histogram(mixed_mesh)


def test_ply_extension_follows_binary_option(tmp_path, mixed_mesh):
    binary_path = str(tmp_path / "a.ply")
    ascii_path = str(tmp_path / "b.ply")
    assert write_mesh(mixed_mesh, binary_path).ok
    assert write_mesh(mixed_mesh, ascii_path, options=WriteOptions(binary=False)).ok
    assert detect(binary_path) == FormatTag.PLY_BINARY
    assert detect(ascii_path) == FormatTag.PLY_ASCII


def test_ply_lines_round_trip_as_edges(tmp_path):
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [1, 0, 0], [1, 1, 0]])
    mesh.add_cell(CellKind.LINE, (0, 1))
    mesh.add_cell(CellKind.LINE, (1, 2))
    path = str(tmp_path / "edges.ply")
    assert write_mesh(mesh, path).ok
    back = read_mesh(path).mesh
    assert [c.indices for c in back.cells] == [(0, 1), (1, 2)]


@pytest.mark.parametrize("binary", [True, False])
def test_stl_triangulates_faces(tmp_path, mixed_mesh, binary):
    path = str(tmp_path / "out.stl")
    out = write_mesh(mixed_mesh, path, options=WriteOptions(binary=binary))
    assert out.ok, out.message
    assert detect(path) == (FormatTag.STL_BINARY if binary else FormatTag.STL_ASCII)
    back = read_mesh(path).mesh
    # 2 triangles + pentagon fan of 3
    assert back.cell_count == 5
    assert back.point_count == 15


def test_stl_ascii_tag_and_solid_name(tmp_path, square_mesh):
    path = str(tmp_path / "named.stl")
    assert write_mesh(square_mesh, path, FormatTag.STL_ASCII, WriteOptions(solid_name="part")).ok
    with open(path, encoding="utf-8") as f:
        text = f.read()
    assert text.startswith("solid part\n")
    assert text.rstrip().endswith("endsolid part")


def test_binary_stl_header_does_not_start_with_solid(tmp_path, square_mesh):
    path = str(tmp_path / "b.stl")
    assert write_mesh(square_mesh, path).ok
    with open(path, "rb") as f:
        assert not f.read(5).lower().startswith(b"solid")
    assert os.path.getsize(path) == 84 + 50 * 2


def test_ascii_precision(tmp_path):
    mesh = MeshData()
    mesh.set_points([[0.123456789, 0, 0], [1, 0, 0], [0, 1, 0]])
    mesh.add_cell(CellKind.TRIANGLE, (0, 1, 2))
    path = str(tmp_path / "p.obj")
    assert write_mesh(mesh, path, options=WriteOptions(precision=3)).ok
    with open(path, encoding="utf-8") as f:
        assert "v 0.123 0 0" in f.read()


def test_empty_mesh_is_refused(tmp_path):
    out = write_mesh(MeshData(), str(tmp_path / "e.obj"))
    assert out.kind == ErrorKind.MESH_EMPTY


def test_stl_without_faces_is_empty(tmp_path):
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [1, 0, 0]])
    mesh.add_cell(CellKind.LINE, (0, 1))
    out = write_mesh(mesh, str(tmp_path / "lines.stl"))
    assert out.kind == ErrorKind.MESH_EMPTY


def test_invalid_options(tmp_path, square_mesh):
    out = write_mesh(square_mesh, str(tmp_path / "x.obj"), options=WriteOptions(precision=0))
    assert out.kind == ErrorKind.PARAM_INVALID


def test_volume_mesh_to_surface_format(tmp_path, tetra_mesh):
    path = str(tmp_path / "tet.obj")
    refused = write_mesh(tetra_mesh, path)
    assert refused.kind == ErrorKind.FORMAT_UNSUPPORTED
    out = write_mesh(tetra_mesh, path, options=WriteOptions(surface_only=True))
    assert out.ok, out.message
    back = read_mesh(path).mesh
    assert _histogram(back) == {CellKind.TRIANGLE: 4}


def test_missing_parent_directory_is_created(tmp_path, square_mesh):
    path = tmp_path / "deep" / "er" / "sq.off"
    assert write_mesh(square_mesh, str(path)).ok
    assert path.is_file()


def test_unknown_extension(tmp_path, square_mesh):
    out = write_mesh(square_mesh, str(tmp_path / "sq.xyz"))
    assert out.kind == ErrorKind.FORMAT_UNSUPPORTED
    assert "Supported formats" in out.message


def test_validate_output_path():
    assert validate_output_path("a.vtu") == (True, "")
    ok, guidance = validate_output_path("a.step")
    assert not ok
    assert "OFF (.off)" in guidance


def test_openfoam_write_not_implemented(tmp_path, square_mesh):
    out = write_mesh(square_mesh, str(tmp_path / "case"), FormatTag.OPENFOAM)
    assert out.kind == ErrorKind.FORMAT_VERSION_INVALID


def test_write_does_not_modify_mesh(tmp_path, mixed_mesh):
    before = (mixed_mesh.points.copy(), list(mixed_mesh.cells))
    write_mesh(mixed_mesh, str(tmp_path / "m.stl"))
    np.testing.assert_array_equal(mixed_mesh.points, before[0])
    assert mixed_mesh.cells == before[1]
