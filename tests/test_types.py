# -*- coding: utf-8 -*-
# Meshport/tests/test_types.py

import numpy as np

from meshport.core.errors import ErrorKind, MeshError, Outcome, guarded
from meshport.core.types import CellKind, MeshData, MeshMetadata, MeshType, face_kind
from meshport.formats.tags import FormatTag


def test_face_kind_by_vertex_count():
    assert face_kind(2) is None
    assert face_kind(3) == CellKind.TRIANGLE
    assert face_kind(4) == CellKind.QUAD
    assert face_kind(7) == CellKind.POLYGON


def test_empty_mesh_metadata():
    mesh = MeshData()
    assert mesh.is_empty()
    meta = mesh.recompute_metadata()
    assert meta.point_count == 0
    assert meta.cell_count == 0
    assert meta.mesh_type == MeshType.UNKNOWN


def test_metadata_histogram_and_type(square_mesh, tetra_mesh):
    assert square_mesh.metadata.cell_type_count == {CellKind.QUAD: 1}
    assert square_mesh.metadata.mesh_type == MeshType.SURFACE_MESH
    assert tetra_mesh.metadata.mesh_type == MeshType.VOLUME_MESH
    assert tetra_mesh.has_volume_cells()


def test_points_are_flat_float32(square_mesh):
    assert square_mesh.points.dtype == np.float32
    assert square_mesh.points.shape == (12,)
    assert square_mesh.xyz().shape == (4, 3)


def test_clear_resets_everything(square_mesh):
    square_mesh.point_data["t"] = np.ones(4, dtype=np.float32)
    square_mesh.source_format = FormatTag.OBJ
    square_mesh.clear()
    assert square_mesh.is_empty()
    assert square_mesh.point_data == {}
    assert square_mesh.source_format == FormatTag.UNKNOWN
    assert square_mesh.metadata == MeshMetadata()


def test_copy_is_independent(square_mesh):
    dup = square_mesh.copy()
    dup.points[0] = 42.0
    dup.add_cell(CellKind.TRIANGLE, (0, 1, 2))
    assert square_mesh.points[0] == 0.0
    assert square_mesh.cell_count == 1


def test_mesh_error_string_has_context():
    err = MeshError(ErrorKind.READ_FAILED, "bad vertex", {"stage": "vertex", "line": 3})
    assert str(err) == "bad vertex | line=3, stage='vertex'"
    assert err.kind == ErrorKind.READ_FAILED


def test_guarded_folds_exceptions_into_outcomes():
    @guarded(ErrorKind.WRITE_FAILED)
    def boom():
        raise RuntimeError("disk on fire")

    @guarded(ErrorKind.READ_FAILED)
    def typed():
        raise MeshError(ErrorKind.MESH_EMPTY, "nothing")

    @guarded(ErrorKind.READ_FAILED)
    def fine():
        return "mesh"

    out = boom()
    assert out.kind == ErrorKind.WRITE_FAILED
    assert "disk on fire" in out.message
    assert typed().kind == ErrorKind.MESH_EMPTY
    ok = fine()
    assert ok.ok and ok.mesh == "mesh"


def test_guarded_passes_outcomes_through():
    @guarded(ErrorKind.READ_FAILED)
    def inner():
        return Outcome.failure(ErrorKind.PARAM_INVALID, "nope")

    assert inner().kind == ErrorKind.PARAM_INVALID
    assert not inner()
