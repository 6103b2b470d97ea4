# -*- coding: utf-8 -*-
# Meshport/tests/conftest.py

"""
Shared fixtures: tiny mesh files written into pytest's tmp_path.
"""

import struct

import numpy as np
import pytest

from meshport.core.types import CellKind, MeshData


ASCII_STL_ONE_FACET = """solid one
  facet normal 0 0 1
    outer loop
      vertex 0 0 0
      vertex 1 0 0
      vertex 0 1 0
    endloop
  endfacet
endsolid one
"""

OBJ_QUAD = """# unit square
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
vn 0 0 1
f 1//1 2//1 3//1 4//1
"""

PLY_ASCII_TETRA_SURFACE = """ply
format ascii 1.0
comment four triangles
element vertex 4
property float x
property float y
property float z
property float quality
element face 4
property list uchar int vertex_indices
end_header
0 0 0 0.5
1 0 0 0.25
0 1 0 1
0 0 1 0
3 0 2 1
3 0 1 3
3 1 2 3
3 2 0 3
"""

OFF_TWO_QUADS = """OFF
# two quads sharing an edge
6 2 0
0 0 0
1 0 0
1 1 0
0 1 0
2 0 0
2 1 0
4 0 1 2 3
4 1 4 5 2
"""


def binary_stl_bytes(triangles, header=b"test header"):
    """Pack (T,3,3) vertex coordinates into a binary STL payload."""
    tris = np.asarray(triangles, dtype="<f4").reshape(-1, 3, 3)
    out = [header.ljust(80, b" ")[:80], struct.pack("<I", len(tris))]
    for tri in tris:
        out.append(np.zeros(3, dtype="<f4").tobytes())
        out.append(tri.tobytes())
        out.append(struct.pack("<H", 0))
    return b"".join(out)


TWO_TRIANGLES = [
    [[0, 0, 0], [1, 0, 0], [0, 1, 0]],
    [[1, 0, 0], [1, 1, 0], [0, 1, 0]],
]


@pytest.fixture
def write_text(tmp_path):
    def _write(name, content):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def write_bytes(tmp_path):
    def _write(name, content):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)
    return _write


@pytest.fixture
def ascii_stl(write_text):
    return write_text("one.stl", ASCII_STL_ONE_FACET)


@pytest.fixture
def binary_stl(write_bytes):
    return write_bytes("two.stl", binary_stl_bytes(TWO_TRIANGLES))


@pytest.fixture
def obj_quad(write_text):
    return write_text("quad.obj", OBJ_QUAD)


@pytest.fixture
def ply_ascii(write_text):
    return write_text("tet.ply", PLY_ASCII_TETRA_SURFACE)


@pytest.fixture
def off_file(write_text):
    return write_text("quads.off", OFF_TWO_QUADS)


@pytest.fixture
def square_mesh():
    """Unit square as a single quad (4 points)."""
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]])
    mesh.add_cell(CellKind.QUAD, (0, 1, 2, 3))
    mesh.recompute_metadata()
    return mesh


@pytest.fixture
def tetra_mesh():
    """Single tetrahedron (volumetric)."""
    mesh = MeshData()
    mesh.set_points([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]])
    mesh.add_cell(CellKind.TETRA, (0, 1, 2, 3))
    mesh.recompute_metadata()
    return mesh
