# -*- coding: utf-8 -*-
# Meshport/meshport/readers/__init__.py

"""
Project: Meshport
Date: 10/19/2026

Readers Subpackage:
-------------------
One parser per on-disk format. Every public `read_*` returns an Outcome; internal
`load_*` functions raise MeshError.

Modules:
--------
- stl_reader:       binary and ASCII STL.
- obj_reader:       Wavefront OBJ polygon soups.
- ply_reader:       Stanford PLY (ascii / binary LE / binary BE).
- off_reader:       OFF indexed polyhedra.
- external_reader:  VTK, Gmsh, SU2 and CGNS through meshio.
- dispatcher:       tag → reader routing and `read_mesh`.
"""

from .stl_reader import read_stl
from .obj_reader import read_obj
from .ply_reader import read_ply
from .off_reader import read_off
from .external_reader import read_external
from .dispatcher import read_mesh, get_reader_function

__all__ = ["read_stl", "read_obj", "read_ply", "read_off", "read_external",
           "read_mesh", "get_reader_function"]
