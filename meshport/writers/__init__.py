# -*- coding: utf-8 -*-
# Meshport/meshport/writers/__init__.py

"""
Project: Meshport
Date: 10/19/2026

Writers Subpackage:
-------------------
Serializers mirroring the reader set. Every public `write_*` returns an Outcome.

Modules:
--------
- stl_writer, obj_writer, ply_writer, off_writer:  native surface writers.
- external_writer:  VTK, Gmsh, SU2 and CGNS through meshio.
- dispatcher:       `write_mesh` and `validate_output_path`.
"""

from .stl_writer import write_stl
from .obj_writer import write_obj
from .ply_writer import write_ply
from .off_writer import write_off
from .external_writer import write_external
from .dispatcher import write_mesh, validate_output_path

__all__ = ["write_stl", "write_obj", "write_ply", "write_off", "write_external",
           "write_mesh", "validate_output_path"]
