# -*- coding: utf-8 -*-
# Meshport/meshport/processing/__init__.py

"""
Project: Meshport
Date: 10/19/2026

Processing Subpackage:
----------------------
Optional geometry pass between parsing and writing.

Modules:
--------
- base:     GeometryEngine abstract interface.
- engine:   NumpyEngine and the individual passes (clean, triangulate, decimate, smooth, normals).
- surface:  boundary extraction for volumetric meshes.
"""

from .base import GeometryEngine
from .engine import NumpyEngine, clean, triangulate, decimate, smooth, compute_normals
from .surface import extract_surface

__all__ = ["GeometryEngine", "NumpyEngine", "clean", "triangulate", "decimate", "smooth",
           "compute_normals", "extract_surface"]
