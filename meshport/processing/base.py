# -*- coding: utf-8 -*-
# Meshport/meshport/processing/base.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Abstract interface for the geometry-processing engine so the conversion pipeline can
run with the built-in numpy engine or any other implementation (e.g. a VTK-backed one)
without changing its calls.

Abstract Classes:
-----------------
- GeometryEngine: cleaning / triangulation / decimation / smoothing / normals pass
  and volumetric boundary extraction.

Notes:
------
- Engines never mutate their input; they return a new MeshData that the pipeline
  substitutes wholesale for the parsed one.
- Engines raise MeshError; the pipeline turns it into an Outcome.
"""

from abc import ABC, abstractmethod

from ..core.options import ProcessingOptions
from ..core.types import MeshData


class GeometryEngine(ABC):
    """
    Abstract base class for geometry-processing engines.
    """

    @abstractmethod
    def process(self, mesh: MeshData, options: ProcessingOptions) -> MeshData:
        """
        Apply the passes enabled in `options`, in the order
        clean → triangulate → decimate → smooth → normals.

        Parameters
        ----------
        mesh : MeshData
            Parsed mesh (left untouched).
        options : ProcessingOptions
            Pass selection and parameters.

        Returns
        -------
        MeshData
            Processed copy with metadata recomputed.
        """
        pass

    @abstractmethod
    def extract_surface(self, mesh: MeshData) -> MeshData:
        """
        Reduce volumetric cells to their boundary faces.

        Parameters
        ----------
        mesh : MeshData
            Mesh that may contain tetra/hexahedron/wedge/pyramid cells.

        Returns
        -------
        MeshData
            Surface-only copy (point data kept, cell data dropped).
        """
        pass
