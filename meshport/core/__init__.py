# -*- coding: utf-8 -*-
# Meshport/meshport/core/__init__.py

"""
Project: Meshport
Date: 10/19/2026

Core Subpackage:
----------------
Shared building blocks used by every other subpackage.

Modules:
--------
- types:    MeshData, Cell, CellKind, MeshType and the derived MeshMetadata.
- errors:   ErrorKind enumeration, MeshError exception and the Outcome result record.
- options:  ProcessingOptions / WriteOptions configuration records.
"""

from .types import CellKind, MeshType, Cell, MeshMetadata, MeshData, VOLUME_KINDS
from .errors import ErrorKind, MeshError, Outcome, guarded
from .options import ProcessingOptions, WriteOptions

__all__ = [
    "CellKind", "MeshType", "Cell", "MeshMetadata", "MeshData", "VOLUME_KINDS",
    "ErrorKind", "MeshError", "Outcome", "guarded",
    "ProcessingOptions", "WriteOptions",
]
