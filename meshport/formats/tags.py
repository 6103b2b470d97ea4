# -*- coding: utf-8 -*-
# Meshport/meshport/formats/tags.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Single source of truth for the format tags this package knows about: their stable
integer ids, canonical extensions, human-readable names and CLI spellings.

Main Tasks:
-----------
    1. Define `FormatTag` (stable small-integer enumeration).
    2. Map tags to canonical extensions and display names.
    3. Parse CLI format tokens ("stl", "ply-binary", "msh2", "auto", ...).
"""

from enum import IntEnum
from typing import Dict, List, Optional


class FormatTag(IntEnum):
    UNKNOWN = 0
    # Volume mesh formats
    VTK_LEGACY = 1
    VTK_XML = 2
    CGNS = 3
    GMSH_V2 = 4
    GMSH_V4 = 5
    SU2 = 6
    OPENFOAM = 7
    # Surface mesh formats
    STL_ASCII = 8
    STL_BINARY = 9
    OBJ = 10
    PLY_ASCII = 11
    PLY_BINARY = 12
    OFF = 13


_EXTENSIONS: Dict[FormatTag, str] = {
    FormatTag.VTK_LEGACY: ".vtk",
    FormatTag.VTK_XML: ".vtu",
    FormatTag.CGNS: ".cgns",
    FormatTag.GMSH_V2: ".msh",
    FormatTag.GMSH_V4: ".msh",
    FormatTag.SU2: ".su2",
    FormatTag.OPENFOAM: "",
    FormatTag.STL_ASCII: ".stl",
    FormatTag.STL_BINARY: ".stl",
    FormatTag.OBJ: ".obj",
    FormatTag.PLY_ASCII: ".ply",
    FormatTag.PLY_BINARY: ".ply",
    FormatTag.OFF: ".off",
}

_NAMES: Dict[FormatTag, str] = {
    FormatTag.VTK_LEGACY: "VTK Legacy",
    FormatTag.VTK_XML: "VTK XML",
    FormatTag.CGNS: "CGNS",
    FormatTag.GMSH_V2: "Gmsh v2",
    FormatTag.GMSH_V4: "Gmsh v4",
    FormatTag.SU2: "SU2",
    FormatTag.OPENFOAM: "OpenFOAM",
    FormatTag.STL_ASCII: "STL ASCII",
    FormatTag.STL_BINARY: "STL Binary",
    FormatTag.OBJ: "OBJ",
    FormatTag.PLY_ASCII: "PLY ASCII",
    FormatTag.PLY_BINARY: "PLY Binary",
    FormatTag.OFF: "OFF",
}

_DISPLAY_NAMES: List[str] = [
    "VTK Legacy (.vtk)",
    "VTK XML (.vtu/.vtp/.vti/.vts)",
    "CGNS (.cgns)",
    "Gmsh v2 (.msh)",
    "Gmsh v4 (.msh)",
    "SU2 (.su2)",
    "OpenFOAM (case directory)",
    "STL ASCII (.stl)",
    "STL Binary (.stl)",
    "OBJ (.obj)",
    "PLY ASCII (.ply)",
    "PLY Binary (.ply)",
    "OFF (.off)",
]

_TOKENS: Dict[str, FormatTag] = {
    "stl": FormatTag.STL_BINARY,
    "stl-binary": FormatTag.STL_BINARY,
    "stl-ascii": FormatTag.STL_ASCII,
    "obj": FormatTag.OBJ,
    "ply": FormatTag.PLY_ASCII,
    "ply-ascii": FormatTag.PLY_ASCII,
    "ply-binary": FormatTag.PLY_BINARY,
    "off": FormatTag.OFF,
    "vtk": FormatTag.VTK_LEGACY,
    "vtu": FormatTag.VTK_XML,
    "cgns": FormatTag.CGNS,
    "msh": FormatTag.GMSH_V4,
    "msh2": FormatTag.GMSH_V2,
    "msh4": FormatTag.GMSH_V4,
    "su2": FormatTag.SU2,
    "openfoam": FormatTag.OPENFOAM,
}

SURFACE_FORMATS = frozenset({
    FormatTag.STL_ASCII, FormatTag.STL_BINARY, FormatTag.OBJ,
    FormatTag.PLY_ASCII, FormatTag.PLY_BINARY, FormatTag.OFF,
})


def format_extension(tag: FormatTag) -> str:
    """Canonical extension with dot (e.g. '.vtk'); '' for directory formats and UNKNOWN."""
    return _EXTENSIONS.get(FormatTag(tag), "")


def format_name(tag: FormatTag) -> str:
    return _NAMES.get(FormatTag(tag), "Unknown")


def supported_formats() -> List[FormatTag]:
    return [tag for tag in FormatTag if tag != FormatTag.UNKNOWN]


def supported_format_names() -> List[str]:
    return list(_DISPLAY_NAMES)


def is_surface_format(tag: FormatTag) -> bool:
    return FormatTag(tag) in SURFACE_FORMATS


def parse_format_name(text: str) -> Optional[FormatTag]:
    """
    Map a CLI token to a tag. Returns None for "auto" / empty (caller detects),
    FormatTag.UNKNOWN for anything unrecognized.
    """
    key = (text or "").strip().lower().lstrip(".")
    if key in ("", "auto"):
        return None
    return _TOKENS.get(key, FormatTag.UNKNOWN)
