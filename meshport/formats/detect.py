# -*- coding: utf-8 -*-
# Meshport/meshport/formats/detect.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Resolve a path to a `FormatTag` without side effects. Extension lookup is tried first;
suffixes shared by several encodings (and unknown suffixes) fall back to a bounded
prefix probe of the file contents.

Main Tasks:
-----------
    1) Fast path: unambiguous extensions map directly to a tag (works for paths that do
       not exist yet, which output-path validation relies on).
    2) Ambiguous extensions (.stl, .ply, .msh, .vtk) read at most PROBE_BYTES bytes and
       look for magic tokens (`solid`, `format ascii`, `$MeshFormat` version, `# vtk`).
    3) Directories holding a `polyMesh` sub-directory are OpenFOAM cases.
    4) Anything else is UNKNOWN; empty/short files and unreadable paths never raise.

Notes:
------
- Files are opened read-only; nothing is written or cached.
- A binary STL whose 80-byte header starts with "solid" is still recognized as binary
  when the file size equals exactly 84 + 50*N for its declared triangle count N > 0.
"""

import os
import struct
from typing import Callable, Dict

from .tags import FormatTag

PROBE_BYTES = 128

STL_HEADER_BYTES = 80
STL_RECORD_BYTES = 50

_UNAMBIGUOUS: Dict[str, FormatTag] = {
    ".vtu": FormatTag.VTK_XML,
    ".vtp": FormatTag.VTK_XML,
    ".vti": FormatTag.VTK_XML,
    ".vts": FormatTag.VTK_XML,
    ".cgns": FormatTag.CGNS,
    ".su2": FormatTag.SU2,
    ".obj": FormatTag.OBJ,
    ".off": FormatTag.OFF,
}

# Default variant when the file cannot be probed (e.g. it does not exist yet).
_AMBIGUOUS_DEFAULT: Dict[str, FormatTag] = {
    ".stl": FormatTag.STL_BINARY,
    ".ply": FormatTag.PLY_ASCII,
    ".msh": FormatTag.GMSH_V4,
    ".vtk": FormatTag.VTK_LEGACY,
}


def _extension(path: str) -> str:
    return os.path.splitext(path)[1].lower()


def _read_prefix(path: str, n: int = PROBE_BYTES) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read(n)
    except OSError:
        return b""


def _text_lines(prefix: bytes):
    return prefix.decode("latin-1").splitlines()


def is_openfoam_case(path: str) -> bool:
    return os.path.isdir(path) and (
        os.path.isdir(os.path.join(path, "polyMesh"))
        or os.path.isdir(os.path.join(path, "constant", "polyMesh"))
    )


# ---------------------------------------------------------------------------
# Per-family probes: (path, prefix) -> FormatTag
# ---------------------------------------------------------------------------
def _starts_with_solid(prefix: bytes) -> bool:
    return prefix.lstrip()[:5].lower() == b"solid"


def _binary_stl_size_matches(path: str, prefix: bytes) -> bool:
    if len(prefix) < STL_HEADER_BYTES + 4:
        return False
    (count,) = struct.unpack_from("<I", prefix, STL_HEADER_BYTES)
    if count == 0:
        return False
    try:
        size = os.path.getsize(path)
    except OSError:
        return False
    return size == STL_HEADER_BYTES + 4 + STL_RECORD_BYTES * count


def _probe_stl(path: str, prefix: bytes) -> FormatTag:
    if not prefix:
        return FormatTag.UNKNOWN
    if _starts_with_solid(prefix):
        if _binary_stl_size_matches(path, prefix):
            return FormatTag.STL_BINARY
        return FormatTag.STL_ASCII
    if len(prefix) >= STL_HEADER_BYTES + 4:
        return FormatTag.STL_BINARY
    return FormatTag.UNKNOWN


def _probe_ply(path: str, prefix: bytes) -> FormatTag:
    lines = _text_lines(prefix)
    if not lines or lines[0].strip() != "ply":
        return FormatTag.UNKNOWN
    for line in lines[1:]:
        tokens = line.split()
        if len(tokens) >= 2 and tokens[0] == "format":
            if tokens[1] == "ascii":
                return FormatTag.PLY_ASCII
            if tokens[1].startswith("binary_"):
                return FormatTag.PLY_BINARY
            return FormatTag.UNKNOWN
    return FormatTag.UNKNOWN


def gmsh_version_from_prefix(prefix: bytes) -> str:
    """Version token following `$MeshFormat` ('4.1', '2.2', ...) or '' if absent."""
    lines = _text_lines(prefix)
    for i, line in enumerate(lines):
        if line.strip() == "$MeshFormat" and i + 1 < len(lines):
            tokens = lines[i + 1].split()
            return tokens[0] if tokens else ""
    return ""


def _probe_msh(path: str, prefix: bytes) -> FormatTag:
    version = gmsh_version_from_prefix(prefix)
    if version.startswith("4"):
        return FormatTag.GMSH_V4
    if version.startswith("2"):
        return FormatTag.GMSH_V2
    return FormatTag.UNKNOWN


def _probe_vtk(path: str, prefix: bytes) -> FormatTag:
    if prefix.lstrip().startswith(b"# vtk"):
        return FormatTag.VTK_LEGACY
    if b"<VTKFile" in prefix:
        return FormatTag.VTK_XML
    return FormatTag.UNKNOWN


def _probe_any(path: str, prefix: bytes) -> FormatTag:
    """Header sniffing for paths whose extension says nothing."""
    if not prefix:
        return FormatTag.UNKNOWN
    tag = _probe_vtk(path, prefix)
    if tag != FormatTag.UNKNOWN:
        return tag
    if b"$MeshFormat" in prefix:
        return _probe_msh(path, prefix)
    if _starts_with_solid(prefix):
        return _probe_stl(path, prefix)
    if b"\x00" in prefix:
        return FormatTag.UNKNOWN
    lines = [ln.strip() for ln in _text_lines(prefix)]
    first = lines[0].split() if lines and lines[0] else []
    if first and first[0] == "ply":
        return _probe_ply(path, prefix)
    if first and first[0] == "OFF":
        return FormatTag.OFF
    if any(ln.startswith("NDIME") for ln in lines):
        return FormatTag.SU2
    if any(ln.startswith("v ") for ln in lines):
        return FormatTag.OBJ
    return FormatTag.UNKNOWN


_PROBES: Dict[str, Callable[[str, bytes], FormatTag]] = {
    ".stl": _probe_stl,
    ".ply": _probe_ply,
    ".msh": _probe_msh,
    ".vtk": _probe_vtk,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def detect_from_extension(path) -> FormatTag:
    """
    Extension-only detection (never touches the filesystem).

    Ambiguous suffixes map to their default variant: .stl → binary, .ply → ASCII,
    .msh → Gmsh v4, .vtk → legacy.
    """
    ext = _extension(os.fspath(path))
    tag = _UNAMBIGUOUS.get(ext)
    if tag is not None:
        return tag
    return _AMBIGUOUS_DEFAULT.get(ext, FormatTag.UNKNOWN)


def detect(path) -> FormatTag:
    """
    Detect the format of `path` (extension first, bounded prefix probe second).

    Parameters
    ----------
    path : str or os.PathLike
        File or directory path. It does not have to exist.

    Returns
    -------
    FormatTag
        The resolved tag, or FormatTag.UNKNOWN. Never raises.
    """
    try:
        p = os.fspath(path)
        if os.path.isdir(p):
            return FormatTag.OPENFOAM if is_openfoam_case(p) else FormatTag.UNKNOWN

        ext = _extension(p)
        tag = _UNAMBIGUOUS.get(ext)
        if tag is not None:
            return tag

        exists = os.path.isfile(p)
        if ext in _PROBES:
            if not exists:
                return _AMBIGUOUS_DEFAULT[ext]
            return _PROBES[ext](p, _read_prefix(p))

        if not exists:
            return FormatTag.UNKNOWN
        return _probe_any(p, _read_prefix(p))
    except (OSError, TypeError, ValueError):
        return FormatTag.UNKNOWN


def is_format(path, tag: FormatTag) -> bool:
    return detect(path) == FormatTag(tag)
