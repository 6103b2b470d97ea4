# -*- coding: utf-8 -*-
# Meshport/meshport/readers/dispatcher.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Route a format tag to its reader so callers never branch on formats themselves.

Main Tasks:
-----------
    1. Map every FormatTag to the reader that handles it (native or meshio-delegated).
    2. `read_mesh(path, fmt=None)`: existence check, detection when no tag is given,
       dispatch, and an Outcome for every path through.
"""

import logging
import os
from typing import Callable, Optional

from ..core.errors import ErrorKind, MeshError, Outcome, guarded
from ..formats.detect import detect
from ..formats.tags import FormatTag, format_name
from .stl_reader import read_stl
from .obj_reader import read_obj
from .ply_reader import read_ply
from .off_reader import read_off
from .external_reader import read_external

logger = logging.getLogger(__name__)


def get_reader_function(tag: FormatTag) -> Callable[[str], Outcome]:
    """
    Route a format tag to its reader.

    Raises
    ------
    MeshError
        FORMAT_UNSUPPORTED if no reader handles `tag`.
    """
    tag = FormatTag(tag)
    reader_map = {
        FormatTag.STL_ASCII: lambda p: read_stl(p, tag),
        FormatTag.STL_BINARY: lambda p: read_stl(p, tag),
        FormatTag.OBJ: read_obj,
        FormatTag.PLY_ASCII: read_ply,
        FormatTag.PLY_BINARY: read_ply,
        FormatTag.OFF: read_off,
        FormatTag.VTK_LEGACY: lambda p: read_external(p, tag),
        FormatTag.VTK_XML: lambda p: read_external(p, tag),
        FormatTag.GMSH_V2: lambda p: read_external(p, tag),
        FormatTag.GMSH_V4: lambda p: read_external(p, tag),
        FormatTag.SU2: lambda p: read_external(p, tag),
        FormatTag.CGNS: lambda p: read_external(p, tag),
        FormatTag.OPENFOAM: lambda p: read_external(p, tag),
    }
    reader = reader_map.get(tag)
    if reader is None:
        raise MeshError(ErrorKind.FORMAT_UNSUPPORTED, "Unsupported source format: {}".format(format_name(tag)))
    return reader


@guarded(ErrorKind.READ_FAILED)
def read_mesh(path, fmt: Optional[FormatTag] = None):
    """
    Parse any supported file into a MeshData.

    Parameters
    ----------
    path : str or os.PathLike
        Source file (or OpenFOAM case directory).
    fmt : FormatTag, optional
        Explicit format; detected from the path when None.

    Returns
    -------
    Outcome
        SUCCESS with `.mesh` set, or the first failure's kind and message.
    """
    path = os.fspath(path)
    if not os.path.exists(path):
        raise MeshError(ErrorKind.FILE_NOT_EXIST, "Source file does not exist: {}".format(path))
    tag = detect(path) if fmt is None else FormatTag(fmt)
    if tag == FormatTag.UNKNOWN:
        raise MeshError(ErrorKind.FORMAT_UNSUPPORTED, "Unrecognized mesh format: {}".format(path))
    logger.debug("[read_mesh] %s as %s", path, format_name(tag))
    return get_reader_function(tag)(path)
