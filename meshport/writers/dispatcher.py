# -*- coding: utf-8 -*-
# Meshport/meshport/writers/dispatcher.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Route a target format to its writer and expose `write_mesh`, the single entry point the
conversion pipeline uses.

Notes:
------
- When no explicit format is given, the target is derived from the output extension and
  the encoding (binary/ASCII) is left to `WriteOptions.binary`.
"""

import logging
import os
from typing import Optional

from ..core.errors import ErrorKind, MeshError, guarded
from ..core.options import WriteOptions
from ..core.types import MeshData
from ..formats.detect import detect_from_extension
from ..formats.tags import FormatTag, format_name, supported_format_names
from .stl_writer import write_stl
from .obj_writer import write_obj
from .ply_writer import write_ply
from .off_writer import write_off
from .external_writer import write_external

logger = logging.getLogger(__name__)


def validate_output_path(path) -> tuple:
    """
    Check that the extension of `path` names a writable format.

    Returns
    -------
    (bool, str)
        (True, "") when writable, otherwise (False, guidance listing supported formats).
    """
    tag = detect_from_extension(path)
    if tag == FormatTag.UNKNOWN:
        return False, "Unsupported output format: {}\nSupported formats:\n  {}".format(
            os.fspath(path), "\n  ".join(supported_format_names()))
    return True, ""


@guarded(ErrorKind.WRITE_FAILED)
def write_mesh(mesh: MeshData, path, fmt: Optional[FormatTag] = None,
               options: Optional[WriteOptions] = None):
    """
    Serialize `mesh` to `path`.

    Parameters
    ----------
    mesh : MeshData
        Mesh to write (not modified).
    path : str or os.PathLike
        Output file. Missing parent directories are created.
    fmt : FormatTag, optional
        Explicit target; derived from the extension when None.
    options : WriteOptions, optional
        Encoding options; defaults when None.

    Returns
    -------
    Outcome
    """
    path = os.fspath(path)
    options = options or WriteOptions()
    explicit = fmt is not None
    tag = FormatTag(fmt) if explicit else detect_from_extension(path)
    if tag == FormatTag.UNKNOWN:
        raise MeshError(ErrorKind.FORMAT_UNSUPPORTED, validate_output_path(path)[1])
    encoding_tag = tag if explicit else None

    logger.debug("[write_mesh] %s as %s", path, format_name(tag))
    if tag in (FormatTag.STL_ASCII, FormatTag.STL_BINARY):
        return write_stl(mesh, path, options, encoding_tag)
    if tag in (FormatTag.PLY_ASCII, FormatTag.PLY_BINARY):
        return write_ply(mesh, path, options, encoding_tag)
    if tag == FormatTag.OBJ:
        return write_obj(mesh, path, options)
    if tag == FormatTag.OFF:
        return write_off(mesh, path, options)
    return write_external(mesh, path, tag, options)
