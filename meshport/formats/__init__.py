# -*- coding: utf-8 -*-
# Meshport/meshport/formats/__init__.py

"""
Format tags and detection.

Exports
-------
- FormatTag, format_extension, format_name, parse_format_name, is_surface_format,
  supported_formats, supported_format_names
- detect, detect_from_extension, is_format
"""

from .tags import (
    FormatTag,
    SURFACE_FORMATS,
    format_extension,
    format_name,
    parse_format_name,
    is_surface_format,
    supported_formats,
    supported_format_names,
)
from .detect import detect, detect_from_extension, is_format, is_openfoam_case

__all__ = [
    "FormatTag",
    "SURFACE_FORMATS",
    "format_extension",
    "format_name",
    "parse_format_name",
    "is_surface_format",
    "supported_formats",
    "supported_format_names",
    "detect",
    "detect_from_extension",
    "is_format",
    "is_openfoam_case",
]
