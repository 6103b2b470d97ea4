# -*- coding: utf-8 -*-
# Meshport/meshport/checks/__init__.py

"""
Public API for standalone mesh validation.
"""

from .validate import ValidationReport, validate_mesh, compute_bounds

__all__ = ["ValidationReport", "validate_mesh", "compute_bounds"]
