# -*- coding: utf-8 -*-
# Meshport/meshport/__init__.py

"""
Project: Meshport
Date: 10/19/2026

Modules:
--------
- core:        canonical mesh model, error surface and option records.
- formats:     format tags and format detection.
- readers:     one parser per on-disk format (native or delegated to meshio).
- writers:     serializers mirroring the reader set.
- processing:  geometry-processing engine (cleaning, triangulation, smoothing, ...).
- checks:      standalone mesh validation.
- stats:       metadata summaries and their export.
- api:         single-file and batch conversion pipeline.
- cli:         command line front end.
"""

__version__ = "1.0.0"

__all__ = ["core", "formats", "readers", "writers", "processing", "checks", "stats", "api", "cli"]
