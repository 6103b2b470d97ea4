# -*- coding: utf-8 -*-
# Meshport/meshport/stats/__init__.py

"""
Mesh summaries and their CSV/JSON export.
"""

from .report import summarize, summary_line
from .export import write_summary_csv, write_summary_json

__all__ = ["summarize", "summary_line", "write_summary_csv", "write_summary_json"]
