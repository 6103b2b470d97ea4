# -*- coding: utf-8 -*-
# Meshport/meshport/core/options.py

"""
Project: Meshport
Date: 10/19/2026

Purpose
-------
Plain configuration records for the optional geometry-processing pass and for the
format writers, with documented defaults and domain checks.

Notes
-----
- Defaults: cleaning on; triangulation, decimation, smoothing and normals off;
  binary output on; ASCII precision 6.
- `validate()` returns a list of problems instead of raising; the pipeline turns a
  non-empty list into PARAM_INVALID.
"""

from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional


def _number(value: Any, cast: Callable) -> Optional[float]:
    """`cast(value)`, or None when the value is not numeric."""
    if isinstance(value, bool):
        return None
    try:
        return cast(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _check_range(problems: List[str], name: str, value: Any, cast: Callable,
                 accept: Callable, expected: str) -> None:
    number = _number(value, cast)
    if number is None or not accept(number):
        problems.append("{} must be {} (got {!r})".format(name, expected, value))


@dataclass
class ProcessingOptions:
    enable_cleaning: bool = True
    enable_triangulation: bool = False
    enable_decimation: bool = False
    decimation_target: float = 0.5      # fraction of triangles to remove
    enable_smoothing: bool = False
    smoothing_iterations: int = 20
    smoothing_relaxation: float = 0.1
    enable_normals: bool = False
    preserve_topology: bool = True
    merge_tolerance: float = 0.0        # 0 → exact coincidence only

    def any_enabled(self) -> bool:
        """True if at least one pass would run."""
        return (self.enable_cleaning or self.enable_triangulation or self.enable_decimation
                or self.enable_smoothing or self.enable_normals)

    def validate(self) -> List[str]:
        problems = []
        _check_range(problems, "smoothing_relaxation", self.smoothing_relaxation, float,
                     lambda v: 0.0 <= v <= 1.0, "within [0, 1]")
        _check_range(problems, "smoothing_iterations", self.smoothing_iterations, int,
                     lambda v: v >= 0, "a non-negative integer")
        _check_range(problems, "decimation_target", self.decimation_target, float,
                     lambda v: 0.0 <= v < 1.0, "within [0, 1)")
        _check_range(problems, "merge_tolerance", self.merge_tolerance, float,
                     lambda v: v >= 0.0, "non-negative")
        return problems

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class WriteOptions:
    binary: bool = True
    precision: int = 6                  # significant digits for ASCII output
    compress: bool = False              # VTK XML / CGNS only
    preserve_attributes: bool = True
    solid_name: str = "Solid"           # STL ASCII solid label
    cgns_base_name: str = "Base1"
    cgns_zone_name: str = "Zone1"
    cgns_dimension: int = 3
    surface_only: bool = False          # reduce volumetric cells to their boundary

    def validate(self) -> List[str]:
        problems = []
        _check_range(problems, "precision", self.precision, int,
                     lambda v: 1 <= v <= 17, "an integer within [1, 17]")
        _check_range(problems, "cgns_dimension", self.cgns_dimension, int,
                     lambda v: v in (2, 3), "2 or 3")
        for key in ("solid_name", "cgns_base_name", "cgns_zone_name"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                problems.append("{} must be a non-empty string".format(key))
        return problems

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
