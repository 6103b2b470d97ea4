# -*- coding: utf-8 -*-
# Meshport/meshport/core/errors.py

"""
Project: Meshport
Date: 10/19/2026

Purpose
-------
Error taxonomy for the conversion layer and the result record returned by every public
reader, writer and pipeline function.

Main Tasks
----------
    1. Define the stable `ErrorKind` small-integer enumeration.
    2. Define `MeshError(kind, message, context)` raised inside parser/writer state
       machines, with a compact context suffix in __str__.
    3. Define `Outcome` (kind + message + optional mesh) and the `guarded` decorator
       that turns any raised fault into an Outcome at the public boundary.

Notes
-----
- Internals raise; public entry points return. `guarded` is the single place where an
  unexpected exception is folded into READ_FAILED / WRITE_FAILED.
"""

import functools
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

__all__ = ["ErrorKind", "MeshError", "Outcome", "guarded"]


class ErrorKind(IntEnum):
    SUCCESS = 0
    FILE_NOT_EXIST = 1
    FORMAT_UNSUPPORTED = 2
    READ_FAILED = 3
    WRITE_FAILED = 4
    MESH_EMPTY = 5
    PARAM_INVALID = 6
    DEPENDENCY_MISSING = 7
    FORMAT_VERSION_INVALID = 8


def _format_context(ctx):
    """Return a compact ' | key1=val1, key2=val2' string or '' if no context."""
    if not ctx:
        return ""
    parts = []
    for k in sorted(ctx.keys()):
        sv = repr(ctx[k])
        if len(sv) > 120:
            sv = sv[:117] + "..."
        parts.append("{}={}".format(k, sv))
    return " | " + ", ".join(parts)


class MeshError(Exception):
    """
    Failure raised inside a reader/writer/processing step.

    Parameters
    ----------
    kind : ErrorKind
        Category of the failure.
    message : str
        Human-readable error.
    context : dict, optional
        Extra fields appended to the string form (e.g., {"stage": "vertex", "line": 12}).
    """
    def __init__(self, kind: ErrorKind, message: str, context: Optional[Dict[str, Any]] = None):
        self.kind = ErrorKind(kind)
        self.message = message
        self.context = dict(context) if context else None
        super(MeshError, self).__init__(message)

    def __str__(self):
        return self.message + _format_context(self.context)


@dataclass
class Outcome:
    """
    Result of a public operation: an ErrorKind, a message, and the mesh when one was produced.

    `mesh` may also be set on failure when a caller wants to inspect what was read so far;
    it must never be treated as valid in that case.
    """
    kind: ErrorKind = ErrorKind.SUCCESS
    message: str = ""
    mesh: Any = None

    @property
    def ok(self) -> bool:
        return self.kind == ErrorKind.SUCCESS

    @classmethod
    def success(cls, mesh=None, message: str = "") -> "Outcome":
        return cls(ErrorKind.SUCCESS, message, mesh)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Outcome":
        return cls(ErrorKind(kind), message, None)

    @classmethod
    def from_error(cls, err: MeshError) -> "Outcome":
        return cls(err.kind, str(err), None)

    def __bool__(self) -> bool:
        return self.ok


def guarded(default_kind: ErrorKind) -> Callable:
    """
    Decorate a function that returns a MeshData (or None) and may raise.

    - A returned value becomes `Outcome.success(value)` (an Outcome is passed through).
    - `MeshError` becomes `Outcome(err.kind, str(err))`.
    - Any other exception becomes `Outcome(default_kind, "<ExcType>: <message>")`.
    """
    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> Outcome:
            try:
                result = fn(*args, **kwargs)
            except MeshError as err:
                logger.debug("[%s] %s: %s", fn.__name__, err.kind.name, err)
                return Outcome.from_error(err)
            except Exception as exc:  # outermost boundary: no fault may escape
                logger.debug("[%s] unexpected %s", fn.__name__, type(exc).__name__, exc_info=True)
                return Outcome.failure(default_kind, "{}: {}".format(type(exc).__name__, exc))
            if isinstance(result, Outcome):
                return result
            return Outcome.success(result)
        return wrapper
    return decorator
