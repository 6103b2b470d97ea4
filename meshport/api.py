# -*- coding: utf-8 -*-
# Meshport/meshport/api.py

"""
Project: Meshport
Date: 10/19/2026

Purpose
-------
High-level conversion API. Ties together detection, the readers, the optional
geometry-processing engine and the writers, and exposes single-file and batch
conversion with per-file error isolation.

Main Tasks
----------
    1. `convert_one`: existence check → target directory → detect → read →
       [process] → write, stopping at the first failing stage with a stage-prefixed
       message ("Read failed: ...", "Processing failed: ...", "Write failed: ...").
    2. `convert_batch`: one `convert_one` per source on worker threads, in waves of at
       most `max_workers` (default: CPU count); results collected under a lock into a
       success count and a path → (ErrorKind, message) map.
    3. `read_mesh` / `write_mesh` / `inspect_file` / `validate_output_path` as thin
       front doors for callers that need a single stage.

Notes
-----
- Nothing raises: every path returns an Outcome (or the batch tuple).
- Batch destinations are `dst_dir/<source stem><target extension>`; two sources
  sharing a stem overwrite each other's output (no collision policy).
"""

import logging
import os
import threading
from typing import Dict, Iterable, Optional, Tuple, Union

from .core.errors import ErrorKind, Outcome, guarded
from .core.options import ProcessingOptions, WriteOptions
from .core.types import MeshData
from .formats.detect import detect, detect_from_extension
from .formats.tags import FormatTag, format_extension, format_name, parse_format_name
from .processing.base import GeometryEngine
from .processing.engine import NumpyEngine
from .readers.dispatcher import read_mesh
from .writers.dispatcher import write_mesh, validate_output_path
from .stats.report import summary_line

logger = logging.getLogger(__name__)

__all__ = ["convert_one", "convert_batch", "read_mesh", "write_mesh", "inspect_file",
           "validate_output_path", "destination_path"]

FormatArg = Union[FormatTag, str, None]
BatchErrors = Dict[str, Tuple[ErrorKind, str]]


def _resolve_format(fmt: FormatArg) -> Optional[FormatTag]:
    """None / "auto" → None (detect); a name or tag → FormatTag (UNKNOWN if unrecognized)."""
    if fmt is None:
        return None
    if isinstance(fmt, str):
        return parse_format_name(fmt)
    try:
        return FormatTag(fmt)
    except (TypeError, ValueError):
        return FormatTag.UNKNOWN


def _prefixed(stage: str, outcome: Outcome) -> Outcome:
    return Outcome(outcome.kind, "{} failed: {}".format(stage, outcome.message))


def _make_target_dir(dst: str) -> Optional[Outcome]:
    dirname = os.path.dirname(dst)
    if not dirname or os.path.isdir(dirname):
        return None
    try:
        os.makedirs(dirname, exist_ok=True)
    except OSError as e:
        logger.debug("[convert_one] makedirs(%s) failed: %s", dirname, e)
        return Outcome.failure(ErrorKind.WRITE_FAILED, "Cannot create target directory: {}".format(dirname))
    return None


@guarded(ErrorKind.READ_FAILED)
def _process(engine: GeometryEngine, mesh: MeshData, options: ProcessingOptions):
    return engine.process(mesh, options)


@guarded(ErrorKind.READ_FAILED)
def convert_one(src, dst, src_format: FormatArg = None, dst_format: FormatArg = None,
                write_options: Optional[WriteOptions] = None,
                processing_options: Optional[ProcessingOptions] = None,
                engine: Optional[GeometryEngine] = None) -> Outcome:
    """
    Convert one mesh file.

    Parameters
    ----------
    src, dst : str or os.PathLike
        Source file and destination file.
    src_format : FormatTag or str, optional
        Source format; None or "auto" detects it from the file itself.
    dst_format : FormatTag or str, optional
        Target format; None derives it from the destination extension.
    write_options : WriteOptions, optional
        Encoding options (defaults when None).
    processing_options : ProcessingOptions, optional
        When given with any pass enabled, the mesh goes through `engine` before writing.
    engine : GeometryEngine, optional
        Processing engine; NumpyEngine when None.

    Returns
    -------
    Outcome
        SUCCESS with `.mesh` set to the mesh that was written, or the first failing
        stage's kind with a stage-prefixed message. A fault outside the stages
        comes back as READ_FAILED "<ExcType>: <message>".
    """
    src, dst = os.fspath(src), os.fspath(dst)
    write_options = write_options or WriteOptions()

    if not os.path.exists(src):
        return Outcome.failure(ErrorKind.FILE_NOT_EXIST, "Source file does not exist: {}".format(src))

    problems = write_options.validate()
    if processing_options is not None:
        problems += processing_options.validate()
    if problems:
        return Outcome.failure(ErrorKind.PARAM_INVALID, "; ".join(problems))

    failed = _make_target_dir(dst)
    if failed is not None:
        return failed

    # FormatDetecting
    src_tag = _resolve_format(src_format)
    if src_tag is None:
        src_tag = detect(src)
    if src_tag == FormatTag.UNKNOWN:
        return Outcome.failure(ErrorKind.FORMAT_UNSUPPORTED,
                               "Read failed: Unrecognized mesh format: {}".format(src))
    dst_tag = _resolve_format(dst_format)
    if dst_tag == FormatTag.UNKNOWN:
        return Outcome.failure(ErrorKind.FORMAT_UNSUPPORTED,
                               "Write failed: Unsupported target format: {!r}".format(dst_format))
    if dst_tag is None and detect_from_extension(dst) == FormatTag.UNKNOWN:
        return Outcome.failure(ErrorKind.FORMAT_UNSUPPORTED,
                               "Write failed: {}".format(validate_output_path(dst)[1]))

    # Parsing
    logger.info("[convert_one] %s (%s) -> %s", src, format_name(src_tag), dst)
    result = read_mesh(src, src_tag)
    if not result.ok:
        return _prefixed("Read", result)
    mesh = result.mesh

    # Processing
    if processing_options is not None and processing_options.any_enabled():
        result = _process(engine or NumpyEngine(), mesh, processing_options)
        if not result.ok:
            return _prefixed("Processing", result)
        mesh = result.mesh

    # Writing
    result = write_mesh(mesh, dst, dst_tag, write_options)
    if not result.ok:
        return _prefixed("Write", result)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("[convert_one] done: %s", summary_line(mesh))
    return Outcome.success(mesh, "Converted {} -> {}".format(src, dst))


def destination_path(src, dst_dir, dst_format: FormatTag) -> str:
    """`dst_dir/<stem of src><canonical extension of dst_format>`."""
    stem = os.path.splitext(os.path.basename(os.path.normpath(os.fspath(src))))[0]
    return os.path.join(os.fspath(dst_dir), stem + format_extension(dst_format))


def convert_batch(src_paths: Iterable, dst_dir, dst_format: FormatArg,
                  write_options: Optional[WriteOptions] = None,
                  processing_options: Optional[ProcessingOptions] = None,
                  max_workers: Optional[int] = None,
                  engine: Optional[GeometryEngine] = None) -> Tuple[int, BatchErrors]:
    """
    Convert many files into `dst_dir`.

    Parameters
    ----------
    src_paths : iterable of str or os.PathLike
        Source files; each is converted independently.
    dst_dir : str or os.PathLike
        Output directory (created once up front).
    dst_format : FormatTag or str
        Target format for every file.
    write_options, processing_options, engine :
        Passed to `convert_one`.
    max_workers : int, optional
        Threads per wave; defaults to the CPU count.

    Returns
    -------
    (int, dict)
        Number of successful conversions and {source path: (ErrorKind, message)} for
        every failed file. If `dst_dir` cannot be created, every source is recorded as
        WRITE_FAILED and nothing is converted.
    """
    sources = [os.fspath(p) for p in src_paths]
    dst_dir = os.fspath(dst_dir)
    errors: BatchErrors = {}

    try:
        os.makedirs(dst_dir, exist_ok=True)
    except OSError as e:
        logger.error("[convert_batch] cannot create %s: %s", dst_dir, e)
        message = "Cannot create target directory: {}".format(dst_dir)
        return 0, {src: (ErrorKind.WRITE_FAILED, message) for src in sources}

    tag = _resolve_format(dst_format)
    if tag is None or tag == FormatTag.UNKNOWN:
        message = "Unsupported target format: {!r}".format(dst_format)
        return 0, {src: (ErrorKind.FORMAT_UNSUPPORTED, message) for src in sources}

    lock = threading.Lock()
    state = {"success": 0}

    def _worker(src: str) -> None:
        outcome = convert_one(src, destination_path(src, dst_dir, tag), None, tag,
                              write_options, processing_options, engine)
        with lock:
            if outcome.ok:
                state["success"] += 1
            else:
                errors[src] = (outcome.kind, outcome.message)

    wave_size = max(1, int(max_workers or os.cpu_count() or 1))
    logger.info("[convert_batch] %d file(s) -> %s as %s (%d per wave)",
                len(sources), dst_dir, format_name(tag), wave_size)
    for start in range(0, len(sources), wave_size):
        threads = [threading.Thread(target=_worker, args=(src,), name="meshport-{}".format(i))
                   for i, src in enumerate(sources[start:start + wave_size], start)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

    logger.info("[convert_batch] %d succeeded, %d failed", state["success"], len(errors))
    return state["success"], errors


def inspect_file(path, fmt: FormatArg = None) -> Outcome:
    """
    Parse `path` and return an Outcome whose `.mesh.metadata` describes it and whose
    message is a one-line summary.
    """
    tag = _resolve_format(fmt)
    if tag == FormatTag.UNKNOWN:
        return Outcome.failure(ErrorKind.FORMAT_UNSUPPORTED, "Unrecognized format name: {}".format(fmt))
    result = read_mesh(path, tag)
    if not result.ok:
        return result
    return Outcome.success(result.mesh, summary_line(result.mesh))
