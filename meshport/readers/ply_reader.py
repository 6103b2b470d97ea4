# -*- coding: utf-8 -*-
# Meshport/meshport/readers/ply_reader.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Parse Stanford PLY files (ASCII, binary little-endian and binary big-endian) driven by
the element/property declarations of the header.

Main Tasks:
-----------
   1) Header: `ply` magic, `format` line, `element NAME COUNT` and `property` lines,
      `end_header` sentinel (its absence is READ_FAILED).
   2) `vertex`: x, y, z become points; any further scalar property becomes a
      one-component point attribute named after the property.
   3) `face`: list property (`vertex_indices` / `vertex_index`) becomes triangle, quad or
      polygon cells. `edge`: `vertex1`/`vertex2` become line cells.
   4) Other elements are read (to keep the binary cursor aligned) and discarded.

Notes:
------
- Vertex data are load-bearing: a short vertex block is READ_FAILED.
- Face/edge data are best-effort: a short record truncates that element's list with a
  WARNING, and faces referencing missing vertices are dropped with a WARNING.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from ..core.errors import ErrorKind, MeshError, guarded
from ..core.types import CellKind, MeshData, face_kind
from ..formats.tags import FormatTag
from ._helpers import require_file, finalize, empty_error

logger = logging.getLogger(__name__)

PLY_TYPES = {
    "char": "i1", "int8": "i1",
    "uchar": "u1", "uint8": "u1",
    "short": "i2", "int16": "i2",
    "ushort": "u2", "uint16": "u2",
    "int": "i4", "int32": "i4",
    "uint": "u4", "uint32": "u4",
    "float": "f4", "float32": "f4",
    "double": "f8", "float64": "f8",
}

_ENCODINGS = {
    "ascii": (FormatTag.PLY_ASCII, None),
    "binary_little_endian": (FormatTag.PLY_BINARY, "<"),
    "binary_big_endian": (FormatTag.PLY_BINARY, ">"),
}

_FACE_LISTS = ("vertex_indices", "vertex_index")


@dataclass
class PlyProperty:
    name: str
    code: str                           # numpy type code of the value (or list item)
    count_code: Optional[str] = None    # numpy type code of the list length, lists only

    @property
    def is_list(self) -> bool:
        return self.count_code is not None


@dataclass
class PlyElement:
    name: str
    count: int
    properties: List[PlyProperty] = field(default_factory=list)

    @property
    def has_lists(self) -> bool:
        return any(p.is_list for p in self.properties)

    def index_of(self, *names) -> Optional[int]:
        for i, prop in enumerate(self.properties):
            if prop.name in names:
                return i
        return None


@dataclass
class PlyHeader:
    encoding: str
    version: str
    elements: List[PlyElement]
    endian: Optional[str]
    tag: FormatTag


class _Truncated(Exception):
    """Raised by a record source when the body ends inside an element."""


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------
def _type_code(name: str, lineno: int) -> str:
    code = PLY_TYPES.get(name)
    if code is None:
        raise MeshError(ErrorKind.READ_FAILED, "Unknown PLY property type '{}'".format(name),
                        {"stage": "header", "line": lineno})
    return code


def parse_header(f) -> PlyHeader:
    """Consume the header from a binary handle, leaving it positioned at the body."""
    magic = f.readline()
    if magic.strip() != b"ply":
        raise MeshError(ErrorKind.FORMAT_UNSUPPORTED, "Missing 'ply' magic line")

    encoding, version = None, ""
    elements: List[PlyElement] = []
    lineno = 1
    while True:
        raw = f.readline()
        lineno += 1
        if not raw:
            raise MeshError(ErrorKind.READ_FAILED, "PLY header is not terminated by 'end_header'",
                            {"stage": "header"})
        tokens = raw.decode("ascii", errors="replace").split()
        if not tokens or tokens[0] in ("comment", "obj_info"):
            continue
        key = tokens[0]
        if key == "end_header":
            break
        if key == "format":
            if len(tokens) < 2 or tokens[1] not in _ENCODINGS:
                raise MeshError(ErrorKind.FORMAT_UNSUPPORTED,
                                "Unsupported PLY format line: {}".format(" ".join(tokens)))
            encoding = tokens[1]
            version = tokens[2] if len(tokens) > 2 else ""
        elif key == "element":
            if len(tokens) != 3:
                raise MeshError(ErrorKind.READ_FAILED, "Malformed element line",
                                {"stage": "header", "line": lineno})
            count = int(tokens[2]) if tokens[2].isdigit() else -1
            if count < 0:
                raise MeshError(ErrorKind.READ_FAILED,
                                "Invalid element count '{}'".format(tokens[2]),
                                {"stage": "header", "line": lineno})
            elements.append(PlyElement(tokens[1], count))
        elif key == "property":
            if not elements:
                raise MeshError(ErrorKind.READ_FAILED, "Property declared before any element",
                                {"stage": "header", "line": lineno})
            if len(tokens) == 5 and tokens[1] == "list":
                prop = PlyProperty(tokens[4], _type_code(tokens[3], lineno),
                                   _type_code(tokens[2], lineno))
            elif len(tokens) == 3:
                prop = PlyProperty(tokens[2], _type_code(tokens[1], lineno))
            else:
                raise MeshError(ErrorKind.READ_FAILED, "Malformed property line",
                                {"stage": "header", "line": lineno})
            elements[-1].properties.append(prop)
        else:
            logger.debug("[parse_header] ignoring header keyword '%s'", key)

    if encoding is None:
        raise MeshError(ErrorKind.READ_FAILED, "PLY header has no 'format' line", {"stage": "header"})
    tag, endian = _ENCODINGS[encoding]
    return PlyHeader(encoding, version, elements, endian, tag)


# ---------------------------------------------------------------------------
# Body sources
# ---------------------------------------------------------------------------
class _AsciiSource:
    """One element record per non-blank text line."""

    def __init__(self, body: bytes):
        self._lines = iter([ln for ln in body.decode("utf-8", errors="replace").splitlines() if ln.strip()])

    def scalar_block(self, elem: PlyElement) -> Tuple[np.ndarray, bool]:
        width = len(elem.properties)
        rows = []
        for _ in range(elem.count):
            line = next(self._lines, None)
            tokens = line.split() if line is not None else []
            if len(tokens) < width:
                return self._as_array(rows, elem.name, width), False
            rows.append(tokens[:width])
        return self._as_array(rows, elem.name, width), True

    @staticmethod
    def _as_array(rows, name: str, width: int) -> np.ndarray:
        try:
            return np.asarray(rows, dtype=np.float64).reshape(-1, width)
        except ValueError:
            raise MeshError(ErrorKind.READ_FAILED, "Non-numeric value in element '{}'".format(name),
                            {"stage": name})

    def record(self, elem: PlyElement) -> list:
        line = next(self._lines, None)
        if line is None:
            raise _Truncated()
        tokens = line.split()
        values, pos = [], 0
        try:
            for prop in elem.properties:
                if prop.is_list:
                    n = int(tokens[pos])
                    items = tokens[pos + 1:pos + 1 + n]
                    if len(items) != n:
                        raise _Truncated()
                    values.append([int(float(t)) for t in items])
                    pos += 1 + n
                else:
                    values.append(float(tokens[pos]))
                    pos += 1
        except IndexError:
            raise _Truncated()
        except ValueError:
            raise MeshError(ErrorKind.READ_FAILED, "Non-numeric value in element '{}'".format(elem.name),
                            {"stage": elem.name})
        return values


class _BinarySource:
    """Fixed-endian packed records read from an in-memory body."""

    def __init__(self, body: bytes, endian: str):
        self._data = body
        self._pos = 0
        self._endian = endian

    def _take(self, code: str, n: int = 1) -> np.ndarray:
        dt = np.dtype(self._endian + code)
        nbytes = dt.itemsize * n
        if self._pos + nbytes > len(self._data):
            raise _Truncated()
        out = np.frombuffer(self._data, dtype=dt, count=n, offset=self._pos)
        self._pos += nbytes
        return out

    def scalar_block(self, elem: PlyElement) -> Tuple[np.ndarray, bool]:
        dt = np.dtype([(p.name, self._endian + p.code) for p in elem.properties])
        available = (len(self._data) - self._pos) // dt.itemsize if dt.itemsize else 0
        n = min(elem.count, available)
        block = np.frombuffer(self._data, dtype=dt, count=n, offset=self._pos)
        self._pos += n * dt.itemsize
        columns = [block[p.name].astype(np.float64) for p in elem.properties]
        table = np.stack(columns, axis=1) if columns else np.zeros((n, 0))
        return table, n == elem.count

    def record(self, elem: PlyElement) -> list:
        values = []
        for prop in elem.properties:
            if prop.is_list:
                n = int(self._take(prop.count_code)[0])
                values.append([int(v) for v in self._take(prop.code, n)])
            else:
                values.append(float(self._take(prop.code)[0]))
        return values


# ---------------------------------------------------------------------------
# Element handlers
# ---------------------------------------------------------------------------
def _read_list_element(elem: PlyElement, source) -> Tuple[list, bool]:
    records = []
    try:
        for _ in range(elem.count):
            records.append(source.record(elem))
    except _Truncated:
        return records, False
    return records, True


def _read_vertices(elem: PlyElement, source, mesh: MeshData) -> None:
    if elem.has_lists:
        records, complete = _read_list_element(elem, source)
        scalars = [[v for v in rec if not isinstance(v, list)] for rec in records]
        props = [p for p in elem.properties if not p.is_list]
        table = np.asarray(scalars, dtype=np.float64).reshape(-1, len(props))
    else:
        props = elem.properties
        table, complete = source.scalar_block(elem)
    if not complete:
        raise MeshError(ErrorKind.READ_FAILED,
                        "Vertex block is truncated ({} of {} vertices)".format(len(table), elem.count),
                        {"stage": "vertex"})

    names = [p.name for p in props]
    try:
        cols = [names.index(axis) for axis in ("x", "y", "z")]
    except ValueError:
        raise MeshError(ErrorKind.READ_FAILED, "PLY vertex element lacks x/y/z properties",
                        {"stage": "vertex"})
    mesh.set_points(table[:, cols])
    for i, name in enumerate(names):
        if i not in cols:
            mesh.point_data[name] = table[:, i].astype(np.float32)


def _read_faces(elem: PlyElement, source, mesh: MeshData, n_points: int) -> None:
    col = elem.index_of(*_FACE_LISTS)
    if col is None:
        col = next((i for i, p in enumerate(elem.properties) if p.is_list), None)
    records, complete = _read_list_element(elem, source)
    if not complete:
        logger.warning("[read_ply] face block truncated: kept %d of %d faces", len(records), elem.count)
    if col is None:
        logger.warning("[read_ply] face element has no index list; faces ignored")
        return
    dropped = 0
    for rec in records:
        refs = rec[col]
        kind = face_kind(len(refs))
        if kind is None or any(r < 0 or r >= n_points for r in refs):
            dropped += 1
            continue
        mesh.add_cell(kind, refs)
    if dropped:
        logger.warning("[read_ply] dropped %d invalid face(s)", dropped)


def _read_edges(elem: PlyElement, source, mesh: MeshData, n_points: int) -> None:
    a, b = elem.index_of("vertex1"), elem.index_of("vertex2")
    records, complete = _read_list_element(elem, source)
    if not complete:
        logger.warning("[read_ply] edge block truncated: kept %d of %d edges", len(records), elem.count)
    if a is None or b is None:
        return
    for rec in records:
        i, j = int(rec[a]), int(rec[b])
        if 0 <= i < n_points and 0 <= j < n_points:
            mesh.add_cell(CellKind.LINE, (i, j))


def load_ply(path: str) -> MeshData:
    with open(path, "rb") as f:
        header = parse_header(f)
        body = f.read()

    source = _AsciiSource(body) if header.endian is None else _BinarySource(body, header.endian)
    mesh = MeshData()
    seen_vertex = False

    for elem in header.elements:
        if elem.name == "vertex":
            if elem.count == 0:
                raise empty_error(header.tag, "vertices")
            _read_vertices(elem, source, mesh)
            seen_vertex = True
        elif elem.name == "face":
            _read_faces(elem, source, mesh, mesh.point_count)
        elif elem.name == "edge":
            _read_edges(elem, source, mesh, mesh.point_count)
        elif elem.has_lists:
            _read_list_element(elem, source)
        else:
            source.scalar_block(elem)

    if not seen_vertex:
        raise empty_error(header.tag, "vertex element")
    return finalize(mesh, path, header.tag, header.version)


@guarded(ErrorKind.READ_FAILED)
def read_ply(path: str):
    """Read a PLY file in any of its three encodings; returns an Outcome."""
    require_file(path)
    return load_ply(path)
