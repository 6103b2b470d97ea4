# -*- coding: utf-8 -*-
# Meshport/tests/test_api.py

import logging
import os
import stat
import sys

import pytest

from meshport.api import convert_batch, convert_one, destination_path, inspect_file
from meshport.core.errors import ErrorKind
from meshport.core.options import ProcessingOptions, WriteOptions
from meshport.core.types import CellKind
from meshport.formats.detect import detect
from meshport.formats.tags import FormatTag
from meshport.processing.base import GeometryEngine
from meshport.readers import read_mesh

from conftest import binary_stl_bytes, TWO_TRIANGLES


def test_convert_one_stl_to_obj(binary_stl, tmp_path):
    dst = str(tmp_path / "out" / "two.obj")
    out = convert_one(binary_stl, dst)
    assert out.ok, out.message
    assert out.message.startswith("Converted ")
    back = read_mesh(dst).mesh
    # no processing requested: the soup stays unwelded
    assert back.point_count == 6


def test_convert_one_with_processing_welds(binary_stl, tmp_path):
    dst = str(tmp_path / "two.off")
    out = convert_one(binary_stl, dst, processing_options=ProcessingOptions())
    assert out.ok, out.message
    assert read_mesh(dst).mesh.point_count == 4


def test_convert_one_creates_missing_parent(obj_quad, tmp_path):
    dst = tmp_path / "new" / "nested" / "quad.ply"
    out = convert_one(obj_quad, str(dst))
    assert out.ok, out.message
    assert dst.is_file()
    assert read_mesh(str(dst)).mesh.cells[0].kind == CellKind.QUAD


def test_convert_one_explicit_formats(ascii_stl, tmp_path):
    dst = str(tmp_path / "copy.stl")
    out = convert_one(ascii_stl, dst, "stl-ascii", "stl-ascii")
    assert out.ok, out.message
    assert detect(dst) == FormatTag.STL_ASCII


def test_convert_one_ascii_option(ascii_stl, tmp_path):
    dst = str(tmp_path / "copy.stl")
    assert convert_one(ascii_stl, dst, write_options=WriteOptions(binary=False)).ok
    assert detect(dst) == FormatTag.STL_ASCII


def test_convert_one_missing_source(tmp_path):
    out = convert_one(str(tmp_path / "ghost.stl"), str(tmp_path / "x.obj"))
    assert out.kind == ErrorKind.FILE_NOT_EXIST
    assert out.message.startswith("Source file does not exist: ")


def test_convert_one_read_failure_is_prefixed(write_bytes, tmp_path):
    cut = write_bytes("cut.stl", binary_stl_bytes(TWO_TRIANGLES)[:-10])
    out = convert_one(cut, str(tmp_path / "x.obj"))
    assert out.kind == ErrorKind.READ_FAILED
    assert out.message.startswith("Read failed: ")


def test_convert_one_bad_magic_off(write_text, tmp_path):
    src = write_text("bad.off", "COFF\n3 1 0\n0 0 0\n1 0 0\n0 1 0\n3 0 1 2\n")
    out = convert_one(src, str(tmp_path / "x.obj"))
    assert out.kind == ErrorKind.FORMAT_UNSUPPORTED
    assert out.message.startswith("Read failed: ")


def test_convert_one_unrecognized_source(write_text, tmp_path):
    out = convert_one(write_text("notes.txt", "hello\n"), str(tmp_path / "x.obj"))
    assert out.kind == ErrorKind.FORMAT_UNSUPPORTED


def test_convert_one_bad_target(obj_quad, tmp_path):
    out = convert_one(obj_quad, str(tmp_path / "x.step"))
    assert out.kind == ErrorKind.FORMAT_UNSUPPORTED
    assert out.message.startswith("Write failed: ")
    out = convert_one(obj_quad, str(tmp_path / "x.obj"), dst_format="iges")
    assert out.kind == ErrorKind.FORMAT_UNSUPPORTED


def test_convert_one_invalid_parameters(obj_quad, tmp_path):
    out = convert_one(obj_quad, str(tmp_path / "x.obj"),
                      processing_options=ProcessingOptions(smoothing_relaxation=-0.1))
    assert out.kind == ErrorKind.PARAM_INVALID
    assert not (tmp_path / "x.obj").exists()


def test_convert_one_processing_failure_is_prefixed(obj_quad, tmp_path):
    class Broken(GeometryEngine):
        def process(self, mesh, options):
            raise RuntimeError("engine exploded")

        def extract_surface(self, mesh):
            return mesh

    out = convert_one(obj_quad, str(tmp_path / "x.obj"),
                      processing_options=ProcessingOptions(), engine=Broken())
    assert out.kind == ErrorKind.READ_FAILED
    assert out.message.startswith("Processing failed: ")
    assert "engine exploded" in out.message


def test_convert_one_zero_element_source(write_text, tmp_path):
    src = write_text("zero.off", "OFF\n0 0 0\n")
    out = convert_one(src, str(tmp_path / "x.obj"))
    assert out.kind == ErrorKind.MESH_EMPTY


@pytest.mark.skipif(sys.platform.startswith("win") or os.geteuid() == 0,
                    reason="needs POSIX permissions enforced for the current user")
def test_convert_one_uncreatable_target_dir(obj_quad, tmp_path):
    locked = tmp_path / "locked"
    locked.mkdir()
    locked.chmod(stat.S_IRUSR | stat.S_IXUSR)
    try:
        out = convert_one(obj_quad, str(locked / "sub" / "x.obj"))
    finally:
        locked.chmod(stat.S_IRWXU)
    assert out.kind == ErrorKind.WRITE_FAILED
    assert out.message.startswith("Cannot create target directory: ")


def test_destination_path():
    assert destination_path("/a/b/part.v2.stl", "/out", FormatTag.VTK_XML) == os.path.join("/out", "part.v2.vtu")


def test_batch_with_one_missing_file(ascii_stl, obj_quad, tmp_path):
    missing = str(tmp_path / "missing.stl")
    out_dir = tmp_path / "batch"
    count, errors = convert_batch([ascii_stl, missing, obj_quad], str(out_dir), "off")
    assert count == 2
    assert list(errors) == [missing]
    assert errors[missing][0] == ErrorKind.FILE_NOT_EXIST
    assert (out_dir / "one.off").is_file()
    assert (out_dir / "quad.off").is_file()


@pytest.mark.parametrize("workers", [1, 2, 8])
def test_batch_waves(ascii_stl, obj_quad, ply_ascii, off_file, tmp_path, workers):
    sources = [ascii_stl, obj_quad, ply_ascii, off_file]
    count, errors = convert_batch(sources, str(tmp_path / "w"), FormatTag.OBJ, max_workers=workers)
    assert count == 4
    assert errors == {}


def test_batch_bad_format(ascii_stl, tmp_path):
    count, errors = convert_batch([ascii_stl], str(tmp_path / "b"), "dwg")
    assert count == 0
    assert errors[ascii_stl][0] == ErrorKind.FORMAT_UNSUPPORTED


def test_batch_uncreatable_directory(ascii_stl, obj_quad, write_text):
    blocker = write_text("file_not_dir", "x")
    count, errors = convert_batch([ascii_stl, obj_quad], os.path.join(blocker, "out"), "obj")
    assert count == 0
    assert {kind for kind, _ in errors.values()} == {ErrorKind.WRITE_FAILED}
    assert set(errors) == {ascii_stl, obj_quad}


def test_inspect_file(ply_ascii):
    out = inspect_file(ply_ascii)
    assert out.ok
    assert out.message == "tet.ply [PLY ASCII]: 4 points, 4 cells (triangle=4), surface_mesh"
    assert out.mesh.metadata.point_data_names == ["quality"]


def test_inspect_missing(tmp_path):
    assert inspect_file(str(tmp_path / "none.obj")).kind == ErrorKind.FILE_NOT_EXIST


def test_convert_one_unknown_numeric_format(obj_quad, tmp_path):
    out = convert_one(obj_quad, str(tmp_path / "x.stl"), dst_format=99)
    assert out.kind == ErrorKind.FORMAT_UNSUPPORTED
    assert out.message.startswith("Write failed: ")
    assert convert_one(obj_quad, str(tmp_path / "x.stl"), src_format=99).kind == ErrorKind.FORMAT_UNSUPPORTED


def test_convert_one_non_numeric_option(obj_quad, tmp_path):
    out = convert_one(obj_quad, str(tmp_path / "x.stl"), write_options=WriteOptions(precision="high"))
    assert out.kind == ErrorKind.PARAM_INVALID
    assert "precision" in out.message


def test_convert_one_unexpected_fault_becomes_outcome(obj_quad, tmp_path, monkeypatch):
    def explode(path):
        raise RuntimeError("sniffer died")

    monkeypatch.setattr("meshport.api.detect", explode)
    out = convert_one(obj_quad, str(tmp_path / "x.stl"))
    assert out.kind == ErrorKind.READ_FAILED
    assert out.message == "RuntimeError: sniffer died"


def test_batch_records_every_file_on_invalid_options(ascii_stl, obj_quad, tmp_path):
    count, errors = convert_batch([ascii_stl, obj_quad], str(tmp_path / "b"), "off",
                                  WriteOptions(precision="high"))
    assert count == 0
    assert set(errors) == {ascii_stl, obj_quad}
    assert {kind for kind, _ in errors.values()} == {ErrorKind.PARAM_INVALID}


def test_batch_records_unexpected_faults(ascii_stl, obj_quad, tmp_path, monkeypatch):
    def explode(mesh, path, tag=None, options=None):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr("meshport.api.write_mesh", explode)
    count, errors = convert_batch([ascii_stl, obj_quad], str(tmp_path / "b"), "off", max_workers=2)
    assert count == 0
    assert errors == {src: (ErrorKind.READ_FAILED, "RuntimeError: disk on fire")
                      for src in (ascii_stl, obj_quad)}


def test_summary_skipped_unless_debug(obj_quad, tmp_path, monkeypatch, caplog):
    calls = []
    monkeypatch.setattr("meshport.api.summary_line", lambda mesh: calls.append(mesh) or "")
    caplog.set_level(logging.INFO, logger="meshport.api")
    assert convert_one(obj_quad, str(tmp_path / "a.stl")).ok
    assert calls == []
    caplog.set_level(logging.DEBUG, logger="meshport.api")
    assert convert_one(obj_quad, str(tmp_path / "b.stl")).ok
    assert len(calls) == 1
