# -*- coding: utf-8 -*-
# Meshport/tests/test_cli.py

import json

import pytest

from meshport import __version__
from meshport.cli import main
from meshport.formats.detect import detect
from meshport.formats.tags import FormatTag
from meshport.readers import read_mesh


def test_list_formats(capsys):
    assert main(["-l"]) == 0
    out = capsys.readouterr().out
    assert "STL Binary (.stl)" in out
    assert "OpenFOAM (case directory)" in out


def test_version(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--version"])
    assert info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_single_conversion_cleans_by_default(binary_stl, tmp_path, capsys):
    dst = str(tmp_path / "two.obj")
    assert main([binary_stl, dst]) == 0
    assert "Converted" in capsys.readouterr().out
    assert read_mesh(dst).mesh.point_count == 4


def test_no_cleaning(binary_stl, tmp_path):
    dst = str(tmp_path / "two.obj")
    assert main(["--no-cleaning", binary_stl, dst]) == 0
    assert read_mesh(dst).mesh.point_count == 6


def test_ascii_and_target_format(obj_quad, tmp_path):
    dst = str(tmp_path / "quad.stl")
    assert main(["--ascii", "--solid-name", "plate", "-t", "stl", obj_quad, dst]) == 0
    assert detect(dst) == FormatTag.STL_ASCII
    with open(dst, encoding="utf-8") as f:
        assert f.readline().strip() == "solid plate"


def test_triangulate_and_normals(obj_quad, tmp_path):
    dst = str(tmp_path / "quad.ply")
    assert main(["--triangulate", "--compute-normals", obj_quad, dst]) == 0
    mesh = read_mesh(dst).mesh
    assert mesh.cell_count == 2
    assert "Normals_2" in mesh.point_data


def test_failure_exit_code(tmp_path, capsys):
    assert main([str(tmp_path / "ghost.stl"), str(tmp_path / "x.obj")]) == 1
    assert "FILE_NOT_EXIST" in capsys.readouterr().err


def test_usage_errors(obj_quad):
    with pytest.raises(SystemExit) as info:
        main([obj_quad])
    assert info.value.code == 2
    with pytest.raises(SystemExit) as info:
        main(["-t", "dwg", obj_quad, "x.dwg"])
    assert info.value.code == 2
    with pytest.raises(SystemExit) as info:
        main(["--batch", "out", obj_quad])
    assert info.value.code == 2


def test_invalid_option_value_exit_code(obj_quad, tmp_path):
    assert main(["--relaxation", "3", obj_quad, str(tmp_path / "x.obj")]) == 2


def test_config_file_and_flag_precedence(obj_quad, tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"write": {"binary": False, "solid_name": "fromcfg"}}), encoding="utf-8")
    dst = str(tmp_path / "q.stl")
    assert main(["--config", str(cfg), "--solid-name", "fromflag", obj_quad, dst]) == 0
    with open(dst, encoding="utf-8") as f:
        assert f.readline().strip() == "solid fromflag"


def test_bad_config_file(obj_quad, tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"write": {"colour": "red"}}), encoding="utf-8")
    assert main(["--config", str(cfg), obj_quad, str(tmp_path / "x.obj")]) == 2


def test_batch(ascii_stl, obj_quad, tmp_path, capsys):
    out_dir = tmp_path / "batch"
    missing = str(tmp_path / "missing.off")
    code = main(["--batch", str(out_dir), "-t", "off", "--workers", "2", ascii_stl, obj_quad, missing])
    assert code == 1
    captured = capsys.readouterr()
    assert "2 of 3 file(s) converted" in captured.out
    assert missing in captured.err
    assert (out_dir / "quad.off").is_file()


def test_info_with_report(ply_ascii, off_file, tmp_path, capsys):
    report = tmp_path / "summary.json"
    assert main(["--info", "--report", str(report), ply_ascii, off_file]) == 0
    assert "tet.ply [PLY ASCII]" in capsys.readouterr().out
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data[ply_ascii]["counts"] == {"points": 4, "cells": 4}
    assert data[off_file]["cell_types"] == {"quad": 2}


def test_info_csv_report(off_file, tmp_path):
    report = tmp_path / "summary.csv"
    assert main(["--info", "--report", str(report), off_file]) == 0
    text = report.read_text(encoding="utf-8")
    assert text.splitlines()[0] == "key,value"
    assert "counts.points,6" in text
