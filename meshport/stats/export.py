# -*- coding: utf-8 -*-
# Meshport/meshport/stats/export.py

"""
Project: Meshport
Date: 10/19/2026

Purpose:
--------
Export mesh summaries (nested dicts from `stats.report.summarize`) to CSV or JSON.
Nested structures are flattened into dot-path key/value rows for CSV; numpy scalars are
converted to plain Python values.

Main Tasks:
-----------
    1. Flatten nested dictionaries into ("dot.path.key", value) rows.
    2. Export a summary as a 2-column "key,value" CSV or as indented JSON.
    3. Export a batch of summaries keyed by source path as one JSON document.
"""

import csv
import json
import os
from typing import Any, Dict, List, Tuple

import numpy as np


# ------------------------------
# Internal helpers
# ------------------------------
def _is_scalar(x: Any) -> bool:
    return x is None or isinstance(x, (str, bool, int, float, np.generic))


def _default(o: Any) -> Any:
    if isinstance(o, np.generic):
        return o.item()
    if isinstance(o, np.ndarray):
        return o.tolist()
    return str(o)


def _to_json_str(x: Any) -> str:
    return json.dumps(x, default=_default, ensure_ascii=False)


def _flatten(prefix: str, obj: Any, out: List[Tuple[str, Any]]) -> None:
    """
    Recursively flatten nested dicts into (key_path, value) rows.

    Scalars are stored as-is, dicts recurse over sorted keys joined with '.',
    anything else (lists, arrays) is stored as a JSON string.
    """
    if _is_scalar(obj):
        out.append((prefix, obj.item() if isinstance(obj, np.generic) else obj))
        return
    if isinstance(obj, dict):
        for k in sorted(obj.keys(), key=str):
            key = str(k)
            _flatten(key if prefix == "" else "{}.{}".format(prefix, key), obj[k], out)
        return
    out.append((prefix, _to_json_str(obj)))


def _ensure_folder(path: str) -> None:
    folder = os.path.dirname(os.path.abspath(path))
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)


# ------------------------------
# Public API: Writers
# ------------------------------
def write_summary_csv(summary: Dict[str, Any], path: str) -> str:
    """
    Write a summary dict to a 2-column CSV file ("key,value").

    Returns
    -------
    str
        Written file path.
    """
    rows: List[Tuple[str, Any]] = []
    _flatten("", summary, rows)
    _ensure_folder(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["key", "value"])
        for k, v in rows:
            w.writerow([k, "" if v is None else v])
    return path


def write_summary_json(summary: Dict[str, Any], path: str, indent: int = 2) -> str:
    """
    Write a summary dict (or a {path: summary} mapping) to a JSON file.

    Returns
    -------
    str
        Written file path.
    """
    _ensure_folder(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=indent, ensure_ascii=False, default=_default)
    return path
