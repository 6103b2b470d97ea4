# -*- coding: utf-8 -*-
# Meshport/meshport/config.py

"""
Project: Meshport
Date: 10/19/2026

Purpose
-------
Build ProcessingOptions / WriteOptions from sectioned defaults and user overrides
(a JSON file and/or a nested dict), rejecting unknown keys and out-of-domain values.

Main Tasks
----------
    1. Keep the documented defaults in one sectioned `DEFAULTS` dict.
    2. Right-biased deep merge of overrides over the defaults (inputs never mutated).
    3. Load overrides from a JSON file.
    4. Convert the merged dict into option records and validate them.

Notes
-----
- JSON layout: {"processing": {...ProcessingOptions fields...}, "write": {...WriteOptions fields...}}
- Any problem is a MeshError(PARAM_INVALID) naming the offending key.
"""

import copy
import json
import logging
from dataclasses import fields
from typing import Any, Dict, Mapping, Optional, Tuple

from .core.errors import ErrorKind, MeshError
from .core.options import ProcessingOptions, WriteOptions

logger = logging.getLogger(__name__)


# -------------------------
# Defaults (policy)
# -------------------------
DEFAULTS: Dict[str, Any] = {
    "processing": {f.name: f.default for f in fields(ProcessingOptions)},
    "write": {f.name: f.default for f in fields(WriteOptions)},
}

_SECTIONS = {"processing": ProcessingOptions, "write": WriteOptions}


def _deep_merge(base: Dict[str, Any], upd: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Deep-merge two nested dicts (right-biased), preserving types and not mutating inputs.
    """
    if not upd:
        return copy.deepcopy(base)
    out = copy.deepcopy(base)
    for k, v in upd.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def _check_keys(cfg: Mapping[str, Any]) -> None:
    for section, block in cfg.items():
        if section not in _SECTIONS:
            raise MeshError(ErrorKind.PARAM_INVALID, "Unknown configuration section '{}'".format(section))
        if not isinstance(block, Mapping):
            raise MeshError(ErrorKind.PARAM_INVALID,
                            "Configuration section '{}' must be a mapping".format(section))
        for key in block:
            if key not in DEFAULTS[section]:
                raise MeshError(ErrorKind.PARAM_INVALID,
                                "Unknown {} option '{}'".format(section, key),
                                {"allowed": sorted(DEFAULTS[section])})


def _coerce(section: str, key: str, value: Any) -> Any:
    """Cast to the type of the default, refusing lossy or nonsensical conversions."""
    default = DEFAULTS[section][key]
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise MeshError(ErrorKind.PARAM_INVALID,
                            "{}.{} must be true or false (got {!r})".format(section, key, value))
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise MeshError(ErrorKind.PARAM_INVALID,
                            "{}.{} must be an integer (got {!r})".format(section, key, value))
        return value
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MeshError(ErrorKind.PARAM_INVALID,
                            "{}.{} must be a number (got {!r})".format(section, key, value))
        return float(value)
    if not isinstance(value, str):
        raise MeshError(ErrorKind.PARAM_INVALID,
                        "{}.{} must be a string (got {!r})".format(section, key, value))
    return value


def load_config(path: str) -> Dict[str, Any]:
    """Read a JSON override file (PARAM_INVALID on unreadable or malformed content)."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise MeshError(ErrorKind.PARAM_INVALID, "Cannot load configuration '{}': {}".format(path, e))
    if not isinstance(data, dict):
        raise MeshError(ErrorKind.PARAM_INVALID, "Configuration root must be a JSON object: {}".format(path))
    return data


def build_options(overrides: Optional[Mapping[str, Any]] = None) -> Tuple[ProcessingOptions, WriteOptions]:
    """
    Merge `overrides` over DEFAULTS and build validated option records.

    Parameters
    ----------
    overrides : Mapping, optional
        Nested dict with optional "processing" and "write" sections.

    Returns
    -------
    (ProcessingOptions, WriteOptions)

    Raises
    ------
    MeshError
        PARAM_INVALID for unknown keys, wrong types or out-of-domain values.
    """
    _check_keys(overrides or {})
    cfg = _deep_merge(DEFAULTS, overrides or {})
    built = {}
    for section, cls in _SECTIONS.items():
        values = {k: _coerce(section, k, v) for k, v in cfg[section].items()}
        built[section] = cls(**values)

    problems = built["processing"].validate() + built["write"].validate()
    if problems:
        raise MeshError(ErrorKind.PARAM_INVALID, "; ".join(problems))
    logger.debug("[build_options] processing=%s write=%s",
                 built["processing"].to_dict(), built["write"].to_dict())
    return built["processing"], built["write"]
