"""Utility functions for writing build outputs."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import orjson


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    from dataclasses import asdict, is_dataclass

    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    return obj


def _json_bytes(obj: object) -> bytes:
    payload = _to_dict(obj)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE
    return orjson.dumps(payload, option=opts)


def _stage_bytes(path: Path, data: bytes) -> Path:
    """Write ``data`` to a temporary file beside ``path`` and return it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(temp_name, 0o644)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
    return Path(temp_name)


def _write_all_atomic(payloads: list[tuple[Path, bytes]]) -> None:
    """Write every payload, or none of them if any temporary write fails."""
    staged: list[Path] = []
    try:
        for path, data in payloads:
            staged.append(_stage_bytes(path, data))
    except BaseException:
        for temp in staged:
            temp.unlink(missing_ok=True)
        raise
    for (path, _data), temp in zip(payloads, staged):
        temp.replace(path)
