"""Determinism verification for bundle artifacts."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import TYPE_CHECKING

from artifacts.write import build_bundle

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import BundleConfig


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    expected_sha256: str
    actual_sha256: str
    module_count: int = 0


def _sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def verify_artifact(
    *,
    root: Path,
    artifact_path: Path,
    entry: str | Path | None = None,
    config: BundleConfig | None = None,
) -> DeterminismResult:
    """Verify that an existing artifact matches a fresh build byte for byte.

    Args:
        root: Project root to build.
        artifact_path: Previously written artifact.
        entry: Optional entry file (default: config entry).
        config: Optional configuration (default: loaded from root).

    Returns:
        DeterminismResult with ok status and both digests.

    Raises:
        FileNotFoundError: If artifact_path does not exist.
        IsADirectoryError: If artifact_path is a directory.
        BundleError: If the rebuild fails.
    """
    if not artifact_path.exists():
        msg = f"Artifact does not exist: {artifact_path}"
        raise FileNotFoundError(msg)
    if artifact_path.is_dir():
        msg = f"Artifact path is a directory: {artifact_path}"
        raise IsADirectoryError(msg)

    expected = artifact_path.read_bytes()
    result = build_bundle(root=root, entry=entry, config=config)
    actual = result.artifact.encode("utf-8")

    return DeterminismResult(
        ok=expected == actual,
        expected_sha256=_sha256(expected),
        actual_sha256=_sha256(actual),
        module_count=len(result.records),
    )
