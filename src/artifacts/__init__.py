"""Build entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.write import BuildResult
    from rules.config import BundleConfig


def build_bundle(
    *,
    root: Path,
    entry: str | Path | None = None,
    config: BundleConfig | None = None,
) -> BuildResult:
    """Build a bundle via lazy import to avoid package import cycles."""
    from artifacts.write import build_bundle as _build_bundle

    return _build_bundle(root=root, entry=entry, config=config)


__all__ = ["build_bundle"]
