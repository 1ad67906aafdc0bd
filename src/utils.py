"""Shared utilities for modpack-core."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


def path_to_module(file_path: str | Path) -> str:
    """Convert a root-relative file path to a Python module name.

    Args:
        file_path: Relative file path (e.g., "pkg/util.py" or Path object)

    Returns:
        Module name (e.g., "pkg.util")

    Raises:
        ValueError: If the path does not name a module (e.g., a bare
            "__init__.py" at the root).

    Examples:
        >>> path_to_module("pkg/util.py")
        'pkg.util'
        >>> path_to_module("pkg/__init__.py")
        'pkg'
        >>> path_to_module(Path("foo/bar.py"))
        'foo.bar'
    """
    path_str = file_path.as_posix() if isinstance(file_path, Path) else str(file_path)
    module_parts = [part for part in path_str.replace("\\", "/").split("/") if part]

    if module_parts and module_parts[-1].endswith(".py"):
        module_parts[-1] = module_parts[-1][:-3]

    if module_parts and module_parts[-1] == "__init__":
        module_parts = module_parts[:-1]

    if not module_parts:
        msg = f"path {path_str!r} must map to a non-empty module name"
        raise ValueError(msg)

    return ".".join(module_parts)


def locate_under_roots(path: Path, roots: Sequence[Path]) -> tuple[str, str]:
    """Return ``(module_name, display_path)`` for a resolved module file.

    The first root containing ``path`` wins. A package ``__init__.py`` sitting
    directly in a root is named after the root directory. Files outside every
    root fall back to their absolute POSIX path and file stem.
    """
    for root in roots:
        try:
            rel_path = path.relative_to(root)
        except ValueError:
            continue
        display_path = rel_path.as_posix()
        try:
            return path_to_module(rel_path), display_path
        except ValueError:
            return root.name or path.stem, display_path

    name = path.parent.name if path.stem == "__init__" else path.stem
    return name, path.as_posix()
