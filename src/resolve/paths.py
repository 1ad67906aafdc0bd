"""Specifier to file resolution for bundled modules."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from contract.artifacts import ALWAYS_EXTERNAL, DEFAULT_EXTENSIONS
from contract.errors import ResolutionError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)


def split_specifier(specifier: str) -> tuple[int, list[str]]:
    """Split a dotted specifier into its relative level and name parts.

    Examples:
        >>> split_specifier("pkg.util")
        (0, ['pkg', 'util'])
        >>> split_specifier("..core")
        (2, ['core'])
        >>> split_specifier(".")
        (1, [])
    """
    level = len(specifier) - len(specifier.lstrip("."))
    remainder = specifier[level:]
    parts = remainder.split(".") if remainder else []
    return level, parts


class PathResolver:
    """Maps an import specifier plus the importer's directory to a file.

    Relative specifiers are anchored at ``from_dir`` (one leading dot) or one
    of its ancestors (each extra dot). Absolute specifiers are probed under
    each search root in order. For every candidate base path the ordered
    ``extensions`` list is probed and the first regular file wins.
    """

    def __init__(
        self,
        search_roots: Sequence[Path],
        *,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        externals: Iterable[str] = (),
        stdlib_external: bool = True,
    ) -> None:
        self.search_roots = [Path(root).resolve() for root in search_roots]
        self.extensions = tuple(extensions)
        self.externals = frozenset(externals) | ALWAYS_EXTERNAL
        if stdlib_external:
            self.externals |= frozenset(sys.stdlib_module_names)
        self._cache: dict[tuple[str, str], Path] = {}

    def is_external(self, specifier: str) -> bool:
        """Return True when the host interpreter provides this module."""
        level, parts = split_specifier(specifier)
        return level == 0 and bool(parts) and parts[0] in self.externals

    def resolve(self, specifier: str, from_dir: str | Path) -> Path:
        """Resolve ``specifier`` imported from a module living in ``from_dir``.

        Raises:
            ResolutionError: If no probed candidate exists.
        """
        key = (specifier, str(from_dir))
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        resolved = self._probe(specifier, Path(from_dir))
        self._cache[key] = resolved
        logger.debug("resolved %r from %s to %s", specifier, from_dir, resolved)
        return resolved

    def _bases(self, specifier: str, from_dir: Path) -> list[Path]:
        level, parts = split_specifier(specifier)
        if level == 0 and not parts:
            raise ResolutionError(str(from_dir), specifier, "empty import specifier")

        if level == 0:
            return [root.joinpath(*parts) for root in self.search_roots]

        anchor = from_dir
        for _ in range(level - 1):
            if anchor.parent == anchor:
                msg = f"relative import {specifier!r} goes beyond the filesystem root"
                raise ResolutionError(str(from_dir), specifier, msg)
            anchor = anchor.parent
        return [anchor.joinpath(*parts)]

    def _probe(self, specifier: str, from_dir: Path) -> Path:
        bare_package = not split_specifier(specifier)[1]
        tried: list[str] = []
        for base in self._bases(specifier, from_dir):
            for suffix in self.extensions:
                if bare_package and not suffix.startswith("/"):
                    continue
                candidate = Path(f"{base}{suffix}")
                tried.append(candidate.as_posix())
                if candidate.is_file():
                    return candidate.resolve()

        msg = f"cannot resolve import {specifier!r} (tried: {', '.join(tried)})"
        raise ResolutionError(str(from_dir), specifier, msg)


__all__ = ["PathResolver", "split_specifier"]
