"""Build error taxonomy for modpack-core.

Every build failure is fatal and is attributed to the module it happened in,
so a single error is enough to produce an actionable diagnostic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class BundleError(Exception):
    """Base class for errors that abort a build."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class ReadError(BundleError):
    """Module source could not be read."""


class ParseError(BundleError):
    """Module source is not valid Python."""

    def __init__(self, path: str, message: str, line: int | None = None) -> None:
        self.line = line
        location = path if line is None else f"{path}:{line}"
        super().__init__(location, message)
        self.path = path


class LowerError(BundleError):
    """Import lowering failed for a module."""


class ResolutionError(BundleError):
    """An import specifier does not map to any file."""

    def __init__(self, path: str, specifier: str, message: str | None = None) -> None:
        self.specifier = specifier
        super().__init__(path, message or f"cannot resolve import {specifier!r}")


class CycleError(BundleError):
    """A circular import was found while cycles are configured as fatal."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        members = ", ".join(self.cycle)
        super().__init__(self.cycle[0], f"circular import between {members}")


__all__ = [
    "BundleError",
    "CycleError",
    "LowerError",
    "ParseError",
    "ReadError",
    "ResolutionError",
]
