"""Import specifier resolution for modpack-core."""

from resolve.paths import PathResolver, split_specifier

__all__ = ["PathResolver", "split_specifier"]
