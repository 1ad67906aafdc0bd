"""Bundle emission and the generated runtime loader."""

from bundle.emit import BundleDescription, RegistryEntry, describe, emit, render
from bundle.runtime import LOADER_PREAMBLE

__all__ = [
    "LOADER_PREAMBLE",
    "BundleDescription",
    "RegistryEntry",
    "describe",
    "emit",
    "render",
]
