"""Stable contract surface for modpack-core.

Constants shared with the generated runtime and the build error taxonomy.
"""

from contract.artifacts import (
    ARTIFACT_HEADER,
    DEFAULT_ENTRY,
    DEFAULT_EXTENSIONS,
    ENTRY_IDENTITY,
    ENTRY_MODULE_NAME,
    MANIFEST_SCHEMA_VERSION,
    REQUIRE_BINDING,
    STAR_IMPORT,
)
from contract.errors import (
    BundleError,
    CycleError,
    LowerError,
    ParseError,
    ReadError,
    ResolutionError,
)

__all__ = [
    "ARTIFACT_HEADER",
    "DEFAULT_ENTRY",
    "DEFAULT_EXTENSIONS",
    "ENTRY_IDENTITY",
    "ENTRY_MODULE_NAME",
    "MANIFEST_SCHEMA_VERSION",
    "REQUIRE_BINDING",
    "STAR_IMPORT",
    "BundleError",
    "CycleError",
    "LowerError",
    "ParseError",
    "ReadError",
    "ResolutionError",
]
