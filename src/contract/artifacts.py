"""Bundle artifact contract definitions.

This module defines the stable constants shared by the graph builder, the
emitter and the generated runtime loader.
"""

from __future__ import annotations

# Manifest schema version for graph manifests.
MANIFEST_SCHEMA_VERSION = 1

# The entry module always receives this identity; the runtime starts here.
ENTRY_IDENTITY = 0

# Runtime name of the entry module.
ENTRY_MODULE_NAME = "__main__"

# Name under which the loader injects ``require`` into every bundled module.
REQUIRE_BINDING = "__require__"

# Marker passed to ``require`` for ``from x import *``.
STAR_IMPORT = "*"

# Imports of these top-level names are always left to the host interpreter.
ALWAYS_EXTERNAL = frozenset({"__future__"})

# Default ordered probe list for turning a dotted specifier into a file.
DEFAULT_EXTENSIONS = (".py", "/__init__.py")

# Conventional entry location, relative to the project root.
DEFAULT_ENTRY = "src/entry.py"

ARTIFACT_HEADER = "# Generated by modpack. Do not edit.\n"
