"""Model namespace for modpack-core graph records."""

from artifacts.models.artifacts.dependencies import GraphManifest, ManifestModule
from artifacts.models.artifacts.modules import ModuleRecord

__all__ = ["GraphManifest", "ManifestModule", "ModuleRecord"]
