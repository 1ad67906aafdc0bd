"""Graph manifest models.

This module contains models describing a built module graph without its code:
the records, their resolved edges and the circular import groups.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from contract.artifacts import MANIFEST_SCHEMA_VERSION


class ManifestModule(BaseModel):
    """A module entry of the graph manifest."""

    identity: int
    name: str
    path: str
    specifiers: list[str] = Field(default_factory=list)
    specifier_map: dict[str, int] = Field(default_factory=dict)


class GraphManifest(BaseModel):
    """Summary of a built module graph."""

    schema_version: int = Field(default=MANIFEST_SCHEMA_VERSION)
    entry: str
    module_count: int
    edge_count: int
    modules: list[ManifestModule] = Field(default_factory=list)
    edges: list[tuple[int, int]] = Field(default_factory=list)
    cycles: list[list[str]] = Field(default_factory=list)
    fan_in: dict[str, int] = Field(default_factory=dict)


__all__ = ["GraphManifest", "ManifestModule"]
