"""Module record models for bundled Python files.

A ModuleRecord is the unit of the dependency graph: one record per distinct
canonical path, created by the module analyzer and completed by the graph
builder when its specifier map is filled.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ModuleRecord(BaseModel):
    """A discovered module with its lowered code and resolved imports."""

    identity: int = Field(ge=0, description="Stable registry key")
    canonical_path: str = Field(description="Absolute resolved POSIX path")
    name: str = Field(description="Runtime __name__ of the module")
    display_path: str = Field(description="Path shown in tracebacks")
    raw_specifiers: list[str] = Field(default_factory=list)
    fallback_specifiers: list[str] = Field(
        default_factory=list,
        description="Submodules linked only when they resolve (from pkg import sub)",
    )
    lowered_code: str = ""
    specifier_map: dict[str, int] = Field(default_factory=dict)

    def missing_specifiers(self) -> list[str]:
        """Specifiers that have no identity recorded yet."""
        return [
            specifier
            for specifier in dict.fromkeys(self.raw_specifiers)
            if specifier not in self.specifier_map
        ]


__all__ = ["ModuleRecord"]
