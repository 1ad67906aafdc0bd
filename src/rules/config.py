from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from contract.artifacts import DEFAULT_ENTRY, DEFAULT_EXTENSIONS

CONFIG_FILENAME = "modpack.toml"

CycleBehavior = Literal["allow", "warn", "error"]


class BundleConfig(BaseModel):
    """Configuration for modpack-core bundle builds."""

    model_config = ConfigDict(extra="forbid")

    entry: str = Field(
        default=DEFAULT_ENTRY,
        description="Entry module path, relative to the project root",
    )
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Ordered suffixes probed when resolving a specifier to a file",
    )
    search_paths: list[str] = Field(
        default_factory=list,
        description=(
            "Extra roots for absolute imports, relative to the project root "
            "(the entry's directory is always searched first)"
        ),
    )
    externals: list[str] = Field(
        default_factory=list,
        description="Top-level module names left to the host interpreter",
    )
    stdlib_external: bool = Field(
        default=True,
        description="Treat standard library modules as external",
    )
    cycles: CycleBehavior = Field(
        default="allow",
        description="Behavior for circular imports: allow, warn or error",
    )
    jobs: int = Field(
        default=1,
        ge=1,
        description="Number of threads used to analyze modules",
    )
    output: str | None = Field(
        default=None,
        description="Artifact output path (default: standard output)",
    )
    manifest: str | None = Field(
        default=None,
        description="Optional path for the JSON graph manifest",
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        """Each probe suffix must extend a path: ``.ext`` or ``/name``."""
        if not v:
            msg = "extensions must list at least one suffix"
            raise ValueError(msg)
        for suffix in v:
            if not suffix.startswith((".", "/")) or len(suffix) < 2:
                msg = f"Invalid extension {suffix!r}: must start with '.' or '/'"
                raise ValueError(msg)
        return v

    @field_validator("externals", mode="before")
    @classmethod
    def validate_externals(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, list):
            msg = "externals must be a list of module names"
            raise TypeError(msg)
        for name in v:
            if not isinstance(name, str) or not name or name.startswith("."):
                msg = f"Invalid external module name {name!r}"
                raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_path(root: Path, output: str) -> Path:
    """Resolve a config-provided output path safely within the project root.

    The path must be a non-empty relative path that remains within the root
    after resolution. Absolute paths and paths that escape the root are
    rejected.
    """
    if not output:
        msg = "output path must be a non-empty relative path"
        raise ConfigError(msg)

    if output.startswith("~"):
        msg = "output path must be a relative path within the project root"
        raise ConfigError(msg)

    output_path = Path(output)
    if output_path.is_absolute():
        msg = "output path must be a relative path within the project root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output path '{output}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output path '{output}' escapes the project root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> BundleConfig:
    """Load configuration from modpack.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return BundleConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return BundleConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
