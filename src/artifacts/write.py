"""Build pipeline: configuration to module graph to artifact."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.summaries.builders import build_manifest
from artifacts.utils import _json_bytes, _write_all_atomic
from bundle.emit import emit
from graph.builder import GraphBuilder
from parse.analyzer import ModuleAnalyzer
from resolve.paths import PathResolver
from rules.config import load_config

if TYPE_CHECKING:
    from artifacts.models.artifacts.dependencies import GraphManifest
    from artifacts.models.artifacts.modules import ModuleRecord
    from rules.config import BundleConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """A finished build: the graph and the rendered artifact."""

    entry: Path
    records: tuple[ModuleRecord, ...]
    artifact: str

    def manifest(self) -> GraphManifest:
        return build_manifest(self.records)


def resolve_entry(root: Path, entry: str | Path | None, config: BundleConfig) -> Path:
    """Return the absolute entry path (CLI argument wins over the config)."""
    raw = Path(entry) if entry is not None else Path(config.entry)
    raw = raw.expanduser()
    if not raw.is_absolute():
        raw = root / raw
    return raw.resolve()


def make_builder(root: Path, entry: Path, config: BundleConfig) -> GraphBuilder:
    """Wire a resolver, analyzer and graph builder from the configuration."""
    search_roots = [entry.parent]
    search_roots.extend((root / path).resolve() for path in config.search_paths)
    resolver = PathResolver(
        search_roots,
        extensions=config.extensions,
        externals=config.externals,
        stdlib_external=config.stdlib_external,
    )
    analyzer = ModuleAnalyzer(resolver.is_external)
    return GraphBuilder(analyzer, resolver, cycles=config.cycles, jobs=config.jobs)


def build_bundle(
    *,
    root: Path,
    entry: str | Path | None = None,
    config: BundleConfig | None = None,
) -> BuildResult:
    """Build the module graph of a project and render its artifact.

    Args:
        root: Project root holding modpack.toml
        entry: Optional entry file (default: config entry)
        config: Optional configuration (default: loaded from root)

    Returns:
        BuildResult with the ordered records and artifact text.

    Raises:
        BundleError: Any build error; nothing is written.
    """
    if config is None:
        config = load_config(root)

    entry_path = resolve_entry(root, entry, config)
    builder = make_builder(root, entry_path, config)
    records = builder.build(entry_path)
    artifact = emit(records)
    logger.info("bundled %d modules from %s", len(records), entry_path)
    return BuildResult(entry=entry_path, records=tuple(records), artifact=artifact)


def write_outputs(
    result: BuildResult,
    *,
    output: Path | None = None,
    manifest: Path | None = None,
) -> list[Path]:
    """Write the artifact and optional manifest; return the written paths.

    Both payloads are serialized and staged before either file is replaced,
    so a failed write leaves no partial output behind.
    """
    payloads: list[tuple[Path, bytes]] = []
    if output is not None:
        payloads.append((output, result.artifact.encode("utf-8")))
    if manifest is not None:
        payloads.append((manifest, _json_bytes(result.manifest())))
    _write_all_atomic(payloads)
    return [path for path, _data in payloads]


__all__ = [
    "BuildResult",
    "build_bundle",
    "make_builder",
    "resolve_entry",
    "write_outputs",
]
