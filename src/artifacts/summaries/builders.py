"""Summary builders for module graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from artifacts.models.artifacts.dependencies import GraphManifest, ManifestModule
from graph.builder import graph_cycles

if TYPE_CHECKING:
    from collections.abc import Sequence

    from artifacts.models.artifacts.modules import ModuleRecord


def compute_edges(records: Sequence[ModuleRecord]) -> list[tuple[int, int]]:
    """Return the distinct ``(importer, imported)`` identity pairs, sorted."""
    edges = {
        (record.identity, target)
        for record in records
        for target in record.specifier_map.values()
    }
    return sorted(edges)


def compute_fan_in(
    edges: list[tuple[int, int]],
    records: Sequence[ModuleRecord],
) -> dict[str, int]:
    """Count importers per module, keyed by display path."""
    paths = {record.identity: record.display_path for record in records}
    fan_in: dict[str, int] = {}

    for _source, target in edges:
        path = paths[target]
        fan_in[path] = fan_in.get(path, 0) + 1

    return dict(sorted(fan_in.items()))


def build_manifest(records: Sequence[ModuleRecord]) -> GraphManifest:
    """Describe a built graph without its code."""
    ordered = sorted(records, key=lambda record: record.identity)
    edges = compute_edges(ordered)
    return GraphManifest(
        entry=ordered[0].display_path if ordered else "",
        module_count=len(ordered),
        edge_count=len(edges),
        modules=[
            ManifestModule(
                identity=record.identity,
                name=record.name,
                path=record.display_path,
                specifiers=list(record.raw_specifiers),
                specifier_map=dict(sorted(record.specifier_map.items())),
            )
            for record in ordered
        ],
        edges=edges,
        cycles=graph_cycles(ordered),
        fan_in=compute_fan_in(edges, ordered),
    )
