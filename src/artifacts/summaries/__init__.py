"""Graph summary builders."""

from artifacts.summaries.builders import build_manifest, compute_edges, compute_fan_in

__all__ = ["build_manifest", "compute_edges", "compute_fan_in"]
