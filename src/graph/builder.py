"""Module graph construction from a single entry file."""

from __future__ import annotations

import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from contract.artifacts import ENTRY_IDENTITY, ENTRY_MODULE_NAME
from contract.errors import CycleError, ResolutionError
from graph.algos import find_cycles
from utils import locate_under_roots

if TYPE_CHECKING:
    from collections.abc import Sequence

    from artifacts.models.artifacts.modules import ModuleRecord
    from parse.analyzer import ModuleAnalyzer
    from resolve.paths import PathResolver
    from rules.config import CycleBehavior

logger = logging.getLogger(__name__)


class IdentityAllocator:
    """Hands out module identities in increasing order, never reusing one."""

    def __init__(self, start: int = ENTRY_IDENTITY) -> None:
        self._next = start

    def allocate(self) -> int:
        identity = self._next
        self._next += 1
        return identity

    @property
    def allocated(self) -> int:
        return self._next


class GraphBuilder:
    """Breadth-first discovery of every module reachable from an entry file.

    The discovery cache maps each canonical path to its identity the moment
    the path is first seen, so a module is analyzed exactly once no matter
    how many importers it has, and an import that points back at a module
    already in the cache (a cycle) just reuses its identity.
    """

    def __init__(
        self,
        analyzer: ModuleAnalyzer,
        resolver: PathResolver,
        *,
        cycles: CycleBehavior = "allow",
        jobs: int = 1,
    ) -> None:
        self.analyzer = analyzer
        self.resolver = resolver
        self.cycles = cycles
        self.jobs = jobs

    def _claim(
        self,
        path: Path,
        discovered: dict[str, int],
        allocator: IdentityAllocator,
    ) -> tuple[int, bool]:
        """Return the identity for ``path`` and whether it was newly claimed."""
        key = path.as_posix()
        identity = discovered.get(key)
        if identity is not None:
            return identity, False
        identity = allocator.allocate()
        discovered[key] = identity
        return identity, True

    def _analyze(self, identity: int, path: Path, *, entry: bool) -> ModuleRecord:
        name, display_path = locate_under_roots(path, self.resolver.search_roots)
        if entry:
            name = ENTRY_MODULE_NAME
        return self.analyzer.analyze(
            path, identity, name=name, display_path=display_path
        )

    def _analyze_frontier(
        self,
        frontier: Sequence[tuple[int, Path]],
        executor: ThreadPoolExecutor | None,
    ) -> list[ModuleRecord]:
        if executor is None or len(frontier) < 2:
            return [
                self._analyze(identity, path, entry=identity == ENTRY_IDENTITY)
                for identity, path in frontier
            ]
        return list(
            executor.map(
                lambda item: self._analyze(
                    item[0], item[1], entry=item[0] == ENTRY_IDENTITY
                ),
                frontier,
            )
        )

    def _link(
        self,
        record: ModuleRecord,
        discovered: dict[str, int],
        allocator: IdentityAllocator,
        worklist: deque[tuple[int, Path]],
    ) -> None:
        """Resolve each specifier of ``record`` and fill its specifier map."""
        from_dir = Path(record.canonical_path).parent
        for specifier in record.raw_specifiers:
            try:
                target = self.resolver.resolve(specifier, from_dir)
            except ResolutionError as exc:
                raise ResolutionError(
                    record.canonical_path, specifier, exc.message
                ) from exc

            self._record_target(
                record, specifier, target, discovered, allocator, worklist
            )

        for specifier in record.fallback_specifiers:
            if specifier in record.specifier_map:
                continue
            try:
                target = self.resolver.resolve(specifier, from_dir)
            except ResolutionError:
                logger.debug(
                    "%s: %r is not a submodule", record.display_path, specifier
                )
                continue
            self._record_target(
                record, specifier, target, discovered, allocator, worklist
            )

    def _record_target(
        self,
        record: ModuleRecord,
        specifier: str,
        target: Path,
        discovered: dict[str, int],
        allocator: IdentityAllocator,
        worklist: deque[tuple[int, Path]],
    ) -> None:
        identity, is_new = self._claim(target, discovered, allocator)
        if is_new:
            worklist.append((identity, target))
        record.specifier_map[specifier] = identity

    def build(self, entry_path: str | Path) -> list[ModuleRecord]:
        """Discover, analyze and link every module reachable from the entry.

        Returns:
            Module records ordered by identity; the entry has identity 0.

        Raises:
            ReadError, ParseError, LowerError: From analyzing a module.
            ResolutionError: If a specifier cannot be resolved.
            CycleError: If cycles are configured as fatal and one exists.
        """
        entry = Path(entry_path).resolve()
        allocator = IdentityAllocator()
        discovered: dict[str, int] = {}
        records: list[ModuleRecord] = []

        entry_identity, _ = self._claim(entry, discovered, allocator)
        worklist: deque[tuple[int, Path]] = deque([(entry_identity, entry)])

        executor = None
        if self.jobs > 1:
            executor = ThreadPoolExecutor(max_workers=self.jobs)
        try:
            while worklist:
                # Pop the whole frontier; every module in it is already claimed,
                # so analysis can run concurrently while linking stays ordered.
                frontier = [worklist.popleft() for _ in range(len(worklist))]
                for record in self._analyze_frontier(frontier, executor):
                    self._link(record, discovered, allocator, worklist)
                    records.append(record)
        finally:
            if executor is not None:
                executor.shutdown()

        logger.debug("built graph of %d modules from %s", len(records), entry)
        self._check_cycles(records)
        return records

    def _check_cycles(self, records: list[ModuleRecord]) -> None:
        if self.cycles == "allow":
            return
        for cycle in graph_cycles(records):
            if self.cycles == "error":
                raise CycleError(cycle)
            logger.warning("circular import between %s", ", ".join(cycle))


def graph_cycles(records: Sequence[ModuleRecord]) -> list[list[str]]:
    """Return the circular import groups of a built graph as display paths.

    Members of a group are listed by identity and the groups are sorted, so
    the result does not depend on traversal details.
    """
    by_identity = {record.identity: record for record in records}
    graph: dict[int, set[int]] = {
        record.identity: set(record.specifier_map.values()) for record in records
    }
    groups = sorted(sorted(scc) for scc in find_cycles(graph))

    return [
        [by_identity[identity].display_path for identity in group] for group in groups
    ]


__all__ = ["GraphBuilder", "IdentityAllocator", "graph_cycles"]
