"""Bundle artifact emission.

Emission happens in two explicit steps: ``describe`` turns the module records
into a structured ``BundleDescription`` (registry plus preamble), and
``render`` serializes that description to the artifact text. Both are pure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import orjson

from bundle.runtime import LOADER_PREAMBLE
from contract.artifacts import ARTIFACT_HEADER, ENTRY_IDENTITY

if TYPE_CHECKING:
    from collections.abc import Iterable

    from artifacts.models.artifacts.modules import ModuleRecord


@dataclass(frozen=True)
class RegistryEntry:
    """One module of the artifact registry.

    ``parent`` is the ``(identity, attribute)`` of the package that receives
    this module as an attribute once it has loaded.
    """

    identity: int
    name: str
    filename: str
    code: str
    specifier_map: tuple[tuple[str, int], ...]
    package: str | None = None
    parent: tuple[int, str] | None = None


@dataclass(frozen=True)
class BundleDescription:
    """Everything needed to render an artifact, independent of its text form."""

    entries: tuple[RegistryEntry, ...]
    preamble: str = LOADER_PREAMBLE


def _package_of(record: ModuleRecord) -> str | None:
    if record.identity == ENTRY_IDENTITY:
        return None
    if record.canonical_path.endswith("/__init__.py"):
        return record.name
    return record.name.rpartition(".")[0]


def _parent_of(
    record: ModuleRecord, by_name: dict[str, int]
) -> tuple[int, str] | None:
    package, _, attribute = record.name.rpartition(".")
    if record.identity == ENTRY_IDENTITY or not package:
        return None
    identity = by_name.get(package)
    if identity is None:
        return None
    return identity, attribute


def describe(records: Iterable[ModuleRecord]) -> BundleDescription:
    """Build the artifact description for a complete record collection.

    Raises:
        ValueError: If the collection is not a complete graph (no entry,
            duplicate identities, unfilled specifiers or dangling targets).
    """
    by_identity: dict[int, ModuleRecord] = {}
    for record in records:
        if record.identity in by_identity:
            msg = f"duplicate module identity {record.identity}"
            raise ValueError(msg)
        missing = record.missing_specifiers()
        if missing:
            msg = (
                f"module {record.display_path} has unresolved specifiers: "
                f"{', '.join(missing)}"
            )
            raise ValueError(msg)
        by_identity[record.identity] = record

    if ENTRY_IDENTITY not in by_identity:
        msg = f"records contain no entry module (identity {ENTRY_IDENTITY})"
        raise ValueError(msg)

    by_name: dict[str, int] = {}
    for identity in sorted(by_identity):
        by_name.setdefault(by_identity[identity].name, identity)

    entries: list[RegistryEntry] = []
    for identity in sorted(by_identity):
        record = by_identity[identity]
        for specifier, target in sorted(record.specifier_map.items()):
            if target not in by_identity:
                msg = (
                    f"module {record.display_path} maps {specifier!r} to unknown "
                    f"identity {target}"
                )
                raise ValueError(msg)
        entries.append(
            RegistryEntry(
                identity=identity,
                name=record.name,
                filename=record.display_path,
                code=record.lowered_code,
                specifier_map=tuple(sorted(record.specifier_map.items())),
                package=_package_of(record),
                parent=_parent_of(record, by_name),
            )
        )

    return BundleDescription(entries=tuple(entries))


def _render_entry(entry: RegistryEntry) -> str:
    mapping = orjson.dumps(dict(entry.specifier_map), option=orjson.OPT_SORT_KEYS)
    define = (
        f"_define({entry.name!r}, {entry.filename!r}, {entry.code!r}, "
        f"{entry.package!r})"
    )
    return (
        f"    {entry.identity}: (\n"
        f"        {define},\n"
        f"        {mapping.decode()},\n"
        f"        {entry.parent!r},\n"
        f"    ),\n"
    )


def render(description: BundleDescription) -> str:
    """Serialize a bundle description to the artifact source text."""
    registry = "".join(_render_entry(entry) for entry in description.entries)
    return (
        "#!/usr/bin/env python3\n"
        f"{ARTIFACT_HEADER}"
        f"{description.preamble}"
        "\n\n"
        f"_bundle({{\n{registry}}})\n"
    )


def emit(records: Iterable[ModuleRecord]) -> str:
    """Return the artifact text for a complete module graph."""
    return render(describe(records))


__all__ = ["BundleDescription", "RegistryEntry", "describe", "emit", "render"]
