from __future__ import annotations

import pytest

from artifacts.models.artifacts.modules import ModuleRecord
from bundle.emit import describe, emit, render
from bundle.runtime import LOADER_PREAMBLE


def _record(
    identity: int,
    name: str,
    code: str,
    specifier_map: dict[str, int] | None = None,
) -> ModuleRecord:
    specifier_map = specifier_map or {}
    return ModuleRecord(
        identity=identity,
        canonical_path=f"/virtual/{name}.py",
        name="__main__" if identity == 0 else name,
        display_path=f"{name}.py",
        raw_specifiers=list(specifier_map),
        lowered_code=code,
        specifier_map=specifier_map,
    )


def _chain_records() -> list[ModuleRecord]:
    return [
        _record(
            0,
            "entry",
            "a = __require__('.a')\n"
            "b = __require__('.b')\n"
            "print(a.NAME, b.NAME, a.b is b)",
            {".a": 1, ".b": 2},
        ),
        _record(1, "a", "NAME = 'a'\nb = __require__('.b')", {".b": 2}),
        _record(2, "b", "NAME = 'b'\nprint('b loaded')"),
    ]


def _relabel(
    records: list[ModuleRecord], mapping: dict[int, int]
) -> list[ModuleRecord]:
    return [
        record.model_copy(
            update={
                "identity": mapping[record.identity],
                "specifier_map": {
                    specifier: mapping[target]
                    for specifier, target in record.specifier_map.items()
                },
            }
        )
        for record in records
    ]


def _run(artifact: str) -> None:
    exec(compile(artifact, "<bundle>", "exec"), {"__name__": "__bundle__"})


def test_emit_is_byte_identical_for_identical_records() -> None:
    first = emit(_chain_records())
    second = emit(_chain_records())

    assert first == second


def test_emit_ignores_record_collection_order() -> None:
    records = _chain_records()

    assert emit(records) == emit(list(reversed(records)))


def test_artifact_layout() -> None:
    artifact = emit(_chain_records())

    assert artifact.startswith("#!/usr/bin/env python3\n# Generated by modpack.")
    assert LOADER_PREAMBLE in artifact
    assert artifact.rstrip().endswith("})")
    assert '{".a":1,".b":2}' in artifact
    assert "_define('__main__', 'entry.py', " in artifact


def test_render_uses_description_only() -> None:
    description = describe(_chain_records())

    assert [entry.identity for entry in description.entries] == [0, 1, 2]
    assert render(description) == emit(_chain_records())


def test_relabeled_identities_behave_identically(
    capsys: pytest.CaptureFixture[str],
) -> None:
    records = _chain_records()
    relabeled = _relabel(records, {0: 0, 1: 7, 2: 3})

    _run(emit(records))
    original_output = capsys.readouterr().out
    _run(emit(relabeled))
    relabeled_output = capsys.readouterr().out

    assert original_output == "b loaded\na b True\n"
    assert relabeled_output == original_output


def test_describe_requires_entry() -> None:
    with pytest.raises(ValueError, match="no entry module"):
        describe([_record(1, "a", "")])


def test_describe_rejects_unfilled_specifier_map() -> None:
    record = _record(0, "entry", "")
    record.raw_specifiers.append(".later")

    with pytest.raises(ValueError, match="unresolved specifiers: .later"):
        describe([record])


def test_describe_rejects_dangling_identity() -> None:
    with pytest.raises(ValueError, match="unknown identity 5"):
        describe([_record(0, "entry", "", {".gone": 5})])


def test_describe_rejects_duplicate_identity() -> None:
    with pytest.raises(ValueError, match="duplicate module identity 0"):
        describe([_record(0, "entry", ""), _record(0, "again", "")])


def _package_records() -> list[ModuleRecord]:
    return [
        ModuleRecord(
            identity=0,
            canonical_path="/virtual/entry.py",
            name="__main__",
            display_path="entry.py",
            raw_specifiers=["pkg.core"],
            specifier_map={"pkg.core": 2},
        ),
        ModuleRecord(
            identity=1,
            canonical_path="/virtual/pkg/__init__.py",
            name="pkg",
            display_path="pkg/__init__.py",
        ),
        ModuleRecord(
            identity=2,
            canonical_path="/virtual/pkg/core.py",
            name="pkg.core",
            display_path="pkg/core.py",
        ),
    ]


def test_describe_records_package_and_parent() -> None:
    entries = describe(_package_records()).entries

    assert [(entry.package, entry.parent) for entry in entries] == [
        (None, None),
        ("pkg", None),
        ("pkg", (1, "core")),
    ]
    assert "        (1, 'core'),\n" in emit(_package_records())
