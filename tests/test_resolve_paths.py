from __future__ import annotations

from pathlib import Path

import pytest

from contract.errors import ResolutionError
from resolve.paths import PathResolver, split_specifier


def _write(root: Path, relative: str, content: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_split_specifier_levels() -> None:
    assert split_specifier("pkg.util") == (0, ["pkg", "util"])
    assert split_specifier(".sibling") == (1, ["sibling"])
    assert split_specifier("..pkg.mod") == (2, ["pkg", "mod"])
    assert split_specifier("..") == (2, [])


def test_resolve_relative_module(tmp_path: Path) -> None:
    target = _write(tmp_path, "app/helpers.py")
    resolver = PathResolver([tmp_path])

    assert resolver.resolve(".helpers", tmp_path / "app") == target.resolve()


def test_resolve_relative_parent_level(tmp_path: Path) -> None:
    target = _write(tmp_path, "app/shared/config.py")
    resolver = PathResolver([tmp_path])

    resolved = resolver.resolve("..shared.config", tmp_path / "app" / "views")

    assert resolved == target.resolve()


def test_resolve_package_init(tmp_path: Path) -> None:
    target = _write(tmp_path, "pkg/__init__.py")
    resolver = PathResolver([tmp_path])

    assert resolver.resolve("pkg", tmp_path) == target.resolve()


def test_bare_dot_resolves_to_current_package(tmp_path: Path) -> None:
    target = _write(tmp_path, "pkg/__init__.py")
    _write(tmp_path, "pkg.py")
    resolver = PathResolver([tmp_path])

    assert resolver.resolve(".", tmp_path / "pkg") == target.resolve()


def test_extension_order_first_match_wins(tmp_path: Path) -> None:
    module_file = _write(tmp_path, "tool.py")
    _write(tmp_path, "tool/__init__.py")

    default_resolver = PathResolver([tmp_path])
    package_first = PathResolver([tmp_path], extensions=["/__init__.py", ".py"])

    assert default_resolver.resolve("tool", tmp_path) == module_file.resolve()
    assert package_first.resolve("tool", tmp_path) == (
        tmp_path / "tool" / "__init__.py"
    ).resolve()


def test_configurable_extensions(tmp_path: Path) -> None:
    target = _write(tmp_path, "script.pyw")
    resolver = PathResolver([tmp_path], extensions=[".py", ".pyw"])

    assert resolver.resolve(".script", tmp_path) == target.resolve()


def test_absolute_imports_search_roots_in_order(tmp_path: Path) -> None:
    _write(tmp_path, "vendor/shared.py")
    preferred = _write(tmp_path, "app/shared.py")
    resolver = PathResolver([tmp_path / "app", tmp_path / "vendor"])

    assert resolver.resolve("shared", tmp_path / "app" / "deep") == preferred.resolve()


def test_missing_module_lists_candidates(tmp_path: Path) -> None:
    resolver = PathResolver([tmp_path])

    with pytest.raises(ResolutionError) as exc_info:
        resolver.resolve(".missing", tmp_path)

    assert exc_info.value.specifier == ".missing"
    assert "missing.py" in exc_info.value.message
    assert "missing/__init__.py" in exc_info.value.message


def test_directory_is_not_a_module(tmp_path: Path) -> None:
    (tmp_path / "namespace").mkdir()
    resolver = PathResolver([tmp_path])

    with pytest.raises(ResolutionError):
        resolver.resolve("namespace", tmp_path)


def test_resolution_is_cached(tmp_path: Path) -> None:
    target = _write(tmp_path, "cached.py")
    resolver = PathResolver([tmp_path])

    first = resolver.resolve("cached", tmp_path)
    target.unlink()

    assert resolver.resolve("cached", tmp_path) == first


def test_is_external_classification(tmp_path: Path) -> None:
    resolver = PathResolver([tmp_path], externals=["requests"])

    assert resolver.is_external("os.path")
    assert resolver.is_external("requests.adapters")
    assert resolver.is_external("__future__")
    assert not resolver.is_external("pkg_a")
    assert not resolver.is_external(".os")


def test_stdlib_can_be_bundled(tmp_path: Path) -> None:
    resolver = PathResolver([tmp_path], stdlib_external=False)

    assert not resolver.is_external("json")
    assert resolver.is_external("__future__")
