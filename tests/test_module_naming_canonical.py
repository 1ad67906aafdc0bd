from __future__ import annotations

from pathlib import Path

import pytest

from utils import locate_under_roots, path_to_module


def test_path_to_module_rules() -> None:
    assert path_to_module("pkg/__init__.py") == "pkg"
    assert path_to_module("pkg/module.py") == "pkg.module"
    assert path_to_module(Path("nested/feature/tool.py")) == "nested.feature.tool"
    assert path_to_module("src/app/cli.py") == "src.app.cli"


def test_path_to_module_rejects_empty_module_names() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        path_to_module("__init__.py")


def test_locate_under_roots_first_root_wins(tmp_path: Path) -> None:
    app_root = tmp_path / "app"
    lib_root = tmp_path / "app" / "lib"
    module_path = lib_root / "helpers" / "text.py"

    name, display_path = locate_under_roots(module_path, [app_root, lib_root])

    assert name == "lib.helpers.text"
    assert display_path == "lib/helpers/text.py"


def test_locate_under_roots_root_package_named_after_root(tmp_path: Path) -> None:
    root = tmp_path / "mypkg"

    name, display_path = locate_under_roots(root / "__init__.py", [root])

    assert name == "mypkg"
    assert display_path == "__init__.py"


def test_locate_under_roots_outside_every_root(tmp_path: Path) -> None:
    outside = tmp_path / "elsewhere" / "tools" / "__init__.py"

    name, display_path = locate_under_roots(outside, [tmp_path / "app"])

    assert name == "tools"
    assert display_path == outside.as_posix()
