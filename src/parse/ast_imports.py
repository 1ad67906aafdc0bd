"""AST-based import planning for bundled modules.

Only statements directly in the module body are considered. Imports nested in
functions, classes or ``if``/``try`` blocks are left for the host interpreter.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contract.artifacts import STAR_IMPORT

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class ImportBinding:
    """One ``require`` call produced by an import statement.

    ``target`` is the local name (possibly dotted, for ``import a.b``) the
    result is bound to, or None when the call only runs the module.
    ``attribute`` is the name pulled out of the module for ``from`` imports,
    or ``STAR_IMPORT``.
    """

    specifier: str
    target: str | None = None
    attribute: str | None = None


@dataclass
class ImportPlan:
    """How a single top-level import statement is bundled.

    ``fallbacks`` lists the submodule specifiers of ``from pkg import name``
    statements. They are linked only when they resolve to a file, and the
    loader requires one only when ``name`` is not an attribute of ``pkg``.
    """

    node: ast.Import | ast.ImportFrom
    bindings: list[ImportBinding] = field(default_factory=list)
    fallbacks: list[str] = field(default_factory=list)

    @property
    def specifiers(self) -> list[str]:
        """Distinct specifiers of this statement, in require order."""
        return list(dict.fromkeys(binding.specifier for binding in self.bindings))


def _parent_names(dotted: str) -> list[str]:
    """Return ``["a", "a.b", "a.b.c"]`` for ``"a.b.c"``."""
    parts = dotted.split(".")
    return [".".join(parts[: index + 1]) for index in range(len(parts))]


def submodule_specifier(specifier: str, name: str) -> str:
    """Return the specifier of submodule ``name`` of package ``specifier``."""
    if specifier.endswith("."):
        return specifier + name
    return f"{specifier}.{name}"


def alias_bindings(alias: ast.alias) -> list[ImportBinding]:
    """Bindings of one ``import a.b [as c]`` alias, parent packages first."""
    names = _parent_names(alias.name)
    if alias.asname:
        bindings = [ImportBinding(name) for name in names[:-1]]
        bindings.append(ImportBinding(alias.name, target=alias.asname))
        return bindings
    return [ImportBinding(name, target=name) for name in names]


def _plan_import(node: ast.Import, is_external: Callable[[str], bool]) -> ImportPlan:
    plan = ImportPlan(node)
    for alias in node.names:
        if not is_external(alias.name):
            plan.bindings.extend(alias_bindings(alias))
    return plan


def _plan_import_from(
    node: ast.ImportFrom, is_external: Callable[[str], bool]
) -> ImportPlan:
    plan = ImportPlan(node)
    dots = "." * node.level

    if node.module is None:
        for alias in node.names:
            if alias.name == STAR_IMPORT:
                plan.bindings.append(ImportBinding(dots, attribute=STAR_IMPORT))
            else:
                plan.bindings.append(
                    ImportBinding(dots + alias.name, target=alias.asname or alias.name)
                )
        return plan

    if node.level == 0:
        if is_external(node.module):
            return plan
        plan.bindings.extend(
            ImportBinding(name) for name in _parent_names(node.module)[:-1]
        )

    specifier = dots + node.module
    for alias in node.names:
        if alias.name == STAR_IMPORT:
            plan.bindings.append(ImportBinding(specifier, attribute=STAR_IMPORT))
        else:
            plan.bindings.append(
                ImportBinding(
                    specifier,
                    target=alias.asname or alias.name,
                    attribute=alias.name,
                )
            )
            plan.fallbacks.append(submodule_specifier(specifier, alias.name))
    return plan


def plan_imports(
    tree: ast.Module, is_external: Callable[[str], bool]
) -> list[ImportPlan]:
    """Plan every top-level import statement that pulls in a bundled module.

    Statements that only import external modules are omitted; a statement
    mixing external and bundled names (``import os, pkg``) keeps only the
    bundled bindings in its plan.
    """
    plans: list[ImportPlan] = []
    for node in tree.body:
        if isinstance(node, ast.Import):
            plan = _plan_import(node, is_external)
        elif isinstance(node, ast.ImportFrom):
            plan = _plan_import_from(node, is_external)
        else:
            continue
        if plan.bindings:
            plans.append(plan)
    return plans


def extract_specifiers(
    tree: ast.Module, is_external: Callable[[str], bool]
) -> list[str]:
    """Extract the ordered import specifiers of a module.

    Duplicates across statements are preserved; each statement contributes
    its specifiers once, parent packages first.

    Examples:
        >>> tree = ast.parse("import os\\nfrom .a import x\\nimport pkg.util")
        >>> extract_specifiers(tree, lambda name: name == "os")
        ['.a', 'pkg', 'pkg.util']
    """
    specifiers: list[str] = []
    for plan in plan_imports(tree, is_external):
        specifiers.extend(plan.specifiers)
    return specifiers


__all__ = [
    "ImportBinding",
    "ImportPlan",
    "alias_bindings",
    "extract_specifiers",
    "plan_imports",
    "submodule_specifier",
]
