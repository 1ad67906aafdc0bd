"""Lowering of bundled import statements into loader calls.

Each planned top-level import statement is replaced, in place, by assignments
from the injected ``__require__`` binding. Everything else in the module is
left as written and rendered back to source with ``ast.unparse``.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from contract.artifacts import REQUIRE_BINDING, STAR_IMPORT
from parse.ast_imports import alias_bindings

if TYPE_CHECKING:
    from parse.ast_imports import ImportBinding, ImportPlan


def _binding_statement(binding: ImportBinding) -> ast.stmt:
    args = [repr(binding.specifier)]
    if binding.attribute is not None:
        args.append(repr(binding.attribute))
    call = f"{REQUIRE_BINDING}({', '.join(args)})"

    if binding.attribute == STAR_IMPORT:
        source = f"globals().update({call})"
    elif binding.target is None:
        source = call
    else:
        source = f"{binding.target} = {call}"
    return ast.parse(source).body[0]


def _import_statements(node: ast.Import, plan: ImportPlan) -> list[ast.stmt]:
    """Lower ``import a, b`` alias by alias, keeping external aliases as written."""
    bundled = {binding.specifier for binding in plan.bindings}
    statements: list[ast.stmt] = []
    external: list[ast.alias] = []
    for alias in node.names:
        if alias.name not in bundled:
            external.append(ast.alias(name=alias.name, asname=alias.asname))
            continue
        if external:
            statements.append(ast.Import(names=external))
            external = []
        statements.extend(_binding_statement(b) for b in alias_bindings(alias))
    if external:
        statements.append(ast.Import(names=external))
    return statements


def lower_statement(plan: ImportPlan) -> list[ast.stmt]:
    """Return the statements replacing one planned import statement."""
    if isinstance(plan.node, ast.Import):
        statements = _import_statements(plan.node, plan)
    else:
        statements = [_binding_statement(binding) for binding in plan.bindings]
    for statement in statements:
        ast.copy_location(statement, plan.node)
        for child in ast.walk(statement):
            ast.copy_location(child, plan.node)
    return statements


def lower_module(tree: ast.Module, plans: list[ImportPlan]) -> str:
    """Lower the planned imports of ``tree`` and return the new source.

    ``tree`` is not modified.
    """
    replacements = {id(plan.node): plan for plan in plans}
    body: list[ast.stmt] = []
    for node in tree.body:
        plan = replacements.get(id(node))
        if plan is None:
            body.append(node)
        else:
            body.extend(lower_statement(plan))

    lowered = ast.Module(body=body, type_ignores=tree.type_ignores)
    ast.fix_missing_locations(lowered)
    return ast.unparse(lowered)


__all__ = ["lower_module", "lower_statement"]
