"""Module analysis: read, parse, extract imports and lower one module."""

from __future__ import annotations

import ast
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.models.artifacts.modules import ModuleRecord
from contract.errors import LowerError, ParseError, ReadError
from parse.ast_imports import plan_imports
from parse.lower import lower_module

if TYPE_CHECKING:
    from collections.abc import Callable

    from parse.ast_imports import ImportPlan

logger = logging.getLogger(__name__)


class ModuleAnalyzer:
    """Produces module record shells.

    The analyzer has no cache; analyzing a path at most once is the graph
    builder's job.
    """

    def __init__(self, is_external: Callable[[str], bool]) -> None:
        self.is_external = is_external

    def read_source(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"cannot read module source: {exc}"
            raise ReadError(path.as_posix(), msg) from exc

    def parse_source(self, source: str, path: Path) -> ast.Module:
        try:
            return ast.parse(source, filename=path.as_posix())
        except SyntaxError as exc:
            raise ParseError(path.as_posix(), exc.msg, exc.lineno) from exc
        except ValueError as exc:
            raise ParseError(path.as_posix(), str(exc)) from exc

    def lower_source(
        self, tree: ast.Module, plans: list[ImportPlan], path: Path
    ) -> str:
        try:
            code = lower_module(tree, plans)
            compile(code, path.as_posix(), "exec", dont_inherit=True)
        except (SyntaxError, ValueError, TypeError, RecursionError) as exc:
            msg = f"import lowering failed: {exc}"
            raise LowerError(path.as_posix(), msg) from exc
        return code

    def analyze(
        self,
        canonical_path: str | Path,
        identity: int,
        *,
        name: str,
        display_path: str,
    ) -> ModuleRecord:
        """Analyze a module and return its record with an empty specifier map.

        Raises:
            ReadError: If the file cannot be read as UTF-8 text.
            ParseError: If the source is not valid Python.
            LowerError: If import lowering fails.
        """
        path = Path(canonical_path)
        source = self.read_source(path)
        tree = self.parse_source(source, path)
        plans = plan_imports(tree, self.is_external)
        code = self.lower_source(tree, plans, path)

        specifiers: list[str] = []
        fallbacks: list[str] = []
        for plan in plans:
            specifiers.extend(plan.specifiers)
            fallbacks.extend(plan.fallbacks)

        logger.debug(
            "analyzed %s as %r (identity %d, %d imports)",
            display_path,
            name,
            identity,
            len(specifiers),
        )
        return ModuleRecord(
            identity=identity,
            canonical_path=path.as_posix(),
            name=name,
            display_path=display_path,
            raw_specifiers=specifiers,
            fallback_specifiers=list(dict.fromkeys(fallbacks)),
            lowered_code=code,
        )


__all__ = ["ModuleAnalyzer"]
