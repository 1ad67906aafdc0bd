"""Parsing, import planning and lowering for bundled modules."""

from parse.analyzer import ModuleAnalyzer
from parse.ast_imports import (
    ImportBinding,
    ImportPlan,
    extract_specifiers,
    plan_imports,
)
from parse.lower import lower_module

__all__ = [
    "ImportBinding",
    "ImportPlan",
    "ModuleAnalyzer",
    "extract_specifiers",
    "lower_module",
    "plan_imports",
]
