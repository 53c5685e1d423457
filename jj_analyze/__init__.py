"""jj-analyze: explain how a resolved revset will be evaluated."""

from jj_analyze.model import Expr, Predicate, parse
from jj_analyze.references import ReferenceTable, ResolvedReference
from jj_analyze.render import format_tree, pretty_print, render
from jj_analyze.tree import AnalyzeContext, AnalyzeCost, AnalyzeTree

__version__ = "0.1.0"

__all__ = [
    "AnalyzeContext",
    "AnalyzeCost",
    "AnalyzeTree",
    "Expr",
    "Predicate",
    "ReferenceTable",
    "ResolvedReference",
    "format_tree",
    "parse",
    "pretty_print",
    "render",
]
