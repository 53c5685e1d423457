"""Analysis model of resolved commit-set expressions."""

from jj_analyze.model.expr import EXPR_VARIANTS, Expr, NoneExpr, is_root_or_none
from jj_analyze.model.parse import parse, parse_expression, parse_predicate
from jj_analyze.model.predicate import PREDICATE_VARIANTS, Predicate

__all__ = [
    "EXPR_VARIANTS",
    "Expr",
    "NoneExpr",
    "PREDICATE_VARIANTS",
    "Predicate",
    "is_root_or_none",
    "parse",
    "parse_expression",
    "parse_predicate",
]
