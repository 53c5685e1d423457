"""Stand-in for the query resolver: resolved-tree models and document loading."""

from jj_analyze.backend.expression import ResolvedExpression, ResolvedPredicate
from jj_analyze.backend.loader import load_document, resolve_document

__all__ = [
    "ResolvedExpression",
    "ResolvedPredicate",
    "load_document",
    "resolve_document",
]
