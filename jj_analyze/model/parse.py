"""Import the resolver's tree into the analysis model.

Nested ``union``, ``intersection`` and ``coalesce`` operators are flattened
into one ordered list each. Flattening uses an explicit work stack rather
than recursion so that long ``a | b | c | ...`` chains, which the resolver
nests one level per operand, cannot exhaust the interpreter stack.
"""

from __future__ import annotations

import logging

from jj_analyze.backend import expression as backend
from jj_analyze.model.expr import (
    Ancestors,
    Bisect,
    Coalesce,
    DagRange,
    Difference,
    Expr,
    FilterWithin,
    ForkPoint,
    HasSize,
    Heads,
    HeadsRange,
    Intersection,
    Latest,
    NoneExpr,
    Range,
    Reachable,
    Roots,
    Union,
)
from jj_analyze.model.predicate import (
    DivergentPredicate,
    FilterPredicate,
    IntersectionPredicate,
    NotInPredicate,
    Predicate,
    SetPredicate,
    UnionPredicate,
)
from jj_analyze.references import CommitId, ReferenceTable, ResolvedReference

logger = logging.getLogger(__name__)


def _includes_visible_heads(ids: tuple[CommitId, ...], table: ReferenceTable) -> bool:
    return any(table.get(commit_id) == ResolvedReference.VISIBLE_HEADS for commit_id in ids)


def _parse_commits(ids: tuple[CommitId, ...], table: ReferenceTable) -> Expr:
    if not ids:
        return NoneExpr()
    if len(ids) == 1:
        return table.get(ids[0])
    if _includes_visible_heads(ids, table):
        return ResolvedReference.VISIBLE_HEADS_OR_REFERENCED
    return Union(tuple(table.get(commit_id) for commit_id in ids))


def _flatten(
    node: backend.Coalesce | backend.Union | backend.Intersection,
    table: ReferenceTable,
) -> list[Expr]:
    kind = type(node)
    result: list[Expr] = []
    stack: list[backend.ResolvedExpression] = [node.right, node.left]
    while stack:
        next_node = stack.pop()
        if type(next_node) is kind:
            stack.append(next_node.right)
            stack.append(next_node.left)
        elif (
            kind is backend.Union
            and isinstance(next_node, backend.Commits)
            and not _includes_visible_heads(next_node.ids, table)
        ):
            result.extend(table.get(commit_id) for commit_id in next_node.ids)
        else:
            result.append(parse_expression(next_node, table))
    return result


def parse_expression(node: backend.ResolvedExpression, table: ReferenceTable) -> Expr:
    """Build the analysis model for *node*, resolving commit ids via *table*."""
    if isinstance(node, backend.Commits):
        return _parse_commits(node.ids, table)
    if isinstance(node, backend.Ancestors):
        return Ancestors(
            heads=parse_expression(node.heads, table),
            generation=node.generation,
            parents_range=node.parents_range,
        )
    if isinstance(node, backend.Range):
        return Range(
            roots=parse_expression(node.roots, table),
            heads=parse_expression(node.heads, table),
            generation=node.generation,
            parents_range=node.parents_range,
        )
    if isinstance(node, backend.DagRange):
        return DagRange(
            roots=parse_expression(node.roots, table),
            heads=parse_expression(node.heads, table),
            generation_from_roots=node.generation_from_roots,
        )
    if isinstance(node, backend.Reachable):
        return Reachable(
            sources=parse_expression(node.sources, table),
            domain=parse_expression(node.domain, table),
        )
    if isinstance(node, backend.Heads):
        return Heads(parse_expression(node.candidates, table))
    if isinstance(node, backend.HeadsRange):
        return HeadsRange(
            roots=parse_expression(node.roots, table),
            heads=parse_expression(node.heads, table),
            parents_range=node.parents_range,
            filter=None if node.filter is None else parse_predicate(node.filter, table),
        )
    if isinstance(node, backend.Roots):
        return Roots(parse_expression(node.candidates, table))
    if isinstance(node, backend.ForkPoint):
        return ForkPoint(parse_expression(node.candidates, table))
    if isinstance(node, backend.Bisect):
        return Bisect(parse_expression(node.candidates, table))
    if isinstance(node, backend.HasSize):
        return HasSize(candidates=parse_expression(node.candidates, table), count=node.count)
    if isinstance(node, backend.Latest):
        return Latest(candidates=parse_expression(node.candidates, table), count=node.count)
    if isinstance(node, backend.Coalesce):
        return Coalesce(tuple(_flatten(node, table)))
    if isinstance(node, backend.Union):
        return Union(tuple(_flatten(node, table)))
    if isinstance(node, backend.FilterWithin):
        return FilterWithin(
            candidates=parse_expression(node.candidates, table),
            predicate=parse_predicate(node.predicate, table),
        )
    if isinstance(node, backend.Intersection):
        return Intersection(tuple(_flatten(node, table)))
    if isinstance(node, backend.Difference):
        return Difference(
            candidates=parse_expression(node.left, table),
            excluded=parse_expression(node.right, table),
        )
    raise TypeError(f"unsupported resolved expression: {type(node).__name__}")


def _flatten_predicates(
    node: backend.PredicateUnion | backend.PredicateIntersection,
    table: ReferenceTable,
) -> list[Predicate]:
    kind = type(node)
    result: list[Predicate] = []
    stack: list[backend.ResolvedPredicate] = [node.right, node.left]
    while stack:
        next_node = stack.pop()
        if type(next_node) is kind:
            stack.append(next_node.right)
            stack.append(next_node.left)
        elif kind is backend.PredicateUnion and isinstance(next_node, backend.PredicateSet):
            # Sets unioned inside a predicate read as one flat union.
            expr = parse_expression(next_node.expr, table)
            if isinstance(expr, Union):
                result.extend(SetPredicate(member) for member in expr.members)
            else:
                result.append(SetPredicate(expr))
        else:
            result.append(parse_predicate(next_node, table))
    return result


def parse_predicate(node: backend.ResolvedPredicate, table: ReferenceTable) -> Predicate:
    if isinstance(node, backend.PredicateFilter):
        return FilterPredicate(node.filter)
    if isinstance(node, backend.PredicateDivergent):
        return DivergentPredicate(_parse_commits(node.visible_heads, table))
    if isinstance(node, backend.PredicateSet):
        return SetPredicate(parse_expression(node.expr, table))
    if isinstance(node, backend.PredicateNotIn):
        return NotInPredicate(parse_predicate(node.operand, table))
    if isinstance(node, backend.PredicateUnion):
        return UnionPredicate(tuple(_flatten_predicates(node, table)))
    if isinstance(node, backend.PredicateIntersection):
        return IntersectionPredicate(tuple(_flatten_predicates(node, table)))
    raise TypeError(f"unsupported resolved predicate: {type(node).__name__}")


def parse(node: backend.ResolvedExpression, table: ReferenceTable) -> Expr:
    """Import a whole resolved tree."""
    expr = parse_expression(node, table)
    logger.debug("Imported %s with %d interned references", type(expr).__name__, len(table))
    return expr
