"""Commit-set expressions as they will be evaluated.

Each variant is a frozen dataclass implementing ``entry`` and ``cost``.
``entry`` reports the node's effective context and the context each child
is evaluated under; ``cost`` flags the shapes known to walk an unbounded
generation window from a non-trivial frontier.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from jj_analyze.ranges import GENERATION_RANGE_FULL, PARENTS_RANGE_FULL, Interval
from jj_analyze.references import ResolvedReference
from jj_analyze.tree import AnalyzeContext, AnalyzeCost, Child, Leaf, TreeEntry, present

if TYPE_CHECKING:
    from jj_analyze.model.predicate import Predicate

# Walking exactly one generation from the roots is a children lookup, not a walk.
CHILDREN_GENERATION = Interval(1, 2)


def _range_child(
    label: str, interval: Interval, full: Interval, context: AnalyzeContext
) -> Child | None:
    if interval == full:
        return None
    return Child(label=label, context=context, tree=interval.leaf(full))


def _single(name: str, expr: Expr) -> TreeEntry:
    return TreeEntry(
        name=name,
        context=AnalyzeContext.eager,
        children=[Child(label=None, context=AnalyzeContext.eager, tree=expr)],
    )


def _listed(
    name: str,
    exprs: tuple[Expr, ...],
    context: AnalyzeContext,
    child_context: AnalyzeContext,
) -> TreeEntry:
    return TreeEntry(
        name=name,
        context=context,
        children=[Child(label=None, context=child_context, tree=expr) for expr in exprs],
    )


@dataclass(frozen=True)
class NoneExpr:
    """The empty commit set."""

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(name="none()", context=AnalyzeContext.resolved)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Ancestors:
    heads: Expr
    generation: Interval = GENERATION_RANGE_FULL
    parents_range: Interval = PARENTS_RANGE_FULL

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(
            name="Ancestors",
            context=context.predicate_to_lazy(),
            children=present(
                _range_child("generation", self.generation, GENERATION_RANGE_FULL, context),
                _range_child("parent_index", self.parents_range, PARENTS_RANGE_FULL, context),
                Child(label="heads", context=AnalyzeContext.eager, tree=self.heads),
            ),
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        if (
            context is AnalyzeContext.eager
            and not is_root_or_none(self.heads)
            and self.generation.is_large()
        ):
            return AnalyzeCost.slow
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Range:
    """Ancestors of ``heads`` that are not ancestors of ``roots``."""

    roots: Expr
    heads: Expr
    generation: Interval = GENERATION_RANGE_FULL
    parents_range: Interval = PARENTS_RANGE_FULL

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(
            name="Range",
            context=context.predicate_to_lazy(),
            children=present(
                _range_child("generation", self.generation, GENERATION_RANGE_FULL, context),
                _range_child("parent_index", self.parents_range, PARENTS_RANGE_FULL, context),
                Child(label="roots", context=AnalyzeContext.eager, tree=self.roots),
                Child(label="heads", context=AnalyzeContext.eager, tree=self.heads),
            ),
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        if (
            context is AnalyzeContext.eager
            and is_root_or_none(self.roots)
            and not is_root_or_none(self.heads)
            and self.generation.is_large()
        ):
            return AnalyzeCost.slow
        return AnalyzeCost.fast


@dataclass(frozen=True)
class DagRange:
    """Descendants of ``roots`` that are also ancestors of ``heads``."""

    roots: Expr
    heads: Expr
    generation_from_roots: Interval = GENERATION_RANGE_FULL

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        if self.generation_from_roots == CHILDREN_GENERATION:
            effective = context.predicate_to_lazy()
        else:
            effective = AnalyzeContext.eager
        return TreeEntry(
            name="DagRange",
            context=effective,
            children=present(
                _range_child(
                    "generation_from_roots",
                    self.generation_from_roots,
                    GENERATION_RANGE_FULL,
                    context,
                ),
                Child(label="roots", context=AnalyzeContext.eager, tree=self.roots),
                Child(label="heads", context=AnalyzeContext.eager, tree=self.heads),
            ),
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        if (
            not isinstance(self.roots, NoneExpr)
            and is_root_or_none(self.roots)
            and not is_root_or_none(self.heads)
            and self.generation_from_roots.is_large()
        ):
            return AnalyzeCost.slow
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Reachable:
    sources: Expr
    domain: Expr

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(
            name="Reachable",
            context=AnalyzeContext.eager,
            children=[
                Child(label="sources", context=AnalyzeContext.predicate, tree=self.sources),
                Child(label="domain", context=AnalyzeContext.eager, tree=self.domain),
            ],
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Heads:
    candidates: Expr

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return _single("Heads", self.candidates)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class HeadsRange:
    roots: Expr
    heads: Expr
    parents_range: Interval = PARENTS_RANGE_FULL
    filter: Predicate | None = None

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(
            name="HeadsRange",
            context=AnalyzeContext.eager,
            children=present(
                _range_child("parent_index", self.parents_range, PARENTS_RANGE_FULL, context),
                Child(label="roots", context=AnalyzeContext.eager, tree=self.roots),
                Child(label="heads", context=AnalyzeContext.eager, tree=self.heads),
                None
                if self.filter is None
                else Child(label="filter", context=AnalyzeContext.predicate, tree=self.filter),
            ),
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Roots:
    candidates: Expr

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return _single("Roots", self.candidates)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class ForkPoint:
    candidates: Expr

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return _single("ForkPoint", self.candidates)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Bisect:
    candidates: Expr

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return _single("Bisect", self.candidates)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class HasSize:
    candidates: Expr
    count: int

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(
            name="HasSize",
            context=AnalyzeContext.eager,
            children=[
                Child(label="count", context=AnalyzeContext.resolved, tree=Leaf(str(self.count))),
                Child(label="candidates", context=AnalyzeContext.lazy, tree=self.candidates),
            ],
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Latest:
    candidates: Expr
    count: int

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(
            name="Latest",
            context=AnalyzeContext.eager,
            children=[
                Child(label="count", context=AnalyzeContext.resolved, tree=Leaf(str(self.count))),
                Child(label="candidates", context=AnalyzeContext.eager, tree=self.candidates),
            ],
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Coalesce:
    """The first non-empty alternative."""

    alternatives: tuple[Expr, ...]

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return _listed("Coalesce", self.alternatives, context, context)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Union:
    members: tuple[Expr, ...]

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return _listed("Union", self.members, context, context)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class FilterWithin:
    candidates: Expr
    predicate: Predicate

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(
            name="FilterWithin",
            context=context,
            children=[
                Child(label="candidates", context=context, tree=self.candidates),
                Child(label="predicate", context=AnalyzeContext.predicate, tree=self.predicate),
            ],
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Intersection:
    members: tuple[Expr, ...]

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return _listed("Intersection", self.members, context, context.eager_to_lazy())

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        # Any cheap member bounds the whole intersection.
        if all(member.cost(context) is AnalyzeCost.slow for member in self.members):
            return AnalyzeCost.slow
        return AnalyzeCost.fast


@dataclass(frozen=True)
class Difference:
    candidates: Expr
    excluded: Expr

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(
            name="Difference",
            context=context,
            children=[
                Child(label="candidates", context=context, tree=self.candidates),
                Child(label="excluded", context=context.eager_to_lazy(), tree=self.excluded),
            ],
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


Expr = (
    NoneExpr
    | ResolvedReference
    | Ancestors
    | Range
    | DagRange
    | Reachable
    | Heads
    | HeadsRange
    | Roots
    | ForkPoint
    | Bisect
    | HasSize
    | Latest
    | Coalesce
    | Union
    | FilterWithin
    | Intersection
    | Difference
)

EXPR_VARIANTS: tuple[type, ...] = Expr.__args__


def is_root_or_none(expr: Expr) -> bool:
    """Whether *expr* provably denotes at most the root commit."""
    if isinstance(expr, NoneExpr):
        return True
    if isinstance(expr, ResolvedReference):
        return expr == ResolvedReference.ROOT
    if isinstance(expr, Coalesce):
        return all(is_root_or_none(e) for e in expr.alternatives)
    if isinstance(expr, Union):
        return all(is_root_or_none(e) for e in expr.members)
    if isinstance(expr, Intersection):
        return any(is_root_or_none(e) for e in expr.members)
    return False
