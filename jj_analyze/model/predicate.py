"""Predicates: commit tests applied to candidates one at a time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from jj_analyze.filters import FileFilter, RevsetFilter
from jj_analyze.tree import AnalyzeContext, AnalyzeCost, Child, TreeEntry

if TYPE_CHECKING:
    from jj_analyze.model.expr import Expr


def _filter_text(filter: RevsetFilter) -> str:
    if isinstance(filter, FileFilter) and filter.touches_any_file():
        return "~empty()"
    return filter.to_text()


def _negated_filter_text(filter: RevsetFilter) -> str:
    if isinstance(filter, FileFilter) and filter.touches_any_file():
        return "empty()"
    return f"~{filter.to_text()}"


def _predicate_list(name: str, predicates: tuple[Predicate, ...]) -> TreeEntry:
    return TreeEntry(
        name=name,
        context=AnalyzeContext.predicate,
        children=[
            Child(label=None, context=AnalyzeContext.predicate, tree=predicate)
            for predicate in predicates
        ],
    )


@dataclass(frozen=True)
class FilterPredicate:
    filter: RevsetFilter

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(name=_filter_text(self.filter), context=AnalyzeContext.predicate)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class DivergentPredicate:
    """Commits whose change has several visible commits.

    The visible heads are not a real sub-expression, but they read best
    printed as one.
    """

    visible_heads: Expr

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(
            name="Divergent",
            context=AnalyzeContext.predicate,
            children=[
                Child(label="visible_heads", context=AnalyzeContext.eager, tree=self.visible_heads)
            ],
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class SetPredicate:
    """An expression used as a membership test."""

    expr: Expr

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return self.expr.entry(AnalyzeContext.predicate)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return self.expr.cost(AnalyzeContext.predicate)


@dataclass(frozen=True)
class NotInPredicate:
    operand: Predicate

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        if isinstance(self.operand, FilterPredicate):
            return TreeEntry(
                name=_negated_filter_text(self.operand.filter),
                context=AnalyzeContext.predicate,
            )
        return TreeEntry(
            name="NotIn",
            context=AnalyzeContext.predicate,
            children=[Child(label=None, context=AnalyzeContext.predicate, tree=self.operand)],
        )

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class UnionPredicate:
    members: tuple[Predicate, ...]

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return _predicate_list("Union", self.members)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


@dataclass(frozen=True)
class IntersectionPredicate:
    members: tuple[Predicate, ...]

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return _predicate_list("Intersection", self.members)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


Predicate = (
    FilterPredicate
    | DivergentPredicate
    | SetPredicate
    | NotInPredicate
    | UnionPredicate
    | IntersectionPredicate
)

PREDICATE_VARIANTS: tuple[type, ...] = Predicate.__args__
