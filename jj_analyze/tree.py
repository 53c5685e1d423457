"""Evaluation contexts, costs, and the entry shape every analyzed node exposes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable


class AnalyzeCost(str, Enum):
    """Best-effort cost class of evaluating a node."""

    fast = "fast"
    slow = "slow"


class AnalyzeContext(str, Enum):
    """How the consumer of a node will evaluate it."""

    eager = "eager"
    lazy = "lazy"
    predicate = "predicate"
    resolved = "resolved"

    def predicate_to_lazy(self) -> AnalyzeContext:
        return AnalyzeContext.lazy if self is AnalyzeContext.predicate else self

    def eager_to_lazy(self) -> AnalyzeContext:
        return AnalyzeContext.lazy if self is AnalyzeContext.eager else self

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Child:
    """An edge to a sub-tree, evaluated under its own context."""

    label: str | None
    context: AnalyzeContext
    tree: AnalyzeTree


@dataclass(frozen=True)
class TreeEntry:
    """Display data for one node: its name, effective context, and children."""

    name: str
    context: AnalyzeContext
    children: list[Child] = field(default_factory=list)


@runtime_checkable
class AnalyzeTree(Protocol):
    """Anything the renderer can walk."""

    def entry(self, context: AnalyzeContext) -> TreeEntry: ...

    def cost(self, context: AnalyzeContext) -> AnalyzeCost: ...


@dataclass(frozen=True)
class Leaf:
    """A resolved scalar such as a count or a range, shown without children."""

    text: str

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(name=self.text, context=AnalyzeContext.resolved)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


def present(*children: Child | None) -> list[Child]:
    """Drop the children that were not produced."""
    return [child for child in children if child is not None]
