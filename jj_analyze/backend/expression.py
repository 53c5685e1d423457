"""The resolved, optimized expression tree handed over by the query resolver.

This mirrors the resolver's own shape: set operators are binary and literal
commit sets carry commit ids issued by a ``ReferenceTable``. Documents may
name commits instead (``refs``) when validated with a table in the
validation context::

    adapter.validate_python(raw, context={"references": table})
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationInfo,
    field_validator,
    model_validator,
)

from jj_analyze.backend.commit_refs import reference_for
from jj_analyze.filters import RevsetFilter
from jj_analyze.ranges import GENERATION_RANGE_FULL, PARENTS_RANGE_FULL, Interval
from jj_analyze.references import CommitId, ReferenceTable


def _intern_refs(data: Any, info: ValidationInfo, field: str) -> Any:
    """Replace a ``refs`` list with the ids the reference table assigns."""
    if not isinstance(data, dict) or "refs" not in data:
        return data
    table = (info.context or {}).get("references")
    if not isinstance(table, ReferenceTable):
        raise ValueError("'refs' can only be resolved against a reference table")
    data = dict(data)
    refs = data.pop("refs")
    data[field] = tuple(table.insert(reference_for(ref)) for ref in refs)
    return data


def _fold_operands(
    cls: type[BaseModel], data: Any, info: ValidationInfo, adapter: TypeAdapter
) -> Any:
    """Nest an ``operands`` list left-first, as ``a | b | c`` parses.

    Each operand is validated on its own and the inner nodes are built
    without revalidation, so list length never turns into nesting depth
    during validation.
    """
    if not isinstance(data, dict) or "operands" not in data:
        return data
    data = dict(data)
    raw_operands = list(data.pop("operands"))
    if len(raw_operands) < 2:
        raise ValueError(f"'{data.get('op')}' needs at least two operands")
    operands = [adapter.validate_python(raw, context=info.context) for raw in raw_operands]
    folded = operands[0]
    for operand in operands[1:-1]:
        folded = cls.model_construct(left=folded, right=operand)
    return {**data, "left": folded, "right": operands[-1]}


def _decode_ids(ids: Any) -> Any:
    if isinstance(ids, (list, tuple)):
        return tuple(bytes.fromhex(i) if isinstance(i, str) else i for i in ids)
    return ids


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class _Binary(_Node):
    left: ResolvedExpression
    right: ResolvedExpression

    @model_validator(mode="before")
    @classmethod
    def fold_operands(cls, data: Any, info: ValidationInfo) -> Any:
        return _fold_operands(cls, data, info, expression_adapter)


# ── Expressions ───────────────────────────────────────────────────────


class Commits(_Node):
    """A literal commit set."""

    op: Literal["commits"] = "commits"
    ids: tuple[CommitId, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def intern_refs(cls, data: Any, info: ValidationInfo) -> Any:
        return _intern_refs(data, info, "ids")

    @field_validator("ids", mode="before")
    @classmethod
    def decode_ids(cls, v: Any) -> Any:
        return _decode_ids(v)


class Ancestors(_Node):
    op: Literal["ancestors"] = "ancestors"
    heads: ResolvedExpression
    generation: Interval = GENERATION_RANGE_FULL
    parents_range: Interval = PARENTS_RANGE_FULL


class Range(_Node):
    op: Literal["range"] = "range"
    roots: ResolvedExpression
    heads: ResolvedExpression
    generation: Interval = GENERATION_RANGE_FULL
    parents_range: Interval = PARENTS_RANGE_FULL


class DagRange(_Node):
    op: Literal["dag_range"] = "dag_range"
    roots: ResolvedExpression
    heads: ResolvedExpression
    generation_from_roots: Interval = GENERATION_RANGE_FULL


class Reachable(_Node):
    op: Literal["reachable"] = "reachable"
    sources: ResolvedExpression
    domain: ResolvedExpression


class Heads(_Node):
    op: Literal["heads"] = "heads"
    candidates: ResolvedExpression


class HeadsRange(_Node):
    op: Literal["heads_range"] = "heads_range"
    roots: ResolvedExpression
    heads: ResolvedExpression
    parents_range: Interval = PARENTS_RANGE_FULL
    filter: ResolvedPredicate | None = None


class Roots(_Node):
    op: Literal["roots"] = "roots"
    candidates: ResolvedExpression


class ForkPoint(_Node):
    op: Literal["fork_point"] = "fork_point"
    candidates: ResolvedExpression


class Bisect(_Node):
    op: Literal["bisect"] = "bisect"
    candidates: ResolvedExpression


class HasSize(_Node):
    op: Literal["has_size"] = "has_size"
    candidates: ResolvedExpression
    count: int = Field(ge=0)


class Latest(_Node):
    op: Literal["latest"] = "latest"
    candidates: ResolvedExpression
    count: int = Field(ge=0)


class Coalesce(_Binary):
    op: Literal["coalesce"] = "coalesce"


class Union(_Binary):
    op: Literal["union"] = "union"


class FilterWithin(_Node):
    op: Literal["filter_within"] = "filter_within"
    candidates: ResolvedExpression
    predicate: ResolvedPredicate


class Intersection(_Binary):
    op: Literal["intersection"] = "intersection"


class Difference(_Node):
    op: Literal["difference"] = "difference"
    left: ResolvedExpression
    right: ResolvedExpression


ResolvedExpression = Annotated[
    Commits
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
    | Difference,
    Field(discriminator="op"),
]


# ── Predicates ────────────────────────────────────────────────────────


class PredicateFilter(_Node):
    op: Literal["filter"] = "filter"
    filter: RevsetFilter


class PredicateDivergent(_Node):
    op: Literal["divergent"] = "divergent"
    visible_heads: tuple[CommitId, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def intern_refs(cls, data: Any, info: ValidationInfo) -> Any:
        return _intern_refs(data, info, "visible_heads")

    @field_validator("visible_heads", mode="before")
    @classmethod
    def decode_ids(cls, v: Any) -> Any:
        return _decode_ids(v)


class PredicateSet(_Node):
    op: Literal["set"] = "set"
    expr: ResolvedExpression


class PredicateNotIn(_Node):
    op: Literal["not_in"] = "not_in"
    operand: ResolvedPredicate


class _BinaryPredicate(_Node):
    left: ResolvedPredicate
    right: ResolvedPredicate

    @model_validator(mode="before")
    @classmethod
    def fold_operands(cls, data: Any, info: ValidationInfo) -> Any:
        return _fold_operands(cls, data, info, predicate_adapter)


class PredicateUnion(_BinaryPredicate):
    op: Literal["union"] = "union"


class PredicateIntersection(_BinaryPredicate):
    op: Literal["intersection"] = "intersection"


ResolvedPredicate = Annotated[
    PredicateFilter
    | PredicateDivergent
    | PredicateSet
    | PredicateNotIn
    | PredicateUnion
    | PredicateIntersection,
    Field(discriminator="op"),
]


for _model in (
    _Binary,
    Ancestors,
    Range,
    DagRange,
    Reachable,
    Heads,
    HeadsRange,
    Roots,
    ForkPoint,
    Bisect,
    HasSize,
    Latest,
    Coalesce,
    Union,
    FilterWithin,
    Intersection,
    Difference,
    PredicateSet,
    PredicateNotIn,
    _BinaryPredicate,
    PredicateUnion,
    PredicateIntersection,
):
    _model.model_rebuild()

expression_adapter: TypeAdapter[ResolvedExpression] = TypeAdapter(ResolvedExpression)
predicate_adapter: TypeAdapter[ResolvedPredicate] = TypeAdapter(ResolvedPredicate)
