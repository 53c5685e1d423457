"""Atomic commit filters and their canonical query text."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from jj_analyze.patterns import (
    DatePattern,
    FilesetAll,
    FilesetExpression,
    StringExpression,
    format_date_pattern,
    format_fileset_expression,
    format_string_expression,
)
from jj_analyze.ranges import PARENTS_RANGE_FULL, U32_MAX, Interval, format_range

MERGES_RANGE = Interval(2, U32_MAX)


class ParentCountFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["parent_count"] = "parent_count"
    range: Interval

    def to_text(self) -> str:
        if self.range == MERGES_RANGE:
            return "merges()"
        return f"parent_count({format_range(self.range, PARENTS_RANGE_FULL) or ''})"


class StringFilter(BaseModel):
    """Match a commit's text field against a string expression."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[
        "description",
        "subject",
        "author_name",
        "author_email",
        "committer_name",
        "committer_email",
    ]
    pattern: StringExpression

    def to_text(self) -> str:
        return f"{self.kind}({format_string_expression(self.pattern)})"


class DateFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["author_date", "committer_date"]
    pattern: DatePattern

    def to_text(self) -> str:
        return f"{self.kind}({format_date_pattern(self.pattern)})"


class FileFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    files: FilesetExpression

    def touches_any_file(self) -> bool:
        """True for ``files(all())``, i.e. the non-empty commits."""
        return isinstance(self.files, FilesetAll)

    def to_text(self) -> str:
        return f"files({format_fileset_expression(self.files)})"


class DiffLinesFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["diff_lines"] = "diff_lines"
    text: StringExpression
    files: FilesetExpression

    def to_text(self) -> str:
        return (
            f"diff_lines({format_string_expression(self.text)}, "
            f"{format_fileset_expression(self.files)})"
        )


class HasConflictFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["has_conflict"] = "has_conflict"

    def to_text(self) -> str:
        return "conflicts()"


class SignedFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["signed"] = "signed"

    def to_text(self) -> str:
        return "signed()"


class ExtensionFilter(BaseModel):
    """A filter contributed by a query extension, shown by its tag."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["extension"] = "extension"
    tag: str = Field(min_length=1)

    def to_text(self) -> str:
        return self.tag


RevsetFilter = Annotated[
    ParentCountFilter
    | StringFilter
    | DateFilter
    | FileFilter
    | DiffLinesFilter
    | HasConflictFilter
    | SignedFilter
    | ExtensionFilter,
    Field(discriminator="kind"),
]
