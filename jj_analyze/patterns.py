"""String, date, and file pattern sub-languages and their canonical text."""

from __future__ import annotations

import json
from datetime import UTC
from typing import Annotated, Literal

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

StringPatternKind = Literal[
    "exact",
    "exact-i",
    "substring",
    "substring-i",
    "glob",
    "glob-i",
    "regex",
    "regex-i",
]


def quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


# ── String expressions ────────────────────────────────────────────────


class StringPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["pattern"] = "pattern"
    kind: StringPatternKind = "substring"
    value: str

    def matches_everything(self) -> bool:
        return self.kind == "substring" and self.value == ""


class StringNotIn(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["not_in"] = "not_in"
    operand: StringExpression


class StringUnion(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["union"] = "union"
    left: StringExpression
    right: StringExpression


class StringIntersection(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["intersection"] = "intersection"
    left: StringExpression
    right: StringExpression


StringExpression = Annotated[
    StringPattern | StringNotIn | StringUnion | StringIntersection,
    Field(discriminator="op"),
]


def format_string_expression(expr: StringExpression) -> str:
    """Render e.g. ``(glob:"main" | ~exact:"dev")``."""
    if isinstance(expr, StringPattern):
        return f"{expr.kind}:{quote(expr.value)}"
    if isinstance(expr, StringNotIn):
        return f"~{format_string_expression(expr.operand)}"
    if isinstance(expr, StringUnion):
        return f"({format_string_expression(expr.left)} | {format_string_expression(expr.right)})"
    return f"({format_string_expression(expr.left)} & {format_string_expression(expr.right)})"


def is_all_pattern(expr: StringExpression) -> bool:
    return isinstance(expr, StringPattern) and expr.matches_everything()


# ── Date patterns ─────────────────────────────────────────────────────


class DatePattern(BaseModel):
    """Commits at or after / strictly before an instant."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["after", "before"]
    at: AwareDatetime


def format_date_pattern(pattern: DatePattern) -> str:
    at = pattern.at.astimezone(UTC)
    timespec = "milliseconds" if at.microsecond else "seconds"
    return f"{pattern.kind}:{at.isoformat(timespec=timespec)}"


# ── File patterns and filesets ────────────────────────────────────────


class FilePattern(BaseModel):
    """A single path pattern; ``dir`` is only meaningful for glob kinds."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file", "prefix", "glob", "prefix-glob"]
    path: str = ""
    dir: str = ""

    def glob_text(self) -> str:
        return f"{self.dir}/{self.path}" if self.dir else self.path


def format_file_pattern(pattern: FilePattern) -> str:
    if pattern.kind == "file":
        return f"file:{quote(pattern.path)}"
    if pattern.kind == "prefix":
        return quote(pattern.path)
    return f"{pattern.kind}:{quote(pattern.glob_text())}"


class FilesetNone(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["none"] = "none"


class FilesetAll(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["all"] = "all"


class FilesetPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["pattern"] = "pattern"
    pattern: FilePattern


class FilesetUnion(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["union"] = "union"
    operands: tuple[FilesetExpression, ...]


class FilesetIntersection(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["intersection"] = "intersection"
    left: FilesetExpression
    right: FilesetExpression


class FilesetDifference(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: Literal["difference"] = "difference"
    left: FilesetExpression
    right: FilesetExpression


FilesetExpression = Annotated[
    FilesetNone
    | FilesetAll
    | FilesetPattern
    | FilesetUnion
    | FilesetIntersection
    | FilesetDifference,
    Field(discriminator="op"),
]


def format_fileset_expression(expr: FilesetExpression) -> str:
    if isinstance(expr, FilesetNone):
        return "none()"
    if isinstance(expr, FilesetAll):
        return "all()"
    if isinstance(expr, FilesetPattern):
        return format_file_pattern(expr.pattern)
    if isinstance(expr, FilesetUnion):
        return "(" + " | ".join(format_fileset_expression(e) for e in expr.operands) + ")"
    if isinstance(expr, FilesetIntersection):
        return f"({format_fileset_expression(expr.left)} & {format_fileset_expression(expr.right)})"
    return f"({format_fileset_expression(expr.left)} ~ {format_fileset_expression(expr.right)})"


for _model in (
    StringNotIn,
    StringUnion,
    StringIntersection,
    FilesetUnion,
    FilesetIntersection,
    FilesetDifference,
):
    _model.model_rebuild()
