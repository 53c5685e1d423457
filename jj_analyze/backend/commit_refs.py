"""Symbolic commit refs and the display names the resolver gives them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from jj_analyze.patterns import StringExpression, format_string_expression, is_all_pattern
from jj_analyze.references import ResolvedReference

DEFAULT_WORKSPACE = "default"


class _CommitRef(BaseModel, ABC):
    model_config = ConfigDict(frozen=True)

    operation: str | None = Field(
        default=None, description="Resolve at this operation instead of the current one"
    )

    @abstractmethod
    def display_name(self) -> str:
        """Name the resolver prints for this ref."""

    def to_reference(self) -> ResolvedReference:
        name = self.display_name()
        if self.operation is not None:
            name = f"{name} at operation {self.operation}"
        return ResolvedReference(name)


class RootRef(_CommitRef):
    kind: Literal["root"] = "root"

    def display_name(self) -> str:
        return ResolvedReference.ROOT.text


class VisibleHeadsRef(_CommitRef):
    kind: Literal["visible_heads"] = "visible_heads"

    def display_name(self) -> str:
        return ResolvedReference.VISIBLE_HEADS.text


class WorkingCopyRef(_CommitRef):
    kind: Literal["working_copy"] = "working_copy"
    workspace: str = DEFAULT_WORKSPACE

    def display_name(self) -> str:
        if self.workspace == DEFAULT_WORKSPACE:
            return ResolvedReference.WORKING_COPY.text
        return f"{self.workspace}@"


class WorkingCopiesRef(_CommitRef):
    kind: Literal["working_copies"] = "working_copies"

    def display_name(self) -> str:
        return "working_copies()"


class SymbolRef(_CommitRef):
    kind: Literal["symbol"] = "symbol"
    name: str = Field(min_length=1)

    def display_name(self) -> str:
        return self.name


class RemoteSymbolRef(_CommitRef):
    kind: Literal["remote_symbol"] = "remote_symbol"
    name: str = Field(min_length=1)
    remote: str = Field(min_length=1)

    def display_name(self) -> str:
        return f"{self.name}@{self.remote}"


class ChangeIdRef(_CommitRef):
    kind: Literal["change_id"] = "change_id"
    prefix: str = Field(min_length=1)

    def display_name(self) -> str:
        return f"change_id({self.prefix})"


class CommitIdRef(_CommitRef):
    kind: Literal["commit_id"] = "commit_id"
    prefix: str = Field(min_length=1)

    def display_name(self) -> str:
        return f"commit_id({self.prefix})"


class BookmarksRef(_CommitRef):
    kind: Literal["bookmarks"] = "bookmarks"
    pattern: StringExpression | None = None

    def display_name(self) -> str:
        if self.pattern is None or is_all_pattern(self.pattern):
            return "bookmarks()"
        return f"bookmarks({format_string_expression(self.pattern)})"


class RemoteBookmarksRef(_CommitRef):
    kind: Literal["remote_bookmarks"] = "remote_bookmarks"
    bookmark: StringExpression | None = None
    remote: StringExpression | None = None
    state: Literal["new", "tracked"] | None = None

    def display_name(self) -> str:
        function = {
            None: "remote_bookmarks",
            "new": "untracked_remote_bookmarks",
            "tracked": "tracked_remote_bookmarks",
        }[self.state]
        bookmark = self.bookmark
        remote = self.remote
        if (bookmark is None or is_all_pattern(bookmark)) and (
            remote is None or is_all_pattern(remote)
        ):
            return f"{function}()"
        return (
            f"{function}({_pattern_text(bookmark)}, remote={_pattern_text(remote)})"
        )


class TagsRef(_CommitRef):
    kind: Literal["tags"] = "tags"
    pattern: StringExpression | None = None

    def display_name(self) -> str:
        if self.pattern is None or is_all_pattern(self.pattern):
            return "tags()"
        return f"tags({format_string_expression(self.pattern)})"


class GitRefsRef(_CommitRef):
    kind: Literal["git_refs"] = "git_refs"

    def display_name(self) -> str:
        return "git_refs()"


class GitHeadRef(_CommitRef):
    kind: Literal["git_head"] = "git_head"

    def display_name(self) -> str:
        return "git_head()"


def _pattern_text(pattern: StringExpression | None) -> str:
    if pattern is None:
        return 'substring:""'
    return format_string_expression(pattern)


CommitRef = Annotated[
    RootRef
    | VisibleHeadsRef
    | WorkingCopyRef
    | WorkingCopiesRef
    | SymbolRef
    | RemoteSymbolRef
    | ChangeIdRef
    | CommitIdRef
    | BookmarksRef
    | RemoteBookmarksRef
    | TagsRef
    | GitRefsRef
    | GitHeadRef,
    Field(discriminator="kind"),
]

_commit_ref_adapter: TypeAdapter[CommitRef] = TypeAdapter(CommitRef)


def reference_for(ref: str | dict | _CommitRef) -> ResolvedReference:
    """Display reference for a plain name or a structured commit ref."""
    if isinstance(ref, str):
        return ResolvedReference(ref)
    if isinstance(ref, _CommitRef):
        return ref.to_reference()
    return _commit_ref_adapter.validate_python(ref).to_reference()
