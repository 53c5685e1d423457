"""Interned display references for symbolic commit sets."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar

from jj_analyze.tree import AnalyzeContext, AnalyzeCost, TreeEntry

# Commit ids handed to the resolved tree are table indices in this many bytes.
COMMIT_ID_LENGTH = 8

CommitId = bytes


class UnknownCommitIdError(RuntimeError):
    """A commit id was looked up that this table never issued.

    The id space belongs entirely to one ``ReferenceTable`` for the lifetime
    of an analysis run, so this always indicates a bug in how ids were
    threaded through the resolved tree.
    """

    def __init__(self, commit_id: bytes) -> None:
        self.commit_id = commit_id
        super().__init__(f"commit id {commit_id.hex()} was not issued by this reference table")


@dataclass(frozen=True)
class ResolvedReference:
    """Display text standing in for a symbolic commit set (``@``, a bookmark, ...)."""

    text: str

    ROOT: ClassVar[ResolvedReference]
    VISIBLE_HEADS: ClassVar[ResolvedReference]
    VISIBLE_HEADS_OR_REFERENCED: ClassVar[ResolvedReference]
    WORKING_COPY: ClassVar[ResolvedReference]

    def __str__(self) -> str:
        return self.text

    def entry(self, context: AnalyzeContext) -> TreeEntry:
        return TreeEntry(name=self.text, context=AnalyzeContext.resolved)

    def cost(self, context: AnalyzeContext) -> AnalyzeCost:
        return AnalyzeCost.fast


ResolvedReference.ROOT = ResolvedReference("root()")
ResolvedReference.VISIBLE_HEADS = ResolvedReference("visible_heads()")
ResolvedReference.VISIBLE_HEADS_OR_REFERENCED = ResolvedReference(
    "visible_heads() and referenced revisions"
)
ResolvedReference.WORKING_COPY = ResolvedReference("@")


class ReferenceTable:
    """Bijective store of references keyed by dense, insertion-ordered ids."""

    def __init__(self) -> None:
        self._references: list[ResolvedReference] = []
        self._indices: dict[ResolvedReference, int] = {}

    def __len__(self) -> int:
        return len(self._references)

    def __contains__(self, reference: object) -> bool:
        return reference in self._indices

    def __iter__(self) -> Iterator[tuple[CommitId, ResolvedReference]]:
        for index, reference in enumerate(self._references):
            yield _encode(index), reference

    def insert(self, reference: ResolvedReference) -> CommitId:
        """Intern *reference*, returning the id it already has if present."""
        index = self._indices.get(reference)
        if index is None:
            index = len(self._references)
            self._references.append(reference)
            self._indices[reference] = index
        return _encode(index)

    def get(self, commit_id: CommitId) -> ResolvedReference:
        if len(commit_id) != COMMIT_ID_LENGTH:
            raise UnknownCommitIdError(commit_id)
        index = int.from_bytes(commit_id, "little")
        if index >= len(self._references):
            raise UnknownCommitIdError(commit_id)
        return self._references[index]


def _encode(index: int) -> CommitId:
    return index.to_bytes(COMMIT_ID_LENGTH, "little")
