"""Shared test fixtures for jj-analyze."""

import pytest

from jj_analyze.backend import expression as backend
from jj_analyze.references import ReferenceTable, ResolvedReference


@pytest.fixture
def table():
    """A reference table seeded the way a document run seeds it."""
    references = ReferenceTable()
    references.insert(ResolvedReference.ROOT)
    references.insert(ResolvedReference.VISIBLE_HEADS)
    return references


@pytest.fixture
def commits(table):
    """Build a literal commit set from display names."""

    def build(*names: str) -> backend.Commits:
        return backend.Commits(ids=tuple(table.insert(ResolvedReference(n)) for n in names))

    return build
