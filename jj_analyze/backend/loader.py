"""Load resolved-tree documents written as YAML or JSON."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from jj_analyze.backend.expression import ResolvedExpression, expression_adapter
from jj_analyze.references import ReferenceTable, ResolvedReference

logger = logging.getLogger(__name__)

STDIN = "-"


def load_document(path: str | Path) -> Any:
    """Read a document from *path* (``-`` for stdin).

    JSON is accepted as the YAML subset it is. A top-level ``expression``
    key is unwrapped so documents may carry other metadata alongside.
    """
    try:
        if str(path) == STDIN:
            raw = yaml.safe_load(sys.stdin)
        else:
            with open(path) as f:
                raw = yaml.safe_load(f)
    except OSError as e:
        raise ValueError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raise ValueError(f"Empty document: {path}")
    if isinstance(raw, dict) and "expression" in raw:
        raw = raw["expression"]
    return raw


def resolve_document(
    raw: Any, table: ReferenceTable, source: str | Path = "<document>"
) -> ResolvedExpression:
    """Validate *raw* into a resolved tree, interning named commits into *table*.

    ``root()`` and ``visible_heads()`` are interned first, so they always
    hold the first two ids of a run.
    """
    table.insert(ResolvedReference.ROOT)
    table.insert(ResolvedReference.VISIBLE_HEADS)
    try:
        resolved = expression_adapter.validate_python(raw, context={"references": table})
    except ValidationError as e:
        raise ValueError(f"Invalid expression in {source}: {e}") from e
    logger.debug("Resolved %s: %d references interned", source, len(table))
    return resolved
