"""Print any ``AnalyzeTree`` as an indented, optionally colored tree.

Example (``analyze=True``)::

    Union [
      @
      Ancestors {
        generation: 2..
        heads: trunk()
      }
    ]
"""

from __future__ import annotations

from typing import Literal

from rich.console import Console
from rich.text import Text

from jj_analyze.tree import AnalyzeContext, AnalyzeCost, AnalyzeTree

ColorMode = Literal["auto", "always", "never"]

INDENT = "  "
EXPENSIVE_MARKER = "(EXPENSIVE)"

CONTEXT_STYLES: dict[AnalyzeContext, str] = {
    AnalyzeContext.eager: "bright_blue",
    AnalyzeContext.lazy: "bright_cyan",
    AnalyzeContext.predicate: "bright_magenta",
    AnalyzeContext.resolved: "",
}
UNANALYZED_STYLE = "blue"


def _name_style(context: AnalyzeContext, analyze: bool, has_children: bool) -> str:
    if analyze:
        style = CONTEXT_STYLES[context]
    elif context is not AnalyzeContext.resolved:
        style = UNANALYZED_STYLE
    else:
        style = ""
    if has_children:
        style = f"bold {style}".strip()
    return style


def _brackets(labels: list[str | None]) -> tuple[str, str]:
    if any(label is not None for label in labels):
        return " {", "}"
    if len(labels) == 1:
        return "(", ")"
    return " [", "]"


def _render_node(
    tree: AnalyzeTree,
    context: AnalyzeContext,
    depth: int,
    analyze: bool,
    line: Text,
    lines: list[Text],
) -> None:
    entry = tree.entry(context)
    if analyze and tree.cost(context) is AnalyzeCost.slow:
        line.append(EXPENSIVE_MARKER, style="bold bright_red")
        line.append(" ")
    line.append(entry.name, style=_name_style(entry.context, analyze, bool(entry.children)))
    if not entry.children:
        lines.append(line)
        return

    start, end = _brackets([child.label for child in entry.children])
    line.append(start, style="dim")
    lines.append(line)
    for child in entry.children:
        child_line = Text(INDENT * (depth + 1))
        if child.label is not None:
            child_line.append(f"{child.label}:", style="dim")
            child_line.append(" ")
        _render_node(child.tree, child.context, depth + 1, analyze, child_line, lines)
    lines.append(Text(INDENT * depth) + Text(end, style="dim"))


def render(tree: AnalyzeTree, context: AnalyzeContext, analyze: bool) -> list[Text]:
    """Render *tree* evaluated under *context*, one ``Text`` per output line."""
    lines: list[Text] = []
    _render_node(tree, context, 0, analyze, Text(), lines)
    return lines


def format_tree(tree: AnalyzeTree, context: AnalyzeContext, analyze: bool) -> str:
    """Plain-text rendering, without styles."""
    return "\n".join(line.plain for line in render(tree, context, analyze))


def make_console(color: ColorMode = "auto") -> Console:
    if color == "always":
        return Console(force_terminal=True, highlight=False)
    if color == "never":
        return Console(color_system=None, highlight=False)
    return Console(highlight=False)


def pretty_print(
    tree: AnalyzeTree,
    context: AnalyzeContext,
    analyze: bool,
    console: Console | None = None,
) -> None:
    console = console or make_console()
    for line in render(tree, context, analyze):
        console.print(line, soft_wrap=True)
