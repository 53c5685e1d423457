"""CLI entry point for jj-analyze."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from jj_analyze.backend import ResolvedExpression, load_document, resolve_document
from jj_analyze.config import JJAnalyzeConfig, load_config
from jj_analyze.config.loader import CONFIG_FILENAME, DEFAULT_CONFIG_TEMPLATE
from jj_analyze.model import parse
from jj_analyze.references import ReferenceTable, UnknownCommitIdError
from jj_analyze.render import make_console, pretty_print
from jj_analyze.tree import AnalyzeContext

app = typer.Typer(
    name="jj-analyze",
    help=(
        "Analyze a resolved revset and display a tree showing how it will be evaluated.\n\n"
        "Potentially expensive operations are marked (EXPENSIVE). With color enabled, "
        "eager evaluation is blue, lazy evaluation cyan, and predicates magenta."
    ),
)

config_app = typer.Typer(help="Manage jj-analyze configuration.")
app.add_typer(config_app, name="config")

logger = logging.getLogger(__name__)


class ContextChoice(str, Enum):
    eager = "eager"
    lazy = "lazy"
    predicate = "predicate"


class ColorChoice(str, Enum):
    auto = "auto"
    always = "always"
    never = "never"


# Global state
_config: JJAnalyzeConfig | None = None


def _get_config() -> JJAnalyzeConfig:
    if _config is None:
        return load_config()
    return _config


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=logging.getLevelName(level.upper()),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to jj-analyze.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _configure_logging(_config.log_level)


def _load(document: str) -> tuple[ReferenceTable, ResolvedExpression]:
    table = ReferenceTable()
    raw = load_document(document)
    resolved = resolve_document(raw, table, source=document)
    return table, resolved


@app.command()
def explain(
    document: str = typer.Argument(
        ..., help="Resolved revset document (YAML or JSON), or '-' for stdin"
    ),
    context: Annotated[
        ContextChoice | None,
        typer.Option(
            "--context",
            "-x",
            help="Base context the whole revset is evaluated in (default: lazy)",
        ),
    ] = None,
    color: Annotated[
        ColorChoice | None, typer.Option("--color", help="When to colorize output")
    ] = None,
    no_analyze: Annotated[
        bool,
        typer.Option("--no-analyze", "-A", help="Disable analysis of evaluation and cost"),
    ] = False,
) -> None:
    """Print the evaluation tree of a resolved revset."""
    cfg = _get_config()
    base_context = (
        AnalyzeContext(context.value) if context is not None else cfg.analyze.base_context
    )
    color_mode = color.value if color is not None else cfg.ui.color
    analyze = cfg.analyze.enabled and not no_analyze

    try:
        table, resolved = _load(document)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    try:
        expr = parse(resolved, table)
    except UnknownCommitIdError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    logger.debug("Rendering in %s context (analyze=%s)", base_context, analyze)
    pretty_print(expr, base_context, analyze, make_console(color_mode))


@app.command()
def references(
    document: str = typer.Argument(
        ..., help="Resolved revset document (YAML or JSON), or '-' for stdin"
    ),
) -> None:
    """List the commit references a document resolves to."""
    try:
        table, _ = _load(document)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    listing = Table(title=f"References ({len(table)})")
    listing.add_column("Id", style="dim")
    listing.add_column("Reference", style="cyan")
    for commit_id, reference in table:
        listing.add_row(commit_id.hex(), reference.text)
    rprint(listing)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default jj-analyze.yaml in current directory."""
    target = Path(CONFIG_FILENAME)
    if target.exists() and not force:
        rprint(f"[yellow]{CONFIG_FILENAME} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
