"""Command-line interface for graph-redact.

Applies tag transforms to JSON and YAML documents, mostly useful for trying
out custom tags declared in a config file.

Commands:
    redact  Write a redacted copy of a document
    tags    List registered tag names

Configuration:
    Supports config files: graph-redact.toml, .graph-redact.yml, etc.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import NONSECRET, SECRET, RedactionError
from .config_loader import load_config
from .redactor import create_redactor
from .utils import dump_document, is_yaml_path, load_document

# Initialize CLI app
app = typer.Typer(
    name="graph-redact",
    help="""Redact secret strings in nested data.

Every string in the document is passed through the transform of the chosen tag.

Examples:
    graph-redact redact secrets.json
    graph-redact redact config.yml --tag mask_email -o masked.yml
    graph-redact tags --config graph-redact.toml
""",
    add_completion=False,
    no_args_is_help=True,
)

# Documents go to stdout, messages to stderr
console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"graph-redact version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Redact secret strings in nested data."""


@app.command()
def redact(
    path: Path = typer.Argument(
        ...,
        help="JSON or YAML document to redact.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    tag: str = typer.Option(
        SECRET,
        "--tag",
        "-t",
        help="Tag applied to every string in the document. [default: secret]",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (graph-redact.toml or .graph-redact.yml).",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the result here instead of stdout.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Don't print redaction statistics.",
    ),
) -> None:
    """Write a redacted copy of a JSON or YAML document.

    The input file is never modified.

    \b
    EXAMPLES:
      graph-redact redact secrets.json
      graph-redact redact config.yml --tag mask_email -o masked.yml
    """
    try:
        config = load_config(config_path=config_file)
        redactor = create_redactor(config)

        if tag not in redactor.registry:
            console.print(f"[yellow]Warning: unknown tag '{escape(tag)}', using '{SECRET}'[/yellow]")

        document = load_document(path)
        result = redactor.as_copy(document, tag)

        text = dump_document(result, yaml_format=is_yaml_path(output or path))
        if output is None:
            typer.echo(text, nl=False)
        else:
            output.write_text(text, encoding="utf-8")
            console.print(f"[green]✓[/green] Wrote {escape(str(output))}")

        if not quiet:
            stats = redactor.get_stats()
            if stats:
                console.print("[cyan]Redactions applied:[/cyan]")
                for name, count in stats.items():
                    console.print(f"  {escape(name)}: {count}")
            elif tag != NONSECRET:
                console.print("[dim]No strings found[/dim]")

    except (RedactionError, OSError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None


@app.command()
def tags(
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (graph-redact.toml or .graph-redact.yml).",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
) -> None:
    """List registered tag names, built-in and configured."""
    try:
        config = load_config(config_path=config_file)
    except RedactionError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None

    redactor = create_redactor(config)
    configured = {rule.name: rule for rule in config.custom_tags}

    table = Table(title="Registered tags")
    table.add_column("Tag", style="cyan")
    table.add_column("Source")
    table.add_column("Behavior")

    for name in redactor.registry.names():
        if name in configured:
            rule = configured[name]
            if rule.pattern is not None:
                behavior = f"replace /{rule.pattern.pattern}/ with {rule.replacement!r}"
            else:
                behavior = f"replace with {rule.replacement!r}"
            table.add_row(escape(name), "config", escape(behavior))
        elif name == NONSECRET:
            table.add_row(name, "built-in", "keep as is")
        elif name == SECRET:
            table.add_row(name, "built-in", escape(f"replace with {config.placeholder!r} (default)"))
        else:
            table.add_row(escape(name), "registered", "custom transform")

    Console().print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
