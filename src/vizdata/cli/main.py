"""
vizdata CLI - Build and render visualization data tables.

Descriptions and data are read from JSON files.

Usage:
    vizdata columns schema.json
    vizdata render schema.json data.json --format csv
    vizdata render schema.json data.json --tqx "out:html"
    vizdata --help
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from vizdata import __version__
from vizdata.exceptions import DataTableError
from vizdata.schema.parser import parse_description
from vizdata.table import DataTable


class RenderFormat(str, Enum):
    """Output formats of the render command."""
    json = "json"
    response = "response"
    js = "js"
    csv = "csv"
    tsv = "tsv"
    html = "html"


app = typer.Typer(
    name="vizdata",
    help="Build visualization data tables and render them as JSON, JS, CSV or HTML",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True, soft_wrap=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"vizdata version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug messages to stderr."),
    ] = False,
) -> None:
    """vizdata - Visualization data table builder."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        error_console.print(f"[red]Error:[/red] {path} is not valid JSON: {e}")
        raise typer.Exit(code=1)


def _parse_order_by(values: list[str] | None) -> list[Any] | None:
    """Turn ["a", "b:desc"] into ["a", ("b", "desc")]."""
    if not values:
        return None
    keys: list[Any] = []
    for value in values:
        column_id, sep, direction = value.rpartition(":")
        keys.append((column_id, direction) if sep else value)
    return keys


@app.command()
def columns(
    schema_file: Annotated[
        Path,
        typer.Argument(
            help="Path to the table description (JSON)",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output normalized columns as JSON"),
    ] = False,
) -> None:
    """
    Show the normalized columns of a table description.

    Each column is listed with its type, label, nesting depth and the kind
    of container its values are read from.
    """
    try:
        schema = parse_description(_load_json(schema_file))
    except DataTableError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(code=1)

    if json_output:
        console.print_json(json.dumps([column.as_dict() for column in schema]))
        return

    table = Table(title=f"{len(schema)} column(s)")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Label")
    table.add_column("Depth", justify="right")
    table.add_column("Container")
    table.add_column("Properties", style="dim")

    for column in schema:
        table.add_row(
            column.id,
            column.type.value,
            column.label,
            str(column.depth),
            column.container.value if column.container else "",
            json.dumps(column.custom_properties) if column.custom_properties else "",
        )

    console.print(table)


@app.command()
def render(
    schema_file: Annotated[
        Path,
        typer.Argument(
            help="Path to the table description (JSON)",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    data_file: Annotated[
        Path,
        typer.Argument(
            help="Path to the table data (JSON)",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    output_format: Annotated[
        RenderFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = RenderFormat.json,
    order_by: Annotated[
        Optional[list[str]],
        typer.Option(
            "--order-by",
            "-o",
            help="Sort column, optionally with :asc or :desc (repeatable)",
        ),
    ] = None,
    columns_order: Annotated[
        Optional[str],
        typer.Option("--columns", "-c", help="Comma-separated column ids to output"),
    ] = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Variable name for JS output"),
    ] = None,
    tqx: Annotated[
        Optional[str],
        typer.Option("--tqx", help="Request options string; overrides --format"),
    ] = None,
) -> None:
    """
    Render a table built from a description and data.

    Examples:

        $ vizdata render schema.json data.json --format csv

        $ vizdata render schema.json data.json -o salary:desc --format html

        $ vizdata render schema.json data.json --tqx "out:json;reqId:7"
    """
    keys = _parse_order_by(order_by)
    ids = [c.strip() for c in columns_order.split(",") if c.strip()] if columns_order else None

    try:
        table = DataTable(_load_json(schema_file), _load_json(data_file))

        if tqx is not None:
            output = table.to_response(ids, keys, tqx=tqx)
        elif output_format == RenderFormat.response:
            output = table.to_json_response(ids, keys)
        elif output_format == RenderFormat.js:
            output = table.to_js_code(name, ids, keys)
        elif output_format == RenderFormat.csv:
            output = table.to_csv(ids, keys)
        elif output_format == RenderFormat.tsv:
            output = table.to_tsv_excel(ids, keys)
        elif output_format == RenderFormat.html:
            output = table.to_html(ids, keys)
        else:
            output = table.to_json(ids, keys)

    except DataTableError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(code=1)

    typer.echo(output.rstrip("\n"))


if __name__ == "__main__":
    app()
