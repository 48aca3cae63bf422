"""gitable CLI: inspect, check, normalize and compare git repository locators.

Commands:
- inspect URI [--heuristic] [--json]
- check URI (exit 1 when the locator is invalid)
- web URI [--scheme https]
- equivalent A B (prints true/false, exit 1 when false)
- normalize URI [--heuristic]
"""

from __future__ import annotations

import json

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gitable.errors import InvalidURIError
from gitable.locator import DEFAULT_WEB_SCHEME, GitLocator
from gitable.parser import heuristic_parse, parse, parse_when_valid
from gitable.types import describe
from gitable.validator import validate_report

app = typer.Typer(add_completion=False, help="Inspect and compare git repository locators")
console = Console()


def _load(uri: str, heuristic: bool = False) -> GitLocator:
    try:
        locator = heuristic_parse(uri) if heuristic else parse(uri)
    except (TypeError, InvalidURIError) as exc:
        rprint(f"[red]Invalid locator:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    if locator is None:
        rprint("[red]Empty locator[/red]")
        raise typer.Exit(code=1)
    return locator


@app.command()
def inspect(
    uri: str = typer.Argument(..., help="Locator to inspect"),
    heuristic: bool = typer.Option(False, "--heuristic", help="Repair sloppy input first"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    report = describe(_load(uri, heuristic))
    payload = report.model_dump(mode="json")
    if as_json:
        validate_report(payload)
        print(json.dumps(payload, indent=2))
        return

    table = Table(title=escape(report.uri))
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field, value in payload.items():
        table.add_row(field, "" if value is None else escape(str(value)))
    console.print(table)


@app.command()
def check(uri: str = typer.Argument(..., help="Locator to validate")) -> None:
    locator = parse_when_valid(uri)
    if locator is None:
        rprint(f"[red]invalid[/red] {escape(uri)}")
        raise typer.Exit(code=1)
    rprint(f"[green]valid[/green] {escape(repr(locator))}")


@app.command()
def web(
    uri: str = typer.Argument(..., help="Locator to link to"),
    scheme: str = typer.Option(DEFAULT_WEB_SCHEME, "--scheme", help="Scheme of the web link"),
) -> None:
    link = _load(uri).to_web_uri(scheme)
    if link is None:
        rprint("[yellow]No host, no web link.[/yellow]")
        raise typer.Exit(code=1)
    print(link)


@app.command()
def equivalent(
    first: str = typer.Argument(..., help="First locator"),
    second: str = typer.Argument(..., help="Second locator"),
) -> None:
    same = _load(first).equivalent(second)
    print("true" if same else "false")
    if not same:
        raise typer.Exit(code=1)


@app.command()
def normalize(
    uri: str = typer.Argument(..., help="Locator to normalize"),
    heuristic: bool = typer.Option(False, "--heuristic", help="Repair sloppy input first"),
) -> None:
    print(_load(uri, heuristic).normalize())


if __name__ == "__main__":
    app()
