"""Command-line interface for openxml-deck."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from openxml_deck import api
from openxml_deck.errors import IssueSeverity, OpenXmlDeckError
from openxml_deck.packuri import PACKAGE_URI
from openxml_deck.parts import Structured

console = Console()
error_console = Console(stderr=True)

SEVERITY_STYLES = {
    IssueSeverity.ERROR: "red",
    IssueSeverity.WARNING: "yellow",
    IssueSeverity.INFO: "blue",
}


def _open(path: Path):
    try:
        return api.open_path(path)
    except OpenXmlDeckError as exc:
        error_console.print(f"[red]Error:[/red] {path}: {exc}")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log package loading and assembly.")
def main(verbose: bool) -> None:
    """Inspect and rewrite PowerPoint (.pptx) packages."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=error_console, show_path=False)],
        )


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def parts(path: Path) -> None:
    """List the parts of PATH in write order."""
    package = _open(path)
    table = Table(show_header=True, header_style="bold")
    table.add_column("Part")
    table.add_column("Content type", style="dim")
    table.add_column("Payload", width=10)
    table.add_column("Size", justify="right")
    for partname in api.part_paths(package):
        part = package.require_part(partname)
        payload = "xml" if isinstance(part.payload, Structured) else "binary"
        table.add_row(partname, part.content_type, payload, str(len(part.blob)))
    console.print(table)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--part",
    "partname",
    default=PACKAGE_URI,
    show_default=True,
    help='Source part name, or "/" for the package relationships.',
)
def rels(path: Path, partname: str) -> None:
    """List the relationships of one part of PATH."""
    package = _open(path)
    try:
        collection = package.rels_of(partname)
    except KeyError:
        error_console.print(f"[red]Error:[/red] No part named {partname}")
        sys.exit(1)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Id", width=8)
    table.add_column("Type", style="dim")
    table.add_column("Target")
    table.add_column("Mode", width=8)
    for rel in collection:
        target = rel.resolve_target(partname)
        if not rel.is_external and not package.has_part(target):
            target = f"[red]{target} (missing)[/red]"
        table.add_row(rel.rId, rel.reltype.rsplit("/", 1)[-1], target, rel.target_mode.value)
    console.print(table)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format.",
)
def check(path: Path, output: str) -> None:
    """Load PATH and report structural issues.

    Exits with status 1 when an error-severity issue is found.
    """
    package = _open(path)
    has_errors = any(issue.severity is IssueSeverity.ERROR for issue in package.issues)

    if output == "json":
        _output_json(path, package.issues, has_errors)
    else:
        _output_text(path, package.issues, has_errors)

    sys.exit(1 if has_errors else 0)


def _output_text(path: Path, issues: list, has_errors: bool) -> None:
    """Output issues as formatted text."""
    if not issues:
        console.print(f"[green]✓[/green] {path} - No issues")
        return
    marker = "[red]✗[/red]" if has_errors else "[yellow]![/yellow]"
    console.print(f"{marker} {path} - {len(issues)} issue(s)")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Kind", style="dim", width=22)
    table.add_column("Severity", width=8)
    table.add_column("Location", width=36)
    table.add_column("Description")
    for issue in issues:
        style = SEVERITY_STYLES.get(issue.severity, "white")
        location = issue.part_uri
        if issue.rId:
            location = f"{location}#{issue.rId}"
        table.add_row(
            issue.kind.value,
            f"[{style}]{issue.severity.value}[/{style}]",
            location,
            issue.description,
        )
    console.print(table)


def _output_json(path: Path, issues: list, has_errors: bool) -> None:
    """Output issues as JSON."""
    output = {
        "file": str(path),
        "valid": not has_errors,
        "issues": [
            {
                "kind": issue.kind.value,
                "severity": issue.severity.value,
                "description": issue.description,
                "part_uri": issue.part_uri,
                "rId": issue.rId,
                "target": issue.target,
            }
            for issue in issues
        ],
    }
    console.print_json(json.dumps(output, indent=2))


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("destination", type=click.Path(dir_okay=False, path_type=Path))
def normalize(source: Path, destination: Path) -> None:
    """Load SOURCE and write it back to DESTINATION in canonical entry order."""
    package = _open(source)
    try:
        api.save(package, destination)
    except OpenXmlDeckError as exc:
        error_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    console.print(f"[green]✓[/green] Wrote {destination} ({len(package)} parts)")


if __name__ == "__main__":
    main()
