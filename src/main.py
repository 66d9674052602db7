"""
Command line entry point:
1) Load a family snapshot (JSON member export or GEDCOM file).
2) Build the family graph and pick a root (oldest member unless --root is given).
3) Print the tree, write a printable chart, dump circular view data or validate.
"""

from enum import Enum
import json
import logging
from pathlib import Path

import typer

from graph import FamilyGraph
from parsing import load_snapshot
from plotting import circular_hierarchy, plot_tree, render_text, tree_to_dict
from tree import build_tree, select_default_root
from validation import validate_graph

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_INPUT = PROJECT_ROOT / "family_tree.json"
DEFAULT_PLOT = PROJECT_ROOT / "family_tree.png"


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


app = typer.Typer(
    name="famtree",
    help="Build ordered, re-rootable family trees from relationship snapshots.",
    add_completion=False,
)


@app.callback()
def configure(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(input_path: Path) -> FamilyGraph:
    typer.echo(f"Loading snapshot: {input_path}", err=True)
    try:
        graph = FamilyGraph(load_snapshot(input_path))
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"  Found {len(graph)} members", err=True)
    return graph


def _root(graph: FamilyGraph, root_id: int | None) -> int | None:
    if root_id is None:
        return select_default_root(graph.members)
    if not graph.has_member(root_id):
        typer.echo(f"Error: Member ID {root_id} not found in graph", err=True)
        raise typer.Exit(code=1)
    return root_id


@app.command()
def tree(
    input_path: Path = typer.Argument(DEFAULT_INPUT, help="JSON export or .ged file"),
    root: int | None = typer.Option(None, "--root", "-r", help="Member id to root the tree at"),
    output_format: OutputFormat = typer.Option(OutputFormat.TEXT, "--format", "-f"),
):
    """Print the family tree."""
    graph = _load(input_path)
    root_id = _root(graph, root)
    if root_id is None:
        typer.echo("No family members found.")
        return

    family_tree = build_tree(graph, root_id)
    if output_format is OutputFormat.JSON:
        typer.echo(json.dumps(tree_to_dict(family_tree), indent=2, ensure_ascii=False))
    else:
        typer.echo(render_text(family_tree, graph))


@app.command()
def plot(
    input_path: Path = typer.Argument(DEFAULT_INPUT, help="JSON export or .ged file"),
    output_path: Path = typer.Argument(DEFAULT_PLOT, help="png, svg or pdf"),
    root: int | None = typer.Option(None, "--root", "-r", help="Member id to root the tree at"),
):
    """Write the printable family tree chart."""
    graph = _load(input_path)
    root_id = _root(graph, root)
    if root_id is None:
        typer.echo("No family members found.")
        return

    typer.echo(f"Plotting tree to: {output_path}", err=True)
    plot_tree(build_tree(graph, root_id), output_path)
    typer.echo(f"Graph saved to {output_path}")


@app.command()
def circular(
    input_path: Path = typer.Argument(DEFAULT_INPUT, help="JSON export or .ged file"),
    root: int | None = typer.Option(None, "--root", "-r", help="Member id at the center"),
):
    """Print the circular view hierarchy as JSON."""
    graph = _load(input_path)
    root_id = _root(graph, root)
    if root_id is None:
        typer.echo("No family members found.")
        return

    typer.echo(json.dumps(circular_hierarchy(graph, root_id), indent=2, ensure_ascii=False))


@app.command()
def validate(input_path: Path = typer.Argument(DEFAULT_INPUT, help="JSON export or .ged file")):
    """Check the snapshot for cycles, impossible dates and inconsistent edges."""
    graph = _load(input_path)
    warnings = validate_graph(graph)
    if not warnings:
        typer.echo("No validation issues found")
        return

    typer.echo(f"Found {len(warnings)} validation warnings:")
    for w in warnings[:10]:
        typer.echo(f"  - {w}")
    if len(warnings) > 10:
        typer.echo(f"  ... and {len(warnings) - 10} more")


def main():
    app()


if __name__ == "__main__":
    main()
