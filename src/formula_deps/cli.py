"""formula-deps - Command Line Interface.

Inspect formula references of a document and walk its dependency chains.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .exceptions import FormulaDepsError
from .graph.references import Direction, ReferenceGraph
from .model.document import Document
from .model.elements import Attribute, Element, Node, element_label, is_formula
from .model.loader import load_document
from .tracing.tracer import FormulaDependencyTracer
from .utils.logger import setup_logger


console = Console()

DIRECTION_CHOICES = {
    "precedents": Direction.PRECEDENTS,
    "p": Direction.PRECEDENTS,
    "dependents": Direction.DEPENDENTS,
    "d": Direction.DEPENDENTS
}


def _load(document_path: Path) -> Document:
    """Load a document, exiting with an error message on failure."""
    try:
        return load_document(document_path)
    except FormulaDepsError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _select(document: Document, node_id: str, attribute: Optional[str]) -> None:
    try:
        document.select(node_id, attribute)
    except KeyError as e:
        message = str(e) if isinstance(e, FormulaDepsError) else e.args[0]
        console.print(f"[red]{message}[/red]")
        sys.exit(1)


def _format_value(value) -> str:
    if is_formula(value):
        return f"[yellow]{escape(value)}[/yellow]"
    return escape(str(value))


def _entity_label(document: Document, entity) -> str:
    """Label a highlighted entity (a node or an attribute value container)."""
    if isinstance(entity, Attribute):
        for node in document.iter_nodes():
            if any(attribute is entity for attribute in node.attributes):
                return f"{node.id}['{entity.name}']"
        return f"['{entity.name}']"
    return entity.id


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, verbose):
    """formula-deps - Trace formula precedents and dependents in a document."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_logger(level="DEBUG" if verbose else None)


@cli.command()
@click.argument("document_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(document_path):
    """Show the node tree with formulas and attributes.

    Example:
        formula-deps show budget.yaml
    """
    document = _load(document_path)

    def node_label(node: Node) -> str:
        label = f"[cyan]{node.id}[/cyan]"
        if node.text:
            label += f" {_format_value(node.text)}"
        return label

    def add_contents(tree: Tree, node: Node) -> None:
        for attribute in node.attributes:
            tree.add(f"[green]{attribute.name}[/green] = {_format_value(attribute.value)}")
        for child in node.children:
            add_contents(tree.add(node_label(child)), child)

    tree = Tree(node_label(document.root))
    add_contents(tree, document.root)

    console.print(Panel(tree, title=document.name or str(document_path), border_style="blue"))


@cli.command()
@click.argument("document_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("node_id")
@click.option("--attribute", "-a", default=None, help="Attribute of the node to look up")
def refs(document_path, node_id, attribute):
    """List direct precedents and dependents of a node or attribute.

    Example:
        formula-deps refs budget.yaml ID_2
        formula-deps refs budget.yaml ID_3 -a Rate
    """
    document = _load(document_path)
    _select(document, node_id, attribute)
    element: Element = document.selection.selected_attribute or document.selection.node
    references = ReferenceGraph(document)

    table = Table(title=f"References of {escape(element_label(element))}")
    table.add_column("Direction", style="cyan")
    table.add_column("Element", style="green")

    for direction in Direction:
        related = sorted(references.related(element, direction), key=element_label)
        if not related:
            table.add_row(direction.value, "[dim]none[/dim]")
        for other in related:
            table.add_row(direction.value, escape(element_label(other)))

    console.print(table)


@cli.command()
@click.argument("document_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("node_id")
@click.option("--attribute", "-a", default=None, help="Start from this attribute of the node")
@click.option(
    "--step", "-s", "steps",
    multiple=True,
    type=click.Choice(sorted(DIRECTION_CHOICES)),
    default=("precedents",),
    help="Trace step to run; repeat to walk further (default: one precedents step)"
)
def trace(document_path, node_id, attribute, steps):
    """Walk formula dependencies one hop per step.

    Repeating a direction expands the most recent hop. Switching direction
    re-traces everything highlighted so far.

    Example:
        formula-deps trace budget.yaml ID_2 -s p -s p
        formula-deps trace budget.yaml ID_3 -a Rate -s dependents -s precedents
    """
    document = _load(document_path)
    _select(document, node_id, attribute)
    tracer = FormulaDependencyTracer.for_document(document)

    for i, step in enumerate(steps, 1):
        direction = DIRECTION_CHOICES[step]
        try:
            session = (
                tracer.find_precedents() if direction is Direction.PRECEDENTS
                else tracer.find_dependents()
            )
        except FormulaDepsError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)

        found = sorted(escape(element_label(found_element)) for found_element in session.last_step.highlights)
        console.print(
            f"[bold]Step {i}[/bold] ({direction.value}): "
            + (", ".join(found) if found else "[dim]nothing found[/dim]")
        )

    highlighted = tracer.host.highlight_sink()
    table = Table(title=f"Highlighted ({len(highlighted)})")
    table.add_column("Element", style="green")
    for entity in highlighted:
        table.add_row(escape(_entity_label(document, entity)))
    console.print(table)

    connectors = tracer.host.connector_sink()
    table = Table(title=f"Connectors ({len(connectors)})")
    table.add_column("From (precedent)", style="cyan")
    table.add_column("To (dependent)", style="magenta")
    for connector in connectors:
        table.add_row(connector.source.id, connector.target.id)
    console.print(table)


if __name__ == "__main__":
    cli()
