"""CLI for boxnest."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

import click

from boxnest import __version__
from boxnest.layout import (
    fit_parent_to_children,
    fit_parent_to_children_recursive,
    update_children_layout,
)
from boxnest.layout.hierarchy import get_children, get_depth, get_roots
from boxnest.layout.settings import LayoutSettings, Margins
from boxnest.layout.strategies import STRATEGIES
from boxnest.layout.validation import Severity, validate_layout
from boxnest.parser import dump_document, parse_document
from boxnest.parser.model import Node


def _load(input_file: Path) -> tuple[dict[str, Node], LayoutSettings]:
    try:
        return parse_document(input_file.read_text())
    except ValueError as e:
        click.echo(f"Parse error: {e}", err=True)
        raise SystemExit(1)


def _override(
    settings: LayoutSettings,
    strategy: str | None,
    margin: float | None,
    label_margin: float | None,
) -> LayoutSettings:
    margins = settings.margins
    if margin is not None or label_margin is not None:
        margins = Margins(
            margin=margins.margin if margin is None else margin,
            label_margin=margins.label_margin if label_margin is None else label_margin,
        )
    return replace(
        settings,
        margins=margins,
        layout_algorithm=strategy or settings.layout_algorithm,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log layout decisions to stderr")
def cli(verbose: bool) -> None:
    """boxnest: Lay out nested rectangle diagrams."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON file path. Defaults to overwriting the input")
@click.option("--strategy", type=click.Choice(list(STRATEGIES.keys())), default=None,
              help="Packing strategy (default: from the document settings)")
@click.option("--margin", type=float, default=None,
              help="Spacing between siblings and parent edges")
@click.option("--label-margin", type=float, default=None,
              help="Space reserved for a parent's label")
def layout(
    input_file: Path,
    output: Path | None,
    strategy: str | None,
    margin: float | None,
    label_margin: float | None,
) -> None:
    """Re-run the cascading layout over a document."""
    nodes, settings = _load(input_file)
    settings = _override(settings, strategy, margin, label_margin)

    nodes = update_children_layout(
        nodes, settings.fixed_dimensions, settings.margins, settings.layout_algorithm
    )

    if output is None:
        output = input_file
    output.write_text(dump_document(nodes, settings))
    click.echo(f"Laid out {len(nodes)} rectangles "
               f"({settings.layout_algorithm}) -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.argument("parent_id")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON file path. Defaults to overwriting the input")
@click.option("--recursive", is_flag=True, help="Also fit every ancestor")
def fit(input_file: Path, parent_id: str, output: Path | None, recursive: bool) -> None:
    """Shrink or grow a parent to exactly fit its children."""
    nodes, settings = _load(input_file)
    if parent_id not in nodes:
        click.echo(f"Unknown rectangle '{parent_id}'", err=True)
        raise SystemExit(1)

    fit_fn = fit_parent_to_children_recursive if recursive else fit_parent_to_children
    nodes = fit_fn(
        parent_id, nodes, settings.fixed_dimensions, settings.margins, settings.layout_algorithm
    )

    if output is None:
        output = input_file
    output.write_text(dump_document(nodes, settings))
    parent = nodes[parent_id]
    click.echo(f"Fitted '{parent_id}' to {parent.w:g}x{parent.h:g} -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def validate(input_file: Path) -> None:
    """Check a document for layout defects."""
    nodes, settings = _load(input_file)
    violations = validate_layout(
        nodes, settings.fixed_dimensions, settings.margins, settings.layout_algorithm
    )
    errors = [v for v in violations if v.severity is Severity.ERROR]
    warnings = [v for v in violations if v.severity is Severity.WARNING]

    for v in warnings:
        click.echo(f"Warning [{v.check}]: {v.message}", err=True)
    if errors:
        click.echo("Validation errors:", err=True)
        for v in errors:
            click.echo(f"  - [{v.check}] {v.message}", err=True)
        raise SystemExit(1)

    click.echo(f"Valid: {len(nodes)} rectangles, "
               f"{len(get_roots(nodes))} roots, "
               f"{len(warnings)} warnings")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def info(input_file: Path) -> None:
    """Show the hierarchy of a document."""
    nodes, settings = _load(input_file)

    click.echo(f"Rectangles: {len(nodes)}")
    click.echo(f"Strategy: {settings.layout_algorithm}")
    click.echo(f"Margins: {settings.margins.margin:g} "
               f"(label {settings.margins.label_margin:g})")

    def show(node: Node) -> None:
        flags = []
        if node.is_manual_positioning_enabled:
            flags.append("manual")
        if node.is_locked_as_is:
            flags.append("locked")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        indent = "  " * (get_depth(node.id, nodes) + 1)
        click.echo(f"{indent}{node.id} {node.label!r} ({node.type.value}) "
                   f"{node.w:g}x{node.h:g} at ({node.x:g},{node.y:g}){suffix}")
        for child in get_children(node.id, nodes):
            show(child)

    for root in get_roots(nodes):
        show(root)
