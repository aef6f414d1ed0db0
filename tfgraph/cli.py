"""
tfgraph CLI entry point.
"""
import sys
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from tfgraph import __version__
from tfgraph.categories import load_classifier
from tfgraph.errors import ConfigError, TreeShapeError
from tfgraph.extract import engine
from tfgraph.models.graph import DiagramGraph
from tfgraph.models.resource import Category
from tfgraph.parsers import terraform
from tfgraph.reporters import html_reporter, json_reporter, markdown


def _print_summary_table(graph: DiagramGraph, no_color: bool) -> None:
    """Print resources per category and the dependency count to stderr."""
    tbl = Table(title="Resource Summary", show_header=True, header_style="bold")
    tbl.add_column("Category", width=12)
    tbl.add_column("Resources", justify="right")
    tbl.add_column("Outgoing deps", justify="right")

    category_of = {r.id: r.category for r in graph.resources}
    for cat in Category:
        members = [r for r in graph.resources if r.category == cat]
        if not members:
            continue
        outgoing = sum(1 for d in graph.dependencies if category_of.get(d.source) == cat)
        tbl.add_row(cat.value, str(len(members)), str(outgoing))

    tbl.add_row("[bold]total[/bold]", str(len(graph.resources)), str(len(graph.dependencies)))
    Console(stderr=True, no_color=no_color).print(tbl)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(__version__)
@click.pass_context
def cli(ctx):
    """tfgraph - resource inventory and dependency graph for Terraform."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option(
    "--format", "output_format",
    type=click.Choice(["json", "markdown", "html"], case_sensitive=False),
    default="json",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write the diagram to this file (default: stdout).",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with category overrides (default: ./tfgraph.yaml if present).",
)
@click.option(
    "--summary",
    is_flag=True,
    default=False,
    help="Print terminal summary table only, do not write the diagram.",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable rich terminal color output.",
)
def scan(
    paths: Tuple[str, ...],
    output_format: str,
    output: Optional[str],
    config_path: Optional[str],
    summary: bool,
    no_color: bool,
) -> None:
    """
    Extract resources and their dependencies from Terraform files.

    PATHS can be files or directories; multiple values accepted.
    """
    stderr = Console(stderr=True, no_color=no_color)
    source_label = ", ".join(paths)

    try:
        classifier = load_classifier(config_path)
    except ConfigError as exc:
        stderr.print(f"[red]Config error:[/red] {exc}")
        sys.exit(2)

    # 1. Collect and parse, once per file
    with stderr.status("[bold]Collecting files…"):
        file_paths = terraform.collect_files(paths)

    if not file_paths:
        stderr.print("[red]No Terraform files found.[/red]")
        sys.exit(2)

    with stderr.status(f"[bold]Parsing {len(file_paths)} file(s)…"):
        parsed = [pf for pf in map(terraform.parse_file, file_paths) if pf is not None]

    # 2. Extract
    try:
        graph = engine.run(parsed, classifier)
    except TreeShapeError as exc:
        stderr.print(f"[red]Unexpected structure:[/red] {exc}")
        sys.exit(2)

    if not graph.resources:
        stderr.print("[yellow]No resources found in the provided paths.[/yellow]")

    stderr.print(
        f"Found [bold]{len(graph.resources)}[/bold] resources and "
        f"[bold]{len(graph.dependencies)}[/bold] dependencies."
    )

    if summary or output:
        _print_summary_table(graph, no_color)

    # 3. Render
    if not summary:
        fmt = output_format.lower()
        if fmt == "markdown":
            content = markdown.build_report(graph, source_label)
        elif fmt == "html":
            content = html_reporter.build_report(graph, source_label)
        else:
            content = json_reporter.build_report(graph)

        if output:
            with open(output, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(content)
            stderr.print(f"Diagram written to [bold]{output}[/bold]")
        else:
            click.echo(content)

    sys.exit(0)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
