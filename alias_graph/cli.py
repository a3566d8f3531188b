"""Click CLI with check, deps, order, components, and serve subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from alias_graph import __version__
from alias_graph.analysis.circularity import alias_components, alias_order
from alias_graph.errors import AliasGraphError, CyclicDependency, UnknownEntity
from alias_graph.models import AnalysisConfig
from alias_graph.pipeline import run_load, run_pipeline

_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _load(definitions: Path, guarded: bool):
    try:
        return run_load(AnalysisConfig(definitions_path=definitions, guarded_recursion=guarded))
    except AliasGraphError as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """alias-graph: Find circular type aliases and order definitions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("definitions", type=_FILE)
@click.option("--guarded", is_flag=True, help="Allow recursion nested under generics, tuples, records and procs")
@click.option("--eager/--lazy", default=True, help="Close every alias up front")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def check(definitions: Path, guarded: bool, eager: bool, as_json: bool):
    """Report circular aliases and dangling references. Exits 1 on cycles."""
    config = AnalysisConfig(definitions_path=definitions, guarded_recursion=guarded, eager=eager)
    try:
        report = run_pipeline(config)
    except AliasGraphError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        click.echo(f"Checked {report.aliases} alias(es)\n")
        for cycle in report.cycles:
            label = "self reference" if cycle["self_reference"] else f"cycle of {cycle['size']}"
            click.echo(f"  {click.style(label, fg='red'):>24}  {', '.join(cycle['members'])}")
        for ref in report.dangling:
            click.echo(
                f"  {click.style('dangling', fg='yellow'):>24}  "
                f"{ref['alias']} -> {ref['reference']}"
            )
        if not report.cycles and not report.dangling:
            click.echo(click.style("No circular aliases found.", fg="green"))

    if report.has_cycles:
        raise SystemExit(1)


@cli.command()
@click.argument("definitions", type=_FILE)
@click.argument("name")
@click.option("--guarded", is_flag=True, help="Allow recursion nested under generics, tuples, records and procs")
def deps(definitions: Path, name: str, guarded: bool):
    """Show direct and transitive dependencies of one alias."""
    builder = _load(definitions, guarded)
    try:
        direct = sorted(map(str, builder.direct_dependencies_of(name)))
        transitive = sorted(map(str, builder.dependencies_of(name)))
        circular = builder.is_circular(name)
        cycle = [str(member) for member in builder.cycle_of(name)]
    except (UnknownEntity, ValueError) as e:
        raise click.ClickException(str(e))

    click.echo(click.style(name, fg="cyan"))
    click.echo(f"  direct:     {', '.join(direct) or '-'}")
    click.echo(f"  transitive: {', '.join(transitive) or '-'}")
    if circular:
        click.echo(click.style(f"  circular:   {', '.join(cycle)}", fg="red"))


@cli.command()
@click.argument("definitions", type=_FILE)
@click.option("--guarded", is_flag=True, help="Allow recursion nested under generics, tuples, records and procs")
def order(definitions: Path, guarded: bool):
    """Print aliases so that each follows everything it references."""
    builder = _load(definitions, guarded)
    try:
        names = alias_order(builder)
    except CyclicDependency as e:
        click.echo(click.style(str(e), fg="red"), err=True)
        raise SystemExit(1)
    for name in names:
        click.echo(str(name))


@cli.command()
@click.argument("definitions", type=_FILE)
@click.option("--guarded", is_flag=True, help="Allow recursion nested under generics, tuples, records and procs")
def components(definitions: Path, guarded: bool):
    """Print strongly connected components of the alias graph, dependencies first."""
    builder = _load(definitions, guarded)
    for component in alias_components(builder):
        line = ", ".join(str(name) for name in component)
        if len(component) > 1:
            line = click.style(line, fg="red")
        click.echo(line)


@cli.command()
@click.option("--port", "-p", default=8430, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the HTTP API. "
            "Install with: pip install 'alias-graph[web]'"
        )

    from alias_graph.web.app import create_app

    click.echo(f"Starting alias-graph API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
