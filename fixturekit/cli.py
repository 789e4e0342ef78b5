"""
Fixturekit CLI - Command-line interface for inspecting fixture registries.

Provides commands for showing setup order, validating registries and running
a single setup/teardown cycle outside of a test run.
"""

from __future__ import annotations

import asyncio
import importlib
import importlib.util
import json
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from fixturekit.config import FixturesConfig, FixturesConfigLoader
from fixturekit.fixtures.errors import FixtureError
from fixturekit.fixtures.graph import DependencyGraph, build_dependency_graph, sort_fixtures
from fixturekit.fixtures.lifecycle import create_fixtures
from fixturekit.fixtures.models import FixtureDefinition
from fixturekit.fixtures.registry import FixtureRegistry
from fixturekit.log import setup_logging

app = typer.Typer(
    name="fixturekit",
    help="Declarative async test fixtures with dependency resolution",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        from fixturekit import __version__

        console.print(f"[bold blue]fixturekit[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """fixturekit - Declarative async test fixtures."""
    pass


def load_registry(target: str) -> Mapping[str, FixtureDefinition]:
    """
    Import a registry from ``module:attribute`` or ``path/to/file.py:attribute``.

    Args:
        target: Import target

    Returns:
        The registry mapping found at the target

    Raises:
        ValueError: If the target is malformed or does not name a mapping
    """
    module_path, sep, attribute = target.rpartition(":")
    if not sep or not module_path or not attribute:
        raise ValueError(f"Expected 'module:attribute', got '{target}'")

    if module_path.endswith(".py") or "/" in module_path:
        path = Path(module_path)
        if not path.exists():
            raise FileNotFoundError(f"Module not found: {module_path}")

        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Could not load module: {module_path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[path.stem] = module
        spec.loader.exec_module(module)
    else:
        module = importlib.import_module(module_path)

    try:
        registry = getattr(module, attribute)
    except AttributeError:
        raise ValueError(f"Module '{module_path}' has no attribute '{attribute}'") from None

    if not isinstance(registry, Mapping):
        raise ValueError(f"'{target}' is not a fixture registry (got {type(registry).__name__})")
    return registry


def _load_or_exit(target: str) -> Mapping[str, FixtureDefinition]:
    try:
        return load_registry(target)
    except (ImportError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


def _load_config(config_path: str | None, verbose: bool) -> FixturesConfig:
    try:
        config = FixturesConfigLoader.from_yaml(config_path) if config_path else FixturesConfig()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    setup_logging("DEBUG" if verbose else config.log_level)
    return config


@app.command()
def order(
    target: str = typer.Argument(..., help="Registry as module:attribute or file.py:attribute"),
    names: list[str] = typer.Argument(..., help="Fixture names to request"),
    format_: str = typer.Option("console", "--format", "-f", help="Output format: console, json"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Verbose output"),
) -> None:
    """
    Show the order in which the requested fixtures would be set up.

    Resolves transitive dependencies without running any fixture.
    """
    setup_logging("DEBUG" if verbose else "WARNING")
    registry = _load_or_exit(target)

    try:
        graph = build_dependency_graph(names, registry)
        setup_order = sort_fixtures(graph.nodes, graph.edges)
    except FixtureError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if format_ == "json":
        output = {
            "requested": names,
            "order": setup_order,
            "dependencies": graph.edges,
        }
        console.print(
            json.dumps(output, indent=2), soft_wrap=True, markup=False, highlight=False
        )
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim")
    table.add_column("Fixture", style="cyan")
    table.add_column("Depends on")
    for index, name in enumerate(setup_order, start=1):
        deps = ", ".join(graph.edges.get(name, [])) or "-"
        label = f"[bold]{name}[/bold]" if name in names else name
        table.add_row(str(index), label, deps)
    console.print(table)

    tree = Tree("[bold]Dependencies[/bold]")
    for name in dict.fromkeys(names):
        _add_dependency_branch(tree, name, graph)
    console.print(tree)


def _add_dependency_branch(parent: Tree, name: str, graph: DependencyGraph) -> None:
    branch = parent.add(name)
    for dep in graph.edges.get(name, []):
        _add_dependency_branch(branch, dep, graph)


@app.command()
def check(
    target: str = typer.Argument(..., help="Registry as module:attribute or file.py:attribute"),
) -> None:
    """
    Validate a fixture registry.

    Reports dependencies on unregistered fixtures and circular dependencies.
    """
    registry = _load_or_exit(target)
    if not isinstance(registry, FixtureRegistry):
        registry = FixtureRegistry(registry)

    problems = registry.validate()
    if problems:
        for problem in problems:
            console.print(f"[red]✗[/red] {problem}")
        console.print(f"\n[bold]Found {len(problems)} problem(s)[/bold]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] {len(registry)} fixture(s), no problems found")


@app.command()
def run(
    target: str = typer.Argument(..., help="Registry as module:attribute or file.py:attribute"),
    names: list[str] = typer.Argument(..., help="Fixture names to request"),
    config_path: str = typer.Option(None, "--config", "-c", help="YAML configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Verbose output"),
) -> None:
    """
    Run one setup/teardown cycle for the requested fixtures.

    Useful to check that fixtures can be created and released outside a test run.
    """
    config = _load_config(config_path, verbose)
    registry = _load_or_exit(target)

    console.print(
        Panel(
            f"[bold]Fixtures:[/bold] {', '.join(names)}",
            title="fixturekit run",
            border_style="blue",
        )
    )

    try:
        setup_order, values = asyncio.run(_run_cycle(registry, names, config))
    except Exception as e:
        console.print(f"[red]✗ {type(e).__name__}:[/red] {e}")
        for note in getattr(e, "__notes__", []):
            console.print(f"  [dim]{note}[/dim]")
        raise typer.Exit(1) from None

    console.print(f"[cyan]Setup order:[/cyan] {' -> '.join(setup_order)}")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Fixture", style="cyan")
    table.add_column("Value")
    for name, value in values.items():
        table.add_row(name, repr(value))
    console.print(table)
    console.print("\n[green]✓ Setup and teardown completed[/green]")


async def _run_cycle(
    registry: Mapping[str, FixtureDefinition],
    names: list[str],
    config: FixturesConfig,
) -> tuple[tuple[str, ...], dict[str, Any]]:
    fixtures = create_fixtures(registry, names, config)
    async with fixtures as values:
        setup_order = fixtures.setup_order
    return setup_order, values


if __name__ == "__main__":
    app()
