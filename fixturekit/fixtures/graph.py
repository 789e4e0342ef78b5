"""
Dependency graph construction and topological sorting for fixtures.

The graph is rebuilt on every setup pass: starting from the requested names,
every reachable fixture is discovered depth-first and its declared
dependencies recorded. The discovered nodes are then ordered so that each
fixture follows all of its dependencies.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from fixturekit.fixtures.errors import CircularDependencyError, MissingFixtureError
from fixturekit.fixtures.models import FixtureDefinition


@dataclass
class DependencyGraph:
    """Transitive closure of a request and its direct-dependency edges.

    ``nodes`` keeps discovery order: requested names first, then each newly
    found dependency in the order it was reached.
    """

    nodes: list[str] = field(default_factory=list)
    edges: dict[str, list[str]] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.edges


def get_fixture(
    registry: Mapping[str, FixtureDefinition],
    name: str,
    dependent: str | None = None,
) -> FixtureDefinition:
    """Look up a fixture definition, raising MissingFixtureError if absent."""
    if name not in registry:
        raise MissingFixtureError(name, dependent)
    return registry[name]


def build_dependency_graph(
    requested: Iterable[str],
    registry: Mapping[str, FixtureDefinition],
) -> DependencyGraph:
    """Discover every fixture needed to satisfy a request.

    Args:
        requested: Fixture names asked for by the caller.
        registry: Mapping from fixture name to definition.

    Returns:
        DependencyGraph whose nodes are the requested names plus their
        transitive dependencies, and whose edges mirror the declared
        dependencies of each node.

    Raises:
        MissingFixtureError: If a requested or declared name is not registered.
    """
    nodes: dict[str, None] = {}
    edges: dict[str, list[str]] = {}

    def discover(name: str, dependent: str | None) -> None:
        if name in edges:
            return
        definition = get_fixture(registry, name, dependent)
        deps = list(definition.dependencies)
        edges[name] = deps
        for dep in deps:
            nodes.setdefault(dep)
            discover(dep, name)

    names = list(requested)
    nodes.update(dict.fromkeys(names))
    for name in names:
        discover(name, None)

    return DependencyGraph(nodes=list(nodes), edges=edges)


def sort_fixtures(nodes: Sequence[str], edges: Mapping[str, Sequence[str]]) -> list[str]:
    """Order fixtures so that every dependency precedes its dependents.

    Depth-first post-order traversal. Nodes are visited in input order and
    dependencies in declared order, so the result is deterministic.

    Args:
        nodes: Fixture names to order.
        edges: Mapping from fixture name to its direct dependencies. Names
            without an entry are treated as having no dependencies.

    Returns:
        Every node exactly once, dependencies first.

    Raises:
        CircularDependencyError: If a node is reachable from itself.
    """
    result: list[str] = []
    visiting: set[str] = set()  # on the current DFS path
    visited: set[str] = set()  # already placed
    path: list[str] = []

    def visit(name: str) -> None:
        if name in visited:
            return
        if name in visiting:
            cycle_start = path.index(name)
            raise CircularDependencyError(name, path[cycle_start:] + [name])

        visiting.add(name)
        path.append(name)
        for dep in edges.get(name, ()):
            visit(dep)
        path.pop()
        visiting.remove(name)

        visited.add(name)
        result.append(name)

    for node in nodes:
        visit(node)

    return result


def resolve_order(
    requested: Iterable[str],
    registry: Mapping[str, FixtureDefinition],
) -> list[str]:
    """Return the setup order for a request: graph discovery followed by sorting."""
    graph = build_dependency_graph(requested, registry)
    return sort_fixtures(graph.nodes, graph.edges)
