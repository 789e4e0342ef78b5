"""
Fixturekit Fixture Engine.

Dependency resolution and setup/teardown orchestration for test fixtures.
"""

from fixturekit.fixtures.errors import (
    AlreadyInitializedError,
    CircularDependencyError,
    DuplicateFixtureError,
    FixtureError,
    MissingFixtureError,
    NotInitializedError,
)
from fixturekit.fixtures.graph import (
    DependencyGraph,
    build_dependency_graph,
    resolve_order,
    sort_fixtures,
)
from fixturekit.fixtures.lifecycle import Fixtures, InstanceState, create_fixtures
from fixturekit.fixtures.models import FixtureDefinition, FixtureResult, define_fixture
from fixturekit.fixtures.registry import FixtureRegistry

__all__ = [
    # Models
    "FixtureDefinition",
    "FixtureResult",
    "define_fixture",
    # Registry
    "FixtureRegistry",
    # Dependency graph
    "DependencyGraph",
    "build_dependency_graph",
    "resolve_order",
    "sort_fixtures",
    # Lifecycle
    "Fixtures",
    "InstanceState",
    "create_fixtures",
    # Errors
    "AlreadyInitializedError",
    "CircularDependencyError",
    "DuplicateFixtureError",
    "FixtureError",
    "MissingFixtureError",
    "NotInitializedError",
]
