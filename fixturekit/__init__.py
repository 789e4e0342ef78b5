"""
Fixturekit - Declarative async test fixtures with dependency resolution.

Fixtures declare the fixtures they depend on; fixturekit works out the setup
order, shares common dependencies, and tears everything down in reverse.

Usage:
    fixturekit order <module:registry> <name>...   # Show setup order
    fixturekit check <module:registry>             # Validate a registry
    fixturekit run <module:registry> <name>...     # One setup/teardown cycle
"""

from fixturekit.config import FixturesConfig, FixturesConfigLoader
from fixturekit.fixtures import (
    AlreadyInitializedError,
    CircularDependencyError,
    DuplicateFixtureError,
    FixtureDefinition,
    FixtureError,
    FixtureRegistry,
    FixtureResult,
    Fixtures,
    MissingFixtureError,
    NotInitializedError,
    create_fixtures,
    define_fixture,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AlreadyInitializedError",
    "CircularDependencyError",
    "DuplicateFixtureError",
    "FixtureDefinition",
    "FixtureError",
    "FixtureRegistry",
    "FixtureResult",
    "Fixtures",
    "FixturesConfig",
    "FixturesConfigLoader",
    "MissingFixtureError",
    "NotInitializedError",
    "create_fixtures",
    "define_fixture",
]
