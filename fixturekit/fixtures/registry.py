"""
Central registry of fixture definitions.

The registry is a read-only Mapping from fixture name to FixtureDefinition
once populated, so it can be handed directly to create_fixtures(). A plain
dict works just as well; the registry adds duplicate detection, a
registration decorator and whole-registry validation.
"""

from collections.abc import Callable, Iterator, Mapping, Sequence

from fixturekit.fixtures.errors import (
    CircularDependencyError,
    DuplicateFixtureError,
    MissingFixtureError,
)
from fixturekit.fixtures.graph import resolve_order
from fixturekit.fixtures.models import FixtureDefinition, SetupFunction, define_fixture


class FixtureRegistry(Mapping[str, FixtureDefinition]):
    """Registry mapping fixture names to their definitions.

    Enforces name uniqueness. Does not resolve dependencies itself; see
    fixturekit.fixtures.graph and fixturekit.fixtures.lifecycle.

    Example:
        >>> registry = FixtureRegistry()
        >>> @registry.fixture("db")
        ... async def db(deps):
        ...     return FixtureResult(value=connect())
        >>> registry.register("client", define_fixture(["db"], make_client))
    """

    def __init__(self, fixtures: Mapping[str, FixtureDefinition] | None = None) -> None:
        self._fixtures: dict[str, FixtureDefinition] = {}
        for name, definition in (fixtures or {}).items():
            self.register(name, definition)

    def register(self, name: str, definition: FixtureDefinition) -> None:
        """Register a fixture definition under a name.

        Args:
            name: Unique fixture name.
            definition: The FixtureDefinition to register.

        Raises:
            ValueError: If the name is empty or whitespace-only.
            DuplicateFixtureError: If the name is already registered.
        """
        if not name.strip():
            raise ValueError("Fixture name must not be empty or whitespace-only")
        if name in self._fixtures:
            raise DuplicateFixtureError(name)
        self._fixtures[name] = definition

    def fixture(
        self,
        name: str,
        dependencies: Sequence[str] = (),
        description: str = "",
    ) -> Callable[[SetupFunction], SetupFunction]:
        """Decorator registering an async setup function as a fixture.

        The decorated function is returned unchanged.
        """

        def decorator(setup: SetupFunction) -> SetupFunction:
            self.register(name, define_fixture(dependencies, setup, description=description))
            return setup

        return decorator

    def has(self, name: str) -> bool:
        """Check if a fixture is registered."""
        return name in self._fixtures

    def list_all(self) -> list[FixtureDefinition]:
        """Return a copy of all registered definitions, in registration order."""
        return list(self._fixtures.values())

    def clear(self) -> None:
        """Remove all registered fixtures."""
        self._fixtures.clear()

    def validate(self) -> list[str]:
        """Validate that every fixture's dependencies exist and are acyclic.

        Collects problems rather than stopping at the first one. Cycles are
        only checked when no dependency is missing.

        Returns:
            List of validation error messages. Empty list if all valid.
        """
        errors: list[str] = []

        for fixture_name, definition in self._fixtures.items():
            for dep in definition.dependencies:
                if dep not in self._fixtures:
                    errors.append(
                        f"Fixture '{fixture_name}' depends on non-existent fixture '{dep}'"
                    )

        if not errors:
            seen_cycles: set[frozenset[str]] = set()
            for fixture_name in self._fixtures:
                try:
                    resolve_order([fixture_name], self)
                except CircularDependencyError as e:
                    key = frozenset(e.cycle)
                    if key not in seen_cycles:
                        seen_cycles.add(key)
                        errors.append(f"Circular dependency: {' -> '.join(e.cycle)}")

        return errors

    def __getitem__(self, name: str) -> FixtureDefinition:
        try:
            return self._fixtures[name]
        except KeyError:
            raise MissingFixtureError(name) from None

    def __len__(self) -> int:
        return len(self._fixtures)

    def __contains__(self, name: object) -> bool:
        return name in self._fixtures

    def __iter__(self) -> Iterator[str]:
        return iter(self._fixtures)

    def __repr__(self) -> str:
        return f"FixtureRegistry({len(self._fixtures)} fixtures)"
