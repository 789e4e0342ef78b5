"""
Exceptions raised by the fixture system.

Structural errors (missing names, cycles) are raised before any fixture is
set up. Errors raised by user setup or cleanup routines are never wrapped in
these types; they propagate unchanged.
"""


class FixtureError(Exception):
    """Base class for all fixturekit errors."""


class MissingFixtureError(FixtureError, KeyError):
    """Raised when a requested or declared fixture name is not registered."""

    def __init__(self, name: str, dependent: str | None = None) -> None:
        self.name = name
        self.dependent = dependent
        if dependent is None:
            message = f"Fixture '{name}' not found in registry"
        else:
            message = f"Fixture '{name}' (required by '{dependent}') not found in registry"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0])


class CircularDependencyError(FixtureError, ValueError):
    """Raised when a dependency chain revisits a fixture still being expanded."""

    def __init__(self, node: str, cycle: list[str] | None = None) -> None:
        self.node = node
        self.cycle = cycle or [node, node]
        cycle_str = " -> ".join(self.cycle)
        super().__init__(f"Circular dependency detected at '{node}': {cycle_str}")


class DuplicateFixtureError(FixtureError, ValueError):
    """Raised when attempting to register a fixture with an existing name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Fixture '{name}' is already registered")


class NotInitializedError(FixtureError, RuntimeError):
    """Raised when fixture values are read without a successful setup."""

    def __init__(self) -> None:
        super().__init__("Fixtures not initialized: call setup() first")


class AlreadyInitializedError(FixtureError, RuntimeError):
    """Raised when setup() is called again before teardown()."""

    def __init__(self) -> None:
        super().__init__("Fixtures already initialized: call teardown() before setup()")
