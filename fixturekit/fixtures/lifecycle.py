"""
Fixture lifecycle orchestration.

A Fixtures instance owns one setup/teardown cycle for a fixed request over a
fixed registry. setup() resolves the dependency graph, runs every fixture's
setup strictly in dependency order and records the cleanups; teardown()
runs those cleanups in reverse. A failed setup rolls back whatever was
already created before re-raising the original error.

Example:
    >>> fixtures = create_fixtures(registry, ["client", "db"])
    >>> await fixtures.setup()
    >>> client = fixtures.get()["client"]
    >>> await fixtures.teardown()

or, equivalently:

    >>> async with create_fixtures(registry, ["client"]) as values:
    ...     values["client"].ping()
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType, TracebackType
from typing import Any

from fixturekit.config import FixturesConfig
from fixturekit.fixtures.errors import AlreadyInitializedError, NotInitializedError
from fixturekit.fixtures.graph import build_dependency_graph, get_fixture, sort_fixtures
from fixturekit.fixtures.models import Cleanup, FixtureDefinition, FixtureResult

logger = logging.getLogger(__name__)


@dataclass
class InstanceState:
    """Live state of one setup/teardown cycle.

    ``values`` is None while uninitialized. ``cleanups[i]`` belongs to
    ``order[i]`` and was appended right after that fixture's setup succeeded.
    """

    values: dict[str, Any] | None = None
    cleanups: list[Cleanup] = field(default_factory=list)
    order: list[str] = field(default_factory=list)

    @property
    def is_initialized(self) -> bool:
        return self.values is not None

    def clear(self) -> None:
        self.values = None
        self.cleanups = []
        self.order = []


class Fixtures:
    """Sets up and tears down a requested set of fixtures and their dependencies.

    Not safe for concurrent use: setup(), get() and teardown() must be called
    in that order by a single caller. Separate instances share no state.
    """

    def __init__(
        self,
        registry: Mapping[str, FixtureDefinition],
        requested: Iterable[str],
        config: FixturesConfig | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Names are validated lazily, when setup() builds the dependency graph.

        Args:
            registry: Mapping from fixture name to definition
            requested: Fixture names whose values get() should return
            config: Behavioural switches (defaults when omitted)
        """
        self.registry = registry
        self.requested: tuple[str, ...] = tuple(dict.fromkeys(requested))
        self.config = config or FixturesConfig()
        self._state = InstanceState()

    @property
    def is_initialized(self) -> bool:
        """Whether a successful setup() is currently live."""
        return self._state.is_initialized

    @property
    def setup_order(self) -> tuple[str, ...]:
        """Fixture names in the order they were set up during the live pass."""
        return tuple(self._state.order)

    async def setup(self) -> None:
        """Set up every requested fixture and its transitive dependencies.

        Raises:
            AlreadyInitializedError: If strict_setup is on and fixtures are live.
            MissingFixtureError: If a name is not registered (nothing is set up).
            CircularDependencyError: If the dependencies form a cycle (nothing is set up).
            Exception: Whatever a fixture's setup raised, after rollback.
        """
        if self._state.is_initialized:
            if self.config.strict_setup:
                raise AlreadyInitializedError()
            logger.warning(
                "setup() called while %d fixture(s) are live; their cleanups are discarded",
                len(self._state.cleanups),
            )

        graph = build_dependency_graph(self.requested, self.registry)
        order = sort_fixtures(graph.nodes, graph.edges)
        logger.debug("Fixture setup order: %s", ", ".join(order))

        self._state.clear()
        values: dict[str, Any] = {}

        try:
            for name in order:
                await self._setup_one(name, values)
        except BaseException:
            # cancellation also rolls back
            await self._rollback()
            raise

        self._state.values = values

    async def _setup_one(self, name: str, values: dict[str, Any]) -> None:
        definition = get_fixture(self.registry, name)
        deps = MappingProxyType({dep: values[dep] for dep in definition.dependencies})

        logger.debug("Setting up fixture '%s'", name)
        try:
            result = await definition.setup(deps)
            if not isinstance(result, FixtureResult):
                raise TypeError(
                    f"Fixture '{name}' setup must return FixtureResult, "
                    f"got {type(result).__name__}"
                )
        except Exception as e:
            e.add_note(f"while setting up fixture '{name}'")
            raise

        self._state.cleanups.append(result.cleanup)
        self._state.order.append(name)
        values[name] = result.value

    async def _rollback(self) -> None:
        """Release fixtures created by a failed setup, newest first.

        Cleanup errors, cancellation included, are logged and suppressed so
        the rollback always completes; the caller only sees the error that
        triggered it.
        """
        try:
            for name, cleanup in zip(
                reversed(self._state.order), reversed(self._state.cleanups), strict=True
            ):
                try:
                    await cleanup()
                except BaseException:
                    logger.warning(
                        "Ignoring cleanup error for fixture '%s' during rollback",
                        name,
                        exc_info=True,
                    )
        finally:
            self._state.clear()

    async def teardown(self) -> None:
        """Run every pending cleanup in reverse setup order.

        All cleanups are attempted even if some fail. State is cleared in any
        case. Calling teardown() with nothing pending is a no-op.

        Raises:
            BaseException: The first cancellation or other non-Exception
                interrupt raised by a cleanup, once every cleanup has run.
            Exception: The first cleanup error encountered, unless
                suppress_teardown_errors is set.
        """
        first_error: Exception | None = None
        interrupt: BaseException | None = None

        try:
            for name, cleanup in zip(
                reversed(self._state.order), reversed(self._state.cleanups), strict=True
            ):
                logger.debug("Cleaning up fixture '%s'", name)
                try:
                    await cleanup()
                except Exception as e:
                    if self.config.suppress_teardown_errors:
                        logger.warning(
                            "Ignoring cleanup error for fixture '%s'", name, exc_info=True
                        )
                        continue
                    if first_error is None:
                        e.add_note(f"while cleaning up fixture '{name}'")
                        first_error = e
                    else:
                        logger.warning(
                            "Additional cleanup error for fixture '%s'", name, exc_info=True
                        )
                except BaseException as e:
                    # never suppressed; remaining cleanups still run
                    if interrupt is None:
                        e.add_note(f"while cleaning up fixture '{name}'")
                        interrupt = e
                    else:
                        logger.warning(
                            "Additional cleanup interrupt for fixture '%s'", name, exc_info=True
                        )
        finally:
            self._state.clear()

        if interrupt is not None:
            if first_error is not None:
                logger.warning(
                    "Cleanup error superseded by %s",
                    type(interrupt).__name__,
                    exc_info=first_error,
                )
            raise interrupt
        if first_error is not None:
            raise first_error

    def get(self) -> dict[str, Any]:
        """Return the values of the requested fixtures.

        Only the requested names are included, not their transitive
        dependencies.

        Raises:
            NotInitializedError: If no successful setup() is live.
        """
        values = self._state.values
        if values is None:
            raise NotInitializedError()
        return {name: values[name] for name in self.requested}

    async def __aenter__(self) -> dict[str, Any]:
        await self.setup()
        return self.get()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.teardown()

    def __repr__(self) -> str:
        state = "initialized" if self.is_initialized else "uninitialized"
        return f"Fixtures(requested={list(self.requested)}, {state})"


def create_fixtures(
    registry: Mapping[str, FixtureDefinition],
    requested: Iterable[str],
    config: FixturesConfig | None = None,
) -> Fixtures:
    """Create an orchestrator for the requested fixtures.

    Args:
        registry: Mapping from fixture name to definition
        requested: Fixture names the test needs
        config: Optional behavioural switches

    Returns:
        A Fixtures instance exposing setup(), teardown() and get()
    """
    return Fixtures(registry, requested, config)
