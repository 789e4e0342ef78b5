"""
Pydantic models for fixture definitions.

A fixture is declared as a list of dependency names plus an async setup
routine. The setup routine receives the resolved values of its dependencies
and returns a FixtureResult holding the produced value and the async cleanup
that releases it.

Example:
    >>> db = define_fixture([], open_database)
    >>> @define_fixture(["db"])
    ... async def client(deps):
    ...     return FixtureResult(value=Client(deps["db"]))
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, overload

from pydantic import BaseModel, ConfigDict, Field, field_validator

Cleanup = Callable[[], Awaitable[None]]


async def _noop_cleanup() -> None:
    return None


class FixtureResult(BaseModel):
    """Value produced by a fixture's setup together with its cleanup.

    The cleanup defaults to a no-op for fixtures that hold no resource.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: Any = Field(
        ...,
        description="The produced resource (opaque to the orchestrator)",
    )
    cleanup: Cleanup = Field(
        default=_noop_cleanup,
        description="Zero-argument async callable releasing the resource",
    )


SetupFunction = Callable[[Mapping[str, Any]], Awaitable[FixtureResult]]


class FixtureDefinition(BaseModel):
    """Immutable description of one fixture: what it needs and how to build it.

    The registry key provides the fixture's name, so the definition itself is
    anonymous and may be registered under any name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dependencies: tuple[str, ...] = Field(
        default=(),
        description="Names of the fixtures this fixture depends on",
    )
    setup: SetupFunction = Field(
        ...,
        description="Async callable producing a FixtureResult from resolved dependencies",
    )
    description: str = Field(
        default="",
        description="Human-readable description of the fixture's purpose",
    )

    @field_validator("dependencies")
    @classmethod
    def dependencies_no_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate that dependency names are not empty."""
        for dep in v:
            if not dep.strip():
                raise ValueError("Dependency names must not be empty")
        return v


@overload
def define_fixture(
    dependencies: Sequence[str],
    setup: SetupFunction,
    *,
    description: str = "",
) -> FixtureDefinition: ...


@overload
def define_fixture(
    dependencies: Sequence[str],
    setup: None = None,
    *,
    description: str = "",
) -> Callable[[SetupFunction], FixtureDefinition]: ...


def define_fixture(
    dependencies: Sequence[str],
    setup: SetupFunction | None = None,
    *,
    description: str = "",
) -> FixtureDefinition | Callable[[SetupFunction], FixtureDefinition]:
    """Build a FixtureDefinition with minimal boilerplate.

    Usable as a plain call or, when ``setup`` is omitted, as a decorator.

    Args:
        dependencies: Names of the fixtures the setup routine needs.
        setup: Async callable receiving the dependency values.
        description: Optional description shown by the CLI.

    Returns:
        A FixtureDefinition, or a decorator producing one.
    """

    def build(func: SetupFunction) -> FixtureDefinition:
        return FixtureDefinition(
            dependencies=dependencies,
            setup=func,
            description=description,
        )

    if setup is None:
        return build
    return build(setup)
