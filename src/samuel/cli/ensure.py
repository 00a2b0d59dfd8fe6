"""CLI error handling for precondition checks.

Each method either returns a narrowed value or prints an error and exits
with code 1.
"""

from collections.abc import Callable
from typing import NoReturn, TypeVar

from samuel.cli.output import format_error, user_output
from samuel.core.errors import ComponentNotFoundError, SamuelError
from samuel.core.models import Component, canonical_type
from samuel.core.project_config import ProjectConfig
from samuel.core.registry import Registry
from samuel.core.tracker import InstalledStateTracker

T = TypeVar("T")


class Ensure:
    """Helper class for precondition checks that exit with user-friendly errors."""

    @staticmethod
    def fail(message: str) -> NoReturn:
        user_output(format_error(message))
        raise SystemExit(1)

    @staticmethod
    def invariant(condition: bool, message: str) -> None:
        if not condition:
            Ensure.fail(message)

    @staticmethod
    def succeeds(operation: Callable[[], T]) -> T:
        """Run an engine operation, turning SamuelError into an error exit.

        Example:
            >>> config = Ensure.succeeds(tracker.require)
        """
        try:
            return operation()
        except SamuelError as e:
            user_output(format_error(str(e)))
            raise SystemExit(1) from e

    @staticmethod
    def component(registry: Registry, type_or_alias: str, name: str) -> Component:
        """Resolve a component, exiting if the type or name is unknown."""
        if canonical_type(type_or_alias) is None:
            Ensure.fail(
                f"Unknown component type '{type_or_alias}' "
                "(expected language, framework, workflow or an alias)"
            )
        component = registry.resolve(type_or_alias, name)
        if component is None:
            Ensure.fail(str(ComponentNotFoundError(type_or_alias, name)))
        return component

    @staticmethod
    def initialized(tracker: InstalledStateTracker) -> ProjectConfig:
        return Ensure.succeeds(tracker.require)
