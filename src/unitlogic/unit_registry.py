"""Registration and lookup of unit definitions."""

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

from unitlogic.domain import Finalize, Handler, UnitDefinition, identity_finalize
from unitlogic.errors import DefinitionError, UndefinedUnitError
from unitlogic.unit_instance import UnitInstance

__all__ = ["DependencySpec", "UnitRegistry", "normalise_dependencies"]

logger = logging.getLogger(__name__)


DependencySpec = Iterable[Union[str, Iterable[str]]]
"""Declared dependencies of a unit.

Each entry is either a single dependency name or a group of names to be
resolved at once.

Example:
    >>> ["l-1", "l-2", "l-3"]          # l-1, then l-2, then l-3
    >>> ["l-1", ["l-2", "l-3"], "l-4"]  # l-1, then l-2 and l-3 at once, then l-4
"""


class UnitRegistry:
    """Registry of unit definitions, keyed by unit name.

    Definitions are immutable once stored. Defining a name again replaces the
    stored definition; instances already created keep the definition they were
    created from.
    """

    def __init__(self):
        self._definitions: dict[str, UnitDefinition] = {}

    def define(
        self,
        name: str,
        dependencies: DependencySpec = (),
        handlers: Optional[Mapping[str, Handler]] = None,
        finalize: Optional[Finalize] = None,
        **metadata: Any,
    ) -> UnitDefinition:
        """Build and store a unit definition.

        Args:
            name: Unique name of the unit.
            dependencies: Declared dependency names and groups, see :data:`DependencySpec`.
            handlers: Optional mapping from dependency name to its handler.
            finalize: Optional callback combining the resolved values; defaults to
                returning the results unchanged.
            **metadata: Extra fields kept on the definition.

        Returns:
            The stored :class:`UnitDefinition`.

        Raises:
            DefinitionError: If the dependencies, handlers or finalize are malformed.
        """
        if not isinstance(name, str) or not name:
            raise DefinitionError(f"Unit name must be a non-empty string, got {name!r}")

        handlers = dict(handlers or {})
        for dependency_name, handler in handlers.items():
            if not callable(handler):
                raise DefinitionError(
                    f"Handler for '{dependency_name}' on unit '{name}' is not callable"
                )

        if finalize is not None and not callable(finalize):
            raise DefinitionError(f"Finalize of unit '{name}' is not callable")

        definition = UnitDefinition(
            name,
            normalise_dependencies(name, dependencies),
            MappingProxyType(handlers),
            finalize or identity_finalize,
            MappingProxyType(dict(metadata)),
        )
        if name in self._definitions:
            logger.debug("Redefining unit %r", name)
        self._definitions[name] = definition
        logger.debug("Defined unit %r with groups %s", name, definition.dependency_groups)
        return definition

    def create(self, name: str) -> UnitInstance:
        """Return a fresh instance of the named unit.

        Raises:
            UndefinedUnitError: If no unit of that name has been defined.
        """
        definition = self._definitions.get(name)
        if definition is None:
            raise UndefinedUnitError(f"Logic {name} not defined", name)
        return UnitInstance(definition)

    def defined_units(self) -> list[str]:
        return list(self._definitions)

    def reset(self):
        self._definitions.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._definitions


def normalise_dependencies(unit_name: str, dependencies: DependencySpec) -> tuple[tuple[str, ...], ...]:
    """Turn declared dependencies into a tuple of groups.

    A bare name becomes a group of one.

    Raises:
        DefinitionError: If an entry is neither a name nor a collection of names.
    """
    if isinstance(dependencies, str):
        raise DefinitionError(
            f"Dependencies of unit '{unit_name}' must be a list, not the string {dependencies!r}"
        )

    groups = []
    for entry in dependencies:
        group = (entry,) if isinstance(entry, str) else tuple(_group_names(unit_name, entry))
        groups.append(group)
    return tuple(groups)


def _group_names(unit_name: str, entry: Any) -> Iterable[str]:
    try:
        names = list(entry)
    except TypeError:
        raise DefinitionError(
            f"Dependency entry {entry!r} of unit '{unit_name}' is neither a name nor a group"
        ) from None

    for name in names:
        if not isinstance(name, str):
            raise DefinitionError(
                f"Dependency group {entry!r} of unit '{unit_name}' contains non-string {name!r}"
            )
    return names
