"""Ordered registry of provider lookups.

A provider lookup is a callable ``(name, params, options)`` returning a
producer for the named dependency, or a falsy value if it cannot provide it.
Lookups are tried in registration order and the first producer wins. The
registry always starts with a default lookup that cannot be removed.
"""

import logging
from typing import Optional

from unitlogic.domain import Producer, ProviderLookup
from unitlogic.errors import LogicError

__all__ = ["ProviderRegistry", "exact_name_lookup"]

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry of provider lookups, with a fixed default lookup first."""

    def __init__(self, default_lookup: ProviderLookup):
        self._default_lookup = default_lookup
        self._lookups: list[ProviderLookup] = []

    def register(self, lookup: ProviderLookup):
        """Append a provider lookup.

        Args:
            lookup: Callable ``(name, params, options)`` returning a producer or a falsy value.

        Raises:
            LogicError: If ``lookup`` is not callable.
        """
        if not callable(lookup):
            raise LogicError(f"Provider lookup {lookup!r} is not callable")
        self._lookups.append(lookup)
        logger.debug("Registered provider lookup %r", lookup)

    def registered_providers(self) -> list[ProviderLookup]:
        """Retrieve the registered lookups, excluding the default one, in registration order."""
        return list(self._lookups)

    def resolve(self, name: str, params: dict, options: dict) -> Optional[Producer]:
        """Find the producer for a dependency.

        Returns:
            The first callable yielded by a lookup, or None if no lookup yields one.
        """
        for lookup in [self._default_lookup, *self._lookups]:
            producer = lookup(name, params, options)
            if callable(producer):
                return producer
        return None

    def reset(self):
        """Drop every registered lookup except the default one."""
        self._lookups.clear()


def exact_name_lookup(dependency_name: str, producer: Producer) -> ProviderLookup:
    """Build a lookup that yields ``producer`` for ``dependency_name`` only.

    Example:
        >>> registry.register(exact_name_lookup("user", fetch_user))
    """

    def lookup(name: str, params: dict, options: dict) -> Optional[Producer]:
        return producer if name == dependency_name else None

    lookup.__qualname__ = f"exact_name_lookup({dependency_name!r})"
    return lookup
