"""Domain models used throughout the engine."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

__all__ = [
    "Handler",
    "Finalize",
    "Producer",
    "ProviderLookup",
    "identity_finalize",
    "UnitDefinition",
    "Event",
    "HandlerOutcome",
    "UnitState",
]


Handler = Callable[["Event"], Any]
"""Intercepts the resolution of one dependency name of a unit."""

Finalize = Callable[[list, dict, dict], Any]
"""Combines ``(results, params, options)`` into the unit's own result.

A finalize that also declares a ``unit`` parameter is passed the
:class:`UnitDefinition` as ``unit=``.
"""

Producer = Callable[[str, dict, dict], Any]
"""Produces the value (or an awaitable of it) for ``(name, params, options)``."""

ProviderLookup = Callable[[str, dict, dict], Optional[Producer]]
"""Returns a producer for ``(name, params, options)``, or a falsy value."""


def identity_finalize(results: list, params: dict, options: dict) -> list:
    return results


@dataclass(frozen=True)
class UnitDefinition:
    """Immutable template of a unit, stored in the unit registry.

    Attributes:
        name: Unique key of the unit.
        dependency_groups: Ordered groups of dependency names. Groups are resolved
            one after the other; the names within a group are resolved concurrently.
        handlers: Read-only mapping from dependency name to the handler
            intercepting its resolution.
        finalize: Callback turning ``(results, params, options)`` into the unit's result.
        metadata: Extra fields supplied when the unit was defined. Handlers reach
            them through ``event.unit``; a finalize callback declaring a ``unit``
            parameter receives the definition as that keyword argument.

    Example:
        >>> UnitDefinition("report", (("user",), ("orders", "prefs")))
        >>> # resolves "user", then "orders" and "prefs" at once
    """

    name: str
    dependency_groups: tuple[tuple[str, ...], ...] = ()
    handlers: Mapping[str, Handler] = field(default_factory=lambda: MappingProxyType({}))
    finalize: Finalize = identity_finalize
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


class Event:
    """Mutable carrier handed to a unit's handler for one dependency name.

    A handler may reassign or mutate ``params``, ``options`` and ``results``; the
    engine reads them back after the handler returns. Calling
    :meth:`prevent_default` stops the provider from being invoked, and the
    handler's return value becomes the dependency's value instead. ``unit`` is
    the definition of the unit being resolved, giving access to its ``metadata``.
    """

    def __init__(
        self,
        name: str,
        results: list,
        params: dict,
        options: dict,
        unit: Optional["UnitDefinition"] = None,
    ):
        self.name = name
        self.unit = unit
        self.results = results
        self.params = params
        self.options = options
        self._default_prevented = False

    @property
    def default_prevented(self) -> bool:
        return self._default_prevented

    def prevent_default(self) -> None:
        self._default_prevented = True

    def __repr__(self):
        return f"Event(name={self.name!r}, default_prevented={self._default_prevented})"


@dataclass(frozen=True)
class HandlerOutcome:
    """What remains of an :class:`Event` once its handler has returned.

    Attributes:
        proceed: False if the handler prevented the default resolution.
        params: The params reference to use from this point on.
        options: The options reference to use from this point on.
        results: The results reference to use from this point on.
        override: The handler's return value; the dependency's value when
            ``proceed`` is False.
    """

    proceed: bool
    params: dict
    options: dict
    results: list
    override: Any = None

    @staticmethod
    def from_event(event: Event, reply: Any) -> "HandlerOutcome":
        return HandlerOutcome(
            not event.default_prevented,
            event.params,
            event.options,
            event.results,
            reply,
        )


class UnitState(Enum):
    """Lifecycle of a single unit invocation."""

    CREATED = "created"
    RESOLVING = "resolving"
    FINALIZING = "finalizing"
    SETTLED = "settled"
