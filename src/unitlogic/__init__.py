"""Asynchronous dependency resolution for named units.

A unit declares an ordered list of dependency groups. Invoking the unit
resolves the groups one after the other, the dependencies inside a group
concurrently, and passes the collected values to the unit's finalize
callback. Dependencies are provided either by other units or by producers
found through registered provider lookups.

Key Features:
    - Groups resolved sequentially, names within a group concurrently
    - Results always in declaration order, whatever the completion order
    - Per-dependency handlers that can replace params/options or the value itself
    - Pluggable, ordered provider lookups
    - Missing units and providers detected before any work starts

Basic Usage:
    >>> import unitlogic
    >>>
    >>> @unitlogic.provides("price")
    >>> async def fetch_price(name, params, options):
    ...     return 10
    >>>
    >>> unitlogic.define("order", ["price"], finalize=lambda results, params, options: results[0] * params["qty"])
    >>> await unitlogic.invoke("order", {"qty": 3})  # 30

The package consists of several modules:
    - api: Functions bound to the process-wide default engine
    - engine: The LogicEngine tying registries and resolution together
    - unit_registry / provider_registry: Unit definitions and provider lookups
    - unit_instance / group_executor / pipeline: Resolution of a single run
    - domain: Core domain models (UnitDefinition, Event, HandlerOutcome)
    - errors: Engine-specific exceptions
"""

from unitlogic.api import (
    default_engine,
    define,
    defines,
    invoke,
    provides,
    register_provider,
    report_fatal_error,
    reset,
)
from unitlogic.domain import Event, UnitDefinition, UnitState
from unitlogic.engine import LogicEngine
from unitlogic.errors import (
    DefinitionError,
    LogicError,
    ProducerRejection,
    UndefinedUnitError,
    UnresolvedDependencyError,
)

__all__ = [
    "default_engine",
    "define",
    "defines",
    "invoke",
    "provides",
    "register_provider",
    "report_fatal_error",
    "reset",
    "Event",
    "UnitDefinition",
    "UnitState",
    "LogicEngine",
    "DefinitionError",
    "LogicError",
    "ProducerRejection",
    "UndefinedUnitError",
    "UnresolvedDependencyError",
]
