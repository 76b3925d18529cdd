"""High level entry points bound to the process-wide default engine."""

from typing import Any, Coroutine, Mapping, NoReturn, Optional

from unitlogic.domain import Finalize, Handler, ProviderLookup, UnitDefinition
from unitlogic.engine import LogicEngine
from unitlogic.errors import LogicError
from unitlogic.unit_registry import DependencySpec

__all__ = [
    "default_engine",
    "invoke",
    "define",
    "register_provider",
    "provides",
    "defines",
    "report_fatal_error",
    "reset",
]


default_engine = LogicEngine()
"""Engine whose registries live for the whole process, until :func:`reset`."""


def invoke(name: str, params: Optional[dict] = None, options: Optional[dict] = None) -> Coroutine[Any, Any, Any]:
    """Run a unit of the default engine. See :meth:`LogicEngine.invoke`."""
    return default_engine.invoke(name, params, options)


def define(
    name: str,
    dependencies: DependencySpec = (),
    handlers: Optional[Mapping[str, Handler]] = None,
    finalize: Optional[Finalize] = None,
    **metadata: Any,
) -> UnitDefinition:
    return default_engine.define(name, dependencies, handlers, finalize, **metadata)


def register_provider(lookup: ProviderLookup):
    default_engine.register_provider(lookup)


def provides(name: Optional[str] = None):
    return default_engine.provides(name)


def defines(name: Optional[str] = None, dependencies: DependencySpec = (), handlers=None, **metadata: Any):
    return default_engine.defines(name, dependencies, handlers, **metadata)


def report_fatal_error(message: str, error_type: type = LogicError, **details: Any) -> NoReturn:
    default_engine.report_fatal_error(message, error_type, **details)


def reset():
    """Clear the default engine's units and provider lookups; meant for test isolation."""
    default_engine.reset()
