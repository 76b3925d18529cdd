"""The resolution engine: unit and provider registries plus the invocation entry point.

Invoking a unit creates a fresh instance of it, looks up a producer for every
declared dependency, resolves the dependency groups one after another and
finally hands the collected values to the unit's finalize callback.

Example:
    >>> engine = LogicEngine()
    >>>
    >>> @engine.provides("user")
    >>> async def fetch_user(name, params, options):
    ...     return await users.get(params["user_id"])
    >>>
    >>> engine.define("greeting", ["user"], finalize=lambda results, params, options: f"Hi {results[0].name}")
    >>> await engine.invoke("greeting", {"user_id": 7})
"""

import inspect
import logging
from typing import Any, Callable, Coroutine, Iterable, Mapping, NoReturn, Optional

from unitlogic.domain import Finalize, Handler, Producer, ProviderLookup, UnitDefinition
from unitlogic.errors import LogicError, UndefinedUnitError, UnresolvedDependencyError
from unitlogic.pipeline import ResolutionPipeline, build_pipeline
from unitlogic.provider_registry import ProviderRegistry, exact_name_lookup
from unitlogic.unit_instance import UnitInstance
from unitlogic.unit_registry import DependencySpec, UnitRegistry

__all__ = ["LogicEngine", "inferred_name"]

logger = logging.getLogger(__name__)


class LogicEngine:
    """Owns a unit registry and a provider registry and runs units against them.

    The provider registry always starts with a lookup that provides every
    defined unit, so units can depend on other units alongside externally
    registered producers.

    Args:
        units: Unit registry to use; a new empty one by default.
        lookups: Provider lookups to register up front, in order.
    """

    def __init__(self, units: Optional[UnitRegistry] = None, lookups: Iterable[ProviderLookup] = ()):
        self.units = units if units is not None else UnitRegistry()
        self.providers = ProviderRegistry(self._unit_lookup)
        for lookup in lookups:
            self.providers.register(lookup)

    def invoke(
        self, name: str, params: Optional[dict] = None, options: Optional[dict] = None
    ) -> Coroutine[Any, Any, Any]:
        """Run the named unit.

        The unit instance is created and every dependency's producer looked up
        before this method returns, so those failures are raised immediately.
        The returned coroutine resolves the dependency groups and returns the
        unit's finalized value.

        Args:
            name: Name of the unit to run.
            params: Caller params; a new empty dict if omitted.
            options: Caller options; a new empty dict if omitted.

        Raises:
            UndefinedUnitError: If no unit of that name is defined.
            UnresolvedDependencyError: If a declared dependency has no provider.
        """
        params = {} if params is None else params
        options = {} if options is None else options
        return self.start(self.create(name), params, options)

    def create(self, name: str) -> UnitInstance:
        if name not in self.units:
            self.report_fatal_error(f"Logic {name} not defined", UndefinedUnitError, unit_name=name)
        return self.units.create(name)

    def start(self, instance: UnitInstance, params: dict, options: dict) -> Coroutine[Any, Any, Any]:
        """Prepare the pipeline of an instance and return the coroutine running it."""
        pipeline = build_pipeline(instance, self.resolve_provider, params, options)
        return self._run(instance, pipeline, params, options)

    def resolve_provider(self, name: str, params: dict, options: dict) -> Producer:
        producer = self.providers.resolve(name, params, options)
        if producer is None:
            self.report_fatal_error(
                f"No provider found for {name}", UnresolvedDependencyError, dependency_name=name
            )
        return producer

    def define(
        self,
        name: str,
        dependencies: DependencySpec = (),
        handlers: Optional[Mapping[str, Handler]] = None,
        finalize: Optional[Finalize] = None,
        **metadata: Any,
    ) -> UnitDefinition:
        """Define (or redefine) a unit. See :meth:`UnitRegistry.define`."""
        return self.units.define(name, dependencies, handlers, finalize, **metadata)

    def register_provider(self, lookup: ProviderLookup):
        """Append a provider lookup, tried after the ones already registered."""
        self.providers.register(lookup)

    def provides(self, name: Optional[str] = None) -> Callable[[Producer], Producer]:
        """Decorator registering a function as the producer of one dependency name.

        Args:
            name: The dependency name; defaults to the function name with any
                ``make_`` prefix removed.

        Example:
            @engine.provides()
            async def make_user(name, params, options):
                return {"id": params["user_id"]}
        """

        def decorator(producer: Producer) -> Producer:
            self.register_provider(exact_name_lookup(name or inferred_name(producer), producer))
            return producer

        return decorator

    def defines(
        self,
        name: Optional[str] = None,
        dependencies: DependencySpec = (),
        handlers: Optional[Mapping[str, Handler]] = None,
        **metadata: Any,
    ) -> Callable[[Finalize], Finalize]:
        """Decorator defining a unit whose finalize callback is the decorated function.

        Example:
            @engine.defines("total", ["prices", "quantities"])
            def total(results, params, options):
                prices, quantities = results
                return sum(p * q for p, q in zip(prices, quantities))
        """

        def decorator(finalize: Finalize) -> Finalize:
            self.define(name or inferred_name(finalize), dependencies, handlers, finalize, **metadata)
            return finalize

        return decorator

    def report_fatal_error(self, message: str, error_type: type = LogicError, **details: Any) -> NoReturn:
        """Raise an unrecoverable engine error.

        Every undefined-unit and unresolved-provider condition goes through this
        method, so it can be replaced to observe them.
        """
        logger.error(message)
        raise error_type(message, **details)

    def reset(self):
        """Forget every defined unit and every registered provider lookup."""
        self.units.reset()
        self.providers.reset()

    def _unit_lookup(self, name: str, params: dict, options: dict) -> Optional[Producer]:
        return self.invoke if name in self.units else None

    async def _run(self, instance: UnitInstance, pipeline: ResolutionPipeline, params: dict, options: dict) -> Any:
        try:
            resolution = await pipeline.run(params, options)
            instance.begin_finalize()
            value = instance.finalize(resolution.results, resolution.params, resolution.options)
            if inspect.isawaitable(value):
                value = await value
        except BaseException as exc:
            instance.settle(False)
            logger.warning("Unit %r failed: %r", instance.name, exc)
            raise
        instance.settle(True)
        return value


def inferred_name(target: Any) -> str:
    """Derive a name from a function name, removing a ``make_`` prefix if present.

    Example:
        >>> inferred_name(make_user)  # Returns "user"
        >>> inferred_name(total)      # Returns "total"
    """
    if target.__name__.startswith("make_"):
        return target.__name__[5:]
    return target.__name__
