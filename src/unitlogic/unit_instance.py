"""Per-invocation state of a unit.

A :class:`UnitInstance` is created for every invocation and discarded once
the invocation settles. It only references the immutable fields of its
:class:`~unitlogic.domain.UnitDefinition`; everything that changes during a
run lives on the instance, so concurrent runs of the same unit never observe
each other.
"""

import inspect
import logging
from typing import Any, Callable, Optional

from unitlogic.domain import Event, HandlerOutcome, UnitDefinition, UnitState
from unitlogic.errors import DefinitionError

__all__ = ["UnitInstance"]

logger = logging.getLogger(__name__)


class UnitInstance:
    """Run state of one invocation of a unit.

    Attributes:
        definition: The definition this instance was created from.
        state: Current :class:`UnitState` of the invocation.
        group_index: Index of the group being resolved, or None outside ``RESOLVING``.
        succeeded: Outcome once ``SETTLED``; None before that.
    """

    def __init__(self, definition: UnitDefinition):
        self.definition = definition
        self.state = UnitState.CREATED
        self.group_index: Optional[int] = None
        self.succeeded: Optional[bool] = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def dependency_groups(self) -> tuple[tuple[str, ...], ...]:
        return self.definition.dependency_groups

    def has_handler(self, dependency_name: str) -> bool:
        return dependency_name in self.definition.handlers

    def intercept(
        self, dependency_name: str, results: list, params: dict, options: dict
    ) -> Optional[HandlerOutcome]:
        """Run the unit's handler for a dependency, if it has one.

        Returns:
            The :class:`HandlerOutcome` of the handler, or None when the unit
            does not handle this dependency.
        """
        if not self.has_handler(dependency_name):
            return None

        event = Event(dependency_name, results, params, options, self.definition)
        reply = self.definition.handlers[dependency_name](event)
        outcome = HandlerOutcome.from_event(event, reply)
        if outcome.proceed and inspect.isawaitable(reply):
            if inspect.iscoroutine(reply):
                reply.close()
            raise DefinitionError(
                f"Handler for '{dependency_name}' on unit '{self.name}' returned an awaitable "
                "without preventing default; handlers must run synchronously"
            )
        if not outcome.proceed:
            logger.debug("Unit %r prevented default resolution of %r", self.name, dependency_name)
        return outcome

    def finalize(self, results: list, params: dict, options: dict) -> Any:
        """Call the definition's finalize, passing the definition as ``unit`` if it asks for it."""
        finalize = self.definition.finalize
        if _accepts_unit(finalize):
            return finalize(results, params, options, unit=self.definition)
        return finalize(results, params, options)

    def begin_group(self, index: int):
        self._transition(UnitState.RESOLVING)
        self.group_index = index
        logger.debug(
            "Unit %r resolving group %d: %s", self.name, index, self.dependency_groups[index]
        )

    def begin_finalize(self):
        self._transition(UnitState.FINALIZING)
        self.group_index = None

    def settle(self, succeeded: bool):
        self._transition(UnitState.SETTLED)
        self.succeeded = succeeded

    def _transition(self, state: UnitState):
        logger.debug("Unit %r: %s -> %s", self.name, self.state.value, state.value)
        self.state = state

    def __repr__(self):
        return f"UnitInstance(name={self.name!r}, state={self.state.value})"


def _accepts_unit(func: Callable) -> bool:
    try:
        parameters = inspect.signature(func).parameters
    except (TypeError, ValueError):
        return False
    return "unit" in parameters
