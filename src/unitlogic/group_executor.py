"""Concurrent resolution of a single dependency group.

Every name of a group is dispatched in declaration order. A name the unit
handles goes through its handler first; the handler may replace params,
options and results for the names dispatched after it, or prevent the
producer from being invoked and supply the value itself. All dispatched
resolutions run concurrently and their values are appended to the results
in declaration order, whatever order they complete in.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Sequence

from unitlogic.domain import Producer
from unitlogic.errors import LogicError, ProducerRejection
from unitlogic.unit_instance import UnitInstance

__all__ = ["Resolution", "GroupExecutor"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """The results, params and options references carried from group to group."""

    results: list
    params: dict
    options: dict


class GroupExecutor:
    """Resolve one dependency group of a unit instance.

    Producers are looked up before the executor is built, so constructing an
    executor never starts any work.
    """

    def __init__(self, instance: UnitInstance, names: Sequence[str], producers: Sequence[Producer]):
        if len(names) != len(producers):
            raise ValueError("Every dependency name needs exactly one producer")
        self._instance = instance
        self.names = tuple(names)
        self._producers = tuple(producers)

    async def execute(self, resolution: Resolution) -> Resolution:
        """Resolve every name of the group and append their values to the results.

        Args:
            resolution: The references produced by the previous group.

        Returns:
            The results (extended with this group's values) and the params and
            options as last replaced by a handler.

        Raises:
            ProducerRejection: If a producer, or the awaitable returned by a
                preventing handler, fails.
        """
        results, params, options = resolution.results, resolution.params, resolution.options
        pending: list[asyncio.Future] = []

        try:
            for name, producer in zip(self.names, self._producers):
                outcome = self._instance.intercept(name, results, params, options)
                if outcome is not None:
                    if not outcome.proceed:
                        pending.append(_schedule(name, outcome.override))
                        continue
                    results, params, options = outcome.results, outcome.params, outcome.options

                pending.append(_schedule(name, _produce(producer, name, params, options)))
        except BaseException:
            for future in pending:
                future.cancel()
            raise

        logger.debug("Unit %r dispatched %s", self._instance.name, self.names)
        values = await asyncio.gather(*pending)
        results.extend(values)
        logger.debug("Unit %r resolved %s", self._instance.name, self.names)

        return Resolution(results, params, options)


def _produce(producer: Producer, name: str, params: dict, options: dict) -> Any:
    try:
        return producer(name, params, options)
    except LogicError:
        raise
    except Exception as exc:
        raise ProducerRejection(name, exc) from exc


def _schedule(name: str, value: Any) -> asyncio.Future:
    return asyncio.ensure_future(_settle(name, value))


async def _settle(name: str, value: Any) -> Any:
    if not inspect.isawaitable(value):
        return value
    try:
        return await value
    except LogicError:
        raise
    except Exception as exc:
        raise ProducerRejection(name, exc) from exc
