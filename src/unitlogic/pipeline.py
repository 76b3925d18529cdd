"""Sequential resolution of all dependency groups of a unit instance."""

import logging
from typing import Callable

from unitlogic.domain import Producer
from unitlogic.group_executor import GroupExecutor, Resolution
from unitlogic.unit_instance import UnitInstance

__all__ = ["ResolutionPipeline", "build_pipeline"]

logger = logging.getLogger(__name__)


class ResolutionPipeline:
    """Chain of group executors run strictly one after the other.

    Each group starts only once the previous one has resolved, and receives the
    results, params and options exactly as the previous group left them. A
    failing group fails the whole pipeline and no later group runs.
    """

    def __init__(self, instance: UnitInstance, executors: list[GroupExecutor]):
        self._instance = instance
        self.executors = executors

    async def run(self, params: dict, options: dict) -> Resolution:
        resolution = Resolution([], params, options)
        for index, executor in enumerate(self.executors):
            self._instance.begin_group(index)
            resolution = await executor.execute(resolution)
        return resolution


def build_pipeline(
    instance: UnitInstance,
    resolve: Callable[[str, dict, dict], Producer],
    params: dict,
    options: dict,
) -> ResolutionPipeline:
    """Look up a producer for every declared dependency and build the pipeline.

    All lookups happen here, before any producer is invoked, so an unresolvable
    dependency in any group fails the run before any work starts.

    Args:
        instance: The unit instance whose dependency groups are resolved.
        resolve: Callable returning the producer for ``(name, params, options)``;
            it raises if the dependency cannot be provided.
        params: The caller's params, passed to the lookups.
        options: The caller's options, passed to the lookups.
    """
    executors = [
        GroupExecutor(instance, group, [resolve(name, params, options) for name in group])
        for group in instance.dependency_groups
    ]
    return ResolutionPipeline(instance, executors)
