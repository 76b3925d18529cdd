"""Exceptions raised by the resolution engine."""

from typing import Optional

__all__ = [
    "LogicError",
    "DefinitionError",
    "UndefinedUnitError",
    "UnresolvedDependencyError",
    "ProducerRejection",
]


class LogicError(Exception):
    """Base class for every error raised by the engine."""

    pass


class DefinitionError(LogicError):
    """Raised when a unit is defined with malformed dependencies, handlers or finalize."""

    pass


class UndefinedUnitError(LogicError):
    """Raised when a unit is requested by a name that was never defined."""

    def __init__(self, message: str, unit_name: Optional[str] = None):
        super().__init__(message)
        self.unit_name = unit_name


class UnresolvedDependencyError(LogicError):
    """Raised when no registered provider lookup yields a producer for a dependency."""

    def __init__(self, message: str, dependency_name: Optional[str] = None):
        super().__init__(message)
        self.dependency_name = dependency_name


class ProducerRejection(LogicError):
    """Raised when a producer (or a preventing handler's awaitable) fails.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, dependency_name: str, cause: BaseException):
        super().__init__(f"Dependency '{dependency_name}' failed: {cause!r}")
        self.dependency_name = dependency_name
