"""Exception hierarchy for the route optimization engine."""

from __future__ import annotations


class RouteOptimizationError(Exception):
    """Base class for errors raised by the optimization engine."""


class InvalidInputError(RouteOptimizationError, ValueError):
    """Stops or options are malformed. Raised before any computation starts."""


class AlgorithmError(RouteOptimizationError):
    """An algorithm produced a sequence that is not a permutation of the stops."""


class TimeoutExceeded(RouteOptimizationError, TimeoutError):
    """A route in a bulk batch did not finish within its deadline."""
