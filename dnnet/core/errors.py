"""Error taxonomy for dnnet."""

from __future__ import annotations


class DnnetError(Exception):
    """Base class for every error raised by dnnet."""


class DimensionMismatch(DnnetError, ValueError):
    """A vector or matrix does not match the network topography."""


class InvalidTopography(DnnetError, ValueError):
    """Fewer than two layers, or a non-positive layer size."""


class InvalidMode(DnnetError, ValueError):
    """No output activation is mapped for the mode/output-size combination."""


class DistributedExecutionFailure(DnnetError, RuntimeError):
    """A mapper or reducer failed inside the parallel collection backend."""


__all__ = [
    "DnnetError",
    "DimensionMismatch",
    "InvalidTopography",
    "InvalidMode",
    "DistributedExecutionFailure",
]
