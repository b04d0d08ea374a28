"""Progress reporting helpers."""

from .metrics import CostHistory, JsonlSink

__all__ = ["CostHistory", "JsonlSink"]
