"""Core numerical primitives for dnnet."""

from . import activations, backprop, cost, errors, feedforward, layers, losses, numerical, types

__all__ = [
    "activations",
    "backprop",
    "cost",
    "errors",
    "feedforward",
    "layers",
    "losses",
    "numerical",
    "types",
]
