"""Convergence test on an aggregated gradient."""

from __future__ import annotations

import numpy as np

from ..core.types import GradientBundle


def is_converged(gradients: GradientBundle, cutoff: float) -> bool:
    """Return ``True`` iff every entry of every layer satisfies ``|g| <= cutoff``.

    A single large entry anywhere blocks convergence; this is not a norm test.
    NaN and infinite entries never satisfy the bound.
    """

    for grad in gradients:
        if grad.size and not np.all(np.abs(grad) <= cutoff):
            return False
    return True


__all__ = ["is_converged"]
