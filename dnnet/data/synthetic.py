"""Deterministic in-memory datasets for demos and tests."""

from __future__ import annotations

import numpy as np
from sklearn.datasets import make_blobs, make_regression

from .labelled import LabelledData


def separable_blobs(
    n_samples: int = 200,
    *,
    n_features: int = 2,
    cluster_std: float = 0.4,
    seed: int = 0,
    num_partitions: int = 4,
    max_workers: int = 1,
) -> LabelledData:
    """Two well separated Gaussian blobs labelled 0 and 1.

    Blob centres sit at ``-2`` and ``+2`` along every feature axis, so the
    classes are linearly separable for small ``cluster_std``.
    """

    centers = np.array([[-2.0] * n_features, [2.0] * n_features])
    X, y = make_blobs(
        n_samples=n_samples,
        centers=centers,
        cluster_std=cluster_std,
        random_state=seed,
    )
    return LabelledData.from_arrays(
        X.astype(np.float64),
        y.astype(np.float64).reshape(-1, 1),
        num_partitions=num_partitions,
        max_workers=max_workers,
    )


def linear_regression(
    n_samples: int = 128,
    *,
    n_features: int = 2,
    noise: float = 0.05,
    seed: int = 0,
    num_partitions: int = 4,
    max_workers: int = 1,
) -> LabelledData:
    """Noisy linear targets, standardised to unit scale."""

    X, y = make_regression(
        n_samples=n_samples,
        n_features=n_features,
        noise=noise,
        random_state=seed,
    )
    y = (y - y.mean()) / (y.std() + 1e-12)
    return LabelledData.from_arrays(
        X.astype(np.float64),
        y.astype(np.float64).reshape(-1, 1),
        num_partitions=num_partitions,
        max_workers=max_workers,
    )


__all__ = ["separable_blobs", "linear_regression"]
