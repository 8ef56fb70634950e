"""Theoretical bucket probabilities for the supported distributions."""

from __future__ import annotations

import math

import numpy as np

from ..errors import PreconditionError
from ..kinds import DistributionKind


def theoretical_histogram(bucket_count: int, kind: DistributionKind) -> np.ndarray:
    """Return the expected probability mass of each bucket.

    For the normal distribution the buckets span ``±2*sqrt(2)`` in units of
    ``x = z / sqrt(2)``, which matches histograms built over ``mean ± 4*stddev``.
    Each bucket receives the Gaussian kernel evaluated at its coordinate and
    the result is renormalised; the discretisation error is small compared to
    the tolerance of :func:`~rngcheck.checks.chisquare.chi_square_test`.
    """

    if bucket_count < 1:
        raise PreconditionError(f"Bucket count must be positive (got {bucket_count}).")
    if kind is DistributionKind.UNIFORM:
        return np.full(bucket_count, 1.0 / bucket_count)
    if bucket_count == 1:
        return np.ones(1)
    r = (bucket_count - 1) / 2.0
    alpha = 2 * math.sqrt(2.0) / r
    beta = -alpha * r
    x = np.arange(bucket_count) * alpha + beta
    mass = np.exp(-x * x)
    return mass / mass.sum()


__all__ = ["theoretical_histogram"]
