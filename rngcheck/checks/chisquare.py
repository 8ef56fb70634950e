"""Pearson chi-square goodness-of-fit test against a theoretical histogram."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import PreconditionError
from ..kinds import DistributionKind
from .critical import critical_value_95

CRITICAL_VALUE_FACTOR = 0.01
"""Share of the 95% critical value the statistic may reach."""

SCALE_TOLERANCE = float(np.finfo(np.float32).eps)
_NEGLIGIBLE_MASS = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class ChiSquareResult:
    """Outcome of :func:`chi_square_test`."""

    passed: bool
    statistic: float
    critical_value: float
    degrees_of_freedom: int

    @property
    def threshold(self) -> float:
        return self.critical_value * CRITICAL_VALUE_FACTOR


def degrees_of_freedom(bucket_count: int, kind: DistributionKind) -> int:
    """Buckets minus one, minus the two estimated parameters of a normal."""

    return bucket_count - 1 - (2 if kind is DistributionKind.NORMAL else 0)


def chi_square_test(
    counts: np.ndarray,
    theoretical: np.ndarray,
    scale: float,
    kind: DistributionKind,
) -> ChiSquareResult:
    """Compare empirical ``counts`` with ``theoretical`` probabilities.

    Parameters
    ----------
    counts:
        In-range bucket counts of one channel.
    theoretical:
        Expected probability of each bucket, summing to one.
    scale:
        Normalisation applied to ``counts``; must equal ``1 / sum(counts)``.
    kind:
        Distribution the histogram was built for.  Normal distributions lose
        two extra degrees of freedom.
    """

    counts = np.asarray(counts)
    theoretical = np.asarray(theoretical, dtype=np.float64)
    if counts.shape != theoretical.shape:
        raise PreconditionError(
            f"Histogram has {counts.size} buckets but {theoretical.size} probabilities were given."
        )
    total = int(counts.sum())
    if total <= 0:
        raise PreconditionError("Chi-square test requires at least one in-range sample.")
    if abs(1.0 / total - scale) >= SCALE_TOLERANCE:
        raise PreconditionError(
            f"Normalisation scale {scale!r} does not match 1/{total}."
        )

    empirical = counts.astype(np.float64) * scale
    considered = theoretical > _NEGLIGIBLE_MASS
    a = theoretical[considered]
    b = empirical[considered]
    statistic = float(np.sum((a - b) ** 2 / (a + b)))

    dof = degrees_of_freedom(counts.size, kind)
    critical = critical_value_95(dof)
    return ChiSquareResult(
        passed=statistic <= critical * CRITICAL_VALUE_FACTOR,
        statistic=statistic,
        critical_value=critical,
        degrees_of_freedom=dof,
    )


__all__ = [
    "CRITICAL_VALUE_FACTOR",
    "ChiSquareResult",
    "chi_square_test",
    "degrees_of_freedom",
]
