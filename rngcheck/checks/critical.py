"""Critical values of the chi-square distribution."""

from __future__ import annotations

import math

from ..errors import PreconditionError

CHI2_TABLE_95 = (
    3.841, 5.991, 7.815, 9.488, 11.07, 12.59, 14.07, 15.51, 16.92, 18.31,
    19.68, 21.03, 22.36, 23.69, 25.00, 26.30, 27.59, 28.87, 30.14, 31.41,
    32.67, 33.92, 35.17, 36.42, 37.65, 38.89, 40.11, 41.34, 42.56, 43.77,
)
"""95th percentiles for 1..30 degrees of freedom."""

_XP = 1.64


def critical_value_95(degrees_of_freedom: int) -> float:
    """Return the 95th percentile of the chi-square distribution.

    Small counts come from :data:`CHI2_TABLE_95`; larger ones use the normal
    approximation ``n + sqrt(2n) * 1.64 + 2/3 * (1.64^2 - 1)``.
    """

    if degrees_of_freedom < 1:
        raise PreconditionError(
            f"Degrees of freedom must be at least 1 (got {degrees_of_freedom})."
        )
    if degrees_of_freedom <= len(CHI2_TABLE_95):
        return CHI2_TABLE_95[degrees_of_freedom - 1]
    n = degrees_of_freedom
    return n + math.sqrt(2 * n) * _XP + (2.0 / 3.0) * (_XP * _XP - 1)


__all__ = ["CHI2_TABLE_95", "critical_value_95"]
