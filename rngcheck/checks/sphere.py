"""Monte-Carlo estimate of the volume of the unit ball.

Consecutive samples of a uniform buffer are grouped into ``d``-tuples and
mapped onto the cube ``[-1, 1]^d``.  The share of tuples landing inside the
inscribed unit ball, times the cube volume ``2^d``, estimates the ball
volume.  Correlation between consecutive outputs distorts the estimate even
when every channel looks uniform on its own.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..buffer import SampleBuffer
from ..errors import InvalidOutputError, PreconditionError
from ..kinds import ChannelSpec, UniformSpec

MIN_SPHERE_DIMENSION = 2
DEFAULT_MAX_SPHERE_DIMENSION = 10
MIN_UNIFORM_WIDTH = 100
RELATIVE_TOLERANCE = 0.1


@dataclass(frozen=True)
class SphereResult:
    dimension: int
    estimated: float
    theoretical: float
    tuples: int
    inside: int

    @property
    def passed(self) -> bool:
        return abs(self.estimated - self.theoretical) <= RELATIVE_TOLERANCE * abs(self.theoretical)


def unit_ball_volume(dimension: int) -> float:
    """Closed-form volume of the unit ball in ``dimension`` dimensions."""

    if dimension < 0:
        raise PreconditionError(f"Dimension must be non-negative (got {dimension}).")
    step = dimension % 2
    volume = float(step + 1)
    for k in range(step + 2, dimension + 1, 2):
        volume *= 2 * math.pi / k
    return volume


def sphere_test_applicable(channels: Sequence[ChannelSpec]) -> bool:
    """Only wide uniform ranges give enough resolution for the estimate."""

    return bool(channels) and all(
        isinstance(spec, UniformSpec) and spec.width >= MIN_UNIFORM_WIDTH
        for spec in channels
    )


def estimate_ball_volume(
    buffer: SampleBuffer,
    channels: Sequence[ChannelSpec],
    dimension: int,
) -> SphereResult:
    if dimension < 1:
        raise PreconditionError(f"Dimension must be positive (got {dimension}).")
    if len(channels) != buffer.channels:
        raise PreconditionError(
            f"{len(channels)} channel specification(s) given for a {buffer.channels}-channel buffer."
        )
    if not all(isinstance(spec, UniformSpec) for spec in channels):
        raise PreconditionError("The sphere volume test requires uniform channels.")

    low = np.array([spec.low for spec in channels], dtype=np.float64)
    high = np.array([spec.high for spec in channels], dtype=np.float64)
    scale = 2.0 / (high - low)
    delta = -low * scale - 1.0
    # Channel parameters repeat every ``channels`` elements of the flat stream.
    count = buffer.element_count
    mapped = buffer.interleaved() * np.resize(scale, count) + np.resize(delta, count)

    tuples = mapped.size // dimension
    if tuples == 0:
        raise PreconditionError(
            f"Buffer of {mapped.size} element(s) holds no {dimension}-dimensional point."
        )
    points = mapped[: tuples * dimension].reshape(tuples, dimension)
    inside = int(np.count_nonzero(np.einsum("ij,ij->i", points, points) <= 1.0))
    return SphereResult(
        dimension=dimension,
        estimated=inside / tuples * 2.0 ** dimension,
        theoretical=unit_ball_volume(dimension),
        tuples=tuples,
        inside=inside,
    )


def sphere_volume_test(
    buffer: SampleBuffer,
    channels: Sequence[ChannelSpec],
    dimension: int,
) -> SphereResult:
    """Run the estimate and raise :class:`InvalidOutputError` outside tolerance."""

    result = estimate_ball_volume(buffer, channels, dimension)
    if not result.passed:
        raise InvalidOutputError(
            f"RNG failed {dimension}-dim sphere volume test "
            f"(got {result.estimated:g} instead of {result.theoretical:g}).",
            check="sphere_volume",
            expected=result.theoretical,
            observed=result.estimated,
        )
    return result


__all__ = [
    "DEFAULT_MAX_SPHERE_DIMENSION",
    "MIN_SPHERE_DIMENSION",
    "SphereResult",
    "estimate_ball_volume",
    "sphere_test_applicable",
    "sphere_volume_test",
    "unit_ball_volume",
]
