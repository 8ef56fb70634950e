"""Randomised test case generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .buffer import MAX_CHANNELS
from .checks.sphere import (
    DEFAULT_MAX_SPHERE_DIMENSION,
    MIN_SPHERE_DIMENSION,
    sphere_test_applicable,
)
from .errors import PreconditionError
from .kinds import ChannelSpec, DistributionKind, ElementKind, NormalSpec, UniformSpec

DEFAULT_TOTAL_SAMPLES = 1_200_000
MAX_NORMAL_STDDEV = 10_000


@dataclass(frozen=True)
class TestCase:
    """One randomised configuration checked by the orchestrator."""

    __test__ = False

    kind: ElementKind
    distribution: DistributionKind
    channels: Tuple[ChannelSpec, ...]
    length: int
    sphere_dimension: int | None = None

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    def describe(self) -> str:
        specs = ", ".join(spec.describe() for spec in self.channels)
        return f"{self.kind.label} x{self.channel_count} {self.distribution.value} [{specs}] ({self.length} rows)"


def _uniform_spec(kind: ElementKind, source: np.random.Generator) -> UniformSpec:
    lo, hi = kind.test_range
    a = int(source.integers(lo, hi))
    while True:
        b = int(source.integers(lo, hi))
        if abs(a - b) > 1:
            break
    if a > b:
        a, b = b, a
    return UniformSpec(low=a, high=b)


def _normal_spec(kind: ElementKind, source: np.random.Generator) -> NormalSpec:
    lo, hi = kind.test_range
    vrange = hi - lo
    mean_range = vrange // 16
    min_div = max(vrange // 20, 5)
    max_div = max(min(vrange // 8, MAX_NORMAL_STDDEV), min_div + 1)
    mean = int(source.integers(0, mean_range)) - mean_range // 2 + (lo + hi) // 2
    stddev = int(source.integers(min_div, max_div))
    return NormalSpec(mean=mean, stddev=stddev)


def generate_test_case(
    source: np.random.Generator,
    *,
    total_samples: int = DEFAULT_TOTAL_SAMPLES,
    max_sphere_dimension: int = DEFAULT_MAX_SPHERE_DIMENSION,
) -> TestCase:
    """Draw a random element kind, channel count, distribution and parameters.

    ``source`` is independent of the generator under test.  Each channel gets
    ``total_samples // channels`` rows.  Cases whose buffer cannot hold one
    point of the drawn dimension skip the sphere test.
    """

    if max_sphere_dimension < MIN_SPHERE_DIMENSION:
        raise PreconditionError(
            f"Sphere dimension bound must be at least {MIN_SPHERE_DIMENSION} (got {max_sphere_dimension})."
        )
    kinds = list(ElementKind)
    kind = kinds[int(source.integers(0, len(kinds)))]
    channel_count = int(source.integers(1, MAX_CHANNELS + 1))
    if total_samples < channel_count:
        raise PreconditionError(
            f"{total_samples} sample(s) cannot be split across {channel_count} channel(s)."
        )
    distributions = list(DistributionKind)
    distribution = distributions[int(source.integers(0, len(distributions)))]

    draw = _uniform_spec if distribution is DistributionKind.UNIFORM else _normal_spec
    channels = tuple(draw(kind, source) for _ in range(channel_count))

    length = total_samples // channel_count
    sphere_dimension = None
    if sphere_test_applicable(channels):
        sphere_dimension = int(source.integers(MIN_SPHERE_DIMENSION, max_sphere_dimension + 1))
        if length * channel_count < sphere_dimension:
            # Too few elements for a single point.
            sphere_dimension = None

    return TestCase(
        kind=kind,
        distribution=distribution,
        channels=channels,
        length=length,
        sphere_dimension=sphere_dimension,
    )


__all__ = ["DEFAULT_TOTAL_SAMPLES", "TestCase", "generate_test_case"]
