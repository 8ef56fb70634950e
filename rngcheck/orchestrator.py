"""Run the validation checks over randomised test cases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

import numpy as np

from .buffer import SampleBuffer
from .cases import DEFAULT_TOTAL_SAMPLES, TestCase, generate_test_case
from .checks.chisquare import chi_square_test
from .checks.histogram import (
    DEFAULT_MAX_HISTOGRAM_SIZE,
    check_range_membership,
    histogram_for_channel,
)
from .checks.oracle import theoretical_histogram
from .checks.reproducibility import DEFAULT_MAX_SLICES, check_reproducibility
from .checks.sphere import DEFAULT_MAX_SPHERE_DIMENSION, sphere_volume_test
from .errors import InvalidOutputError
from .generators import RandomGenerator

DEFAULT_ITERATIONS = 500


@dataclass(frozen=True)
class RunSettings:
    """Parameters of a validation run."""

    iterations: int = DEFAULT_ITERATIONS
    total_samples: int = DEFAULT_TOTAL_SAMPLES
    max_slices: int = DEFAULT_MAX_SLICES
    max_histogram_size: int = DEFAULT_MAX_HISTOGRAM_SIZE
    max_sphere_dimension: int = DEFAULT_MAX_SPHERE_DIMENSION
    fail_fast: bool = False


@dataclass(frozen=True)
class Verdict:
    """Outcome of checking one test case."""

    iteration: int
    case: TestCase
    passed: bool
    message: str
    check: str | None = None
    channel: int | None = None
    expected: float | None = None
    observed: float | None = None

    @classmethod
    def from_error(cls, iteration: int, case: TestCase, error: InvalidOutputError) -> "Verdict":
        return cls(
            iteration=iteration,
            case=case,
            passed=False,
            message=str(error),
            check=error.check,
            channel=error.channel,
            expected=error.expected,
            observed=error.observed,
        )


def _check_channels(case: TestCase, buffer: SampleBuffer, max_histogram_size: int) -> None:
    for index, spec in enumerate(case.channels):
        histogram = histogram_for_channel(buffer, index, spec, max_size=max_histogram_size)
        check_range_membership(histogram, spec, index, case.channel_count)
        theoretical = theoretical_histogram(histogram.bucket_count, case.distribution)
        result = chi_square_test(
            histogram.counts,
            theoretical,
            1.0 / histogram.in_range,
            case.distribution,
        )
        if not result.passed:
            raise InvalidOutputError(
                f"RNG failed chi-square test (got {result.statistic:g} vs probable maximum "
                f"{result.threshold:g}) on channel {index}/{case.channel_count}.",
                check="chi_square",
                channel=index,
                expected=result.threshold,
                observed=result.statistic,
            )


def run_case(
    generator: RandomGenerator,
    case: TestCase,
    source: np.random.Generator,
    *,
    iteration: int = 0,
    max_slices: int = DEFAULT_MAX_SLICES,
    max_histogram_size: int = DEFAULT_MAX_HISTOGRAM_SIZE,
) -> Verdict:
    """Run every check for ``case`` and return its verdict.

    The first :class:`InvalidOutputError` ends the case; later checks depend on
    the invariants established by earlier ones.  Precondition errors are bugs
    in the checker and propagate.
    """

    try:
        buffer = check_reproducibility(
            generator,
            case.kind,
            case.channels,
            case.length,
            source,
            max_slices=max_slices,
        )
        _check_channels(case, buffer, max_histogram_size)
        if case.sphere_dimension is not None:
            sphere_volume_test(buffer, case.channels, case.sphere_dimension)
    except InvalidOutputError as exc:
        return Verdict.from_error(iteration, case, exc)
    return Verdict(iteration=iteration, case=case, passed=True, message="All checks passed.")


def iter_verdicts(
    generator: RandomGenerator,
    settings: RunSettings,
    source: np.random.Generator,
) -> Iterator[Verdict]:
    """Yield one verdict per iteration, stopping early when ``fail_fast`` is set."""

    for iteration in range(settings.iterations):
        case = generate_test_case(
            source,
            total_samples=settings.total_samples,
            max_sphere_dimension=settings.max_sphere_dimension,
        )
        verdict = run_case(
            generator,
            case,
            source,
            iteration=iteration,
            max_slices=settings.max_slices,
            max_histogram_size=settings.max_histogram_size,
        )
        yield verdict
        if settings.fail_fast and not verdict.passed:
            return


def run_iterations(
    generator: RandomGenerator,
    settings: RunSettings,
    source: np.random.Generator,
) -> List[Verdict]:
    return list(iter_verdicts(generator, settings, source))


__all__ = [
    "DEFAULT_ITERATIONS",
    "RunSettings",
    "Verdict",
    "iter_verdicts",
    "run_case",
    "run_iterations",
]
