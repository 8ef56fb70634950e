"""Tests for :mod:`rngcheck.orchestrator`."""

from __future__ import annotations

import numpy as np
import pytest

from rngcheck.cases import TestCase as Case
from rngcheck.checks.chisquare import chi_square_test
from rngcheck.checks.critical import critical_value_95
from rngcheck.checks.histogram import histogram_for_channel
from rngcheck.checks.oracle import theoretical_histogram
from rngcheck.checks.reproducibility import check_reproducibility
from rngcheck.errors import PreconditionError
from rngcheck.generators import ConstantGenerator, NumpyGenerator
from rngcheck.kinds import DistributionKind, ElementKind, NormalSpec, UniformSpec
from rngcheck.orchestrator import RunSettings, run_case, run_iterations


def _u8_case(length: int = 1_200_000, sphere_dimension: int | None = None) -> Case:
    return Case(
        kind=ElementKind.U8,
        distribution=DistributionKind.UNIFORM,
        channels=(UniformSpec(0, 256),),
        length=length,
        sphere_dimension=sphere_dimension,
    )


def test_flat_u8_histogram_passes() -> None:
    case = _u8_case()
    buffer = check_reproducibility(
        NumpyGenerator(seed=1), case.kind, case.channels, case.length, np.random.default_rng(0)
    )

    histogram = histogram_for_channel(buffer, 0, case.channels[0])
    result = chi_square_test(
        histogram.counts,
        theoretical_histogram(256, DistributionKind.UNIFORM),
        1.0 / histogram.in_range,
        DistributionKind.UNIFORM,
    )

    expected = case.length / 256
    assert histogram.in_range == case.length
    assert np.all(np.abs(histogram.counts - expected) < 0.1 * expected)
    assert result.statistic < 0.01 * critical_value_95(255) / 100
    assert result.passed is True


def test_u8_uniform_case_verdict_passes() -> None:
    verdict = run_case(NumpyGenerator(seed=1), _u8_case(sphere_dimension=2), np.random.default_rng(0))

    assert verdict.passed is True
    assert verdict.check is None


def test_constant_generator_fails_chi_square_on_first_channel() -> None:
    case = Case(
        kind=ElementKind.U8,
        distribution=DistributionKind.UNIFORM,
        channels=(UniformSpec(0, 16), UniformSpec(0, 16)),
        length=10_000,
    )

    verdict = run_case(ConstantGenerator(3), case, np.random.default_rng(0), iteration=7)

    assert verdict.passed is False
    assert verdict.iteration == 7
    assert verdict.check == "chi_square"
    assert verdict.channel == 0
    assert "channel 0/2" in verdict.message
    assert verdict.observed > verdict.expected


def test_out_of_range_values_stop_before_chi_square() -> None:
    case = Case(
        kind=ElementKind.S16,
        distribution=DistributionKind.UNIFORM,
        channels=(UniformSpec(0, 16),),
        length=1000,
    )

    verdict = run_case(ConstantGenerator(200), case, np.random.default_rng(0))

    assert verdict.passed is False
    assert verdict.check == "range"
    assert verdict.channel == 0


def test_normal_outliers_are_reported() -> None:
    case = Case(
        kind=ElementKind.F32,
        distribution=DistributionKind.NORMAL,
        channels=(NormalSpec(0, 10),),
        length=1000,
    )

    verdict = run_case(ConstantGenerator(500.0), case, np.random.default_rng(0))

    assert verdict.check == "range"
    assert "Normal RNG" in verdict.message


def test_constant_generator_fails_sphere_test() -> None:
    case = Case(
        kind=ElementKind.F64,
        distribution=DistributionKind.UNIFORM,
        channels=(UniformSpec(-1000, 1000),),
        length=20_000,
        sphere_dimension=3,
    )

    verdict = run_case(ConstantGenerator(0.0), case, np.random.default_rng(0))

    assert verdict.passed is False
    assert verdict.check == "sphere_volume"
    assert verdict.observed == pytest.approx(8.0)


def test_precondition_errors_propagate() -> None:
    case = Case(
        kind=ElementKind.F64,
        distribution=DistributionKind.NORMAL,
        channels=(NormalSpec(0, 10),),
        length=1000,
        sphere_dimension=2,
    )

    with pytest.raises(PreconditionError):
        run_case(NumpyGenerator(seed=0), case, np.random.default_rng(0))


def test_reference_generator_passes_random_cases() -> None:
    settings = RunSettings(iterations=8, total_samples=120_000, max_sphere_dimension=3)

    verdicts = run_iterations(NumpyGenerator(seed=5), settings, np.random.default_rng(11))

    assert len(verdicts) == 8
    assert [verdict.iteration for verdict in verdicts] == list(range(8))
    failures = [verdict.message for verdict in verdicts if not verdict.passed]
    assert failures == []


def test_fail_fast_stops_after_first_failure() -> None:
    settings = RunSettings(iterations=50, total_samples=4000, fail_fast=True)

    verdicts = run_iterations(ConstantGenerator(0), settings, np.random.default_rng(2))

    assert verdicts[-1].passed is False
    assert all(verdict.passed for verdict in verdicts[:-1])
