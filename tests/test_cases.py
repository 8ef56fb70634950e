"""Unit tests for :mod:`rngcheck.cases`."""

from __future__ import annotations

import numpy as np
import pytest

from rngcheck.cases import generate_test_case
from rngcheck.checks.sphere import sphere_test_applicable
from rngcheck.errors import PreconditionError
from rngcheck.kinds import DistributionKind, NormalSpec, UniformSpec


def test_generated_cases_respect_kind_ranges() -> None:
    source = np.random.default_rng(3)

    for _ in range(300):
        case = generate_test_case(source, total_samples=1_200_000)
        lo, hi = case.kind.test_range

        assert 1 <= case.channel_count <= 4
        assert case.length == 1_200_000 // case.channel_count
        for spec in case.channels:
            assert spec.kind is case.distribution
            if isinstance(spec, UniformSpec):
                assert lo <= spec.low < spec.high < hi
                assert spec.high - spec.low > 1
            else:
                assert isinstance(spec, NormalSpec)
                assert spec.stddev >= 5
                assert lo <= spec.mean < hi


def test_sphere_dimension_is_drawn_only_when_applicable() -> None:
    source = np.random.default_rng(11)
    seen_sphere = False

    for _ in range(300):
        case = generate_test_case(source, max_sphere_dimension=6)
        if sphere_test_applicable(case.channels):
            seen_sphere = True
            assert case.distribution is DistributionKind.UNIFORM
            assert case.sphere_dimension is not None
            assert 2 <= case.sphere_dimension <= 6
        else:
            assert case.sphere_dimension is None

    assert seen_sphere


def test_case_generation_is_deterministic() -> None:
    first = [generate_test_case(np.random.default_rng(42)).describe() for _ in range(3)]
    second = [generate_test_case(np.random.default_rng(42)).describe() for _ in range(3)]

    assert first == second


def test_sphere_dimension_bound_is_validated() -> None:
    with pytest.raises(PreconditionError):
        generate_test_case(np.random.default_rng(0), max_sphere_dimension=1)


def test_tiny_buffers_skip_the_sphere_test() -> None:
    source = np.random.default_rng(5)
    seen_uniform_wide = False

    for _ in range(300):
        case = generate_test_case(source, total_samples=5, max_sphere_dimension=10)
        elements = case.length * case.channel_count
        if sphere_test_applicable(case.channels):
            seen_uniform_wide = True
        if case.sphere_dimension is not None:
            assert case.sphere_dimension <= elements

    assert seen_uniform_wide
