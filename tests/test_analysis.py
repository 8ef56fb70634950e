"""Unit tests for :mod:`rngcheck.analysis`."""

from __future__ import annotations

from rngcheck.analysis import summarize_verdicts
from rngcheck.cases import TestCase as Case
from rngcheck.kinds import DistributionKind, ElementKind, UniformSpec
from rngcheck.orchestrator import Verdict


def _verdict(iteration: int, *, passed: bool, check: str | None = None, kind: ElementKind = ElementKind.U8) -> Verdict:
    case = Case(
        kind=kind,
        distribution=DistributionKind.UNIFORM,
        channels=(UniformSpec(0, 200),),
        length=100,
        sphere_dimension=3,
    )
    return Verdict(
        iteration=iteration,
        case=case,
        passed=passed,
        message="ok" if passed else f"{check} failed",
        check=check,
    )


def test_summary_of_passing_run() -> None:
    summary = summarize_verdicts([_verdict(0, passed=True), _verdict(1, passed=True)])

    assert summary.passed is True
    assert summary.executed == 2
    assert summary.passed_count == 2
    assert summary.failed_count == 0
    assert summary.pass_rate == 100.0
    assert summary.sphere_cases == 2
    assert dict(summary.failures_by_check) == {}


def test_failures_are_grouped_in_check_order() -> None:
    verdicts = [
        _verdict(0, passed=False, check="sphere_volume", kind=ElementKind.F32),
        _verdict(1, passed=True),
        _verdict(2, passed=False, check="reproducibility"),
        _verdict(3, passed=False, check="sphere_volume", kind=ElementKind.F32),
    ]

    summary = summarize_verdicts(verdicts)

    assert summary.passed is False
    assert summary.failed_count == 3
    assert list(summary.failures_by_check.items()) == [("reproducibility", 1), ("sphere_volume", 2)]
    assert dict(summary.failures_by_kind) == {"f32": 2, "u8": 1}
    assert [verdict.iteration for verdict in summary.failures] == [0, 2, 3]
    assert summary.pass_rate == 25.0


def test_empty_run_does_not_pass() -> None:
    summary = summarize_verdicts([])

    assert summary.passed is False
    assert summary.pass_rate == 0.0
