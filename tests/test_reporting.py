"""Tests for :mod:`rngcheck.reporting`."""

from __future__ import annotations

import io
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from rngcheck import reporting
from rngcheck.analysis import summarize_verdicts
from rngcheck.app import RunResult
from rngcheck.cases import TestCase as Case
from rngcheck.kinds import DistributionKind, ElementKind, NormalSpec, UniformSpec
from rngcheck.orchestrator import RunSettings, Verdict


def _build_run_result(*, failing: bool = True) -> RunResult:
    uniform_case = Case(
        kind=ElementKind.U16,
        distribution=DistributionKind.UNIFORM,
        channels=(UniformSpec(10, 5000), UniformSpec(-3, 40)),
        length=600,
        sphere_dimension=3,
    )
    normal_case = Case(
        kind=ElementKind.F32,
        distribution=DistributionKind.NORMAL,
        channels=(NormalSpec(1.5, 20.0),),
        length=1200,
    )
    verdicts = [Verdict(iteration=0, case=uniform_case, passed=True, message="All checks passed.")]
    if failing:
        verdicts.append(
            Verdict(
                iteration=1,
                case=normal_case,
                passed=False,
                message="RNG failed chi-square test (got 12.5 vs probable maximum 0.4) on channel 0/1.",
                check="chi_square",
                channel=0,
                expected=0.4,
                observed=12.5,
            )
        )
    else:
        verdicts.append(Verdict(iteration=1, case=normal_case, passed=True, message="All checks passed."))
    return RunResult(
        config_path=None,
        generator_name="numpy-philox",
        generator_seed=12345,
        seed=3,
        settings=RunSettings(iterations=2, total_samples=1200),
        verdicts=tuple(verdicts),
        summary=summarize_verdicts(verdicts),
        started_at=datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        duration=timedelta(seconds=1.234),
    )


def test_print_console_summary_compact() -> None:
    buffer = io.StringIO()
    reporting.print_console_summary(_build_run_result(failing=False), stream=buffer)

    assert buffer.getvalue() == "Result: PASS | 2/2 iterations passed\n"


def test_print_console_summary_verbose() -> None:
    buffer = io.StringIO()
    reporting.print_console_summary(_build_run_result(), verbose=True, stream=buffer)
    output = buffer.getvalue()

    assert "Result: FAIL | 1/2 iterations passed" in output
    assert "Generator: numpy-philox (seed 12345)" in output
    assert "Case seed: 3" in output
    assert "#1 FAIL" in output
    assert "chi-square test" in output
    assert "chi_square: 1 failure(s)" in output


def test_write_markdown_report_default_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    result = _build_run_result()
    monkeypatch.chdir(tmp_path)

    report_path = reporting.write_markdown_report(result)

    expected = (tmp_path / "reports" / "rng-20230102-030405.md").resolve()
    assert report_path == expected
    content = report_path.read_text(encoding="utf-8")

    assert "# Random Generator Validation Report" in content
    assert "- **Result:** FAIL" in content
    assert "- **Iterations passed:** 1/2 (50.00%)" in content
    assert "- **Sphere volume cases:** 1" in content
    assert "- **Configuration:** defaults" in content
    assert "| chi_square | 1 |" in content
    assert "### Iteration 1" in content
    assert "- **Channel:** 0" in content
    assert "- **Observed:** 12.5" in content
    assert "Generated on 2023-01-02T03:04:05+00:00 (duration: 1.23 s)" in content


def test_write_markdown_report_custom_path(tmp_path: Path) -> None:
    result = _build_run_result(failing=False)
    custom_path = tmp_path / "custom" / "report.md"

    written_path = reporting.write_markdown_report(result, path=custom_path)

    assert written_path == custom_path
    content = custom_path.read_text(encoding="utf-8")
    assert "| _(no failures)_ | 0 |" in content
    assert "- Every iteration passed." in content
