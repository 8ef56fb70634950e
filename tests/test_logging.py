from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from rngcheck.analysis import summarize_verdicts
from rngcheck.app import RunResult
from rngcheck.cases import TestCase as Case
from rngcheck.kinds import DistributionKind, ElementKind, UniformSpec
from rngcheck.logging import log_run_result, trim_log
from rngcheck.orchestrator import RunSettings, Verdict


def _make_run_result(*, passed: bool = True, idx: int = 0) -> RunResult:
    case = Case(
        kind=ElementKind.S16,
        distribution=DistributionKind.UNIFORM,
        channels=(UniformSpec(-100, 100),),
        length=1000,
    )
    verdicts = [
        Verdict(iteration=0, case=case, passed=True, message="All checks passed."),
        Verdict(
            iteration=1,
            case=case,
            passed=passed,
            message="All checks passed." if passed else "RNG output depends on the array lengths",
            check=None if passed else "reproducibility",
        ),
    ]
    started_at = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=idx)
    return RunResult(
        config_path=None,
        generator_name="numpy-philox",
        generator_seed=12345,
        seed=idx,
        settings=RunSettings(iterations=2),
        verdicts=tuple(verdicts),
        summary=summarize_verdicts(verdicts),
        started_at=started_at,
        duration=timedelta(seconds=5),
    )


def test_log_run_result_appends_jsonl(tmp_path: Path) -> None:
    report_path = tmp_path / "report.md"
    result = _make_run_result()

    log_file = log_run_result(result, report_path, log_path=tmp_path / "log.jsonl", fmt="jsonl")

    assert log_file.exists()
    payload = log_file.read_text(encoding="utf-8").strip().splitlines()
    assert len(payload) == 1
    entry = json.loads(payload[0])
    assert entry["result"] == "PASS"
    assert entry["generator"] == "numpy-philox"
    assert entry["iterations"] == 2
    assert entry["passed"] == 2
    assert entry["failed"] == 0
    assert entry["failing_checks"] == ""
    assert entry["duration_s"] == 5.0
    assert entry["report_path"] == str(report_path)


def test_log_run_result_enforces_jsonl_retention(tmp_path: Path) -> None:
    log_path = tmp_path / "history.jsonl"

    for idx in range(5):
        log_run_result(_make_run_result(idx=idx), None, log_path=log_path, fmt="jsonl", retention=3)

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 3
    entries = [json.loads(line) for line in lines]
    assert [entry["seed"] for entry in entries] == [2, 3, 4]
    assert all(entry["report_path"] == "" for entry in entries)


def test_log_run_result_supports_csv(tmp_path: Path) -> None:
    log_path = tmp_path / "runs.csv"

    log_run_result(_make_run_result(passed=False), None, log_path=log_path, fmt="csv", retention=5)

    content = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert content[0] == (
        "timestamp,generator,seed,iterations,passed,failed,result,duration_s,failing_checks,report_path"
    )
    assert len(content) == 2
    row = content[1].split(",")
    assert row[4:7] == ["1", "1", "FAIL"]
    assert row[7] == "5.0"
    assert row[8] == "reproducibility:1"


def test_log_run_result_enforces_csv_retention(tmp_path: Path) -> None:
    log_path = tmp_path / "runs.csv"

    for idx in range(6):
        log_run_result(_make_run_result(idx=idx), None, log_path=log_path, fmt="csv", retention=2)

    content = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(content) == 3  # header + two retained rows
    timestamps = [row.split(",")[0] for row in content[1:]]
    assert timestamps == sorted(timestamps)


def test_trim_log_keeps_short_history_untouched(tmp_path: Path) -> None:
    log_path = tmp_path / "runs.jsonl"
    log_run_result(_make_run_result(), None, log_path=log_path, fmt="jsonl", retention=None)
    before = log_path.read_text(encoding="utf-8")

    trim_log(log_path, 10, fmt="jsonl")

    assert log_path.read_text(encoding="utf-8") == before


def test_log_run_result_rejects_unknown_format(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        log_run_result(_make_run_result(), None, log_path=tmp_path / "runs.xml", fmt="xml")
