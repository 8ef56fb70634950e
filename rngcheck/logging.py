"""Run history persisted as JSON lines or CSV rows.

Every CLI invocation with logging enabled appends one :class:`RunLogRecord`.
The file is trimmed to the configured retention afterwards so a long-lived
checker host keeps a bounded history.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from datetime import timezone
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .app import RunResult


LOG_FORMATS = ("jsonl", "csv")

LOG_FIELDNAMES = (
    "timestamp",
    "generator",
    "seed",
    "iterations",
    "passed",
    "failed",
    "result",
    "duration_s",
    "failing_checks",
    "report_path",
)
"""Column order of CSV logs and key order of JSON records."""

DEFAULT_LOG_PATH = Path("logs") / "run_log.jsonl"


@dataclass(frozen=True)
class RunLogRecord:
    """One line of run history."""

    timestamp: str
    generator: str
    seed: int
    iterations: int
    passed: int
    failed: int
    result: str
    duration_s: float
    failing_checks: str
    report_path: str

    @classmethod
    def from_run_result(cls, result: "RunResult", report_path: Path | None = None) -> "RunLogRecord":
        summary = result.summary
        return cls(
            timestamp=result.started_at.astimezone(timezone.utc).isoformat(),
            generator=result.generator_name,
            seed=result.seed,
            iterations=summary.executed,
            passed=summary.passed_count,
            failed=summary.failed_count,
            result="PASS" if summary.passed else "FAIL",
            duration_s=round(result.duration.total_seconds(), 3),
            failing_checks=_format_check_counts(summary.failures_by_check.items()),
            report_path="" if report_path is None else str(report_path),
        )


def log_run_result(
    result: "RunResult",
    report_path: Path | None = None,
    *,
    log_path: Path | None = None,
    fmt: str = "jsonl",
    retention: int | None = 100,
) -> Path:
    """Append ``result`` to the run history at ``log_path``.

    ``retention`` bounds the number of kept records; ``None`` or a
    non-positive value keeps everything.  Returns the resolved log path.
    """

    fmt = _normalise_format(fmt)
    target = Path(log_path).expanduser() if log_path is not None else DEFAULT_LOG_PATH
    target = target.resolve()
    target.parent.mkdir(parents=True, exist_ok=True)

    row = asdict(RunLogRecord.from_run_result(result, report_path))
    if fmt == "jsonl":
        with target.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(row, ensure_ascii=False) + "\n")
    else:
        write_header = not target.exists() or target.stat().st_size == 0
        with target.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=LOG_FIELDNAMES)
            if write_header:
                writer.writeheader()
            writer.writerow(row)

    if retention is not None and retention > 0:
        trim_log(target, retention, fmt=fmt)
    return target


def trim_log(path: Path, max_entries: int, *, fmt: str = "jsonl") -> None:
    """Keep only the newest ``max_entries`` records of ``path``."""

    fmt = _normalise_format(fmt)
    if max_entries <= 0 or not path.exists():
        return
    with path.open("r", encoding="utf-8", newline="") as handle:
        lines = handle.readlines()
    header = lines[:1] if fmt == "csv" else []
    records = lines[len(header):]
    if len(records) <= max_entries:
        return
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.writelines(header + records[-max_entries:])


def _normalise_format(fmt: str) -> str:
    normalised = fmt.lower()
    if normalised not in LOG_FORMATS:
        raise ValueError(f"Unsupported log format: {fmt}")
    return normalised


def _format_check_counts(items: Iterable[tuple[str, int]]) -> str:
    return ";".join(f"{check}:{count}" for check, count in items)


__all__ = ["LOG_FIELDNAMES", "LOG_FORMATS", "RunLogRecord", "log_run_result", "trim_log"]
