"""Utilities for merging per-iteration verdicts into an overall verdict.

:mod:`rngcheck.orchestrator` produces one :class:`~rngcheck.orchestrator.Verdict`
per randomised test case.  This module folds them into a
:class:`RunSummary` that reporting and run-history layers can render without
knowing how the individual checks work.

A run passes only when at least one iteration was executed and every
iteration passed.  Failures are additionally grouped by the check that
rejected the generator output (``reproducibility``, ``range``,
``chi_square`` or ``sphere_volume``), and by element kind, so a report can
point at the representation or property that is broken.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence, Tuple

from .orchestrator import Verdict

CHECK_NAMES: Tuple[str, ...] = ("reproducibility", "range", "chi_square", "sphere_volume")
"""Checks in the order they run for every test case."""


@dataclass(frozen=True)
class RunSummary:
    """Aggregate verdict built from the per-iteration outcomes."""

    executed: int
    passed_count: int
    failures: Tuple[Verdict, ...]
    failures_by_check: Mapping[str, int] = field(default_factory=dict)
    failures_by_kind: Mapping[str, int] = field(default_factory=dict)
    sphere_cases: int = 0

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def passed(self) -> bool:
        return self.executed > 0 and not self.failures

    @property
    def pass_rate(self) -> float:
        return (self.passed_count / self.executed * 100.0) if self.executed else 0.0


def summarize_verdicts(verdicts: Sequence[Verdict]) -> RunSummary:
    """Merge ``verdicts`` into a :class:`RunSummary`."""

    failures = tuple(verdict for verdict in verdicts if not verdict.passed)
    by_check = Counter(verdict.check or "unknown" for verdict in failures)
    by_kind = Counter(verdict.case.kind.label for verdict in failures)
    ordered_checks = {name: by_check[name] for name in CHECK_NAMES if by_check[name]}
    for name, count in by_check.items():
        ordered_checks.setdefault(name, count)
    sphere_cases = sum(1 for verdict in verdicts if verdict.case.sphere_dimension is not None)
    return RunSummary(
        executed=len(verdicts),
        passed_count=len(verdicts) - len(failures),
        failures=failures,
        failures_by_check=MappingProxyType(ordered_checks),
        failures_by_kind=MappingProxyType(dict(sorted(by_kind.items()))),
        sphere_cases=sphere_cases,
    )


__all__ = ["CHECK_NAMES", "RunSummary", "summarize_verdicts"]
