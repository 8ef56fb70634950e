"""Reporting utilities for console and markdown output."""

from __future__ import annotations

import sys
import textwrap
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path
from string import Template
from typing import TYPE_CHECKING, Mapping, Sequence, TextIO

if TYPE_CHECKING:
    from datetime import timedelta

    from .app import RunResult
    from .orchestrator import Verdict


@dataclass(frozen=True)
class ReportTemplate:
    """Container for the markdown report template."""

    template: Template = Template(
        textwrap.dedent(
            """
            # Random Generator Validation Report

            ## Summary
            ${summary}

            ## Run Configuration
            ${configuration}

            ## Failures by Check
            ${check_table}

            ## Failing Iterations
            ${failure_details}

            _Generated on ${timestamp} (duration: ${duration})._
            """
        ).strip()
    )


DEFAULT_TEMPLATE = ReportTemplate()


def format_verdict(verdict: "Verdict") -> str:
    """One-line description of a verdict for console output."""

    status = "PASS" if verdict.passed else "FAIL"
    return f"#{verdict.iteration} {status} {verdict.case.describe()}: {verdict.message}"


def print_console_summary(result: "RunResult", *, verbose: bool = False, stream: TextIO | None = None) -> None:
    """Print a short summary of the run to ``stream``."""

    output = stream if stream is not None else sys.stdout
    summary = result.summary
    status = "PASS" if summary.passed else "FAIL"
    print(
        f"Result: {status} | {summary.passed_count}/{summary.executed} iterations passed",
        file=output,
    )
    if not verbose:
        return

    print(f"Generator: {result.generator_name} (seed {result.generator_seed})", file=output)
    print(f"Case seed: {result.seed}", file=output)
    for verdict in summary.failures:
        print(f" - {format_verdict(verdict)}", file=output)
    for check, count in summary.failures_by_check.items():
        print(f"   {check}: {count} failure(s)", file=output)


def build_markdown_report(result: "RunResult", *, template: Template | None = None) -> str:
    """Generate a markdown report for ``result`` using ``template``."""

    template = template or DEFAULT_TEMPLATE.template
    return template.substitute(
        summary=_format_summary_section(result),
        configuration=_format_configuration(result),
        check_table=_format_check_table(result.summary.failures_by_check),
        failure_details=_format_failures(result.summary.failures),
        timestamp=result.started_at.astimezone(timezone.utc).isoformat(),
        duration=_format_duration(result.duration),
    )


def write_markdown_report(
    result: "RunResult",
    path: Path | None = None,
    *,
    template: Template | None = None,
) -> Path:
    """Render and persist a markdown report for ``result``."""

    target = _resolve_report_path(result, path)
    target.parent.mkdir(parents=True, exist_ok=True)
    content = build_markdown_report(result, template=template)
    target.write_text(content, encoding="utf-8")
    return target


# ---------------------------------------------------------------------------
# Helper formatting utilities
# ---------------------------------------------------------------------------

def _format_summary_section(result: "RunResult") -> str:
    summary = result.summary
    verdict = "PASS" if summary.passed else "FAIL"
    return textwrap.dedent(
        f"""
        - **Result:** {verdict}
        - **Iterations passed:** {summary.passed_count}/{summary.executed} ({summary.pass_rate:.2f}%)
        - **Sphere volume cases:** {summary.sphere_cases}
        """
    ).strip()


def _format_configuration(result: "RunResult") -> str:
    settings = result.settings
    config_source = str(result.config_path) if result.config_path is not None else "defaults"
    lines = [
        f"- **Generator:** {result.generator_name} (seed {result.generator_seed})",
        f"- **Case seed:** {result.seed}",
        f"- **Configuration:** {config_source}",
        f"- **Iterations requested:** {settings.iterations}",
        f"- **Samples per case:** {settings.total_samples}",
        f"- **Maximum slices:** {settings.max_slices}",
        f"- **Maximum histogram size:** {settings.max_histogram_size}",
        f"- **Maximum sphere dimension:** {settings.max_sphere_dimension}",
    ]
    return "\n".join(lines)


def _format_check_table(failures_by_check: Mapping[str, int]) -> str:
    header = "| Check | Failures |"
    separator = "| --- | --- |"
    rows = [f"| {check} | {count} |" for check, count in failures_by_check.items()]
    if not rows:
        rows.append("| _(no failures)_ | 0 |")
    return "\n".join([header, separator, *rows])


def _format_number(value: float | None) -> str:
    return "-" if value is None else f"{value:g}"


def _format_failures(failures: Sequence["Verdict"]) -> str:
    if not failures:
        return "- Every iteration passed."
    sections: list[str] = []
    for verdict in failures:
        channel = "-" if verdict.channel is None else str(verdict.channel)
        sections.append(
            "\n".join(
                [
                    f"### Iteration {verdict.iteration}",
                    f"- **Case:** {verdict.case.describe()}",
                    f"- **Check:** {verdict.check}",
                    f"- **Channel:** {channel}",
                    f"- **Expected:** {_format_number(verdict.expected)}",
                    f"- **Observed:** {_format_number(verdict.observed)}",
                    f"> {verdict.message}",
                ]
            )
        )
    return "\n\n".join(sections)


def _format_duration(duration: "timedelta") -> str:
    total_seconds = duration.total_seconds()
    if total_seconds < 1:
        return f"{total_seconds * 1000:.0f} ms"
    return f"{total_seconds:.2f} s"


def _resolve_report_path(result: "RunResult", path: Path | None) -> Path:
    if path is not None:
        return Path(path).expanduser().resolve()
    timestamp = result.started_at.astimezone(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return (Path("reports") / f"rng-{timestamp}.md").resolve()


__all__ = [
    "DEFAULT_TEMPLATE",
    "ReportTemplate",
    "build_markdown_report",
    "format_verdict",
    "print_console_summary",
    "write_markdown_report",
]
