"""Application orchestration for the random generator checker CLI."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Sequence, TextIO

import numpy as np

from .analysis import RunSummary, summarize_verdicts
from .config import RngCheckConfig, default_config, load_config
from .errors import CheckExecutionError, PreconditionError
from .generators import GeneratorFactory, NumpyGenerator, RandomGenerator, load_generator_factory
from .logging import log_run_result
from .orchestrator import RunSettings, Verdict, run_iterations
from .reporting import print_console_summary, write_markdown_report


@dataclass(frozen=True)
class RunResult:
    """Summary of a full application run."""

    config_path: Path | None
    generator_name: str
    generator_seed: int
    seed: int
    settings: RunSettings
    verdicts: Sequence[Verdict]
    summary: RunSummary
    started_at: datetime
    duration: timedelta
    report_path: Path | None = None

    @property
    def passed(self) -> bool:
        return self.summary.passed


class RandomGeneratorCheckerApp:
    """High level service wiring configuration, execution, and rendering."""

    def __init__(self, generator_factory: GeneratorFactory | None = None) -> None:
        self._generator_factory = generator_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def run(
        self,
        config_path: Path | None = None,
        *,
        iterations: int | None = None,
        seed: int | None = None,
        generator_seed: int | None = None,
        generator: str | None = None,
        report_path: Path | None = None,
        verbose: bool = False,
        stream: TextIO | None = None,
    ) -> RunResult:
        """Execute the validation workflow."""

        config = self._load_config(config_path).with_overrides(
            iterations=iterations,
            seed=seed,
            generator_seed=generator_seed,
            generator=generator,
        )
        target = self._build_generator(config)
        result = self._execute(config, target)

        resolved_report = report_path or config.output.report_path
        if resolved_report is not None:
            written = write_markdown_report(result, resolved_report)
            result = replace(result, report_path=written)
        print_console_summary(result, verbose=verbose, stream=stream)
        if config.output.log_results:
            log_run_result(
                result,
                result.report_path,
                log_path=config.output.run_log_path,
                fmt=config.output.run_log_format,
                retention=config.output.run_log_retention,
            )
        return result

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------
    def _load_config(self, path: Path | None) -> RngCheckConfig:
        if path is None:
            return default_config()
        return load_config(path)

    def _build_generator(self, config: RngCheckConfig) -> RandomGenerator:
        factory = self._generator_factory
        if config.run.generator is not None:
            factory = load_generator_factory(config.run.generator)
        if factory is None:
            factory = NumpyGenerator
        return factory(config.run.generator_seed)

    def _execute(self, config: RngCheckConfig, target: RandomGenerator) -> RunResult:
        settings = config.run.settings
        source = np.random.default_rng(config.run.seed)
        started_at = datetime.now(timezone.utc)
        started = time.perf_counter()

        try:
            verdicts = run_iterations(target, settings, source)
        except PreconditionError as exc:
            raise CheckExecutionError(f"Validation aborted by an internal error: {exc}") from exc

        return RunResult(
            config_path=config.source,
            generator_name=getattr(target, "name", type(target).__name__),
            generator_seed=config.run.generator_seed,
            seed=config.run.seed,
            settings=settings,
            verdicts=tuple(verdicts),
            summary=summarize_verdicts(verdicts),
            started_at=started_at,
            duration=timedelta(seconds=time.perf_counter() - started),
        )


__all__ = ["RandomGeneratorCheckerApp", "RunResult"]
