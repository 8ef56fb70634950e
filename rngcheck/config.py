"""Configuration parsing utilities for the random generator checker."""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Tuple

from .cases import DEFAULT_TOTAL_SAMPLES
from .checks.histogram import DEFAULT_MAX_HISTOGRAM_SIZE
from .checks.reproducibility import DEFAULT_MAX_SLICES
from .checks.sphere import DEFAULT_MAX_SPHERE_DIMENSION, MIN_SPHERE_DIMENSION
from .errors import InvalidConfigurationError, MissingFileError
from .logging import DEFAULT_LOG_PATH, LOG_FORMATS
from .orchestrator import DEFAULT_ITERATIONS, RunSettings

DEFAULT_SEED = 0
DEFAULT_GENERATOR_SEED = 12345
MAX_SPHERE_DIMENSION = 30
DEFAULT_LOG_RETENTION = 100
# Normal histograms lose three degrees of freedom; four buckets leave one.
MIN_HISTOGRAM_SIZE = 4


@dataclass(frozen=True)
class RunSection:
    """Options of the ``[run]`` section."""

    settings: RunSettings
    seed: int
    generator_seed: int
    generator: str | None = None


@dataclass(frozen=True)
class OutputSection:
    """Options controlling how results should be presented to the user."""

    log_results: bool
    report_path: Path | None
    run_log_path: Path
    run_log_format: str
    run_log_retention: int | None


@dataclass(frozen=True)
class RngCheckConfig:
    """Aggregate configuration container returned by :func:`load_config`."""

    run: RunSection
    output: OutputSection
    source: Path | None = None
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def with_overrides(
        self,
        *,
        iterations: int | None = None,
        seed: int | None = None,
        generator_seed: int | None = None,
        generator: str | None = None,
    ) -> "RngCheckConfig":
        """Return a copy with command line overrides applied."""

        run = self.run
        if iterations is not None:
            if iterations < 1:
                raise InvalidConfigurationError("Iteration count must be a positive integer.")
            run = replace(run, settings=replace(run.settings, iterations=iterations))
        if seed is not None:
            run = replace(run, seed=seed)
        if generator_seed is not None:
            run = replace(run, generator_seed=generator_seed)
        if generator is not None:
            run = replace(run, generator=generator)
        return replace(self, run=run)


def default_config(base_dir: Path | None = None) -> RngCheckConfig:
    """Return the configuration used when no file is supplied."""

    parser = configparser.ConfigParser()
    return _build_config(parser, base_dir or Path.cwd(), source=None)


def load_config(path: Path) -> RngCheckConfig:
    """Load and validate an INI configuration file."""

    parser = configparser.ConfigParser()
    try:
        with path.open("r", encoding="utf-8") as config_file:
            parser.read_file(config_file)
    except FileNotFoundError as exc:
        raise MissingFileError(f"Configuration file not found: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem guard
        raise MissingFileError(f"Could not read configuration file: {path}") from exc
    except configparser.Error as exc:
        raise InvalidConfigurationError(f"Configuration is not valid INI: {exc}") from exc

    return _build_config(parser, path.resolve().parent, source=path)


def _build_config(
    parser: configparser.ConfigParser, base_dir: Path, *, source: Path | None
) -> RngCheckConfig:
    warnings: list[str] = []
    run_section = _parse_run(parser, warnings)
    output_section = _parse_output(parser, base_dir)
    return RngCheckConfig(
        run=run_section,
        output=output_section,
        source=source,
        warnings=tuple(warnings),
    )


def _get_int(
    section: configparser.SectionProxy,
    key: str,
    default: int,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    if key not in section:
        return default
    raw_value = section[key].strip()
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise InvalidConfigurationError(
            f"Option '{key}' in [{section.name}] must be an integer value."
        ) from exc
    if minimum is not None and value < minimum:
        raise InvalidConfigurationError(
            f"Option '{key}' in [{section.name}] must be at least {minimum}."
        )
    if maximum is not None and value > maximum:
        raise InvalidConfigurationError(
            f"Option '{key}' in [{section.name}] must be at most {maximum}."
        )
    return value


def _get_bool(section: configparser.SectionProxy, key: str, default: bool) -> bool:
    if key not in section:
        return default
    try:
        return section.getboolean(key)
    except ValueError as exc:
        raise InvalidConfigurationError(
            f"Option '{key}' in [{section.name}] must be a boolean value."
        ) from exc


def _parse_run(parser: configparser.ConfigParser, warnings: list[str]) -> RunSection:
    if not parser.has_section("run"):
        return RunSection(
            settings=RunSettings(),
            seed=DEFAULT_SEED,
            generator_seed=DEFAULT_GENERATOR_SEED,
        )

    section = parser["run"]
    settings = RunSettings(
        iterations=_get_int(section, "iterations", DEFAULT_ITERATIONS, minimum=1),
        total_samples=_get_int(section, "total_samples", DEFAULT_TOTAL_SAMPLES, minimum=4),
        max_slices=_get_int(section, "max_slices", DEFAULT_MAX_SLICES, minimum=1),
        max_histogram_size=_get_int(
            section, "max_histogram_size", DEFAULT_MAX_HISTOGRAM_SIZE, minimum=MIN_HISTOGRAM_SIZE
        ),
        max_sphere_dimension=_get_int(
            section,
            "max_sphere_dimension",
            DEFAULT_MAX_SPHERE_DIMENSION,
            minimum=MIN_SPHERE_DIMENSION,
            maximum=MAX_SPHERE_DIMENSION,
        ),
        fail_fast=_get_bool(section, "fail_fast", False),
    )
    if settings.max_sphere_dimension > DEFAULT_MAX_SPHERE_DIMENSION:
        warnings.append(
            "Sphere dimensions above 10 leave few points inside the ball; "
            "expect noisier volume estimates."
        )

    generator = section.get("generator", "").strip() or None
    return RunSection(
        settings=settings,
        seed=_get_int(section, "seed", DEFAULT_SEED, minimum=0),
        generator_seed=_get_int(section, "generator_seed", DEFAULT_GENERATOR_SEED, minimum=0),
        generator=generator,
    )


def _resolve_path(base_dir: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate.resolve()


def _first_present(section: configparser.SectionProxy, names: Tuple[str, ...]) -> str | None:
    return next((name for name in names if name in section), None)


def _read_log_options(
    section: configparser.SectionProxy,
    base_dir: Path,
    options: Dict[str, Any],
    *,
    enable_key: str | None = None,
) -> None:
    # ``enabled`` is only recognised in [logging]; ``log_results`` wins when both are set.
    for key in (enable_key, "log_results"):
        if key is not None and key in section:
            options["enabled"] = _get_bool(section, key, options["enabled"])

    key = _first_present(section, ("log_path", "path"))
    if key is not None and section[key].strip():
        options["path"] = _resolve_path(base_dir, section[key].strip())

    key = _first_present(section, ("log_format", "format"))
    if key is not None:
        log_format = section[key].strip().lower()
        if log_format not in LOG_FORMATS:
            raise InvalidConfigurationError(
                f"Option '{key}' in [{section.name}] must be one of: {', '.join(LOG_FORMATS)}."
            )
        options["format"] = log_format

    key = _first_present(section, ("log_retention", "retention"))
    if key is not None and section[key].strip():
        retention = _get_int(section, key, 0)
        options["retention"] = retention if retention > 0 else None


def _parse_output(parser: configparser.ConfigParser, base_dir: Path) -> OutputSection:
    report_path: Path | None = None
    log_options: Dict[str, Any] = {
        "enabled": False,
        "path": (base_dir / DEFAULT_LOG_PATH).resolve(),
        "format": "jsonl",
        "retention": DEFAULT_LOG_RETENTION,
    }

    if parser.has_section("output"):
        output = parser["output"]
        raw_report = output.get("report_path", "").strip()
        if raw_report:
            report_path = _resolve_path(base_dir, raw_report)
        _read_log_options(output, base_dir, log_options)

    if parser.has_section("logging"):
        _read_log_options(parser["logging"], base_dir, log_options, enable_key="enabled")

    return OutputSection(
        log_results=log_options["enabled"],
        report_path=report_path,
        run_log_path=log_options["path"],
        run_log_format=log_options["format"],
        run_log_retention=log_options["retention"],
    )


__all__ = [
    "OutputSection",
    "RngCheckConfig",
    "RunSection",
    "default_config",
    "load_config",
]
