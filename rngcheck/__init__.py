"""Statistical validator for buffer-filling random number generators."""

from .analysis import RunSummary
from .app import RandomGeneratorCheckerApp, RunResult
from .orchestrator import RunSettings, Verdict

__all__ = [
    "RandomGeneratorCheckerApp",
    "RunResult",
    "RunSettings",
    "RunSummary",
    "Verdict",
]
