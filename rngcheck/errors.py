"""Custom exceptions for the random generator checker."""

from __future__ import annotations


class RngCheckError(Exception):
    """Base error type for application specific failures."""


class MissingFileError(RngCheckError):
    """Raised when a required input file could not be located."""


class InvalidConfigurationError(RngCheckError):
    """Raised when the configuration file is malformed or invalid."""


class CheckExecutionError(RngCheckError):
    """Raised when a validation check could not be executed."""


class PreconditionError(RngCheckError):
    """Raised when a check receives malformed parameters.

    This signals a bug in the checker itself rather than a defect of the
    generator under test.
    """


class InvalidOutputError(RngCheckError):
    """Raised when the generator output violates one of its contracts."""

    def __init__(
        self,
        message: str,
        *,
        check: str,
        channel: int | None = None,
        expected: float | None = None,
        observed: float | None = None,
    ) -> None:
        super().__init__(message)
        self.check = check
        self.channel = channel
        self.expected = expected
        self.observed = observed
