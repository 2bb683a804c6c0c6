"""
chaoscli - Error Hierarchy

Structured errors for the stressor engine. Each class maps to a distinct
process exit code so an operator (or the pipeline wrapping chaoscli) can tell
which resource failed without parsing output.

Exit codes:
    2   ConfigurationError       invalid input, nothing executed
    3   ResourceExhaustionError  platform refused an allocation
    4   IOFailure                write/read error during churn
    5   WorkerFailure            a CPU worker died for an unrelated reason
    99  UnrecoverableError       anything unanticipated
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"           # Informational, can be ignored
    MEDIUM = "medium"     # Expected chaos outcome
    HIGH = "high"         # Operator input or environment problem
    CRITICAL = "critical" # Process cannot continue


@dataclass
class ErrorContext:
    """Which stressor, parameter and value triggered an error."""

    timestamp: datetime = field(default_factory=datetime.now)
    stressor: str | None = None
    parameter: str | None = None
    value: Any = None
    stack_trace: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "stressor": self.stressor,
            "parameter": self.parameter,
            "value": self.value,
            "stack_trace": self.stack_trace,
        }


class ChaosError(Exception):
    """
    Base exception for all chaoscli errors.

    Carries a stable error code, the exit code the process should end with,
    a severity, and context naming the stressor/parameter involved.
    """

    exit_code: int = 1

    def __init__(
        self,
        message: str,
        *,
        code: str = "CHAOS_ERROR",
        exit_code: int | None = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        recoverable: bool = False,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        if exit_code is not None:
            self.exit_code = exit_code
        self.severity = severity
        self.recoverable = recoverable
        self.context = context or ErrorContext()
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "exit_code": self.exit_code,
            "message": self.message,
            "severity": self.severity.value,
            "recoverable": self.recoverable,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code!r}, "
            f"message={self.message!r}, "
            f"severity={self.severity.value})"
        )


def _context(stressor: str | None, parameter: str | None, value: Any) -> ErrorContext:
    return ErrorContext(stressor=stressor, parameter=parameter, value=value)


class ConfigurationError(ChaosError):
    """Invalid stressor configuration, detected before any side effect."""

    exit_code = 2

    def __init__(
        self,
        message: str,
        *,
        stressor: str | None = None,
        parameter: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            code="CONFIG_INVALID",
            severity=ErrorSeverity.HIGH,
            context=_context(stressor, parameter, value),
            **kwargs,
        )
        self.parameter = parameter
        self.value = value


class ResourceExhaustionError(ChaosError):
    """The platform refused a memory allocation. Never retried."""

    exit_code = 3

    def __init__(self, requested_mb: int, committed_mb: float, **kwargs: Any) -> None:
        super().__init__(
            f"Memory exhausted after committing {committed_mb:g}MB "
            f"of {requested_mb}MB requested",
            code="RESOURCE_EXHAUSTED",
            context=_context("mem-spike", "megabytes", requested_mb),
            **kwargs,
        )
        self.requested_mb = requested_mb
        self.committed_mb = committed_mb


class IOFailure(ChaosError):
    """A write or read failed during I/O churn."""

    exit_code = 4

    def __init__(self, path: str, iteration: int, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"I/O failed on {path} at iteration {iteration}: {reason}",
            code="IO_FAILURE",
            context=_context("io-spam", "file_path", path),
            **kwargs,
        )
        self.path = path
        self.iteration = iteration


class WorkerFailure(ChaosError):
    """One or more CPU burn workers failed for a reason other than the deadline."""

    exit_code = 5

    def __init__(self, failed: int, total: int, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"{failed}/{total} CPU workers failed: {reason}",
            code="WORKER_FAILED",
            severity=ErrorSeverity.HIGH,
            context=_context("cpu-burn", "parallelism", total),
            **kwargs,
        )
        self.failed = failed
        self.total = total


class UnrecoverableError(ChaosError):
    """Unanticipated failure. Fatal and not retried."""

    exit_code = 99

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(
            message,
            code="UNRECOVERABLE",
            severity=ErrorSeverity.CRITICAL,
            **kwargs,
        )
