"""
Stressor outcomes.

An ExitOutcome is the single structured result of one stressor run. The
dispatcher returns it unchanged and the CLI turns ``code`` into the process
exit status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from chaoscli.errors import ChaosError

# Returned by the dispatcher for failures no component anticipated.
FALLBACK_EXIT_CODE = 99


class StressorKind(Enum):
    """The five stressor kinds, valued by their CLI command names."""

    WAIT = "timeout"
    BURN = "cpu-burn"
    SPIKE = "mem-spike"
    CHURN = "io-spam"
    EXIT = "exit"


def normalize_exit_code(code: int) -> int:
    """
    Truncate an integer into the platform exit-code range [0, 255].

    Uses POSIX wrap-around semantics, so 256 becomes 0 and -1 becomes 255.
    """
    return code % 256


@dataclass(frozen=True)
class ExitOutcome:
    """
    Result of a stressor invocation.

    Attributes:
        code: Process exit code, normalized into [0, 255]
        message: Optional human-readable status line
        error: The error behind a failure outcome, if any
        details: Structured facts about the run (chunks, iterations, ...)
    """

    code: int = 0
    message: str | None = None
    error: ChaosError | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", normalize_exit_code(self.code))

    @property
    def ok(self) -> bool:
        """True when the run ended with exit code 0."""
        return self.code == 0

    @classmethod
    def success(cls, message: str | None = None, **details: Any) -> ExitOutcome:
        return cls(code=0, message=message, details=details)

    @classmethod
    def from_error(cls, error: ChaosError, **details: Any) -> ExitOutcome:
        """Build a failure outcome carrying the error's exit code."""
        return cls(code=error.exit_code, message=str(error), error=error, details=details)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "error": self.error.to_dict() if self.error else None,
            "details": self.details,
        }
