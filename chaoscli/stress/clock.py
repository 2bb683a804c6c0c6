"""
Clock Waiter

Simulates a slow or hung step: blocks the calling thread for a fixed
duration, then yields a chosen exit code. Also hosts ``exit_with``, the
zero-duration variant used for pipeline exit-code tests.
"""

from __future__ import annotations

import logging
import time

from chaoscli.errors import ConfigurationError
from chaoscli.stress.outcome import ExitOutcome

logger = logging.getLogger("chaoscli.stress")


def wait(duration_ms: int, exit_code: int = 0, dry_run: bool = False) -> ExitOutcome:
    """
    Block for ``duration_ms`` milliseconds, then return ``exit_code``.

    Exit codes outside [0, 255] wrap POSIX-style (see normalize_exit_code).

    Args:
        duration_ms: Time to block, in milliseconds
        exit_code: Code to report after waiting
        dry_run: Return 0 immediately without blocking

    Returns:
        ExitOutcome with ``exit_code`` (0 under dry-run)
    """
    if duration_ms < 0:
        raise ConfigurationError(
            f"timeout: duration_ms must be >= 0, got {duration_ms}",
            stressor="timeout",
            parameter="duration_ms",
            value=duration_ms,
        )

    if dry_run:
        return ExitOutcome.success("Dry-run: no waiting performed.")

    logger.info(f"Waiting {duration_ms}ms before exiting with {exit_code}")
    if duration_ms > 0:
        time.sleep(duration_ms / 1000)

    return ExitOutcome(code=exit_code, details={"waited_ms": duration_ms})


def exit_with(code: int, dry_run: bool = False) -> ExitOutcome:
    """Return ``code`` immediately; always 0 under dry-run."""
    if dry_run:
        return ExitOutcome.success("Dry-run: exit code not applied.")
    return ExitOutcome(code=code)
