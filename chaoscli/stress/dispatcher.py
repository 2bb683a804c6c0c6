"""
Stressor Dispatcher

Composition root of the engine: routes a validated configuration to its
component and hands back the component's outcome unchanged. The only
translation it performs is turning an error no component anticipated into
the fixed fallback outcome.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Callable

from chaoscli.errors import ChaosError, ConfigurationError, UnrecoverableError
from chaoscli.stress.clock import exit_with, wait
from chaoscli.stress.config import (
    BurnConfig,
    ChurnConfig,
    ExitConfig,
    SpikeConfig,
    StressorConfig,
    WaitConfig,
)
from chaoscli.stress.cpu import burn
from chaoscli.stress.disk import churn
from chaoscli.stress.memory import spike
from chaoscli.stress.outcome import FALLBACK_EXIT_CODE, ExitOutcome, StressorKind

logger = logging.getLogger("chaoscli.stress")

Reporter = Callable[[str], None]

_TITLES = {
    StressorKind.WAIT: "Timeout",
    StressorKind.BURN: "CPU burn",
    StressorKind.SPIKE: "Memory spike",
    StressorKind.CHURN: "IO spam",
    StressorKind.EXIT: "Exit",
}

_DESCRIPTIONS = {
    StressorKind.WAIT: "Simulates a timeout by waiting and optionally exiting with a failure code.",
    StressorKind.BURN: "Burns CPU for N seconds with configurable parallelism.",
    StressorKind.SPIKE: "Allocates memory to simulate pressure and optionally holds it.",
    StressorKind.CHURN: "Writes/reads a temp file repeatedly to simulate IO load (safe, local).",
    StressorKind.EXIT: "Exits immediately with a chosen exit code (useful for pipeline tests).",
}


def list_stressors() -> list[dict[str, str]]:
    """List available stressors with their descriptions."""
    return [
        {"name": kind.value, "description": _DESCRIPTIONS[kind]}
        for kind in StressorKind
    ]


def stressor_title(kind: StressorKind) -> str:
    return _TITLES[kind]


def preview(config: StressorConfig) -> str:
    """One-line headline of what ``config`` will do, e.g. ``Timeout: wait 2000ms, then exit 0``."""
    return f"{stressor_title(config.kind)}: {config.describe()}"


def _megabyte_progress(reporter: Reporter | None) -> Callable[[float], None] | None:
    if reporter is None:
        return None

    def on_progress(committed_mb: float) -> None:
        reporter(f"Allocated {committed_mb:g}MB")

    return on_progress


def _iteration_progress(reporter: Reporter | None) -> Callable[[int, int], None] | None:
    if reporter is None:
        return None

    def on_progress(iteration: int, total: int) -> None:
        reporter(f"Iteration {iteration}/{total}")

    return on_progress


def _route(config: StressorConfig, reporter: Reporter | None) -> ExitOutcome:
    dry_run = config.mode.dry_run

    if isinstance(config, WaitConfig):
        return wait(config.duration_ms, config.exit_code, dry_run=dry_run)

    if isinstance(config, BurnConfig):
        return burn(config.seconds, config.parallelism, dry_run=dry_run)

    if isinstance(config, SpikeConfig):
        return spike(
            config.megabytes,
            config.hold_seconds,
            dry_run=dry_run,
            on_progress=_megabyte_progress(reporter),
        )

    if isinstance(config, ChurnConfig):
        return churn(
            config.iterations,
            config.bytes_per_iteration,
            config.file_path,
            dry_run=dry_run,
            on_progress=_iteration_progress(reporter),
        )

    if isinstance(config, ExitConfig):
        return exit_with(config.code, dry_run=dry_run)

    raise ConfigurationError(f"Unknown stressor configuration: {type(config).__name__}")


def run(config: StressorConfig, reporter: Reporter | None = None) -> ExitOutcome:
    """
    Run one stressor.

    Args:
        config: Validated stressor configuration
        reporter: Receives progress lines; only used when ``config.mode.verbose``

    Returns:
        The component's ExitOutcome, or the fallback outcome (code 99)
        for an unanticipated error
    """
    if not config.mode.verbose:
        reporter = None

    logger.debug(f"Dispatching {config.kind.value} (dry_run={config.mode.dry_run})")

    try:
        return _route(config, reporter)

    except UnrecoverableError as e:
        logger.exception(f"{config.kind.value} failed: {e}")
        return _fallback(config, e)

    except ChaosError as e:
        return ExitOutcome.from_error(e)

    except Exception as e:
        logger.exception(f"{config.kind.value} failed unexpectedly")
        return _fallback(config, e)


def _fallback(config: StressorConfig, error: Exception) -> ExitOutcome:
    details: dict[str, Any] = {"stressor": config.kind.value}
    if not isinstance(error, UnrecoverableError):
        error = UnrecoverableError(
            f"Fatal: {error}",
            cause=error,
        )
        error.context.stack_trace = traceback.format_exc()
    error.context.stressor = error.context.stressor or config.kind.value
    return ExitOutcome(
        code=FALLBACK_EXIT_CODE,
        message=str(error),
        error=error,
        details=details,
    )
