"""
chaoscli CLI - Command-line interface for the stressors.

Commands:
- chaoscli timeout    - Wait, then exit with a chosen code
- chaoscli cpu-burn   - Burn CPU for N seconds
- chaoscli mem-spike  - Allocate and hold memory
- chaoscli io-spam    - Write/read a temp file repeatedly
- chaoscli exit       - Exit immediately with a chosen code
- chaoscli list       - List available stressors

Every stressor accepts --dry-run and --verbose. The process exits with the
stressor's outcome code.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable

import psutil
import typer
from rich.markup import escape
from rich.table import Table

from chaoscli import __version__
from chaoscli.console import (
    config_panel,
    get_console,
    headline,
    progress,
    report_outcome,
    setup_logging,
)
from chaoscli.errors import ConfigurationError
from chaoscli.stress import (
    BurnConfig,
    ChurnConfig,
    ExitConfig,
    ExitOutcome,
    RunMode,
    SpikeConfig,
    StressorConfig,
    WaitConfig,
    list_stressors,
    run,
)
from chaoscli.stress.dispatcher import stressor_title
from chaoscli.stress.memory import MIB
from chaoscli.stress.outcome import FALLBACK_EXIT_CODE

# Initialize
app = typer.Typer(
    name="chaoscli",
    help="Controlled resource-exhaustion harness for chaos testing.",
    add_completion=False,
)

logger = logging.getLogger("chaoscli.cli")

INTERRUPTED_EXIT_CODE = 130

DryRunOption = typer.Option(False, "--dry-run", help="Prints what would happen, without doing it.")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose output.")


# ============================================================================
# Helper Functions
# ============================================================================


def _with_rss(message: str) -> None:
    """Progress line annotated with the process resident set size."""
    rss_mb = psutil.Process().memory_info().rss // MIB
    progress(f"{message} (rss {rss_mb}MB)")


def execute(
    build: Callable[[RunMode], StressorConfig],
    dry_run: bool,
    verbose: bool,
    reporter: Callable[[str], None] = progress,
) -> None:
    """
    Build, announce and run one stressor, then exit with its outcome code.

    Raises:
        typer.Exit: Always, carrying the outcome code
    """
    setup_logging(verbose)
    mode = RunMode(dry_run=dry_run, verbose=verbose)

    try:
        config = build(mode)
    except ConfigurationError as e:
        report_outcome(ExitOutcome.from_error(e))
        raise typer.Exit(code=e.exit_code)

    headline(stressor_title(config.kind), config.describe())
    if verbose:
        config_panel(stressor_title(config.kind), config)

    try:
        outcome = run(config, reporter=reporter)
    except KeyboardInterrupt:
        get_console().print("[muted]Interrupted.[/muted]")
        raise typer.Exit(code=INTERRUPTED_EXIT_CODE)

    report_outcome(outcome, dry_run=dry_run)
    logger.debug(f"Exiting with {outcome.code}")
    raise typer.Exit(code=outcome.code)


def version_callback(value: bool) -> None:
    if value:
        get_console().print(f"chaoscli {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """Controlled resource-exhaustion harness for chaos testing."""


# ============================================================================
# Commands
# ============================================================================


@app.command()
def timeout(
    ms: int = typer.Option(2000, "--ms", "-m", help="How long to wait (milliseconds)."),
    exit_code: int = typer.Option(0, "--exit-code", "-e", help="Exit code after waiting (0 means success)."),
    dry_run: bool = DryRunOption,
    verbose: bool = VerboseOption,
) -> None:
    """Simulates a timeout by waiting and optionally exiting with a failure code."""
    execute(lambda mode: WaitConfig(ms, exit_code, mode=mode), dry_run, verbose)


@app.command("cpu-burn")
def cpu_burn(
    seconds: int = typer.Option(5, "--seconds", "-s", help="Duration in seconds."),
    parallel: int = typer.Option(
        None, "--parallel", "-p", help="Number of workers (default: logical processor count)."
    ),
    dry_run: bool = DryRunOption,
    verbose: bool = VerboseOption,
) -> None:
    """Burns CPU for N seconds with configurable parallelism."""
    execute(lambda mode: BurnConfig(seconds, parallel, mode=mode), dry_run, verbose)


@app.command("mem-spike")
def mem_spike(
    mb: int = typer.Option(256, "--mb", "-m", help="Approx. megabytes to allocate."),
    hold: int = typer.Option(5, "--hold", "-h", help="How long to hold memory (seconds). 0 = release immediately."),
    dry_run: bool = DryRunOption,
    verbose: bool = VerboseOption,
) -> None:
    """Allocates memory to simulate pressure and optionally holds it."""
    execute(lambda mode: SpikeConfig(mb, hold, mode=mode), dry_run, verbose, reporter=_with_rss)


@app.command("io-spam")
def io_spam(
    iterations: int = typer.Option(50, "--iterations", "-n", help="How many iterations of write+read."),
    bytes_: int = typer.Option(1024 * 1024, "--bytes", "-b", help="Bytes to write each iteration."),
    file: str = typer.Option(None, "--file", "-f", help="Use a specific file path (default: temp file)."),
    dry_run: bool = DryRunOption,
    verbose: bool = VerboseOption,
) -> None:
    """Writes/reads a temp file repeatedly to simulate IO load (safe, local)."""
    execute(lambda mode: ChurnConfig(iterations, bytes_, file, mode=mode), dry_run, verbose)


@app.command("exit")
def exit_(
    code: int = typer.Option(1, "--code", "-c", help="Exit code to return (0-255 typical)."),
    dry_run: bool = DryRunOption,
    verbose: bool = VerboseOption,
) -> None:
    """Exits immediately with a chosen exit code (useful for pipeline tests)."""
    execute(lambda mode: ExitConfig(code, mode=mode), dry_run, verbose)


@app.command("list")
def list_cmd() -> None:
    """List available stressors."""
    table = Table(title="Available Stressors")
    table.add_column("Name", style="cyan")
    table.add_column("Description")

    for s in list_stressors():
        table.add_row(s["name"], s["description"])

    get_console().print(table)


# ============================================================================
# Entry Point
# ============================================================================


def main() -> None:
    """CLI entry point."""
    try:
        app()
    except Exception as e:
        get_console().print(f"[error]Fatal:[/error] {escape(str(e))}")
        sys.exit(FALLBACK_EXIT_CODE)


if __name__ == "__main__":
    main()
