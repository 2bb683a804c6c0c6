"""
chaoscli - Operator Output

Rich console rendering and logging setup for the CLI. The stressor engine
never prints; everything the operator sees goes through here.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.theme import Theme

from chaoscli.settings import get_settings
from chaoscli.stress.config import StressorConfig
from chaoscli.stress.outcome import ExitOutcome

logger = logging.getLogger("chaoscli.console")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

_theme = Theme(
    {
        "headline": "bold yellow",
        "muted": "grey50",
        "timestamp": "dim",
        "error": "bold red",
        "success": "bold green",
    }
)

_console: Console | None = None


def get_console() -> Console:
    """Shared console, created on first use so settings are honoured."""
    global _console
    if _console is None:
        _console = Console(theme=_theme, no_color=get_settings().no_color)
    return _console


def set_console(console: Console | None) -> None:
    global _console
    _console = console


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging; ``verbose`` forces DEBUG."""
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    logging.getLogger().setLevel(level)


def headline(title: str, text: str) -> None:
    """Print the ``Title: what will happen`` line shown before every run."""
    get_console().print(f"[headline]{escape(title)}[/headline]: {escape(text)}", highlight=False)


def config_panel(title: str, config: StressorConfig) -> None:
    """Print the resolved parameters of ``config`` in a panel (verbose mode)."""
    lines = [
        f"{field.name}: {escape(str(getattr(config, field.name)))}"
        for field in fields(config)
        if field.name != "mode"
    ]
    lines.append(f"dry_run: {config.mode.dry_run}")
    get_console().print(Panel("\n".join(lines), title=f"{escape(title)} Configuration"))


def progress(message: str, *, timestamp: bool = True) -> None:
    """Print a muted progress line (verbose mode)."""
    ts = datetime.now().strftime("%H:%M:%S") + " " if timestamp else ""
    get_console().print(f"[timestamp]{ts}[/timestamp][muted]{escape(message)}[/muted]", highlight=False)


def report_outcome(outcome: ExitOutcome, dry_run: bool = False) -> None:
    """
    Render a stressor outcome.

    Dry-run messages are muted, failures show their error code in red,
    everything else is green.
    """
    console = get_console()
    if outcome.error is not None:
        console.print(f"[error]Failed:[/error] {escape(str(outcome.error))} (exit {outcome.code})", highlight=False)
        logger.debug(f"Outcome: {outcome.to_dict()}")
        return

    if outcome.message:
        style = "muted" if dry_run else "success"
        console.print(f"[{style}]{escape(outcome.message)}[/{style}]", highlight=False)
