"""
I/O Churn Generator

Writes a fixed random payload to a file and reads it back, once per
iteration. Safe and local: the only file touched is either a generated temp
file (deleted afterwards on every path) or a path the caller chose (never
deleted).
"""

from __future__ import annotations

import logging
import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

from chaoscli.errors import ConfigurationError, IOFailure
from chaoscli.settings import get_settings
from chaoscli.stress.outcome import ExitOutcome

logger = logging.getLogger("chaoscli.stress")

TEMP_PREFIX = "chaoscli-iospam-"

ProgressCallback = Callable[[int, int], None]


def generate_temp_path(directory: str | None = None) -> Path:
    """Unique churn file path in the configured temp directory."""
    base = Path(directory or get_settings().temp_dir)
    return base / f"{TEMP_PREFIX}{uuid.uuid4().hex}.bin"


@contextmanager
def owned_path(file_path: str | None, directory: str | None = None) -> Iterator[tuple[Path, bool]]:
    """
    Resolve the churn target.

    Yields ``(path, owned)``. A generated path is owned and removed on exit,
    whatever happened inside the block. A caller-supplied path is left alone.
    """
    if file_path is not None:
        yield Path(file_path), False
        return

    path = generate_temp_path(directory)
    try:
        yield path, True
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temp file {path}: {e}")


def churn_file(
    path: Path,
    iterations: int,
    payload: bytes,
    on_progress: ProgressCallback | None = None,
) -> int:
    """
    Run the write/read cycles against ``path``.

    Returns:
        Number of completed iterations

    Raises:
        IOFailure: On the first failed write or read
    """
    for i in range(1, iterations + 1):
        try:
            path.write_bytes(payload)
            read_back = len(path.read_bytes())
        except OSError as e:
            raise IOFailure(str(path), i, e.strerror or str(e), cause=e) from e

        if read_back != len(payload):
            raise IOFailure(str(path), i, f"read {read_back} bytes, wrote {len(payload)}")

        logger.debug(f"Iteration {i}/{iterations}")
        if on_progress is not None:
            on_progress(i, iterations)

    return iterations


def churn(
    iterations: int,
    bytes_per_iteration: int,
    file_path: str | None = None,
    dry_run: bool = False,
    on_progress: ProgressCallback | None = None,
) -> ExitOutcome:
    """
    Generate disk I/O by repeatedly writing and reading one file.

    Args:
        iterations: Number of write+read cycles
        bytes_per_iteration: Payload size
        file_path: Target file (default: generated temp file, deleted afterwards)
        dry_run: Return 0 without creating any file
        on_progress: Called with (iteration, total) after each cycle

    Returns:
        ExitOutcome; an IOFailure outcome if any write or read failed
    """
    for name, value in (("iterations", iterations), ("bytes_per_iteration", bytes_per_iteration)):
        if value < 0:
            raise ConfigurationError(
                f"io-spam: {name} must be >= 0, got {value}",
                stressor="io-spam",
                parameter=name,
                value=value,
            )

    if dry_run:
        target = file_path or str(generate_temp_path())
        return ExitOutcome.success("Dry-run: no file written.", path=target)

    payload = os.urandom(bytes_per_iteration)

    with owned_path(file_path) as (path, owned):
        logger.info(f"Churning {iterations}x{bytes_per_iteration} bytes through {path}")
        details = {"path": str(path), "owned": owned}
        try:
            if owned and iterations == 0:
                # Keep the create/delete lifecycle even without cycles.
                path.touch()
            completed = churn_file(path, iterations, payload, on_progress)
        except IOFailure as e:
            return ExitOutcome.from_error(e, iterations_completed=e.iteration - 1, **details)
        except OSError as e:
            error = IOFailure(str(path), 0, e.strerror or str(e), cause=e)
            return ExitOutcome.from_error(error, iterations_completed=0, **details)

    return ExitOutcome.success("Done.", iterations_completed=completed, **details)
