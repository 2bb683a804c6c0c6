"""
Deadline-Bound Worker Pool

Burns CPU on N independent worker processes until a shared deadline:
- The deadline is computed once and handed to each worker by value
- Workers spin on a side-effect-free LCG, checking the deadline every iteration
- The pool joins every worker before returning
- Reaching the deadline is success; any other worker exit is a failure

Processes rather than threads, since threads would serialize on the
interpreter lock and never load more than one core.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, Future, ProcessPoolExecutor
from concurrent.futures import wait as wait_all
from dataclasses import dataclass
from typing import Callable

import psutil

from chaoscli.errors import ConfigurationError, UnrecoverableError, WorkerFailure
from chaoscli.stress.outcome import ExitOutcome

logger = logging.getLogger("chaoscli.stress")

# Park-Miller minimal standard parameters
_LCG_MULTIPLIER = 48271
_LCG_MODULUS = 0x7FFFFFFF


@dataclass(frozen=True)
class WorkerDeadline:
    """
    A single absolute point in time shared by every worker of one pool.

    Wall-clock based so the value stays meaningful across processes.
    Never mutated after creation.
    """

    at: float

    @classmethod
    def after(cls, seconds: float) -> WorkerDeadline:
        return cls(at=time.time() + seconds)

    def expired(self) -> bool:
        return time.time() >= self.at

    def remaining(self) -> float:
        return max(0.0, self.at - time.time())


def burn_until(deadline: WorkerDeadline) -> int:
    """
    Spin until ``deadline`` expires.

    Pure function of the deadline: no shared state, no I/O.

    Returns:
        Number of loop iterations performed
    """
    x = 0
    iterations = 0
    while not deadline.expired():
        x = (x * _LCG_MULTIPLIER + 1) % _LCG_MODULUS
        iterations += 1
    return iterations


def default_parallelism() -> int:
    """Number of logical CPUs, or 1 if it cannot be determined."""
    return psutil.cpu_count(logical=True) or 1


@dataclass
class PoolResult:
    """What happened to the workers of one pool run."""

    workers: int
    iterations: int = 0
    failures: list[BaseException] | None = None

    @property
    def failed(self) -> int:
        return len(self.failures or [])


class DeadlineWorkerPool:
    """
    Runs ``parallelism`` copies of a worker against one deadline.

    Usage:
        pool = DeadlineWorkerPool(4)
        result = pool.run(WorkerDeadline.after(10))
    """

    def __init__(
        self,
        parallelism: int,
        executor_factory: Callable[[int], Executor] = ProcessPoolExecutor,
        worker: Callable[[WorkerDeadline], int] = burn_until,
    ) -> None:
        if parallelism < 1:
            raise ConfigurationError(
                f"cpu-burn: parallelism must be >= 1, got {parallelism}",
                stressor="cpu-burn",
                parameter="parallelism",
                value=parallelism,
            )
        self.parallelism = parallelism
        self._executor_factory = executor_factory
        self._worker = worker

    def run(self, deadline: WorkerDeadline) -> PoolResult:
        """
        Start every worker, then block until all of them have exited.

        Raises:
            UnrecoverableError: If the workers cannot be started at all
        """
        futures: list[Future[int]] = []
        try:
            # Leaving the executor context joins every started worker,
            # including on the error path.
            with self._executor_factory(self.parallelism) as executor:
                for _ in range(self.parallelism):
                    futures.append(executor.submit(self._worker, deadline))
                wait_all(futures)
        except (OSError, RuntimeError) as e:
            raise UnrecoverableError(
                f"Could not start {self.parallelism} CPU workers: {e}",
                cause=e,
            ) from e

        result = PoolResult(workers=self.parallelism, failures=[])
        for future in futures:
            error = future.exception()
            if error is not None:
                logger.error(f"CPU worker failed: {error!r}")
                result.failures.append(error)
            else:
                result.iterations += future.result()
        return result


def burn(seconds: float, parallelism: int | None = None, dry_run: bool = False) -> ExitOutcome:
    """
    Load ``parallelism`` CPUs for ``seconds``.

    Args:
        seconds: How long to burn
        parallelism: Worker count (default: logical CPU count)
        dry_run: Validate and return 0 without starting any worker

    Returns:
        ExitOutcome, success unless a worker failed for an unrelated reason
    """
    if seconds < 0:
        raise ConfigurationError(
            f"cpu-burn: seconds must be >= 0, got {seconds}",
            stressor="cpu-burn",
            parameter="seconds",
            value=seconds,
        )

    workers = parallelism if parallelism is not None else default_parallelism()
    pool = DeadlineWorkerPool(workers)

    if dry_run:
        return ExitOutcome.success("Dry-run: no load generated.", workers=workers)

    deadline = WorkerDeadline.after(seconds)
    logger.info(f"Burning CPU for {seconds}s on {workers} workers")
    started = time.monotonic()
    result = pool.run(deadline)
    elapsed = time.monotonic() - started
    logger.info(f"CPU burn finished after {elapsed:.2f}s, {result.iterations} iterations")

    details = {
        "workers": result.workers,
        "iterations": result.iterations,
        "elapsed_seconds": round(elapsed, 3),
    }
    if result.failures:
        error = WorkerFailure(result.failed, result.workers, repr(result.failures[0]))
        return ExitOutcome.from_error(error, **details)

    return ExitOutcome.success("Done.", **details)
