"""
Allocation Manager

Commits a target amount of memory in fixed-size chunks, optionally holds
it, then releases all of it before returning.

Every page of every chunk is written once so the OS actually backs it with
physical (or swap) memory instead of a lazy reservation.
"""

from __future__ import annotations

import gc
import logging
import time
from typing import Callable, Iterator

from chaoscli.errors import ConfigurationError, ResourceExhaustionError
from chaoscli.stress.outcome import ExitOutcome

logger = logging.getLogger("chaoscli.stress")

MIB = 1024 * 1024
CHUNK_BYTES = 8 * MIB
PAGE_BYTES = 4096
_TOUCH_VALUE = 123

ProgressCallback = Callable[[float], None]


def touch_pages(chunk: bytearray, stride: int = PAGE_BYTES) -> None:
    """Write one byte per page so the chunk is committed."""
    for offset in range(0, len(chunk), stride):
        chunk[offset] = _TOUCH_VALUE


class AllocationManager:
    """
    Sole owner of the chunks acquired for one spike.

    Chunks are only ever referenced from ``self.chunks``; ``release()``
    clearing that list is the only way they are freed.

    Usage:
        manager = AllocationManager(256)
        try:
            manager.acquire()
            manager.hold(5)
        finally:
            manager.release()
    """

    def __init__(
        self,
        megabytes: int,
        chunk_bytes: int = CHUNK_BYTES,
        on_progress: ProgressCallback | None = None,
        allocator: Callable[[int], bytearray] = bytearray,
    ) -> None:
        if megabytes < 0:
            raise ConfigurationError(
                f"mem-spike: megabytes must be >= 0, got {megabytes}",
                stressor="mem-spike",
                parameter="megabytes",
                value=megabytes,
            )
        self.megabytes = megabytes
        self.target_bytes = megabytes * MIB
        self.chunk_bytes = chunk_bytes
        self.chunks: list[bytearray] = []
        self.allocated_bytes = 0
        self._on_progress = on_progress
        self._allocator = allocator

    @property
    def committed_mb(self) -> float:
        return self.allocated_bytes / MIB

    @property
    def chunk_count(self) -> int:
        """Number of chunks ``acquire`` will request for the full target."""
        return -(-self.target_bytes // self.chunk_bytes)

    def chunk_sizes(self) -> Iterator[int]:
        """Yield the sizes of the chunks ``acquire`` will request, in order."""
        requested = 0
        while requested < self.target_bytes:
            size = min(self.chunk_bytes, self.target_bytes - requested)
            requested += size
            yield size

    def acquire(self) -> None:
        """
        Allocate and touch chunks until the target is reached.

        Each chunk goes straight into ``self.chunks`` before it is touched,
        so no local name (and no traceback frame) ever holds one.

        Raises:
            ResourceExhaustionError: If the platform refuses an allocation.
                Chunks acquired so far stay in ``self.chunks`` for the
                caller's ``release()``.
        """
        for size in self.chunk_sizes():
            committed = len(self.chunks)
            try:
                self.chunks.append(self._allocator(size))
                touch_pages(self.chunks[-1])
            except MemoryError as e:
                # A chunk that failed mid-touch was never committed.
                del self.chunks[committed:]
                logger.warning(
                    f"Allocation refused after {self.committed_mb:g}MB "
                    f"of {self.megabytes}MB"
                )
                raise ResourceExhaustionError(self.megabytes, self.committed_mb, cause=e) from e

            self.allocated_bytes += size
            logger.debug(f"Allocated {self.committed_mb:g}MB")

            if self._on_progress is not None:
                self._on_progress(self.committed_mb)

    def hold(self, seconds: float) -> None:
        """Block while every chunk stays reachable."""
        if seconds > 0:
            logger.info(f"Holding {self.committed_mb:g}MB for {seconds}s")
            time.sleep(seconds)

    def release(self) -> None:
        """Drop every chunk reference and ask the collector to reclaim them."""
        released = len(self.chunks)
        self.chunks.clear()
        self.allocated_bytes = 0
        gc.collect()
        logger.debug(f"Released {released} chunks")


def spike(
    megabytes: int,
    hold_seconds: float = 5,
    dry_run: bool = False,
    on_progress: ProgressCallback | None = None,
) -> ExitOutcome:
    """
    Commit ``megabytes`` of memory, hold it, then release it.

    Args:
        megabytes: Amount to commit
        hold_seconds: How long to hold the memory (0 = release immediately)
        dry_run: Return 0 without allocating
        on_progress: Called with cumulative committed MB after each chunk

    Returns:
        ExitOutcome; a ResourceExhaustionError outcome if memory ran out
    """
    manager = AllocationManager(megabytes, on_progress=on_progress)
    if hold_seconds < 0:
        raise ConfigurationError(
            f"mem-spike: hold_seconds must be >= 0, got {hold_seconds}",
            stressor="mem-spike",
            parameter="hold_seconds",
            value=hold_seconds,
        )

    if dry_run:
        return ExitOutcome.success("Dry-run: nothing allocated.")

    logger.info(f"Allocating {megabytes}MB in {manager.chunk_count} chunks")
    chunk_count = 0
    committed_mb = 0.0
    try:
        manager.acquire()
        chunk_count = len(manager.chunks)
        committed_mb = manager.committed_mb
        manager.hold(hold_seconds)
    except ResourceExhaustionError as e:
        return ExitOutcome.from_error(e, chunks=len(manager.chunks), committed_mb=e.committed_mb)
    finally:
        manager.release()

    return ExitOutcome.success("Released.", chunks=chunk_count, committed_mb=committed_mb)
