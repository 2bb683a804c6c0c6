"""
Stressor configuration.

One frozen dataclass per stressor kind. Validation runs in __post_init__, so
an invalid configuration raises ConfigurationError before anything executes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chaoscli.errors import ConfigurationError
from chaoscli.stress.outcome import StressorKind


@dataclass(frozen=True)
class RunMode:
    """Orthogonal execution flags attached to every configuration."""

    dry_run: bool = False
    verbose: bool = False


def _require_non_negative(kind: StressorKind, parameter: str, value: int) -> None:
    if value < 0:
        raise ConfigurationError(
            f"{kind.value}: {parameter} must be >= 0, got {value}",
            stressor=kind.value,
            parameter=parameter,
            value=value,
        )


@dataclass(frozen=True)
class WaitConfig:
    """Block for ``duration_ms`` then exit with ``exit_code``."""

    duration_ms: int
    exit_code: int = 0
    mode: RunMode = field(default_factory=RunMode)

    kind = StressorKind.WAIT

    def __post_init__(self) -> None:
        _require_non_negative(self.kind, "duration_ms", self.duration_ms)

    def describe(self) -> str:
        return f"wait {self.duration_ms}ms, then exit {self.exit_code}"


@dataclass(frozen=True)
class BurnConfig:
    """Burn CPU for ``seconds`` on ``parallelism`` workers (None = all logical CPUs)."""

    seconds: float
    parallelism: int | None = None
    mode: RunMode = field(default_factory=RunMode)

    kind = StressorKind.BURN

    def __post_init__(self) -> None:
        _require_non_negative(self.kind, "seconds", self.seconds)
        if self.parallelism is not None and self.parallelism < 1:
            raise ConfigurationError(
                f"{self.kind.value}: parallelism must be >= 1 when set, got {self.parallelism}",
                stressor=self.kind.value,
                parameter="parallelism",
                value=self.parallelism,
            )

    def describe(self) -> str:
        workers = self.parallelism if self.parallelism is not None else "all logical CPU"
        return f"burn CPU for {self.seconds:g}s with {workers} workers"


@dataclass(frozen=True)
class SpikeConfig:
    """Commit ``megabytes`` of memory and hold it for ``hold_seconds``."""

    megabytes: int
    hold_seconds: float = 5
    mode: RunMode = field(default_factory=RunMode)

    kind = StressorKind.SPIKE

    def __post_init__(self) -> None:
        _require_non_negative(self.kind, "megabytes", self.megabytes)
        _require_non_negative(self.kind, "hold_seconds", self.hold_seconds)

    def describe(self) -> str:
        return f"allocate ~{self.megabytes}MB, hold {self.hold_seconds:g}s"


@dataclass(frozen=True)
class ChurnConfig:
    """Write then read ``bytes_per_iteration`` bytes, ``iterations`` times."""

    iterations: int
    bytes_per_iteration: int
    file_path: str | None = None
    mode: RunMode = field(default_factory=RunMode)

    kind = StressorKind.CHURN

    def __post_init__(self) -> None:
        _require_non_negative(self.kind, "iterations", self.iterations)
        _require_non_negative(self.kind, "bytes_per_iteration", self.bytes_per_iteration)
        if self.file_path is not None and not self.file_path.strip():
            raise ConfigurationError(
                f"{self.kind.value}: file_path must not be empty",
                stressor=self.kind.value,
                parameter="file_path",
                value=self.file_path,
            )

    def describe(self) -> str:
        target = self.file_path or "temp file"
        return f"{self.iterations} iters, {self.bytes_per_iteration} bytes, file: {target}"


@dataclass(frozen=True)
class ExitConfig:
    """Exit immediately with ``code``."""

    code: int
    mode: RunMode = field(default_factory=RunMode)

    kind = StressorKind.EXIT

    def describe(self) -> str:
        return f"returning code {self.code}"


StressorConfig = WaitConfig | BurnConfig | SpikeConfig | ChurnConfig | ExitConfig
