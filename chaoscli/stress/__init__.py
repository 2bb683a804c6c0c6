"""
chaoscli - Stressor Engine

Bounded, reversible resource stressors:
- wait: block for a duration, then exit with a chosen code
- burn: load N CPUs until a deadline
- spike: commit memory in chunks, hold, release
- churn: write/read a file repeatedly
- exit_with: exit immediately with a chosen code
"""

from chaoscli.stress.clock import exit_with, wait
from chaoscli.stress.config import (
    BurnConfig,
    ChurnConfig,
    ExitConfig,
    RunMode,
    SpikeConfig,
    StressorConfig,
    WaitConfig,
)
from chaoscli.stress.cpu import DeadlineWorkerPool, WorkerDeadline, burn
from chaoscli.stress.disk import churn
from chaoscli.stress.dispatcher import list_stressors, preview, run
from chaoscli.stress.memory import AllocationManager, spike
from chaoscli.stress.outcome import ExitOutcome, StressorKind

__all__ = [
    # Stressors
    "wait",
    "exit_with",
    "burn",
    "spike",
    "churn",
    # Components
    "DeadlineWorkerPool",
    "WorkerDeadline",
    "AllocationManager",
    # Configuration
    "RunMode",
    "StressorConfig",
    "WaitConfig",
    "BurnConfig",
    "SpikeConfig",
    "ChurnConfig",
    "ExitConfig",
    # Dispatch
    "run",
    "preview",
    "list_stressors",
    "ExitOutcome",
    "StressorKind",
]
