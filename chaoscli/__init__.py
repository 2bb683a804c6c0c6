"""
chaoscli - Controlled resource-exhaustion harness

Deliberately consumes time, CPU, memory, or disk I/O for a bounded interval
so an operator can watch how a supervisor, container runtime, orchestrator
or pipeline reacts.

Sub-packages:
- chaoscli.stress: the stressor engine
- chaoscli.cli: command-line adapter (``chaoscli``)
"""

from chaoscli.errors import ChaosError
from chaoscli.stress import ExitOutcome, StressorKind, run

__version__ = "0.1.0"

__all__ = [
    "ChaosError",
    "ExitOutcome",
    "StressorKind",
    "run",
    "__version__",
]
