"""
Execution core: IO ports and the runners that drive routines over them.
"""
from pgrow.core.io import BlockingIO, SuspendingIO
from pgrow.core.runner import CancelSignal, Routine, run_blocking
from pgrow.core.runner import run_blocking_safe, run_suspending
from pgrow.core.runner import run_suspending_safe

__all__ = [
    'BlockingIO',
    'SuspendingIO',
    'CancelSignal',
    'Routine',
    'run_blocking',
    'run_blocking_safe',
    'run_suspending',
    'run_suspending_safe',
]
