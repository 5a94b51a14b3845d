"""Engine package -- deferred action stack and LIFO drain executor."""
from deferrable.engine.executor import (
    capture_outcome,
    combine_errors,
    deferrable,
    drain_stack,
    run_deferrable,
    with_defer,
)
from deferrable.engine.stack import DeferStack, StackState

__all__ = [
    "DeferStack",
    "StackState",
    "capture_outcome",
    "combine_errors",
    "deferrable",
    "drain_stack",
    "run_deferrable",
    "with_defer",
]
