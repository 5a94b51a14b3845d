"""Deferred cleanup and compensation for async units of work."""
from deferrable.engine import (
    DeferStack,
    StackState,
    deferrable,
    run_deferrable,
    with_defer,
)
from deferrable.errors import DeferralClosedError, DeferredActionsError
from deferrable.types import Defer, DeferredAction, Outcome, UnitOfWork

__all__ = [
    "Defer",
    "DeferStack",
    "DeferralClosedError",
    "DeferredAction",
    "DeferredActionsError",
    "Outcome",
    "StackState",
    "UnitOfWork",
    "deferrable",
    "run_deferrable",
    "with_defer",
]
