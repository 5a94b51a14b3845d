"""Deferred action stack -- per-run LIFO collection and run state.

One DeferStack exists per engine run. Its bound ``push`` is the
``defer`` callable handed to the unit of work; the executor is
the only caller of everything else.
"""
from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Generic, TypeVar

from deferrable.errors import DeferralClosedError

if TYPE_CHECKING:
    from deferrable.types import DeferredAction

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StackState(enum.Enum):
    """Lifecycle of a single run."""

    RUNNING = "running"
    DRAINING = "draining"
    SETTLED_SUCCESS = "settled-success"
    SETTLED_FAILURE = "settled-failure"


class DeferStack(Generic[T]):
    """Ordered deferred actions, consumed from the most recent end.

    Registration is accepted only while the unit of work is
    RUNNING. Any later push raises DeferralClosedError; the
    action is not enqueued.
    """

    def __init__(self) -> None:
        self._actions: list[DeferredAction[T]] = []
        self._state = StackState.RUNNING

    @property
    def state(self) -> StackState:
        """Current lifecycle state of the run."""
        return self._state

    @property
    def is_open(self) -> bool:
        """True while actions may still be registered."""
        return self._state is StackState.RUNNING

    def __len__(self) -> int:
        return len(self._actions)

    def push(self, action: DeferredAction[T]) -> None:
        """Register a deferred action."""
        if not self.is_open:
            logger.debug(
                "Rejected deferred action %r in state %s",
                action,
                self._state.value,
            )
            raise DeferralClosedError(self._state)
        self._actions.append(action)

    def pop(self) -> DeferredAction[T]:
        """Remove and return the most recently registered action.

        Raises:
            IndexError: If the stack is empty.
        """
        return self._actions.pop()

    def begin_draining(self) -> None:
        """Close registration. RUNNING -> DRAINING."""
        if self._state is not StackState.RUNNING:
            msg = f"Cannot start draining from state {self._state.value}"
            raise RuntimeError(msg)
        self._state = StackState.DRAINING

    def settle(self, *, succeeded: bool) -> None:
        """DRAINING -> SETTLED_*. Discards actions left by an aborted drain."""
        if self._state is not StackState.DRAINING:
            msg = f"Cannot settle from state {self._state.value}"
            raise RuntimeError(msg)
        self._actions.clear()
        self._state = (
            StackState.SETTLED_SUCCESS
            if succeeded
            else StackState.SETTLED_FAILURE
        )
