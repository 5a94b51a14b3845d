"""Tests for DeferStack and its state transitions."""
from __future__ import annotations

import pytest

from deferrable.engine.stack import DeferStack, StackState
from deferrable.errors import DeferralClosedError


def _noop(outcome: object) -> None:  # noqa: ARG001
    return None


def _other(outcome: object) -> None:  # noqa: ARG001
    return None


class TestDeferStackRegistration:
    """Tests for push/pop while RUNNING."""

    def test_new_stack_is_running_and_empty(self) -> None:
        stack: DeferStack[int] = DeferStack()
        assert stack.state is StackState.RUNNING
        assert stack.is_open
        assert len(stack) == 0

    def test_pop_returns_most_recent_first(self) -> None:
        stack: DeferStack[int] = DeferStack()
        stack.push(_noop)
        stack.push(_other)
        assert len(stack) == 2
        assert stack.pop() is _other
        assert stack.pop() is _noop
        assert len(stack) == 0

    def test_push_returns_none(self) -> None:
        stack: DeferStack[int] = DeferStack()
        assert stack.push(_noop) is None  # type: ignore[func-returns-value]

    def test_same_action_may_be_pushed_twice(self) -> None:
        """Each push is a separate registration."""
        stack: DeferStack[int] = DeferStack()
        stack.push(_noop)
        stack.push(_noop)
        assert len(stack) == 2

    def test_pop_empty_raises(self) -> None:
        stack: DeferStack[int] = DeferStack()
        with pytest.raises(IndexError):
            stack.pop()


class TestDeferStackLifecycle:
    """Tests for RUNNING -> DRAINING -> SETTLED_* transitions."""

    def test_push_while_draining_is_rejected(self) -> None:
        stack: DeferStack[int] = DeferStack()
        stack.push(_noop)
        stack.begin_draining()
        with pytest.raises(DeferralClosedError) as exc_info:
            stack.push(_other)
        assert exc_info.value.state is StackState.DRAINING
        assert len(stack) == 1

    def test_push_after_settle_is_rejected(self) -> None:
        stack: DeferStack[int] = DeferStack()
        stack.begin_draining()
        stack.settle(succeeded=True)
        assert stack.state is StackState.SETTLED_SUCCESS
        assert not stack.is_open
        with pytest.raises(DeferralClosedError):
            stack.push(_noop)
        assert len(stack) == 0

    def test_settle_failure_discards_remaining(self) -> None:
        """Actions left by an aborted drain are dropped."""
        stack: DeferStack[int] = DeferStack()
        stack.push(_noop)
        stack.push(_other)
        stack.begin_draining()
        stack.pop()
        stack.settle(succeeded=False)
        assert stack.state is StackState.SETTLED_FAILURE
        assert len(stack) == 0

    def test_cannot_settle_while_running(self) -> None:
        stack: DeferStack[int] = DeferStack()
        with pytest.raises(RuntimeError, match="Cannot settle"):
            stack.settle(succeeded=True)

    def test_cannot_return_to_draining(self) -> None:
        stack: DeferStack[int] = DeferStack()
        stack.begin_draining()
        stack.settle(succeeded=True)
        with pytest.raises(RuntimeError, match="Cannot start draining"):
            stack.begin_draining()

    def test_draining_twice_is_an_error(self) -> None:
        stack: DeferStack[int] = DeferStack()
        stack.begin_draining()
        with pytest.raises(RuntimeError):
            stack.begin_draining()


def test_state_tracks_lifecycle() -> None:
    """state reports each transition of a single run."""
    stack: DeferStack[int] = DeferStack()
    seen = [stack.state]
    stack.begin_draining()
    seen.append(stack.state)
    stack.settle(succeeded=False)
    seen.append(stack.state)
    assert seen == [
        StackState.RUNNING,
        StackState.DRAINING,
        StackState.SETTLED_FAILURE,
    ]
