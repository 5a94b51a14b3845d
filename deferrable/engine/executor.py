"""Engine executor -- run a unit of work, then drain its deferred actions.

The unit of work's outcome is captured as a Result and never
raised early. Deferred actions run strictly one at a time in
LIFO order; the first one to fail aborts the drain.
"""
from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Concatenate, ParamSpec, TypeVar

from returns.io import IOFailure, IOResult
from returns.result import Failure, Success
from returns.unsafe import unsafe_perform_io

from deferrable.engine.stack import DeferStack
from deferrable.errors import DeferredActionsError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from deferrable.types import Defer, Outcome, UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")


def _action_name(action: object) -> str:
    return getattr(action, "__qualname__", repr(action))


async def capture_outcome(
    unit_of_work: UnitOfWork[T],
    defer: Defer[T],
) -> Outcome[T]:
    """Invoke the unit of work and capture its result.

    Returns Success(value) or Failure(error), never raises for an
    Exception. Cancellation and other BaseExceptions propagate.
    """
    try:
        value = unit_of_work(defer)
        if inspect.isawaitable(value):
            value = await value
    except Exception as exc:  # noqa: BLE001
        return Failure(exc)
    return Success(value)


async def drain_stack(
    stack: DeferStack[T],
    outcome: Outcome[T],
) -> Exception | None:
    """Pop and run every deferred action with the captured outcome.

    Each action is awaited fully before the next one is popped.
    Returns the first action failure, leaving the rest of the
    stack untouched, or None when the stack drained completely.
    """
    stack.begin_draining()
    total = len(stack)
    logger.debug(
        "Draining %d deferred action(s) after %s",
        total,
        "success" if isinstance(outcome, Success) else "failure",
    )

    position = 0
    while len(stack):
        action = stack.pop()
        position += 1
        logger.debug(
            "Running deferred action %s (%d/%d)",
            _action_name(action),
            position,
            total,
        )
        try:
            pending = action(outcome)
            if inspect.isawaitable(pending):
                await pending
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Deferred action %s failed with %s; skipping %d remaining",
                _action_name(action),
                type(exc).__name__,
                len(stack),
            )
            return exc
    return None


def combine_errors(
    outcome: Outcome[T],
    deferred_error: Exception,
) -> Exception:
    """Pick the error reported when a deferred action failed.

    A successful unit of work yields the deferred error as-is. A
    failed one yields DeferredActionsError(main, deferred).
    """
    if isinstance(outcome, Failure):
        return DeferredActionsError(outcome.failure(), deferred_error)
    return deferred_error


async def run_deferrable(
    unit_of_work: UnitOfWork[T],
) -> IOResult[T, Exception]:
    """Execute a unit of work with a fresh deferred action stack.

    Returns IOSuccess with the unit of work's value, or IOFailure
    with the main error, the deferred error, or a
    DeferredActionsError carrying both. Never raises for an
    Exception coming from caller code.
    """
    stack: DeferStack[T] = DeferStack()
    outcome = await capture_outcome(unit_of_work, stack.push)
    deferred_error = await drain_stack(stack, outcome)

    if deferred_error is not None:
        stack.settle(succeeded=False)
        return IOFailure(combine_errors(outcome, deferred_error))

    stack.settle(succeeded=isinstance(outcome, Success))
    return IOResult.from_result(outcome)


async def deferrable(unit_of_work: UnitOfWork[T]) -> T:
    """Execute a unit of work, then its deferred actions in LIFO order.

    Returns the unit of work's value when it and every deferred
    action succeed. Otherwise raises exactly one of: the unit of
    work's error, the failing deferred action's error, or a
    DeferredActionsError when both failed.

    Example::

        async def transfer(defer):
            debit = await ledger.debit(account, amount)
            defer(lambda outcome: (
                ledger.refund(debit)
                if isinstance(outcome, Failure) else None
            ))
            return await ledger.credit(target, amount)

        receipt = await deferrable(transfer)
    """
    result = await run_deferrable(unit_of_work)
    if isinstance(result, IOFailure):
        raise unsafe_perform_io(result.failure())
    return unsafe_perform_io(result.unwrap())


def with_defer(
    fn: Callable[Concatenate[Defer[T], P], Awaitable[T]],
) -> Callable[P, Awaitable[T]]:
    """Decorate ``fn(defer, *args, **kwargs)`` to run through the engine.

    The decorated function drops the ``defer`` parameter from its
    signature; each call is an independent deferrable run.
    """

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        return await deferrable(
            lambda defer: fn(defer, *args, **kwargs),
        )

    return wrapper
