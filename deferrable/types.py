"""Public API types for deferrable runs.

Callers see the unit of work, the defer callable and the deferred
action. The outcome handed to deferred actions is a plain
returns Result: Success(value) or Failure(error), never both.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeAlias, TypeVar

from returns.result import Result

T = TypeVar("T")

Outcome: TypeAlias = Result[T, Exception]

DeferredAction: TypeAlias = Callable[
    [Outcome[T]],
    "Awaitable[None] | None",
]

Defer: TypeAlias = Callable[[DeferredAction[T]], None]

UnitOfWork: TypeAlias = Callable[
    [Defer[T]],
    "Awaitable[T] | T",
]
