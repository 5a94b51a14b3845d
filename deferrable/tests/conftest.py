"""Shared test fixtures for the deferrable test suite."""
from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from deferrable.types import DeferredAction, Outcome


@pytest.fixture
def calls() -> list[str]:
    """Return an empty list that deferred actions append to."""
    return []


@pytest.fixture
def recorder(
    calls: list[str],
) -> Callable[[str], DeferredAction[object]]:
    """Return a factory of async deferred actions recording their name."""

    def make(name: str) -> DeferredAction[object]:
        async def action(outcome: Outcome[object]) -> None:  # noqa: ARG001
            calls.append(name)

        action.__qualname__ = f"record_{name}"
        return action

    return make
