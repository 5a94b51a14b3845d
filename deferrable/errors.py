"""Error types raised by deferrable runs."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deferrable.engine.stack import StackState


def _describe(error: BaseException) -> dict[str, object]:
    return {"type": type(error).__name__, "message": str(error)}


class DeferredActionsError(ExceptionGroup):
    """Both the unit of work and a deferred action failed.

    Holds exactly two causes, main failure first and deferred
    failure second. Both are reachable through the standard
    ``exceptions`` tuple and as ``primary`` / ``secondary``.
    """

    def __new__(
        cls,
        primary: Exception,
        secondary: Exception,
    ) -> DeferredActionsError:
        message = (
            f"Unit of work failed with {type(primary).__name__}"
            f" and a deferred action failed with"
            f" {type(secondary).__name__}"
        )
        return super().__new__(cls, message, [primary, secondary])

    def __init__(
        self,
        primary: Exception,
        secondary: Exception,
    ) -> None:
        """Store both causes, main failure first."""
        super().__init__(self.message, [primary, secondary])

    def __reduce__(self) -> tuple[object, ...]:
        """Rebuild from both causes when pickled or copied."""
        # args hold (message, excs), which __new__ does not accept
        return (
            type(self),
            (self.primary, self.secondary),
            self.__dict__ or None,
        )

    @property
    def primary(self) -> Exception:
        """The unit of work's failure."""
        return self.exceptions[0]

    @property
    def secondary(self) -> Exception:
        """The deferred action's failure."""
        return self.exceptions[1]

    def derive(
        self,
        excs: list[Exception],
    ) -> ExceptionGroup[Exception]:
        # split()/subgroup() may keep only one cause
        return ExceptionGroup(self.message, excs)

    def to_dict(self) -> dict[str, object]:
        """Return plain dict suitable for JSON serialization."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "primary": _describe(self.primary),
            "secondary": _describe(self.secondary),
        }


class DeferralClosedError(RuntimeError):
    """A deferred action was registered after the unit of work settled."""

    def __init__(self, state: StackState) -> None:
        """Record the stack state the registration was rejected in."""
        self.state = state
        super().__init__(
            f"Cannot defer an action once the unit of work has"
            f" settled (stack is {state.value})",
        )

    def __reduce__(self) -> tuple[object, ...]:
        """Rebuild from the rejected state when pickled or copied."""
        return (type(self), (self.state,), self.__dict__)
