"""Result type for structured error handling at the command boundary.

Core modules raise typed exceptions from ``deckfetch.errors``; command
handlers catch them once and hand a Result back to the CLI, which decides
the exit status.
"""

from typing import TypedDict, Optional, TypeVar, Callable, Any

T = TypeVar("T")


class Result(TypedDict):
    """Result of a command handler.

    Attributes:
        ok: True if operation succeeded, False if it failed
        value: The successful result value (None if failed)
        error: Error message (None if succeeded)
    """

    ok: bool
    value: Optional[Any]
    error: Optional[str]


def success(value: T) -> Result:
    """Create a successful result."""
    return Result(ok=True, value=value, error=None)


def failure(error: str) -> Result:
    """Create a failed result."""
    return Result(ok=False, value=None, error=error)


def from_exception(exc: Exception) -> Result:
    """Create a failed result from an exception.

    The message keeps the exception type so shape errors, header errors and
    filesystem errors stay distinguishable in the CLI output.
    """
    return failure(f"{type(exc).__name__}: {exc}")


def try_operation(operation: Callable[[], T]) -> Result:
    """Execute an operation and return a Result.

    Only ``Exception`` subclasses are converted; ``KeyboardInterrupt`` and
    ``SystemExit`` propagate.
    """
    try:
        value = operation()
        return success(value)
    except Exception as exc:
        return from_exception(exc)

