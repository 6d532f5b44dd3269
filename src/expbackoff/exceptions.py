r"""Errors reported by a cancelled backoff wait.

These exceptions describe why a ``CancelToken`` finished. They are
returned in ``BackoffResult.error`` rather than raised, so the caller
decides whether to raise, retry, or give up.
"""

from __future__ import annotations

__all__ = ["CancellationError", "CancelledError", "DeadlineExceededError"]


class CancellationError(RuntimeError):
    """Base class for the terminal errors of a cancellation token.

    Example:
        ```pycon
        >>> from expbackoff.exceptions import CancellationError, CancelledError
        >>> isinstance(CancelledError(), CancellationError)
        True

        ```
    """


class CancelledError(CancellationError):
    """Error reported when the token was cancelled explicitly.

    Args:
        message: A descriptive error message.
    """

    def __init__(self, message: str = "operation was cancelled") -> None:
        super().__init__(message)


class DeadlineExceededError(CancellationError):
    """Error reported when the token deadline elapsed.

    Args:
        message: A descriptive error message.
    """

    def __init__(self, message: str = "deadline exceeded") -> None:
        super().__init__(message)
