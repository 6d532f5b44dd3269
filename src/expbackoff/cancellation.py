r"""Cancellation token for interrupting backoff waits.

A ``CancelToken`` is an external signal that a wait should stop early. It
finishes either because ``cancel()`` was called or because its deadline
elapsed, and it keeps the terminal error describing which one happened.

Example:
    ```pycon
    >>> from expbackoff.cancellation import CancelToken
    >>> token = CancelToken()
    >>> token.cancelled
    False
    >>> token.cancel()
    True
    >>> token.error
    CancelledError('operation was cancelled')
    >>> token.cancel()  # Already done
    False

    ```
"""

from __future__ import annotations

__all__ = ["CancelToken"]

import logging
import threading
import time
from typing import TYPE_CHECKING

from expbackoff.exceptions import CancellationError, CancelledError, DeadlineExceededError

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class CancelToken:
    r"""Thread-safe cancellation signal with an optional deadline.

    The token exposes a "done" notification (``wait``, done callbacks)
    and a retrievable terminal error (``error``). The first terminal
    error wins: cancelling a token whose deadline already elapsed keeps
    the ``DeadlineExceededError``.

    Deadline expiry is evaluated lazily whenever the token is queried, so
    no timer thread is started. Waiters bound their own wait by
    ``remaining()``.

    Args:
        timeout: Optional number of seconds after which the token reports
            ``DeadlineExceededError``. Must be >= 0 if provided.

    Raises:
        ValueError: If ``timeout`` is negative.

    Example:
        ```pycon
        >>> from expbackoff.cancellation import CancelToken
        >>> token = CancelToken(timeout=0)
        >>> token.cancelled
        True
        >>> token.error
        DeadlineExceededError('deadline exceeded')

        ```
    """

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None and timeout < 0:
            msg = f"timeout must be >= 0, got {timeout}"
            raise ValueError(msg)

        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._error: CancellationError | None = None
        self._callbacks: list[Callable[[], None]] = []
        self._event = threading.Event()
        self._lock = threading.Lock()

    @classmethod
    def with_timeout(cls, timeout: float) -> CancelToken:
        """Create a token that expires after ``timeout`` seconds."""
        return cls(timeout=timeout)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(cancelled={self.cancelled}, error={self.error!r})"

    @property
    def cancelled(self) -> bool:
        """Indicate whether the token is done."""
        return self.error is not None

    @property
    def error(self) -> CancellationError | None:
        """Get the terminal error, or None while the token is still
        live."""
        self._check_deadline()
        return self._error

    def remaining(self) -> float | None:
        """Get the number of seconds left until the deadline.

        Returns:
            The remaining time, clamped at 0, or None if the token has no
            deadline.
        """
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> bool:
        """Cancel the token.

        Returns:
            ``True`` if this call finished the token, ``False`` if it was
            already done.
        """
        self._check_deadline()
        return self._finish(CancelledError())

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the token is done or ``timeout`` seconds elapse.

        Args:
            timeout: Maximum number of seconds to block, or None to block
                until the token is done.

        Returns:
            ``True`` if the token is done.
        """
        remaining = self.remaining()
        if remaining is not None:
            timeout = remaining if timeout is None else min(timeout, remaining)
        if timeout is not None:
            timeout = min(timeout, threading.TIMEOUT_MAX)
        self._event.wait(timeout)
        return self.cancelled

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        """Register a callback run once when the token is cancelled.

        The callback runs immediately if the token is already done. A
        deadline does not trigger callbacks by itself; it is noticed the
        next time the token is queried.

        Args:
            callback: A function taking no arguments.
        """
        self._check_deadline()
        with self._lock:
            if self._error is None:
                self._callbacks.append(callback)
                return
        self._run_callback(callback)

    def remove_done_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def _check_deadline(self) -> None:
        if self._deadline is not None and self._error is None and time.monotonic() >= self._deadline:
            self._finish(DeadlineExceededError())

    def _finish(self, error: CancellationError) -> bool:
        with self._lock:
            if self._error is not None:
                return False
            self._error = error
            callbacks, self._callbacks = self._callbacks, []
            self._event.set()

        logger.debug(f"Cancellation token finished: {error}")
        for callback in callbacks:
            self._run_callback(callback)
        return True

    @staticmethod
    def _run_callback(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Error in cancellation token done callback: {e}")
