r"""Stateful exponential delay counter.

This module provides ``Delay``, a thread-safe counter tracking the current
backoff level of one retry sequence, and the cancellable wait built on it.
The level grows multiplicatively on ``increment`` (``level * factor +
factor``, capped at ``max``), shrinks by one on ``decrement``, and maps to
a wait of ``level * time_unit`` seconds.

Example:
    ```pycon
    >>> from expbackoff import Delay, DelayConfig
    >>> delay = Delay(DelayConfig(max=100, factor=2))
    >>> [delay.increment().get_level() for _ in range(7)]
    [2, 6, 14, 30, 62, 100, 100]
    >>> delay.decrement().get_level()
    99
    >>> delay.reset().has_delay()
    False

    ```
"""

from __future__ import annotations

__all__ = ["BackoffResult", "Delay"]

import logging
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from expbackoff.config import DEFAULT_TIME_UNIT, DelayConfig, normalize_limits
from expbackoff.utils.wait import sleep_or_cancel, sleep_or_cancel_async

if TYPE_CHECKING:
    from collections.abc import Iterator

    from expbackoff.cancellation import CancelToken
    from expbackoff.exceptions import CancellationError

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackoffResult:
    """Outcome of a backoff wait.

    The result unpacks like a tuple: ``waited, error, elapsed = result``.

    Attributes:
        waited: Whether the delay had a non-zero level when the wait
            started.
        error: The terminal error of the cancellation token, or None if
            the token was not done.
        elapsed: The wall-clock time in seconds actually spent in the
            call.
    """

    waited: bool
    error: CancellationError | None
    elapsed: float

    def __iter__(self) -> Iterator[bool | CancellationError | float | None]:
        return iter((self.waited, self.error, self.elapsed))


class Delay:
    r"""Thread-safe backoff level with saturating arithmetic.

    ``increment``, ``decrement`` and ``reset`` take the instance lock and
    keep ``0 <= level <= max``. Every mutator returns the instance itself
    so calls can be chained.

    ``set_level`` and ``get_level`` deliberately bypass the lock and the
    bounds: they are an unsynchronized override/read pair, and a
    concurrent ``set_level`` can race with the guarded mutators.

    An instance that was not built by the constructor (for example
    ``Delay.__new__(Delay)``) is uninitialized: every mutator is a no-op,
    ``has_delay`` is ``False`` and ``backoff`` returns immediately.

    Args:
        config: The level ceiling and growth factor. Defaults to
            ``DelayConfig()``. Out-of-range values are clamped.

    Example:
        ```pycon
        >>> from expbackoff import Delay, DelayConfig
        >>> delay = Delay(DelayConfig(max=10, factor=3))
        >>> delay.increment().increment().get_level()
        10
        >>> delay.set_time_unit(0.5).delay
        5.0
        >>> uninitialized = Delay.__new__(Delay)
        >>> uninitialized.increment().has_delay()
        False

        ```
    """

    # Class-level defaults back instances created without the constructor
    _initialized = False
    _level = 0
    _max = 0
    _factor = 1
    _time_unit = DEFAULT_TIME_UNIT

    def __init__(self, config: DelayConfig | None = None) -> None:
        if config is None:
            config = DelayConfig()
        self._max, self._factor = normalize_limits(config.max, config.factor)
        self._level = 0
        self._time_unit = DEFAULT_TIME_UNIT
        self._lock = threading.Lock()
        self._initialized = True

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(level={self._level}, max={self._max}, "
            f"factor={self._factor}, time_unit={self._time_unit})"
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def max(self) -> int:
        """Get the level ceiling."""
        return self._max

    @property
    def factor(self) -> int:
        """Get the growth factor."""
        return self._factor

    @property
    def time_unit(self) -> float:
        """Get the number of seconds represented by one level."""
        return self._time_unit

    @property
    def delay(self) -> float:
        """Get the current wait length in seconds (``level *
        time_unit``)."""
        return self._level * self._time_unit

    def increment(self) -> Delay:
        """Grow the level to ``level * factor + factor``, capped at
        ``max``.

        Does nothing once the level reached ``max``.

        Returns:
            The instance itself.
        """
        if not self._initialized:
            return self

        with self._lock:
            if self._level == self._max:
                return self

            old_level = self._level
            level = old_level * self._factor + self._factor
            if level > self._max:
                level = self._max
            # Single store so unlocked readers never see an unclamped level
            self._level = level
            logger.debug(f"Delay level incremented: {old_level} -> {level}")
        return self

    def decrement(self) -> Delay:
        """Shrink the level by one, never below 0.

        Returns:
            The instance itself.
        """
        if not self._initialized:
            return self

        with self._lock:
            if self._level == 0:
                return self

            self._level -= 1
            if self._level < 0:
                self._level = 0
            logger.debug(f"Delay level decremented to {self._level}")
        return self

    def reset(self) -> Delay:
        """Set the level back to 0.

        Returns:
            The instance itself.
        """
        if not self._initialized:
            return self

        with self._lock:
            if self._level != 0:
                self._level = 0
                logger.debug("Delay level reset to 0")
        return self

    def get_level(self) -> int:
        """Get the current level.

        The read does not take the lock.
        """
        return self._level

    def set_level(self, value: int) -> Delay:
        """Overwrite the level.

        This is an unsynchronized escape hatch: it takes no lock, ignores
        whether the instance is initialized, and does not enforce
        ``0 <= level <= max``.

        Args:
            value: The new level.

        Returns:
            The instance itself.
        """
        self._level = value
        return self

    def set_time_unit(self, time_unit: float | timedelta) -> Delay:
        """Set the number of seconds represented by one level.

        Has no effect on an uninitialized instance, whatever the value.

        Args:
            time_unit: The duration of one level, in seconds or as a
                ``timedelta``. Negative values are clamped to 0.

        Returns:
            The instance itself.
        """
        if not self._initialized:
            return self

        if isinstance(time_unit, timedelta):
            time_unit = time_unit.total_seconds()
        if time_unit < 0:
            logger.debug(f"Clamping time_unit from {time_unit} to 0")
            time_unit = 0.0
        self._time_unit = float(time_unit)
        return self

    def has_delay(self) -> bool:
        """Indicate whether a backoff would actually wait."""
        if not self._initialized:
            return False
        return self._level > 0

    def backoff(self, token: CancelToken | None = None) -> BackoffResult:
        """Wait for ``level * time_unit`` seconds unless cancelled first.

        The wait length is computed once when the call starts; a
        concurrent ``reset`` or ``decrement`` does not shorten a wait in
        progress. Nothing is waited when the level is 0.

        Args:
            token: Optional cancellation token racing the timer. Without
                a token the wait cannot be interrupted.

        Returns:
            ``(waited, error, elapsed)`` where ``waited`` tells whether
            there was a delay to wait, ``error`` is the token's terminal
            error (None if the token is not done) and ``elapsed`` is the
            time actually spent, in seconds.

        Example:
            ```pycon
            >>> from expbackoff import CancelToken, Delay, DelayConfig
            >>> delay = Delay(DelayConfig(max=10, factor=2)).increment()
            >>> token = CancelToken()
            >>> _ = token.cancel()
            >>> waited, error, elapsed = delay.backoff(token)
            >>> waited, error
            (True, CancelledError('operation was cancelled'))

            ```
        """
        if not self._initialized:
            return BackoffResult(waited=False, error=None, elapsed=0.0)

        start_time = time.monotonic()
        had_delay = self.has_delay()
        if had_delay:
            seconds = self.delay
            logger.debug(f"Backing off for {seconds:.2f}s (level={self._level})")
            sleep_or_cancel(seconds, token)
        return BackoffResult(
            waited=had_delay,
            error=None if token is None else token.error,
            elapsed=time.monotonic() - start_time,
        )

    async def backoff_async(self, token: CancelToken | None = None) -> BackoffResult:
        """Asynchronous version of ``backoff``.

        Args:
            token: Optional cancellation token racing the timer.

        Returns:
            ``(waited, error, elapsed)``, as for ``backoff``.

        Example:
            ```pycon
            >>> import asyncio
            >>> from expbackoff import Delay, DelayConfig
            >>> delay = Delay(DelayConfig(max=10, factor=2))
            >>> asyncio.run(delay.backoff_async()).waited
            False

            ```
        """
        if not self._initialized:
            return BackoffResult(waited=False, error=None, elapsed=0.0)

        start_time = time.monotonic()
        had_delay = self.has_delay()
        if had_delay:
            seconds = self.delay
            logger.debug(f"Backing off for {seconds:.2f}s (level={self._level})")
            await sleep_or_cancel_async(seconds, token)
        return BackoffResult(
            waited=had_delay,
            error=None if token is None else token.error,
            elapsed=time.monotonic() - start_time,
        )
