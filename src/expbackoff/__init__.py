r"""expbackoff - Thread-safe exponential delay counter with cancellable
waits.

This package tracks the backoff level of one retry sequence against a
flaky remote resource. The level grows multiplicatively on failure,
shrinks linearly on success, and maps to a wait that an external
cancellation token can interrupt.

Key Features:
    - Saturating level arithmetic guarded by a per-instance lock
    - Growth recurrence ``level = level * factor + factor``, capped at ``max``
    - Chainable mutators returning the instance itself
    - Cancellable waits with elapsed-time reporting, sync and async
    - Cancellation tokens with explicit cancel and deadlines

Example:
    ```pycon
    >>> from expbackoff import CancelToken, Delay, DelayConfig
    >>> delay = Delay(DelayConfig(max=30, factor=2)).set_time_unit(0.1)
    >>> delay.increment().increment().get_level()
    6
    >>> waited, error, elapsed = delay.backoff(CancelToken(timeout=5.0))  # doctest: +SKIP
    >>> delay.reset().has_delay()
    False

    ```
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_FACTOR",
    "DEFAULT_MAX",
    "DEFAULT_TIME_UNIT",
    "BackoffResult",
    "CancelToken",
    "CancelledError",
    "CancellationError",
    "DeadlineExceededError",
    "Delay",
    "DelayConfig",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from expbackoff.cancellation import CancelToken
from expbackoff.config import DEFAULT_FACTOR, DEFAULT_MAX, DEFAULT_TIME_UNIT, DelayConfig
from expbackoff.delay import BackoffResult, Delay
from expbackoff.exceptions import CancellationError, CancelledError, DeadlineExceededError

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
