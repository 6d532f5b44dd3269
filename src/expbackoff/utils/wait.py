r"""Sleep primitives that can be interrupted by a cancellation token.

This module provides the synchronous and asynchronous waits used by
``Delay.backoff`` and ``Delay.backoff_async``. Both race a timer against
a ``CancelToken`` and return as soon as either one finishes.
"""

from __future__ import annotations

__all__ = ["sleep_or_cancel", "sleep_or_cancel_async"]

import asyncio
import logging
import threading
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from expbackoff.cancellation import CancelToken

logger: logging.Logger = logging.getLogger(__name__)


def sleep_or_cancel(seconds: float, token: CancelToken | None = None) -> bool:
    """Sleep for ``seconds`` unless the token is cancelled first.

    Args:
        seconds: The number of seconds to sleep.
        token: Optional cancellation token. Without a token this is a
            plain ``time.sleep``.

    Returns:
        ``True`` if the wait was interrupted by the token.

    Example:
        ```pycon
        >>> from expbackoff.cancellation import CancelToken
        >>> from expbackoff.utils.wait import sleep_or_cancel
        >>> token = CancelToken()
        >>> _ = token.cancel()
        >>> sleep_or_cancel(60.0, token)  # Returns immediately
        True

        ```
    """
    if token is None:
        time.sleep(min(seconds, threading.TIMEOUT_MAX))
        return False
    interrupted = token.wait(seconds)
    if interrupted:
        logger.debug(f"Wait of {seconds:.2f}s interrupted: {token.error}")
    return interrupted


async def sleep_or_cancel_async(seconds: float, token: CancelToken | None = None) -> bool:
    """Asynchronously sleep for ``seconds`` unless the token is cancelled
    first.

    The token may be cancelled from any thread; the wake-up is handed
    back to the running event loop.

    Args:
        seconds: The number of seconds to sleep.
        token: Optional cancellation token. Without a token this is a
            plain ``asyncio.sleep``.

    Returns:
        ``True`` if the wait was interrupted by the token.

    Example:
        ```pycon
        >>> import asyncio
        >>> from expbackoff.cancellation import CancelToken
        >>> from expbackoff.utils.wait import sleep_or_cancel_async
        >>> token = CancelToken()
        >>> _ = token.cancel()
        >>> asyncio.run(sleep_or_cancel_async(60.0, token))
        True

        ```
    """
    if token is None:
        await asyncio.sleep(seconds)
        return False

    loop = asyncio.get_running_loop()
    done: asyncio.Future[None] = loop.create_future()

    def _set_done() -> None:
        if not done.done():
            done.set_result(None)

    def _wake() -> None:
        loop.call_soon_threadsafe(_set_done)

    remaining = token.remaining()
    if remaining is not None:
        seconds = min(seconds, remaining)

    token.add_done_callback(_wake)
    try:
        await asyncio.wait({done}, timeout=seconds)
    finally:
        token.remove_done_callback(_wake)
        done.cancel()

    interrupted = token.cancelled
    if interrupted:
        logger.debug(f"Wait of {seconds:.2f}s interrupted: {token.error}")
    return interrupted
