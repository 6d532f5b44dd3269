r"""Utility functions for backoff waits."""

from __future__ import annotations

__all__ = ["sleep_or_cancel", "sleep_or_cancel_async"]

from expbackoff.utils.wait import sleep_or_cancel, sleep_or_cancel_async
