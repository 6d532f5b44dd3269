from __future__ import annotations

import logging
import sys

import expbackoff

logger: logging.Logger = logging.getLogger(__name__)


def check_delay() -> None:
    logger.info("Checking Delay...")
    delay = expbackoff.Delay(expbackoff.DelayConfig(max=100, factor=2))
    levels = [delay.increment().get_level() for _ in range(7)]
    assert levels == [2, 6, 14, 30, 62, 100, 100]
    assert delay.reset().get_level() == 0


def check_backoff() -> None:
    logger.info("Checking backoff...")
    delay = expbackoff.Delay(expbackoff.DelayConfig(max=10, factor=2)).set_time_unit(0.01)
    waited, error, elapsed = delay.increment().backoff(expbackoff.CancelToken(timeout=5.0))
    assert waited
    assert error is None
    assert elapsed > 0.0


def main() -> None:
    r"""Run all package checks to validate installation and
    functionality."""
    try:
        check_delay()
        check_backoff()

        logger.info("✅ All package checks passed successfully!")
    except Exception:
        logger.exception("❌ Package check failed")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
