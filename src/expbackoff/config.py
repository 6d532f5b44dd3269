r"""Configuration dataclass and defaults for Delay.

This module provides the configuration constants and the dataclass-based
configuration object consumed by the ``Delay`` constructor. The config is
serializable as a mapping with the field names ``max`` and ``factor``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_FACTOR",
    "DEFAULT_MAX",
    "DEFAULT_TIME_UNIT",
    "DelayConfig",
    "normalize_limits",
]

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)


# Default ceiling of the backoff level
# With 0 the delay never grows, which makes an unconfigured Delay harmless
DEFAULT_MAX = 0

# Default growth factor
# Level recurrence: level = level * factor + factor, so 1 gives 0, 1, 2, 3, ...
DEFAULT_FACTOR = 1

# Default number of seconds represented by one level
DEFAULT_TIME_UNIT = 1.0


def normalize_limits(max_level: int, factor: int) -> tuple[int, int]:
    """Clamp the level ceiling and the growth factor to their valid
    ranges.

    Out-of-range values are never rejected: a negative ceiling becomes
    0 and a factor below 1 becomes 1.

    Args:
        max_level: The requested level ceiling.
        factor: The requested growth factor.

    Returns:
        The ``(max_level, factor)`` pair after clamping.

    Example:
        ```pycon
        >>> from expbackoff.config import normalize_limits
        >>> normalize_limits(10, 2)
        (10, 2)
        >>> normalize_limits(-5, 0)
        (0, 1)

        ```
    """
    if max_level < 0:
        logger.debug(f"Clamping max from {max_level} to 0")
        max_level = 0
    if factor < 1:
        logger.debug(f"Clamping factor from {factor} to 1")
        factor = 1
    return max_level, factor


@dataclass
class DelayConfig:
    """Configuration for a Delay backoff sequence.

    Args:
        max: Ceiling the backoff level may never exceed. Negative values
            are clamped to 0.
        factor: Growth multiplier applied on each increment. Values
            below 1 are clamped to 1.

    Example:
        ```pycon
        >>> from expbackoff.config import DelayConfig
        >>> config = DelayConfig(max=100, factor=2)
        >>> config.to_dict()
        {'max': 100, 'factor': 2}
        >>> DelayConfig(max=-1, factor=0)
        DelayConfig(max=0, factor=1)
        >>> config.merge(max=30)
        DelayConfig(max=30, factor=2)

        ```
    """

    max: int = DEFAULT_MAX
    factor: int = DEFAULT_FACTOR

    def __post_init__(self) -> None:
        self.max, self.factor = normalize_limits(self.max, self.factor)

    def merge(self, **overrides: Any) -> DelayConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied; the current instance
        is left unchanged.

        Args:
            **overrides: Keyword arguments for the fields to override.

        Returns:
            A new DelayConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, int]:
        """Convert the configuration to a dictionary keyed by field
        name."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DelayConfig:
        """Build a configuration from a mapping.

        Unknown keys are ignored and missing keys take their default
        values, so partial documents loaded from JSON or YAML files are
        accepted.

        Args:
            data: A mapping with the optional keys ``max`` and ``factor``.

        Returns:
            The new configuration.

        Raises:
            TypeError: If a field value is not an ``int``. Values are
                never coerced, so ``2.7`` or ``"5"`` are rejected.

        Example:
            ```pycon
            >>> from expbackoff.config import DelayConfig
            >>> DelayConfig.from_dict({"max": 60, "factor": 3, "comment": "api"})
            DelayConfig(max=60, factor=3)
            >>> DelayConfig.from_dict({"max": 60})
            DelayConfig(max=60, factor=1)

            ```
        """
        names = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in names}
        for key, value in values.items():
            if isinstance(value, bool) or not isinstance(value, int):
                msg = f"DelayConfig {key} must be an int, got {type(value).__name__}"
                raise TypeError(msg)
        return cls(**values)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> DelayConfig:
        """Build a configuration from a JSON object.

        Args:
            text: The JSON document.

        Returns:
            The new configuration.

        Raises:
            TypeError: If the document is not a JSON object, or a field
                value is not an integer.
            json.JSONDecodeError: If the document is not valid JSON.
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            msg = f"DelayConfig JSON must be an object, got {type(data).__name__}"
            raise TypeError(msg)
        return cls.from_dict(data)
