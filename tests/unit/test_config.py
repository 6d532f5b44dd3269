r"""Unit tests for the DelayConfig dataclass and its helpers."""

from __future__ import annotations

import json

import pytest
from coola.equality import objects_are_equal

from expbackoff.config import (
    DEFAULT_FACTOR,
    DEFAULT_MAX,
    DEFAULT_TIME_UNIT,
    DelayConfig,
    normalize_limits,
)

######################################
#     Tests for normalize_limits     #
######################################


@pytest.mark.parametrize(("max_level", "factor"), [(0, 1), (10, 2), (1000, 7)])
def test_normalize_limits_valid_values(max_level: int, factor: int) -> None:
    """Test that valid values are left unchanged."""
    assert normalize_limits(max_level, factor) == (max_level, factor)


@pytest.mark.parametrize("max_level", [-1, -100])
def test_normalize_limits_negative_max(max_level: int) -> None:
    """Test that a negative max is clamped to 0."""
    assert normalize_limits(max_level, 2) == (0, 2)


@pytest.mark.parametrize("factor", [0, -1, -50])
def test_normalize_limits_small_factor(factor: int) -> None:
    """Test that a factor below 1 is clamped to 1."""
    assert normalize_limits(10, factor) == (10, 1)


#################################
#     Tests for DelayConfig     #
#################################


def test_delay_config_defaults() -> None:
    """Test that DelayConfig uses correct default values."""
    config = DelayConfig()
    assert config.max == DEFAULT_MAX
    assert config.factor == DEFAULT_FACTOR


def test_default_constants() -> None:
    assert DEFAULT_MAX == 0
    assert DEFAULT_FACTOR == 1
    assert DEFAULT_TIME_UNIT == 1.0


def test_delay_config_clamps_on_creation() -> None:
    """Test that out-of-range values are normalized, not rejected."""
    assert DelayConfig(max=-3, factor=0) == DelayConfig(max=0, factor=1)


def test_delay_config_merge() -> None:
    """Test that merge overrides fields and keeps the original
    unchanged."""
    config = DelayConfig(max=10, factor=2)
    merged = config.merge(max=50)
    assert merged == DelayConfig(max=50, factor=2)
    assert config == DelayConfig(max=10, factor=2)


def test_delay_config_merge_ignores_none() -> None:
    config = DelayConfig(max=10, factor=2)
    assert config.merge(max=None, factor=None) == config


def test_delay_config_merge_clamps() -> None:
    """Test that merged values go through the same clamping."""
    assert DelayConfig(max=10, factor=2).merge(factor=-4) == DelayConfig(max=10, factor=1)


def test_delay_config_to_dict() -> None:
    assert objects_are_equal(DelayConfig(max=60, factor=3).to_dict(), {"max": 60, "factor": 3})


def test_delay_config_from_dict() -> None:
    assert DelayConfig.from_dict({"max": 60, "factor": 3}) == DelayConfig(max=60, factor=3)


def test_delay_config_from_dict_partial() -> None:
    """Test that missing keys take their default values."""
    assert DelayConfig.from_dict({"factor": 4}) == DelayConfig(max=DEFAULT_MAX, factor=4)


def test_delay_config_from_dict_ignores_unknown_keys() -> None:
    assert DelayConfig.from_dict({"max": 5, "unit": "s"}) == DelayConfig(max=5)


def test_delay_config_from_dict_clamps() -> None:
    assert DelayConfig.from_dict({"max": -5, "factor": 0}) == DelayConfig(max=0, factor=1)


def test_delay_config_to_json() -> None:
    assert json.loads(DelayConfig(max=60, factor=3).to_json()) == {"max": 60, "factor": 3}


def test_delay_config_from_json() -> None:
    assert DelayConfig.from_json('{"max": 120, "factor": 2}') == DelayConfig(max=120, factor=2)


def test_delay_config_from_json_not_an_object() -> None:
    with pytest.raises(TypeError, match=r"DelayConfig JSON must be an object, got list"):
        DelayConfig.from_json("[1, 2]")


def test_delay_config_from_json_invalid() -> None:
    with pytest.raises(json.JSONDecodeError):
        DelayConfig.from_json("max: 10")


@pytest.mark.parametrize(
    ("data", "type_name"),
    [
        ({"max": 2.7}, "float"),
        ({"max": "5"}, "str"),
        ({"factor": True}, "bool"),
        ({"factor": None}, "NoneType"),
    ],
)
def test_delay_config_from_dict_rejects_non_int(data: dict, type_name: str) -> None:
    """Test that values are not coerced to int."""
    with pytest.raises(TypeError, match=rf"must be an int, got {type_name}"):
        DelayConfig.from_dict(data)


def test_delay_config_from_json_rejects_float() -> None:
    with pytest.raises(TypeError, match=r"DelayConfig factor must be an int, got float"):
        DelayConfig.from_json('{"max": 10, "factor": 2.5}')
