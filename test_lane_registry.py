from __future__ import annotations

import math

import pytest

from geometry import distance, heading, is_outside, step_along
from lane_registry import LaneNotFoundError, LaneRegistry


def _registry() -> LaneRegistry:
    registry = LaneRegistry()
    for name, x in (("Left", 364), ("Down", 514), ("Special", 964)):
        registry.set_position(name, x)
    return registry


def test_get_position_after_set():
    registry = _registry()
    assert registry.get_position("Down") == 514
    registry.set_position("Down", 500)
    assert registry.get_position("Down") == 500
    assert len(registry) == 3


def test_unknown_lane_raises_not_found():
    with pytest.raises(LaneNotFoundError) as info:
        LaneRegistry().get_position("Down")
    assert info.value.lane_name == "Down"
    assert isinstance(info.value, LookupError)


def test_special_lane_hidden_on_level_one_only():
    registry = _registry()
    assert [name for name, _x in registry.visible_lanes(1)] == ["Left", "Down"]
    assert [name for name, _x in registry.visible_lanes(2)] == ["Left", "Down", "Special"]
    assert registry.has_lane("Special")


def test_distance_and_heading():
    assert distance(0, 0, 3, 4) == 5.0
    assert heading(800, 600, 800, 700) == pytest.approx(math.pi / 2)
    x, y = step_along(800.0, 600.0, math.pi, 6.0)
    assert (x, y) == (pytest.approx(794.0), pytest.approx(600.0))


@pytest.mark.parametrize(
    "x, y, outside",
    [
        (0, 0, False),
        (1023, 767, False),
        (-0.1, 10, True),
        (1023.5, 10, True),
        (10, 768, True),
    ],
)
def test_is_outside_window(x, y, outside):
    assert is_outside(x, y, 1024, 768) is outside
