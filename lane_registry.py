# -*- coding: utf-8 -*-
########################
# lane_registry.py
########################
# Purpose:
# - Name to x position table for the lanes of the active level.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Registration order is kept; lanes render in the order the level file declares them.
# - The Special lane is hidden at level 1 but still resolvable, so Special notes keep a position.
#
########################
# Interfaces:
# Public exceptions:
# - class LaneNotFoundError(LookupError)
#
# Public classes:
# - class LaneRegistry
#   - set_position(name: str, x: int) -> None
#   - get_position(name: str) -> int   (raises LaneNotFoundError)
#   - has_lane(name: str) -> bool
#   - lane_names() -> list[str]
#   - visible_lanes(level: int) -> list[tuple[str, int]]
#
########################

from __future__ import annotations

from typing import Dict, List, Tuple

import game_models


class LaneNotFoundError(LookupError):
    """Raised when a lane is queried that was never registered."""

    def __init__(self, lane_name: str) -> None:
        super().__init__(f"Lane not registered: {lane_name!r}")
        self.lane_name = lane_name


class LaneRegistry:
    def __init__(self) -> None:
        self._positions: Dict[str, int] = {}

    def set_position(self, name: str, x: int) -> None:
        self._positions[str(name)] = int(x)

    def get_position(self, name: str) -> int:
        try:
            return self._positions[str(name)]
        except KeyError:
            raise LaneNotFoundError(str(name)) from None

    def has_lane(self, name: str) -> bool:
        return str(name) in self._positions

    def lane_names(self) -> List[str]:
        return list(self._positions.keys())

    def visible_lanes(self, level: int) -> List[Tuple[str, int]]:
        visible: List[Tuple[str, int]] = []
        for name, x in self._positions.items():
            if int(level) == 1 and name == game_models.SPECIAL_LANE:
                continue
            visible.append((name, x))
        return visible

    def __len__(self) -> int:
        return len(self._positions)
