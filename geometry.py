# -*- coding: utf-8 -*-
########################
# geometry.py
########################
# Purpose:
# - Small planar helpers shared by notes, enemies, the guardian and arrows.
#
# Design notes:
# - No Qt usage. Plain floats, so results are deterministic across hosts.
#
########################
# Interfaces:
# Public functions:
# - distance(x1, y1, x2, y2) -> float
# - heading(from_x, from_y, to_x, to_y) -> float  (radians, atan2 convention, y grows downward)
# - step_along(x, y, rotation, speed) -> tuple[float, float]
# - is_outside(x, y, width, height) -> bool
#
########################

from __future__ import annotations

import math
from typing import Tuple


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(float(x1) - float(x2), float(y1) - float(y2))


def heading(from_x: float, from_y: float, to_x: float, to_y: float) -> float:
    return math.atan2(float(to_y) - float(from_y), float(to_x) - float(from_x))


def step_along(x: float, y: float, rotation: float, speed: float) -> Tuple[float, float]:
    return (
        float(x) + float(speed) * math.cos(rotation),
        float(y) + float(speed) * math.sin(rotation),
    )


def is_outside(x: float, y: float, width: int, height: int) -> bool:
    # Visible pixels run from 0 to size - 1 inclusive.
    return x < 0 or x > width - 1 or y < 0 or y > height - 1
