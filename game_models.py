# -*- coding: utf-8 -*-
########################
# game_models.py
########################
# Purpose:
# - Core gameplay value types shared by every gameplay module.
# - Defines game states, logical input actions, the per-frame input snapshot, and note kinds.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No Qt usage. These are plain enums and dataclasses.
# - InputSnapshot is immutable. Every entity in a frame reads the same snapshot.
#
########################
# Interfaces:
# Public enums:
# - GameState: START | PLAY | WIN | LOSE
# - Action: LEFT | DOWN | UP | RIGHT | SPECIAL | SELECT_LEVEL_1..3 | CONFIRM | QUIT | FIRE
# - NoteKind: NORMAL | HOLD | BOMB | SPECIAL
#
# Public dataclasses:
# - InputSnapshot(pressed: frozenset[Action], released: frozenset[Action], held: frozenset[Action])
#
# Public constants:
# - SPECIAL_LANE, LANE_ACTIONS, LEVEL_SELECT_ACTIONS
# - SPECIAL_SPEED_UP, SPECIAL_SLOW_DOWN, SPECIAL_DOUBLE_SCORE, DOUBLE_SCORE_FILE_ALIAS
#
# Public functions:
# - lane_action(lane_name: str) -> Optional[Action]
#
# Inputs/Outputs:
# - These types are exchanged between InputRouter, GameStateMachine, NoteTimeline, note_behaviors and combat.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
import enum
from typing import Dict, FrozenSet, Iterable, Optional


class GameState(enum.Enum):
    START = "start"
    PLAY = "play"
    WIN = "win"
    LOSE = "lose"


class Action(enum.Enum):
    LEFT = "left"
    DOWN = "down"
    UP = "up"
    RIGHT = "right"
    SPECIAL = "special"
    SELECT_LEVEL_1 = "select_level_1"
    SELECT_LEVEL_2 = "select_level_2"
    SELECT_LEVEL_3 = "select_level_3"
    CONFIRM = "confirm"
    QUIT = "quit"
    FIRE = "fire"


class NoteKind(enum.Enum):
    NORMAL = "Normal"
    HOLD = "Hold"
    BOMB = "Bomb"
    SPECIAL = "Special"


SPECIAL_LANE = "Special"

# Special subtypes are kept as the literal strings read from the level file.
SPECIAL_SPEED_UP = "SpeedUp"
SPECIAL_SLOW_DOWN = "SlowDown"
SPECIAL_DOUBLE_SCORE = "2x"
DOUBLE_SCORE_FILE_ALIAS = "DoubleScore"
KNOWN_SPECIAL_SUBTYPES = frozenset({SPECIAL_SPEED_UP, SPECIAL_SLOW_DOWN, SPECIAL_DOUBLE_SCORE})

LANE_ACTIONS: Dict[str, Action] = {
    "Left": Action.LEFT,
    "Down": Action.DOWN,
    "Up": Action.UP,
    "Right": Action.RIGHT,
    SPECIAL_LANE: Action.SPECIAL,
}

LEVEL_SELECT_ACTIONS: Dict[int, Action] = {
    1: Action.SELECT_LEVEL_1,
    2: Action.SELECT_LEVEL_2,
    3: Action.SELECT_LEVEL_3,
}


def lane_action(lane_name: str) -> Optional[Action]:
    """Action bound to a lane, or None for lanes that cannot be played."""
    return LANE_ACTIONS.get(str(lane_name))


@dataclass(frozen=True)
class InputSnapshot:
    pressed: FrozenSet[Action] = field(default_factory=frozenset)
    released: FrozenSet[Action] = field(default_factory=frozenset)
    held: FrozenSet[Action] = field(default_factory=frozenset)

    @classmethod
    def empty(cls) -> "InputSnapshot":
        return cls()

    @classmethod
    def of(
        cls,
        *,
        pressed: Iterable[Action] = (),
        released: Iterable[Action] = (),
        held: Iterable[Action] = (),
    ) -> "InputSnapshot":
        return cls(pressed=frozenset(pressed), released=frozenset(released), held=frozenset(held))

    def was_pressed(self, action: Optional[Action]) -> bool:
        return action is not None and action in self.pressed

    def was_released(self, action: Optional[Action]) -> bool:
        return action is not None and action in self.released

    def is_held(self, action: Optional[Action]) -> bool:
        return action is not None and action in self.held

    def selected_level(self) -> Optional[int]:
        # Lowest level wins when several number keys land in the same frame.
        for level, action in sorted(LEVEL_SELECT_ACTIONS.items()):
            if action in self.pressed:
                return level
        return None


def _run_unit_tests() -> None:
    snapshot = InputSnapshot.of(pressed=[Action.DOWN, Action.SELECT_LEVEL_3, Action.SELECT_LEVEL_2])
    assert snapshot.was_pressed(Action.DOWN)
    assert not snapshot.was_released(Action.DOWN)
    assert snapshot.selected_level() == 2
    assert not snapshot.was_pressed(lane_action("Middle"))
    assert lane_action("Special") is Action.SPECIAL
    assert InputSnapshot.empty().selected_level() is None


if __name__ == "__main__":
    _run_unit_tests()
    print("game_models.py: ok")
