# -*- coding: utf-8 -*-
########################
# input_router.py
########################
# Purpose:
# - Single keyboard listener for the game.
# - Translates QKeyEvent into logical game_models.Action values and hands out one InputSnapshot per frame.
#
# Design notes:
# - This must be the only input source. No duplicate key mapping elsewhere.
# - Debounce rules:
#   - Ignore auto repeat.
#   - Track pressed keys to avoid duplicate presses.
# - Presses and releases accumulate between frames; take_snapshot() drains them.
#   A tap that starts and ends between two frames shows up as both pressed and released.
#
########################
# Interfaces:
# Public classes:
# - class InputRouter(PyQt6.QtCore.QObject)
#   - Signals:
#     - snapshotReady(game_models.InputSnapshot)
#   - Methods:
#     - handle_key_press(event: QKeyEvent) -> bool
#     - handle_key_release(event: QKeyEvent) -> bool
#     - press_key(key_code: int, auto_repeat: bool = False) -> bool
#     - release_key(key_code: int, auto_repeat: bool = False) -> bool
#     - take_snapshot() -> game_models.InputSnapshot
#     - clear_pressed_keys() -> None
#
# Inputs:
# - Raw QKeyEvent from the Qt event loop.
#
# Outputs:
# - InputSnapshot consumed by GameStateMachine.advance_frame.
#
########################

from __future__ import annotations

from typing import Dict, FrozenSet, Optional, Set

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QKeyEvent

from game_models import Action, InputSnapshot


def _build_default_key_map() -> Dict[int, FrozenSet[Action]]:
    """
    Default key bindings.

    Lanes:
      - Arrow keys: Left, Down, Up, Right
      - WASD keys: A, S, W, D
    Other:
      - Space: Special lane and confirm on the LOSE screen
      - Shift: guardian fire
      - 1, 2, 3: level select
      - Escape: quit
    """
    key_map: Dict[int, FrozenSet[Action]] = {}

    def bind(key_constant: Qt.Key, *actions: Action) -> None:
        key_map[int(key_constant)] = frozenset(actions)

    # Arrow keys
    bind(Qt.Key.Key_Left, Action.LEFT)
    bind(Qt.Key.Key_Down, Action.DOWN)
    bind(Qt.Key.Key_Up, Action.UP)
    bind(Qt.Key.Key_Right, Action.RIGHT)

    # WASD
    bind(Qt.Key.Key_A, Action.LEFT)
    bind(Qt.Key.Key_S, Action.DOWN)
    bind(Qt.Key.Key_W, Action.UP)
    bind(Qt.Key.Key_D, Action.RIGHT)

    bind(Qt.Key.Key_Space, Action.SPECIAL, Action.CONFIRM)
    bind(Qt.Key.Key_Shift, Action.FIRE)
    bind(Qt.Key.Key_Escape, Action.QUIT)

    bind(Qt.Key.Key_1, Action.SELECT_LEVEL_1)
    bind(Qt.Key.Key_2, Action.SELECT_LEVEL_2)
    bind(Qt.Key.Key_3, Action.SELECT_LEVEL_3)

    return key_map


class InputRouter(QObject):
    """
    Central keyboard router.

    This object never touches game state. Its only job is to:
      - map keys to actions
      - collect the presses and releases seen since the last frame
      - hand them out as one immutable InputSnapshot per frame
    """

    snapshotReady = pyqtSignal(object)

    def __init__(
        self,
        parent: Optional[QObject] = None,
        key_map: Optional[Dict[int, FrozenSet[Action]]] = None,
    ) -> None:
        super().__init__(parent)

        self._key_map: Dict[int, FrozenSet[Action]] = (
            dict(key_map) if key_map is not None else _build_default_key_map()
        )

        # Press tracking for debounce and focus loss handling.
        self._pressed_keys: Set[int] = set()

        self._pending_pressed: Set[Action] = set()
        self._pending_released: Set[Action] = set()

        self._total_presses: int = 0
        self._ignored_presses: int = 0

    # ------------------------------------------------------------------
    # Qt event entry points used by game_window
    # ------------------------------------------------------------------

    def handle_key_press(self, event: QKeyEvent) -> bool:
        """Returns True if this router consumed the event, False otherwise."""
        return self.press_key(int(event.key()), auto_repeat=event.isAutoRepeat())

    def handle_key_release(self, event: QKeyEvent) -> bool:
        """Returns True if this router consumed the event, False otherwise."""
        return self.release_key(int(event.key()), auto_repeat=event.isAutoRepeat())

    # ------------------------------------------------------------------
    # Key code level API
    # ------------------------------------------------------------------

    def press_key(self, key_code: int, auto_repeat: bool = False) -> bool:
        key_code = int(key_code)
        actions = self._key_map.get(key_code)

        # Ignore auto repeat so holding a key does not spam presses.
        if auto_repeat:
            if actions is not None:
                self._ignored_presses += 1
                return True
            return False

        # Ignore second press while still held.
        if key_code in self._pressed_keys:
            if actions is not None:
                self._ignored_presses += 1
                return True
            return False

        self._pressed_keys.add(key_code)

        if actions is None:
            return False

        self._total_presses += 1
        self._pending_pressed.update(actions)
        return True

    def release_key(self, key_code: int, auto_repeat: bool = False) -> bool:
        key_code = int(key_code)
        actions = self._key_map.get(key_code)

        if auto_repeat:
            return actions is not None

        was_down = key_code in self._pressed_keys
        self._pressed_keys.discard(key_code)

        if actions is None:
            return False

        if was_down:
            # Another key bound to the same action keeps it held.
            still_held = self._held_actions()
            self._pending_released.update(action for action in actions if action not in still_held)
        return True

    def take_snapshot(self) -> InputSnapshot:
        """Drain the presses and releases collected since the previous frame."""
        snapshot = InputSnapshot(
            pressed=frozenset(self._pending_pressed),
            released=frozenset(self._pending_released),
            held=self._held_actions(),
        )
        self._pending_pressed.clear()
        self._pending_released.clear()
        self.snapshotReady.emit(snapshot)
        return snapshot

    def clear_pressed_keys(self) -> None:
        """
        Clear pressed state for all keys.

        Called by the window on focus loss or deactivation. Held actions are reported
        as released on the next frame so Hold notes can still grade.
        """
        self._pending_released.update(self._held_actions())
        self._pressed_keys.clear()

    def _held_actions(self) -> FrozenSet[Action]:
        held: Set[Action] = set()
        for key_code in self._pressed_keys:
            held.update(self._key_map.get(key_code, frozenset()))
        return frozenset(held)

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------

    @property
    def key_map(self) -> Dict[int, FrozenSet[Action]]:
        return dict(self._key_map)

    @property
    def total_presses(self) -> int:
        return self._total_presses

    @property
    def ignored_presses(self) -> int:
        return self._ignored_presses


def _run_unit_tests() -> None:
    router = InputRouter()

    assert router.key_map[int(Qt.Key.Key_A)] == frozenset({Action.LEFT})
    assert router.key_map[int(Qt.Key.Key_Space)] == frozenset({Action.SPECIAL, Action.CONFIRM})

    assert router.press_key(int(Qt.Key.Key_Down))
    assert router.press_key(int(Qt.Key.Key_Down), auto_repeat=True)
    snapshot = router.take_snapshot()
    assert snapshot.was_pressed(Action.DOWN)
    assert snapshot.is_held(Action.DOWN)

    router.release_key(int(Qt.Key.Key_Down))
    snapshot = router.take_snapshot()
    assert not snapshot.was_pressed(Action.DOWN)
    assert snapshot.was_released(Action.DOWN)
    assert router.ignored_presses == 1


if __name__ == "__main__":
    _run_unit_tests()
    print("input_router.py: ok")
