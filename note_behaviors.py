# -*- coding: utf-8 -*-
########################
# note_behaviors.py
########################
# Purpose:
# - Per-kind interaction rules for notes.
# - One interact() entry point dispatches on Note.kind to the Normal, Hold, Bomb and Special rules.
#
########################
# Key Logic:
# - Normal:
#   - lane key press grades the distance from the note to (laneX, 657) and marks it scored
#   - unscored notes are force graded with distance 300 on their last frame before scrolling off the bottom
#   - stolen notes (alive == False) draw nothing and never grade
# - Hold:
#   - lane key press samples the distance with the note shifted down 82 px
#   - lane key release samples with the note shifted up 82 px, grades |press - release|, marks scored
#   - unscored notes are force graded on their last on-screen frame with distance 300 but stay unscored
# - Bomb:
#   - Special key press within 50 px of its lane target clears every eligible note in that lane
#   - no score change, hidden once active
# - Special:
#   - invisible and inert at level 1
#   - Special key press within 50 px of the Special lane target applies SpeedUp, SlowDown or 2x
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Graded notes produce no further grading side effects.
#
########################
# Interfaces:
# Public constants:
# - TARGET_Y, HOLD_SAMPLE_OFFSET, ACTIVATION_DISTANCE, SPECIAL_BONUS_POINTS
#
# Public functions:
# - interact(note: Note, session: GameSession, snapshot: InputSnapshot, canvas: FrameCanvas) -> None
#
########################

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

import game_models
from geometry import distance
from render_commands import FrameCanvas
from scoring import FORCED_MISS_DISTANCE

if TYPE_CHECKING:
    from game_session import GameSession
    from note_timeline import Note

TARGET_Y = 657
HOLD_SAMPLE_OFFSET = 82
ACTIVATION_DISTANCE = 50
SPECIAL_BONUS_POINTS = 15


def _distance_to_target(session: "GameSession", lane: str, x: float, y: float) -> float:
    return distance(x, y, session.lanes.get_position(lane), TARGET_Y)


def _leaves_screen_this_frame(note: "Note", session: "GameSession") -> bool:
    return note.y + session.scroll_speed > session.window_height


def _interact_normal(note: "Note", session: "GameSession", snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
    if not note.alive:
        return
    canvas.draw_sprite(note.sprite_id(), note.x, note.y)

    if not note.scored and snapshot.was_pressed(game_models.lane_action(note.lane)):
        session.scoring.apply_grade(session, _distance_to_target(session, note.lane, note.x, note.y), lane=note.lane)
        note.scored = True

    if not note.scored and _leaves_screen_this_frame(note, session):
        session.scoring.apply_grade(session, FORCED_MISS_DISTANCE, lane=note.lane)
        note.scored = True


def _interact_hold(note: "Note", session: "GameSession", snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
    canvas.draw_sprite(note.sprite_id(), note.x, note.y)
    if note.scored:
        return

    action = game_models.lane_action(note.lane)
    if snapshot.was_pressed(action):
        note.pressed_distance = _distance_to_target(session, note.lane, note.x, note.y + HOLD_SAMPLE_OFFSET)

    if snapshot.was_released(action):
        note.released_distance = _distance_to_target(session, note.lane, note.x, note.y - HOLD_SAMPLE_OFFSET)
        session.scoring.apply_grade(session, abs(note.pressed_distance - note.released_distance), lane=note.lane)
        note.pressed_distance = 0.0
        note.released_distance = 0.0
        note.scored = True
        return

    # Leaves scored unset, so a late release can still grade this note a second time.
    if _leaves_screen_this_frame(note, session):
        session.scoring.apply_grade(session, FORCED_MISS_DISTANCE, lane=note.lane)


def _interact_bomb(note: "Note", session: "GameSession", snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
    if note.active:
        return
    canvas.draw_sprite(note.sprite_id(), note.x, note.y)

    if not snapshot.was_pressed(game_models.Action.SPECIAL):
        return
    if _distance_to_target(session, note.lane, note.x, note.y) > ACTIVATION_DISTANCE:
        return

    note.active = True
    session.timeline.clear_lane(note.lane, session.frame_count, session.window_height)
    session.scoring.set_message("LANE CLEAR")


def _speed_up(session: "GameSession") -> None:
    session.scoring.set_message("SPEED UP")
    session.scoring.add_points(SPECIAL_BONUS_POINTS)
    session.scroll_speed += 1


def _slow_down(session: "GameSession") -> None:
    session.scoring.set_message("SLOW DOWN")
    session.scoring.add_points(SPECIAL_BONUS_POINTS)
    session.scroll_speed -= 1


def _double_score(session: "GameSession") -> None:
    session.scoring.set_message("DOUBLE SCORE")
    session.scoring.set_multiplier(2)


_SPECIAL_EFFECTS: Dict[str, Callable[["GameSession"], None]] = {
    game_models.SPECIAL_SPEED_UP: _speed_up,
    game_models.SPECIAL_SLOW_DOWN: _slow_down,
    game_models.SPECIAL_DOUBLE_SCORE: _double_score,
}


def _interact_special(note: "Note", session: "GameSession", snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
    if note.active or session.level == 1:
        return
    canvas.draw_sprite(note.sprite_id(), note.x, note.y)

    if not snapshot.was_pressed(game_models.Action.SPECIAL):
        return
    if _distance_to_target(session, game_models.SPECIAL_LANE, note.x, note.y) > ACTIVATION_DISTANCE:
        return

    note.active = True
    effect = _SPECIAL_EFFECTS.get(note.subtype)
    if effect is not None:
        effect(session)


_INTERACTIONS = {
    game_models.NoteKind.NORMAL: _interact_normal,
    game_models.NoteKind.HOLD: _interact_hold,
    game_models.NoteKind.BOMB: _interact_bomb,
    game_models.NoteKind.SPECIAL: _interact_special,
}


def interact(note: "Note", session: "GameSession", snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
    _INTERACTIONS[note.kind](note, session, snapshot, canvas)
