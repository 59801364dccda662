# -*- coding: utf-8 -*-
########################
# note_timeline.py
########################
# Purpose:
# - Own the ordered collection of scheduled notes for the active level.
# - Each frame, let every eligible note interact with the input snapshot, then scroll it down.
# - Detect the LOSE condition.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Note order is level file order and is never sorted.
# - Notes are never removed. Eligibility is re-checked at the top of every iteration, so flags set
#   mid-pass (a Bomb clearing its lane) take effect for the remaining notes of the same pass.
# - Scroll speed belongs to the session, not to the notes.
# - LOSE follows the last registered note only. A level whose last row arrives early ends early.
#
########################
# Interfaces:
# Public constants:
# - NOTE_START_Y (per NoteKind)
#
# Public dataclasses:
# - Note(kind, spawn_frame, lane, x, y, cleared, alive, scored, pressed_distance, released_distance, active, subtype)
#   - is_eligible(frame_count: int, window_height: int) -> bool
#   - is_graded() -> bool
#   - sprite_id() -> str
#
# Public classes:
# - class NoteTimeline
#   - from_chart(chart: LevelChart, lanes: LaneRegistry) -> NoteTimeline
#   - notes() -> list[Note]
#   - eligible_notes(frame_count: int, window_height: int) -> list[Note]
#   - clear_lane(lane: str, frame_count: int, window_height: int) -> int
#   - last_note_passed(window_height: int) -> bool
#   - advance(session, snapshot, canvas) -> None
#
# Inputs:
# - LevelChart and LaneRegistry at level start; GameSession and InputSnapshot every frame.
#
# Outputs:
# - Note draw commands, grading side effects via note_behaviors, and the PLAY -> LOSE transition.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

import game_models
import note_behaviors
from lane_registry import LaneRegistry
from level_loader import LevelChart
from render_commands import FrameCanvas

if TYPE_CHECKING:
    from game_session import GameSession

logger = logging.getLogger(__name__)

NOTE_START_Y: Dict[game_models.NoteKind, int] = {
    game_models.NoteKind.NORMAL: 100,
    game_models.NoteKind.HOLD: 24,
    game_models.NoteKind.BOMB: 24,
    game_models.NoteKind.SPECIAL: 100,
}


@dataclass
class Note:
    kind: game_models.NoteKind
    spawn_frame: int
    lane: str
    x: int
    y: int
    cleared: bool = False
    # Normal only. False once an enemy stole the note.
    alive: bool = True
    # Normal and Hold.
    scored: bool = False
    # Hold only.
    pressed_distance: float = 0.0
    released_distance: float = 0.0
    # Bomb and Special.
    active: bool = False
    # Special only. Literal type string from the level file.
    subtype: str = ""

    @classmethod
    def create(cls, kind: game_models.NoteKind, *, spawn_frame: int, lane: str, x: int, subtype: str = "") -> "Note":
        return cls(
            kind=kind,
            spawn_frame=int(spawn_frame),
            lane=str(lane),
            x=int(x),
            y=NOTE_START_Y[kind],
            subtype=str(subtype),
        )

    def is_eligible(self, frame_count: int, window_height: int) -> bool:
        return int(frame_count) >= self.spawn_frame and self.y <= int(window_height) and not self.cleared

    def is_graded(self) -> bool:
        if self.kind in (game_models.NoteKind.BOMB, game_models.NoteKind.SPECIAL):
            return self.active
        return self.scored

    def sprite_id(self) -> str:
        if self.kind is game_models.NoteKind.HOLD:
            return "holdNote" + self.lane
        if self.kind is game_models.NoteKind.BOMB:
            return "noteBomb"
        if self.kind is game_models.NoteKind.SPECIAL:
            return "note" + self.subtype
        return "note" + self.lane


class NoteTimeline:
    def __init__(self, notes: Optional[Iterable[Note]] = None) -> None:
        self._notes: List[Note] = list(notes or [])

    @classmethod
    def from_chart(cls, chart: LevelChart, lanes: LaneRegistry) -> "NoteTimeline":
        notes = [
            Note.create(
                spec.kind,
                spawn_frame=spec.spawn_frame,
                lane=spec.lane,
                x=lanes.get_position(spec.lane),
                subtype=spec.subtype,
            )
            for spec in chart.notes
        ]
        return cls(notes)

    def notes(self) -> List[Note]:
        return list(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def eligible_notes(self, frame_count: int, window_height: int) -> List[Note]:
        return [note for note in self._notes if note.is_eligible(frame_count, window_height)]

    def clear_lane(self, lane: str, frame_count: int, window_height: int) -> int:
        cleared_count = 0
        for note in self._notes:
            if note.lane == lane and note.is_eligible(frame_count, window_height):
                note.cleared = True
                cleared_count += 1
        return cleared_count

    def last_note_passed(self, window_height: int) -> bool:
        if not self._notes:
            return False
        return self._notes[-1].y > int(window_height)

    def advance(self, session: "GameSession", snapshot: game_models.InputSnapshot, canvas: FrameCanvas) -> None:
        for note in self._notes:
            if not note.is_eligible(session.frame_count, session.window_height):
                continue
            note_behaviors.interact(note, session, snapshot, canvas)
            note.y += session.scroll_speed

        if session.state is game_models.GameState.PLAY and self.last_note_passed(session.window_height):
            logger.info("Last note left the screen at frame %d, level %d lost", session.frame_count, session.level)
            session.state = game_models.GameState.LOSE
