# -*- coding: utf-8 -*-
########################
# scoring.py
########################
# Purpose:
# - Distance based grading and scoring engine.
# - Converts a timing distance (pixels from the target line) into a score delta and a message.
# - Owns cumulative points, the temporary multiplier, the transient message, and the win trigger.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - ScoreState is mutated only through ScoringEngine.
# - The win threshold is checked on every grading event and nowhere else.
# - Timers count down in frames. tick() runs once per gameplay frame.
#
########################
# Interfaces:
# Public dataclasses:
# - Grade(delta: int, message: str)
# - ScoreState(points, multiplier, multiplier_frames_remaining, message, message_frames_remaining)
# - GradeEvent(distance: float, delta: int, message: str, multiplier: int, points_after: int, lane: str)
#
# Public functions:
# - grade(distance: float) -> Grade
# - win_threshold(level: int) -> int
#
# Public classes:
# - class ScoringEngine
#   - score_state() -> ScoreState
#   - apply_grade(session, distance: float, *, lane: str = "") -> GradeEvent
#   - add_points(points: int) -> None
#   - set_message(message: str) -> None
#   - set_multiplier(multiplier: int) -> None
#   - tick() -> None
#   - recent_grades() -> list[GradeEvent]
#   - clear_recent_grades() -> None
#
# Inputs:
# - Distances from note_behaviors, the active level and state via the GameSession.
#
# Outputs:
# - GradeEvent records for the frame result, and the PLAY -> WIN transition.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Dict, List

import game_models

if TYPE_CHECKING:
    from game_session import GameSession

logger = logging.getLogger(__name__)

MESSAGE_LIFETIME_FRAMES = 30
MULTIPLIER_LIFETIME_FRAMES = 480
FORCED_MISS_DISTANCE = 300.0

WIN_THRESHOLDS: Dict[int, int] = {
    1: 150,
    2: 400,
    3: 350,
}


@dataclass(frozen=True)
class Grade:
    delta: int
    message: str


def grade(distance: float) -> Grade:
    value = float(distance)
    if value <= 0:
        return Grade(0, "")
    if value <= 15:
        return Grade(10, "PERFECT")
    if value <= 50:
        return Grade(5, "GOOD")
    if value <= 100:
        return Grade(-1, "BAD")
    return Grade(-5, "MISS")


def win_threshold(level: int) -> int:
    return WIN_THRESHOLDS[int(level)]


@dataclass
class ScoreState:
    points: int = 0
    multiplier: int = 1
    multiplier_frames_remaining: int = 0
    message: str = ""
    message_frames_remaining: int = 0


@dataclass(frozen=True)
class GradeEvent:
    distance: float
    delta: int
    message: str
    multiplier: int
    points_after: int
    lane: str = ""


class ScoringEngine:
    def __init__(self) -> None:
        self._score_state = ScoreState()
        self._recent_grades: List[GradeEvent] = []

    def score_state(self) -> ScoreState:
        return self._score_state

    @property
    def points(self) -> int:
        return self._score_state.points

    @property
    def multiplier(self) -> int:
        return self._score_state.multiplier

    @property
    def message(self) -> str:
        return self._score_state.message

    def recent_grades(self) -> List[GradeEvent]:
        return list(self._recent_grades)

    def clear_recent_grades(self) -> None:
        self._recent_grades.clear()

    def apply_grade(self, session: "GameSession", distance: float, *, lane: str = "") -> GradeEvent:
        result = grade(distance)
        state = self._score_state
        state.points += result.delta * state.multiplier
        self.set_message(result.message)

        event = GradeEvent(
            distance=float(distance),
            delta=result.delta,
            message=result.message,
            multiplier=state.multiplier,
            points_after=state.points,
            lane=str(lane),
        )
        self._recent_grades.append(event)

        if state.points >= win_threshold(session.level) and session.state is not game_models.GameState.WIN:
            logger.info("Level %d cleared with %d points", session.level, state.points)
            session.state = game_models.GameState.WIN
        return event

    def add_points(self, points: int) -> None:
        # Bonus points skip the multiplier and the win check.
        self._score_state.points += int(points)

    def set_message(self, message: str) -> None:
        self._score_state.message = str(message)
        self._score_state.message_frames_remaining = MESSAGE_LIFETIME_FRAMES

    def set_multiplier(self, multiplier: int) -> None:
        self._score_state.multiplier = int(multiplier)
        self._score_state.multiplier_frames_remaining = MULTIPLIER_LIFETIME_FRAMES

    def tick(self) -> None:
        state = self._score_state
        if state.message_frames_remaining > 0:
            state.message_frames_remaining -= 1
            if state.message_frames_remaining == 0:
                state.message = ""
        if state.multiplier_frames_remaining > 0:
            state.multiplier_frames_remaining -= 1
            if state.multiplier_frames_remaining == 0:
                state.multiplier = 1


def _run_unit_tests() -> None:
    assert grade(0) == Grade(0, "")
    assert grade(15) == Grade(10, "PERFECT")
    assert grade(15.01) == Grade(5, "GOOD")
    assert grade(50) == Grade(5, "GOOD")
    assert grade(100) == Grade(-1, "BAD")
    assert grade(100.5) == Grade(-5, "MISS")

    engine = ScoringEngine()
    engine.set_multiplier(2)
    for _ in range(MULTIPLIER_LIFETIME_FRAMES - 1):
        engine.tick()
    assert engine.multiplier == 2
    engine.tick()
    assert engine.multiplier == 1


if __name__ == "__main__":
    _run_unit_tests()
    print("scoring.py: ok")
