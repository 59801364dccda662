from __future__ import annotations

import pytest

from game_models import GameState
from scoring import (
    FORCED_MISS_DISTANCE,
    MESSAGE_LIFETIME_FRAMES,
    MULTIPLIER_LIFETIME_FRAMES,
    Grade,
    ScoringEngine,
    grade,
    win_threshold,
)


@pytest.mark.parametrize(
    "distance, expected",
    [
        (-3.0, Grade(0, "")),
        (0.0, Grade(0, "")),
        (0.5, Grade(10, "PERFECT")),
        (15.0, Grade(10, "PERFECT")),
        (15.001, Grade(5, "GOOD")),
        (50.0, Grade(5, "GOOD")),
        (50.5, Grade(-1, "BAD")),
        (100.0, Grade(-1, "BAD")),
        (100.01, Grade(-5, "MISS")),
        (FORCED_MISS_DISTANCE, Grade(-5, "MISS")),
    ],
)
def test_grade_table_boundaries(distance, expected):
    assert grade(distance) == expected


def test_win_thresholds_per_level():
    assert [win_threshold(level) for level in (1, 2, 3)] == [150, 400, 350]


def test_apply_grade_adds_delta_times_multiplier(make_session):
    session = make_session()
    scoring = session.scoring
    scoring.set_multiplier(2)

    event = scoring.apply_grade(session, 10.0, lane="Down")

    assert scoring.points == 20
    assert scoring.multiplier == 2
    assert scoring.message == "PERFECT"
    assert (event.delta, event.multiplier, event.points_after, event.lane) == (10, 2, 20, "Down")
    assert scoring.recent_grades() == [event]


def test_negative_grades_can_take_points_below_zero(make_session):
    session = make_session()
    session.scoring.apply_grade(session, FORCED_MISS_DISTANCE)
    assert session.scoring.points == -5
    assert session.scoring.message == "MISS"


def test_message_clears_after_exactly_thirty_ticks():
    engine = ScoringEngine()
    engine.set_message("GOOD")
    for _ in range(MESSAGE_LIFETIME_FRAMES - 1):
        engine.tick()
    assert engine.message == "GOOD"
    engine.tick()
    assert engine.message == ""


def test_new_message_restarts_its_timer():
    engine = ScoringEngine()
    engine.set_message("GOOD")
    for _ in range(20):
        engine.tick()
    engine.set_message("BAD")
    for _ in range(MESSAGE_LIFETIME_FRAMES - 1):
        engine.tick()
    assert engine.message == "BAD"


def test_multiplier_reverts_after_exactly_480_ticks():
    engine = ScoringEngine()
    engine.set_multiplier(2)
    for _ in range(MULTIPLIER_LIFETIME_FRAMES - 1):
        engine.tick()
    assert engine.multiplier == 2
    engine.tick()
    assert engine.multiplier == 1
    assert engine.score_state().multiplier_frames_remaining == 0


def test_win_only_on_grading_event(make_session):
    session = make_session()
    scoring = session.scoring

    # Bonus points never check the threshold.
    scoring.add_points(155)
    assert session.state is GameState.PLAY

    scoring.apply_grade(session, 80.0)
    assert scoring.points == 154
    assert session.state is GameState.WIN


def test_win_threshold_follows_active_level(make_session):
    session = make_session(level=2)
    session.scoring.add_points(390)
    session.scoring.apply_grade(session, 5.0)
    assert session.scoring.points == 400
    assert session.state is GameState.WIN


def test_recent_grades_drain():
    engine = ScoringEngine()
    engine.clear_recent_grades()
    assert engine.recent_grades() == []
